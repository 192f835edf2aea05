from __future__ import annotations

import json

import httpx

from microskill.errors import INVALID_RESPONSE, TransportError
from microskill.models import GenerationRequest, ProviderResult
from .base import LLMProvider


class OpenAIProvider(LLMProvider):
    name = "openai"
    label = "OpenAI"

    def generate(self, request: GenerationRequest) -> ProviderResult:
        api_key = self._require_key(self.settings.openai_api_key, "OPENAI_API_KEY")

        url = f"{self.settings.openai_base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.settings.openai_model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_output_tokens,
        }

        def send(client: httpx.Client, attempt: int) -> httpx.Response:
            return client.post(url, headers=headers, json=payload)

        r = self._send_with_retries(send)
        text = r.text
        try:
            data = json.loads(text)
        except ValueError:
            raise TransportError(
                INVALID_RESPONSE,
                "OpenAI returned non-JSON",
                provider=self.name,
                status=r.status_code,
                details=text,
            )

        return ProviderResult(raw_response_text=text, assistant_text=_first_choice_content(data))


def _first_choice_content(data) -> str:
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    return message.get("content") or ""
