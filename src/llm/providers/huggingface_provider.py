from __future__ import annotations

import json

import httpx

from microskill.models import GenerationRequest, ProviderResult
from .base import LLMProvider


class HuggingFaceProvider(LLMProvider):
    """Hosted inference API. Takes a single prompt string, not chat messages."""

    name = "huggingface"
    label = "HuggingFace"
    retries_enabled = True

    def generate(self, request: GenerationRequest) -> ProviderResult:
        api_key = self._require_key(self.settings.hf_api_key, "HUGGINGFACE_API_KEY")

        url = f"{self.settings.hf_base_url}/models/{self.settings.hf_model}"
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "inputs": f"{request.system_prompt}\n\n{request.user_prompt}",
            "parameters": {
                "max_new_tokens": request.max_output_tokens,
                "temperature": request.temperature,
            },
        }

        def send(client: httpx.Client, attempt: int) -> httpx.Response:
            return client.post(url, headers=headers, json=payload)

        text = self._send_with_retries(send).text
        return ProviderResult(raw_response_text=text, assistant_text=_generated_text(text))


def _generated_text(body: str) -> str:
    # Shape varies by model/task: list of generations, a single object, or
    # something else entirely, in which case the raw body is the answer.
    try:
        data = json.loads(body)
    except ValueError:
        return body

    if isinstance(data, list) and data and isinstance(data[0], dict) and data[0].get("generated_text"):
        return data[0]["generated_text"]
    if isinstance(data, dict) and data.get("generated_text"):
        return data["generated_text"]
    return body
