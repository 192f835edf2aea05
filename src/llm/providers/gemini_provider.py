from __future__ import annotations

import json
import logging
from urllib.parse import quote

import httpx

from microskill.models import GenerationRequest, ProviderResult
from .base import LLMProvider

logger = logging.getLogger(__name__)

# Statuses on header auth that trigger one retry with ?key= auth.
AUTH_FALLBACK_STATUSES = {401, 403, 404}


class GeminiProvider(LLMProvider):
    name = "gemini"
    label = "Gemini"
    retries_enabled = True

    def generate(self, request: GenerationRequest) -> ProviderResult:
        api_key = self._require_key(self.settings.gemini_api_key, "GEMINI_API_KEY")

        model = quote(self.settings.gemini_model, safe="")
        url = f"{self.settings.gemini_base_url}/models/{model}:generateContent"
        payload = {
            "contents": [
                {"parts": [{"text": f"{request.system_prompt}\n\n{request.user_prompt}"}]}
            ],
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_output_tokens,
                "candidateCount": 1,
            },
        }

        def send(client: httpx.Client, attempt: int) -> httpx.Response:
            r = client.post(
                url,
                headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
                json=payload,
            )
            if r.status_code in AUTH_FALLBACK_STATUSES:
                logger.info("gemini header auth got %d on attempt %d, retrying with query key", r.status_code, attempt)
                r = client.post(
                    url,
                    params={"key": api_key},
                    headers={"Content-Type": "application/json"},
                    json=payload,
                )
            return r

        text = self._send_with_retries(send).text
        return ProviderResult(raw_response_text=text, assistant_text=_candidate_text(text))


def _candidate_text(body: str) -> str:
    try:
        data = json.loads(body)
    except ValueError:
        return body
    if not isinstance(data, dict):
        return body

    candidates = data.get("candidates")
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
        content = candidates[0].get("content")
        if isinstance(content, str):
            return content
        if isinstance(content, dict):
            parts = content.get("parts")
            if isinstance(parts, list) and parts:
                return "".join(p.get("text") or "" for p in parts if isinstance(p, dict))
            return ""

    if data.get("responseText"):
        return data["responseText"]
    return body
