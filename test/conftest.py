import json

import httpx
import pytest

from microskill.config import Settings
from microskill.models import ProviderResult

API_KEYS = {
    "openai_api_key": "sk-test",
    "hf_api_key": "hf-test",
    "gemini_api_key": "gm-test",
}


class FakeProvider:
    def __init__(self, response_text: str):
        self._response_text = response_text
        self.requests = []

    def generate(self, request) -> ProviderResult:
        self.requests.append(request)
        return ProviderResult(raw_response_text=self._response_text, assistant_text=self._response_text)


class ScriptedUpstream:
    """httpx transport handler replaying (status, body) pairs in order."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"unexpected upstream call: {request.method} {request.url}")
        status, body = self._responses.pop(0)
        if not isinstance(body, str):
            body = json.dumps(body)
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def sent_json(self, i: int = 0) -> dict:
        return json.loads(self.requests[i].content)


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


@pytest.fixture
def settings():
    return Settings(**API_KEYS)


@pytest.fixture
def upstream_factory():
    def _make(*responses):
        return ScriptedUpstream(responses)
    return _make


@pytest.fixture
def sleeps():
    recorded = []
    return recorded
