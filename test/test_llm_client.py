import time

import pytest

from llm.llm_client import LLMClient
from llm.prompts import SYSTEM_PROMPT
from microskill.config import Settings
from microskill.errors import ConfigError, ContentError, TransportError
from microskill.models import Failure, Parsed, PlainText, ProviderName

LESSONS_JSON = '{"micro_lessons": [], "profile_short": "a", "profile_long": "b", "cover_message": "c"}'


def _client_with(fake, settings=None, name=ProviderName.OPENAI):
    return LLMClient(settings or Settings(), providers={name: fake})


def test_generate_for_provider_parses_json(fake_provider_factory):
    fake = fake_provider_factory(LESSONS_JSON)
    client = _client_with(fake)

    result = client.generate_for_provider("openai", "Smoke test")

    assert result.parsed["profile_short"] == "a"
    assert result.raw == LESSONS_JSON
    assert result.assistant_text == LESSONS_JSON
    request = fake.requests[0]
    assert request.system_prompt == SYSTEM_PROMPT
    assert request.user_prompt == "Smoke test"
    assert request.temperature == 0.25
    assert request.max_output_tokens == 7000


def test_fences_are_stripped_before_parsing(fake_provider_factory):
    client = _client_with(fake_provider_factory(f"```json\n{LESSONS_JSON}\n```"))

    result = client.generate_for_provider("openai", "x")

    assert result.assistant_text == LESSONS_JSON
    assert result.parsed["cover_message"] == "c"


def test_provider_name_is_case_insensitive(fake_provider_factory):
    client = _client_with(fake_provider_factory('{"ok": true}'), name=ProviderName.GEMINI)

    assert client.generate_for_provider("  Gemini ", "x").parsed == {"ok": True}


def test_default_provider_used_when_omitted(fake_provider_factory):
    fake = fake_provider_factory('{"ok": true}')
    client = _client_with(fake, Settings(default_provider="huggingface"), name=ProviderName.HUGGINGFACE)

    client.generate_for_provider(None, "x")

    assert fake.requests[0].provider is ProviderName.HUGGINGFACE


def test_max_output_tokens_from_extra(fake_provider_factory):
    fake = fake_provider_factory('{"ok": true}')
    client = _client_with(fake)

    client.generate_for_provider("openai", "x", {"max_output_tokens": 123})

    assert fake.requests[0].max_output_tokens == 123


def test_unsupported_provider(fake_provider_factory):
    client = _client_with(fake_provider_factory("{}"))

    with pytest.raises(ConfigError) as exc:
        client.generate_for_provider("claude", "x")

    assert exc.value.code == "UNSUPPORTED_PROVIDER"
    assert exc.value.source == "wrapper"


@pytest.mark.parametrize("prompt", ["", None, 123])
def test_missing_user_prompt(fake_provider_factory, prompt):
    fake = fake_provider_factory("{}")
    client = _client_with(fake)

    with pytest.raises(ConfigError) as exc:
        client.generate_for_provider("openai", prompt)

    assert exc.value.code == "MISSING_USER_PROMPT"
    assert exc.value.source == "wrapper"
    assert fake.requests == []


def test_adapter_errors_pass_through_unchanged(settings, upstream_factory):
    upstream = upstream_factory((429, "rate limited"))
    client = LLMClient(settings, transport=upstream.transport)

    with pytest.raises(TransportError) as exc:
        client.generate_for_provider("openai", "x")

    assert exc.value.code == "PROVIDER_ERROR"
    assert exc.value.status == 429
    assert exc.value.details == "rate limited"


def test_missing_key_through_dispatcher_makes_no_call(upstream_factory):
    upstream = upstream_factory()
    client = LLMClient(Settings(), transport=upstream.transport)

    for name in ("openai", "huggingface", "gemini"):
        with pytest.raises(ConfigError) as exc:
            client.generate_for_provider(name, "x")
        assert exc.value.code == "MISSING_API_KEY"

    assert upstream.requests == []


def test_end_to_end_retry_through_dispatcher(settings, upstream_factory, sleeps):
    upstream = upstream_factory(
        (500, "err"),
        (500, "err"),
        (200, [{"generated_text": '```json\n{"ok": 1}\n```'}]),
    )
    client = LLMClient(settings, transport=upstream.transport, sleep=sleeps.append)

    result = client.generate_for_provider("huggingface", "x")

    assert result.parsed == {"ok": 1}
    assert sleeps == [0.5, 1.0]


# --- demo mode ------------------------------------------------------------


@pytest.mark.parametrize("provider", ["openai", "gemini", "not-a-provider", None])
def test_demo_mode_short_circuits(upstream_factory, provider):
    upstream = upstream_factory()
    client = LLMClient(Settings(demo_mode=True), transport=upstream.transport)

    start = time.perf_counter()
    result = client.generate_for_provider(provider, "anything")
    elapsed = time.perf_counter() - start

    assert set(result.parsed) == {"micro_lessons", "profile_short", "profile_long", "cover_message"}
    assert len(result.parsed["micro_lessons"]) == 5
    assert upstream.requests == []
    assert elapsed < 0.05


def test_demo_mode_returns_fresh_copies():
    client = LLMClient(Settings(demo_mode=True))

    first = client.generate_for_provider(None, "x").parsed
    first["micro_lessons"].clear()

    assert len(client.generate_for_provider(None, "x").parsed["micro_lessons"]) == 5


# --- plain text -----------------------------------------------------------


def test_plain_text_strips_fences_and_skips_parsing(fake_provider_factory):
    fake = fake_provider_factory("```\nJust a guide.\n```")
    client = _client_with(fake)

    result = client.generate_plain_text("openai", system_prompt="SYS", user_prompt="guide please")

    assert result.assistant_text == "Just a guide."
    assert result.raw_response_text == "```\nJust a guide.\n```"
    assert fake.requests[0].system_prompt == "SYS"


def test_plain_text_returns_empty_string(fake_provider_factory):
    client = _client_with(fake_provider_factory(""))

    assert client.generate_plain_text("openai", user_prompt="x").assistant_text == ""


def test_plain_text_demo_mode_makes_no_call(upstream_factory):
    upstream = upstream_factory()
    client = LLMClient(Settings(demo_mode=True), transport=upstream.transport)

    result = client.generate_plain_text("openai", user_prompt="x")

    assert result.assistant_text.startswith("### Reproduce quickly")
    assert upstream.requests == []


# --- normalized outcome ---------------------------------------------------


def test_generate_outcome_parsed(fake_provider_factory):
    client = _client_with(fake_provider_factory('{"a": 1}'))

    assert client.generate("openai", "x") == Parsed(value={"a": 1})


def test_generate_outcome_plain_text(fake_provider_factory):
    client = _client_with(fake_provider_factory("hello"))

    assert client.generate("openai", "x", plain_text=True) == PlainText(value="hello")


def test_generate_outcome_failure(fake_provider_factory):
    client = _client_with(fake_provider_factory("not json at all"))

    outcome = client.generate("openai", "x")

    assert isinstance(outcome, Failure)
    assert outcome.kind == "content"
    assert outcome.code == "PARSE_ERROR"
    assert outcome.provider == "openai"
    assert outcome.details == "not json at all"


def test_generate_outcome_failure_from_config(fake_provider_factory):
    client = _client_with(fake_provider_factory("{}"))

    outcome = client.generate("nope", "x")

    assert isinstance(outcome, Failure)
    assert outcome.kind == "config"
    assert outcome.code == "UNSUPPORTED_PROVIDER"


def test_content_error_is_a_generation_error(fake_provider_factory):
    client = _client_with(fake_provider_factory(""))

    with pytest.raises(ContentError):
        client.generate_for_provider("openai", "x")


def test_generate_outcome_failure_on_deeply_nested_output(fake_provider_factory):
    client = _client_with(fake_provider_factory("[" * 100000))

    outcome = client.generate("openai", "x")

    assert isinstance(outcome, Failure)
    assert outcome.code == "PARSE_ERROR"


def test_non_standard_json_constants_are_parse_errors(fake_provider_factory):
    client = _client_with(fake_provider_factory('{"score": NaN}'))

    with pytest.raises(ContentError) as exc:
        client.generate_for_provider("openai", "x")

    assert exc.value.code == "PARSE_ERROR"
