import pytest

from assistant_core.config.settings import Settings
from assistant_core.domain.exceptions import (
    ApiError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    ValidationError,
)
from assistant_core.domain.models import Failure
from assistant_core.providers import create_provider
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.registry import CompletionConfig


def test_create_provider_from_settings(monkeypatch):
    class DummySettings:
        gemini_api_key = "g" * 20
        gemini_base_url = "https://example.test/v1beta"
        gemini_model = "gemini-test"
        max_retries = 3
        backoff_base_ms = 500
        backoff_factor = 2.0
        backoff_jitter_ms = 0
        http_timeout = 5.0

    monkeypatch.setattr("assistant_core.providers.settings", DummySettings())
    provider = create_provider()
    assert isinstance(provider, GeminiClient)
    assert provider.config.max_retries == 3
    assert provider.config.endpoint == "https://example.test/v1beta/models/gemini-test:generateContent"


def test_config_is_immutable():
    cfg = CompletionConfig(api_key="k" * 12)
    with pytest.raises(AttributeError):
        cfg.max_retries = 1


def test_backoff_schedule():
    cfg = CompletionConfig(api_key="k" * 12)
    assert [cfg.backoff_seconds(i) for i in range(5)] == [1.0, 2.0, 4.0, 8.0, 16.0]


@pytest.mark.parametrize(
    "kwargs",
    [{"max_retries": 0}, {"backoff_factor": 1.0}, {"backoff_jitter_ms": 1500}, {"backoff_base_ms": 0}],
)
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        CompletionConfig(api_key="k" * 12, **kwargs)


def test_settings_defaults_and_overrides():
    s = Settings(gemini_api_key="abcdefghijkl", max_retries=3)
    assert s.max_retries == 3
    assert s.backoff_base_ms == 1000
    cfg = CompletionConfig.from_settings(s)
    assert cfg.api_key == "abcdefghijkl"
    assert cfg.max_retries == 3


def test_settings_rejects_short_key():
    with pytest.raises(ValueError):
        Settings(gemini_api_key="short")


@pytest.mark.parametrize("base", [0, -100])
def test_settings_rejects_non_positive_backoff_base(base):
    with pytest.raises(ValueError):
        Settings(gemini_api_key="abcdefghijkl", backoff_base_ms=base)


@pytest.mark.parametrize(
    "exc,kind",
    [
        (NetworkError(code="NETWORK_ERROR", message="x"), "network"),
        (ApiError(code="API_ERROR", message="x", http_status=502), "http"),
        (RateLimitError(code="RATE_LIMIT", message="x", http_status=429), "http"),
        (MalformedResponseError(code="MALFORMED_RESPONSE", message="x"), "malformed_response"),
        (ValidationError(code="MISSING_FIELDS", message="x"), "validation"),
    ],
)
def test_failure_from_error(exc, kind):
    failure = Failure.from_error(exc, attempts=2)
    assert failure.kind == kind
    assert failure.attempts == 2
    if kind == "http":
        assert failure.status_code == exc.http_status
    else:
        assert failure.status_code is None
