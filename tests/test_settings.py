import pytest

from address_lookup import settings as settings_module
from address_lookup.settings import Settings
from address_lookup.variants import CURRENT, LEGACY

_ENV_VARS = (
    "ADDRESS_LOOKUP_KEY",
    "ADDRESS_LOOKUP_API_VARIANT",
    "ADDRESS_LOOKUP_BASE_URL",
    "ADDRESS_LOOKUP_MAX_DEPTH",
    "API_TIMEOUT",
    "MCP_SSE_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings_module, "load_dotenv", lambda: False)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADDRESS_LOOKUP_KEY", " KEY-1 ")
    settings = Settings.load()
    assert settings.api_key == "KEY-1"
    assert settings.api_variant is CURRENT
    assert settings.api_timeout == 30.0
    assert settings.max_depth == 3
    assert settings.mcp_sse_port == 8000


def test_variant_and_base_url_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADDRESS_LOOKUP_KEY", "KEY-1")
    monkeypatch.setenv("ADDRESS_LOOKUP_API_VARIANT", "legacy")
    monkeypatch.setenv("ADDRESS_LOOKUP_BASE_URL", "http://127.0.0.1:9070/")
    settings = Settings.load()
    assert settings.api_variant.version == LEGACY.version
    assert settings.api_variant.find_url == "http://127.0.0.1:9070/Find/v1.00/json.ws"


def test_missing_key_is_rejected() -> None:
    with pytest.raises(ValueError, match="ADDRESS_LOOKUP_KEY"):
        Settings.load()


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("API_TIMEOUT", "soon", "API_TIMEOUT"),
        ("API_TIMEOUT", "0", "API_TIMEOUT"),
        ("MCP_SSE_PORT", "http", "MCP_SSE_PORT"),
        ("ADDRESS_LOOKUP_MAX_DEPTH", "-1", "ADDRESS_LOOKUP_MAX_DEPTH"),
        ("ADDRESS_LOOKUP_API_VARIANT", "v3", "Unknown API variant"),
    ],
)
def test_invalid_values_are_rejected(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv("ADDRESS_LOOKUP_KEY", "KEY-1")
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=message):
        Settings.load()
