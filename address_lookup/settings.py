"""Environment-driven configuration for the address lookup service."""

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from address_lookup.variants import CURRENT, ApiVariant, get_variant


def _positive_int(name: str, default: str) -> int:
    raw = os.getenv(name, "").strip() or default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero.")
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    api_key: str
    api_variant: ApiVariant = CURRENT
    api_timeout: float = 30.0
    max_depth: int = 3
    mcp_sse_port: int = 8000

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can keep the API key in a local .env
        file without exporting it globally.
        """
        load_dotenv()

        api_key = os.getenv("ADDRESS_LOOKUP_KEY", "").strip()
        if not api_key:
            raise ValueError("ADDRESS_LOOKUP_KEY is required but was not provided.")

        api_variant = get_variant(os.getenv("ADDRESS_LOOKUP_API_VARIANT", "").strip() or CURRENT.name)
        base_url = os.getenv("ADDRESS_LOOKUP_BASE_URL", "").strip().rstrip("/")
        if base_url:
            api_variant = replace(api_variant, base_url=base_url)

        api_timeout_raw = os.getenv("API_TIMEOUT", "").strip() or "30"
        try:
            api_timeout = float(api_timeout_raw)
        except ValueError as exc:
            raise ValueError("API_TIMEOUT must be a numeric value.") from exc
        if api_timeout <= 0:
            raise ValueError("API_TIMEOUT must be greater than zero.")

        return cls(
            api_key=api_key,
            api_variant=api_variant,
            api_timeout=api_timeout,
            max_depth=_positive_int("ADDRESS_LOOKUP_MAX_DEPTH", "3"),
            mcp_sse_port=_positive_int("MCP_SSE_PORT", "8000"),
        )
