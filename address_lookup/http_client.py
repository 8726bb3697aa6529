"""HTTP client factory for the Capture Interactive API."""

import httpx

from address_lookup.settings import Settings


def create_lookup_client(settings: Settings) -> httpx.AsyncClient:
    """
    Build an AsyncClient configured for the address lookup service.

    Requests carry absolute URLs, so no base_url is set; the variant decides
    which host is called.
    """
    return httpx.AsyncClient(
        timeout=settings.api_timeout,
        headers={"Accept": "application/json"},
    )
