"""
Capture Interactive API client wrapper.

Encapsulates request/response handling for the find and retrieve endpoints,
including consistent error reporting, envelope unwrapping and logging.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from address_lookup.errors import EmptyResultError, LookupApiError, RemoteItemError
from address_lookup.http_client import create_lookup_client
from address_lookup.settings import Settings
from address_lookup.variants import CURRENT, ApiVariant

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CaptureApiClient:
    """Typed wrapper around the shared AsyncClient."""

    _client: httpx.AsyncClient
    variant: ApiVariant = CURRENT

    @classmethod
    def from_settings(cls, settings: Settings) -> "CaptureApiClient":
        """Factory that builds the client from Settings."""
        return cls(create_lookup_client(settings), settings.api_variant)

    async def aclose(self) -> None:
        """Close the underlying HTTP resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "CaptureApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def find(self, params: dict[str, Any], *, operation: str = "find") -> list[dict[str, Any]]:
        """Call the Find endpoint and return its non-empty, error-free item list."""
        return await self.fetch_items(self.variant.find_url, params, operation=operation)

    async def retrieve(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Call the Retrieve endpoint and return its non-empty, error-free item list."""
        return await self.fetch_items(self.variant.retrieve_url, params, operation="retrieve")

    async def fetch_items(
        self,
        url: str,
        params: dict[str, Any],
        *,
        operation: str,
    ) -> list[dict[str, Any]]:
        """GET ``url`` and apply the empty-result and error-marker checks."""
        body = await self._request(url, params)
        items = self.variant.unwrap(body)

        if not items:
            logger.info("Address lookup returned no items", extra={"operation": operation})
            raise EmptyResultError(f"No results for {operation} query.")

        first = items[0]
        if isinstance(first, dict) and first.get("Error"):
            logger.warning(
                "Address lookup service reported an error",
                extra={
                    "operation": operation,
                    "error": first.get("Error"),
                    "description": first.get("Description"),
                },
            )
            raise RemoteItemError(first)

        return items

    async def _request(self, url: str, params: dict[str, Any]) -> Any:
        """Normalized GET handler for all outgoing API calls."""

        def _transport_error(message: str, *, exc: Exception | None = None) -> LookupApiError:
            logger.error(
                message,
                extra={"url": url},
                exc_info=exc,
            )
            return LookupApiError(message)

        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise _transport_error(
                f"Address lookup request timed out (GET {url}).",
                exc=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise _transport_error(
                f"Address lookup request failed (GET {url}): {exc!s}",
                exc=exc,
            ) from exc

        if response.is_error:
            snippet = response.text.strip()
            if len(snippet) > 512:
                snippet = f"{snippet[:512]}..."
            logger.warning(
                "Address lookup API responded with error",
                extra={
                    "url": url,
                    "status_code": response.status_code,
                    "content": snippet,
                },
            )
            raise LookupApiError(
                f"Address lookup API error ({response.status_code}) during GET {url}: {snippet or 'no body provided.'}"
            )

        try:
            return response.json()
        except json.JSONDecodeError as exc:
            logger.error(
                "Address lookup API returned invalid JSON",
                extra={"url": url},
            )
            raise LookupApiError(
                f"Address lookup API returned invalid JSON during GET {url}."
            ) from exc
