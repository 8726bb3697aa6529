"""
Fluent address lookup over the Capture Interactive API.

Every setter returns a new ``AddressLookup`` holding an immutable parameter
snapshot, so lookups derived from one another can run concurrently against the
same ``CaptureApiClient``.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any

from pydantic import ValidationError

from address_lookup.client import CaptureApiClient
from address_lookup.errors import AggregateResolveError, LookupApiError
from address_lookup.models import ResolveItem, RetrieveItem
from address_lookup.variants import ApiVariant

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LookupParams:
    """Query parameters accumulated by the builder."""

    key: str
    text: str | None = None
    origin: str | None = None
    countries: str | None = None
    limit: int | None = None
    language: str | None = None

    def to_query(self, variant: ApiVariant, **extra: Any) -> dict[str, Any]:
        """Render the set fields (plus ``extra``) using the variant's parameter names."""
        fields: dict[str, Any] = {
            "key": self.key,
            "text": self.text,
            "origin": self.origin,
            "countries": self.countries,
            "limit": self.limit,
            "language": self.language,
        }
        if variant.always_send_text and fields["text"] is None:
            fields["text"] = ""
        fields.update(extra)
        return {
            variant.param_name(name): value
            for name, value in fields.items()
            if value is not None
        }


def _item_id(item: ResolveItem | str) -> str:
    return item if isinstance(item, str) else item.Id


def _parse_items(raw_items: list[dict[str, Any]], operation: str) -> list[ResolveItem]:
    try:
        return [ResolveItem.model_validate(raw) for raw in raw_items]
    except ValidationError as exc:
        logger.error("Address lookup returned a malformed item", extra={"operation": operation})
        raise LookupApiError(f"Address lookup returned a malformed item during {operation} query.") from exc


@dataclass(frozen=True, slots=True)
class AddressLookup:
    """Chainable find/resolve/retrieve workflow bound to one API client."""

    api: CaptureApiClient
    params: LookupParams
    max_depth: int = 3

    @classmethod
    def create(
        cls,
        api: CaptureApiClient,
        key: str,
        text: str | None = None,
        *,
        max_depth: int = 3,
    ) -> "AddressLookup":
        return cls(api, LookupParams(key=key, text=text), max_depth)

    def _with(self, **changes: Any) -> "AddressLookup":
        return replace(self, params=replace(self.params, **changes))

    def clear(self) -> "AddressLookup":
        """Drop every parameter except the API key."""
        return replace(self, params=LookupParams(key=self.params.key))

    def find(self, text: str) -> "AddressLookup":
        """Set the search text, typically a postcode or partial address."""
        return self._with(text=text)

    def from_(self, origin: str) -> "AddressLookup":
        """
        Bias results towards an origin, typically the user's IP or an ISO
        country code.
        """
        return self._with(origin=origin)

    def in_country(self, countries: str) -> "AddressLookup":
        """Restrict results to countries, separated by ``|`` (e.g. ``"GB|US"``)."""
        return self._with(countries=countries)

    def limit(self, amount: int) -> "AddressLookup":
        return self._with(limit=amount)

    def in_language(self, locale: str) -> "AddressLookup":
        """Request results in a 2 or 4 letter locale, e.g. ``"en"`` or ``"en-gb"``."""
        return self._with(language=locale)

    @property
    def find_url(self) -> str:
        return self.api.variant.find_url

    @property
    def retrieve_url(self) -> str:
        return self.api.variant.retrieve_url

    def query_params(self, **extra: Any) -> dict[str, Any]:
        return self.params.to_query(self.api.variant, **extra)

    async def get(self) -> list[ResolveItem]:
        """
        Run the find query and resolve every container it returns.

        Raises ``AggregateResolveError`` if any container fails; the items that
        did resolve are available on the exception.
        """
        logger.debug(
            "Running address find query",
            extra={"text": self.params.text, "countries": self.params.countries},
        )
        raw_items = await self.api.find(self.query_params(), operation="find")
        items = _parse_items(raw_items, "find")
        return await self._expand(items, depth=0)

    async def resolve(self, item: ResolveItem | str) -> list[ResolveItem]:
        """Run a find query scoped to one container id."""
        container_id = _item_id(item)
        logger.debug("Resolving address container", extra={"container": container_id})
        raw_items = await self.api.find(
            self.query_params(container=container_id),
            operation="resolve",
        )
        return _parse_items(raw_items, "resolve")

    async def retrieve(self, item: ResolveItem | str) -> RetrieveItem:
        """Fetch the full address record for an address id."""
        address_id = _item_id(item)
        logger.debug("Retrieving address", extra={"address_id": address_id})
        variant = self.api.variant
        params = {
            variant.param_name("key"): self.params.key,
            variant.param_name("id"): address_id,
        }
        raw_items = await self.api.retrieve(params)
        try:
            return RetrieveItem.model_validate(raw_items[0])
        except ValidationError as exc:
            logger.error("Address lookup returned a malformed item", extra={"operation": "retrieve"})
            raise LookupApiError("Address lookup returned a malformed item during retrieve query.") from exc

    async def _expand(self, items: list[ResolveItem], depth: int) -> list[ResolveItem]:
        addresses = [item for item in items if item.is_address]
        containers = [item for item in items if not item.is_address]
        if not containers:
            return addresses

        if depth >= self.max_depth:
            logger.warning(
                "Leaving address containers unresolved at maximum depth",
                extra={"depth": depth, "containers": [item.Id for item in containers]},
            )
            return addresses + containers

        outcomes = await asyncio.gather(
            *(self._resolve_container(container, depth + 1) for container in containers),
            return_exceptions=True,
        )

        resolved = list(addresses)
        failures: dict[str, BaseException] = {}
        for container, outcome in zip(containers, outcomes):
            if isinstance(outcome, AggregateResolveError):
                # Surface the nested containers that failed, not their parent.
                failures.update(outcome.failures)
                resolved.extend(outcome.resolved)
            elif isinstance(outcome, Exception):
                failures[container.Id] = outcome
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                resolved.extend(outcome)

        if failures:
            logger.warning(
                "Address containers could not be resolved",
                extra={"failed": list(failures), "resolved_count": len(resolved)},
            )
            raise AggregateResolveError(failures, resolved)
        return resolved

    async def _resolve_container(self, container: ResolveItem, depth: int) -> list[ResolveItem]:
        return await self._expand(await self.resolve(container), depth)
