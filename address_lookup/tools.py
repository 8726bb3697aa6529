"""MCP tool registrations for the address lookup server."""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable

from fastmcp import Context, FastMCP
from pydantic import Field

from address_lookup.errors import AddressLookupError, AggregateResolveError
from address_lookup.lookup import AddressLookup

logger = logging.getLogger(__name__)


@dataclass
class LookupToolDependencies:
    """Runtime dependencies required by the MCP tools."""

    lookup: AddressLookup | None = None

    def attach_lookup(self, lookup: AddressLookup) -> None:
        self.lookup = lookup

    def detach_lookup(self) -> None:
        self.lookup = None

    def require_lookup(self) -> AddressLookup:
        if self.lookup is None:
            raise RuntimeError("Address lookup client is not initialized.")
        return self.lookup


def _validate_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string.")
    return value.strip()


def _log_tool_event(tool_name: str, event: str, **fields: object) -> None:
    logger.info(
        "lookup_tool_event",
        extra={"tool": tool_name, "event": event, **fields},
    )


async def _with_error_handling(
    tool_name: str,
    action: Callable[[], Awaitable[dict[str, Any]]],
) -> dict[str, Any]:
    try:
        return await action()
    except AggregateResolveError as exc:
        logger.warning("%s could not resolve every container", tool_name, exc_info=True)
        _log_tool_event(tool_name, "partial_failure", failed=list(exc.failures))
        return {
            "error": str(exc),
            "addresses": [item.model_dump(exclude_none=True) for item in exc.resolved],
        }
    except AddressLookupError as exc:
        logger.warning("%s failed due to API error", tool_name, exc_info=True)
        _log_tool_event(tool_name, "api_error", error=str(exc))
        return {"error": str(exc)}
    except Exception as exc:  # noqa: BLE001
        logger.exception("%s failed unexpectedly", tool_name)
        _log_tool_event(tool_name, "unexpected_error", error=str(exc))
        return {"error": f"Unexpected error: {exc}"}


async def find_addresses(
    dependencies: LookupToolDependencies,
    *,
    text: str,
    countries: str | None = None,
    origin: str | None = None,
    limit: int | None = None,
    language: str | None = None,
) -> dict[str, Any]:
    """Search for addresses matching ``text`` and resolve every container."""
    text_value = _validate_non_empty(text, "text")
    lookup = dependencies.require_lookup().clear().find(text_value)
    if countries:
        lookup = lookup.in_country(countries.strip())
    if origin:
        lookup = lookup.from_(origin.strip())
    if limit is not None:
        lookup = lookup.limit(limit)
    if language:
        lookup = lookup.in_language(language.strip())

    async def _call() -> dict[str, Any]:
        items = await lookup.get()
        _log_tool_event("find_addresses", "success", count=len(items))
        return {"addresses": [item.model_dump(exclude_none=True) for item in items]}

    return await _with_error_handling("find_addresses", _call)


async def retrieve_address(
    dependencies: LookupToolDependencies,
    *,
    address_id: str,
) -> dict[str, Any]:
    """Return the full address record for an id produced by ``find_addresses``."""
    address_id_value = _validate_non_empty(address_id, "address_id")
    lookup = dependencies.require_lookup()

    async def _call() -> dict[str, Any]:
        record = await lookup.retrieve(address_id_value)
        _log_tool_event("retrieve_address", "success", address_id=record.Id)
        return {"address": record.model_dump(exclude_none=True), "lines": record.lines}

    return await _with_error_handling("retrieve_address", _call)


def register_lookup_tools(
    mcp: FastMCP,
    dependencies: LookupToolDependencies,
) -> None:
    """Register MCP tools that proxy to the address lookup API."""

    @mcp.tool(
        name="find_addresses",
        description="Searches for postal addresses matching free text such as a postcode or partial address. Returns a list of addresses, each with an 'Id' usable with retrieve_address.",
    )
    async def find_addresses_tool(
        text: Annotated[str, Field(description="Postcode or partial address to search for (e.g., 'SW1A 1AA').")],
        ctx: Context,
        countries: Annotated[str | None, Field(description="ISO country codes separated by '|' (e.g., 'GB|US').")] = None,
        origin: Annotated[str | None, Field(description="Origin hint such as an IP address or ISO country code.")] = None,
        limit: Annotated[int | None, Field(description="Maximum number of results to request.")] = None,
        language: Annotated[str | None, Field(description="Result language as a 2 or 4 letter locale (e.g., 'en-gb').")] = None,
    ) -> dict[str, Any]:
        """Search and resolve addresses."""
        result = await find_addresses(
            dependencies,
            text=text,
            countries=countries,
            origin=origin,
            limit=limit,
            language=language,
        )
        if "addresses" in result and "error" not in result:
            await ctx.info(f"Found {len(result['addresses'])} addresses.")
        return result

    @mcp.tool(
        name="retrieve_address",
        description="Retrieves the full structured record (lines, city, postal code, country codes) for an address 'Id' returned by find_addresses.",
    )
    async def retrieve_address_tool(
        address_id: Annotated[str, Field(description="The address identifier returned by find_addresses.")],
    ) -> dict[str, Any]:
        """Return the detailed address record."""
        return await retrieve_address(dependencies, address_id=address_id)

    logger.info("Address lookup MCP tools registered.")
