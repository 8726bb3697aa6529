"""Core server bootstrap for the address lookup MCP server."""

import asyncio
import logging
from typing import Any

from fastmcp import FastMCP  # type: ignore[import-not-found]

from address_lookup.client import CaptureApiClient
from address_lookup.lookup import AddressLookup
from address_lookup.settings import Settings
from address_lookup.tools import LookupToolDependencies, register_lookup_tools


class ServerApp:
    """Owns the API client and the FastMCP instance for one server run."""

    def __init__(self, settings: Settings) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._state: dict[str, Any] = {"settings": settings}
        self._api_client: CaptureApiClient | None = None
        self._tool_dependencies = LookupToolDependencies()
        self._mcp_app = FastMCP(
            name="Address Lookup MCP Server",
            instructions=(
                "Find postal addresses from free text and retrieve their full structured details."
            ),
        )
        register_lookup_tools(self._mcp_app, self._tool_dependencies)
        self._state["mcp_app"] = self._mcp_app

    def startup(self) -> None:
        """Prepare resources required to launch the SSE server."""
        self._logger.info(
            "Starting server bootstrap",
            extra={"api_variant": self._settings.api_variant.name},
        )
        self._api_client = CaptureApiClient.from_settings(self._settings)
        lookup = AddressLookup.create(
            self._api_client,
            self._settings.api_key,
            max_depth=self._settings.max_depth,
        )
        self._tool_dependencies.attach_lookup(lookup)
        self._state["initialized"] = True

    def shutdown(self) -> None:
        """Release acquired resources."""
        asyncio.run(self.shutdown_async())

    async def shutdown_async(self) -> None:
        """Release acquired resources from inside a running event loop."""
        self._logger.info("Shutting down server bootstrap")
        if self._api_client is not None:
            await self._api_client.aclose()
            self._api_client = None
        self._tool_dependencies.detach_lookup()
        self._state.clear()

    def serve_forever(self) -> None:
        """Run the FastMCP SSE server until interrupted."""
        host = "0.0.0.0"
        port = self._settings.mcp_sse_port
        self._logger.info("Starting SSE transport", extra={"host": host, "port": port})
        self._mcp_app.run(transport="sse", host=host, port=port)

    async def serve_sse_async(self, host: str = "0.0.0.0") -> None:
        """Async helper for running the SSE transport (used by smoke tests)."""
        await self._mcp_app.run_http_async(
            transport="sse",
            host=host,
            port=self._settings.mcp_sse_port,
        )

    @property
    def mcp(self) -> FastMCP:
        """Expose the configured FastMCP instance."""
        return self._mcp_app


def build_server(settings: Settings) -> ServerApp:
    """Factory used by main.py to create the configured server instance."""
    return ServerApp(settings)
