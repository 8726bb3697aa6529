"""
Integration smoke test for the address lookup MCP server.

This script spins up:
1. A mock Capture Interactive service (Starlette) that exposes the current
   Find and Retrieve endpoints with a single postcode container.
2. The MCP SSE server (running in-process via FastMCP's HTTP transport).
3. A FastMCP client that connects over SSE, invokes both tools, and prints
   the responses.

Usage:
    uv run python scripts/smoke_test.py

The script prints the tool outputs and exits with code 0 if the end-to-end flow
works. Use Ctrl+C to abort.
"""

import asyncio
import contextlib
import os
from dataclasses import dataclass, field
from typing import Any

import uvicorn
from fastmcp.client import Client
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from address_lookup.server import build_server
from address_lookup.settings import Settings

MOCK_SERVICE_HOST = "127.0.0.1"
MOCK_SERVICE_PORT = 9070
SSE_HOST = "127.0.0.1"
SSE_PORT = 18080
SMOKE_KEY = "SMOKE-KEY-0001"


@dataclass
class MockAddressBook:
    """In-memory data for the smoke test's pretend address service."""

    containers: dict[str, list[dict[str, Any]]] = field(
        default_factory=lambda: {
            "GB|RM|A|SW1A1AA": [
                {
                    "Id": "GB|RM|A|1001",
                    "Type": "Address",
                    "Text": "Buckingham Palace",
                    "Highlight": "",
                    "Description": "London, SW1A 1AA",
                },
                {
                    "Id": "GB|RM|A|1002",
                    "Type": "Address",
                    "Text": "Royal Mews",
                    "Highlight": "",
                    "Description": "London, SW1A 1AA",
                },
            ],
        }
    )

    def find(self, params: dict[str, str]) -> list[dict[str, Any]]:
        if params.get("Key") != SMOKE_KEY:
            return [{"Error": "2", "Description": "Unknown key", "Cause": "The key you are using to access the service was not found."}]
        container = params.get("Container")
        if container:
            return self.containers.get(container, [])
        if "SW1A" not in params.get("Text", "").upper():
            return []
        return [
            {
                "Id": "GB|RM|A|SW1A1AA",
                "Type": "Postcode",
                "Text": "SW1A 1AA",
                "Highlight": "0-8",
                "Description": "London - 2 Addresses",
            }
        ]

    def retrieve(self, params: dict[str, str]) -> list[dict[str, Any]]:
        for items in self.containers.values():
            for item in items:
                if item["Id"] == params.get("Id"):
                    return [
                        {
                            "Id": item["Id"],
                            "Line1": item["Text"],
                            "City": "London",
                            "PostalCode": "SW1A 1AA",
                            "CountryName": "United Kingdom",
                            "CountryIso2": "GB",
                            "CountryIso3": "GBR",
                            "CountryIsoNumber": 826,
                            "Type": "Residential",
                        }
                    ]
        return []


async def find_endpoint(request: Request) -> JSONResponse:
    items = request.app.state.book.find(dict(request.query_params))
    return JSONResponse({"Items": items})


async def retrieve_endpoint(request: Request) -> JSONResponse:
    items = request.app.state.book.retrieve(dict(request.query_params))
    return JSONResponse({"Items": items})


def build_mock_service() -> Starlette:
    app = Starlette(
        routes=[
            Route("/Find/v1.1/json3ex.ws", find_endpoint, methods=["GET"]),
            Route("/Retrieve/v1.1/json3ex.ws", retrieve_endpoint, methods=["GET"]),
        ],
    )
    app.state.book = MockAddressBook()
    return app


async def run_uvicorn_app(app: Starlette, host: str, port: int) -> uvicorn.Server:
    config = uvicorn.Config(app, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)

    async def _serve() -> None:
        await server.serve()

    asyncio.create_task(_serve())
    # Give the server a moment to bind the port.
    await asyncio.sleep(0.3)
    return server


async def run_smoke_flow() -> None:
    print("Starting mock Capture Interactive service...")
    mock_server = await run_uvicorn_app(build_mock_service(), MOCK_SERVICE_HOST, MOCK_SERVICE_PORT)

    os.environ["ADDRESS_LOOKUP_KEY"] = SMOKE_KEY
    os.environ["ADDRESS_LOOKUP_API_VARIANT"] = "current"
    os.environ["ADDRESS_LOOKUP_BASE_URL"] = f"http://{MOCK_SERVICE_HOST}:{MOCK_SERVICE_PORT}"
    os.environ["MCP_SSE_PORT"] = str(SSE_PORT)
    settings = Settings.load()

    app_server = build_server(settings)
    app_server.startup()

    async def _run_sse() -> None:
        await app_server.serve_sse_async(host=SSE_HOST)

    print("Starting MCP SSE server...")
    sse_task = asyncio.create_task(_run_sse())
    await asyncio.sleep(0.5)

    client = Client(f"http://{SSE_HOST}:{SSE_PORT}/sse", name="smoke-client")

    try:
        async with client:
            print("Calling find_addresses tool...")
            find_result = await client.call_tool(
                "find_addresses",
                {"text": "SW1A 1AA", "countries": "GB"},
            )
            print("find_addresses result:", find_result)
            addresses = find_result.data["addresses"]
            assert len(addresses) == 2, addresses

            retrieve_result = await client.call_tool(
                "retrieve_address",
                {"address_id": addresses[0]["Id"]},
            )
            print("retrieve_address result:", retrieve_result)

            print("Smoke test succeeded")
    finally:
        print("Stopping MCP SSE server...")
        sse_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sse_task
        await app_server.shutdown_async()

        print("Stopping mock Capture Interactive service...")
        mock_server.should_exit = True
        await asyncio.sleep(0.2)


if __name__ == "__main__":
    try:
        asyncio.run(run_smoke_flow())
    except KeyboardInterrupt:
        print("Smoke test interrupted.")
