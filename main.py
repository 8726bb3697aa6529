"""
Entry point for the address lookup MCP server.

Loads the API key and variant from the environment (or a local .env file) and
serves the ``find_addresses`` and ``retrieve_address`` tools over SSE.
"""

import logging
import os

from address_lookup.server import build_server
from address_lookup.settings import Settings


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main() -> None:
    """Bootstrap the lookup client and run the SSE server."""
    _configure_logging()
    logger = logging.getLogger("address-lookup")
    settings = Settings.load()
    logger.info(
        "Using %s address lookup API (%s), container depth limit %d",
        settings.api_variant.name,
        settings.api_variant.find_url,
        settings.max_depth,
    )
    server = build_server(settings)

    try:
        server.startup()
        logger.info(
            "Address lookup tools available at http://localhost:%s/sse",
            settings.mcp_sse_port,
        )
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Address lookup server interrupted (Ctrl+C).")
    except Exception:
        logger.exception("Address lookup server stopped due to an unexpected error.")
        raise
    finally:
        server.shutdown()
        logger.info("Address lookup client closed; server shutdown complete.")


if __name__ == "__main__":
    main()
