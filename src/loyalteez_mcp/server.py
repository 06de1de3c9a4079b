# server.py
"""
Loyalteez FastMCP Server

This server exposes the Loyalteez loyalty platform to MCP clients: event
tracking and configuration, user identity, streaks and leaderboards, perks,
achievements, drops, gasless transactions, program design and webhooks, plus
read-only reference resources and bundled documentation.
"""

import argparse
import logging
from typing import Optional

import httpx
from fastmcp import FastMCP

from .client import LoyalteezClient
from .config import NETWORKS, TRANSPORTS, ServerConfig, load_config
from .docs_index import DocsCache
from .resources import register_resources
from .runtime import Runtime
from .tools import register_tools

# Configure module logger
logger = logging.getLogger(__name__)

instructions = """
This server provides MCP tools for the Loyalteez loyalty platform (LTZ rewards on Soneium).

## Brand ID
Every brand-scoped tool takes an optional `brand_id` (0x-prefixed, 40 hex characters).
When omitted, the LOYALTEEZ_BRAND_ID environment variable is used.

## Core Tool Categories:

### Events:
- `loyalteez_create_event`: Validate a custom event definition and get tracking code
- `loyalteez_create_events_batch`: Define several events at once with platform code
- `loyalteez_track_event`: Reward a user for an event
- `loyalteez_bulk_events`: Track up to 100 events in one request
- `loyalteez_get_event_config`: Read the brand's event rules

### Users:
- `loyalteez_resolve_user`: Map a platform account to a Loyalteez wallet
- `loyalteez_get_user_balance`, `loyalteez_check_eligibility`, `loyalteez_get_user_stats`

### Engagement:
- `loyalteez_streak_checkin`, `loyalteez_get_streak_status`, `loyalteez_claim_streak_milestone`
- `loyalteez_get_leaderboard`, `loyalteez_update_leaderboard_stats`
- `loyalteez_log_activity`, `loyalteez_calculate_reward`
- `loyalteez_create_drop`, `loyalteez_claim_drop`
- `loyalteez_process_third_party_event` (MEE6, Arcane, Tatsu, Carl-bot)

### Perks & Achievements:
- `loyalteez_list_perks`, `loyalteez_check_perk_eligibility`, `loyalteez_redeem_perk`
- `loyalteez_get_user_achievements`, `loyalteez_update_achievement_progress`

### Transactions:
- `loyalteez_relay_transaction`: Gasless transaction for whitelisted contracts

### Design & Diagnostics:
- `loyalteez_design_program`: Advisory program design with implementation code
- `loyalteez_health_check`: API health and version info
- `loyalteez_validate_webhook`, `loyalteez_webhook_example`

## User Identifiers:
- Users are addressed by email. Platform accounts map to `{platform}_{userId}@loyalteez.app`
  (e.g., discord_123456789@loyalteez.app).

## Resources:
- `loyalteez://contracts/all`, `loyalteez://network/config`, `loyalteez://events/standard`
- `loyalteez://rate-limits/endpoints`, `loyalteez://errors/codes`, `loyalteez://webhooks/events`
- `loyalteez://docs/index` lists the bundled documentation pages

## Important Notes:
- Irreversible operations (track_event, redeem_perk, claim_streak_milestone, relay_transaction)
  are not retried. The service rejects duplicate events within 60 seconds (HTTP 409).
- Rate limits (HTTP 429) are reported as errors; check loyalteez://rate-limits/endpoints.
"""


def create_server(
    config: Optional[ServerConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastMCP:
    """
    Build a FastMCP server with every Loyalteez tool and resource registered.

    Args:
        config: Server configuration; read from the environment when omitted
        transport: Optional httpx transport for the API client (tests pass a MockTransport)
    """
    config = config or load_config()
    runtime = Runtime(
        config=config,
        client=LoyalteezClient(network=config.network, timeout=config.timeout, transport=transport),
        docs=DocsCache(config.docs_path),
    )

    server = FastMCP(
        name="Loyalteez",
        instructions=instructions,
        on_duplicate_tools="warn"
    )
    register_tools(server, runtime)
    register_resources(server, runtime)
    return server


def __getattr__(name: str):
    # Module-level server for `fastmcp run loyalteez_mcp/server.py`, built on first access
    if name == "mcp":
        server = create_server(load_config())
        globals()["mcp"] = server
        return server
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def main():
    """Main entry point for the Loyalteez MCP server."""
    # CLI argument parsing for runtime overrides
    parser = argparse.ArgumentParser(description="Run Loyalteez MCP server")
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        help="Transport to use for MCP (default reads MCP_TRANSPORT env or 'stdio')",
    )
    parser.add_argument(
        "--network",
        choices=NETWORKS,
        help="Loyalteez network (default reads LOYALTEEZ_NETWORK env or 'mainnet')",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for the HTTP transport (default reads MCP_PORT env or 10000)",
    )
    args = parser.parse_args()

    config = load_config(network=args.network, transport=args.transport, port=args.port)

    # Accept 'http' alias for clarity
    transport = config.transport
    if transport == "http":
        transport = "streamable-http"

    # Configure server logging
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    server = create_server(config)

    logger.info("Starting Loyalteez MCP Server...")
    logger.info(f"Network: {config.network}")
    logger.info(f"Transport: {transport}")
    if not config.default_brand_id:
        logger.info("LOYALTEEZ_BRAND_ID is not set; tools will require brand_id")

    # Run the MCP server with selected transport
    if transport == "streamable-http":
        server.run(transport=transport, port=config.port)
    else:
        server.run(transport=transport)


if __name__ == "__main__":
    main()
