import importlib
import sys

import pytest
from fastmcp import FastMCP

import loyalteez_mcp.server as server_module
from loyalteez_mcp.config import ConfigError

from .test_utils import BRAND_ID, assert_tool_error

USER = "discord_42@loyalteez.app"
WALLET = "0x1111111111111111111111111111111111111111"
REMOTE_ERROR = "Brand 0xabcdef is suspended"

# Every tool that forwards a request to a Loyalteez service, with valid arguments
REMOTE_TOOL_CALLS = [
    ("loyalteez_track_event", {"event_type": "daily_gm", "user_identifier": {"email": "user@example.com"}}),
    ("loyalteez_get_event_config", {}),
    ("loyalteez_bulk_events", {"events": [{"event_type": "daily_gm", "user_email": "a@example.com"}]}),
    ("loyalteez_resolve_user", {"platform": "discord", "platform_user_id": "42"}),
    ("loyalteez_get_user_balance", {"user_email": "user@example.com"}),
    ("loyalteez_check_eligibility", {"event_type": "daily_gm", "user_email": USER}),
    ("loyalteez_get_user_stats", {"user_identifier": USER}),
    ("loyalteez_streak_checkin", {"user_id": "42", "platform": "discord"}),
    ("loyalteez_get_streak_status", {"user_identifier": USER}),
    ("loyalteez_claim_streak_milestone", {"user_identifier": USER, "platform": "discord", "milestone_days": 7}),
    ("loyalteez_get_leaderboard", {}),
    ("loyalteez_update_leaderboard_stats", {"user_identifier": USER, "platform": "discord", "ltz_amount": 5}),
    ("loyalteez_log_activity", {"user_identifier": USER, "platform": "discord", "activity_type": "message"}),
    ("loyalteez_calculate_reward", {
        "user_identifier": USER,
        "platform": "discord",
        "base_reward": 10,
        "event_type": "daily_gm",
    }),
    ("loyalteez_relay_transaction", {
        "privy_access_token": "privy-token",
        "to": "0x5242b6DB88A72752ac5a54cFe6A7DB8244d743c9",
        "data": "0xa9059cbb",
        "user_address": WALLET,
    }),
    ("loyalteez_create_drop", {
        "platform": "discord",
        "server_id": "guild_1",
        "event_type": "flash_drop",
        "reward": 50,
        "max_claims": 10,
        "expires_in_seconds": 3600,
    }),
    ("loyalteez_claim_drop", {"drop_id": "drop_1", "platform_user_id": "42", "platform": "discord"}),
    ("loyalteez_process_third_party_event", {
        "platform": "discord",
        "source_bot": "mee6",
        "event_type": "level_up",
        "target_user_id": "42",
    }),
    ("loyalteez_list_perks", {}),
    ("loyalteez_check_perk_eligibility", {"user_identifier": USER, "platform": "discord", "perk_id": "perk_1"}),
    ("loyalteez_redeem_perk", {"user_identifier": USER, "platform": "discord", "perk_id": "perk_1"}),
    ("loyalteez_get_user_achievements", {"user_identifier": USER}),
    ("loyalteez_update_achievement_progress", {
        "user_identifier": USER,
        "platform": "discord",
        "achievement_type": "message_count",
        "new_value": 1,
    }),
    ("loyalteez_health_check", {}),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("tool, arguments", REMOTE_TOOL_CALLS, ids=[name for name, _ in REMOTE_TOOL_CALLS])
async def test_remote_error_text_is_returned(api, client, tool, arguments):
    api.fallback({"error": REMOTE_ERROR}, status_code=400)

    result = await client.call_tool(tool, arguments, raise_on_error=False)

    assert_tool_error(result, REMOTE_ERROR)
    assert len(api.requests) == 1


@pytest.mark.asyncio
async def test_remote_message_field_is_returned(api, client):
    api.fallback({"message": "Perk is sold out"}, status_code=409)

    result = await client.call_tool("loyalteez_redeem_perk", {
        "user_identifier": USER,
        "platform": "discord",
        "perk_id": "perk_1",
    }, raise_on_error=False)

    assert_tool_error(result, "Perk is sold out")


@pytest.mark.asyncio
async def test_unknown_tool_is_an_error_result(client):
    result = await client.call_tool("loyalteez_mint_everything", {}, raise_on_error=False)

    assert_tool_error(result, "loyalteez_mint_everything")


# Startup

@pytest.fixture
def bad_network_env(monkeypatch):
    for name in ("LOYALTEEZ_BRAND_ID", "MCP_TRANSPORT", "MCP_PORT", "LOYALTEEZ_HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOYALTEEZ_NETWORK", "staging")
    return monkeypatch


def test_import_does_not_read_configuration(bad_network_env):
    bad_network_env.delitem(vars(server_module), "mcp", raising=False)

    importlib.reload(server_module)

    with pytest.raises(ConfigError, match="Invalid LOYALTEEZ_NETWORK 'staging'"):
        server_module.mcp


def test_main_prefers_cli_network(bad_network_env):
    started = {}

    class FakeServer:
        def run(self, **kwargs):
            started["run"] = kwargs

    def fake_create_server(config):
        started["config"] = config
        return FakeServer()

    bad_network_env.setattr(server_module, "create_server", fake_create_server)
    bad_network_env.setattr(sys, "argv", ["loyalteez-mcp", "--network", "testnet"])

    server_module.main()

    assert started["config"].network == "testnet"
    assert started["run"] == {"transport": "stdio"}


def test_module_server_is_built_on_first_access(monkeypatch):
    monkeypatch.delenv("LOYALTEEZ_NETWORK", raising=False)
    monkeypatch.setenv("LOYALTEEZ_BRAND_ID", BRAND_ID)
    monkeypatch.delitem(vars(server_module), "mcp", raising=False)

    first = server_module.mcp
    try:
        assert isinstance(first, FastMCP)
        assert server_module.mcp is first
    finally:
        del server_module.mcp
