import re

import httpx
import pytest

from .test_utils import (
    BRAND_ID,
    OTHER_BRAND_ID,
    assert_tool_error,
    request_body,
    tool_json,
    tool_text,
)

TRACK_PATH = "/loyalteez-api/manual-event"
TRACK_RESPONSE = {
    "success": True,
    "rewardAmount": 10,
    "eventId": "evt_123",
    "walletAddress": "0x2222222222222222222222222222222222222222",
    "transactionHash": "0xabc",
}


@pytest.mark.asyncio
async def test_all_tools_registered(client):
    names = {tool.name for tool in await client.list_tools()}
    assert {
        "loyalteez_create_event",
        "loyalteez_create_events_batch",
        "loyalteez_track_event",
        "loyalteez_get_event_config",
        "loyalteez_bulk_events",
        "loyalteez_resolve_user",
        "loyalteez_get_user_balance",
        "loyalteez_check_eligibility",
        "loyalteez_get_user_stats",
        "loyalteez_streak_checkin",
        "loyalteez_get_streak_status",
        "loyalteez_claim_streak_milestone",
        "loyalteez_get_leaderboard",
        "loyalteez_update_leaderboard_stats",
        "loyalteez_log_activity",
        "loyalteez_calculate_reward",
        "loyalteez_relay_transaction",
        "loyalteez_create_drop",
        "loyalteez_claim_drop",
        "loyalteez_process_third_party_event",
        "loyalteez_list_perks",
        "loyalteez_check_perk_eligibility",
        "loyalteez_redeem_perk",
        "loyalteez_get_user_achievements",
        "loyalteez_update_achievement_progress",
        "loyalteez_design_program",
        "loyalteez_health_check",
        "loyalteez_validate_webhook",
        "loyalteez_webhook_example",
    } <= names


# Track event

@pytest.mark.asyncio
async def test_track_event_with_platform_identity(api, client):
    api.route("POST", TRACK_PATH, TRACK_RESPONSE)

    result = await client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm",
        "user_identifier": {"platform": "discord", "platform_user_id": "42"},
        "brand_id": "0xABCDEF1234567890ABCDEF1234567890ABCDEF12",
    }, raise_on_error=False)

    data = tool_json(result)
    assert data == {
        "success": True,
        "reward": 10,
        "newBalance": 0,
        "eventId": "evt_123",
        "walletAddress": "0x2222222222222222222222222222222222222222",
        "transactionHash": "0xabc",
    }
    body = api.last_body()
    assert body["brandId"] == BRAND_ID
    assert body["userEmail"] == "discord_42@loyalteez.app"
    assert body["userIdentifier"] == "discord_42@loyalteez.app"
    assert body["eventType"] == "daily_gm"


@pytest.mark.asyncio
async def test_track_event_passes_optional_fields(api, client):
    api.route("POST", TRACK_PATH, TRACK_RESPONSE)

    await client.call_tool("loyalteez_track_event", {
        "event_type": "newsletter_subscribe",
        "user_identifier": {"email": "user@example.com"},
        "metadata": {"source": "footer"},
        "domain": "example.com",
        "source_url": "https://example.com/news",
    })

    body = api.last_body()
    assert body["metadata"] == {"source": "footer"}
    assert body["domain"] == "example.com"
    assert body["sourceUrl"] == "https://example.com/news"


@pytest.mark.asyncio
async def test_track_event_uses_configured_brand(api, client):
    api.route("POST", TRACK_PATH, TRACK_RESPONSE)

    await client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm",
        "user_identifier": {"email": "user@example.com"},
    })

    assert api.last_body()["brandId"] == BRAND_ID


@pytest.mark.asyncio
async def test_track_event_explicit_brand_overrides_default(api, client):
    api.route("POST", TRACK_PATH, TRACK_RESPONSE)

    await client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm",
        "user_identifier": {"email": "user@example.com"},
        "brand_id": OTHER_BRAND_ID,
    })

    assert api.last_body()["brandId"] == OTHER_BRAND_ID


@pytest.mark.asyncio
async def test_track_event_without_any_brand(api, unbranded_client):
    result = await unbranded_client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm",
        "user_identifier": {"email": "user@example.com"},
    }, raise_on_error=False)

    assert_tool_error(result, "BrandId is required but not provided", "LOYALTEEZ_BRAND_ID")
    assert api.requests == []


@pytest.mark.asyncio
async def test_track_event_rejects_bad_event_type(api, client):
    result = await client.call_tool("loyalteez_track_event", {
        "event_type": "daily-gm!",
        "user_identifier": {"email": "user@example.com"},
    }, raise_on_error=False)

    assert_tool_error(result, "Invalid input while tracking event", "alphanumeric characters and underscores")
    assert api.requests == []


@pytest.mark.asyncio
async def test_track_event_rejects_trailing_newlines(api, client):
    result = await client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm\n",
        "user_identifier": {"email": "user@example.com"},
        "brand_id": BRAND_ID + "\n",
    }, raise_on_error=False)

    assert_tool_error(result, "Invalid input while tracking event")
    assert api.requests == []


@pytest.mark.asyncio
async def test_track_event_rejects_incomplete_identifier(api, client):
    result = await client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm",
        "user_identifier": {"platform": "discord"},
    }, raise_on_error=False)

    assert_tool_error(result, "Either email or platform+platformUserId must be provided")
    assert api.requests == []


@pytest.mark.asyncio
async def test_track_event_surfaces_remote_error(api, client):
    api.route("POST", TRACK_PATH, {"error": "Event type not configured for this brand"}, status_code=400)

    result = await client.call_tool("loyalteez_track_event", {
        "event_type": "unknown_event",
        "user_identifier": {"email": "user@example.com"},
    }, raise_on_error=False)

    assert_tool_error(result, "Event type not configured for this brand")


@pytest.mark.asyncio
async def test_track_event_duplicate_is_not_retried(api, client):
    api.route("POST", TRACK_PATH, {"error": "Duplicate event"}, status_code=409)

    result = await client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm",
        "user_identifier": {"email": "user@example.com"},
    }, raise_on_error=False)

    assert_tool_error(result, "HTTP 409", "Duplicate event")
    assert len(api.requests) == 1


@pytest.mark.asyncio
async def test_track_event_timeout(api, client):
    api.route("POST", TRACK_PATH, raises=httpx.ReadTimeout)

    result = await client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm",
        "user_identifier": {"email": "user@example.com"},
    }, raise_on_error=False)

    assert_tool_error(result, "Request timeout while tracking event")


@pytest.mark.asyncio
async def test_track_event_malformed_response(api, client):
    api.route("POST", TRACK_PATH, {"rewardAmount": 10})

    result = await client.call_tool("loyalteez_track_event", {
        "event_type": "daily_gm",
        "user_identifier": {"email": "user@example.com"},
    }, raise_on_error=False)

    assert_tool_error(result, "Unexpected response while tracking event", "success")


# Event scaffolding

@pytest.mark.asyncio
async def test_create_event_is_local(api, client):
    result = await client.call_tool("loyalteez_create_event", {
        "event": {
            "name": "Helpful Answer",
            "description": "Recognized for helping another member",
            "default_reward": 50,
            "max_claims_per_user": 100,
            "cooldown_hours": 1,
            "event_type": "helpful_answer",
        },
    })

    data = tool_json(result)
    assert data["success"] is True
    assert data["event"]["eventType"] == "helpful_answer"
    assert data["event"]["defaultReward"] == 50
    assert data["event"]["id"].startswith(f"custom_{BRAND_ID}_")
    assert 'event_type: "helpful_answer"' in data["trackingCode"]
    assert data["webhookEndpoint"] == "https://api.loyalteez.app/loyalteez-api/manual-event"
    assert api.requests == []


@pytest.mark.asyncio
async def test_create_event_generates_event_type(client):
    result = await client.call_tool("loyalteez_create_event", {
        "event": {
            "name": "Bug Report",
            "description": "Reported a reproducible bug",
            "default_reward": 100,
            "max_claims_per_user": 10,
        },
    })

    event_type = tool_json(result)["event"]["eventType"]
    assert event_type.startswith(f"custom_{BRAND_ID[2:10]}_")


@pytest.mark.asyncio
async def test_create_event_testnet_endpoint(make_client):
    async with make_client(network="testnet") as testnet:
        result = await testnet.call_tool("loyalteez_create_event", {
            "event": {
                "name": "Bug Report",
                "description": "Reported a reproducible bug",
                "default_reward": 100,
                "max_claims_per_user": 10,
            },
        })

    assert tool_json(result)["webhookEndpoint"] == "https://api.loyalteez.xyz/loyalteez-api/manual-event"


@pytest.mark.asyncio
async def test_create_event_invalid_definition(client):
    result = await client.call_tool("loyalteez_create_event", {
        "event": {"name": "x", "description": "short", "default_reward": -1, "max_claims_per_user": 1},
    }, raise_on_error=False)

    assert_tool_error(result, "Invalid input while creating event")


@pytest.mark.asyncio
async def test_create_events_batch_reports_failures(api, client):
    result = await client.call_tool("loyalteez_create_events_batch", {
        "platform": "discord",
        "events": [
            {"name": "Daily GM", "reward": 5, "max_claims": 1, "cooldown_hours": 24},
            {"name": "Broken", "reward": 0, "max_claims": 1},
        ],
    })

    data = tool_json(result)
    assert len(data["created"]) == 1
    created = data["created"][0]
    assert created["name"] == "Daily GM"
    assert created["reward"] == 5
    assert created["eventType"].startswith("discord_daily_gm_")
    assert len(data["failed"]) == 1
    assert data["failed"][0]["event"] == "Broken"
    assert created["eventType"] in data["implementationCode"]
    assert "discord.js" in data["implementationCode"]
    assert api.requests == []


@pytest.mark.asyncio
async def test_create_events_batch_shortens_long_names(client):
    result = await client.call_tool("loyalteez_create_events_batch", {
        "platform": "telegram",
        "events": [{"name": "Completed the onboarding tutorial for new members", "reward": 20, "max_claims": 1}],
    })

    data = tool_json(result)
    assert data["failed"] == []
    event_type = data["created"][0]["eventType"]
    assert len(event_type) <= 50
    assert event_type.startswith("telegram_completed_the_onboar")
    assert re.fullmatch(r"[a-z0-9_]+_\d{13}", event_type)


@pytest.mark.asyncio
async def test_create_events_batch_requires_events(client):
    result = await client.call_tool("loyalteez_create_events_batch", {
        "platform": "web",
        "events": [],
    }, raise_on_error=False)

    assert_tool_error(result, "At least one event must be provided")


# Event config and bulk events

@pytest.mark.asyncio
async def test_get_event_config(api, client):
    config = {"events": [{"eventType": "daily_gm", "reward": 10, "maxClaims": 1, "cooldownHours": 24}]}
    api.route("GET", "/loyalteez-api/event-config", config)

    result = await client.call_tool("loyalteez_get_event_config", {})

    assert tool_json(result) == config
    assert api.last_request.url.params["brandId"] == BRAND_ID


@pytest.mark.asyncio
async def test_bulk_events(api, client):
    api.route("POST", "/loyalteez-api/bulk-events", {"processed": 2, "results": []})

    result = await client.call_tool("loyalteez_bulk_events", {
        "events": [
            {"event_type": "daily_gm", "user_email": "a@example.com"},
            {
                "event_type": "daily_gm",
                "user_identifier": {"platform": "telegram", "platform_user_id": "7"},
                "brand_id": OTHER_BRAND_ID,
            },
        ],
    })

    assert tool_json(result)["processed"] == 2
    events = api.last_body()["events"]
    assert events[0] == {"brandId": BRAND_ID, "eventType": "daily_gm", "userEmail": "a@example.com"}
    assert events[1]["brandId"] == OTHER_BRAND_ID
    assert events[1]["userEmail"] == "telegram_7@loyalteez.app"


@pytest.mark.asyncio
async def test_bulk_events_limit(api, client):
    events = [{"event_type": "daily_gm", "user_email": f"u{i}@example.com"} for i in range(101)]

    result = await client.call_tool("loyalteez_bulk_events", {"events": events}, raise_on_error=False)

    assert_tool_error(result, "At most 100 events", "got 101")
    assert api.requests == []


@pytest.mark.asyncio
async def test_bulk_events_names_the_invalid_event(api, client):
    result = await client.call_tool("loyalteez_bulk_events", {
        "events": [
            {"event_type": "daily_gm", "user_email": "a@example.com"},
            {"event_type": "bad type", "user_email": "b@example.com"},
        ],
    }, raise_on_error=False)

    assert_tool_error(result, "events[1]")
    assert api.requests == []


# Identity

@pytest.mark.asyncio
async def test_resolve_user_pregenerates_wallet(api, client):
    api.route("POST", "/loyalteez-api/pregenerate-user", {
        "wallet_address": "0x3333333333333333333333333333333333333333",
        "created_new": False,
    })

    result = await client.call_tool("loyalteez_resolve_user", {
        "platform": "discord",
        "platform_user_id": "123456789",
        "platform_username": "gm_enjoyer",
    })

    assert tool_json(result) == {
        "loyalteezEmail": "discord_123456789@loyalteez.app",
        "walletAddress": "0x3333333333333333333333333333333333333333",
        "isNew": False,
        "balance": 0,
    }
    assert request_body(api.last_request) == {
        "brand_id": BRAND_ID,
        "oauth_provider": "discord",
        "oauth_user_id": "123456789",
        "oauth_username": "gm_enjoyer",
    }


@pytest.mark.asyncio
async def test_resolve_user_email_platform_skips_pregeneration(api, client):
    result = await client.call_tool("loyalteez_resolve_user", {
        "platform": "email",
        "platform_user_id": "newsletter-reader",
    })

    data = tool_json(result)
    assert data["loyalteezEmail"] == "email_newsletter-reader@loyalteez.app"
    assert data["walletAddress"] == "0x0000000000000000000000000000000000000000"
    assert data["isNew"] is True
    assert api.requests == []


@pytest.mark.asyncio
async def test_resolve_user_unknown_platform(client):
    result = await client.call_tool("loyalteez_resolve_user", {
        "platform": "myspace",
        "platform_user_id": "1",
    }, raise_on_error=False)

    assert_tool_error(result, "Invalid platform 'myspace'")


@pytest.mark.asyncio
async def test_resolve_user_pregeneration_failure_propagates(api, client):
    api.route("POST", "/loyalteez-api/pregenerate-user", {"error": "Brand not authorized"}, status_code=403)

    result = await client.call_tool("loyalteez_resolve_user", {
        "platform": "telegram",
        "platform_user_id": "99",
    }, raise_on_error=False)

    assert_tool_error(result, "Brand not authorized")


# User data

@pytest.mark.asyncio
async def test_get_user_balance(api, client):
    api.route("POST", "/loyalteez-api/user-balance", {"balance": 1200, "history": []})

    result = await client.call_tool("loyalteez_get_user_balance", {
        "user_email": "user@example.com",
        "include_history": True,
        "history_limit": 5,
    })

    assert tool_json(result)["balance"] == 1200
    assert api.last_body() == {
        "brandId": BRAND_ID,
        "userEmail": "user@example.com",
        "includeHistory": True,
        "historyLimit": 5,
    }


@pytest.mark.asyncio
async def test_get_user_balance_unavailable_gives_guidance(api, client):
    api.route("POST", "/loyalteez-api/user-balance", {"error": "Not Found"}, status_code=404)

    result = await client.call_tool("loyalteez_get_user_balance", {
        "user_email": "user@example.com",
    }, raise_on_error=False)

    assert_tool_error(result, "Endpoint unavailable", "loyalteez_resolve_user", "balanceOf()")


@pytest.mark.asyncio
async def test_get_user_balance_history_limit(api, client):
    result = await client.call_tool("loyalteez_get_user_balance", {
        "user_email": "user@example.com",
        "history_limit": 51,
    }, raise_on_error=False)

    assert_tool_error(result, "history_limit must be between 1 and 50")
    assert api.requests == []


@pytest.mark.asyncio
async def test_check_eligibility(api, client):
    api.route("POST", "/loyalteez-api/check-eligibility", {"eligible": False, "reason": "cooldown"})

    result = await client.call_tool("loyalteez_check_eligibility", {
        "event_type": "daily_gm",
        "user_email": "discord_42@loyalteez.app",
    })

    assert tool_json(result) == {"eligible": False, "reason": "cooldown"}
    assert api.last_body()["eventType"] == "daily_gm"


@pytest.mark.asyncio
async def test_get_user_stats_unavailable(api, client):
    api.route("GET", f"/user-stats/{BRAND_ID}/discord_42@loyalteez.app", {"error": "nope"}, status_code=501)

    result = await client.call_tool("loyalteez_get_user_stats", {
        "user_identifier": "discord_42@loyalteez.app",
    }, raise_on_error=False)

    assert "loyalteez_get_streak_status" in tool_text(result)
    assert result.is_error
