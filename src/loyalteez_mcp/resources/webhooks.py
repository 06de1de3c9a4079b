# resources/webhooks.py
"""Webhook event types, payload examples and signature details."""

from fastmcp import FastMCP

from ..runtime import Runtime
from . import to_json


def _webhook_event(event_type: str, description: str, event_id: str, created: str, data: dict, example: dict) -> dict:
    return {
        "type": event_type,
        "description": description,
        "data": data,
        "example": {
            "id": event_id,
            "type": event_type,
            "created": created,
            "data": {**example, "timestamp": created},
        },
    }


WEBHOOK_EVENTS = {
    "eventTypes": [
        _webhook_event(
            "reward.distributed",
            "Fired when LTZ is distributed to a user",
            "evt_1234567890",
            "2026-01-15T10:30:00Z",
            {
                "userEmail": "string",
                "amount": "number",
                "eventType": "string",
                "transactionHash": "string",
                "timestamp": "string",
            },
            {
                "userEmail": "user@example.com",
                "amount": 100,
                "eventType": "account_creation",
                "transactionHash": "0x1234...5678",
            },
        ),
        _webhook_event(
            "perk.redeemed",
            "Fired when a user redeems a perk",
            "evt_1234567891",
            "2026-01-15T10:35:00Z",
            {
                "userEmail": "string",
                "perkId": "string",
                "perkName": "string",
                "redemptionCode": "string",
                "timestamp": "string",
            },
            {
                "userEmail": "user@example.com",
                "perkId": "perk_abc123",
                "perkName": "10% Discount Code",
                "redemptionCode": "SAVE10",
            },
        ),
        _webhook_event(
            "streak.milestone",
            "Fired when a user reaches a streak milestone",
            "evt_1234567892",
            "2026-01-15T10:40:00Z",
            {
                "userEmail": "string",
                "milestoneDays": "number",
                "bonusAmount": "number",
                "timestamp": "string",
            },
            {
                "userEmail": "user@example.com",
                "milestoneDays": 7,
                "bonusAmount": 100,
            },
        ),
        _webhook_event(
            "achievement.unlocked",
            "Fired when a user unlocks an achievement",
            "evt_1234567893",
            "2026-01-15T10:45:00Z",
            {
                "userEmail": "string",
                "achievementId": "string",
                "achievementName": "string",
                "timestamp": "string",
            },
            {
                "userEmail": "user@example.com",
                "achievementId": "ach_xyz789",
                "achievementName": "First Purchase",
            },
        ),
    ],
    "signatureVerification": {
        "algorithm": "HMAC-SHA256",
        "header": "X-Loyalteez-Signature",
        "description": (
            "All webhooks include a signature in the X-Loyalteez-Signature header. "
            "Always verify this signature before processing events."
        ),
        "example": {
            "header": "X-Loyalteez-Signature: abc123def456...",
            "verification": "HMAC-SHA256(webhook_secret, raw_body)",
        },
    },
    "bestPractices": [
        "Always verify webhook signatures",
        "Use HTTPS for webhook endpoints",
        "Implement idempotency (store processed webhook IDs)",
        "Add rate limiting to webhook endpoints",
        "Validate webhook payload structure",
        "Handle errors gracefully",
        "Log all webhook events for debugging",
    ],
}


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://webhooks/events",
        name="Webhook Event Types",
        description="Complete reference of webhook event types and their payloads",
        mime_type="application/json",
    )
    def webhook_events() -> str:
        return to_json(WEBHOOK_EVENTS)
