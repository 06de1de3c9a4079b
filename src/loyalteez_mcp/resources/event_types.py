# resources/event_types.py
"""Standard event types and their typical rewards."""

from fastmcp import FastMCP

from ..runtime import Runtime
from . import to_json


def _event(event_type: str, description: str, typical_reward: str, frequency: str) -> dict:
    return {
        "type": event_type,
        "description": description,
        "typicalReward": typical_reward,
        "frequency": frequency,
    }


EVENT_TYPES = {
    "standardEvents": [
        _event("account_creation", "User creates an account", "100-500 LTZ", "once_per_user"),
        _event("email_verification", "User verifies email address", "50-200 LTZ", "once_per_user"),
        _event("purchase", "User completes a purchase", "1-10 LTZ per dollar", "per_transaction"),
        _event("referral", "User refers a friend who signs up", "500-2000 LTZ", "per_referral"),
        _event("newsletter_subscribe", "User subscribes to newsletter", "25-100 LTZ", "once_per_user"),
        _event("review_submission", "User submits a product review", "50-200 LTZ", "per_review"),
        _event("profile_completion", "User completes their profile", "100-300 LTZ", "once_per_user"),
        _event("form_submit", "Generic form submission", "10-50 LTZ", "configurable"),
    ],
    "customEvents": {
        "description": "Create custom events in Partner Portal with any name and reward amount",
        "idFormat": "custom_{randomId}_{timestamp}",
        "detectionMethods": ["url_pattern", "css_selector", "form_submit", "webhook"],
    },
}


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://events/standard",
        name="Standard Event Types",
        description="Pre-defined event types and their typical reward amounts",
        mime_type="application/json",
    )
    def standard_events() -> str:
        return to_json(EVENT_TYPES)
