# resources/shared_services.py
"""Reference for the shared gamification services (streaks, leaderboards, achievements, perks)."""

from typing import Any, Dict

from fastmcp import FastMCP

from ..runtime import Runtime
from ..tools.achievements import ACHIEVEMENT_TYPES
from ..tools.engagement import STREAK_MILESTONES
from ..validation import LEADERBOARD_PERIODS, PLATFORM_EMAIL_DOMAIN
from . import to_json

MILESTONE_BONUSES = {7: 100, 30: 500, 100: 2000, 365: 10000}


def shared_services_reference(base_url: str) -> Dict[str, Any]:
    return {
        "baseUrl": base_url,
        "userIdentifierFormat": f"{{platform}}_{{userId}}@{PLATFORM_EMAIL_DOMAIN}",
        "services": {
            "streak": {
                "endpoints": {
                    "POST /streak/record-activity": "Record daily check-in, extend streak",
                    "POST /streak/claim-milestone": "Claim milestone bonus (7, 30, 100, 365 days)",
                    "GET /streak/status/:brandId/:userIdentifier": "Get current streak status",
                },
                "defaultMilestones": [
                    {"days": days, "bonus": MILESTONE_BONUSES[days]} for days in STREAK_MILESTONES
                ],
                "gracePeriodHours": 36,
            },
            "leaderboard": {
                "endpoints": {
                    "GET /leaderboard/:brandId": "Get ranked leaderboard",
                    "POST /leaderboard/update-stats": "Update user stats after reward",
                },
                "metrics": ["ltz_earned", "streak", "events_completed", "referrals"],
                "periods": list(LEADERBOARD_PERIODS),
            },
            "achievements": {
                "endpoints": {
                    "GET /achievements/:brandId/:userIdentifier": "Get user achievements",
                    "POST /achievements/update-progress": "Update achievement progress",
                },
                "achievementTypes": list(ACHIEVEMENT_TYPES),
            },
            "perks": {
                "endpoints": {
                    "GET /perks/:brandId": "Get available perks",
                    "POST /perks/redeem": "Redeem a perk",
                },
                "categories": ["discount", "exclusive", "merch", "digital", "experience", "general"],
            },
            "roleBonuses": {
                "description": "Discord role-based reward multipliers and flat bonuses",
                "multiplierRange": "1.0 to 5.0 (1.0 = no bonus, 2.0 = double rewards)",
                "flatBonusRange": "0 to 1,000 LTZ per reward",
                "stackingModes": ["multiplicative", "additive", "highest_only"],
                "note": (
                    "Role bonuses apply automatically to all rewards earned by users with that role. "
                    "Configure via Discord /config role-bonus or Partner Portal."
                ),
            },
        },
        "healthCheck": "GET /health",
    }


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://shared-services/endpoints",
        name="Shared Services API Reference",
        description="Gamification services: Streaks, Leaderboards, Achievements, Perks",
        mime_type="application/json",
    )
    def shared_services_endpoints() -> str:
        return to_json(shared_services_reference(runtime.base_url("services")))
