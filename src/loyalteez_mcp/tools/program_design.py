# tools/program_design.py
"""
Loyalty program design.

`generate_program_design` turns a program context into an advisory program:
event templates picked by a fixed rule table, a name, a philosophy sentence,
optional tiers and a streak configuration. Nothing is sent to the Loyalteez
API; the result is scaffolding the caller can then create with
loyalteez_create_event.
"""

import json
from typing import Annotated, Any, Dict, List, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..models import EventTemplate, ProgramDesign, StreakConfig, StreakMultiplier, Tier
from ..runtime import Runtime
from ..templates import program_targets, render_program_integration
from ..validation import Budget, DetectionMethod, ProgramContext, validate_program_context

DEFAULT_BUDGET = Budget(monthly_ltz=50000, avg_reward=25)
RELEVANT_DOCS_LIMIT = 5

TIERS = [
    Tier(name="Bronze", min_points=0, benefits=["Access to basic perks", "Entry-level rewards"]),
    Tier(name="Silver", min_points=1000, benefits=["Exclusive perks", "Priority support", "Bonus multipliers"]),
    Tier(name="Gold", min_points=5000, benefits=["Premium perks", "VIP access", "Highest multipliers"]),
]

STREAK_MULTIPLIERS = [
    StreakMultiplier(days=7, multiplier=1.25),
    StreakMultiplier(days=14, multiplier=1.5),
    StreakMultiplier(days=30, multiplier=2.0),
]

PHILOSOPHY = (
    ("reward_quality", "Rewarding quality contributions and helpful behavior"),
    ("increase_engagement", "Encouraging daily engagement and participation"),
    ("drive_purchases", "Incentivizing purchases and customer loyalty"),
)
DEFAULT_PHILOSOPHY = "Building a loyal and engaged community"

PROGRAM_NAMES = (
    ("discord", "Community Loyalty Program"),
    ("telegram", "Telegram Rewards Program"),
    ("ecommerce", "Customer Loyalty Program"),
    ("gaming", "Gaming Rewards Program"),
)
DEFAULT_PROGRAM_NAME = "Loyalty Program"


def _scaled(budget: Budget, factor: float) -> int:
    # Rewards are whole LTZ and never drop below 1
    return max(int(budget.avg_reward * factor), 1)


def _daily_checkin(budget: Budget, description: str, requires_email: bool) -> EventTemplate:
    return EventTemplate(
        name="Daily Check-in",
        description=description,
        category="engagement",
        default_reward=_scaled(budget, 0.4),
        max_claims_per_user=1,
        cooldown_hours=24,
        requires_email=requires_email,
    )


def generate_events(app_type: str, goals: List[str], platforms: List[str], budget: Budget) -> List[EventTemplate]:
    events = []

    if "increase_engagement" in goals or "engagement" in goals:
        events.append(_daily_checkin(budget, "Daily check-in reward", requires_email=True))

    if "discord" in platforms and ("reward_quality" in goals or "quality" in goals):
        events.append(EventTemplate(
            name="Helpful Answer",
            description="Recognized for helping another member",
            category="quality",
            default_reward=_scaled(budget, 2),
            max_claims_per_user=100,
            cooldown_hours=1,
            requires_email=False,
            detection_methods=[
                DetectionMethod(method="discord_interaction", config={"command": "/reward helpful_answer"})
            ],
        ))

    if "telegram" in platforms:
        events.append(_daily_checkin(budget, "Daily /checkin command", requires_email=False))

    if ("ecommerce" in app_type or "shopify" in platforms) and ("drive_purchases" in goals or "purchases" in goals):
        events.append(EventTemplate(
            name="First Purchase",
            description="Customer's first order",
            category="commerce",
            default_reward=_scaled(budget, 8),
            max_claims_per_user=1,
            cooldown_hours=0,
            requires_email=True,
        ))

    if "gaming" in app_type:
        events.append(EventTemplate(
            name="Daily Quest",
            description="Completed daily quest",
            category="engagement",
            default_reward=_scaled(budget, 0.6),
            max_claims_per_user=3,
            cooldown_hours=24,
            requires_email=False,
        ))

    return events


def program_name(app_type: str, audience: Optional[str] = None) -> str:
    if audience:
        return f"{audience[0].upper()}{audience[1:]} Loyalty Program"
    for keyword, name in PROGRAM_NAMES:
        if keyword in app_type:
            return name
    return DEFAULT_PROGRAM_NAME


def program_philosophy(goals: List[str]) -> str:
    parts = [sentence for goal, sentence in PHILOSOPHY if goal in goals]
    return ". ".join(parts) or DEFAULT_PHILOSOPHY


def generate_program_design(context: ProgramContext) -> ProgramDesign:
    app_type = context.app_type.lower()
    goals = [g.lower() for g in context.goals]
    platforms = [p.lower() for p in context.platforms]
    budget = context.budget or DEFAULT_BUDGET

    return ProgramDesign(
        name=program_name(app_type, context.audience),
        philosophy=program_philosophy(goals),
        events=generate_events(app_type, goals, platforms, budget),
        tiers=list(TIERS) if "tiers" in goals or "progression" in goals else [],
        streak_config=StreakConfig(
            base_reward=_scaled(budget, 0.4),
            multipliers=list(STREAK_MULTIPLIERS),
            grace_period=1,
        ),
        estimated_budget=budget,
    )


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_design_program",
        tags={"design", "read"}
    )
    async def design_program(
        ctx: Context,
        context: Annotated[
            Dict[str, Any],
            {"description": (
                "Program context: appType ('discord_community' | 'telegram_group' | 'ecommerce' | 'gaming' | 'saas'), "
                "goals (e.g., ['increase_engagement', 'drive_purchases', 'reward_quality', 'tiers']), "
                "platforms (e.g., ['discord', 'telegram', 'web']), optional budget {monthly_ltz, avg_reward}, "
                "audience and existingEvents"
            )}
        ],
        brand_id: Annotated[
            Optional[str],
            {"description": "Your brand wallet address. If not provided, uses LOYALTEEZ_BRAND_ID."}
        ] = None,
    ) -> str:
        """
        Design a complete loyalty program from context: event structure, tiers,
        streaks and implementation code for each target platform.

        The design is advisory. Create the events afterwards with
        loyalteez_create_event or loyalteez_create_events_batch.

        See also:
        - loyalteez://docs/architecture
        - loyalteez://docs/integrations/discord
        - loyalteez://docs/integrations/telegram
        - loyalteez://docs/guides/custom-events
        """
        try:
            runtime.brand_id(brand_id)
            program_context = validate_program_context(context)
            program = generate_program_design(program_context)

            api_base = runtime.base_url()
            implementation = {
                target: render_program_integration(target, program, api_base)
                for target in program_targets(program_context.platforms)
            }
            relevant = runtime.docs.search(program_context.app_type)[:RELEVANT_DOCS_LIMIT]

            return json.dumps({
                "program": program.model_dump(by_alias=True, exclude_none=True),
                "implementation": implementation,
                "documentation": {
                    "relevant": [{"uri": doc.uri, "title": doc.title} for doc in relevant],
                },
            }, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "designing program", ctx)
