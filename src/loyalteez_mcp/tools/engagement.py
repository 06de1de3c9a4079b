# tools/engagement.py
"""Streaks, leaderboards, activity logging and reward calculation (shared services)."""

import json
from typing import Annotated, List, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..validation import LEADERBOARD_PERIODS, ValidationError, platform_email, validate_choice

STREAK_MILESTONES = (7, 30, 100, 365)
ACTIVITY_TYPES = ("voice", "message", "reaction", "presence")

BRAND_ID_DESCRIPTION = "Your brand wallet address. If not provided, uses LOYALTEEZ_BRAND_ID."
USER_IDENTIFIER_DESCRIPTION = "User identifier, usually the Loyalteez email (e.g., 'discord_123@loyalteez.app')"


def _require(value, label: str):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label} must not be empty")
    return value


def _require_positive(value, label: str):
    if value is None or value <= 0:
        raise ValidationError(f"{label} must be a positive number")
    return value


def register(mcp: FastMCP, runtime: Runtime) -> None:

    # ----------------------- Streaks ------------------------------

    @mcp.tool(
        name="loyalteez_streak_checkin",
        tags={"engagement", "streaks", "write"}
    )
    async def streak_checkin(
        ctx: Context,
        user_id: Annotated[
            str,
            {"description": "Platform user ID, or a full email address (used as-is when it contains '@')"}
        ],
        platform: Annotated[str, {"description": "Platform: 'discord' | 'telegram' | 'web' | etc."}],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Process a daily streak check-in.

        Tracks consecutive daily activity and applies bonus multipliers and
        milestones. A bare platform user ID is turned into
        {platform}_{user_id}@loyalteez.app.

        Returns JSON with success, streak, reward, nextMilestone.

        See also: loyalteez://docs/shared-services/streak-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            _require(user_id, "user_id")
            _require(platform, "platform")
            user_identifier = user_id if "@" in user_id else platform_email(platform, user_id)

            result = await runtime.client.record_streak_activity(
                brand_id=brand,
                user_identifier=user_identifier,
                platform=platform,
                streak_type="daily",
                ctx=ctx,
            )
            return json.dumps({
                "success": result.success,
                "streak": result.streak,
                "reward": result.reward,
                "nextMilestone": result.next_milestone,
            }, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "processing streak check-in", ctx)

    @mcp.tool(
        name="loyalteez_get_streak_status",
        tags={"engagement", "streaks", "read"}
    )
    async def get_streak_status(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        streak_type: Annotated[str, {"description": "Streak type (default 'daily')"}] = "daily",
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Get a user's current streak: length, last check-in, and the next milestone.

        See also: loyalteez://docs/shared-services/streak-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            result = await runtime.client.get_streak_status(
                brand_id=brand,
                user_identifier=_require(user_identifier, "user_identifier"),
                streak_type=streak_type or "daily",
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "getting streak status", ctx)

    @mcp.tool(
        name="loyalteez_claim_streak_milestone",
        tags={"engagement", "streaks", "write"}
    )
    async def claim_streak_milestone(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        platform: Annotated[str, {"description": "Platform the user is on"}],
        milestone_days: Annotated[int, {"description": "Milestone to claim: 7, 30, 100 or 365 days"}],
        streak_type: Annotated[str, {"description": "Streak type (default 'daily')"}] = "daily",
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Claim the bonus for reaching a streak milestone.

        Default bonuses: 7 days -> 100 LTZ, 30 -> 500, 100 -> 2000, 365 -> 10000.
        The service refuses milestones the user has not reached or already claimed.

        See also: loyalteez://docs/shared-services/streak-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            validate_choice(milestone_days, STREAK_MILESTONES, "milestone_days")
            result = await runtime.client.claim_streak_milestone(
                brand_id=brand,
                user_identifier=_require(user_identifier, "user_identifier"),
                platform=_require(platform, "platform"),
                milestone_days=milestone_days,
                streak_type=streak_type or "daily",
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "claiming streak milestone", ctx)

    # ----------------------- Leaderboards ------------------------------

    @mcp.tool(
        name="loyalteez_get_leaderboard",
        tags={"engagement", "leaderboard", "read"}
    )
    async def get_leaderboard(
        ctx: Context,
        metric: Annotated[
            str,
            {"description": "Metric to rank by: 'ltz_earned' | 'streak' | 'events_completed' | 'referrals' | custom"}
        ] = "ltz_earned",
        period: Annotated[
            str,
            {"description": "Time period: 'daily' | 'weekly' | 'monthly' | 'all_time'"}
        ] = "all_time",
        platform: Annotated[Optional[str], {"description": "Filter by platform (optional)"}] = None,
        limit: Annotated[int, {"description": "Number of results (default: 10)"}] = 10,
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Get a ranked leaderboard by any metric, optionally filtered by platform.

        Returns JSON with rankings and userRank.

        See also: loyalteez://docs/shared-services/leaderboard-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            validate_choice(period, LEADERBOARD_PERIODS, "period")
            _require(metric, "metric")
            if limit is None or limit < 1:
                raise ValidationError("limit must be a positive integer")

            result = await runtime.client.get_leaderboard(
                brand_id=brand,
                metric=metric,
                period=period,
                platform=platform,
                limit=limit,
                ctx=ctx,
            )
            return json.dumps({
                "rankings": result.rankings,
                "userRank": result.user_rank,
            }, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "fetching leaderboard", ctx)

    @mcp.tool(
        name="loyalteez_update_leaderboard_stats",
        tags={"engagement", "leaderboard", "write"}
    )
    async def update_leaderboard_stats(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        platform: Annotated[str, {"description": "Platform the user is on"}],
        ltz_amount: Annotated[float, {"description": "LTZ amount just earned (positive)"}],
        claim_type: Annotated[
            Optional[str],
            {"description": "Type of claim/event (e.g., 'daily_checkin', 'purchase')"}
        ] = None,
        display_name: Annotated[Optional[str], {"description": "User's display name for the leaderboard"}] = None,
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Record earnings on the leaderboard after a reward was paid out.

        See also: loyalteez://docs/shared-services/leaderboard-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            result = await runtime.client.update_leaderboard_stats(
                brand_id=brand,
                user_identifier=_require(user_identifier, "user_identifier"),
                platform=_require(platform, "platform"),
                ltz_amount=_require_positive(ltz_amount, "ltz_amount"),
                claim_type=claim_type,
                display_name=display_name,
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "updating leaderboard stats", ctx)

    # ----------------------- Activity & rewards ------------------------------

    @mcp.tool(
        name="loyalteez_log_activity",
        tags={"engagement", "activity", "write"}
    )
    async def log_activity(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        platform: Annotated[str, {"description": "Platform the activity happened on"}],
        activity_type: Annotated[str, {"description": "Activity type: 'voice' | 'message' | 'reaction' | 'presence'"}],
        duration_minutes: Annotated[Optional[float], {"description": "Duration in minutes (voice, presence)"}] = None,
        count: Annotated[Optional[int], {"description": "Number of occurrences (messages, reactions)"}] = None,
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Log community activity (voice time, messages, reactions, presence) for activity-based rewards.

        See also: loyalteez://docs/shared-services/activity-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            validate_choice(activity_type, ACTIVITY_TYPES, "activity_type")
            result = await runtime.client.log_activity(
                brand_id=brand,
                user_identifier=_require(user_identifier, "user_identifier"),
                platform=_require(platform, "platform"),
                activity_type=activity_type,
                duration_minutes=duration_minutes,
                count=count,
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "logging activity", ctx)

    @mcp.tool(
        name="loyalteez_calculate_reward",
        tags={"engagement", "rewards", "read"}
    )
    async def calculate_reward(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        platform: Annotated[str, {"description": "Platform the user is on"}],
        base_reward: Annotated[float, {"description": "Base LTZ reward before bonuses (positive)"}],
        event_type: Annotated[str, {"description": "Event the reward is for"}],
        roles: Annotated[Optional[List[str]], {"description": "User's platform roles (e.g., Discord role IDs)"}] = None,
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Calculate the final reward after tier, role and streak bonuses.

        Role bonuses are multipliers (1.0 to 5.0) or flat bonuses (0 to 1,000 LTZ)
        configured per Discord role. Nothing is paid out by this call.

        See also: loyalteez://docs/shared-services/tier-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            result = await runtime.client.calculate_reward(
                brand_id=brand,
                user_identifier=_require(user_identifier, "user_identifier"),
                platform=_require(platform, "platform"),
                base_reward=_require_positive(base_reward, "base_reward"),
                event_type=_require(event_type, "event_type"),
                roles=roles,
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "calculating reward", ctx)
