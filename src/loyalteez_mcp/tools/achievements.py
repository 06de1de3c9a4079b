# tools/achievements.py
"""Achievement lookup and progress updates."""

import json
from typing import Annotated, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..validation import ValidationError, validate_choice

ACHIEVEMENT_TYPES = (
    "message_count",
    "voice_hours",
    "streak_days",
    "events_claimed",
    "gm_count",
    "level_reached",
    "ltz_earned",
    "custom",
)

BRAND_ID_DESCRIPTION = "Your brand wallet address. If not provided, uses LOYALTEEZ_BRAND_ID."
USER_IDENTIFIER_DESCRIPTION = "User identifier (platform_userId@loyalteez.app or email)"


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_get_user_achievements",
        tags={"achievements", "read"}
    )
    async def get_user_achievements(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Get a user's unlocked achievements and progress toward locked ones.

        See also: loyalteez://docs/shared-services/achievement-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            if not user_identifier:
                raise ValidationError("user_identifier must not be empty")
            result = await runtime.client.get_user_achievements(
                brand_id=brand, user_identifier=user_identifier, ctx=ctx
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "getting user achievements", ctx)

    @mcp.tool(
        name="loyalteez_update_achievement_progress",
        tags={"achievements", "write"}
    )
    async def update_achievement_progress(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        platform: Annotated[str, {"description": "Platform the user is on"}],
        achievement_type: Annotated[
            str,
            {"description": "message_count | voice_hours | streak_days | events_claimed | gm_count | level_reached | ltz_earned | custom"}
        ],
        new_value: Annotated[float, {"description": "New progress value (or amount to add when increment is true)"}],
        increment: Annotated[bool, {"description": "Add new_value to current progress instead of replacing it"}] = False,
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Update a user's progress on an achievement type. Achievements whose
        threshold is crossed are unlocked and rewarded by the service.

        See also: loyalteez://docs/shared-services/achievement-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            validate_choice(achievement_type, ACHIEVEMENT_TYPES, "achievement_type")
            if not user_identifier or not platform:
                raise ValidationError("user_identifier and platform must not be empty")
            result = await runtime.client.update_achievement_progress(
                brand_id=brand,
                user_identifier=user_identifier,
                platform=platform,
                achievement_type=achievement_type,
                new_value=new_value,
                increment=increment,
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "updating achievement progress", ctx)
