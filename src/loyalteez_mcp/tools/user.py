# tools/user.py
"""Per-user balance, eligibility and stats lookups."""

import json
from typing import Annotated, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..validation import ValidationError, validate_email, validate_event_type

HISTORY_LIMIT_MAX = 50

BRAND_ID_DESCRIPTION = "Your brand wallet address. If not provided, uses LOYALTEEZ_BRAND_ID."


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_get_user_balance",
        tags={"user", "read"}
    )
    async def get_user_balance(
        ctx: Context,
        user_email: Annotated[
            str,
            {"description": "User email (real or platform-derived, e.g., 'discord_123@loyalteez.app')"}
        ],
        include_history: Annotated[bool, {"description": "Include recent reward transactions"}] = False,
        history_limit: Annotated[int, {"description": "Number of history entries, 1-50 (default 10)"}] = 10,
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Get a user's LTZ balance and, optionally, recent reward history.

        If the backend does not expose this endpoint, the error explains how to
        read the balance from the LTZ token contract instead.

        See also: loyalteez://docs/api/rest-api, loyalteez://contracts/ltz-token
        """
        try:
            brand = runtime.brand_id(brand_id)
            user_email = validate_email(user_email)
            if history_limit is None or not 1 <= history_limit <= HISTORY_LIMIT_MAX:
                raise ValidationError(f"history_limit must be between 1 and {HISTORY_LIMIT_MAX}")

            result = await runtime.client.get_user_balance(
                brand_id=brand,
                user_email=user_email,
                include_history=include_history,
                history_limit=history_limit,
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "getting user balance", ctx)

    @mcp.tool(
        name="loyalteez_check_eligibility",
        tags={"user", "read"}
    )
    async def check_eligibility(
        ctx: Context,
        event_type: Annotated[str, {"description": "Event type to check"}],
        user_email: Annotated[str, {"description": "User email (real or platform-derived)"}],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Check whether a user can currently claim an event.

        Returns eligibility with the reason, cooldown end, claim count, max
        claims and reward amount as reported by the backend.

        See also: loyalteez://docs/api/rest-api
        """
        try:
            brand = runtime.brand_id(brand_id)
            result = await runtime.client.check_eligibility(
                brand_id=brand,
                event_type=validate_event_type(event_type),
                user_email=validate_email(user_email),
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "checking eligibility", ctx)

    @mcp.tool(
        name="loyalteez_get_user_stats",
        tags={"user", "read"}
    )
    async def get_user_stats(
        ctx: Context,
        user_identifier: Annotated[
            str,
            {"description": "User identifier, usually the Loyalteez email (e.g., 'discord_123@loyalteez.app')"}
        ],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Get aggregated stats for a user: balance, lifetime earnings, streak,
        activity counts and rank.

        See also: loyalteez://docs/shared-services/leaderboard-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            if not user_identifier:
                raise ValidationError("user_identifier must not be empty")
            result = await runtime.client.get_user_stats(brand_id=brand, user_identifier=user_identifier, ctx=ctx)
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "getting user stats", ctx)
