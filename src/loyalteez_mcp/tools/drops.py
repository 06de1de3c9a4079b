# tools/drops.py
"""Time-limited reward drops."""

import json
from typing import Annotated, Any, Dict, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..validation import ValidationError, validate_choice

TRIGGER_TYPES = ("reaction", "button", "command")


def _positive_int(value, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{label} must be a positive integer")
    return value


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_create_drop",
        tags={"drops", "write"}
    )
    async def create_drop(
        ctx: Context,
        platform: Annotated[str, {"description": "Platform: 'discord' | 'telegram' | etc."}],
        server_id: Annotated[str, {"description": "Server, guild or chat ID the drop appears in"}],
        event_type: Annotated[str, {"description": "Event type credited when the drop is claimed"}],
        reward: Annotated[float, {"description": "LTZ reward per claim (positive)"}],
        max_claims: Annotated[int, {"description": "Maximum number of users who can claim"}],
        expires_in_seconds: Annotated[int, {"description": "Seconds until the drop expires"}],
        trigger_type: Annotated[
            Optional[str],
            {"description": "How users claim: 'reaction' | 'button' | 'command'"}
        ] = None,
        trigger_emoji: Annotated[Optional[str], {"description": "Emoji for reaction drops (e.g., '🎁')"}] = None,
        metadata: Annotated[Optional[Dict[str, Any]], {"description": "Additional drop data"}] = None,
        brand_id: Annotated[
            Optional[str],
            {"description": "Your brand wallet address. If not provided, uses LOYALTEEZ_BRAND_ID."}
        ] = None,
    ) -> str:
        """
        Create a limited-time reward drop: the first max_claims users to react,
        press the button or run the command before expiry earn the reward.

        Returns the drop as created by the service, including its dropId.

        See also: loyalteez://docs/shared-services/drops-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            if trigger_type is not None:
                validate_choice(trigger_type, TRIGGER_TYPES, "trigger_type")
            if reward is None or reward <= 0:
                raise ValidationError("reward must be a positive number")
            for value, label in ((platform, "platform"), (server_id, "server_id"), (event_type, "event_type")):
                if not value:
                    raise ValidationError(f"{label} must not be empty")

            result = await runtime.client.create_drop(payload={
                "brandId": brand,
                "platform": platform,
                "serverId": server_id,
                "eventType": event_type,
                "reward": reward,
                "maxClaims": _positive_int(max_claims, "max_claims"),
                "expiresInSeconds": _positive_int(expires_in_seconds, "expires_in_seconds"),
                "triggerType": trigger_type,
                "triggerEmoji": trigger_emoji,
                "metadata": metadata,
            }, ctx=ctx)
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "creating drop", ctx)

    @mcp.tool(
        name="loyalteez_claim_drop",
        tags={"drops", "write"}
    )
    async def claim_drop(
        ctx: Context,
        drop_id: Annotated[str, {"description": "Drop ID returned by loyalteez_create_drop"}],
        platform_user_id: Annotated[str, {"description": "Claiming user's platform ID"}],
        platform: Annotated[str, {"description": "Platform the user claims from"}],
    ) -> str:
        """
        Claim a reward drop for a user. The drop already knows its brand, so no brand id is needed.

        Fails once the drop has expired or reached max claims.

        See also: loyalteez://docs/shared-services/drops-service
        """
        try:
            for value, label in ((drop_id, "drop_id"), (platform_user_id, "platform_user_id"), (platform, "platform")):
                if not value:
                    raise ValidationError(f"{label} must not be empty")
            result = await runtime.client.claim_drop(
                drop_id=drop_id, platform_user_id=platform_user_id, platform=platform, ctx=ctx
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "claiming drop", ctx, resource_id=drop_id)
