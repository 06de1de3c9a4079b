# tools/integrations.py
"""Events relayed from third-party community bots."""

import json
from typing import Annotated, Any, Dict, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..validation import ValidationError, validate_choice

SOURCE_BOTS = ("mee6", "arcane", "tatsu", "carl-bot")
THIRD_PARTY_EVENT_TYPES = ("level_up", "achievement", "streak", "message")


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_process_third_party_event",
        tags={"integrations", "write"}
    )
    async def process_third_party_event(
        ctx: Context,
        platform: Annotated[str, {"description": "Platform the bot runs on (e.g., 'discord')"}],
        source_bot: Annotated[str, {"description": "Bot that emitted the event: 'mee6' | 'arcane' | 'tatsu' | 'carl-bot'"}],
        event_type: Annotated[str, {"description": "'level_up' | 'achievement' | 'streak' | 'message'"}],
        target_user_id: Annotated[str, {"description": "Platform ID of the user the event is about"}],
        level: Annotated[Optional[int], {"description": "New level for level_up events"}] = None,
        achievement: Annotated[Optional[str], {"description": "Achievement name for achievement events"}] = None,
        raw_message: Annotated[Optional[str], {"description": "Original bot message, for parsing on the server"}] = None,
        metadata: Annotated[Optional[Dict[str, Any]], {"description": "Additional event data"}] = None,
        brand_id: Annotated[
            Optional[str],
            {"description": "Your brand wallet address. If not provided, uses LOYALTEEZ_BRAND_ID."}
        ] = None,
    ) -> str:
        """
        Turn an event from a third-party bot (MEE6 level-ups, Arcane, Tatsu,
        Carl-bot) into a Loyalteez reward.

        See also: loyalteez://docs/integrations/third-party
        """
        try:
            brand = runtime.brand_id(brand_id)
            validate_choice(source_bot, SOURCE_BOTS, "source_bot")
            validate_choice(event_type, THIRD_PARTY_EVENT_TYPES, "event_type")
            if not platform or not target_user_id:
                raise ValidationError("platform and target_user_id must not be empty")

            result = await runtime.client.process_third_party_event(payload={
                "brandId": brand,
                "platform": platform,
                "sourceBot": source_bot,
                "eventType": event_type,
                "targetUserId": target_user_id,
                "level": level,
                "achievement": achievement,
                "rawMessage": raw_message,
                "metadata": metadata,
            }, ctx=ctx)
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "processing third-party event", ctx)
