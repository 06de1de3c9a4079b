# tools/events.py
"""Event scaffolding and event tracking tools."""

import json
import re
import time
from typing import Annotated, Any, Dict, List, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..models import BatchEvent
from ..runtime import Runtime
from ..templates import render_event_tracker, render_tracking_snippet
from ..validation import (
    EVENT_TYPE_MAX_LENGTH,
    ValidationError,
    resolve_user_email,
    validate_batch_event,
    validate_bulk_event,
    validate_event_definition,
    validate_event_type,
    validate_user_identifier,
)

BULK_EVENTS_LIMIT = 100

BRAND_ID_DESCRIPTION = (
    "Your brand wallet address (0x + 40 hex characters). "
    "If not provided, uses the LOYALTEEZ_BRAND_ID environment variable."
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _slug(name: str) -> str:
    slug = re.sub(r"\s+", "_", name.strip().lower())
    return re.sub(r"[^a-z0-9_]", "", slug)


def _batch_event_type(platform: str, name: str, now: int) -> str:
    prefix = f"{platform.lower()}_"
    suffix = f"_{now}"
    room = max(EVENT_TYPE_MAX_LENGTH - len(prefix) - len(suffix), 1)
    slug = _slug(name)[:room].rstrip("_")
    return f"{prefix}{slug}{suffix}"


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_create_event",
        tags={"events", "scaffolding"}
    )
    async def create_event(
        ctx: Context,
        event: Annotated[
            Dict[str, Any],
            {"description": (
                "Event configuration: name (min 3 chars), description (min 10 chars), "
                "default_reward (positive int LTZ), max_claims_per_user (positive int), "
                "optional event_type, category, cooldown_hours, requires_email, "
                "detection_methods [{method, config}], metadata"
            )}
        ],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Create a custom event definition for your loyalty program.

        Events are flexible: any string can be an event type. Once the event is
        configured in the Partner Portal the backend handles the rest:
        fire event -> check auth -> reward from balance.

        This tool does not call the API. It validates the definition, assigns an
        event type when none is given, and returns a tracking snippet plus the
        endpoint events are posted to on the active network.

        Detection methods: webhook, discord_interaction, url_pattern,
        form_submission, css_selector.

        Examples:
        - loyalteez_create_event(event={"name": "Helpful Answer",
            "description": "Recognized for helping another member",
            "default_reward": 50, "max_claims_per_user": 100, "cooldown_hours": 1})

        See also: loyalteez://docs/guides/custom-events
        """
        try:
            brand = runtime.brand_id(brand_id)
            definition = validate_event_definition(event)
            now = _now_ms()
            event_type = definition.event_type or f"custom_{brand[2:10]}_{now}"

            await ctx.info(f"Scaffolding event '{definition.name}' as {event_type}")
            result = {
                "success": True,
                "event": {
                    "id": f"custom_{brand}_{now}",
                    **definition.model_dump(by_alias=True, exclude_none=True),
                    "eventType": event_type,
                },
                "trackingCode": render_tracking_snippet(brand, event_type),
                "webhookEndpoint": f"{runtime.base_url()}/loyalteez-api/manual-event",
            }
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "creating event", ctx)

    @mcp.tool(
        name="loyalteez_create_events_batch",
        tags={"events", "scaffolding"}
    )
    async def create_events_batch(
        ctx: Context,
        platform: Annotated[
            str,
            {"description": "Target platform: 'discord' | 'telegram' | 'web' | 'shopify' | other"}
        ],
        events: Annotated[
            List[Dict[str, Any]],
            {"description": "Event definitions: [{name, reward, max_claims, cooldown_hours?, description?}]"}
        ],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Create several event definitions at once, for setting up an entire program.

        Each event gets an event type of the form {platform}_{name_slug}_{timestamp},
        with the slug shortened to keep the type within 50 characters.
        Definitions that fail validation are reported under 'failed' without
        stopping the rest of the batch.

        Returns JSON with:
        - created: [{eventType, name, reward}]
        - failed: [{event, error}]
        - implementationCode: sample bot/page code for the platform

        See also: loyalteez://docs/guides/custom-events
        """
        try:
            brand = runtime.brand_id(brand_id)
            if not events:
                raise ValidationError("At least one event must be provided")

            created: List[BatchEvent] = []
            failed: List[Dict[str, str]] = []
            for raw in events:
                label = raw.get("name") if isinstance(raw, dict) else None
                try:
                    definition = validate_batch_event(raw)
                    event_type = validate_event_type(
                        _batch_event_type(platform, definition.name, _now_ms())
                    )
                except ValidationError as e:
                    failed.append({"event": str(label or raw), "error": str(e)})
                    continue
                created.append(BatchEvent(event_type=event_type, name=definition.name, reward=definition.reward))

            await ctx.info(f"Scaffolded {len(created)} events for {platform}, {len(failed)} failed")
            result = {
                "created": [e.model_dump(by_alias=True) for e in created],
                "failed": failed,
                "implementationCode": render_event_tracker(platform, brand, created, runtime.base_url()),
            }
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "creating events batch", ctx)

    @mcp.tool(
        name="loyalteez_track_event",
        tags={"events", "write"}
    )
    async def track_event(
        ctx: Context,
        event_type: Annotated[
            str,
            {"description": "Event type (predefined or custom). Alphanumeric + underscore, max 50 chars"}
        ],
        user_identifier: Annotated[
            Dict[str, Any],
            {"description": "User identification: {email} or {platform, platform_user_id}"}
        ],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
        metadata: Annotated[
            Optional[Dict[str, Any]],
            {"description": "Additional event data stored with the event"}
        ] = None,
        domain: Annotated[
            Optional[str],
            {"description": "Domain the event originated from (must be authorized for the brand)"}
        ] = None,
        source_url: Annotated[
            Optional[str],
            {"description": "Page URL the event originated from"}
        ] = None,
    ) -> str:
        """
        Fire an event and reward the user.

        Works for any event type, predefined or custom. The backend checks the
        brand, checks eligibility (cooldown, max claims) and pays the reward from
        the brand's balance.

        Users without an email are identified by a deterministic address:
        {platform}_{platform_user_id}@loyalteez.app

        Remote errors are returned as-is, notably:
        - 409: duplicate event (same event + user within 60 seconds)
        - 429: user already rewarded for this event today

        Examples:
        - loyalteez_track_event(event_type="daily_gm",
            user_identifier={"platform": "discord", "platform_user_id": "42"})

        Returns JSON with success, reward, newBalance, eventId, walletAddress, transactionHash.

        See also: loyalteez://docs/api/rest-api
        """
        try:
            brand = runtime.brand_id(brand_id)
            event_type = validate_event_type(event_type)
            identifier = validate_user_identifier(user_identifier)
            user_email = resolve_user_email(identifier)

            await ctx.info(f"Tracking {event_type} for {user_email}")
            result = await runtime.client.track_event(
                brand_id=brand,
                event_type=event_type,
                user_email=user_email,
                user_identifier=user_email,
                domain=domain,
                source_url=source_url,
                metadata=metadata,
                ctx=ctx,
            )
            return json.dumps({
                "success": result.success,
                "reward": result.reward_amount,
                "newBalance": 0,
                "eventId": result.event_id,
                "walletAddress": result.wallet_address,
                "transactionHash": result.transaction_hash,
            }, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "tracking event", ctx)

    @mcp.tool(
        name="loyalteez_get_event_config",
        tags={"events", "read"}
    )
    async def get_event_config(
        ctx: Context,
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Retrieve the brand's configured events (reward amounts, max claims, cooldowns).

        Useful before tracking custom events or when checking eligibility by hand.

        See also: loyalteez://docs/api/rest-api
        """
        try:
            brand = runtime.brand_id(brand_id)
            result = await runtime.client.get_event_config(brand_id=brand, ctx=ctx)
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "getting event config", ctx)

    @mcp.tool(
        name="loyalteez_bulk_events",
        tags={"events", "write"}
    )
    async def bulk_events(
        ctx: Context,
        events: Annotated[
            List[Dict[str, Any]],
            {"description": (
                "Up to 100 events: [{event_type, user_email | user_identifier, "
                "brand_id?, domain?, source_url?, metadata?}]"
            )}
        ],
        brand_id: Annotated[
            Optional[str],
            {"description": "Brand used for events that do not set their own brand_id. " + BRAND_ID_DESCRIPTION}
        ] = None,
    ) -> str:
        """
        Submit up to 100 events in a single request.

        The event handler processes the batch itself and reports per-event
        results. Every event is validated before anything is sent; one invalid
        event rejects the whole call.

        See also: loyalteez://docs/api/rest-api
        """
        try:
            if not events:
                raise ValidationError("At least one event must be provided")
            if len(events) > BULK_EVENTS_LIMIT:
                raise ValidationError(f"At most {BULK_EVENTS_LIMIT} events can be sent per request, got {len(events)}")

            payload = []
            for i, raw in enumerate(events):
                try:
                    item = validate_bulk_event(raw)
                    brand = runtime.brand_id(item.brand_id or brand_id)
                except ValidationError as e:
                    raise ValidationError(f"events[{i}]: {e}") from None
                payload.append({
                    "brandId": brand,
                    "eventType": item.event_type,
                    "userEmail": item.email,
                    "domain": item.domain,
                    "sourceUrl": item.source_url,
                    "metadata": item.metadata,
                })

            await ctx.info(f"Submitting {len(payload)} events")
            result = await runtime.client.bulk_events(events=payload, ctx=ctx)
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "submitting bulk events", ctx)
