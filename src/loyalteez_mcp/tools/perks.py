# tools/perks.py
"""Perk catalogue, eligibility and redemption."""

import json
from typing import Annotated, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..validation import ValidationError, validate_choice

PERK_CATEGORIES = ("all", "discount", "exclusive", "merch", "digital", "experience", "general")

BRAND_ID_DESCRIPTION = "Your brand wallet address. If not provided, uses LOYALTEEZ_BRAND_ID."
USER_IDENTIFIER_DESCRIPTION = "User identifier (platform_userId@loyalteez.app or email)"


def _require(**values) -> None:
    for label, value in values.items():
        if not value:
            raise ValidationError(f"{label} must not be empty")


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_list_perks",
        tags={"perks", "read"}
    )
    async def list_perks(
        ctx: Context,
        active_only: Annotated[bool, {"description": "Only return perks that can be redeemed now (default true)"}] = True,
        category: Annotated[
            Optional[str],
            {"description": "'all' | 'discount' | 'exclusive' | 'merch' | 'digital' | 'experience' | 'general'"}
        ] = None,
        user_address: Annotated[
            Optional[str],
            {"description": "Wallet address; when given, perks include per-user affordability"}
        ] = None,
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        List the brand's perks (rewards users can spend LTZ on).

        See also: loyalteez://docs/shared-services/perks-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            if category is not None:
                validate_choice(category, PERK_CATEGORIES, "category")
            result = await runtime.client.get_perks(
                brand_id=brand, active_only=active_only, category=category, user_address=user_address, ctx=ctx
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "listing perks", ctx)

    @mcp.tool(
        name="loyalteez_check_perk_eligibility",
        tags={"perks", "read"}
    )
    async def check_perk_eligibility(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        platform: Annotated[str, {"description": "Platform the user is on"}],
        perk_id: Annotated[str, {"description": "Perk ID from loyalteez_list_perks"}],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Check whether a user can redeem a perk (balance, supply, per-user limits).

        See also: loyalteez://docs/shared-services/perks-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            _require(user_identifier=user_identifier, platform=platform, perk_id=perk_id)
            result = await runtime.client.check_perk_eligibility(
                brand_id=brand, user_identifier=user_identifier, platform=platform, perk_id=perk_id, ctx=ctx
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "checking perk eligibility", ctx, resource_id=perk_id)

    @mcp.tool(
        name="loyalteez_redeem_perk",
        tags={"perks", "write"}
    )
    async def redeem_perk(
        ctx: Context,
        user_identifier: Annotated[str, {"description": USER_IDENTIFIER_DESCRIPTION}],
        platform: Annotated[str, {"description": "Platform the user is on"}],
        perk_id: Annotated[str, {"description": "Perk ID from loyalteez_list_perks"}],
        brand_id: Annotated[Optional[str], {"description": BRAND_ID_DESCRIPTION}] = None,
    ) -> str:
        """
        Redeem a perk for a user, spending their LTZ.

        This is irreversible. Check eligibility first when unsure.

        See also: loyalteez://docs/shared-services/perks-service
        """
        try:
            brand = runtime.brand_id(brand_id)
            _require(user_identifier=user_identifier, platform=platform, perk_id=perk_id)
            await ctx.info(f"Redeeming perk {perk_id} for {user_identifier}")
            result = await runtime.client.redeem_perk(
                brand_id=brand, user_identifier=user_identifier, platform=platform, perk_id=perk_id, ctx=ctx
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "redeeming perk", ctx, resource_id=perk_id)
