# tools/identity.py
"""User identity resolution."""

import json
from typing import Annotated, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..validation import PLATFORMS, ValidationError, platform_email, validate_choice

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_resolve_user",
        tags={"identity"}
    )
    async def resolve_user(
        ctx: Context,
        platform: Annotated[
            str,
            {"description": "Platform: discord | telegram | twitter | farcaster | github | google | email | web | shopify | gaming"}
        ],
        platform_user_id: Annotated[
            str,
            {"description": "Platform-specific user ID (e.g., Discord snowflake '123456789012345678')"}
        ],
        platform_username: Annotated[
            Optional[str],
            {"description": "Display username on the platform (optional)"}
        ] = None,
        brand_id: Annotated[
            Optional[str],
            {"description": "Your brand wallet address. If not provided, uses LOYALTEEZ_BRAND_ID."}
        ] = None,
    ) -> str:
        """
        Resolve a platform account to its Loyalteez identity and wallet.

        Every platform user maps to a deterministic email:
        {platform}_{platform_user_id}@loyalteez.app

        For OAuth platforms the wallet is pregenerated (idempotent: the same
        account always returns the same wallet). The 'email' platform has no
        OAuth identity, so no wallet is pregenerated; the wallet is created on
        the user's first tracked event and a zero address is returned.

        Returns JSON with loyalteezEmail, walletAddress, isNew, balance.

        See also: loyalteez://docs/architecture
        """
        try:
            brand = runtime.brand_id(brand_id)
            platform = validate_choice(platform, PLATFORMS, "platform")
            if not platform_user_id:
                raise ValidationError("platform_user_id must not be empty")

            loyalteez_email = platform_email(platform, platform_user_id)

            if platform == "email":
                await ctx.info("Email platform: skipping wallet pregeneration")
                wallet_address, is_new = ZERO_ADDRESS, True
            else:
                result = await runtime.client.pregenerate_user(
                    brand_id=brand,
                    oauth_provider=platform,
                    oauth_user_id=platform_user_id,
                    oauth_username=platform_username,
                    ctx=ctx,
                )
                wallet_address, is_new = result.wallet_address, result.created_new

            return json.dumps({
                "loyalteezEmail": loyalteez_email,
                "walletAddress": wallet_address,
                "isNew": is_new,
                "balance": 0,
            }, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "resolving user", ctx)
