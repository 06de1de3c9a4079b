# tools/transactions.py
"""Gasless transactions through the Loyalteez gas relayer."""

import json
import re
from typing import Annotated, Any, Dict, Optional

from fastmcp import Context, FastMCP

from ..client import LTZ_TOKEN_ADDRESS, PERK_NFT_ADDRESS, POINTS_SALE_ADDRESS
from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..validation import ValidationError

MAX_GAS_LIMIT = 1_000_000

WHITELISTED_CONTRACTS = {
    addr.lower(): addr for addr in (LTZ_TOKEN_ADDRESS, PERK_NFT_ADDRESS, POINTS_SALE_ADDRESS)
}

PERMIT_FIELDS = ("owner", "spender", "value", "deadline", "v", "r", "s")

_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")
_HEX_DATA_RE = re.compile(r"0x[a-fA-F0-9]*")


def _validate_relay(to: str, data: str, user_address: str, gas_limit: Optional[int], permit) -> None:
    problems = []
    if not isinstance(to, str) or to.lower() not in WHITELISTED_CONTRACTS:
        problems.append(
            f"Contract {to} is not whitelisted. Allowed: {', '.join(WHITELISTED_CONTRACTS.values())}"
        )
    if not _HEX_DATA_RE.fullmatch(data or ""):
        problems.append("data must be 0x-prefixed hex calldata")
    if not _ADDRESS_RE.fullmatch(user_address or ""):
        problems.append("user_address must be a valid Ethereum address")
    if gas_limit is not None and not 0 < gas_limit <= MAX_GAS_LIMIT:
        problems.append(f"gas_limit must be between 1 and {MAX_GAS_LIMIT}")
    if permit is not None:
        missing = [f for f in PERMIT_FIELDS if f not in permit]
        if missing:
            problems.append(f"permit is missing field(s): {', '.join(missing)}")
    if problems:
        raise ValidationError("; ".join(problems))


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_relay_transaction",
        tags={"transactions", "write"}
    )
    async def relay_transaction(
        ctx: Context,
        privy_access_token: Annotated[
            str,
            {"description": "User's Privy access token (from getAccessToken())"}
        ],
        to: Annotated[
            str,
            {"description": "Target contract: LTZ token, PerkNFT or PointsSale address"}
        ],
        data: Annotated[str, {"description": "Encoded calldata (0x-prefixed hex)"}],
        user_address: Annotated[str, {"description": "User's wallet address"}],
        gas_limit: Annotated[Optional[int], {"description": "Gas limit, max 1,000,000"}] = None,
        permit: Annotated[
            Optional[Dict[str, Any]],
            {"description": "EIP-2612 permit: {owner, spender, value, deadline, v, r, s}"}
        ] = None,
    ) -> str:
        """
        Submit a gasless transaction through the Loyalteez gas relayer.

        Only whitelisted contracts are accepted:
        - LTZ token: 0x5242b6DB88A72752ac5a54cFe6A7DB8244d743c9
        - PerkNFT: 0x6ae30d6Dcf3e75456B6582b057f1Bf98A90F2CA0
        - PointsSale: 0x5269B83F6A4E31bEdFDf5329DC052FBb661e3c72

        Limits: 35 transactions per wallet per hour, gas limit up to 1,000,000.
        The relayer authenticates the user with the Privy access token.

        See also: loyalteez://docs/api/gas-relayer
        """
        try:
            if not privy_access_token:
                raise ValidationError("privy_access_token must not be empty")
            _validate_relay(to, data, user_address, gas_limit, permit)

            await ctx.info(f"Relaying transaction to {to} for {user_address}")
            result = await runtime.client.relay_transaction(
                privy_access_token=privy_access_token,
                to=WHITELISTED_CONTRACTS[to.lower()],
                data=data,
                user_address=user_address,
                gas_limit=gas_limit,
                permit=permit,
                ctx=ctx,
            )
            return json.dumps(result, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "relaying transaction", ctx)
