# resources/contracts.py
"""Loyalteez contract addresses on Soneium."""

from fastmcp import FastMCP

from ..client import LTZ_TOKEN_ADDRESS, PERK_NFT_ADDRESS, POINTS_SALE_ADDRESS
from ..runtime import Runtime
from . import to_json

CONTRACTS = {
    "network": "Soneium Mainnet",
    "chainId": 1868,
    "contracts": {
        "LTZ_TOKEN": {
            "address": LTZ_TOKEN_ADDRESS,
            "name": "Loyalteez Token",
            "symbol": "LTZ",
            "decimals": 0,
            "description": "ERC-20 loyalty token with EIP-2612 permit support",
        },
        "PERK_NFT": {
            "address": PERK_NFT_ADDRESS,
            "name": "PerkNFT",
            "description": "ERC-1155 NFT contract for redeemable perks",
        },
        "POINTS_SALE": {
            "address": POINTS_SALE_ADDRESS,
            "name": "PointsSale",
            "description": "Contract for purchasing LTZ with ETH/USDC",
        },
    },
}


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://contracts/ltz-token",
        name="LTZ Token Contract",
        description="ERC-20 token contract address on Soneium",
        mime_type="application/json",
    )
    def ltz_token() -> str:
        return to_json(CONTRACTS["contracts"]["LTZ_TOKEN"])

    @mcp.resource(
        "loyalteez://contracts/perk-nft",
        name="Perk NFT Contract",
        description="ERC-1155 perk NFT contract",
        mime_type="application/json",
    )
    def perk_nft() -> str:
        return to_json(CONTRACTS["contracts"]["PERK_NFT"])

    @mcp.resource(
        "loyalteez://contracts/points-sale",
        name="PointsSale Contract",
        description="Contract for purchasing LTZ",
        mime_type="application/json",
    )
    def points_sale() -> str:
        return to_json(CONTRACTS["contracts"]["POINTS_SALE"])

    @mcp.resource(
        "loyalteez://contracts/all",
        name="All Contracts",
        description="All Loyalteez contract addresses",
        mime_type="application/json",
    )
    def all_contracts() -> str:
        return to_json(CONTRACTS)
