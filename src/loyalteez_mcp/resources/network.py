# resources/network.py
"""Soneium network configuration for wallets and RPC clients."""

from fastmcp import FastMCP

from ..runtime import Runtime
from . import to_json

NETWORK_CONFIG = {
    "chainId": 1868,
    "chainName": "Soneium Mainnet",
    "rpcUrls": ["https://rpc.soneium.org"],
    "blockExplorer": "https://soneium.blockscout.com",
    "nativeCurrency": {
        "name": "Ethereum",
        "symbol": "ETH",
        "decimals": 18,
    },
}


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://network/config",
        name="Soneium Network Configuration",
        description="Network details for connecting to Soneium Mainnet",
        mime_type="application/json",
    )
    def network_config() -> str:
        return to_json(NETWORK_CONFIG)
