# resources/oauth.py
"""User ID formats per OAuth provider, for building platform identifiers."""

from fastmcp import FastMCP

from ..runtime import Runtime
from . import to_json

OAUTH_PROVIDERS = {
    "providers": {
        "discord": {
            "idFormat": "17-20 digit numeric string (snowflake)",
            "example": "123456789012345678",
            "howToGet": "user.id from Discord API",
        },
        "twitter": {
            "idFormat": "numeric string",
            "example": "987654321",
            "howToGet": "user.id_str from Twitter API",
        },
        "github": {
            "idFormat": "numeric string",
            "example": "45678901",
            "howToGet": "user.id from GitHub API",
        },
        "google": {
            "idFormat": "long numeric string",
            "example": "108012345678901234567",
            "howToGet": "sub claim from OAuth token",
        },
        "telegram": {
            "idFormat": "numeric",
            "example": "123456789",
            "howToGet": "user.id from Telegram Bot API",
        },
        "spotify": {
            "idFormat": "alphanumeric string",
            "example": "abc123xyz",
            "howToGet": "user.id from Spotify API",
        },
        "instagram": {
            "idFormat": "numeric string",
            "example": "123456789",
            "howToGet": "user.id from Instagram Graph API",
        },
        "tiktok": {
            "idFormat": "alphanumeric string",
            "example": "abc123",
            "howToGet": "open_id from TikTok API",
        },
    },
}


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://platforms/mappings",
        name="OAuth Provider ID Formats",
        description="User ID formats for each supported OAuth provider",
        mime_type="application/json",
    )
    def platform_mappings() -> str:
        return to_json(OAUTH_PROVIDERS)
