# client.py
"""
Loyalteez API Client

This module provides a centralized way to interact with the Loyalteez services:
the event handler, the shared gamification services, wallet pregeneration and
the gas relayer. It handles URL building per network, request formatting, and
error handling. Every public method issues exactly one HTTP request.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from fastmcp import Context
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ._version import API_VERSION, __version__
from .models import (
    HealthResponse,
    LeaderboardResponse,
    PregenerateUserResponse,
    StreakActivityResponse,
    TrackEventResponse,
)

# Configure module logger
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

BASE_URLS: Dict[str, Dict[str, str]] = {
    "mainnet": {
        "event_handler": "https://api.loyalteez.app",
        "services": "https://services.loyalteez.app",
        "pregeneration": "https://register.loyalteez.app",
        "relayer": "https://relayer.loyalteez.app",
    },
    "testnet": {
        "event_handler": "https://api.loyalteez.xyz",
        "services": "https://services.loyalteez.xyz",
        "pregeneration": "https://register.loyalteez.xyz",
        "relayer": "https://relayer.loyalteez.xyz",
    },
}

LTZ_TOKEN_ADDRESS = "0x5242b6DB88A72752ac5a54cFe6A7DB8244d743c9"
PERK_NFT_ADDRESS = "0x6ae30d6Dcf3e75456B6582b057f1Bf98A90F2CA0"
POINTS_SALE_ADDRESS = "0x5269B83F6A4E31bEdFDf5329DC052FBb661e3c72"

# Status codes meaning "this endpoint is not deployed" rather than "the call failed"
UNAVAILABLE_STATUS_CODES = frozenset({404, 405, 501})

USER_BALANCE_GUIDANCE = (
    "User balance endpoint unavailable. To query balance: "
    "1. Get user's wallet address via loyalteez_resolve_user or SDK getUserWallet() "
    f"2. Query LTZ contract ({LTZ_TOKEN_ADDRESS}) balanceOf() method on Soneium Mainnet (Chain ID: 1868). "
    "See loyalteez://contracts/ltz-token for contract details."
)

ELIGIBILITY_GUIDANCE = (
    "Eligibility endpoint unavailable. To check eligibility manually: "
    "1. Call loyalteez_get_event_config to read the event's maxClaims, cooldownHours and reward "
    "2. Compare against the user's claim history tracked in your own system. "
    "A tracked event that is not eligible is rejected by the event handler with HTTP 429."
)

USER_STATS_GUIDANCE = (
    "User stats endpoint unavailable. Stats can be assembled from individual services: "
    "loyalteez_get_streak_status for streak data, "
    "loyalteez_get_leaderboard for rank and lifetime earnings, "
    "loyalteez_get_user_balance for the current balance."
)


class LoyalteezAPIError(Exception):
    """Single exception for all Loyalteez API errors with structured data."""

    def __init__(
        self,
        message: str,
        error_type: str,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.error_type = error_type  # 'http', 'timeout', 'connection', 'invalid_response', 'unexpected'
        self.details = details
        self.status_code = status_code
        self.response_text = response_text
        self.original_error = original_error
        super().__init__(message)


class EndpointUnavailableError(LoyalteezAPIError):
    """
    The endpoint is not available on the backend.

    Unlike a failed call, this is not worth retrying; `guidance` explains how
    to get the same answer from endpoints that are available.
    """

    def __init__(self, message: str, guidance: str, **kwargs):
        super().__init__(message, error_type="unavailable", **kwargs)
        self.guidance = guidance


async def log(ctx: Optional[Context], level: str, msg: str) -> None:
    """
    Log a message either through the context or the module logger.

    Args:
        ctx: Optional MCP context for logging
        level: Log level ('info', 'warning', 'error', 'debug')
        msg: Message to log
    """
    if ctx:
        if level == 'info':
            await ctx.info(msg)
        elif level == 'warning':
            await ctx.warning(msg)
        elif level == 'error':
            await ctx.error(msg)
        elif level == 'debug':
            await ctx.debug(msg)
    else:
        if level == 'info':
            logger.info(msg)
        elif level == 'warning':
            logger.warning(msg)
        elif level == 'error':
            logger.error(msg)
        elif level == 'debug':
            logger.debug(msg)


def extract_error_message(response: httpx.Response) -> str:
    """Body 'error' or 'message' field, falling back to the status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}: {response.reason_phrase}"


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def _encode_segment(value: str) -> str:
    return quote(str(value), safe="")


class LoyalteezClient:
    """
    Async client for the Loyalteez REST services.

    Args:
        network: 'mainnet' or 'testnet'; selects the base URL of every service
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport, used by tests to fake the network
    """

    def __init__(
        self,
        network: str = "mainnet",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if network not in BASE_URLS:
            raise ValueError(f"Unknown network '{network}'")
        self.network = network
        self.timeout = timeout
        self._transport = transport

    def base_url(self, service: str) -> str:
        return BASE_URLS[self.network][service]

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-API-Version": API_VERSION,
            "User-Agent": f"loyalteez-mcp/{__version__}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        service: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        """
        Make an ASYNC request to a Loyalteez service with proper error handling.

        Args:
            method: HTTP method (GET, POST)
            service: Key into BASE_URLS ('event_handler', 'services', 'pregeneration', 'relayer')
            endpoint: API endpoint path (e.g., '/loyalteez-api/manual-event')
            params: URL query parameters; None values are dropped
            json_data: JSON request body; None values are dropped
            headers: Extra request headers
            ctx: MCP context for logging

        Returns:
            Decoded JSON object

        Raises:
            LoyalteezAPIError: For all API errors with structured error information
        """
        if not endpoint.startswith('/'):
            endpoint = '/' + endpoint

        url = f"{self.base_url(service)}{endpoint}"

        await log(ctx, 'info', f"Making {method} request to {url}")
        if params:
            await log(ctx, 'debug', f"Request params: {params}")

        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), transport=self._transport) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._headers(headers),
                    params=_compact(params) if params else None,
                    json=_compact(json_data) if json_data is not None else None,
                )

            await log(ctx, 'info', f"Response status: {response.status_code}")

            # Raise for HTTP status codes
            response.raise_for_status()

        except httpx.TimeoutException as e:
            error_msg = f"Request timeout after {self.timeout} seconds: {str(e)}"
            await log(ctx, 'error', error_msg)
            raise LoyalteezAPIError(
                message=error_msg,
                error_type="timeout",
                details=str(e),
                original_error=e
            )
        except httpx.ConnectError as e:
            error_msg = f"Connection error: {str(e)}"
            await log(ctx, 'error', error_msg)
            raise LoyalteezAPIError(
                message=error_msg,
                error_type="connection",
                details=str(e),
                original_error=e
            )
        except httpx.HTTPStatusError as e:
            resp = e.response
            error_msg = extract_error_message(resp)
            await log(ctx, 'error', f"HTTP error {resp.status_code}: {error_msg}")
            raise LoyalteezAPIError(
                message=error_msg,
                error_type="http",
                status_code=resp.status_code,
                response_text=resp.text,
                original_error=e
            )
        except httpx.RequestError as e:
            error_msg = f"Unexpected request error: {str(e)}"
            await log(ctx, 'error', error_msg)
            raise LoyalteezAPIError(
                message=error_msg,
                error_type="unexpected",
                details=str(e),
                original_error=e
            )
        except Exception as e:
            error_msg = f"Unexpected error: {str(e)}"
            await log(ctx, 'error', error_msg)
            raise LoyalteezAPIError(
                message=error_msg,
                error_type="unexpected",
                details=str(e),
                original_error=e
            )

        try:
            data = response.json()
        except ValueError as e:
            raise LoyalteezAPIError(
                message=f"Response from {endpoint} is not valid JSON",
                error_type="invalid_response",
                status_code=response.status_code,
                response_text=response.text,
                original_error=e
            )
        if not isinstance(data, dict):
            raise LoyalteezAPIError(
                message=f"Response from {endpoint} is not a JSON object",
                error_type="invalid_response",
                status_code=response.status_code,
                response_text=response.text,
            )
        return data

    @staticmethod
    def _parse(model: Type[ModelT], data: Dict[str, Any], endpoint: str) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise LoyalteezAPIError(
                message=f"Malformed response from {endpoint}: missing or invalid field(s) {fields}",
                error_type="invalid_response",
                details=str(e),
                original_error=e
            )

    async def _request_unverified(self, guidance: str, *args, **kwargs) -> Dict[str, Any]:
        try:
            return await self._request(*args, **kwargs)
        except LoyalteezAPIError as e:
            if e.error_type == "http" and e.status_code in UNAVAILABLE_STATUS_CODES:
                raise EndpointUnavailableError(
                    message=e.message,
                    guidance=guidance,
                    status_code=e.status_code,
                    response_text=e.response_text,
                    original_error=e,
                ) from e
            raise

    # ----------------------- Event handler ------------------------------

    async def track_event(
        self,
        *,
        brand_id: str,
        event_type: str,
        user_email: str,
        user_identifier: Optional[str] = None,
        domain: Optional[str] = None,
        source_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        channel_id: Optional[str] = None,
        ctx: Optional[Context] = None,
    ) -> TrackEventResponse:
        endpoint = "/loyalteez-api/manual-event"
        data = await self._request("POST", "event_handler", endpoint, json_data={
            "brandId": brand_id,
            "eventType": event_type,
            "userEmail": user_email,
            "userIdentifier": user_identifier,
            "domain": domain,
            "sourceUrl": source_url,
            "metadata": metadata,
            "channel_id": channel_id,
        }, ctx=ctx)
        return self._parse(TrackEventResponse, data, endpoint)

    async def get_event_config(self, *, brand_id: str, ctx: Optional[Context] = None) -> Dict[str, Any]:
        return await self._request(
            "GET", "event_handler", "/loyalteez-api/event-config", params={"brandId": brand_id}, ctx=ctx
        )

    async def bulk_events(self, *, events: List[Dict[str, Any]], ctx: Optional[Context] = None) -> Dict[str, Any]:
        return await self._request(
            "POST", "event_handler", "/loyalteez-api/bulk-events",
            json_data={"events": [_compact(e) for e in events]}, ctx=ctx
        )

    async def health_check(self, ctx: Optional[Context] = None) -> HealthResponse:
        endpoint = "/loyalteez-api/health"
        data = await self._request("GET", "event_handler", endpoint, ctx=ctx)
        return self._parse(HealthResponse, data, endpoint)

    async def get_user_balance(
        self,
        *,
        brand_id: str,
        user_email: str,
        include_history: bool = False,
        history_limit: int = 10,
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        return await self._request_unverified(
            USER_BALANCE_GUIDANCE,
            "POST", "event_handler", "/loyalteez-api/user-balance",
            json_data={
                "brandId": brand_id,
                "userEmail": user_email,
                "includeHistory": include_history,
                "historyLimit": history_limit,
            },
            ctx=ctx,
        )

    async def check_eligibility(
        self, *, brand_id: str, event_type: str, user_email: str, ctx: Optional[Context] = None
    ) -> Dict[str, Any]:
        return await self._request_unverified(
            ELIGIBILITY_GUIDANCE,
            "POST", "event_handler", "/loyalteez-api/check-eligibility",
            json_data={"brandId": brand_id, "eventType": event_type, "userEmail": user_email},
            ctx=ctx,
        )

    # ----------------------- Pregeneration & relayer ------------------------------

    async def pregenerate_user(
        self,
        *,
        brand_id: str,
        oauth_provider: str,
        oauth_user_id: str,
        oauth_username: Optional[str] = None,
        ctx: Optional[Context] = None,
    ) -> PregenerateUserResponse:
        endpoint = "/loyalteez-api/pregenerate-user"
        data = await self._request("POST", "pregeneration", endpoint, json_data={
            "brand_id": brand_id,
            "oauth_provider": oauth_provider,
            "oauth_user_id": oauth_user_id,
            "oauth_username": oauth_username,
        }, ctx=ctx)
        return self._parse(PregenerateUserResponse, data, endpoint)

    async def relay_transaction(
        self,
        *,
        privy_access_token: str,
        to: str,
        data: str,
        user_address: str,
        gas_limit: Optional[int] = None,
        permit: Optional[Dict[str, Any]] = None,
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", "relayer", "/relay",
            json_data={
                "to": to,
                "data": data,
                "userAddress": user_address,
                "gasLimit": gas_limit,
                "permit": permit,
            },
            headers={"Authorization": f"Bearer {privy_access_token}"},
            ctx=ctx,
        )

    # ----------------------- Shared services ------------------------------

    async def record_streak_activity(
        self,
        *,
        brand_id: str,
        user_identifier: str,
        platform: str,
        streak_type: str = "daily",
        ctx: Optional[Context] = None,
    ) -> StreakActivityResponse:
        endpoint = "/streak/record-activity"
        data = await self._request("POST", "services", endpoint, json_data={
            "brandId": brand_id,
            "userIdentifier": user_identifier,
            "platform": platform,
            "streakType": streak_type,
        }, ctx=ctx)
        return self._parse(StreakActivityResponse, data, endpoint)

    async def get_streak_status(
        self, *, brand_id: str, user_identifier: str, streak_type: str = "daily", ctx: Optional[Context] = None
    ) -> Dict[str, Any]:
        return await self._request(
            "GET", "services", f"/streak/status/{brand_id}/{_encode_segment(user_identifier)}",
            params={"streakType": streak_type}, ctx=ctx
        )

    async def claim_streak_milestone(
        self,
        *,
        brand_id: str,
        user_identifier: str,
        platform: str,
        milestone_days: int,
        streak_type: str = "daily",
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/streak/claim-milestone", json_data={
            "brandId": brand_id,
            "userIdentifier": user_identifier,
            "platform": platform,
            "milestoneDays": milestone_days,
            "streakType": streak_type,
        }, ctx=ctx)

    async def get_leaderboard(
        self,
        *,
        brand_id: str,
        metric: str = "ltz_earned",
        period: str = "all_time",
        platform: Optional[str] = None,
        limit: int = 10,
        ctx: Optional[Context] = None,
    ) -> LeaderboardResponse:
        endpoint = f"/leaderboard/{brand_id}"
        data = await self._request("GET", "services", endpoint, params={
            "metric": metric,
            "period": period,
            "platform": platform,
            "limit": limit,
        }, ctx=ctx)
        return self._parse(LeaderboardResponse, data, endpoint)

    async def update_leaderboard_stats(
        self,
        *,
        brand_id: str,
        user_identifier: str,
        platform: str,
        ltz_amount: float,
        claim_type: Optional[str] = None,
        display_name: Optional[str] = None,
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/leaderboard/update-stats", json_data={
            "brandId": brand_id,
            "userIdentifier": user_identifier,
            "platform": platform,
            "ltzAmount": ltz_amount,
            "claimType": claim_type,
            "displayName": display_name,
        }, ctx=ctx)

    async def log_activity(
        self,
        *,
        brand_id: str,
        user_identifier: str,
        platform: str,
        activity_type: str,
        duration_minutes: Optional[float] = None,
        count: Optional[int] = None,
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/activity/log", json_data={
            "brandId": brand_id,
            "userIdentifier": user_identifier,
            "platform": platform,
            "activityType": activity_type,
            "durationMinutes": duration_minutes,
            "count": count,
        }, ctx=ctx)

    async def calculate_reward(
        self,
        *,
        brand_id: str,
        user_identifier: str,
        platform: str,
        base_reward: float,
        event_type: str,
        roles: Optional[List[str]] = None,
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/reward/calculate", json_data={
            "brandId": brand_id,
            "userIdentifier": user_identifier,
            "platform": platform,
            "baseReward": base_reward,
            "eventType": event_type,
            "roles": roles,
        }, ctx=ctx)

    async def get_user_stats(
        self, *, brand_id: str, user_identifier: str, ctx: Optional[Context] = None
    ) -> Dict[str, Any]:
        return await self._request_unverified(
            USER_STATS_GUIDANCE,
            "GET", "services", f"/user-stats/{brand_id}/{_encode_segment(user_identifier)}",
            ctx=ctx,
        )

    async def create_drop(self, *, payload: Dict[str, Any], ctx: Optional[Context] = None) -> Dict[str, Any]:
        return await self._request("POST", "services", "/drops/create", json_data=payload, ctx=ctx)

    async def claim_drop(
        self, *, drop_id: str, platform_user_id: str, platform: str, ctx: Optional[Context] = None
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/drops/claim", json_data={
            "dropId": drop_id,
            "platformUserId": platform_user_id,
            "platform": platform,
        }, ctx=ctx)

    async def process_third_party_event(
        self, *, payload: Dict[str, Any], ctx: Optional[Context] = None
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/integrations/process", json_data=payload, ctx=ctx)

    async def get_perks(
        self,
        *,
        brand_id: str,
        active_only: Optional[bool] = None,
        category: Optional[str] = None,
        user_address: Optional[str] = None,
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        return await self._request("GET", "services", f"/perks/{brand_id}", params={
            "activeOnly": active_only,
            "category": category,
            "userAddress": user_address,
        }, ctx=ctx)

    async def check_perk_eligibility(
        self, *, brand_id: str, user_identifier: str, platform: str, perk_id: str, ctx: Optional[Context] = None
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/perks/check-eligibility", json_data={
            "brandId": brand_id,
            "userIdentifier": user_identifier,
            "platform": platform,
            "perkId": perk_id,
        }, ctx=ctx)

    async def redeem_perk(
        self, *, brand_id: str, user_identifier: str, platform: str, perk_id: str, ctx: Optional[Context] = None
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/perks/redeem", json_data={
            "brandId": brand_id,
            "userIdentifier": user_identifier,
            "platform": platform,
            "perkId": perk_id,
        }, ctx=ctx)

    async def get_user_achievements(
        self, *, brand_id: str, user_identifier: str, ctx: Optional[Context] = None
    ) -> Dict[str, Any]:
        return await self._request(
            "GET", "services", f"/achievements/{brand_id}/{_encode_segment(user_identifier)}", ctx=ctx
        )

    async def update_achievement_progress(
        self,
        *,
        brand_id: str,
        user_identifier: str,
        platform: str,
        achievement_type: str,
        new_value: float,
        increment: Optional[bool] = None,
        ctx: Optional[Context] = None,
    ) -> Dict[str, Any]:
        return await self._request("POST", "services", "/achievements/update-progress", json_data={
            "brandId": brand_id,
            "userIdentifier": user_identifier,
            "platform": platform,
            "achievementType": achievement_type,
            "newValue": new_value,
            "increment": increment,
        }, ctx=ctx)
