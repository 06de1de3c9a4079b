# models.py
"""
Response schemas and program-design types.

Remote responses that tools reshape are validated against these models at the
client boundary so a malformed upstream payload fails with a clear error
instead of leaking missing fields into tool output. Unknown fields are kept.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .validation import Budget, DetectionMethod


class _Response(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class TrackEventResponse(_Response):
    success: bool
    reward_amount: Optional[float] = None
    event_id: Optional[str] = None
    wallet_address: Optional[str] = None
    transaction_hash: Optional[str] = None


class PregenerateUserResponse(BaseModel):
    # Pregeneration service answers in snake_case
    model_config = ConfigDict(extra="allow")

    wallet_address: str
    created_new: bool = False


class HealthResponse(_Response):
    status: str
    timestamp: Optional[str] = None
    services: Optional[Dict[str, Any]] = None


class StreakActivityResponse(_Response):
    success: bool
    streak: Optional[Any] = None
    reward: Optional[Any] = None
    next_milestone: Optional[Any] = None


class LeaderboardResponse(_Response):
    rankings: List[Any]
    user_rank: Optional[Any] = None


# ----------------------- Program design ------------------------------

class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventTemplate(_Camel):
    name: str
    description: str
    category: str
    default_reward: int
    max_claims_per_user: int
    cooldown_hours: int
    requires_email: bool
    detection_methods: Optional[List[DetectionMethod]] = None


class Tier(_Camel):
    name: str
    min_points: int
    benefits: List[str]


class StreakMultiplier(BaseModel):
    days: int
    multiplier: float


class StreakConfig(_Camel):
    base_reward: int
    multipliers: List[StreakMultiplier]
    grace_period: int


class ProgramDesign(_Camel):
    name: str
    philosophy: str
    events: List[EventTemplate]
    tiers: List[Tier] = Field(default_factory=list)
    streak_config: StreakConfig
    estimated_budget: Budget


class BatchEvent(_Camel):
    event_type: str
    name: str
    reward: int
