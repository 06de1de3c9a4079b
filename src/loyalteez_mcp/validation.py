# validation.py
"""
Input validation for Loyalteez tool arguments.

Each public validate_* function accepts an arbitrary value and returns the
normalized value or raises ValidationError naming every violated constraint.
Structured inputs are declared as pydantic models; tool arguments may use
either snake_case or the camelCase names of the Loyalteez REST API.
"""

import re
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

BRAND_ID_RE = re.compile(r"0x[a-fA-F0-9]{40}")
EVENT_TYPE_RE = re.compile(r"[a-zA-Z0-9_]+")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@.]+")

EVENT_TYPE_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 254

# Domain for deterministic platform-derived user emails
PLATFORM_EMAIL_DOMAIN = "loyalteez.app"

PLATFORMS = (
    "discord",
    "telegram",
    "twitter",
    "farcaster",
    "github",
    "google",
    "email",
    "web",
    "shopify",
    "gaming",
)

LEADERBOARD_PERIODS = ("daily", "weekly", "monthly", "all_time")

DETECTION_METHODS = (
    "webhook",
    "discord_interaction",
    "url_pattern",
    "form_submission",
    "css_selector",
)


class ValidationError(ValueError):
    """Tool input failed one or more constraints."""


# ----------------------- Scalar checks ------------------------------

def _check_brand_id(value: str) -> str:
    if not BRAND_ID_RE.fullmatch(value):
        raise ValueError("Brand ID must be a valid Ethereum address (42 characters, starting with 0x)")
    return value.lower()


def _check_event_type(value: str) -> str:
    problems = []
    if not EVENT_TYPE_RE.fullmatch(value):
        problems.append("Event type must contain only alphanumeric characters and underscores")
    if len(value) > EVENT_TYPE_MAX_LENGTH:
        problems.append(f"Event type must be {EVENT_TYPE_MAX_LENGTH} characters or less")
    if problems:
        raise ValueError("; ".join(problems))
    return value


def _check_email(value: str) -> str:
    problems = []
    if not EMAIL_RE.fullmatch(value):
        problems.append("Invalid email format")
    if len(value) > EMAIL_MAX_LENGTH:
        problems.append(f"Email must be {EMAIL_MAX_LENGTH} characters or less")
    if problems:
        raise ValueError("; ".join(problems))
    return value


BrandId = Annotated[str, AfterValidator(_check_brand_id)]
EventType = Annotated[str, AfterValidator(_check_event_type)]
Email = Annotated[str, AfterValidator(_check_email)]


def _format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        ctx_error = (err.get("ctx") or {}).get("error")
        msg = str(ctx_error) if ctx_error is not None else err["msg"]
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def _run_scalar(check, value: Any, label: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string")
    try:
        return check(value)
    except ValueError as e:
        raise ValidationError(str(e)) from None


# ----------------------- Schemas ------------------------------

class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserIdentifier(_Schema):
    email: Optional[Email] = None
    platform: Optional[str] = None
    platform_user_id: Optional[str] = None

    @model_validator(mode="after")
    def _require_one_form(self):
        if not self.email and not (self.platform and self.platform_user_id):
            raise ValueError("Either email or platform+platformUserId must be provided")
        return self


class DetectionMethod(_Schema):
    method: Literal[DETECTION_METHODS]
    config: Dict[str, Any]


class EventDefinition(_Schema):
    name: str = Field(min_length=3)
    event_type: Optional[EventType] = None
    description: str = Field(min_length=10)
    category: Optional[str] = None
    default_reward: int = Field(gt=0)
    max_claims_per_user: int = Field(gt=0)
    cooldown_hours: Optional[int] = Field(default=None, ge=0)
    requires_email: bool = True
    detection_methods: Optional[List[DetectionMethod]] = None
    metadata: Optional[Dict[str, Any]] = None


class Budget(BaseModel):
    monthly_ltz: int = Field(gt=0)
    avg_reward: int = Field(gt=0)


class ProgramContext(_Schema):
    app_type: str
    goals: List[str] = Field(min_length=1)
    platforms: List[str] = Field(min_length=1)
    budget: Optional[Budget] = None
    audience: Optional[str] = None
    existing_events: Optional[List[str]] = None


class BatchEventDefinition(_Schema):
    name: str = Field(min_length=1)
    reward: int = Field(gt=0)
    max_claims: int = Field(gt=0)
    cooldown_hours: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None


class BulkEvent(_Schema):
    event_type: EventType
    user_email: Optional[Email] = None
    user_identifier: Optional[UserIdentifier] = None
    brand_id: Optional[str] = None
    domain: Optional[str] = None
    source_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _require_user(self):
        if not self.user_email and self.user_identifier is None:
            raise ValueError("Each event needs user_email or user_identifier")
        return self

    @property
    def email(self) -> str:
        if self.user_email:
            return self.user_email
        return resolve_user_email(self.user_identifier)


def _run_model(model, value: Any):
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        raise ValidationError(_format_errors(e)) from None


# ----------------------- Public API ------------------------------

def validate_brand_id(value: Any) -> str:
    return _run_scalar(_check_brand_id, value, "Brand ID")


def validate_event_type(value: Any) -> str:
    return _run_scalar(_check_event_type, value, "Event type")


def validate_email(value: Any) -> str:
    return _run_scalar(_check_email, value, "Email")


def validate_user_identifier(value: Any) -> UserIdentifier:
    return _run_model(UserIdentifier, value)


def validate_event_definition(value: Any) -> EventDefinition:
    return _run_model(EventDefinition, value)


def validate_program_context(value: Any) -> ProgramContext:
    return _run_model(ProgramContext, value)


def validate_batch_event(value: Any) -> BatchEventDefinition:
    return _run_model(BatchEventDefinition, value)


def validate_bulk_event(value: Any) -> BulkEvent:
    return _run_model(BulkEvent, value)


def validate_choice(value: Any, choices, label: str) -> str:
    if value not in choices:
        raise ValidationError(f"Invalid {label} '{value}'. Expected one of: {', '.join(str(c) for c in choices)}")
    return value


def platform_email(platform: str, platform_user_id: str) -> str:
    """Deterministic Loyalteez email for a platform account, e.g. discord_123@loyalteez.app."""
    return f"{platform}_{platform_user_id}@{PLATFORM_EMAIL_DOMAIN}"


def resolve_user_email(identifier: UserIdentifier) -> str:
    if identifier.email:
        return identifier.email
    return platform_email(identifier.platform, identifier.platform_user_id)
