import pytest

from loyalteez_mcp.brand_id import resolve_brand_id
from loyalteez_mcp.validation import (
    ValidationError,
    platform_email,
    resolve_user_email,
    validate_brand_id,
    validate_bulk_event,
    validate_choice,
    validate_email,
    validate_event_definition,
    validate_event_type,
    validate_program_context,
    validate_user_identifier,
)

from .test_utils import BRAND_ID, OTHER_BRAND_ID


# Scalars

def test_brand_id_is_lowercased():
    assert validate_brand_id("0xABCDEF1234567890ABCDEF1234567890ABCDEF12") == BRAND_ID


@pytest.mark.parametrize("value", [
    "abcdef1234567890abcdef1234567890abcdef12",
    "0xabc",
    "0xZZcdef1234567890abcdef1234567890abcdef12",
    BRAND_ID + "0",
    BRAND_ID + "\n",
])
def test_brand_id_rejects_malformed(value):
    with pytest.raises(ValidationError, match="valid Ethereum address"):
        validate_brand_id(value)


def test_brand_id_rejects_non_string():
    with pytest.raises(ValidationError, match="must be a string"):
        validate_brand_id(42)


def test_event_type_allows_alphanumeric_and_underscore():
    assert validate_event_type("daily_GM_2") == "daily_GM_2"


@pytest.mark.parametrize("value", ["daily_gm\n", "daily gm", "daily-gm", ""])
def test_event_type_rejects_other_characters(value):
    with pytest.raises(ValidationError, match="alphanumeric characters and underscores"):
        validate_event_type(value)


def test_event_type_length_boundary():
    assert validate_event_type("a" * 50) == "a" * 50
    with pytest.raises(ValidationError, match="50 characters or less"):
        validate_event_type("a" * 51)


def test_event_type_reports_every_problem():
    with pytest.raises(ValidationError) as exc_info:
        validate_event_type("bad-type " * 10)
    message = str(exc_info.value)
    assert "alphanumeric characters and underscores" in message
    assert "50 characters or less" in message


@pytest.mark.parametrize("value", ["user@example.com", "discord_42@loyalteez.app"])
def test_email_accepts(value):
    assert validate_email(value) == value


@pytest.mark.parametrize("value", [
    "user@",
    "user example@x.com",
    "@example.com",
    "user@example",
    "user@example.com\n",
])
def test_email_rejects(value):
    with pytest.raises(ValidationError, match="Invalid email format"):
        validate_email(value)


def test_email_too_long():
    with pytest.raises(ValidationError, match="254 characters or less"):
        validate_email("a" * 250 + "@example.com")


def test_validate_choice_lists_options():
    with pytest.raises(ValidationError, match="Expected one of: a, b"):
        validate_choice("c", ("a", "b"), "letter")


# User identifiers

def test_platform_email():
    assert platform_email("discord", "42") == "discord_42@loyalteez.app"


def test_user_identifier_accepts_camel_and_snake_case():
    snake = validate_user_identifier({"platform": "discord", "platform_user_id": "42"})
    camel = validate_user_identifier({"platform": "discord", "platformUserId": "42"})
    assert resolve_user_email(snake) == resolve_user_email(camel) == "discord_42@loyalteez.app"


def test_user_identifier_prefers_email():
    identifier = validate_user_identifier({"email": "user@example.com", "platform": "discord", "platform_user_id": "42"})
    assert resolve_user_email(identifier) == "user@example.com"


def test_user_identifier_requires_one_form():
    with pytest.raises(ValidationError, match="Either email or platform\\+platformUserId"):
        validate_user_identifier({"platform": "discord"})


def test_user_identifier_validates_email():
    with pytest.raises(ValidationError, match="Invalid email format"):
        validate_user_identifier({"email": "not-an-email"})


# Structured inputs

def _event(**overrides):
    event = {
        "name": "Helpful Answer",
        "description": "Recognized for helping another member",
        "default_reward": 50,
        "max_claims_per_user": 100,
    }
    event.update(overrides)
    return event


def test_event_definition_defaults():
    definition = validate_event_definition(_event())
    assert definition.requires_email is True
    assert definition.event_type is None


def test_event_definition_collects_all_violations():
    with pytest.raises(ValidationError) as exc_info:
        validate_event_definition(_event(name="ab", description="short", default_reward=0))
    message = str(exc_info.value)
    assert "name" in message
    assert "description" in message
    assert "default_reward" in message or "defaultReward" in message


def test_event_definition_detection_method_must_be_known():
    with pytest.raises(ValidationError, match="detection_?[mM]ethods"):
        validate_event_definition(_event(detection_methods=[{"method": "telepathy", "config": {}}]))


def test_event_definition_accepts_discord_interaction():
    definition = validate_event_definition(_event(
        detection_methods=[{"method": "discord_interaction", "config": {"command": "/reward"}}]
    ))
    assert definition.detection_methods[0].method == "discord_interaction"


def test_program_context_requires_goals_and_platforms():
    with pytest.raises(ValidationError) as exc_info:
        validate_program_context({"app_type": "gaming", "goals": [], "platforms": []})
    message = str(exc_info.value)
    assert "goals" in message
    assert "platforms" in message


def test_program_context_accepts_camel_case():
    context = validate_program_context({
        "appType": "discord_community",
        "goals": ["increase_engagement"],
        "platforms": ["discord"],
        "existingEvents": ["daily_gm"],
    })
    assert context.app_type == "discord_community"
    assert context.existing_events == ["daily_gm"]


def test_bulk_event_needs_a_user():
    with pytest.raises(ValidationError, match="user_email or user_identifier"):
        validate_bulk_event({"event_type": "daily_gm"})


def test_bulk_event_email_from_identifier():
    event = validate_bulk_event({
        "event_type": "daily_gm",
        "user_identifier": {"platform": "telegram", "platform_user_id": "7"},
    })
    assert event.email == "telegram_7@loyalteez.app"


# Brand id resolution

def test_resolve_brand_id_prefers_candidate():
    assert resolve_brand_id(OTHER_BRAND_ID, BRAND_ID) == OTHER_BRAND_ID


def test_resolve_brand_id_falls_back_to_default():
    assert resolve_brand_id(None, BRAND_ID.upper().replace("0X", "0x")) == BRAND_ID


def test_resolve_brand_id_missing():
    with pytest.raises(ValidationError) as exc_info:
        resolve_brand_id(None, None)
    message = str(exc_info.value)
    assert message.startswith("BrandId is required but not provided.")
    assert "LOYALTEEZ_BRAND_ID" in message
    assert "Example: export LOYALTEEZ_BRAND_ID=0x" in message


def test_resolve_brand_id_invalid_candidate():
    with pytest.raises(ValidationError, match="Invalid brandId provided: 0x123"):
        resolve_brand_id("0x123", BRAND_ID)


def test_resolve_brand_id_invalid_default():
    with pytest.raises(ValidationError, match="Invalid LOYALTEEZ_BRAND_ID environment variable: nope"):
        resolve_brand_id(None, "nope")
