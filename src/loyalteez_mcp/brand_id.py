# brand_id.py
"""Resolution of the brand id (tenant) a tool call operates on."""

from typing import Optional

from .validation import ValidationError, validate_brand_id

EXAMPLE_BRAND_ID = "0x47511fc1c6664c9598974cb112965f8b198e0c72"


def resolve_brand_id(candidate: Optional[str], default: Optional[str] = None) -> str:
    """
    Return the normalized brand id for a tool call.

    The caller-supplied value wins; otherwise the configured default
    (LOYALTEEZ_BRAND_ID) is used. Both are validated and lowercased.

    Raises:
        ValidationError: if the chosen value is malformed or neither is set.
    """
    if candidate:
        try:
            return validate_brand_id(candidate)
        except ValidationError:
            raise ValidationError(
                f"Invalid brandId provided: {candidate}. BrandId must be a valid Ethereum address "
                "(42 characters, starting with 0x). If not providing brandId, ensure "
                "LOYALTEEZ_BRAND_ID environment variable is set."
            ) from None

    if default:
        try:
            return validate_brand_id(default)
        except ValidationError:
            raise ValidationError(
                f"Invalid LOYALTEEZ_BRAND_ID environment variable: {default}. "
                "BrandId must be a valid Ethereum address (42 characters, starting with 0x)."
            ) from None

    raise ValidationError(
        "BrandId is required but not provided. Either:\n"
        "  1. Provide brandId as a tool parameter, or\n"
        "  2. Set LOYALTEEZ_BRAND_ID environment variable\n\n"
        f"Example: export LOYALTEEZ_BRAND_ID={EXAMPLE_BRAND_ID}"
    )
