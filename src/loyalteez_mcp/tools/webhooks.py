# tools/webhooks.py
"""Webhook signature validation and receiver code samples."""

import hashlib
import hmac
import json
from typing import Annotated, Optional

from fastmcp import Context, FastMCP

from ..errors import map_loyalteez_error_to_tool_error
from ..runtime import Runtime
from ..templates import DEFAULT_WEBHOOK_ENDPOINT, WEBHOOK_FRAMEWORKS, render_webhook_receiver
from ..validation import validate_choice

SIGNATURE_PREFIX = "whsec_"


def compute_signature(payload: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(payload: str, signature: str, secret: str) -> bool:
    """
    Check an X-Loyalteez-Signature value against the payload.

    Accepts a raw hex digest or one prefixed with "whsec_". Anything that is
    not a hex digest of the right length is simply invalid.
    """
    received = signature[len(SIGNATURE_PREFIX):] if signature.startswith(SIGNATURE_PREFIX) else signature
    try:
        received_bytes = bytes.fromhex(received)
    except ValueError:
        return False
    expected_bytes = bytes.fromhex(compute_signature(payload, secret))
    if not received_bytes or len(received_bytes) != len(expected_bytes):
        return False
    return hmac.compare_digest(received_bytes, expected_bytes)


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.tool(
        name="loyalteez_validate_webhook",
        tags={"webhooks", "read"}
    )
    async def validate_webhook(
        ctx: Context,
        payload: Annotated[str, {"description": "Raw webhook payload (request body as string)"}],
        signature: Annotated[str, {"description": "Signature from the X-Loyalteez-Signature header"}],
        secret: Annotated[str, {"description": "Your webhook secret (configured in the Partner Portal)"}],
    ) -> str:
        """
        Validate a webhook signature to make sure a request came from Loyalteez.

        Signatures are HMAC-SHA256 hex digests of the raw body keyed by your
        webhook secret. Always verify before processing events.

        See also: loyalteez://docs/guides/webhooks
        """
        try:
            valid = verify_signature(payload, signature, secret)
            return json.dumps({
                "valid": valid,
                "message": (
                    "Webhook signature is valid"
                    if valid
                    else "Webhook signature is invalid - request may not be from Loyalteez"
                ),
                "expectedSignature": compute_signature(payload, secret),
                "receivedSignature": signature,
            }, indent=2)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "validating webhook", ctx)

    @mcp.tool(
        name="loyalteez_webhook_example",
        tags={"webhooks", "read"}
    )
    async def webhook_example(
        ctx: Context,
        framework: Annotated[
            str,
            {"description": "Framework: 'express' | 'nextjs' | 'flask' | 'rails' | 'php' | 'generic'"}
        ],
        endpoint: Annotated[
            Optional[str],
            {"description": "Your webhook endpoint path (default /webhooks/loyalteez)"}
        ] = None,
    ) -> str:
        """
        Generate webhook receiver code with signature verification, error
        handling and event dispatch for the chosen framework.

        See also: loyalteez://docs/guides/webhooks
        """
        try:
            validate_choice(framework, WEBHOOK_FRAMEWORKS, "framework")
            return render_webhook_receiver(framework, endpoint or DEFAULT_WEBHOOK_ENDPOINT)
        except Exception as e:
            raise await map_loyalteez_error_to_tool_error(e, "generating webhook example", ctx)
