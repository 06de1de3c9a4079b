import hashlib
import hmac

import pytest

from loyalteez_mcp.templates import WEBHOOK_FRAMEWORKS, render_webhook_receiver
from loyalteez_mcp.tools.webhooks import compute_signature, verify_signature

from .test_utils import assert_tool_error, tool_json, tool_text

PAYLOAD = '{"type":"reward.earned","data":{"amount":25}}'
SECRET = "super-secret"
SIGNATURE = hmac.new(SECRET.encode(), PAYLOAD.encode(), hashlib.sha256).hexdigest()


def test_compute_signature():
    assert compute_signature(PAYLOAD, SECRET) == SIGNATURE


@pytest.mark.parametrize("signature", [
    SIGNATURE,
    SIGNATURE.upper(),
    "whsec_" + SIGNATURE,
])
def test_verify_signature_accepts(signature):
    assert verify_signature(PAYLOAD, signature, SECRET) is True


@pytest.mark.parametrize("signature", [
    "",
    "whsec_",
    "not-hex-at-all",
    SIGNATURE[:-2],
    SIGNATURE + "00",
    compute_signature(PAYLOAD, "other-secret"),
])
def test_verify_signature_rejects(signature):
    assert verify_signature(PAYLOAD, signature, SECRET) is False


def test_verify_signature_detects_tampering():
    assert verify_signature(PAYLOAD.replace("25", "2500"), SIGNATURE, SECRET) is False


@pytest.mark.parametrize("framework", WEBHOOK_FRAMEWORKS)
def test_receivers_use_endpoint(framework):
    code = render_webhook_receiver(framework, "/hooks/ltz")
    assert "/hooks/ltz" in code
    assert "@@" not in code


@pytest.mark.asyncio
async def test_validate_webhook_tool(client):
    result = await client.call_tool("loyalteez_validate_webhook", {
        "payload": PAYLOAD,
        "signature": SIGNATURE,
        "secret": SECRET,
    })

    assert tool_json(result) == {
        "valid": True,
        "message": "Webhook signature is valid",
        "expectedSignature": SIGNATURE,
        "receivedSignature": SIGNATURE,
    }


@pytest.mark.asyncio
async def test_validate_webhook_tool_invalid(client):
    result = await client.call_tool("loyalteez_validate_webhook", {
        "payload": PAYLOAD,
        "signature": "deadbeef",
        "secret": SECRET,
    })

    data = tool_json(result)
    assert data["valid"] is False
    assert data["message"] == "Webhook signature is invalid - request may not be from Loyalteez"


@pytest.mark.asyncio
async def test_webhook_example_tool(unbranded_client):
    result = await unbranded_client.call_tool("loyalteez_webhook_example", {"framework": "flask"})

    code = tool_text(result)
    assert "@app.route('/webhooks/loyalteez', methods=['POST'])" in code
    assert "hmac.compare_digest" in code


@pytest.mark.asyncio
async def test_webhook_example_unknown_framework(client):
    result = await client.call_tool("loyalteez_webhook_example", {"framework": "django"}, raise_on_error=False)

    assert_tool_error(result, "Invalid framework 'django'", "express")
