# resources/sdk.py
"""
Client SDK references.

The JavaScript SDK reference is kept as structured data and rendered to
markdown on read; the mobile guide is static markdown since mobile apps call
the HTTP API directly.
"""

import json
from typing import Any, Dict

from fastmcp import FastMCP

from ..runtime import Runtime


def _method(signature: str, description: str, example: str, **extra: Any) -> Dict[str, Any]:
    return {"signature": signature, "description": description, **extra, "example": example}


SDK_REFERENCE: Dict[str, Any] = {
    "installation": {
        "cdn": '<script src="https://api.loyalteez.app/sdk.js"></script>',
        "description": "The SDK automatically creates a global LoyalteezAutomation object",
    },
    "methods": {
        "init": _method(
            "LoyalteezAutomation.init(brandId, options?)",
            "Initialize the SDK with your Brand ID and configuration",
            """\
LoyalteezAutomation.init('your-brand-id', {
  debug: true,
  autoDetect: true,
  events: 'newsletter_subscribe:25,form_submit:10',
  eventNameMapping: { 'newsletter_signup': 'newsletter_subscribe' }
});""",
            parameters={
                "brandId": {"type": "string", "required": True, "description": "Your Loyalteez Brand ID"},
                "options": {
                    "type": "object",
                    "required": False,
                    "properties": {
                        "debug": {"type": "boolean", "default": False, "description": "Enable console logging"},
                        "autoDetect": {"type": "boolean", "default": False, "description": "Auto-detect form submissions"},
                        "endpoint": {"type": "string", "default": "https://api.loyalteez.app", "description": "API endpoint URL"},
                        "events": {"type": "string", "description": 'Event rules (e.g., "form_submit:25,newsletter_signup:50")'},
                        "eventNameMapping": {"type": "object", "description": "Map custom event names to Loyalteez events"},
                    },
                },
            },
        ),
        "track": _method(
            "LoyalteezAutomation.track(eventType, data)",
            "Track a custom event and reward the user",
            """\
LoyalteezAutomation.track('complete_survey', {
  userEmail: 'user@example.com',
  metadata: { surveyId: 'survey_123', score: 5 }
});""",
            parameters={
                "eventType": {"type": "string", "required": True, "description": "Event type to track"},
                "data": {
                    "type": "object",
                    "required": True,
                    "properties": {
                        "userEmail": {"type": "string", "required": True, "description": "User's email address"},
                        "userIdentifier": {"type": "string", "description": "Alternative user identifier"},
                        "userWallet": {"type": "string", "description": "User's wallet address"},
                        "metadata": {"type": "object", "description": "Additional custom data"},
                    },
                },
            },
            supportedEventTypes=[
                {"type": "account_creation", "reward": "100 LTZ"},
                {"type": "complete_survey", "reward": "75 LTZ"},
                {"type": "newsletter_subscribe", "reward": "25 LTZ"},
                {"type": "rate_experience", "reward": "50 LTZ"},
                {"type": "subscribe_renewal", "reward": "200 LTZ"},
                {"type": "form_submit", "reward": "10 LTZ"},
            ],
        ),
        "trackWithWallet": _method(
            "LoyalteezAutomation.trackWithWallet(eventType, privy, data?)",
            "Track an event and automatically include the user's Privy wallet address",
            """\
const privy = usePrivy();
await LoyalteezAutomation.trackWithWallet('account_creation', privy, {
  userEmail: privy.user.email?.address
});""",
        ),
        "identify": _method(
            "LoyalteezAutomation.identify(userId, traits?)",
            "Associate SDK session with a user",
            "LoyalteezAutomation.identify(user.id, { email: user.email, name: user.name });",
        ),
        "reset": _method(
            "LoyalteezAutomation.reset()",
            "Clear user session (call on logout)",
            "LoyalteezAutomation.reset();",
        ),
        "getUserWallet": _method(
            "LoyalteezAutomation.getUserWallet(email)",
            "Get the user's Loyalteez wallet address",
            """\
const wallet = await LoyalteezAutomation.getUserWallet('user@example.com');
console.log(wallet.walletAddress, wallet.ltzBalance);""",
            returns={"walletAddress": {"type": "string"}, "ltzBalance": {"type": "number"}},
        ),
        "startAutoDetection": _method(
            "LoyalteezAutomation.startAutoDetection()",
            "Enable automatic form submission detection (called by init when autoDetect is true)",
            "LoyalteezAutomation.startAutoDetection();",
            notes=(
                "Auto-detection ignores Loyalteez API calls, forms without email fields, "
                "and requests to same-origin APIs."
            ),
        ),
        "stopAutoDetection": _method(
            "LoyalteezAutomation.stopAutoDetection()",
            "Disable automatic form submission detection",
            "LoyalteezAutomation.stopAutoDetection();",
        ),
    },
    "clientSideMethods": {
        "note": (
            "identify, reset, getUserWallet, startAutoDetection and stopAutoDetection manage browser "
            "state and are not exposed as MCP tools."
        ),
    },
    "autoDetection": {
        "description": "The SDK can automatically track events based on configured detection methods",
        "methods": [
            {"type": "url_pattern", "description": "Tracks events when the URL matches a pattern", "example": "/thank-you"},
            {"type": "css_selector", "description": "Tracks clicks on matching elements", "example": ".download-button"},
            {"type": "form_submission", "description": "Tracks form submissions", "example": "#contact-form"},
        ],
    },
    "troubleshooting": {
        "sdkNotLoading": [
            "Check script tag is present and correct",
            "Check browser console for errors",
            "Ensure brand ID is correct",
        ],
        "eventsNotTracking": [
            "Verify brand ID is set correctly",
            "Ensure event types are configured in Partner Portal",
            "Verify domain is authorized in Partner Portal",
        ],
        "corsErrors": [
            "Verify domain is authorized in Partner Portal",
            "Ensure using HTTPS (not HTTP)",
        ],
        "browserVsMobile": "The JavaScript SDK is browser-only. Mobile apps POST to /loyalteez-api/manual-event.",
    },
}


def render_javascript_reference() -> str:
    return (
        "# JavaScript SDK Reference\n\n"
        "## Installation\n\n"
        f"```html\n{SDK_REFERENCE['installation']['cdn']}\n```\n\n"
        "The SDK automatically creates a global `LoyalteezAutomation` object.\n\n"
        "## Methods\n\n"
        f"```json\n{json.dumps(SDK_REFERENCE, indent=2)}\n```\n"
    )


MOBILE_SDK_GUIDE = """\
# Mobile SDK Integration Examples

The Loyalteez JavaScript SDK is browser-only. Mobile apps (React Native, iOS,
Android, Flutter) call the HTTP API directly.

| Feature | Web | Mobile |
|---------|-----|--------|
| **SDK** | JavaScript CDN | Direct API calls |
| **Authentication** | Privy Web SDK | Privy Mobile SDK |
| **Event Tracking** | Auto-detection | Manual calls |
| **Offline** | Limited | Queue events |

## React Native

```javascript
const trackEvent = async (eventType, userEmail, metadata = {}) => {
  const response = await fetch('https://api.loyalteez.app/loyalteez-api/manual-event', {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify({
      brandId: 'your-brand-id',
      eventType,
      userEmail,
      metadata: { platform: 'mobile', os: 'react-native', ...metadata },
    }),
  });
  return await response.json();
};
```

## iOS (Swift)

```swift
func trackEvent(eventType: String, userEmail: String) async throws {
    var request = URLRequest(url: URL(string: "https://api.loyalteez.app/loyalteez-api/manual-event")!)
    request.httpMethod = "POST"
    request.setValue("application/json", forHTTPHeaderField: "Content-Type")
    request.httpBody = try JSONSerialization.data(withJSONObject: [
        "brandId": "your-brand-id",
        "eventType": eventType,
        "userEmail": userEmail,
        "metadata": ["platform": "mobile", "os": "iOS"]
    ])
    let (_, response) = try await URLSession.shared.data(for: request)
    guard (response as? HTTPURLResponse)?.statusCode == 200 else {
        throw NSError(domain: "LoyaltyService", code: -1)
    }
}
```

## Android (Kotlin)

```kotlin
val body = JSONObject().apply {
    put("brandId", brandId)
    put("eventType", eventType)
    put("userEmail", userEmail)
    put("metadata", JSONObject().put("platform", "mobile").put("os", "Android"))
}
val request = Request.Builder()
    .url("https://api.loyalteez.app/loyalteez-api/manual-event")
    .post(body.toString().toRequestBody("application/json".toMediaType()))
    .build()
val response = OkHttpClient().newCall(request).execute()
```

## Flutter (Dart)

```dart
final response = await http.post(
  Uri.parse('https://api.loyalteez.app/loyalteez-api/manual-event'),
  headers: {'Content-Type': 'application/json'},
  body: jsonEncode({
    'brandId': brandId,
    'eventType': eventType,
    'userEmail': userEmail,
    'metadata': {'platform': 'mobile', 'os': 'Flutter'},
  }),
);
```

## Best Practices

1. **Queue events offline** and sync when back online
2. **Add retry logic** for network failures
3. **Use Privy for wallets**
4. **Show rewards in-app** ("You earned X LTZ!")
5. **Cache the wallet address** to reduce API calls

## API Endpoints for Mobile

| Endpoint | Method | Purpose |
|----------|--------|---------|
| `/loyalteez-api/manual-event` | POST | Track user events |
| `/loyalteez-api/health` | GET | Health check |
| `/relay` | POST | Gasless transactions |

**Base URLs:**
- Event Handler: `https://api.loyalteez.app`
- Gas Relayer: `https://relayer.loyalteez.app`
"""


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://sdk/javascript",
        name="JavaScript SDK Reference",
        description="LoyalteezAutomation browser SDK methods and examples",
        mime_type="text/markdown",
    )
    def javascript_sdk() -> str:
        return render_javascript_reference()

    @mcp.resource(
        "loyalteez://sdk/mobile",
        name="Mobile Integration Examples",
        description="React Native, iOS, Android and Flutter integration via the HTTP API",
        mime_type="text/markdown",
    )
    def mobile_sdk() -> str:
        return MOBILE_SDK_GUIDE
