# resources/rate_limits.py
"""Rate limits enforced by the Loyalteez services, and client-side strategies."""

from fastmcp import FastMCP

from ..runtime import Runtime
from ..tools.events import BULK_EVENTS_LIMIT
from ..tools.transactions import MAX_GAS_LIMIT
from . import to_json

RELAYER_TRANSACTIONS_PER_HOUR = 35
PREGENERATION_REQUESTS_PER_MINUTE = 100


def _endpoint(endpoint: str, limit: str, scope: str, reset_period: str, description: str) -> dict:
    return {
        "endpoint": endpoint,
        "limit": limit,
        "scope": scope,
        "resetPeriod": reset_period,
        "description": description,
    }


def _header(name: str, description: str, example: str) -> dict:
    return {"name": name, "description": description, "example": example}


RATE_LIMITS = {
    "eventHandler": {
        "endpoints": [
            _endpoint(
                "/loyalteez-api/manual-event",
                "1 per event type",
                "Per user email",
                "Daily (24 hours)",
                "Each user can receive each reward type once per day",
            ),
            _endpoint(
                "/loyalteez-api/bulk-events",
                f"{BULK_EVENTS_LIMIT} events per request",
                "Per request",
                "N/A",
                f"Maximum {BULK_EVENTS_LIMIT} events in a single bulk request",
            ),
            _endpoint(
                "/loyalteez-api/health",
                "Unlimited",
                "N/A",
                "N/A",
                "Health check endpoint has no rate limits",
            ),
        ],
        "duplicateDetection": {
            "window": "60 seconds",
            "behavior": "Returns 409 Conflict if same event + user within window",
        },
        "cooldown": {
            "default": "24 hours",
            "configurable": True,
            "description": "Based on cooldownHours in event rule configuration",
        },
    },
    "gasRelayer": {
        "transactions": {
            "limit": RELAYER_TRANSACTIONS_PER_HOUR,
            "scope": "Per wallet address",
            "resetPeriod": "Per hour",
            "description": f"Users can make {RELAYER_TRANSACTIONS_PER_HOUR} gasless transactions per hour",
        },
        "gasLimit": {
            "max": MAX_GAS_LIMIT,
            "description": "Maximum gas limit per transaction",
        },
        "gasPrice": {
            "max": "100 Gwei",
            "description": "Maximum gas price per transaction",
        },
    },
    "pregeneration": {
        "requests": {
            "limit": PREGENERATION_REQUESTS_PER_MINUTE,
            "scope": "Per brand",
            "resetPeriod": "Per minute",
            "description": (
                f"Maximum {PREGENERATION_REQUESTS_PER_MINUTE} pregeneration requests per brand per minute"
            ),
        },
        "idempotent": True,
        "description": "Same OAuth ID returns same wallet (not counted as new request)",
    },
    "headers": {
        "description": "Rate limit information is provided in response headers",
        "headers": [
            _header("X-RateLimit-Limit", "Maximum requests allowed", "35"),
            _header("X-RateLimit-Remaining", "Requests left in current window", "32"),
            _header("X-RateLimit-Reset", "Unix timestamp when limit resets", "1699999999"),
            _header("Retry-After", "Seconds to wait before retrying (429 responses)", "60"),
        ],
    },
}

RATE_LIMIT_STRATEGIES = {
    "detectRateLimits": """\
async function trackEventWithRateLimitCheck(eventType, userEmail) {
  const response = await fetch('https://api.loyalteez.app/loyalteez-api/manual-event', {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify({ brandId, eventType, userEmail })
  });

  const limit = response.headers.get('X-RateLimit-Limit');
  const remaining = response.headers.get('X-RateLimit-Remaining');
  const reset = response.headers.get('X-RateLimit-Reset');
  console.log(`Rate Limit: ${remaining}/${limit} remaining`);

  if (response.status === 429) {
    const resetDate = new Date(parseInt(reset) * 1000);
    return { success: false, error: 'rate_limited', resetAt: resetDate };
  }

  return await response.json();
}""",
    "clientSideDeduplication": """\
class EventTracker {
  constructor() {
    this.trackedEvents = new Map();
  }

  canTrackEvent(eventType, userEmail) {
    const lastTracked = this.trackedEvents.get(`${userEmail}:${eventType}`);
    if (!lastTracked) return true;
    return (Date.now() - lastTracked) / (1000 * 60 * 60) >= 24;
  }

  async trackEvent(eventType, userEmail) {
    if (!this.canTrackEvent(eventType, userEmail)) {
      return { success: false, error: 'already_tracked_today' };
    }
    const result = await fetch('https://api.loyalteez.app/loyalteez-api/manual-event', {
      method: 'POST',
      body: JSON.stringify({ brandId, eventType, userEmail })
    });
    this.trackedEvents.set(`${userEmail}:${eventType}`, Date.now());
    return await result.json();
  }
}""",
    "exponentialBackoff": """\
async function retryWithBackoff(fn, maxRetries = 5) {
  for (let i = 0; i < maxRetries; i++) {
    try {
      return await fn();
    } catch (error) {
      if (error.status === 429 && i < maxRetries - 1) {
        const delay = Math.min(1000 * Math.pow(2, i), 30000);
        await new Promise(resolve => setTimeout(resolve, delay));
        continue;
      }
      throw error;
    }
  }
}""",
    "trackTransactionCount": """\
class GasRelayerClient {
  constructor() {
    this.txCount = new Map();
  }

  currentHourKey(walletAddress) {
    const now = new Date();
    return `${walletAddress}:${now.getFullYear()}-${now.getMonth()}-${now.getDate()}-${now.getHours()}`;
  }

  canMakeTransaction(walletAddress) {
    return (this.txCount.get(this.currentHourKey(walletAddress)) || 0) < 35;
  }

  async executeTransaction(walletAddress, txData) {
    if (!this.canMakeTransaction(walletAddress)) {
      return { success: false, error: 'rate_limited', message: 'Maximum 35 transactions per hour.' };
    }
    const result = await fetch('https://relayer.loyalteez.app/relay', {
      method: 'POST',
      headers: {
        'Content-Type': 'application/json',
        'Authorization': `Bearer ${await getPrivyToken()}`
      },
      body: JSON.stringify(txData)
    });
    const key = this.currentHourKey(walletAddress);
    this.txCount.set(key, (this.txCount.get(key) || 0) + 1);
    return await result.json();
  }
}""",
}

RATE_LIMIT_BEST_PRACTICES = [
    "Cache locally to prevent duplicate requests",
    "Implement exponential backoff for retries",
    "Track rate limit headers to inform users",
    "Queue failed requests for later retry",
    "Monitor usage to avoid hitting limits",
    "Use bulk endpoints when possible to reduce request count",
]


def register(mcp: FastMCP, runtime: Runtime) -> None:

    @mcp.resource(
        "loyalteez://rate-limits/endpoints",
        name="Rate Limits by Endpoint",
        description="Complete rate limit reference for all API endpoints",
        mime_type="application/json",
    )
    def rate_limit_endpoints() -> str:
        return to_json(RATE_LIMITS)

    @mcp.resource(
        "loyalteez://rate-limits/strategies",
        name="Rate Limit Handling Strategies",
        description="Code examples and best practices for handling rate limits",
        mime_type="application/json",
    )
    def rate_limit_strategies() -> str:
        return to_json({
            "strategies": RATE_LIMIT_STRATEGIES,
            "bestPractices": RATE_LIMIT_BEST_PRACTICES,
        })
