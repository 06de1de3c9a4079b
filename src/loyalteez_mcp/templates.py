# templates.py
"""
Integration code samples.

Pure rendering functions: each takes a small typed value plus a target tag
and returns source text for the caller to adapt. Nothing here touches the
network or the tool dispatch path.

Placeholders use '@@name' so the JavaScript, Ruby and PHP bodies can keep
their own '$' and '#{}' syntax untouched.
"""

from string import Template
from typing import Iterable, List

from .models import BatchEvent, ProgramDesign

EVENT_TRACKER_TARGETS = ("discord", "telegram", "web", "shopify", "generic")
PROGRAM_TARGETS = ("discord", "telegram", "web", "webhooks")
WEBHOOK_FRAMEWORKS = ("express", "nextjs", "flask", "rails", "php", "generic")

DEFAULT_WEBHOOK_ENDPOINT = "/webhooks/loyalteez"


class CodeTemplate(Template):
    delimiter = "@@"


# ----------------------- Event tracker samples ------------------------------

_DISCORD_TRACKER = CodeTemplate("""\
// Discord Bot Implementation
const { Client, GatewayIntentBits } = require('discord.js');

const client = new Client({ intents: [GatewayIntentBits.Guilds] });

client.on('ready', () => {
  console.log('Loyalteez Discord bot ready!');
});

// Event tracking function
async function trackEvent(eventType, userId) {
  const response = await fetch('@@api_base/loyalteez-api/manual-event', {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify({
      brandId: '@@brand_id',
      eventType: eventType,
      userEmail: `discord_${userId}@loyalteez.app`
    })
  });
  return await response.json();
}

// Example: Daily check-in command
client.on('interactionCreate', async interaction => {
  if (!interaction.isChatInputCommand()) return;

  if (interaction.commandName === 'daily') {
    const result = await trackEvent('@@event_type', interaction.user.id);
    await interaction.reply(`Check-in complete! Earned ${result.rewardAmount} LTZ`);
  }
});

client.login(process.env.DISCORD_TOKEN);""")

_TELEGRAM_TRACKER = CodeTemplate("""\
// Telegram Bot Implementation
const { Telegraf } = require('telegraf');

const bot = new Telegraf(process.env.TELEGRAM_TOKEN);

// Event tracking function
async function trackEvent(eventType, userId) {
  const response = await fetch('@@api_base/loyalteez-api/manual-event', {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify({
      brandId: '@@brand_id',
      eventType: eventType,
      userEmail: `telegram_${userId}@loyalteez.app`
    })
  });
  return await response.json();
}

// Example: Daily check-in command
bot.command('checkin', async (ctx) => {
  const result = await trackEvent('@@event_type', ctx.from.id);
  await ctx.reply(`Check-in complete! Earned ${result.rewardAmount} LTZ`);
});

bot.launch();""")

_WEB_TRACKER = CodeTemplate("""\
<!-- Web SDK Implementation -->
<script src="@@api_base/sdk.js"></script>
<script>
  LoyalteezAutomation.init('@@brand_id');

  // Track events manually
  function trackEvent(eventType, userEmail) {
    return fetch('@@api_base/loyalteez-api/manual-event', {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({
        brandId: '@@brand_id',
        eventType: eventType,
        userEmail: userEmail
      })
    }).then(res => res.json());
  }

  // Example: Track newsletter signup
  document.getElementById('newsletter-form').addEventListener('submit', async (e) => {
    e.preventDefault();
    const email = e.target.email.value;
    const result = await trackEvent('@@event_type', email);
    alert(`Earned ${result.rewardAmount} LTZ!`);
  });
</script>""")

_GENERIC_TRACKER = CodeTemplate("""\
// Generic Implementation
// Track events via the REST API

async function trackEvent(eventType, userEmail) {
  const response = await fetch('@@api_base/loyalteez-api/manual-event', {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify({
      brandId: '@@brand_id',
      eventType: eventType,
      userEmail: userEmail
    })
  });
  return await response.json();
}

// Example usage:
// await trackEvent('@@event_type', 'user@example.com');""")

_TRACKERS = {
    "discord": (_DISCORD_TRACKER, "daily_checkin"),
    "telegram": (_TELEGRAM_TRACKER, "daily_checkin"),
    "web": (_WEB_TRACKER, "newsletter_subscribe"),
    "shopify": (_WEB_TRACKER, "newsletter_subscribe"),
    "generic": (_GENERIC_TRACKER, "custom_event"),
}

_TRACKING_SNIPPET = CodeTemplate("""\
// Track this event:
await loyalteez_track_event({
  brand_id: "@@brand_id",
  event_type: "@@event_type",
  user_identifier: { email: "user@example.com" }
});""")


def render_tracking_snippet(brand_id: str, event_type: str) -> str:
    return _TRACKING_SNIPPET.substitute(brand_id=brand_id, event_type=event_type)


def render_event_tracker(target: str, brand_id: str, events: List[BatchEvent], api_base: str) -> str:
    """
    Bot or page code that fires the first of `events`.

    Unknown targets fall back to the generic REST sample.
    """
    target = target.lower()
    if target not in EVENT_TRACKER_TARGETS:
        target = "generic"
    template, fallback_event = _TRACKERS[target]
    event_type = events[0].event_type if events else fallback_event
    return template.substitute(api_base=api_base, brand_id=brand_id, event_type=event_type)


# ----------------------- Program integration samples ------------------------------

_DISCORD_PROGRAM = CodeTemplate("""\
// Discord Bot Implementation for @@program_name
const { Client, GatewayIntentBits } = require('discord.js');

const client = new Client({ intents: [GatewayIntentBits.Guilds, GatewayIntentBits.GuildMessages] });

client.on('ready', () => {
  console.log('Loyalty bot ready!');
});

// Track event function
async function trackEvent(eventType, userId) {
  const response = await fetch('@@api_base/loyalteez-api/manual-event', {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify({
      brandId: 'YOUR_BRAND_ID',
      eventType: eventType,
      userEmail: `discord_${userId}@loyalteez.app`
    })
  });
  return await response.json();
}

// Example commands for your events:
@@event_comments

client.login(process.env.DISCORD_TOKEN);""")

_TELEGRAM_PROGRAM = CodeTemplate("""\
// Telegram Bot Implementation for @@program_name
const { Telegraf } = require('telegraf');

const bot = new Telegraf(process.env.TELEGRAM_TOKEN);

// Track event function
async function trackEvent(eventType, userId) {
  const response = await fetch('@@api_base/loyalteez-api/manual-event', {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify({
      brandId: 'YOUR_BRAND_ID',
      eventType: eventType,
      userEmail: `telegram_${userId}@loyalteez.app`
    })
  });
  return await response.json();
}

// Example commands:
@@event_comments

bot.launch();""")

_WEB_PROGRAM = CodeTemplate("""\
<!-- Web SDK Implementation for @@program_name -->
<script src="@@api_base/sdk.js"></script>
<script>
  LoyalteezAutomation.init('YOUR_BRAND_ID');

  // Events are tracked based on your configuration
@@event_comments
</script>""")

_WEBHOOK_PROGRAM = CodeTemplate("""\
// Webhook Handler for @@program_name
// POST endpoint: @@endpoint

app.post('@@endpoint', async (req, res) => {
  const { eventType, userEmail, metadata } = req.body;

  const response = await fetch('@@api_base/loyalteez-api/manual-event', {
    method: 'POST',
    headers: { 'Content-Type': 'application/json' },
    body: JSON.stringify({
      brandId: 'YOUR_BRAND_ID',
      eventType: eventType,
      userEmail: userEmail,
      metadata: metadata
    })
  });

  const result = await response.json();
  res.json(result);
});""")

_PROGRAMS = {
    "discord": (_DISCORD_PROGRAM, ""),
    "telegram": (_TELEGRAM_PROGRAM, ""),
    "web": (_WEB_PROGRAM, "  "),
    "webhooks": (_WEBHOOK_PROGRAM, ""),
}


def _event_comments(program: ProgramDesign, indent: str) -> str:
    lines = [f"{indent}// {e.name}: {e.description}" for e in program.events]
    return "\n".join(lines) or f"{indent}// (no events generated)"


def render_program_integration(target: str, program: ProgramDesign, api_base: str) -> str:
    if target not in PROGRAM_TARGETS:
        raise ValueError(f"Unsupported integration target '{target}'")
    template, indent = _PROGRAMS[target]
    return template.substitute(
        program_name=program.name,
        api_base=api_base,
        endpoint=DEFAULT_WEBHOOK_ENDPOINT,
        event_comments=_event_comments(program, indent),
    )


def program_targets(platforms: Iterable[str]) -> List[str]:
    """Integration samples worth generating for a set of platforms; webhooks always apply."""
    wanted = {p.lower() for p in platforms} | {"webhooks"}
    if "shopify" in wanted:
        wanted.add("web")
    return [t for t in PROGRAM_TARGETS if t in wanted]


# ----------------------- Webhook receivers ------------------------------

_EXPRESS_RECEIVER = CodeTemplate("""\
// Node.js/Express Webhook Receiver
const express = require('express');
const crypto = require('crypto');
const app = express();

// Capture the raw body for signature verification
app.use('@@endpoint', express.raw({ type: 'application/json' }));

app.post('@@endpoint', (req, res) => {
  const signature = req.headers['x-loyalteez-signature'];
  const webhookSecret = process.env.LOYALTEEZ_WEBHOOK_SECRET;

  if (!signature || !webhookSecret) {
    return res.status(401).json({ error: 'Missing signature or secret' });
  }

  const expectedSignature = crypto
    .createHmac('sha256', webhookSecret)
    .update(req.body)
    .digest('hex');

  if (signature.length !== expectedSignature.length ||
      !crypto.timingSafeEqual(Buffer.from(signature), Buffer.from(expectedSignature))) {
    return res.status(401).json({ error: 'Invalid signature' });
  }

  const event = JSON.parse(req.body.toString());

  switch (event.type) {
    case 'reward.distributed':
      console.log(`User ${event.data.userEmail} earned ${event.data.amount} LTZ`);
      break;
    case 'perk.redeemed':
      console.log(`User ${event.data.userEmail} redeemed perk ${event.data.perkId}`);
      break;
    default:
      console.log(`Unhandled event type: ${event.type}`);
  }

  res.json({ received: true });
});

app.listen(3000, () => {
  console.log('Webhook receiver listening on port 3000');
});""")

_NEXTJS_RECEIVER = CodeTemplate("""\
// Next.js API Route for @@endpoint
import type { NextApiRequest, NextApiResponse } from 'next';
import crypto from 'crypto';

export const config = {
  api: { bodyParser: false },
};

export default async function handler(req: NextApiRequest, res: NextApiResponse) {
  if (req.method !== 'POST') {
    return res.status(405).json({ error: 'Method not allowed' });
  }

  const signature = req.headers['x-loyalteez-signature'] as string;
  const webhookSecret = process.env.LOYALTEEZ_WEBHOOK_SECRET;

  if (!signature || !webhookSecret) {
    return res.status(401).json({ error: 'Missing signature or secret' });
  }

  const chunks: Buffer[] = [];
  for await (const chunk of req) {
    chunks.push(chunk);
  }
  const rawBody = Buffer.concat(chunks);

  const expectedSignature = crypto
    .createHmac('sha256', webhookSecret)
    .update(rawBody)
    .digest('hex');

  if (signature.length !== expectedSignature.length ||
      !crypto.timingSafeEqual(Buffer.from(signature), Buffer.from(expectedSignature))) {
    return res.status(401).json({ error: 'Invalid signature' });
  }

  const event = JSON.parse(rawBody.toString());

  switch (event.type) {
    case 'reward.distributed':
      console.log(`User ${event.data.userEmail} earned ${event.data.amount} LTZ`);
      break;
    case 'perk.redeemed':
      console.log(`User ${event.data.userEmail} redeemed perk ${event.data.perkId}`);
      break;
    default:
      console.log(`Unhandled event type: ${event.type}`);
  }

  res.json({ received: true });
}""")

_FLASK_RECEIVER = CodeTemplate("""\
# Python/Flask Webhook Receiver
import hashlib
import hmac
import os

from flask import Flask, jsonify, request

app = Flask(__name__)


@app.route('@@endpoint', methods=['POST'])
def webhook():
    signature = request.headers.get('X-Loyalteez-Signature')
    webhook_secret = os.environ.get('LOYALTEEZ_WEBHOOK_SECRET')

    if not signature or not webhook_secret:
        return jsonify({'error': 'Missing signature or secret'}), 401

    raw_body = request.get_data()
    expected_signature = hmac.new(webhook_secret.encode(), raw_body, hashlib.sha256).hexdigest()

    if not hmac.compare_digest(signature, expected_signature):
        return jsonify({'error': 'Invalid signature'}), 401

    event = request.get_json()

    if event['type'] == 'reward.distributed':
        print(f"User {event['data']['userEmail']} earned {event['data']['amount']} LTZ")
    elif event['type'] == 'perk.redeemed':
        print(f"User {event['data']['userEmail']} redeemed perk {event['data']['perkId']}")
    else:
        print(f"Unhandled event type: {event['type']}")

    return jsonify({'received': True})


if __name__ == '__main__':
    app.run(port=3000)""")

_RAILS_RECEIVER = CodeTemplate("""\
# Ruby/Rails Webhook Receiver
# config/routes.rb
# post '@@endpoint', to: 'webhooks#loyalteez'

class WebhooksController < ApplicationController
  skip_before_action :verify_authenticity_token
  before_action :verify_webhook_signature

  def loyalteez
    event = JSON.parse(request.raw_post)

    case event['type']
    when 'reward.distributed'
      Rails.logger.info("User #{event['data']['userEmail']} earned #{event['data']['amount']} LTZ")
    when 'perk.redeemed'
      Rails.logger.info("User #{event['data']['userEmail']} redeemed perk #{event['data']['perkId']}")
    else
      Rails.logger.info("Unhandled event type: #{event['type']}")
    end

    render json: { received: true }
  end

  private

  def verify_webhook_signature
    signature = request.headers['X-Loyalteez-Signature']
    webhook_secret = ENV['LOYALTEEZ_WEBHOOK_SECRET']

    return head :unauthorized unless signature && webhook_secret

    expected_signature = OpenSSL::HMAC.hexdigest('sha256', webhook_secret, request.raw_post)

    head :unauthorized unless ActiveSupport::SecurityUtils.secure_compare(signature, expected_signature)
  end
end""")

_PHP_RECEIVER = CodeTemplate("""\
<?php
// PHP Webhook Receiver mounted at @@endpoint
header('Content-Type: application/json');

$signature = $_SERVER['HTTP_X_LOYALTEEZ_SIGNATURE'] ?? null;
$webhook_secret = getenv('LOYALTEEZ_WEBHOOK_SECRET');

if (!$signature || !$webhook_secret) {
    http_response_code(401);
    echo json_encode(['error' => 'Missing signature or secret']);
    exit;
}

$raw_body = file_get_contents('php://input');
$expected_signature = hash_hmac('sha256', $raw_body, $webhook_secret);

if (!hash_equals($expected_signature, $signature)) {
    http_response_code(401);
    echo json_encode(['error' => 'Invalid signature']);
    exit;
}

$event = json_decode($raw_body, true);

switch ($event['type']) {
    case 'reward.distributed':
        error_log("User {$event['data']['userEmail']} earned {$event['data']['amount']} LTZ");
        break;
    case 'perk.redeemed':
        error_log("User {$event['data']['userEmail']} redeemed perk {$event['data']['perkId']}");
        break;
    default:
        error_log("Unhandled event type: {$event['type']}");
}

echo json_encode(['received' => true]);
?>""")

_GENERIC_RECEIVER = CodeTemplate("""\
# Generic Webhook Receiver Template for @@endpoint
# This outline works for any framework/language

# 1. Get the signature from the header
signature = request.headers['X-Loyalteez-Signature']
webhook_secret = os.environ['LOYALTEEZ_WEBHOOK_SECRET']

# 2. Get the raw request body (must be raw, not parsed)
raw_body = request.raw_body  # Framework-specific

# 3. Verify the signature using HMAC-SHA256
expected_signature = hmac.new(webhook_secret.encode(), raw_body, hashlib.sha256).hexdigest()

if not hmac.compare_digest(signature, expected_signature):
    return 401  # Unauthorized

# 4. Parse the webhook payload
event = json.loads(raw_body)

# 5. Process the webhook event
if event['type'] == 'reward.distributed':
    user_email = event['data']['userEmail']
    amount = event['data']['amount']
elif event['type'] == 'perk.redeemed':
    user_email = event['data']['userEmail']
    perk_id = event['data']['perkId']

# 6. Return success
return {'received': True}""")

_RECEIVERS = {
    "express": _EXPRESS_RECEIVER,
    "nextjs": _NEXTJS_RECEIVER,
    "flask": _FLASK_RECEIVER,
    "rails": _RAILS_RECEIVER,
    "php": _PHP_RECEIVER,
    "generic": _GENERIC_RECEIVER,
}


def render_webhook_receiver(framework: str, endpoint: str = DEFAULT_WEBHOOK_ENDPOINT) -> str:
    template = _RECEIVERS.get(framework, _GENERIC_RECEIVER)
    return template.substitute(endpoint=endpoint or DEFAULT_WEBHOOK_ENDPOINT)
