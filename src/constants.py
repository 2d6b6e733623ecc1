"""Application-wide constants.

This module centralizes magic numbers and fixed reply strings so the
webhook handlers and services share a single source of truth.
"""

# =============================================================================
# Facebook API
# =============================================================================

# Facebook Graph API version
FACEBOOK_GRAPH_API_VERSION = "v18.0"

# Send API endpoint for the page the access token belongs to
FACEBOOK_SEND_API_URL = (
    f"https://graph.facebook.com/{FACEBOOK_GRAPH_API_VERSION}/me/messages"
)

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Header carrying the HMAC-SHA256 of the raw webhook body
SIGNATURE_HEADER = "x-hub-signature-256"

# Prefix Facebook puts in front of the hex digest
SIGNATURE_PREFIX = "sha256="

# Webhook object type for Messenger page subscriptions
PAGE_OBJECT = "page"

# =============================================================================
# Message Constraints
# =============================================================================

# Messenger Send API rejects text longer than this (chars)
MAX_MESSENGER_TEXT_CHARS = 2000

# Reply length requested from the model (chars)
MAX_REPLY_LENGTH_CHARS = 500

# Characters of the response body kept in error logs
LOG_RESPONSE_BODY_CHARS = 500

# =============================================================================
# Gemini
# =============================================================================

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"

REPLY_PROMPT_TEMPLATE = (
    "You are a helpful customer service assistant for a Facebook business page.\n"
    "\n"
    'User message: "{user_message}"\n'
    "\n"
    "Please provide a friendly, concise response "
    f"(max {MAX_REPLY_LENGTH_CHARS} characters).\n"
    "If it's a question, answer helpfully. If it's a complaint, empathize and "
    "offer solutions.\n"
    "Always be professional and courteous."
)

# Sent when the model call fails for any reason
GENERATION_FALLBACK_REPLY = (
    "Thank you for your message. I'm having technical difficulties. "
    "Please try again later."
)

# =============================================================================
# Postbacks
# =============================================================================

POSTBACK_REPLIES = {
    "GET_STARTED": "Welcome! 👋 How can I help you today?",
    "MENU_INFO": "Here's our business information...",
    "MENU_SUPPORT": "Select an issue: 1) Billing 2) Technical 3) General",
}

UNKNOWN_POSTBACK_REPLY = "I didn't understand that action."

# =============================================================================
# Server
# =============================================================================

DEFAULT_PORT = 5000

DEFAULT_ENVIRONMENT = "development"
