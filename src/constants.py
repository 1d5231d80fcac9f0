"""Application-wide constants.

This module centralizes the magic numbers, Graph API details and
developer-defined payload tokens so handlers, content builders and tests
all share a single source of truth.
"""

# =============================================================================
# Facebook API
# =============================================================================

# Facebook Graph API version
FACEBOOK_GRAPH_API_VERSION = "v18.0"

FACEBOOK_GRAPH_API_BASE_URL = "https://graph.facebook.com"

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Longest error body kept in logs and SendError values (chars)
MAX_LOGGED_RESPONSE_BODY_CHARS = 500

# =============================================================================
# Webhook
# =============================================================================

# Header carrying "sha1=<hex digest>" of the raw request body
SIGNATURE_HEADER = "X-Hub-Signature"

# =============================================================================
# Replies
# =============================================================================

# Delay before follow-up messages (greeting, specials prompt) are sent (seconds)
FOLLOW_UP_DELAY_SECONDS = 1.0

# =============================================================================
# Account Linking
# =============================================================================

# Stub value; a real deployment must issue a code per user.
PLACEHOLDER_AUTHORIZATION_CODE = "1234567890"

# =============================================================================
# Lifecycle
# =============================================================================

# Wait this long for pending follow-up sends to finish at shutdown (seconds)
GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS = 30.0

# =============================================================================
# Payload tokens (set on postback buttons and quick replies)
# =============================================================================

PAYLOAD_MENU = "DEVELOPER_DEFINED_PAYLOAD_FOR_MENU"
PAYLOAD_LOCATION = "DEVELOPER_DEFINED_PAYLOAD_FOR_LOCATION"
PAYLOAD_OPENING_HOURS = "DEVELOPER_DEFINED_PAYLOAD_FOR_OPENING_HOURS"
PAYLOAD_ALL_SPECIAL = "DEVELOPER_DEFINED_PAYLOAD_FOR_ALL_SPECIAL"
PAYLOAD_DAILY_SPECIAL = "DEVELOPER_DEFINED_PAYLOAD_FOR_DAILY_SPECIAL"
PAYLOAD_PARTY_SPECIAL = "DEVELOPER_DEFINED_PAYLOAD_FOR_PARTY_SPECIAL"
PAYLOAD_ALL_SPECIAL_BACK = "DEVELOPER_DEFINED_PAYLOAD_FOR_ALL_SPECIAL_BACK"
PAYLOAD_DAILY_SPECIAL_BACK = "DEVELOPER_DEFINED_PAYLOAD_FOR_DAILY_SPECIAL_BACK"
PAYLOAD_PARTY_SPECIAL_BACK = "DEVELOPER_DEFINED_PAYLOAD_FOR_PARTY_SPECIAL_BACK"
PAYLOAD_MAIN_MENU_BACK = "DEVELOPER_DEFINED_PAYLOAD_FOR_MAIN_MENU_BACK"
# Spelling matches the tokens already deployed on live quick replies
PAYLOAD_TESTIMONIALS = "DEVELOPER_DEFINED_PAYLOAD_FOR_TESTIMONALS"
PAYLOAD_REVIEWS = "DEVELOPER_DEFINED_PAYLOAD_REVIEWS"
PAYLOAD_START_OVER = "DEVELOPER_DEFINED_PAYLOAD_START_OVER"
PAYLOAD_GET_STARTED = "GET_STARTED_BUTTON_PAYLOAD"
