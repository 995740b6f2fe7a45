"""
Application-level constants for hardcoded business logic.

These values represent core application behavior and should NEVER be changed
via environment variables or configuration. They are compile-time constants
that define protocol codes, client messages and internal timing.

For configurable values (Redis pools, key prefixes, logging, etc.),
see marketplace/settings.py where values can be overridden via environment
variables.
"""

# ============================================================================
# WebSocket Protocol Constants
# ============================================================================

# WebSocket close code for policy violations (RFC 6455 standard)
# Used when rejecting connections whose session fails validation
WS_POLICY_VIOLATION_CODE = 1008


# ============================================================================
# Realtime Messages
# ============================================================================

# Sender used for notifications that do not name one
SYSTEM_SENDER = "System"

MSG_SESSION_NOT_IN_TOKEN = "Session not found in token"
MSG_INVALID_SESSION_FORMAT = "Invalid sessionId format"
MSG_SESSION_INVALID = "Session invalid or expired"
MSG_SESSION_LOOKUP_FAILED = "Session lookup failed"
MSG_SESSION_REGISTERED = "Session registered successfully"
MSG_SESSION_TERMINATED = "Your session was terminated"


# ============================================================================
# Background Task Behavior
# ============================================================================

# Sleep interval (seconds) between task iterations when idle
# Prevents busy-waiting while allowing responsive task loops
TASK_SLEEP_INTERVAL_SECONDS = 0.5


# ============================================================================
# Redis Pub/Sub Behavior
# ============================================================================

# Timeout (seconds) when waiting for Redis messages in pub/sub
# Prevents indefinite blocking while allowing efficient message processing
REDIS_MESSAGE_TIMEOUT_SECONDS = 1

# Pattern for keyspace notifications about expired keys
REDIS_EXPIRED_KEYS_PATTERN = "__keyevent@*__:expired"


# ============================================================================
# Keycloak / Authentication
# ============================================================================

# Extra buffer time (seconds) added to session expiry in Redis
# Ensures Redis expiry slightly outlasts the session itself so that
# validation, not key eviction, decides when a session is over
KC_SESSION_EXPIRY_BUFFER_SECONDS = 10


# ============================================================================
# Logging
# ============================================================================

# Maximum size of one structured log line pushed to Loki
LOKI_MAX_LOG_SIZE_BYTES = 256 * 1024
