"""
Prometheus metrics definitions.

Metrics are grouped by subsystem and re-exported here:

    from marketplace.utils.metrics import ws_connections_active
"""

from marketplace.utils.metrics.notifications import (
    force_logouts_total,
    notifications_delivered_total,
    notifications_dropped_total,
    notifications_failed_total,
)
from marketplace.utils.metrics.websocket import (
    ws_connections_active,
    ws_connections_total,
    ws_message_processing_duration_seconds,
    ws_messages_received_total,
    ws_messages_sent_total,
)

__all__ = [
    "force_logouts_total",
    "notifications_delivered_total",
    "notifications_dropped_total",
    "notifications_failed_total",
    "ws_connections_active",
    "ws_connections_total",
    "ws_message_processing_duration_seconds",
    "ws_messages_received_total",
    "ws_messages_sent_total",
]
