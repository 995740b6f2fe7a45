"""
Prometheus metrics for realtime notification delivery and forced logouts.
"""

from marketplace.utils.metrics._helpers import _get_or_create_counter

notifications_delivered_total = _get_or_create_counter(
    "notifications_delivered_total",
    "Notification frames written to client connections",
    ["mode"],  # targeted, broadcast
)

notifications_failed_total = _get_or_create_counter(
    "notifications_failed_total",
    "Notification frames that could not be written to a connection",
)

notifications_dropped_total = _get_or_create_counter(
    "notifications_dropped_total",
    "Targeted notifications dropped because the recipient was offline",
)

force_logouts_total = _get_or_create_counter(
    "force_logouts_total",
    "Forced logout signals by outcome",
    ["result"],  # signalled, not_connected, failed
)
