"""Alerts package - threshold-driven alert feed.

Public API:
- scan_alerts: Run every alert rule over one snapshot
- Alert, AlertConfig: Alert record and thresholds
- PeriodicScan: Repeating asyncio scan task
- build_pulse_feed: News-style Market Pulse feed
"""

from .types import Alert, AlertConfig, MAX_ALERTS, MIN_SCAN_INTERVAL_SEC, SEVERITIES
from .engine import (
    scan_alerts,
    redemption_alerts,
    market_pulse_alerts,
    dispersion_alerts,
    headline_alerts,
    bookrunner_alerts,
    format_usd,
)
from .scheduler import PeriodicScan
from .feed import FeedItem, build_pulse_feed

__all__ = [
    # Types
    "Alert",
    "AlertConfig",
    "MAX_ALERTS",
    "MIN_SCAN_INTERVAL_SEC",
    "SEVERITIES",
    # Rules
    "scan_alerts",
    "redemption_alerts",
    "market_pulse_alerts",
    "dispersion_alerts",
    "headline_alerts",
    "bookrunner_alerts",
    "format_usd",
    # Scheduling
    "PeriodicScan",
    # Feed
    "FeedItem",
    "build_pulse_feed",
]
