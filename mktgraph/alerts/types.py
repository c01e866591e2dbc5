"""Core types for the alert engine.

Dataclasses for alert records and alert-threshold configuration.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict, fields
from typing import Any, Mapping

logger = logging.getLogger(__name__)

SEVERITIES = ("low", "med", "high")

MAX_ALERTS = 10

# Floor for the periodic rescan interval
MIN_SCAN_INTERVAL_SEC = 3.0

# Alternate option names accepted in config mappings
CONFIG_ALIASES = {
    "redeemNextMonths": "redeem_next_months",
    "redeemMinUSD": "redeem_min_usd",
    "pulseWeight": "pulse_weight",
    "newsWeight": "news_weight",
    "dispMin": "disp_min",
    "bankSkew": "bank_skew",
    "bankDom": "bank_dom",
    "scanIntervalSec": "scan_interval_sec",
}


@dataclass(frozen=True)
class Alert:
    """Single alert.

    Parameters
    ----------
    type : str
        Rule name, e.g. "Redemption Watch".
    severity : str
        One of "low", "med", "high".
    entity : str
        Issuer, ticker, bank or edge the alert is about.
    message : str
        Human-readable detail.
    """

    type: str
    severity: str
    entity: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class AlertConfig:
    """Alert thresholds.

    Parameters
    ----------
    redeem_min_usd : float, default 250_000_000
        Face value due within 12 months that triggers Redemption Watch.
    pulse_weight : float, default 3.0
        Aggregated MARKET_ACTIVITY weight per ticker for Market Pulse.
    news_weight : float, default 1.5
        NEWS_CO_MENTION edge weight for Headlines.
    disp_min : float, default 2.0
        Agency score spread for Ratings Dispersion.
    bank_skew : float, default 0.33
        Top-bank share for Bookrunner Skew.
    bank_dom : float, default 0.5
        Top-bank share for Bookrunner Dominance.
    redeem_next_months : int, default 12
        Horizon quoted in redemption messages.
    scan_interval_sec : float, default 10.0
        Periodic rescan interval.
    """

    redeem_min_usd: float = 250_000_000
    pulse_weight: float = 3.0
    news_weight: float = 1.5
    disp_min: float = 2.0
    bank_skew: float = 0.33
    bank_dom: float = 0.5
    redeem_next_months: int = 12
    scan_interval_sec: float = 10.0

    @classmethod
    def from_dict(cls, options: Mapping[str, Any] | None) -> AlertConfig:
        """
        Build a config from a mapping, defaulting unspecified options.

        Both snake_case field names and their camelCase aliases
        (``redeemMinUSD``, ``pulseWeight``, ...) are accepted. Unknown
        keys are ignored with a warning.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in (options or {}).items():
            name = CONFIG_ALIASES.get(key, key)
            if name not in known:
                logger.warning(f"Ignoring unknown alert option '{key}'")
                continue
            values[name] = value
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> AlertConfig:
        """Return a copy with some options replaced."""
        merged = asdict(self)
        merged.update(overrides)
        return AlertConfig.from_dict(merged)
