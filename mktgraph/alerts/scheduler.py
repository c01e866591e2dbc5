"""Periodic alert rescans.

Re-runs a scan callable on a fixed interval as an asyncio task so a
presentation layer can show a live-refreshing alert feed. Each scan is
synchronous and recomputes from scratch; cancelling the task only
stops future scans.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import pandas as pd

from .types import MIN_SCAN_INTERVAL_SEC, AlertConfig

logger = logging.getLogger(__name__)


class PeriodicScan:
    """
    Repeating scan task.

    Parameters
    ----------
    scan : Callable[[], Any]
        Zero-argument callable returning the scan result
        (typically a list of alerts).
    interval_sec : float, default 10.0
        Seconds between scans. Raised to ``min_interval_sec`` if lower.
    min_interval_sec : float, default MIN_SCAN_INTERVAL_SEC
        Interval floor.

    Examples
    --------
    >>> scanner = PeriodicScan(lambda: scan_alerts(*datasets), interval_sec=10)
    >>> await scanner.start()
    >>> scanner.last_result
    [Alert(type='Bookrunner Skew', ...)]
    >>> await scanner.stop()
    """

    def __init__(
        self,
        scan: Callable[[], Any],
        interval_sec: float = 10.0,
        min_interval_sec: float = MIN_SCAN_INTERVAL_SEC,
    ):
        self._scan = scan
        self.interval_sec = max(float(interval_sec), float(min_interval_sec))
        self.last_result: Any = None
        self.last_scan_at: Optional[pd.Timestamp] = None
        self.n_scans = 0
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_config(cls, scan: Callable[[], Any], config: AlertConfig) -> "PeriodicScan":
        """Scanner using the alert config's ``scan_interval_sec``."""
        return cls(scan, interval_sec=config.scan_interval_sec)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> Any:
        """Scan now, outside the schedule, and record the result."""
        self.last_result = self._scan()
        self.last_scan_at = pd.Timestamp.now()
        self.n_scans += 1
        return self.last_result

    async def start(self) -> None:
        """Scan immediately, then keep scanning every interval."""
        if self.running:
            logger.warning("Periodic scan already running")
            return

        self.run_once()
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Started periodic scan every {self.interval_sec:.1f}s")

    async def stop(self) -> None:
        """Cancel future scans. Safe to call when not running."""
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"Stopped periodic scan after {self.n_scans} scans")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_sec)
            try:
                self.run_once()
            except Exception:
                logger.exception("Periodic scan failed, keeping previous result")
                continue
            logger.debug(f"Periodic scan #{self.n_scans} complete")
