"""
Rolling observation history.

Keeps a time-bounded window of observations per station and a short ring
of per-snapshot network counts per channel. Not thread-safe on its own;
AttackMonitor serializes access.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Iterable

from .constants import CHANNEL_HISTORY_LENGTH, OBSERVATION_WINDOW_SECONDS
from .models import NetworkObservation

logger = logging.getLogger('wifiwatch.history')


class ObservationHistory:
    """Per-station observation windows and per-channel count rings."""

    def __init__(
        self,
        window_seconds: float = OBSERVATION_WINDOW_SECONDS,
        channel_history_length: int = CHANNEL_HISTORY_LENGTH,
    ):
        self.window_seconds = window_seconds
        self.channel_history_length = channel_history_length
        self._windows: dict[str, deque[NetworkObservation]] = {}
        self._channel_counts: dict[int, deque[int]] = defaultdict(
            lambda: deque(maxlen=self.channel_history_length)
        )

    def ingest(self, observations: Iterable[NetworkObservation], now: float) -> None:
        """
        Append a snapshot to the station windows and prune by age.

        Stations missing from the snapshot keep their window until every
        entry has aged out. Any window left empty after pruning is dropped,
        including one whose only entry arrived already stale.
        """
        for obs in observations:
            window = self._windows.get(obs.bssid)
            if window is None:
                window = deque()
                self._windows[obs.bssid] = window
            window.append(obs)

        removed = 0
        for bssid in list(self._windows):
            window = self._windows[bssid]
            self._prune(window, now)
            if not window:
                del self._windows[bssid]
                removed += 1

        if removed:
            logger.debug(f"Dropped {removed} expired station windows")

    def _prune(self, window: deque[NetworkObservation], now: float) -> None:
        # Timestamps are not assumed monotonic
        kept = [obs for obs in window if now - obs.timestamp <= self.window_seconds]
        if len(kept) != len(window):
            window.clear()
            window.extend(kept)

    def window(self, bssid: str) -> list[NetworkObservation]:
        """Retained observations for a station, oldest first."""
        return list(self._windows.get(bssid, ()))

    def recent_rssi(self, bssid: str, depth: int) -> list[int]:
        """RSSI of the station's last `depth` observations, oldest first."""
        window = self._windows.get(bssid)
        if not window:
            return []
        return [obs.rssi for obs in list(window)[-depth:]]

    def window_size(self, bssid: str) -> int:
        return len(self._windows.get(bssid, ()))

    @property
    def stations(self) -> list[str]:
        return list(self._windows)

    def record_channel_count(self, channel: int, count: int) -> None:
        """Append a snapshot's network count to the channel ring."""
        self._channel_counts[channel].append(count)

    def channel_counts(self, channel: int) -> list[int]:
        """Count ring for a channel, oldest first."""
        counts = self._channel_counts.get(channel)
        return list(counts) if counts else []

    def clear(self) -> None:
        self._windows.clear()
        self._channel_counts.clear()
