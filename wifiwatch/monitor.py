"""
WiFi attack monitor.

Coordinates the snapshot pipeline (history, channel statistics, scoring,
classification) and the direction estimator behind thread-safe commands
and read accessors.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Iterable, Optional

from .channels import ChannelStatsCalculator
from .classifier import AttackClassifier
from .constants import MAX_ATTACK_EVENTS
from .direction import DirectionEstimator
from .history import ObservationHistory
from .models import AttackEvent, ChannelStats, DirectionProfile, NetworkObservation, ThreatLevel
from .scoring import SuspiciousActivityScorer

logger = logging.getLogger('wifiwatch.monitor')

# Global monitor instance
_monitor_instance: Optional['AttackMonitor'] = None
_monitor_lock = threading.Lock()


class AttackMonitor:
    """
    Heuristic WiFi attack monitor.

    Snapshot ingestion runs as one transaction under the monitor lock.
    Orientation and direction state are owned by the DirectionEstimator,
    which has its own lock. Read accessors return copies of immutable
    records, never the live containers.
    """

    def __init__(
        self,
        active_window: float = 60.0,
        dedup_window: float = 0.0,
        max_events: int = MAX_ATTACK_EVENTS,
    ):
        self.active_window = active_window
        self._lock = threading.Lock()

        self._history = ObservationHistory()
        self._scorer = SuspiciousActivityScorer(self._history)
        self._calculator = ChannelStatsCalculator(self._history, self._scorer)
        self._classifier = AttackClassifier(max_events=max_events, dedup_window=dedup_window)
        self.direction = DirectionEstimator()

        # Published state
        self._networks: list[NetworkObservation] = []
        self._channel_stats: list[ChannelStats] = []
        self._last_scan_time: Optional[float] = None
        self._snapshots_ingested = 0

    # =========================================================================
    # Commands
    # =========================================================================

    def ingest_snapshot(
        self,
        observations: Iterable[NetworkObservation],
        now: Optional[float] = None,
    ) -> list[AttackEvent]:
        """
        Process one scan snapshot.

        Updates history, recomputes channel statistics, classifies channels
        and, when a station is being tracked and present in the snapshot,
        records its RSSI at the current heading.

        Returns:
            Attack events created for this snapshot.
        """
        now = now if now is not None else time.time()
        snapshot = list(observations)

        with self._lock:
            self._history.ingest(snapshot, now)
            stats = self._calculator.compute(snapshot, now)

            # Feed the tracked station first so events see this snapshot's bearing
            tracked = self.direction.tracked_bssid
            if tracked:
                match = next((obs for obs in snapshot if obs.bssid.upper() == tracked), None)
                if match is not None:
                    self.direction.record_reading(match.rssi, match.bssid, now=now)

            new_events = self._classifier.classify(
                stats,
                snapshot,
                now,
                bearing_for=self.direction.signal_direction_for,
            )
            self._networks = snapshot
            self._channel_stats = stats
            self._last_scan_time = now
            self._snapshots_ingested += 1

        logger.debug(
            f"Snapshot: {len(snapshot)} networks, {len(stats)} channels, "
            f"{len(new_events)} new events"
        )
        return new_events

    def ingest_scan_results(
        self,
        results: Iterable[dict[str, Any]],
        now: Optional[float] = None,
    ) -> list[AttackEvent]:
        """
        Process a snapshot given as scan result dictionaries.

        Raises:
            ValueError: If any result is malformed. Nothing is ingested.
        """
        now = now if now is not None else time.time()
        observations = [NetworkObservation.from_scan_result(r, timestamp=now) for r in results]
        return self.ingest_snapshot(observations, now=now)

    def update_orientation(self, azimuth: float) -> None:
        """Feed the latest compass heading in degrees."""
        self.direction.update_orientation(azimuth)

    def start_tracking(self, bssid: str) -> None:
        """Start estimating the direction of one station."""
        self.direction.start_tracking(bssid)

    def stop_tracking(self) -> None:
        """Stop direction tracking. Safe to call at any time."""
        self.direction.stop_tracking()

    def clear_all(self) -> None:
        """Discard all histories, statistics, events and direction readings."""
        with self._lock:
            self._history.clear()
            self._classifier.clear()
            self.direction.clear()
            self._networks = []
            self._channel_stats = []
            self._last_scan_time = None
            self._snapshots_ingested = 0
        logger.info("Attack monitor data cleared")

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def channel_stats(self) -> list[ChannelStats]:
        """Channel statistics of the latest snapshot, sorted by channel."""
        with self._lock:
            return list(self._channel_stats)

    @property
    def events(self) -> list[AttackEvent]:
        """Retained attack events, newest last."""
        with self._lock:
            return self._classifier.events

    @property
    def networks(self) -> list[NetworkObservation]:
        """Observations of the latest snapshot."""
        with self._lock:
            return list(self._networks)

    @property
    def last_scan_time(self) -> Optional[float]:
        with self._lock:
            return self._last_scan_time

    def window(self, bssid: str) -> list[NetworkObservation]:
        """Retained observation window for a station."""
        with self._lock:
            return self._history.window(bssid.upper())

    @property
    def direction_profile(self) -> DirectionProfile:
        return self.direction.profile

    def current_direction_profile(self, now: Optional[float] = None) -> DirectionProfile:
        """Direction profile after dropping readings older than the window at `now`."""
        self.direction.expire(now if now is not None else time.time())
        return self.direction.profile

    def estimate_bearing(self, now: Optional[float] = None) -> Optional[float]:
        """One-shot bearing for the tracked station, or None."""
        tracked = self.direction.tracked_bssid
        if tracked is None:
            return None
        return self.direction.estimate_bearing(tracked, now=now)

    def active_attack_count(self, now: Optional[float] = None) -> int:
        return sum(1 for event in self.events if event.is_active(self.active_window, now))

    def highest_threat_level(self) -> ThreatLevel:
        stats = self.channel_stats
        if not stats:
            return ThreatLevel.NONE
        return max(stats, key=lambda s: s.suspicious_score).threat_level

    @property
    def stats(self) -> dict:
        """Get monitor statistics."""
        with self._lock:
            return {
                'snapshots_ingested': self._snapshots_ingested,
                'last_scan_time': self._last_scan_time,
                'tracked_stations': len(self._history.stations),
                'channels': len(self._channel_stats),
                'events_retained': len(self._classifier.events),
                'events_generated': self._classifier.events_generated,
                'tracking': self.direction.tracked_bssid,
            }

    def get_state(self, now: Optional[float] = None) -> dict:
        """Consistent view of all published state for presentation."""
        with self._lock:
            if now is not None:
                self.direction.expire(now)
            profile = self.direction.profile
            return {
                'channel_stats': [s.to_dict() for s in self._channel_stats],
                'events': [
                    e.to_dict(active_window=self.active_window, now=now)
                    for e in self._classifier.events
                ],
                'direction': profile.to_dict(),
                'last_scan_time': self._last_scan_time,
            }


def get_attack_monitor() -> AttackMonitor:
    """
    Get or create the global attack monitor instance.

    Returns:
        AttackMonitor instance configured from config.py.
    """
    global _monitor_instance

    with _monitor_lock:
        if _monitor_instance is None:
            from config import ATTACK_ACTIVE_WINDOW, ATTACK_DEDUP_WINDOW
            _monitor_instance = AttackMonitor(
                active_window=ATTACK_ACTIVE_WINDOW,
                dedup_window=ATTACK_DEDUP_WINDOW,
            )
            logger.info("Attack monitor created")
        return _monitor_instance


def reset_attack_monitor() -> None:
    """Reset the global monitor instance."""
    global _monitor_instance

    with _monitor_lock:
        _monitor_instance = None
