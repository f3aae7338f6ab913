"""
Signal direction estimation.

Pairs RSSI samples of one tracked station with the device heading at the
moment each sample arrived. Two views are kept over the same readings:

- a live profile in 10 degree buckets, republished on every reading, whose
  strongest bucket is the current signal direction
- a one-shot bearing in coarser 30 degree buckets, available once enough
  readings exist
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import defaultdict
from typing import Optional

from .constants import (
    BEARING_BUCKET_DEGREES,
    BEARING_MIN_READINGS,
    CARDINAL_POINTS,
    DIRECTION_WINDOW_SECONDS,
    PROFILE_BUCKET_DEGREES,
)
from .models import DirectionProfile, DirectionReading

logger = logging.getLogger('wifiwatch.direction')


def normalize_azimuth(azimuth: float) -> float:
    """Normalize a heading in degrees to [0, 360)."""
    normalized = azimuth % 360.0
    # -1e-20 % 360 rounds to 360.0
    return 0.0 if normalized >= 360.0 else normalized


def bucket_azimuth(azimuth: float, width: int) -> float:
    return float(math.floor(azimuth / width) * width)


def cardinal_direction(azimuth: float) -> str:
    """Map a heading to one of eight compass points (45 degree sectors)."""
    index = int(((normalize_azimuth(azimuth) + 22.5) % 360.0) // 45)
    return CARDINAL_POINTS[index]


class DirectionEstimator:
    """
    Tracks one station's RSSI against device heading.

    Idle until start_tracking() names a station; readings for any other
    station are ignored. All public methods are thread-safe.
    """

    def __init__(self, window_seconds: float = DIRECTION_WINDOW_SECONDS):
        self.window_seconds = window_seconds
        self._lock = threading.Lock()
        self._azimuth = 0.0
        self._tracked_bssid: Optional[str] = None
        self._readings: list[DirectionReading] = []
        self._profile = DirectionProfile()

    # =========================================================================
    # Orientation feed
    # =========================================================================

    def update_orientation(self, azimuth: float) -> None:
        """Record the latest compass heading in degrees."""
        with self._lock:
            self._azimuth = normalize_azimuth(azimuth)

    @property
    def azimuth(self) -> float:
        with self._lock:
            return self._azimuth

    def cardinal_direction(self) -> str:
        """Current heading as a compass point."""
        return cardinal_direction(self.azimuth)

    # =========================================================================
    # Tracking state
    # =========================================================================

    @property
    def tracked_bssid(self) -> Optional[str]:
        with self._lock:
            return self._tracked_bssid

    @property
    def is_tracking(self) -> bool:
        return self.tracked_bssid is not None

    def start_tracking(self, bssid: str) -> None:
        """Begin tracking a station, discarding earlier readings."""
        bssid = bssid.upper()
        with self._lock:
            self._tracked_bssid = bssid
            self._readings = []
            self._profile = DirectionProfile(bssid=bssid)
        logger.info(f"Direction tracking started for {bssid}")

    def stop_tracking(self) -> None:
        """Stop tracking. Safe to call when idle."""
        with self._lock:
            previous = self._tracked_bssid
            self._tracked_bssid = None
        if previous:
            logger.info(f"Direction tracking stopped for {previous}")

    # =========================================================================
    # Readings
    # =========================================================================

    def record_reading(
        self,
        rssi: int,
        bssid: str,
        azimuth: Optional[float] = None,
        now: Optional[float] = None,
    ) -> bool:
        """
        Record an RSSI sample of the tracked station at the current heading.

        Args:
            rssi: Signal strength in dBm.
            bssid: Station the sample belongs to.
            azimuth: Heading at capture time; defaults to the latest orientation.
            now: Capture time; defaults to the current time.

        Returns:
            True if recorded, False if the station is not being tracked.
        """
        bssid = bssid.upper()
        now = now if now is not None else time.time()

        with self._lock:
            if self._tracked_bssid is None or bssid != self._tracked_bssid:
                return False

            heading = normalize_azimuth(azimuth) if azimuth is not None else self._azimuth
            self._readings.append(DirectionReading(
                azimuth=heading,
                rssi=rssi,
                bssid=bssid,
                timestamp=now,
            ))
            self._prune(now)
            self._profile = self._build_profile(bssid)
        return True

    def _prune(self, now: float) -> None:
        self._readings = [r for r in self._readings if now - r.timestamp <= self.window_seconds]

    def _readings_for(self, bssid: str) -> list[DirectionReading]:
        return [r for r in self._readings if r.bssid == bssid]

    def _build_profile(self, bssid: str) -> DirectionProfile:
        readings = self._readings_for(bssid)
        if not readings:
            return DirectionProfile(bssid=bssid)

        grouped: dict[float, list[int]] = defaultdict(list)
        for reading in readings:
            grouped[bucket_azimuth(reading.azimuth, PROFILE_BUCKET_DEGREES)].append(reading.rssi)

        buckets = {
            azimuth: int(sum(values) / len(values))
            for azimuth, values in grouped.items()
        }
        strongest = max(buckets, key=lambda azimuth: buckets[azimuth])
        return DirectionProfile(bssid=bssid, buckets=buckets, signal_direction=strongest)

    def derive_profile(self, bssid: str) -> DirectionProfile:
        """
        Recompute the 10 degree profile for a station.

        The result is published only when the station has readings; a
        station without readings gets an empty profile of its own and the
        published profile is left as it was.
        """
        bssid = bssid.upper()
        with self._lock:
            profile = self._build_profile(bssid)
            if not profile.is_empty:
                self._profile = profile
            return profile

    def expire(self, now: float) -> None:
        """Drop readings older than the window and republish the profile."""
        with self._lock:
            before = len(self._readings)
            self._prune(now)
            expired = before - len(self._readings)
            if not expired:
                return
            bssid = self._profile.bssid
            self._profile = self._build_profile(bssid) if bssid else DirectionProfile()
        logger.debug(f"Expired {expired} direction readings")

    @property
    def profile(self) -> DirectionProfile:
        """Most recently published profile."""
        with self._lock:
            return self._profile

    def signal_direction_for(self, bssid: str) -> Optional[float]:
        """Live signal direction if the published profile belongs to bssid."""
        with self._lock:
            if self._profile.bssid == bssid.upper():
                return self._profile.signal_direction
            return None

    def estimate_bearing(self, bssid: str, now: Optional[float] = None) -> Optional[float]:
        """
        One-shot bearing in 30 degree buckets.

        Returns:
            Start of the bucket with the highest mean RSSI, or None with
            fewer than four readings for the station.
        """
        bssid = bssid.upper()
        with self._lock:
            if now is not None:
                self._prune(now)
            readings = self._readings_for(bssid)

        if len(readings) < BEARING_MIN_READINGS:
            return None

        grouped: dict[float, list[int]] = defaultdict(list)
        for reading in readings:
            grouped[bucket_azimuth(reading.azimuth, BEARING_BUCKET_DEGREES)].append(reading.rssi)

        return max(grouped, key=lambda azimuth: sum(grouped[azimuth]) / len(grouped[azimuth]))

    def reading_count(self) -> int:
        with self._lock:
            return len(self._readings)

    def clear(self) -> None:
        """Drop all readings and the published profile, keeping the tracked station."""
        with self._lock:
            self._readings = []
            self._profile = DirectionProfile(bssid=self._tracked_bssid)
