"""
Suspicious activity scoring.

Combines four independent indicators into a 0-100 channel score:

- count volatility: jump in the number of networks between the last two snapshots
- RSSI volatility: large consecutive swings in a station's recent signal
- duplicate identity: several stations advertising the same name
- hidden pressure: many hidden networks on one channel

A separate, unbounded estimate of deauth-like error packets is derived
from sudden drops and fluctuations in station RSSI.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from .constants import (
    COUNT_VARIANCE_HIGH,
    COUNT_VARIANCE_HIGH_POINTS,
    COUNT_VARIANCE_MEDIUM,
    COUNT_VARIANCE_MEDIUM_POINTS,
    DUPLICATE_NAME_POINTS,
    ERROR_MIN_HISTORY,
    FLUCTUATION_DBM,
    FLUCTUATION_WEIGHT,
    HIDDEN_COUNT_THRESHOLD,
    HIDDEN_NETWORK_POINTS,
    RSSI_JUMP_HIGH,
    RSSI_JUMP_HIGH_POINTS,
    RSSI_JUMP_MEDIUM,
    RSSI_JUMP_MEDIUM_POINTS,
    RSSI_SAMPLE_DEPTH,
    SCORE_MAX,
    SCORE_MIN,
    SUDDEN_DROP_DBM,
    SUDDEN_DROP_WEIGHT,
)
from .history import ObservationHistory
from .models import NetworkObservation


def clamp_score(value: int) -> int:
    return max(SCORE_MIN, min(SCORE_MAX, value))


def group_by_name(
    observations: Sequence[NetworkObservation],
    case_sensitive: bool = False,
) -> dict[str, list[NetworkObservation]]:
    """Group observations by display name."""
    groups: dict[str, list[NetworkObservation]] = defaultdict(list)
    for obs in observations:
        key = obs.ssid if case_sensitive else obs.ssid.lower()
        groups[key].append(obs)
    return groups


class SuspiciousActivityScorer:
    """Scores channels against the rolling observation history."""

    def __init__(self, history: ObservationHistory):
        self.history = history

    def score(self, channel: int, observations: Sequence[NetworkObservation]) -> int:
        """Suspicious activity score for one channel, clamped to [0, 100]."""
        total = (
            self._count_volatility(channel)
            + self._rssi_volatility(observations)
            + self._duplicate_names(observations)
            + self._hidden_networks(observations)
        )
        return clamp_score(total)

    def _count_volatility(self, channel: int) -> int:
        counts = self.history.channel_counts(channel)
        if len(counts) < 2:
            return 0
        variance = abs(counts[-1] - counts[-2])
        if variance >= COUNT_VARIANCE_HIGH:
            return COUNT_VARIANCE_HIGH_POINTS
        elif variance >= COUNT_VARIANCE_MEDIUM:
            return COUNT_VARIANCE_MEDIUM_POINTS
        return 0

    def _rssi_volatility(self, observations: Sequence[NetworkObservation]) -> int:
        points = 0
        for obs in observations:
            if self.history.window_size(obs.bssid) < 2:
                continue
            rssi = self.history.recent_rssi(obs.bssid, RSSI_SAMPLE_DEPTH)
            max_jump = max((abs(a - b) for a, b in zip(rssi, rssi[1:])), default=0)
            if max_jump >= RSSI_JUMP_HIGH:
                points += RSSI_JUMP_HIGH_POINTS
            elif max_jump >= RSSI_JUMP_MEDIUM:
                points += RSSI_JUMP_MEDIUM_POINTS
        return points

    def _duplicate_names(self, observations: Sequence[NetworkObservation]) -> int:
        return sum(
            len(group) * DUPLICATE_NAME_POINTS
            for group in group_by_name(observations).values()
            if len(group) > 1
        )

    def _hidden_networks(self, observations: Sequence[NetworkObservation]) -> int:
        hidden = sum(1 for obs in observations if obs.is_hidden)
        if hidden > HIDDEN_COUNT_THRESHOLD:
            return hidden * HIDDEN_NETWORK_POINTS
        return 0

    def estimate_error_packets(self, channel: int, observations: Sequence[NetworkObservation]) -> int:
        """
        Estimate deauth-pattern packets on a channel from RSSI behaviour.

        Only stations with at least three retained observations contribute.
        Each sudden drop (> 15 dBm) counts 10 and each fluctuation
        (|delta| > 10 dBm) counts 5 over the station's last five samples.
        The result is not clamped.
        """
        estimated = 0
        for obs in observations:
            if self.history.window_size(obs.bssid) < ERROR_MIN_HISTORY:
                continue
            rssi = self.history.recent_rssi(obs.bssid, RSSI_SAMPLE_DEPTH)
            pairs = list(zip(rssi, rssi[1:]))
            sudden_drops = sum(1 for prev, curr in pairs if prev - curr > SUDDEN_DROP_DBM)
            fluctuations = sum(1 for prev, curr in pairs if abs(prev - curr) > FLUCTUATION_DBM)
            estimated += sudden_drops * SUDDEN_DROP_WEIGHT + fluctuations * FLUCTUATION_WEIGHT
        return estimated
