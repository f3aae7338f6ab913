"""
Per-channel statistics for a scan snapshot.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from .history import ObservationHistory
from .models import ChannelStats, NetworkObservation
from .scoring import SuspiciousActivityScorer

logger = logging.getLogger('wifiwatch.channels')


def group_by_channel(observations: Iterable[NetworkObservation]) -> dict[int, list[NetworkObservation]]:
    """Group observations by derived channel, preserving snapshot order."""
    groups: dict[int, list[NetworkObservation]] = defaultdict(list)
    for obs in observations:
        groups[obs.channel].append(obs)
    return dict(groups)


class ChannelStatsCalculator:
    """Derives ChannelStats from the latest snapshot plus history."""

    def __init__(self, history: ObservationHistory, scorer: SuspiciousActivityScorer):
        self.history = history
        self.scorer = scorer

    def compute(self, observations: Iterable[NetworkObservation], now: float) -> list[ChannelStats]:
        """
        Compute statistics for every channel present in the snapshot.

        The channel's count is appended to its history before scoring so
        the scorer sees the current count as the newest entry.

        Returns:
            ChannelStats sorted by channel number.
        """
        stats: list[ChannelStats] = []
        for channel, group in group_by_channel(observations).items():
            count = len(group)
            # Truncate toward zero like an integer cast of the mean
            average_rssi = int(sum(obs.rssi for obs in group) / count)

            self.history.record_channel_count(channel, count)

            stats.append(ChannelStats(
                channel=channel,
                band=group[0].band,
                networks_count=count,
                average_rssi=average_rssi,
                suspicious_score=self.scorer.score(channel, group),
                error_packet_count=self.scorer.estimate_error_packets(channel, group),
                last_update=now,
            ))

        stats.sort(key=lambda s: s.channel)
        logger.debug(f"Computed stats for {len(stats)} channels")
        return stats
