"""
Attack classification.

Maps scored channels to at most one attack category per snapshot and keeps
a bounded, append-only log of the resulting events.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Iterable, Optional, Sequence

from .channels import group_by_channel
from .constants import (
    BEACON_FLOOD_NETWORK_COUNT,
    CLASSIFY_MIN_SCORE,
    DEAUTH_ERROR_THRESHOLD,
    DEFAULT_SIGNAL_DBM,
    EVIL_TWIN_GROUP_SIZE,
    MAX_ATTACK_EVENTS,
    UNKNOWN_MIN_SCORE,
)
from .models import AttackEvent, AttackType, ChannelStats, NetworkObservation
from .scoring import group_by_name

logger = logging.getLogger('wifiwatch.classifier')


def classify_channel(stats: ChannelStats, observations: Sequence[NetworkObservation]) -> Optional[AttackType]:
    """
    Pick the attack category for one channel, or None.

    Rules are checked in priority order and the first match wins.
    """
    if stats.suspicious_score < CLASSIFY_MIN_SCORE:
        return None
    if stats.error_packet_count > DEAUTH_ERROR_THRESHOLD:
        return AttackType.DEAUTH
    if any(len(group) > EVIL_TWIN_GROUP_SIZE
           for group in group_by_name(observations, case_sensitive=True).values()):
        return AttackType.EVIL_TWIN
    if stats.networks_count > BEACON_FLOOD_NETWORK_COUNT:
        return AttackType.BEACON_FLOOD
    if stats.suspicious_score >= UNKNOWN_MIN_SCORE:
        return AttackType.UNKNOWN
    return None


class AttackClassifier:
    """
    Classifies channel statistics into attack events.

    Events are never merged. With dedup_window > 0 an event is skipped when
    one with the same channel and category was created within that many
    seconds; the default of 0 records a fresh event on every snapshot while
    the condition persists.
    """

    def __init__(self, max_events: int = MAX_ATTACK_EVENTS, dedup_window: float = 0.0):
        self.dedup_window = dedup_window
        self._events: deque[AttackEvent] = deque(maxlen=max_events)
        self._events_generated = 0

    @property
    def events(self) -> list[AttackEvent]:
        """Retained events, oldest first."""
        return list(self._events)

    @property
    def events_generated(self) -> int:
        return self._events_generated

    def classify(
        self,
        channel_stats: Iterable[ChannelStats],
        observations: Iterable[NetworkObservation],
        now: float,
        bearing_for: Optional[Callable[[str], Optional[float]]] = None,
    ) -> list[AttackEvent]:
        """
        Classify every channel of a snapshot and append new events to the log.

        Args:
            channel_stats: Stats computed for this snapshot.
            observations: The snapshot the stats were computed from.
            now: Snapshot time, used as the event creation time.
            bearing_for: Optional lookup of a live bearing for a target BSSID.

        Returns:
            Events created for this snapshot.
        """
        by_channel = group_by_channel(observations)
        new_events: list[AttackEvent] = []

        for stats in channel_stats:
            group = by_channel.get(stats.channel, [])
            attack_type = classify_channel(stats, group)
            if attack_type is None:
                continue
            if self._is_duplicate(stats.channel, attack_type, now):
                logger.debug(f"Suppressed repeat {attack_type.value} on channel {stats.channel}")
                continue

            target = max(group, key=lambda obs: obs.rssi) if group else None
            direction = None
            if target is not None and bearing_for is not None:
                direction = bearing_for(target.bssid)

            event = AttackEvent(
                attack_type=attack_type,
                channel=stats.channel,
                signal_strength=target.rssi if target else DEFAULT_SIGNAL_DBM,
                confidence=stats.suspicious_score,
                target_bssid=target.bssid if target else None,
                target_ssid=target.ssid if target else None,
                estimated_direction=direction,
                timestamp=now,
            )
            new_events.append(event)
            self._events.append(event)
            self._events_generated += 1

            logger.warning(
                f"{attack_type.display_name} suspected on channel {stats.channel} "
                f"(confidence {stats.suspicious_score}, target {event.target_bssid})"
            )

        return new_events

    def _is_duplicate(self, channel: int, attack_type: AttackType, now: float) -> bool:
        if self.dedup_window <= 0:
            return False
        for event in reversed(self._events):
            if now - event.timestamp > self.dedup_window:
                break
            if event.channel == channel and event.attack_type == attack_type:
                return True
        return False

    def clear(self) -> None:
        self._events.clear()
        self._events_generated = 0
