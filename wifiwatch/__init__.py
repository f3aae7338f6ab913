"""
Heuristic WiFi attack monitor.

Ingests periodic scan snapshots and compass headings, keeps short rolling
histories, scores per-channel suspicious activity, classifies likely attack
types and estimates the bearing of a tracked transmitter.

Findings are statistical inferences over scan metadata, not confirmed attacks.
"""

from __future__ import annotations

from .models import (
    AttackEvent,
    AttackType,
    ChannelStats,
    DirectionProfile,
    DirectionReading,
    NetworkObservation,
    ThreatLevel,
    WifiBand,
)
from .history import ObservationHistory
from .scoring import SuspiciousActivityScorer
from .channels import ChannelStatsCalculator
from .classifier import AttackClassifier
from .direction import DirectionEstimator, cardinal_direction
from .monitor import AttackMonitor, get_attack_monitor, reset_attack_monitor

__all__ = [
    'AttackClassifier',
    'AttackEvent',
    'AttackMonitor',
    'AttackType',
    'ChannelStats',
    'ChannelStatsCalculator',
    'DirectionEstimator',
    'DirectionProfile',
    'DirectionReading',
    'NetworkObservation',
    'ObservationHistory',
    'SuspiciousActivityScorer',
    'ThreatLevel',
    'WifiBand',
    'cardinal_direction',
    'get_attack_monitor',
    'reset_attack_monitor',
]
