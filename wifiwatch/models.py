"""
Data models for the WiFi attack monitor.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .constants import (
    BAND_2_4_GHZ_RANGE,
    BAND_5_GHZ_RANGE,
    BAND_6_GHZ_RANGE,
    HIDDEN_SSID,
    SUSPICIOUS_SCORE_THRESHOLD,
    get_channel_from_frequency,
    get_signal_percent,
)


class WifiBand(Enum):
    """Coarse WiFi frequency band."""
    BAND_2_4_GHZ = '2.4GHz'
    BAND_5_GHZ = '5GHz'
    BAND_6_GHZ = '6GHz'
    UNKNOWN = 'unknown'

    @property
    def display_name(self) -> str:
        return BAND_DISPLAY_NAMES[self]

    @classmethod
    def from_frequency(cls, frequency_mhz: int) -> WifiBand:
        """Get WiFi band from frequency in MHz."""
        if BAND_2_4_GHZ_RANGE[0] <= frequency_mhz <= BAND_2_4_GHZ_RANGE[1]:
            return cls.BAND_2_4_GHZ
        elif BAND_5_GHZ_RANGE[0] <= frequency_mhz <= BAND_5_GHZ_RANGE[1]:
            return cls.BAND_5_GHZ
        elif BAND_6_GHZ_RANGE[0] <= frequency_mhz <= BAND_6_GHZ_RANGE[1]:
            return cls.BAND_6_GHZ
        return cls.UNKNOWN


BAND_DISPLAY_NAMES = {
    WifiBand.BAND_2_4_GHZ: '2.4 GHz',
    WifiBand.BAND_5_GHZ: '5 GHz',
    WifiBand.BAND_6_GHZ: '6 GHz',
    WifiBand.UNKNOWN: 'Unknown',
}


class AttackType(Enum):
    """Categories of inferred WiFi attacks."""
    DEAUTH = 'deauth'
    DISASSOC = 'disassoc'
    EVIL_TWIN = 'evil_twin'
    BEACON_FLOOD = 'beacon_flood'
    PROBE_FLOOD = 'probe_flood'
    UNKNOWN = 'unknown'

    @property
    def display_name(self) -> str:
        return ATTACK_TYPE_INFO[self][0]

    @property
    def description(self) -> str:
        return ATTACK_TYPE_INFO[self][1]


# (display name, description)
ATTACK_TYPE_INFO = {
    AttackType.DEAUTH: ('Deauthentication', 'Forcing devices to disconnect from the network'),
    AttackType.DISASSOC: ('Disassociation', 'Terminating client associations with access points'),
    AttackType.EVIL_TWIN: ('Evil Twin', 'Fake access point mimicking a legitimate network'),
    AttackType.BEACON_FLOOD: ('Beacon Flood', 'Flooding the area with fake access point beacons'),
    AttackType.PROBE_FLOOD: ('Probe Flood', 'Excessive probe requests from a single source'),
    AttackType.UNKNOWN: ('Unknown', 'Unidentified suspicious activity'),
}


class ThreatLevel(Enum):
    """Threat classification derived from a channel score."""
    NONE = 'none'          # Score 0-19
    LOW = 'low'            # Score 20-39
    MEDIUM = 'medium'      # Score 40-59
    HIGH = 'high'          # Score 60-79
    CRITICAL = 'critical'  # Score 80+

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_score(cls, score: int) -> ThreatLevel:
        if score >= 80:
            return cls.CRITICAL
        elif score >= 60:
            return cls.HIGH
        elif score >= 40:
            return cls.MEDIUM
        elif score >= 20:
            return cls.LOW
        return cls.NONE


@dataclass(frozen=True)
class NetworkObservation:
    """A single station seen in one scan snapshot."""

    bssid: str
    ssid: str
    rssi: int
    frequency_mhz: int
    capabilities: str = ''
    timestamp: float = field(default_factory=time.time)

    @property
    def channel(self) -> int:
        """Channel number derived from frequency (0 when unrecognized)."""
        return get_channel_from_frequency(self.frequency_mhz)

    @property
    def band(self) -> WifiBand:
        """WiFi band derived from frequency."""
        return WifiBand.from_frequency(self.frequency_mhz)

    @property
    def is_hidden(self) -> bool:
        return self.ssid == HIDDEN_SSID

    @property
    def signal_strength_percent(self) -> int:
        return get_signal_percent(self.rssi)

    @classmethod
    def from_scan_result(cls, result: dict[str, Any], timestamp: Optional[float] = None) -> NetworkObservation:
        """
        Build an observation from a scan result dictionary.

        Accepts 'bssid', 'ssid' (or 'essid'), 'rssi' (or 'level'),
        'frequency' (or 'frequency_mhz') and 'capabilities'. A blank SSID
        becomes the hidden sentinel.

        Raises:
            ValueError: If the BSSID is missing or a numeric field is not numeric.
        """
        bssid = str(result.get('bssid') or '').strip().upper()
        if not bssid:
            raise ValueError('Scan result has no BSSID')

        ssid = result.get('ssid', result.get('essid'))
        ssid = str(ssid).strip() if ssid is not None else ''

        rssi = result.get('rssi', result.get('level'))
        frequency = result.get('frequency', result.get('frequency_mhz'))
        try:
            rssi = int(rssi)
            frequency = int(frequency)
        except (TypeError, ValueError):
            raise ValueError(f'Invalid rssi/frequency for {bssid}')

        return cls(
            bssid=bssid,
            ssid=ssid or HIDDEN_SSID,
            rssi=rssi,
            frequency_mhz=frequency,
            capabilities=str(result.get('capabilities') or ''),
            timestamp=timestamp if timestamp is not None else time.time(),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'bssid': self.bssid,
            'ssid': self.ssid,
            'is_hidden': self.is_hidden,
            'rssi': self.rssi,
            'signal_percent': self.signal_strength_percent,
            'frequency_mhz': self.frequency_mhz,
            'channel': self.channel,
            'band': self.band.value,
            'capabilities': self.capabilities,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class ChannelStats:
    """Per-channel aggregate recomputed on every snapshot."""

    channel: int
    band: WifiBand = WifiBand.UNKNOWN
    networks_count: int = 0
    average_rssi: int = -100
    suspicious_score: int = 0
    error_packet_count: int = 0
    last_update: float = field(default_factory=time.time)

    @property
    def threat_level(self) -> ThreatLevel:
        return ThreatLevel.from_score(self.suspicious_score)

    @property
    def has_suspicious_activity(self) -> bool:
        return self.suspicious_score >= SUSPICIOUS_SCORE_THRESHOLD

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'channel': self.channel,
            'band': self.band.value,
            'band_name': self.band.display_name,
            'networks_count': self.networks_count,
            'average_rssi': self.average_rssi,
            'suspicious_score': self.suspicious_score,
            'error_packet_count': self.error_packet_count,
            'threat_level': self.threat_level.value,
            'has_suspicious_activity': self.has_suspicious_activity,
            'last_update': self.last_update,
        }


@dataclass(frozen=True)
class AttackEvent:
    """An inferred attack on one channel, recorded once per detection."""

    attack_type: AttackType
    channel: int
    signal_strength: int
    confidence: int
    target_bssid: Optional[str] = None
    target_ssid: Optional[str] = None
    estimated_direction: Optional[float] = None
    timestamp: float = field(default_factory=time.time)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def age_seconds(self, now: Optional[float] = None) -> float:
        """Seconds since the event was created."""
        return (now if now is not None else time.time()) - self.timestamp

    def is_active(self, active_window: float, now: Optional[float] = None) -> bool:
        """Whether the event is recent enough to still count as ongoing."""
        return self.age_seconds(now) <= active_window

    def to_dict(self, active_window: Optional[float] = None, now: Optional[float] = None) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            'id': self.id,
            'type': 'attack_event',
            'attack_type': self.attack_type.value,
            'attack_name': self.attack_type.display_name,
            'description': self.attack_type.description,
            'target': {
                'bssid': self.target_bssid,
                'ssid': self.target_ssid,
            },
            'channel': self.channel,
            'estimated_direction': self.estimated_direction,
            'signal_strength': self.signal_strength,
            'confidence': self.confidence,
            'timestamp': self.timestamp,
            'age_seconds': round(self.age_seconds(now), 1),
        }
        if active_window is not None:
            data['is_active'] = self.is_active(active_window, now)
        return data


@dataclass(frozen=True)
class DirectionReading:
    """RSSI of the tracked station captured at one heading."""

    azimuth: float
    rssi: int
    bssid: str
    timestamp: float


@dataclass(frozen=True)
class DirectionProfile:
    """Mean RSSI per heading bucket for one tracked station."""

    bssid: Optional[str] = None
    buckets: dict[float, int] = field(default_factory=dict)
    signal_direction: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return not self.buckets

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'bssid': self.bssid,
            'buckets': [
                {'azimuth': azimuth, 'rssi': rssi}
                for azimuth, rssi in sorted(self.buckets.items())
            ],
            'signal_direction': self.signal_direction,
        }
