"""
Constants for the WiFi attack monitor.

Window lengths, structural bounds and scoring thresholds live here rather
than in config.py so that the engine's bounds cannot be loosened at runtime.
"""

from __future__ import annotations

# =============================================================================
# HISTORY WINDOWS
# =============================================================================

# Per-station observation retention (seconds)
OBSERVATION_WINDOW_SECONDS = 60.0

# Per-channel "networks observed" ring length (one entry per snapshot)
CHANNEL_HISTORY_LENGTH = 12

# Direction reading retention (seconds)
DIRECTION_WINDOW_SECONDS = 30.0

# Maximum number of attack events kept (oldest evicted first)
MAX_ATTACK_EVENTS = 100

# =============================================================================
# SCORING THRESHOLDS
# =============================================================================

SCORE_MIN = 0
SCORE_MAX = 100

# Count volatility: |last - second_to_last| of the channel count ring
COUNT_VARIANCE_HIGH = 5
COUNT_VARIANCE_HIGH_POINTS = 30
COUNT_VARIANCE_MEDIUM = 3
COUNT_VARIANCE_MEDIUM_POINTS = 15

# RSSI volatility: max consecutive delta over the last samples of a station
RSSI_SAMPLE_DEPTH = 5
RSSI_JUMP_HIGH = 20
RSSI_JUMP_HIGH_POINTS = 20
RSSI_JUMP_MEDIUM = 10
RSSI_JUMP_MEDIUM_POINTS = 10

# Duplicate display names on one channel
DUPLICATE_NAME_POINTS = 10

# Hidden networks on one channel
HIDDEN_COUNT_THRESHOLD = 2
HIDDEN_NETWORK_POINTS = 5

# Error/deauth-pattern estimate
ERROR_MIN_HISTORY = 3
SUDDEN_DROP_DBM = 15
SUDDEN_DROP_WEIGHT = 10
FLUCTUATION_DBM = 10
FLUCTUATION_WEIGHT = 5

# =============================================================================
# CLASSIFICATION THRESHOLDS
# =============================================================================

CLASSIFY_MIN_SCORE = 50
DEAUTH_ERROR_THRESHOLD = 50
EVIL_TWIN_GROUP_SIZE = 2
BEACON_FLOOD_NETWORK_COUNT = 20
UNKNOWN_MIN_SCORE = 70

# Signal strength reported when a channel has no stations
DEFAULT_SIGNAL_DBM = -100

# Channel score at or above which a channel is flagged as suspicious
SUSPICIOUS_SCORE_THRESHOLD = 40

# =============================================================================
# DIRECTION ESTIMATION
# =============================================================================

PROFILE_BUCKET_DEGREES = 10
BEARING_BUCKET_DEGREES = 30
BEARING_MIN_READINGS = 4

CARDINAL_POINTS = ['N', 'NE', 'E', 'SE', 'S', 'SW', 'W', 'NW']

# =============================================================================
# STATION IDENTITY
# =============================================================================

# Display name reported by the host for networks that hide their SSID
HIDDEN_SSID = '<Hidden>'

# =============================================================================
# WIFI BANDS AND CHANNELS
# =============================================================================

# Band frequency ranges (MHz, inclusive)
BAND_2_4_GHZ_RANGE = (2400, 2500)
BAND_5_GHZ_RANGE = (5150, 5875)
BAND_6_GHZ_RANGE = (5925, 7125)

# Channel number reported for frequencies outside every known plan
UNKNOWN_CHANNEL = 0

# Exact centre frequencies whose channel does not follow the 5 MHz step
CHANNEL_FREQUENCY_EXCEPTIONS = {
    2484: 14,
}


def get_channel_from_frequency(frequency_mhz: int) -> int:
    """Get channel number from frequency in MHz (0 when unrecognized)."""
    if frequency_mhz in CHANNEL_FREQUENCY_EXCEPTIONS:
        return CHANNEL_FREQUENCY_EXCEPTIONS[frequency_mhz]
    if 2412 <= frequency_mhz <= 2484:
        return (frequency_mhz - 2412) // 5 + 1
    elif 5170 <= frequency_mhz <= 5825:
        return (frequency_mhz - 5170) // 5 + 34
    elif 5955 <= frequency_mhz <= 7115:
        return (frequency_mhz - 5955) // 5 + 1
    return UNKNOWN_CHANNEL


# =============================================================================
# SIGNAL STRENGTH
# =============================================================================

# (minimum RSSI, percent) steps, strongest first
SIGNAL_PERCENT_STEPS = [
    (-50, 100),
    (-60, 80),
    (-70, 60),
    (-80, 40),
    (-90, 20),
]


def get_signal_percent(rssi: int) -> int:
    """Get a coarse 0-100 signal percentage from RSSI."""
    for threshold, percent in SIGNAL_PERCENT_STEPS:
        if rssi >= threshold:
            return percent
    return 0
