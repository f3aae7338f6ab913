"""
Unit tests for signal direction estimation.
"""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wifiwatch.direction import DirectionEstimator, bucket_azimuth

TRACKED = 'AA:BB:CC:DD:EE:FF'
OTHER = '11:22:33:44:55:66'


class TestTrackingState:
    """Tests for the idle/tracking state machine."""

    def test_idle_ignores_readings(self):
        """Test readings are ignored while nothing is tracked."""
        estimator = DirectionEstimator()

        assert estimator.is_tracking is False
        assert estimator.record_reading(-50, TRACKED, azimuth=10, now=0.0) is False
        assert estimator.reading_count() == 0
        assert estimator.profile.is_empty

    def test_readings_for_other_station_are_ignored(self):
        """Test readings for an untracked station are a no-op."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)

        assert estimator.record_reading(-50, OTHER, azimuth=10, now=0.0) is False
        assert estimator.reading_count() == 0

    def test_bssid_case_is_normalized(self):
        """Test tracked BSSIDs match regardless of case."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED.lower())

        assert estimator.tracked_bssid == TRACKED
        assert estimator.record_reading(-50, TRACKED.lower(), azimuth=10, now=0.0) is True

    def test_start_tracking_clears_readings(self):
        """Test switching stations discards earlier readings."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-50, TRACKED, azimuth=10, now=0.0)

        estimator.start_tracking(OTHER)

        assert estimator.reading_count() == 0
        assert estimator.profile.is_empty
        assert estimator.profile.bssid == OTHER

    def test_stop_tracking_when_idle_is_safe(self):
        """Test stop_tracking can be called with nothing tracked."""
        estimator = DirectionEstimator()
        estimator.stop_tracking()
        estimator.stop_tracking()
        assert estimator.tracked_bssid is None

    def test_stop_tracking_keeps_last_profile(self):
        """Test the last profile stays readable after tracking stops."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-50, TRACKED, azimuth=10, now=0.0)

        estimator.stop_tracking()

        assert estimator.is_tracking is False
        assert estimator.record_reading(-40, TRACKED, azimuth=10, now=1.0) is False
        assert estimator.profile.buckets == {10.0: -50}


class TestDirectionProfile:
    """Tests for the 10 degree live profile."""

    def test_strongest_bucket_is_signal_direction(self):
        """Test -40 dBm at 10 degrees and -70 dBm at 190 degrees points to 10 degrees."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)

        now = 0.0
        for _ in range(3):
            estimator.record_reading(-40, TRACKED, azimuth=10, now=now)
            estimator.record_reading(-70, TRACKED, azimuth=190, now=now + 1)
            now += 2

        profile = estimator.derive_profile(TRACKED)
        assert profile.buckets == {10.0: -40, 190.0: -70}
        assert profile.signal_direction == 10.0
        assert estimator.profile.signal_direction == 10.0

    def test_derive_profile_for_station_without_readings(self):
        """Test a station with no readings gets its own empty profile."""
        estimator = DirectionEstimator()
        estimator.start_tracking('AA')
        estimator.record_reading(-40, 'AA', azimuth=10, now=0.0)

        profile = estimator.derive_profile('bb')

        assert profile.bssid == 'BB'
        assert profile.is_empty
        assert profile.signal_direction is None
        assert estimator.profile.bssid == 'AA'
        assert estimator.profile.buckets == {10.0: -40}

    def test_azimuth_bucketing(self):
        """Test headings floor to the start of their bucket."""
        assert bucket_azimuth(0, 10) == 0.0
        assert bucket_azimuth(15, 10) == 10.0
        assert bucket_azimuth(19.9, 10) == 10.0
        assert bucket_azimuth(359.9, 10) == 350.0
        assert bucket_azimuth(59, 30) == 30.0

    def test_bucket_mean_truncates(self):
        """Test bucket means truncate toward zero."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-40, TRACKED, azimuth=12, now=0.0)
        estimator.record_reading(-41, TRACKED, azimuth=18, now=1.0)

        assert estimator.profile.buckets == {10.0: -40}

    def test_uses_latest_orientation(self):
        """Test readings without an azimuth use the latest heading."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.update_orientation(370.0)

        estimator.record_reading(-55, TRACKED, now=0.0)

        assert estimator.azimuth == 10.0
        assert estimator.profile.buckets == {10.0: -55}

    def test_old_readings_are_pruned(self):
        """Test readings older than 30 seconds drop out of the profile."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-40, TRACKED, azimuth=10, now=0.0)
        estimator.record_reading(-70, TRACKED, azimuth=190, now=31.0)

        assert estimator.reading_count() == 1
        assert estimator.profile.buckets == {190.0: -70}
        assert estimator.profile.signal_direction == 190.0

    def test_reading_at_window_edge_is_kept(self):
        """Test a reading exactly 30 seconds old is kept."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-40, TRACKED, azimuth=10, now=0.0)
        estimator.record_reading(-70, TRACKED, azimuth=190, now=30.0)

        assert estimator.reading_count() == 2

    def test_expire_without_new_readings(self):
        """Test expire drops stale readings when no new reading arrives."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-40, TRACKED, azimuth=10, now=0.0)

        estimator.expire(20.0)
        assert estimator.profile.buckets == {10.0: -40}

        estimator.expire(31.0)
        assert estimator.reading_count() == 0
        assert estimator.profile.is_empty
        assert estimator.profile.bssid == TRACKED

    def test_expire_keeps_fresh_readings_in_profile(self):
        """Test expire rebuilds the profile from the readings that remain."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-40, TRACKED, azimuth=10, now=0.0)
        estimator.record_reading(-70, TRACKED, azimuth=190, now=20.0)

        estimator.expire(40.0)

        assert estimator.profile.buckets == {190.0: -70}
        assert estimator.profile.signal_direction == 190.0

    def test_signal_direction_for(self):
        """Test the live direction is only reported for the profiled station."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-40, TRACKED, azimuth=95, now=0.0)

        assert estimator.signal_direction_for(TRACKED) == 90.0
        assert estimator.signal_direction_for(OTHER) is None

    def test_clear_keeps_tracking(self):
        """Test clear drops readings but keeps the tracked station."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-40, TRACKED, azimuth=10, now=0.0)

        estimator.clear()

        assert estimator.profile.is_empty
        assert estimator.reading_count() == 0
        assert estimator.tracked_bssid == TRACKED


class TestBearingEstimate:
    """Tests for the 30 degree one-shot bearing."""

    def test_requires_four_readings(self):
        """Test no bearing is given with fewer than four readings."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        for i in range(3):
            estimator.record_reading(-40, TRACKED, azimuth=10, now=float(i))

        assert estimator.estimate_bearing(TRACKED) is None

    def test_returns_strongest_bucket(self):
        """Test the bearing is the 30 degree bucket with the best mean."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        estimator.record_reading(-40, TRACKED, azimuth=10, now=0.0)
        estimator.record_reading(-42, TRACKED, azimuth=25, now=1.0)
        estimator.record_reading(-70, TRACKED, azimuth=190, now=2.0)
        estimator.record_reading(-72, TRACKED, azimuth=200, now=3.0)

        assert estimator.estimate_bearing(TRACKED) == 0.0

    def test_independent_of_profile_granularity(self):
        """Test coarse buckets can disagree with the 10 degree profile."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        # 30-59 bucket averages -50, 60-89 averages -45, but 10 degree peak is 30
        estimator.record_reading(-35, TRACKED, azimuth=30, now=0.0)
        estimator.record_reading(-65, TRACKED, azimuth=50, now=1.0)
        estimator.record_reading(-45, TRACKED, azimuth=60, now=2.0)
        estimator.record_reading(-45, TRACKED, azimuth=70, now=3.0)

        assert estimator.profile.signal_direction == 30.0
        assert estimator.estimate_bearing(TRACKED) == 60.0

    def test_prunes_before_estimating(self):
        """Test stale readings are pruned before the bearing is computed."""
        estimator = DirectionEstimator()
        estimator.start_tracking(TRACKED)
        for i in range(4):
            estimator.record_reading(-40, TRACKED, azimuth=10, now=float(i))

        assert estimator.estimate_bearing(TRACKED, now=3.0) == 0.0
        assert estimator.estimate_bearing(TRACKED, now=100.0) is None
