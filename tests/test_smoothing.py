"""
Tests for smoothing.py: age-based rolling average of pitch estimates.
"""

import math

import pytest

from dsp import NO_PITCH
from smoothing import Smoother


class TestSmoother:
    def test_mean_of_recent_estimates(self):
        s = Smoother(4000)
        for t, f in ((0, 440.0), (100, 442.0), (200, 438.0)):
            s.observe(f, t)
        assert s.average(300) == pytest.approx(440.0)

    def test_empty_window_is_no_pitch(self):
        assert math.isnan(Smoother(4000).average(0))

    def test_fully_evicted_window_is_no_pitch(self):
        s = Smoother(4000)
        s.observe(440.0, 0)
        s.observe(441.0, 500)
        assert math.isnan(s.average(10_000))
        assert len(s) == 0

    def test_sentinel_and_non_positive_are_not_admitted(self):
        s = Smoother(4000)
        s.observe(NO_PITCH, 0)
        s.observe(0.0, 1)
        s.observe(-220.0, 2)
        assert len(s) == 0
        assert math.isnan(s.average(3))

    def test_entry_exactly_at_horizon_is_kept(self):
        s = Smoother(4000)
        s.observe(400.0, 0)
        s.observe(500.0, 1000)
        assert s.average(4000) == pytest.approx(450.0)
        assert s.average(4001) == pytest.approx(500.0)

    def test_burst_does_not_push_out_older_readings(self):
        """Eviction is by age, not by count."""
        s = Smoother(4000)
        s.observe(300.0, 0)
        for i in range(200):
            s.observe(500.0, 3000 + i)
        assert len(s) == 201
        assert s.average(3500) == pytest.approx((300.0 + 200 * 500.0) / 201)

    def test_reset_clears_window(self):
        s = Smoother(4000)
        s.observe(440.0, 0)
        s.reset()
        assert len(s) == 0
        assert math.isnan(s.average(1))
