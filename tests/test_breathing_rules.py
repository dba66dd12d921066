"""
Tests for core/breathing/rules.py, core/breathing/signal.py and
BreathingThresholds.clamped().
"""

from __future__ import annotations

import numpy as np
import pytest

from core.breathing.rules import (
    classify_pattern,
    classify_state,
    compute_regularity,
    relaxation_score,
    stress_score,
)
from core.breathing.signal import (
    extract_breathing_cycle,
    find_breathing_peaks,
    peak_intervals,
    smooth_breathing_band,
)
from core.breathing.types import DEFAULT_THRESHOLDS, BreathingPattern, BreathingState, BreathingThresholds

BS = BreathingState
BP = BreathingPattern
T = DEFAULT_THRESHOLDS


# ---------------------------------------------------------------------------
# Smoothing filter
# ---------------------------------------------------------------------------


class TestSmoothBreathingBand:
    def test_interior_formula_and_endpoints(self) -> None:
        x = np.array([1.0, 0.0, 4.0, 0.0, 2.0])
        out = smooth_breathing_band(x)
        np.testing.assert_allclose(out, [1.0, 1.25, 2.0, 1.5, 2.0])

    def test_constant_signal_unchanged(self) -> None:
        np.testing.assert_allclose(smooth_breathing_band(np.full(10, 0.3)), np.full(10, 0.3))

    @pytest.mark.parametrize("n", [0, 1, 2])
    def test_short_buffers_copied(self, n: int) -> None:
        x = np.arange(float(n))
        out = smooth_breathing_band(x)
        assert out.tolist() == x.tolist()
        assert out is not x

    def test_input_not_modified(self) -> None:
        x = np.array([0.0, 1.0, 0.0, 1.0])
        smooth_breathing_band(x)
        assert x.tolist() == [0.0, 1.0, 0.0, 1.0]


# ---------------------------------------------------------------------------
# Peaks and cycle
# ---------------------------------------------------------------------------


class TestPeaks:
    def test_strict_local_maxima_above_threshold(self) -> None:
        x = np.array([0.0, 0.5, 0.0, 0.05, 0.0, 0.3, 0.2, 0.8, 0.1])
        assert find_breathing_peaks(x).tolist() == [1, 5, 7]

    def test_plateau_is_not_a_peak(self) -> None:
        x = np.array([0.0, 0.5, 0.5, 0.0])
        assert find_breathing_peaks(x).size == 0

    def test_endpoints_never_peaks(self) -> None:
        x = np.array([0.9, 0.1, 0.9])
        assert find_breathing_peaks(x).size == 0

    def test_custom_threshold(self) -> None:
        x = np.array([0.0, 0.05, 0.0])
        assert find_breathing_peaks(x, threshold=0.01).tolist() == [1]

    def test_intervals_in_seconds(self) -> None:
        assert peak_intervals(np.array([10, 74, 202]), 64) == pytest.approx((1.0, 2.0))

    def test_intervals_need_two_peaks(self) -> None:
        assert peak_intervals(np.array([5]), 64) == ()

    def test_cycle_between_first_two_peaks(self) -> None:
        x = np.arange(10.0)
        assert extract_breathing_cycle(x, np.array([2, 5, 8])).tolist() == [2.0, 3.0, 4.0]

    def test_cycle_falls_back_to_whole_buffer(self) -> None:
        x = np.arange(5.0)
        assert extract_breathing_cycle(x, np.array([3])).tolist() == x.tolist()


# ---------------------------------------------------------------------------
# Regularity and pattern
# ---------------------------------------------------------------------------


class TestRegularity:
    def test_constant_rates(self) -> None:
        assert compute_regularity([15.0, 15.0, 15.0, 15.0]) == pytest.approx(1.0)

    @pytest.mark.parametrize("rates", [[], [12.0]])
    def test_short_history_is_regular(self, rates: list[float]) -> None:
        assert compute_regularity(rates) == 1.0

    def test_population_std(self) -> None:
        # mean 15, population std 5 → 1 - 1/3
        assert compute_regularity([10.0, 20.0]) == pytest.approx(2.0 / 3.0)

    def test_clamped_at_zero(self) -> None:
        # coefficient of variation above 1
        assert compute_regularity([0.0, 0.0, 0.0, 10.0]) == 0.0


class TestClassifyPattern:
    @pytest.mark.parametrize(
        ("rates", "expected"),
        [
            ([15.0, 15.0, 15.0, 15.0], BP.REGULAR),
            ([15.0, 15.0], BP.UNKNOWN),
            ([10.0, 20.0, 10.0, 20.0], BP.IRREGULAR),
            ([5.0, 6.0, 7.0], BP.RELAXED),
            ([18.0, 22.0, 26.0], BP.STRESSED),
            ([14.0, 17.0, 20.0], BP.EXERCISE),
            ([10.0, 12.0, 14.0], BP.CYCLICAL),
        ],
    )
    def test_rules(self, rates: list[float], expected: BreathingPattern) -> None:
        assert classify_pattern(rates) is expected


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


class TestClassifyState:
    @pytest.mark.parametrize(
        ("rate", "depth", "regularity", "expected"),
        [
            (6.0, 0.8, 1.0, BS.DEEP),
            (6.0, 0.5, 1.0, BS.HOLDING),
            (30.0, 0.5, 1.0, BS.RAPID),
            (22.0, 0.2, 1.0, BS.SHALLOW),
            (22.0, 0.5, 1.0, BS.RAPID),
            (15.0, 0.5, 0.5, BS.IRREGULAR),
            (15.0, 0.8, 1.0, BS.DEEP),
            (15.0, 0.2, 1.0, BS.SHALLOW),
            (15.0, 0.5, 1.0, BS.NORMAL),
            (8.0, 0.5, 1.0, BS.NORMAL),
            (20.0, 0.5, 1.0, BS.NORMAL),
        ],
    )
    def test_priority_table(self, rate: float, depth: float, regularity: float, expected: BreathingState) -> None:
        assert classify_state(rate, depth, regularity, T) is expected

    def test_rate_rules_beat_irregularity(self) -> None:
        assert classify_state(30.0, 0.5, 0.0, T) is BS.RAPID

    def test_custom_thresholds(self) -> None:
        thresholds = BreathingThresholds(normal_rate_min=16.0)
        assert classify_state(15.0, 0.5, 1.0, thresholds) is BS.HOLDING


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------


class TestScores:
    def test_stress_from_rate(self) -> None:
        assert stress_score(22.5, 0.5, 1.0, T) == pytest.approx(0.5)

    def test_stress_from_irregularity_and_shallowness(self) -> None:
        # (1 - 0.6) * 0.5 + (0.3 - 0.15) / 0.3
        assert stress_score(15.0, 0.15, 0.6, T) == pytest.approx(0.7)

    def test_stress_clamped(self) -> None:
        assert stress_score(40.0, 0.0, 0.0, T) == 1.0

    def test_calm_breathing_has_no_stress(self) -> None:
        assert stress_score(15.0, 0.5, 1.0, T) == 0.0

    def test_relaxation_normal(self) -> None:
        assert relaxation_score(15.0, 0.5, 1.0, T) == pytest.approx(0.7)

    def test_relaxation_deep(self) -> None:
        assert relaxation_score(15.0, 0.9, 1.0, T) == pytest.approx(0.76)

    def test_relaxation_none(self) -> None:
        assert relaxation_score(30.0, 0.5, 0.0, T) == 0.0


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------


class TestThresholds:
    def test_defaults(self) -> None:
        t = BreathingThresholds()
        assert (t.normal_rate_min, t.normal_rate_max, t.rapid_threshold) == (8.0, 20.0, 25.0)
        assert (t.deep_threshold, t.shallow_threshold, t.irregularity_threshold) == (0.7, 0.3, 0.7)

    def test_defaults_survive_clamping(self) -> None:
        assert BreathingThresholds().clamped() == BreathingThresholds()

    def test_limits(self) -> None:
        t = BreathingThresholds(
            normal_rate_min=1.0,
            normal_rate_max=100.0,
            deep_threshold=2.0,
            shallow_threshold=-1.0,
            irregularity_threshold=1.5,
        ).clamped()
        assert t.normal_rate_min == 4.0
        assert t.normal_rate_max == 60.0
        assert t.rapid_threshold == 60.0
        assert t.deep_threshold == 1.0
        assert t.shallow_threshold == 0.0
        assert t.irregularity_threshold == 1.0

    def test_orderings_restored(self) -> None:
        t = BreathingThresholds(
            normal_rate_min=18.0,
            normal_rate_max=10.0,
            rapid_threshold=12.0,
            deep_threshold=0.2,
            shallow_threshold=0.5,
        ).clamped()
        assert t.normal_rate_max == 18.0
        assert t.rapid_threshold == 18.0
        assert t.deep_threshold == 0.5
