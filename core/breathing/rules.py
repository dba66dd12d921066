"""
core/breathing/rules.py — Threshold rules for breathing state, pattern and scores.

All functions are pure and deterministic. The rate history passed in is
the history *before* the current call's rate is appended.

State priority (first match wins):
    1. rate < normal_min      → DEEP if depth > deep else HOLDING
    2. rate > rapid           → RAPID
    3. rate > normal_max      → SHALLOW if depth < shallow else RAPID
    4. regularity < irregular → IRREGULAR
    5. depth > deep           → DEEP
    6. depth < shallow        → SHALLOW
    7.                        → NORMAL
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from core.breathing.types import BreathingPattern, BreathingState, BreathingThresholds

# Pattern classification (rates in bpm)
_REGULAR_CV = 0.1
_IRREGULAR_CV = 0.3
_RELAXED_MEAN_BPM = 8.0
_STRESSED_MEAN_BPM = 20.0
_EXERCISE_MEAN_BPM = 15.0
_MIN_PATTERN_HISTORY = 3

# Score weights
_IRREGULARITY_STRESS_WEIGHT = 0.5
_NORMAL_RATE_RELAXATION = 0.4
_REGULARITY_RELAXATION_WEIGHT = 0.3
_DEPTH_RELAXATION_WEIGHT = 0.3


def _unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def compute_regularity(rates: Sequence[float]) -> float:
    """1 - min(1, std/mean) over the rate history, clamped to [0, 1].

    Fewer than two rates (or a zero mean) count as perfectly regular.
    """
    if len(rates) < 2:
        return 1.0
    values = np.asarray(rates, dtype=np.float64)
    mean = float(np.mean(values))
    if mean <= 0.0:
        return 1.0
    cv = float(np.std(values)) / mean
    return _unit(1.0 - min(1.0, cv))


def classify_state(
    rate: float,
    depth: float,
    regularity: float,
    thresholds: BreathingThresholds,
) -> BreathingState:
    """Map rate, depth and regularity to a BreathingState by fixed priority."""
    t = thresholds
    if rate < t.normal_rate_min:
        return BreathingState.DEEP if depth > t.deep_threshold else BreathingState.HOLDING
    if rate > t.rapid_threshold:
        return BreathingState.RAPID
    if rate > t.normal_rate_max:
        return BreathingState.SHALLOW if depth < t.shallow_threshold else BreathingState.RAPID
    if regularity < t.irregularity_threshold:
        return BreathingState.IRREGULAR
    if depth > t.deep_threshold:
        return BreathingState.DEEP
    if depth < t.shallow_threshold:
        return BreathingState.SHALLOW
    return BreathingState.NORMAL


def classify_pattern(rates: Sequence[float]) -> BreathingPattern:
    """Pattern from the rate history; UNKNOWN with fewer than three rates."""
    if len(rates) < _MIN_PATTERN_HISTORY:
        return BreathingPattern.UNKNOWN

    values = np.asarray(rates, dtype=np.float64)
    mean = float(np.mean(values))
    cv = float(np.std(values)) / mean if mean > 0.0 else 0.0

    if cv < _REGULAR_CV:
        return BreathingPattern.REGULAR
    if cv > _IRREGULAR_CV:
        return BreathingPattern.IRREGULAR
    if mean < _RELAXED_MEAN_BPM:
        return BreathingPattern.RELAXED
    if mean > _STRESSED_MEAN_BPM:
        return BreathingPattern.STRESSED
    if mean > _EXERCISE_MEAN_BPM:
        return BreathingPattern.EXERCISE
    return BreathingPattern.CYCLICAL


def stress_score(
    rate: float,
    depth: float,
    regularity: float,
    thresholds: BreathingThresholds,
) -> float:
    """Stress in [0, 1]: fast rate, irregularity and shallowness each add."""
    t = thresholds
    score = 0.0
    if rate > t.normal_rate_max:
        span = t.rapid_threshold - t.normal_rate_max
        score += (rate - t.normal_rate_max) / span if span > 0.0 else 1.0
    score += (1.0 - regularity) * _IRREGULARITY_STRESS_WEIGHT
    if depth < t.shallow_threshold and t.shallow_threshold > 0.0:
        score += (t.shallow_threshold - depth) / t.shallow_threshold
    return _unit(score)


def relaxation_score(
    rate: float,
    depth: float,
    regularity: float,
    thresholds: BreathingThresholds,
) -> float:
    """Relaxation in [0, 1]: normal rate, regularity and depth each add."""
    t = thresholds
    score = 0.0
    if t.normal_rate_min <= rate <= t.normal_rate_max:
        score += _NORMAL_RATE_RELAXATION
    score += regularity * _REGULARITY_RELAXATION_WEIGHT
    if depth > t.deep_threshold:
        score += (depth - t.deep_threshold) * _DEPTH_RELAXATION_WEIGHT
    return _unit(score)
