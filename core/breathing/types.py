"""
core/breathing/types.py — Enums and frozen data types for breathing analysis.

BreathingAnalysisResult carries a read-only numpy array (the extracted
breathing cycle), so it uses eq=False like the other array-carrying results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class BreathingState(Enum):
    """Instantaneous breathing state. Declaration order is the tie-break order."""

    NORMAL = "normal"
    DEEP = "deep"
    SHALLOW = "shallow"
    RAPID = "rapid"
    IRREGULAR = "irregular"
    HOLDING = "holding"
    UNKNOWN = "unknown"


class BreathingPattern(Enum):
    """Longer-term pattern derived from the rate history."""

    REGULAR = "regular"
    IRREGULAR = "irregular"
    CYCLICAL = "cyclical"
    STRESSED = "stressed"
    EXERCISE = "exercise"
    RELAXED = "relaxed"
    UNKNOWN = "unknown"


# Hard limits used when clamping thresholds
RATE_LIMITS: tuple[float, float] = (4.0, 60.0)
UNIT_LIMITS: tuple[float, float] = (0.0, 1.0)


def _clamp(value: float, limits: tuple[float, float]) -> float:
    lo, hi = limits
    return min(hi, max(lo, float(value)))


@dataclass(frozen=True)
class BreathingThresholds:
    """Decision thresholds for state classification.

    Rates are in breaths per minute; depth and regularity thresholds are
    unitless in [0, 1].
    """

    normal_rate_min: float = 8.0
    normal_rate_max: float = 20.0
    deep_threshold: float = 0.7
    shallow_threshold: float = 0.3
    rapid_threshold: float = 25.0
    irregularity_threshold: float = 0.7
    """Regularity below this value classifies as IRREGULAR."""

    def clamped(self) -> BreathingThresholds:
        """Validated copy: values clamped to limits, orderings restored.

        Orderings enforced (the second value is raised to meet the first):
            normal_rate_max >= normal_rate_min
            rapid_threshold >= normal_rate_max
            deep_threshold >= shallow_threshold
        """
        rate_min = _clamp(self.normal_rate_min, RATE_LIMITS)
        rate_max = max(rate_min, _clamp(self.normal_rate_max, RATE_LIMITS))
        rapid = max(rate_max, _clamp(self.rapid_threshold, RATE_LIMITS))
        shallow = _clamp(self.shallow_threshold, UNIT_LIMITS)
        deep = max(shallow, _clamp(self.deep_threshold, UNIT_LIMITS))
        return BreathingThresholds(
            normal_rate_min=rate_min,
            normal_rate_max=rate_max,
            deep_threshold=deep,
            shallow_threshold=shallow,
            rapid_threshold=rapid,
            irregularity_threshold=_clamp(self.irregularity_threshold, UNIT_LIMITS),
        )


DEFAULT_THRESHOLDS = BreathingThresholds()


@dataclass(frozen=True, eq=False)
class BreathingAnalysisResult:
    """Outcome of one BreathingClassifier.process() call.

    The default instance is what empty input produces.
    """

    state: BreathingState = BreathingState.UNKNOWN
    pattern: BreathingPattern = BreathingPattern.UNKNOWN

    breathing_rate: float = 0.0
    """Breaths per minute, clamped to [4, 60] for non-empty input."""

    breathing_depth: float = 0.0
    """min(1, 2 * RMS of the filtered signal)."""

    breathing_regularity: float = 0.0
    """1 - coefficient of variation of recent rates, in [0, 1]."""

    stress_level: float = 0.0
    relaxation_level: float = 0.0

    breathing_cycle: np.ndarray = field(default_factory=lambda: np.zeros(0))
    """Filtered samples between the first two detected peaks (read-only)."""

    peak_intervals: tuple[float, ...] = ()
    """Seconds between successive detected peaks."""


@dataclass(frozen=True)
class BreathingStatistics:
    """Aggregate view over a BreathingClassifier's history."""

    average_breathing_rate: float
    average_stress_level: float
    average_relaxation_level: float
    most_common_state: BreathingState
    most_common_pattern: BreathingPattern
    total_analyses: int
    """Non-default process() calls since construction/reset."""
