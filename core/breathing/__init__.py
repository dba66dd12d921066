"""
core/breathing — Breathing rate, depth, state and pattern classification.

Public API:
    Types:       BreathingState, BreathingPattern, BreathingThresholds,
                 BreathingAnalysisResult, BreathingStatistics
    Classifier:  BreathingClassifier
    Helpers:     smooth_breathing_band, find_breathing_peaks, peak_intervals,
                 extract_breathing_cycle, compute_regularity, classify_state,
                 classify_pattern, stress_score, relaxation_score
"""

from core.breathing.classifier import BreathingClassifier
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
from core.breathing.types import (
    DEFAULT_THRESHOLDS,
    BreathingAnalysisResult,
    BreathingPattern,
    BreathingState,
    BreathingStatistics,
    BreathingThresholds,
)

__all__ = [
    # Types
    "BreathingState",
    "BreathingPattern",
    "BreathingThresholds",
    "BreathingAnalysisResult",
    "BreathingStatistics",
    "DEFAULT_THRESHOLDS",
    # Classifier
    "BreathingClassifier",
    # Signal helpers
    "smooth_breathing_band",
    "find_breathing_peaks",
    "peak_intervals",
    "extract_breathing_cycle",
    # Rules
    "compute_regularity",
    "classify_state",
    "classify_pattern",
    "stress_score",
    "relaxation_score",
]
