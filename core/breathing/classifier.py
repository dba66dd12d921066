"""
core/breathing/classifier.py — Breathing rate, depth and pattern classification.

Pipeline for one buffer:

    samples → 3-tap smoothing → SpectralEngine.analyze (0.1–1.0 Hz band)
            → rate / depth / regularity → state + pattern → stress/relaxation
            → peak detection → cycle extraction → history update

Rate and depth come from the engine's fundamental and volume level:
    rate  = clamp(fundamental * 60, 4, 60)  breaths per minute
    depth = min(1, volume * 2)

Regularity and pattern read the rate history as it was *before* the
current rate is appended.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter, deque
from collections.abc import Iterable, Sequence
from dataclasses import replace
from enum import Enum
from typing import TypeVar

import numpy as np

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
    RATE_LIMITS,
    BreathingAnalysisResult,
    BreathingPattern,
    BreathingState,
    BreathingStatistics,
    BreathingThresholds,
)
from core.config import BreathingConfig
from core.spectral.engine import SpectralEngine, to_signal
from core.spectral.types import readonly

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=Enum)

_DEPTH_SCALE = 2.0
_OVERLAP_DIVISOR = 4  # hop = window / 4


def _most_common(values: Iterable[_E], enum_cls: type[_E], default: _E) -> _E:
    """Most frequent member; ties resolve in declaration order."""
    counts = Counter(values)
    best, top = default, 0
    for member in enum_cls:
        if counts[member] > top:
            best, top = member, counts[member]
    return best


class BreathingClassifier:
    """Classify breathing from a (low-rate) breathing signal.

    Args:
        config: BreathingConfig. The band limits set the engine's frequency
            range; history_size bounds both the result and rate histories.
        thresholds: Initial decision thresholds (clamped).

    Example::

        classifier = BreathingClassifier(ENVELOPE_BREATHING_CONFIG)
        result = classifier.process(envelope)
        print(result.state, result.breathing_rate)
    """

    def __init__(
        self,
        config: BreathingConfig | None = None,
        thresholds: BreathingThresholds | None = None,
    ) -> None:
        self._config = config or BreathingConfig()
        self._lock = threading.Lock()
        self._engine = SpectralEngine(self._config.spectral_config())
        self._engine.set_frequency_range(self._config.min_frequency, self._config.max_frequency)
        self._thresholds = (thresholds or DEFAULT_THRESHOLDS).clamped()
        self._history: deque[BreathingAnalysisResult] = deque(maxlen=self._config.history_size)
        self._rate_history: deque[float] = deque(maxlen=self._config.history_size)
        self._total_analyses = 0
        logger.info(
            "BreathingClassifier ready: fft_size=%d sample_rate=%d band=%.2f-%.2f Hz",
            self._engine.fft_size,
            self._engine.sample_rate,
            self._config.min_frequency,
            self._config.max_frequency,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def engine(self) -> SpectralEngine:
        return self._engine

    @property
    def sample_rate(self) -> int:
        return self._engine.sample_rate

    @property
    def thresholds(self) -> BreathingThresholds:
        with self._lock:
            return self._thresholds

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def process(self, samples: Sequence[float] | np.ndarray) -> BreathingAnalysisResult:
        """Analyse one buffer and append the result to history.

        Args:
            samples: Breathing signal (e.g. an amplitude envelope).

        Returns:
            BreathingAnalysisResult. Empty input returns the default result
            and leaves history untouched.
        """
        signal = to_signal(samples)
        if signal.size == 0:
            logger.debug("BreathingClassifier: empty input")
            return BreathingAnalysisResult()

        with self._lock:
            return self._process_locked(signal)

    def _process_locked(self, signal: np.ndarray) -> BreathingAnalysisResult:
        filtered = smooth_breathing_band(signal)
        features = self._engine.analyze(filtered)
        sr = self._engine.sample_rate
        t = self._thresholds

        lo, hi = RATE_LIMITS
        rate = min(hi, max(lo, features.fundamental_frequency * 60.0))
        depth = min(1.0, features.volume_level * _DEPTH_SCALE)
        previous_rates = list(self._rate_history)
        regularity = compute_regularity(previous_rates)

        peaks = find_breathing_peaks(filtered)
        result = BreathingAnalysisResult(
            state=classify_state(rate, depth, regularity, t),
            pattern=classify_pattern(previous_rates),
            breathing_rate=rate,
            breathing_depth=depth,
            breathing_regularity=regularity,
            stress_level=stress_score(rate, depth, regularity, t),
            relaxation_level=relaxation_score(rate, depth, regularity, t),
            breathing_cycle=readonly(extract_breathing_cycle(filtered, peaks)),
            peak_intervals=peak_intervals(peaks, sr),
        )

        self._history.append(result)
        self._rate_history.append(rate)
        self._total_analyses += 1

        logger.debug(
            "BreathingClassifier: rate=%.2f depth=%.3f regularity=%.3f → %s/%s (%d peaks)",
            rate,
            depth,
            regularity,
            result.state.value,
            result.pattern.value,
            peaks.size,
        )
        return result

    def analyze_with_overlap(self, samples: Sequence[float] | np.ndarray) -> list[BreathingAnalysisResult]:
        """Run process() on overlapping windows (hop = window / 4).

        A buffer shorter than one window is processed once as-is. History
        advances once per window, so unlike SpectralEngine.analyze_with_overlap
        this runs eagerly and returns a list.
        """
        signal = to_signal(samples)
        n = self._engine.fft_size
        if signal.size < n:
            return [self.process(signal)]
        hop = max(1, n // _OVERLAP_DIVISOR)
        return [self.process(signal[start : start + n]) for start in range(0, signal.size - n + 1, hop)]

    # ------------------------------------------------------------------
    # Current-state getters
    # ------------------------------------------------------------------

    def current_state(self) -> BreathingState:
        with self._lock:
            return self._history[-1].state if self._history else BreathingState.UNKNOWN

    def current_pattern(self) -> BreathingPattern:
        with self._lock:
            return self._history[-1].pattern if self._history else BreathingPattern.UNKNOWN

    def average_rate(self) -> float:
        """Mean of the rate history (0.0 when empty)."""
        with self._lock:
            return float(np.mean(self._rate_history)) if self._rate_history else 0.0

    def stress_level(self) -> float:
        with self._lock:
            return self._history[-1].stress_level if self._history else 0.0

    def relaxation_level(self) -> float:
        with self._lock:
            return self._history[-1].relaxation_level if self._history else 0.0

    def history(self) -> list[BreathingAnalysisResult]:
        """Snapshot of stored results, oldest first."""
        with self._lock:
            return list(self._history)

    def statistics(self) -> BreathingStatistics:
        """Averages and most-common labels over the current history."""
        with self._lock:
            results = list(self._history)
            rates = list(self._rate_history)
            total = self._total_analyses

        if not results:
            return BreathingStatistics(
                average_breathing_rate=0.0,
                average_stress_level=0.0,
                average_relaxation_level=0.0,
                most_common_state=BreathingState.UNKNOWN,
                most_common_pattern=BreathingPattern.UNKNOWN,
                total_analyses=total,
            )

        return BreathingStatistics(
            average_breathing_rate=float(np.mean(rates)),
            average_stress_level=float(np.mean([r.stress_level for r in results])),
            average_relaxation_level=float(np.mean([r.relaxation_level for r in results])),
            most_common_state=_most_common((r.state for r in results), BreathingState, BreathingState.UNKNOWN),
            most_common_pattern=_most_common(
                (r.pattern for r in results), BreathingPattern, BreathingPattern.UNKNOWN
            ),
            total_analyses=total,
        )

    # ------------------------------------------------------------------
    # Threshold setters (values are clamped, never rejected)
    # ------------------------------------------------------------------

    def set_thresholds(self, thresholds: BreathingThresholds) -> BreathingThresholds:
        """Replace all thresholds. Returns the stored (clamped) copy."""
        with self._lock:
            return self._store_thresholds_locked(thresholds)

    def _store_thresholds_locked(self, thresholds: BreathingThresholds) -> BreathingThresholds:
        # Caller holds self._lock.
        clamped = thresholds.clamped()
        if clamped != thresholds:
            logger.warning("Breathing thresholds clamped: %s", clamped)
        self._thresholds = clamped
        return clamped

    def _update_thresholds(self, **changes: float) -> BreathingThresholds:
        with self._lock:
            return self._store_thresholds_locked(replace(self._thresholds, **changes))

    def set_rate_thresholds(self, normal_min: float, normal_max: float) -> BreathingThresholds:
        return self._update_thresholds(normal_rate_min=normal_min, normal_rate_max=normal_max)

    def set_depth_thresholds(self, deep: float, shallow: float) -> BreathingThresholds:
        return self._update_thresholds(deep_threshold=deep, shallow_threshold=shallow)

    def set_rapid_threshold(self, value: float) -> BreathingThresholds:
        return self._update_thresholds(rapid_threshold=value)

    def set_irregularity_threshold(self, value: float) -> BreathingThresholds:
        return self._update_thresholds(irregularity_threshold=value)

    def reset(self) -> None:
        """Clear result and rate histories. Thresholds are kept."""
        with self._lock:
            self._history.clear()
            self._rate_history.clear()
            self._total_analyses = 0
