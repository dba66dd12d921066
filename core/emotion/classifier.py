"""
core/emotion/classifier.py — Emotion detection and adaptive effect processing.

EmotionClassifier wires the pieces together:

    samples → SpectralEngine.analyze → three-way vote → preset lookup
            → smoothing against history → effect chain → AdaptationResult

State owned per instance (never shared):
    - one SpectralEngine
    - the preset table
    - a bounded history of (state, smoothed parameters, confidence)
    - a processed-sample counter

Every public method runs under the instance lock, so the classifier may be
called from several threads but processes one request at a time.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from core.config import EmotionConfig
from core.emotion._preset_loader import load_presets
from core.emotion.effects import apply_effect_chain
from core.emotion.rules import cast_votes, most_common_state, smooth_parameters, tally_votes
from core.emotion.types import (
    NEUTRAL_PARAMETERS,
    AdaptationParameters,
    AdaptationResult,
    EmotionalState,
    EmotionStatistics,
)
from core.spectral.engine import SpectralEngine, to_signal
from core.spectral.types import SpectralFeatures, readonly

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _HistoryEntry:
    state: EmotionalState
    parameters: AdaptationParameters
    confidence: float


class EmotionClassifier:
    """Classify emotional state from audio and adapt the audio to it.

    Args:
        config: EmotionConfig (FFT size, sample rate, history size,
            sensitivity). Invalid values were already rejected by the config.
        presets: Optional state → parameters table. Defaults to the bundled
            core/emotion/presets/default.yaml. Values are clamped.

    Example::

        classifier = EmotionClassifier(EmotionConfig())
        result = classifier.process(samples)
        print(result.state, result.confidence, len(result.processed_audio))
    """

    def __init__(
        self,
        config: EmotionConfig | None = None,
        presets: dict[EmotionalState, AdaptationParameters] | None = None,
    ) -> None:
        """Create the engine, load presets, start with empty history."""
        self._config = config or EmotionConfig()
        self._lock = threading.Lock()
        self._engine = SpectralEngine(self._config.spectral)
        table = load_presets() if presets is None else presets
        self._presets = {state: params.clamped() for state, params in table.items()}
        self._sensitivity = min(1.0, max(0.0, self._config.sensitivity))
        self._history: deque[_HistoryEntry] = deque(maxlen=self._config.history_size)
        self._total_samples = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def engine(self) -> SpectralEngine:
        """The owned SpectralEngine (for reconfiguration)."""
        return self._engine

    @property
    def sample_rate(self) -> int:
        return self._engine.sample_rate

    @property
    def history_size(self) -> int:
        return self._config.history_size

    @property
    def sensitivity(self) -> float:
        with self._lock:
            return self._sensitivity

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def process(self, samples: Sequence[float] | np.ndarray) -> AdaptationResult:
        """Detect the emotional state of a buffer and apply the matching preset.

        Steps:
            1. Spectral analysis.
            2. Three-way vote (breathing-band, rhythmic, spectral).
            3. Preset lookup for the winning state.
            4. Smoothing: 0.7 * preset + 0.3 * most recent applied parameters.
            5. Effect chain with the smoothed parameters.
            6. History update (bounded; oldest evicted).

        Args:
            samples: Mono sample buffer.

        Returns:
            AdaptationResult. Empty or all-zero input yields the default
            result (UNKNOWN, neutral parameters, confidence 0) with the input
            copied through unchanged, and leaves history untouched.
        """
        signal = to_signal(samples)
        if signal.size == 0 or not np.any(signal):
            logger.debug("EmotionClassifier: empty/silent input (%d samples)", signal.size)
            return AdaptationResult(processed_audio=readonly(signal.copy()))

        with self._lock:
            features = self._engine.analyze(signal)
            votes = cast_votes(features)
            state, confidence = tally_votes(votes)

            previous = self._history[-1].parameters if self._history else None
            applied = smooth_parameters(self._parameters_for(state), previous)
            processed = apply_effect_chain(signal, applied, features.sample_rate)

            self._history.append(_HistoryEntry(state, applied, confidence))
            self._total_samples += signal.size

        logger.debug(
            "EmotionClassifier: votes=%s → %s (confidence=%.3f, out_len=%d)",
            [v.value for v in votes],
            state.value,
            confidence,
            processed.size,
        )
        return AdaptationResult(
            processed_audio=readonly(processed),
            state=state,
            parameters=applied,
            confidence=confidence,
            votes=votes,
        )

    def process_with_parameters(
        self,
        samples: Sequence[float] | np.ndarray,
        parameters: AdaptationParameters,
    ) -> np.ndarray:
        """Run only the effect chain with explicit parameters (clamped first).

        Does not analyse, classify, or touch history.
        """
        signal = to_signal(samples)
        return apply_effect_chain(signal, parameters.clamped(), self._engine.sample_rate)

    # ------------------------------------------------------------------
    # Classification helpers
    # ------------------------------------------------------------------

    def detect_state(self, features: SpectralFeatures) -> EmotionalState:
        """Winning state for precomputed features (no history update)."""
        return tally_votes(cast_votes(features))[0]

    def _parameters_for(self, state: EmotionalState) -> AdaptationParameters:
        """Preset lookup. Must be called with lock held."""
        return self._presets.get(state, NEUTRAL_PARAMETERS)

    def parameters_for(self, state: EmotionalState) -> AdaptationParameters:
        """Preset for a state; unmapped states get the neutral identity."""
        with self._lock:
            return self._parameters_for(state)

    # ------------------------------------------------------------------
    # Runtime configuration
    # ------------------------------------------------------------------

    def set_preset(self, state: EmotionalState, parameters: AdaptationParameters) -> AdaptationParameters:
        """Replace one state's preset. Out-of-range knobs are silently clamped.

        Returns:
            The stored (clamped) parameters.
        """
        clamped = parameters.clamped()
        if clamped != parameters:
            logger.warning("Preset for %s clamped to %s", state.value, clamped.as_dict())
        with self._lock:
            self._presets[state] = clamped
        return clamped

    def set_sensitivity(self, sensitivity: float) -> float:
        """Set adaptation sensitivity, clamped to [0, 1]. Returns the stored value."""
        value = min(1.0, max(0.0, float(sensitivity)))
        with self._lock:
            self._sensitivity = value
        return value

    def reset(self) -> None:
        """Clear history and counters. Presets and configuration are kept."""
        with self._lock:
            self._history.clear()
            self._total_samples = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def history(self) -> list[tuple[EmotionalState, AdaptationParameters]]:
        """Snapshot of (state, applied parameters), oldest first."""
        with self._lock:
            return [(e.state, e.parameters) for e in self._history]

    def statistics(self) -> EmotionStatistics:
        """Aggregate statistics over the current history."""
        with self._lock:
            entries = list(self._history)
            total = self._total_samples

        if not entries:
            return EmotionStatistics(
                total_processed_samples=total,
                most_common_state=EmotionalState.UNKNOWN,
                average_confidence=0.0,
                average_volume_adjustment=0.0,
                average_tempo_adjustment=0.0,
                history_length=0,
            )

        return EmotionStatistics(
            total_processed_samples=total,
            most_common_state=most_common_state([e.state for e in entries]),
            average_confidence=float(np.mean([e.confidence for e in entries])),
            average_volume_adjustment=float(np.mean([e.parameters.volume_multiplier for e in entries])),
            average_tempo_adjustment=float(np.mean([e.parameters.tempo_multiplier for e in entries])),
            history_length=len(entries),
        )
