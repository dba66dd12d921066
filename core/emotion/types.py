"""
core/emotion/types.py — Enums and frozen data types for emotion adaptation.

All result types are frozen dataclasses — immutable value objects that can be
safely handed across threads. Array-carrying types use eq=False and store
read-only numpy arrays.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

import numpy as np


class EmotionalState(Enum):
    """Closed set of emotional states.

    Declaration order is significant: vote ties resolve to the state that
    is declared first.
    """

    CALM = "calm"
    EXCITED = "excited"
    STRESSED = "stressed"
    FOCUSED = "focused"
    RELAXED = "relaxed"
    UNKNOWN = "unknown"


# Valid range per adaptation knob (inclusive)
PARAMETER_RANGES: dict[str, tuple[float, float]] = {
    "volume_multiplier": (0.0, 2.0),
    "tempo_multiplier": (0.5, 2.0),
    "bass_boost": (0.0, 1.0),
    "treble_boost": (0.0, 1.0),
    "reverb_amount": (0.0, 1.0),
    "echo_delay": (0.0, 1.0),
}


@dataclass(frozen=True)
class AdaptationParameters:
    """Six effect-chain knobs. Defaults are the neutral identity.

    Invariants (enforced by clamped(), not at construction):
        each field lies within PARAMETER_RANGES[field]
    """

    volume_multiplier: float = 1.0
    """Gain applied before clamping to [-1, 1]. Range [0, 2]."""

    tempo_multiplier: float = 1.0
    """Stride of the resampling stage. Range [0.5, 2]. 1.0 leaves length unchanged."""

    bass_boost: float = 0.0
    """First-difference emphasis amount. Range [0, 1]."""

    treble_boost: float = 0.0
    """Same kernel as bass_boost. Range [0, 1]."""

    reverb_amount: float = 0.0
    """Single delay tap (up to 100 ms) with decay 0.3 * amount. Range [0, 1]."""

    echo_delay: float = 0.0
    """Echo delay in seconds, fixed feedback 0.3. Range [0, 1]."""

    def as_dict(self) -> dict[str, float]:
        """Return knob values keyed by field name, in declaration order."""
        return {
            "volume_multiplier": self.volume_multiplier,
            "tempo_multiplier": self.tempo_multiplier,
            "bass_boost": self.bass_boost,
            "treble_boost": self.treble_boost,
            "reverb_amount": self.reverb_amount,
            "echo_delay": self.echo_delay,
        }

    def clamped(self) -> AdaptationParameters:
        """Copy with every knob clamped to its documented range."""
        values = {
            name: min(hi, max(lo, float(getattr(self, name))))
            for name, (lo, hi) in PARAMETER_RANGES.items()
        }
        return replace(self, **values)

    def blend(self, previous: AdaptationParameters, weight_previous: float) -> AdaptationParameters:
        """Linear blend: (1 - w) * self + w * previous, knob by knob."""
        w = weight_previous
        ours = self.as_dict()
        theirs = previous.as_dict()
        return AdaptationParameters(**{k: (1.0 - w) * ours[k] + w * theirs[k] for k in ours})


NEUTRAL_PARAMETERS = AdaptationParameters()


@dataclass(frozen=True, eq=False)
class AdaptationResult:
    """Outcome of one EmotionClassifier.process() call.

    The default instance (UNKNOWN, neutral parameters, confidence 0) is what
    empty or silent input produces.
    """

    processed_audio: np.ndarray = field(default_factory=lambda: np.zeros(0))
    """Effect-chain output (read-only). Length differs from the input when
    the tempo stage strides by a non-unit amount."""

    state: EmotionalState = EmotionalState.UNKNOWN
    parameters: AdaptationParameters = NEUTRAL_PARAMETERS
    """Smoothed parameters that were applied."""

    confidence: float = 0.0
    """Vote margin (top - runner-up) / 3, in [0, 1]."""

    votes: tuple[EmotionalState, ...] = ()
    """Evaluator outputs: (breathing-band, rhythmic, spectral). Empty for defaults."""


@dataclass(frozen=True)
class EmotionStatistics:
    """Aggregate view over an EmotionClassifier's lifetime and history."""

    total_processed_samples: int
    """Input samples consumed by non-default process() calls since construction/reset."""

    most_common_state: EmotionalState
    """Most frequent state in history (UNKNOWN when history is empty)."""

    average_confidence: float
    average_volume_adjustment: float
    """Mean smoothed volume multiplier across history."""

    average_tempo_adjustment: float
    """Mean smoothed tempo multiplier across history."""

    history_length: int
