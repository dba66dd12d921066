"""
core/emotion/rules.py — Rule-based emotional state voting and parameter smoothing.

Three independent evaluators each map SpectralFeatures to one
EmotionalState; the state with the most votes wins.

Algorithm:
    1. breathing-band, rhythmic and spectral evaluators cast one vote each.
    2. The state with the most votes wins.
    3. On a tie, the first maximum in EmotionalState declaration order wins
       (CALM > EXCITED > STRESSED > FOCUSED > RELAXED > UNKNOWN).
    4. confidence = (top votes - runner-up votes) / total votes.

This module is core/ pure:
  - No I/O, no state
  - Deterministic: same features → same state, always
"""

from __future__ import annotations

from collections import Counter

from core.emotion.types import AdaptationParameters, EmotionalState
from core.spectral.types import SpectralFeatures

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

# Breathing-band evaluator (Hz / linear volume)
_SLOW_FUNDAMENTAL_HZ = 0.5
_FAST_FUNDAMENTAL_HZ = 2.0
_LOUD_VOLUME = 0.7

# Rhythmic evaluator (BPM / crossing fraction)
_FAST_TEMPO_BPM = 120.0
_SLOW_TEMPO_BPM = 80.0
_ACTIVE_ZCR = 0.3

# Spectral evaluator (Hz)
_BRIGHT_CENTROID_HZ = 2000.0
_DARK_CENTROID_HZ = 500.0
_WIDE_ROLLOFF_HZ = 4000.0

# Weight of the previous parameters in exponential smoothing
SMOOTHING_FACTOR = 0.3


# ---------------------------------------------------------------------------
# Evaluators
# ---------------------------------------------------------------------------


def breathing_band_vote(features: SpectralFeatures) -> EmotionalState:
    """Vote from the dominant frequency and loudness."""
    if features.fundamental_frequency < _SLOW_FUNDAMENTAL_HZ:
        return EmotionalState.RELAXED
    if features.fundamental_frequency > _FAST_FUNDAMENTAL_HZ:
        return EmotionalState.EXCITED
    if features.volume_level > _LOUD_VOLUME:
        return EmotionalState.STRESSED
    return EmotionalState.CALM


def rhythmic_vote(features: SpectralFeatures) -> EmotionalState:
    """Vote from the tempo estimate and zero-crossing activity."""
    if features.tempo > _FAST_TEMPO_BPM:
        return EmotionalState.EXCITED
    if features.tempo < _SLOW_TEMPO_BPM:
        return EmotionalState.RELAXED
    if features.zero_crossing_rate > _ACTIVE_ZCR:
        return EmotionalState.FOCUSED
    return EmotionalState.CALM


def spectral_vote(features: SpectralFeatures) -> EmotionalState:
    """Vote from spectral brightness (centroid) and width (rolloff)."""
    if features.spectral_centroid > _BRIGHT_CENTROID_HZ:
        return EmotionalState.FOCUSED
    if features.spectral_centroid < _DARK_CENTROID_HZ:
        return EmotionalState.RELAXED
    if features.spectral_rolloff > _WIDE_ROLLOFF_HZ:
        return EmotionalState.EXCITED
    return EmotionalState.CALM


def cast_votes(features: SpectralFeatures) -> tuple[EmotionalState, ...]:
    """Run all evaluators in fixed order: breathing-band, rhythmic, spectral."""
    return (
        breathing_band_vote(features),
        rhythmic_vote(features),
        spectral_vote(features),
    )


# ---------------------------------------------------------------------------
# Tally
# ---------------------------------------------------------------------------


def tally_votes(votes: tuple[EmotionalState, ...]) -> tuple[EmotionalState, float]:
    """Pick the winning state and its vote-margin confidence.

    Args:
        votes: One state per evaluator.

    Returns:
        (state, confidence). No votes → (UNKNOWN, 0.0).
    """
    if not votes:
        return EmotionalState.UNKNOWN, 0.0

    counts = Counter(votes)
    winner = EmotionalState.UNKNOWN
    top = 0
    for state in EmotionalState:  # declaration order = tie-break order
        if counts[state] > top:
            winner, top = state, counts[state]

    runner_up = max((c for s, c in counts.items() if s is not winner), default=0)
    confidence = (top - runner_up) / float(len(votes))
    return winner, confidence


def most_common_state(states: list[EmotionalState]) -> EmotionalState:
    """Most frequent state, ties resolved in declaration order; UNKNOWN if empty."""
    if not states:
        return EmotionalState.UNKNOWN
    return tally_votes(tuple(states))[0]


# ---------------------------------------------------------------------------
# Smoothing
# ---------------------------------------------------------------------------


def smooth_parameters(
    new: AdaptationParameters,
    previous: AdaptationParameters | None,
) -> AdaptationParameters:
    """Blend new parameters with the most recent applied ones.

    smoothed = 0.7 * new + 0.3 * previous; pass-through when there is no
    previous entry. Repeated application with a constant target shrinks the
    deviation by a factor of 0.3 per call.
    """
    if previous is None:
        return new
    return new.blend(previous, SMOOTHING_FACTOR)
