"""
core/emotion/effects.py — Deterministic audio effect chain driven by AdaptationParameters.

Stage order (fixed):
    volume → tempo → bass boost → treble boost → reverb → echo

Every stage returns a new array and clamps what it writes to [-1, 1].
Stages whose knob is at its neutral value return the input unchanged.

Known quirks kept on purpose:
    - The tempo stage is strided resampling without interpolation, so it
      changes pitch and duration together. Output length is
      ceil(len / multiplier).
    - Bass and treble boost share the same first-difference kernel.
"""

from __future__ import annotations

import numpy as np
from scipy import signal as scipy_signal

from core.emotion.types import AdaptationParameters

_TEMPO_EPSILON = 0.01  # multipliers within this of 1.0 are a no-op
_BOOST_SCALE = 0.1  # alpha = boost * 0.1
_REVERB_DELAY_SEC = 0.1
_REVERB_DECAY = 0.3
_ECHO_LEVEL = 0.3


def _clip(values: np.ndarray) -> np.ndarray:
    return np.clip(values, -1.0, 1.0)


def apply_volume(audio: np.ndarray, multiplier: float) -> np.ndarray:
    """Scale by multiplier, then clamp to [-1, 1]."""
    return _clip(audio * multiplier)


def apply_tempo(audio: np.ndarray, multiplier: float) -> np.ndarray:
    """Strided resampling: keep samples at floor(k * multiplier) for k * multiplier < len.

    Args:
        audio: Input samples.
        multiplier: Stride (> 0). |multiplier - 1| < 0.01 leaves audio unchanged.

    Returns:
        Array of length ceil(len(audio) / multiplier).

    Raises:
        ValueError: If multiplier is not positive.
    """
    if multiplier <= 0.0:
        raise ValueError(f"tempo multiplier must be positive, got {multiplier}")
    if abs(multiplier - 1.0) < _TEMPO_EPSILON or audio.size == 0:
        return audio.copy()
    positions = np.arange(0.0, float(audio.size), multiplier)
    indices = positions.astype(np.int64)
    return audio[indices[indices < audio.size]]


def _first_difference_emphasis(audio: np.ndarray, boost: float) -> np.ndarray:
    """y[i] = clamp(y[i] + alpha * (y[i] - y[i-1])), i >= 1, sequential in place.

    The unclamped recurrence y[i] = (1 + a) x[i] - a y[i-1] is an IIR filter,
    so it runs through scipy.signal.lfilter first; if any output leaves
    [-1, 1] the clamp feeds back into later samples and the exact
    sample-by-sample loop is used instead.
    """
    if boost <= 0.0 or audio.size < 2:
        return audio.copy()
    alpha = boost * _BOOST_SCALE

    out = np.empty_like(audio)
    out[0] = audio[0]
    tail, _ = scipy_signal.lfilter(
        [1.0 + alpha], [1.0, alpha], audio[1:], zi=np.array([-alpha * audio[0]])
    )
    out[1:] = tail
    if np.all(np.abs(out[1:]) <= 1.0):
        return out

    out = audio.copy()
    for i in range(1, out.size):
        value = out[i] + alpha * (out[i] - out[i - 1])
        out[i] = min(1.0, max(-1.0, value))
    return out


def apply_bass_boost(audio: np.ndarray, boost: float) -> np.ndarray:
    """First-difference emphasis with alpha = boost * 0.1."""
    return _first_difference_emphasis(audio, boost)


def apply_treble_boost(audio: np.ndarray, boost: float) -> np.ndarray:
    """Identical kernel to apply_bass_boost."""
    return _first_difference_emphasis(audio, boost)


def _delay_tap(audio: np.ndarray, delay_samples: int, level: float) -> np.ndarray:
    """out[i] = clamp(x[i] + level * x[i - d]) for i >= d, reading the unmodified input."""
    out = audio.copy()
    if delay_samples >= audio.size:
        return out
    end = audio.size - delay_samples
    out[delay_samples:] = _clip(audio[delay_samples:] + level * audio[:end])
    return out


def apply_reverb(audio: np.ndarray, amount: float, sample_rate: int) -> np.ndarray:
    """Single delay tap of int(sr * 0.1 * amount) samples with decay 0.3 * amount."""
    if amount <= 0.0:
        return audio.copy()
    delay_samples = int(sample_rate * _REVERB_DELAY_SEC * amount)
    return _delay_tap(audio, delay_samples, _REVERB_DECAY * amount)


def apply_echo(audio: np.ndarray, delay: float, sample_rate: int) -> np.ndarray:
    """Echo with delay in seconds and fixed feedback level 0.3."""
    if delay <= 0.0:
        return audio.copy()
    delay_samples = int(sample_rate * delay)
    return _delay_tap(audio, delay_samples, _ECHO_LEVEL)


def apply_effect_chain(
    audio: np.ndarray,
    parameters: AdaptationParameters,
    sample_rate: int,
) -> np.ndarray:
    """Run all six stages in their fixed order.

    Args:
        audio: Mono float64 samples.
        parameters: Knob values (used as given — clamp beforehand if needed).
        sample_rate: Sample rate in Hz, for the delay-based stages.

    Returns:
        New array; the input is never modified.
    """
    out = apply_volume(audio, parameters.volume_multiplier)
    out = apply_tempo(out, parameters.tempo_multiplier)
    out = apply_bass_boost(out, parameters.bass_boost)
    out = apply_treble_boost(out, parameters.treble_boost)
    out = apply_reverb(out, parameters.reverb_amount, sample_rate)
    out = apply_echo(out, parameters.echo_delay, sample_rate)
    return out
