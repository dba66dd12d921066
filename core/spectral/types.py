"""
core/spectral/types.py — Frozen result type for spectral analysis.

SpectralFeatures is a frozen dataclass whose array fields are read-only
numpy arrays, so a returned result can be shared between classifiers and
threads without copying.

Design principles:
    - No I/O, no state, no side effects.
    - Invariants are documented but NOT enforced at construction time —
      validation happens at the creation site (engine.py).
    - eq=False: array fields make field-wise equality ambiguous; compare
      arrays explicitly with numpy.array_equal.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def readonly(values: np.ndarray) -> np.ndarray:
    """Return values with the numpy write flag cleared."""
    values.setflags(write=False)
    return values


@dataclass(frozen=True, eq=False)
class SpectralFeatures:
    """Spectrum and derived scalar features for one analysis window.

    Invariants:
        len(magnitudes) == len(phases) == len(frequencies) == fft_size // 2 + 1
        fundamental_frequency, spectral_centroid, spectral_rolloff >= 0.0
        0.0 <= zero_crossing_rate <= 1.0
        60.0 <= tempo <= 200.0
        0.0 <= volume_level <= 1.0
    """

    magnitudes: np.ndarray
    """|X_k| for bins 0..N/2 (read-only)."""

    phases: np.ndarray
    """arg(X_k) in radians for bins 0..N/2 (read-only)."""

    frequencies: np.ndarray
    """Bin centre frequencies k * sample_rate / N in Hz (read-only)."""

    fundamental_frequency: float
    """Frequency of the largest-magnitude bin. A peak pick, not a pitch tracker."""

    spectral_centroid: float
    """Magnitude-weighted mean frequency in Hz. 0.0 for a zero spectrum."""

    spectral_rolloff: float
    """Frequency where cumulative magnitude first reaches 85% of the total."""

    zero_crossing_rate: float
    """Fraction of adjacent sample pairs that change sign (original buffer)."""

    tempo: float
    """Heuristic BPM: clamp(zcr * 120, 60, 200). Not rhythm analysis."""

    volume_level: float
    """min(1, RMS) of the original buffer."""

    fft_size: int
    sample_rate: int

    @property
    def total_magnitude(self) -> float:
        """Sum of all bin magnitudes. Zero only for an all-zero window."""
        return float(np.sum(self.magnitudes))

    @property
    def bin_width(self) -> float:
        """Frequency resolution in Hz."""
        return self.sample_rate / float(self.fft_size)
