"""
core/breathing/signal.py — Time-domain helpers for breathing signals.

Pure functions over 1-D float64 arrays:
    smooth_breathing_band  — 3-tap (0.25, 0.5, 0.25) smoothing, endpoints kept
    find_breathing_peaks   — strict local maxima above an amplitude floor
    peak_intervals         — seconds between successive peaks
    extract_breathing_cycle — samples between the first two peaks
"""

from __future__ import annotations

import numpy as np
from scipy import signal as scipy_signal

SMOOTHING_KERNEL = np.array([0.25, 0.5, 0.25])
PEAK_THRESHOLD = 0.1


def smooth_breathing_band(samples: np.ndarray) -> np.ndarray:
    """Apply the 3-tap low-pass on interior samples.

    out[i] = 0.25 * x[i-1] + 0.5 * x[i] + 0.25 * x[i+1] for 0 < i < len - 1;
    the first and last samples are copied unchanged.
    """
    out = np.array(samples, dtype=np.float64, copy=True)
    if out.size < 3:
        return out
    out[1:-1] = scipy_signal.convolve(samples, SMOOTHING_KERNEL, mode="valid")
    return out


def find_breathing_peaks(samples: np.ndarray, threshold: float = PEAK_THRESHOLD) -> np.ndarray:
    """Indices i (0 < i < len - 1) with x[i] > neighbours and x[i] > threshold.

    Plateaus are not peaks: both neighbour comparisons are strict.
    """
    if samples.size < 3:
        return np.zeros(0, dtype=np.int64)
    middle = samples[1:-1]
    mask = (middle > samples[:-2]) & (middle > samples[2:]) & (middle > threshold)
    return np.flatnonzero(mask) + 1


def peak_intervals(peaks: np.ndarray, sample_rate: int) -> tuple[float, ...]:
    """Seconds between successive peak indices."""
    if peaks.size < 2:
        return ()
    return tuple(float(d) / sample_rate for d in np.diff(peaks))


def extract_breathing_cycle(samples: np.ndarray, peaks: np.ndarray) -> np.ndarray:
    """Slice [first_peak, second_peak); the whole buffer with fewer than two peaks."""
    if peaks.size < 2:
        return samples.copy()
    return samples[int(peaks[0]) : int(peaks[1])].copy()
