"""
core/spectral/fft.py — Iterative radix-2 Cooley–Tukey FFT and Hann window.

The FFT is split into a plan (bit-reversal permutation and per-stage
twiddle factors, computed once per size) and an execution step that runs
the butterfly stages. Each stage is vectorised across all butterfly groups
by reshaping the working buffer to (n / len, len).

Pure module — numpy and scipy are used as computation libraries only.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.signal import windows as scipy_windows

from core.config import is_power_of_two


def hann_window(n: int) -> np.ndarray:
    """Symmetric Hann window: 0.5 * (1 - cos(2*pi*i / (n - 1))).

    Args:
        n: Window length (>= 2).

    Returns:
        float64 array of shape (n,).
    """
    return scipy_windows.hann(n, sym=True)


def bit_reversal_permutation(n: int) -> np.ndarray:
    """Indices that reorder a length-n buffer into bit-reversed order.

    Raises:
        ValueError: If n is not a power of two.
    """
    if not is_power_of_two(n):
        raise ValueError(f"FFT length must be a power of two, got {n}")
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.int64)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


@dataclass(frozen=True, eq=False)
class FFTPlan:
    """Precomputed permutation and twiddles for one FFT length."""

    size: int
    permutation: np.ndarray
    twiddles: tuple[np.ndarray, ...]
    """One array per stage; stage s (len = 2**(s+1)) holds e^{-2*pi*i*j/len}, j < len/2."""

    @classmethod
    def for_size(cls, n: int) -> FFTPlan:
        """Build the plan for a power-of-two length n."""
        permutation = bit_reversal_permutation(n)
        twiddles: list[np.ndarray] = []
        length = 2
        while length <= n:
            half = length // 2
            twiddles.append(np.exp(-2j * np.pi * np.arange(half) / length))
            length <<= 1
        return cls(size=n, permutation=permutation, twiddles=tuple(twiddles))

    def execute(self, data: np.ndarray) -> np.ndarray:
        """Run the transform on a length-n buffer.

        Args:
            data: Real or complex array of shape (size,). Not modified.

        Returns:
            Complex128 spectrum of shape (size,).
        """
        if data.shape != (self.size,):
            raise ValueError(f"expected shape ({self.size},), got {data.shape}")

        buf = np.asarray(data, dtype=np.complex128)[self.permutation]

        length = 2
        for twiddle in self.twiddles:
            half = length // 2
            groups = buf.reshape(-1, length)  # view: (n / len, len)
            u = groups[:, :half].copy()
            v = groups[:, half:] * twiddle
            groups[:, :half] = u + v
            groups[:, half:] = u - v
            length <<= 1

        return buf


def radix2_fft(data: np.ndarray) -> np.ndarray:
    """One-shot radix-2 FFT. Prefer a cached FFTPlan for repeated sizes."""
    arr = np.asarray(data)
    return FFTPlan.for_size(arr.shape[0]).execute(arr)
