"""
core/spectral — Windowed radix-2 FFT engine and derived spectral features.

All analysis is pure computation over in-memory buffers: numpy arrays in,
frozen SpectralFeatures out. No file I/O here — decoding audio files is the
caller's job.

Public API:
    Types:   SpectralFeatures
    Engine:  SpectralEngine, OverlapAnalysis
    FFT:     FFTPlan, radix2_fft, hann_window
"""

from core.spectral.engine import OverlapAnalysis, SpectralEngine
from core.spectral.fft import FFTPlan, hann_window, radix2_fft
from core.spectral.types import SpectralFeatures

__all__ = [
    "SpectralFeatures",
    "SpectralEngine",
    "OverlapAnalysis",
    "FFTPlan",
    "radix2_fft",
    "hann_window",
]
