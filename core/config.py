"""
Configuration dataclasses for the spectral analysis and classification engines.

These immutable config objects decouple parameter passing from constructor
signatures, making it easy to define standard configurations and reuse them
across classifiers. Invalid construction-time values raise ValueError here,
so an engine is never built from a half-valid configuration.
"""

from __future__ import annotations

from dataclasses import dataclass


def is_power_of_two(n: int) -> bool:
    """True if n is a positive power of two (1, 2, 4, ...)."""
    return n > 0 and (n & (n - 1)) == 0


@dataclass(frozen=True)
class SpectralConfig:
    """
    Configuration for a SpectralEngine.

    Attributes:
        fft_size: Samples per analysis window. Must be a power of two >= 2
            (the radix-2 FFT and the N-1 Hann denominator need it).
        sample_rate: Sample rate in Hz. Must be positive.
        min_frequency: Lower edge of the analysis range in Hz.
        max_frequency: Upper edge of the analysis range in Hz.
            None means Nyquist (sample_rate / 2).
        hop_size: Default advance between overlapped windows.
            None means fft_size // 4.

    Example:
        >>> config = SpectralConfig(fft_size=2048, sample_rate=48000)
        >>> engine = SpectralEngine(config)
    """

    fft_size: int = 1024
    sample_rate: int = 44100
    min_frequency: float = 20.0
    max_frequency: float | None = None
    hop_size: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not is_power_of_two(self.fft_size) or self.fft_size < 2:
            raise ValueError(f"fft_size must be a power of two >= 2, got {self.fft_size}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.hop_size is not None and self.hop_size <= 0:
            raise ValueError(f"hop_size must be positive, got {self.hop_size}")

    @property
    def nyquist(self) -> float:
        """Half the sample rate in Hz."""
        return self.sample_rate / 2.0

    @property
    def effective_hop_size(self) -> int:
        """Configured hop size, or a quarter window when unset (never above fft_size)."""
        if self.hop_size is None:
            return max(1, self.fft_size // 4)
        return min(self.fft_size, self.hop_size)

    @property
    def frequency_range(self) -> tuple[float, float]:
        """(min, max) analysis range clamped to [0, Nyquist]."""
        upper = self.nyquist if self.max_frequency is None else self.max_frequency
        return max(0.0, self.min_frequency), min(self.nyquist, upper)


@dataclass(frozen=True)
class EmotionConfig:
    """
    Configuration for an EmotionClassifier.

    Attributes:
        spectral: Engine configuration for the embedded SpectralEngine.
        history_size: Capacity of the smoothing history. Defaults to 10.
        sensitivity: Adaptation sensitivity in [0, 1]. Stored and reported
            for callers; the classifier does not scale anything by it.
    """

    spectral: SpectralConfig = SpectralConfig()
    history_size: int = 10
    sensitivity: float = 0.7

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.history_size <= 0:
            raise ValueError(f"history_size must be positive, got {self.history_size}")


@dataclass(frozen=True)
class BreathingConfig:
    """
    Configuration for a BreathingClassifier.

    Breathing sits far below audio-rate content, so in practice the buffer
    fed here is an amplitude envelope at a low sample rate (e.g. 64 Hz),
    where a 1024-point window covers 16 seconds of breathing.

    Attributes:
        fft_size: Analysis window size (power of two >= 2).
        sample_rate: Sample rate of the breathing signal in Hz.
        min_frequency: Lowest breathing frequency of interest (0.1 Hz = 6 bpm).
        max_frequency: Highest breathing frequency of interest (1.0 Hz = 60 bpm).
        history_size: Capacity of the rolling result/rate history. Defaults to 20.
    """

    fft_size: int = 1024
    sample_rate: int = 44100
    min_frequency: float = 0.1
    max_frequency: float = 1.0
    history_size: int = 20

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.history_size <= 0:
            raise ValueError(f"history_size must be positive, got {self.history_size}")
        # Delegate FFT size / sample rate checks to SpectralConfig
        self.spectral_config()

    def spectral_config(self) -> SpectralConfig:
        """Build the SpectralConfig for the embedded engine."""
        return SpectralConfig(
            fft_size=self.fft_size,
            sample_rate=self.sample_rate,
            min_frequency=self.min_frequency,
            max_frequency=self.max_frequency,
        )


# Pre-defined configurations for common use cases

DEFAULT_SPECTRAL_CONFIG = SpectralConfig()
"""Default engine configuration: 1024-point FFT at 44.1 kHz, hop 256."""

DEFAULT_EMOTION_CONFIG = EmotionConfig()
"""Default emotion classifier: 1024-point FFT at 44.1 kHz, history of 10."""

DEFAULT_BREATHING_CONFIG = BreathingConfig()
"""Default breathing classifier: 1024-point FFT at 44.1 kHz, history of 20."""

ENVELOPE_BREATHING_CONFIG = BreathingConfig(sample_rate=64)
"""Breathing classifier for a 64 Hz envelope: 16 s windows, 0.0625 Hz bins."""
