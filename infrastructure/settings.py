"""Environment-driven settings for the signal classification service.

Reads a local ``.env`` file (python-dotenv) and then the process
environment. Core configuration objects are built from these values, so
``core/`` never touches the environment itself.

Variables:
    EMOTION_FFT_SIZE         Emotion analysis window (default 1024)
    EMOTION_SAMPLE_RATE      Emotion input sample rate in Hz (default 44100)
    BREATHING_FFT_SIZE       Breathing analysis window (default 1024)
    BREATHING_SAMPLE_RATE    Breathing input sample rate in Hz (default 44100)
    LOG_LEVEL                Root logging level (default INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from core.config import BreathingConfig, EmotionConfig, SpectralConfig


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Process-level settings. Build with :meth:`from_env`."""

    emotion_fft_size: int = 1024
    emotion_sample_rate: int = 44100
    breathing_fft_size: int = 1024
    breathing_sample_rate: int = 44100
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> Settings:
        """Read settings from ``.env`` (optional) and ``os.environ``.

        Raises:
            ValueError: If a numeric variable is not an integer.
        """
        if dotenv:
            load_dotenv()
        return cls(
            emotion_fft_size=_int_env("EMOTION_FFT_SIZE", 1024),
            emotion_sample_rate=_int_env("EMOTION_SAMPLE_RATE", 44100),
            breathing_fft_size=_int_env("BREATHING_FFT_SIZE", 1024),
            breathing_sample_rate=_int_env("BREATHING_SAMPLE_RATE", 44100),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )

    def emotion_config(self) -> EmotionConfig:
        """EmotionConfig for these settings (validated on construction)."""
        spectral = SpectralConfig(fft_size=self.emotion_fft_size, sample_rate=self.emotion_sample_rate)
        return EmotionConfig(spectral=spectral)

    def breathing_config(self) -> BreathingConfig:
        """BreathingConfig for these settings (validated on construction)."""
        return BreathingConfig(fft_size=self.breathing_fft_size, sample_rate=self.breathing_sample_rate)
