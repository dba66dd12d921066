"""
FastAPI dependency providers.

Provides process-wide singletons for the settings and both classifiers so
that history and presets persist across requests. Each classifier carries
its own lock, so the singletons are safe under FastAPI's threadpool.
"""

from core.breathing.classifier import BreathingClassifier
from core.emotion.classifier import EmotionClassifier
from infrastructure.settings import Settings

_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached ``Settings`` read from ``.env`` and the environment."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


_emotion_classifier: EmotionClassifier | None = None


def get_emotion_classifier() -> EmotionClassifier:
    """Return a cached ``EmotionClassifier`` singleton.

    Created on first call from ``EMOTION_FFT_SIZE`` / ``EMOTION_SAMPLE_RATE``.
    """
    global _emotion_classifier  # noqa: PLW0603
    if _emotion_classifier is None:
        _emotion_classifier = EmotionClassifier(get_settings().emotion_config())
    return _emotion_classifier


_breathing_classifier: BreathingClassifier | None = None


def get_breathing_classifier() -> BreathingClassifier:
    """Return a cached ``BreathingClassifier`` singleton.

    Created on first call from ``BREATHING_FFT_SIZE`` / ``BREATHING_SAMPLE_RATE``.
    """
    global _breathing_classifier  # noqa: PLW0603
    if _breathing_classifier is None:
        _breathing_classifier = BreathingClassifier(get_settings().breathing_config())
    return _breathing_classifier
