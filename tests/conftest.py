"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat override boilerplate.
"""

import pytest
from fastapi.testclient import TestClient

from api.deps import get_breathing_classifier, get_emotion_classifier
from api.main import app
from core.breathing.classifier import BreathingClassifier
from core.config import ENVELOPE_BREATHING_CONFIG, EmotionConfig, SpectralConfig
from core.emotion.classifier import EmotionClassifier

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TEST_EMOTION_CONFIG = EmotionConfig(spectral=SpectralConfig(fft_size=1024, sample_rate=8000))
"""Small, fast emotion configuration for route tests."""


# ---------------------------------------------------------------------------
# FastAPI test client fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def api_client():
    """FastAPI ``TestClient`` with fresh classifiers per test.

    The classifiers are exposed as ``client.emotion`` and ``client.breathing``
    so tests can inspect history after a request.
    """
    emotion = EmotionClassifier(TEST_EMOTION_CONFIG)
    breathing = BreathingClassifier(ENVELOPE_BREATHING_CONFIG)
    app.dependency_overrides[get_emotion_classifier] = lambda: emotion
    app.dependency_overrides[get_breathing_classifier] = lambda: breathing

    client = TestClient(app)
    client.emotion = emotion  # type: ignore[attr-defined]
    client.breathing = breathing  # type: ignore[attr-defined]
    yield client

    app.dependency_overrides.clear()
