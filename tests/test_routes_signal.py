"""
Tests for the HTTP layer: /emotion, /breathing, /health and /metrics.

Classifiers are replaced per test through ``app.dependency_overrides``
(see ``api_client`` in conftest.py); the emotion classifier runs at
8 kHz with a 1024-point window, the breathing classifier on a 64 Hz
envelope.
"""

from __future__ import annotations

import math

import numpy as np

from core.emotion.types import EmotionalState

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _dc(level: float, n: int = 1024) -> list[float]:
    return [level] * n


def _breath(freq_hz: float = 0.25, sr: int = 64, n: int = 1024) -> list[float]:
    t = np.arange(n) / sr
    return (0.4 * np.sin(2.0 * np.pi * freq_hz * t)).tolist()


# ---------------------------------------------------------------------------
# Service endpoints
# ---------------------------------------------------------------------------


class TestServiceEndpoints:
    def test_health(self, api_client) -> None:
        resp = api_client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_metrics_after_analysis(self, api_client) -> None:
        api_client.post("/emotion/process", json={"samples": _dc(0.2)})
        resp = api_client.get("/metrics")
        assert resp.status_code == 200
        assert "sig_analyses_total" in resp.text
        assert 'classifier="emotion"' in resp.text


# ---------------------------------------------------------------------------
# /emotion
# ---------------------------------------------------------------------------


class TestEmotionProcess:
    def test_relaxed_signal(self, api_client) -> None:
        resp = api_client.post("/emotion/process", json={"samples": _dc(0.2)})
        assert resp.status_code == 200
        data = resp.json()
        assert data["state"] == "relaxed"
        assert data["confidence"] == 1.0
        assert data["votes"] == ["relaxed", "relaxed", "relaxed"]
        assert data["input_length"] == 1024
        assert data["processed_length"] == math.ceil(1024 / 0.85)
        assert data["processed_audio"] is None
        assert data["parameters"]["tempo_multiplier"] == 0.85

    def test_include_audio(self, api_client) -> None:
        resp = api_client.post("/emotion/process", json={"samples": _dc(0.2), "include_audio": True})
        data = resp.json()
        assert len(data["processed_audio"]) == data["processed_length"]
        assert all(-1.0 <= v <= 1.0 for v in data["processed_audio"])

    def test_silence_returns_default(self, api_client) -> None:
        resp = api_client.post("/emotion/process", json={"samples": [0.0] * 2048})
        data = resp.json()
        assert data["state"] == "unknown"
        assert data["confidence"] == 0.0
        assert data["votes"] == []
        assert data["processed_length"] == 2048
        assert api_client.emotion.history() == []

    def test_empty_samples_allowed(self, api_client) -> None:
        resp = api_client.post("/emotion/process", json={"samples": []})
        assert resp.status_code == 200
        assert resp.json()["processed_length"] == 0

    def test_missing_samples_is_422(self, api_client) -> None:
        assert api_client.post("/emotion/process", json={}).status_code == 422

    def test_non_numeric_samples_is_422(self, api_client) -> None:
        resp = api_client.post("/emotion/process", json={"samples": ["loud", "quiet"]})
        assert resp.status_code == 422


class TestEmotionStatistics:
    def test_empty(self, api_client) -> None:
        data = api_client.get("/emotion/statistics").json()
        assert data["history_length"] == 0
        assert data["most_common_state"] == "unknown"

    def test_after_processing(self, api_client) -> None:
        for _ in range(2):
            api_client.post("/emotion/process", json={"samples": _dc(0.2)})
        data = api_client.get("/emotion/statistics").json()
        assert data["history_length"] == 2
        assert data["total_processed_samples"] == 2048
        assert data["most_common_state"] == "relaxed"


class TestEmotionPresets:
    def test_set_preset_is_clamped(self, api_client) -> None:
        resp = api_client.put("/emotion/presets/calm", json={"volume_multiplier": 5.0, "reverb_amount": 0.5})
        assert resp.status_code == 200
        data = resp.json()
        assert data["state"] == "calm"
        assert data["parameters"]["volume_multiplier"] == 2.0
        assert data["parameters"]["reverb_amount"] == 0.5
        assert api_client.emotion.parameters_for(EmotionalState.CALM).volume_multiplier == 2.0

    def test_preset_applies_to_next_request(self, api_client) -> None:
        api_client.put("/emotion/presets/relaxed", json={"tempo_multiplier": 2.0})
        data = api_client.post("/emotion/process", json={"samples": _dc(0.2)}).json()
        assert data["processed_length"] == 512

    def test_unknown_state_is_422(self, api_client) -> None:
        assert api_client.put("/emotion/presets/angry", json={}).status_code == 422


class TestEmotionEngine:
    def test_reconfigure(self, api_client) -> None:
        resp = api_client.put("/emotion/engine", json={"fft_size": 512})
        assert resp.status_code == 200
        data = resp.json()
        assert data["fft_size"] == 512
        assert data["sample_rate"] == 8000
        assert data["hop_size"] == 128

    def test_invalid_size_is_422_and_unchanged(self, api_client) -> None:
        resp = api_client.put("/emotion/engine", json={"fft_size": 1000})
        assert resp.status_code == 422
        assert "power of two" in resp.json()["detail"]
        assert api_client.emotion.engine.fft_size == 1024


# ---------------------------------------------------------------------------
# /breathing
# ---------------------------------------------------------------------------


class TestBreathingProcess:
    def test_normal_breathing(self, api_client) -> None:
        resp = api_client.post("/breathing/process", json={"samples": _breath()})
        assert resp.status_code == 200
        data = resp.json()
        assert data["state"] == "normal"
        assert data["pattern"] == "unknown"
        assert abs(data["breathing_rate"] - 15.0) <= 1.0
        assert data["cycle_length"] == 256
        assert data["breathing_cycle"] is None

    def test_include_cycle(self, api_client) -> None:
        data = api_client.post("/breathing/process", json={"samples": _breath(), "include_cycle": True}).json()
        assert len(data["breathing_cycle"]) == data["cycle_length"]

    def test_empty_samples(self, api_client) -> None:
        data = api_client.post("/breathing/process", json={"samples": []}).json()
        assert data["state"] == "unknown"
        assert data["cycle_length"] == 0
        assert api_client.breathing.history() == []


class TestBreathingOverlap:
    def test_windows(self, api_client) -> None:
        resp = api_client.post("/breathing/overlap", json={"samples": _breath(n=2048)})
        assert resp.status_code == 200
        data = resp.json()
        # hop 256: (2048 - 1024) // 256 + 1
        assert data["window_count"] == 5
        assert len(data["results"]) == 5
        assert len(api_client.breathing.history()) == 5


class TestBreathingStatisticsAndThresholds:
    def test_statistics(self, api_client) -> None:
        for _ in range(3):
            api_client.post("/breathing/process", json={"samples": _breath()})
        data = api_client.get("/breathing/statistics").json()
        assert data["total_analyses"] == 3
        assert data["most_common_state"] == "normal"

    def test_get_thresholds(self, api_client) -> None:
        data = api_client.get("/breathing/thresholds").json()
        assert data["normal_rate_min"] == 8.0
        assert data["rapid_threshold"] == 25.0

    def test_put_thresholds_clamped(self, api_client) -> None:
        resp = api_client.put(
            "/breathing/thresholds",
            json={"normal_rate_min": 1.0, "normal_rate_max": 100.0, "deep_threshold": 0.1},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["normal_rate_min"] == 4.0
        assert data["normal_rate_max"] == 60.0
        assert data["rapid_threshold"] == 60.0
        assert data["deep_threshold"] == 0.3
        assert api_client.breathing.thresholds.normal_rate_max == 60.0
