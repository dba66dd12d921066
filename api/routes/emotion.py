"""
Emotion routes — classify audio and apply adaptive effects.

``POST /emotion/process``          — classify one buffer, return state + processed audio
``GET  /emotion/statistics``       — aggregates over the classifier's history
``PUT  /emotion/presets/{state}``  — replace one state's preset (values clamped)
``PUT  /emotion/engine``           — change FFT size / sample rate at runtime
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_emotion_classifier
from api.schemas.emotion import (
    AdaptationParametersSchema,
    EmotionProcessRequest,
    EmotionProcessResponse,
    EmotionStatisticsResponse,
    EngineConfigRequest,
    EngineConfigResponse,
    PresetResponse,
)
from core.emotion.classifier import EmotionClassifier
from core.emotion.types import EmotionalState
from infrastructure.metrics import LatencyTimer, record_analysis, record_empty_input

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emotion", tags=["emotion"])

Classifier = Annotated[EmotionClassifier, Depends(get_emotion_classifier)]


@router.post("/process", response_model=EmotionProcessResponse)
def process(body: EmotionProcessRequest, classifier: Classifier) -> EmotionProcessResponse:
    """Detect the emotional state of a buffer and return the adapted audio."""
    with LatencyTimer() as timer:
        result = classifier.process(body.samples)

    if not result.votes:
        record_empty_input("emotion")
    else:
        record_analysis(classifier="emotion", state=result.state.value, latency_seconds=timer.elapsed)

    logger.info(
        "emotion/process: %d samples → %s (confidence=%.2f) in %.1f ms",
        len(body.samples),
        result.state.value,
        result.confidence,
        timer.elapsed * 1000,
    )
    return EmotionProcessResponse(
        state=result.state,
        confidence=result.confidence,
        votes=list(result.votes),
        parameters=AdaptationParametersSchema.from_parameters(result.parameters),
        input_length=len(body.samples),
        processed_length=int(result.processed_audio.size),
        processed_audio=result.processed_audio.tolist() if body.include_audio else None,
    )


@router.get("/statistics", response_model=EmotionStatisticsResponse)
def statistics(classifier: Classifier) -> EmotionStatisticsResponse:
    """Return aggregate statistics over the emotion history."""
    return EmotionStatisticsResponse.from_statistics(classifier.statistics())


@router.put("/presets/{state}", response_model=PresetResponse)
def set_preset(
    state: EmotionalState,
    body: AdaptationParametersSchema,
    classifier: Classifier,
) -> PresetResponse:
    """Replace the preset applied when ``state`` wins the vote."""
    stored = classifier.set_preset(state, body.to_parameters())
    return PresetResponse(state=state, parameters=AdaptationParametersSchema.from_parameters(stored))


def _engine_config(classifier: EmotionClassifier) -> EngineConfigResponse:
    engine = classifier.engine
    lo, hi = engine.frequency_range
    return EngineConfigResponse(
        fft_size=engine.fft_size,
        sample_rate=engine.sample_rate,
        hop_size=engine.hop_size,
        min_frequency=lo,
        max_frequency=hi,
    )


@router.put("/engine", response_model=EngineConfigResponse)
def reconfigure_engine(body: EngineConfigRequest, classifier: Classifier) -> EngineConfigResponse:
    """Change the analysis window size and/or sample rate.

    Invalid values (non power-of-two size, non-positive rate) return 422
    and leave the engine unchanged.
    """
    try:
        classifier.engine.reconfigure(fft_size=body.fft_size, sample_rate=body.sample_rate)
    except ValueError as exc:
        logger.warning("emotion/engine: rejected reconfiguration: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _engine_config(classifier)
