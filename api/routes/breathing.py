"""
Breathing routes — rate, depth, state and pattern from a breathing signal.

``POST /breathing/process``     — analyse one buffer
``POST /breathing/overlap``     — analyse overlapping windows (hop = window / 4)
``GET  /breathing/statistics``  — aggregates over the classifier's history
``GET  /breathing/thresholds``  — current decision thresholds
``PUT  /breathing/thresholds``  — replace thresholds (values clamped)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from api.deps import get_breathing_classifier
from api.schemas.breathing import (
    BreathingOverlapResponse,
    BreathingProcessRequest,
    BreathingResultSchema,
    BreathingStatisticsResponse,
    BreathingThresholdsSchema,
)
from core.breathing.classifier import BreathingClassifier
from infrastructure.metrics import LatencyTimer, record_analysis, record_empty_input

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/breathing", tags=["breathing"])

Classifier = Annotated[BreathingClassifier, Depends(get_breathing_classifier)]


@router.post("/process", response_model=BreathingResultSchema)
def process(body: BreathingProcessRequest, classifier: Classifier) -> BreathingResultSchema:
    """Classify one breathing buffer."""
    if not body.samples:
        record_empty_input("breathing")

    with LatencyTimer() as timer:
        result = classifier.process(body.samples)

    if body.samples:
        record_analysis(classifier="breathing", state=result.state.value, latency_seconds=timer.elapsed)

    logger.info(
        "breathing/process: %d samples → %s/%s rate=%.1f bpm",
        len(body.samples),
        result.state.value,
        result.pattern.value,
        result.breathing_rate,
    )
    return BreathingResultSchema.from_result(result, include_cycle=body.include_cycle)


@router.post("/overlap", response_model=BreathingOverlapResponse)
def process_with_overlap(body: BreathingProcessRequest, classifier: Classifier) -> BreathingOverlapResponse:
    """Classify a long buffer window by window; history advances per window."""
    if not body.samples:
        record_empty_input("breathing")

    with LatencyTimer() as timer:
        results = classifier.analyze_with_overlap(body.samples)

    if body.samples:
        per_window = timer.elapsed / max(1, len(results))
        for result in results:
            record_analysis(classifier="breathing", state=result.state.value, latency_seconds=per_window)

    logger.info("breathing/overlap: %d samples → %d windows", len(body.samples), len(results))
    return BreathingOverlapResponse(
        window_count=len(results),
        results=[BreathingResultSchema.from_result(r, include_cycle=body.include_cycle) for r in results],
    )


@router.get("/statistics", response_model=BreathingStatisticsResponse)
def statistics(classifier: Classifier) -> BreathingStatisticsResponse:
    """Return aggregate statistics over the breathing history."""
    return BreathingStatisticsResponse.from_statistics(classifier.statistics())


@router.get("/thresholds", response_model=BreathingThresholdsSchema)
def get_thresholds(classifier: Classifier) -> BreathingThresholdsSchema:
    return BreathingThresholdsSchema.from_thresholds(classifier.thresholds)


@router.put("/thresholds", response_model=BreathingThresholdsSchema)
def set_thresholds(body: BreathingThresholdsSchema, classifier: Classifier) -> BreathingThresholdsSchema:
    """Replace all thresholds; the response echoes the stored (clamped) values."""
    stored = classifier.set_thresholds(body.to_thresholds())
    return BreathingThresholdsSchema.from_thresholds(stored)
