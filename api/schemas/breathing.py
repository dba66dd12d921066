"""
Pydantic schemas for the ``/breathing`` endpoints.
"""

from pydantic import BaseModel, Field

from core.breathing.types import (
    BreathingAnalysisResult,
    BreathingPattern,
    BreathingState,
    BreathingStatistics,
    BreathingThresholds,
)


class BreathingProcessRequest(BaseModel):
    """Request body for ``POST /breathing/process`` and ``POST /breathing/overlap``."""

    samples: list[float] = Field(
        ...,
        max_length=1_048_576,
        description="Breathing signal samples. Empty is allowed (default result).",
    )
    include_cycle: bool = Field(
        default=False,
        description="Return the extracted breathing cycle samples.",
    )


class BreathingResultSchema(BaseModel):
    """One breathing analysis."""

    state: BreathingState
    pattern: BreathingPattern
    breathing_rate: float = Field(..., description="Breaths per minute.")
    breathing_depth: float = Field(..., ge=0.0, le=1.0)
    breathing_regularity: float = Field(..., ge=0.0, le=1.0)
    stress_level: float = Field(..., ge=0.0, le=1.0)
    relaxation_level: float = Field(..., ge=0.0, le=1.0)
    cycle_length: int = Field(..., description="Samples in the extracted breathing cycle.")
    peak_intervals: list[float] = Field(default_factory=list, description="Seconds between detected peaks.")
    breathing_cycle: list[float] | None = Field(
        default=None,
        description="Cycle samples, only when include_cycle=true.",
    )

    @classmethod
    def from_result(cls, result: BreathingAnalysisResult, include_cycle: bool = False) -> "BreathingResultSchema":
        return cls(
            state=result.state,
            pattern=result.pattern,
            breathing_rate=result.breathing_rate,
            breathing_depth=result.breathing_depth,
            breathing_regularity=result.breathing_regularity,
            stress_level=result.stress_level,
            relaxation_level=result.relaxation_level,
            cycle_length=int(result.breathing_cycle.size),
            peak_intervals=list(result.peak_intervals),
            breathing_cycle=result.breathing_cycle.tolist() if include_cycle else None,
        )


class BreathingOverlapResponse(BaseModel):
    """Response body for ``POST /breathing/overlap``."""

    window_count: int
    results: list[BreathingResultSchema]


class BreathingStatisticsResponse(BaseModel):
    """Response body for ``GET /breathing/statistics``."""

    average_breathing_rate: float
    average_stress_level: float
    average_relaxation_level: float
    most_common_state: BreathingState
    most_common_pattern: BreathingPattern
    total_analyses: int

    @classmethod
    def from_statistics(cls, stats: BreathingStatistics) -> "BreathingStatisticsResponse":
        return cls(
            average_breathing_rate=stats.average_breathing_rate,
            average_stress_level=stats.average_stress_level,
            average_relaxation_level=stats.average_relaxation_level,
            most_common_state=stats.most_common_state,
            most_common_pattern=stats.most_common_pattern,
            total_analyses=stats.total_analyses,
        )


class BreathingThresholdsSchema(BaseModel):
    """Decision thresholds. Out-of-range values are clamped, not rejected."""

    normal_rate_min: float = Field(default=8.0, description="bpm, clamped to [4, 60].")
    normal_rate_max: float = Field(default=20.0, description="bpm, raised to at least normal_rate_min.")
    deep_threshold: float = Field(default=0.7, description="Depth, raised to at least shallow_threshold.")
    shallow_threshold: float = Field(default=0.3, description="Depth, clamped to [0, 1].")
    rapid_threshold: float = Field(default=25.0, description="bpm, raised to at least normal_rate_max.")
    irregularity_threshold: float = Field(default=0.7, description="Regularity, clamped to [0, 1].")

    @classmethod
    def from_thresholds(cls, thresholds: BreathingThresholds) -> "BreathingThresholdsSchema":
        return cls(
            normal_rate_min=thresholds.normal_rate_min,
            normal_rate_max=thresholds.normal_rate_max,
            deep_threshold=thresholds.deep_threshold,
            shallow_threshold=thresholds.shallow_threshold,
            rapid_threshold=thresholds.rapid_threshold,
            irregularity_threshold=thresholds.irregularity_threshold,
        )

    def to_thresholds(self) -> BreathingThresholds:
        return BreathingThresholds(**self.model_dump())
