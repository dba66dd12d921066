"""
Pydantic schemas for the ``/emotion`` endpoints.

Knob values are not range-checked here: the classifier clamps presets
silently, and the response echoes the stored (clamped) values.
"""

from pydantic import BaseModel, Field

from core.emotion.types import AdaptationParameters, EmotionalState, EmotionStatistics


class EmotionProcessRequest(BaseModel):
    """Request body for ``POST /emotion/process``."""

    samples: list[float] = Field(
        ...,
        max_length=1_048_576,
        description="Mono samples, nominally in [-1, 1]. Empty is allowed (default result).",
    )
    include_audio: bool = Field(
        default=False,
        description="Return the processed samples in the response.",
    )


class AdaptationParametersSchema(BaseModel):
    """Six effect-chain knobs. Defaults are the neutral identity."""

    volume_multiplier: float = Field(default=1.0, description="Gain, clamped to [0, 2].")
    tempo_multiplier: float = Field(default=1.0, description="Resampling stride, clamped to [0.5, 2].")
    bass_boost: float = Field(default=0.0, description="Clamped to [0, 1].")
    treble_boost: float = Field(default=0.0, description="Clamped to [0, 1].")
    reverb_amount: float = Field(default=0.0, description="Clamped to [0, 1].")
    echo_delay: float = Field(default=0.0, description="Echo delay in seconds, clamped to [0, 1].")

    @classmethod
    def from_parameters(cls, params: AdaptationParameters) -> "AdaptationParametersSchema":
        return cls(**params.as_dict())

    def to_parameters(self) -> AdaptationParameters:
        return AdaptationParameters(**self.model_dump())


class EmotionProcessResponse(BaseModel):
    """Response body for ``POST /emotion/process``."""

    state: EmotionalState = Field(..., description="Winning emotional state.")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Vote margin (top - runner-up) / 3.")
    votes: list[EmotionalState] = Field(
        default_factory=list,
        description="Evaluator outputs: breathing-band, rhythmic, spectral. Empty for default results.",
    )
    parameters: AdaptationParametersSchema = Field(..., description="Smoothed parameters that were applied.")
    input_length: int = Field(..., description="Number of input samples.")
    processed_length: int = Field(..., description="Number of output samples (tempo stage may change it).")
    processed_audio: list[float] | None = Field(
        default=None,
        description="Processed samples, only when include_audio=true.",
    )


class EmotionStatisticsResponse(BaseModel):
    """Response body for ``GET /emotion/statistics``."""

    total_processed_samples: int
    most_common_state: EmotionalState
    average_confidence: float
    average_volume_adjustment: float
    average_tempo_adjustment: float
    history_length: int

    @classmethod
    def from_statistics(cls, stats: EmotionStatistics) -> "EmotionStatisticsResponse":
        return cls(
            total_processed_samples=stats.total_processed_samples,
            most_common_state=stats.most_common_state,
            average_confidence=stats.average_confidence,
            average_volume_adjustment=stats.average_volume_adjustment,
            average_tempo_adjustment=stats.average_tempo_adjustment,
            history_length=stats.history_length,
        )


class PresetResponse(BaseModel):
    """Response body for ``PUT /emotion/presets/{state}``."""

    state: EmotionalState
    parameters: AdaptationParametersSchema = Field(..., description="Stored (clamped) preset.")


class EngineConfigRequest(BaseModel):
    """Request body for ``PUT /emotion/engine``. Omitted fields keep their value."""

    fft_size: int | None = Field(default=None, description="Power of two >= 2.")
    sample_rate: int | None = Field(default=None, description="Positive sample rate in Hz.")


class EngineConfigResponse(BaseModel):
    """Current spectral engine configuration."""

    fft_size: int
    sample_rate: int
    hop_size: int
    min_frequency: float
    max_frequency: float
