"""
core/emotion — Emotional state classification and adaptive effect processing.

Pure computation: numpy arrays in → frozen dataclasses (and a processed
sample buffer) out. Presets ship as YAML inside core/emotion/presets/.

Public API:
    Types:       EmotionalState, AdaptationParameters, AdaptationResult,
                 EmotionStatistics, PARAMETER_RANGES
    Classifier:  EmotionClassifier
    Rules:       cast_votes, tally_votes, smooth_parameters
    Effects:     apply_effect_chain
"""

from core.emotion.classifier import EmotionClassifier
from core.emotion.effects import apply_effect_chain
from core.emotion.rules import cast_votes, smooth_parameters, tally_votes
from core.emotion.types import (
    NEUTRAL_PARAMETERS,
    PARAMETER_RANGES,
    AdaptationParameters,
    AdaptationResult,
    EmotionalState,
    EmotionStatistics,
)

__all__ = [
    # Types
    "EmotionalState",
    "AdaptationParameters",
    "AdaptationResult",
    "EmotionStatistics",
    "NEUTRAL_PARAMETERS",
    "PARAMETER_RANGES",
    # Classifier
    "EmotionClassifier",
    # Helpers
    "cast_votes",
    "tally_votes",
    "smooth_parameters",
    "apply_effect_chain",
]
