"""
core/emotion/_preset_loader.py — Load adaptation presets from bundled YAML.

Uses importlib.resources (stdlib) to read YAML files bundled in the
core/emotion/presets/ package. Parsed tables are cached in a module-level
dict so each YAML file is parsed only once per process; callers always get
a fresh dict they may mutate.

Private module — import only from classifier.py.
"""

from __future__ import annotations

import importlib.resources
import logging
from typing import Any

import yaml  # PyYAML, declared in pyproject.toml

from core.emotion.types import PARAMETER_RANGES, AdaptationParameters, EmotionalState

logger = logging.getLogger(__name__)

DEFAULT_PRESET_FILE = "default.yaml"

_CACHE: dict[str, dict[EmotionalState, AdaptationParameters]] = {}


def parse_presets(data: dict[str, Any]) -> dict[EmotionalState, AdaptationParameters]:
    """Convert a parsed YAML mapping into a state → parameters table.

    Unknown knob names are rejected; out-of-range values are clamped.

    Args:
        data: Mapping of state name (e.g. 'calm') to knob mapping.

    Returns:
        Dict keyed by EmotionalState.

    Raises:
        ValueError: If a state name or knob name is not recognised.
    """
    table: dict[EmotionalState, AdaptationParameters] = {}
    for name, knobs in (data or {}).items():
        try:
            state = EmotionalState(str(name).lower().strip())
        except ValueError as exc:
            valid = [s.value for s in EmotionalState]
            raise ValueError(f"Unknown emotional state {name!r}. Valid: {valid}") from exc

        unknown = set(knobs or {}) - set(PARAMETER_RANGES)
        if unknown:
            raise ValueError(f"Unknown adaptation parameter(s) for {name!r}: {sorted(unknown)}")

        params = AdaptationParameters(**{k: float(v) for k, v in (knobs or {}).items()})
        clamped = params.clamped()
        if clamped != params:
            logger.warning("Preset %r clamped to valid ranges: %s", name, clamped.as_dict())
        table[state] = clamped
    return table


def load_presets(filename: str = DEFAULT_PRESET_FILE) -> dict[EmotionalState, AdaptationParameters]:
    """Return the preset table stored in core/emotion/presets/<filename>.

    Args:
        filename: YAML file name inside the presets package.

    Returns:
        New dict mapping EmotionalState to AdaptationParameters.
    """
    if filename not in _CACHE:
        pkg = importlib.resources.files("core.emotion.presets")
        text = (pkg / filename).read_text(encoding="utf-8")
        _CACHE[filename] = parse_presets(yaml.safe_load(text))
    return dict(_CACHE[filename])
