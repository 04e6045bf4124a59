#!/usr/bin/env python3
"""
Enhanced PowerRank configuration.

Loads the YAML defaults, applies caller overrides with boundary validation, and
provides the engine-side sanitizer that defends against out-of-range values
that slip past the boundary.
"""

import math
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
import logging
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name("enhanced_config.yaml")


@dataclass(frozen=True)
class EnhancedConfig:
    goal_diff_cap: int = 3
    decay: float = 0.93
    sos_k: float = 0.25
    sos_clamp_min: float = 0.75
    sos_clamp_max: float = 1.25
    play_strength_bonus: float = 0.05
    play_strength_penalty: float = 0.05
    weight_off: float = 0.35
    weight_def: float = 0.25
    weight_dom: float = 0.40

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Ranges accepted from outside the engine (YAML file, CLI overrides).
# (low, high, low_inclusive)
BOUNDARY_RANGES: Dict[str, Tuple[float, float, bool]] = {
    'goal_diff_cap': (0, 10, True),
    'decay': (0.5, 1.0, False),
    'sos_k': (0.0, 0.5, True),
    'sos_clamp_min': (0.25, 1.5, True),
    'sos_clamp_max': (0.5, 2.0, True),
    'play_strength_bonus': (0.0, 0.3, True),
    'play_strength_penalty': (0.0, 0.3, True),
    'weight_off': (0.0, 1.0, True),
    'weight_def': (0.0, 1.0, True),
    'weight_dom': (0.0, 1.0, True),
}


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        path: Path to YAML file

    Returns:
        Configuration dictionary (empty for an empty file)
    """
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def _in_range(key: str, value: float) -> bool:
    low, high, low_inclusive = BOUNDARY_RANGES[key]
    if not math.isfinite(value):
        return False
    if value > high:
        return False
    return value >= low if low_inclusive else value > low


def apply_overrides(base: EnhancedConfig, overrides: Dict[str, Any]) -> EnhancedConfig:
    """
    Apply parameter overrides to a base configuration.

    Unknown keys, non-numeric values and values outside BOUNDARY_RANGES are
    ignored with a warning; the base value is kept.

    Args:
        base: Base configuration
        overrides: Override parameters

    Returns:
        New configuration with accepted overrides applied
    """
    accepted: Dict[str, Any] = {}
    for key, raw in (overrides or {}).items():
        if key not in BOUNDARY_RANGES:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric value for {key}: {raw!r}")
            continue
        if not _in_range(key, value):
            logger.warning(f"Ignoring out-of-range value for {key}: {value}")
            continue
        accepted[key] = int(round(value)) if key == 'goal_diff_cap' else value

    if accepted:
        logger.info(f"Applied config overrides: {accepted}")
    return replace(base, **accepted)


def load_config(path: Optional[Union[str, Path]] = None,
                overrides: Optional[Dict[str, Any]] = None) -> EnhancedConfig:
    """
    Load the Enhanced PowerRank configuration.

    Args:
        path: YAML file; the packaged defaults when None
        overrides: Extra overrides applied after the file

    Returns:
        Validated EnhancedConfig
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    file_values = load_yaml(config_path)
    logger.info(f"Loaded config from {config_path}")
    config = apply_overrides(EnhancedConfig(), file_values)
    return apply_overrides(config, overrides or {})


def parse_override_args(pairs) -> Dict[str, str]:
    """
    Parse KEY=VALUE strings from the command line.
    """
    overrides = {}
    for pair in pairs or []:
        if '=' not in pair:
            raise ValueError(f"Override must be KEY=VALUE, got {pair!r}")
        key, value = pair.split('=', 1)
        overrides[key.strip()] = value.strip()
    return overrides


def _finite_or(value: Any, default: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def sanitize_config(config: EnhancedConfig) -> EnhancedConfig:
    """
    Engine-side guard: coerce every field into its usable domain.

    Non-finite values fall back to the defaults, negative magnitudes become
    zero and decay is kept inside (0, 1]. Clamp bounds are left in the given
    order; they are symmetrized where they are used.
    """
    defaults = EnhancedConfig()

    cap = _finite_or(config.goal_diff_cap, defaults.goal_diff_cap)
    decay = _finite_or(config.decay, defaults.decay)
    if decay <= 0:
        decay = defaults.decay
    decay = min(decay, 1.0)

    return EnhancedConfig(
        goal_diff_cap=max(0, int(round(cap))),
        decay=decay,
        sos_k=max(0.0, _finite_or(config.sos_k, 0.0)),
        sos_clamp_min=_finite_or(config.sos_clamp_min, defaults.sos_clamp_min),
        sos_clamp_max=_finite_or(config.sos_clamp_max, defaults.sos_clamp_max),
        play_strength_bonus=max(0.0, _finite_or(config.play_strength_bonus, 0.0)),
        play_strength_penalty=max(0.0, _finite_or(config.play_strength_penalty, 0.0)),
        weight_off=_finite_or(config.weight_off, 0.0),
        weight_def=_finite_or(config.weight_def, 0.0),
        weight_dom=_finite_or(config.weight_dom, 0.0),
    )
