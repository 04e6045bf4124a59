#!/usr/bin/env python3
"""
Weight balancing for the Enhanced PowerRank.

The three component weights (offense, defense, dominance) always form one full
allocation. Moving one knob redistributes the remainder over the other two in
proportion to their previous values.
"""

import math
from typing import NamedTuple, Union
import logging

logger = logging.getLogger(__name__)

WEIGHT_KEYS = ('off', 'def', 'dom')


class Weights(NamedTuple):
    off: float
    def_: float
    dom: float

    @property
    def total(self) -> float:
        return self.off + self.def_ + self.dom

    def get(self, key: str) -> float:
        return self[WEIGHT_KEYS.index(key)]


DEFAULT_ENHANCED_WEIGHTS = Weights(0.35, 0.25, 0.40)

# Canonical base PowerScore weights
BASE_WEIGHTS = Weights(0.4, 0.4, 0.2)


def _non_negative(value: Union[int, float]) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def renormalize_weights(off: float, def_: float, dom: float,
                        fallback: Weights = DEFAULT_ENHANCED_WEIGHTS) -> Weights:
    """
    Divide each weight by the sum of all three.

    Negative or non-finite weights count as zero. When the sum is not positive
    the fallback weights are returned.

    Args:
        off: Offense weight
        def_: Defense weight
        dom: Dominance weight
        fallback: Weights used when the sum is <= 0

    Returns:
        Weights summing to 1.0
    """
    off, def_, dom = _non_negative(off), _non_negative(def_), _non_negative(dom)
    total = off + def_ + dom
    if not math.isfinite(total) or total <= 0:
        logger.debug(f"Weight sum {total} not usable, falling back to {tuple(fallback)}")
        return fallback
    return Weights(off / total, def_ / total, dom / total)


def rebalance_weights(changed_key: str, new_value: float, current: Weights) -> Weights:
    """
    Set one weight and redistribute the remainder over the other two.

    new_value is clamped to [0, 1]. The other two weights are scaled by
    (1 - new_value) / (their prior sum); if that prior sum is zero the
    remainder is split evenly. A non-finite new_value keeps the prior value
    of the changed key.

    Args:
        changed_key: One of 'off', 'def', 'dom'
        new_value: Requested value for the changed key
        current: Weights before the change

    Returns:
        Non-negative Weights summing to 1.0

    Raises:
        ValueError: If changed_key is not one of WEIGHT_KEYS. This is a caller
            error; data values never raise.
    """
    if changed_key not in WEIGHT_KEYS:
        raise ValueError(f"Unknown weight key: {changed_key!r}")

    prior = [_non_negative(w) for w in current]
    idx = WEIGHT_KEYS.index(changed_key)

    try:
        value = float(new_value)
    except (TypeError, ValueError):
        value = float('nan')
    if not math.isfinite(value):
        value = prior[idx]
    value = max(0.0, min(1.0, value))

    others = [i for i in range(3) if i != idx]
    remaining = 1.0 - value
    other_sum = prior[others[0]] + prior[others[1]]

    result = [0.0, 0.0, 0.0]
    result[idx] = value
    if other_sum <= 0:
        result[others[0]] = remaining / 2
        result[others[1]] = remaining / 2
    else:
        scale = remaining / other_sum
        result[others[0]] = prior[others[0]] * scale
        result[others[1]] = prior[others[1]] * scale

    return renormalize_weights(*result)
