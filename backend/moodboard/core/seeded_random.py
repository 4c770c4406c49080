"""Seeded pseudo-random primitives used by the scene builder.

The generator is a small linear-congruential recurrence. It is repeatable
across platforms and processes, and it is not suitable for anything
security related.
"""
import math
import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from moodboard.core.errors import ConfigurationError

T = TypeVar("T")

_MULTIPLIER = 9301
_INCREMENT = 49297
_MODULUS = 233280

# maybe() draws from seed + 1000 so it never shares a stream with a pick()
# made from the same base seed.
MAYBE_SEED_OFFSET = 1000


class SeededRandom:
    """Linear-congruential generator producing floats in [0, 1)."""

    def __init__(self, seed: int) -> None:
        self._state = int(seed)

    def next(self) -> float:
        """Advance the state and return the next value in [0, 1)."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self._state / _MODULUS


@dataclass(frozen=True)
class WeightedChoice(Generic[T]):
    """A candidate value with a relative selection weight."""

    value: T
    weight: float = 1.0


Choice = Union[WeightedChoice, Mapping, Any]


def _draw(seed: Optional[int]) -> float:
    if seed is None:
        return random.random()
    return SeededRandom(seed).next()


def _as_weighted(choice: Choice) -> Optional[WeightedChoice]:
    if isinstance(choice, WeightedChoice):
        return choice
    if isinstance(choice, Mapping) and "value" in choice:
        weight = choice.get("weight")
        return WeightedChoice(choice["value"], 1.0 if weight is None else float(weight))
    return None


def _uniform_index(r: float, size: int) -> int:
    return min(math.floor(r * size), size - 1)


def pick(choices: Sequence[Choice], seed: Optional[int] = None) -> Any:
    """Select one value from a plain or weighted list.

    A plain list gives every value equal weight. A weighted list holds
    ``WeightedChoice`` items or ``{"value": ..., "weight": ...}`` mappings;
    a missing weight counts as 1 and values with weight <= 0 are never
    selected unless no value has a positive weight, in which case the
    choice is uniform over all of them.

    Args:
        choices: Non-empty list of values or weighted choices.
        seed: When given, the draw comes from a fresh ``SeededRandom(seed)``;
            otherwise from the process-wide ``random`` module.

    Returns:
        The selected value.

    Raises:
        ConfigurationError: When ``choices`` is empty.
    """
    if not choices:
        raise ConfigurationError("pick() requires at least one choice")

    r = _draw(seed)
    weighted = [_as_weighted(c) for c in choices]

    if any(w is None for w in weighted):
        return choices[_uniform_index(r, len(choices))]

    candidates = [w for w in weighted if w.weight > 0]
    if not candidates:
        # No positive weight: every value is equally likely.
        return weighted[_uniform_index(r, len(weighted))].value

    total = sum(w.weight for w in candidates)
    target = r * total
    cumulative = 0.0
    for w in candidates:
        cumulative += w.weight
        if cumulative >= target:
            return w.value

    # Floating-point drift can leave no match.
    return candidates[-1].value


def maybe(probability: float, seed: Optional[int] = None) -> bool:
    """Return True with the given probability.

    Probabilities at or below 0 are always False and at or above 1 always
    True, without consuming a draw.
    """
    if probability <= 0:
        return False
    if probability >= 1:
        return True
    draw = _draw(None if seed is None else seed + MAYBE_SEED_OFFSET)
    return draw < probability
