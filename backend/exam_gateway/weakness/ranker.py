from __future__ import annotations
from typing import AbstractSet, List, Mapping, Tuple

from ..catalog import AbilityKey

MAX_WEAKNESSES = 4


def rank_weaknesses(
    means: Mapping[AbilityKey, float],
    appeared: AbstractSet[AbilityKey],
    *,
    threshold: float = 3.0,
    limit: int = MAX_WEAKNESSES,
) -> List[Tuple[AbilityKey, float]]:
    candidates = [(key, mean) for key, mean in means.items() if mean < threshold and key in appeared]
    # list.sort is stable: equal means keep first-encounter order
    candidates.sort(key=lambda pair: pair[1])
    return candidates[: max(0, min(limit, MAX_WEAKNESSES))]
