from __future__ import annotations
import math
from typing import Callable, List, Mapping

from ..catalog import AbilityCatalog, AbilityKey
from ..schemas import AbilityRadarEntry

NEUTRAL_SCORE = 3
MIN_SCORE = 0
MAX_SCORE = 5


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores round 2.5 up to 3
    return int(math.floor(value + 0.5))


def build_radar(
    catalog: AbilityCatalog,
    means: Mapping[AbilityKey, float],
    has_missed: Callable[[AbilityKey], bool],
) -> List[AbilityRadarEntry]:
    """Score every catalog category on a 0-5 scale, in catalog order.

    A category only drops below neutral when it has a mean score *and* at
    least one missed question behind it. Categories with a mean but no missed
    question are reported as neutral whatever the raw mean was.
    """
    radar: List[AbilityRadarEntry] = []
    for category in catalog:
        mean = means.get(category.key)
        if mean is None or not has_missed(category.key):
            score = NEUTRAL_SCORE
        else:
            score = max(MIN_SCORE, min(MAX_SCORE, round_half_up(mean)))
        radar.append(AbilityRadarEntry(category=category.key.value, tag=category.tag, score=score))
    return radar
