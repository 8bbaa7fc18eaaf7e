from __future__ import annotations
import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple

from pydantic import ValidationError

from ..catalog import CATALOG, AbilityCatalog, AbilityKey
from ..errors import InvalidInput
from ..schemas import ExamResult, IncorrectQuestion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreSummary:
    # Categories tagged on at least one question of the batch
    appeared: FrozenSet[AbilityKey]
    # Mean score per category, in first-encounter order
    means: Dict[AbilityKey, float]
    # Incorrect questions per category, in batch order
    missed: Dict[AbilityKey, Tuple[IncorrectQuestion, ...]] = field(default_factory=dict)

    def has_missed(self, key: AbilityKey) -> bool:
        return bool(self.missed.get(key))


def _coerce_results(results: object) -> List[ExamResult]:
    if isinstance(results, (str, bytes)) or not isinstance(results, Sequence):
        raise InvalidInput("results must be a list of exam results")
    if not results:
        raise InvalidInput("at least one exam result is required")
    batch: List[ExamResult] = []
    for index, item in enumerate(results):
        if isinstance(item, ExamResult):
            batch.append(item)
        elif isinstance(item, Mapping):
            try:
                batch.append(ExamResult.model_validate(item))
            except ValidationError as e:
                raise InvalidInput(f"result {index} is malformed ({e.error_count()} validation error(s))") from e
        else:
            raise InvalidInput(f"result {index} does not carry category scores")
    return batch


def collect_scores(results: Sequence[ExamResult], catalog: AbilityCatalog = CATALOG) -> ScoreSummary:
    batch = _coerce_results(results)
    reported: Dict[AbilityKey, List[float]] = {}
    appeared = set()
    missed: Dict[AbilityKey, List[IncorrectQuestion]] = {}

    for index, result in enumerate(batch):
        for raw_key, value in result.category_scores.items():
            category = catalog.get(raw_key)
            if category is None:
                logger.debug("Ignoring score for unknown category %r", raw_key)
                continue
            if not math.isfinite(value):
                raise InvalidInput(f"result {index} has a non-finite score for {raw_key!r}")
            reported.setdefault(category.key, []).append(float(value))
        for record in result.questions:
            category = catalog.get(record.category)
            if category is not None:
                appeared.add(category.key)
        for question in result.incorrect_questions:
            category = catalog.get(question.category)
            if category is None:
                logger.debug("Ignoring incorrect question %s with unknown category %r", question.question_id, question.category)
                continue
            appeared.add(category.key)
            missed.setdefault(category.key, []).append(question)

    means = {key: sum(values) / len(values) for key, values in reported.items()}
    return ScoreSummary(
        appeared=frozenset(appeared),
        means=means,
        missed={key: tuple(questions) for key, questions in missed.items()},
    )
