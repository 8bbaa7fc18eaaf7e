from __future__ import annotations
import logging
from typing import Any, Optional, Sequence

from ..catalog import CATALOG, AbilityCatalog
from ..schemas import ExamResult, WeaknessReport
from ..settings import settings
from .collector import collect_scores
from .narrative import enrich_weaknesses
from .radar import build_radar
from .ranker import rank_weaknesses

logger = logging.getLogger(__name__)


async def analyze_weaknesses(
    results: Sequence[ExamResult],
    client: Any,
    *,
    catalog: AbilityCatalog = CATALOG,
    threshold: Optional[float] = None,
    limit: Optional[int] = None,
    diagnostic_timeout: Optional[float] = None,
) -> WeaknessReport:
    """Build the ability radar and the ranked weakness list for a batch of results.

    ``client`` is the text-completion service used for per-question
    diagnostics; it is not called when no weakness is found.
    """
    summary = collect_scores(results, catalog)
    radar = build_radar(catalog, summary.means, summary.has_missed)
    ranked = rank_weaknesses(
        summary.means,
        summary.appeared,
        threshold=settings.weakness_threshold if threshold is None else threshold,
        limit=settings.weakness_limit if limit is None else limit,
    )
    if not ranked:
        logger.info("No weaknesses found across %d result(s)", len(results))
        return WeaknessReport(weaknesses=[], ability_radar=radar)

    logger.info("Ranked weaknesses: %s", ", ".join(f"{key.value}={mean:.2f}" for key, mean in ranked))
    weaknesses = await enrich_weaknesses(
        client,
        catalog,
        ranked,
        summary.missed,
        timeout=settings.diagnostic_timeout_seconds if diagnostic_timeout is None else diagnostic_timeout,
    )
    return WeaknessReport(weaknesses=weaknesses, ability_radar=radar)
