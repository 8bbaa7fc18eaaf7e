from __future__ import annotations
import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from ..catalog import AbilityCatalog, AbilityCategory, AbilityKey
from ..errors import ExternalCallFailure
from ..llm_text import strip_code_fences
from ..schemas import IncorrectQuestion, WeaknessDetail
from .radar import round_half_up

logger = logging.getLogger(__name__)

FALLBACK_ANALYSIS = "analysis failed for this question"

_ICON_RE = re.compile(r"^([^\w\s]+)")


def extract_icon(tag: str) -> str:
    match = _ICON_RE.match(tag or "")
    return match.group(1) if match else ""


def build_diagnostic_prompt(question: IncorrectQuestion, category: AbilityCategory) -> str:
    lines = [
        "You are a patient English reading tutor reviewing one question a student got wrong.",
        f"Question ID: {question.question_id}",
    ]
    if question.question_text:
        lines.append(f"Question: {question.question_text}")
    if question.passage:
        lines.append(f"Passage:\n---\n{question.passage}\n---")
    lines.extend([
        f"Student's answer: {question.selected_answer}",
        f"Correct answer: {question.correct_answer}",
        f"Ability tested: {category.tag}",
        "",
        "In 2-3 sentences, speak directly to the student (use \"you\"): explain the likely reason for the mistake "
        "and one concrete tip for this ability. Be encouraging.",
        "Output ONLY the explanation as plain text. No markdown, no headings.",
    ])
    return "\n".join(lines)


def _parse_diagnostic(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ExternalCallFailure(f"diagnostic reply is not text ({type(raw).__name__})")
    text = strip_code_fences(raw)
    if text.startswith("{"):
        # Some models wrap the answer in JSON despite the instructions
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if isinstance(data, dict):
            text = str(data.get("analysis") or data.get("explanation") or "").strip()
    text = " ".join(text.split())
    if not text:
        raise ExternalCallFailure("empty diagnostic reply")
    return text


async def _diagnose(client: Any, question: IncorrectQuestion, category: AbilityCategory, timeout: float) -> str:
    prompt = build_diagnostic_prompt(question, category)
    try:
        raw = await asyncio.wait_for(client.generate(prompt), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ExternalCallFailure(f"diagnostic timed out after {timeout}s") from e
    except ExternalCallFailure:
        raise
    except Exception as e:
        raise ExternalCallFailure(str(e) or type(e).__name__) from e
    return _parse_diagnostic(raw)


async def enrich_weaknesses(
    client: Any,
    catalog: AbilityCatalog,
    ranked: Sequence[Tuple[AbilityKey, float]],
    missed: Mapping[AbilityKey, Sequence[IncorrectQuestion]],
    *,
    timeout: float = 45.0,
) -> List[WeaknessDetail]:
    """Attach per-question diagnostics to each ranked weakness.

    Every diagnostic call across all weaknesses runs concurrently. A failed
    call only replaces its own line with ``FALLBACK_ANALYSIS``.
    """
    jobs: List[Tuple[int, IncorrectQuestion]] = []
    calls = []
    categories: List[AbilityCategory] = []
    for index, (key, _mean) in enumerate(ranked):
        category = catalog.get(key)
        if category is None:
            raise KeyError(f"ranked category {key!r} is not in the catalog")
        categories.append(category)
        for question in missed.get(key, ()):
            jobs.append((index, question))
            calls.append(_diagnose(client, question, category, timeout))

    outcomes = await asyncio.gather(*calls, return_exceptions=True) if calls else []

    lines: Dict[int, List[str]] = {index: [] for index in range(len(ranked))}
    failed = 0
    for (index, question), outcome in zip(jobs, outcomes):
        if isinstance(outcome, BaseException):
            failed += 1
            logger.warning("Diagnostic for question %s failed: %s", question.question_id, outcome)
            text = FALLBACK_ANALYSIS
        else:
            text = outcome
        lines[index].append(f"Question {question.question_id}: {text}")
    if jobs:
        logger.info("Diagnostics finished: %d call(s), %d failed", len(jobs), failed)

    details: List[WeaknessDetail] = []
    for index, ((key, mean), category) in enumerate(zip(ranked, categories)):
        details.append(WeaknessDetail(
            category=key.value,
            tag=category.tag,
            icon=extract_icon(category.tag),
            title=category.title,
            description=category.description,
            suggestion=category.suggestion,
            score=round_half_up(mean),
            user_specific_analysis="\n".join(lines[index]),
        ))
    return details
