"""
Exam generation router.

Builds a reading question-set prompt for the requested exam type and
difficulty, forwards it to Gemini, then repairs and validates the reply into a
structured question set. Each question is tagged with an ability category from
the shared catalog so that results can later be fed into weakness analysis.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from ..catalog import CATALOG, AbilityCatalog
from ..dependencies import get_text_client
from ..errors import ExternalCallFailure, InvalidInput
from ..llm_text import extract_json
from ..schemas import GeneratedExam, GeneratedQuestion, GenerateExamRequest
from ..settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["exam"])


EXAM_TYPES: List[str] = ["TOEIC", "TOEFL", "IELTS", "GEPT"]
DIFFICULTIES: List[str] = ["easy", "medium", "hard"]
MAX_QUESTIONS = 20
ANSWER_LETTERS = "ABCD"


def _validate_exam_type(exam_type: str) -> str:
    value = (exam_type or "TOEIC").strip().upper()
    if value not in EXAM_TYPES:
        raise InvalidInput(f"examType must be one of {EXAM_TYPES}")
    return value


def _validate_difficulty(difficulty: str) -> str:
    value = (difficulty or "medium").strip().lower()
    if value not in DIFFICULTIES:
        raise InvalidInput(f"difficulty must be one of {DIFFICULTIES}")
    return value


def _validate_count(count: int | None) -> int:
    if count is None:
        return settings.exam_question_count
    if count < 1 or count > MAX_QUESTIONS:
        raise InvalidInput(f"questionCount must be between 1 and {MAX_QUESTIONS}")
    return count


def build_exam_prompt(exam_type: str, difficulty: str, count: int, catalog: AbilityCatalog = CATALOG) -> str:
    categories = "\n".join(f"- {c.key.value}: {c.title} ({c.skills})" for c in catalog)
    return (
        f"You are an expert {exam_type} reading item writer.\n"
        f"Write {count} multiple-choice reading comprehension questions at {difficulty} difficulty.\n"
        "Use short, realistic passages typical of the exam (e-mails, notices, articles). Several questions may share a passage; repeat the passage text in each question.\n"
        "Each question must be answerable from its passage alone, with EXACTLY 4 options and only ONE correct option.\n"
        "Tag every question with the ONE ability it mainly tests, using a key from this list:\n"
        f"{categories}\n\n"
        "Return ONLY compact JSON of the form {\"questions\": [...]} where each item has keys: "
        "passage (string), questionText (string), options (array of 4 strings), correctAnswer (\"A\"-\"D\"), "
        "explanation (string, 1-2 sentences), category (one of the keys above).\n"
        "No markdown, no extra commentary."
    )


def _normalise_answer(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < len(ANSWER_LETTERS):
        return ANSWER_LETTERS[value]
    if isinstance(value, str):
        return value.strip().upper()[:1]
    return value


def parse_question_set(
    raw: str,
    catalog: AbilityCatalog = CATALOG,
    *,
    limit: Optional[int] = None,
) -> List[GeneratedQuestion]:
    data = extract_json(raw)
    items = data.get("questions") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise ExternalCallFailure("LLM reply does not contain a question list")

    questions: List[GeneratedQuestion] = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            logger.info("Dropping generated item %d: not an object", position)
            continue
        candidate: Dict[str, Any] = dict(item)
        candidate.pop("question_id", None)
        candidate["questionId"] = len(questions) + 1
        answer = candidate.pop("correct_answer", candidate.get("correctAnswer"))
        candidate["correctAnswer"] = _normalise_answer(answer)
        category = catalog.get(candidate.get("category"))
        if category is None:
            logger.info("Dropping generated item %d: unknown category %r", position, candidate.get("category"))
            continue
        candidate["category"] = category.key
        try:
            questions.append(GeneratedQuestion.model_validate(candidate))
        except ValidationError as e:
            logger.info("Dropping generated item %d: %d validation error(s)", position, e.error_count())
    if not questions:
        raise ExternalCallFailure("LLM reply contained no valid questions")
    if limit is not None and len(questions) > limit:
        logger.info("Truncating %d generated questions to the requested %d", len(questions), limit)
        questions = questions[:limit]
    return questions


@router.post("/generate-exam", response_model=GeneratedExam)
async def generate_exam(req: GenerateExamRequest, client=Depends(get_text_client)):
    exam_type = _validate_exam_type(req.exam_type)
    difficulty = _validate_difficulty(req.difficulty)
    count = _validate_count(req.question_count)
    prompt = build_exam_prompt(exam_type, difficulty, count)
    try:
        raw = await client.generate(prompt)
    except Exception as e:
        logger.warning("Exam generation call failed: %s", e)
        raise ExternalCallFailure("exam generation failed") from e
    questions = parse_question_set(raw, limit=count)
    logger.info("Generated %s/%s exam with %d of %d requested questions", exam_type, difficulty, len(questions), count)
    return GeneratedExam(exam_type=exam_type, difficulty=difficulty, questions=questions)
