from __future__ import annotations

import asyncio
import re
from typing import Any, Dict, Iterable, List, Optional

import pytest

from exam_gateway.schemas import ExamResult

_QID_RE = re.compile(r"Question ID: (\S+)")


class StubTextClient:
    """Deterministic stand-in for the Gemini client."""

    def __init__(
        self,
        *,
        fail_on: Iterable[str] = (),
        slow_on: Iterable[str] = (),
        delay: float = 0.0,
        reply: Optional[str] = None,
    ) -> None:
        self.fail_on = {str(q) for q in fail_on}
        self.slow_on = {str(q) for q in slow_on}
        self.delay = delay
        self.reply = reply
        self.prompts: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            match = _QID_RE.search(prompt)
            qid = match.group(1) if match else "?"
            await asyncio.sleep(self.delay)
            if qid in self.slow_on:
                await asyncio.sleep(10)
            if qid in self.fail_on:
                raise RuntimeError(f"upstream error for {qid}")
            if self.reply is not None:
                return self.reply
            return f"You mixed up the options in question {qid}."
        finally:
            self.in_flight -= 1


def make_result(
    scores: Dict[str, float],
    incorrect: Iterable[Dict[str, Any]] = (),
    questions: Iterable[Dict[str, Any]] = (),
) -> ExamResult:
    return ExamResult.model_validate(
        {
            "categoryScores": scores,
            "incorrectQuestions": [
                {"selectedAnswer": "B", "correctAnswer": "A", **q} for q in incorrect
            ],
            "questions": list(questions),
        }
    )


@pytest.fixture
def stub_client() -> StubTextClient:
    return StubTextClient()
