from __future__ import annotations
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .catalog import AbilityKey


class _CamelModel(BaseModel):
	# Wire format is camelCase; Python code uses snake_case attributes
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenCamelModel(_CamelModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---- Weakness analysis input ----

class QuestionRecord(_FrozenCamelModel):
	# Only the category tag is needed to know which abilities were exercised
	question_id: Optional[Union[int, str]] = None
	category: str


class IncorrectQuestion(_FrozenCamelModel):
	question_id: Union[int, str]
	category: str
	question_text: Optional[str] = None
	passage: Optional[str] = None
	selected_answer: Union[int, str]
	correct_answer: Union[int, str]


class ExamResult(_FrozenCamelModel):
	questions: List[QuestionRecord] = Field(default_factory=list)
	category_scores: Dict[str, float]
	incorrect_questions: List[IncorrectQuestion] = Field(default_factory=list)


class AnalyzeWeaknessRequest(_CamelModel):
	results: List[ExamResult]


# ---- Weakness analysis output ----

class AbilityRadarEntry(_CamelModel):
	category: str
	tag: str
	score: int = Field(ge=0, le=5)


class WeaknessDetail(_CamelModel):
	category: str
	tag: str
	icon: str
	title: str
	description: str
	suggestion: str
	score: int
	user_specific_analysis: str


class WeaknessReport(_CamelModel):
	weaknesses: List[WeaknessDetail]
	ability_radar: List[AbilityRadarEntry]


# ---- Exam generation ----

class GenerateExamRequest(_CamelModel):
	exam_type: str = "TOEIC"
	difficulty: str = "medium"
	question_count: Optional[int] = None


class GeneratedQuestion(_CamelModel):
	question_id: int
	passage: str
	question_text: str
	options: List[str] = Field(min_length=4, max_length=4)
	correct_answer: str = Field(pattern=r"^[A-D]$")
	explanation: str = ""
	category: AbilityKey


class GeneratedExam(_CamelModel):
	exam_type: str
	difficulty: str
	questions: List[GeneratedQuestion]
