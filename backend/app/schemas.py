from __future__ import annotations
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .errors import EmptyAnswerError


class CamelModel(BaseModel):
	# Accept both snake_case and the camelCase keys used by the browser client
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Challenge(CamelModel):
	model_config = ConfigDict(frozen=True)

	scenario: str
	challenge: str
	hint: str


class LessonRecord(CamelModel):
	model_config = ConfigDict(frozen=True)

	title: str
	description: str
	relevance: str
	challenges: List[Challenge] = Field(default_factory=list)


class EvaluationResult(CamelModel):
	is_correct: bool
	score: int = Field(ge=0, le=100)
	feedback: str
	suggestions: str
	can_proceed: bool


class LessonMastery(CamelModel):
	level: int = Field(default=1, ge=1)


class SavedLesson(CamelModel):
	lesson: LessonRecord
	skill: Optional[str] = None


class LessonContext(CamelModel):
	skills: List[str] = Field(default_factory=list)
	career_answers: Dict[str, List[str]] = Field(default_factory=dict)
	resume_uploaded: bool = False
	resume_text: Optional[str] = None
	industry: Optional[str] = None


class ChallengeContext(CamelModel):
	lesson_title: str
	skill: Optional[str] = None
	industry: Optional[str] = None


class EvaluationContext(CamelModel):
	user_answer: str
	challenge: str
	scenario: str = ""
	lesson_title: str = ""
	skill: Optional[str] = None
	industry: Optional[str] = None

	@field_validator("user_answer")
	@classmethod
	def _answer_not_blank(cls, value: str) -> str:
		if not value.strip():
			raise EmptyAnswerError()
		return value


class UserProfile(CamelModel):
	"""Everything the client used to keep in local storage for one account.

	Mutators return updated copies; callers persist them through the profile
	store. ``completed_lessons`` maps skill -> lesson title -> mastery,
	``skill_lessons`` caches generated lesson lists per skill and
	``saved_lessons`` caches full lesson records (with challenges) per title.
	"""

	username: str
	display_name: str = ""
	email: str = ""
	industry: str = ""
	skills: List[str] = Field(default_factory=list)
	career_answers: Dict[str, List[str]] = Field(default_factory=dict)
	completed_lessons: Dict[str, Dict[str, LessonMastery]] = Field(default_factory=dict)
	saved_lessons: Dict[str, SavedLesson] = Field(default_factory=dict)
	skill_lessons: Dict[str, List[LessonRecord]] = Field(default_factory=dict)
	resume_uploaded: bool = False
	resume_text: Optional[str] = None

	def lesson_context(self, skill: Optional[str] = None) -> LessonContext:
		return LessonContext(
			skills=[skill] if skill else list(self.skills),
			career_answers={k: list(v) for k, v in self.career_answers.items()},
			resume_uploaded=self.resume_uploaded,
			resume_text=self.resume_text,
			industry=self.industry or None,
		)

	def mastery_level(self, skill: str, lesson_title: str) -> int:
		entry = self.completed_lessons.get(skill, {}).get(lesson_title)
		return entry.level if entry else 0

	def with_quiz_answers(self, answers: Dict[str, List[str]]) -> "UserProfile":
		cleaned = {k: [str(v).strip() for v in values if str(v).strip()] for k, values in answers.items()}
		return self.model_copy(update={"career_answers": cleaned})

	def with_resume(self, text: Optional[str]) -> "UserProfile":
		return self.model_copy(update={"resume_uploaded": True, "resume_text": text or None})

	def without_resume(self) -> "UserProfile":
		return self.model_copy(update={"resume_uploaded": False, "resume_text": None})

	def with_completed_lesson(self, skill: str, lesson_title: str) -> "UserProfile":
		lessons = {k: dict(v) for k, v in self.completed_lessons.items()}
		per_skill = lessons.setdefault(skill, {})
		per_skill[lesson_title] = LessonMastery(level=self.mastery_level(skill, lesson_title) + 1)
		skills = list(self.skills)
		if skill not in skills:
			skills.append(skill)
		return self.model_copy(update={"completed_lessons": lessons, "skills": skills})

	def with_saved_lesson(self, lesson: LessonRecord, skill: Optional[str] = None) -> "UserProfile":
		saved = dict(self.saved_lessons)
		saved[lesson.title] = SavedLesson(lesson=lesson, skill=skill)
		return self.model_copy(update={"saved_lessons": saved})

	def with_skill_lessons(self, skill: str, lessons: List[LessonRecord]) -> "UserProfile":
		cached = dict(self.skill_lessons)
		cached[skill] = list(lessons)
		return self.model_copy(update={"skill_lessons": cached})
