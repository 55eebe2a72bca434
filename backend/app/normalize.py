from __future__ import annotations
import math
from typing import Any, Dict, List, Optional

from .schemas import Challenge, ChallengeContext, EvaluationResult, LessonContext, LessonRecord

UNTITLED_LESSON = "Untitled Lesson"
PASS_SCORE = 70

DEFAULT_FEEDBACK = "Your answer has been received. Please review the challenge and try again."
DEFAULT_SUGGESTIONS = "Consider reviewing the scenario and challenge requirements."


def _text(value: Any, default: str) -> str:
	if isinstance(value, str) and value.strip():
		return value
	return default


def _industry_phrase(industry: Optional[str]) -> str:
	industry = (industry or "").strip()
	return industry if industry else "your chosen career path"


def normalize_challenge(data: Any, ctx: ChallengeContext) -> Challenge:
	fields: Dict[str, Any] = data if isinstance(data, dict) else {}
	title = ctx.lesson_title.strip() or UNTITLED_LESSON
	industry = (ctx.industry or "").strip() or "general"
	return Challenge(
		scenario=_text(
			fields.get("scenario"),
			f"You are working in a {industry} setting where {title} directly affects the outcome.",
		),
		challenge=_text(
			fields.get("challenge"),
			f"Describe how you would apply {title} to resolve a realistic problem in this situation.",
		),
		hint=_text(
			fields.get("hint"),
			"Break the problem into steps and explain the reasoning behind each one.",
		),
	)


def _normalize_lesson(item: Dict[str, Any], ctx: LessonContext) -> LessonRecord:
	title = _text(item.get("title"), UNTITLED_LESSON)
	topic = title if title != UNTITLED_LESSON else (ctx.skills[0] if ctx.skills else "core career skills")
	raw_challenges = item.get("challenges")
	challenge_ctx = ChallengeContext(
		lesson_title=title,
		skill=ctx.skills[0] if ctx.skills else None,
		industry=ctx.industry,
	)
	challenges: List[Challenge] = []
	if isinstance(raw_challenges, list):
		challenges = [normalize_challenge(c, challenge_ctx) for c in raw_challenges if isinstance(c, dict)]
	return LessonRecord(
		title=title,
		description=_text(item.get("description"), f"Build practical experience with {topic}."),
		relevance=_text(
			item.get("relevance"),
			f"{topic} supports your growth in {_industry_phrase(ctx.industry)}.",
		),
		challenges=challenges,
	)


def normalize_lessons(data: Any, ctx: LessonContext) -> List[LessonRecord]:
	items = data if isinstance(data, list) else []
	return [_normalize_lesson(item, ctx) for item in items if isinstance(item, dict)]


def _score(value: Any) -> int:
	if isinstance(value, bool):
		return 0
	if isinstance(value, int):
		# Clamp before any float conversion; huge ints overflow float()
		return max(0, min(100, value))
	if isinstance(value, float):
		number = value
	elif isinstance(value, str):
		try:
			number = float(value.strip())
		except ValueError:
			return 0
	else:
		return 0
	if math.isnan(number):
		return 0
	# Clamp first so infinities never reach round()
	return int(round(max(0.0, min(100.0, number))))


def normalize_evaluation(data: Any) -> EvaluationResult:
	fields: Dict[str, Any] = data if isinstance(data, dict) else {}
	score = _score(fields.get("score"))
	is_correct = fields.get("isCorrect", fields.get("is_correct"))
	can_proceed = fields.get("canProceed", fields.get("can_proceed"))
	return EvaluationResult(
		is_correct=is_correct if isinstance(is_correct, bool) else score >= PASS_SCORE,
		score=score,
		feedback=_text(fields.get("feedback"), DEFAULT_FEEDBACK),
		suggestions=_text(fields.get("suggestions"), DEFAULT_SUGGESTIONS),
		can_proceed=can_proceed if isinstance(can_proceed, bool) else score >= PASS_SCORE,
	)
