"""Deterministic stand-ins used whenever remote generation fails.

Every function here is pure: same context in, same value out, no I/O.
"""

from __future__ import annotations
import re
from typing import List

from .schemas import (
	Challenge,
	ChallengeContext,
	EvaluationContext,
	EvaluationResult,
	LessonContext,
	LessonRecord,
)

MAX_SKILL_LESSONS = 3

UNIVERSAL_LESSONS: tuple[LessonRecord, ...] = (
	LessonRecord(
		title="Problem-Solving Strategies",
		description="Practice structured approaches to analyze and solve complex challenges.",
		relevance="This skill is universally valuable across all industries.",
	),
	LessonRecord(
		title="Professional Communication",
		description="Learn how to express ideas clearly and collaborate effectively.",
		relevance="Strong communication supports success in any career path.",
	),
	LessonRecord(
		title="Time Management and Prioritization",
		description="Plan your work, set priorities and protect focus time to deliver reliably.",
		relevance="Managing time well keeps projects on track in every role.",
	),
)

GENERIC_KEYWORDS = (
	"problem",
	"solution",
	"approach",
	"strategy",
	"method",
	"technique",
	"analyze",
	"evaluate",
	"implement",
	"design",
	"create",
	"develop",
)

# Keyword matches needed before the answer earns relevance credit
MIN_KEYWORD_MATCHES = 2
FALLBACK_CORRECT_SCORE = 70
# Lower than the AI-graded threshold; kept as observed behaviour
FALLBACK_PROCEED_SCORE = 60

_WORD = re.compile(r"[a-z0-9][a-z0-9'+#-]*")


def fallback_lessons(ctx: LessonContext) -> List[LessonRecord]:
	skills = [s for s in ctx.skills if s and s.strip()][:MAX_SKILL_LESSONS]
	if not skills:
		return list(UNIVERSAL_LESSONS)
	return [
		LessonRecord(
			title=f"Strengthen {skill}",
			description=f"Deepen your knowledge and practical application of {skill}.",
			relevance=f"{skill} is one of your core skills, and improving it increases your career opportunities.",
		)
		for skill in skills
	]


def fallback_challenge(ctx: ChallengeContext) -> Challenge:
	title = ctx.lesson_title.strip() or "this lesson"
	industry = (ctx.industry or "").strip() or "general"
	return Challenge(
		scenario=(
			f"Imagine you are in a realistic {industry} setting applying {title}. "
			"Think about the people, environment, and stakes involved."
		),
		challenge=f"Identify a specific problem in this scenario where you can apply {title} to achieve a successful outcome.",
		hint="Consider the key steps, industry best practices, and potential obstacles that someone with this skill would face.",
	)


def answer_keywords(challenge: str, skill: str | None) -> List[str]:
	words = [w for w in _WORD.findall(challenge.lower()) if len(w) > 4]
	words += [w for w in _WORD.findall((skill or "").lower()) if len(w) > 3]
	words += GENERIC_KEYWORDS
	return list(dict.fromkeys(words))


def keyword_matches(answer: str, challenge: str, skill: str | None) -> int:
	text = answer.lower()
	return sum(1 for keyword in answer_keywords(challenge, skill) if keyword in text)


def heuristic_score(ctx: EvaluationContext) -> int:
	length = len(ctx.user_answer.strip())
	score = 0
	if length > 50:
		score += 30
	if length > 100:
		score += 20
	if keyword_matches(ctx.user_answer, ctx.challenge, ctx.skill) >= MIN_KEYWORD_MATCHES:
		score += 40
	if length > 200:
		score += 10
	return score


def fallback_evaluation(ctx: EvaluationContext) -> EvaluationResult:
	score = heuristic_score(ctx)
	is_correct = score >= FALLBACK_CORRECT_SCORE
	return EvaluationResult(
		is_correct=is_correct,
		score=score,
		feedback=(
			"Good answer! You've demonstrated understanding of the key concepts."
			if is_correct
			else "Your answer needs more detail. Try to address the challenge more comprehensively."
		),
		suggestions="Consider providing more specific examples and explaining your reasoning step by step.",
		can_proceed=score >= FALLBACK_PROCEED_SCORE,
	)
