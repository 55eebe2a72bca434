from backend.app.fallbacks import (
    UNIVERSAL_LESSONS,
    answer_keywords,
    fallback_challenge,
    fallback_evaluation,
    fallback_lessons,
    heuristic_score,
    keyword_matches,
)
from backend.app.schemas import ChallengeContext, EvaluationContext, LessonContext


def _eval_ctx(answer: str, challenge: str = "Design a rollout plan for the new billing system.", skill: str = "Project Management") -> EvaluationContext:
    return EvaluationContext(user_answer=answer, challenge=challenge, skill=skill)


def test_one_lesson_per_skill_up_to_three() -> None:
    lessons = fallback_lessons(LessonContext(skills=["Excel", "SQL", "Python", "Tableau"]))
    assert [lesson.title for lesson in lessons] == ["Strengthen Excel", "Strengthen SQL", "Strengthen Python"]
    assert all(lesson.description and lesson.relevance for lesson in lessons)


def test_no_skills_gives_universal_set() -> None:
    lessons = fallback_lessons(LessonContext(skills=["  "]))
    assert lessons == list(UNIVERSAL_LESSONS)
    topics = " ".join(lesson.title.lower() for lesson in lessons)
    assert "problem-solving" in topics
    assert "communication" in topics
    assert "time management" in topics


def test_fallback_challenge_uses_title_and_industry() -> None:
    challenge = fallback_challenge(ChallengeContext(lesson_title="Strengthen Excel", industry="Banking"))
    assert "Banking" in challenge.scenario
    assert "Strengthen Excel" in challenge.challenge
    assert challenge.hint


def test_fallback_challenge_without_industry() -> None:
    challenge = fallback_challenge(ChallengeContext(lesson_title="Git"))
    assert "general" in challenge.scenario


def test_keywords_come_from_challenge_skill_and_generic_terms() -> None:
    keywords = answer_keywords("Design a rollout plan.", "Project Management")
    assert "design" in keywords
    assert "rollout" in keywords
    assert "plan" not in keywords
    assert "project" in keywords
    assert "strategy" in keywords
    assert len(keywords) == len(set(keywords))


def test_keyword_matches_are_case_insensitive() -> None:
    assert keyword_matches("My STRATEGY covers the ROLLOUT.", "Design a rollout plan.", None) == 2


def test_score_components() -> None:
    assert heuristic_score(_eval_ctx("short")) == 0
    assert heuristic_score(_eval_ctx("x" * 51)) == 30
    assert heuristic_score(_eval_ctx("x" * 101)) == 50
    assert heuristic_score(_eval_ctx("x" * 201)) == 60
    assert heuristic_score(_eval_ctx("strategy and rollout")) == 40


def test_proceed_threshold_is_lower_than_correct_threshold() -> None:
    result = fallback_evaluation(_eval_ctx("x" * 201))
    assert result.score == 60
    assert result.can_proceed is True
    assert result.is_correct is False


def test_long_answer_with_keywords_passes() -> None:
    answer = ("My approach is a clear strategy for the budget. " * 5)[:210]
    result = fallback_evaluation(_eval_ctx(answer, challenge="Propose a budget for the campaign."))
    assert result.score >= 70
    assert result.is_correct is True
    assert result.can_proceed is True
    assert result.feedback.startswith("Good answer")


def test_fallbacks_are_pure() -> None:
    ctx = LessonContext(skills=["Excel"])
    assert fallback_lessons(ctx) == fallback_lessons(ctx)
    eval_ctx = _eval_ctx("some answer about strategy")
    assert fallback_evaluation(eval_ctx).model_dump_json() == fallback_evaluation(eval_ctx).model_dump_json()
