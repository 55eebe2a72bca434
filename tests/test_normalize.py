from backend.app.normalize import (
    DEFAULT_FEEDBACK,
    UNTITLED_LESSON,
    normalize_challenge,
    normalize_evaluation,
    normalize_lessons,
)
from backend.app.schemas import ChallengeContext, LessonContext


def test_missing_relevance_gets_default_and_others_are_preserved() -> None:
    data = [
        {"title": "Pivot Tables", "description": "Summarise data fast.", "relevance": "Analysts live in them."},
        {"title": "Lookup Functions", "description": "XLOOKUP and friends."},
        {"title": "Dashboards", "description": "Tell a story with charts.", "relevance": "Managers want summaries."},
    ]
    lessons = normalize_lessons(data, LessonContext(skills=["Excel"], industry="Finance"))

    assert len(lessons) == 3
    assert lessons[0].model_dump() == {**data[0], "challenges": []}
    assert lessons[2].model_dump() == {**data[2], "challenges": []}
    assert lessons[1].title == "Lookup Functions"
    assert lessons[1].description == "XLOOKUP and friends."
    assert lessons[1].relevance.strip()
    assert "Finance" in lessons[1].relevance


def test_wrong_types_and_blanks_are_replaced() -> None:
    lessons = normalize_lessons([{"title": 42, "description": "  ", "relevance": None}], LessonContext(skills=["SQL"]))
    lesson = lessons[0]
    assert lesson.title == UNTITLED_LESSON
    assert "SQL" in lesson.description
    assert lesson.relevance


def test_non_object_entries_are_dropped() -> None:
    lessons = normalize_lessons(["text", None, {"title": "Kept"}], LessonContext())
    assert [lesson.title for lesson in lessons] == ["Kept"]


def test_nested_challenges_are_normalized() -> None:
    data = [{"title": "Budgeting", "challenges": [{"scenario": "A startup"}, "bad"]}]
    lesson = normalize_lessons(data, LessonContext(industry="Retail"))[0]
    assert len(lesson.challenges) == 1
    assert lesson.challenges[0].scenario == "A startup"
    assert "Budgeting" in lesson.challenges[0].challenge
    assert lesson.challenges[0].hint


def test_challenge_defaults_mention_lesson_and_industry() -> None:
    ctx = ChallengeContext(lesson_title="Negotiation Basics", industry="Healthcare")
    challenge = normalize_challenge({"challenge": "Close the deal."}, ctx)
    assert challenge.challenge == "Close the deal."
    assert "Healthcare" in challenge.scenario
    assert "Negotiation Basics" in challenge.scenario
    assert challenge.hint


def test_challenge_from_non_object_is_all_defaults() -> None:
    challenge = normalize_challenge(["nope"], ChallengeContext(lesson_title="Git"))
    assert all(value.strip() for value in challenge.model_dump().values())


def test_evaluation_score_is_clamped_and_coerced() -> None:
    assert normalize_evaluation({"score": 150}).score == 100
    assert normalize_evaluation({"score": -5}).score == 0
    assert normalize_evaluation({"score": "82"}).score == 82
    assert normalize_evaluation({"score": 74.6}).score == 75
    assert normalize_evaluation({"score": True}).score == 0
    assert normalize_evaluation({"score": "high"}).score == 0


def test_evaluation_score_out_of_float_range_is_clamped() -> None:
    assert normalize_evaluation({"score": 10**400}).score == 100
    assert normalize_evaluation({"score": -(10**400)}).score == 0
    assert normalize_evaluation({"score": float("inf")}).score == 100
    assert normalize_evaluation({"score": "-inf"}).score == 0
    assert normalize_evaluation({"score": "1e999"}).score == 100
    assert normalize_evaluation({"score": float("nan")}).score == 0


def test_evaluation_booleans_default_from_score() -> None:
    passing = normalize_evaluation({"score": 70})
    assert passing.is_correct is True
    assert passing.can_proceed is True
    failing = normalize_evaluation({"score": 69})
    assert failing.is_correct is False
    assert failing.can_proceed is False


def test_evaluation_keeps_model_booleans() -> None:
    result = normalize_evaluation({"isCorrect": False, "score": 90, "canProceed": True, "feedback": "Nice"})
    assert result.is_correct is False
    assert result.can_proceed is True
    assert result.feedback == "Nice"
    assert result.suggestions


def test_evaluation_from_garbage_is_fully_populated() -> None:
    result = normalize_evaluation("garbage")
    assert result.score == 0
    assert result.feedback == DEFAULT_FEEDBACK
    assert result.suggestions
