from __future__ import annotations
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .. import orchestrator
from ..completion_client import CompletionClient, get_completion_client
from ..db import get_db
from ..errors import EmptyAnswerError
from ..normalize import normalize_lessons
from ..schemas import (
    CamelModel,
    Challenge,
    ChallengeContext,
    EvaluationContext,
    EvaluationResult,
    LessonContext,
    LessonRecord,
    UserProfile,
)
from ..store import ProfileStore
from .auth import User, get_current_user
from .profile import load_profile


router = APIRouter(prefix="/lessons", tags=["lessons"])


class GenerateLessonsRequest(CamelModel):
    skill: Optional[str] = None


class LessonsResponse(CamelModel):
    lessons: List[LessonRecord]
    fallback: bool = False
    notice: Optional[str] = None


class ChallengeRequest(CamelModel):
    lesson_title: str
    skill: Optional[str] = None


class ChallengeResponse(CamelModel):
    lesson: LessonRecord
    challenge: Challenge
    fallback: bool = False
    notice: Optional[str] = None


class EvaluateRequest(CamelModel):
    user_answer: str
    challenge: str
    scenario: str = ""
    lesson_title: str = ""
    skill: Optional[str] = None


class EvaluateResponse(CamelModel):
    result: EvaluationResult
    fallback: bool = False
    notice: Optional[str] = None
    # Mastery level after this answer, when it allowed the user to proceed
    level: Optional[int] = None


def _find_lesson(profile: UserProfile, title: str, skill: Optional[str]) -> Optional[LessonRecord]:
    saved = profile.saved_lessons.get(title)
    if saved is not None:
        return saved.lesson
    candidates = [profile.skill_lessons.get(skill, [])] if skill else []
    candidates += list(profile.skill_lessons.values())
    for lessons in candidates:
        for lesson in lessons:
            if lesson.title == title:
                return lesson
    return None


@router.post("/generate", response_model=LessonsResponse)
async def generate(
    req: GenerateLessonsRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
):
    profile = load_profile(user, db)
    skill = (req.skill or "").strip() or None
    ctx = profile.lesson_context(skill)
    cache: Dict[str, List[LessonRecord]] = dict(profile.skill_lessons)
    outcome = await orchestrator.lessons_outcome(ctx, client=client, cache=cache)
    if not outcome.fallback and not outcome.cached:
        key = orchestrator.lesson_cache_key(ctx)
        ProfileStore(db).replace(profile.with_skill_lessons(key, outcome.value))
    return LessonsResponse(lessons=outcome.value, fallback=outcome.fallback, notice=outcome.notice)


@router.post("/challenge", response_model=ChallengeResponse)
async def challenge(
    req: ChallengeRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
):
    title = req.lesson_title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="lessonTitle is required")
    skill = (req.skill or "").strip() or None
    profile = load_profile(user, db)
    ctx = ChallengeContext(lesson_title=title, skill=skill, industry=profile.industry or None)
    cache: Dict[str, Challenge] = {
        t: saved.lesson.challenges[0] for t, saved in profile.saved_lessons.items() if saved.lesson.challenges
    }
    outcome = await orchestrator.challenge_outcome(ctx, client=client, cache=cache)
    lesson = _find_lesson(profile, title, skill)
    if lesson is None:
        lesson = normalize_lessons([{"title": title}], LessonContext(skills=[skill] if skill else [], industry=ctx.industry))[0]
    if not outcome.cached:
        lesson = lesson.model_copy(update={"challenges": [outcome.value]})
        if not outcome.fallback:
            ProfileStore(db).replace(profile.with_saved_lesson(lesson, skill))
    return ChallengeResponse(lesson=lesson, challenge=outcome.value, fallback=outcome.fallback, notice=outcome.notice)


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate(
    req: EvaluateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
):
    profile = load_profile(user, db)
    try:
        ctx = EvaluationContext(
            user_answer=req.user_answer,
            challenge=req.challenge,
            scenario=req.scenario,
            lesson_title=req.lesson_title,
            skill=req.skill,
            industry=profile.industry or None,
        )
        outcome = await orchestrator.evaluation_outcome(ctx, client=client)
    except ValidationError:
        # Only user_answer can fail here; the request model already checked the rest
        raise HTTPException(status_code=400, detail=str(EmptyAnswerError()))
    except EmptyAnswerError as e:
        raise HTTPException(status_code=400, detail=str(e))
    level = None
    skill = (req.skill or "").strip()
    title = req.lesson_title.strip()
    if outcome.value.can_proceed and skill and title:
        profile = ProfileStore(db).replace(profile.with_completed_lesson(skill, title))
        level = profile.mastery_level(skill, title)
    return EvaluateResponse(result=outcome.value, fallback=outcome.fallback, notice=outcome.notice, level=level)
