from __future__ import annotations
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import CamelModel, UserProfile
from ..store import ProfileStore
from .auth import User, get_current_user


router = APIRouter(prefix="/profile", tags=["profile"])

# Career quiz keys; unknown keys are rejected so typos don't silently vanish
QUIZ_KEYS = ("careerGoals", "skillsDevelopment", "industryInterests")

MAX_RESUME_CHARS = 20000


class ProfileUpdate(CamelModel):
    display_name: Optional[str] = None
    email: Optional[str] = None
    industry: Optional[str] = None


class QuizSubmission(BaseModel):
    answers: Dict[str, List[str]]


class ResumeUpload(BaseModel):
    text: str


class LessonCompletion(CamelModel):
    skill: str
    lesson_title: str


def load_profile(user: User, db: Session) -> UserProfile:
    profile = ProfileStore(db).get(user.username)
    if profile is None:
        raise HTTPException(status_code=404, detail="profile not found")
    return profile


@router.get("", response_model=UserProfile)
async def get_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return load_profile(user, db)


@router.patch("", response_model=UserProfile)
async def update_profile(req: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    profile = load_profile(user, db)
    changes = {k: v.strip() for k, v in req.model_dump(exclude_none=True).items()}
    if "display_name" in changes and not changes["display_name"]:
        raise HTTPException(status_code=400, detail="display name cannot be empty")
    if "email" in changes and "@" not in changes["email"]:
        raise HTTPException(status_code=400, detail="a valid email is required")
    return ProfileStore(db).replace(profile.model_copy(update=changes))


@router.post("/quiz", response_model=UserProfile)
async def submit_quiz(req: QuizSubmission, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    unknown = sorted(set(req.answers) - set(QUIZ_KEYS))
    if unknown:
        raise HTTPException(status_code=400, detail=f"unknown quiz keys: {unknown}")
    profile = load_profile(user, db)
    return ProfileStore(db).replace(profile.with_quiz_answers(req.answers))


@router.post("/resume", response_model=UserProfile)
async def upload_resume(req: ResumeUpload, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    text = (req.text or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="resume text is required")
    profile = load_profile(user, db)
    return ProfileStore(db).replace(profile.with_resume(text[:MAX_RESUME_CHARS]))


@router.delete("/resume", response_model=UserProfile)
async def remove_resume(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    profile = load_profile(user, db)
    return ProfileStore(db).replace(profile.without_resume())


@router.post("/lessons/complete")
async def complete_lesson(req: LessonCompletion, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    skill = req.skill.strip()
    title = req.lesson_title.strip()
    if not skill or not title:
        raise HTTPException(status_code=400, detail="skill and lessonTitle are required")
    profile = ProfileStore(db).replace(load_profile(user, db).with_completed_lesson(skill, title))
    return {"skill": skill, "lessonTitle": title, "level": profile.mastery_level(skill, title)}
