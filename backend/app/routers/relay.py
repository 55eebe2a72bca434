from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends

from .. import orchestrator
from ..completion_client import CompletionClient, get_completion_client
from ..schemas import CamelModel, LessonContext, LessonRecord

# Same-origin endpoint the browser client calls without signing in
router = APIRouter(prefix="/api", tags=["relay"])


class RelayLessonsResponse(CamelModel):
	lessons: List[LessonRecord]


@router.post("/generateLessons", response_model=RelayLessonsResponse)
async def generate_lessons(ctx: LessonContext, client: CompletionClient = Depends(get_completion_client)):
	lessons = await orchestrator.generate_lessons(ctx, client=client)
	return RelayLessonsResponse(lessons=lessons)
