"""Prompt -> completion -> extraction -> normalization, with one-shot fallback.

Each content type runs the same pipeline. Any ``GenerationError`` raised while
awaiting the completion, extracting or shape-checking moves the run to the
error stage and the deterministic fallback is returned instead; there is no
retry. Public functions never raise for generation failures.

Persistence is the caller's job: lesson and challenge runs accept an optional
mapping and write to it only when the remote result was used.
"""

from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, MutableMapping, Optional, Tuple, TypeVar

from . import fallbacks, prompts
from .completion_client import CompletionClient
from .errors import EmptyAnswerError, GenerationError
from .extraction import Kind, extract_json, require_shape
from .normalize import normalize_challenge, normalize_evaluation, normalize_lessons
from .schemas import (
	Challenge,
	ChallengeContext,
	EvaluationContext,
	EvaluationResult,
	LessonContext,
	LessonRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

FALLBACK_NOTICE = "Showing fallback content."


class Stage(str, enum.Enum):
	IDLE = "idle"
	PROMPTING = "prompting"
	AWAITING_COMPLETION = "awaiting-completion"
	EXTRACTING = "extracting"
	NORMALIZING = "normalizing"
	DONE = "done"
	ERROR = "error"


@dataclass(frozen=True)
class Outcome(Generic[T]):
	value: T
	fallback: bool = False
	failed_stage: Optional[Stage] = None
	cached: bool = False
	# Every stage the run passed through, ending in DONE
	stages: Tuple[Stage, ...] = (Stage.IDLE, Stage.DONE)

	@property
	def notice(self) -> Optional[str]:
		return FALLBACK_NOTICE if self.fallback else None


async def _run(
	label: str,
	client: CompletionClient,
	*,
	build: Callable[[], str],
	kind: Kind,
	normalize: Callable[[Any], T],
	fallback: Callable[[], T],
	user_message: Optional[str] = None,
) -> Outcome[T]:
	stages: List[Stage] = [Stage.IDLE, Stage.PROMPTING]
	instruction = build()
	try:
		stages.append(Stage.AWAITING_COMPLETION)
		raw = await client.complete(instruction, user_message=user_message)
		stages.append(Stage.EXTRACTING)
		data = require_shape(extract_json(raw, kind), kind)
	except GenerationError as err:
		failed = stages[-1]
		logger.warning("%s generation failed during %s, using fallback: %s", label, failed.value, err)
		stages += [Stage.ERROR, Stage.DONE]
		return Outcome(fallback(), fallback=True, failed_stage=failed, stages=tuple(stages))
	# Normalizing cannot fail; every missing field gets a default
	stages.append(Stage.NORMALIZING)
	value = normalize(data)
	stages.append(Stage.DONE)
	return Outcome(value, stages=tuple(stages))


def lesson_cache_key(ctx: LessonContext) -> str:
	return ", ".join(ctx.skills) if ctx.skills else "general"


async def lessons_outcome(
	ctx: LessonContext,
	*,
	client: CompletionClient,
	cache: Optional[MutableMapping[str, List[LessonRecord]]] = None,
) -> Outcome[List[LessonRecord]]:
	key = lesson_cache_key(ctx)
	if cache is not None and cache.get(key):
		logger.debug("lesson cache hit for %r", key)
		return Outcome(list(cache[key]), cached=True)
	outcome = await _run(
		"lessons",
		client,
		build=lambda: prompts.build_lessons_prompt(ctx),
		kind="array",
		normalize=lambda data: normalize_lessons(data, ctx),
		fallback=lambda: fallbacks.fallback_lessons(ctx),
	)
	if cache is not None and not outcome.fallback:
		cache[key] = list(outcome.value)
	return outcome


async def challenge_outcome(
	ctx: ChallengeContext,
	*,
	client: CompletionClient,
	cache: Optional[MutableMapping[str, Challenge]] = None,
) -> Outcome[Challenge]:
	key = ctx.lesson_title
	if cache is not None and key in cache:
		logger.debug("challenge cache hit for %r", key)
		return Outcome(cache[key], cached=True)
	outcome = await _run(
		"challenge",
		client,
		build=lambda: prompts.build_challenge_prompt(ctx),
		kind="object",
		normalize=lambda data: normalize_challenge(data, ctx),
		fallback=lambda: fallbacks.fallback_challenge(ctx),
	)
	if cache is not None and not outcome.fallback:
		cache[key] = outcome.value
	return outcome


async def evaluation_outcome(ctx: EvaluationContext, *, client: CompletionClient) -> Outcome[EvaluationResult]:
	if not ctx.user_answer.strip():
		raise EmptyAnswerError()
	return await _run(
		"evaluation",
		client,
		build=lambda: prompts.build_evaluation_prompt(ctx),
		kind="object",
		normalize=normalize_evaluation,
		fallback=lambda: fallbacks.fallback_evaluation(ctx),
		user_message=prompts.evaluation_user_message(ctx.user_answer),
	)


async def generate_lessons(
	ctx: LessonContext,
	*,
	client: CompletionClient,
	cache: Optional[MutableMapping[str, List[LessonRecord]]] = None,
) -> List[LessonRecord]:
	return (await lessons_outcome(ctx, client=client, cache=cache)).value


async def generate_challenge(
	ctx: ChallengeContext,
	*,
	client: CompletionClient,
	cache: Optional[MutableMapping[str, Challenge]] = None,
) -> Challenge:
	return (await challenge_outcome(ctx, client=client, cache=cache)).value


async def evaluate_answer(ctx: EvaluationContext, *, client: CompletionClient) -> EvaluationResult:
	return (await evaluation_outcome(ctx, client=client)).value
