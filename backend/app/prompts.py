from __future__ import annotations
import json

from .schemas import ChallengeContext, EvaluationContext, LessonContext

# Resume text is free-form; keep prompts bounded
RESUME_EXCERPT_CHARS = 4000


def _or_general(value: str | None) -> str:
	value = (value or "").strip()
	return value or "general"


def build_lessons_prompt(ctx: LessonContext) -> str:
	skills = ", ".join(ctx.skills) if ctx.skills else "none listed yet"
	answers = json.dumps(ctx.career_answers, sort_keys=True, ensure_ascii=False)
	if ctx.resume_text:
		resume_note = f"Resume excerpt:\n---\n{ctx.resume_text[:RESUME_EXCERPT_CHARS]}\n---\n"
	elif ctx.resume_uploaded:
		resume_note = "Note: the user uploaded a resume but no text was extracted.\n"
	else:
		resume_note = "Note: the user skipped uploading a resume.\n"
	return (
		f"The user has the following skills: {skills}.\n"
		f"Career-related responses: {answers}.\n"
		f"Industry: {_or_general(ctx.industry)}.\n"
		f"{resume_note}\n"
		"Task:\n"
		"Suggest 3 personalized learning lessons to help the user grow in their chosen career path.\n"
		"At least one lesson MUST be directly tied to the user's listed skills.\n"
		"Use the career-related responses as context so recommendations fit the user's interests and goals.\n"
		"Avoid overly generic topics unless explicitly relevant.\n\n"
		"Return ONLY a JSON array of 3 objects. Each object must have exactly these string keys:\n"
		"- title: short name of the lesson\n"
		"- description: concise explanation of what will be learned\n"
		"- relevance: brief note on why this lesson matters for the user's career development\n"
		"No markdown, no extra commentary."
	)


def build_challenge_prompt(ctx: ChallengeContext) -> str:
	return (
		"You are a professional tutor generating a detailed, engaging lesson challenge.\n\n"
		"User Context:\n"
		f"- Lesson Title: {ctx.lesson_title}\n"
		f"- Skill: {_or_general(ctx.skill)}\n"
		f"- Industry: {_or_general(ctx.industry)}\n\n"
		"Generate a scenario, a challenge and a helpful hint tailored to this lesson.\n"
		"Make the scenario realistic: include a setting, people or context relevant to the industry, and show why the skill matters.\n"
		"Make the challenge actionable: the user must think critically, apply knowledge or solve a problem.\n"
		"Keep the hint concise and practical without giving the answer away.\n\n"
		"Return ONLY a JSON object with exactly these string keys: scenario, challenge, hint.\n"
		"No markdown, no extra commentary."
	)


def build_evaluation_prompt(ctx: EvaluationContext) -> str:
	return (
		"You are an expert tutor evaluating student answers.\n"
		"Evaluate the answer for correctness and completeness, give constructive feedback and decide whether it is sufficient to proceed.\n\n"
		"Context:\n"
		f"- Lesson: {ctx.lesson_title}\n"
		f"- Skill: {_or_general(ctx.skill)}\n"
		f"- Industry: {_or_general(ctx.industry)}\n"
		f"- Scenario: {ctx.scenario}\n"
		f"- Challenge: {ctx.challenge}\n\n"
		"Criteria: correctness, completeness of key concepts, relevance to the scenario and skill, clarity.\n\n"
		"Return ONLY a JSON object with these keys:\n"
		"- isCorrect: boolean, true if the answer demonstrates understanding of the key concepts\n"
		"- score: integer 0-100 based on correctness, completeness and relevance\n"
		"- feedback: string, what is good and what could be improved\n"
		"- suggestions: string, specific actionable suggestions\n"
		"- canProceed: boolean, true if score >= 70\n"
		"Be encouraging but honest and give partial credit for partially correct answers."
	)


def evaluation_user_message(answer: str) -> str:
	return f'Please evaluate this student answer: "{answer}"'
