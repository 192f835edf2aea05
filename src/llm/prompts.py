from __future__ import annotations

from typing import Any, Mapping, Optional

SYSTEM_PROMPT = """You are MicroSkill, a concise and practical micro-mentor. Your job: produce short, high-utility outputs for busy gig workers. Be direct, practical, and optimism-focused. Always follow the user's instructions and strict output constraints below.

Important rules:
- Keep micro-lessons short: each lesson must be ≤ 45 words.
- Each micro-lesson must include: 1) a 1–2 sentence tip, 2) a single 8–12 word practice task, 3) a 1–8 word example output.
- Produce exactly 5 micro-lessons unless the user asks otherwise.
- Provide two profile blurbs: short (1 sentence ≤ 20 words) and long (2 sentences ≤ 40 words).
- Provide exactly one cover message: 35–55 words, tailored to the pasted job description.
- Return output in clean JSON with keys: micro_lessons (array), profile_short, profile_long, cover_message.
- Avoid medical or legal advice. If the request requires a licensed professional, respond: "I can't advise on that — consult a qualified professional."
- If missing required info, return JSON: { "error": "MISSING: [what]" }"""


def build_user_prompt(
    *,
    job_title: str = "",
    skill_level: str = "beginner",
    strengths: str = "",
    platform: str = "",
    job_desc: str = "",
) -> str:
    return f"""GEN: Micro-lessons + Profile + Cover
JOB_TITLE: {job_title}
SKILL_LEVEL: {skill_level}
STRENGTHS: {strengths}
PLATFORM: {platform}
JOB_DESCRIPTION: {job_desc}
LANGUAGE: English

Produce output in JSON with fields:
{{
 "micro_lessons": [
   {{"title":"", "tip":"", "practice_task":"", "example_output":""}},
   ... (exactly 5)
 ],
 "profile_short":"",
 "profile_long":"",
 "cover_message":""
}}

Constraints recap: lesson tip ≤45 words; practice_task 8–12 words; example_output ≤8 words; cover_message 35–55 words.
Tone: friendly, confident, action-focused. No fluff. Use active verbs."""


def _lesson_summary(lesson: Optional[Mapping[str, Any]], fields: tuple) -> str:
    lesson = lesson or {}
    lines = []
    for key, label in fields:
        value = lesson.get(key)
        if value:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def build_expansion_prompt(
    *,
    lesson: Optional[Mapping[str, Any]],
    job_title: str = "",
    skill_level: str = "beginner",
    strengths: str = "",
    platform: str = "",
    job_desc: str = "",
) -> str:
    """Prompt for a plain-text "full guide" expanding one micro-lesson."""
    summary = _lesson_summary(
        lesson,
        (
            ("title", "Title"),
            ("difficulty", "Difficulty"),
            ("tip", "Tip"),
            ("practice_task", "Practice task"),
            ("example_output", "Example output"),
        ),
    )
    return f"""You are MicroSkill. Produce a concise "full guide" (plain text) for a single micro-lesson.

Context:
JOB_TITLE: {job_title}
SKILL_LEVEL: {skill_level}
STRENGTHS: {strengths}
PLATFORM: {platform}
JOB_DESCRIPTION: {job_desc}

Lesson:
{summary}

Instructions:
- Produce a readable full guide with sections: Objective, Why it matters, Steps (3-6 numbered steps), Pro tip (single short paragraph), Practice routine (3 bullet steps), Time estimate, and Example output.
- Keep the guide practical and focused; aim for ~200-500 words.
- Return only plain text (no JSON, no code fences)."""


def build_hint_prompt(
    *,
    lesson: Optional[Mapping[str, Any]],
    job_title: str = "",
    job_desc: str = "",
) -> str:
    """Prompt for a one or two sentence hint (< 25 words)."""
    summary = _lesson_summary(lesson, (("title", "Title"), ("practice_task", "Practice task")))
    return f"""You are MicroSkill. Produce one short, actionable hint for the lesson below.

Context:
JOB_TITLE: {job_title}
JOB_DESCRIPTION: {job_desc}

Lesson:
{summary}

Instructions:
- Return a concise hint: 1–2 short sentences, under 25 words.
- Focus on a tiny, immediate tip the user can apply in one focused attempt.
- Return only plain text (no JSON, no code fences)."""
