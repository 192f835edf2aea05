from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from llm.demo_fixture import FETCH_EXPANSION, FETCH_HINT, get_demo_supplement
from llm.llm_client import LLMClient
from llm.prompts import SYSTEM_PROMPT, build_expansion_prompt, build_hint_prompt, build_user_prompt

logger = logging.getLogger(__name__)

SUPPORTED_ACTIONS = {FETCH_EXPANSION, FETCH_HINT}


class CoachingBackend:
    """Turns form payloads into prompts and runs them through LLMClient."""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.llm = llm_client if llm_client is not None else LLMClient()

    @property
    def demo_mode(self) -> bool:
        return self.llm.settings.demo_mode

    def generate_content(
        self,
        *,
        job_desc: str,
        job_title: str = "",
        skill_level: str = "beginner",
        strengths: str = "",
        platform: str = "",
        provider: Optional[str] = None,
    ) -> Any:
        """Micro-lessons, profile blurbs and a cover message for one job post."""
        user_prompt = build_user_prompt(
            job_title=job_title,
            skill_level=skill_level,
            strengths=strengths,
            platform=platform,
            job_desc=job_desc,
        )
        result = self.llm.generate_for_provider(provider, user_prompt)
        return result.parsed

    def fetch_supplement(
        self,
        action: str,
        *,
        lesson_index: Any = 0,
        lesson: Optional[Mapping[str, Any]] = None,
        job_title: str = "",
        skill_level: str = "beginner",
        strengths: str = "",
        platform: str = "",
        job_desc: str = "",
        provider: Optional[str] = None,
    ) -> str:
        """Full guide or hint text for a single lesson."""
        if action not in SUPPORTED_ACTIONS:
            raise ValueError(f"Unsupported action: {action}")

        if self.demo_mode:
            return get_demo_supplement(lesson_index, action)

        if action == FETCH_HINT:
            user_prompt = build_hint_prompt(lesson=lesson, job_title=job_title, job_desc=job_desc)
        else:
            user_prompt = build_expansion_prompt(
                lesson=lesson,
                job_title=job_title,
                skill_level=skill_level,
                strengths=strengths,
                platform=platform,
                job_desc=job_desc,
            )

        result = self.llm.generate_plain_text(provider, system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt)
        logger.info(f"{action} returned {len(result.assistant_text)} chars")
        return result.assistant_text
