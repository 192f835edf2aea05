import asyncio
import logging
import time
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from api.backend import SUPPORTED_ACTIONS, CoachingBackend
from api.dependencies import get_backend
from api.metrics import REQUESTS_TOTAL, REQUEST_LATENCY_SECONDS

router = APIRouter()
logger = logging.getLogger(__name__)

ENDPOINT = "/api/generate"


class GenerateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    job_title: str = Field(default="", alias="jobTitle")
    skill_level: str = Field(default="beginner", alias="skillLevel")
    strengths: str = ""
    platform: str = ""
    job_desc: str = Field(default="", alias="jobDesc")
    provider: Optional[str] = None

    # supplement actions
    action: Optional[str] = None
    lesson_index: Any = Field(default=0, alias="lessonIndex")
    lesson: Optional[dict] = None


@router.post(ENDPOINT)
async def generate(
    payload: GenerateIn,
    backend: CoachingBackend = Depends(get_backend),
) -> Any:
    start = time.time()
    try:
        if payload.action:
            return await _supplement(payload, backend)

        if not payload.job_desc:
            raise HTTPException(status_code=400, detail="Missing jobDesc")

        logger.info(f"Generating content (provider={payload.provider or 'default'}): {payload.job_desc[:50]}...")
        result = await asyncio.to_thread(
            backend.generate_content,
            job_desc=payload.job_desc,
            job_title=payload.job_title,
            skill_level=payload.skill_level,
            strengths=payload.strengths,
            platform=payload.platform,
            provider=payload.provider,
        )
        REQUESTS_TOTAL.labels(endpoint=ENDPOINT, status="processed").inc()
        return result
    finally:
        REQUEST_LATENCY_SECONDS.labels(endpoint=ENDPOINT).observe(time.time() - start)


async def _supplement(payload: GenerateIn, backend: CoachingBackend) -> dict:
    if payload.action not in SUPPORTED_ACTIONS:
        raise HTTPException(status_code=400, detail=f"Unsupported action: {payload.action}")

    text = await asyncio.to_thread(
        backend.fetch_supplement,
        payload.action,
        lesson_index=payload.lesson_index,
        lesson=payload.lesson,
        job_title=payload.job_title,
        skill_level=payload.skill_level,
        strengths=payload.strengths,
        platform=payload.platform,
        job_desc=payload.job_desc,
        provider=payload.provider,
    )
    REQUESTS_TOTAL.labels(endpoint=ENDPOINT, status="processed").inc()
    return {"action": payload.action, "lessonIndex": payload.lesson_index, "text": text}
