from typing import Optional

from api.backend import CoachingBackend
from llm.llm_client import LLMClient
from microskill.config import Settings

# Global instances, built on first use
settings: Optional[Settings] = None
backend: Optional[CoachingBackend] = None


def get_settings() -> Settings:
    global settings
    if settings is None:
        settings = Settings.from_env()
    return settings


def get_backend() -> CoachingBackend:
    global backend
    if backend is None:
        backend = CoachingBackend(llm_client=LLMClient(get_settings()))
    return backend
