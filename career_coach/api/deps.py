"""FastAPI dependency providers: stores, generator, and services.

Stores are chosen from DATA_PROVIDER; services receive them by constructor.
Tests swap any provider through ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends

from career_coach.core.config import get_settings
from career_coach.db.memory import InMemoryJobRequirementStore, InMemoryRoadmapStore, InMemoryUserStore
from career_coach.db.sqlite import SqliteJobRequirementStore, SqliteRoadmapStore, SqliteUserStore
from career_coach.db.stores import JobRequirementStore, RoadmapStore, UserStore
from career_coach.services.candidates import ProfileService
from career_coach.services.compatibility import CompatibilityScorer
from career_coach.services.generative import GenerativeCapability, OpenAIGenerativeClient
from career_coach.services.roadmaps import RoadmapService

# In-memory stores (DATA_PROVIDER=memory)
memory_users = InMemoryUserStore()
memory_roadmaps = InMemoryRoadmapStore()
memory_job_requirements = InMemoryJobRequirementStore()


# PUBLIC_INTERFACE
def reset_memory_stores() -> None:
    """Clear in-memory state for tests or local dev."""
    memory_users.reset()
    memory_roadmaps.reset()
    memory_job_requirements.reset()


def get_user_store() -> UserStore:
    settings = get_settings()
    if settings.data_provider == "sqlite":
        return SqliteUserStore(settings.db_path)
    return memory_users


def get_roadmap_store() -> RoadmapStore:
    settings = get_settings()
    if settings.data_provider == "sqlite":
        return SqliteRoadmapStore(settings.db_path)
    return memory_roadmaps


def get_job_requirement_store() -> JobRequirementStore:
    settings = get_settings()
    if settings.data_provider == "sqlite":
        return SqliteJobRequirementStore(settings.db_path)
    return memory_job_requirements


@lru_cache(maxsize=4)
def _cached_client(api_key: Optional[str], model: str, base_url: Optional[str], max_retries: int) -> OpenAIGenerativeClient:
    return OpenAIGenerativeClient(api_key=api_key, model=model, base_url=base_url, max_retries=max_retries)


def get_generator() -> GenerativeCapability:
    settings = get_settings()
    return _cached_client(
        settings.openai_api_key, settings.openai_model, settings.openai_base_url, settings.openai_max_retries
    )


def get_roadmap_service(
    users: UserStore = Depends(get_user_store),
    roadmaps: RoadmapStore = Depends(get_roadmap_store),
    job_requirements: JobRequirementStore = Depends(get_job_requirement_store),
    generator: GenerativeCapability = Depends(get_generator),
) -> RoadmapService:
    settings = get_settings()
    return RoadmapService(
        users,
        roadmaps,
        job_requirements,
        generator,
        fallback_enabled=settings.roadmap_fallback_enabled,
        atomic_regeneration=settings.atomic_regeneration,
    )


def get_profile_service(
    users: UserStore = Depends(get_user_store),
    job_requirements: JobRequirementStore = Depends(get_job_requirement_store),
    roadmap_service: RoadmapService = Depends(get_roadmap_service),
) -> ProfileService:
    return ProfileService(users, job_requirements, roadmap_service)


def get_compatibility_scorer(generator: GenerativeCapability = Depends(get_generator)) -> CompatibilityScorer:
    return CompatibilityScorer(generator)
