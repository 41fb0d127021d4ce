"""
Pytest configuration: make the `career_coach` package importable and provide
isolated settings, in-memory stores, and a scripted generator per test.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Compute the repository root that contains the 'career_coach' directory
REPO_ROOT = Path(__file__).resolve().parents[1]

# Prepend repository root to sys.path if not already present
repo_root_str = str(REPO_ROOT)
if repo_root_str not in sys.path:
    sys.path.insert(0, repo_root_str)

from career_coach.core.config import reset_settings_cache  # noqa: E402
from career_coach.core.errors import ExternalServiceError  # noqa: E402
from career_coach.db.memory import (  # noqa: E402
    InMemoryJobRequirementStore,
    InMemoryRoadmapStore,
    InMemoryUserStore,
)
from career_coach.models.domain import Candidate, RawRoadmap, Recruiter, Resume, TargetCompany  # noqa: E402
from career_coach.security.jwt import create_access_token  # noqa: E402
from career_coach.services.roadmaps import RoadmapService  # noqa: E402

FIXED_NOW = datetime(2026, 4, 1, 12, 0, tzinfo=timezone.utc)


def sample_payload() -> Dict[str, Any]:
    """A roadmap shaped like a typical generative answer, including its quirks."""
    return {
        "title": "Backend Engineer at Acme",
        "description": "Close the gap between frontend JavaScript work and backend roles.",
        "estimatedTimelineMonths": 6,
        "difficultyScore": 7,
        "milestones": [
            {
                "title": "Learn Node.js internals",
                "description": "Event loop, streams, and clustering.",
                "type": "skill",
                "difficulty": "intermediate",
                "timeEstimate": {"amount": 3, "unit": "weeks"},
                "resources": [{"title": "Node docs", "url": "https://nodejs.org/docs", "type": "documentation"}],
                "order": 1,
                "dependencies": [],
            },
            {
                "title": "Build a REST API",
                "description": "Ship an API with auth, persistence, and tests.",
                "type": "project",
                "difficulty": "advanced",
                "timeEstimate": {"amount": 1, "unit": "month"},
                "resources": [],
                "order": 2,
                "dependencies": [0],
            },
            {
                "title": "AWS Cloud Practitioner",
                "description": "Entry-level cloud certification.",
                "type": "certification",
                "difficulty": "beginner",
                "timeEstimate": {"amount": 1, "unit": "year"},
                "resources": [{"title": "Exam guide", "url": "https://aws.amazon.com", "type": "guide"}],
                "order": 3,
                "dependencies": [0, 1],
            },
        ],
        "alternativeRoutes": [{"title": "Platform route", "description": "Focus on infrastructure", "milestones": []}],
        "gptAnalysis": {"reasoning": "Strong JS base.", "keyInsights": ["Backend depth matters"]},
    }


class FakeGenerator:
    """Scripted stand-in for the generative service that records its calls."""

    def __init__(self) -> None:
        self.roadmap_payload: Any = sample_payload()
        self.roadmap_error: Optional[ExternalServiceError] = None
        self.score_payload: Dict[str, Any] = {
            "matchScore": 82,
            "matchingStrengths": ["JavaScript"],
            "gaps": ["Go"],
            "recommendations": ["Build a Go service"],
            "analysis": "Solid fit.",
        }
        self.score_error: Optional[ExternalServiceError] = None
        self.recommendations: Dict[str, Any] = {"recommendations": [{"title": "Learn Go", "explanation": "Used widely"}]}
        self.roadmap_calls: List[Dict[str, Any]] = []
        self.score_calls: List[Dict[str, Any]] = []

    def generate_roadmap(self, resume_analysis, target_companies, job_requirements) -> RawRoadmap:
        self.roadmap_calls.append(
            {
                "resume_analysis": resume_analysis,
                "target_companies": list(target_companies),
                "job_requirements": list(job_requirements),
            }
        )
        if self.roadmap_error is not None:
            raise self.roadmap_error
        return RawRoadmap(payload=self.roadmap_payload, source="generative")

    def score_candidate(self, candidate_profile, job_requirements) -> Dict[str, Any]:
        self.score_calls.append({"candidate_profile": candidate_profile, "job_requirements": job_requirements})
        if self.score_error is not None:
            raise self.score_error
        return self.score_payload

    def analyze_job_description(self, job_description: str) -> Dict[str, Any]:
        return {"requiredSkills": [{"name": "Python", "required": True}], "responsibilities": []}

    def recommend_for_target(self, company: str, position: str) -> Dict[str, Any]:
        return self.recommendations


class Clock:
    """Settable clock for services."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    monkeypatch.setenv("DATA_PROVIDER", "memory")
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ATOMIC_REGENERATION", raising=False)
    monkeypatch.delenv("ROADMAP_FALLBACK_ENABLED", raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def users() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def roadmap_store() -> InMemoryRoadmapStore:
    return InMemoryRoadmapStore()


@pytest.fixture
def job_store() -> InMemoryJobRequirementStore:
    return InMemoryJobRequirementStore()


@pytest.fixture
def service(users, roadmap_store, job_store, fake_generator, clock) -> RoadmapService:
    return RoadmapService(users, roadmap_store, job_store, fake_generator, clock=clock)


def make_candidate(
    email: str = "ada@example.com",
    with_resume: bool = True,
    targets: Optional[List[TargetCompany]] = None,
) -> Candidate:
    return Candidate(
        email=email,
        name="Ada",
        resume=Resume(file_name="ada.pdf", analysis={"skills": ["JavaScript"]}) if with_resume else None,
        target_companies=targets if targets is not None else [TargetCompany(company="Acme", position="Backend Engineer", priority=1)],
    )


def make_recruiter(email: str = "rita@acme.example.com", company: str = "Acme Corp") -> Recruiter:
    return Recruiter(email=email, name="Rita", company=company, position="Talent Lead")


def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject=user_id)}"}
