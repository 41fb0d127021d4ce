"""Repository protocols the services depend on.

Concrete stores live in ``career_coach.db.sqlite`` and ``career_coach.db.memory``;
services receive them through their constructors.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from career_coach.models.domain import Candidate, JobRequirement, Roadmap, User


class UserStore(Protocol):
    def get_user(self, user_id: str) -> Optional[User]: ...

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]: ...

    def get_resume_analysis(self, candidate_id: str) -> Optional[Dict[str, Any]]: ...

    def save_user(self, user: User) -> None: ...


class RoadmapStore(Protocol):
    def get(self, roadmap_id: str) -> Optional[Roadmap]: ...

    def list_for_candidate(self, candidate_id: str) -> List[Roadmap]: ...

    def save(self, roadmap: Roadmap) -> None: ...

    def delete(self, roadmap_id: str) -> bool: ...

    def delete_for_candidate(self, candidate_id: str) -> int: ...


class JobRequirementStore(Protocol):
    def add(self, requirement: JobRequirement) -> None: ...

    def find_by_company_and_position(self, company: str, position: str) -> List[JobRequirement]: ...

    def list_for_recruiter(self, recruiter_id: str) -> List[JobRequirement]: ...


def matches_target(stored: str, query: str) -> bool:
    """Case-insensitive partial match: the stored value contains the query."""
    return query.strip().lower() in stored.lower()
