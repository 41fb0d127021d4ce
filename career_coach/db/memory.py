"""In-process stores used when DATA_PROVIDER=memory and in tests.

Objects are copied on the way in and out so callers never hold a reference
into store state; a save is a whole-document replacement, as with sqlite.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from career_coach.db.stores import matches_target
from career_coach.models.domain import Candidate, JobRequirement, Roadmap, User


class InMemoryUserStore:
    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    def get_user(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        user = self.get_user(candidate_id)
        return user if isinstance(user, Candidate) else None

    def get_resume_analysis(self, candidate_id: str) -> Optional[Dict[str, Any]]:
        candidate = self.get_candidate(candidate_id)
        if candidate is None or candidate.resume is None:
            return None
        return candidate.resume.analysis

    def save_user(self, user: User) -> None:
        self._users[user.id] = user.model_copy(deep=True)

    def reset(self) -> None:
        self._users.clear()


class InMemoryRoadmapStore:
    def __init__(self) -> None:
        self._roadmaps: Dict[str, Roadmap] = {}

    def get(self, roadmap_id: str) -> Optional[Roadmap]:
        roadmap = self._roadmaps.get(roadmap_id)
        return roadmap.model_copy(deep=True) if roadmap else None

    def list_for_candidate(self, candidate_id: str) -> List[Roadmap]:
        rows = [r for r in self._roadmaps.values() if r.candidate_id == candidate_id]
        rows.sort(key=lambda r: r.created_at)
        return [r.model_copy(deep=True) for r in rows]

    def save(self, roadmap: Roadmap) -> None:
        self._roadmaps[roadmap.id] = roadmap.model_copy(deep=True)

    def delete(self, roadmap_id: str) -> bool:
        return self._roadmaps.pop(roadmap_id, None) is not None

    def delete_for_candidate(self, candidate_id: str) -> int:
        ids = [rid for rid, r in self._roadmaps.items() if r.candidate_id == candidate_id]
        for rid in ids:
            del self._roadmaps[rid]
        return len(ids)

    def reset(self) -> None:
        self._roadmaps.clear()


class InMemoryJobRequirementStore:
    def __init__(self) -> None:
        self._requirements: Dict[str, JobRequirement] = {}

    def add(self, requirement: JobRequirement) -> None:
        self._requirements[requirement.id] = requirement.model_copy(deep=True)

    def find_by_company_and_position(self, company: str, position: str) -> List[JobRequirement]:
        return [
            r.model_copy(deep=True)
            for r in self._requirements.values()
            if matches_target(r.company, company) and matches_target(r.position, position)
        ]

    def list_for_recruiter(self, recruiter_id: str) -> List[JobRequirement]:
        return [r.model_copy(deep=True) for r in self._requirements.values() if r.recruiter_id == recruiter_id]

    def reset(self) -> None:
        self._requirements.clear()
