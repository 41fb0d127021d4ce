"""Candidate and recruiter profile updates that feed roadmap generation."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from career_coach.core.errors import CoachError, NotFoundError
from career_coach.core.logging import get_logger
from career_coach.db.stores import JobRequirementStore, UserStore
from career_coach.models.domain import Candidate, JobRequirement, Resume, TargetCompany
from career_coach.services.roadmaps import RoadmapService

logger = get_logger(__name__)


class ProfileService:
    def __init__(self, users: UserStore, job_requirements: JobRequirementStore, roadmap_service: RoadmapService):
        self.users = users
        self.job_requirements = job_requirements
        self.roadmap_service = roadmap_service

    def _candidate(self, candidate_id: str) -> Candidate:
        candidate = self.users.get_candidate(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate not found")
        return candidate

    def set_resume(self, candidate_id: str, analysis: Dict[str, Any], file_name: Optional[str] = None) -> Candidate:
        """Store the resume parser's analysis as the candidate's current resume."""
        candidate = self._candidate(candidate_id)
        candidate.resume = Resume(file_name=file_name, analysis=analysis)
        self.users.save_user(candidate)
        return candidate

    def set_target_companies(self, candidate_id: str, targets: List[TargetCompany]) -> Candidate:
        """Replace the candidate's targets and, when a resume exists, regenerate the roadmap.

        A failed regeneration is logged and does not undo the target update.
        """
        candidate = self._candidate(candidate_id)
        candidate.target_companies = list(targets)
        self.users.save_user(candidate)
        if candidate.resume is not None and targets:
            try:
                self.roadmap_service.regenerate(candidate_id)
            except CoachError as exc:
                logger.error(f"Roadmap regeneration after target update failed for {candidate_id}: {exc.message}")
        return self._candidate(candidate_id)

    def add_job_requirement(self, requirement: JobRequirement) -> JobRequirement:
        self.job_requirements.add(requirement)
        logger.info(f"Job requirement {requirement.id} stored for {requirement.company}")
        return requirement
