"""Roadmap generation, regeneration, lookup, and milestone status updates.

Generation gathers the candidate's resume analysis, target companies, and any
recruiter job requirements matching those targets, asks the generative
service for a plan, normalizes the answer, stores it as a new roadmap
document, and links it to the candidate.

Concurrency: nothing here locks. Two generations for one candidate both
persist and the later link wins; two milestone updates on one roadmap each
save the whole document and the later save wins.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from career_coach.core.errors import (
    ExternalServiceError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from career_coach.core.logging import get_logger
from career_coach.db.stores import JobRequirementStore, RoadmapStore, UserStore
from career_coach.models.domain import (
    Candidate,
    JobRequirement,
    Milestone,
    NormalizedRoadmap,
    Roadmap,
    TargetCompany,
    TargetSnapshot,
    utcnow,
)
from career_coach.services.fallback import fallback_roadmap
from career_coach.services.generative import GenerativeCapability
from career_coach.services.normalizer import normalize

logger = get_logger(__name__)

# failures that mean "cannot reach or use the service at all"
FALLBACK_KINDS = frozenset({"auth", "config", "unavailable"})

Clock = Callable[[], datetime]


def primary_target(targets: List[TargetCompany]) -> TargetCompany:
    """Highest-priority target (lowest number); ties keep list order."""
    return min(targets, key=lambda t: t.priority)


class RoadmapService:
    """Builds and mutates candidate roadmaps over injected stores."""

    def __init__(
        self,
        users: UserStore,
        roadmaps: RoadmapStore,
        job_requirements: JobRequirementStore,
        generator: GenerativeCapability,
        fallback_enabled: bool = True,
        atomic_regeneration: bool = False,
        clock: Clock = utcnow,
    ):
        self.users = users
        self.roadmaps = roadmaps
        self.job_requirements = job_requirements
        self.generator = generator
        self.fallback_enabled = fallback_enabled
        self.atomic_regeneration = atomic_regeneration
        self.clock = clock

    # --- generation ------------------------------------------------------

    def _eligible_candidate(self, candidate_id: str) -> Candidate:
        candidate = self.users.get_candidate(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate not found")
        if candidate.resume is None:
            raise NotFoundError("Resume not found for this candidate")
        if not candidate.target_companies:
            raise ValidationError("Candidate has not specified target companies")
        return candidate

    def _job_context(self, targets: List[TargetCompany]) -> List[JobRequirement]:
        matches: List[JobRequirement] = []
        for target in targets:
            try:
                matches.extend(self.job_requirements.find_by_company_and_position(target.company, target.position))
            except PersistenceError:
                logger.warning(f"Job requirement lookup failed for {target.company}; continuing without it")
        return matches

    def _produce(self, candidate: Candidate) -> Tuple[NormalizedRoadmap, str]:
        targets = candidate.target_companies
        analysis = self.users.get_resume_analysis(candidate.id) or {}
        context = self._job_context(targets)
        try:
            raw = self.generator.generate_roadmap(analysis, targets, context)
        except ExternalServiceError as exc:
            if not (self.fallback_enabled and exc.kind in FALLBACK_KINDS):
                raise
            logger.warning(f"Roadmap generation unavailable ({exc.kind}); using fallback template for {candidate.id}")
            raw = fallback_roadmap(primary_target(targets).position)
        return normalize(raw), raw.source

    def _build(self, candidate: Candidate) -> Roadmap:
        content, source = self._produce(candidate)
        now = self.clock()
        return Roadmap.model_validate(
            {
                **content.model_dump(),
                "candidate_id": candidate.id,
                "target_companies": [
                    TargetSnapshot(company=t.company, position=t.position) for t in candidate.target_companies
                ],
                "source": source,
                "created_at": now,
                "updated_at": now,
            }
        )

    def _persist_and_link(self, candidate: Candidate, roadmap: Roadmap) -> None:
        self.roadmaps.save(roadmap)
        candidate.roadmap_id = roadmap.id
        self.users.save_user(candidate)

    # PUBLIC_INTERFACE
    def generate(self, candidate_id: str) -> Roadmap:
        """Generate, persist, and link a new roadmap for the candidate.

        Raises:
            NotFoundError: candidate or resume missing.
            ValidationError: no target companies.
            ExternalServiceError: generation failed in a way the fallback does not cover.
            PersistenceError: the roadmap or the candidate link could not be saved.
        """
        candidate = self._eligible_candidate(candidate_id)
        logger.info(f"Generating roadmap for candidate {candidate_id}")
        roadmap = self._build(candidate)
        self._persist_and_link(candidate, roadmap)
        logger.info(f"Roadmap {roadmap.id} ({roadmap.source}) linked to candidate {candidate_id}")
        return roadmap

    # PUBLIC_INTERFACE
    def regenerate(self, candidate_id: str) -> Roadmap:
        """Replace the candidate's roadmap.

        Default mode deletes first, then generates: if generation fails the
        candidate is left without a roadmap. With ``atomic_regeneration`` the
        new roadmap is built and linked before the old ones are removed.
        """
        if not self.atomic_regeneration:
            removed = self.roadmaps.delete_for_candidate(candidate_id)
            logger.info(f"Deleted {removed} roadmap(s) for candidate {candidate_id} before regeneration")
            return self.generate(candidate_id)

        candidate = self._eligible_candidate(candidate_id)
        roadmap = self._build(candidate)
        self._persist_and_link(candidate, roadmap)
        for old in self.roadmaps.list_for_candidate(candidate_id):
            if old.id != roadmap.id:
                self.roadmaps.delete(old.id)
        logger.info(f"Roadmap {roadmap.id} replaced previous roadmaps for candidate {candidate_id}")
        return roadmap

    # --- reads -----------------------------------------------------------

    def get(self, roadmap_id: str) -> Roadmap:
        roadmap = self.roadmaps.get(roadmap_id)
        if roadmap is None:
            raise NotFoundError("Roadmap not found")
        return roadmap

    def get_for_candidate(self, candidate_id: str) -> Roadmap:
        candidate = self.users.get_candidate(candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate not found")
        if not candidate.roadmap_id:
            raise NotFoundError("Roadmap not found for this candidate")
        return self.get(candidate.roadmap_id)

    # --- mutation --------------------------------------------------------

    @staticmethod
    def ensure_owner(roadmap: Roadmap, user_id: str) -> None:
        if roadmap.candidate_id != user_id:
            raise ForbiddenError("Only the roadmap owner can change it")

    def _apply_status(self, roadmap: Roadmap, milestone: Milestone, completed: bool) -> Roadmap:
        now = self.clock()
        if completed and not (milestone.completed and milestone.completion_date):
            milestone.completion_date = now
        elif not completed:
            milestone.completion_date = None
        milestone.completed = completed
        roadmap.updated_at = now
        self.roadmaps.save(roadmap)
        logger.info(f"Milestone {milestone.id} of roadmap {roadmap.id} set completed={completed}")
        return roadmap

    # PUBLIC_INTERFACE
    def set_milestone_status(
        self, roadmap_id: str, milestone_index: int, completed: bool, actor_id: Optional[str] = None
    ) -> Roadmap:
        """Set completion by list position; the index must be within current bounds."""
        roadmap = self.get(roadmap_id)
        if actor_id is not None:
            self.ensure_owner(roadmap, actor_id)
        if isinstance(milestone_index, bool) or not 0 <= milestone_index < len(roadmap.milestones):
            raise NotFoundError("Milestone not found", details={"milestone_index": milestone_index})
        return self._apply_status(roadmap, roadmap.milestones[milestone_index], completed)

    # PUBLIC_INTERFACE
    def set_milestone_status_by_id(
        self, roadmap_id: str, milestone_id: str, completed: bool, actor_id: Optional[str] = None
    ) -> Roadmap:
        """Set completion by the milestone's stable id."""
        roadmap = self.get(roadmap_id)
        if actor_id is not None:
            self.ensure_owner(roadmap, actor_id)
        for milestone in roadmap.milestones:
            if milestone.id == milestone_id:
                return self._apply_status(roadmap, milestone, completed)
        raise NotFoundError("Milestone not found", details={"milestone_id": milestone_id})

    # --- target advice ---------------------------------------------------

    def recommend_for_target(self, roadmap_id: str, company: str, position: str) -> Dict[str, Any]:
        """Ask the generative service for advice on one of the roadmap's targets."""
        roadmap = self.get(roadmap_id)
        wanted = (company.strip().lower(), position.strip().lower())
        if not any((t.company.lower(), t.position.lower()) == wanted for t in roadmap.target_companies):
            raise ValidationError("The specified company and position are not in the target companies list")
        data = self.generator.recommend_for_target(company.strip(), position.strip())
        items = data.get("recommendations")
        return {
            "company": company.strip(),
            "position": position.strip(),
            "recommendations": items if isinstance(items, list) else [],
        }
