"""Roadmap endpoints.

``/roadmap`` acts on the calling candidate's own roadmap; ``/roadmaps/{id}``
reads any roadmap the caller may see (its owner or any recruiter).
"""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from career_coach.api.deps import get_compatibility_scorer, get_roadmap_service, get_user_store
from career_coach.core.errors import ExternalServiceError, ForbiddenError, NotFoundError, ValidationError
from career_coach.core.logging import get_logger
from career_coach.db.stores import UserStore
from career_coach.models.domain import Candidate, CompatibilityReport, ProgressReport, Recruiter, Roadmap, User
from career_coach.routers.auth import get_current_candidate, get_current_recruiter, get_current_user
from career_coach.services.compatibility import CompatibilityScorer, build_candidate_profile, heuristic_score
from career_coach.services.progress import score_progress
from career_coach.services.roadmaps import RoadmapService

logger = get_logger(__name__)

router = APIRouter(tags=["roadmaps"])


class MilestoneIndexUpdate(BaseModel):
    milestone_index: int = Field(..., description="Position of the milestone in the roadmap")
    completed: bool = Field(..., description="New completion state")


class MilestoneUpdate(BaseModel):
    completed: bool = Field(..., description="New completion state")


class CompatibilityRequest(BaseModel):
    job_requirements: Dict[str, Any] = Field(..., description="Job requirements to score against")


def _readable(roadmap: Roadmap, user: User) -> Roadmap:
    if isinstance(user, Recruiter) or roadmap.candidate_id == user.id:
        return roadmap
    raise ForbiddenError("Not allowed to view this roadmap")


# PUBLIC_INTERFACE
@router.post("/roadmap", response_model=Roadmap, summary="Generate roadmap", description="Generate and link a new roadmap for the current candidate.")
def generate_roadmap(current: Candidate = Depends(get_current_candidate), service: RoadmapService = Depends(get_roadmap_service)):
    """Generate a roadmap for the calling candidate."""
    return service.generate(current.id)


# PUBLIC_INTERFACE
@router.post("/roadmap/regenerate", response_model=Roadmap, summary="Regenerate roadmap", description="Replace the current candidate's roadmap.")
def regenerate_roadmap(current: Candidate = Depends(get_current_candidate), service: RoadmapService = Depends(get_roadmap_service)):
    """Delete and regenerate the calling candidate's roadmap."""
    return service.regenerate(current.id)


# PUBLIC_INTERFACE
@router.get("/roadmap", response_model=Roadmap, summary="My roadmap", description="Return the current candidate's linked roadmap.")
def my_roadmap(current: Candidate = Depends(get_current_candidate), service: RoadmapService = Depends(get_roadmap_service)):
    """Return the calling candidate's roadmap."""
    return service.get_for_candidate(current.id)


# PUBLIC_INTERFACE
@router.put("/roadmap/milestone", response_model=Roadmap, summary="Update milestone by index", description="Set a milestone's completion by its position.")
def update_milestone_by_index(
    payload: MilestoneIndexUpdate,
    current: Candidate = Depends(get_current_candidate),
    service: RoadmapService = Depends(get_roadmap_service),
):
    """Positional milestone update on the caller's roadmap."""
    if not current.roadmap_id:
        raise NotFoundError("Roadmap not found")
    return service.set_milestone_status(current.roadmap_id, payload.milestone_index, payload.completed, actor_id=current.id)


# PUBLIC_INTERFACE
@router.put("/roadmap/milestones/{milestone_id}", response_model=Roadmap, summary="Update milestone", description="Set a milestone's completion by its stable id.")
def update_milestone(
    milestone_id: str,
    payload: MilestoneUpdate,
    current: Candidate = Depends(get_current_candidate),
    service: RoadmapService = Depends(get_roadmap_service),
):
    """Id-keyed milestone update on the caller's roadmap."""
    if not current.roadmap_id:
        raise NotFoundError("Roadmap not found")
    return service.set_milestone_status_by_id(current.roadmap_id, milestone_id, payload.completed, actor_id=current.id)


# PUBLIC_INTERFACE
@router.get("/roadmaps/{roadmap_id}", response_model=Roadmap, summary="Get roadmap", description="Return a roadmap by id.")
def get_roadmap(roadmap_id: str, current: User = Depends(get_current_user), service: RoadmapService = Depends(get_roadmap_service)):
    """Return a roadmap visible to the caller."""
    return _readable(service.get(roadmap_id), current)


# PUBLIC_INTERFACE
@router.get("/roadmaps/{roadmap_id}/progress", response_model=ProgressReport, summary="Roadmap progress", description="Completion, pacing, and skill metrics.")
def roadmap_progress(roadmap_id: str, current: User = Depends(get_current_user), service: RoadmapService = Depends(get_roadmap_service)):
    """Score progress on a roadmap visible to the caller."""
    return score_progress(_readable(service.get(roadmap_id), current))


# PUBLIC_INTERFACE
@router.get("/roadmaps/{roadmap_id}/recommendations", summary="Target recommendations", description="Advice for one of the roadmap's target companies.")
def target_recommendations(
    roadmap_id: str,
    company: str = Query(..., min_length=1, description="Target company"),
    position: str = Query(..., min_length=1, description="Target position"),
    current: User = Depends(get_current_user),
    service: RoadmapService = Depends(get_roadmap_service),
):
    """Return generated recommendations for a company/position on the roadmap."""
    _readable(service.get(roadmap_id), current)
    return service.recommend_for_target(roadmap_id, company, position)


# PUBLIC_INTERFACE
@router.post("/roadmaps/compatibility/{candidate_id}", response_model=CompatibilityReport, summary="Candidate compatibility", description="Score a candidate against job requirements.")
def candidate_compatibility(
    candidate_id: str,
    payload: CompatibilityRequest,
    current: Recruiter = Depends(get_current_recruiter),
    users: UserStore = Depends(get_user_store),
    service: RoadmapService = Depends(get_roadmap_service),
    scorer: CompatibilityScorer = Depends(get_compatibility_scorer),
):
    """Generative score, or the skill-overlap heuristic when the service fails."""
    if not payload.job_requirements:
        raise ValidationError("Job requirements are required")
    candidate = users.get_candidate(candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate not found")
    roadmap = None
    if candidate.roadmap_id:
        try:
            roadmap = service.get(candidate.roadmap_id)
        except NotFoundError:
            roadmap = None
    profile = build_candidate_profile(candidate, roadmap)
    try:
        return scorer.score(profile, payload.job_requirements)
    except ExternalServiceError as exc:
        logger.warning(f"Compatibility scoring fell back to heuristic ({exc.kind}) for {candidate_id}")
        return heuristic_score(profile, payload.job_requirements)
