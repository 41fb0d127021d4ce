"""Candidate profile endpoints that feed roadmap generation."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from career_coach.api.deps import get_profile_service
from career_coach.models.domain import Candidate, TargetCompany
from career_coach.routers.auth import get_current_candidate
from career_coach.services.candidates import ProfileService

router = APIRouter(prefix="/candidates", tags=["candidates"])


class ResumeUpdate(BaseModel):
    analysis: Dict[str, Any] = Field(..., description="Resume analysis produced by the resume parser")
    file_name: Optional[str] = Field(None, description="Original file name")


class TargetCompaniesUpdate(BaseModel):
    target_companies: List[TargetCompany] = Field(..., description="Replacement target list")


# PUBLIC_INTERFACE
@router.put("/me/resume", response_model=Candidate, summary="Set resume analysis", description="Store the current candidate's parsed resume analysis.")
def set_resume(payload: ResumeUpdate, current: Candidate = Depends(get_current_candidate), profiles: ProfileService = Depends(get_profile_service)):
    """Store resume analysis for the calling candidate."""
    return profiles.set_resume(current.id, payload.analysis, payload.file_name)


# PUBLIC_INTERFACE
@router.put("/me/target-companies", response_model=Candidate, summary="Set target companies", description="Replace target companies; regenerates the roadmap when a resume exists.")
def set_target_companies(
    payload: TargetCompaniesUpdate,
    current: Candidate = Depends(get_current_candidate),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Replace the calling candidate's target companies."""
    return profiles.set_target_companies(current.id, payload.target_companies)
