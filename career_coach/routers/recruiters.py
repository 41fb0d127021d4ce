"""Recruiter job requirement endpoints."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from career_coach.api.deps import get_generator, get_job_requirement_store, get_profile_service
from career_coach.db.stores import JobRequirementStore
from career_coach.models.domain import (
    CertificationRequirement,
    EducationRequirement,
    ExperienceRange,
    JobRequirement,
    Recruiter,
    SkillRequirement,
)
from career_coach.routers.auth import get_current_recruiter
from career_coach.services.candidates import ProfileService
from career_coach.services.generative import GenerativeCapability

router = APIRouter(prefix="/recruiters", tags=["recruiters"])


class JobRequirementCreate(BaseModel):
    position: str = Field(..., min_length=2)
    company: Optional[str] = Field(None, description="Defaults to the recruiter's company")
    department: Optional[str] = None
    key_skills: List[SkillRequirement] = Field(default_factory=list)
    experience: ExperienceRange = Field(default_factory=ExperienceRange)
    education_requirements: List[EducationRequirement] = Field(default_factory=list)
    certifications: List[CertificationRequirement] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    job_description: Optional[str] = None


class JobDescriptionIn(BaseModel):
    job_description: str = Field(..., min_length=20)


# PUBLIC_INTERFACE
@router.post("/me/job-requirements", response_model=JobRequirement, status_code=status.HTTP_201_CREATED, summary="Add job requirement", description="Publish requirements for a position.")
def add_job_requirement(
    payload: JobRequirementCreate,
    current: Recruiter = Depends(get_current_recruiter),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Store a job requirement owned by the calling recruiter."""
    data = payload.model_dump()
    data["company"] = (payload.company or current.company).strip()
    data["position"] = payload.position.strip()
    return profiles.add_job_requirement(JobRequirement(recruiter_id=current.id, **data))


# PUBLIC_INTERFACE
@router.get("/me/job-requirements", response_model=List[JobRequirement], summary="List my job requirements", description="Requirements published by the current recruiter.")
def list_job_requirements(current: Recruiter = Depends(get_current_recruiter), store: JobRequirementStore = Depends(get_job_requirement_store)):
    """List the calling recruiter's job requirements."""
    return store.list_for_recruiter(current.id)


# PUBLIC_INTERFACE
@router.post("/me/job-requirements/analyze", summary="Analyze job description", description="Extract structured requirements from job description text.")
def analyze_job_description(
    payload: JobDescriptionIn,
    current: Recruiter = Depends(get_current_recruiter),
    generator: GenerativeCapability = Depends(get_generator),
) -> Dict[str, Any]:
    """Return the generative service's structured reading of a job description."""
    return generator.analyze_job_description(payload.job_description.strip())
