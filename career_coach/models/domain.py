"""Domain DTOs for users, resumes, job requirements, roadmaps, and progress."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, EmailStr, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


# --- Enumerations --------------------------------------------------------

class MilestoneType(str, Enum):
    PROJECT = "project"
    CERTIFICATION = "certification"
    COURSE = "course"
    SKILL = "skill"
    JOB = "job"
    INTERNSHIP = "internship"
    NETWORKING = "networking"
    EDUCATION = "education"
    OTHER = "other"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class TimeUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class ResourceType(str, Enum):
    ARTICLE = "article"
    VIDEO = "video"
    COURSE = "course"
    BOOK = "book"
    DOCUMENTATION = "documentation"
    TOOL = "tool"
    TUTORIAL = "tutorial"
    PODCAST = "podcast"
    WEBSITE = "website"
    COMMUNITY = "community"
    CERTIFICATION = "certification"
    PROJECT = "project"
    OTHER = "other"


# Milestone types counted by the skill-improvement score
SKILL_MILESTONE_TYPES = frozenset({MilestoneType.SKILL, MilestoneType.COURSE, MilestoneType.CERTIFICATION})


# --- Users ---------------------------------------------------------------

class TargetCompany(BaseModel):
    """A (company, position, priority) tuple a candidate is aiming for."""
    company: str = Field(..., min_length=1, description="Company name")
    position: str = Field(..., min_length=1, description="Position title")
    priority: int = Field(default=1, ge=1, description="1 = highest priority")


class Resume(BaseModel):
    """Uploaded resume record; ``analysis`` is whatever the resume parser produced."""
    id: str = Field(default_factory=new_id, description="Resume ID")
    file_name: Optional[str] = Field(None, description="Original file name")
    analysis: Dict[str, Any] = Field(default_factory=dict, description="Free-form resume analysis")
    uploaded_at: datetime = Field(default_factory=utcnow, description="Upload timestamp")


class CandidateSkill(BaseModel):
    name: str
    level: Optional[Difficulty] = None


class _UserBase(BaseModel):
    id: str = Field(default_factory=new_id, description="User identifier")
    email: EmailStr = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="Display name")
    created_at: datetime = Field(default_factory=utcnow)


class Candidate(_UserBase):
    """Job seeker. Owns at most one resume and at most one linked roadmap."""
    kind: Literal["candidate"] = "candidate"
    resume: Optional[Resume] = Field(None, description="Latest uploaded resume")
    target_companies: List[TargetCompany] = Field(default_factory=list)
    roadmap_id: Optional[str] = Field(None, description="Currently linked roadmap")
    skills: List[CandidateSkill] = Field(default_factory=list)
    experience: List[Dict[str, Any]] = Field(default_factory=list)
    education: List[Dict[str, Any]] = Field(default_factory=list)
    projects: List[Dict[str, Any]] = Field(default_factory=list)


class Recruiter(_UserBase):
    """Hiring-side user; publishes job requirements for a company."""
    kind: Literal["recruiter"] = "recruiter"
    company: str = Field(..., min_length=1, description="Employer")
    position: Optional[str] = Field(None, description="Recruiter's own title")


User = Annotated[Union[Candidate, Recruiter], Field(discriminator="kind")]


# --- Job requirements ----------------------------------------------------

class SkillRequirement(BaseModel):
    name: str = Field(..., min_length=1)
    level: Optional[Difficulty] = None
    required: bool = True


class ExperienceRange(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class EducationRequirement(BaseModel):
    degree: Optional[str] = None
    field: Optional[str] = None
    required: bool = False


class CertificationRequirement(BaseModel):
    name: str
    required: bool = False


class JobRequirement(BaseModel):
    """Recruiter-published requirements for one position at one company."""
    id: str = Field(default_factory=new_id)
    recruiter_id: str = Field(..., description="Owning recruiter")
    company: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    department: Optional[str] = None
    key_skills: List[SkillRequirement] = Field(default_factory=list)
    experience: ExperienceRange = Field(default_factory=ExperienceRange)
    education_requirements: List[EducationRequirement] = Field(default_factory=list)
    certifications: List[CertificationRequirement] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    job_description: Optional[str] = None
    status: Literal["active", "inactive", "filled"] = "active"
    created_at: datetime = Field(default_factory=utcnow)


# --- Roadmaps ------------------------------------------------------------

class RawRoadmap(BaseModel):
    """Untrusted roadmap payload produced outside this service.

    Nothing reads ``payload`` except the normalizer.
    """
    payload: Any = None
    source: Literal["generative", "fallback"] = "generative"


class TimeEstimate(BaseModel):
    amount: int = Field(default=2, gt=0)
    unit: TimeUnit = TimeUnit.WEEKS


class MilestoneResource(BaseModel):
    title: str = ""
    url: str = ""
    type: ResourceType = ResourceType.OTHER


class Milestone(BaseModel):
    """One actionable step; embedded in its roadmap, never shared."""
    id: str = Field(default_factory=new_id, description="Stable identifier within the roadmap")
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    type: MilestoneType = MilestoneType.OTHER
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    time_estimate: TimeEstimate = Field(default_factory=TimeEstimate)
    resources: List[MilestoneResource] = Field(default_factory=list)
    order: int = 0
    completed: bool = False
    completion_date: Optional[datetime] = None
    dependencies: List[str] = Field(default_factory=list)


class AlternativeMilestone(BaseModel):
    title: str = ""
    description: str = ""
    type: MilestoneType = MilestoneType.OTHER


class AlternativeRoute(BaseModel):
    title: str = ""
    description: str = ""
    milestones: List[AlternativeMilestone] = Field(default_factory=list)


class GptAnalysis(BaseModel):
    reasoning: str = ""
    key_insights: List[str] = Field(default_factory=list)
    market_trends: List[str] = Field(default_factory=list)
    company_culture: List[str] = Field(default_factory=list)


class NormalizedRoadmap(BaseModel):
    """Roadmap content that passed the normalizer and is safe to persist."""
    title: str = Field(..., min_length=1)
    description: str = ""
    estimated_timeline_months: int = Field(..., gt=0)
    difficulty_score: int = Field(..., ge=1, le=10)
    milestones: List[Milestone] = Field(default_factory=list)
    alternative_routes: List[AlternativeRoute] = Field(default_factory=list)
    gpt_analysis: GptAnalysis = Field(default_factory=GptAnalysis)


class TargetSnapshot(BaseModel):
    """Copy of a target taken when the roadmap was generated."""
    company: str
    position: str


class Roadmap(NormalizedRoadmap):
    """Persisted roadmap document owned by one candidate."""
    id: str = Field(default_factory=new_id, description="Roadmap ID")
    candidate_id: str = Field(..., description="Owning candidate")
    target_companies: List[TargetSnapshot] = Field(default_factory=list)
    source: Literal["generative", "fallback"] = "generative"
    created_at: datetime = Field(default_factory=utcnow, description="Timeline origin; never moved")
    updated_at: datetime = Field(default_factory=utcnow)


# --- Scoring -------------------------------------------------------------

class RemainingTime(BaseModel):
    days: int = Field(..., ge=0)
    months: int = Field(..., ge=0)


class ProgressReport(BaseModel):
    """Derived pacing metrics for one roadmap snapshot."""
    roadmap_id: str
    completion_percentage: int = Field(..., ge=0, le=100)
    time_progress: int = Field(..., ge=0, le=100)
    is_on_track: bool
    remaining_time: RemainingTime
    skill_improvement_score: int = Field(..., ge=0, le=100)
    completed_milestones: int = Field(..., ge=0)
    total_milestones: int = Field(..., ge=0)
    target_end_date: datetime
    next_milestone_id: Optional[str] = Field(None, description="Lowest-order incomplete milestone")


class CompatibilityReport(BaseModel):
    """Candidate-vs-job match analysis."""
    match_score: int = Field(..., ge=0, le=100)
    matching_strengths: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    estimated_time_to_close: Optional[TimeEstimate] = Field(None, description="Time needed to close the gaps")
    analysis: str = ""
    method: Literal["generative", "heuristic"] = "generative"
