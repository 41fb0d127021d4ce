"""Candidate-vs-job compatibility scoring.

``CompatibilityScorer.score`` asks the generative service and fails with
``ExternalServiceError`` on any problem, without retrying. ``heuristic_score``
is the local fallback a caller may use instead: the share of required job
skills that overlap (substring, case-insensitive) with the candidate's skills.
"""
from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional

from career_coach.core.errors import ExternalServiceError
from career_coach.core.logging import get_logger
from career_coach.models.domain import Candidate, CompatibilityReport, Roadmap
from career_coach.services.generative import SERVICE_NAME, GenerativeCapability
from career_coach.services.normalizer import normalize_time_estimate

logger = get_logger(__name__)


def build_candidate_profile(candidate: Candidate, roadmap: Optional[Roadmap] = None) -> Dict[str, Any]:
    """Assemble the profile sent for scoring: profile fields, resume analysis, roadmap state."""
    milestones = [m.model_dump(mode="json", include={"title", "type", "completed"}) for m in roadmap.milestones] if roadmap else []
    return {
        "skills": [s.model_dump(mode="json") for s in candidate.skills],
        "experience": candidate.experience,
        "education": candidate.education,
        "projects": candidate.projects,
        "resume": candidate.resume.analysis if candidate.resume else {},
        "roadmap": {
            "milestones": milestones,
            "completedMilestones": [m for m in milestones if m["completed"]],
        },
    }


def _strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def parse_report(data: Dict[str, Any]) -> CompatibilityReport:
    """Validate the generative answer; a missing or non-numeric score is malformed."""
    raw_score = data.get("matchScore", data.get("match_score"))
    if isinstance(raw_score, bool) or not isinstance(raw_score, (int, float)) or not math.isfinite(raw_score):
        raise ExternalServiceError(SERVICE_NAME, "compatibility response has no numeric matchScore", kind="malformed")
    analysis = data.get("analysis")
    time_to_close = data.get("estimatedTimeToClose", data.get("estimated_time_to_close"))
    return CompatibilityReport(
        match_score=min(100, max(0, round(raw_score))),
        matching_strengths=_strings(data.get("matchingStrengths", data.get("matching_strengths"))),
        gaps=_strings(data.get("gaps")),
        recommendations=_strings(data.get("recommendations")),
        analysis=analysis.strip() if isinstance(analysis, str) else "",
        estimated_time_to_close=normalize_time_estimate(time_to_close) if isinstance(time_to_close, dict) else None,
        method="generative",
    )


class CompatibilityScorer:
    """Scores candidates against job requirements with the generative service."""

    def __init__(self, generator: GenerativeCapability):
        self.generator = generator

    def score(self, candidate_profile: Dict[str, Any], job_requirements: Dict[str, Any]) -> CompatibilityReport:
        data = self.generator.score_candidate(candidate_profile, job_requirements)
        report = parse_report(data)
        logger.info(f"Compatibility scored generatively: {report.match_score}")
        return report


def _skill_name(item: Any) -> Optional[str]:
    if isinstance(item, str):
        name = item
    elif isinstance(item, dict):
        name = item.get("name")
    else:
        return None
    return name.strip() if isinstance(name, str) and name.strip() else None


def _names(items: Iterable[Any]) -> List[str]:
    return [n for n in (_skill_name(i) for i in items) if n]


def required_skills(job_requirements: Dict[str, Any]) -> List[str]:
    """Required skill names; when none are flagged required, every listed skill counts."""
    listed: List[Any] = []
    for key in ("keySkills", "key_skills", "requiredSkills", "required_skills"):
        value = job_requirements.get(key)
        if isinstance(value, list):
            listed.extend(value)
    required = [s for s in listed if not (isinstance(s, dict) and s.get("required") is False)]
    return _names(required or listed)


def candidate_skills(candidate_profile: Dict[str, Any]) -> List[str]:
    skills = candidate_profile.get("skills")
    names = _names(skills) if isinstance(skills, list) else []
    resume = candidate_profile.get("resume")
    if isinstance(resume, dict):
        for key in ("skills", "keySkills", "key_skills"):
            value = resume.get(key)
            if isinstance(value, list):
                names.extend(_names(value))
    return names


# PUBLIC_INTERFACE
def heuristic_score(candidate_profile: Dict[str, Any], job_requirements: Dict[str, Any]) -> CompatibilityReport:
    """Local fallback: percentage of required skills matched by a candidate skill."""
    required = required_skills(job_requirements)
    have = [s.lower() for s in candidate_skills(candidate_profile)]
    matched: List[str] = []
    missing: List[str] = []
    for skill in required:
        needle = skill.lower()
        if any(needle in own or own in needle for own in have):
            matched.append(skill)
        else:
            missing.append(skill)
    score = round(100 * len(matched) / len(required)) if required else 0
    if required:
        analysis = f"Matched {len(matched)} of {len(required)} required skills by name."
    else:
        analysis = "The job requirements list no skills to compare against."
    return CompatibilityReport(
        match_score=score,
        matching_strengths=matched,
        gaps=missing,
        recommendations=[f"Build experience with {s}" for s in missing],
        analysis=analysis,
        method="heuristic",
    )
