"""Fixed roadmap template served when the generative service is unavailable.

The template depends only on the target position name, so two candidates
aiming at the same position receive the same plan.
"""
from __future__ import annotations

from career_coach.models.domain import RawRoadmap

FALLBACK_MILESTONE_COUNT = 4


# PUBLIC_INTERFACE
def fallback_roadmap(position: str) -> RawRoadmap:
    """Build the fallback payload for ``position`` (same shape the generator returns)."""
    position = position.strip() or "your target role"
    payload = {
        "title": f"Roadmap to {position}",
        "description": f"A general preparation plan for {position} roles.",
        "estimatedTimelineMonths": 6,
        "difficultyScore": 5,
        "milestones": [
            {
                "title": "Strengthen core skills",
                "description": f"Review the fundamentals most {position} interviews and job descriptions expect.",
                "type": "skill",
                "difficulty": "intermediate",
                "timeEstimate": {"amount": 6, "unit": "weeks"},
                "resources": [
                    {"title": "Official language and framework documentation", "url": "", "type": "documentation"},
                ],
                "order": 1,
            },
            {
                "title": "Build a portfolio project",
                "description": f"Ship one end-to-end project that shows the day-to-day work of a {position}.",
                "type": "project",
                "difficulty": "advanced",
                "timeEstimate": {"amount": 2, "unit": "months"},
                "resources": [],
                "order": 2,
            },
            {
                "title": "Polish your resume",
                "description": f"Rewrite your resume around measurable results relevant to {position} roles.",
                "type": "other",
                "difficulty": "beginner",
                "timeEstimate": {"amount": 1, "unit": "weeks"},
                "resources": [],
                "order": 3,
            },
            {
                "title": "Prepare for interviews",
                "description": "Practice technical and behavioral interviews with timed mock sessions.",
                "type": "skill",
                "difficulty": "intermediate",
                "timeEstimate": {"amount": 4, "unit": "weeks"},
                "resources": [
                    {"title": "Mock interview practice", "url": "", "type": "tool"},
                ],
                "order": 4,
            },
        ],
        "alternativeRoutes": [],
        "gptAnalysis": {
            "reasoning": "Generated from the standard template because personalized generation was unavailable.",
            "keyInsights": [],
            "marketTrends": [],
            "companyCulture": [],
        },
    }
    return RawRoadmap(payload=payload, source="fallback")
