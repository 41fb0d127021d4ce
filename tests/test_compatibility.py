import pytest

from career_coach.core.errors import ExternalServiceError
from career_coach.models.domain import CandidateSkill, Difficulty, TimeUnit
from career_coach.services.compatibility import (
    CompatibilityScorer,
    build_candidate_profile,
    heuristic_score,
    parse_report,
    required_skills,
)

from conftest import make_candidate


def test_scorer_returns_generative_report(fake_generator):
    report = CompatibilityScorer(fake_generator).score({"skills": []}, {"position": "Dev"})

    assert report.match_score == 82
    assert report.method == "generative"
    assert report.matching_strengths == ["JavaScript"]
    assert report.gaps == ["Go"]
    assert len(fake_generator.score_calls) == 1


def test_scorer_does_not_retry(fake_generator):
    fake_generator.score_error = ExternalServiceError("openai", "down", kind="unavailable")

    with pytest.raises(ExternalServiceError):
        CompatibilityScorer(fake_generator).score({}, {})
    assert len(fake_generator.score_calls) == 1


@pytest.mark.parametrize("payload", [{}, {"matchScore": "82"}, {"matchScore": None}, {"matchScore": True}])
def test_missing_or_non_numeric_score_is_malformed(payload):
    with pytest.raises(ExternalServiceError) as exc:
        parse_report(payload)
    assert exc.value.kind == "malformed"


def test_score_is_rounded_and_clamped():
    assert parse_report({"matchScore": 140}).match_score == 100
    assert parse_report({"matchScore": -3}).match_score == 0
    assert parse_report({"matchScore": 67.6}).match_score == 68


def test_report_lists_drop_non_strings():
    report = parse_report({"matchScore": 50, "gaps": ["Go", 3, "", None], "recommendations": "x", "analysis": 9})
    assert report.gaps == ["Go"]
    assert report.recommendations == []
    assert report.analysis == ""


def test_required_skills_ignores_optional_ones():
    reqs = {
        "keySkills": [
            {"name": "Python", "required": True},
            {"name": "Rust", "required": False},
            "SQL",
        ]
    }
    assert required_skills(reqs) == ["Python", "SQL"]


def test_required_skills_uses_all_when_none_required():
    reqs = {"key_skills": [{"name": "Go", "required": False}, {"name": "K8s", "required": False}]}
    assert required_skills(reqs) == ["Go", "K8s"]


def test_heuristic_matches_by_substring_both_ways():
    profile = {"skills": [{"name": "JavaScript"}], "resume": {"skills": ["PostgreSQL", "docker"]}}
    reqs = {"keySkills": [{"name": "Java"}, {"name": "SQL"}, {"name": "Docker Compose"}, {"name": "Go"}]}

    report = heuristic_score(profile, reqs)

    assert report.method == "heuristic"
    assert report.matching_strengths == ["Java", "SQL", "Docker Compose"]
    assert report.gaps == ["Go"]
    assert report.match_score == 75
    assert report.recommendations == ["Build experience with Go"]


def test_heuristic_without_listed_skills_scores_zero():
    report = heuristic_score({"skills": [{"name": "Python"}]}, {"position": "Dev"})
    assert report.match_score == 0
    assert "no skills" in report.analysis


def test_profile_includes_resume_and_roadmap_state(service, users):
    candidate = make_candidate()
    candidate.skills = [CandidateSkill(name="Python", level=Difficulty.ADVANCED)]
    users.save_user(candidate)
    roadmap = service.generate(candidate.id)
    roadmap = service.set_milestone_status(roadmap.id, 0, True)

    profile = build_candidate_profile(users.get_candidate(candidate.id), roadmap)

    assert profile["skills"] == [{"name": "Python", "level": "advanced"}]
    assert profile["resume"] == {"skills": ["JavaScript"]}
    assert len(profile["roadmap"]["milestones"]) == 3
    assert [m["title"] for m in profile["roadmap"]["completedMilestones"]] == ["Learn Node.js internals"]


def test_profile_without_roadmap():
    profile = build_candidate_profile(make_candidate(with_resume=False))
    assert profile["resume"] == {}
    assert profile["roadmap"] == {"milestones": [], "completedMilestones": []}


def test_time_to_close_is_normalized():
    report = parse_report({"matchScore": 70, "estimatedTimeToClose": {"amount": 1.5, "unit": "years"}})

    assert report.estimated_time_to_close.amount == 18
    assert report.estimated_time_to_close.unit == TimeUnit.MONTHS
    assert parse_report({"matchScore": 70, "estimatedTimeToClose": "soon"}).estimated_time_to_close is None
    assert heuristic_score({}, {"keySkills": ["Go"]}).estimated_time_to_close is None
