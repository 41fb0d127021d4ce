import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from career_coach.core.config import load_settings
from career_coach.core.errors import ExternalServiceError
from career_coach.models.domain import JobRequirement, SkillRequirement, TargetCompany
from career_coach.services.generative import OpenAIGenerativeClient

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client_returning(content):
    sdk = MagicMock()
    sdk.chat.completions.create.return_value = _response(content)
    return OpenAIGenerativeClient(client=sdk, model="test-model"), sdk


def _client_raising(error):
    sdk = MagicMock()
    sdk.chat.completions.create.side_effect = error
    return OpenAIGenerativeClient(client=sdk)


def _status_error(cls, code):
    return cls("failed", response=httpx.Response(code, request=REQUEST), body=None)


def _user_prompt(sdk):
    messages = sdk.chat.completions.create.call_args.kwargs["messages"]
    return messages[1]["content"]


def test_generate_roadmap_wraps_payload():
    client, sdk = _client_returning(json.dumps({"title": "Plan", "milestones": []}))

    raw = client.generate_roadmap({"skills": ["Go"]}, [TargetCompany(company="Acme", position="SRE")], [])

    assert raw.source == "generative"
    assert raw.payload == {"title": "Plan", "milestones": []}
    kwargs = sdk.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "Acme" in _user_prompt(sdk)
    assert "Job Requirements from Recruiters" not in _user_prompt(sdk)


def test_generate_roadmap_includes_job_requirements_when_present():
    client, sdk = _client_returning("{}")
    requirement = JobRequirement(
        recruiter_id="secret-recruiter", company="Acme", position="SRE", key_skills=[SkillRequirement(name="Terraform")]
    )

    client.generate_roadmap({}, [TargetCompany(company="Acme", position="SRE")], [requirement])

    prompt = _user_prompt(sdk)
    assert "Job Requirements from Recruiters" in prompt
    assert "Terraform" in prompt
    assert "secret-recruiter" not in prompt


def test_missing_api_key_is_config_error():
    client = OpenAIGenerativeClient(api_key=None)

    with pytest.raises(ExternalServiceError) as exc:
        client.score_candidate({}, {})
    assert exc.value.kind == "config"
    assert exc.value.status_code == 502


def test_from_settings_without_key_has_no_client():
    client = OpenAIGenerativeClient.from_settings(load_settings())
    with pytest.raises(ExternalServiceError) as exc:
        client.analyze_job_description("We need a backend engineer with Go")
    assert exc.value.kind == "config"


@pytest.mark.parametrize(
    "error, kind",
    [
        (_status_error(openai.AuthenticationError, 401), "auth"),
        (_status_error(openai.PermissionDeniedError, 403), "auth"),
        (openai.APIConnectionError(request=REQUEST), "unavailable"),
        (openai.APITimeoutError(request=REQUEST), "unavailable"),
        (_status_error(openai.RateLimitError, 429), "upstream"),
        (_status_error(openai.InternalServerError, 500), "upstream"),
    ],
)
def test_sdk_errors_map_to_kinds(error, kind):
    client = _client_raising(error)

    with pytest.raises(ExternalServiceError) as exc:
        client.recommend_for_target("Acme", "SRE")
    assert exc.value.kind == kind
    assert exc.value.details == {"service": "openai", "kind": kind}


@pytest.mark.parametrize("content", ["not json", None, "[1, 2]", '"text"'])
def test_unparseable_or_non_object_content_is_malformed(content):
    client, _ = _client_returning(content)

    with pytest.raises(ExternalServiceError) as exc:
        client.score_candidate({}, {})
    assert exc.value.kind == "malformed"


def test_empty_choices_is_malformed():
    sdk = MagicMock()
    sdk.chat.completions.create.return_value = SimpleNamespace(choices=[])
    client = OpenAIGenerativeClient(client=sdk)

    with pytest.raises(ExternalServiceError) as exc:
        client.analyze_job_description("A long enough job description")
    assert exc.value.kind == "malformed"


def test_deeply_nested_json_is_malformed():
    depth = 100000
    client, _ = _client_returning('{"milestones": ' + "[" * depth + "]" * depth + "}")

    with pytest.raises(ExternalServiceError) as exc:
        client.generate_roadmap({}, [TargetCompany(company="Acme", position="SRE")], [])
    assert exc.value.kind == "malformed"
