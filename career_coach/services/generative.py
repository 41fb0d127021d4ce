"""Client for the external generative text service (OpenAI chat completions).

Every call asks for a JSON object and returns it as an untyped dict (or a
``RawRoadmap``); callers validate before trusting it. Failures are raised as
``ExternalServiceError`` with a ``kind`` that separates credential problems,
unreachable service, upstream errors, and malformed answers.

No caller-side timeout, retry, or caching: the request waits for the service,
and retries are whatever ``OPENAI_MAX_RETRIES`` lets the SDK transport do.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Protocol, Sequence

import openai
from openai import OpenAI

from career_coach.core.config import Settings
from career_coach.core.errors import ExternalServiceError
from career_coach.core.logging import get_logger
from career_coach.models.domain import JobRequirement, RawRoadmap, TargetCompany
from career_coach.services import prompts

logger = get_logger(__name__)

SERVICE_NAME = "openai"


class GenerativeCapability(Protocol):
    """What the services need from a text generator."""

    def generate_roadmap(
        self,
        resume_analysis: Dict[str, Any],
        target_companies: Sequence[TargetCompany],
        job_requirements: Sequence[JobRequirement],
    ) -> RawRoadmap: ...

    def score_candidate(self, candidate_profile: Dict[str, Any], job_requirements: Dict[str, Any]) -> Dict[str, Any]: ...

    def analyze_job_description(self, job_description: str) -> Dict[str, Any]: ...

    def recommend_for_target(self, company: str, position: str) -> Dict[str, Any]: ...


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str)


def _requirement_context(requirements: Sequence[JobRequirement]) -> List[Dict[str, Any]]:
    return [
        r.model_dump(mode="json", exclude={"id", "recruiter_id", "created_at", "status"})
        for r in requirements
    ]


class OpenAIGenerativeClient:
    """``GenerativeCapability`` backed by the OpenAI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o",
        base_url: Optional[str] = None,
        max_retries: int = 0,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self._client = client
        if self._client is None and api_key:
            self._client = OpenAI(api_key=api_key, base_url=base_url, max_retries=max_retries)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIGenerativeClient":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            max_retries=settings.openai_max_retries,
        )

    def _complete_json(self, system: str, user: str, purpose: str) -> Dict[str, Any]:
        if self._client is None:
            raise ExternalServiceError(SERVICE_NAME, "API key is not configured", kind="config")
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                response_format={"type": "json_object"},
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            logger.warning(f"Generative {purpose} rejected credentials")
            raise ExternalServiceError(SERVICE_NAME, "credentials rejected", kind="auth") from exc
        except openai.APIConnectionError as exc:
            # includes APITimeoutError
            logger.warning(f"Generative {purpose} unreachable: {exc.__class__.__name__}")
            raise ExternalServiceError(SERVICE_NAME, "service unreachable", kind="unavailable") from exc
        except openai.APIError as exc:
            logger.error(f"Generative {purpose} failed: {exc.__class__.__name__}")
            raise ExternalServiceError(SERVICE_NAME, "request failed", kind="upstream") from exc

        try:
            content = response.choices[0].message.content
            data = json.loads(content)
        except (AttributeError, IndexError, TypeError, ValueError, RecursionError) as exc:
            logger.error(f"Generative {purpose} returned unparseable content")
            raise ExternalServiceError(SERVICE_NAME, "response was not valid JSON", kind="malformed") from exc
        if not isinstance(data, dict):
            raise ExternalServiceError(SERVICE_NAME, "response was not a JSON object", kind="malformed")
        return data

    def generate_roadmap(
        self,
        resume_analysis: Dict[str, Any],
        target_companies: Sequence[TargetCompany],
        job_requirements: Sequence[JobRequirement],
    ) -> RawRoadmap:
        block = ""
        if job_requirements:
            block = prompts.JOB_REQUIREMENTS_BLOCK.format(job_requirements=_dumps(_requirement_context(job_requirements)))
        user = prompts.ROADMAP_USER.format(
            resume_analysis=_dumps(resume_analysis),
            target_companies=_dumps([t.model_dump(mode="json") for t in target_companies]),
            job_requirements_block=block,
        )
        payload = self._complete_json(prompts.ROADMAP_SYSTEM, user, "roadmap generation")
        return RawRoadmap(payload=payload, source="generative")

    def score_candidate(self, candidate_profile: Dict[str, Any], job_requirements: Dict[str, Any]) -> Dict[str, Any]:
        user = prompts.COMPATIBILITY_USER.format(
            candidate_profile=_dumps(candidate_profile),
            job_requirements=_dumps(job_requirements),
        )
        return self._complete_json(prompts.COMPATIBILITY_SYSTEM, user, "compatibility scoring")

    def analyze_job_description(self, job_description: str) -> Dict[str, Any]:
        user = prompts.JOB_ANALYSIS_USER.format(job_description=job_description)
        return self._complete_json(prompts.JOB_ANALYSIS_SYSTEM, user, "job analysis")

    def recommend_for_target(self, company: str, position: str) -> Dict[str, Any]:
        user = prompts.TARGET_RECOMMENDATIONS_USER.format(company=company, position=position)
        return self._complete_json(prompts.TARGET_RECOMMENDATIONS_SYSTEM, user, "target recommendations")
