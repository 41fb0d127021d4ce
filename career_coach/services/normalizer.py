"""Roadmap normalizer: untrusted generated payload -> canonical roadmap.

``normalize`` never raises. Missing or invalid fields are replaced by
defaults, enum values outside the known sets collapse to a fallback member,
and the caller's payload is left untouched (the normalizer reads a deep copy).

Keys are accepted in camelCase (what the generative prompt asks for) or
snake_case.

Rules worth knowing:
- time units go through ``UNIT_SYNONYMS`` with an exact, case-sensitive match;
  "year"/"years" become months with the amount multiplied by 12, anything
  unmatched becomes weeks.
- ``dependencies`` is always emptied. Generated payloads refer to other
  milestones by index, and nothing maps those indices to milestone ids.
- each milestone gets a fresh stable ``id``.
- ``estimatedTimelineMonths`` is capped at ``MAX_TIMELINE_MONTHS``.
"""
from __future__ import annotations

import copy
import math
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

from career_coach.core.logging import get_logger
from career_coach.models.domain import (
    AlternativeMilestone,
    AlternativeRoute,
    Difficulty,
    GptAnalysis,
    Milestone,
    MilestoneResource,
    MilestoneType,
    NormalizedRoadmap,
    RawRoadmap,
    ResourceType,
    TimeEstimate,
    TimeUnit,
)

logger = get_logger(__name__)

E = TypeVar("E", MilestoneType, Difficulty, ResourceType)

DEFAULT_TITLE = "Career Roadmap"
DEFAULT_TIMELINE_MONTHS = 6
MAX_TIMELINE_MONTHS = 120
DEFAULT_DIFFICULTY_SCORE = 5
DEFAULT_MILESTONE_DESCRIPTION = "No description provided."
DEFAULT_TIME_AMOUNT = 2
DEFAULT_TIME_UNIT = TimeUnit.WEEKS

# unit -> (canonical unit, amount multiplier); exact match only
UNIT_SYNONYMS: Dict[str, Tuple[TimeUnit, int]] = {
    "day": (TimeUnit.DAYS, 1),
    "days": (TimeUnit.DAYS, 1),
    "week": (TimeUnit.WEEKS, 1),
    "weeks": (TimeUnit.WEEKS, 1),
    "month": (TimeUnit.MONTHS, 1),
    "months": (TimeUnit.MONTHS, 1),
    "year": (TimeUnit.MONTHS, 12),
    "years": (TimeUnit.MONTHS, 12),
}


def _get(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _text(value: Any, default: str) -> str:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)) and math.isfinite(value):
        value = str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _positive_int(value: Any, default: int) -> int:
    number = _number(value)
    if number is None or number <= 0:
        return default
    return max(1, math.ceil(number))


def _int(value: Any) -> Optional[int]:
    number = _number(value)
    return int(number) if number is not None else None


def _enum(value: Any, enum_cls: Type[E], default: E) -> E:
    if isinstance(value, str):
        candidate = value.strip().lower()
        for member in enum_cls:
            if member.value == candidate:
                return member
    return default


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        text = _text(item, "")
        if text:
            out.append(text)
    return out


def _dict_or_empty(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def normalize_time_estimate(value: Any) -> TimeEstimate:
    """Coerce a raw ``timeEstimate`` into a positive amount and canonical unit."""
    if not isinstance(value, dict):
        return TimeEstimate(amount=DEFAULT_TIME_AMOUNT, unit=DEFAULT_TIME_UNIT)
    raw_unit = value.get("unit")
    unit, multiplier = UNIT_SYNONYMS.get(raw_unit, (DEFAULT_TIME_UNIT, 1)) if isinstance(raw_unit, str) else (DEFAULT_TIME_UNIT, 1)
    # scale before rounding so 1.5 years is 18 months, not 24
    raw_amount = _number(value.get("amount"))
    scaled = raw_amount * multiplier if raw_amount is not None else None
    amount = _positive_int(scaled, DEFAULT_TIME_AMOUNT * multiplier)
    return TimeEstimate(amount=amount, unit=unit)


def _normalize_resource(value: Any) -> Optional[MilestoneResource]:
    if isinstance(value, str) and value.strip():
        return MilestoneResource(title=value.strip())
    if not isinstance(value, dict):
        return None
    return MilestoneResource(
        title=_text(value.get("title"), ""),
        url=_text(value.get("url"), ""),
        type=_enum(value.get("type"), ResourceType, ResourceType.OTHER),
    )


def normalize_milestone(value: Any, index: int) -> Milestone:
    """Normalize the milestone found at ``index`` of the raw milestone list."""
    if isinstance(value, str):
        value = {"title": value}
    data = _dict_or_empty(value)

    resources = []
    raw_resources = data.get("resources")
    if isinstance(raw_resources, list):
        for item in raw_resources:
            resource = _normalize_resource(item)
            if resource is not None:
                resources.append(resource)

    order = _int(data.get("order"))
    return Milestone(
        title=_text(data.get("title"), f"Milestone {index + 1}"),
        description=_text(data.get("description"), DEFAULT_MILESTONE_DESCRIPTION),
        type=_enum(data.get("type"), MilestoneType, MilestoneType.OTHER),
        difficulty=_enum(data.get("difficulty"), Difficulty, Difficulty.INTERMEDIATE),
        time_estimate=normalize_time_estimate(_get(data, "timeEstimate", "time_estimate")),
        resources=resources,
        order=order if order is not None else index,
        completed=False,
        completion_date=None,
        dependencies=[],
    )


def _normalize_alternative_route(value: Any) -> Optional[AlternativeRoute]:
    if not isinstance(value, dict):
        return None
    milestones = []
    raw_milestones = value.get("milestones")
    if isinstance(raw_milestones, list):
        for item in raw_milestones:
            data = _dict_or_empty(item)
            milestones.append(
                AlternativeMilestone(
                    title=_text(data.get("title"), ""),
                    description=_text(data.get("description"), ""),
                    type=_enum(data.get("type"), MilestoneType, MilestoneType.OTHER),
                )
            )
    return AlternativeRoute(
        title=_text(value.get("title"), ""),
        description=_text(value.get("description"), ""),
        milestones=milestones,
    )


def _normalize_analysis(value: Any) -> GptAnalysis:
    data = _dict_or_empty(value)
    return GptAnalysis(
        reasoning=_text(data.get("reasoning"), ""),
        key_insights=_str_list(_get(data, "keyInsights", "key_insights")),
        market_trends=_str_list(_get(data, "marketTrends", "market_trends")),
        company_culture=_str_list(_get(data, "companyCulture", "company_culture")),
    )


def _copy_payload(raw: Union[RawRoadmap, Any]) -> Dict[str, Any]:
    payload = raw.payload if isinstance(raw, RawRoadmap) else raw
    try:
        data = copy.deepcopy(payload)
    except (TypeError, RecursionError, copy.Error):
        logger.warning("Roadmap payload could not be copied; treating it as empty")
        return {}
    return _dict_or_empty(data)


# PUBLIC_INTERFACE
def normalize(raw: Union[RawRoadmap, Any]) -> NormalizedRoadmap:
    """Turn an untrusted roadmap payload into a structurally valid roadmap.

    Args:
        raw: A ``RawRoadmap`` or the bare payload (any value, usually a dict).

    Returns:
        NormalizedRoadmap whose milestones satisfy every enum and range rule.
    """
    data = _copy_payload(raw)

    raw_milestones = _get(data, "milestones")
    milestones = []
    if isinstance(raw_milestones, list):
        milestones = [normalize_milestone(item, i) for i, item in enumerate(raw_milestones)]

    routes = []
    raw_routes = _get(data, "alternativeRoutes", "alternative_routes")
    if isinstance(raw_routes, list):
        for item in raw_routes:
            route = _normalize_alternative_route(item)
            if route is not None:
                routes.append(route)

    difficulty = _number(_get(data, "difficultyScore", "difficulty_score"))
    difficulty_score = DEFAULT_DIFFICULTY_SCORE if difficulty is None else min(10, max(1, round(difficulty)))

    return NormalizedRoadmap(
        title=_text(data.get("title"), DEFAULT_TITLE),
        description=_text(data.get("description"), ""),
        estimated_timeline_months=min(
            MAX_TIMELINE_MONTHS,
            _positive_int(_get(data, "estimatedTimelineMonths", "estimated_timeline_months"), DEFAULT_TIMELINE_MONTHS),
        ),
        difficulty_score=difficulty_score,
        milestones=milestones,
        alternative_routes=routes,
        gpt_analysis=_normalize_analysis(_get(data, "gptAnalysis", "gpt_analysis")),
    )
