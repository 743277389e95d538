#!/usr/bin/env python3
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from text_normalizer import normalize_text, parse_skills

EXPLANATION_SEPARATOR = " • "

DEFAULT_MIN_HOURS = 0.0
DEFAULT_MAX_HOURS = 40.0


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _normalize_locations(values: Iterable[Any]) -> FrozenSet[str]:
    return frozenset(n for n in (normalize_text(v) for v in values) if n)


def _coerce_hours(value: Any, default: float) -> float:
    # entradas no numéricas -> default; negativas -> 0
    if value is None or isinstance(value, bool):
        return default
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return default
    if hours != hours:  # NaN
        return default
    return max(0.0, hours)


def parse_timestamp(value: Any) -> datetime:
    """Acepta datetime o ISO-8601; los valores sin zona se asumen UTC."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        ts = datetime.fromisoformat(raw)
    else:
        raise ValueError(f"timestamp inválido: {value!r}")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class VolunteerProfile:
    bio: str = ""
    skills: FrozenSet[str] = field(default_factory=frozenset)
    locations: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "VolunteerProfile":
        data = data or {}
        raw_skills = data.get("skills")
        skills = parse_skills(raw_skills if isinstance(raw_skills, str) else _as_list(raw_skills))
        return cls(
            bio=str(data.get("bio") or ""),
            skills=frozenset(skills),
            locations=_normalize_locations(_as_list(data.get("locations"))),
        )

    @property
    def text(self) -> str:
        return " ".join([self.bio, " ".join(sorted(self.skills))])

    def is_empty(self) -> bool:
        return not self.bio.strip() and not self.skills


@dataclass(frozen=True)
class OpportunityPosting:
    id: str
    title: str
    description: str
    skills_required: FrozenSet[str]
    estimated_hours: float
    created_at: datetime
    location: Optional[str] = None
    active: bool = True
    organization_ref: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OpportunityPosting":
        raw_skills = data.get("skills_required", data.get("skillsRequired"))
        hours = data.get("estimated_hours", data.get("estimatedHours"))
        created = data.get("created_at", data.get("createdAt"))
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            skills_required=frozenset(parse_skills(raw_skills if isinstance(raw_skills, str) else _as_list(raw_skills))),
            estimated_hours=_coerce_hours(hours, 0.0),
            created_at=parse_timestamp(created),
            location=(data.get("location") or None),
            active=bool(data.get("active", True)),
            organization_ref=data.get("organization_ref", data.get("organizationRef")),
        )

    @property
    def text(self) -> str:
        return " ".join([self.title, self.description, " ".join(sorted(self.skills_required))])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "estimated_hours": self.estimated_hours,
            "skills_required": sorted(self.skills_required),
            "location": self.location,
            "created_at": self.created_at.isoformat(),
            "active": self.active,
            "organization_ref": self.organization_ref,
        }


@dataclass(frozen=True)
class SearchFilter:
    query: str = ""
    skills: Tuple[str, ...] = ()
    min_hours: float = DEFAULT_MIN_HOURS
    max_hours: float = DEFAULT_MAX_HOURS
    locations: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SearchFilter":
        data = data or {}
        skills = parse_skills(_as_list(data.get("skills")))
        locations = []
        for loc in _as_list(data.get("locations", data.get("location"))):
            loc = str(loc or "").strip()
            if loc and loc not in locations:
                locations.append(loc)
        return cls(
            query=str(data.get("query") or ""),
            skills=tuple(skills),
            min_hours=_coerce_hours(data.get("min_hours", data.get("minHours")), DEFAULT_MIN_HOURS),
            max_hours=_coerce_hours(data.get("max_hours", data.get("maxHours")), DEFAULT_MAX_HOURS),
            locations=tuple(locations),
        )

    def cache_key(self) -> str:
        payload = {
            "query": self.query.strip(),
            "skills": sorted(self.skills),
            "min_hours": self.min_hours,
            "max_hours": self.max_hours,
            "locations": sorted(self.locations),
        }
        return json.dumps(payload, sort_keys=True, ensure_ascii=False)


@dataclass(frozen=True)
class CompatibilityScore:
    value: float
    explanation: Tuple[str, ...]

    @property
    def summary(self) -> str:
        return EXPLANATION_SEPARATOR.join(self.explanation)


@dataclass(frozen=True)
class RankedResult:
    posting: OpportunityPosting
    score: CompatibilityScore

    def to_dict(self) -> Dict[str, Any]:
        p = self.posting
        return {
            "id": p.id,
            "title": p.title,
            "description": p.description,
            "estimated_hours": p.estimated_hours,
            "skills_required": sorted(p.skills_required),
            "location": p.location,
            "created_at": p.created_at.isoformat(),
            "organization_ref": p.organization_ref,
            "compatibility_score": self.score.value,
            "match_explanation": self.score.summary,
        }
