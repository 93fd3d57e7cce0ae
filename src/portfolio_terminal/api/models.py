"""
Domain records returned by the portfolio REST API.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional


def _text(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class Skill:
    name: str
    category: str
    level: int = 1

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Skill":
        try:
            level = int(data.get("level") or 1)
        except (TypeError, ValueError):
            level = 1
        return cls(
            name=str(data.get("name", "")),
            category=_text(data, "category") or "General",
            level=max(level, 1),
        )


@dataclass(frozen=True)
class Project:
    title: str
    description: Optional[str] = None
    technologies: List[str] = field(default_factory=list)
    live_url: Optional[str] = None
    github_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        technologies = data.get("technologies") or []
        if isinstance(technologies, str):
            technologies = [t.strip() for t in technologies.split(",") if t.strip()]
        return cls(
            title=str(data.get("title", "")),
            description=_text(data, "description"),
            technologies=[str(t) for t in technologies],
            live_url=_text(data, "live_url"),
            github_url=_text(data, "github_url"),
        )


@dataclass(frozen=True)
class Experience:
    company: str
    position: str
    start_date: str
    end_date: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Experience":
        return cls(
            company=str(data.get("company", "")),
            position=str(data.get("position", "")),
            start_date=str(data.get("start_date", "")),
            end_date=_text(data, "end_date"),
            description=_text(data, "description"),
        )


@dataclass(frozen=True)
class Education:
    title: str
    institution: str
    start_date: str
    end_date: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Education":
        return cls(
            title=str(data.get("title", "")),
            institution=str(data.get("institution", "")),
            start_date=str(data.get("start_date", "")),
            end_date=_text(data, "end_date"),
            description=_text(data, "description"),
        )


@dataclass(frozen=True)
class UserProfile:
    name: Optional[str] = None
    role_title: Optional[str] = None
    role_subtitle: Optional[str] = None
    about_me: Optional[str] = None
    status: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        return cls(
            name=_text(data, "name"),
            role_title=_text(data, "role_title"),
            role_subtitle=_text(data, "role_subtitle"),
            about_me=_text(data, "about_me"),
            status=_text(data, "status"),
            email=_text(data, "email"),
            phone=_text(data, "phone"),
            location=_text(data, "location"),
            linkedin_url=_text(data, "linkedin_url"),
            github_url=_text(data, "github_url"),
        )
