"""
Schema normalisation for portfolio content.

Raw JSON comes in a few historical shapes (flat portfolio files, files with a
nested ``details`` object, the localized bundle with ``ko``/``en`` entries,
string-or-list narrative fields). Everything is folded into the canonical
records of schema_portfolio here, once, at load time.
"""
from __future__ import annotations
import re
from typing import Any, Dict, Iterable, List, Optional

from portfolio_site.schema_portfolio import (
    STORY_FIELDS,
    EducationItem,
    ExperienceItem,
    Narrative,
    Profile,
    Project,
    ProjectStory,
    ResumeDocument,
    Skill,
    SocialLink,
)

_FIRST_NUMBER = re.compile(r"\d+")

# source key → canonical story field
_FIELD_ALIASES = {"lesson_learned": "lessons"}
_PLAIN_FIELDS = {"title", "hero_summary", "hero_image"}


class SchemaError(ValueError):
    """Raised when a record is too broken to normalise (e.g. no id)."""


# ───────────────────────────────────────── helpers ──
def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def to_narrative(value: Any) -> Optional[Narrative]:
    """String → prose, list → list. Empty input gives None so the section
    is left out instead of rendered empty."""
    if isinstance(value, str):
        text = value.strip()
        return Narrative("prose", (text,)) if text else None
    if isinstance(value, (list, tuple)):
        items = tuple(_text(v) for v in value if _text(v))
        return Narrative("list", items) if items else None
    return None


def _lookup(raw: Dict[str, Any], name: str) -> Any:
    if name in raw:
        return raw[name]
    for alias, target in _FIELD_ALIASES.items():
        if target == name and alias in raw:
            return raw[alias]
    return None


def _story(raw: Dict[str, Any], details: Optional[Dict[str, Any]] = None) -> ProjectStory:
    """Narrative fields come from ``details`` when given; title, summary and
    hero image prefer the top level and fall back to ``details``."""
    details = raw if details is None else details
    fields: Dict[str, Any] = {}
    for name in STORY_FIELDS:
        if name in _PLAIN_FIELDS:
            fields[name] = _text(_lookup(raw, name)) or _text(_lookup(details, name)) or None
        else:
            fields[name] = to_narrative(_lookup(details, name))
    return ProjectStory(**fields)


def _records(raw: Any) -> Iterable[Dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [r for r in raw if isinstance(r, dict)]


def project_number(project_id: str) -> int:
    """First integer embedded in an id (portfolio-03-x → 3), 0 if none."""
    m = _FIRST_NUMBER.search(project_id or "")
    return int(m.group()) if m else 0


# ───────────────────────────────────────── projects ──
def normalise_project(raw: Dict[str, Any], languages: Iterable[str] = ("ko", "en"),
                      default_language: str = "ko") -> Project:
    if not isinstance(raw, dict) or not _text(raw.get("id")):
        raise SchemaError("project record without an id")

    localized = {lang: raw[lang] for lang in languages if isinstance(raw.get(lang), dict)}
    if localized:
        stories = {lang: _story(body) for lang, body in localized.items()}
    else:
        # flat file, optionally with the narrative under "details"
        details = raw["details"] if isinstance(raw.get("details"), dict) else None
        stories = {default_language: _story(raw, details)}

    return Project(
        id=_text(raw["id"]),
        company=_text(raw.get("company")),
        period=_text(raw.get("period")),
        category=_text(raw.get("category")).lower(),
        stories=stories,
    )


def sort_projects(projects: List[Project]) -> List[Project]:
    """Ascending by id number; sorted() is stable so ties keep fetch order."""
    return sorted(projects, key=lambda p: project_number(p.id))


# ───────────────────────────────────────── résumé ──
def _skill_value(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip().rstrip("%"))
    except ValueError:
        return 0


def normalise_resume(raw: Dict[str, Any]) -> ResumeDocument:
    if not isinstance(raw, dict):
        raise SchemaError("résumé document must be an object")
    experience = tuple(
        ExperienceItem(
            title=_text(e.get("title")),
            period=_text(e.get("period")),
            company=_text(e.get("company")),
            description=_text(e.get("description")),
        )
        for e in _records(raw.get("experience"))
    )
    education = tuple(
        EducationItem(
            school=_text(e.get("school")),
            period=_text(e.get("period")),
            degree=_text(e.get("degree")),
            major=_text(e.get("major")),
            description=_text(e.get("description")),
        )
        for e in _records(raw.get("education"))
    )
    skills = tuple(
        Skill(
            name=_text(s.get("name")),
            value=_skill_value(s.get("value")),
            description=_text(s.get("description")),
        )
        for s in _records(raw.get("skills"))
    )
    return ResumeDocument(experience=experience, education=education, skills=skills)


# ───────────────────────────────────────── profile ──
def normalise_profile(raw: Dict[str, Any]) -> Profile:
    if not isinstance(raw, dict):
        raise SchemaError("profile document must be an object")
    links = tuple(
        SocialLink(name=_text(l.get("name")), url=_text(l.get("url")), icon=_text(l.get("icon")))
        for l in _records(raw.get("links"))
        if _text(l.get("url"))
    )
    return Profile(
        name=_text(raw.get("name")),
        job_title=_text(raw.get("jobTitle") or raw.get("job_title")),
        email=_text(raw.get("email")),
        phone=_text(raw.get("phone")),
        avatar=_text(raw.get("avatar")),
        links=links,
    )
