"""
Canonical record shapes for portfolio content.

Raw JSON is turned into these once, by cleaner.normalise_*; renderers only
ever see these types.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple

NarrativeKind = Literal["prose", "list"]

# story fields a language entry may carry; anything else is ignored
STORY_FIELDS = (
    "title",
    "hero_summary",
    "hero_image",
    "background",
    "problem",
    "hypothesis",
    "actions",
    "results",
    "lessons",
)


@dataclass(frozen=True)
class Narrative:
    """A block of narrative text, either prose paragraphs or a bullet list."""
    kind: NarrativeKind
    items: Tuple[str, ...]


@dataclass(frozen=True)
class ProjectStory:
    """The language-dependent part of a project. Every field is optional so
    a partial translation can be merged over the default language."""
    title: Optional[str] = None
    hero_summary: Optional[str] = None
    hero_image: Optional[str] = None
    background: Optional[Narrative] = None
    problem: Optional[Narrative] = None
    hypothesis: Optional[Narrative] = None
    actions: Optional[Narrative] = None
    results: Optional[Narrative] = None
    lessons: Optional[Narrative] = None


@dataclass(frozen=True)
class Project:
    id: str
    company: str = ""
    period: str = ""
    category: str = ""
    stories: Dict[str, ProjectStory] = field(default_factory=dict)


@dataclass(frozen=True)
class LocalizedProject:
    """A project flattened to a single language, ready for rendering."""
    id: str
    company: str
    period: str
    category: str
    title: str
    hero_summary: str
    hero_image: Optional[str]
    background: Optional[Narrative]
    problem: Optional[Narrative]
    hypothesis: Optional[Narrative]
    actions: Optional[Narrative]
    results: Optional[Narrative]
    lessons: Optional[Narrative]


@dataclass(frozen=True)
class ExperienceItem:
    title: str = ""
    period: str = ""
    company: str = ""
    description: str = ""


@dataclass(frozen=True)
class EducationItem:
    school: str = ""
    period: str = ""
    degree: str = ""
    major: str = ""
    description: str = ""


@dataclass(frozen=True)
class Skill:
    name: str
    value: float = 0
    description: str = ""


@dataclass(frozen=True)
class ResumeDocument:
    experience: Tuple[ExperienceItem, ...] = ()
    education: Tuple[EducationItem, ...] = ()
    skills: Tuple[Skill, ...] = ()


@dataclass(frozen=True)
class SocialLink:
    name: str
    url: str
    icon: str


@dataclass(frozen=True)
class Profile:
    name: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    avatar: str = ""
    links: Tuple[SocialLink, ...] = ()
