"""
Records → HTML fragments.

Every function here is pure: it takes canonical records plus a translator
and returns markup. Putting the markup into the page is page.py's job.
"""

from __future__ import annotations
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from portfolio_site.config import CARD_SIZE_PATTERN, DEFAULT_METRIC_SUFFIXES, PROJECT_IMAGE_PATTERN
from portfolio_site.schema_portfolio import (
    EducationItem,
    ExperienceItem,
    LocalizedProject,
    Skill,
    SocialLink,
)
from portfolio_site.utils import card_size_class, get_initials, highlight_metrics

Translate = Callable[[str], object]


def _pct(value) -> str:
    """85.0 → "85", 72.5 → "72.5". Out-of-range values are kept as given."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


env = Environment(loader=FileSystemLoader(Path(__file__).parent / "templates"),
                  autoescape=True)
env.filters["pct"] = _pct

# letter, key, translation path, highlight metrics
_STAR_SECTIONS = (
    ("S", "background", "modal.background", False),
    ("T", "problem", "modal.problem", False),
    ("H", "hypothesis", "modal.hypothesis", False),
    ("A", "actions", "modal.actions", False),
    ("R", "results", "modal.results", True),
    ("L", "lessons", "modal.lessons", False),
)


def project_image_src(project_id: str) -> str:
    return PROJECT_IMAGE_PATTERN.format(id=project_id)


def render_project_card(project: LocalizedProject, index: int, t: Translate,
                        suffixes: Iterable[str] = DEFAULT_METRIC_SUFFIXES,
                        sizes: Sequence[str] = CARD_SIZE_PATTERN) -> Markup:
    preview = list(project.results.items[:2]) if project.results else []
    return Markup(env.get_template("project_card.html").render(
        p=project,
        index=index,
        size_class=card_size_class(index, sizes),
        image_src=project_image_src(project.id),
        initials=get_initials(project.title or project.company),
        preview=preview,
        t=t,
        highlight=partial(highlight_metrics, suffixes=tuple(suffixes)),
    ))


def render_grid(projects: Sequence[LocalizedProject], t: Translate,
                suffixes: Iterable[str] = DEFAULT_METRIC_SUFFIXES,
                sizes: Sequence[str] = CARD_SIZE_PATTERN) -> List[Markup]:
    """One card per project, in collection order."""
    return [render_project_card(p, i, t, suffixes, sizes) for i, p in enumerate(projects)]


def modal_sections(project: LocalizedProject, t: Translate) -> List[dict]:
    """The STAR sections that have content, in display order."""
    sections = []
    for letter, key, label_path, highlight in _STAR_SECTIONS:
        narrative = getattr(project, key)
        if narrative is None or not narrative.items:
            continue
        sections.append({
            "letter": letter,
            "key": key,
            "label": t(label_path),
            "narrative": narrative,
            "highlight": highlight,
        })
    return sections


def render_project_modal(project: LocalizedProject, t: Translate,
                         suffixes: Iterable[str] = DEFAULT_METRIC_SUFFIXES) -> Markup:
    return Markup(env.get_template("project_modal.html").render(
        p=project,
        sections=modal_sections(project, t),
        highlight=partial(highlight_metrics, suffixes=tuple(suffixes)),
    ))


def render_experience(items: Sequence[ExperienceItem]) -> Markup:
    return Markup(env.get_template("experience.html").render(items=items))


def render_education(items: Sequence[EducationItem]) -> Markup:
    return Markup(env.get_template("education.html").render(items=items))


def render_skills(items: Sequence[Skill]) -> Markup:
    return Markup(env.get_template("skills.html").render(items=items))


def render_social_links(links: Sequence[SocialLink]) -> Markup:
    return Markup(env.get_template("social_links.html").render(links=links))


def render_avatar_initials(name: str) -> Markup:
    return Markup(env.get_template("avatar_initials.html").render(initials=get_initials(name)))
