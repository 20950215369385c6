"""
Language selection for project records and UI strings.

Both lookups fall back to the default language (ko) and never raise: a
missing translation degrades the display, it is not an error.
"""

from __future__ import annotations
from dataclasses import fields
from typing import Any, Dict, List, Optional, Union

from portfolio_site.schema_portfolio import LocalizedProject, Project, ProjectStory

TranslationValue = Union[str, List[str]]

# Used when no translation table was loaded (per-file content mode).
DEFAULT_UI_LABELS: Dict[str, Any] = {
    "ko": {
        "projects": {"keyMetric": "핵심 성과", "readMore": "자세히 보기"},
        "modal": {
            "background": "배경",
            "problem": "문제",
            "hypothesis": "가설",
            "actions": "실행",
            "results": "성과",
            "lessons": "교훈",
            "close": "닫기",
        },
    },
    "en": {
        "projects": {"keyMetric": "Key Result", "readMore": "Read more"},
        "modal": {
            "background": "Background",
            "problem": "Problem",
            "hypothesis": "Hypothesis",
            "actions": "Actions",
            "results": "Results",
            "lessons": "Lessons Learned",
            "close": "Close",
        },
    },
}

_STORY_FIELDS = [f.name for f in fields(ProjectStory)]


def merge_story(preferred: Optional[ProjectStory], fallback: Optional[ProjectStory]) -> ProjectStory:
    """Field-by-field: take ``preferred`` where it has a value, else ``fallback``."""
    preferred = preferred or ProjectStory()
    fallback = fallback or ProjectStory()
    return ProjectStory(**{
        name: getattr(preferred, name) if getattr(preferred, name) is not None else getattr(fallback, name)
        for name in _STORY_FIELDS
    })


def localize_project(project: Project, language: str, default_language: str = "ko") -> LocalizedProject:
    story = merge_story(project.stories.get(language), project.stories.get(default_language))
    return LocalizedProject(
        id=project.id,
        company=project.company,
        period=project.period,
        category=project.category,
        title=story.title or "",
        hero_summary=story.hero_summary or "",
        hero_image=story.hero_image,
        background=story.background,
        problem=story.problem,
        hypothesis=story.hypothesis,
        actions=story.actions,
        results=story.results,
        lessons=story.lessons,
    )


def _walk(tree: Any, keys: List[str]) -> Optional[Any]:
    value = tree
    for key in keys:
        if isinstance(value, dict) and value.get(key) is not None:
            value = value[key]
        else:
            return None
    return value


class Translator:
    """Dot-path lookup into a {language: nested dict} translation table."""

    def __init__(self, ui: Optional[Dict[str, Any]] = None, language: str = "ko",
                 default_language: str = "ko"):
        self.ui = ui if ui else DEFAULT_UI_LABELS
        self.language = language
        self.default_language = default_language

    def t(self, path: str) -> TranslationValue:
        keys = path.split(".")
        value = _walk(self.ui.get(self.language), keys)
        if value is None:
            value = _walk(self.ui.get(self.default_language), keys)
        # a path that stops at a sub-table is as good as missing
        if value is None or isinstance(value, dict):
            return path
        return value

    __call__ = t
