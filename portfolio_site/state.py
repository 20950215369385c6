"""
Application state: the last loaded content and the current language.

Written only through the set_* methods (load completion, language toggle);
renderers read it.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple

from portfolio_site.localizer import Translator, localize_project
from portfolio_site.schema_portfolio import LocalizedProject, Profile, Project, ResumeDocument


class AppState:
    def __init__(self, language: str = "ko", default_language: str = "ko",
                 languages: Sequence[str] = ("ko", "en")):
        self.languages = tuple(languages)
        if default_language not in self.languages:
            raise ValueError(f"Unsupported default language: {default_language}")
        self.default_language = default_language
        self._language = language if language in self.languages else default_language
        self._projects: Tuple[Project, ...] = ()
        self._ui: Dict[str, Any] = {}
        self._resume: Optional[ResumeDocument] = None
        self._profile: Optional[Profile] = None

    @property
    def language(self) -> str:
        return self._language

    @property
    def projects(self) -> Tuple[Project, ...]:
        return self._projects

    @property
    def ui(self) -> Dict[str, Any]:
        return self._ui

    @property
    def resume(self) -> Optional[ResumeDocument]:
        return self._resume

    @property
    def profile(self) -> Optional[Profile]:
        return self._profile

    # ───────────────────────────────────────── mutation points ──
    def set_projects(self, projects: Sequence[Project], ui: Optional[Dict[str, Any]] = None) -> None:
        self._projects = tuple(projects)
        if ui is not None:
            self._ui = dict(ui)

    def set_resume(self, resume: ResumeDocument) -> None:
        self._resume = resume

    def set_profile(self, profile: Profile) -> None:
        self._profile = profile

    def set_language(self, language: str) -> None:
        if language not in self.languages:
            raise ValueError(f"Unsupported language: {language}")
        self._language = language

    def next_language(self) -> str:
        i = self.languages.index(self._language)
        return self.languages[(i + 1) % len(self.languages)]

    # ───────────────────────────────────────── views ──
    def project_by_id(self, project_id: str) -> Optional[Project]:
        return next((p for p in self._projects if p.id == project_id), None)

    def localized(self, project: Project) -> LocalizedProject:
        return localize_project(project, self._language, self.default_language)

    def localized_projects(self) -> List[LocalizedProject]:
        return [self.localized(p) for p in self._projects]

    def translator(self) -> Translator:
        return Translator(self._ui, self._language, self.default_language)
