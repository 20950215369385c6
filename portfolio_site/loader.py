"""
HTTP loader for portfolio content.

• One urllib3 PoolManager shared by all requests.
• Per-project files are fetched concurrently; a file that fails is logged and
  left out, the rest of the batch is kept.
• No retries: a failed request stays failed until the next full load.
"""

from __future__ import annotations
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

import urllib3

from portfolio_site.cleaner import (
    SchemaError,
    normalise_profile,
    normalise_project,
    normalise_resume,
    sort_projects,
)
from portfolio_site.config import DEFAULT_LANGUAGE, FETCH_TIMEOUT, MAX_WORKERS, SUPPORTED_LANGUAGES
from portfolio_site.schema_portfolio import Profile, Project, ResumeDocument

logger = logging.getLogger(__name__)


class ContentLoadError(Exception):
    """A content file could not be fetched or parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to load {path}: {reason}")
        self.path = path
        self.reason = reason


class ContentLoader:
    def __init__(self, base_url: str, timeout: float = FETCH_TIMEOUT, max_workers: int = MAX_WORKERS,
                 languages: Sequence[str] = SUPPORTED_LANGUAGES, default_language: str = DEFAULT_LANGUAGE,
                 http: urllib3.PoolManager | None = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.max_workers = max_workers
        self.languages = tuple(languages)
        self.default_language = default_language
        self.http = http or urllib3.PoolManager(maxsize=max_workers)

    def url_for(self, path: str) -> str:
        return urljoin(self.base_url, path)

    # ───────────────────────────────────────── raw fetches ──
    def fetch_json(self, path: str) -> Any:
        url = self.url_for(path)
        try:
            response = self.http.request("GET", url, timeout=self.timeout, retries=False)
        except urllib3.exceptions.HTTPError as e:
            raise ContentLoadError(path, f"network error: {e}") from e
        if not 200 <= response.status < 300:
            raise ContentLoadError(path, f"HTTP {response.status}")
        try:
            return json.loads(response.data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ContentLoadError(path, f"invalid JSON: {e}") from e

    def _fetch_or_none(self, path: str) -> Any:
        try:
            return self.fetch_json(path)
        except ContentLoadError as e:
            logger.warning("Error loading %s: %s", path, e.reason)
            return None

    def fetch_many(self, paths: Sequence[str]) -> List[Any]:
        """Fetch every path concurrently; failures come back as None.

        Returns only once every request has settled, in the order of ``paths``.
        """
        if not paths:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(paths))) as executor:
            return list(executor.map(self._fetch_or_none, paths))

    def probe(self, path: str) -> bool:
        """True if a HEAD request for ``path`` succeeds (used for images)."""
        try:
            response = self.http.request("HEAD", self.url_for(path), timeout=self.timeout, retries=False)
        except urllib3.exceptions.HTTPError as e:
            logger.debug("Probe failed for %s: %s", path, e)
            return False
        return 200 <= response.status < 300

    # ───────────────────────────────────────── documents ──
    def _project(self, raw: Any, source: str) -> Optional[Project]:
        try:
            return normalise_project(raw, self.languages, self.default_language)
        except SchemaError as e:
            logger.warning("Skipping project from %s: %s", source, e)
            return None

    def load_projects(self, paths: Sequence[str]) -> List[Project]:
        """One file per project; failed files are dropped, the rest sorted
        by the number in their id."""
        results = self.fetch_many(paths)
        projects = [
            project
            for path, raw in zip(paths, results)
            if raw is not None and (project := self._project(raw, path)) is not None
        ]
        projects = sort_projects(projects)
        logger.info("Loaded %d portfolio projects", len(projects))
        return projects

    def load_bundle(self, path: str) -> Tuple[List[Project], Dict[str, Any]]:
        """The localized bundle: ``{"projects": [...], "ui": {...}}``."""
        data = self.fetch_json(path)
        if not isinstance(data, dict):
            raise ContentLoadError(path, "bundle must be a JSON object")
        raw_projects = data.get("projects") or []
        if not isinstance(raw_projects, list):
            raise ContentLoadError(path, "projects must be a list")
        projects = [p for p in (self._project(raw, path) for raw in raw_projects) if p is not None]
        ui = data.get("ui") if isinstance(data.get("ui"), dict) else {}
        logger.info("Loaded %d projects and %d UI languages from %s", len(projects), len(ui), path)
        return projects, ui

    def load_resume(self, path: str) -> ResumeDocument:
        try:
            return normalise_resume(self.fetch_json(path))
        except SchemaError as e:
            raise ContentLoadError(path, str(e)) from e

    def load_profile(self, path: str) -> Profile:
        try:
            return normalise_profile(self.fetch_json(path))
        except SchemaError as e:
            raise ContentLoadError(path, str(e)) from e

    def close(self) -> None:
        self.http.clear()

