"""Shared fixtures: sample content on disk, a local HTTP server serving it,
and a parsed page skeleton."""
import json
from pathlib import Path

import pytest

from portfolio_site.config import SiteConfig
from portfolio_site.loader import ContentLoader
from portfolio_site.page import PageDocument
from portfolio_site.preferences import PreferenceStore
from portfolio_site.temp_server import StaticSiteServer

from .sample_content import BUNDLE, PROFILE, PROJECT_FILES, PROJECTS, RESUME

FIXTURES = Path(__file__).parent / "fixtures"


def _write_json(root: Path, rel: str, data) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


@pytest.fixture
def content_dir(tmp_path):
    root = tmp_path / "site"
    for rel, data in PROJECTS.items():
        _write_json(root, rel, data)
    _write_json(root, "data/resume.json", RESUME)
    _write_json(root, "data/profile.json", PROFILE)
    _write_json(root, "projects.json", BUNDLE)
    (root / "data" / "broken.json").write_text("{not json", encoding="utf-8")
    images = root / "assets" / "images"
    images.mkdir(parents=True, exist_ok=True)
    (images / "portfolio-01-alpha.jpg").write_bytes(b"\xff\xd8\xff")
    return root


@pytest.fixture
def server(content_dir):
    srv = StaticSiteServer(content_dir)
    srv.start()
    yield srv
    srv.stop()


@pytest.fixture
def loader(server):
    content_loader = ContentLoader(server.url, timeout=5)
    yield content_loader
    content_loader.close()


@pytest.fixture
def config(server, tmp_path):
    return SiteConfig(
        base_url=server.url,
        project_files=PROJECT_FILES,
        bundle_file="",
        prefs_path=str(tmp_path / "prefs.json"),
        fetch_timeout=5,
    )


@pytest.fixture
def skeleton_html():
    return (FIXTURES / "index.html").read_text(encoding="utf-8")


@pytest.fixture
def page(skeleton_html):
    return PageDocument(skeleton_html)


@pytest.fixture
def preferences(tmp_path):
    return PreferenceStore(tmp_path / "prefs.json")
