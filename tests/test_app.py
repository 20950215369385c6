import dataclasses
import json
import logging

import pytest
import urllib3

from portfolio_site import page as dom
from portfolio_site.app import PortfolioApp, build_page, normalise_asset_path
from portfolio_site.config import LANGUAGE_STORAGE_KEY
from portfolio_site.temp_server import StaticSiteServer, cleanup_temp_server, serve_html_temporarily

pytestmark = pytest.mark.web


@pytest.fixture
def make_app(page, loader, preferences, config):
    def _make(**overrides):
        return PortfolioApp(page, loader, preferences, dataclasses.replace(config, **overrides))
    return _make


@pytest.fixture
def app(make_app):
    return make_app()


def _card_ids(page):
    return [c["data-project-id"] for c in page.by_id("project-grid").find_all(recursive=False)]


# ───────────────────────────── startup ──
def test_start_renders_every_section(app, page):
    assert app.start() == {"projects": True, "resume": True, "profile": True}

    assert _card_ids(page) == [
        "portfolio-01-alpha",
        "portfolio-02-beta",
        "portfolio-03-gamma",
        "portfolio-04-delta",
    ]

    experience = page.by_id("experience-list")
    assert experience.name == "ol"
    assert experience["class"] == ["timeline-list"]
    assert len(experience.find_all("li", recursive=False)) == 2
    assert len(page.by_id("education-list").find_all("li", recursive=False)) == 1
    assert page.by_id("skills-list")["class"] == ["skills-list", "content-card"]

    assert page.by_id("profile-name").text == "Jane Doe"
    assert page.by_id("profile-title").text == "Product Manager"
    assert page.by_id("profile-email")["href"] == "mailto:jane@example.com"
    assert page.by_id("profile-phone")["href"] == "tel:+82 10 0000 0000"
    assert page.by_id("profile-avatar")["src"] == "./assets/images/jane.png"
    assert len(page.select("#social-list a.social-link")) == 2


def test_failed_resume_leaves_skeleton_content(make_app, page, caplog):
    app = make_app(resume_file="data/missing.json")
    results = app.start()
    assert results["resume"] is False
    assert results["projects"] is True
    experience = page.by_id("experience-list")
    assert experience.name == "div"
    assert experience.text == "Loading..."
    assert "Error loading resume data" in caplog.text


def test_missing_profile_keeps_defaults(make_app, page, caplog):
    app = make_app(profile_file="data/missing.json")
    assert app.start()["profile"] is False
    assert page.by_id("profile-name").text == "Default Name"
    assert "using default values from HTML" in caplog.text


def test_no_projects_leaves_grid_empty(make_app, page):
    app = make_app(project_files=("data/missing-1.json",))
    app.start()
    assert _card_ids(page) == []


def test_refresh_hook_runs_after_grid_render(page, loader, preferences, config, mocker):
    refresh = mocker.Mock()
    PortfolioApp(page, loader, preferences, config, refresh=refresh).start()
    refresh.assert_called()


# ───────────────────────────── images ──
def test_probed_images(make_app, page):
    app = make_app(probe_images=True)
    app.start()

    alpha = page.select_one('[data-project-id="portfolio-01-alpha"]')
    assert dom.has_class(alpha.select_one(".project-image"), "loaded")
    assert dom.get_style(alpha.select_one(".project-placeholder"), "display") == "none"

    beta = page.select_one('[data-project-id="portfolio-02-beta"]')
    assert not dom.has_class(beta.select_one(".project-image"), "loaded")
    assert dom.get_style(beta.select_one(".project-placeholder"), "display") == "flex"


def test_avatar_falls_back_to_initials(make_app, page, caplog):
    make_app(probe_images=True).start()
    avatar = page.by_id("profile-avatar")
    assert dom.get_style(avatar, "display") == "none"
    initials = page.select(".avatar-box .avatar-initials")
    assert len(initials) == 1
    assert initials[0].text == "JD"
    assert "All image paths failed" in caplog.text


def test_avatar_uses_first_alternative_that_loads(make_app, page):
    make_app(probe_images=True, avatar_alternatives=("./assets/images/portfolio-01-alpha.jpg",)).start()
    avatar = page.by_id("profile-avatar")
    assert avatar["src"] == "./assets/images/portfolio-01-alpha.jpg"
    assert page.select_one(".avatar-initials") is None


@pytest.mark.parametrize("path, expected", [
    ("assets/images/a.png", "./assets/images/a.png"),
    ("./assets/images/a.png", "./assets/images/a.png"),
    ("/img/a.png", "/img/a.png"),
    ("https://cdn.example.com/a.png", "https://cdn.example.com/a.png"),
])
def test_normalise_asset_path(path, expected):
    assert normalise_asset_path(path) == expected


# ───────────────────────────── interactions wired by start() ──
def test_card_click_opens_modal(app, page):
    app.start()
    assert app.interactions.dispatch("card:portfolio-04-delta", "click") == 1
    assert dom.has_class(page.by_id(dom.PROJECT_MODAL_ID), "active")
    results = page.select_one('#project-modal-content [data-star-section="results"]')
    assert [s.text for s in results.find_all("strong")] == ["5개월"]


def test_cards_rebound_after_rerender(app):
    app.start()
    app.render_grid()
    assert app.interactions.registry.count("card:portfolio-01-alpha", "click") == 1


# ───────────────────────────── language ──
def test_toggle_label_shows_the_other_language(app, page):
    app.start()
    toggle = page.by_id("language-toggle")
    assert toggle.text == "EN"
    assert toggle["data-lang"] == "ko"
    assert app.interactions.dispatch("#language-toggle", "click") == 1
    assert toggle.text == "KO"
    assert toggle["data-lang"] == "en"


def test_language_round_trip_renders_identically(app, preferences, config):
    app.start()
    before = app.render()
    assert app.toggle_language() == "en"
    assert app.toggle_language() == "ko"
    assert app.render() == before
    assert preferences.get(LANGUAGE_STORAGE_KEY) == "ko"
    with open(config.prefs_path, encoding="utf-8") as f:
        assert json.load(f)[LANGUAGE_STORAGE_KEY] == "ko"


def test_saved_language_is_restored(app, page, preferences):
    preferences.save_language("en")
    app.start()
    assert app.state.language == "en"
    assert page.by_id("language-toggle").text == "KO"


def test_bundle_translates_page_and_cards(make_app, page):
    app = make_app(bundle_file="projects.json")
    assert app.start()["projects"] is True

    assert _card_ids(page) == ["p-2", "p-1"]
    assert page.by_id("hero-name").text == "안승환"
    assert page.by_id("about-name").text == "안승환"
    roles = page.by_id("hero-roles")
    assert json.loads(roles["data-rotate"]) == ["PM", "기획자"]
    assert roles.text == ""
    assert dom.inner_html(page.by_id("cta-heading")) == "함께 <span>일해요</span>"
    assert page.select_one('[data-i18n="about.intro"]').text == "소개"
    assert page.select_one('[data-i18n="about.missing"]').text == "Stays as is"

    app.toggle_language()
    assert page.by_id("hero-name").text == "Seunghwan"
    assert page.select_one('[data-i18n="about.intro"]').text == "About me"
    # no English heading: the Korean one stays
    assert dom.inner_html(page.by_id("cta-heading")) == "함께 <span>일해요</span>"
    titles = [t.text for t in page.select("#project-grid .project-title")]
    assert titles == ["Designer Map", "인앱 리뷰"]
    assert page.select_one("#project-grid .project-read-more").text.strip().startswith("Read more")


def test_language_toggle_does_not_reload(app, loader, mocker):
    app.start()
    spy = mocker.spy(loader, "fetch_json")
    app.toggle_language()
    spy.assert_not_called()


# ───────────────────────────── whole page ──
def test_build_page(skeleton_html, config):
    html = build_page(skeleton_html, config)
    assert "Jane Doe" in html
    assert 'data-project-id="portfolio-03-gamma"' in html


def test_published_page_is_served(caplog):
    caplog.set_level(logging.INFO, logger="portfolio_site.temp_server")
    with StaticSiteServer() as srv:
        url = srv.publish("<p>preview</p>", "preview.html")
        root = srv.root
        assert url.endswith("/preview.html")
        response = urllib3.request("GET", url, retries=False)
        assert response.status == 200
        assert response.data == b"<p>preview</p>"
    assert srv.url is None
    assert not root.exists()


def test_serve_html_temporarily():
    try:
        url = serve_html_temporarily("<h1>hi</h1>")
        assert urllib3.request("GET", url, retries=False).data == b"<h1>hi</h1>"
    finally:
        cleanup_temp_server()


# ───────────────────────────── malformed content ──
def test_bundle_with_non_list_projects_is_reported(make_app, content_dir, page):
    (content_dir / "bad.json").write_text(json.dumps({"projects": 5, "ui": {}}), encoding="utf-8")
    app = make_app(bundle_file="bad.json")
    results = app.start()
    assert results["projects"] is False
    assert results["profile"] is True
    assert _card_ids(page) == []
    # apply_language still ran
    assert page.by_id("language-toggle").text == "EN"


def test_unexpected_loader_error_is_reported(app, loader, mocker, caplog):
    mocker.patch.object(loader, "load_resume", side_effect=RuntimeError("boom"))
    results = app.start()
    assert results["resume"] is False
    assert results["projects"] is True
    assert "Unexpected error loading resume data" in caplog.text


def test_start_probes_each_card_image_once(make_app, loader, mocker):
    spy = mocker.spy(loader, "probe")
    make_app(probe_images=True).start()
    card_probes = [c.args[0] for c in spy.call_args_list if "portfolio-0" in c.args[0]]
    assert sorted(card_probes) == [
        "./assets/images/portfolio-01-alpha.jpg",
        "./assets/images/portfolio-02-beta.jpg",
        "./assets/images/portfolio-03-gamma.jpg",
        "./assets/images/portfolio-04-delta.jpg",
    ]
