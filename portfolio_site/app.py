"""
PortfolioApp ties the pipeline together:

    load (concurrently) → normalise → render into the page → interactions

Sections render on the calling thread, each one only after its own load
has finished. Load failures are logged and reported as False; they never
propagate out of start().
"""

from __future__ import annotations
import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Tuple

from portfolio_site import page as dom
from portfolio_site.config import DEFAULT_AVATAR, SiteConfig
from portfolio_site.generator_rule import (
    project_image_src,
    render_avatar_initials,
    render_education,
    render_experience,
    render_grid,
    render_skills,
    render_social_links,
)
from portfolio_site.interactions import Interactions
from portfolio_site.loader import ContentLoader, ContentLoadError
from portfolio_site.page import PageDocument
from portfolio_site.preferences import PreferenceStore
from portfolio_site.state import AppState

logger = logging.getLogger(__name__)


def normalise_asset_path(path: str) -> str:
    """Bare relative paths get a ./ prefix; absolute paths and URLs are kept."""
    if path.startswith(("./", "/", "http")):
        return path
    return "./" + path


class PortfolioApp:
    def __init__(self, page: PageDocument, loader: ContentLoader, preferences: PreferenceStore,
                 config: SiteConfig = SiteConfig(), refresh: Optional[Callable[[], None]] = None):
        self.page = page
        self.loader = loader
        self.preferences = preferences
        self.config = config
        # animation library hook, called after the grid is rebuilt
        self.refresh = refresh
        self.state = AppState(config.default_language, config.default_language, config.languages)
        self.interactions = Interactions(
            page,
            self.state,
            on_language_toggle=self.toggle_language,
            suffixes=config.metric_suffixes,
            scroll_offset=config.scroll_offset,
        )

    # ───────────────────────────────────────── startup ──
    def start(self) -> Dict[str, bool]:
        """Load every configured source and render each as it arrives.

        Returns {section: loaded_ok}.
        """
        saved = self.preferences.load_language(self.state.languages)
        if saved:
            self.state.set_language(saved)
        self.interactions.attach()

        jobs: List[Tuple[str, Callable, Callable]] = [
            ("projects", self._fetch_projects, self._apply_projects),
            ("resume", lambda: self.loader.load_resume(self.config.resume_file), self._apply_resume),
            ("profile", lambda: self.loader.load_profile(self.config.profile_file), self._apply_profile),
        ]
        results: Dict[str, bool] = {}
        with ThreadPoolExecutor(max_workers=len(jobs)) as executor:
            futures: Dict[Future, Tuple[str, Callable]] = {
                executor.submit(fetch): (name, apply) for name, fetch, apply in jobs
            }
            for future in as_completed(futures):
                name, apply = futures[future]
                results[name] = self._settle(name, future, apply)

        if not results.get("profile"):
            logger.warning("Profile data not loaded, using default values from HTML")
        # the grid was rendered in the current language as soon as it loaded
        self.apply_language(rerender_grid=False)
        return results

    def _settle(self, name: str, future: Future, apply: Callable) -> bool:
        try:
            loaded = future.result()
        except ContentLoadError as e:
            logger.error("Error loading %s data: %s", name, e)
            return False
        except Exception:
            logger.exception("Unexpected error loading %s data", name)
            return False
        apply(loaded)
        return True

    def _fetch_projects(self):
        if self.config.bundle_file:
            return self.loader.load_bundle(self.config.bundle_file)
        return self.loader.load_projects(self.config.project_files), None

    def _apply_projects(self, loaded) -> None:
        projects, ui = loaded
        self.state.set_projects(projects, ui)
        self.render_grid()

    def _apply_resume(self, resume) -> None:
        self.state.set_resume(resume)
        self.render_resume_sections()

    def _apply_profile(self, profile) -> None:
        self.state.set_profile(profile)
        self.render_profile()

    # ───────────────────────────────────────── rendering ──
    def render_grid(self) -> bool:
        container = self.page.first_by_id(dom.GRID_IDS)
        if container is None or not self.state.projects:
            return False
        cards = render_grid(
            self.state.localized_projects(),
            self.state.translator(),
            self.config.metric_suffixes,
            self.config.card_sizes,
        )
        self.page.mount(container, cards)
        self.interactions.bind_cards()
        if self.config.probe_images:
            self.resolve_card_images()
        if self.refresh:
            self.refresh()
        return True

    def resolve_card_images(self) -> None:
        """Stand-in for the browser's image load/error events."""
        for project in self.state.projects:
            event = "load" if self.loader.probe(project_image_src(project.id)) else "error"
            self.interactions.dispatch(f"card:{project.id}:image", event)

    def render_resume_sections(self) -> None:
        if self.state.resume is None:
            return
        self.render_experience()
        self.render_education()
        self.render_skills()

    def render_experience(self) -> bool:
        resume = self.state.resume
        if resume is None:
            return False
        return self.page.mount(dom.EXPERIENCE_ID, render_experience(resume.experience),
                               tag="ol", class_name="timeline-list") is not None

    def render_education(self) -> bool:
        resume = self.state.resume
        if resume is None:
            return False
        return self.page.mount(dom.EDUCATION_ID, render_education(resume.education),
                               tag="ol", class_name="timeline-list") is not None

    def render_skills(self) -> bool:
        resume = self.state.resume
        if resume is None:
            return False
        return self.page.mount(dom.SKILLS_ID, render_skills(resume.skills),
                               tag="ul", class_name="skills-list content-card") is not None

    def render_profile(self) -> bool:
        profile = self.state.profile
        if profile is None:
            return False

        avatar = self.page.by_id("profile-avatar")
        if avatar is not None:
            self._render_avatar(avatar, normalise_asset_path(profile.avatar or DEFAULT_AVATAR), profile.name)

        name = self.page.by_id("profile-name")
        if name is not None:
            name.string = profile.name
            name["title"] = profile.name
        title = self.page.by_id("profile-title")
        if title is not None:
            title.string = profile.job_title
        email = self.page.by_id("profile-email")
        if email is not None:
            email.string = profile.email
            email["href"] = f"mailto:{profile.email}"
        phone = self.page.by_id("profile-phone")
        if phone is not None:
            phone.string = profile.phone
            phone["href"] = f"tel:{profile.phone}"

        if profile.links:
            self.page.mount(dom.SOCIAL_LIST_ID, render_social_links(profile.links))
        return True

    def _render_avatar(self, avatar, path: str, name: str) -> None:
        avatar["src"] = path
        avatar["alt"] = name or "Profile"
        dom.set_style(avatar, "display", "block")
        if not self.config.probe_images:
            return

        # try the configured path, then the alternatives, then show initials
        candidates = [path] + [p for p in self.config.avatar_alternatives if p != path]
        for candidate in candidates:
            if self.loader.probe(candidate):
                avatar["src"] = candidate
                return
            logger.debug("Failed to load profile image: %s", candidate)
        logger.warning("All image paths failed, showing initials")
        dom.set_style(avatar, "display", "none")
        box = avatar.find_parent(class_="avatar-box")
        if box is not None and box.select_one(".avatar-initials") is None:
            for node in dom.parse_fragment(render_avatar_initials(name)):
                box.append(node)

    # ───────────────────────────────────────── language ──
    def apply_language(self, rerender_grid: bool = True) -> None:
        """Push the current language into every translatable element and
        (unless told otherwise) rebuild the grid. Data is not reloaded."""
        t = self.state.translator()
        language = self.state.language

        toggle = self.page.by_id(dom.LANGUAGE_TOGGLE_ID)
        if toggle is not None:
            toggle.string = self.state.next_language().upper()
            toggle["data-lang"] = language

        for element in self.page.select("[data-i18n]"):
            key = element["data-i18n"]
            translation = t(key)
            if isinstance(translation, str) and translation != key:
                element.string = translation

        self._set_text("hero-name", t("hero.name"), "hero.name")
        self._set_text("about-name", t("hero.name"), "hero.name")

        roles = self.page.by_id("hero-roles")
        if roles is not None and isinstance(t("hero.roles"), list):
            roles["data-rotate"] = json.dumps(t("hero.roles"), ensure_ascii=False)
            roles.clear()

        cta = self.page.by_id("cta-heading")
        heading = t("cta.heading")
        if cta is not None and isinstance(heading, str) and heading != "cta.heading":
            dom.set_inner_html(cta, heading)

        if rerender_grid:
            self.render_grid()

    def _set_text(self, element_id: str, value, key: str) -> None:
        element = self.page.by_id(element_id)
        if element is not None and isinstance(value, str) and value != key:
            element.string = value

    def toggle_language(self) -> str:
        language = self.state.next_language()
        self.state.set_language(language)
        self.preferences.save_language(language)
        self.apply_language()
        return language

    def render(self) -> str:
        return self.page.render()


def build_page(skeleton: str, config: SiteConfig) -> str:
    """Render a skeleton with the configured content and return the HTML."""
    app = PortfolioApp(
        PageDocument(skeleton),
        ContentLoader(config.base_url, config.fetch_timeout, config.max_workers,
                      config.languages, config.default_language),
        PreferenceStore(config.prefs_path),
        config,
    )
    try:
        app.start()
        return app.render()
    finally:
        app.loader.close()
