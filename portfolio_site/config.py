"""
Configuration settings for the portfolio site pipeline.

Values are read from the environment (a local .env file is honoured) and
bundled into a SiteConfig so the app can be built with explicit settings
in tests.
"""

from dotenv import load_dotenv
load_dotenv()          # ← must be before os.getenv(...)
import logging
import os
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)

# Content sources (relative to the base URL)
BASE_URL = os.getenv("PORTFOLIO_BASE_URL", "http://localhost:8000")

DEFAULT_PROJECT_FILES = (
    "data/portfolio-01-classum-library-backoffice.json",
    "data/portfolio-02-classum-team-activity.json",
    "data/portfolio-03-modernlion-jangbeomjune.json",
    "data/portfolio-04-modernlion-checkout-admin.json",
    "data/portfolio-05-dreamary-designer-map.json",
    "data/portfolio-06-dreamary-inapp-review.json",
)
RESUME_FILE = os.getenv("PORTFOLIO_RESUME_FILE", "data/resume.json")
PROFILE_FILE = os.getenv("PORTFOLIO_PROFILE_FILE", "data/profile.json")
# Empty means "one file per project"; set to e.g. projects.json for the
# localized bundle that also carries UI translations.
BUNDLE_FILE = os.getenv("PORTFOLIO_BUNDLE_FILE", "")

# Language
SUPPORTED_LANGUAGES = ("ko", "en")


def supported_language(raw: str | None) -> str:
    """``raw`` if it is a supported language, else the first supported one."""
    language = (raw or "").strip().lower()
    if language in SUPPORTED_LANGUAGES:
        return language
    if language:
        logger.warning("Unsupported default language %r; using %s", raw, SUPPORTED_LANGUAGES[0])
    return SUPPORTED_LANGUAGES[0]


DEFAULT_LANGUAGE = supported_language(os.getenv("PORTFOLIO_DEFAULT_LANGUAGE", "ko"))
LANGUAGE_STORAGE_KEY = "portfolio-language"
PREFS_PATH = os.getenv("PORTFOLIO_PREFS_PATH", ".cache/preferences.json")

# Network
FETCH_TIMEOUT = float(os.getenv("PORTFOLIO_FETCH_TIMEOUT", "10"))
MAX_WORKERS = int(os.getenv("PORTFOLIO_MAX_WORKERS", "6"))

# Rendering
# Unit suffixes recognised after a number when highlighting metrics.
# Longer suffixes must win over their prefixes (개월 before 개).
DEFAULT_METRIC_SUFFIXES = ("%", "건", "시간", "개월", "개", "배", "달", "만원", "억", "천만")
CARD_SIZE_PATTERN = (
    "bento-large",   # 0 - featured
    "bento-medium",
    "bento-small",
    "bento-medium",
    "bento-small",
    "bento-large",   # 5 - featured
)
PLACEHOLDER_INITIALS = "PM"
PROJECT_IMAGE_PATTERN = "./assets/images/{id}.jpg"
DEFAULT_AVATAR = "assets/images/my-avatar.png"
AVATAR_ALTERNATIVES = (
    "./assets/images/my-avatar.png",
)

# Scroll-spy lookahead below the top of the viewport, in pixels
SCROLL_SPY_OFFSET = 100

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _split_list(raw: str | None, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class SiteConfig:
    """Everything PortfolioApp needs to know about where content lives."""
    base_url: str = BASE_URL
    project_files: Tuple[str, ...] = DEFAULT_PROJECT_FILES
    bundle_file: str = BUNDLE_FILE
    resume_file: str = RESUME_FILE
    profile_file: str = PROFILE_FILE
    default_language: str = DEFAULT_LANGUAGE
    languages: Tuple[str, ...] = SUPPORTED_LANGUAGES
    prefs_path: str = PREFS_PATH
    fetch_timeout: float = FETCH_TIMEOUT
    max_workers: int = MAX_WORKERS
    metric_suffixes: Tuple[str, ...] = DEFAULT_METRIC_SUFFIXES
    card_sizes: Tuple[str, ...] = CARD_SIZE_PATTERN
    avatar_alternatives: Tuple[str, ...] = AVATAR_ALTERNATIVES
    scroll_offset: int = SCROLL_SPY_OFFSET
    probe_images: bool = False


def load_config() -> SiteConfig:
    """Build a SiteConfig from the current environment."""
    return SiteConfig(
        base_url=os.getenv("PORTFOLIO_BASE_URL", BASE_URL),
        project_files=_split_list(os.getenv("PORTFOLIO_PROJECT_FILES"), DEFAULT_PROJECT_FILES),
        bundle_file=os.getenv("PORTFOLIO_BUNDLE_FILE", BUNDLE_FILE),
        resume_file=os.getenv("PORTFOLIO_RESUME_FILE", RESUME_FILE),
        profile_file=os.getenv("PORTFOLIO_PROFILE_FILE", PROFILE_FILE),
        default_language=supported_language(os.getenv("PORTFOLIO_DEFAULT_LANGUAGE", DEFAULT_LANGUAGE)),
        prefs_path=os.getenv("PORTFOLIO_PREFS_PATH", PREFS_PATH),
        fetch_timeout=float(os.getenv("PORTFOLIO_FETCH_TIMEOUT", FETCH_TIMEOUT)),
        max_workers=int(os.getenv("PORTFOLIO_MAX_WORKERS", MAX_WORKERS)),
        metric_suffixes=_split_list(os.getenv("PORTFOLIO_METRIC_SUFFIXES"), DEFAULT_METRIC_SUFFIXES),
        probe_images=os.getenv("PORTFOLIO_PROBE_IMAGES", "false").lower() in ("1", "true", "yes"),
    )


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # cssutils reports every unknown property; keep it quiet
    logging.getLogger("cssutils").setLevel(logging.CRITICAL)
