"""
The page skeleton as an in-memory document, and the thin layer that mounts
rendered fragments into it.

Element ids and data attributes below are the contract with the HTML
skeleton; the skeleton's styling and structure are not ours.
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from portfolio_site.utils import get_style_property, set_style_property

logger = logging.getLogger(__name__)

# containers
GRID_IDS = ("project-grid", "bento-grid")
PROJECT_MODAL_ID = "project-modal-container"
PROJECT_MODAL_CONTENT_ID = "project-modal-content"
PROJECT_MODAL_CLOSE_ID = "project-modal-close"
PROJECT_MODAL_OVERLAY_ID = "project-modal-overlay"
EXPERIENCE_ID = "experience-list"
EDUCATION_ID = "education-list"
SKILLS_ID = "skills-list"
SOCIAL_LIST_ID = "social-list"
LANGUAGE_TOGGLE_ID = "language-toggle"

ACTIVE = "active"


def parse_fragment(markup: str) -> List:
    """Top-level nodes of an HTML fragment, detached and ready to append."""
    fragment = BeautifulSoup(str(markup), "html.parser")
    return [node.extract() for node in list(fragment.contents)]


# ───────────────────────────────────────── element helpers ──
def classes(tag: Tag) -> List[str]:
    value = tag.get("class") or []
    return value.split() if isinstance(value, str) else list(value)


def has_class(tag: Tag, name: str) -> bool:
    return name in classes(tag)


def add_class(tag: Tag, name: str) -> None:
    current = classes(tag)
    if name not in current:
        tag["class"] = current + [name]


def remove_class(tag: Tag, name: str) -> None:
    current = [c for c in classes(tag) if c != name]
    if current:
        tag["class"] = current
    elif tag.has_attr("class"):
        del tag["class"]


def toggle_class(tag: Tag, name: str) -> bool:
    if has_class(tag, name):
        remove_class(tag, name)
        return False
    add_class(tag, name)
    return True


def set_style(tag: Tag, name: str, value: Optional[str]) -> None:
    style = set_style_property(tag.get("style"), name, value)
    if style:
        tag["style"] = style
    elif tag.has_attr("style"):
        del tag["style"]


def get_style(tag: Tag, name: str) -> str:
    return get_style_property(tag.get("style"), name)


def set_inner_html(tag: Tag, markup: str) -> None:
    tag.clear()
    for node in parse_fragment(markup):
        tag.append(node)


def inner_html(tag: Tag) -> str:
    return tag.decode_contents()


def text_of(tag: Tag) -> str:
    return tag.get_text(" ", strip=True)


class PageDocument:
    """A parsed page skeleton. html5lib builds the same tree a browser would."""

    def __init__(self, markup: str, parser: str = "html5lib"):
        self.soup = BeautifulSoup(markup, parser)

    @property
    def body(self) -> Tag:
        return self.soup.body

    def by_id(self, element_id: str) -> Optional[Tag]:
        return self.soup.find(id=element_id)

    def first_by_id(self, element_ids: Iterable[str]) -> Optional[Tag]:
        for element_id in element_ids:
            if (tag := self.by_id(element_id)) is not None:
                return tag
        return None

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def ensure_tag(self, container: Tag, name: str) -> Tag:
        """Swap ``container`` for a ``<name>`` element with the same id if
        the skeleton used the wrong tag (e.g. a div where a list belongs)."""
        if container.name == name:
            return container
        replacement = self.soup.new_tag(name)
        if container.get("id"):
            replacement["id"] = container["id"]
        container.replace_with(replacement)
        logger.debug("Replaced <%s id=%s> with <%s>", container.name, container.get("id"), name)
        return replacement

    def mount(self, container: Tag | str | None, fragments: Iterable[str] | str, *,
              tag: str | None = None, class_name: str | None = None) -> Optional[Tag]:
        """Replace a container's children with the given fragments.

        Returns the (possibly replaced) container, or None when the
        container is missing from the skeleton.
        """
        if isinstance(container, str):
            container_id, container = container, self.by_id(container)
        else:
            container_id = container.get("id") if container is not None else None
        if container is None:
            logger.warning("Container #%s not found; skipping render", container_id)
            return None
        if tag:
            container = self.ensure_tag(container, tag)
        if class_name is not None:
            container["class"] = class_name.split()
        container.clear()
        if isinstance(fragments, str):
            fragments = [fragments]
        for fragment in fragments:
            for node in parse_fragment(fragment):
                container.append(node)
        return container

    def render(self) -> str:
        return str(self.soup)
