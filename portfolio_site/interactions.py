"""
Interaction layer: filters, custom select, scroll-spy, contact form gating,
project and testimonial modals, sidebar and language toggles.

Events reach the page through ``Interactions.dispatch(target, event, ...)``;
handlers are registered once by ``attach()`` and, for project cards, again
after every grid render.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, Optional, Sequence

from bs4 import Tag

from portfolio_site import page as dom
from portfolio_site.config import DEFAULT_METRIC_SUFFIXES, SCROLL_SPY_OFFSET
from portfolio_site.generator_rule import render_project_modal
from portfolio_site.page import PageDocument
from portfolio_site.state import AppState

logger = logging.getLogger(__name__)

DOCUMENT = "document"
WINDOW = "window"

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_URL = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://\S+$")


class ListenerRegistry:
    """Event listeners keyed by (target, event, name).

    Adding a listener under a key that already exists replaces it, so a
    handler re-attached on every render is never registered twice.
    """

    def __init__(self):
        self._listeners: Dict[tuple, Dict[str, Callable]] = {}

    def add(self, target: str, event: str, handler: Callable, name: Optional[str] = None) -> None:
        self._listeners.setdefault((target, event), {})[name or handler.__name__] = handler

    def remove(self, target: str, event: str, name: str) -> None:
        self._listeners.get((target, event), {}).pop(name, None)

    def remove_targets(self, prefix: str) -> None:
        for key in [k for k in self._listeners if k[0].startswith(prefix)]:
            del self._listeners[key]

    def count(self, target: str, event: str) -> int:
        return len(self._listeners.get((target, event), {}))

    def dispatch(self, target: str, event: str, *args, **kwargs) -> int:
        handlers = list(self._listeners.get((target, event), {}).values())
        for handler in handlers:
            handler(*args, **kwargs)
        return len(handlers)


# ───────────────────────────────────────── scroll-spy ──
@dataclass(frozen=True)
class SectionBounds:
    id: str
    top: float
    height: float


def section_at(sections: Sequence[SectionBounds], point: float) -> Optional[str]:
    """Id of the first section whose [top, top + height) contains ``point``."""
    for section in sections:
        if section.top <= point < section.top + section.height:
            return section.id
    return None


# ───────────────────────────────────────── form validation ──
def _field_value(field: Tag) -> str:
    if field.name == "textarea":
        return field.get_text()
    if field.name == "select":
        option = field.find("option", selected=True) or field.find("option")
        return (option.get("value", option.get_text()) if option else "") or ""
    return field.get("value", "") or ""


def field_is_valid(field: Tag) -> bool:
    """The subset of HTML constraint validation a contact form declares."""
    if field.has_attr("disabled") or field.get("type") in ("submit", "button", "hidden", "reset"):
        return True
    kind = (field.get("type") or "text").lower()
    if kind in ("checkbox", "radio"):
        return field.has_attr("checked") or not field.has_attr("required")
    value = _field_value(field)
    if not value:
        return not field.has_attr("required")
    if kind == "email" and not _EMAIL.match(value):
        return False
    if kind == "url" and not _URL.match(value):
        return False
    if field.get("minlength", "").isdigit() and len(value) < int(field["minlength"]):
        return False
    if field.get("maxlength", "").isdigit() and len(value) > int(field["maxlength"]):
        return False
    if field.get("pattern"):
        try:
            if not re.fullmatch(field["pattern"], value):
                return False
        except re.error:
            logger.warning("Ignoring invalid pattern on field %s", field.get("name"))
    return True


def form_is_valid(form: Tag) -> bool:
    return all(field_is_valid(f) for f in form.find_all(["input", "textarea", "select"]))


class Interactions:
    def __init__(self, page: PageDocument, state: AppState, registry: Optional[ListenerRegistry] = None,
                 on_language_toggle: Optional[Callable[[], None]] = None,
                 suffixes: Sequence[str] = DEFAULT_METRIC_SUFFIXES,
                 scroll_offset: int = SCROLL_SPY_OFFSET):
        self.page = page
        self.state = state
        self.registry = registry or ListenerRegistry()
        self.on_language_toggle = on_language_toggle
        self.suffixes = tuple(suffixes)
        self.scroll_offset = scroll_offset
        self._attached = False
        self._last_filter_btn = 0

    def dispatch(self, target: str, event: str, *args, **kwargs) -> int:
        return self.registry.dispatch(target, event, *args, **kwargs)

    def attach(self) -> None:
        """Register the page-level handlers. Safe to call more than once."""
        if self._attached:
            return
        self._attached = True
        add = self.registry.add

        # project modal
        add(f"#{dom.PROJECT_MODAL_CLOSE_ID}", "click", self.close_project_modal)
        add(f"#{dom.PROJECT_MODAL_OVERLAY_ID}", "click", self.close_project_modal)

        # filters and custom select
        for i, _ in enumerate(self.page.select("[data-filter-btn]")):
            add(f"[data-filter-btn]@{i}", "click", partial(self.click_filter_button, i), name="filter")
        for i, _ in enumerate(self.page.select("[data-select-item]")):
            add(f"[data-select-item]@{i}", "click", partial(self.click_select_item, i), name="select")
        add("[data-select]", "click", self.toggle_select)

        # testimonials
        for i, _ in enumerate(self.page.select("[data-testimonials-item]")):
            add(f"[data-testimonials-item]@{i}", "click", partial(self.open_testimonial, i), name="testimonial")
        add("[data-modal-close-btn]", "click", self.close_testimonial)
        add("[data-overlay]", "click", self.close_testimonial)

        # sidebar, form, scroll-spy
        add("[data-sidebar-btn]", "click", self.toggle_sidebar)
        add("[data-form-input]", "input", self.form_input)
        add(WINDOW, "scroll", self.update_active_nav)
        add(WINDOW, "load", self.update_active_nav)

        if self.on_language_toggle and self.page.by_id(dom.LANGUAGE_TOGGLE_ID) is not None:
            add(f"#{dom.LANGUAGE_TOGGLE_ID}", "click", self.on_language_toggle, name="language")

    # ───────────────────────────────────────── project cards ──
    def bind_cards(self) -> None:
        """(Re)attach click and image handlers to the freshly rendered cards."""
        self.registry.remove_targets("card:")
        for card in self.page.select("[data-project-id]"):
            project_id = card["data-project-id"]
            self.registry.add(f"card:{project_id}", "click",
                              partial(self.open_project_modal, project_id), name="open-modal")
            self.registry.add(f"card:{project_id}:image", "load",
                              partial(self.card_image_loaded, project_id), name="image")
            self.registry.add(f"card:{project_id}:image", "error",
                              partial(self.card_image_failed, project_id), name="image")

    def _card_parts(self, project_id: str):
        card = self.page.select_one(f'[data-project-id="{project_id}"]')
        if card is None:
            return None, None
        return card.select_one(".project-image"), card.select_one(".project-placeholder")

    def card_image_loaded(self, project_id: str) -> None:
        img, placeholder = self._card_parts(project_id)
        if img is None or placeholder is None:
            return
        dom.add_class(img, "loaded")
        dom.set_style(placeholder, "display", "none")

    def card_image_failed(self, project_id: str) -> None:
        img, placeholder = self._card_parts(project_id)
        if img is None or placeholder is None:
            return
        logger.debug("Image for %s failed; showing initials", project_id)
        dom.remove_class(img, "loaded")
        dom.set_style(placeholder, "display", "flex")

    # ───────────────────────────────────────── project modal ──
    @property
    def project_modal_open(self) -> bool:
        container = self.page.by_id(dom.PROJECT_MODAL_ID)
        return container is not None and dom.has_class(container, dom.ACTIVE)

    def open_project_modal(self, project_id: str) -> bool:
        container = self.page.by_id(dom.PROJECT_MODAL_ID)
        content = self.page.by_id(dom.PROJECT_MODAL_CONTENT_ID)
        project = self.state.project_by_id(project_id)
        if container is None or content is None or project is None:
            return False

        t = self.state.translator()
        self.page.mount(content, render_project_modal(self.state.localized(project), t, self.suffixes))
        close_btn = self.page.by_id(dom.PROJECT_MODAL_CLOSE_ID)
        if close_btn is not None:
            close_btn["aria-label"] = str(t("modal.close"))

        dom.add_class(container, dom.ACTIVE)
        dom.set_style(self.page.body, "overflow", "hidden")
        # keyed, so reopening replaces rather than stacks
        self.registry.add(DOCUMENT, "keydown", self._close_on_escape, name="project-modal-escape")
        return True

    def close_project_modal(self) -> bool:
        if not self.project_modal_open:
            return False
        dom.remove_class(self.page.by_id(dom.PROJECT_MODAL_ID), dom.ACTIVE)
        dom.set_style(self.page.body, "overflow", None)
        self.registry.remove(DOCUMENT, "keydown", "project-modal-escape")
        return True

    def _close_on_escape(self, key: str) -> None:
        if key == "Escape":
            self.close_project_modal()

    def keydown(self, key: str) -> int:
        return self.dispatch(DOCUMENT, "keydown", key)

    # ───────────────────────────────────────── filters ──
    def filter_items(self, selected: str) -> None:
        selected = selected.strip().lower()
        for item in self.page.select("[data-filter-item]"):
            category = (item.get("data-category") or "").strip().lower()
            if selected == "all" or selected == category:
                dom.add_class(item, dom.ACTIVE)
            else:
                dom.remove_class(item, dom.ACTIVE)

    def _show_selected(self, label: str) -> None:
        value = self.page.select_one("[data-select-value]")
        if value is not None:
            value.string = label

    def click_filter_button(self, index: int) -> None:
        buttons = self.page.select("[data-filter-btn]")
        if not 0 <= index < len(buttons):
            return
        label = dom.text_of(buttons[index])
        self._show_selected(label)
        self.filter_items(label)
        if self._last_filter_btn < len(buttons):
            dom.remove_class(buttons[self._last_filter_btn], dom.ACTIVE)
        dom.add_class(buttons[index], dom.ACTIVE)
        self._last_filter_btn = index

    def click_select_item(self, index: int) -> None:
        items = self.page.select("[data-select-item]")
        if not 0 <= index < len(items):
            return
        label = dom.text_of(items[index])
        self._show_selected(label)
        self.filter_items(label)
        # keep the button row in step with the dropdown
        for i, button in enumerate(self.page.select("[data-filter-btn]")):
            if dom.text_of(button).lower() == label.lower():
                dom.add_class(button, dom.ACTIVE)
                self._last_filter_btn = i
            else:
                dom.remove_class(button, dom.ACTIVE)
        select = self.page.select_one("[data-select]")
        if select is not None:
            dom.remove_class(select, dom.ACTIVE)

    def toggle_select(self) -> None:
        select = self.page.select_one("[data-select]")
        if select is not None:
            dom.toggle_class(select, dom.ACTIVE)

    # ───────────────────────────────────────── scroll-spy ──
    def update_active_nav(self, scroll_y: float, sections: Sequence[SectionBounds]) -> Optional[str]:
        current = section_at(sections, scroll_y + self.scroll_offset)
        if current is None:
            return None
        for link in self.page.select(".navbar-link"):
            if link.get("href") == f"#{current}":
                dom.add_class(link, dom.ACTIVE)
            else:
                dom.remove_class(link, dom.ACTIVE)
        return current

    # ───────────────────────────────────────── contact form ──
    def form_input(self, name: str, value: str) -> bool:
        """Record an input event and gate the submit button on validity."""
        form = self.page.select_one("[data-form]")
        button = self.page.select_one("[data-form-btn]")
        if form is None or button is None:
            return False
        field = form.select_one(f'[data-form-input][name="{name}"]')
        if field is not None:
            if field.name == "textarea":
                field.string = value
            else:
                field["value"] = value
        valid = form_is_valid(form)
        if valid:
            if button.has_attr("disabled"):
                del button["disabled"]
        else:
            button["disabled"] = ""
        return valid

    # ───────────────────────────────────────── testimonials ──
    def open_testimonial(self, index: int) -> bool:
        items = self.page.select("[data-testimonials-item]")
        container = self.page.select_one("[data-modal-container]")
        if not 0 <= index < len(items) or container is None:
            return False
        item = items[index]
        avatar = item.select_one("[data-testimonials-avatar]")
        modal_img = self.page.select_one("[data-modal-img]")
        if avatar is not None and modal_img is not None:
            modal_img["src"] = avatar.get("src", "")
            modal_img["alt"] = avatar.get("alt", "")
        for source_attr, target_attr in (("data-testimonials-title", "data-modal-title"),
                                         ("data-testimonials-text", "data-modal-text")):
            source = item.select_one(f"[{source_attr}]")
            target = self.page.select_one(f"[{target_attr}]")
            if source is not None and target is not None:
                dom.set_inner_html(target, dom.inner_html(source))
        dom.add_class(container, dom.ACTIVE)
        overlay = self.page.select_one("[data-overlay]")
        if overlay is not None:
            dom.add_class(overlay, dom.ACTIVE)
        return True

    def close_testimonial(self) -> bool:
        container = self.page.select_one("[data-modal-container]")
        if container is None or not dom.has_class(container, dom.ACTIVE):
            return False
        dom.remove_class(container, dom.ACTIVE)
        overlay = self.page.select_one("[data-overlay]")
        if overlay is not None:
            dom.remove_class(overlay, dom.ACTIVE)
        return True

    # ───────────────────────────────────────── sidebar ──
    def toggle_sidebar(self) -> None:
        sidebar = self.page.select_one("[data-sidebar]")
        if sidebar is not None:
            dom.toggle_class(sidebar, dom.ACTIVE)
