"""
Utility functions for the portfolio site: initials, metric highlighting,
bento sizing and inline-style edits.
"""

import functools
import logging
import re
from typing import Iterable, Sequence

import cssutils
from markupsafe import Markup, escape

from portfolio_site.config import CARD_SIZE_PATTERN, DEFAULT_METRIC_SUFFIXES, PLACEHOLDER_INITIALS

cssutils.log.setLevel(logging.CRITICAL)  # unknown properties are not our problem


def get_initials(text: str = "") -> str:
    """First letter of each word, at most two, upper-cased ("Jane Doe" → "JD")."""
    initials = "".join(word[0] for word in (text or "").split())[:2].upper()
    return initials or PLACEHOLDER_INITIALS


def card_size_class(index: int, pattern: Sequence[str] = CARD_SIZE_PATTERN) -> str:
    return pattern[index % len(pattern)]


@functools.lru_cache(maxsize=16)
def _metric_pattern(suffixes: tuple) -> re.Pattern:
    # longest first so 개월 wins over 개
    units = "|".join(re.escape(s) for s in sorted(suffixes, key=len, reverse=True))
    unit_group = f"(?:{units})?" if units else ""
    # not inside another number, not inside an entity like &#39;,
    # and not a number that is already wrapped
    return re.compile(rf"(?<![\d.#])(?<!<strong>)(\d+(?:\.\d+)?{unit_group})")


def highlight_metrics(text: str, suffixes: Iterable[str] = DEFAULT_METRIC_SUFFIXES) -> Markup:
    """Wrap numbers (with an optional unit suffix) in <strong>.

    Plain strings are HTML-escaped first; Markup is taken as is, so running
    the result through again leaves it unchanged.
    """
    safe = escape(text or "")
    return Markup(_metric_pattern(tuple(suffixes)).sub(r"<strong>\1</strong>", str(safe)))


def set_style_property(style_text: str | None, name: str, value: str | None) -> str:
    """Set (or, with an empty value, remove) one property of an inline style."""
    style = cssutils.parseStyle(style_text or "")
    if value:
        style.setProperty(name, value)
    else:
        style.removeProperty(name)
    return style.getCssText(separator=" ")


def get_style_property(style_text: str | None, name: str) -> str:
    return cssutils.parseStyle(style_text or "").getPropertyValue(name)
