"""Layer-name helpers — sanitising, common prefixes, pluralisation."""

from __future__ import annotations

import os
import re

# Plugin prefix (box glyph + whitespace) some tools prepend to layer names.
_PLUGIN_PREFIX_RE = re.compile(r"^\u25A3\s+")
# Keep printable ASCII and Latin-1; drop emoji, box drawing and the like.
_UNSAFE_CHARS_RE = re.compile(r"[^\u0020-\u007E\u00A0-\u00FF]")
# Trailing counters / separators: "Card_03 " -> "Card".
_TRAILING_COUNTER_RE = re.compile(r"[\d_\s]+$")

_IRREGULAR_PLURALS: dict[str, str] = {
    "child": "children",
    "person": "people",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "foot": "feet",
    "tooth": "teeth",
    "leaf": "leaves",
    "half": "halves",
    "shelf": "shelves",
    "box": "boxes",
    "index": "indices",
    "matrix": "matrices",
    "category": "categories",
    "entry": "entries",
    "story": "stories",
    "reply": "replies",
    "body": "bodies",
    "glass": "glasses",
    "class": "classes",
    "dash": "dashes",
    "sheep": "sheep",
    "fish": "fish",
    "series": "series",
}

_FALLBACK_GROUP_NAME = "items"


def sanitize_layer_name(name: str | None) -> str | None:
    """Strip plugin prefixes and non Latin-1 glyphs from a layer name."""
    if not name:
        return name
    sanitized = _PLUGIN_PREFIX_RE.sub("", name)
    sanitized = _UNSAFE_CHARS_RE.sub("", sanitized)
    sanitized = sanitized.strip()
    return sanitized or name


def common_prefix(names: list[str]) -> str:
    if not names:
        return ""
    return os.path.commonprefix(names)


def pluralize(noun: str) -> str:
    """Pluralise the last word of ``noun``, keeping its capitalisation."""
    if not noun:
        return noun
    head, _, last = noun.rpartition(" ")
    irregular = _IRREGULAR_PLURALS.get(last.lower())
    if irregular is not None:
        plural = irregular
        if last[:1].isupper():
            plural = plural[:1].upper() + plural[1:]
        if last.isupper() and len(last) > 1:
            plural = plural.upper()
    else:
        plural = last + "s"
    return f"{head} {plural}" if head else plural


def group_name(names: list[str]) -> str:
    """Longest common prefix, counters stripped, pluralised: ['Card 1', 'Card 2'] -> 'Cards'."""
    stem = _TRAILING_COUNTER_RE.sub("", common_prefix(names))
    if not stem:
        return _FALLBACK_GROUP_NAME
    return pluralize(stem)
