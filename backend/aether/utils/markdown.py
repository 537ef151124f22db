"""Text helpers for note bodies: wiki-links, hashtags and title slugs.

All functions here are pure and never raise on arbitrary input (except
``slugify`` for titles that reduce to nothing).
"""

from __future__ import annotations

import re

from aether.core.errors import InvalidTitleError

WIKI_LINK_PATTERN = re.compile(r"\[\[(.*?)\]\]")
TAG_PATTERN = re.compile(r"#([\w-]+)")
_WHITESPACE = re.compile(r"\s+")
_NON_SLUG = re.compile(r"[^a-z0-9-]")


def parse_links(body: str) -> list[str]:
    """Return the contents of every ``[[...]]`` in order of appearance, duplicates kept."""
    return WIKI_LINK_PATTERN.findall(body or "")


def extract_tags(body: str) -> set[str]:
    """Return the distinct ``#tag`` names in ``body`` without the leading ``#``."""
    return set(TAG_PATTERN.findall(body or ""))


def slugify(title: str) -> str:
    """Derive a note id from a title.

    Whitespace runs become single hyphens, the result is lower-cased and any
    character outside ``[a-z0-9-]`` is dropped. Wiki-link targets resolve
    through the same function.
    """
    slug = _NON_SLUG.sub("", _WHITESPACE.sub("-", (title or "").strip()).lower())
    if not slug.strip("-"):
        raise InvalidTitleError("Title must contain at least one letter or digit")
    return slug


def title_from_id(note_id: str) -> str:
    """Best-effort display title for a note whose body carries no heading."""
    stem = note_id[:-3] if note_id.endswith(".md") else note_id
    return " ".join(word[:1].upper() + word[1:] for word in stem.split("-"))
