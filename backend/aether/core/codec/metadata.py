"""Metadata envelope codec for locally stored notes.

A stored record looks like::

    <!--aether-meta:{"createdAt": 1700000000000, "updatedAt": 1700000000000, "isArchived": false}-->
    # Title

    body with [[Links]] and #tags

The envelope line is optional. A missing or malformed envelope never raises:
``decode_metadata`` returns ``Degraded`` and the caller keeps the raw text.
"""

from __future__ import annotations

import re

from pydantic import ValidationError

from aether.core.models.base import AppBaseModel
from aether.core.models.note import NoteMetadata
from aether.utils.markdown import title_from_id

ENVELOPE_OPEN = "<!--aether-meta:"
ENVELOPE_CLOSE = "-->"
ENVELOPE_PATTERN = re.compile(r"^<!--aether-meta:(.*)-->\s*$")
HEADING_PREFIX = "# "


class Decoded(AppBaseModel):
    """Envelope found and parsed."""

    meta: NoteMetadata
    body: str


class Degraded(AppBaseModel):
    """No usable envelope; ``body`` is the raw input unchanged."""

    body: str
    reason: str


DecodeResult = Decoded | Degraded


def encode_metadata(meta: NoteMetadata) -> str:
    """Return the single envelope line for ``meta``, newline included."""
    payload = meta.model_dump_json(by_alias=True)
    return f"{ENVELOPE_OPEN}{payload}{ENVELOPE_CLOSE}\n"


def decode_metadata(raw: str) -> DecodeResult:
    first_line, sep, rest = raw.partition("\n")
    match = ENVELOPE_PATTERN.match(first_line)
    if not match:
        return Degraded(body=raw, reason="missing envelope")
    try:
        meta = NoteMetadata.model_validate_json(match.group(1))
    except ValidationError:
        return Degraded(body=raw, reason="malformed envelope")
    return Decoded(meta=meta, body=rest if sep else "")


def metadata_of(result: DecodeResult) -> NoteMetadata:
    """Metadata carried by a decode result; empty when degraded."""
    if isinstance(result, Decoded):
        return result.meta
    return NoteMetadata()


def split_title(note_id: str, body: str) -> tuple[str, str]:
    """Split a leading ``# Heading`` off ``body``.

    Returns ``(title, remaining_body)``. The blank line that conventionally
    follows the heading is dropped too. Without a heading, the title is
    derived from ``note_id`` and the body is returned as-is.
    """
    first_line, sep, rest = body.partition("\n")
    if not first_line.startswith(HEADING_PREFIX):
        return title_from_id(note_id), body
    title = first_line[len(HEADING_PREFIX):].strip() or title_from_id(note_id)
    if rest.startswith("\n"):
        rest = rest[1:]
    return title, rest


def compose_record(title: str, body: str, meta: NoteMetadata) -> str:
    """Build the full stored text: envelope, heading (unless ``body`` has one) and body."""
    if body.startswith(HEADING_PREFIX):
        return encode_metadata(meta) + body
    return f"{encode_metadata(meta)}{HEADING_PREFIX}{title}\n\n{body}"
