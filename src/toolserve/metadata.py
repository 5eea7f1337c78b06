"""Metadata contract for the ``_meta`` field on requests and results.

Keys starting with ``mcp:`` or ``mcp-`` are reserved for the protocol
itself. Callers that must reject such keys use :func:`validate_meta_field`;
everything on the response path uses :func:`sanitize_meta_field` /
:func:`format_meta_field`, which filter silently and never raise.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from toolserve.errors import ReservedMetadataError

Meta = dict[str, Any]

RESERVED_PREFIXES = ("mcp:", "mcp-")


def is_reserved_key(key: str) -> bool:
    return key.startswith(RESERVED_PREFIXES)


def validate_meta_field(meta: Mapping[str, Any] | None) -> None:
    """Raise :class:`ReservedMetadataError` on the first reserved key."""
    for key in meta or {}:
        if is_reserved_key(key):
            raise ReservedMetadataError(key)


def sanitize_meta_field(meta: Mapping[str, Any] | None) -> Meta:
    """Return a copy without reserved keys and without the empty key."""
    return {
        key: value
        for key, value in (meta or {}).items()
        if key and not is_reserved_key(key)
    }


def merge_meta_fields(*metas: Mapping[str, Any] | None) -> Meta:
    """Fold *metas* left to right; later sources win on collisions.

    The result is not sanitized.
    """
    merged: Meta = {}
    for meta in metas:
        if meta:
            merged.update(meta)
    return merged


def format_meta_field(meta: Mapping[str, Any] | None) -> Meta | None:
    """Sanitize *meta* for serialization.

    Returns ``None`` rather than ``{}`` when nothing survives, so the field
    can be omitted from the payload entirely.
    """
    sanitized = sanitize_meta_field(meta)
    return sanitized or None
