"""File-based routing conventions: page paths to route strings."""

from __future__ import annotations

import re
from typing import List, Tuple

from ..source_files import SOURCE_EXTENSIONS

# Split on "." and "/" except inside [bracketed] segments such as [...slug].
_SEGMENT_SPLIT = re.compile(r"[./](?![^\[]*\])")
_BRACKET_PARAM = re.compile(r"^\[(\.\.\.)?([^\]]+)\]$")
_INDEX_SEGMENTS = {"index", "_index"}


def derive_route(relative_path: str, *, lowercase: bool = False) -> str:
    """Derive a route string from a page path relative to its page directory.

    ``users.$id.tsx`` and ``users/[id].tsx`` both become ``/users/:id``;
    ``_index`` and ``index`` segments collapse to their parent and
    ``_``-prefixed pathless layout segments are dropped.
    """
    stem = relative_path.replace("\\", "/")
    for extension in SOURCE_EXTENSIONS:
        if stem.endswith(extension):
            stem = stem[: -len(extension)]
            break

    segments: List[str] = []
    for raw in _SEGMENT_SPLIT.split(stem):
        segment = _convert_segment(raw, lowercase=lowercase)
        if segment:
            segments.append(segment)
    return "/" + "/".join(segments)


def route_params(route: str) -> Tuple[str, ...]:
    params: List[str] = []
    for segment in route.split("/"):
        if segment.startswith(":"):
            params.append(segment[1:].rstrip("*"))
    return tuple(params)


def _convert_segment(raw: str, *, lowercase: bool) -> str:
    if not raw or raw in _INDEX_SEGMENTS:
        return ""
    if raw == "$":
        return "*"
    if raw.startswith("$"):
        return f":{raw[1:]}"
    bracket = _BRACKET_PARAM.match(raw)
    if bracket:
        return f":{bracket.group(2)}{'*' if bracket.group(1) else ''}"
    if raw.startswith("(") and raw.endswith(")"):
        return ""
    if raw.startswith("_"):
        return ""
    # A trailing underscore escapes Remix layout nesting.
    segment = raw.rstrip("_") or raw
    return segment.lower() if lowercase else segment


__all__ = ["derive_route", "route_params"]
