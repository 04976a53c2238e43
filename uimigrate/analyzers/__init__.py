"""Project analysis: syntax facts, routing conventions and structural models."""

from __future__ import annotations

from .project import ProjectAnalyzer, ProjectLayout
from .routes import derive_route, route_params
from .syntax import ParsedSource, SourceParseError, SyntaxParser

__all__ = [
    "ParsedSource",
    "ProjectAnalyzer",
    "ProjectLayout",
    "SourceParseError",
    "SyntaxParser",
    "derive_route",
    "route_params",
]
