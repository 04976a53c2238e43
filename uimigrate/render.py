"""Jinja2 rendering of generated source units and documents."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|[^A-Za-z0-9]+")
_HOOK_NAME = re.compile(r"^use[A-Z0-9]")
_JSX_TEXT_UNSAFE = re.compile(r"[{}<>&\n]")


def kebab_case(value: str) -> str:
    """``UserCard`` -> ``user-card``; ``users.$id`` -> ``users-id``."""
    parts = [part for part in _WORD_BOUNDARY.split(value) if part]
    return "-".join(part.lower() for part in parts)


def pascal_case(value: str) -> str:
    """``users.$id`` -> ``UsersId``; ``user-card`` -> ``UserCard``."""
    parts = [part for part in _WORD_BOUNDARY.split(value) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts)


def camel_case(value: str) -> str:
    pascal = pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def unit_identifier(stem: str) -> str:
    """JavaScript identifier for a unit file stem.

    Hooks keep camelCase (``use-toast`` -> ``useToast``), everything else
    becomes PascalCase (``alert-dialog`` -> ``AlertDialog``).
    """
    camel = camel_case(stem)
    identifier = camel if _HOOK_NAME.match(camel) else pascal_case(stem)
    if not identifier or identifier[0].isdigit():
        identifier = f"Component{identifier}"
    return identifier


def jsx_text(value: str) -> str:
    """Render ``value`` as JSX child text, as a ``{"..."}`` literal when needed."""
    if _JSX_TEXT_UNSAFE.search(value):
        return "{" + json.dumps(value, ensure_ascii=False) + "}"
    return value


def jsx_attr(value: str) -> str:
    """Render ``value`` as a JSX attribute value including its delimiters."""
    if '"' in value or "\n" in value:
        return "{" + json.dumps(value, ensure_ascii=False) + "}"
    return f'"{value}"'


class TemplateRenderer:
    """Renders templates from the package ``templates/`` directory."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories: Sequence[Path] = [templates_dir] if templates_dir else []
        default_dir = Path(__file__).with_name("templates")
        loader = FileSystemLoader([str(path) for path in (*directories, default_dir)])
        self._env = Environment(
            loader=loader,
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["kebab"] = kebab_case
        self._env.filters["pascal"] = pascal_case
        self._env.filters["camel"] = camel_case
        self._env.filters["jsx_text"] = jsx_text
        self._env.filters["jsx_attr"] = jsx_attr

    def render(self, template_name: str, **context: Any) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context)


__all__ = [
    "TemplateRenderer",
    "camel_case",
    "jsx_attr",
    "jsx_text",
    "kebab_case",
    "pascal_case",
    "unit_identifier",
]
