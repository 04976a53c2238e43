"""Source adapter implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Type

from ..logging import get_logger
from ..models import MigrationOptions
from .base import CarriedStyle, DetectionProfile, SourceAdapter
from .bolt import BoltAdapter
from .lovable import LovableAdapter
from .rewriter import Edit, SourceRewriter, apply_edits

_ENTRY_POINT_GROUP = "uimigrate.adapters"

# Priority order: Lovable's signals are vendor specific, Bolt's layout signal
# also matches plain Remix projects.
_BUILTIN_ADAPTERS: Dict[str, Type[SourceAdapter]] = {
    "lovable": LovableAdapter,
    "bolt": BoltAdapter,
}

AdapterFactory = Callable[..., SourceAdapter]

logger = get_logger("adapters")


def discover_adapters(options: MigrationOptions | None = None, **kwargs: object) -> List[SourceAdapter]:
    """Return instantiated adapters in priority order.

    Built-in adapters come first, followed by adapters registered under the
    ``uimigrate.adapters`` entry-point group in discovery order.
    """
    adapters: List[SourceAdapter] = []
    seen: Set[str] = set()

    def _add(name: str, factory: AdapterFactory) -> None:
        key = name.lower()
        if key in seen:
            return
        instance = factory(options, **kwargs)
        if not isinstance(instance, SourceAdapter):
            raise TypeError(f"Adapter factory for '{name}' did not return a SourceAdapter instance")
        adapters.append(instance)
        seen.add(key)

    for name, factory in _BUILTIN_ADAPTERS.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load adapter entry point '{name}': {exc}") from exc

        def _factory(*args: object, obj: object = loaded, **kw: object) -> SourceAdapter:
            return _coerce_adapter(obj, *args, **kw)

        _add(name, _factory)

    return adapters


def adapter_names() -> List[str]:
    names = list(_BUILTIN_ADAPTERS)
    names.extend(entry.name for entry in _iter_entry_points() if entry.name not in names)
    return names


def get_adapter(name: str, options: MigrationOptions | None = None, **kwargs: object) -> SourceAdapter:
    """Return the adapter registered under ``name``; raises ``ValueError`` when unknown."""
    for adapter in discover_adapters(options, **kwargs):
        if adapter.name.lower() == name.lower():
            return adapter
    raise ValueError(f"Unknown adapter requested: {name}")


def select_adapter(
    project_path: Path | str,
    options: MigrationOptions | None = None,
    **kwargs: object,
) -> Optional[SourceAdapter]:
    """Return the first adapter, in priority order, that can migrate ``project_path``."""
    for adapter in discover_adapters(options, **kwargs):
        if adapter.can_migrate(project_path):
            logger.info("Detected %s project at %s", adapter.description, project_path)
            return adapter
    logger.info("No adapter recognised %s", project_path)
    return None


def _coerce_adapter(obj: object, *args: object, **kwargs: object) -> SourceAdapter:
    if isinstance(obj, SourceAdapter):
        return obj
    if isinstance(obj, type) and issubclass(obj, SourceAdapter):
        return obj(*args, **kwargs)
    if callable(obj):
        instance = obj(*args, **kwargs)
        if isinstance(instance, SourceAdapter):
            return instance
    raise TypeError("Adapter entry point must be a SourceAdapter subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "BoltAdapter",
    "CarriedStyle",
    "DetectionProfile",
    "Edit",
    "LovableAdapter",
    "SourceAdapter",
    "SourceRewriter",
    "adapter_names",
    "apply_edits",
    "discover_adapters",
    "get_adapter",
    "select_adapter",
]
