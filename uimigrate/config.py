"""Configuration loading for uimigrate (.uimigrate.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .models import MigrationOptions

CONFIG_FILENAME = ".uimigrate.yml"

TARGET_PLATFORMS = ("nextjs", "react")
TARGET_STYLINGS = ("tailwind", "styled-components", "css-modules")

_BOOL_OPTIONS = (
    "preserve_structure",
    "create_backup",
    "migrate_tests",
    "migrate_stories",
    "convert_to_typescript",
    "add_localization",
    "add_compliance",
    "dry_run",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class MigrationConfig:
    """Represents the settings defined in .uimigrate.yml."""

    root: Path
    adapter: Optional[str] = None
    output_path: Optional[str] = None
    exclude_paths: List[str] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)


def load_config(config_path: Path) -> MigrationConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return MigrationConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    options_data = _as_dict(data.get("options"))
    options: Dict[str, Any] = {}
    for name in _BOOL_OPTIONS:
        value = _as_bool(options_data.get(name))
        if value is not None:
            options[name] = value

    platform = _as_str(options_data.get("target_platform"))
    if platform is not None:
        options["target_platform"] = _validate_choice("target_platform", platform, TARGET_PLATFORMS)
    styling = _as_str(options_data.get("target_styling"))
    if styling is not None:
        options["target_styling"] = _validate_choice("target_styling", styling, TARGET_STYLINGS)

    output_path = _as_str(data.get("output_path"))
    if output_path is not None and not Path(output_path).is_absolute():
        output_path = str(root / output_path)

    return MigrationConfig(
        root=root,
        adapter=_as_str(data.get("adapter")),
        output_path=output_path,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        options=options,
    )


def build_options(
    config: MigrationConfig,
    overrides: Mapping[str, Any] | None = None,
) -> MigrationOptions:
    """Merge file settings with explicit overrides into immutable run options."""
    merged: Dict[str, Any] = dict(config.options)
    if config.output_path:
        merged["output_path"] = config.output_path
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    known = {item.name for item in fields(MigrationOptions)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigError(f"Unknown migration options: {', '.join(unknown)}")
    if not merged.get("output_path"):
        raise ConfigError("An output path is required (set output_path or pass --output)")

    merged["target_platform"] = _validate_choice(
        "target_platform", merged.get("target_platform", "react"), TARGET_PLATFORMS
    )
    merged["target_styling"] = _validate_choice(
        "target_styling", merged.get("target_styling", "tailwind"), TARGET_STYLINGS
    )
    merged["output_path"] = str(Path(merged["output_path"]).expanduser().resolve())
    return MigrationOptions(**merged)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _validate_choice(name: str, value: Any, choices: Sequence[str]) -> str:
    text = str(value).strip().lower()
    if text not in choices:
        raise ConfigError(f"{name} must be one of {', '.join(choices)} (got {value!r})")
    return text


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "MigrationConfig",
    "TARGET_PLATFORMS",
    "TARGET_STYLINGS",
    "build_options",
    "load_config",
]
