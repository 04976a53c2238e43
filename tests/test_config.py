"""Tests for uimigrate.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from uimigrate.config import ConfigError, MigrationConfig, build_options, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, MigrationConfig)
    assert config.root == tmp_path.resolve()
    assert config.adapter is None
    assert config.output_path is None
    assert config.exclude_paths == []
    assert config.options == {}


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".uimigrate.yml"
    config_file.write_text(
        """
adapter: bolt
output_path: ../migrated
exclude_paths:
  - "app/legacy/"
  - "*.generated.tsx"
options:
  target_platform: NextJS
  target_styling: css-modules
  add_localization: "yes"
  create_backup: true
  dry_run: false
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.adapter == "bolt"
    assert config.output_path == str(tmp_path.resolve() / "../migrated")
    assert config.exclude_paths == ["app/legacy/", "*.generated.tsx"]
    assert config.options == {
        "add_localization": True,
        "create_backup": True,
        "dry_run": False,
        "target_platform": "nextjs",
        "target_styling": "css-modules",
    }


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".uimigrate.yml").write_text("options: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".uimigrate.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_unknown_platform(tmp_path: Path) -> None:
    (tmp_path / ".uimigrate.yml").write_text("options:\n  target_platform: vue\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_build_options_applies_overrides(tmp_path: Path) -> None:
    config = MigrationConfig(root=tmp_path, options={"add_compliance": True, "target_platform": "nextjs"})

    options = build_options(config, {"output_path": str(tmp_path / "out"), "target_platform": "react", "dry_run": None})

    assert options.output_path == str((tmp_path / "out").resolve())
    assert options.target_platform == "react"
    assert options.add_compliance is True
    assert options.dry_run is False


def test_build_options_requires_output_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        build_options(MigrationConfig(root=tmp_path))


def test_build_options_rejects_unknown_keys(tmp_path: Path) -> None:
    config = MigrationConfig(root=tmp_path, output_path=str(tmp_path / "out"))

    with pytest.raises(ConfigError):
        build_options(config, {"turbo": True})
