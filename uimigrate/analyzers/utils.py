"""Shared helper utilities for project analysis and adapter detection."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Set

# Node.js manifest helpers


def load_package_json(root: Path) -> Dict[str, object]:
    """Return the parsed package.json contents or an empty dict."""
    package_json = root / "package.json"
    if not package_json.exists():
        return {}
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return {}
    if isinstance(data, dict):
        return data
    return {}


def dependency_map(package: Mapping[str, object], key: str) -> Dict[str, str]:
    deps = package.get(key, {})
    if isinstance(deps, dict):
        return {str(name): str(version) for name, version in deps.items()}
    return {}


def all_dependency_names(package: Mapping[str, object]) -> Set[str]:
    """Return the union of dependency and devDependency names."""
    return set(dependency_map(package, "dependencies")) | set(dependency_map(package, "devDependencies"))


def detect_node_package_manager(manifest_paths: Set[str]) -> str:
    """Infer the preferred Node package manager based on lockfiles."""
    if "pnpm-lock.yaml" in manifest_paths:
        return "pnpm"
    if "yarn.lock" in manifest_paths:
        return "yarn"
    if "package-lock.json" in manifest_paths:
        return "npm"
    return "npm"


# Framework heuristics


def detect_framework(dependencies: Iterable[str], default: str) -> str:
    lower = {dep.lower() for dep in dependencies}
    if "@remix-run/node" in lower or "@remix-run/react" in lower:
        return "remix"
    if "next" in lower:
        return "nextjs"
    return default


def detect_build_tool(dependencies: Iterable[str], config_files: Iterable[str]) -> str:
    lower = {dep.lower() for dep in dependencies}
    configs = set(config_files)
    if "next" in lower:
        return "next"
    if "@remix-run/dev" in lower and "vite" not in lower:
        return "remix"
    if "vite" in lower or any(name.startswith("vite.config.") for name in configs):
        return "vite"
    if "webpack" in lower or "react-scripts" in lower:
        return "webpack"
    return "vite"


def detect_styling_type(dependencies: Iterable[str], style_files: Iterable[str]) -> str:
    lower = {dep.lower() for dep in dependencies}
    if "tailwindcss" in lower:
        return "tailwind"
    if "styled-components" in lower:
        return "styled-components"
    if "@emotion/react" in lower or "@emotion/styled" in lower:
        return "emotion"
    files = list(style_files)
    if any(".module." in name for name in files):
        return "css-modules"
    if any(name.endswith(".scss") for name in files):
        return "scss"
    if any(name.endswith(".less") for name in files):
        return "less"
    return "css"


_STATE_LIBRARIES = {
    "zustand": "zustand",
    "@reduxjs/toolkit": "redux",
    "redux": "redux",
    "recoil": "recoil",
    "jotai": "jotai",
    "mobx": "mobx",
}


def detect_state_library(dependencies: Iterable[str]) -> Optional[str]:
    """Return the tag of the first known state library found, or None."""
    lower = {dep.lower() for dep in dependencies}
    for package, tag in _STATE_LIBRARIES.items():
        if package in lower:
            return tag
    return None


def state_library_modules(tag: str) -> Set[str]:
    return {package for package, value in _STATE_LIBRARIES.items() if value == tag}


def detect_test_framework(dependencies: Iterable[str]) -> Optional[str]:
    lower = {dep.lower() for dep in dependencies}
    if "vitest" in lower:
        return "vitest"
    if "jest" in lower:
        return "jest"
    return None


def has_coverage_tooling(dependencies: Iterable[str], scripts: Mapping[str, object]) -> bool:
    lower = {dep.lower() for dep in dependencies}
    if lower & {"@vitest/coverage-v8", "@vitest/coverage-istanbul", "c8", "nyc"}:
        return True
    return any("--coverage" in str(command) for command in scripts.values())


def has_e2e_tooling(dependencies: Iterable[str]) -> bool:
    lower = {dep.lower() for dep in dependencies}
    return bool(lower & {"@playwright/test", "playwright", "cypress"})


_ASSET_TYPES = {
    "image": {".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".ico", ".avif"},
    "font": {".woff", ".woff2", ".ttf", ".otf", ".eot"},
    "video": {".mp4", ".webm", ".avi", ".mov"},
    "audio": {".mp3", ".wav", ".ogg"},
}


def asset_type(file_name: str) -> str:
    suffix = Path(file_name).suffix.lower()
    for kind, suffixes in _ASSET_TYPES.items():
        if suffix in suffixes:
            return kind
    return "document"


__all__ = [
    "all_dependency_names",
    "asset_type",
    "dependency_map",
    "detect_build_tool",
    "detect_framework",
    "detect_node_package_manager",
    "detect_state_library",
    "detect_styling_type",
    "detect_test_framework",
    "has_coverage_tooling",
    "has_e2e_tooling",
    "load_package_json",
    "state_library_modules",
]
