"""Generators for project-level artifacts: manifest, configs, docs and locales."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Sequence

from .models import ExtractedText, MigrationOptions, MigrationResult, ProjectAnalysis
from .outputs import is_typed_output
from .render import TemplateRenderer

LOCALES = ("nb-NO", "nn-NO", "en-US", "ar-SA", "fr-FR")
DEFAULT_LOCALE = LOCALES[0]

_COMMON_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "nb-NO": {"welcome": "Velkommen", "loading": "Laster..."},
    "nn-NO": {"welcome": "Velkomen", "loading": "Lastar..."},
    "en-US": {"welcome": "Welcome", "loading": "Loading..."},
    "ar-SA": {"welcome": "مرحبا", "loading": "جار التحميل..."},
    "fr-FR": {"welcome": "Bienvenue", "loading": "Chargement..."},
}


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def package_manifest(
    analysis: ProjectAnalysis,
    options: MigrationOptions,
    *,
    description: str,
    excluded: Iterable[str] = (),
) -> Dict[str, Any]:
    """Build the target ``package.json`` contents.

    Source dependencies are carried over unless listed in ``excluded``; target
    requirements are layered on top and win on version conflicts.
    """
    nextjs = options.target_platform == "nextjs"
    typed = is_typed_output(analysis, options)
    skip = set(excluded)

    dependencies: Dict[str, str] = {
        name: version for name, version in sorted(analysis.dependencies.items()) if name not in skip
    }
    dependencies.update(
        {
            "react": "^18.0.0",
            "react-dom": "^18.0.0",
            "@xala-technologies/ui-system": "workspace:*",
            "@xala-technologies/foundation": "workspace:*",
        }
    )
    if nextjs:
        dependencies["next"] = "^14.0.0"
    else:
        dependencies["react-helmet-async"] = "^2.0.0"
        dependencies["react-router-dom"] = "^6.0.0"
    if options.add_localization:
        dependencies["react-i18next"] = "^13.0.0"
        dependencies["i18next"] = "^23.0.0"
    if options.add_compliance:
        dependencies["@xala-technologies/norwegian-compliance"] = "workspace:*"
    if options.target_styling == "styled-components":
        dependencies["styled-components"] = "^6.0.0"

    dev_dependencies: Dict[str, str] = {
        name: version for name, version in sorted(analysis.dev_dependencies.items()) if name not in skip
    }
    dev_dependencies.update({"eslint": "^9.0.0", "vitest": "^1.0.0"})
    if typed:
        dev_dependencies.update(
            {
                "@types/react": "^18.0.0",
                "@types/react-dom": "^18.0.0",
                "@types/node": "^20.0.0",
                "typescript": "^5.0.0",
            }
        )
    if options.target_styling == "tailwind":
        dev_dependencies.update({"tailwindcss": "^3.0.0", "autoprefixer": "^10.0.0", "postcss": "^8.0.0"})
    if not nextjs:
        dev_dependencies.update({"vite": "^5.0.0", "@vitejs/plugin-react": "^4.0.0"})

    scripts: Dict[str, str] = {
        "dev": "next dev" if nextjs else "vite",
        "build": "next build" if nextjs else "vite build",
        "start": "next start" if nextjs else "vite preview",
        "lint": "eslint . --max-warnings 0",
        "test": "vitest",
    }
    if typed:
        scripts["type-check"] = "tsc --noEmit"

    return {
        "name": Path(options.output_path).name or "migrated-app",
        "version": "1.0.0",
        "private": True,
        "description": description,
        "scripts": scripts,
        "dependencies": dict(sorted(dependencies.items())),
        "devDependencies": dict(sorted(dev_dependencies.items())),
    }


def tsconfig(options: MigrationOptions) -> Dict[str, Any]:
    nextjs = options.target_platform == "nextjs"
    include = ["next-env.d.ts", "**/*.ts", "**/*.tsx"] if nextjs else ["src"]
    return {
        "compilerOptions": {
            "target": "ES2022",
            "lib": ["dom", "dom.iterable", "es2022"],
            "allowJs": True,
            "skipLibCheck": True,
            "strict": True,
            "noEmit": True,
            "esModuleInterop": True,
            "module": "esnext",
            "moduleResolution": "bundler",
            "resolveJsonModule": True,
            "isolatedModules": True,
            "jsx": "preserve" if nextjs else "react-jsx",
            "baseUrl": ".",
            "paths": {"@/*": ["./src/*"]},
        },
        "include": include,
        "exclude": ["node_modules"],
    }


def configuration_files(
    renderer: TemplateRenderer,
    analysis: ProjectAnalysis,
    options: MigrationOptions,
) -> Dict[str, str]:
    """Return target configuration files keyed by their output-root relative name."""
    files: Dict[str, str] = {}
    if is_typed_output(analysis, options):
        files["tsconfig.json"] = dump_json(tsconfig(options))
    if options.target_styling == "tailwind":
        files["tailwind.config.js"] = renderer.render(
            "config/tailwind.config.js.j2", platform=options.target_platform
        )
    if options.target_platform == "nextjs":
        files["next.config.js"] = renderer.render(
            "config/next.config.js.j2",
            localization=options.add_localization,
            locales=LOCALES,
        )
    else:
        files["vite.config.ts"] = renderer.render("config/vite.config.ts.j2")
    return files


def render_summary(
    renderer: TemplateRenderer,
    result: MigrationResult,
    options: MigrationOptions,
    *,
    generated_at: str,
) -> str:
    analysis = result.analysis
    return renderer.render(
        "docs/summary.md.j2",
        project_name=Path(options.output_path).name or "Migrated Project",
        analysis=analysis,
        options=options,
        summary=result.summary,
        errors=result.errors,
        warnings=result.warnings,
        locales=LOCALES,
        package_manager=analysis.package_manager if analysis else "npm",
        generated_at=generated_at,
    )


def render_compliance(renderer: TemplateRenderer, *, generated_at: str) -> str:
    return renderer.render("docs/compliance.md.j2", generated_at=generated_at)


def locale_files(texts: Sequence[ExtractedText], *, generated_at: str) -> Dict[str, str]:
    """Return one JSON locale stub per supported locale, keyed by file name.

    Extracted texts populate the default locale; other locales receive the
    same keys with empty values for translators to fill in.
    """
    extracted: Dict[str, str] = {}
    for item in texts:
        extracted.setdefault(item.key, item.text)

    files: Dict[str, str] = {}
    for locale in LOCALES:
        translations: Dict[str, Any] = {"common": dict(_COMMON_TRANSLATIONS[locale])}
        if extracted:
            translations["extracted"] = {
                key: (value if locale == DEFAULT_LOCALE else "") for key, value in sorted(extracted.items())
            }
        document = {
            "locale": locale,
            "direction": "rtl" if locale == "ar-SA" else "ltr",
            "metadata": {"version": "1.0.0", "lastUpdated": generated_at},
            "translations": translations,
        }
        files[f"{locale}.json"] = dump_json(document)
    return files


__all__ = [
    "DEFAULT_LOCALE",
    "LOCALES",
    "configuration_files",
    "dump_json",
    "locale_files",
    "package_manifest",
    "render_compliance",
    "render_summary",
    "tsconfig",
]
