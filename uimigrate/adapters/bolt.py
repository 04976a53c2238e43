"""Adapter for Bolt.new projects (Remix based)."""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Dict, List

from ..analyzers.project import ProjectLayout
from ..analyzers.utils import all_dependency_names, load_package_json
from ..models import ProjectAnalysis, StylingInfo
from ..source_files import iter_files
from .base import CarriedStyle, DetectionProfile, Signal, SourceAdapter
from .rewriter import RuntimeTarget, SourceRewriter

BOLT_DEPENDENCIES = ("@bolt/core", "bolt-ui", "@bolt/components", "bolt-router", "bolt-state")

_SHARED_PRIMITIVES = (
    "Button",
    "Input",
    "Card",
    "Modal",
    "Form",
    "Grid",
    "Container",
    "Text",
    "Image",
    "Icon",
    "Select",
    "Checkbox",
    "Radio",
    "Switch",
    "Slider",
    "Tabs",
    "Accordion",
    "Toast",
    "Dialog",
    "Popover",
    "Tooltip",
)

COMPONENT_MAPPING = {name: ("Typography" if name == "Text" else name) for name in _SHARED_PRIMITIVES}

HOOK_RENAMES = {
    "useLoaderData": "useData",
    "useActionData": "useFormState",
    "useTransition": "useLoading",
    "useNavigation": "useLoading",
}

_REACT_ROUTER = "react-router-dom"

RUNTIME_RULES: Dict[str, Dict[str, RuntimeTarget]] = {
    "react": {
        name: RuntimeTarget(_REACT_ROUTER, name)
        for name in (
            "Link",
            "NavLink",
            "Outlet",
            "useNavigate",
            "useParams",
            "useSearchParams",
            "useLocation",
        )
    },
    "nextjs": {
        "Link": RuntimeTarget("next/link", "Link", default=True),
        "NavLink": RuntimeTarget("next/link", "Link", default=True),
        "useNavigate": RuntimeTarget("next/navigation", "useRouter"),
        "useParams": RuntimeTarget("next/navigation", "useParams"),
        "useSearchParams": RuntimeTarget("next/navigation", "useSearchParams"),
        "useLocation": RuntimeTarget("next/navigation", "usePathname"),
    },
}

_REMIX_STACK_PARTNERS = ("@remix-run/react", "prisma", "tailwindcss")
_ROUTE_MODULE_DIRS = ("app/routes", "routes/api", "server")
_ROOT_BLOCK = re.compile(r":root\s*{")
_NORWAY_TOKENS = """:root {
  /* Norwegian design tokens */
  --color-norway-blue: #003d82;
  --color-norway-red: #ba0c2f;
  --color-norway-white: #ffffff;
"""


class BoltAdapter(SourceAdapter):
    name = "bolt"
    description = "Bolt.new"
    extended_tokens = True
    profile = DetectionProfile(
        marker_files=(".bolt", "bolt.config.js", "bolt.config.json", ".boltrc"),
        dependencies=BOLT_DEPENDENCIES,
        layout_dirs=("app/routes", "app/components", "app/lib", "app/styles", "routes", "server"),
        usage_tokens=("@bolt/", "bolt-ui", "bolt-router", "bolt-state"),
        scan_dirs=("app", "src"),
    )
    layout = ProjectLayout(
        source="bolt",
        default_framework="remix",
        src_dirs=("app", "src"),
        component_dirs=("app/components", "components"),
        page_dirs=("app/routes", "routes"),
        style_dirs=("app/styles", "styles"),
        asset_dirs=("app/assets", "assets"),
        typescript_markers=("tsconfig.json", "app/root.tsx", "remix.config.ts"),
        config_files=("package.json", "tsconfig.json", "remix.config.js", "vite.config.ts"),
        auth_markers=("requireAuth", "authenticate"),
        layout_markers=("Layout", "Outlet"),
        data_fetching_markers=(("loader", "ssr"), ("action", "ssr")),
    )

    def build_rewriter(self) -> SourceRewriter:
        return SourceRewriter(
            mapping=COMPONENT_MAPPING,
            vendor_prefix="Bolt",
            vendor_modules=BOLT_DEPENDENCIES,
            vendor_path_markers=("components/ui/",),
            runtime_prefixes=("@remix-run/",),
            runtime_rules=RUNTIME_RULES,
            hook_renames=HOOK_RENAMES,
        )

    def detection_signals(self) -> List[Signal]:
        return super().detection_signals() + [self.has_remix_stack, self.has_route_modules]

    def has_remix_stack(self, root: Path) -> bool:
        names = all_dependency_names(load_package_json(root))
        return "@remix-run/node" in names and any(name in names for name in _REMIX_STACK_PARTNERS)

    def has_route_modules(self, root: Path) -> bool:
        for name in _ROUTE_MODULE_DIRS:
            directory = root / name
            if directory.is_dir() and next(iter_files(directory, (".ts", ".tsx"), rules=self.rules), None):
                return True
        return False

    def extra_styles(
        self,
        styling: StylingInfo,
        analysis: ProjectAnalysis,
        generated: Dict[str, str],
    ) -> Dict[str, str]:
        if self.options.target_styling == "tailwind":
            return {"components.css": self.renderer.render("styles/components.css.j2", extended=True)}
        return {}

    def carried_styles(
        self,
        styling: StylingInfo,
        analysis: ProjectAnalysis,
        generated: Dict[str, str],
    ) -> List[CarriedStyle]:
        """Carry existing style files over with design tokens injected.

        A file named like a generated one is renamed ``legacy-<name>``; any
        further clash is resolved when the output path is claimed.
        """
        carried: List[CarriedStyle] = []
        for relative in styling.files:
            name = PurePosixPath(relative).name
            if name in generated:
                name = f"legacy-{name}"
            content = (Path(analysis.root) / relative).read_text(encoding="utf-8")
            carried.append(CarriedStyle(source=relative, name=name, content=inject_tokens(content)))
        return carried


def inject_tokens(css: str) -> str:
    """Insert the Norwegian colour tokens at the top of the first ``:root`` block."""
    return _ROOT_BLOCK.sub(lambda _: _NORWAY_TOKENS, css, count=1)


__all__ = ["BOLT_DEPENDENCIES", "BoltAdapter", "COMPONENT_MAPPING", "HOOK_RENAMES", "inject_tokens"]
