"""Adapter for projects generated with Lovable."""

from __future__ import annotations

from ..analyzers.project import ProjectLayout
from .base import DetectionProfile, SourceAdapter
from .rewriter import SourceRewriter

VENDOR_MODULES = ("@lovable-dev/ui", "@lovable/components", "lovable-ui")

COMPONENT_MAPPING = {
    "LovableButton": "Button",
    "LovableInput": "Input",
    "LovableCard": "Card",
    "LovableModal": "Modal",
    "LovableForm": "Form",
    "LovableGrid": "Grid",
    "LovableContainer": "Container",
    "LovableText": "Typography",
    "LovableImage": "Image",
    "LovableIcon": "Icon",
}


class LovableAdapter(SourceAdapter):
    name = "lovable"
    description = "Lovable"
    profile = DetectionProfile(
        marker_files=("lovable.config.js", ".lovable", "lovable.json"),
        dependencies=VENDOR_MODULES,
        usage_tokens=VENDOR_MODULES + tuple(COMPONENT_MAPPING),
    )
    layout = ProjectLayout(
        source="lovable",
        style_dirs=("src/styles", "styles", "src/css", "css"),
        auth_markers=("useAuth", "withAuth"),
        layout_markers=("Layout",),
        lowercase_routes=True,
    )

    def build_rewriter(self) -> SourceRewriter:
        return SourceRewriter(
            mapping=COMPONENT_MAPPING,
            vendor_prefix="Lovable",
            vendor_modules=VENDOR_MODULES,
        )


__all__ = ["COMPONENT_MAPPING", "LovableAdapter", "VENDOR_MODULES"]
