"""Span-based source rewriting: import classification, tag and hook renames.

The syntax tree is never mutated. A read-only traversal produces a list of
:class:`Edit` values which :func:`apply_edits` applies to the original text in
a single pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..analyzers.syntax import ImportDecl, ParsedSource

TARGET_LIBRARY = "@xala-technologies/ui-system"

RUNTIME = "runtime"
VENDOR = "vendor"
UNRELATED = "unrelated"


@dataclass(frozen=True)
class Edit:
    """Replace ``source[start:end]`` (UTF-8 byte offsets) with ``replacement``."""

    start: int
    end: int
    replacement: str


def apply_edits(source: str, edits: Iterable[Edit]) -> str:
    """Apply non-overlapping edits to ``source`` in one pass.

    Raises ``ValueError`` when two edits overlap or an edit falls outside the
    source text.
    """
    data = source.encode("utf-8")
    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))
    pieces: List[bytes] = []
    cursor = 0
    for edit in ordered:
        if edit.start < 0 or edit.end < edit.start or edit.end > len(data):
            raise ValueError(f"Edit {edit.start}:{edit.end} is outside the source text")
        if edit.start < cursor:
            raise ValueError(f"Edit {edit.start}:{edit.end} overlaps a previous edit ending at {cursor}")
        pieces.append(data[cursor : edit.start])
        pieces.append(edit.replacement.encode("utf-8"))
        cursor = edit.end
    pieces.append(data[cursor:])
    return b"".join(pieces).decode("utf-8")


@dataclass(frozen=True)
class RuntimeTarget:
    """Where one framework-runtime binding goes on a target platform."""

    module: str
    name: str
    default: bool = False


@dataclass
class ImportPlan:
    """Classification of every import declaration of one unit."""

    target_names: List[str] = field(default_factory=list)
    runtime_imports: List[str] = field(default_factory=list)
    passthrough: List[ImportDecl] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)
    vendor_locals: Dict[str, str] = field(default_factory=dict)
    runtime_locals: Dict[str, str] = field(default_factory=dict)
    replaced: List[ImportDecl] = field(default_factory=list)

    def target_import(self) -> Optional[str]:
        if not self.target_names:
            return None
        return f"import {{ {', '.join(sorted(set(self.target_names)))} }} from '{TARGET_LIBRARY}';"


@dataclass
class RewriteResult:
    text: str
    plan: ImportPlan
    elements: List[str]
    hooks: List[str]


class SourceRewriter:
    """Rewrites one source framework's imports, JSX tags and hooks."""

    def __init__(
        self,
        *,
        mapping: Mapping[str, str],
        vendor_prefix: str,
        vendor_modules: Sequence[str],
        vendor_path_markers: Sequence[str] = (),
        runtime_prefixes: Sequence[str] = (),
        runtime_rules: Mapping[str, Mapping[str, RuntimeTarget]] | None = None,
        hook_renames: Mapping[str, str] | None = None,
    ) -> None:
        self.mapping = dict(mapping)
        self.vendor_prefix = vendor_prefix
        self.vendor_modules = tuple(vendor_modules)
        self.vendor_path_markers = tuple(vendor_path_markers)
        self.runtime_prefixes = tuple(runtime_prefixes)
        self.runtime_rules = {key: dict(value) for key, value in (runtime_rules or {}).items()}
        self.hook_renames = dict(hook_renames or {})

    # -- naming ------------------------------------------------------------

    def map_name(self, name: str) -> str:
        mapped = self.mapping.get(name)
        if mapped:
            return mapped
        if self.vendor_prefix and name.startswith(self.vendor_prefix) and len(name) > len(self.vendor_prefix):
            return name[len(self.vendor_prefix) :]
        return name

    def rename_hook(self, name: str) -> str:
        return self.hook_renames.get(name, name)

    # -- classification ----------------------------------------------------

    def classify(self, module: str) -> str:
        if any(module == prefix.rstrip("/") or module.startswith(prefix) for prefix in self.runtime_prefixes):
            return RUNTIME
        if module == TARGET_LIBRARY or self._is_vendor_module(module):
            return VENDOR
        return UNRELATED

    def _is_vendor_module(self, module: str) -> bool:
        for vendor in self.vendor_modules:
            if module == vendor or module.startswith(f"{vendor}/"):
                return True
        return any(marker in module for marker in self.vendor_path_markers)

    def plan_imports(self, parsed: ParsedSource, platform: str) -> ImportPlan:
        plan = ImportPlan()
        runtime_groups: Dict[str, Tuple[Optional[str], List[str]]] = {}
        rules = self.runtime_rules.get(platform, {})

        for decl in parsed.imports():
            kind = self.classify(decl.module)
            if kind == UNRELATED:
                plan.passthrough.append(decl)
                continue
            plan.replaced.append(decl)
            if kind == VENDOR:
                self._plan_vendor(decl, plan)
            else:
                self._plan_runtime(decl, rules, runtime_groups, plan)

        for module, (default, names) in runtime_groups.items():
            plan.runtime_imports.append(_format_import(module, default, names))
        return plan

    def _plan_vendor(self, decl: ImportDecl, plan: ImportPlan) -> None:
        if decl.type_only:
            plan.dropped.extend(binding.imported for binding in decl.named)
            return
        if decl.default:
            mapped = self.map_name(decl.default)
            plan.vendor_locals[decl.default] = mapped
            plan.target_names.append(mapped)
        for binding in decl.named:
            mapped = self.map_name(binding.imported)
            plan.vendor_locals[binding.local] = mapped
            plan.target_names.append(mapped)
        if decl.namespace:
            plan.dropped.append(f"* as {decl.namespace}")

    def _plan_runtime(
        self,
        decl: ImportDecl,
        rules: Mapping[str, RuntimeTarget],
        groups: Dict[str, Tuple[Optional[str], List[str]]],
        plan: ImportPlan,
    ) -> None:
        for binding in decl.named:
            target = rules.get(binding.imported)
            if target is None:
                plan.dropped.append(binding.imported)
                continue
            _, names = groups.setdefault(target.module, (None, []))
            if target.default:
                groups[target.module] = (target.name, names)
            elif target.name not in names:
                names.append(target.name)
            plan.runtime_locals[binding.local] = target.name
        if decl.default:
            plan.dropped.append(decl.default)

    # -- edits -------------------------------------------------------------

    def tag_edits(self, parsed: ParsedSource, plan: ImportPlan) -> Tuple[List[Edit], List[str]]:
        """Return rename edits for mapped JSX tags plus the target-library names used.

        Opening and closing tag names of an element are always renamed together.
        """
        edits: List[Edit] = []
        used: List[str] = []
        for element in parsed.jsx_elements():
            target, from_vendor = self._tag_target(element.name, plan)
            if target is None:
                continue
            if from_vendor and target not in used:
                used.append(target)
            if target == element.name:
                continue
            edits.append(Edit(element.opening.start, element.opening.end, target))
            if element.closing is not None:
                edits.append(Edit(element.closing.start, element.closing.end, target))
        return edits, used

    def _tag_target(self, name: str, plan: ImportPlan) -> Tuple[Optional[str], bool]:
        if name in plan.vendor_locals:
            return plan.vendor_locals[name], True
        if name in self.mapping:
            return self.mapping[name], True
        if name in plan.runtime_locals:
            return plan.runtime_locals[name], False
        return None, False

    def hook_edits(self, parsed: ParsedSource, plan: ImportPlan) -> Tuple[List[Edit], List[str]]:
        edits: List[Edit] = []
        hooks: List[str] = []
        for call in parsed.hook_calls():
            target = plan.runtime_locals.get(call.name) or self.rename_hook(call.name)
            if target not in hooks:
                hooks.append(target)
            if target != call.name:
                edits.append(Edit(call.span.start, call.span.end, target))
        return edits, hooks

    def import_edits(self, parsed: ParsedSource, plan: ImportPlan) -> List[Edit]:
        """Replace the first framework/vendor import with the rewritten block, drop the rest."""
        edits: List[Edit] = []
        lines = list(plan.runtime_imports)
        target = plan.target_import()
        if target:
            lines.append(target)
        for index, decl in enumerate(plan.replaced):
            if index == 0 and lines:
                edits.append(Edit(decl.start, decl.end, "\n".join(lines)))
                continue
            end = decl.end
            if parsed.data[end : end + 1] == b"\n":
                end += 1
            edits.append(Edit(decl.start, end, ""))
        return edits

    def rewrite(self, parsed: ParsedSource, platform: str) -> RewriteResult:
        """Rewrite imports, JSX tags and hook calls of ``parsed`` in one pass."""
        plan = self.plan_imports(parsed, platform)
        tag_edits, elements = self.tag_edits(parsed, plan)
        hook_edits, hooks = self.hook_edits(parsed, plan)
        edits = self.import_edits(parsed, plan) + tag_edits + hook_edits
        return RewriteResult(
            text=apply_edits(parsed.source, edits),
            plan=plan,
            elements=elements,
            hooks=hooks,
        )


def _format_import(module: str, default: Optional[str], names: Sequence[str]) -> str:
    parts: List[str] = []
    if default:
        parts.append(default)
    if names:
        parts.append(f"{{ {', '.join(names)} }}")
    return f"import {', '.join(parts)} from '{module}';"


__all__ = [
    "Edit",
    "ImportPlan",
    "RUNTIME",
    "RewriteResult",
    "RuntimeTarget",
    "SourceRewriter",
    "TARGET_LIBRARY",
    "UNRELATED",
    "VENDOR",
    "apply_edits",
]
