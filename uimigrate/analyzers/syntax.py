"""Tree-sitter powered parsing and fact extraction for JS/TS/JSX/TSX units."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..models import ComponentProp

_TSX = Language(ts_typescript.language_tsx())
_TYPESCRIPT = Language(ts_typescript.language_typescript())

COMPLEXITY_CEILING = 10

_BRANCH_NODES = {
    "if_statement",
    "ternary_expression",
    "for_statement",
    "for_in_statement",
    "while_statement",
    "do_statement",
    "switch_case",
    "catch_clause",
}
_BOOLEAN_OPERATORS = {"&&", "||", "??"}
_STATE_HOOKS = {"useState", "useReducer"}
_HOOK_NAME = re.compile(r"^use(?:[A-Z0-9_]\w*)?$")
_FC_TYPE = re.compile(r"\bFC\s*<\s*([A-Za-z_$][\w$]*)")
_FUNCTION_NODES = {"arrow_function", "function_expression", "function"}


class SourceParseError(ValueError):
    """Raised when a unit of source text cannot be parsed cleanly."""

    def __init__(self, path: str, line: int, column: int) -> None:
        super().__init__(f"Syntax error in {path} at line {line}, column {column}")
        self.path = path
        self.line = line
        self.column = column


@dataclass(frozen=True)
class ImportBinding:
    imported: str
    local: str


@dataclass(frozen=True)
class ImportDecl:
    """One ``import ... from '<module>'`` statement."""

    module: str
    start: int
    end: int
    text: str
    default: Optional[str] = None
    named: Tuple[ImportBinding, ...] = ()
    namespace: Optional[str] = None
    type_only: bool = False


@dataclass(frozen=True)
class Span:
    start: int
    end: int


@dataclass(frozen=True)
class JsxElementRef:
    """A JSX element name with the spans of its opening and closing tag names."""

    name: str
    opening: Span
    closing: Optional[Span] = None


@dataclass(frozen=True)
class HookCall:
    name: str
    span: Span


class ParsedSource:
    """A parsed unit plus read-only accessors over its syntax tree."""

    def __init__(self, path: str, source: str, tree: Tree) -> None:
        self.path = path
        self.source = source
        self.data = source.encode("utf-8")
        self.tree = tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node | None) -> str:
        if node is None:
            return ""
        return self.data[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal of every node in the tree."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    # -- imports -----------------------------------------------------------

    def imports(self) -> List[ImportDecl]:
        declarations: List[ImportDecl] = []
        for node in self.root.named_children:
            if node.type != "import_statement":
                continue
            source_node = node.child_by_field_name("source")
            module = self.text(source_node).strip("'\"`")
            default: Optional[str] = None
            namespace: Optional[str] = None
            named: List[ImportBinding] = []
            type_only = any(child.type == "type" for child in node.children)
            for clause in node.named_children:
                if clause.type != "import_clause":
                    continue
                for part in clause.named_children:
                    if part.type == "identifier":
                        default = self.text(part)
                    elif part.type == "namespace_import":
                        ident = next((c for c in part.named_children if c.type == "identifier"), None)
                        namespace = self.text(ident) or None
                    elif part.type == "named_imports":
                        for spec in part.named_children:
                            if spec.type != "import_specifier":
                                continue
                            imported = self.text(spec.child_by_field_name("name"))
                            alias = spec.child_by_field_name("alias")
                            named.append(
                                ImportBinding(imported=imported, local=self.text(alias) or imported)
                            )
            declarations.append(
                ImportDecl(
                    module=module,
                    start=node.start_byte,
                    end=node.end_byte,
                    text=self.text(node),
                    default=default,
                    named=tuple(named),
                    namespace=namespace,
                    type_only=type_only,
                )
            )
        return declarations

    # -- calls and markup --------------------------------------------------

    def hook_calls(self) -> List[HookCall]:
        calls: List[HookCall] = []
        for node in self.walk():
            if node.type != "call_expression":
                continue
            callee = node.child_by_field_name("function")
            if callee is None or callee.type != "identifier":
                continue
            name = self.text(callee)
            if _HOOK_NAME.match(name):
                calls.append(HookCall(name=name, span=Span(callee.start_byte, callee.end_byte)))
        return calls

    def jsx_elements(self) -> List[JsxElementRef]:
        elements: List[JsxElementRef] = []
        for node in self.walk():
            if node.type == "jsx_element":
                opening = _first_child(node, "jsx_opening_element")
                closing = _first_child(node, "jsx_closing_element")
                open_name = _tag_name_node(opening)
                if open_name is None:
                    continue
                close_name = _tag_name_node(closing)
                elements.append(
                    JsxElementRef(
                        name=self.text(open_name),
                        opening=Span(open_name.start_byte, open_name.end_byte),
                        closing=(
                            Span(close_name.start_byte, close_name.end_byte)
                            if close_name is not None
                            else None
                        ),
                    )
                )
            elif node.type == "jsx_self_closing_element":
                name_node = _tag_name_node(node)
                if name_node is not None:
                    elements.append(
                        JsxElementRef(
                            name=self.text(name_node),
                            opening=Span(name_node.start_byte, name_node.end_byte),
                        )
                    )
        return elements

    def component_elements(self) -> List[str]:
        """Return the distinct capitalised JSX element names in first-seen order."""
        seen: List[str] = []
        for element in self.jsx_elements():
            if element.name[:1].isupper() and element.name not in seen:
                seen.append(element.name)
        return seen

    # -- derived facts -----------------------------------------------------

    def complexity(self) -> int:
        score = 1
        for node in self.walk():
            if node.type in _BRANCH_NODES:
                score += 1
            elif node.type == "binary_expression":
                operator = node.child_by_field_name("operator")
                if operator is not None and operator.type in _BOOLEAN_OPERATORS:
                    score += 1
        return min(score, COMPLEXITY_CEILING)

    def class_components(self) -> List[str]:
        names: List[str] = []
        for node in self.walk():
            if node.type not in {"class_declaration", "class"}:
                continue
            heritage = _first_child(node, "class_heritage")
            if heritage is None or "Component" not in self.text(heritage):
                continue
            name = self.text(node.child_by_field_name("name"))
            if name:
                names.append(name)
        return names

    def has_state(self) -> bool:
        return any(call.name in _STATE_HOOKS for call in self.hook_calls())

    def component_props(self, component_name: str) -> Tuple[ComponentProp, ...]:
        """Extract the declared props of ``component_name`` from its first parameter."""
        declared = self._declared_object_types()
        function, declared_type = self._find_component_function(component_name)
        if function is None:
            return ()

        pattern, annotation = self._first_parameter(function)
        members: Dict[str, Tuple[str, bool]] = {}
        type_name = declared_type
        if annotation is not None:
            type_node = annotation.named_children[0] if annotation.named_children else None
            if type_node is not None and type_node.type == "object_type":
                members = self._object_type_members(type_node)
            elif type_node is not None:
                type_name = self.text(type_node)
        if not members and type_name:
            members = declared.get(type_name, {})

        if pattern is None:
            return ()
        if pattern.type == "object_pattern":
            return tuple(self._props_from_pattern(pattern, members))
        return tuple(
            ComponentProp(name=name, type=prop_type, required=not optional)
            for name, (prop_type, optional) in members.items()
        )

    # -- helpers -----------------------------------------------------------

    def _find_component_function(self, name: str) -> Tuple[Optional[Node], Optional[str]]:
        default_export: Optional[Node] = None
        for node in self.walk():
            if node.type == "function_declaration":
                if self.text(node.child_by_field_name("name")) == name:
                    return node, None
            elif node.type == "variable_declarator":
                if self.text(node.child_by_field_name("name")) != name:
                    continue
                declared = None
                type_node = node.child_by_field_name("type")
                if type_node is not None:
                    match = _FC_TYPE.search(self.text(type_node))
                    declared = match.group(1) if match else None
                value = _unwrap_function(node.child_by_field_name("value"))
                if value is not None:
                    return value, declared
            elif node.type == "export_statement" and default_export is None:
                if any(child.type == "default" for child in node.children):
                    declaration = node.child_by_field_name("declaration") or node.child_by_field_name("value")
                    default_export = _unwrap_function(declaration)
        return default_export, None

    def _first_parameter(self, function: Node) -> Tuple[Optional[Node], Optional[Node]]:
        single = function.child_by_field_name("parameter")
        if single is not None:
            return single, None
        parameters = function.child_by_field_name("parameters")
        if parameters is None or not parameters.named_children:
            return None, None
        first = parameters.named_children[0]
        if first.type in {"required_parameter", "optional_parameter"}:
            return first.child_by_field_name("pattern"), first.child_by_field_name("type")
        return first, None

    def _declared_object_types(self) -> Dict[str, Dict[str, Tuple[str, bool]]]:
        declared: Dict[str, Dict[str, Tuple[str, bool]]] = {}
        for node in self.walk():
            if node.type == "interface_declaration":
                body = node.child_by_field_name("body")
            elif node.type == "type_alias_declaration":
                body = node.child_by_field_name("value")
            else:
                continue
            name = self.text(node.child_by_field_name("name"))
            if name and body is not None:
                declared[name] = self._object_type_members(body)
        return declared

    def _object_type_members(self, body: Node) -> Dict[str, Tuple[str, bool]]:
        members: Dict[str, Tuple[str, bool]] = {}
        for member in body.named_children:
            if member.type != "property_signature":
                continue
            name = self.text(member.child_by_field_name("name"))
            annotation = member.child_by_field_name("type")
            type_text = "any"
            if annotation is not None and annotation.named_children:
                type_text = self.text(annotation.named_children[0])
            optional = any(child.type == "?" for child in member.children)
            if name:
                members[name] = (type_text, optional)
        return members

    def _props_from_pattern(
        self, pattern: Node, members: Dict[str, Tuple[str, bool]]
    ) -> Iterator[ComponentProp]:
        for child in pattern.named_children:
            default: Optional[str] = None
            if child.type == "shorthand_property_identifier_pattern":
                name = self.text(child)
            elif child.type == "object_assignment_pattern":
                name = self.text(child.child_by_field_name("left"))
                default = self.text(child.child_by_field_name("right")) or None
            elif child.type == "pair_pattern":
                name = self.text(child.child_by_field_name("key"))
                value = child.child_by_field_name("value")
                if value is not None and value.type == "assignment_pattern":
                    default = self.text(value.child_by_field_name("right")) or None
            else:
                continue
            prop_type, optional = members.get(name, ("any", False))
            yield ComponentProp(
                name=name,
                type=prop_type,
                required=not optional and default is None,
                default_value=default,
            )


class SyntaxParser:
    """Parses source units, caching one tree-sitter parser per grammar."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def parse(self, source: str, path: str) -> ParsedSource:
        grammar = "typescript" if path.lower().endswith(".ts") else "tsx"
        parser = self._get_parser(grammar)
        tree = parser.parse(source.encode("utf-8"))
        if tree.root_node.has_error:
            line, column = _first_error_position(tree.root_node)
            raise SourceParseError(path, line, column)
        return ParsedSource(path, source, tree)

    def _get_parser(self, grammar: str) -> Parser:
        parser = self._parsers.get(grammar)
        if parser is None:
            parser = Parser(_TYPESCRIPT if grammar == "typescript" else _TSX)
            self._parsers[grammar] = parser
        return parser


def _first_child(node: Node | None, node_type: str) -> Optional[Node]:
    if node is None:
        return None
    return next((child for child in node.children if child.type == node_type), None)


def _tag_name_node(element: Node | None) -> Optional[Node]:
    if element is None:
        return None
    return element.child_by_field_name("name")


def _unwrap_function(node: Node | None) -> Optional[Node]:
    """Return the function node, looking through ``memo(...)``/``forwardRef(...)`` wrappers."""
    if node is None:
        return None
    if node.type in _FUNCTION_NODES or node.type == "function_declaration":
        return node
    if node.type == "call_expression":
        arguments = node.child_by_field_name("arguments")
        if arguments is not None:
            for argument in arguments.named_children:
                unwrapped = _unwrap_function(argument)
                if unwrapped is not None:
                    return unwrapped
    return None


def _first_error_position(root: Node) -> Tuple[int, int]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, column = node.start_point
            return row + 1, column + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    row, column = root.start_point
    return row + 1, column + 1


__all__ = [
    "COMPLEXITY_CEILING",
    "HookCall",
    "ImportBinding",
    "ImportDecl",
    "JsxElementRef",
    "ParsedSource",
    "SourceParseError",
    "Span",
    "SyntaxParser",
]
