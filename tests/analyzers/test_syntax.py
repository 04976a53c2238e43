"""Tests for the tree-sitter syntax layer."""

from __future__ import annotations

import pytest

from uimigrate.analyzers.syntax import COMPLEXITY_CEILING, SourceParseError, SyntaxParser
from uimigrate.models import ComponentProp
from tests._fixtures.project_builder import LOVABLE_BUTTON, LOVABLE_CARD


@pytest.fixture
def parser() -> SyntaxParser:
    return SyntaxParser()


def test_imports_capture_default_named_alias_and_type_only(parser: SyntaxParser) -> None:
    parsed = parser.parse(
        "import React, { useState as useLocal } from 'react';\n"
        "import * as utils from './utils';\n"
        "import type { Props } from './types';\n",
        "src/components/Demo.tsx",
    )

    react, utils, types = parsed.imports()
    assert react.module == "react"
    assert react.default == "React"
    assert [(b.imported, b.local) for b in react.named] == [("useState", "useLocal")]
    assert react.text.startswith("import React")
    assert utils.namespace == "utils"
    assert types.type_only is True
    assert types.named[0].imported == "Props"


def test_hook_calls_only_match_plain_identifiers(parser: SyntaxParser) -> None:
    parsed = parser.parse(
        "const a = useState(0);\nconst b = React.useMemo(() => 1, []);\nconst c = user();\nuseCustomHook();\n",
        "hooks.ts",
    )

    assert [call.name for call in parsed.hook_calls()] == ["useState", "useCustomHook"]
    assert parsed.has_state() is True


def test_jsx_elements_pair_opening_and_closing_spans(parser: SyntaxParser) -> None:
    source = "const x = <Card><Icon /></Card>;\n"
    parsed = parser.parse(source, "x.tsx")

    card, icon = parsed.jsx_elements()
    assert card.name == "Card"
    assert card.closing is not None
    data = source.encode("utf-8")
    assert data[card.opening.start : card.opening.end] == b"Card"
    assert data[card.closing.start : card.closing.end] == b"Card"
    assert icon.name == "Icon"
    assert icon.closing is None


def test_component_elements_skip_intrinsic_tags(parser: SyntaxParser) -> None:
    parsed = parser.parse(
        "export default () => <div><Header /><span /><Header /><Footer /></div>;\n", "Page.jsx"
    )

    assert parsed.component_elements() == ["Header", "Footer"]


def test_complexity_counts_branches_and_logical_operators(parser: SyntaxParser) -> None:
    parsed = parser.parse(LOVABLE_CARD, "ProfileCard.jsx")

    # && and the ternary
    assert parsed.complexity() == 3


def test_complexity_is_capped(parser: SyntaxParser) -> None:
    branches = "\n".join(f"if (x === {i}) {{ y = {i}; }}" for i in range(20))
    parsed = parser.parse(f"function f(x) {{ let y; {branches} return y; }}\n", "big.js")

    assert parsed.complexity() == COMPLEXITY_CEILING


def test_class_components_are_detected(parser: SyntaxParser) -> None:
    parsed = parser.parse(
        "class Legacy extends React.Component { render() { return <div />; } }\n"
        "class Helper {}\n",
        "Legacy.jsx",
    )

    assert parsed.class_components() == ["Legacy"]


def test_component_props_resolve_interface_and_defaults(parser: SyntaxParser) -> None:
    parsed = parser.parse(LOVABLE_BUTTON, "PriceButton.tsx")

    assert parsed.component_props("PriceButton") == (
        ComponentProp(name="price", type="number", required=True),
        ComponentProp(name="label", type="string", required=False, default_value="'Buy'"),
    )


def test_component_props_from_untyped_default_export(parser: SyntaxParser) -> None:
    parsed = parser.parse(LOVABLE_CARD, "ProfileCard.jsx")

    props = parsed.component_props("ProfileCard")
    assert [prop.name for prop in props] == ["name", "avatar"]
    assert all(prop.type == "any" for prop in props)


def test_component_props_through_fc_annotation_and_memo(parser: SyntaxParser) -> None:
    parsed = parser.parse(
        "type BadgeProps = { tone?: string; count: number };\n"
        "export const Badge: React.FC<BadgeProps> = memo((props) => <span />);\n",
        "Badge.tsx",
    )

    assert parsed.component_props("Badge") == (
        ComponentProp(name="tone", type="string", required=False),
        ComponentProp(name="count", type="number", required=True),
    )


def test_parse_error_reports_position(parser: SyntaxParser) -> None:
    with pytest.raises(SourceParseError) as excinfo:
        parser.parse("export const Broken = () => {\n  return <div>;\n", "Broken.tsx")

    assert excinfo.value.path == "Broken.tsx"
    assert excinfo.value.line >= 1
    assert "Broken.tsx" in str(excinfo.value)


def test_plain_typescript_uses_typescript_grammar(parser: SyntaxParser) -> None:
    # `<T>value` is a type assertion in .ts but invalid JSX in .tsx
    parsed = parser.parse("const n = <number>value;\n", "cast.ts")

    assert parsed.jsx_elements() == []
    with pytest.raises(SourceParseError):
        parser.parse("const n = <number>value;\n", "cast.tsx")
