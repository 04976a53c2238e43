"""Tests for template rendering helpers."""

from __future__ import annotations

import pytest

from uimigrate.render import TemplateRenderer, jsx_attr, jsx_text, unit_identifier


@pytest.mark.parametrize(
    ("stem", "expected"),
    [
        ("PriceButton", "PriceButton"),
        ("alert-dialog", "AlertDialog"),
        ("use-toast", "useToast"),
        ("useAuth", "useAuth"),
        ("user-card", "UserCard"),
        ("3d-viewer", "Component3dViewer"),
    ],
)
def test_unit_identifier(stem: str, expected: str) -> None:
    assert unit_identifier(stem) == expected


def test_jsx_text_quotes_only_unsafe_values() -> None:
    assert jsx_text("Pricing | App") == "Pricing | App"
    assert jsx_text("Plans <Pro> & {Team}") == '{"Plans <Pro> & {Team}"}'


def test_jsx_attr_switches_to_expression_for_quotes() -> None:
    assert jsx_attr("Plans and pricing") == '"Plans and pricing"'
    assert jsx_attr('Compare "Pro" plans') == '{"Compare \\"Pro\\" plans"}'


def test_page_template_escapes_seo_values() -> None:
    output = TemplateRenderer().render(
        "page.jsx.j2",
        identifier="TermsPage",
        name="Terms",
        route="/terms",
        slug="terms",
        typed=False,
        platform="react",
        head_tag="Helmet",
        has_auth=False,
        has_layout=False,
        data_fetching=None,
        localization=False,
        title="Terms & {conditions}",
        description='The "fine" print',
        heading="Terms",
        components=[],
        target_names=["Container", "Typography"],
        source_label="Lovable",
    )

    assert '<title>{"Terms & {conditions}"}</title>' in output
    assert '<meta name="description" content={"The \\"fine\\" print"} />' in output
