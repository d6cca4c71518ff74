"""Unit tests for OrderFormRenderer."""

import pytest

from titleorder.contexts.templating.escaping import NO_DATA
from titleorder.contexts.templating.exceptions import TemplateLoadError, TemplateRenderError
from titleorder.contexts.templating.order_data_structure import DocumentRecord, ParcelRow, ScopeItem
from titleorder.contexts.templating.renderer import (
    DEFAULT_TEMPLATE_PATH,
    PLACEHOLDERS,
    OrderFormRenderer,
    apply_default_date,
    build_placeholder_values,
)
from titleorder.utils.timestamp import today_numeric


def write_template(tmp_path, body: str):
    path = tmp_path / "template.tex"
    path.write_text(body, encoding="utf-8")
    return path


def full_template() -> str:
    return "\n".join(f"{name}: {{{{{name}}}}}" for name in PLACEHOLDERS) + "\n"


@pytest.fixture
def record():
    return DocumentRecord(
        title="Smith Estate #42",
        date_ordered="03/05/2026",
        title_scope_items=[ScopeItem(name="Survey", description="Boundary check")],
        er_items=[],
        include_property_profile=True,
        delivery_instructions="Email only\nNo fax",
        delivery_email="orders@example.com",
        parcels=[ParcelRow(name="North", parcel_id="R1", address="1 A St", county_st="Ada, ID")],
    )


@pytest.mark.unit
def test_bundled_template_exists():
    assert DEFAULT_TEMPLATE_PATH.exists()


@pytest.mark.unit
def test_bundled_template_references_every_placeholder_once():
    """load_template() rejects repeats and unknowns, so loading is the check."""
    renderer = OrderFormRenderer(DEFAULT_TEMPLATE_PATH)
    renderer.load_template()


@pytest.mark.unit
def test_render_substitutes_all_placeholders(tmp_path, record):
    renderer = OrderFormRenderer(write_template(tmp_path, full_template()))
    rendered = renderer.render(record)

    assert "title: Smith Estate \\#42" in rendered
    assert "date_ordered: 03/05/2026" in rendered
    assert "title_scope_items: \\textbf{Survey}: Boundary check" in rendered
    assert f"er_items: {NO_DATA}" in rendered
    assert "include_property_profile: Yes" in rendered
    assert "delivery_instructions: Email only \\\\{} No fax" in rendered
    assert "delivery_email: orders@example.com" in rendered
    assert "parcels: North & R1 & 1 A St & Ada, ID \\\\ \\hline" in rendered
    assert "{{" not in rendered


@pytest.mark.unit
def test_latex_outside_placeholders_untouched(tmp_path, record):
    body = (
        "\\newcommand{\\field}[2]{\\textbf{#1} #2}\n"
        "{\\Large {{title}}\\par}\n"
        "\\field{Date}{ {{date_ordered}} }\n"
        "% comment with {% and {# inside\n"
    )
    renderer = OrderFormRenderer(write_template(tmp_path, body))
    rendered = renderer.render(record)

    assert rendered == (
        "\\newcommand{\\field}[2]{\\textbf{#1} #2}\n"
        "{\\Large Smith Estate \\#42\\par}\n"
        "\\field{Date}{ 03/05/2026 }\n"
        "% comment with {% and {# inside\n"
    )


@pytest.mark.unit
def test_double_brace_latex_groups_untouched(tmp_path, record):
    body = (
        "\\newcommand{\\hl}[1]{{\\bfseries #1}}\n"
        "\\textbf{{\\large X}}\n"
        "\\hl{ {{title}} }\n"
    )
    renderer = OrderFormRenderer(write_template(tmp_path, body))
    rendered = renderer.render(record)

    assert rendered == (
        "\\newcommand{\\hl}[1]{{\\bfseries #1}}\n"
        "\\textbf{{\\large X}}\n"
        "\\hl{ Smith Estate \\#42 }\n"
    )


@pytest.mark.unit
def test_placeholder_with_inner_spaces(tmp_path, record):
    renderer = OrderFormRenderer(write_template(tmp_path, "Order: {{ title }}"))
    assert renderer.render(record) == "Order: Smith Estate \\#42"


@pytest.mark.unit
def test_repeated_placeholder_rejected(tmp_path, record):
    renderer = OrderFormRenderer(write_template(tmp_path, "{{title}} and again {{title}}"))

    with pytest.raises(TemplateRenderError) as exc:
        renderer.render(record)
    assert exc.value.placeholders == ["title"]


@pytest.mark.unit
def test_unknown_placeholder_rejected(tmp_path, record):
    renderer = OrderFormRenderer(write_template(tmp_path, "{{title}} {{client_name}}"))

    with pytest.raises(TemplateRenderError) as exc:
        renderer.render(record)
    assert exc.value.placeholders == ["client_name"]


@pytest.mark.unit
def test_unreferenced_placeholders_allowed(tmp_path, record):
    renderer = OrderFormRenderer(write_template(tmp_path, "Order: {{title}}"))
    assert renderer.render(record) == "Order: Smith Estate \\#42"


@pytest.mark.unit
def test_missing_template(tmp_path, record):
    renderer = OrderFormRenderer(tmp_path / "missing.tex")

    with pytest.raises(TemplateLoadError):
        renderer.render(record)


@pytest.mark.unit
def test_unclosed_placeholder(tmp_path, record):
    renderer = OrderFormRenderer(write_template(tmp_path, "{{title"))

    with pytest.raises(TemplateLoadError, match="unclosed placeholder 'title'"):
        renderer.render(record)


@pytest.mark.unit
@pytest.mark.parametrize("date_ordered", [None, "", NO_DATA])
def test_missing_date_defaults_to_today(tmp_path, record, date_ordered):
    record.date_ordered = date_ordered
    renderer = OrderFormRenderer(write_template(tmp_path, "{{date_ordered}}"))

    rendered = renderer.render(record)

    assert rendered == today_numeric()
    assert record.date_ordered == today_numeric()


@pytest.mark.unit
def test_apply_default_date_keeps_given_date(record):
    assert apply_default_date(record) == "03/05/2026"


@pytest.mark.unit
def test_placeholder_values_cover_closed_set(record):
    assert set(build_placeholder_values(record)) == set(PLACEHOLDERS)
