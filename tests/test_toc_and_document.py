import pytest

from mdreport.render.assemble import render_body, render_document
from mdreport.render.model import CompanionFiles, StructuralViolation, TocEntry
from mdreport.render.toc import render_toc


def test_toc_items_carry_level_class_and_anchor():
    html_out = render_toc(
        [TocEntry(1, "section-1"), TocEntry(2, "section-2")],
        {"section-1": "Report", "section-2": "Top Events"},
    )
    assert html_out == (
        '<div class="toc"><h2>Table of Contents</h2><ul>'
        '<li class="level-1"><a href="#section-1">Report</a></li>'
        '<li class="level-2"><a href="#section-2">Top Events</a></li>'
        "</ul></div>"
    )


def test_toc_keeps_document_order_not_level_order():
    html_out = render_toc(
        [TocEntry(3, "section-1"), TocEntry(1, "section-2")],
        {"section-1": "deep", "section-2": "top"},
    )
    assert html_out.index("level-3") < html_out.index("level-1")


def test_toc_escapes_labels():
    html_out = render_toc([TocEntry(1, "section-1")], {"section-1": "<b>a</b> & b"})
    assert "&lt;b&gt;a&lt;/b&gt; &amp; b" in html_out
    assert "<b>" not in html_out


def test_toc_entry_without_label_raises():
    with pytest.raises(StructuralViolation, match="section-7"):
        render_toc([TocEntry(1, "section-7")], {})


def test_heading_with_markup_characters_is_escaped_in_toc_and_body():
    document = render_document("# a < b & c\n", "out.html_reports")
    assert '<li class="level-1"><a href="#section-1">a &lt; b &amp; c</a></li>' in document
    assert '<h1 id="section-1">a &lt; b &amp; c</h1>' in document


def test_document_template_interpolates_companions_and_body():
    document = render_document("# Title\n\nbody text\n", "run.html_reports")

    assert document.startswith("<!DOCTYPE html>\n<html lang=\"en\">")
    assert document.endswith("</body>\n</html>")
    assert '<iframe src="run.html_reports/jasmin_highlight.html" width="100%" height="600px"' in document
    assert '<a href="run.html_reports/jasmin_main.html" target="_blank">ALL CHARTS</a>' in document
    assert '<h1 id="section-1">Title</h1>' in document
    assert document.index('<div class="toc">') < document.index("<iframe") < document.index("<p>body text</p>")


def test_document_uses_configured_companion_names():
    companions = CompanionFiles(load_profile="lp.html", charts="charts.html")
    document = render_document("text\n", "x.html_reports", companions)
    assert 'src="x.html_reports/lp.html"' in document
    assert 'href="x.html_reports/charts.html"' in document


def test_document_is_byte_stable():
    markdown = "# A\n\n## B\n\n| k | v |\n|---|---|\n| 1 | 2 |\n"
    assert render_document(markdown, "d") == render_document(markdown, "d")


def test_tables_and_footnotes_render():
    body, _ = render_body("| event | waits |\n|---|---|\n| log file sync | 10 |\n\nSee note[^1].\n\n[^1]: The note.\n")
    assert "<table>" in body
    assert "<td>log file sync</td>" in body
    assert "footnotes" in body
    assert "The note." in body


def test_raw_html_passes_through():
    body, _ = render_body("<div class=\"chart\">x</div>\n")
    assert '<div class="chart">x</div>' in body
