from pathlib import Path

from mdreport.render.assemble import render_body
from mdreport.render.linker import (
    add_links,
    companion_target,
    link_entities,
    resolve_link_targets,
    safe_event_filename,
)


def test_safe_event_filename_replaces_unsafe_characters():
    assert safe_event_filename("r.html_reports", "db file/scattered read") == "r.html_reports/fg_db_file_scattered_read.html"
    assert safe_event_filename("d", "log file sync: *x") == "d/fg_log_file_sync__x.html"
    assert safe_event_filename("d", "LGWR wait", is_fg=False) == "d/bg_LGWR_wait.html"


def test_companion_target_by_category():
    assert companion_target("FG", "enq: TX", "d") == "d/fg_enq_TX.html"
    assert companion_target("fg", "enq: TX", "d") == "d/fg_enq_TX.html"
    assert companion_target("BG", "log file parallel write", "d") == "d/bg_log_file_parallel_write.html"
    assert companion_target("SQL", "0a1b2c3d", "d") == "d/sqlid_0a1b2c3d.html"
    assert companion_target("PLAN", "x", "d") is None


def test_resolve_keeps_only_existing_targets():
    existing = {"d/sqlid_A1.html", "d/fg_db_file_sequential_read.html"}
    targets = resolve_link_targets(
        {"SQL": {"A1", "B2"}, "FG": {"db file sequential read"}, "OTHER": {"A1"}},
        "d",
        exists=existing.__contains__,
    )
    assert targets == {"A1": "d/sqlid_A1.html", "db file sequential read": "d/fg_db_file_sequential_read.html"}


def test_link_wraps_every_text_occurrence():
    html_in = "<p>Some <strong>SQLID1</strong> text and SQLID1 again</p>"
    linked = link_entities(html_in, {"SQLID1": "d/sqlid_SQLID1.html"})
    assert linked == (
        '<p>Some <strong><a href="d/sqlid_SQLID1.html" target="_blank">SQLID1</a></strong>'
        ' text and <a href="d/sqlid_SQLID1.html" target="_blank">SQLID1</a> again</p>'
    )


def test_link_prefers_longest_name_and_never_nests():
    targets = {"db file": "d/fg_db_file.html", "db file sequential read": "d/fg_db_file_sequential_read.html"}
    linked = link_entities("<p>db file sequential read vs db file</p>", targets)
    assert linked == (
        '<p><a href="d/fg_db_file_sequential_read.html" target="_blank">db file sequential read</a>'
        ' vs <a href="d/fg_db_file.html" target="_blank">db file</a></p>'
    )


def test_relinking_own_output_is_a_no_op():
    targets = {"SQLID1": "d/sqlid_SQLID1.html", "SQL": "d/sqlid_SQL.html"}
    once = link_entities("<p>SQLID1 and SQL</p>", targets)
    assert link_entities(once, targets) == once
    assert once.count("<a ") == 2


def test_markup_and_opaque_elements_are_untouched():
    html_in = (
        "<html><head><title>SQLID1</title><style>.SQLID1 { }</style></head>"
        '<body><!-- SQLID1 --><p title="SQLID1">x</p>'
        '<a href="#section-1">SQLID1</a><script>var SQLID1;</script></body></html>'
    )
    assert link_entities(html_in, {"SQLID1": "d/sqlid_SQLID1.html"}) == html_in


def test_names_with_markup_characters_match_escaped_text():
    linked = link_entities("<p>a&amp;b</p>", {"a&b": "d/fg_a&b.html"})
    assert linked == '<p><a href="d/fg_a&amp;b.html" target="_blank">a&amp;b</a></p>'


def test_names_with_double_quotes_match_rendered_text():
    body, _ = render_body('event say "hi" here\n')
    linked = link_entities(body, {'say "hi"': "d/fg_say_hi.html"})
    assert linked == '<p>event <a href="d/fg_say_hi.html" target="_blank">say &quot;hi&quot;</a> here</p>\n'


def test_quoted_attribute_containing_angle_bracket_is_untouched():
    body, _ = render_body('<img alt="x > SQLID1" src="a.png">\n')
    assert link_entities(body, {"SQLID1": "d/sqlid_SQLID1.html"}) == body


def test_text_after_quoted_attribute_is_still_linked():
    linked = link_entities('<p title="a > b">SQLID1</p>', {"SQLID1": "d/sqlid_SQLID1.html"})
    assert linked == '<p title="a > b"><a href="d/sqlid_SQLID1.html" target="_blank">SQLID1</a></p>'


def test_missing_companion_file_is_byte_identical_to_no_names(tmp_path: Path):
    html_in = "<p>SQLID1 waits on db file/scattered read</p>"
    companion_dir = str(tmp_path / "r.html_reports")
    with_names = add_links(html_in, {"SQL": {"SQLID1"}, "FG": {"db file/scattered read"}}, companion_dir)
    without = add_links(html_in, {}, companion_dir)
    assert with_names == without == html_in


def test_add_links_checks_disk(tmp_path: Path):
    companion_dir = tmp_path / "r.html_reports"
    companion_dir.mkdir()
    (companion_dir / "fg_db_file_scattered_read.html").write_text("<html></html>", encoding="utf-8")

    linked = add_links(
        "<p>db file/scattered read</p>",
        {"FG": ["db file/scattered read", "db file/scattered read"]},
        str(companion_dir),
    )
    target = f"{companion_dir}/fg_db_file_scattered_read.html"
    assert linked == f'<p><a href="{target}" target="_blank">db file/scattered read</a></p>'
