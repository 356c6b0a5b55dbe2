"""Tests for backward doc-comment scanning."""

from implmunch_mcp.config import EngineConfig
from implmunch_mcp.parser import block_doc, clean_doc_lines, collect_doc_lines, parse_source
from implmunch_mcp.parser.doc_comments import BLANK, CODE, DOC, SKIP, classify_line


def test_classify_line():
    assert classify_line("    /// Adds two points.") == (DOC, "Adds two points.")
    assert classify_line("///") == (DOC, "")
    assert classify_line("//// banner") == (SKIP, "")
    assert classify_line("//! crate docs") == (SKIP, "")
    assert classify_line("// note") == (SKIP, "")
    assert classify_line("#[inline]") == (SKIP, "")
    assert classify_line("   ") == (BLANK, "")
    assert classify_line("--") == (BLANK, "")
    assert classify_line("let x = 1;") == (CODE, "")


def test_description_bounded_to_three_lines():
    """Five one-sentence doc lines reduce to the first three."""
    source = '''impl Point {
    /// One.
    /// Two.
    /// Three.
    /// Four.
    /// Five.
    pub fn norm(&self) -> f64 {
        0.0
    }
}
'''
    parsed = parse_source(source)
    assert parsed.methods[0].documentation == "One. Two. Three."


def test_description_bound_configurable():
    source = "/// One.\n/// Two.\n/// Three.\nfn a() {}\n"
    parsed = parse_source(source, config=EngineConfig(max_doc_lines=1))
    assert parsed.methods[0].documentation == "One."


def test_description_stops_at_blank_doc_line():
    """A blank doc line ends the first paragraph."""
    source = "/// Summary line.\n///\n/// Details follow.\nfn a() {}\n"
    parsed = parse_source(source)
    assert parsed.methods[0].documentation == "Summary line."


def test_attributes_and_comments_skipped():
    """Attributes and ordinary comments between doc and fn are stepped over."""
    lines = [
        "/// Checks the value.",
        "#[inline]",
        "// implementation note",
        "",
        "pub fn check(&self) -> bool {",
    ]
    assert collect_doc_lines(lines, 4) == ["Checks the value."]


def test_code_line_ends_scan():
    """Doc lines above the previous item's code are not collected."""
    lines = [
        "/// Belongs to first.",
        "fn first() {}",
        "fn second() {}",
    ]
    assert collect_doc_lines(lines, 2) == []


def test_lookback_bound():
    lines = ["/// Far away."] + [""] * 40 + ["fn a() {}"]
    assert collect_doc_lines(lines, 41, max_lookback=30) == []


def test_clean_doc_lines_drops_examples_and_noise():
    lines = [
        "Parses the input.",
        "",
        "# Examples",
        "```",
        "let ast = parse(\"x\");",
        "assert!(ast.is_ok());",
        "```",
        "* bullet",
        "Returns an error on bad input.",
    ]
    assert clean_doc_lines(lines) == ["Parses the input.", "", "Returns an error on bad input."]


def test_block_doc_nearest_line():
    """Only the doc line nearest the header is kept for a block."""
    lines = [
        "/// Conversions between points.",
        "/// Arithmetic on points.",
        "///",
        "impl Point {",
    ]
    assert block_doc(lines, 3) == "Arithmetic on points."


def test_block_doc_missing():
    lines = ["}", "", "impl Point {"]
    assert block_doc(lines, 2) is None


def test_block_doc_skips_attributes():
    lines = ["/// Conversions.", "#[allow(dead_code)]", "impl From<i32> for Point {"]
    assert block_doc(lines, 2) == "Conversions."
