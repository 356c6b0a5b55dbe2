"""Tests for summarizer module."""

from implmunch_mcp.parser import BlockRecord, MethodRecord, filter_documented
from implmunch_mcp.summarizer import (
    count_sentences,
    first_paragraph,
    has_minimum_docs,
    summary_line,
)


def test_first_paragraph_joins_lines():
    """Test joining a wrapped first paragraph into one line."""
    assert first_paragraph(["Adds two", "points together."]) == "Adds two points together."


def test_first_paragraph_skips_leading_blanks():
    assert first_paragraph(["", "", "Summary.", "", "Details."]) == "Summary."


def test_first_paragraph_bounded():
    """Test that at most max_lines lines are kept."""
    lines = ["One.", "Two.", "Three.", "Four.", "Five."]
    assert first_paragraph(lines) == "One. Two. Three."
    assert first_paragraph(lines, max_lines=2) == "One. Two."


def test_first_paragraph_empty():
    assert first_paragraph([]) == ""
    assert first_paragraph(["", "  "]) == ""


def test_count_sentences():
    """Test counting sentences by terminal punctuation."""
    assert count_sentences("") == 0
    assert count_sentences("Adds two points.") == 1
    assert count_sentences("One. Two! Three?") == 3
    assert count_sentences("Trailing text without a period") == 1
    assert count_sentences("Version 1.2 is supported.") == 1


def test_has_minimum_docs():
    """Test the descriptiveness threshold."""
    assert has_minimum_docs("One. Two. Three.") is True
    assert has_minimum_docs("One. Two.") is False
    assert has_minimum_docs("One. Two.", min_sentences=2) is True


def test_summary_line():
    """Test extracting the first sentence for listings."""
    assert summary_line("Adds two points. Returns the sum.") == "Adds two points."
    assert summary_line("No punctuation here") == "No punctuation here"
    assert summary_line("   ") == ""
    assert len(summary_line("x" * 500)) == 120


def test_filter_documented_keeps_input():
    """Test that filtering returns new blocks and leaves the originals intact."""
    documented = MethodRecord(name="a", signature="a()", documentation="One. Two. Three.")
    sparse = MethodRecord(name="b", signature="b()", documentation="Only one.")
    blocks = [
        BlockRecord(header="impl Point", methods=[documented, sparse]),
        BlockRecord(header="impl Debug for Point", methods=[sparse]),
    ]

    filtered = filter_documented(blocks)

    assert [b.header for b in filtered] == ["impl Point"]
    assert [m.name for m in filtered[0].methods] == ["a"]
    assert [m.name for m in blocks[0].methods] == ["a", "b"]
