"""Reduce doc comments to short descriptions and measure how descriptive they are."""

import re


# Minimum sentence count for a description to count as documented
MIN_DOC_SENTENCES = 3

# Lines kept from the first paragraph of a doc comment
MAX_DOC_LINES = 3

_SENTENCE_END = re.compile(r"[.!?](?:\s+|$)")


def first_paragraph(lines: list[str], max_lines: int = MAX_DOC_LINES) -> str:
    """Join the first paragraph of doc lines into one line.

    Leading blank lines are ignored. The paragraph ends at the next blank
    line or after max_lines lines, whichever comes first.
    """
    paragraph = []

    for line in lines:
        text = line.strip()
        if not text:
            if paragraph:
                break
            continue
        paragraph.append(text)
        if len(paragraph) >= max_lines:
            break

    return " ".join(paragraph)


def count_sentences(text: str) -> int:
    """Count sentences delimited by terminal punctuation.

    Trailing text without punctuation counts as a sentence.
    """
    if not text:
        return 0
    return len([s for s in _SENTENCE_END.split(text) if s.strip()])


def has_minimum_docs(text: str, min_sentences: int = MIN_DOC_SENTENCES) -> bool:
    """Check whether documentation meets the descriptiveness threshold."""
    return count_sentences(text) >= min_sentences


def summary_line(text: str, max_length: int = 120) -> str:
    """First sentence of a description, for one-line listings."""
    text = text.strip()
    if not text:
        return ""

    match = _SENTENCE_END.search(text)
    if match:
        text = text[:match.start() + 1]

    return text[:max_length]
