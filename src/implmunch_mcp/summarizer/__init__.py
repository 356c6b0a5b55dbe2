"""Summarizer package for reducing doc comments to short descriptions."""

from .paragraph import (
    MAX_DOC_LINES,
    MIN_DOC_SENTENCES,
    count_sentences,
    first_paragraph,
    has_minimum_docs,
    summary_line,
)

__all__ = [
    "MAX_DOC_LINES",
    "MIN_DOC_SENTENCES",
    "count_sentences",
    "first_paragraph",
    "has_minimum_docs",
    "summary_line",
]
