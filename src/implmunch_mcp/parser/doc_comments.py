"""Backward doc-comment scanning for methods and impl blocks."""

from typing import Optional

from .languages import GROUP_SEPARATOR, LanguageSpec, RUST_SPEC


# Line kinds seen while scanning upward
BLANK = "blank"
DOC = "doc"
SKIP = "skip"          # ordinary comments, inner docs, attributes
CODE = "code"


def classify_line(text: str, spec: LanguageSpec = RUST_SPEC) -> tuple[str, str]:
    """Classify a source line for the backward doc scan.

    Returns (kind, content); content is only meaningful for DOC lines and
    holds the comment text with the marker removed.
    """
    stripped = text.strip()

    if not stripped or stripped == GROUP_SEPARATOR:
        return BLANK, ""

    # "////" is an ordinary comment, not a doc comment
    if stripped.startswith(spec.doc_marker) and not stripped.startswith(spec.doc_marker + "/"):
        content = stripped[len(spec.doc_marker):]
        if content.startswith(" "):
            content = content[1:]
        return DOC, content.rstrip()

    if stripped.startswith(spec.inner_doc_marker) or stripped.startswith(spec.comment_marker):
        return SKIP, ""

    if stripped.startswith(spec.block_comment_marker):
        return SKIP, ""

    if stripped.startswith(spec.attribute_prefixes):
        return SKIP, ""

    return CODE, ""


def collect_doc_lines(
    lines: list[str],
    index: int,
    max_lookback: int = 30,
    spec: LanguageSpec = RUST_SPEC,
) -> list[str]:
    """Collect the doc comment above lines[index], top-to-bottom.

    Blank lines, group separators, ordinary comments and attributes are
    stepped over; the first line of any other kind ends the scan.
    """
    collected = []
    stop = max(-1, index - 1 - max_lookback)

    for j in range(index - 1, stop, -1):
        kind, content = classify_line(lines[j], spec)
        if kind == DOC:
            collected.insert(0, content)
        elif kind in (BLANK, SKIP):
            continue
        else:
            break

    return collected


def clean_doc_lines(lines: list[str], spec: LanguageSpec = RUST_SPEC) -> list[str]:
    """Drop code examples, headings, assertions and markup from doc lines.

    Blank lines are kept so paragraph boundaries survive.
    """
    cleaned = []
    in_fence = False

    for line in lines:
        stripped = line.strip()

        if stripped.startswith(spec.fence_markers):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        if stripped.startswith(spec.doc_noise_prefixes):
            continue

        cleaned.append(stripped)

    return cleaned


def block_doc(
    lines: list[str],
    index: int,
    max_lookback: int = 5,
    spec: LanguageSpec = RUST_SPEC,
) -> Optional[str]:
    """Return the doc-comment line nearest the impl header at lines[index]."""
    doc_lines = clean_doc_lines(collect_doc_lines(lines, index, max_lookback, spec), spec)
    for line in reversed(doc_lines):
        if line:
            return line
    return None
