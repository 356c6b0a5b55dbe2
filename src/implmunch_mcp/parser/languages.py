"""Language specification: the line patterns used to recover Rust structure from text."""

import re
from dataclasses import dataclass


# Optional visibility, e.g. "pub", "pub(crate)", "pub(in crate::geo)"
_VISIBILITY = r"(?:pub(?:\s*\([^)]*\))?\s+)?"


@dataclass
class LanguageSpec:
    """Specification for recovering impl blocks and methods from a language's source text."""
    # Source file extension searched and accepted by the path validator
    extension: str

    # Comment markers, checked in this order
    doc_marker: str                 # Outer doc comment ("///")
    inner_doc_marker: str           # Inner doc comment ("//!"), skipped
    comment_marker: str             # Ordinary line comment ("//"), skipped
    block_comment_marker: str       # Block comment opener ("/*"), skipped

    # Attribute line prefixes (skipped during doc scans)
    attribute_prefixes: tuple[str, ...]

    # Line that opens a method-defining block; group "header"
    impl_header: re.Pattern

    # Line that begins a method; group "rest" is everything after the fn keyword
    method_line: re.Pattern

    # Leading identifier of a normalized signature; group 1 is the name
    method_name: re.Pattern

    # Declaration-site patterns for the type resolver
    type_alias: re.Pattern          # groups "alias", "target"
    type_declaration: re.Pattern    # groups "kind", "name"

    # Prefix the search tool puts in front of each output line, with and
    # without line numbers; the numbered form is tried first
    search_prefix: re.Pattern
    search_prefix_plain: re.Pattern

    # Doc-comment sub-lines dropped from descriptions
    doc_noise_prefixes: tuple[str, ...]
    fence_markers: tuple[str, ...]

    # Prefix of methods treated as internal
    internal_prefix: str = "_"


RUST_SPEC = LanguageSpec(
    extension=".rs",
    doc_marker="///",
    inner_doc_marker="//!",
    comment_marker="//",
    block_comment_marker="/*",
    attribute_prefixes=("#[", "#!["),
    impl_header=re.compile(r"^\s*(?P<header>(?:unsafe\s+)?impl\b[^{;]*)(?:\{.*)?$"),
    method_line=re.compile(
        r"^\s*" + _VISIBILITY +
        r"(?:default\s+)?(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?"
        r"(?:extern\s+(?:\"[^\"]*\"\s+)?)?"
        r"fn\s+(?P<rest>.+)$"
    ),
    method_name=re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*[(<]"),
    type_alias=re.compile(
        r"^\s*" + _VISIBILITY +
        r"type\s+(?P<alias>[A-Za-z_]\w*)(?:\s*<[^=]*>)?\s*=\s*"
        r"(?P<target>(?:::)?(?:[A-Za-z_]\w*\s*::\s*)*[A-Za-z_]\w*)"
    ),
    type_declaration=re.compile(
        r"^\s*" + _VISIBILITY +
        r"(?:unsafe\s+)?(?P<kind>struct|enum|union|trait)\s+(?P<name>[A-Za-z_]\w*)"
    ),
    # "src/lib.rs:12:text" (match), "src/lib.rs-13-text" (context), or without line numbers
    search_prefix=re.compile(r"^(?P<file>.+?\.rs)(?P<sep>[:-])(?P<line>\d+)(?P=sep)(?P<text>.*)$"),
    search_prefix_plain=re.compile(r"^(?P<file>.+?\.rs)(?P<sep>[:-])(?P<text>.*)$"),
    doc_noise_prefixes=("#", "assert", "*", "- ", "+ ", "[", "|", ">"),
    fence_markers=("```", "~~~"),
)


# Separator the search tool prints between non-adjacent context groups
GROUP_SEPARATOR = "--"


def base_type_name(name: str) -> str:
    """Reduce a type expression to its bare identifier.

    Example: "&mut crate::geo::Point<T>" -> "Point"
    """
    text = name.strip()
    text = text.lstrip("&").strip()
    for prefix in ("mut ", "dyn "):
        if text.startswith(prefix):
            text = text[len(prefix):].strip()
    if "<" in text:
        text = text[:text.index("<")]
    if "::" in text:
        text = text.rsplit("::", 1)[1]
    return text.strip()


def block_search_pattern(type_name: str) -> str:
    """Build the pattern matching a line that opens an impl block for type_name.

    The pattern is valid both as a GNU grep extended regex and as a Python
    regex. Only plain groups are used, and the type name is reduced to a bare
    identifier first so nothing needs escaping.
    """
    name = base_type_name(type_name)
    return (
        r"^\s*(unsafe\s+)?impl(\s*<.*>)?\s+(.+\s+for\s+)?"
        r"([A-Za-z_][A-Za-z0-9_]*::)*" + name +
        r"(<.*>)?\s*(where.*)?(\{|$)"
    )
