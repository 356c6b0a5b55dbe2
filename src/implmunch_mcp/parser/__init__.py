"""Parser package for recovering impl blocks and methods from source text."""

from .records import (
    BlockRecord,
    Location,
    MethodDetail,
    MethodRecord,
    Position,
    ResolutionResult,
    SearchScope,
    TypeBinding,
)
from .languages import LanguageSpec, RUST_SPEC, base_type_name, block_search_pattern
from .doc_comments import block_doc, clean_doc_lines, collect_doc_lines
from .extractor import (
    BlockScanner,
    ParsedOutput,
    normalize_signature,
    parse_search_output,
    parse_source,
    read_signature,
    split_search_output,
)
from .hierarchy import BlockGrouper, filter_documented, flatten_blocks
from .type_resolver import declaration_window, resolve_type

__all__ = [
    "BlockRecord",
    "Location",
    "MethodDetail",
    "MethodRecord",
    "Position",
    "ResolutionResult",
    "SearchScope",
    "TypeBinding",
    "LanguageSpec",
    "RUST_SPEC",
    "base_type_name",
    "block_search_pattern",
    "block_doc",
    "clean_doc_lines",
    "collect_doc_lines",
    "BlockScanner",
    "ParsedOutput",
    "normalize_signature",
    "parse_search_output",
    "parse_source",
    "read_signature",
    "split_search_output",
    "BlockGrouper",
    "filter_documented",
    "flatten_blocks",
    "declaration_window",
    "resolve_type",
]
