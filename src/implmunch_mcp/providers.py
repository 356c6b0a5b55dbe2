"""Definition and hover collaborators.

An editor host normally answers "where is this symbol defined" and "what is
its hover documentation" through its language server. These protocols are
the contracts the engine needs; the default implementations answer both
questions from the source text alone so the server works without a host.
"""

import logging
import re
from typing import Protocol

from .errors import SearchTimeout
from .parser.doc_comments import collect_doc_lines
from .parser.extractor import split_search_output
from .parser.languages import RUST_SPEC, base_type_name
from .parser.records import Location, Position
from .search.content_search import ContentSearcher, SearchRequest

logger = logging.getLogger(__name__)


def read_source(path: str) -> str:
    """Read a source file as text."""
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read()


def declaration_pattern(name: str) -> str:
    """Pattern for a line declaring type name (grep -E and Python re compatible)."""
    return (
        r"^\s*(pub(\s*\([^)]*\))?\s+)?(unsafe\s+)?(struct|enum|union|trait|type)\s+"
        + base_type_name(name)
        + r"([^A-Za-z0-9_]|$)"
    )


class DefinitionProvider(Protocol):
    """Answers "jump to definition"; only the first location is used."""

    def definitions(self, document_path: str, position: Position, symbol: str) -> list[Location]:
        ...


class HoverProvider(Protocol):
    """Answers hover requests with rendered markdown blocks."""

    def hover(self, document_path: str, position: Position, symbol: str) -> list[str]:
        ...


class StaticDefinitionProvider:
    """Returns locations supplied up front (e.g. by the caller's language server)."""

    def __init__(self, locations: list[Location]):
        self.locations = locations

    def definitions(self, document_path: str, position: Position, symbol: str) -> list[Location]:
        return list(self.locations)


class DeclarationSearchProvider:
    """Finds a type declaration by name: the current document first, then the workspace.

    The cursor position is not used; the symbol text identifies the type.
    """

    def __init__(self, searcher: ContentSearcher, workspace_root: str):
        self.searcher = searcher
        self.workspace_root = workspace_root

    def definitions(self, document_path: str, position: Position, symbol: str) -> list[Location]:
        pattern = declaration_pattern(symbol)

        try:
            source = read_source(document_path)
        except OSError as e:
            logger.debug(f"Could not read {document_path}: {e}")
            source = ""

        regex = re.compile(pattern)
        for number, text in enumerate(source.split("\n"), start=1):
            if regex.search(text):
                return [Location(path=document_path, line=number)]

        request = SearchRequest(
            pattern=pattern,
            directory=self.workspace_root,
            extension=RUST_SPEC.extension,
            after_context=0,
        )
        try:
            raw = self.searcher.search(request)
        except SearchTimeout as e:
            logger.warning(f"Declaration search timed out: {e}")
            return []

        return [
            Location(path=line.file, line=line.line)
            for line in split_search_output(raw)
            if line.is_match and line.file
        ]


class DocCommentHoverProvider:
    """Hover content built from the declaration line and its doc comment."""

    def __init__(self, definitions: DefinitionProvider):
        self.definition_provider = definitions

    def hover(self, document_path: str, position: Position, symbol: str) -> list[str]:
        locations = self.definition_provider.definitions(document_path, position, symbol)
        if not locations:
            return []

        location = locations[0]
        lines = read_source(location.path).split("\n")
        index = location.line - 1
        if not 0 <= index < len(lines):
            return []

        blocks = [f"```rust\n{lines[index].strip()}\n```"]
        doc = "\n".join(collect_doc_lines(lines, index, max_lookback=index)).strip()
        if doc:
            blocks.append(doc)
        return blocks
