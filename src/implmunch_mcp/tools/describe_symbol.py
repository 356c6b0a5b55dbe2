"""Hover documentation plus the method listing for a symbol."""

import logging
import os
from typing import Optional

from .resolve_methods import build_collaborators, resolve_symbol_methods
from ..config import EngineConfig
from ..errors import SearchError, ValidationError
from ..parser import Position, filter_documented, flatten_blocks
from ..providers import DefinitionProvider, DocCommentHoverProvider, HoverProvider
from ..search import ContentSearcher
from ..summarizer import count_sentences, has_minimum_docs, summary_line

logger = logging.getLogger(__name__)


def hover_sentence_count(blocks: list[str]) -> int:
    """Count documentation sentences in hover blocks, skipping code blocks."""
    total = 0
    for block in blocks:
        if block.lstrip().startswith("```"):
            continue
        total += count_sentences(block)
    return total


def describe_symbol(
    symbol: str,
    document_path: str,
    line: int,
    column: int = 0,
    workspace_root: Optional[str] = None,
    definition_path: Optional[str] = None,
    definition_line: Optional[int] = None,
    documented_only: bool = True,
    config: Optional[EngineConfig] = None,
    searcher: Optional[ContentSearcher] = None,
    definitions: Optional[DefinitionProvider] = None,
    hover: Optional[HoverProvider] = None,
) -> dict:
    """Describe a symbol: its hover documentation and a one-line summary per method.

    Args:
        symbol: Symbol text under the cursor
        document_path: Absolute path of the current document
        line: 1-indexed cursor line
        column: 0-indexed cursor column
        workspace_root: Project root (default: current directory)
        definition_path: Declaration file, if the caller already knows it
        definition_line: 1-indexed declaration line in definition_path
        documented_only: Only list methods with enough documentation
        config: Engine configuration
        searcher: Content search collaborator
        definitions: Definition lookup collaborator
        hover: Hover lookup collaborator

    Returns:
        Dict with hover blocks, documentation verdict and methods
    """
    config = config or EngineConfig.from_env()
    workspace_root = os.path.abspath(workspace_root or os.getcwd())
    definitions, searcher = build_collaborators(
        workspace_root, definition_path, definition_line, config, searcher, definitions
    )
    hover = hover or DocCommentHoverProvider(definitions)
    position = Position(line=line, column=column)

    try:
        result = resolve_symbol_methods(
            symbol, document_path, position, workspace_root, definitions, searcher, config
        )
        hover_blocks = hover.hover(document_path, position, symbol) if result else []
    except ValidationError as e:
        logger.warning(str(e))
        return {"error": str(e)}
    except (OSError, SearchError) as e:
        logger.warning(f"Describing {symbol!r} failed: {e}")
        return {"error": f"Describing symbol failed: {e}"}

    sentences = hover_sentence_count(hover_blocks)

    if result and result.blocks:
        blocks = result.blocks
        if documented_only:
            blocks = filter_documented(blocks, config.min_doc_sentences)
        listed = [method for _, method in flatten_blocks(blocks)]
    else:
        # No impl blocks: fall back to methods found outside any block
        listed = result.methods if result else []
        if documented_only:
            listed = [m for m in listed if has_minimum_docs(m.documentation, config.min_doc_sentences)]

    methods = [
        {
            "block": method.block,
            "name": method.name,
            "signature": method.signature,
            "summary": summary_line(method.documentation),
            "file": method.file,
            "line": method.line,
        }
        for method in listed
    ]

    return {
        "symbol": symbol,
        "type_name": result.type_name if result else symbol,
        "file_path": result.file_path if result else "",
        "request_id": result.request_id if result else 0,
        "hover": hover_blocks,
        "sentence_count": sentences,
        "well_documented": sentences >= config.min_doc_sentences,
        "method_count": len(methods),
        "methods": methods,
    }
