"""Resolve a symbol to its type and list the methods of that type's impl blocks."""

import itertools
import logging
import os
from typing import Optional

from ..config import EngineConfig
from ..errors import SearchError, ValidationError
from ..parser import (
    Location,
    Position,
    ResolutionResult,
    base_type_name,
    declaration_window,
    filter_documented,
    parse_search_output,
    resolve_type,
)
from ..providers import (
    DeclarationSearchProvider,
    DefinitionProvider,
    StaticDefinitionProvider,
    read_source,
)
from ..search import ContentSearcher, default_searcher, search_blocks, select_scope
from ..validation import default_known_roots, ensure_identifier, ensure_path, validate_identifier

logger = logging.getLogger(__name__)

# Sequence numbers let a presentation layer discard results of superseded requests
_request_ids = itertools.count(1)


def resolve_symbol_methods(
    symbol: str,
    document_path: str,
    position: Position,
    workspace_root: str,
    definitions: DefinitionProvider,
    searcher: ContentSearcher,
    config: Optional[EngineConfig] = None,
) -> Optional[ResolutionResult]:
    """Run one resolution request end to end.

    Args:
        symbol: Symbol text under the cursor
        document_path: Absolute path of the document the cursor is in
        position: Cursor position in the document
        workspace_root: Root of the local project
        definitions: Definition lookup collaborator
        searcher: Content search collaborator
        config: Bounds and thresholds

    Returns:
        ResolutionResult (possibly without blocks), or None when the symbol
        has no definition

    Raises:
        ValidationError: symbol, document or declaration path rejected
        SearchError: the content search could not run
        OSError: the declaration file could not be read
    """
    config = config or EngineConfig()
    request_id = next(_request_ids)
    roots = default_known_roots(workspace_root)

    ensure_identifier(symbol, "symbol name")
    ensure_path(document_path, roots)

    locations = definitions.definitions(document_path, position, symbol)
    if not locations:
        logger.info(f"No definition found for {symbol}")
        return None

    location = locations[0]
    declaration_path = ensure_path(location.path, roots)

    source = read_source(declaration_path)
    window = declaration_window(source, location.line, config.declaration_window)
    binding = resolve_type(window, symbol)
    if binding.kind == "fallback":
        logger.info(f"No declaration matched near {declaration_path}:{location.line}; using {symbol!r}")

    if not validate_identifier(binding.name):
        logger.warning(f"Invalid type name resolved for {symbol}: {binding.name!r}")
        return ResolutionResult(
            type_name=symbol,
            binding=binding,
            file_path=declaration_path,
            request_id=request_id,
        )

    type_name = base_type_name(binding.name)
    scope = select_scope(declaration_path, workspace_root)
    raw = search_blocks(type_name, scope, searcher, config)
    parsed = parse_search_output(raw, type_name, config)

    logger.info(
        f"[{request_id}] {symbol} -> {type_name} ({binding.kind}): "
        f"{len(parsed.blocks)} blocks, {len(parsed.methods)} methods in {scope.kind} scope"
    )

    return ResolutionResult(
        type_name=type_name,
        binding=binding,
        file_path=declaration_path,
        scope=scope,
        blocks=parsed.blocks,
        methods=parsed.methods,
        request_id=request_id,
    )


def build_collaborators(
    workspace_root: str,
    definition_path: Optional[str],
    definition_line: Optional[int],
    config: EngineConfig,
    searcher: Optional[ContentSearcher],
    definitions: Optional[DefinitionProvider],
) -> tuple[DefinitionProvider, ContentSearcher]:
    """Fill in default collaborators for a tool call."""
    searcher = searcher or default_searcher(config)
    if definitions is None:
        if definition_path:
            definitions = StaticDefinitionProvider([Location(path=definition_path, line=definition_line or 1)])
        else:
            definitions = DeclarationSearchProvider(searcher, workspace_root)
    return definitions, searcher


def resolve_methods(
    symbol: str,
    document_path: str,
    line: int,
    column: int = 0,
    workspace_root: Optional[str] = None,
    definition_path: Optional[str] = None,
    definition_line: Optional[int] = None,
    documented_only: bool = False,
    config: Optional[EngineConfig] = None,
    searcher: Optional[ContentSearcher] = None,
    definitions: Optional[DefinitionProvider] = None,
) -> dict:
    """List the methods of the type behind a symbol, grouped by impl block.

    Args:
        symbol: Symbol text under the cursor
        document_path: Absolute path of the current document
        line: 1-indexed cursor line
        column: 0-indexed cursor column
        workspace_root: Project root (default: current directory)
        definition_path: Declaration file, if the caller already knows it
        definition_line: 1-indexed declaration line in definition_path
        documented_only: Only show methods with enough documentation
        config: Engine configuration (default: from environment)
        searcher: Content search collaborator (default: grep or Python)
        definitions: Definition lookup collaborator

    Returns:
        Dict with the resolved type and its blocks, or an error
    """
    config = config or EngineConfig.from_env()
    workspace_root = os.path.abspath(workspace_root or os.getcwd())
    definitions, searcher = build_collaborators(
        workspace_root, definition_path, definition_line, config, searcher, definitions
    )

    try:
        result = resolve_symbol_methods(
            symbol=symbol,
            document_path=document_path,
            position=Position(line=line, column=column),
            workspace_root=workspace_root,
            definitions=definitions,
            searcher=searcher,
            config=config,
        )
    except ValidationError as e:
        logger.warning(str(e))
        return {"error": str(e)}
    except (OSError, SearchError) as e:
        logger.warning(f"Method resolution for {symbol!r} failed: {e}")
        return {"error": f"Method resolution failed: {e}"}

    if result is None:
        return {
            "symbol": symbol,
            "type_name": symbol,
            "block_count": 0,
            "method_count": 0,
            "blocks": [],
            "note": "No definition found",
        }

    output = result.to_dict()
    if documented_only:
        shown = filter_documented(result.blocks, config.min_doc_sentences)
        output["blocks"] = [b.to_dict() for b in shown]
        output["block_count"] = len(shown)
        output["documented_only"] = True

    return output
