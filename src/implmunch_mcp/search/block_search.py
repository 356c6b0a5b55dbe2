"""Locate impl blocks for a type inside a search scope."""

import logging
import os

from .content_search import ContentSearcher, SearchRequest
from ..config import EngineConfig
from ..errors import SearchTimeout
from ..parser.languages import RUST_SPEC, block_search_pattern
from ..parser.records import SearchScope
from ..validation import is_within

logger = logging.getLogger(__name__)


def select_scope(declaration_path: str, workspace_root: str) -> SearchScope:
    """Choose where to look for impl blocks.

    A declaration outside the workspace lives in a dependency, so only the
    declaring file's directory is searched; otherwise the whole workspace.
    """
    if is_within(declaration_path, workspace_root):
        return SearchScope(kind="local", directory=os.path.normpath(workspace_root))
    return SearchScope(kind="external", directory=os.path.dirname(os.path.normpath(declaration_path)))


def search_blocks(
    type_name: str,
    scope: SearchScope,
    searcher: ContentSearcher,
    config: EngineConfig,
) -> str:
    """Raw search output for impl blocks of type_name within scope.

    A timeout counts as no matches. Other search failures propagate.
    """
    request = SearchRequest(
        pattern=block_search_pattern(type_name),
        directory=scope.directory,
        extension=RUST_SPEC.extension,
        after_context=config.after_context,
        before_context=config.block_doc_lookback,
    )
    try:
        raw = searcher.search(request)
    except SearchTimeout as e:
        logger.warning(f"{e}; treating as no methods found")
        return ""

    logger.debug(f"Block search for {type_name} in {scope.directory}: {len(raw)} bytes")
    return raw
