"""Search package: content search collaborators and impl-block lookup."""

from .content_search import (
    ContentSearcher,
    GrepSearcher,
    PythonSearcher,
    SearchRequest,
    default_searcher,
    discover_source_files,
)
from .block_search import search_blocks, select_scope

__all__ = [
    "ContentSearcher",
    "GrepSearcher",
    "PythonSearcher",
    "SearchRequest",
    "default_searcher",
    "discover_source_files",
    "search_blocks",
    "select_scope",
]
