"""Group parsed methods under the impl blocks that declare them."""

from dataclasses import replace
from typing import Optional

from .records import BlockRecord, MethodRecord
from ..summarizer import MIN_DOC_SENTENCES, has_minimum_docs


class BlockGrouper:
    """Attach methods to the most recently opened block.

    Methods seen while no block is open are kept in the flat method list
    only. Blocks without methods are dropped when grouping finishes.
    """

    def __init__(self):
        self.blocks: list[BlockRecord] = []
        self.methods: list[MethodRecord] = []
        self._current: Optional[BlockRecord] = None

    def open_block(self, block: BlockRecord) -> None:
        self.close_block()
        self._current = block

    def close_block(self) -> None:
        if self._current is not None:
            self.blocks.append(self._current)
            self._current = None

    def add_method(self, method: MethodRecord) -> None:
        if self._current is not None:
            method.block = self._current.header
            self._current.methods.append(method)
        self.methods.append(method)

    def finish(self) -> tuple[list[BlockRecord], list[MethodRecord]]:
        self.close_block()
        return drop_empty_blocks(self.blocks), self.methods


def drop_empty_blocks(blocks: list[BlockRecord]) -> list[BlockRecord]:
    return [b for b in blocks if b.methods]


def filter_documented(
    blocks: list[BlockRecord],
    min_sentences: int = MIN_DOC_SENTENCES,
) -> list[BlockRecord]:
    """Keep only methods whose documentation meets the sentence threshold.

    Returns new block records; the input blocks are left untouched so the
    unfiltered result stays available.
    """
    filtered = []
    for block in blocks:
        methods = [m for m in block.methods if has_minimum_docs(m.documentation, min_sentences)]
        if methods:
            filtered.append(replace(block, methods=methods))
    return filtered


def flatten_blocks(blocks: list[BlockRecord]) -> list[tuple[BlockRecord, MethodRecord]]:
    """Flatten blocks into (block, method) pairs in display order."""
    result = []
    for block in blocks:
        for method in block.methods:
            result.append((block, method))
    return result
