"""Line-scanning extractor for impl blocks and method signatures.

Works on raw text (usually the output of a recursive content search) and
recovers structure without a parser: a small state machine walks the lines,
tracks brace depth, opens a block at each impl header and reconstructs
method signatures that may span several lines.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .doc_comments import block_doc, clean_doc_lines, collect_doc_lines
from .hierarchy import BlockGrouper
from .languages import GROUP_SEPARATOR, LanguageSpec, RUST_SPEC, base_type_name
from .records import BlockRecord, MethodRecord
from ..config import EngineConfig
from ..summarizer import first_paragraph

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_OPEN_PAREN_SPACE = re.compile(r"\(\s+")
_CLOSE_PAREN_SPACE = re.compile(r"\s+\)")
_STRING_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"')
_CHAR_LITERAL = re.compile(r"'(?:\\.|[^'\\])'")


@dataclass
class SourceLine:
    """One line of raw input with the search-tool prefix removed."""
    text: str
    file: str = ""
    line: int = 0                   # 1-indexed, 0 when unknown
    is_match: bool = False
    is_separator: bool = False


@dataclass
class ParsedOutput:
    """Blocks and the flat method list recovered from raw text."""
    blocks: list[BlockRecord] = field(default_factory=list)
    methods: list[MethodRecord] = field(default_factory=list)


class ScanState(Enum):
    AWAITING_BLOCK = "awaiting_block"
    IN_BLOCK = "in_block"
    IN_FOREIGN_BLOCK = "in_foreign_block"
    IN_SIGNATURE = "in_signature"


def split_search_output(raw: str, spec: LanguageSpec = RUST_SPEC) -> list[SourceLine]:
    """Split search output into lines, stripping "file:line:" / "file-line-" prefixes."""
    lines = []
    for text in raw.split("\n"):
        if text.strip() == GROUP_SEPARATOR:
            lines.append(SourceLine(text=GROUP_SEPARATOR, is_separator=True))
            continue

        match = spec.search_prefix.match(text) or spec.search_prefix_plain.match(text)
        if not match:
            lines.append(SourceLine(text=text))
            continue

        number = match.groupdict().get("line")
        lines.append(SourceLine(
            text=match.group("text"),
            file=match.group("file"),
            line=int(number) if number else 0,
            is_match=match.group("sep") == ":",
        ))
    return lines


def source_lines(source: str, file: str = "") -> list[SourceLine]:
    """Wrap plain file content as numbered lines."""
    return [
        SourceLine(text=text, file=file, line=number)
        for number, text in enumerate(source.split("\n"), start=1)
    ]


def normalize_signature(text: str) -> str:
    """Collapse whitespace and tighten spacing inside parentheses."""
    text = _OPEN_PAREN_SPACE.sub("(", text)
    text = _CLOSE_PAREN_SPACE.sub(")", text)
    return _WHITESPACE.sub(" ", text).strip()


def strip_line_comment(text: str) -> str:
    """Remove a trailing // comment, ignoring // inside string literals."""
    masked = _STRING_LITERAL.sub(lambda m: "\0" * len(m.group(0)), text)
    index = masked.find("//")
    return text if index < 0 else text[:index]


def brace_counts(text: str) -> tuple[int, int]:
    """Count opening and closing braces outside literals and comments."""
    code = _STRING_LITERAL.sub('""', text)
    code = _CHAR_LITERAL.sub("''", code)
    index = code.find("//")
    if index >= 0:
        code = code[:index]
    return code.count("{"), code.count("}")


def find_signature_end(text: str) -> Optional[int]:
    """Index of the body-opening brace or terminating semicolon, if present.

    Only delimiters outside parentheses and brackets count, so array types
    such as [u8; 4] do not end the signature.
    """
    depth = 0
    for index, ch in enumerate(text):
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch in "{;" and depth == 0:
            return index
    return None


def read_signature(
    lines: list[str],
    start: int,
    first: str,
    max_continuation_lines: int = 20,
) -> tuple[Optional[str], int]:
    """Reconstruct the signature that begins on lines[start].

    first is the text after the fn keyword. Continuation lines are consumed
    until the body-opening brace (or a declaration's semicolon) appears.
    Returns (signature, continuation_lines_consumed); signature is None
    when no terminator is found within the bound.
    """
    parts = [strip_line_comment(first).strip()]
    consumed = 0
    index = start + 1

    while True:
        signature = _terminated_signature(parts)
        if signature is not None:
            return signature, consumed

        if consumed >= max_continuation_lines or index >= len(lines):
            return None, consumed

        consumed += 1
        _append_continuation(parts, lines[index])
        index += 1


def _terminated_signature(parts: list[str]) -> Optional[str]:
    """Normalized signature if the collected parts contain its terminator."""
    joined = " ".join(p for p in parts if p)
    end = find_signature_end(joined)
    return None if end is None else normalize_signature(joined[:end])


def _append_continuation(parts: list[str], text: str) -> None:
    text = text.strip()
    if text and text != GROUP_SEPARATOR:
        parts.append(strip_line_comment(text).strip())


def method_documentation(lines: list[str], index: int, config: EngineConfig, spec: LanguageSpec = RUST_SPEC) -> str:
    """Short description for the method starting at lines[index]."""
    doc_lines = collect_doc_lines(lines, index, config.max_doc_lookback, spec)
    return first_paragraph(clean_doc_lines(doc_lines, spec), config.max_doc_lines)


def normalize_header(text: str, spec: LanguageSpec = RUST_SPEC) -> str:
    """Normalize an impl header: single spaces, no where clause, no brace."""
    header = strip_line_comment(text)
    if "{" in header:
        header = header[:header.index("{")]
    header = _WHITESPACE.sub(" ", header).strip()
    where = _top_level_find(header, " where ")
    if where >= 0:
        header = header[:where]
    return header.strip()


def impl_self_type(header: str) -> str:
    """Bare name of the type an impl header implements for.

    "impl<T> Display for Wrapper<T>" -> "Wrapper"
    """
    body = header[header.index("impl") + len("impl"):].strip() if "impl" in header else header
    if body.startswith("<"):
        body = body[_matching_angle(body) + 1:].strip()
    target = body
    split = _top_level_find(body, " for ")
    while split >= 0:
        target = target[split + len(" for "):]
        split = _top_level_find(target, " for ")
    return base_type_name(target)


def _matching_angle(text: str) -> int:
    """Index of the '>' closing the '<' at text[0] (ignoring '->')."""
    depth = 0
    for index, ch in enumerate(text):
        if ch == "<":
            depth += 1
        elif ch == ">" and (index == 0 or text[index - 1] != "-"):
            depth -= 1
            if depth == 0:
                return index
    return len(text) - 1


def _top_level_find(text: str, needle: str) -> int:
    """Find needle outside any <...>, (...) or [...] nesting."""
    depth = 0
    for index, ch in enumerate(text):
        if ch in "<([":
            depth += 1
        elif ch in ")]" or (ch == ">" and (index == 0 or text[index - 1] != "-")):
            depth = max(0, depth - 1)
        elif depth == 0 and text.startswith(needle, index):
            return index
    return -1


@dataclass
class _OpenBlock:
    depth: int                      # Brace depth before the header line
    entered: bool = False           # The block's opening brace has been seen


@dataclass
class _PendingSignature:
    start: int                      # Index of the line holding the fn keyword
    first_text: str                 # Part of that line not yet depth-tracked
    parts: list[str]
    resume: ScanState               # State restored once the signature ends
    inline: bool = False            # Method starts on its block's header line
    consumed: int = 0


class BlockScanner:
    """State machine over a line stream producing grouped method records.

    AWAITING_BLOCK: outside any impl block; top-level fns are ungrouped methods.
    IN_BLOCK: inside a block for the requested type; fns at member depth count.
    IN_FOREIGN_BLOCK: inside a block for another type (trailing search
        context); braces are tracked, fns are ignored.
    IN_SIGNATURE: collecting continuation lines of a method signature.
    """

    def __init__(
        self,
        lines: list[SourceLine],
        type_name: Optional[str] = None,
        config: Optional[EngineConfig] = None,
        spec: LanguageSpec = RUST_SPEC,
    ):
        self.lines = lines
        self.texts = [line.text for line in lines]
        self.type_name = base_type_name(type_name) if type_name else None
        self.config = config or EngineConfig()
        self.spec = spec
        self.grouper = BlockGrouper()
        self.state = ScanState.AWAITING_BLOCK
        self.depth = 0
        self.block: Optional[_OpenBlock] = None
        self.pending: Optional[_PendingSignature] = None
        self._file: Optional[str] = None

    def scan(self) -> ParsedOutput:
        index = 0
        while True:
            if index < len(self.lines):
                index = self._step(index)
            elif self.state is ScanState.IN_SIGNATURE:
                index = self._abandon_signature()
            else:
                break
        self._close_block()
        blocks, methods = self.grouper.finish()
        return ParsedOutput(blocks=blocks, methods=methods)

    def _step(self, index: int) -> int:
        if self.state is ScanState.IN_SIGNATURE:
            return self._continue_signature(index)

        line = self.lines[index]
        if line.is_separator:
            self._reset_group()
            return index + 1
        if line.file and self._file and line.file != self._file:
            self._reset_group()
        if line.file:
            self._file = line.file

        header = self.spec.impl_header.match(line.text)
        if header:
            return self._enter_header(index, header)
        return self._scan_code(index, line.text)

    def _enter_header(self, index: int, header: re.Match) -> int:
        text = self.lines[index].text
        self._open_block(index, header.group("header"))

        split = header.end("header")
        if self.state is ScanState.IN_BLOCK and text[split:].startswith("{"):
            # Enter the block first so a method after the brace is at member depth
            self._track_depth(text[:split + 1])
            return self._scan_code(index, text[split + 1:], inline=True)

        self._track_depth(text)
        return index + 1

    def _scan_code(self, index: int, text: str, inline: bool = False) -> int:
        method = self.spec.method_line.match(text)
        if not method or not self._at_member_depth():
            self._track_depth(text)
            return index + 1

        self.pending = _PendingSignature(
            start=index,
            first_text=text,
            parts=[strip_line_comment(method.group("rest")).strip()],
            resume=self.state,
            inline=inline,
        )
        self.state = ScanState.IN_SIGNATURE
        return self._check_signature(index)

    def _continue_signature(self, index: int) -> int:
        self.pending.consumed += 1
        _append_continuation(self.pending.parts, self.texts[index])
        return self._check_signature(index)

    def _check_signature(self, index: int) -> int:
        pending = self.pending
        signature = _terminated_signature(pending.parts)

        if signature is None:
            if pending.consumed >= self.config.max_continuation_lines:
                return self._abandon_signature()
            return index + 1

        self.state = pending.resume
        self.pending = None
        self._emit_method(pending, signature)
        self._track_depth(pending.first_text)
        for k in range(pending.start + 1, index + 1):
            self._track_depth(self.texts[k])
        return index + 1

    def _abandon_signature(self) -> int:
        """Drop an unterminated signature and rescan from the line after it."""
        pending = self.pending
        line = self.lines[pending.start]
        logger.debug(
            f"Discarding unterminated signature at {line.file or '<text>'}:{line.line or pending.start + 1}"
        )
        self.state = pending.resume
        self.pending = None
        self._track_depth(pending.first_text)
        return pending.start + 1

    def _at_member_depth(self) -> bool:
        if self.state is ScanState.AWAITING_BLOCK:
            return self.depth == 0
        if self.state is ScanState.IN_BLOCK:
            return self.block.entered and self.depth == self.block.depth + 1
        return False

    def _open_block(self, index: int, header_text: str) -> None:
        self._close_block()
        header = normalize_header(header_text, self.spec)
        self.block = _OpenBlock(depth=self.depth)

        if self.type_name is not None and impl_self_type(header) != self.type_name:
            self.state = ScanState.IN_FOREIGN_BLOCK
            return

        line = self.lines[index]
        self.grouper.open_block(BlockRecord(
            header=header,
            doc=block_doc(self.texts, index, self.config.block_doc_lookback, self.spec),
            file=line.file,
            line=line.line,
        ))
        self.state = ScanState.IN_BLOCK

    def _close_block(self) -> None:
        if self.state is ScanState.IN_BLOCK:
            self.grouper.close_block()
        self.block = None
        self.state = ScanState.AWAITING_BLOCK

    def _reset_group(self) -> None:
        self._close_block()
        self.depth = 0

    def _track_depth(self, text: str) -> None:
        opens, closes = brace_counts(text)
        self.depth = max(0, self.depth + opens - closes)

        if self.state not in (ScanState.IN_BLOCK, ScanState.IN_FOREIGN_BLOCK):
            return
        if opens and not self.block.entered:
            self.block.entered = True
        if self.block.entered and self.depth <= self.block.depth:
            self._close_block()

    def _emit_method(self, pending: _PendingSignature, signature: str) -> None:
        match = self.spec.method_name.match(signature)
        if not match:
            logger.debug(f"Skipping malformed signature: {signature!r}")
            return

        name = match.group(1)
        if name.startswith(self.spec.internal_prefix):
            return

        # Doc comments above a header line describe the block, not an inline method
        documentation = "" if pending.inline else method_documentation(
            self.texts, pending.start, self.config, self.spec
        )
        line = self.lines[pending.start]
        self.grouper.add_method(MethodRecord(
            name=name,
            signature=signature,
            documentation=documentation,
            line=line.line or pending.start + 1,
            file=line.file,
        ))


def parse_search_output(
    raw: str,
    type_name: Optional[str] = None,
    config: Optional[EngineConfig] = None,
    spec: LanguageSpec = RUST_SPEC,
) -> ParsedOutput:
    """Parse content-search output into blocks and methods.

    Args:
        raw: Search output, each line optionally prefixed with "file:line:"
        type_name: Only keep impl blocks for this type (all blocks when None)
        config: Bounds for signatures and doc scans

    Returns:
        ParsedOutput with non-empty blocks and the flat method list
    """
    if not raw.strip():
        return ParsedOutput()
    return BlockScanner(split_search_output(raw, spec), type_name, config, spec).scan()


def parse_source(
    source: str,
    file: str = "",
    type_name: Optional[str] = None,
    config: Optional[EngineConfig] = None,
    spec: LanguageSpec = RUST_SPEC,
) -> ParsedOutput:
    """Parse plain file content (no search prefixes) into blocks and methods."""
    return BlockScanner(source_lines(source, file), type_name, config, spec).scan()
