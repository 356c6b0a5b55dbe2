"""Get the full signature and documentation of one method."""

import logging
import os
from typing import Optional

from ..config import EngineConfig
from ..errors import ValidationError
from ..parser import (
    RUST_SPEC,
    MethodDetail,
    base_type_name,
    collect_doc_lines,
    parse_source,
    read_signature,
)
from ..providers import read_source
from ..validation import default_known_roots, ensure_identifier, ensure_path

logger = logging.getLogger(__name__)


def _find_method_line(lines: list[str], method_name: str) -> Optional[int]:
    """Index of the first line declaring fn method_name, at any depth."""
    for index, text in enumerate(lines):
        match = RUST_SPEC.method_line.match(text)
        if not match:
            continue
        rest = match.group("rest")
        if rest.startswith(method_name) and rest[len(method_name):].lstrip()[:1] in ("(", "<"):
            return index
    return None


def render_method_source(
    method_name: str,
    type_name: str,
    file_path: str,
    config: Optional[EngineConfig] = None,
) -> Optional[MethodDetail]:
    """Extract one method's signature and complete doc comment from a file.

    A method inside an impl block of type_name is preferred; otherwise the
    first declaration of method_name in the file is used.
    """
    config = config or EngineConfig()
    source = read_source(file_path)
    lines = source.split("\n")

    parsed = parse_source(source, file_path, type_name, config)
    found = next(
        (m for block in parsed.blocks for m in block.methods if m.name == method_name),
        None,
    )

    if found is not None:
        start = found.line - 1
        match = RUST_SPEC.method_line.match(lines[start])
        if match is None:
            # Declared on its impl header line; any doc above belongs to the block
            return MethodDetail(
                name=method_name,
                type_name=base_type_name(type_name),
                signature=found.signature,
                file=file_path,
                line=found.line,
            )
    else:
        start = _find_method_line(lines, method_name)
        if start is None:
            return None
        match = RUST_SPEC.method_line.match(lines[start])

    signature, _ = read_signature(lines, start, match.group("rest"), config.max_continuation_lines)
    if signature is None:
        logger.debug(f"Unterminated signature for {method_name} at {file_path}:{start + 1}")
        signature = match.group("rest").strip()

    documentation = "\n".join(collect_doc_lines(lines, start, max_lookback=start)).strip()

    return MethodDetail(
        name=method_name,
        type_name=base_type_name(type_name),
        signature=signature,
        documentation=documentation,
        file=file_path,
        line=start + 1,
    )


def get_method_source(
    method_name: str,
    type_name: str,
    file_path: str,
    workspace_root: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> dict:
    """Get a method's signature and documentation.

    Args:
        method_name: Method name (e.g., "add")
        type_name: Type whose impl block declares the method
        file_path: Absolute path of the file to look in
        workspace_root: Project root (default: current directory)
        config: Engine configuration

    Returns:
        Dict with method details, or an error
    """
    config = config or EngineConfig.from_env()
    workspace_root = os.path.abspath(workspace_root or os.getcwd())

    try:
        ensure_identifier(method_name, "method name")
        ensure_identifier(type_name, "type name")
        path = ensure_path(file_path, default_known_roots(workspace_root))
    except ValidationError as e:
        logger.warning(str(e))
        return {"error": str(e)}

    logger.info(f"Getting full docs for {type_name}::{method_name} from {path}")

    try:
        detail = render_method_source(method_name, type_name, path, config)
    except OSError as e:
        logger.warning(f"Failed to read {path}: {e}")
        return {"error": f"Failed to read {path}: {e}"}

    if detail is None:
        return {"error": f"Method not found: {type_name}::{method_name}"}

    return detail.to_dict()
