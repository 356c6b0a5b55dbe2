"""Resolve a symbol to the concrete type whose impl blocks should be searched."""

from .languages import LanguageSpec, RUST_SPEC, base_type_name
from .records import TypeBinding


def declaration_window(source: str, line: int, size: int = 10) -> list[str]:
    """Lines of source starting at 1-indexed line, at most size of them."""
    lines = source.split("\n")
    start = max(0, line - 1)
    return lines[start:start + size]


def resolve_type(window: list[str], symbol: str, spec: LanguageSpec = RUST_SPEC) -> TypeBinding:
    """Find the canonical type name in a declaration window.

    The first line that is either a type alias or a struct/enum/union/trait
    declaration decides the binding. An alias resolves one hop to the last
    path segment of its target, without generic arguments. When nothing
    matches, the symbol itself is used.
    """
    for text in window:
        stripped = text.strip()
        if stripped.startswith(spec.comment_marker):
            continue

        alias = spec.type_alias.match(text)
        if alias:
            target = base_type_name(alias.group("target").replace(" ", ""))
            return TypeBinding(name=target, declared_name=alias.group("alias"), kind="alias")

        declaration = spec.type_declaration.match(text)
        if declaration:
            name = declaration.group("name")
            return TypeBinding(name=name, declared_name=name, kind="declaration")

    return TypeBinding(name=symbol, declared_name=symbol, kind="fallback")
