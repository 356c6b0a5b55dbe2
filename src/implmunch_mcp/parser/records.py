"""Record dataclasses produced by the resolution engine."""

from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass
class Position:
    """Cursor position inside a document."""
    line: int                       # 1-indexed
    column: int = 0                 # 0-indexed


@dataclass
class Location:
    """A definition site returned by a definition provider."""
    path: str                       # Absolute path of the declaring file
    line: int                       # 1-indexed line of the declaration


@dataclass
class TypeBinding:
    """Canonical type name resolved for a symbol."""
    name: str                       # Name to search impl blocks for
    declared_name: str              # Name found at the declaration site (or the symbol)
    kind: str                       # "alias" | "declaration" | "fallback"


@dataclass
class SearchScope:
    """Directory subtree a block search is restricted to."""
    kind: str                       # "local" | "external"
    directory: str


@dataclass
class MethodRecord:
    """A method parsed out of an impl block."""
    name: str                       # Method name (e.g., "add")
    signature: str                  # Normalized signature, starts with the name
    documentation: str = ""         # First paragraph of the doc comment
    line: int = 0                   # 1-indexed source line
    file: str = ""                  # Source file the method came from
    block: Optional[str] = None     # Header of the enclosing block

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BlockRecord:
    """An impl block and the public methods it declares."""
    header: str                     # e.g. "impl Point" or "impl Display for Point"
    doc: Optional[str] = None       # Single preceding doc-comment line
    methods: list[MethodRecord] = field(default_factory=list)
    file: str = ""
    line: int = 0

    def to_dict(self) -> dict:
        return {
            "header": self.header,
            "doc": self.doc,
            "file": self.file,
            "line": self.line,
            "methods": [m.to_dict() for m in self.methods],
        }


@dataclass
class ResolutionResult:
    """Terminal artifact of a resolve_methods request."""
    type_name: str
    binding: TypeBinding
    file_path: str
    scope: Optional[SearchScope] = None
    blocks: list[BlockRecord] = field(default_factory=list)
    methods: list[MethodRecord] = field(default_factory=list)
    request_id: int = 0

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "type_name": self.type_name,
            "binding": asdict(self.binding),
            "file_path": self.file_path,
            "scope": asdict(self.scope) if self.scope else None,
            "block_count": len(self.blocks),
            "method_count": len(self.methods),
            "blocks": [b.to_dict() for b in self.blocks],
            "methods": [m.to_dict() for m in self.methods],
        }


@dataclass
class MethodDetail:
    """Full detail for a single method, as shown when a method is selected."""
    name: str
    type_name: str
    signature: str
    documentation: str = ""         # Every retained doc line, newline-joined
    file: str = ""
    line: int = 0

    def to_dict(self) -> dict:
        return asdict(self)
