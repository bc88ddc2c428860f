"""
Domain Models for AST Dumps and Property Edits

Immutable data structures for the compiler dump tree, header parsing results,
declaration matching and property-block edits.

Everything here is plain data. Parsing lives in dump.py, selection in
matcher.py and text surgery in properties.py.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, NamedTuple, Optional, Tuple


# =============================================================================
# DUMP KIND TAGS
# =============================================================================

VAR_DECL = "VarDecl"
FUNCTION_DECL = "FunctionDecl"
NUM_THREADS_ATTR = "HLSLNumThreadsAttr"

# Marker dxc prints for declarations without a usable source range
INVALID_SLOC = "invalid sloc"


# =============================================================================
# DUMP LINES AND TREE NODES
# =============================================================================

class DumpLine(NamedTuple):
    """One tokenized dump line: nesting depth and the text after the tree prefix."""
    depth: int
    payload: str


class HeaderStatus(Enum):
    """
    Outcome of header extraction.

    OK: name (and type, for variables) extracted
    NOT_A_DECLARATION: kind carries no name/type heuristics
    MISSING_LOCATION: no '>' closing the source range
    MISSING_NAME: nothing after the column marker
    MISSING_TYPE: no quoted type after the name
    """
    OK = auto()
    NOT_A_DECLARATION = auto()
    MISSING_LOCATION = auto()
    MISSING_NAME = auto()
    MISSING_TYPE = auto()


@dataclass(frozen=True)
class DeclHeader:
    """Name and declared type read from a declaration header."""
    kind: str
    name: str = ""
    declared_type: str = ""
    status: HeaderStatus = HeaderStatus.NOT_A_DECLARATION

    @property
    def ok(self) -> bool:
        return self.status == HeaderStatus.OK


@dataclass(frozen=True)
class AstNode:
    """
    One entry of the dump tree.

    Attributes:
        kind: Token before the first space of the header (e.g. "VarDecl")
        header: Verbatim first line of this node's dump region
        name: Declared name, "" when it could not be extracted
        declared_type: Canonical declared type, "" when unknown
        depth: Baseline depth of the node at build time
        children: Child nodes in dump order
    """
    kind: str = ""
    header: str = ""
    name: str = ""
    declared_type: str = ""
    depth: int = 0
    children: Tuple["AstNode", ...] = ()

    def __iter__(self) -> Iterator["AstNode"]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def has_child(self, kind: str) -> bool:
        return any(c.kind == kind for c in self.children)


# =============================================================================
# DECLARATION MATCHING
# =============================================================================

class MatchOutcome(Enum):
    """
    Result of picking one declaration for an edited source line.

    MATCHED: a single candidate was chosen
    AMBIGUOUS: several candidates, none sharing a token with the line
    NO_CANDIDATES: nothing declared on the line
    """
    MATCHED = auto()
    AMBIGUOUS = auto()
    NO_CANDIDATES = auto()


@dataclass(frozen=True)
class MatchResult:
    outcome: MatchOutcome
    node: Optional[AstNode] = None
    score: int = 0

    @property
    def matched(self) -> bool:
        return self.outcome == MatchOutcome.MATCHED


# =============================================================================
# PROPERTY EDITS
# =============================================================================

@dataclass(frozen=True)
class SnippetField:
    """Editable tab-stop inside an inserted template."""
    index: int
    value: str

    def __str__(self) -> str:
        return f"${{{self.index}:{self.value}}}"


@dataclass(frozen=True)
class PropertyInsertion:
    """
    Where and what to insert so a variable becomes a ShaderLab property.

    Attributes:
        name: Shader variable name
        declared_type: Type the property kind was derived from
        kind: Property kind shown in the material inspector ("Float", "2D", ...)
        default: Default value literal
        target_line: 0-based line computed from the block or shader position
        line: 0-based editor line that receives the snippet (target_line - 2,
            may be negative; hosts clamp it)
        column: Column of the snippet (editors clamp it to the line end)
        snippet: Template with tab-stops, starting with a newline
        fields: Editable fields in tab order (name, label, kind, default)
    """
    name: str
    declared_type: str
    kind: str
    default: str
    target_line: int
    line: int
    column: int
    snippet: str
    fields: Tuple[SnippetField, ...] = ()

    def render(self) -> str:
        """Snippet with every tab-stop replaced by its value."""
        text = self.snippet
        for f in self.fields:
            text = text.replace(str(f), f.value, 1)
        return text


class EditOutcome(str, Enum):
    """Explicit outcome of a property edit request."""
    INSERTED = "inserted"
    ALREADY_DECLARED = "already_declared"
    AMBIGUOUS = "ambiguous"
    PRECONDITION_NOT_MET = "precondition_not_met"


@dataclass(frozen=True)
class PropertyEditResult:
    outcome: EditOutcome
    insertion: Optional[PropertyInsertion] = None
    message: str = ""
    source: str = ""  # "ast" or "plain-text"

    @property
    def ok(self) -> bool:
        return self.outcome == EditOutcome.INSERTED


# =============================================================================
# HOST DOCUMENT
# =============================================================================

@dataclass(frozen=True)
class Document:
    """
    Text of the document being edited, as supplied by the host.

    The document is owned by the caller; edits are computed against it and
    applied by the host (see properties.apply_insertion).
    """
    text: str
    path: Optional[str] = None
    lines: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.text.split("\n")))

    def line_at(self, index: int) -> Optional[str]:
        """Line at 0-based index, or None when out of range."""
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None
