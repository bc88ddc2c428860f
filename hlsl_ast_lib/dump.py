"""
AST Dump Parsing

Turns the text printed by ``dxc -ast-dump`` into an AstNode tree.

The dump draws the tree with a two-character prefix per nesting level:

    TranslationUnitDecl 0x1c8 <<invalid sloc>> <invalid sloc>
    |-VarDecl 0x2a0 <line:3:1, col:8> col:8 _MainColor 'float4'
    `-FunctionDecl 0x3b0 <line:5:1, line:9:1> line:6:6 CSMain 'void (uint3)'
      |-ParmVarDecl 0x3c0 <col:13, col:25> col:19 id 'uint3'
      `-HLSLNumThreadsAttr 0x3f0 <line:5:2, col:21> 8 8 1

Sibling boundaries are not delimited; a new sibling starts whenever a line
returns to the depth of the first child. The builder keeps one open frame per
level and closes frames as lines come back to a known sibling depth.
"""

import logging
import re
from typing import Iterator, List, Optional, Sequence, Tuple

from .model import (
    AstNode, DeclHeader, DumpLine, HeaderStatus,
    VAR_DECL, FUNCTION_DECL,
)

logger = logging.getLogger(__name__)

# Tree-drawing characters: vertical bar, dash, backtick and whitespace
_PREFIX = re.compile(r"^[|\-`\s]*")
_UNIT_WIDTH = 2

# Qualifiers dxc inserts between the location and the name
_VAR_QUALIFIERS = (" invalid", " used")
_FUNCTION_QUALIFIERS = (" implicit", " used")


# =============================================================================
# TOKENIZER
# =============================================================================

def tokenize_dump(text: str) -> List[DumpLine]:
    """
    Split dump text into (depth, payload) pairs, one per input line.

    depth is the number of whole two-character prefix units; the payload is
    the line with the full prefix removed.
    """
    lines = []
    for line in text.split("\n"):
        prefix = _PREFIX.match(line).group(0)
        lines.append(DumpLine(len(prefix) // _UNIT_WIDTH, line[len(prefix):]))
    return lines


# =============================================================================
# HEADER HEURISTICS
# =============================================================================

def kind_of(header: str) -> str:
    """Kind tag: everything before the first space."""
    space = header.find(" ")
    return header if space == -1 else header[:space]


def _strip_qualifiers(header: str, qualifiers: Sequence[str]) -> str:
    for q in qualifiers:
        header = header.replace(q, "", 1)
    return header


def _read_name(header: str) -> Optional[Tuple[str, int]]:
    """
    Name of a declaration: skip past the source range ('>' plus one char),
    then the location token, and take the next space-terminated word.

    Returns (name, offset after name), None when the range is missing and
    ("", -1) when no name follows.
    """
    gt = header.find(">")
    if gt == -1:
        return None
    space = header.find(" ", gt + 2)
    if space == -1:
        return "", -1
    start = space + 1
    end = header.find(" ", start)
    if end == -1:
        return "", -1
    return header[start:end], end


def parse_header(header: str) -> DeclHeader:
    """Extract name and declared type from a VarDecl/FunctionDecl header."""
    kind = kind_of(header)

    if kind == VAR_DECL:
        text = _strip_qualifiers(header, _VAR_QUALIFIERS)
    elif kind == FUNCTION_DECL:
        text = _strip_qualifiers(header, _FUNCTION_QUALIFIERS)
    else:
        return DeclHeader(kind=kind)

    read = _read_name(text)
    if read is None:
        return DeclHeader(kind=kind, status=HeaderStatus.MISSING_LOCATION)
    name, end = read
    if not name:
        return DeclHeader(kind=kind, status=HeaderStatus.MISSING_NAME)

    if kind == FUNCTION_DECL:
        return DeclHeader(kind=kind, name=name, status=HeaderStatus.OK)

    # Type follows the name after " '" and ends at the next quote. Compound
    # types ("const float4") keep only their last word.
    after = text[end + 2:]
    quote = after.find("'")
    declared = after[:quote].split(" ")[-1] if quote != -1 else ""
    if not declared:
        return DeclHeader(kind=kind, name=name, status=HeaderStatus.MISSING_TYPE)
    return DeclHeader(kind=kind, name=name, declared_type=declared, status=HeaderStatus.OK)


# =============================================================================
# TREE BUILDER
# =============================================================================

class _Frame:
    """Open node while building: header line, first-child depth and children so far."""
    __slots__ = ("depth", "header", "mark", "children")

    def __init__(self, depth: int, header: str):
        self.depth = depth
        self.header = header
        self.mark: Optional[int] = None
        self.children: List[AstNode] = []

    def close(self) -> AstNode:
        parsed = parse_header(self.header)
        if parsed.status not in (HeaderStatus.OK, HeaderStatus.NOT_A_DECLARATION):
            logger.debug(f"Unparsed {parsed.kind} header ({parsed.status.name}): {self.header!r}")
        return AstNode(
            kind=parsed.kind,
            header=self.header,
            name=parsed.name,
            declared_type=parsed.declared_type,
            depth=self.depth,
            children=tuple(self.children),
        )


def _close_to(stack: List[_Frame], level: int) -> None:
    """Close every frame above stack[level], attaching each to its parent."""
    while len(stack) > level + 1:
        node = stack.pop().close()
        stack[-1].children.append(node)


def build_tree(lines: Sequence[DumpLine]) -> AstNode:
    """
    Build one node from tokenized lines; the first line is the node header
    and its depth the baseline.

    Lines at or above a frame's baseline are dropped for that frame. A line
    at a frame's first-child depth closes the open child and starts a new
    sibling; anything deeper is routed into the open child.
    """
    if not lines:
        return AstNode()

    stack = [_Frame(lines[0].depth, lines[0].payload)]

    for line in lines[1:]:
        level = 0
        while True:
            frame = stack[level]
            if line.depth <= frame.depth:
                break
            if frame.mark is None or line.depth == frame.mark:
                _close_to(stack, level)
                frame.mark = line.depth
                stack.append(_Frame(line.depth, line.payload))
                break
            level += 1

    _close_to(stack, 0)
    return stack[0].close()


def parse_dump(text: str) -> AstNode:
    """Tokenize and build the whole dump; the first non-blank line becomes the root."""
    lines = tokenize_dump(text)
    start = 0
    while start < len(lines) and not lines[start].payload.strip():
        start += 1
    return build_tree(lines[start:])


def walk(node: AstNode) -> Iterator[AstNode]:
    """Pre-order traversal: node first, then children in dump order."""
    yield node
    for child in node.children:
        yield from walk(child)
