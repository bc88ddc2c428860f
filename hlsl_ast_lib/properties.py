"""
ShaderLab Property Block Editing

Computes where a ``name ("label", Kind) = default`` line goes inside the
``Properties { ... }`` block of a hand-written .shader file, and what the
line looks like. Nothing here mutates the document: the host applies the
returned PropertyInsertion (apply_insertion does it for plain strings).

Also holds the plain-text fallback that reads name and type straight from
the edited line when no compiler dump is available.
"""

import logging
import re
from typing import List, Optional, Tuple

from .model import (
    EditOutcome, PropertyEditResult, PropertyInsertion, SnippetField,
)

logger = logging.getLogger(__name__)


# =============================================================================
# PATTERNS
# =============================================================================

PROPERTIES_KEYWORD = "Properties"

PROPERTY_BLOCK = re.compile(r"\{\W*Properties\W*\{")
EMPTY_BLOCK = re.compile(r"\{\s*\}")
SHADER_WITH_SUBSHADER = re.compile(r"Shader[\s\S]*SubShader")
SHADER_HEADER = re.compile(r'Shader\W*".*"\W*\{')

# Fixed upward shift from the computed line to the editor line. Empirically
# tuned; kept as-is.
LINE_ADJUSTMENT = -2


# =============================================================================
# TYPE MAPPING
# =============================================================================

# Exact-token aliases; "half3" stays "half3"
TYPE_ALIASES = {
    "half": "float",
    "fixed": "float",
}

# (shader types, property kind, default literal); first match wins
PROPERTY_TYPES: List[Tuple[Tuple[str, ...], str, str]] = [
    (("int", "uint"), "Integer", "1"),
    (("float", "double"), "Float", "1"),
    (("sampler", "sampler2D", "Texture2D"), "2D", '"white" {}'),
    (("Texture2DArray",), "2DArray", '"" {}'),
    (("sampler2D", "Texture3D"), "3D", '"" {}'),
    (("samplerCUBE", "TextureCube"), "Cube", '"" {}'),
    (("TextureCubeArray",), "CubeArray", '"" {}'),
    (("float2", "float3", "float4"), "Vector", "(1,1,1,1)"),
]


def map_property_type(declared_type: str) -> Tuple[str, str]:
    """
    Property kind and default literal for a shader type.

    Example:
        map_property_type("half") -> ("Float", "1")
        map_property_type("half3") -> ("", "")
    """
    normalized = TYPE_ALIASES.get(declared_type, declared_type)
    for types, kind, default in PROPERTY_TYPES:
        if normalized in types:
            return kind, default
    return "", ""


# =============================================================================
# EXISTING BLOCK
# =============================================================================

def has_property_block(text: str) -> bool:
    return PROPERTY_BLOCK.search(text) is not None


def property_block(text: str) -> Optional[str]:
    """
    Body of the Properties block, from its '{' up to the closing '}'.

    Empty braces ("white" {}) are removed first so the first '}' after the
    opening brace is the block terminator.
    """
    working = EMPTY_BLOCK.sub("", text)
    match = PROPERTY_BLOCK.search(working)
    if match is None:
        return None
    start = match.end() - 1
    end = working.find("}", start + 1)
    if end == -1:
        end = len(working)
    return working[start:end]


def is_property_declared(name: str, block: str) -> bool:
    """True when the block already has a ``name (`` property."""
    return re.search(rf"\b{re.escape(name)}\s*\(", block) is not None


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset)


def find_insertion_line(text: str) -> int:
    """
    0-based line the editor position is computed from.

    With a Properties block this is the line after the keyword, one further
    when the opening brace sits on its own line. Without a block it is the
    line where the ``Shader ... SubShader`` (or ``Shader "..." {``) match
    starts, or 0 when neither matches.
    """
    match = PROPERTY_BLOCK.search(text)
    if match is not None:
        keyword = match.start() + match.group(0).find(PROPERTIES_KEYWORD)
        brace = match.end() - 1
        line = _line_of(text, keyword) + 1
        if "\n" in text[keyword:brace]:
            line += 1
        return line

    match = SHADER_WITH_SUBSHADER.search(text) or SHADER_HEADER.search(text)
    if match is None:
        return 0
    return _line_of(text, match.start())


# =============================================================================
# TEMPLATE
# =============================================================================

def property_line(fields: Tuple[SnippetField, ...]) -> str:
    name, label, kind, default = fields
    return f'{name}("{label}", {kind}) = {default}'


def build_snippet(name: str, kind: str, default: str) -> Tuple[str, Tuple[SnippetField, ...]]:
    """Tab-stop template for one property line, led by a newline, and its fields."""
    fields = (
        SnippetField(1, name),
        SnippetField(2, name),
        SnippetField(3, kind),
        SnippetField(4, default),
    )
    return f"\n{property_line(fields)}", fields


def plan_property_insertion(name: str, declared_type: str, text: str) -> PropertyEditResult:
    """
    Work out the property edit for ``name`` in a ShaderLab source.

    Returns ALREADY_DECLARED (no insertion) when the Properties block already
    declares the name, otherwise INSERTED with the computed insertion. The
    editor line is the computed line moved up by LINE_ADJUSTMENT, unclamped;
    hosts clamp it to their document.
    """
    block = property_block(text)
    if block is not None and is_property_declared(name, block):
        message = f"Looks like variable {name} has been defined in properties"
        logger.info(message)
        return PropertyEditResult(EditOutcome.ALREADY_DECLARED, message=message)

    target = find_insertion_line(text)
    kind, default = map_property_type(declared_type)
    snippet, fields = build_snippet(name, kind, default)

    insertion = PropertyInsertion(
        name=name,
        declared_type=declared_type,
        kind=kind,
        default=default,
        target_line=target,
        line=target + LINE_ADJUSTMENT,
        column=len(snippet),
        snippet=snippet,
        fields=fields,
    )
    logger.debug(f"Property {name} ({declared_type} -> {kind or '?'}) at line {target}")
    return PropertyEditResult(EditOutcome.INSERTED, insertion=insertion)


def apply_insertion(text: str, insertion: PropertyInsertion) -> str:
    """
    Insert the rendered snippet the way an editor would: position clamped to
    the document, following lines indented like the receiving line.
    """
    lines = text.split("\n")
    line = max(min(insertion.line, len(lines) - 1), 0)
    target = lines[line]
    column = min(insertion.column, len(target))

    rendered = insertion.render()
    if column > 0:
        indent = target[:len(target) - len(target.lstrip())]
        rendered = rendered.replace("\n", "\n" + indent)

    lines[line] = target[:column] + rendered + target[column:]
    return "\n".join(lines)


# =============================================================================
# PLAIN-TEXT FALLBACK
# =============================================================================

_WORD = re.compile(r"\w*")


def parse_declaration_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Read (name, type) from a declaration line without compiling.

    Example:
        parse_declaration_line("half _Rough = 0.5; // comment") -> ("_Rough", "half")

    Returns None when fewer than two words remain.
    """
    text = line
    if "//" in text:
        text = text[:text.find("//")]
    if "=" in text:
        text = text[:text.find("=")] + ";"
    text = text.strip().replace(";", "")

    words = [w for w in _WORD.findall(text) if w]
    words.reverse()
    if len(words) < 2:
        return None
    return words[0], words[1]
