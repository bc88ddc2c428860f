"""
Declaration Extraction - Pure Functions

Filters the top level of a dump tree into global variables and compute
kernels. Order is always the order the compiler printed them in.
"""

import re
from typing import List, Tuple

from .model import (
    AstNode, VAR_DECL, FUNCTION_DECL, NUM_THREADS_ATTR, INVALID_SLOC,
)


def is_variable(node: AstNode) -> bool:
    return node.kind == VAR_DECL


def is_kernel(node: AstNode) -> bool:
    """
    A kernel is a function with a [numthreads] attribute and a real source range.

    Implicit declarations the compiler injects carry "invalid sloc" and are
    never kernels, even when they have the attribute.
    """
    return (
        node.kind == FUNCTION_DECL
        and INVALID_SLOC not in node.header
        and node.has_child(NUM_THREADS_ATTR)
    )


def extract_all(root: AstNode) -> Tuple[List[AstNode], List[AstNode]]:
    """
    Split the root's direct children into (variables, kernels).

    Nodes whose name could not be extracted are left out.
    """
    variables = [n for n in root.children if is_variable(n) and n.name]
    kernels = [n for n in root.children if is_kernel(n) and n.name]
    return variables, kernels


def line_marker(line_number: int) -> "re.Pattern":
    """
    Pattern for a source range starting on a 1-based line.

    dxc prints the first location of a file with the file name
    (<C:\\x\\temp.hlsl:3:1, ...>) and later ones as <line:3:1, ...>.
    """
    return re.compile(rf"<(?:line|[^<>]*?\.\w+):{line_number}:")


def declarations_on_line(root: AstNode, line_number: int) -> List[AstNode]:
    """Top-level variables whose declaration starts on the given line."""
    marker = line_marker(line_number)
    return [
        n for n in root.children
        if is_variable(n) and n.name and marker.search(n.header)
    ]
