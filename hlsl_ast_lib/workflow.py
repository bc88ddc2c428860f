"""
Workflows - Compiler-assisted commands

The two editor commands, with all host interaction reduced to plain values:

    generate_references(path, config)
        compile a compute shader, write <name>.cs binding variables/kernels

    add_variable_to_properties(document, line_index, config)
        register the variable declared on a line in the Properties block;
        compile the surrounding program first and fall back to reading the
        line as text when the dump gives no confident answer
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import List, Optional

from .codegen import class_name_for, reference_path_for, render_csharp_references
from .compiler import DxcCompiler, isolate_program_block
from .config import ToolConfig
from .dump import parse_dump
from .extract import declarations_on_line, extract_all
from .matcher import select_declaration
from .model import (
    Document, EditOutcome, MatchOutcome, MatchResult, PropertyEditResult,
)
from .properties import parse_declaration_line, plan_property_insertion

logger = logging.getLogger(__name__)

SOURCE_AST = "ast"
SOURCE_PLAIN_TEXT = "plain-text"


@dataclass(frozen=True)
class ReferenceResult:
    """Outcome of C# reference generation."""
    path: str
    class_name: str
    variables: List[str]
    kernels: List[str]
    text: str


def _compile_target(shader_path: str, config: ToolConfig):
    """(path to pass to dxc, working directory) for a shader file."""
    root = config.workspace_root
    if root:
        absolute = os.path.abspath(shader_path)
        root = os.path.abspath(root)
        if absolute.startswith(root + os.sep):
            return os.path.relpath(absolute, root), root
    return shader_path, None


def generate_references(shader_path: str,
                        config: Optional[ToolConfig] = None,
                        compiler: Optional[DxcCompiler] = None,
                        write: bool = True) -> ReferenceResult:
    """
    Compile a compute shader and render its C# reference class.

    A failed compile yields a class with no members rather than an error.
    """
    config = config or ToolConfig()
    compiler = compiler or DxcCompiler(config)

    target, cwd = _compile_target(shader_path, config)
    root = parse_dump(compiler.dump_ast(target, config.reference_profile, cwd=cwd))
    variables, kernels = extract_all(root)

    class_name = class_name_for(shader_path)
    variable_names = [v.name for v in variables]
    kernel_names = [k.name for k in kernels]
    text = render_csharp_references(
        class_name, variable_names, kernel_names, namespace=config.csharp_namespace
    )

    out_path = reference_path_for(shader_path, config.reference_extension)
    if write:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info(
            f"Wrote {out_path}: {len(variable_names)} variables, {len(kernel_names)} kernels"
        )

    return ReferenceResult(
        path=out_path,
        class_name=class_name,
        variables=variable_names,
        kernels=kernel_names,
        text=text,
    )


def match_line_with_compiler(document: Document, line_index: int,
                             config: ToolConfig,
                             compiler: DxcCompiler) -> MatchResult:
    """Compile the program block around a line and pick its declaration."""
    line = document.line_at(line_index)
    block = isolate_program_block(document.text, line_index)
    if line is None or block is None:
        return MatchResult(MatchOutcome.NO_CANDIDATES)

    includes = []
    if config.workspace_root:
        includes.append(config.workspace_root)
    if document.path:
        includes.append(os.path.dirname(os.path.abspath(document.path)))

    root = parse_dump(compiler.dump_source(block.body, config.property_profile, includes))
    candidates = declarations_on_line(root, block.line_number)
    return select_declaration(candidates, line)


def add_variable_to_properties(document: Document, line_index: int,
                               config: Optional[ToolConfig] = None,
                               compiler: Optional[DxcCompiler] = None,
                               use_compiler: bool = True,
                               fallback: bool = True) -> PropertyEditResult:
    """
    Plan the Properties entry for the variable declared on a 0-based line.

    Outcomes:
        INSERTED: result.insertion holds the edit to apply
        ALREADY_DECLARED: the block already has the property, nothing to do
        AMBIGUOUS: the dump had no confident match and fallback is disabled
        PRECONDITION_NOT_MET: no file path, no such line, or no declaration
    """
    if not document.path:
        return _not_met("Document has no file path")
    line = document.line_at(line_index)
    if line is None:
        return _not_met(f"Line {line_index + 1} is outside the document")

    config = config or ToolConfig()

    if use_compiler:
        match = match_line_with_compiler(document, line_index, config,
                                         compiler or DxcCompiler(config))
        if match.matched:
            node = match.node
            logger.debug(f"Matched {node.name} ({node.declared_type}) with score {match.score}")
            result = plan_property_insertion(node.name, node.declared_type, document.text)
            return replace(result, source=SOURCE_AST)
        if match.outcome == MatchOutcome.AMBIGUOUS and not fallback:
            return PropertyEditResult(
                EditOutcome.AMBIGUOUS,
                message=f"No confident match for line {line_index + 1}",
                source=SOURCE_AST,
            )

    if not fallback and use_compiler:
        return _not_met(f"No declaration found on line {line_index + 1}")

    parsed = parse_declaration_line(line)
    if parsed is None:
        return _not_met(f"Could not read a declaration from line {line_index + 1}")

    name, declared_type = parsed
    result = plan_property_insertion(name, declared_type, document.text)
    return replace(result, source=SOURCE_PLAIN_TEXT)


def _not_met(message: str) -> PropertyEditResult:
    logger.debug(message)
    return PropertyEditResult(EditOutcome.PRECONDITION_NOT_MET, message=message)
