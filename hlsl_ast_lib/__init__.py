"""
HLSL AST Library

Tools built on the DirectX shader compiler's AST dump (dxc -ast-dump):

- Dump tokenizer and tree builder (indentation-delimited text -> AstNode tree)
- Declaration extraction: global variables and [numthreads] kernels
- Declaration matching for an edited source line
- ShaderLab Properties block editing, with a plain-text fallback
- C# reference generation for compute shaders

Usage:
    from hlsl_ast_lib import parse_dump, extract_all, plan_property_insertion

    root = parse_dump(dump_text)
    variables, kernels = extract_all(root)

    result = plan_property_insertion("_Glossiness", "half", shader_text)
    if result.ok:
        new_text = apply_insertion(shader_text, result.insertion)
"""

from .model import (
    # Dump tree
    DumpLine,
    AstNode,
    DeclHeader,
    HeaderStatus,
    VAR_DECL,
    FUNCTION_DECL,
    NUM_THREADS_ATTR,
    INVALID_SLOC,
    # Matching
    MatchOutcome,
    MatchResult,
    # Property edits
    SnippetField,
    PropertyInsertion,
    EditOutcome,
    PropertyEditResult,
    Document,
)
from .dump import (
    tokenize_dump,
    parse_header,
    build_tree,
    parse_dump,
    walk,
)
from .extract import (
    is_variable,
    is_kernel,
    extract_all,
    declarations_on_line,
)
from .matcher import (
    line_tokens,
    score,
    select_declaration,
)
from .properties import (
    PROPERTY_TYPES,
    map_property_type,
    has_property_block,
    property_block,
    is_property_declared,
    find_insertion_line,
    build_snippet,
    plan_property_insertion,
    apply_insertion,
    parse_declaration_line,
)
from .codegen import render_csharp_references, reference_path_for
from .compiler import DxcCompiler, ProgramBlock, isolate_program_block
from .config import ToolConfig, save_config, load_config, DEFAULT_CONFIG_PATH
from .workflow import ReferenceResult, generate_references, add_variable_to_properties
from .cli import main as cli_main

__all__ = [
    # Dump tree
    "DumpLine",
    "AstNode",
    "DeclHeader",
    "HeaderStatus",
    "VAR_DECL",
    "FUNCTION_DECL",
    "NUM_THREADS_ATTR",
    "INVALID_SLOC",
    "tokenize_dump",
    "parse_header",
    "build_tree",
    "parse_dump",
    "walk",
    # Extraction
    "is_variable",
    "is_kernel",
    "extract_all",
    "declarations_on_line",
    # Matching
    "MatchOutcome",
    "MatchResult",
    "line_tokens",
    "score",
    "select_declaration",
    # Property edits
    "SnippetField",
    "PropertyInsertion",
    "EditOutcome",
    "PropertyEditResult",
    "Document",
    "PROPERTY_TYPES",
    "map_property_type",
    "has_property_block",
    "property_block",
    "is_property_declared",
    "find_insertion_line",
    "build_snippet",
    "plan_property_insertion",
    "apply_insertion",
    "parse_declaration_line",
    # Code generation
    "render_csharp_references",
    "reference_path_for",
    # Compiler
    "DxcCompiler",
    "ProgramBlock",
    "isolate_program_block",
    # Config persistence
    "ToolConfig",
    "save_config",
    "load_config",
    "DEFAULT_CONFIG_PATH",
    # Workflows
    "ReferenceResult",
    "generate_references",
    "add_variable_to_properties",
    # CLI
    "cli_main",
]

__version__ = "1.0.0"
