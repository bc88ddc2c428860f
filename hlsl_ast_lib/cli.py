"""
HLSL AST Library - CLI Application

Command-line front end for the editor commands. The file on disk stands in
for the editor's active document.

Usage:
    python -m hlsl_ast_lib dump Blur.compute
    python -m hlsl_ast_lib dump --from-dump blur_ast.txt
    python -m hlsl_ast_lib refs Blur.compute
    python -m hlsl_ast_lib add-property Lit.shader 42 --write
    python -m hlsl_ast_lib parse-line "half _Rough = 0.5;"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .compiler import DxcCompiler
from .config import DEFAULT_CONFIG_PATH, ToolConfig, load_config, save_config
from .dump import parse_dump
from .extract import extract_all
from .model import AstNode, Document, EditOutcome
from .properties import apply_insertion, parse_declaration_line
from .workflow import add_variable_to_properties, generate_references

logger = logging.getLogger(__name__)

console = Console()

EXIT_OK = 0
EXIT_NOT_APPLIED = 1


def _add_tree(branch: Tree, node: AstNode, depth: Optional[int]) -> None:
    if depth is not None and depth <= 0:
        if node.children:
            branch.add(f"[dim]... {len(node.children)} more[/dim]")
        return
    for child in node.children:
        label = escape(child.header)
        if child.name:
            label = f"[bold]{escape(child.kind)}[/bold] {escape(child.name)}"
            if child.declared_type:
                label += f" [cyan]{escape(child.declared_type)}[/cyan]"
        _add_tree(branch.add(label), child, None if depth is None else depth - 1)


def _resolve_config(args: argparse.Namespace) -> ToolConfig:
    config = load_config(Path(args.config) if args.config else None)
    return config.with_overrides(dxc_path=args.dxc, workspace_root=args.workspace)


def cmd_dump(args: argparse.Namespace, config: ToolConfig) -> int:
    if args.from_dump:
        text = Path(args.file).read_text(encoding="utf-8", errors="replace")
    else:
        profile = args.profile or config.reference_profile
        text = DxcCompiler(config).dump_ast(args.file, profile)

    root = parse_dump(text)
    tree = Tree(f"[bold]{escape(root.kind) or '(empty)'}[/bold]")
    _add_tree(tree, root, args.depth)
    console.print(tree)

    variables, kernels = extract_all(root)
    table = Table(title="Declarations")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Type")
    for v in variables:
        table.add_row("variable", v.name, v.declared_type)
    for k in kernels:
        table.add_row("kernel", k.name, "")
    console.print(table)
    return EXIT_OK


def cmd_refs(args: argparse.Namespace, config: ToolConfig) -> int:
    result = generate_references(args.file, config, write=not args.stdout)
    if args.stdout:
        console.print(result.text, markup=False, highlight=False)
    else:
        console.print(f"Wrote [bold]{result.path}[/bold] "
                      f"({len(result.variables)} variables, {len(result.kernels)} kernels)")
    return EXIT_OK


def cmd_add_property(args: argparse.Namespace, config: ToolConfig) -> int:
    path = Path(args.file)
    document = Document(text=path.read_text(encoding="utf-8"), path=str(path))

    result = add_variable_to_properties(
        document,
        args.line - 1,
        config,
        use_compiler=not args.no_compile,
        fallback=not args.no_fallback,
    )

    if result.outcome != EditOutcome.INSERTED:
        console.print(f"[yellow]{result.outcome.value}[/yellow]: {escape(result.message)}")
        return EXIT_NOT_APPLIED

    insertion = result.insertion
    console.print(
        f"{insertion.name} ({insertion.declared_type or '?'}) via {result.source}, "
        f"line {insertion.target_line + 1}:"
    )
    console.print(insertion.render().strip("\n"), markup=False, highlight=False)

    if args.write:
        path.write_text(apply_insertion(document.text, insertion), encoding="utf-8")
        logger.info(f"Updated {path}")
    return EXIT_OK


def cmd_parse_line(args: argparse.Namespace, config: ToolConfig) -> int:
    parsed = parse_declaration_line(args.text)
    if parsed is None:
        console.print("[yellow]no declaration[/yellow]")
        return EXIT_NOT_APPLIED
    name, declared_type = parsed
    console.print(f"name={name} type={declared_type}", markup=False)
    return EXIT_OK


def cmd_config(args: argparse.Namespace, config: ToolConfig) -> int:
    table = Table(title="Configuration")
    table.add_column("Key")
    table.add_column("Value")
    for key, value in config.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    if args.save:
        path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH
        if not save_config(config, path):
            return EXIT_NOT_APPLIED
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hlsl_ast_lib",
        description="dxc AST dump tools: declarations, C# references, ShaderLab properties",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument("--config", help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--dxc", help="dxc executable")
    parser.add_argument("--workspace", help="Workspace root used as include dir and cwd")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("dump", help="Print the AST tree and its declarations")
    p.add_argument("file")
    p.add_argument("--from-dump", action="store_true", help="FILE is saved dump text")
    p.add_argument("--profile", help="Profile to compile with (default: reference profile)")
    p.add_argument("--depth", type=int, help="Maximum tree depth to print")
    p.set_defaults(func=cmd_dump)

    p = sub.add_parser("refs", help="Generate C# references for a compute shader")
    p.add_argument("file")
    p.add_argument("--stdout", action="store_true", help="Print instead of writing the file")
    p.set_defaults(func=cmd_refs)

    p = sub.add_parser("add-property", help="Add the variable on LINE to the Properties block")
    p.add_argument("file")
    p.add_argument("line", type=int, help="1-based line number")
    p.add_argument("--write", action="store_true", help="Apply the edit to FILE")
    p.add_argument("--no-compile", action="store_true", help="Read the line as plain text only")
    p.add_argument("--no-fallback", action="store_true", help="Do not fall back to plain text")
    p.set_defaults(func=cmd_add_property)

    p = sub.add_parser("parse-line", help="Read name and type from a declaration line")
    p.add_argument("text")
    p.set_defaults(func=cmd_parse_line)

    p = sub.add_parser("config", help="Show the effective configuration")
    p.add_argument("--save", action="store_true", help="Persist it to the config file")
    p.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s"
    )

    try:
        config = _resolve_config(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_NOT_APPLIED

    try:
        return args.func(args, config)
    except FileNotFoundError as e:
        logger.error(str(e))
        return EXIT_NOT_APPLIED
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_NOT_APPLIED


if __name__ == "__main__":
    sys.exit(main())
