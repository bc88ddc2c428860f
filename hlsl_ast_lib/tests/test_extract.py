"""
Tests for declaration extraction.

Tests is_variable, is_kernel, extract_all and declarations_on_line.
"""

import pytest

from hlsl_ast_lib.dump import parse_dump
from hlsl_ast_lib.extract import (
    declarations_on_line, extract_all, is_kernel, is_variable,
)
from hlsl_ast_lib.model import AstNode, FUNCTION_DECL, NUM_THREADS_ATTR, VAR_DECL


def function(header, *children):
    return AstNode(kind=FUNCTION_DECL, header=header, name="Main", children=children)


ATTR = AstNode(kind=NUM_THREADS_ATTR, header="HLSLNumThreadsAttr 0x9 <line:1:2, col:21> 8 8 1")


class TestIsKernel:
    """Kernel detection truth table."""

    def test_function_without_attribute(self):
        node = function("FunctionDecl 0x1 <line:1:1, line:3:1> line:2:6 Main 'void ()'")
        assert not is_kernel(node)

    def test_attribute_with_invalid_range(self):
        node = function("FunctionDecl 0x1 <<invalid sloc>> <invalid sloc> implicit Main 'void ()'", ATTR)
        assert not is_kernel(node)

    def test_attribute_with_valid_range(self):
        node = function("FunctionDecl 0x1 <line:1:1, line:3:1> line:2:6 Main 'void ()'", ATTR)
        assert is_kernel(node)

    def test_attribute_must_be_direct_child(self):
        nested = AstNode(kind="CompoundStmt", children=(ATTR,))
        node = function("FunctionDecl 0x1 <line:1:1, line:3:1> line:2:6 Main 'void ()'", nested)
        assert not is_kernel(node)

    def test_variable_is_not_kernel(self):
        node = AstNode(kind=VAR_DECL, header="VarDecl", name="_X", children=(ATTR,))
        assert not is_kernel(node)
        assert is_variable(node)


class TestExtractAll:
    """Test extract_all over a compute shader dump."""

    def test_variables_and_kernels(self, compute_dump):
        variables, kernels = extract_all(parse_dump(compute_dump))
        assert [v.name for v in variables] == ["_Result", "_Radius", "_Tint"]
        assert [k.name for k in kernels] == ["CSMain"]

    def test_order_preserved(self):
        """Encounter order, no sorting."""
        root = AstNode(children=(
            AstNode(kind=VAR_DECL, name="_Z"),
            AstNode(kind=VAR_DECL, name="_A"),
            AstNode(kind=VAR_DECL, name="_M"),
        ))
        variables, _ = extract_all(root)
        assert [v.name for v in variables] == ["_Z", "_A", "_M"]

    def test_unnamed_nodes_excluded(self):
        root = AstNode(children=(
            AstNode(kind=VAR_DECL, name=""),
            AstNode(kind=VAR_DECL, name="_Ok"),
        ))
        variables, _ = extract_all(root)
        assert [v.name for v in variables] == ["_Ok"]

    def test_only_top_level(self, compute_dump):
        """Parameters and locals are not globals."""
        variables, _ = extract_all(parse_dump(compute_dump))
        assert "x" not in [v.name for v in variables]
        assert "id" not in [v.name for v in variables]

    def test_failed_compile_gives_empty_lists(self):
        assert extract_all(parse_dump("")) == ([], [])


class TestDeclarationsOnLine:
    """Test declarations_on_line."""

    @pytest.mark.parametrize("line,expected", [
        (1, ["_Result"]),   # file-qualified location
        (2, ["_Radius"]),
        (3, ["_Tint"]),
        (4, []),
    ])
    def test_by_line(self, compute_dump, line, expected):
        root = parse_dump(compute_dump)
        assert [n.name for n in declarations_on_line(root, line)] == expected

    def test_line_number_is_not_a_prefix(self):
        """Line 3 does not match a declaration on line 30."""
        root = parse_dump("\n".join([
            "TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>",
            "`-VarDecl 0x2 <line:30:1, col:7> col:7 _Far 'float'",
        ]))
        assert declarations_on_line(root, 3) == []
        assert [n.name for n in declarations_on_line(root, 30)] == ["_Far"]

    def test_several_on_one_line(self):
        root = parse_dump("\n".join([
            "TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>",
            "|-VarDecl 0x2 <line:4:1, col:8> col:8 _A 'float4'",
            "`-VarDecl 0x3 <line:4:1, col:12> col:12 _B 'float4'",
        ]))
        assert [n.name for n in declarations_on_line(root, 4)] == ["_A", "_B"]
