"""
Tests for domain models.

Tests AstNode, SnippetField, PropertyInsertion, result flags and Document.
"""

import pytest

from hlsl_ast_lib.model import (
    AstNode,
    DeclHeader,
    Document,
    EditOutcome,
    HeaderStatus,
    MatchOutcome,
    MatchResult,
    NUM_THREADS_ATTR,
    PropertyEditResult,
    PropertyInsertion,
    SnippetField,
    VAR_DECL,
)


class TestAstNode:
    """Test AstNode helpers."""

    def test_children_access(self):
        a = AstNode(kind=VAR_DECL, name="_A")
        attr = AstNode(kind=NUM_THREADS_ATTR)
        node = AstNode(kind="FunctionDecl", children=(a, attr))
        assert list(node) == [a, attr]
        assert len(node) == 2
        assert node.has_child(NUM_THREADS_ATTR)
        assert not a.has_child(NUM_THREADS_ATTR)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            AstNode().kind = "VarDecl"


class TestFlags:
    """Test convenience flags on results."""

    def test_header_ok(self):
        assert DeclHeader(VAR_DECL, "_A", "float", HeaderStatus.OK).ok
        assert not DeclHeader(VAR_DECL, status=HeaderStatus.MISSING_TYPE).ok

    def test_match_result(self):
        assert MatchResult(MatchOutcome.MATCHED, node=AstNode()).matched
        assert not MatchResult(MatchOutcome.AMBIGUOUS).matched

    @pytest.mark.parametrize("outcome,expected", [
        (EditOutcome.INSERTED, True),
        (EditOutcome.ALREADY_DECLARED, False),
        (EditOutcome.AMBIGUOUS, False),
        (EditOutcome.PRECONDITION_NOT_MET, False),
    ])
    def test_edit_result_ok(self, outcome, expected):
        assert PropertyEditResult(outcome).ok == expected

    def test_edit_outcome_values(self):
        """Outcomes print as plain strings in the CLI."""
        assert EditOutcome.ALREADY_DECLARED == "already_declared"


class TestSnippet:
    """Test SnippetField and PropertyInsertion.render."""

    def test_tab_stop_syntax(self):
        assert str(SnippetField(3, "Float")) == "${3:Float}"
        assert str(SnippetField(4, "")) == "${4:}"

    def test_render_replaces_each_field_once(self):
        fields = (SnippetField(1, "_A"), SnippetField(2, "_A"))
        insertion = PropertyInsertion(
            name="_A", declared_type="float", kind="Float", default="1",
            target_line=5, line=3, column=0,
            snippet='\n${1:_A}("${2:_A}")', fields=fields,
        )
        assert insertion.render() == '\n_A("_A")'


class TestDocument:
    """Test Document."""

    def test_lines(self):
        doc = Document(text="a\nb\n", path="x.shader")
        assert doc.lines == ("a", "b", "")
        assert doc.line_at(0) == "a"
        assert doc.line_at(2) == ""

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_out_of_range(self, index):
        assert Document(text="a\nb\n").line_at(index) is None

    def test_equality_ignores_split_lines(self):
        assert Document(text="a", path="p") == Document(text="a", path="p")
