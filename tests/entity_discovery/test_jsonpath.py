# SPDX-License-Identifier: MIT
"""Tests for JSONPath extraction."""

import pytest

from entity_discovery.parsers.jsonpath import (
    Index,
    Name,
    PathSyntaxError,
    Slice,
    Wildcard,
    compile_path,
    extract,
)


DOC = {
    "id": "123",
    "doc": {"name": "Acme", "tags": ["a", "b", "c", "d"]},
    "awards": [
        {"suppliers": [{"id": "s1"}, {"id": "s2"}]},
        {"suppliers": [{"id": "s3"}]},
    ],
    "weird key": 1,
}


class TestCompile:
    """Test path compilation."""

    def test_dot_and_bracket_forms_compile_alike(self):
        """Dot and quoted bracket member access produce the same AST."""
        assert compile_path("$.doc.name").segments == compile_path("$['doc'][\"name\"]").segments

    def test_selectors(self):
        """Bracket selectors compile to typed nodes."""
        path = compile_path("$.a[*][0][1:3][-1]")
        kinds = [seg.selectors[0] for seg in path.segments]
        assert kinds == [Name("a"), Wildcard(), Index(0), Slice(1, 3, None), Index(-1)]

    def test_descendant_flag(self):
        path = compile_path("$..id")
        assert path.segments[0].descendant is True

    @pytest.mark.parametrize("expr", ["", "   ", "$.", "$[", "$['a'", "$[?(@.x)]", "$[(@.length-1)]", "$[0:1:0]", "$ .a"])
    def test_malformed_expressions_raise(self, expr):
        """Malformed or unsupported expressions fail at compile time."""
        with pytest.raises(PathSyntaxError):
            compile_path(expr)


class TestExtract:
    """Test path evaluation."""

    def test_member_access(self):
        assert extract("$.id", DOC) == ["123"]
        assert extract("$.doc", DOC) == [DOC["doc"]]

    def test_implicit_root(self):
        """A leading $ is optional."""
        assert extract("doc.name", DOC) == ["Acme"]

    def test_root_only(self):
        assert extract("$", DOC) == [DOC]

    def test_quoted_member_with_space(self):
        assert extract("$['weird key']", DOC) == [1]

    def test_array_index_and_negative_index(self):
        assert extract("$.doc.tags[0]", DOC) == ["a"]
        assert extract("$.doc.tags[-1]", DOC) == ["d"]
        assert extract("$.doc.tags[9]", DOC) == []

    def test_numeric_member_on_array(self):
        """Dotted numeric members address array elements."""
        assert extract("$.doc.tags.1", DOC) == ["b"]

    def test_slice_and_union(self):
        assert extract("$.doc.tags[1:3]", DOC) == ["b", "c"]
        assert extract("$.doc.tags[::2]", DOC) == ["a", "c"]
        assert extract("$.doc.tags[3,0]", DOC) == ["d", "a"]

    def test_wildcard_in_document_order(self):
        assert extract("$.awards[*].suppliers[*].id", DOC) == ["s1", "s2", "s3"]
        assert extract("$.doc.*", DOC) == ["Acme", ["a", "b", "c", "d"]]

    def test_recursive_descent_is_preorder(self):
        """Matches at a node come before matches in its descendants."""
        nested = {"id": 1, "child": {"id": 2, "child": {"id": 3}}, "other": [{"id": 4}]}
        assert extract("$..id", nested) == [1, 2, 3, 4]
        assert extract("$..id", DOC) == ["123", "s1", "s2", "s3"]

    def test_recursive_descent_with_index(self):
        assert extract("$..suppliers[0].id", DOC) == ["s1", "s3"]

    def test_no_match_is_empty(self):
        """Paths that match nothing return an empty list, never raise."""
        assert extract("$.missing.deeper", DOC) == []
        assert extract("$.id.deeper", DOC) == []
        assert extract("$.id[0]", DOC) == []
        assert extract("$[*]", "scalar") == []

    def test_null_values_are_matches(self):
        assert extract("$.a", {"a": None}) == [None]

    def test_extraction_is_idempotent(self):
        path = compile_path("$..suppliers[*].id")
        assert path.find(DOC) == path.find(DOC) == extract("$..suppliers[*].id", DOC)


class TestDeepDocuments:
    """Test extraction on deeply nested input."""

    def test_recursive_descent_on_deep_nesting(self, make_stream):
        """Descent walks documents nested deeper than the interpreter's recursion limit."""
        from entity_discovery.parsers import iter_documents

        depth = 1200
        raw = b"[" + b'{"c":' * depth + b'{"id":"x"}' + b"}" * depth + b"]"
        (doc,) = iter_documents(make_stream(raw))

        assert extract("$..id", doc) == ["x"]
        assert extract("$..missing", doc) == []

    def test_iterative_descent_keeps_document_order(self):
        doc = {"a": {"id": 1, "b": [{"id": 2}, {"c": {"id": 3}}]}, "d": {"id": 4}}
        assert extract("$..id", doc) == [1, 2, 3, 4]
