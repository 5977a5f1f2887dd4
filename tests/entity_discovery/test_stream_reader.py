# SPDX-License-Identifier: MIT
"""Tests for the streaming JSON array reader."""

import pytest

from entity_discovery.parsers.stream import MalformedInputError, iter_documents


class TestIterDocuments:
    """Test element-by-element reading."""

    def test_yields_elements_in_order(self, make_stream):
        docs = [{"a": 1}, [1, [2, {"b": None}]], "text", 3, 2.5, True, None, {}]
        assert list(iter_documents(make_stream(docs))) == docs

    def test_floats_are_floats(self, make_stream):
        (value,) = iter_documents(make_stream([1.25]))
        assert isinstance(value, float)

    def test_empty_array(self, make_stream):
        assert list(iter_documents(make_stream("[]"))) == []

    def test_is_lazy(self, chunked_stream):
        """The first element is available before the rest of the input is read."""
        stream = chunked_stream([b'[{"id": 1},', b' {"id": 2}', b"]"])
        docs = iter_documents(stream)
        assert next(docs) == {"id": 1}
        assert stream.chunks  # not everything consumed yet
        assert list(docs) == [{"id": 2}]

    @pytest.mark.parametrize("text", ["", "   ", '{"a": 1}', '"text"', "42"])
    def test_top_level_must_be_array(self, make_stream, text):
        with pytest.raises(MalformedInputError):
            list(iter_documents(make_stream(text)))

    def test_invalid_json_keeps_earlier_elements(self, chunked_stream):
        """Elements read before the syntax error are still yielded."""
        seen = []
        with pytest.raises(MalformedInputError):
            for doc in iter_documents(chunked_stream([b'[{"id": 1},', b' {"id": ]'])):
                seen.append(doc)
        assert seen == [{"id": 1}]

    def test_truncated_input(self, make_stream):
        with pytest.raises(MalformedInputError):
            list(iter_documents(make_stream('[{"id": 1}, {"id": 2')))

    def test_trailing_data(self, make_stream):
        with pytest.raises(MalformedInputError):
            list(iter_documents(make_stream('[1, 2] [3]')))
