"""Tests for the assembled pipeline: scenarios, laws, and the wire format.

WHY: Each stage is unit-tested on its own; these tests pin down how the
stages compose, including the surprising effects of text-keyed duplicate
resolution on real snippets.
"""

import json

import jsonschema
import pytest

from syntax_lines.core.ir import (
    KIND_NONE,
    CaptureSpan,
    DedupKey,
    DuplicateRule,
    Token,
    lines_from_wire,
    lines_to_json,
    lines_to_wire,
)
from syntax_lines.core.lines import split_newline_tokens
from syntax_lines.core.normalizer import MalformedSpanError, normalize_spans
from syntax_lines.core.pipeline import highlight_spans

from conftest import line_texts


class TestScenarios:

    def test_whole_text_capture_gives_one_line(self):
        lines = highlight_spans("fn a(){}", [CaptureSpan("function", 0, 8)])
        assert lines == [[Token("function", "fn a(){}", 0, 8)]]

    def test_uncaptured_two_line_text(self):
        lines = highlight_spans("a\nb", [])
        assert [[(t.kind, t.text) for t in line] for line in lines] == [
            [(KIND_NONE, "a")],
            [(KIND_NONE, "b")],
        ]

    def test_duplicate_text_last_wins(self):
        spans = [CaptureSpan("variable", 0, 1), CaptureSpan("keyword", 0, 1)]
        lines = highlight_spans("x", spans, rule=DuplicateRule.LAST_WINS)
        assert [[(t.kind, t.text) for t in line] for line in lines] == [[("keyword", "x")]]

    def test_empty_source(self):
        assert highlight_spans("", []) == []

    def test_only_newlines_gives_two_empty_lines(self):
        assert highlight_spans("\n\n", []) == [[], []]


class TestSampleSnippet:
    """The conftest snippet under each duplicate policy."""

    def test_without_resolution(self, sample_source, sample_spans):
        lines = highlight_spans(sample_source, sample_spans, rule=None)
        assert line_texts(lines) == [
            ["fn", " ", "a", "(", ")", " ", "{"],
            ["    ", "// hi"],
            ["}"],
        ]
        assert [t.kind for t in lines[0]] == [
            "keyword", KIND_NONE, "function",
            "punctuation.bracket", "punctuation.bracket", KIND_NONE,
            "punctuation.bracket",
        ]

    def test_span_key_preserves_every_line(self, sample_source, sample_spans):
        lines = highlight_spans(
            sample_source, sample_spans, rule=DuplicateRule.LAST_WINS, key=DedupKey.SPAN
        )
        assert lines == highlight_spans(sample_source, sample_spans, rule=None)

    def test_text_key_last_wins_merges_repeated_gaps(self, sample_source, sample_spans):
        # Both " " gaps and both "\n" gaps are textually equal, so only the
        # last of each survives and the line after "// hi" disappears.
        lines = highlight_spans(sample_source, sample_spans, rule=DuplicateRule.LAST_WINS)
        assert line_texts(lines) == [
            ["fn", "a", "(", ")", " ", "{"],
            ["    ", "// hi", "}"],
        ]

    def test_text_key_first_wins_keeps_first_gaps(self, sample_source, sample_spans):
        lines = highlight_spans(sample_source, sample_spans, rule=DuplicateRule.FIRST_WINS)
        assert line_texts(lines) == [
            ["fn", " ", "a", "(", ")", "{"],
            ["    ", "// hi"],
            ["}"],
        ]

    def test_trailing_gap_policy(self):
        source = "let x;"
        spans = [CaptureSpan("keyword", 0, 3)]
        with_tail = highlight_spans(source, spans, rule=None)
        without_tail = highlight_spans(source, spans, rule=None, fill_trailing=False)
        assert line_texts(with_tail) == [["let", " x;"]]
        assert line_texts(without_tail) == [["let"]]

    def test_malformed_span_propagates(self):
        with pytest.raises(MalformedSpanError):
            highlight_spans("ab", [CaptureSpan("x", 0, 5)])


CASES = [
    ("", []),
    ("plain", []),
    ("a\nb\n", [CaptureSpan("v", 0, 1), CaptureSpan("v", 2, 3)]),
    ("/* a\n\n b */ x", [CaptureSpan("comment", 0, 11), CaptureSpan("variable", 12, 13)]),
    ("\n\n\nend", [CaptureSpan("keyword", 3, 6)]),
    ("é\nü", [CaptureSpan("string", 0, 5)]),
]


class TestLaws:

    @pytest.mark.parametrize("source,spans", CASES)
    def test_coverage(self, source, spans):
        tokens = normalize_spans(source, spans)
        assert "".join(t.text for t in tokens) == source

    @pytest.mark.parametrize("source,spans", CASES)
    def test_split_is_idempotent(self, source, spans):
        once = split_newline_tokens(normalize_spans(source, spans))
        assert split_newline_tokens(once) == once

    @pytest.mark.parametrize("source,spans", CASES)
    def test_line_count(self, source, spans):
        lines = highlight_spans(source, spans, rule=None)
        expected = source.count("\n")
        if source and not source.endswith("\n"):
            expected += 1
        assert len(lines) == expected

    @pytest.mark.parametrize("source,spans", CASES)
    def test_lines_rejoin_to_source(self, source, spans):
        lines = highlight_spans(source, spans, rule=None)
        rejoined = "\n".join("".join(t.text for t in line) for line in lines)
        expected = source[:-1] if source.endswith("\n") else source
        assert rejoined == expected


class TestWireFormat:

    def test_token_to_dict(self):
        assert Token("function", "main", 3, 7).to_dict() == {
            "node_type": "function",
            "element_text": "main",
        }

    def test_json_matches_schema(self, sample_source, sample_spans, wire_schema):
        lines = highlight_spans(sample_source, sample_spans)
        jsonschema.validate(instance=json.loads(lines_to_json(lines)), schema=wire_schema)

    def test_empty_lines_serialize_as_empty_arrays(self):
        assert lines_to_wire(highlight_spans("\n\n", [])) == [[], []]

    def test_non_ascii_is_not_escaped(self):
        lines = highlight_spans("é", [])
        assert lines_to_json(lines) == '[[{"node_type": "none", "element_text": "é"}]]'

    def test_round_trip_drops_offsets(self):
        lines = highlight_spans("a\nb", [])
        rebuilt = lines_from_wire(lines_to_wire(lines))
        assert rebuilt == [[Token(KIND_NONE, "a")], [Token(KIND_NONE, "b")]]

    def test_newline_text_rejected_by_schema(self, wire_schema):
        bad = [[{"node_type": "none", "element_text": "a\nb"}]]
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(instance=bad, schema=wire_schema)
