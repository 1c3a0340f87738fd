"""Shared test fixtures for the syntax_lines test suite.

WHY: Several test modules exercise the same small Rust snippet with
hand-computed capture spans, and several validate output against the
wire schema. Centralizing both keeps the byte offsets in one place.

HOW: SAMPLE_SOURCE and SAMPLE_SPANS describe a three-line snippet whose
captures leave gaps (spaces, indentation, newlines) for the normalizer
to fill. The wire_schema fixture loads schema/lines.schema.json.

RULES:
- SAMPLE_SPANS are byte offsets into SAMPLE_SOURCE, ordered by start
- The snippet contains repeated gap text (" " and "\\n") so text-keyed
  duplicate resolution has something to collapse
"""

import json
from typing import List

import pytest

from syntax_lines.config import SCHEMA_PATH
from syntax_lines.core.ir import CaptureSpan, Line


# f0 n1 _2 a3 (4 )5 _6 {7 \n8 ____9-12 //_hi13-17 \n18 }19 \n20
SAMPLE_SOURCE = "fn a() {\n    // hi\n}\n"

SAMPLE_SPANS: List[CaptureSpan] = [
    CaptureSpan("keyword", 0, 2),
    CaptureSpan("function", 3, 4),
    CaptureSpan("punctuation.bracket", 4, 5),
    CaptureSpan("punctuation.bracket", 5, 6),
    CaptureSpan("punctuation.bracket", 7, 8),
    CaptureSpan("comment", 13, 18),
    CaptureSpan("punctuation.bracket", 19, 20),
]


def line_texts(lines: List[Line]) -> List[List[str]]:
    """Project Lines to their token texts for compact assertions."""
    return [[token.text for token in line] for line in lines]


@pytest.fixture
def sample_source():
    return SAMPLE_SOURCE


@pytest.fixture
def sample_spans():
    return list(SAMPLE_SPANS)


@pytest.fixture(scope="session")
def wire_schema():
    """The JSON Schema for the nested Lines wire format."""
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)
