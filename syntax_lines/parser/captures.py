"""Tree-sitter collaborator: compile highlight queries and collect captures.

WHY: The pipeline only understands (capture name, byte range) spans. This
module is the single place that knows about grammars and queries: it
loads a language's highlights.scm, compiles it against the tree-sitter
grammar, parses source text, and reports captures in the order the
normalizer requires.

HOW: Grammars come from tree_sitter_language_pack. Query files live in
QUERY_DIR/<language>/highlights.scm. load_query() reads and compiles a
query once per language (lru_cache) so request handlers receive an
already-materialized query object. capture_spans() runs a QueryCursor
over the parse tree and sorts captures by start byte.

RULES:
- Only languages with a shipped query file are supported
- A query that fails to compile raises QueryCompilationError
- Unknown grammars or missing query files raise UnsupportedLanguageError
- Captures are ordered by (start_byte, -end_byte, pattern_index), so the
  output is deterministic and outer nodes precede nested ones
- Query names starting with "_" are helper captures and are dropped
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Tuple

from tree_sitter import Language, Parser, Query, QueryCursor, QueryError
from tree_sitter_language_pack import get_language

from syntax_lines.config import QUERY_DIR
from syntax_lines.core.ir import CaptureSpan

logger = logging.getLogger(__name__)

QUERY_FILENAME = "highlights.scm"


class HighlightError(Exception):
    """Base class for failures outside the span pipeline itself."""


class UnsupportedLanguageError(HighlightError):
    """No grammar or no highlight query is available for a language."""

    def __init__(self, language: str, reason: str) -> None:
        self.language = language
        super().__init__("Unsupported language '{}': {}".format(language, reason))


class QueryCompilationError(HighlightError):
    """A highlight query failed to compile against its grammar."""

    def __init__(self, language: str, message: str) -> None:
        self.language = language
        super().__init__(
            "Highlight query for '{}' failed to compile: {}".format(language, message)
        )


@dataclass(frozen=True)
class HighlightQuery:
    """A compiled highlight query bound to one grammar."""

    language: str
    grammar: Language
    query: Query
    source_path: Path


def query_path(language: str) -> Path:
    return QUERY_DIR / language / QUERY_FILENAME


def available_languages() -> List[str]:
    """Languages that ship a highlights.scm, sorted by name."""
    if not QUERY_DIR.is_dir():
        return []
    return sorted(
        entry.name
        for entry in QUERY_DIR.iterdir()
        if (entry / QUERY_FILENAME).is_file()
    )


def compile_query(language: str, query_source: str) -> HighlightQuery:
    """Compile *query_source* against the grammar for *language*.

    Raises:
        UnsupportedLanguageError: The grammar is not in the language pack.
        QueryCompilationError: The query does not compile.
    """
    try:
        grammar = get_language(language)
    except LookupError as exc:
        raise UnsupportedLanguageError(language, str(exc)) from exc

    try:
        query = Query(grammar, query_source)
    except QueryError as exc:
        raise QueryCompilationError(language, str(exc)) from exc

    return HighlightQuery(
        language=language,
        grammar=grammar,
        query=query,
        source_path=query_path(language),
    )


@lru_cache(maxsize=None)
def load_query(language: str) -> HighlightQuery:
    """Read and compile the shipped highlight query for *language*.

    The result is cached per language for the life of the process.
    """
    path = query_path(language)
    if not path.is_file():
        raise UnsupportedLanguageError(language, "no {} found".format(QUERY_FILENAME))

    highlight_query = compile_query(language, path.read_text(encoding="utf-8"))
    logger.info("Compiled highlight query for %s from %s", language, path)
    return highlight_query


def capture_spans(source: str, highlight_query: HighlightQuery) -> List[CaptureSpan]:
    """Parse *source* and return its captures ordered by start byte.

    Args:
        source: Source text to parse.
        highlight_query: A query from load_query() or compile_query().

    Returns:
        CaptureSpan list in non-decreasing start_byte order.
    """
    parser = Parser(highlight_query.grammar)
    tree = parser.parse(source.encode("utf-8"))

    cursor = QueryCursor(highlight_query.query)
    keyed: List[Tuple[Tuple[int, int, int, int], CaptureSpan]] = []
    sequence = 0
    for pattern_index, captures in cursor.matches(tree.root_node):
        for name, nodes in captures.items():
            if name.startswith("_"):
                continue
            for node in nodes:
                sort_key = (node.start_byte, -node.end_byte, pattern_index, sequence)
                keyed.append((sort_key, CaptureSpan(name, node.start_byte, node.end_byte)))
                sequence += 1

    keyed.sort(key=lambda item: item[0])
    return [span for _, span in keyed]
