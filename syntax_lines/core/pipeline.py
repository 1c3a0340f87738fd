"""The four-stage highlight pipeline.

WHY: The HTTP service, the CLI, and the tests all need the same stage
order. Wiring it once here keeps the stages independent and the callers
thin.

HOW: normalize → resolve duplicates → split newlines → segment lines.
Each stage is a pure function returning a new list, so the pipeline
holds no state and concurrent calls need no locking.

RULES:
- Stages run strictly in order; none calls back into an earlier one
- rule=None skips duplicate resolution entirely
- Errors propagate to the caller; nothing is logged or swallowed here
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from syntax_lines.core.ir import CaptureSpan, DedupKey, DuplicateRule, Line
from syntax_lines.core.lines import split_into_lines, split_newline_tokens
from syntax_lines.core.normalizer import normalize_spans
from syntax_lines.core.resolver import resolve_duplicates


def highlight_spans(
    source: str,
    spans: Iterable[CaptureSpan],
    rule: Optional[DuplicateRule] = DuplicateRule.LAST_WINS,
    key: DedupKey = DedupKey.TEXT,
    fill_trailing: bool = True,
) -> List[Line]:
    """Run captured spans through the full pipeline.

    Args:
        source: Source text the spans refer to.
        spans: Capture spans ordered by start byte.
        rule: Duplicate rule, or None to keep every token.
        key: Dedup key used by the resolver.
        fill_trailing: Emit text after the last span as a "none" token.

    Returns:
        Lines of tokens, top to bottom.

    Raises:
        MalformedSpanError: If the spans do not fit the source.
    """
    tokens = normalize_spans(source, spans, fill_trailing=fill_trailing)
    if rule is not None:
        tokens = resolve_duplicates(tokens, rule, key)
    return split_into_lines(split_newline_tokens(tokens))


def highlight_source(
    source: str,
    language: str,
    rule: Optional[DuplicateRule] = DuplicateRule.LAST_WINS,
    key: DedupKey = DedupKey.TEXT,
    fill_trailing: bool = True,
) -> List[Line]:
    """Parse *source* with the shipped query for *language* and highlight it.

    Raises:
        UnsupportedLanguageError: No grammar or no shipped query.
        QueryCompilationError: The shipped query does not compile.
        MalformedSpanError: The engine reported unusable offsets.
    """
    from syntax_lines.parser.captures import capture_spans, load_query

    query = load_query(language)
    spans = capture_spans(source, query)
    return highlight_spans(source, spans, rule=rule, key=key, fill_trailing=fill_trailing)
