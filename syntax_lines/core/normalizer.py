"""Span normalization: capture spans + source text → gap-free token list.

WHY: A highlight query only reports the nodes it captured. Everything in
between (whitespace, punctuation the query ignores, identifiers with no
rule) is missing from the capture stream, yet a renderer has to print
every character of the source. This module turns the sparse capture
stream into a token list that covers the whole text.

HOW: Walk the spans in order with a cursor at the end of the text
consumed so far. A span starting past the cursor means there is
uncaptured text before it, which becomes a "none" token. Each span then
becomes a token of its capture name. Offsets are byte offsets, so the
source is encoded to UTF-8 once and every slice is decoded back.

RULES:
- Gap before a span → Token("none", gap_text)
- Nested or overlapping spans still emit their own token; the resolver
  deals with them later
- The cursor never moves backwards, so a nested span does not cause text
  that was already emitted to be emitted again as a gap
  (the legacy algorithm reset the cursor to each span end; this one keeps
  the furthest end seen)
- Text after the last span → trailing "none" token when fill_trailing=True
- Invalid offsets raise MalformedSpanError, they are never clamped
- Every boundary must fall on a UTF-8 character start, empty spans included
"""

from __future__ import annotations

from typing import Iterable, List

from syntax_lines.core.ir import KIND_NONE, CaptureSpan, Token


class MalformedSpanError(ValueError):
    """A capture span's offsets are invalid for the given source text.

    This is a contract violation by the parse-and-query engine: offsets
    out of bounds, end before start, spans out of order, or a boundary
    that falls inside a multi-byte UTF-8 sequence.
    """

    def __init__(self, span: CaptureSpan, reason: str) -> None:
        self.span = span
        self.reason = reason
        super().__init__(
            "Malformed capture span @{} [{}, {}): {}".format(
                span.name, span.start_byte, span.end_byte, reason
            )
        )


def _slice(data: bytes, start: int, end: int, span: CaptureSpan) -> str:
    try:
        return data[start:end].decode("utf-8")
    except UnicodeDecodeError:
        raise MalformedSpanError(span, "offset splits a UTF-8 character") from None


def _is_continuation_byte(data: bytes, offset: int) -> bool:
    return 0 < offset < len(data) and data[offset] & 0xC0 == 0x80


def _check_span(span: CaptureSpan, data: bytes, previous_start: int) -> None:
    size = len(data)
    if span.start_byte < 0 or span.end_byte < 0:
        raise MalformedSpanError(span, "negative offset")
    if span.end_byte < span.start_byte:
        raise MalformedSpanError(span, "end before start")
    if span.end_byte > size:
        raise MalformedSpanError(
            span, "offset past end of source ({} bytes)".format(size)
        )
    if span.start_byte < previous_start:
        raise MalformedSpanError(
            span, "spans out of order (previous start {})".format(previous_start)
        )
    if _is_continuation_byte(data, span.start_byte) or _is_continuation_byte(data, span.end_byte):
        raise MalformedSpanError(span, "offset splits a UTF-8 character")


def normalize_spans(
    source: str,
    spans: Iterable[CaptureSpan],
    *,
    fill_trailing: bool = True,
) -> List[Token]:
    """Convert an ordered capture stream into a gap-free token list.

    Args:
        source: The full source text the spans were captured from.
        spans: Capture spans in non-decreasing start_byte order.
        fill_trailing: Emit uncaptured text after the last span as a
            final "none" token. Pass False to stop at the last span.

    Returns:
        Tokens in source order, each carrying its byte offsets.

    Raises:
        MalformedSpanError: If any span is out of bounds, inverted, out
            of order, or cuts a UTF-8 character.
    """
    data = source.encode("utf-8")
    size = len(data)
    tokens: List[Token] = []

    last_end = 0
    previous_start = 0

    for span in spans:
        _check_span(span, data, previous_start)
        previous_start = span.start_byte

        if span.start_byte > last_end:
            gap = _slice(data, last_end, span.start_byte, span)
            tokens.append(Token(KIND_NONE, gap, last_end, span.start_byte))

        text = _slice(data, span.start_byte, span.end_byte, span)
        tokens.append(Token(span.name, text, span.start_byte, span.end_byte))
        last_end = max(last_end, span.end_byte)

    if fill_trailing and last_end < size:
        tokens.append(Token(KIND_NONE, data[last_end:].decode("utf-8"), last_end, size))

    return tokens
