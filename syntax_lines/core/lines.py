"""Newline splitting and line segmentation.

WHY: Renderers draw code line by line (line numbers, per-line diffing,
virtual scrolling), but captures like block comments and raw strings
span several lines. These two passes turn the flat token list into one
token list per source line.

HOW: split_newline_tokens carves every "\\n" out of multi-line tokens as
its own "newline" marker, keeping the kind on the fragments around it.
split_into_lines then cuts the flat list at each marker.

RULES:
- Fragments keep the kind of the token they came from
- Empty fragments (between consecutive newlines) are not emitted
- Splitting never adds or drops characters and is idempotent
- Newline markers are cut points and never appear inside a Line
- Empty lines are kept, except the empty segment after a final newline
"""

from __future__ import annotations

from typing import Iterable, List

from syntax_lines.core.ir import KIND_NEWLINE, NEWLINE, Line, Token


def _fragment(token: Token, text: str, offset: int) -> Token:
    """Build a sub-token of *token* starting *offset* bytes into it."""
    if token.start is None:
        return Token(token.kind, text)
    start = token.start + offset
    return Token(token.kind, text, start, start + len(text.encode("utf-8")))


def split_newline_tokens(tokens: Iterable[Token]) -> List[Token]:
    """Split every token containing "\\n" into fragments and newline markers.

    Args:
        tokens: Tokens in source order.

    Returns:
        A new list where no token text contains an embedded newline,
        except the "newline" markers themselves.
    """
    split: List[Token] = []

    for token in tokens:
        if NEWLINE not in token.text or token.is_newline:
            split.append(token)
            continue

        offset = 0
        pieces = token.text.split(NEWLINE)
        for index, piece in enumerate(pieces):
            if piece:
                split.append(_fragment(token, piece, offset))
            offset += len(piece.encode("utf-8"))
            if index < len(pieces) - 1:
                marker = _fragment(token, NEWLINE, offset)
                split.append(Token(KIND_NEWLINE, NEWLINE, marker.start, marker.end))
                offset += 1

    return split


def split_into_lines(tokens: Iterable[Token]) -> List[Line]:
    """Group a newline-split token list into Lines.

    A "newline" token closes the current line, even when it is empty.
    The buffer left after the last newline is only kept if it has tokens,
    so text ending in "\\n" does not produce a trailing blank line.
    """
    lines: List[Line] = []
    current: Line = []

    for token in tokens:
        if token.is_newline:
            lines.append(current)
            current = []
        else:
            current.append(token)

    if current:
        lines.append(current)

    return lines
