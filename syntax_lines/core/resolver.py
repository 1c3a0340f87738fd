"""Duplicate resolution for tokens claimed by more than one capture.

WHY: A highlight query can capture the same node several times, e.g. an
identifier matched both by a generic "@variable" pattern and a more
specific "@function" pattern. Only one color can win. GitHub keeps the
first pattern that matched, Zed and Neovim keep the last, so the rule is
a parameter rather than a hard-coded choice.

HOW: An insertion-ordered dict maps each dedup key to the token kept for
it. FIRST_WINS ignores later arrivals. LAST_WINS pops the earlier token
and re-inserts the new one, which moves it to the end of the ordering.
The dict is local to one call; nothing is shared between calls.

RULES:
- DedupKey.TEXT: tokens with equal text are duplicates, wherever they are
  in the source (two identical identifiers on different lines collapse)
- DedupKey.SPAN: tokens with an equal (start, end) byte range are duplicates
- FIRST_WINS: earliest token stays in its original relative position
- LAST_WINS: latest token survives at the position of its own arrival
- Relative order of surviving tokens otherwise follows input order
"""

from __future__ import annotations

from typing import Dict, Hashable, Iterable, List

from syntax_lines.core.ir import DedupKey, DuplicateRule, Token


def _key_for(token: Token, key: DedupKey) -> Hashable:
    if key is DedupKey.TEXT:
        return token.text
    if token.start is None or token.end is None:
        raise ValueError(
            "Token {!r} has no byte offsets; span-keyed resolution needs "
            "tokens produced by normalize_spans".format(token.text)
        )
    return (token.start, token.end)


def resolve_duplicates(
    tokens: Iterable[Token],
    rule: DuplicateRule,
    key: DedupKey = DedupKey.TEXT,
) -> List[Token]:
    """Keep exactly one token per dedup key.

    Args:
        tokens: Tokens in source order, usually from normalize_spans.
        rule: Which duplicate survives.
        key: What makes two tokens duplicates (text or byte range).

    Returns:
        A new list with at most one token per key.
    """
    rule = DuplicateRule(rule)
    key = DedupKey(key)
    kept: Dict[Hashable, Token] = {}

    for token in tokens:
        token_key = _key_for(token, key)
        if token_key in kept:
            if rule is DuplicateRule.FIRST_WINS:
                continue
            del kept[token_key]
        kept[token_key] = token

    return list(kept.values())
