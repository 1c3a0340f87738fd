"""Token and span types shared by every pipeline stage.

WHY: The parse-and-query engine reports bare (name, start, end) triples.
The normalizer, resolver, splitter, and segmenter all need a common,
well-typed unit to hand to each other, and the HTTP/CLI layers need a
single place that knows the wire shape consumers depend on.

HOW: Small frozen dataclasses and two str Enums:
  CaptureSpan   — one capture from the external engine (read-only input)
  Token         — the normalized (kind, text) unit, with optional byte offsets
  DuplicateRule — which of two tokens with the same key survives
  DedupKey      — what makes two tokens "the same" for the resolver
A Line is a plain list of Tokens; the final output is a list of Lines.

RULES:
- Tokens are immutable; each stage builds new lists instead of mutating
- kind "none" marks uncaptured text, kind "newline" marks a line break
- Byte offsets (start/end) never appear on the wire
- The wire shape is exactly {"node_type": ..., "element_text": ...}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

KIND_NONE = "none"
KIND_NEWLINE = "newline"
NEWLINE = "\n"


class DuplicateRule(str, Enum):
    """Precedence rule for tokens that share a dedup key.

    FIRST_WINS matches GitHub's highlighter, LAST_WINS matches Zed and
    Neovim. Both stay selectable by the caller.
    """

    FIRST_WINS = "first_wins"
    LAST_WINS = "last_wins"


class DedupKey(str, Enum):
    """What the resolver compares to decide two tokens are duplicates.

    TEXT keys on token text across the whole input, so two identical
    identifiers at different places collapse into one. SPAN keys on the
    source byte range and only merges captures of the same node.
    """

    TEXT = "text"
    SPAN = "span"


@dataclass(frozen=True)
class CaptureSpan:
    """One capture reported by the parse-and-query engine.

    Offsets are byte offsets into the UTF-8 encoding of the source text.
    The engine delivers spans in non-decreasing start_byte order.
    """

    name: str
    start_byte: int
    end_byte: int


@dataclass(frozen=True)
class Token:
    """A typed slice of source text.

    Attributes:
        kind: Capture name ("function", "comment", ...), "none" for plain
              text, or "newline" for a line-break marker.
        text: The exact source substring this token covers.
        start: Byte offset of the first byte, when known.
        end: Byte offset one past the last byte, when known.
    """

    kind: str
    text: str
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def is_newline(self) -> bool:
        return self.kind == KIND_NEWLINE

    def to_dict(self) -> Dict[str, str]:
        """Serialize to the two-field wire object."""
        return {"node_type": self.kind, "element_text": self.text}


Line = List[Token]


def lines_to_wire(lines: List[Line]) -> List[List[Dict[str, str]]]:
    """Convert Lines to nested lists of wire dicts."""
    return [[token.to_dict() for token in line] for line in lines]


def lines_to_json(lines: List[Line], indent: Optional[int] = None) -> str:
    """Serialize Lines to the JSON document consumed by renderers."""
    return json.dumps(lines_to_wire(lines), indent=indent, ensure_ascii=False)


def lines_from_wire(data: List[List[Dict[str, Any]]]) -> List[Line]:
    """Rebuild Lines from wire dicts (offsets are not recoverable)."""
    return [
        [Token(kind=item["node_type"], text=item["element_text"]) for item in line]
        for line in data
    ]
