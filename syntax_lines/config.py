"""Configuration constants, defaults, and .env loading.

WHY: The service, the CLI, and the parser layer all need the same
defaults (language, duplicate rule, trailing-gap policy, bind address).
Keeping them here as plain module constants makes them easy to find and
override without touching logic.

HOW: python-dotenv loads the .env file on import. Every default can be
overridden via an environment variable prefixed with SYNTAX_LINES_.
parse_rule() turns user-supplied rule strings into DuplicateRule values
with a clear error for unknown names.

RULES:
- DEFAULT_RULE is last_wins (the rule the highlight service has always used)
- FILL_TRAILING defaults to true (uncaptured tail text becomes a "none" token)
- QUERY_DIR points at the shipped queries/ directory unless overridden
- Boolean env vars accept "true"/"false" (case-insensitive)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from syntax_lines.core.ir import DuplicateRule

# Load .env from the project root (where the process is started)
load_dotenv()

# ---------------------------------------------------------------------------
# Highlighting defaults
# ---------------------------------------------------------------------------

DEFAULT_LANGUAGE = os.getenv("SYNTAX_LINES_DEFAULT_LANGUAGE", "rust")
DEFAULT_RULE_NAME = os.getenv("SYNTAX_LINES_DEFAULT_RULE", DuplicateRule.LAST_WINS.value)
FILL_TRAILING = os.getenv("SYNTAX_LINES_FILL_TRAILING", "true").lower() == "true"

QUERY_DIR = Path(
    os.getenv(
        "SYNTAX_LINES_QUERY_DIR",
        str(Path(__file__).resolve().parent / "queries"),
    )
)
"""Directory holding one ``<language>/highlights.scm`` per supported language."""

SCHEMA_PATH = Path(__file__).resolve().parent / "schema" / "lines.schema.json"
"""JSON Schema describing the nested Lines wire format."""

# ---------------------------------------------------------------------------
# Service defaults
# ---------------------------------------------------------------------------

API_HOST = os.getenv("SYNTAX_LINES_HOST", "0.0.0.0")
API_PORT = int(os.getenv("SYNTAX_LINES_PORT", "8000"))
LOG_LEVEL = os.getenv("SYNTAX_LINES_LOG_LEVEL", "INFO").upper()


def parse_rule(name: Optional[str]) -> Optional[DuplicateRule]:
    """Map a rule name to a DuplicateRule.

    WHY: The CLI, the HTTP API, and the environment all spell rules as
    strings. A single parser keeps the accepted spellings consistent.

    RULES:
    - None or "none" disables duplicate resolution (returns None)
    - Hyphens and underscores are interchangeable ("last-wins" == "last_wins")
    - Unknown names raise ValueError listing the valid choices
    """
    if name is None:
        return None
    normalized = name.strip().lower().replace("-", "_")
    if normalized == "none":
        return None
    try:
        return DuplicateRule(normalized)
    except ValueError:
        choices = ", ".join([r.value for r in DuplicateRule] + ["none"])
        raise ValueError(
            "Unknown duplicate rule '{}'. Valid rules: {}".format(name, choices)
        ) from None


DEFAULT_RULE = parse_rule(DEFAULT_RULE_NAME)
