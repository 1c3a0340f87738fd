"""Command-line interface for the highlight pipeline.

WHY: Front-end developers want to inspect the Lines JSON for a file
without running the HTTP service, and the build can pre-render sample
snippets to static JSON.

HOW: argparse reads a source file (or stdin with "-"; a built-in sample
snippet when no file is given), runs highlight_source(), and writes the
JSON to --output or stdout. Status messages go to stderr so stdout can
be piped.

RULES:
- Positional input_file is optional; "-" reads stdin
- --rule accepts first_wins, last_wins, or none (skip resolution)
- Errors print "Error: ..." to stderr and exit 1
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from syntax_lines.config import DEFAULT_LANGUAGE, DEFAULT_RULE_NAME, FILL_TRAILING, parse_rule
from syntax_lines.core.ir import lines_to_json
from syntax_lines.core.pipeline import highlight_source
from syntax_lines.parser.captures import HighlightError, available_languages

SAMPLE_SOURCE = """fn split_newline_nodes(nodes: Vec<Node>) -> Vec<Node> {
    let mut new_nodes: Vec<Node> = Vec::new();
}
"""
"""Snippet highlighted when no input file is given."""


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _read_source(input_file: Optional[str]) -> str:
    if input_file is None:
        return SAMPLE_SOURCE
    if input_file == "-":
        return sys.stdin.read()
    return Path(input_file).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="syntax-lines",
        description="Highlight source code into line-structured JSON tokens.",
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        default=None,
        help="Source file to highlight ('-' for stdin). Defaults to a built-in sample.",
    )
    parser.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help="Language of the source (default: %(default)s). "
             "Available: {}.".format(", ".join(available_languages()) or "none"),
    )
    parser.add_argument(
        "--rule",
        default=DEFAULT_RULE_NAME,
        help="Duplicate rule: first_wins, last_wins, or none (default: %(default)s).",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="File to write the JSON to (default: stdout).",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print the JSON with this indent.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``syntax-lines`` and ``python -m syntax_lines``.

    argv=None means use sys.argv; an explicit list is for testing.
    """
    args = build_parser().parse_args(argv)

    try:
        rule = parse_rule(args.rule)
        source = _read_source(args.input_file)
        lines = highlight_source(source, args.language, rule=rule, fill_trailing=FILL_TRAILING)
    except (OSError, ValueError, HighlightError) as e:
        # MalformedSpanError and bad --rule values are both ValueErrors
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    payload = lines_to_json(lines, indent=args.indent)

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(payload, encoding="utf-8")
        _status("Wrote {} line(s) to {}".format(len(lines), output_path))
    else:
        sys.stdout.write(payload + "\n")


if __name__ == "__main__":
    main()
