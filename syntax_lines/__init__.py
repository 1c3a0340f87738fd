"""Syntax Lines — capture spans to line-structured highlight tokens.

WHY: A parse-and-query engine such as tree-sitter reports sparse,
possibly overlapping captures. Renderers need every character of the
source, one typed fragment list per line, with a single color per
fragment.

HOW: Four-stage pipeline — normalize spans (fill gaps), resolve
duplicate captures, split tokens at newlines, segment into lines. The
tree-sitter collaborator, HTTP service and CLI sit around that core.

RULES:
- The core stages are pure functions with no shared state
- The wire format is nested lists of {"node_type", "element_text"}
"""

__version__ = "0.1.0"
