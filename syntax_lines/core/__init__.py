"""Core highlight pipeline: token types and the four transformation stages.

WHY: The core is the part of the project with real logic. It does not
know about tree-sitter, HTTP, or files; it only turns spans and source
text into Lines.

HOW: ir.py defines the types, normalizer.py fills gaps, resolver.py
removes duplicate captures, lines.py splits and segments, pipeline.py
wires the stages together.

RULES:
- No module here performs I/O or logging
- No stage mutates its input
"""
