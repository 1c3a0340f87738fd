"""Tree-sitter integration: grammars, highlight queries, capture spans."""
