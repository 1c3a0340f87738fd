"""Package entry point for ``python -m syntax_lines``.

Delegates to the CLI's main() function.
"""

from syntax_lines.cli import main

if __name__ == "__main__":
    main()
