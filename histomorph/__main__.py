"""Module entry to expose `python -m histomorph` CLI.

Delegates to `histomorph.cli.main`.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
