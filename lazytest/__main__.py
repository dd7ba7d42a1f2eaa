"""Module entrypoint for ``python -m lazytest``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and dispatch happen in ``lazytest.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
