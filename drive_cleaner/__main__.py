"""Module entrypoint for ``python -m drive_cleaner``."""

from .cli import main


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
