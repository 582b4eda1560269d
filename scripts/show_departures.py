"""Run the departure board from a source checkout."""

from __future__ import annotations

from src.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
