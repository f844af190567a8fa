"""Entry point for ``python -m sjavac``."""

from __future__ import annotations

from sjavac.main import main

if __name__ == "__main__":
    raise SystemExit(main())
