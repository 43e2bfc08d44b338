"""Convenience shim to run the issues dump from a checkout."""

from __future__ import annotations

from src.issues_dump.runner import main


if __name__ == "__main__":
    main()
