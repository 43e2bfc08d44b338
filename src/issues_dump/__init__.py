"""Export a GitHub repository's issues to a CSV report."""

from .runner import main, run

__all__ = ["main", "run"]
