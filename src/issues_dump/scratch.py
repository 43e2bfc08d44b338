"""Per-run scratch directory that is removed on every exit path."""

from __future__ import annotations

import shutil
import signal
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional

SCRATCH_PREFIX = "tmp.issues.dump."
EXIT_SIGTERM = 143


def _raise_on_sigterm(signum, frame) -> None:
    raise SystemExit(EXIT_SIGTERM)


@contextmanager
def scratch_directory(keep: bool = False, base_dir: Optional[str] = None) -> Iterator[str]:
    """Yield a fresh temp directory; SIGTERM is turned into SystemExit so cleanup still runs."""
    path = tempfile.mkdtemp(prefix=SCRATCH_PREFIX, dir=base_dir)
    previous = None
    try:
        previous = signal.signal(signal.SIGTERM, _raise_on_sigterm)
    except ValueError:
        # signal handlers can only be installed from the main thread
        previous = None
    try:
        yield path
    finally:
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)
        if keep:
            print(f"[info] request captures kept in {path}")
        else:
            shutil.rmtree(path, ignore_errors=True)


__all__ = ["SCRATCH_PREFIX", "EXIT_SIGTERM", "scratch_directory"]
