from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import fcntl
import logging
from pathlib import Path
import time

from pinstore.adapters.errors import LockTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 0.05


def lock_path_for(pins_file: Path) -> Path:
    return pins_file.with_name(pins_file.name + ".lock")


@contextmanager
def pins_file_lock(
    pins_file: Path,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Iterator[Path]:
    """Hold an exclusive advisory lock on a sidecar `<pins file>.lock`.

    The pin store never locks on its own; callers that run an
    open -> mutate -> save sequence wrap it in this context manager.
    """
    if timeout <= 0:
        raise ValueError(f"timeout must be positive (got {timeout})")
    target = lock_path_for(pins_file)
    target.parent.mkdir(parents=True, exist_ok=True)
    start = time.monotonic()
    with open(target, "a+") as fh:
        while True:
            try:
                fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except OSError:
                if time.monotonic() - start >= timeout:
                    raise LockTimeoutError(
                        f"Could not acquire lock on {pins_file} within {timeout}s",
                        hint=f"another process holds {target}",
                    )
                time.sleep(poll_interval)
        logger.debug("Acquired lock %s", target)
        try:
            yield target
        finally:
            fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
            logger.debug("Released lock %s", target)
