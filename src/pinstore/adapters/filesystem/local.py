from __future__ import annotations

import logging
import os
from pathlib import Path
import tempfile

from pinstore.adapters.errors import FileSystemError

logger = logging.getLogger(__name__)


class LocalFileSystem:
    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_bytes(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise FileSystemError(f"Failed to read {path}", cause=e)

    def _replace(self, src: Path, dest: Path) -> None:
        os.replace(src, dest)

    def write_bytes_atomic(self, path: Path, data: bytes) -> None:
        tmp_path: Path | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            self._replace(tmp_path, path)
            tmp_path = None
        except OSError as e:
            raise FileSystemError(f"Failed to write {path}", cause=e)
        finally:
            if tmp_path is not None and tmp_path.exists():
                logger.debug("Removing leftover temporary file %s", tmp_path)
                tmp_path.unlink()

    def remove(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise FileSystemError(f"Failed to remove {path}", cause=e)
