from __future__ import annotations

from pathlib import Path, PurePosixPath

from pinstore.adapters.errors import FileSystemError


class InMemoryFileSystem:
    """File system double that keeps file contents in a dict.

    Writes replace the whole entry at once, which is as atomic as the real
    adapter's rename.
    """

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self._files: dict[PurePosixPath, bytes] = {}
        for path, data in (files or {}).items():
            self._files[self._key(Path(path))] = data

    @staticmethod
    def _key(path: Path) -> PurePosixPath:
        return PurePosixPath(path.as_posix())

    def exists(self, path: Path) -> bool:
        return self._key(path) in self._files

    def read_bytes(self, path: Path) -> bytes:
        try:
            return self._files[self._key(path)]
        except KeyError:
            raise FileSystemError(f"Failed to read {path}", hint="no such file") from None

    def write_bytes_atomic(self, path: Path, data: bytes) -> None:
        self._files[self._key(path)] = bytes(data)

    def write_text(self, path: Path, text: str) -> None:
        self.write_bytes_atomic(path, text.encode("utf-8"))

    def remove(self, path: Path) -> None:
        self._files.pop(self._key(path), None)

    def paths(self) -> list[str]:
        return sorted(str(key) for key in self._files)
