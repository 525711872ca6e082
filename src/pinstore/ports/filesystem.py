from pathlib import Path
from typing import Protocol


class FileSystemPort(Protocol):
    def exists(self, path: Path) -> bool: ...
    def read_bytes(self, path: Path) -> bytes: ...
    def write_bytes_atomic(self, path: Path, data: bytes) -> None: ...
    def remove(self, path: Path) -> None: ...
