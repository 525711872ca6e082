from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

CORRUPTED_FILE_PHRASE = (
    "Package.resolved file is corrupted or malformed; "
    "fix or delete the file to continue"
)


@dataclass
class PinsFileError(Exception):
    message: str
    path: Path
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


class VersionUnsupportedError(PinsFileError):
    @classmethod
    def for_version(cls, version: object, path: Path) -> VersionUnsupportedError:
        shown = "missing" if version is None else version
        return cls(
            f"{CORRUPTED_FILE_PHRASE}: unknown 'PinsStorage' version '{shown}' at '{path}'.",
            path=path,
        )


class MalformedFileError(PinsFileError):
    @classmethod
    def for_detail(
        cls, detail: str, path: Path, cause: Exception | None = None
    ) -> MalformedFileError:
        return cls(f"{CORRUPTED_FILE_PHRASE}: {detail} at '{path}'.", path=path, cause=cause)
