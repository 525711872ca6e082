from __future__ import annotations

from pathlib import Path

from pinstore.adapters.errors import FileSystemError
from pinstore.application.errors import (
    MalformedFileError,
    PinsFileError,
    VersionUnsupportedError,
)
from pinstore.application.pins_store import PinsStore
from pinstore.application.result_serialization import serialize_pin
from pinstore.domain.diagnostics import Diagnostic, FileLocation, Severity
from pinstore.domain.mirrors import DependencyMirrors
from pinstore.domain.result import Result
from pinstore.ports.filesystem import FileSystemPort

_ERROR_CODES: dict[type[PinsFileError], tuple[str, str]] = {
    VersionUnsupportedError: ("PINS_VERSION_UNSUPPORTED", "pins.version"),
    MalformedFileError: ("PINS_MALFORMED", "pins.parse"),
}


def pins_file_diagnostic(error: PinsFileError) -> Diagnostic:
    code, rule = _ERROR_CODES.get(type(error), ("PINS_MALFORMED", "pins.parse"))
    return Diagnostic(
        code=code,
        rule=rule,
        severity=Severity.ERROR,
        message=str(error),
        location=FileLocation(str(error.path)),
        hint="Fix or delete the file, then resolve dependencies again.",
    )


def io_diagnostic(error: FileSystemError, path: Path) -> Diagnostic:
    return Diagnostic(
        code="PINS_IO_FAILED",
        rule="pins.io",
        severity=Severity.ERROR,
        message=str(error),
        location=FileLocation(str(path)),
        hint=error.hint,
        is_execution=True,
    )


def load_pins(
    pins_file: Path,
    working_directory: Path,
    file_system: FileSystemPort,
    mirrors: DependencyMirrors,
) -> Result[PinsStore]:
    try:
        store = PinsStore.open(pins_file, working_directory, file_system, mirrors)
    except PinsFileError as e:
        return Result(diagnostics=[pins_file_diagnostic(e)])
    except FileSystemError as e:
        return Result(diagnostics=[io_diagnostic(e, pins_file)])
    return Result(value=store, artifacts=[serialize_pin(pin) for pin in store.pins])
