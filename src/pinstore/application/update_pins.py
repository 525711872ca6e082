from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path

from pinstore.adapters.errors import FileSystemError, LockTimeoutError
from pinstore.adapters.filesystem.lock import DEFAULT_TIMEOUT, pins_file_lock
from pinstore.application.check_pins import io_diagnostic, load_pins
from pinstore.application.pins_store import PinsStore
from pinstore.application.result_serialization import serialize_pin
from pinstore.domain.diagnostics import Diagnostic, PinLocation, Severity
from pinstore.domain.identity import PackageIdentity
from pinstore.domain.mirrors import DependencyMirrors
from pinstore.domain.result import Result
from pinstore.ports.filesystem import FileSystemPort

logger = logging.getLogger(__name__)

Mutation = Callable[[PinsStore], list[Diagnostic]]


def _lock_diagnostic(error: LockTimeoutError) -> Diagnostic:
    return Diagnostic(
        code="PINS_LOCKED",
        rule="pins.lock",
        severity=Severity.ERROR,
        message=str(error),
        hint=error.hint,
        is_execution=True,
    )


def _update(
    pins_file: Path,
    working_directory: Path,
    file_system: FileSystemPort,
    mirrors: DependencyMirrors,
    mutate: Mutation,
    lock_timeout: float,
) -> Result[PinsStore]:
    try:
        with pins_file_lock(pins_file, timeout=lock_timeout):
            loaded = load_pins(pins_file, working_directory, file_system, mirrors)
            if loaded.value is None:
                return loaded
            store = loaded.value
            mutated = Result(value=store, diagnostics=mutate(store))
            if mutated.has_errors:
                return Result(diagnostics=mutated.diagnostics)
            store.save()
    except LockTimeoutError as e:
        return Result(diagnostics=[_lock_diagnostic(e)])
    except FileSystemError as e:
        return Result(diagnostics=[io_diagnostic(e, pins_file)])
    mutated.artifacts = [serialize_pin(pin) for pin in store.pins]
    return mutated


def unpin_identity(
    pins_file: Path,
    working_directory: Path,
    file_system: FileSystemPort,
    mirrors: DependencyMirrors,
    identity: str,
    lock_timeout: float = DEFAULT_TIMEOUT,
) -> Result[PinsStore]:
    def _unpin(store: PinsStore) -> list[Diagnostic]:
        pin = store.get(PackageIdentity.plain(identity))
        if pin is None:
            return [
                Diagnostic(
                    code="PIN_NOT_FOUND",
                    rule="pins.unpin",
                    severity=Severity.ERROR,
                    message=f"No pin recorded for '{identity}'",
                    location=PinLocation(identity),
                )
            ]
        store.unpin(pin.package_ref)
        return []

    return _update(pins_file, working_directory, file_system, mirrors, _unpin, lock_timeout)


def reset_pins(
    pins_file: Path,
    working_directory: Path,
    file_system: FileSystemPort,
    mirrors: DependencyMirrors,
    lock_timeout: float = DEFAULT_TIMEOUT,
) -> Result[PinsStore]:
    def _reset(store: PinsStore) -> list[Diagnostic]:
        store.unpin_all()
        return []

    return _update(pins_file, working_directory, file_system, mirrors, _reset, lock_timeout)


def migrate_pins(
    pins_file: Path,
    working_directory: Path,
    file_system: FileSystemPort,
    mirrors: DependencyMirrors,
    lock_timeout: float = DEFAULT_TIMEOUT,
) -> Result[PinsStore]:
    def _migrate(store: PinsStore) -> list[Diagnostic]:
        if not len(store):
            return [
                Diagnostic(
                    code="PINS_EMPTY",
                    rule="pins.migrate",
                    severity=Severity.INFO,
                    message=f"Nothing to migrate at {pins_file}",
                )
            ]
        logger.info("Rewriting %s with %d pins", pins_file, len(store))
        return []

    return _update(pins_file, working_directory, file_system, mirrors, _migrate, lock_timeout)
