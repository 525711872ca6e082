from __future__ import annotations

from collections.abc import Iterator, Mapping
import logging
from pathlib import Path
from types import MappingProxyType

from pinstore.application.mirror_translation import (
    canonical_reference,
    effective_reference,
)
from pinstore.application.pins_schema import decode_pins, encode_pins, parse_document
from pinstore.domain.checkout_state import CheckoutState
from pinstore.domain.identity import PackageIdentity
from pinstore.domain.mirrors import DependencyMirrors
from pinstore.domain.pin import Pin
from pinstore.domain.reference import PackageReference
from pinstore.ports.filesystem import FileSystemPort

logger = logging.getLogger(__name__)

DEFAULT_PINS_FILENAME = "Package.resolved"


class PinsStore:
    """In-memory ledger of resolved dependencies bound to a pins file.

    Pins are held with their effective (mirror-resolved) locations. The file
    on disk only ever holds canonical locations: `open` translates
    canonical -> effective and `save` translates back. Mutations stay in
    memory until `save` is called.
    """

    def __init__(
        self,
        pins_file: Path,
        working_directory: Path,
        file_system: FileSystemPort,
        mirrors: DependencyMirrors,
        pins: list[Pin] | None = None,
    ) -> None:
        self.pins_file = pins_file
        self.working_directory = working_directory
        self.file_system = file_system
        self.mirrors = mirrors
        self._pins: dict[PackageIdentity, Pin] = {}
        for pin in pins or []:
            self._pins[pin.identity] = pin

    @classmethod
    def open(
        cls,
        pins_file: Path,
        working_directory: Path,
        file_system: FileSystemPort,
        mirrors: DependencyMirrors,
    ) -> PinsStore:
        if not file_system.exists(pins_file):
            logger.debug("No pins file at %s; starting empty", pins_file)
            return cls(pins_file, working_directory, file_system, mirrors)
        document = parse_document(file_system.read_bytes(pins_file), pins_file)
        decoded = decode_pins(document, pins_file, working_directory)
        pins = [
            Pin(effective_reference(pin.package_ref, mirrors), pin.state)
            for pin in decoded
        ]
        logger.debug("Loaded %d pins from %s", len(pins), pins_file)
        return cls(pins_file, working_directory, file_system, mirrors, pins)

    @property
    def pins(self) -> tuple[Pin, ...]:
        return tuple(self._pins[identity] for identity in sorted(self._pins))

    @property
    def pins_map(self) -> Mapping[PackageIdentity, Pin]:
        return MappingProxyType(self._pins)

    def get(self, identity: PackageIdentity) -> Pin | None:
        return self._pins.get(identity)

    def __len__(self) -> int:
        return len(self._pins)

    def __iter__(self) -> Iterator[Pin]:
        return iter(self.pins)

    def __contains__(self, identity: object) -> bool:
        return identity in self._pins

    def _canonical_identity(self, package_ref: PackageReference) -> PackageIdentity:
        return canonical_reference(package_ref, self.mirrors).identity

    def pin(self, package_ref: PackageReference, state: CheckoutState) -> None:
        # Keyed by the canonical location so a mirrored URL and its original
        # share one entry; the location is stored as given.
        canonical = canonical_reference(package_ref, self.mirrors)
        identity = canonical.identity
        if identity != package_ref.identity:
            package_ref = canonical.with_location(package_ref.location)
        logger.debug("Pinning %s at %s", identity, state.description)
        self._pins[identity] = Pin(package_ref, state)

    def unpin(self, package_ref: PackageReference) -> None:
        identity = self._canonical_identity(package_ref)
        if self._pins.pop(identity, None) is not None:
            logger.debug("Unpinned %s", identity)

    def unpin_all(self) -> None:
        self._pins.clear()

    def save(self) -> None:
        if not self._pins:
            if self.file_system.exists(self.pins_file):
                logger.debug("No pins left; removing %s", self.pins_file)
                self.file_system.remove(self.pins_file)
            return
        canonical = [
            Pin(canonical_reference(pin.package_ref, self.mirrors), pin.state)
            for pin in self._pins.values()
        ]
        payload = encode_pins(canonical, self.working_directory)
        self.file_system.write_bytes_atomic(self.pins_file, payload)
        logger.debug("Saved %d pins to %s", len(canonical), self.pins_file)
