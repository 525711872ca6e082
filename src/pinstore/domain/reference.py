from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from pinstore.domain.identity import PackageIdentity


class ReferenceKind(str, Enum):
    ROOT = "root"
    LOCAL = "local"
    LOCAL_SOURCE_CONTROL = "localSourceControl"
    REMOTE_SOURCE_CONTROL = "remoteSourceControl"
    REGISTRY = "registry"


PATH_KINDS = frozenset(
    {ReferenceKind.ROOT, ReferenceKind.LOCAL, ReferenceKind.LOCAL_SOURCE_CONTROL}
)


class PackageReference(ABC):
    """Where a package's source lives.

    Concrete references are one of the subclasses below. Each computes its
    identity from the location it is constructed with; `with_location` is
    the only way to move a reference (to a mirror) and it keeps that
    identity.
    """

    kind: ClassVar[ReferenceKind]
    identity: PackageIdentity

    @property
    @abstractmethod
    def location(self) -> str: ...

    @abstractmethod
    def _compute_identity(self) -> PackageIdentity: ...

    def __post_init__(self) -> None:
        object.__setattr__(self, "identity", self._compute_identity())

    def with_location(self, location: str) -> PackageReference:
        moved = reference_from_kind(self.kind, location)
        object.__setattr__(moved, "identity", self.identity)
        return moved

    def __str__(self) -> str:
        return f"{self.identity} ({self.kind.value}: {self.location})"


@dataclass(frozen=True)
class RootReference(PackageReference):
    kind: ClassVar[ReferenceKind] = ReferenceKind.ROOT
    path: str
    identity: PackageIdentity = field(init=False)

    @property
    def location(self) -> str:
        return self.path

    def _compute_identity(self) -> PackageIdentity:
        return PackageIdentity.from_path(self.path)


@dataclass(frozen=True)
class LocalReference(PackageReference):
    kind: ClassVar[ReferenceKind] = ReferenceKind.LOCAL
    path: str
    identity: PackageIdentity = field(init=False)

    @property
    def location(self) -> str:
        return self.path

    def _compute_identity(self) -> PackageIdentity:
        return PackageIdentity.from_path(self.path)


@dataclass(frozen=True)
class LocalSourceControlReference(PackageReference):
    kind: ClassVar[ReferenceKind] = ReferenceKind.LOCAL_SOURCE_CONTROL
    path: str
    identity: PackageIdentity = field(init=False)

    @property
    def location(self) -> str:
        return self.path

    def _compute_identity(self) -> PackageIdentity:
        return PackageIdentity.from_path(self.path)


@dataclass(frozen=True)
class RemoteSourceControlReference(PackageReference):
    kind: ClassVar[ReferenceKind] = ReferenceKind.REMOTE_SOURCE_CONTROL
    url: str
    identity: PackageIdentity = field(init=False)

    @property
    def location(self) -> str:
        return self.url

    def _compute_identity(self) -> PackageIdentity:
        return PackageIdentity.from_url(self.url)


@dataclass(frozen=True)
class RegistryReference(PackageReference):
    kind: ClassVar[ReferenceKind] = ReferenceKind.REGISTRY
    coordinate: str
    identity: PackageIdentity = field(init=False)

    @property
    def location(self) -> str:
        return self.coordinate

    def _compute_identity(self) -> PackageIdentity:
        return PackageIdentity.from_registry(self.coordinate)


_REFERENCE_TYPES: dict[ReferenceKind, type[PackageReference]] = {
    ReferenceKind.ROOT: RootReference,
    ReferenceKind.LOCAL: LocalReference,
    ReferenceKind.LOCAL_SOURCE_CONTROL: LocalSourceControlReference,
    ReferenceKind.REMOTE_SOURCE_CONTROL: RemoteSourceControlReference,
    ReferenceKind.REGISTRY: RegistryReference,
}


def reference_from_kind(kind: ReferenceKind | str, location: str) -> PackageReference:
    try:
        resolved = ReferenceKind(kind)
    except ValueError:
        raise ValueError(f"Unknown package reference kind: {kind}") from None
    return _REFERENCE_TYPES[resolved](location)  # type: ignore[call-arg]
