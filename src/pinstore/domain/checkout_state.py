from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True)
class Revision:
    identifier: str

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class VersionCheckout:
    version: str
    revision: Revision
    branch: None = field(default=None, init=False, repr=False, compare=False)

    @property
    def description(self) -> str:
        return self.version


@dataclass(frozen=True)
class BranchCheckout:
    branch: str
    revision: Revision
    version: None = field(default=None, init=False, repr=False, compare=False)

    @property
    def description(self) -> str:
        return self.branch


@dataclass(frozen=True)
class RevisionCheckout:
    revision: Revision
    version: None = field(default=None, init=False, repr=False, compare=False)
    branch: None = field(default=None, init=False, repr=False, compare=False)

    @property
    def description(self) -> str:
        return self.revision.identifier


CheckoutState: TypeAlias = VersionCheckout | BranchCheckout | RevisionCheckout


def checkout_state_from_fields(
    version: str | None, branch: str | None, revision: str
) -> CheckoutState:
    # A version takes priority over a branch when a file carries both.
    if version is not None:
        return VersionCheckout(version, Revision(revision))
    if branch is not None:
        return BranchCheckout(branch, Revision(revision))
    return RevisionCheckout(Revision(revision))
