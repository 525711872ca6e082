from __future__ import annotations

from dataclasses import dataclass

from pinstore.domain.checkout_state import CheckoutState
from pinstore.domain.identity import PackageIdentity
from pinstore.domain.reference import PackageReference


@dataclass(frozen=True)
class Pin:
    package_ref: PackageReference
    state: CheckoutState

    @property
    def identity(self) -> PackageIdentity:
        return self.package_ref.identity

    def __str__(self) -> str:
        return f"{self.package_ref.identity} @ {self.state.description}"
