from __future__ import annotations

import logging

from pinstore.domain.mirrors import DependencyMirrors
from pinstore.domain.reference import PackageReference, reference_from_kind

logger = logging.getLogger(__name__)


def to_canonical(location: str, mirrors: DependencyMirrors) -> str:
    original = mirrors.original_for(location)
    if original is None:
        return location
    return original


def to_effective(location: str, mirrors: DependencyMirrors) -> str:
    mirror = mirrors.mirror_for(location)
    if mirror is None:
        return location
    return mirror


def canonical_reference(
    package_ref: PackageReference, mirrors: DependencyMirrors
) -> PackageReference:
    location = to_canonical(package_ref.location, mirrors)
    if location == package_ref.location:
        return package_ref
    logger.debug("Rewriting %s to canonical %s", package_ref.location, location)
    return reference_from_kind(package_ref.kind, location)


def effective_reference(
    package_ref: PackageReference, mirrors: DependencyMirrors
) -> PackageReference:
    location = to_effective(package_ref.location, mirrors)
    if location == package_ref.location:
        return package_ref
    logger.debug("Rewriting %s to mirror %s", package_ref.location, location)
    return package_ref.with_location(location)
