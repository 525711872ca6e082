from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
import re
from urllib.parse import urlsplit

# git@host:owner/repo.git
SCP_LIKE_PATTERN = re.compile(r"^(?:[^@/]+@)?[^:/]+:(?!//)(?P<path>.+)$")
GIT_SUFFIX = ".git"


@dataclass(frozen=True, order=True)
class PackageIdentity:
    """Canonical, case-insensitive key of a dependency.

    Identities are derived from a location and never from mirror state: two
    locations that differ only by mirror substitution produce the identities
    of their own last path components.
    """

    value: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        return self.value

    @classmethod
    def plain(cls, value: str) -> PackageIdentity:
        return cls(value)

    @classmethod
    def from_url(cls, url: str) -> PackageIdentity:
        return cls(_last_component(_url_path(url)))

    @classmethod
    def from_path(cls, path: str | PurePath) -> PackageIdentity:
        return cls(_last_component(str(path)))

    @classmethod
    def from_registry(cls, coordinate: str) -> PackageIdentity:
        return cls(coordinate.strip())


def _url_path(url: str) -> str:
    text = url.strip()
    if "://" in text:
        return urlsplit(text).path
    match = SCP_LIKE_PATTERN.match(text)
    if match:
        return match.group("path")
    return text


def _last_component(path: str) -> str:
    stripped = path.replace("\\", "/").rstrip("/")
    name = stripped.rsplit("/", 1)[-1]
    if name.lower().endswith(GIT_SUFFIX) and len(name) > len(GIT_SUFFIX):
        name = name[: -len(GIT_SUFFIX)]
    return name or stripped or path
