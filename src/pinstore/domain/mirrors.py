from __future__ import annotations

from collections.abc import Iterable, Iterator


class DependencyMirrors:
    """Bidirectional table of `original -> mirror` locations.

    The table must be injective; two originals sharing one mirror make the
    reverse lookup ambiguous and are not detected here.
    """

    def __init__(self) -> None:
        self._index: dict[str, str] = {}
        self._reverse_index: dict[str, str] = {}

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> DependencyMirrors:
        mirrors = cls()
        for original, mirror in pairs:
            mirrors.set(mirror=mirror, original=original)
        return mirrors

    def set(self, *, mirror: str, original: str) -> None:
        previous = self._index.get(original)
        if previous is not None:
            self._reverse_index.pop(previous, None)
        self._index[original] = mirror
        self._reverse_index[mirror] = original

    def unset(self, value: str) -> bool:
        if value in self._index:
            mirror = self._index.pop(value)
            self._reverse_index.pop(mirror, None)
            return True
        if value in self._reverse_index:
            original = self._reverse_index.pop(value)
            self._index.pop(original, None)
            return True
        return False

    def mirror_for(self, original: str) -> str | None:
        return self._index.get(original)

    def original_for(self, mirror: str) -> str | None:
        return self._reverse_index.get(mirror)

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(sorted(self._index.items()))

    def __repr__(self) -> str:
        return f"DependencyMirrors({dict(self._index)!r})"
