from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import tomllib

import tomli_w

from pinstore.application.pins_store import DEFAULT_PINS_FILENAME
from pinstore.domain.diagnostics import Diagnostic, FileLocation, Severity
from pinstore.domain.json_types import JsonDict, as_json_dict, as_json_list
from pinstore.domain.mirrors import DependencyMirrors
from pinstore.domain.result import Result

CONFIG_FILENAME = ".pinstore.toml"
DEFAULT_LOCK_TIMEOUT = 10.0


def _new_mirror_pairs() -> list[tuple[str, str]]:
    return []


@dataclass
class Settings:
    pins_file: str | None = None
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT
    mirror_pairs: list[tuple[str, str]] = field(default_factory=_new_mirror_pairs)

    def mirrors(self) -> DependencyMirrors:
        return DependencyMirrors.from_pairs(self.mirror_pairs)

    def with_mirrors(self, mirrors: DependencyMirrors) -> Settings:
        return Settings(
            pins_file=self.pins_file,
            lock_timeout=self.lock_timeout,
            mirror_pairs=list(mirrors),
        )


def _parse_settings(raw: JsonDict) -> Settings:
    section = as_json_dict(raw.get("settings"))
    pins_file = section.get("pins_file")
    lock_timeout = section.get("lock_timeout", DEFAULT_LOCK_TIMEOUT)
    if pins_file is not None and not isinstance(pins_file, str):
        raise ValueError("settings.pins_file must be a string")
    if isinstance(lock_timeout, bool) or not isinstance(lock_timeout, (int, float)):
        raise ValueError("settings.lock_timeout must be a number")
    pairs: list[tuple[str, str]] = []
    for item in as_json_list(raw.get("mirrors")):
        entry = as_json_dict(item)
        original = entry.get("original")
        mirror = entry.get("mirror")
        if not isinstance(original, str) or not isinstance(mirror, str):
            raise ValueError("each [[mirrors]] entry needs string 'original' and 'mirror'")
        pairs.append((original, mirror))
    return Settings(pins_file=pins_file, lock_timeout=float(lock_timeout), mirror_pairs=pairs)


def read_settings(path: Path) -> Result[Settings]:
    if not path.exists():
        return Result(value=Settings())
    try:
        raw = as_json_dict(tomllib.loads(path.read_text(encoding="utf-8")))
        settings = _parse_settings(raw)
    except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
        return Result(
            diagnostics=[
                Diagnostic(
                    code="CONFIG_PARSE_FAILED",
                    rule="config.parse",
                    severity=Severity.ERROR,
                    message=str(e),
                    location=FileLocation(str(path)),
                )
            ]
        )
    return Result(value=settings)


def write_settings(path: Path, settings: Settings) -> None:
    section: JsonDict = {"lock_timeout": settings.lock_timeout}
    if settings.pins_file is not None:
        section["pins_file"] = settings.pins_file
    payload: dict[str, object] = {"settings": section}
    if settings.mirror_pairs:
        payload["mirrors"] = [
            {"original": original, "mirror": mirror}
            for original, mirror in sorted(settings.mirror_pairs)
        ]
    path.write_text(tomli_w.dumps(payload), encoding="utf-8")


def effective_pins_file(cli_value: Path | None, settings: Settings | None, root: Path) -> Path:
    if cli_value is not None:
        candidate = cli_value
    elif settings is not None and settings.pins_file:
        candidate = Path(settings.pins_file)
    else:
        candidate = Path(DEFAULT_PINS_FILENAME)
    if candidate.is_absolute():
        return candidate
    return root / candidate
