from __future__ import annotations

from collections.abc import Callable, Iterable
import json
import logging
from pathlib import Path

import jsonschema
import yaml

from pinstore.application.errors import MalformedFileError, VersionUnsupportedError
from pinstore.domain.checkout_state import CheckoutState, checkout_state_from_fields
from pinstore.domain.json_types import (
    JsonDict,
    as_json_dict,
    as_json_list,
    optional_str,
    required_str,
)
from pinstore.domain.pin import Pin
from pinstore.domain.reference import (
    PATH_KINDS,
    PackageReference,
    ReferenceKind,
    RemoteSourceControlReference,
    reference_from_kind,
)

logger = logging.getLogger(__name__)

CURRENT_VERSION = 2
SCHEMAS_DIR = Path(__file__).resolve().parents[1] / "schemas"

Decoder = Callable[[JsonDict, Path, Path], list[Pin]]


def schema_path(version: int) -> Path:
    return SCHEMAS_DIR / f"pins.v{version}.schema.json"


def load_schema(version: int) -> JsonDict:
    return as_json_dict(json.loads(schema_path(version).read_text(encoding="utf-8")))


def parse_document(raw: bytes, path: Path) -> JsonDict:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedFileError.for_detail(str(e), path, cause=e)
    try:
        document: object = json.loads(text)
    except json.JSONDecodeError as json_error:
        document = _parse_lenient(text, json_error, path)
    if not isinstance(document, dict):
        raise MalformedFileError.for_detail("expected a JSON object at the top level", path)
    return as_json_dict(document)


def _parse_lenient(text: str, json_error: json.JSONDecodeError, path: Path) -> object:
    # Hand-edited files often carry trailing commas. A JSON object is YAML
    # flow style, so only text that opens one is retried through YAML.
    if not text.lstrip().startswith("{"):
        raise MalformedFileError.for_detail(str(json_error), path, cause=json_error)
    try:
        document: object = yaml.safe_load(text)
    except yaml.YAMLError:
        raise MalformedFileError.for_detail(str(json_error), path, cause=json_error)
    if not isinstance(document, dict):
        raise MalformedFileError.for_detail(str(json_error), path, cause=json_error)
    return document


def _validate(document: JsonDict, version: int, path: Path) -> None:
    try:
        jsonschema.validate(document, load_schema(version))
    except jsonschema.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path) or "<root>"
        raise MalformedFileError.for_detail(f"{e.message} (at {location})", path, cause=e)


def _decode_state(raw: object) -> CheckoutState:
    state = as_json_dict(raw)
    return checkout_state_from_fields(
        version=optional_str(state, "version"),
        branch=optional_str(state, "branch"),
        revision=required_str(state, "revision"),
    )


def _decode_v1(document: JsonDict, path: Path, working_directory: Path) -> list[Pin]:
    pins: list[Pin] = []
    for item in as_json_list(as_json_dict(document.get("object")).get("pins")):
        entry = as_json_dict(item)
        package_ref = RemoteSourceControlReference(required_str(entry, "repositoryURL"))
        pins.append(Pin(package_ref, _decode_state(entry.get("state"))))
    return pins


def _resolve_location(kind: ReferenceKind, location: str, working_directory: Path) -> str:
    if kind in PATH_KINDS and not Path(location).is_absolute():
        return str(working_directory / location)
    return location


def _decode_v2(document: JsonDict, path: Path, working_directory: Path) -> list[Pin]:
    pins: list[Pin] = []
    for item in as_json_list(document.get("pins")):
        entry = as_json_dict(item)
        kind = ReferenceKind(required_str(entry, "kind"))
        location = _resolve_location(kind, required_str(entry, "location"), working_directory)
        package_ref = reference_from_kind(kind, location)
        stored_identity = required_str(entry, "identity")
        if stored_identity.lower() != package_ref.identity.value:
            logger.debug(
                "Stored identity %r does not match %s; using %s",
                stored_identity,
                location,
                package_ref.identity,
            )
        pins.append(Pin(package_ref, _decode_state(entry.get("state"))))
    return pins


DECODERS: dict[int, Decoder] = {
    1: _decode_v1,
    2: _decode_v2,
}


def decode_pins(document: JsonDict, path: Path, working_directory: Path) -> list[Pin]:
    version = document.get("version")
    decoder = DECODERS.get(version) if type(version) is int else None
    if decoder is None:
        raise VersionUnsupportedError.for_version(version, path)
    _validate(document, version, path)
    logger.debug("Decoding %s as version %s", path, version)
    return decoder(document, path, working_directory)


def _portable_location(package_ref: PackageReference, working_directory: Path) -> str:
    location = Path(package_ref.location)
    if package_ref.kind in PATH_KINDS and location.is_relative_to(working_directory):
        return location.relative_to(working_directory).as_posix()
    return package_ref.location


def _encode_reference(package_ref: PackageReference, working_directory: Path) -> JsonDict:
    return {
        "identity": package_ref.identity.value,
        "kind": package_ref.kind.value,
        "location": _portable_location(package_ref, working_directory),
    }


def _encode_state(state: CheckoutState) -> JsonDict:
    return {
        "branch": state.branch,
        "revision": state.revision.identifier,
        "version": state.version,
    }


def encode_pins(pins: Iterable[Pin], working_directory: Path) -> bytes:
    entries: list[JsonDict] = []
    for pin in sorted(pins, key=lambda p: p.identity):
        entry = _encode_reference(pin.package_ref, working_directory)
        entry["state"] = _encode_state(pin.state)
        entries.append(entry)
    document: JsonDict = {"pins": list(entries), "version": CURRENT_VERSION}
    return (json.dumps(document, indent=2, sort_keys=True) + "\n").encode("utf-8")
