import json
from pathlib import Path

import jsonschema
import pytest

from pinstore.application.errors import (
    CORRUPTED_FILE_PHRASE,
    MalformedFileError,
    VersionUnsupportedError,
)
from pinstore.application.pins_schema import (
    CURRENT_VERSION,
    decode_pins,
    encode_pins,
    load_schema,
    parse_document,
)
from pinstore.domain.checkout_state import BranchCheckout, Revision, VersionCheckout
from pinstore.domain.pin import Pin
from pinstore.domain.reference import (
    LocalSourceControlReference,
    RegistryReference,
    RemoteSourceControlReference,
)

PATH = Path("/work/Package.resolved")
WORKDIR = Path("/work")


def _decode(document):
    return decode_pins(parse_document(json.dumps(document).encode(), PATH), PATH, WORKDIR)


def test_parse_document_accepts_trailing_commas():
    raw = b'{ "version": 2, "pins": [ { "identity": "a", "kind": "registry", "location": "s.a", "state": { "revision": "r", }, }, ], }'
    document = parse_document(raw, PATH)
    assert document["version"] == 2


def test_parse_document_rejects_garbage():
    with pytest.raises(MalformedFileError) as exc_info:
        parse_document(b"boom", PATH)
    assert CORRUPTED_FILE_PHRASE in str(exc_info.value)
    assert "Expecting value" in str(exc_info.value)
    assert str(PATH) in str(exc_info.value)
    assert isinstance(exc_info.value.cause, json.JSONDecodeError)


def test_parse_document_rejects_block_yaml():
    with pytest.raises(MalformedFileError) as exc_info:
        parse_document(b"version: 2\npins: []\n", PATH)
    assert "Expecting value" in str(exc_info.value)


def test_parse_document_keeps_json_error_for_non_object_text():
    with pytest.raises(MalformedFileError) as exc_info:
        parse_document(b"[1, 2,]", PATH)
    assert "Expecting value" in str(exc_info.value)


def test_parse_document_rejects_top_level_array():
    with pytest.raises(MalformedFileError) as exc_info:
        parse_document(b"[]", PATH)
    assert "expected a JSON object at the top level" in str(exc_info.value)


def test_parse_document_rejects_invalid_utf8():
    with pytest.raises(MalformedFileError):
        parse_document(b"\xff\xfe\x00{", PATH)


@pytest.mark.parametrize("version", [-1, 0, 3, "2", True, None])
def test_unknown_versions_are_rejected(version):
    document = {"pins": []} if version is None else {"version": version, "pins": []}
    with pytest.raises(VersionUnsupportedError) as exc_info:
        _decode(document)
    shown = "missing" if version is None else str(version)
    assert f"version '{shown}'" in str(exc_info.value)
    assert str(PATH) in str(exc_info.value)


def test_missing_required_field_is_malformed():
    document = {"version": 2, "pins": [{"identity": "a", "kind": "registry", "state": {"revision": "r"}}]}
    with pytest.raises(MalformedFileError) as exc_info:
        _decode(document)
    assert "location" in str(exc_info.value)


def test_unknown_kind_is_malformed():
    document = {
        "version": 2,
        "pins": [
            {"identity": "a", "kind": "fileSystem", "location": "/a", "state": {"revision": "r"}}
        ],
    }
    with pytest.raises(MalformedFileError):
        _decode(document)


def test_decode_v1_yields_remote_references():
    document = {
        "version": 1,
        "object": {
            "pins": [
                {
                    "package": "Foo",
                    "repositoryURL": "https://github.com/corp/Foo.git",
                    "state": {"branch": "main", "revision": "abc", "version": None},
                }
            ]
        },
    }
    [pin] = _decode(document)
    assert pin.package_ref == RemoteSourceControlReference("https://github.com/corp/Foo.git")
    assert pin.state == BranchCheckout("main", Revision("abc"))


def test_decode_v2_resolves_relative_paths_against_working_directory():
    document = {
        "version": 2,
        "pins": [
            {"identity": "dep", "kind": "localSourceControl", "location": "deps/dep", "state": {"revision": "r"}}
        ],
    }
    [pin] = _decode(document)
    assert pin.package_ref == LocalSourceControlReference("/work/deps/dep")


def test_encode_is_sorted_and_current_version():
    pins = [
        Pin(RemoteSourceControlReference("https://github.com/z/zeta.git"), VersionCheckout("2.0.0", Revision("z1"))),
        Pin(RegistryReference("scope.alpha"), BranchCheckout("main", Revision("a1"))),
    ]
    data = json.loads(encode_pins(pins, WORKDIR))
    assert data["version"] == CURRENT_VERSION
    assert [p["identity"] for p in data["pins"]] == ["scope.alpha", "zeta"]
    assert data["pins"][0]["state"] == {"branch": "main", "revision": "a1", "version": None}
    assert data["pins"][1]["kind"] == "remoteSourceControl"


def test_encode_is_deterministic():
    pins = [Pin(RegistryReference("scope.alpha"), VersionCheckout("1.0.0", Revision("a")))]
    assert encode_pins(pins, WORKDIR) == encode_pins(list(pins), WORKDIR)
    assert encode_pins(pins, WORKDIR).endswith(b"\n")


def test_encode_writes_paths_under_working_directory_relative():
    pins = [
        Pin(LocalSourceControlReference("/work/deps/dep"), VersionCheckout("1.0.0", Revision("r"))),
        Pin(LocalSourceControlReference("/elsewhere/other"), VersionCheckout("1.0.0", Revision("o"))),
    ]
    data = json.loads(encode_pins(pins, WORKDIR))
    locations = {p["identity"]: p["location"] for p in data["pins"]}
    assert locations == {"dep": "deps/dep", "other": "/elsewhere/other"}


def test_relative_location_survives_decode_encode():
    document = {
        "version": 2,
        "pins": [
            {"identity": "dep", "kind": "localSourceControl", "location": "deps/dep", "state": {"revision": "r"}}
        ],
    }
    data = json.loads(encode_pins(_decode(document), WORKDIR))
    assert data["pins"][0]["location"] == "deps/dep"


@pytest.mark.parametrize("version", [1, 2])
def test_bundled_schemas_are_valid(version):
    jsonschema.Draft202012Validator.check_schema(load_schema(version))
