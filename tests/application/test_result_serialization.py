from pinstore.application.result_serialization import serialize_pin, serialize_result
from pinstore.domain.checkout_state import BranchCheckout, Revision
from pinstore.domain.diagnostics import Diagnostic, FileLocation, Severity
from pinstore.domain.pin import Pin
from pinstore.domain.reference import RemoteSourceControlReference
from pinstore.domain.result import Result


def test_result_serializes_with_schema_version():
    result = Result(
        diagnostics=[
            Diagnostic(
                code="PINS_MALFORMED",
                rule="pins.parse",
                severity=Severity.ERROR,
                message="m",
                location=FileLocation("Package.resolved"),
            )
        ]
    )
    data = serialize_result(result, command="check", args=["."])
    assert data["result_schema_version"] == 1
    assert data["exit_code"] == result.exit_code
    assert data["diagnostics"][0]["location"]["path"] == "Package.resolved"
    assert data["diagnostics"][0]["location"]["kind"] == "file"
    assert "details" not in data["diagnostics"][0]


def test_serialize_pin():
    pin = Pin(
        RemoteSourceControlReference("https://github.com/corp/foo.git"),
        BranchCheckout("develop", Revision("abc")),
    )
    data = serialize_pin(pin)
    assert data["identity"] == "foo"
    assert data["kind"] == "remoteSourceControl"
    assert data["state"] == {
        "description": "develop",
        "branch": "develop",
        "revision": "abc",
        "version": None,
    }
