from pinstore.domain.diagnostics import Diagnostic, FileLocation, PinLocation, Severity
from pinstore.domain.result import Result


def test_diagnostic_id_is_deterministic():
    d1 = Diagnostic(
        code="PINS_MALFORMED",
        rule="pins.parse",
        severity=Severity.ERROR,
        message="m",
        location=FileLocation("Package.resolved"),
    )
    d2 = Diagnostic(
        code="PINS_MALFORMED",
        rule="pins.parse",
        severity=Severity.ERROR,
        message="m",
        location=FileLocation("Package.resolved"),
    )
    assert d1.id == d2.id


def test_result_exit_codes():
    validation = Diagnostic(code="X", rule="r", severity=Severity.ERROR, message="m")
    execution = Diagnostic(
        code="Y", rule="r", severity=Severity.ERROR, message="m", is_execution=True
    )
    info = Diagnostic(
        code="Z", rule="r", severity=Severity.INFO, message="m", location=PinLocation("foo")
    )
    assert Result(diagnostics=[info]).exit_code == 0
    assert Result(diagnostics=[info]).has_errors is False
    assert Result(diagnostics=[validation]).exit_code == 2
    assert Result(diagnostics=[validation, execution]).exit_code == 3
