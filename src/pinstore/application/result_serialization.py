from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import TypeVar

from pinstore.domain.diagnostics import Diagnostic, Location
from pinstore.domain.json_types import JsonDict, as_json_dict
from pinstore.domain.pin import Pin
from pinstore.domain.result import Result

T = TypeVar("T")


def _serialize_location(location: Location | None) -> JsonDict | None:
    if location is None:
        return None
    return as_json_dict(asdict(location))


def serialize_diagnostic(diag: Diagnostic) -> JsonDict:
    return as_json_dict(
        {
            "id": diag.id,
            "code": diag.code,
            "rule": diag.rule,
            "severity": diag.severity.value,
            "message": diag.message,
            "hint": diag.hint,
            "is_execution": diag.is_execution,
            "location": _serialize_location(diag.location),
        }
    )


def serialize_pin(pin: Pin) -> JsonDict:
    return as_json_dict(
        {
            "identity": pin.identity.value,
            "kind": pin.package_ref.kind.value,
            "location": pin.package_ref.location,
            "state": {
                "description": pin.state.description,
                "branch": pin.state.branch,
                "revision": pin.state.revision.identifier,
                "version": pin.state.version,
            },
        }
    )


def serialize_result(
    result: Result[T],
    command: str,
    args: list[str],
) -> JsonDict:
    return as_json_dict(
        {
            "result_schema_version": 1,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "command": command,
            "args": args,
            "exit_code": result.exit_code,
            "diagnostics": [serialize_diagnostic(d) for d in result.diagnostics],
            "artifacts": result.artifacts,
        }
    )
