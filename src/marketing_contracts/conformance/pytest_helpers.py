"""Reusable test helpers for marketing-contracts conformance testing.

Consumers can import these to write their own conformance assertions:
    from marketing_contracts.conformance.pytest_helpers import (
        assert_payload_conforms,
        assert_payload_fails,
    )
"""
from __future__ import annotations

from typing import Any, Dict

from marketing_contracts.conformance.validators import (
    ConformanceResult,
    validate_conformance,
)


def assert_payload_conforms(
    payload: Dict[str, Any],
    kind: str,
    *,
    strict: bool = False,
) -> ConformanceResult:
    """Assert a payload satisfies every constraint and invariant for kind."""
    result = validate_conformance(payload, kind, strict=strict)
    if not result.valid:
        violations = []
        for fv in result.field_violations:
            violations.append(f"  Field: {fv.field} ({fv.constraint}): {fv.message}")
        for iv in result.invariant_violations:
            violations.append(f"  Invariant: {iv.rule}: {iv.message}")
        for sv in result.schema_violations:
            violations.append(f"  Schema: {sv.json_path}: {sv.message}")
        raise AssertionError(
            f"Payload for {kind!r} failed conformance:\n" + "\n".join(violations)
        )
    return result


def assert_payload_fails(
    payload: Dict[str, Any],
    kind: str,
    *,
    strict: bool = False,
) -> ConformanceResult:
    """Assert a payload DOES NOT conform (expected invalid)."""
    result = validate_conformance(payload, kind, strict=strict)
    if result.valid:
        raise AssertionError(
            f"Payload for {kind!r} was expected to fail but passed conformance."
        )
    return result
