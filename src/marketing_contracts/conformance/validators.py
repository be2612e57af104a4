"""Dual-layer conformance validation for marketing-contracts records.

This module combines:
1. The record engine (field constraints and invariants, primary layer)
2. JSON Schema validation of the raw payload (optional secondary layer)

The schema layer is skipped if jsonschema is unavailable, unless
strict=True is specified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from marketing_contracts.models import FieldViolation, InvariantViolation
from marketing_contracts.schemas import generate_schema
from marketing_contracts.validation import KindLike, RecordKind, resolve_kind, validate_record


@dataclass(frozen=True)
class SchemaViolation:
    """A violation detected by JSON Schema validation."""

    json_path: str
    message: str
    validator: str
    validator_value: object
    schema_path: Tuple[Union[str, int], ...]


@dataclass(frozen=True)
class ConformanceResult:
    """Result of dual-layer conformance validation."""

    valid: bool
    field_violations: Tuple[FieldViolation, ...]
    invariant_violations: Tuple[InvariantViolation, ...]
    schema_violations: Tuple[SchemaViolation, ...]
    schema_check_skipped: bool
    kind: RecordKind


def _validate_with_schema(
    payload: Any,
    kind: RecordKind,
    strict: bool,
) -> Tuple[Tuple[SchemaViolation, ...], bool]:
    """Validate payload against the generated JSON Schema for kind.

    Returns:
        (violations, skipped), where skipped is True if jsonschema is
        not installed and strict is False.

    Raises:
        ImportError: If strict=True and jsonschema is unavailable.
    """
    try:
        from jsonschema import Draft202012Validator
    except ImportError:
        if strict:
            raise ImportError(
                "jsonschema is required for strict conformance validation. "
                "Install with: pip install 'marketing-contracts[conformance]'"
            )
        return ((), True)

    validator = Draft202012Validator(generate_schema(kind))
    violations = []
    for error in validator.iter_errors(payload):
        json_path = "$" + "".join(
            f"[{p}]" if isinstance(p, int) else f".{p}" for p in error.absolute_path
        )
        violations.append(
            SchemaViolation(
                json_path=json_path,
                message=error.message,
                validator=str(error.validator),
                validator_value=error.validator_value,
                schema_path=tuple(error.absolute_schema_path),
            )
        )
    return (tuple(violations), False)


def validate_conformance(
    payload: Dict[str, Any],
    kind: KindLike,
    strict: bool = False,
) -> ConformanceResult:
    """Validate a raw record payload against its contract.

    Args:
        payload: The raw record dictionary.
        kind: Record kind (``"content"``, ``"campaign"`` or ``"bundle"``).
        strict: If True, require jsonschema and fail if unavailable.

    Raises:
        UnknownRecordKindError: If kind is not recognised.
        ImportError: If strict=True and jsonschema is unavailable.
    """
    record_kind = resolve_kind(kind)

    # Layer 1: record engine
    result = validate_record(payload, record_kind)

    # Layer 2: JSON Schema
    schema_violations, schema_skipped = _validate_with_schema(
        payload, record_kind, strict
    )

    valid = result.valid and (len(schema_violations) == 0 or schema_skipped)

    return ConformanceResult(
        valid=valid,
        field_violations=result.field_violations,
        invariant_violations=result.invariant_violations,
        schema_violations=schema_violations,
        schema_check_skipped=schema_skipped,
        kind=record_kind,
    )
