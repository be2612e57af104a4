"""Two-stage record validation: field constraints, then cross-field invariants.

Stage 1 runs the record's pydantic model and converts every error into a
FieldViolation. Stage 2 runs only on a typed record and lets each record
module append InvariantViolations to a shared list. Neither stage stops at
the first failure, so one call reports everything wrong with the input.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from marketing_contracts.bundle import BundleRecord, check_bundle_invariants
from marketing_contracts.campaign import CampaignRecord, check_campaign_invariants
from marketing_contracts.content import ContentRecord, check_content_invariants
from marketing_contracts.models import (
    DEFAULT_SETTINGS,
    FieldViolation,
    InvariantViolation,
    UnknownRecordKindError,
    ValidationResult,
    ValidationSettings,
)

logger = logging.getLogger("marketing_contracts.validation")


class RecordKind(str, Enum):
    """Record kinds accepted by the engine."""

    CONTENT = "content"
    CAMPAIGN = "campaign"
    BUNDLE = "bundle"


InvariantChecker = Callable[[Any, List[InvariantViolation], ValidationSettings], None]

_KIND_TO_MODEL: Dict[RecordKind, Type[BaseModel]] = {
    RecordKind.CONTENT: ContentRecord,
    RecordKind.CAMPAIGN: CampaignRecord,
    RecordKind.BUNDLE: BundleRecord,
}

_MODEL_TO_CHECKER: Dict[Type[BaseModel], InvariantChecker] = {
    ContentRecord: check_content_invariants,
    CampaignRecord: check_campaign_invariants,
    BundleRecord: check_bundle_invariants,
}

KindLike = Union[RecordKind, str, Type[BaseModel]]


def resolve_kind(kind: KindLike) -> RecordKind:
    """Resolve a RecordKind, its value, a model class or a model class name.

    Raises:
        UnknownRecordKindError: If kind does not name a registered record.
    """
    if isinstance(kind, RecordKind):
        return kind
    for member, model in _KIND_TO_MODEL.items():
        if kind == member.value or kind is model or kind == model.__name__:
            return member
    raise UnknownRecordKindError(kind)


def model_for(kind: KindLike) -> Type[BaseModel]:
    """Return the pydantic model backing kind."""
    return _KIND_TO_MODEL[resolve_kind(kind)]


def _field_path(loc: Tuple[Union[str, int], ...]) -> str:
    if not loc:
        return "<root>"
    return ".".join(str(part) for part in loc)


def _to_field_violations(error: PydanticValidationError) -> Tuple[FieldViolation, ...]:
    return tuple(
        FieldViolation(
            field=_field_path(err["loc"]),
            constraint=err["type"],
            message=err["msg"],
            input_value=err.get("input"),
        )
        for err in error.errors()
    )


def validate(raw: Any, kind: KindLike) -> ValidationResult:
    """Check raw input against the field constraints of kind.

    Returns a ValidationResult whose ``record`` is the typed, frozen model
    when every field constraint holds. Bad input never raises.
    """
    model_class = model_for(kind)
    try:
        record = model_class.model_validate(raw)
    except PydanticValidationError as e:
        violations = _to_field_violations(e)
        logger.info(
            "Rejected %s record: %d field violation(s)",
            model_class.__name__,
            len(violations),
        )
        return ValidationResult(valid=False, field_violations=violations)
    return ValidationResult(valid=True, record=record)


def check_invariants(
    record: BaseModel,
    settings: Optional[ValidationSettings] = None,
) -> ValidationResult:
    """Evaluate the whole-record business rules for a typed record.

    Raises:
        UnknownRecordKindError: If record is not a registered record model.
    """
    checker = _MODEL_TO_CHECKER.get(type(record))
    if checker is None:
        raise UnknownRecordKindError(type(record).__name__)

    violations: List[InvariantViolation] = []
    checker(record, violations, settings or DEFAULT_SETTINGS)

    if violations:
        logger.info(
            "Rejected %s %s: %s",
            type(record).__name__,
            getattr(record, "id", "?"),
            ", ".join(v.rule for v in violations),
        )
        return ValidationResult(valid=False, invariant_violations=tuple(violations))
    return ValidationResult(valid=True, record=record)


def validate_record(
    raw: Any,
    kind: KindLike,
    settings: Optional[ValidationSettings] = None,
) -> ValidationResult:
    """Run field validation and, if it passes, the invariant checks."""
    result = validate(raw, kind)
    if not result.valid or result.record is None:
        return result
    return check_invariants(result.record, settings)
