"""Core result types, settings and exceptions for marketing-contracts."""
from dataclasses import dataclass
from typing import Annotated, Optional, Tuple, Union

from pydantic import AfterValidator, AnyHttpUrl, BaseModel, ConfigDict, Field
from pydantic_core import PydanticCustomError


def _require_https(url: AnyHttpUrl) -> AnyHttpUrl:
    if url.scheme != "https":
        raise PydanticCustomError(
            "secure_url",
            "URL must use the https scheme, got {scheme}",
            {"scheme": url.scheme},
        )
    return url


# Absolute http(s) URL restricted to the encrypted scheme. Used for
# externally-facing assets such as product imagery.
SecureUrl = Annotated[AnyHttpUrl, AfterValidator(_require_https)]


# ---------------------------------------------------------------------------
# Violations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldViolation:
    """A field-level constraint that failed during shape validation."""

    field: str
    constraint: str
    message: str
    input_value: object = None


@dataclass(frozen=True)
class InvariantViolation:
    """A whole-record business rule that failed."""

    rule: str
    fields: Tuple[str, ...]
    message: str


Violation = Union[FieldViolation, InvariantViolation]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class MarketingContractsError(Exception):
    """Base exception for all library errors."""
    pass


class UnknownRecordKindError(MarketingContractsError):
    """Raised when a record kind is not one of the registered kinds."""

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(
            f"Unknown record kind: {kind!r}. "
            f"Known kinds: content, campaign, bundle"
        )


class UnknownStateError(MarketingContractsError):
    """Raised when a workflow state string is not recognised."""
    pass


class RecordValidationError(MarketingContractsError):
    """Raised by ValidationResult.raise_for_violations() on a rejected record."""

    def __init__(self, violations: Tuple[Violation, ...]) -> None:
        self.violations = violations
        details = "; ".join(_describe(v) for v in violations)
        super().__init__(f"Record rejected: {details}")


def _describe(violation: Violation) -> str:
    if isinstance(violation, FieldViolation):
        return f"{violation.field} [{violation.constraint}] {violation.message}"
    return f"{violation.rule}: {violation.message}"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a record.

    ``record`` holds the typed, immutable record only when ``valid`` is
    True. A record that fails invariant checks is never handed back, so
    callers cannot persist a partially accepted value.
    """

    valid: bool
    record: Optional[BaseModel] = None
    field_violations: Tuple[FieldViolation, ...] = ()
    invariant_violations: Tuple[InvariantViolation, ...] = ()

    @property
    def violations(self) -> Tuple[Violation, ...]:
        """All violations, field-level first."""
        return self.field_violations + self.invariant_violations

    def raise_for_violations(self) -> BaseModel:
        """Return the typed record or raise RecordValidationError."""
        if not self.valid or self.record is None:
            raise RecordValidationError(self.violations)
        return self.record


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class ValidationSettings(BaseModel):
    """Tunable thresholds for invariant checks and result caching."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_bundle_entries: int = Field(
        10, ge=2, description="Maximum number of products in one bundle"
    )
    clearance_min_discount: int = Field(
        25,
        ge=0,
        le=100,
        description="Minimum percentage discount for clearance campaigns",
    )
    meaningful_savings_percentage: int = Field(
        5,
        ge=0,
        le=100,
        description="Savings percentage at which a bundle counts as worthwhile",
    )
    cache_size: int = Field(
        1024, ge=1, description="Maximum entries held by ValidationCache"
    )


DEFAULT_SETTINGS = ValidationSettings()
