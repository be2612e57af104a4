"""Conformance test suite for marketing-contracts.

Run: pytest --pyargs marketing_contracts.conformance
"""
from marketing_contracts.conformance.loader import (
    FixtureCase,
    load_fixtures,
)
from marketing_contracts.conformance.pytest_helpers import (
    assert_payload_conforms,
    assert_payload_fails,
)
from marketing_contracts.conformance.validators import (
    ConformanceResult,
    SchemaViolation,
    validate_conformance,
)

__all__ = [
    "ConformanceResult",
    "FixtureCase",
    "SchemaViolation",
    "assert_payload_conforms",
    "assert_payload_fails",
    "load_fixtures",
    "validate_conformance",
]
