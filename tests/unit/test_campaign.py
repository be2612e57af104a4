"""Unit tests for the CampaignRecord contract, invariants and lifecycle helpers."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List

import pytest

from marketing_contracts import (
    CAMPAIGN_TRANSITIONS,
    TERMINAL_CAMPAIGN_STATUSES,
    CampaignRecord,
    CampaignStatus,
    CampaignType,
    DiscountType,
    ValidationSettings,
    can_activate,
    can_transition_campaign,
    check_invariants,
    duration_in_days,
    expected_metrics,
    has_expired,
    is_currently_active,
    is_eligible_for_metrics,
    validate,
    validate_record,
    valid_campaign_transitions,
)


VALID_CAMPAIGN_DATA: Dict[str, Any] = {
    "id": "550e8400-e29b-41d4-a716-446655440000",
    "name": "Summer Harvest Sale",
    "campaign_type": "seasonal",
    "status": "planned",
    "start_date": "2025-01-01T00:00:00Z",
    "end_date": "2025-01-02T00:00:00Z",
    "discount_type": "percentage",
    "discount_value": 15,
}


def _rules(result: Any) -> List[str]:
    return [v.rule for v in result.invariant_violations]


# ---------------------------------------------------------------------------
# Construction and field constraints
# ---------------------------------------------------------------------------


class TestCampaignConstruction:

    def test_valid_construction(self) -> None:
        record = CampaignRecord(**VALID_CAMPAIGN_DATA)
        assert record.campaign_type is CampaignType.SEASONAL
        assert record.status is CampaignStatus.PLANNED
        assert record.discount_type is DiscountType.PERCENTAGE
        assert record.discount_value == Decimal(15)
        assert record.start_date == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert record.target_product_ids == ()
        assert record.rules.stackable is False
        assert record.metrics.views == 0

    def test_nested_rules_and_metrics(self) -> None:
        data = {
            **VALID_CAMPAIGN_DATA,
            "rules": {"min_purchase_amount": 20, "max_uses_per_customer": 2},
            "metrics": {"views": 100, "clicks": 10, "conversions": 2, "revenue": "45.50"},
        }
        record = CampaignRecord(**data)
        assert record.rules.min_purchase_amount == Decimal(20)
        assert record.metrics.revenue == Decimal("45.50")

    def test_collections_are_immutable(self) -> None:
        data = {
            **VALID_CAMPAIGN_DATA,
            "target_product_ids": ["123e4567-e89b-12d3-a456-426614174001"],
            "rules": {"customer_segments": ["loyal"]},
        }
        record = CampaignRecord(**data)
        assert isinstance(record.target_product_ids, tuple)
        assert record.rules.customer_segments == ("loyal",)
        with pytest.raises(AttributeError):
            record.target_product_ids.clear()  # type: ignore[attr-defined]

    def test_status_defaults_to_planned(self) -> None:
        data = {k: v for k, v in VALID_CAMPAIGN_DATA.items() if k != "status"}
        assert CampaignRecord(**data).status is CampaignStatus.PLANNED


class TestCampaignFieldConstraints:

    @pytest.mark.parametrize("field, value", [
        ("campaign_type", "flash"),
        ("status", "running"),
        ("discount_type", "coupon"),
    ])
    def test_closed_sets(self, field: str, value: str) -> None:
        result = validate({**VALID_CAMPAIGN_DATA, field: value}, "campaign")
        assert not result.valid
        assert result.field_violations[0].field == field
        assert result.field_violations[0].constraint == "enum"

    def test_negative_discount(self) -> None:
        result = validate({**VALID_CAMPAIGN_DATA, "discount_value": -1}, "campaign")
        assert result.field_violations[0].field == "discount_value"

    def test_start_date_not_a_timestamp(self) -> None:
        result = validate({**VALID_CAMPAIGN_DATA, "start_date": "next tuesday"}, "campaign")
        assert result.field_violations[0].field == "start_date"

    def test_nested_rule_violation_path(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "rules": {"max_uses_per_customer": 0}}
        result = validate(data, "campaign")
        assert result.field_violations[0].field == "rules.max_uses_per_customer"

    def test_negative_metric(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "metrics": {"clicks": -3}}
        result = validate(data, "campaign")
        assert result.field_violations[0].field == "metrics.clicks"

    def test_target_products_must_be_uuids(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "target_product_ids": ["prod-1"]}
        result = validate(data, "campaign")
        assert result.field_violations[0].field == "target_product_ids.0"


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


class TestCampaignInvariants:

    def test_end_one_day_after_start_accepted(self) -> None:
        result = validate_record(VALID_CAMPAIGN_DATA, "campaign")
        assert result.valid
        assert isinstance(result.record, CampaignRecord)

    def test_end_equal_to_start_rejected(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "end_date": "2025-01-01T00:00:00Z"}
        result = validate_record(data, "campaign")
        assert not result.valid
        assert result.record is None
        assert _rules(result) == ["date_order"]
        assert result.invariant_violations[0].message == "end before or equal to start"

    def test_end_before_start_rejected(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "end_date": "2024-12-31T00:00:00Z"}
        assert _rules(validate_record(data, "campaign")) == ["date_order"]

    def test_dates_compared_across_offsets(self) -> None:
        # 2025-01-01T01:00:00+01:00 is the same instant as the start.
        data = {**VALID_CAMPAIGN_DATA, "end_date": "2025-01-01T01:00:00+01:00"}
        assert _rules(validate_record(data, "campaign")) == ["date_order"]

    def test_percentage_of_100_accepted(self) -> None:
        assert validate_record({**VALID_CAMPAIGN_DATA, "discount_value": 100}, "campaign").valid

    def test_percentage_over_100_rejected(self) -> None:
        result = validate_record({**VALID_CAMPAIGN_DATA, "discount_value": "100.01"}, "campaign")
        assert _rules(result) == ["percentage_bound"]
        assert result.invariant_violations[0].message == "percentage exceeds 100"

    def test_fixed_amount_over_100_accepted(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "discount_type": "fixed_amount", "discount_value": 250}
        assert validate_record(data, "campaign").valid

    def test_active_promotional_needs_discount(self) -> None:
        data = {
            **VALID_CAMPAIGN_DATA,
            "campaign_type": "promotional",
            "status": "active",
            "discount_value": 0,
        }
        assert _rules(validate_record(data, "campaign")) == ["promotional_discount"]

    def test_planned_promotional_without_discount_accepted(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "campaign_type": "promotional", "discount_value": 0}
        assert validate_record(data, "campaign").valid

    def test_clearance_minimum(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "campaign_type": "clearance", "discount_value": 24}
        assert _rules(validate_record(data, "campaign")) == ["clearance_minimum"]
        data["discount_value"] = 25
        assert validate_record(data, "campaign").valid

    def test_clearance_minimum_is_configurable(self) -> None:
        data = {**VALID_CAMPAIGN_DATA, "campaign_type": "clearance", "discount_value": 24}
        settings = ValidationSettings(clearance_min_discount=20)
        assert validate_record(data, "campaign", settings).valid

    def test_invariant_violations_are_aggregated(self) -> None:
        data = {
            **VALID_CAMPAIGN_DATA,
            "end_date": "2025-01-01T00:00:00Z",
            "discount_value": 150,
        }
        assert set(_rules(validate_record(data, "campaign"))) == {
            "date_order", "percentage_bound",
        }

    def test_check_invariants_on_typed_record(self) -> None:
        record = CampaignRecord(**{**VALID_CAMPAIGN_DATA, "discount_value": 101})
        assert _rules(check_invariants(record)) == ["percentage_bound"]


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestCampaignLifecycle:

    @pytest.mark.parametrize("current, requested", [
        ("planned", "active"),
        ("planned", "cancelled"),
        ("active", "paused"),
        ("active", "completed"),
        ("active", "cancelled"),
        ("paused", "active"),
        ("paused", "cancelled"),
    ])
    def test_allowed(self, current: str, requested: str) -> None:
        assert can_transition_campaign(CampaignStatus(current), CampaignStatus(requested))

    @pytest.mark.parametrize("current, requested", [
        ("planned", "completed"),
        ("planned", "paused"),
        ("paused", "completed"),
        ("completed", "active"),
        ("cancelled", "planned"),
    ])
    def test_rejected(self, current: str, requested: str) -> None:
        assert not can_transition_campaign(CampaignStatus(current), CampaignStatus(requested))

    def test_terminal_statuses_have_no_exits(self) -> None:
        for status in TERMINAL_CAMPAIGN_STATUSES:
            assert valid_campaign_transitions(status) == frozenset()

    def test_table_covers_every_status(self) -> None:
        assert set(CAMPAIGN_TRANSITIONS) == set(CampaignStatus)


class TestCampaignScheduling:

    NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def _record(self, **overrides: Any) -> CampaignRecord:
        return CampaignRecord(**{**VALID_CAMPAIGN_DATA, **overrides})

    def test_is_currently_active(self) -> None:
        assert is_currently_active(self._record(status="active"), self.NOW)
        assert not is_currently_active(self._record(status="paused"), self.NOW)
        assert not is_currently_active(
            self._record(status="active"), self.NOW + timedelta(days=2)
        )

    def test_has_expired(self) -> None:
        record = self._record()
        assert not has_expired(record, self.NOW)
        assert has_expired(record, self.NOW + timedelta(days=1))

    def test_can_activate(self) -> None:
        assert can_activate(self._record(), self.NOW)
        assert not can_activate(self._record(status="active"), self.NOW)
        assert not can_activate(self._record(), self.NOW + timedelta(days=3))

    def test_duration_rounds_up(self) -> None:
        assert duration_in_days(self._record()) == 1
        assert duration_in_days(self._record(end_date="2025-01-03T06:00:00Z")) == 3

    def test_metrics_eligibility(self) -> None:
        assert is_eligible_for_metrics(self._record(status="active"))
        assert is_eligible_for_metrics(self._record(status="completed"))
        assert not is_eligible_for_metrics(self._record(status="planned"))

    def test_expected_metrics(self) -> None:
        assert expected_metrics(CampaignType.NEW_PRODUCT) == ("views", "clicks", "conversions")
        assert "revenue" in expected_metrics(CampaignType.CLEARANCE)
