"""Marketing campaign record contract and lifecycle helpers.

Sections:
    1. Enums
    2. Campaign models
    3. Invariants
    4. Campaign status lifecycle
    5. Scheduling and metrics helpers
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional, Tuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from marketing_contracts.models import InvariantViolation, ValidationSettings

# ── Section 1: Enums ─────────────────────────────────────────────────────────


class CampaignType(str, Enum):
    """Kinds of marketing campaign."""

    SEASONAL = "seasonal"
    PROMOTIONAL = "promotional"
    NEW_PRODUCT = "new_product"
    CLEARANCE = "clearance"


class CampaignStatus(str, Enum):
    """Campaign lifecycle statuses."""

    PLANNED = "planned"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DiscountType(str, Enum):
    """How a campaign discount is expressed."""

    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    BUY_X_GET_Y = "buy_x_get_y"
    FREE_SHIPPING = "free_shipping"


PERCENTAGE_CEILING = Decimal(100)

# ── Section 2: Campaign models ───────────────────────────────────────────────


class CampaignRules(BaseModel):
    """Eligibility rules attached to a campaign."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_purchase_amount: Decimal = Field(
        Decimal(0), ge=0, description="Minimum order value to qualify"
    )
    max_uses_per_customer: Optional[int] = Field(
        None, ge=1, description="Redemption limit per customer (None = unlimited)"
    )
    customer_segments: Tuple[str, ...] = Field(
        default_factory=tuple, description="Targeted customer segments"
    )
    stackable: bool = Field(
        False, description="Whether the discount combines with other campaigns"
    )


class CampaignMetrics(BaseModel):
    """Point-in-time performance snapshot for a campaign."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    views: int = Field(0, ge=0)
    clicks: int = Field(0, ge=0)
    conversions: int = Field(0, ge=0)
    revenue: Decimal = Field(Decimal(0), ge=0)


class CampaignRecord(BaseModel):
    """A time-boxed marketing campaign over a set of products."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: uuid.UUID = Field(..., description="Campaign identifier")
    name: str = Field(
        ..., min_length=1, max_length=255, description="Campaign name"
    )
    description: Optional[str] = Field(None, description="Campaign description")
    campaign_type: CampaignType = Field(..., description="Campaign type")
    status: CampaignStatus = Field(
        CampaignStatus.PLANNED, description="Lifecycle status"
    )
    start_date: AwareDatetime = Field(..., description="Campaign start")
    end_date: AwareDatetime = Field(..., description="Campaign end")
    discount_type: DiscountType = Field(..., description="Discount type")
    discount_value: Decimal = Field(
        ..., ge=0, description="Discount magnitude (percent or currency amount)"
    )
    target_product_ids: Tuple[uuid.UUID, ...] = Field(
        default_factory=tuple, description="Products the campaign applies to"
    )
    rules: CampaignRules = Field(
        default_factory=CampaignRules, description="Eligibility rules"
    )
    metrics: CampaignMetrics = Field(
        default_factory=CampaignMetrics, description="Performance snapshot"
    )
    target_audience: Optional[str] = Field(None, description="Audience summary")
    created_by: Optional[str] = Field(None, description="Campaign owner")


# ── Section 3: Invariants ────────────────────────────────────────────────────


def check_campaign_invariants(
    record: CampaignRecord,
    violations: List[InvariantViolation],
    settings: ValidationSettings,
) -> None:
    """Append date, discount and campaign-type violations for record."""
    if record.end_date <= record.start_date:
        violations.append(
            InvariantViolation(
                rule="date_order",
                fields=("start_date", "end_date"),
                message="end before or equal to start",
            )
        )

    is_percentage = record.discount_type is DiscountType.PERCENTAGE
    if is_percentage and record.discount_value > PERCENTAGE_CEILING:
        violations.append(
            InvariantViolation(
                rule="percentage_bound",
                fields=("discount_type", "discount_value"),
                message="percentage exceeds 100",
            )
        )

    if (
        record.status is CampaignStatus.ACTIVE
        and record.campaign_type is CampaignType.PROMOTIONAL
        and record.discount_value <= 0
    ):
        violations.append(
            InvariantViolation(
                rule="promotional_discount",
                fields=("status", "campaign_type", "discount_value"),
                message="active promotional campaigns need a positive discount",
            )
        )

    if (
        record.campaign_type is CampaignType.CLEARANCE
        and is_percentage
        and record.discount_value < settings.clearance_min_discount
    ):
        violations.append(
            InvariantViolation(
                rule="clearance_minimum",
                fields=("campaign_type", "discount_value"),
                message=(
                    f"clearance campaigns need at least "
                    f"{settings.clearance_min_discount}% discount"
                ),
            )
        )


# ── Section 4: Campaign status lifecycle ─────────────────────────────────────

TERMINAL_CAMPAIGN_STATUSES: FrozenSet[CampaignStatus] = frozenset({
    CampaignStatus.COMPLETED,
    CampaignStatus.CANCELLED,
})

CAMPAIGN_TRANSITIONS: Mapping[CampaignStatus, FrozenSet[CampaignStatus]] = MappingProxyType({
    CampaignStatus.PLANNED: frozenset({CampaignStatus.ACTIVE, CampaignStatus.CANCELLED}),
    CampaignStatus.ACTIVE: frozenset({
        CampaignStatus.PAUSED, CampaignStatus.COMPLETED, CampaignStatus.CANCELLED,
    }),
    CampaignStatus.PAUSED: frozenset({CampaignStatus.ACTIVE, CampaignStatus.CANCELLED}),
    CampaignStatus.COMPLETED: frozenset(),
    CampaignStatus.CANCELLED: frozenset(),
})


def valid_campaign_transitions(status: CampaignStatus) -> FrozenSet[CampaignStatus]:
    """Statuses reachable from status in one step."""
    return CAMPAIGN_TRANSITIONS[CampaignStatus(status)]


def can_transition_campaign(current: CampaignStatus, requested: CampaignStatus) -> bool:
    return CampaignStatus(requested) in valid_campaign_transitions(current)


# ── Section 5: Scheduling and metrics helpers ───────────────────────────────


def can_activate(record: CampaignRecord, now: datetime) -> bool:
    """A planned campaign may go live if it has not ended and did not start
    more than a day ago."""
    if record.status is not CampaignStatus.PLANNED:
        return False
    return record.start_date >= now - timedelta(days=1) and record.end_date > now


def is_currently_active(record: CampaignRecord, now: datetime) -> bool:
    if record.status is not CampaignStatus.ACTIVE:
        return False
    return record.start_date <= now <= record.end_date


def has_expired(record: CampaignRecord, now: datetime) -> bool:
    return now > record.end_date


def duration_in_days(record: CampaignRecord) -> int:
    """Campaign length in whole days, rounded up."""
    seconds = abs((record.end_date - record.start_date).total_seconds())
    return math.ceil(seconds / 86400)


def is_eligible_for_metrics(record: CampaignRecord) -> bool:
    return record.status in (CampaignStatus.ACTIVE, CampaignStatus.COMPLETED)


_EXPECTED_METRICS: Mapping[CampaignType, Tuple[str, ...]] = MappingProxyType({
    CampaignType.PROMOTIONAL: ("views", "clicks", "conversions", "revenue"),
    CampaignType.CLEARANCE: ("views", "clicks", "conversions", "revenue"),
    CampaignType.SEASONAL: ("views", "clicks", "conversions", "revenue"),
    CampaignType.NEW_PRODUCT: ("views", "clicks", "conversions"),
})


def expected_metrics(campaign_type: CampaignType) -> Tuple[str, ...]:
    """Metric names collected for a campaign type."""
    return _EXPECTED_METRICS[CampaignType(campaign_type)]
