"""Product bundle record contract with pricing and inventory helpers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from marketing_contracts.models import (
    DEFAULT_SETTINGS,
    InvariantViolation,
    ValidationSettings,
)


class PricingStrategy(str, Enum):
    """How the bundle price was derived."""

    FIXED_PRICE = "fixed_price"
    FIXED_DISCOUNT = "fixed_discount"
    PERCENTAGE_DISCOUNT = "percentage_discount"
    TIERED = "tiered"


class BundleAvailability(str, Enum):
    """Whether the bundle can currently be sold."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class BundleEntry(BaseModel):
    """One product line inside a bundle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    product_id: uuid.UUID = Field(..., description="Bundled product")
    unit_price: Decimal = Field(..., gt=0, description="Individual unit price")
    quantity: int = Field(..., ge=1, description="Units of the product included")


class BundleRecord(BaseModel):
    """Several products sold together below their combined price."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: uuid.UUID = Field(..., description="Bundle identifier")
    name: str = Field(..., min_length=1, max_length=255, description="Bundle name")
    description: str = Field("", description="Bundle description")
    entries: Tuple[BundleEntry, ...] = Field(
        ..., min_length=2, description="Bundled products (at least two)"
    )
    pricing_strategy: PricingStrategy = Field(..., description="Pricing strategy")
    bundle_price: Decimal = Field(..., gt=0, description="Price of the whole bundle")
    savings_amount: Decimal = Field(
        Decimal(0), ge=0, description="Advertised savings versus buying separately"
    )
    availability: BundleAvailability = Field(
        BundleAvailability.ACTIVE, description="Availability state"
    )
    valid_from: AwareDatetime = Field(..., description="Start of the validity window")
    valid_until: Optional[AwareDatetime] = Field(
        None, description="End of the validity window (None = open-ended)"
    )


def component_total(entries: Sequence[BundleEntry]) -> Decimal:
    """Sum of unit_price * quantity over entries."""
    return sum((e.unit_price * e.quantity for e in entries), Decimal(0))


def check_bundle_invariants(
    record: BundleRecord,
    violations: List[InvariantViolation],
    settings: ValidationSettings,
) -> None:
    """Append pricing, composition and validity-window violations for record."""
    total = component_total(record.entries)
    if record.bundle_price >= total:
        violations.append(
            InvariantViolation(
                rule="component_sum",
                fields=("bundle_price", "entries"),
                message=(
                    f"bundle price not less than component sum "
                    f"({record.bundle_price} >= {total})"
                ),
            )
        )

    if record.savings_amount > total:
        violations.append(
            InvariantViolation(
                rule="savings_bound",
                fields=("savings_amount", "entries"),
                message=f"savings {record.savings_amount} exceed component sum {total}",
            )
        )

    product_ids = [e.product_id for e in record.entries]
    if len(set(product_ids)) != len(product_ids):
        violations.append(
            InvariantViolation(
                rule="duplicate_products",
                fields=("entries",),
                message="bundle cannot contain duplicate products",
            )
        )

    if len(record.entries) > settings.max_bundle_entries:
        violations.append(
            InvariantViolation(
                rule="max_entries",
                fields=("entries",),
                message=(
                    f"bundle cannot contain more than "
                    f"{settings.max_bundle_entries} products"
                ),
            )
        )

    if record.valid_until is not None and record.valid_until <= record.valid_from:
        violations.append(
            InvariantViolation(
                rule="validity_window",
                fields=("valid_from", "valid_until"),
                message="valid_until must be after valid_from",
            )
        )


# ---------------------------------------------------------------------------
# Pricing helpers
# ---------------------------------------------------------------------------


def savings_percentage(record: BundleRecord) -> Decimal:
    """Percentage saved against the component sum (0 when the sum is 0)."""
    total = component_total(record.entries)
    if total <= 0:
        return Decimal(0)
    saved = max(Decimal(0), total - record.bundle_price)
    return saved / total * 100


def has_meaningful_savings(
    record: BundleRecord,
    threshold: Optional[int] = None,
    settings: Optional[ValidationSettings] = None,
) -> bool:
    """True if the savings percentage reaches threshold.

    threshold defaults to settings.meaningful_savings_percentage.
    """
    if threshold is None:
        threshold = (settings or DEFAULT_SETTINGS).meaningful_savings_percentage
    return savings_percentage(record) >= threshold


# ---------------------------------------------------------------------------
# Inventory helpers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InventoryShortage:
    """A product without enough stock for the requested bundle quantity."""

    product_id: uuid.UUID
    required: int
    available: int


@dataclass(frozen=True)
class InventoryCheck:
    """Result of checking stock for a bundle order."""

    available: bool
    shortages: Tuple[InventoryShortage, ...] = ()


def inventory_impact(
    entries: Sequence[BundleEntry], bundle_quantity: int
) -> Dict[uuid.UUID, int]:
    """Units of each product consumed by bundle_quantity bundles."""
    return {e.product_id: e.quantity * bundle_quantity for e in entries}


def check_inventory(
    entries: Sequence[BundleEntry],
    bundle_quantity: int,
    stock_levels: Mapping[uuid.UUID, int],
) -> InventoryCheck:
    shortages: List[InventoryShortage] = []
    for product_id, required in inventory_impact(entries, bundle_quantity).items():
        available = stock_levels.get(product_id, 0)
        if available < required:
            shortages.append(
                InventoryShortage(
                    product_id=product_id, required=required, available=available
                )
            )
    return InventoryCheck(available=not shortages, shortages=tuple(shortages))


def max_bundle_quantity(
    entries: Sequence[BundleEntry], stock_levels: Mapping[uuid.UUID, int]
) -> int:
    """Largest number of bundles the current stock can fill."""
    if not entries:
        return 0
    return min(stock_levels.get(e.product_id, 0) // e.quantity for e in entries)
