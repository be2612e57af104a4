"""Product content record contract."""

import uuid
from typing import Annotated, FrozenSet, List, Optional, Tuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from marketing_contracts.models import (
    InvariantViolation,
    SecureUrl,
    ValidationSettings,
)
from marketing_contracts.workflow import WorkflowState

PUBLISHED_STATES: FrozenSet[WorkflowState] = frozenset({
    WorkflowState.PUBLISHED,
    WorkflowState.ARCHIVED,
})

APPROVED_STATES: FrozenSet[WorkflowState] = frozenset({
    WorkflowState.APPROVED,
    WorkflowState.PUBLISHED,
    WorkflowState.ARCHIVED,
})

Keyword = Annotated[str, Field(min_length=1, max_length=50)]


class ContentRecord(BaseModel):
    """Marketing content attached to a product and moved through review."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: uuid.UUID = Field(..., description="Content identifier")
    product_id: uuid.UUID = Field(
        ..., description="Identifier of the product this content describes"
    )
    title: str = Field(
        ..., min_length=1, max_length=255, description="Marketing title"
    )
    description: str = Field(
        "", max_length=5000, description="Marketing description"
    )
    image_urls: Tuple[SecureUrl, ...] = Field(
        default_factory=tuple,
        max_length=10,
        description="Featured and gallery image URLs (https only)",
    )
    keywords: Tuple[Keyword, ...] = Field(
        default_factory=tuple, max_length=20, description="SEO keywords"
    )
    workflow_state: WorkflowState = Field(
        WorkflowState.DRAFT, description="Current workflow state"
    )
    priority: int = Field(1, ge=1, le=5, description="Content priority (1-5)")
    created_by: str = Field(
        ..., min_length=1, description="Identifier of the content author"
    )
    approved_by: Optional[str] = Field(
        None, min_length=1, description="Identifier of the approver"
    )
    published_at: Optional[AwareDatetime] = Field(
        None, description="When the content was published"
    )
    version: int = Field(1, ge=1, description="Monotonic version counter")


def check_content_invariants(
    record: ContentRecord,
    violations: List[InvariantViolation],
    settings: ValidationSettings,
) -> None:
    """Append publish/approval consistency violations for record."""
    state = record.workflow_state
    if record.published_at is not None and state not in PUBLISHED_STATES:
        violations.append(
            InvariantViolation(
                rule="publish_state",
                fields=("published_at", "workflow_state"),
                message=(
                    f"published_at may only be set once content is published; "
                    f"workflow_state is {state.value}"
                ),
            )
        )
    if record.approved_by is not None and state not in APPROVED_STATES:
        violations.append(
            InvariantViolation(
                rule="approval_state",
                fields=("approved_by", "workflow_state"),
                message=(
                    f"approved_by may only be set once content is approved; "
                    f"workflow_state is {state.value}"
                ),
            )
        )
