from typing import Optional

from pydantic import BaseModel, Field

from backend.legislation.models import ResponseMetadata
from uslex.requirements.models import RequirementRow


class RequirementComparison(BaseModel):
    """Compare one requirement category side by side across jurisdictions."""

    category: str = Field(
        description="Requirement category.",
        examples=["breach_notification", "privacy_rights", "cybersecurity"],
    )
    subcategory: Optional[str] = Field(
        default=None,
        description="Subcategory to narrow to. If not provided, every subcategory is included.",
        examples=["timeline", "right_to_delete"],
    )
    jurisdictions: list[str] = Field(
        description='Jurisdiction codes to compare, or ["all"] for every jurisdiction.',
        examples=[["US-CA", "US-NY", "US-TX"], ["all"]],
    )


class StateRequirementsLookup(BaseModel):
    """Every classified requirement of one jurisdiction."""

    jurisdiction: str = Field(description="Jurisdiction code.", examples=["US-CA"])
    category: Optional[str] = Field(
        default=None, description="Only return one category. If not provided, all are returned."
    )


class RequirementsResponse(BaseModel):
    results: list[RequirementRow]
    metadata: ResponseMetadata
