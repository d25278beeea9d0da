from typing import Optional

from pydantic import BaseModel, Field, field_validator


class RequirementRow(BaseModel):
    """A jurisdiction's classified requirement, as shown side by side."""

    jurisdiction: str
    jurisdiction_name: Optional[str] = None
    category: str
    subcategory: str
    summary: str
    notification_days: Optional[int] = None
    notification_target: Optional[str] = None
    applies_to: Optional[str] = None
    threshold: Optional[str] = None
    penalty_max: Optional[str] = None
    private_right_of_action: bool = False
    law_title: Optional[str] = None
    law_short_name: Optional[str] = None
    section_number: Optional[str] = None
    effective_date: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("private_right_of_action", mode="before")
    @classmethod
    def coerce_flag(cls, value):
        """SQLite stores the flag as 0/1/NULL."""
        return bool(value)


class Classification(BaseModel):
    """One entry of the classifications seed file."""

    jurisdiction: str
    category: str
    subcategory: str
    law_short_name: Optional[str] = Field(
        default=None, description="Short name of the document the requirement comes from."
    )
    section_number: Optional[str] = None
    summary_text: str
    notification_days: Optional[int] = None
    notification_target: Optional[str] = None
    applies_to: Optional[str] = None
    threshold: Optional[str] = None
    penalty_max: Optional[str] = None
    private_right_of_action: Optional[bool] = None
    effective_date: Optional[str] = None
    last_amended: Optional[str] = None
    notes: Optional[str] = None
