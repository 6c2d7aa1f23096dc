"""
Input validation schemas using Pydantic for the chart API.

These guard the HTTP boundary only; values that pass are still run through the
normalizer, which has the final say on categories and allergen values.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional


class ManualFlavorInput(BaseModel):
    """Schema for a manually added flavor."""
    name: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = None
    attributes: Dict[str, str] = Field(default_factory=dict)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Flavor name cannot be blank."""
        if not v.strip():
            raise ValueError('Please enter a flavor name.')
        return v.strip()


class ToggleInput(BaseModel):
    name: str = Field(..., min_length=1)


class CategoryToggleInput(BaseModel):
    category: str = Field(..., min_length=1)


class SearchInput(BaseModel):
    text: str = Field(default="", max_length=200)


class UiStateInput(BaseModel):
    """Partial UI update; omitted fields keep their current value."""
    split_by_category: Optional[bool] = None
    active_categories: Optional[List[str]] = None
    store_label: Optional[str] = Field(default=None, max_length=120)

    @field_validator('store_label')
    @classmethod
    def strip_label(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    def to_overlay(self) -> dict:
        return self.model_dump(exclude_none=True)


class ShareApplyInput(BaseModel):
    token: str = Field(..., max_length=20000)
