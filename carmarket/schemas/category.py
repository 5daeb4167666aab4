# carmarket/schemas/category.py
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# --- Request Schemas ---
# Enumerated fields stay plain strings here so the category rules can
# reject them with their own messages, in their own order.


class CategoryCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None
    sub_type: Optional[str] = None
    parent_category: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None
    vehicle_type: Optional[str] = None


class CategoryUpdate(CamelModel):
    """Every field is optional; only fields present in the body are applied."""

    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    sub_type: Optional[str] = None
    parent_category: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None
    vehicle_type: Optional[str] = None


# --- Response Schemas ---


class CategoryPublic(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    slug: str
    description: str = ""
    image: Optional[str] = None
    type: str
    sub_type: Optional[str] = None
    vehicle_type: Optional[str] = None
    parent_category: Optional[str] = None
    is_active: bool = True
    order: int = 0
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "parent_category", "created_by", mode="before")
    @classmethod
    def _object_id_to_str(cls, value):
        return str(value) if value is not None else None

    @field_validator("type", "sub_type", "vehicle_type", mode="before")
    @classmethod
    def _enum_to_value(cls, value):
        return getattr(value, "value", value)


class CategoryResponse(BaseModel):
    success: bool = True
    message: str
    data: CategoryPublic


class CategoryListResponse(BaseModel):
    success: bool = True
    message: str
    data: List[CategoryPublic]
