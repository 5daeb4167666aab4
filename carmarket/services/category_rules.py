"""Structural rules for the category taxonomy.

Pure checks with no store access. The service calls them in a fixed order and
the first failure wins. Parent rules are picked by a single lookup on the
child's subType, so at most one of them runs for any write.
"""

import re
from typing import Optional, Union

from bson import ObjectId
from beanie import PydanticObjectId

from carmarket.exceptions import ValidationError
from carmarket.models.category import (
    CategorySubType,
    CategoryType,
    SUB_TYPES_BY_TYPE,
    VEHICLE_TYPED_SUB_TYPES,
    VehicleType,
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

VEHICLE_TYPE_CHOICES = ", ".join(vt.value for vt in VehicleType)


def slugify(name: str) -> str:
    """Lowercase, collapse every non-alphanumeric run to '-', strip edge hyphens."""
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


def _value(member) -> Optional[str]:
    return getattr(member, "value", member)


def parse_object_id(value: Union[str, ObjectId], message: str) -> PydanticObjectId:
    if isinstance(value, ObjectId):
        return PydanticObjectId(value)
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValidationError(message)
    return PydanticObjectId(value)


def parse_type(value: str) -> CategoryType:
    try:
        return CategoryType(value)
    except ValueError:
        choices = ", ".join(f"'{t.value}'" for t in CategoryType)
        raise ValidationError(
            f"Invalid category type. Must be one of: {choices}.", field="type"
        )


def check_sub_type(
    category_type: CategoryType, value: Optional[str]
) -> Optional[CategorySubType]:
    """Returns the subType as an enum, or None when it was not given."""
    if not value:
        return None
    allowed = SUB_TYPES_BY_TYPE[category_type]
    if value not in {sub_type.value for sub_type in allowed}:
        names = [f"'{sub_type.value}'" for sub_type in allowed]
        raise ValidationError(
            f"Invalid subType for {category_type.value} category. "
            f"Must be {', '.join(names[:-1])}, or {names[-1]}.",
            field="subType",
        )
    return CategorySubType(value)


def check_vehicle_type(
    category_type: CategoryType,
    sub_type: Optional[CategorySubType],
    value: Optional[str],
) -> Optional[VehicleType]:
    """
    Makes and models need one of the known vehicle types. Every other
    category (years included) never carries one, so the value is dropped.
    """
    if category_type != CategoryType.CAR or sub_type not in VEHICLE_TYPED_SUB_TYPES:
        return None
    try:
        return VehicleType(value)
    except ValueError:
        raise ValidationError(
            "vehicleType is required for car categories. "
            f"Must be one of: {VEHICLE_TYPE_CHOICES}",
            field="vehicleType",
        )


def require_parent(sub_type: Optional[CategorySubType], parent_category) -> None:
    if parent_category:
        return
    if sub_type == CategorySubType.CITY:
        raise ValidationError(
            "City categories must have a state category as parent.",
            field="parentCategory",
        )
    if sub_type == CategorySubType.STATE:
        raise ValidationError(
            "State categories must have a country category as parent.",
            field="parentCategory",
        )


# --- Parent rules, one per subType ---


def _city_parent(parent, vehicle_type: Optional[VehicleType]) -> None:
    # Only the immediate parent is checked; the state's own chain is not walked.
    if parent.sub_type == CategorySubType.STATE:
        return
    if parent.sub_type == CategorySubType.COUNTRY:
        raise ValidationError(
            "City categories must have a state category as parent, not a country. "
            "Please select a state.",
            field="parentCategory",
        )
    raise ValidationError(
        "City categories must have a state category as parent. "
        f'Received parent type: "{_value(parent.sub_type)}"',
        field="parentCategory",
    )


def _state_parent(parent, vehicle_type: Optional[VehicleType]) -> None:
    if parent.sub_type != CategorySubType.COUNTRY:
        raise ValidationError(
            "State categories must have a country category as parent.",
            field="parentCategory",
        )


def _model_parent(parent, vehicle_type: Optional[VehicleType]) -> None:
    if parent.sub_type != CategorySubType.MAKE:
        raise ValidationError(
            "Model categories must have a make category as parent.",
            field="parentCategory",
        )
    if vehicle_type and parent.vehicle_type != vehicle_type:
        raise ValidationError(
            f"Model vehicle type ({_value(vehicle_type)}) must match parent brand "
            f"vehicle type ({_value(parent.vehicle_type) or 'none'}).",
            field="vehicleType",
        )


PARENT_RULES = {
    CategorySubType.CITY: _city_parent,
    CategorySubType.STATE: _state_parent,
    CategorySubType.MODEL: _model_parent,
}


def check_parent(
    category_type: CategoryType,
    sub_type: Optional[CategorySubType],
    vehicle_type: Optional[VehicleType],
    parent,
) -> None:
    if category_type == CategoryType.LOCATION and parent.type != CategoryType.LOCATION:
        raise ValidationError(
            "Parent category must be a location type category. "
            f'Received type: "{_value(parent.type)}"',
            field="parentCategory",
        )
    rule = PARENT_RULES.get(sub_type)
    if rule is not None:
        rule(parent, vehicle_type)


# --- Duplicate detection ---


def duplicate_query(
    name: str,
    category_type: CategoryType,
    sub_type: Optional[CategorySubType],
    vehicle_type: Optional[VehicleType],
    parent_category: Optional[PydanticObjectId],
) -> dict:
    """Only the identity fields that are set take part in the match."""
    query = {"name": name.strip(), "type": category_type.value}
    if sub_type:
        query["sub_type"] = sub_type.value
    if vehicle_type:
        query["vehicle_type"] = vehicle_type.value
    if parent_category:
        query["parent_category"] = parent_category
    return query


def duplicate_message(name: str, vehicle_type: Optional[VehicleType]) -> str:
    suffix = f" for {vehicle_type.value}" if vehicle_type else ""
    return f'Category "{name.strip()}" already exists{suffix}.'
