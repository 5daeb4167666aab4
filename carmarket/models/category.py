# carmarket/models/category.py
from enum import Enum
from typing import Optional
from datetime import datetime
import pymongo
from pymongo import IndexModel
from pydantic import Field
from beanie import Document, PydanticObjectId


class CategoryType(str, Enum):
    """Top-level taxonomy domains."""

    CAR = "car"
    LOCATION = "location"


class CategorySubType(str, Enum):
    """Role of a category inside its domain."""

    MAKE = "make"
    MODEL = "model"
    YEAR = "year"
    COUNTRY = "country"
    STATE = "state"
    CITY = "city"


class VehicleType(str, Enum):
    CAR = "Car"
    BUS = "Bus"
    TRUCK = "Truck"
    VAN = "Van"
    BIKE = "Bike"
    E_BIKE = "E-bike"


# Allowed subTypes for each domain
SUB_TYPES_BY_TYPE = {
    CategoryType.CAR: (CategorySubType.MAKE, CategorySubType.MODEL, CategorySubType.YEAR),
    CategoryType.LOCATION: (
        CategorySubType.COUNTRY,
        CategorySubType.STATE,
        CategorySubType.CITY,
    ),
}

# Only makes and models are tied to a vehicle type; years are shared.
VEHICLE_TYPED_SUB_TYPES = (CategorySubType.MAKE, CategorySubType.MODEL)


# --- Category Model ---
class Category(Document):
    """
    A node in the taxonomy graph: a make, model or year of the vehicle
    taxonomy, or a country, state or city of the location taxonomy.
    """

    name: str
    slug: str
    description: str = ""
    image: Optional[str] = None
    type: CategoryType
    sub_type: Optional[CategorySubType] = None
    vehicle_type: Optional[VehicleType] = None
    # Weak reference; deleting the parent leaves this dangling
    parent_category: Optional[PydanticObjectId] = None
    is_active: bool = True
    order: int = 0
    created_by: Optional[PydanticObjectId] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "categories"
        indexes = [
            IndexModel([("type", pymongo.ASCENDING), ("is_active", pymongo.ASCENDING)]),
            IndexModel(
                [
                    ("type", pymongo.ASCENDING),
                    ("sub_type", pymongo.ASCENDING),
                    ("is_active", pymongo.ASCENDING),
                ]
            ),
            IndexModel(
                [
                    ("type", pymongo.ASCENDING),
                    ("sub_type", pymongo.ASCENDING),
                    ("vehicle_type", pymongo.ASCENDING),
                    ("is_active", pymongo.ASCENDING),
                ]
            ),
            IndexModel([("parent_category", pymongo.ASCENDING)]),
            IndexModel(
                [
                    ("name", pymongo.ASCENDING),
                    ("type", pymongo.ASCENDING),
                    ("sub_type", pymongo.ASCENDING),
                    ("vehicle_type", pymongo.ASCENDING),
                    ("parent_category", pymongo.ASCENDING),
                ],
                unique=True,
                name="category_identity_unique",
            ),
        ]
