from enum import Enum
from beanie import PydanticObjectId
from pydantic import BaseModel


class UserRole(str, Enum):
    """Marketplace account roles carried in the access token."""

    INDIVIDUAL = "individual"
    DEALER = "dealer"
    ADMIN = "admin"


class Actor(BaseModel):
    """The authenticated identity performing a request."""

    id: PydanticObjectId
    role: UserRole
