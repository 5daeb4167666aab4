"""Pytest configuration and fixtures for the category taxonomy service.

The service and HTTP tests run against an in-memory repository that
implements the CategoryRepository protocol, so no MongoDB is needed.
Tests marked requires_db use the real Beanie repository instead.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGO_DB", "carmarket_test")

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pytest
from beanie import PydanticObjectId, init_beanie
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field
from pymongo import AsyncMongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from carmarket.dependencies.categories import get_category_repository
from carmarket.main import app
from carmarket.models.category import Category, CategorySubType, CategoryType, VehicleType
from carmarket.schemas.auth import Actor, UserRole
from carmarket.services.auth_service import AuthService
from carmarket.services.category_repository import BeanieCategoryRepository
from carmarket.services.category_service import CategoryService

_EPOCH = datetime(2024, 1, 1)


class StoredCategory(BaseModel):
    """Plain stand-in for the Beanie Category document."""

    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    name: str
    slug: str
    description: str = ""
    image: Optional[str] = None
    type: CategoryType
    sub_type: Optional[CategorySubType] = None
    vehicle_type: Optional[VehicleType] = None
    parent_category: Optional[PydanticObjectId] = None
    is_active: bool = True
    order: int = 0
    created_by: Optional[PydanticObjectId] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class InMemoryCategoryRepository:
    def __init__(self):
        self.documents: Dict[PydanticObjectId, StoredCategory] = {}
        self.raise_duplicate_key = False
        self._ticks = 0

    def _matches(self, document: StoredCategory, query: Dict[str, Any]) -> bool:
        return all(getattr(document, key) == value for key, value in query.items())

    async def get(self, category_id):
        return self.documents.get(category_id)

    async def find_one(self, query, exclude_id=None):
        for document in self.documents.values():
            if document.id != exclude_id and self._matches(document, query):
                return document
        return None

    async def find(self, query) -> List[StoredCategory]:
        matches = [d for d in self.documents.values() if self._matches(d, query)]
        return sorted(matches, key=lambda d: (d.order, -d.created_at.timestamp()))

    async def insert(self, fields):
        if self.raise_duplicate_key:
            raise DuplicateKeyError("E11000 duplicate key error")
        self._ticks += 1
        stamp = _EPOCH + timedelta(seconds=self._ticks)
        document = StoredCategory(**fields, created_at=stamp, updated_at=stamp)
        self.documents[document.id] = document
        return document

    async def update(self, category, changes):
        if self.raise_duplicate_key:
            raise DuplicateKeyError("E11000 duplicate key error")
        for key, value in changes.items():
            setattr(category, key, value)
        return category

    async def delete(self, category):
        self.documents.pop(category.id, None)


@pytest.fixture
def repository() -> InMemoryCategoryRepository:
    return InMemoryCategoryRepository()


@pytest.fixture
def service(repository) -> CategoryService:
    return CategoryService(repository)


@pytest.fixture
def admin() -> Actor:
    return Actor(id=PydanticObjectId(), role=UserRole.ADMIN)


def _bearer(role: str, sub: Optional[str] = None) -> Dict[str, str]:
    token = AuthService().create_access_token(
        {"sub": sub or str(PydanticObjectId()), "role": role}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return _bearer("admin")


@pytest.fixture
def dealer_headers() -> Dict[str, str]:
    return _bearer("dealer")


@pytest.fixture
async def client(repository) -> AsyncClient:
    """Async HTTP client against the FastAPI app, wired to the in-memory repository."""
    app.dependency_overrides[get_category_repository] = lambda: repository
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def mongo_repository():
    """BeanieCategoryRepository on a throwaway MongoDB database, dropped after the test.

    Requires MONGO_TEST_URI. Skips (pytest.skip) when it is unset or the server
    is unreachable. Use @pytest.mark.requires_db on tests that need this fixture;
    run without a database via: pytest -m 'not requires_db'.
    """
    uri = os.environ.get("MONGO_TEST_URI")
    if not uri:
        pytest.skip("MongoDB not configured: set MONGO_TEST_URI")

    mongo_client = AsyncMongoClient(uri, serverSelectionTimeoutMS=2000)
    try:
        await mongo_client.admin.command("ping")
    except PyMongoError as e:
        await mongo_client.close()
        pytest.skip(f"MongoDB not reachable at {uri}: {e}")

    database_name = f"carmarket_test_{PydanticObjectId()}"
    await init_beanie(database=mongo_client[database_name], document_models=[Category])
    try:
        yield BeanieCategoryRepository()
    finally:
        await mongo_client.drop_database(database_name)
        await mongo_client.close()
