# carmarket/services/category_repository.py
from typing import Any, Dict, List, Optional, Protocol

import pymongo
from beanie import PydanticObjectId

from carmarket.models.category import Category

# Display order first, newest first among equals
LIST_SORT = [("order", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]


class CategoryRepository(Protocol):
    """Store boundary for categories. Queries use the stored (snake_case) field names."""

    async def get(self, category_id: PydanticObjectId) -> Optional[Category]:
        ...

    async def find_one(
        self, query: Dict[str, Any], exclude_id: Optional[PydanticObjectId] = None
    ) -> Optional[Category]:
        ...

    async def find(self, query: Dict[str, Any]) -> List[Category]:
        """Returns every match sorted by LIST_SORT."""
        ...

    async def insert(self, fields: Dict[str, Any]) -> Category:
        ...

    async def update(self, category: Category, changes: Dict[str, Any]) -> Category:
        ...

    async def delete(self, category: Category) -> None:
        ...


class BeanieCategoryRepository:
    """CategoryRepository backed by the Beanie `Category` document."""

    async def get(self, category_id: PydanticObjectId) -> Optional[Category]:
        return await Category.get(category_id)

    async def find_one(
        self, query: Dict[str, Any], exclude_id: Optional[PydanticObjectId] = None
    ) -> Optional[Category]:
        if exclude_id is not None:
            query = {**query, "_id": {"$ne": exclude_id}}
        return await Category.find_one(query)

    async def find(self, query: Dict[str, Any]) -> List[Category]:
        return await Category.find(query).sort(LIST_SORT).to_list()

    async def insert(self, fields: Dict[str, Any]) -> Category:
        category = Category(**fields)
        await category.insert()
        return category

    async def update(self, category: Category, changes: Dict[str, Any]) -> Category:
        if changes:
            await category.set(changes)
        return category

    async def delete(self, category: Category) -> None:
        await category.delete()
