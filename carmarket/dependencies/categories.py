# carmarket/dependencies/categories.py
from fastapi import Depends

from carmarket.services.category_repository import (
    BeanieCategoryRepository,
    CategoryRepository,
)
from carmarket.services.category_service import CategoryService


def get_category_repository() -> CategoryRepository:
    return BeanieCategoryRepository()


def get_category_service(
    repository: CategoryRepository = Depends(get_category_repository),
) -> CategoryService:
    return CategoryService(repository)
