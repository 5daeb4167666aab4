# carmarket/routes/categories.py
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from carmarket.schemas.auth import Actor
from carmarket.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryPublic,
    CategoryResponse,
    CategoryListResponse,
)
from carmarket.schemas.misc import Message
from carmarket.services.category_service import CategoryService
from carmarket.dependencies.auth import require_admin
from carmarket.dependencies.categories import get_category_service

router = APIRouter()


# --- Public Endpoints ---


@router.get("", response_model=CategoryListResponse)
async def get_all_categories(
    type: Optional[str] = Query(default=None),
    sub_type: Optional[str] = Query(default=None, alias="subType"),
    parent_category: Optional[str] = Query(default=None, alias="parentCategory"),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    vehicle_type: Optional[str] = Query(default=None, alias="vehicleType"),
    service: CategoryService = Depends(get_category_service),
):
    """Lists categories, filtered by any combination of the query parameters."""
    categories = await service.list_categories(
        type=type,
        sub_type=sub_type,
        parent_category=parent_category,
        is_active=is_active,
        vehicle_type=vehicle_type,
    )
    return CategoryListResponse(
        message="Categories retrieved successfully.",
        data=[CategoryPublic.model_validate(category) for category in categories],
    )


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category_by_id(
    category_id: str, service: CategoryService = Depends(get_category_service)
):
    category = await service.get_category(category_id)
    return CategoryResponse(
        message="Category retrieved successfully.",
        data=CategoryPublic.model_validate(category),
    )


@router.get("/{category_id}/ancestors", response_model=CategoryListResponse)
async def get_category_ancestors(
    category_id: str, service: CategoryService = Depends(get_category_service)
):
    """Returns the parent chain of a category, root first (e.g. country, state)."""
    ancestors = await service.get_ancestors(category_id)
    return CategoryListResponse(
        message="Category ancestors retrieved successfully.",
        data=[CategoryPublic.model_validate(category) for category in ancestors],
    )


# --- Admin Endpoints ---


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_create: CategoryCreate,
    current_actor: Actor = Depends(require_admin("create")),
    service: CategoryService = Depends(get_category_service),
):
    """Creates a new category (admin only)."""
    category = await service.create_category(category_create, current_actor)
    return CategoryResponse(
        message="Category created successfully.",
        data=CategoryPublic.model_validate(category),
    )


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    current_actor: Actor = Depends(require_admin("update")),
    service: CategoryService = Depends(get_category_service),
):
    """Updates an existing category (admin only)."""
    category = await service.update_category(
        category_id, category_update, current_actor
    )
    return CategoryResponse(
        message="Category updated successfully.",
        data=CategoryPublic.model_validate(category),
    )


@router.delete("/{category_id}", response_model=Message)
async def delete_category(
    category_id: str,
    current_actor: Actor = Depends(require_admin("delete")),
    service: CategoryService = Depends(get_category_service),
):
    """Deletes a category (admin only). Child categories are left in place."""
    await service.delete_category(category_id, current_actor)
    return Message(message="Category deleted successfully.")
