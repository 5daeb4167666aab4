# carmarket/services/category_service.py
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from pymongo.errors import DuplicateKeyError

from carmarket.exceptions import ConflictError, NotFoundError, ValidationError
from carmarket.models.category import Category, VEHICLE_TYPED_SUB_TYPES
from carmarket.schemas.auth import Actor
from carmarket.schemas.category import CategoryCreate, CategoryUpdate
from carmarket.services import category_rules as rules
from carmarket.services.category_repository import CategoryRepository

logger = logging.getLogger(__name__)

INVALID_ID_MESSAGE = "Invalid category ID."
INVALID_PARENT_ID_MESSAGE = "Invalid parent category ID."

# Patch fields that can change which parent rule applies
STRUCTURAL_FIELDS = {"sub_type", "parent_category", "vehicle_type"}


class CategoryService:
    def __init__(self, repository: CategoryRepository):
        self.repository = repository

    async def get_category(self, category_id: str) -> Category:
        """Fetches a single category, raising NotFoundError when it does not exist."""
        oid = rules.parse_object_id(category_id, INVALID_ID_MESSAGE)
        category = await self.repository.get(oid)
        if category is None:
            raise NotFoundError("Category not found.")
        return category

    async def _get_parent(self, parent_id: PydanticObjectId) -> Category:
        parent = await self.repository.get(parent_id)
        if parent is None:
            raise NotFoundError("Parent category not found.", field="parentCategory")
        return parent

    async def list_categories(
        self,
        type: Optional[str] = None,
        sub_type: Optional[str] = None,
        parent_category: Optional[str] = None,
        is_active: Optional[bool] = None,
        vehicle_type: Optional[str] = None,
    ) -> List[Category]:
        """Lists categories matching every given filter, in display order."""
        query: Dict[str, Any] = {}
        if type:
            query["type"] = type
        if sub_type:
            query["sub_type"] = sub_type
        if parent_category:
            query["parent_category"] = rules.parse_object_id(
                parent_category, INVALID_PARENT_ID_MESSAGE
            )
        if is_active is not None:
            query["is_active"] = is_active
        if vehicle_type:
            query["vehicle_type"] = vehicle_type
        return await self.repository.find(query)

    async def get_ancestors(self, category_id: str) -> List[Category]:
        """
        Returns the parent chain of a category, from the root down to its
        immediate parent. Stops at a dangling parent or a repeated id.
        """
        category = await self.get_category(category_id)
        ancestors = []
        seen = {category.id}
        parent_id = category.parent_category
        while parent_id is not None and parent_id not in seen:
            seen.add(parent_id)
            parent = await self.repository.get(parent_id)
            if parent is None:
                logger.warning(
                    f"Category {category.id} has a dangling ancestor {parent_id}"
                )
                break
            ancestors.append(parent)
            parent_id = parent.parent_category
        return ancestors[::-1]

    async def _ensure_unique(
        self,
        name,
        category_type,
        sub_type,
        vehicle_type,
        parent_id,
        exclude_id: Optional[PydanticObjectId] = None,
    ) -> None:
        query = rules.duplicate_query(
            name, category_type, sub_type, vehicle_type, parent_id
        )
        if await self.repository.find_one(query, exclude_id=exclude_id):
            raise ConflictError(rules.duplicate_message(name, vehicle_type))

    async def create_category(self, payload: CategoryCreate, actor: Actor) -> Category:
        """Validates and stores a new category on behalf of an admin."""
        name = (payload.name or "").strip()
        if not name or not payload.type:
            raise ValidationError("Name and type are required.")

        category_type = rules.parse_type(payload.type)
        sub_type = rules.check_sub_type(category_type, payload.sub_type)
        vehicle_type = rules.check_vehicle_type(
            category_type, sub_type, payload.vehicle_type
        )
        rules.require_parent(sub_type, payload.parent_category)

        parent_id = None
        if payload.parent_category:
            parent_id = rules.parse_object_id(
                payload.parent_category, INVALID_PARENT_ID_MESSAGE
            )
            parent = await self._get_parent(parent_id)
            rules.check_parent(category_type, sub_type, vehicle_type, parent)

        await self._ensure_unique(name, category_type, sub_type, vehicle_type, parent_id)

        fields = {
            "name": name,
            "slug": rules.slugify(name),
            "description": payload.description or "",
            "image": payload.image or None,
            "type": category_type,
            "sub_type": sub_type,
            "vehicle_type": vehicle_type,
            "parent_category": parent_id,
            "order": payload.order or 0,
            "is_active": payload.is_active if payload.is_active is not None else True,
            "created_by": actor.id,
        }
        try:
            category = await self.repository.insert(fields)
        except DuplicateKeyError:
            raise ConflictError(rules.duplicate_message(name, vehicle_type))

        logger.info(f"Category {category.id} ('{name}') created by {actor.id}")
        return category

    async def update_category(
        self, category_id: str, patch: CategoryUpdate, actor: Actor
    ) -> Category:
        """
        Applies a partial update. The structural rules run against the
        merged state: stored values overlaid with the fields sent in the patch.
        """
        category = await self.get_category(category_id)
        provided = patch.model_fields_set
        changes: Dict[str, Any] = {}

        name = category.name
        if "name" in provided and patch.name is not None:
            name = patch.name.strip()
            if not name:
                raise ValidationError("Name cannot be empty.", field="name")
            changes["name"] = name
            changes["slug"] = rules.slugify(name)

        sub_type = category.sub_type
        if "sub_type" in provided:
            sub_type = rules.check_sub_type(category.type, patch.sub_type)
            changes["sub_type"] = sub_type

        vehicle_type = category.vehicle_type
        if sub_type in VEHICLE_TYPED_SUB_TYPES:
            if "vehicle_type" in provided:
                vehicle_type = patch.vehicle_type
        else:
            # A vehicleType sent for any other subType is ignored
            vehicle_type = None

        parent_id = category.parent_category
        if "parent_category" in provided:
            parent_id = None
            if patch.parent_category:
                parent_id = rules.parse_object_id(
                    patch.parent_category, INVALID_PARENT_ID_MESSAGE
                )
            changes["parent_category"] = parent_id

        if provided & STRUCTURAL_FIELDS:
            vehicle_type = rules.check_vehicle_type(category.type, sub_type, vehicle_type)
            rules.require_parent(sub_type, parent_id)
            if parent_id is not None:
                parent = await self._get_parent(parent_id)
                rules.check_parent(category.type, sub_type, vehicle_type, parent)
        if vehicle_type != category.vehicle_type:
            changes["vehicle_type"] = vehicle_type

        if "description" in provided:
            changes["description"] = patch.description or ""
        if "image" in provided:
            changes["image"] = patch.image or None
        if "is_active" in provided and patch.is_active is not None:
            changes["is_active"] = patch.is_active
        if "order" in provided and patch.order is not None:
            changes["order"] = patch.order

        await self._ensure_unique(
            name,
            category.type,
            sub_type,
            vehicle_type,
            parent_id,
            exclude_id=category.id,
        )

        changes["updated_at"] = datetime.utcnow()
        try:
            category = await self.repository.update(category, changes)
        except DuplicateKeyError:
            raise ConflictError(rules.duplicate_message(name, vehicle_type))

        logger.info(f"Category {category.id} updated by {actor.id}")
        return category

    async def delete_category(self, category_id: str, actor: Actor) -> None:
        """Deletes a category. Children keep their (now dangling) parent reference."""
        category = await self.get_category(category_id)
        await self.repository.delete(category)
        logger.info(f"Category {category.id} deleted by {actor.id}")
