"""BeanieCategoryRepository integration tests. Require MongoDB; the database is dropped after each test."""

from datetime import datetime

import pytest
from beanie import PydanticObjectId
from pymongo.errors import DuplicateKeyError

from carmarket.models.category import CategorySubType, CategoryType, VehicleType


def _make(name, vehicle_type=VehicleType.CAR, **fields):
    return {
        "name": name,
        "slug": name.lower(),
        "type": CategoryType.CAR,
        "sub_type": CategorySubType.MAKE,
        "vehicle_type": vehicle_type,
        **fields,
    }


@pytest.mark.requires_db
async def test_insert_and_get(mongo_repository) -> None:
    """Insert a make then read it back by id."""
    created = await mongo_repository.insert(_make("Toyota"))
    assert created.id

    found = await mongo_repository.get(created.id)
    assert found is not None
    assert found.name == "Toyota"
    assert found.vehicle_type == VehicleType.CAR
    assert found.is_active is True

    assert await mongo_repository.get(PydanticObjectId()) is None


@pytest.mark.requires_db
async def test_find_one_excludes_id(mongo_repository) -> None:
    """The duplicate lookup skips the document being updated."""
    toyota = await mongo_repository.insert(_make("Toyota"))
    query = {"name": "Toyota", "type": "car", "sub_type": "make", "vehicle_type": "Car"}

    found = await mongo_repository.find_one(query)
    assert found is not None and found.id == toyota.id
    assert await mongo_repository.find_one(query, exclude_id=toyota.id) is None


@pytest.mark.requires_db
async def test_find_sorts_by_order_then_newest(mongo_repository) -> None:
    await mongo_repository.insert(_make("Toyota", created_at=datetime(2024, 1, 1)))
    await mongo_repository.insert(_make("Honda", created_at=datetime(2024, 1, 2)))
    await mongo_repository.insert(_make("Suzuki", VehicleType.BIKE, order=-1))
    await mongo_repository.insert(
        {"name": "2020", "slug": "2020", "type": CategoryType.CAR, "sub_type": CategorySubType.YEAR}
    )

    makes = await mongo_repository.find({"type": "car", "sub_type": "make"})
    assert [c.name for c in makes] == ["Suzuki", "Honda", "Toyota"]

    bikes = await mongo_repository.find({"vehicle_type": "Bike"})
    assert [c.name for c in bikes] == ["Suzuki"]


@pytest.mark.requires_db
async def test_update_persists_changes(mongo_repository) -> None:
    toyota = await mongo_repository.insert(_make("Toyota"))
    await mongo_repository.update(
        toyota, {"name": "Toyota Motors", "slug": "toyota-motors", "order": 3}
    )

    stored = await mongo_repository.get(toyota.id)
    assert stored.name == "Toyota Motors"
    assert stored.slug == "toyota-motors"
    assert stored.order == 3


@pytest.mark.requires_db
async def test_identity_index_rejects_duplicates(mongo_repository) -> None:
    """Two makes with the same name, vehicle type and (absent) parent collide in the store."""
    await mongo_repository.insert(_make("Toyota"))
    with pytest.raises(DuplicateKeyError):
        await mongo_repository.insert(_make("Toyota"))

    truck = await mongo_repository.insert(_make("Toyota", VehicleType.TRUCK))
    assert truck.id


@pytest.mark.requires_db
async def test_delete(mongo_repository) -> None:
    toyota = await mongo_repository.insert(_make("Toyota"))
    await mongo_repository.delete(toyota)
    assert await mongo_repository.get(toyota.id) is None
