import pytest
from sqlalchemy import insert, select

from app.core.exceptions import CategoryInUseError
from catalog.domain.entities.category import CategoryCreate, CategoryUpdate
from catalog.domain.models import Category, Product, product_categories


# ==============================================================================
# List / paging
# ==============================================================================

@pytest.mark.asyncio
async def test_should_return_second_page_in_id_order(category_repo, make_categories):
    # GIVEN 15 categories
    await make_categories(15)

    # WHEN
    rows = await category_repo.list(page=2, page_size=10)

    # THEN items 11..15, ascending
    assert [c.id for c in rows] == [11, 12, 13, 14, 15]


@pytest.mark.asyncio
async def test_should_return_empty_page_past_the_end(category_repo, make_categories):
    await make_categories(15)

    rows = await category_repo.list(page=3, page_size=10)

    assert rows == []


@pytest.mark.asyncio
async def test_should_return_first_page_by_default_size(category_repo, make_categories):
    await make_categories(3)

    rows = await category_repo.list(page=1, page_size=10)

    assert [c.name for c in rows] == ["Category 1", "Category 2", "Category 3"]


# ==============================================================================
# Get / insert / update
# ==============================================================================

@pytest.mark.asyncio
async def test_should_return_none_and_warn_when_category_missing(category_repo, caplog):
    caplog.set_level("WARNING", logger="tests.categories")

    assert await category_repo.get(404) is None
    assert any(r.levelname == "WARNING" and getattr(r, "category_id", None) == 404 for r in caplog.records)


@pytest.mark.asyncio
async def test_should_assign_id_on_insert(category_repo, db_session):
    obj = await category_repo.insert(CategoryCreate(name="Books"))

    assert obj.id is not None
    row = (await db_session.execute(select(Category.name).where(Category.id == obj.id))).scalar_one()
    assert row == "Books"


@pytest.mark.asyncio
async def test_should_rename_existing_category(category_repo, make_categories):
    [cat] = await make_categories(1)

    obj = await category_repo.update(cat.id, CategoryUpdate(id=cat.id, name="Renamed"))

    assert obj is not None
    assert obj.name == "Renamed"


@pytest.mark.asyncio
async def test_should_return_none_when_updating_missing_category(category_repo):
    assert await category_repo.update(77, CategoryUpdate(id=77, name="Ghost")) is None


@pytest.mark.asyncio
async def test_should_return_only_existing_ids(category_repo, make_categories):
    await make_categories(3)

    rows = await category_repo.get_by_ids([3, 1, 99, 1])

    assert [c.id for c in rows] == [1, 3]


# ==============================================================================
# Delete policy
# ==============================================================================

@pytest.mark.asyncio
async def test_should_delete_unreferenced_category(category_repo, make_categories, db_session):
    [cat] = await make_categories(1)

    assert await category_repo.delete(cat.id) is True
    left = (await db_session.execute(select(Category.id))).scalars().all()
    assert left == []


@pytest.mark.asyncio
async def test_should_return_false_when_deleting_missing_category(category_repo):
    assert await category_repo.delete(12345) is False


@pytest.mark.asyncio
async def test_should_refuse_to_delete_category_linked_to_a_product(category_repo, make_categories, db_session):
    # GIVEN a product linked to the category
    [cat] = await make_categories(1)
    product = Product(name="Lamp", description="Desk lamp", price=25)
    db_session.add(product)
    await db_session.flush()
    await db_session.execute(insert(product_categories).values(product_id=product.id, category_id=cat.id))
    await db_session.commit()

    # WHEN / THEN
    with pytest.raises(CategoryInUseError):
        await category_repo.delete(cat.id)

    still_there = (await db_session.execute(select(Category.id).where(Category.id == cat.id))).scalar_one_or_none()
    assert still_there == cat.id
    assert await category_repo.is_referenced(cat.id) is True
