from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from app.core.exceptions import InvalidCategorySetError, ReferentialIntegrityError
from catalog.domain.entities.product import ProductCreate, ProductUpdate
from catalog.services.product_service import ProductService


def _product(pid: int = 1, category_ids=(1, 2)):
    return SimpleNamespace(
        id=pid,
        name="Kettle",
        description="1.7l",
        price=Decimal("30.00"),
        categories=[SimpleNamespace(id=c, name=f"Category {c}") for c in category_ids],
    )


@pytest.fixture
def repos():
    repo = AsyncMock()
    categories_repo = AsyncMock()
    categories_repo.get_by_ids = AsyncMock(
        side_effect=lambda ids: [SimpleNamespace(id=i, name=f"Category {i}") for i in ids if i < 100]
    )
    return repo, categories_repo


PAYLOAD = ProductCreate(name="Kettle", description="1.7l", price=Decimal("30.00"))


class TestCategoryCountRule:
    """The same rule guards create and update."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("op", ["create", "update"])
    async def test_empty_list_rejected_before_any_write(self, repos, op):
        repo, categories_repo = repos
        svc = ProductService(repo, categories_repo)

        with pytest.raises(InvalidCategorySetError) as exc:
            if op == "create":
                await svc.create(PAYLOAD, [])
            else:
                await svc.update(1, ProductUpdate(id=1, **PAYLOAD.model_dump()), [])

        assert exc.value.errors == {"categoryIds": ["A product must have at least one category."]}
        repo.insert.assert_not_called()
        repo.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_repeats_do_not_count_twice(self, repos):
        repo, categories_repo = repos
        svc = ProductService(repo, categories_repo, min_categories=2)

        with pytest.raises(InvalidCategorySetError):
            await svc.create(PAYLOAD, [5, 5, 5])

    @pytest.mark.asyncio
    async def test_upper_bound_when_configured(self, repos):
        repo, categories_repo = repos
        svc = ProductService(repo, categories_repo, max_categories=3)

        with pytest.raises(InvalidCategorySetError) as exc:
            await svc.create(PAYLOAD, [1, 2, 3, 4])

        assert "at most 3" in exc.value.errors["categoryIds"][0]
        repo.insert.assert_not_called()


class TestCategoryExistence:

    @pytest.mark.asyncio
    async def test_unknown_ids_reported(self, repos):
        repo, categories_repo = repos
        svc = ProductService(repo, categories_repo)

        with pytest.raises(ReferentialIntegrityError) as exc:
            await svc.create(PAYLOAD, [1, 250, 300])

        assert exc.value.missing_ids == [250, 300]
        repo.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_deduplicated_ids_passed_to_repository(self, repos):
        repo, categories_repo = repos
        repo.insert.return_value = _product(category_ids=(6, 4, 5))
        svc = ProductService(repo, categories_repo)

        out = await svc.create(PAYLOAD, [6, 4, 6, 5, 4])

        repo.insert.assert_awaited_once_with(PAYLOAD, [6, 4, 5])
        assert [c.id for c in out.categories] == [6, 4, 5]


class TestNotFound:

    @pytest.mark.asyncio
    async def test_update_of_missing_product_returns_none(self, repos):
        repo, categories_repo = repos
        repo.update.return_value = None
        svc = ProductService(repo, categories_repo)

        assert await svc.update(9, ProductUpdate(id=9, **PAYLOAD.model_dump()), [1]) is None

    @pytest.mark.asyncio
    async def test_get_of_missing_product_returns_none(self, repos):
        repo, categories_repo = repos
        repo.get.return_value = None
        svc = ProductService(repo, categories_repo)

        assert await svc.get(9) is None


class TestWiring:

    def test_services_receive_concrete_repositories(self):
        from catalog.domain.repositories import CategoryRepository, ProductRepository
        from shared.wiring import get_category_service, get_product_service

        session = object()
        product_svc = get_product_service(db=session)
        category_svc = get_category_service(db=session)

        assert isinstance(product_svc.repo, ProductRepository)
        assert isinstance(product_svc.categories_repo, CategoryRepository)
        assert hasattr(product_svc.categories_repo, "get_by_ids")
        assert product_svc.repo.db is product_svc.categories_repo.db is session
        assert isinstance(category_svc.repo, CategoryRepository)
