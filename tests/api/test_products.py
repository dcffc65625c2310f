"""Tests for product endpoints."""

from collections.abc import Callable

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce_api.catalog.models import Product


class TestListProducts:
    """Tests for GET /api/products."""

    @pytest.mark.asyncio
    async def test_default_pagination(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Should return the first page with default limit."""
        response = await client.get("/api/products")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]) == 6
        assert body["pagination"] == {
            "currentPage": 1,
            "totalPages": 1,
            "totalItems": 6,
            "itemsPerPage": 10,
            "hasNext": False,
            "hasPrev": False,
        }

    @pytest.mark.asyncio
    async def test_product_fields(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Products should carry both identifiers and the raw column names."""
        response = await client.get("/api/products")
        product = next(item for item in response.json()["data"] if item["id"] == "3")
        assert product["_id"] == seeded["3"]
        assert product["sku"] == "SKU-3"
        assert product["retail_price"] == 75.0
        assert product["department"] == "Women"
        assert product["department_id"] is None
        assert product["departmentInfo"] is None

    @pytest.mark.asyncio
    async def test_middle_page(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Should report next and previous pages."""
        response = await client.get("/api/products", params={"page": 2, "limit": 2})
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["pagination"]["totalPages"] == 3
        assert body["pagination"]["hasNext"] is True
        assert body["pagination"]["hasPrev"] is True

    @pytest.mark.asyncio
    async def test_pages_do_not_overlap(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Consecutive pages should cover every product exactly once."""
        seen: list[str] = []
        for page in (1, 2, 3):
            response = await client.get("/api/products", params={"page": page, "limit": 2})
            seen.extend(item["id"] for item in response.json()["data"])
        assert sorted(seen) == ["1", "2", "3", "4", "5", "6"]

    @pytest.mark.asyncio
    async def test_page_past_the_end(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Should return an empty page, not an error."""
        response = await client.get("/api/products", params={"page": 5})
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["pagination"]["totalItems"] == 6

    @pytest.mark.asyncio
    async def test_huge_page(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Pages far beyond any database offset are empty, not an error."""
        response = await client.get("/api/products", params={"page": str(10**19)})
        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["pagination"]["currentPage"] == 10**19
        assert body["pagination"]["totalItems"] == 6
        assert body["pagination"]["hasNext"] is False
        assert body["pagination"]["hasPrev"] is True

    @pytest.mark.asyncio
    async def test_empty_catalog(self, client: AsyncClient) -> None:
        """Should report zero pages for an empty catalog."""
        response = await client.get("/api/products")
        assert response.status_code == 200
        assert response.json()["pagination"]["totalPages"] == 0


class TestPaginationValidation:
    """Tests for page and limit bounds."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page", ["0", "-1", "abc"])
    async def test_invalid_page(self, client: AsyncClient, page: str) -> None:
        """Should reject pages below 1 and non-numeric pages."""
        response = await client.get("/api/products", params={"page": page})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Invalid page parameter"
        assert body["message"].startswith("Page must be")

    @pytest.mark.asyncio
    async def test_zero_limit(self, client: AsyncClient) -> None:
        """Should reject limit below 1."""
        response = await client.get("/api/products", params={"limit": 0})
        assert response.status_code == 400
        assert response.json()["message"] == "Limit must be a positive integer (≥ 1)"

    @pytest.mark.asyncio
    async def test_limit_above_maximum(self, client: AsyncClient) -> None:
        """Should reject limit above 100."""
        response = await client.get("/api/products", params={"limit": 101})
        assert response.status_code == 400
        assert response.json()["message"] == "Limit cannot exceed 100 items per page"

    @pytest.mark.asyncio
    async def test_maximum_limit_accepted(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Limit of exactly 100 is valid."""
        response = await client.get("/api/products", params={"limit": 100})
        assert response.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/products", "/api/departments/{department_id}/products"])
    async def test_bounds_documented(self, client: AsyncClient, path: str) -> None:
        """The OpenAPI schema shows the page and limit bounds."""
        response = await client.get("/openapi.json")
        operation = response.json()["paths"][path]["get"]
        params = {param["name"]: param["schema"] for param in operation["parameters"]}
        assert params["page"]["minimum"] == 1
        assert params["limit"]["minimum"] == 1
        assert params["limit"]["maximum"] == 100


class TestProductFilters:
    """Tests for product filter parameters."""

    @pytest.mark.asyncio
    async def test_brand_is_case_insensitive_substring(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Should match brands containing the term in any case."""
        response = await client.get("/api/products", params={"brand": "LEVI"})
        body = response.json()
        assert body["pagination"]["totalItems"] == 2
        assert {item["brand"] for item in body["data"]} == {"Levi's"}

    @pytest.mark.asyncio
    async def test_category_filter(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Should match category substrings."""
        response = await client.get("/api/products", params={"category": "sweat"})
        assert {item["id"] for item in response.json()["data"]} == {"3", "5"}

    @pytest.mark.asyncio
    async def test_price_range(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Should apply inclusive price bounds."""
        response = await client.get("/api/products", params={"minPrice": 59.5, "maxPrice": 89.99})
        assert {item["id"] for item in response.json()["data"]} == {"1", "2", "3"}

    @pytest.mark.asyncio
    async def test_zero_min_price_is_a_filter(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """minPrice=0 is valid and keeps every product."""
        response = await client.get("/api/products", params={"minPrice": 0})
        assert response.status_code == 200
        assert response.json()["pagination"]["totalItems"] == 6

    @pytest.mark.asyncio
    async def test_inverted_price_range(self, client: AsyncClient) -> None:
        """Should reject minPrice greater than maxPrice."""
        response = await client.get("/api/products", params={"minPrice": 100, "maxPrice": 50})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid price range"
        assert body["message"] == "minPrice cannot be greater than maxPrice"

    @pytest.mark.asyncio
    async def test_non_numeric_price(self, client: AsyncClient) -> None:
        """Should reject a price that is not a number."""
        response = await client.get("/api/products", params={"maxPrice": "abc"})
        assert response.status_code == 400
        assert response.json()["message"] == "maxPrice must be a positive number"

    @pytest.mark.asyncio
    async def test_negative_price(self, client: AsyncClient) -> None:
        """Should reject negative prices."""
        response = await client.get("/api/products", params={"minPrice": -5})
        assert response.status_code == 400
        assert response.json()["message"] == "minPrice must be a positive number"

    @pytest.mark.asyncio
    async def test_search_matches_name_category_and_brand(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Search should look at name, category and brand."""
        by_name = await client.get("/api/products", params={"search": "denim"})
        by_category = await client.get("/api/products", params={"search": "dresses"})
        by_brand = await client.get("/api/products", params={"search": "calvin"})

        assert [item["id"] for item in by_name.json()["data"]] == ["1"]
        assert [item["id"] for item in by_category.json()["data"]] == ["6"]
        assert {item["id"] for item in by_brand.json()["data"]} == {"3", "6"}

    @pytest.mark.asyncio
    async def test_search_is_literal(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Pattern characters in the term should match literally."""
        response = await client.get("/api/products", params={"search": "_"})
        assert response.json()["pagination"]["totalItems"] == 0

    @pytest.mark.asyncio
    async def test_filters_are_echoed(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Applied filters should be returned with the results."""
        response = await client.get("/api/products", params={"brand": "nike", "maxPrice": 30})
        filters = response.json()["filters"]
        assert filters["brand"] == "nike"
        assert filters["maxPrice"] == 30
        assert filters["minPrice"] is None

    @pytest.mark.asyncio
    async def test_department_filter_on_legacy_label(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Before the backfill the legacy label is matched."""
        response = await client.get("/api/products", params={"department": "women"})
        assert {item["id"] for item in response.json()["data"]} == {"1", "3", "6"}

    @pytest.mark.asyncio
    async def test_department_filter_on_relation(
        self,
        client: AsyncClient,
        migrated: dict[str, str],
        session: AsyncSession,
    ) -> None:
        """After the backfill the department_id wins over a stale label."""
        # Product 6 keeps its label but points at Kids
        kids = await client.get("/api/departments")
        kids_id = next(d["id"] for d in kids.json()["departments"] if d["name"] == "Kids")
        await session.execute(
            update(Product).where(Product.id == "6").values(department_id=kids_id)
        )
        await session.commit()

        response = await client.get("/api/products", params={"department": "Women"})
        assert {item["id"] for item in response.json()["data"]} == {"1", "3"}

    @pytest.mark.asyncio
    async def test_department_filter_includes_unmigrated_products(
        self,
        client: AsyncClient,
        migrated: dict[str, str],
        session: AsyncSession,
        make_product: Callable[..., Product],
    ) -> None:
        """Products added after the backfill still match on their label."""
        session.add(make_product("7", name="Linen Shirt", department="Women"))
        await session.commit()

        response = await client.get("/api/products", params={"department": "Women"})
        assert {item["id"] for item in response.json()["data"]} == {"1", "3", "6", "7"}


class TestGetProduct:
    """Tests for GET /api/products/{id}."""

    @pytest.mark.asyncio
    async def test_by_natural_id(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Should find a product by its natural id and add profit figures."""
        response = await client.get("/api/products/3")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Wool Sweater"
        assert data["profitMargin"] == 45.0
        assert data["profitPercentage"] == 150.0

    @pytest.mark.asyncio
    async def test_by_surrogate_id(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Natural and surrogate ids should resolve to the same record."""
        by_natural = await client.get("/api/products/3")
        by_surrogate = await client.get(f"/api/products/{seeded['3']}")
        upper = await client.get(f"/api/products/{seeded['3'].upper()}")

        assert by_surrogate.status_code == 200
        assert by_surrogate.json()["data"] == by_natural.json()["data"]
        assert upper.json()["data"]["_id"] == seeded["3"]

    @pytest.mark.asyncio
    async def test_zero_cost(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Profit percentage is null when cost is zero."""
        response = await client.get("/api/products/5")
        data = response.json()["data"]
        assert data["profitMargin"] == 19.99
        assert data["profitPercentage"] is None

    @pytest.mark.asyncio
    async def test_department_info_after_backfill(
        self, client: AsyncClient, migrated: dict[str, str]
    ) -> None:
        """Backfilled products embed their department."""
        response = await client.get("/api/products/1")
        data = response.json()["data"]
        assert data["departmentInfo"]["name"] == "Women"
        assert data["departmentInfo"]["id"] == data["department_id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id", ["999", "507f1f77bcf86cd799439011"])
    async def test_not_found(
        self, client: AsyncClient, seeded: dict[str, str], product_id: str
    ) -> None:
        """Should return 404 for unknown ids of either shape."""
        response = await client.get(f"/api/products/{product_id}")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Product not found"
        assert body["message"] == f"No product found with ID: {product_id}"

    @pytest.mark.asyncio
    async def test_blank_id(self, client: AsyncClient) -> None:
        """Should reject a blank id."""
        response = await client.get("/api/products/%20")
        assert response.status_code == 400
        assert response.json()["message"] == "Product ID is required"


class TestCategoriesAndBrands:
    """Tests for the category and brand breakdowns."""

    @pytest.mark.asyncio
    async def test_categories(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Counts should cover every product, most common first."""
        response = await client.get("/api/products/categories")
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 5
        assert body["data"][0]["category"] == "Sweaters"
        assert body["data"][0]["count"] == 2
        assert sum(row["count"] for row in body["data"]) == 6
        assert all("avgPrice" in row for row in body["data"])

    @pytest.mark.asyncio
    async def test_categories_respect_filters(
        self, client: AsyncClient, seeded: dict[str, str]
    ) -> None:
        """Breakdowns should only count filtered products."""
        response = await client.get("/api/products/categories", params={"brand": "nike"})
        body = response.json()
        assert {row["category"] for row in body["data"]} == {"Active", "Sweaters"}

    @pytest.mark.asyncio
    async def test_brands(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Ties on count are ordered by brand name."""
        response = await client.get("/api/products/brands")
        body = response.json()
        assert body["total"] == 3
        assert [row["brand"] for row in body["data"]] == ["Calvin Klein", "Levi's", "Nike"]
        assert body["data"][0]["avgPrice"] == 97.5

    @pytest.mark.asyncio
    async def test_brands_limit(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Should keep only the top N brands."""
        response = await client.get("/api/products/brands", params={"limit": 1})
        assert response.json()["total"] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("summary", ["categories", "brands"])
    async def test_invalid_limit(
        self, client: AsyncClient, seeded: dict[str, str], summary: str
    ) -> None:
        """Should reject a limit below 1 instead of applying the default."""
        response = await client.get(f"/api/products/{summary}", params={"limit": 0})
        assert response.status_code == 400
        assert response.json()["message"] == "Limit must be a positive integer (≥ 1)"


class TestUnknownRoute:
    """Tests for unmatched paths."""

    @pytest.mark.asyncio
    async def test_route_not_found(self, client: AsyncClient) -> None:
        """Should describe the route and list available ones."""
        response = await client.get("/api/nope")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Route not found"
        assert body["message"] == "Cannot GET /api/nope"
        assert body["availableRoutes"]["products"] == "/api/products"
