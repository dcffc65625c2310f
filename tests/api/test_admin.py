"""Tests for admin endpoints."""

import pytest
from httpx import AsyncClient

MIGRATE = "/api/admin/migrate-departments"


class TestMigrateDepartments:
    """Tests for POST /api/admin/migrate-departments."""

    @pytest.mark.asyncio
    async def test_first_run(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Should create one department per label and assign every product."""
        response = await client.post(MIGRATE)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Department migration completed successfully"
        results = body["results"]
        assert results["departmentsCreated"] == 3
        assert results["departmentsMatched"] == 3
        assert results["productsUpdated"] == 6
        assert results["productsWithDeptId"] == 6
        assert results["productsWithoutDeptId"] == 0
        assert results["totalDepartments"] == 3
        assert results["complete"] is True

    @pytest.mark.asyncio
    async def test_rerun_is_a_no_op(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """A second run should neither create departments nor update products."""
        await client.post(MIGRATE)
        response = await client.post(MIGRATE)
        results = response.json()["results"]
        assert results["departmentsCreated"] == 0
        assert results["productsUpdated"] == 0
        assert results["totalDepartments"] == 3
        assert results["productsWithDeptId"] == 6

    @pytest.mark.asyncio
    async def test_batch_size(self, client: AsyncClient, seeded: dict[str, str]) -> None:
        """Products are updated in batches of the requested size."""
        response = await client.post(MIGRATE, params={"batchSize": 2})
        results = response.json()["results"]
        assert results["batches"] == 3
        assert results["productsUpdated"] == 6

    @pytest.mark.asyncio
    async def test_empty_catalog(self, client: AsyncClient) -> None:
        """Nothing to migrate is still a complete run."""
        response = await client.post(MIGRATE)
        assert response.status_code == 200
        results = response.json()["results"]
        assert results["departmentsCreated"] == 0
        assert results["batches"] == 0
        assert results["complete"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("batch_size", ["0", "abc"])
    async def test_invalid_batch_size(self, client: AsyncClient, batch_size: str) -> None:
        """Should reject batch sizes that are not positive integers."""
        response = await client.post(MIGRATE, params={"batchSize": batch_size})
        assert response.status_code == 400
        assert response.json()["message"] == "batchSize must be a positive integer (≥ 1)"
