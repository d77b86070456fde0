"""
Tests for account API endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business rules are tested in
tests/services/test_account_service.py.
"""

from decimal import Decimal


async def create(client, name, account_type, **extra):
    return await client.post("/ledger/accounts", json={
        "name": name,
        "account_type": account_type,
        **extra,
    })


class TestCreateAccount:

    async def test_create_account_returns_201(self, client):
        response = await create(client, "Cash Drawer", "Asset")
        assert response.status_code == 201

    async def test_create_account_returns_data(self, client):
        response = await create(
            client, "Fuel Purchases", "Direct Expense",
            description="Diesel and petrol stock",
        )
        data = response.json()
        assert data["name"] == "Fuel Purchases"
        assert data["account_type"] == "Direct Expense"
        assert data["status"] == "active"
        assert data["is_system_account"] is False

    async def test_duplicate_name_returns_409(self, client):
        await create(client, "Cash Drawer", "Asset")
        response = await create(client, "Cash Drawer", "Bank")
        assert response.status_code == 409

    async def test_blank_name_returns_400(self, client):
        response = await create(client, "  ", "Asset")
        assert response.status_code == 400

    async def test_unknown_type_returns_422(self, client):
        response = await create(client, "Equity", "Equity")
        assert response.status_code == 422


class TestReadAccounts:

    async def test_get_unknown_account_returns_404(self, client):
        response = await client.get("/ledger/accounts/999")
        assert response.status_code == 404

    async def test_list_filters_by_type(self, client):
        await create(client, "Cash Drawer", "Asset")
        await create(client, "Fuel Supplier", "Vendor")

        response = await client.get(
            "/ledger/accounts", params={"account_type": "Vendor"}
        )

        assert response.status_code == 200
        assert [a["name"] for a in response.json()] == ["Fuel Supplier"]

    async def test_seed_creates_system_accounts(self, client):
        response = await client.post("/ledger/accounts/seed")

        assert response.status_code == 201
        data = response.json()
        assert {a["name"] for a in data} >= {"Cash on Hand", "Bank Account"}
        assert all(a["is_system_account"] for a in data)


class TestUpdateAndDelete:

    async def test_system_account_name_is_kept(self, client):
        created = (await create(
            client, "Cash on Hand", "Asset", is_system_account=True
        )).json()

        response = await client.patch(
            f"/ledger/accounts/{created['id']}", json={"name": "X"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Cash on Hand"

    async def test_delete_unused_account(self, client):
        created = (await create(client, "Spare", "Asset")).json()

        response = await client.delete(f"/ledger/accounts/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"deleted": 1}

        response = await client.get(f"/ledger/accounts/{created['id']}")
        assert response.status_code == 404

    async def test_delete_system_account_returns_409(self, client):
        created = (await create(
            client, "Bank Account", "Bank", is_system_account=True
        )).json()

        response = await client.delete(f"/ledger/accounts/{created['id']}")

        assert response.status_code == 409
        assert "system account" in response.json()["detail"]

    async def test_protection_endpoint(self, client):
        created = (await create(client, "Spare", "Asset")).json()

        response = await client.get(
            f"/ledger/accounts/{created['id']}/protection"
        )

        assert response.status_code == 200
        assert response.json()["protected"] is False

    async def test_protection_of_unknown_account_returns_404(self, client):
        response = await client.get("/ledger/accounts/999/protection")
        assert response.status_code == 404


class TestAccountBalance:

    async def test_balance_of_new_account_is_zero(self, client):
        created = (await create(client, "Cash Drawer", "Asset")).json()

        response = await client.get(
            f"/ledger/accounts/{created['id']}/balance",
            params={"as_of_date": "2024-01-31"},
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["balance"]) == Decimal("0")
        assert data["balance_type"] == "Debit"
        assert data["as_of_date"] == "2024-01-31"

    async def test_balance_of_unknown_account_returns_404(self, client):
        response = await client.get("/ledger/accounts/404/balance")
        assert response.status_code == 404
