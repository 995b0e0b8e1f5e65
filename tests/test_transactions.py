"""
Tests for the transaction endpoints: recording, deleting, history and the
category summary.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from tests.conftest import account_by_name, get_accounts


async def record(client, headers, account_id, amount, type_, **extra):
    payload = {"account_id": account_id, "amount": amount, "type": type_}
    payload.update(extra)
    return await client.post("/transactions", json=payload, headers=headers)


class TestRecordTransaction:
    """POST /transactions"""

    async def test_reference_scenario(self, client, user_headers):
        """Income 100, expense 30, delete the expense: Cash goes 0 -> 100 -> 70 -> 100."""
        cash = await account_by_name(client, user_headers, "Cash")
        assert Decimal(cash["balance"]) == Decimal("0.00")

        today = datetime.now().replace(microsecond=0).isoformat()
        income = await record(client, user_headers, cash["id"], 100, "income", category="Salary", date=today)
        assert income.status_code == 201
        assert Decimal(income.json()["newBalance"]) == Decimal("100.00")

        expense = await record(client, user_headers, cash["id"], 30, "expense", category="Food")
        assert expense.status_code == 201
        assert Decimal(expense.json()["newBalance"]) == Decimal("70.00")
        assert Decimal(expense.json()["transaction"]["amount"]) == Decimal("-30")

        expense_id = expense.json()["transaction"]["id"]
        deleted = await client.delete(f"/transactions/{expense_id}", headers=user_headers)
        assert deleted.status_code == 200
        assert Decimal(deleted.json()["newBalance"]) == Decimal("100.00")

        cash = await account_by_name(client, user_headers, "Cash")
        assert Decimal(cash["balance"]) == Decimal("100.00")

    async def test_other_account_is_untouched(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")
        await record(client, user_headers, cash["id"], 50, "income")

        card = await account_by_name(client, user_headers, "Card")
        assert Decimal(card["balance"]) == Decimal("0.00")

    async def test_category_defaults_to_other(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")

        response = await record(client, user_headers, cash["id"], 5, "expense")
        assert response.json()["transaction"]["category"] == "Other"

        response = await record(client, user_headers, cash["id"], 5, "expense", category="   ")
        assert response.json()["transaction"]["category"] == "Other"

    async def test_description_is_stored_as_comment(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")

        response = await record(client, user_headers, cash["id"], 12.5, "expense", description="Coffee")
        assert response.json()["transaction"]["comment"] == "Coffee"

    @pytest.mark.parametrize("amount, type_", [
        (0, "expense"),
        (-10, "income"),
        (-10, "expense"),
        (10, "transfer"),
        ("abc", "income"),
        (10.123, "income"),
    ])
    async def test_invalid_amount_or_type(self, client, user_headers, amount, type_):
        cash = await account_by_name(client, user_headers, "Cash")

        response = await record(client, user_headers, cash["id"], amount, type_)
        assert response.status_code == 400
        assert "error" in response.json()

        cash = await account_by_name(client, user_headers, "Cash")
        assert Decimal(cash["balance"]) == Decimal("0.00")

    async def test_missing_fields(self, client, user_headers):
        response = await client.post("/transactions", json={"amount": 10}, headers=user_headers)

        assert response.status_code == 400

    async def test_foreign_account_is_forbidden(self, client, two_users):
        alice, bob = two_users
        alice_cash = await account_by_name(client, alice, "Cash")

        response = await record(client, bob, alice_cash["id"], 100, "expense")
        assert response.status_code == 403
        assert response.json() == {"error": "Access denied"}

        alice_cash = await account_by_name(client, alice, "Cash")
        assert Decimal(alice_cash["balance"]) == Decimal("0.00")
        assert (await client.get("/transactions", headers=alice)).json() == []

    async def test_unknown_account_is_forbidden(self, client, user_headers):
        response = await record(client, user_headers, 999999, 10, "income")

        assert response.status_code == 403

    async def test_requires_token(self, client):
        response = await client.post("/transactions", json={"account_id": 1, "amount": 1, "type": "income"})

        assert response.status_code == 401


class TestDeleteTransaction:
    """DELETE /transactions/{id}"""

    async def test_round_trip_restores_balance_exactly(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")
        await record(client, user_headers, cash["id"], "10.10", "income")
        before = Decimal((await account_by_name(client, user_headers, "Cash"))["balance"])

        created = await record(client, user_headers, cash["id"], "0.29", "expense")
        await client.delete(f"/transactions/{created.json()['transaction']['id']}", headers=user_headers)

        after = Decimal((await account_by_name(client, user_headers, "Cash"))["balance"])
        assert after == before == Decimal("10.10")

    async def test_second_delete_is_not_found(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")
        await record(client, user_headers, cash["id"], 40, "income")
        created = await record(client, user_headers, cash["id"], 15, "expense")
        tx_id = created.json()["transaction"]["id"]

        first = await client.delete(f"/transactions/{tx_id}", headers=user_headers)
        second = await client.delete(f"/transactions/{tx_id}", headers=user_headers)

        assert first.status_code == 200
        assert second.status_code == 404
        assert second.json() == {"error": "Transaction not found"}
        cash = await account_by_name(client, user_headers, "Cash")
        assert Decimal(cash["balance"]) == Decimal("40.00")

    async def test_cannot_delete_someone_elses_transaction(self, client, two_users):
        alice, bob = two_users
        alice_cash = await account_by_name(client, alice, "Cash")
        created = await record(client, alice, alice_cash["id"], 70, "income")
        tx_id = created.json()["transaction"]["id"]

        response = await client.delete(f"/transactions/{tx_id}", headers=bob)

        assert response.status_code == 404
        alice_cash = await account_by_name(client, alice, "Cash")
        assert Decimal(alice_cash["balance"]) == Decimal("70.00")
        assert len((await client.get("/transactions", headers=alice)).json()) == 1


class TestBalanceConsistency:
    """Balance always equals the sum of the account's remaining transactions"""

    async def test_mixed_sequence(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")
        card = await account_by_name(client, user_headers, "Card")
        steps = [
            (cash["id"], "100.00", "income"),
            (cash["id"], "33.33", "expense"),
            (card["id"], "250.50", "income"),
            (cash["id"], "0.01", "expense"),
            (card["id"], "99.99", "expense"),
            (cash["id"], "12.34", "income"),
        ]
        ids = []
        for account_id, amount, type_ in steps:
            response = await record(client, user_headers, account_id, amount, type_)
            assert response.status_code == 201
            ids.append(response.json()["transaction"]["id"])

        for tx_id in ids[1::2]:
            response = await client.delete(f"/transactions/{tx_id}", headers=user_headers)
            assert response.status_code == 200

        history = (await client.get("/transactions", headers=user_headers)).json()
        for account in await get_accounts(client, user_headers):
            expected = sum(
                (Decimal(tx["amount"]) for tx in history if tx["account_id"] == account["id"]),
                Decimal("0"),
            )
            assert Decimal(account["balance"]) == expected

        balances = {acc["name"]: Decimal(acc["balance"]) for acc in await get_accounts(client, user_headers)}
        assert balances == {"Cash": Decimal("100.00"), "Card": Decimal("150.51")}


class TestHistory:
    """GET /transactions"""

    async def test_newest_first_with_account_names(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")
        card = await account_by_name(client, user_headers, "Card")
        now = datetime.now().replace(microsecond=0)
        await record(client, user_headers, cash["id"], 1, "income", date=(now - timedelta(days=2)).isoformat())
        await record(client, user_headers, card["id"], 2, "income", date=now.isoformat())
        await record(client, user_headers, cash["id"], 3, "expense", date=(now - timedelta(days=1)).isoformat())

        history = (await client.get("/transactions", headers=user_headers)).json()

        assert [Decimal(tx["amount"]) for tx in history] == [Decimal("2"), Decimal("-3"), Decimal("1")]
        assert [tx["account_name"] for tx in history] == ["Card", "Cash", "Cash"]

    async def test_limit(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")
        for amount in range(1, 13):
            await record(client, user_headers, cash["id"], amount, "income")

        assert len((await client.get("/transactions", headers=user_headers)).json()) == 12
        limited = await client.get("/transactions", params={"limit": 10}, headers=user_headers)
        assert len(limited.json()) == 10

        bad = await client.get("/transactions", params={"limit": 0}, headers=user_headers)
        assert bad.status_code == 400

    async def test_users_do_not_see_each_others_history(self, client, two_users):
        alice, bob = two_users
        alice_cash = await account_by_name(client, alice, "Cash")
        await record(client, alice, alice_cash["id"], 10, "income", description="secret")

        assert (await client.get("/transactions", headers=bob)).json() == []
        assert (await client.get("/transactions/summary", headers=bob)).json() == []


class TestCategorySummary:
    """GET /transactions/summary"""

    async def test_totals_per_category(self, client, user_headers):
        cash = await account_by_name(client, user_headers, "Cash")
        card = await account_by_name(client, user_headers, "Card")
        await record(client, user_headers, cash["id"], 1000, "income", category="Salary")
        await record(client, user_headers, cash["id"], "12.50", "expense", category="Food")
        await record(client, user_headers, card["id"], "7.50", "expense", category="Food")
        await record(client, user_headers, card["id"], 40, "expense", category="Transport")

        summary = (await client.get("/transactions/summary", headers=user_headers)).json()
        by_category = {row["category"]: (Decimal(row["total"]), row["count"]) for row in summary}

        assert by_category == {
            "Food": (Decimal("-20.00"), 2),
            "Salary": (Decimal("1000.00"), 1),
            "Transport": (Decimal("-40.00"), 1),
        }

        expenses = (await client.get("/transactions/summary", params={"type": "expense"}, headers=user_headers)).json()
        assert {row["category"] for row in expenses} == {"Food", "Transport"}

        income = (await client.get("/transactions/summary", params={"type": "income"}, headers=user_headers)).json()
        assert [row["category"] for row in income] == ["Salary"]
