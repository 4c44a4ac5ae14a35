"""Tests for the account ledger (expenses, income, crops, summary)"""

from datetime import datetime

import pytest

from kisandecks.domain.account.service import period_start


class TestPeriodStart:
    NOW = datetime(2026, 10, 18, 15, 30)

    def test_week(self):
        assert period_start("week", self.NOW) == datetime(2026, 10, 11, 15, 30)

    def test_month(self):
        assert period_start("month", self.NOW) == datetime(2026, 10, 1)

    def test_year(self):
        assert period_start("year", self.NOW) == datetime(2026, 1, 1)

    @pytest.mark.parametrize("period", [None, "", "decade"])
    def test_all_time(self, period):
        assert period_start(period, self.NOW) is None


class TestEntries:
    def test_anonymous_entries_use_default_owner(self, client):
        response = client.post("/account/expense", json={"category": "seed", "amount": 1200.4, "crop": "Wheat"})

        assert response.status_code == 200
        assert response.json()["farmerId"] == "default"
        assert response.json()["amount"] == 1200

    def test_farmer_entries_are_scoped(self, farmer_client, farmer):
        farmer_client.post("/account/expense", json={"category": "seed", "amount": 500})

        expenses = farmer_client.get("/account/expenses").json()
        assert [e["farmerId"] for e in expenses] == [str(farmer.id)]

        farmer_client.post("/auth/farmer/logout")
        assert farmer_client.get("/account/expenses").json() == []

    @pytest.mark.parametrize(
        "payload",
        [{"amount": 100}, {"category": "seed"}, {"category": "  ", "amount": 100}, {"category": "seed", "amount": 0}],
    )
    def test_category_and_amount_required(self, client, payload):
        response = client.post("/account/expense", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Category and amount are required"

    def test_negative_amount(self, client):
        response = client.post("/account/income", json={"category": "sale", "amount": -10})

        assert response.status_code == 400
        assert response.json()["error"] == "Amount must be greater than zero"

    def test_income_with_quantity(self, client):
        response = client.post(
            "/account/income",
            json={"category": "crop-sale", "amount": 40000, "crop": "Wheat", "quantity": 20, "unit": "quintal"},
        )

        assert response.json()["quantity"] == 20
        assert response.json()["unit"] == "quintal"

    def test_notes_are_sanitized(self, client):
        response = client.post(
            "/account/expense", json={"category": "labour", "amount": 300, "notes": "<script>x</script>weeding"}
        )

        assert "<script>" not in response.json()["notes"]
        assert "weeding" in response.json()["notes"]

    def test_date_filter(self, client):
        client.post("/account/expense", json={"category": "seed", "amount": 100, "date": "2026-01-15"})
        client.post("/account/expense", json={"category": "seed", "amount": 200, "date": "2026-03-15"})

        response = client.get("/account/expenses", params={"startDate": "2026-02-01", "endDate": "2026-04-01"})

        assert [e["amount"] for e in response.json()] == [200]

    def test_bad_date_filter(self, client):
        response = client.get("/account/expenses", params={"startDate": "yesterday"})

        assert response.status_code == 400

    def test_delete_only_own_entries(self, farmer_client):
        entry = farmer_client.post("/account/expense", json={"category": "seed", "amount": 100}).json()
        farmer_client.post("/auth/farmer/logout")

        foreign = farmer_client.delete(f"/account/expense/{entry['id']}")
        assert foreign.status_code == 404
        assert foreign.json()["error"] == "Entry not found"

    def test_delete_income(self, client):
        entry = client.post("/account/income", json={"category": "sale", "amount": 100}).json()

        assert client.delete(f"/account/income/{entry['id']}").json() == {"success": True}
        assert client.get("/account/incomes").json() == []


class TestCrops:
    def test_defaults(self, client):
        response = client.post("/account/crop", json={"cropName": "Wheat", "landArea": 2})

        crop = response.json()
        assert crop["areaUnit"] == "acre"
        assert crop["yieldUnit"] == "quintal"
        assert crop["status"] == "active"

    def test_name_required(self, client):
        response = client.post("/account/crop", json={"landArea": 2})

        assert response.status_code == 400
        assert response.json()["error"] == "Crop name is required"

    def test_invalid_status(self, client):
        response = client.post("/account/crop", json={"cropName": "Wheat", "status": "burnt"})

        assert response.status_code == 400

    def test_list_and_delete(self, client):
        crop = client.post("/account/crop", json={"cropName": "Rice"}).json()

        assert [c["cropName"] for c in client.get("/account/crops").json()] == ["Rice"]
        client.delete(f"/account/crop/{crop['id']}")
        assert client.get("/account/crops").json() == []


class TestSummary:
    def test_summary(self, client):
        client.post("/account/expense", json={"category": "seed", "amount": 1000, "crop": "Wheat"})
        client.post("/account/expense", json={"category": "fertilizer", "amount": 3000, "crop": "Wheat"})
        client.post("/account/expense", json={"category": "seed", "amount": 500})
        client.post("/account/income", json={"category": "crop-sale", "amount": 10000, "crop": "Wheat"})
        client.post("/account/crop", json={"cropName": "Wheat"})
        client.post("/account/crop", json={"cropName": "Rice", "status": "harvested"})

        summary = client.get("/account/summary").json()

        assert summary["totalExpense"] == 4500
        assert summary["totalIncome"] == 10000
        assert summary["profitLoss"] == 5500
        assert summary["expenseByCategory"] == [
            {"category": "fertilizer", "total": 3000},
            {"category": "seed", "total": 1500},
        ]
        assert summary["cropSummary"] == [{"crop": "Wheat", "expense": 4000, "income": 10000, "profit": 6000}]
        assert summary["activeCrops"] == 1
        assert len(summary["recentTransactions"]) == 4

    def test_recent_transactions_capped(self, client):
        for day in range(1, 8):
            client.post("/account/expense", json={"category": "seed", "amount": day, "date": f"2026-05-0{day}"})
            client.post("/account/income", json={"category": "sale", "amount": day, "date": f"2026-06-0{day}"})

        recent = client.get("/account/summary").json()["recentTransactions"]

        assert len(recent) == 10
        dates = [t["date"] for t in recent]
        assert dates == sorted(dates, reverse=True)
        assert sum(1 for t in recent if t["type"] == "income") == 5

    def test_period_filters_old_entries(self, client):
        client.post("/account/expense", json={"category": "seed", "amount": 100, "date": "2001-01-01"})
        client.post("/account/expense", json={"category": "seed", "amount": 50})

        assert client.get("/account/summary", params={"period": "year"}).json()["totalExpense"] == 50
        assert client.get("/account/summary").json()["totalExpense"] == 150
