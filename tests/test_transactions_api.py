import pytest


@pytest.fixture
def ledger(client, enable_module):
    enable_module("income-expense")
    rows = [
        {"type": "income", "category": "Sales", "amount": 1000, "description": "Daily sales", "date": "2024-03-01T10:00:00"},
        {"type": "income", "category": "Sales", "amount": 500, "description": "Online sales", "date": "2024-03-02T18:30:00"},
        {"type": "expense", "category": "Rent", "amount": 300, "description": "Shop rent", "date": "2024-03-02T09:00:00", "tags": ["monthly"]},
    ]
    return [client.post("/api/admin/transactions", json=row).json()["transaction"] for row in rows]


def test_routes_gated_by_income_expense_module(client):
    response = client.get("/api/admin/transactions")
    assert response.status_code == 403
    assert response.json()["detail"] == "Income Expense module is not enabled"
    body = {"type": "income", "category": "Sales", "amount": 1, "description": "x"}
    assert client.post("/api/admin/transactions", json=body).status_code == 403


def test_summary(client, ledger):
    body = client.get("/api/admin/transactions").json()
    assert len(body["transactions"]) == 3
    assert body["summary"] == {
        "totalIncome": 1500,
        "totalExpense": 300,
        "netAmount": 1200,
        "incomeCount": 2,
        "expenseCount": 1,
        "totalCount": 3,
    }


def test_newest_first(client, ledger):
    dates = [t["date"] for t in client.get("/api/admin/transactions").json()["transactions"]]
    assert dates == sorted(dates, reverse=True)


def test_filters(client, ledger):
    expense = client.get("/api/admin/transactions", params={"type": "expense"}).json()
    assert [t["category"] for t in expense["transactions"]] == ["Rent"]
    assert expense["summary"]["totalIncome"] == 0
    assert expense["transactions"][0]["tags"] == ["monthly"]

    day = client.get(
        "/api/admin/transactions", params={"startDate": "2024-03-02", "endDate": "2024-03-02"}
    ).json()
    assert day["summary"]["totalCount"] == 2
    assert day["summary"]["netAmount"] == 200


def test_summary_ignores_paging(client, ledger):
    body = client.get("/api/admin/transactions", params={"limit": 1}).json()
    assert len(body["transactions"]) == 1
    assert body["summary"]["totalCount"] == 3


@pytest.mark.parametrize(
    "body",
    [
        {"type": "income", "category": "Sales", "amount": 0, "description": "zero"},
        {"type": "income", "category": "Sales", "amount": -5, "description": "negative"},
        {"type": "gift", "category": "Sales", "amount": 5, "description": "bad type"},
        {"type": "income", "amount": 5, "description": "no category"},
    ],
)
def test_create_validation(client, enable_module, body):
    enable_module("income-expense")
    assert client.post("/api/admin/transactions", json=body).status_code == 400


def test_get_update_delete(client, ledger):
    transaction_id = ledger[2]["id"]
    assert client.get(f"/api/admin/transactions/{transaction_id}").json()["transaction"]["amount"] == 300

    updated = client.patch(f"/api/admin/transactions/{transaction_id}", json={"amount": 350})
    assert updated.json()["transaction"]["amount"] == 350
    assert client.patch(f"/api/admin/transactions/{transaction_id}", json={"amount": 0}).status_code == 400

    assert client.delete(f"/api/admin/transactions/{transaction_id}").status_code == 200
    assert client.get(f"/api/admin/transactions/{transaction_id}").status_code == 404
