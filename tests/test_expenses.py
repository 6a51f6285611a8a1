from conftest import submit


def test_submit_creates_pending_unreviewed_expense(client, employee):
    expense = submit(client, employee, amount=42.5, category="Meals", description="  Team lunch  ")

    assert expense["status"] == "pending"
    assert expense["reviewedBy"] is None
    assert expense["reviewedAt"] is None
    assert expense["employee"]["id"] == employee["id"]
    assert expense["employee"]["email"] == "eve@example.com"
    assert expense["description"] == "Team lunch"
    assert expense["category"] == "Meals"
    # date defaults to submission time
    assert expense["date"]


def test_submit_keeps_given_date(client, employee):
    expense = submit(client, employee, date="2024-03-01T09:30:00")

    assert expense["date"].startswith("2024-03-01T09:30:00")


def test_submit_ignores_status_and_employee_from_body(client, employee, other_employee):
    expense = submit(client, employee, status="approved", employee_id=other_employee["id"])

    assert expense["status"] == "pending"
    assert expense["employee"]["id"] == employee["id"]


def test_submit_validation(client, employee):
    cases = [
        {"amount": 0, "category": "Travel", "description": "x"},
        {"amount": -5, "category": "Travel", "description": "x"},
        {"amount": 10, "category": "Snacks", "description": "x"},
        {"amount": 10, "category": "Travel", "description": "   "},
        {"amount": 10, "category": "Travel", "description": "x" * 501},
        {"category": "Travel", "description": "x"},
    ]
    for payload in cases:
        response = client.post("/api/expenses", json=payload, headers=employee["headers"])
        assert response.status_code == 400, payload
        assert response.json()["success"] is False
        assert response.json()["message"]


def test_description_limit_is_inclusive(client, employee):
    expense = submit(client, employee, description="x" * 500)

    assert len(expense["description"]) == 500


def test_employee_lists_only_own_expenses(client, employee, other_employee, admin):
    submit(client, employee, description="mine 1")
    submit(client, employee, description="mine 2")
    submit(client, other_employee, description="theirs")

    own = client.get("/api/expenses", headers=employee["headers"]).json()
    assert own["count"] == 2
    assert {e["employee"]["id"] for e in own["expenses"]} == {employee["id"]}
    # newest first
    assert own["expenses"][0]["description"] == "mine 2"

    everything = client.get("/api/expenses", headers=admin["headers"]).json()
    assert everything["count"] == 3


def test_list_filters_by_status(client, employee, admin):
    first = submit(client, employee)
    submit(client, employee)
    client.put(
        f"/api/expenses/{first['id']}/status",
        json={"status": "rejected"},
        headers=admin["headers"],
    )

    pending = client.get("/api/expenses", params={"status": "pending"}, headers=employee["headers"])
    rejected = client.get("/api/expenses", params={"status": "rejected"}, headers=admin["headers"])
    bogus = client.get("/api/expenses", params={"status": "paid"}, headers=admin["headers"])

    assert pending.json()["count"] == 1
    assert rejected.json()["count"] == 1
    assert rejected.json()["expenses"][0]["reviewedBy"]["name"] == "Ada Admin"
    assert bogus.status_code == 400


def test_get_expense_visibility(client, employee, other_employee, admin):
    expense = submit(client, employee)

    assert client.get(f"/api/expenses/{expense['id']}", headers=employee["headers"]).status_code == 200
    assert client.get(f"/api/expenses/{expense['id']}", headers=admin["headers"]).status_code == 200

    denied = client.get(f"/api/expenses/{expense['id']}", headers=other_employee["headers"])
    assert denied.status_code == 403
    assert denied.json() == {"success": False, "message": "Not authorized to access this expense"}


def test_get_missing_expense(client, employee):
    response = client.get("/api/expenses/9999", headers=employee["headers"])

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Expense not found"}


def test_owner_edits_pending_expense(client, employee):
    expense = submit(client, employee)

    response = client.put(
        f"/api/expenses/{expense['id']}",
        json={"amount": 450, "category": "Hardware"},
        headers=employee["headers"],
    )

    assert response.status_code == 200
    updated = response.json()["expense"]
    assert updated["amount"] == 450
    assert updated["category"] == "Hardware"
    assert updated["description"] == expense["description"]
    assert updated["status"] == "pending"


def test_edit_reapplies_creation_constraints(client, employee):
    expense = submit(client, employee)

    for patch in ({"category": "Snacks"}, {"amount": 0}, {"description": ""}, {"amount": None}):
        response = client.put(f"/api/expenses/{expense['id']}", json=patch, headers=employee["headers"])
        assert response.status_code == 400, patch

    unchanged = client.get(f"/api/expenses/{expense['id']}", headers=employee["headers"]).json()["expense"]
    assert unchanged["amount"] == expense["amount"]
    assert unchanged["category"] == expense["category"]


def test_edit_cannot_touch_status(client, employee):
    expense = submit(client, employee)

    response = client.put(
        f"/api/expenses/{expense['id']}",
        json={"status": "approved", "description": "Changed"},
        headers=employee["headers"],
    )

    assert response.status_code == 200
    assert response.json()["expense"]["status"] == "pending"
    assert response.json()["expense"]["description"] == "Changed"


def test_non_owner_cannot_edit_or_withdraw_pending_expense(client, employee, other_employee, admin):
    expense = submit(client, employee)

    for who in (other_employee, admin):
        edit = client.put(f"/api/expenses/{expense['id']}", json={"amount": 1}, headers=who["headers"])
        assert edit.status_code == 403
        assert edit.json()["message"] == "Not authorized to update this expense"

        withdraw = client.delete(f"/api/expenses/{expense['id']}", headers=who["headers"])
        assert withdraw.status_code == 403
        assert withdraw.json()["message"] == "Not authorized to delete this expense"


def test_owner_withdraws_pending_expense(client, employee):
    expense = submit(client, employee)

    response = client.delete(f"/api/expenses/{expense['id']}", headers=employee["headers"])

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Expense deleted successfully"}
    assert client.get(f"/api/expenses/{expense['id']}", headers=employee["headers"]).status_code == 404


def test_amount_must_be_finite(client, employee):
    for amount in ("Infinity", "inf", "NaN"):
        response = client.post(
            "/api/expenses",
            json={"amount": amount, "category": "Travel", "description": "x"},
            headers=employee["headers"],
        )
        assert response.status_code == 400, amount
        assert response.json()["message"].startswith("amount: ")

    expense = submit(client, employee)
    edit = client.put(f"/api/expenses/{expense['id']}", json={"amount": "Infinity"}, headers=employee["headers"])
    assert edit.status_code == 400
    assert client.get("/api/expenses", headers=employee["headers"]).json()["count"] == 1


def test_expense_json_uses_camel_case(client, employee):
    expense = submit(client, employee, receiptUrl="https://files.example.com/r/1.png")

    assert expense["receiptUrl"] == "https://files.example.com/r/1.png"
    assert {"reviewedBy", "reviewedAt", "reviewNotes", "createdAt", "updatedAt"} <= set(expense)
    assert "receipt_url" not in expense

    patch = client.put(
        f"/api/expenses/{expense['id']}",
        json={"receiptUrl": "https://files.example.com/r/2.png"},
        headers=employee["headers"],
    )
    assert patch.json()["expense"]["receiptUrl"] == "https://files.example.com/r/2.png"
