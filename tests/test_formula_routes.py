"""Tests for formula API routes."""

from __future__ import annotations

FORMULA = {
    "name": "Profit",
    "formula": "a*b-a-c",
    "variables": {"a": " Price ", "b": "Quantity", "c": "  ", "d": 4},
}


def _create(client, headers, **overrides):
    response = client.post("/api/formulas", json={**FORMULA, **overrides}, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["formula"]


def test_create_cleans_display_names(client, auth_headers):
    formula = _create(client, auth_headers)

    assert formula["variables"] == {"a": "Price", "b": "Quantity", "d": "4"}
    assert formula["symbols"] == ["a", "b", "c"]
    assert formula["result"] is None


def test_create_requires_name_and_formula(client, auth_headers):
    response = client.post("/api/formulas", json={"name": "x"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["error"] == "Name and formula are required"


def test_execute_evaluates_and_caches(client, auth_headers):
    formula = _create(client, auth_headers)

    response = client.post(
        f"/api/formulas/{formula['id']}/execute",
        json={"values": {"a": 10, "b": "5", "c": 3}},
        headers=auth_headers,
    )

    body = response.get_json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["result"] == 37
    assert body["expression"] == "10*5-10-3"

    stored = client.get(f"/api/formulas/{formula['id']}", headers=auth_headers).get_json()
    assert stored["formula"]["result"] == 37


def test_execute_reports_failures(client, auth_headers):
    formula = _create(client, auth_headers, formula="a/b")

    body = client.post(
        f"/api/formulas/{formula['id']}/execute",
        json={"values": {"a": 1, "b": 0}},
        headers=auth_headers,
    ).get_json()

    assert body["success"] is False
    assert body["error"] == "Division by zero"
    assert body["result"] is None


def test_execute_without_values(client, auth_headers):
    formula = _create(client, auth_headers)

    body = client.post(
        f"/api/formulas/{formula['id']}/execute", json={}, headers=auth_headers
    ).get_json()

    assert body["error"] == "Invalid characters in formula"


def test_partial_update_resets_cached_result(client, auth_headers):
    formula = _create(client, auth_headers)
    client.post(
        f"/api/formulas/{formula['id']}/execute",
        json={"values": {"a": 1, "b": 1, "c": 1}},
        headers=auth_headers,
    )

    response = client.put(
        f"/api/formulas/{formula['id']}", json={"name": "Margin"}, headers=auth_headers
    )

    updated = response.get_json()["formula"]
    assert response.status_code == 200
    assert updated["name"] == "Margin"
    assert updated["formula"] == "a*b-a-c"
    assert updated["result"] is None
    assert "calculated_result" in updated
    assert "calculation_error" in updated


def test_update_rejects_blank_name(client, auth_headers):
    formula = _create(client, auth_headers)

    response = client.put(
        f"/api/formulas/{formula['id']}", json={"name": "   "}, headers=auth_headers
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "Name cannot be empty"


def test_ad_hoc_evaluation(client, auth_headers):
    body = client.post(
        "/api/formulas/evaluate",
        json={"formula": "(x+y)/2", "values": {"x": 3, "y": 4}},
        headers=auth_headers,
    ).get_json()

    assert body["result"] == 3.5
    assert body["symbols"] == ["x", "y"]



def test_ad_hoc_evaluation_drops_oversized_values(client, auth_headers):
    response = client.post(
        "/api/formulas/evaluate",
        json={"formula": "a+1", "values": {"a": 10**400}},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is False
    assert body["error"] == "Invalid characters in formula"


def test_execute_renders_small_values_in_decimal(client, auth_headers):
    formula = _create(client, auth_headers, formula="a*100000")

    body = client.post(
        f"/api/formulas/{formula['id']}/execute",
        json={"values": {"a": 0.00001}},
        headers=auth_headers,
    ).get_json()

    assert body["success"] is True
    assert body["expression"] == "0.00001*100000"
    assert body["result"] == 1.0

def test_delete(client, auth_headers):
    formula = _create(client, auth_headers)

    response = client.delete(f"/api/formulas/{formula['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json()["message"] == "Formula deleted successfully"
    assert client.get(f"/api/formulas/{formula['id']}", headers=auth_headers).status_code == 404


def test_list(client, auth_headers):
    _create(client, auth_headers, name="First")
    _create(client, auth_headers, name="Second")

    names = [
        item["name"]
        for item in client.get("/api/formulas", headers=auth_headers).get_json()["formulas"]
    ]

    assert sorted(names) == ["First", "Second"]
