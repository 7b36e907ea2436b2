"""Tests for the finance, sleep, journal, mistake and todo routes."""

from __future__ import annotations

from datetime import timedelta

import pytest

from gridbook.models import User
from gridbook.models._time import utctoday


@pytest.fixture
def today() -> str:
    return utctoday().isoformat()


class TestFinance:
    def test_list_carries_summaries(self, client, auth_headers, today):
        for payload in (
            {"type": "income", "category": "Salary", "amount": 1000.25},
            {"type": "expense", "category": "Rent", "amount": 400},
            {"type": "expense", "category": "Food", "amount": 50.5},
        ):
            response = client.post(
                "/api/finance", json={"date": today, **payload}, headers=auth_headers
            )
            assert response.status_code == 201
        client.post(
            "/api/finance",
            json={"date": "2001-01-01", "type": "income", "category": "Gift", "amount": 100},
            headers=auth_headers,
        )

        body = client.get("/api/finance", headers=auth_headers).get_json()

        assert len(body["transactions"]) == 4
        assert body["monthly_summary"] == {
            "income": 1000.25,
            "expenses": 450.5,
            "balance": 549.75,
            "transaction_count": 3,
        }
        assert body["total_summary"]["transaction_count"] == 4
        assert body["total_summary"]["income"] == 1100.25

    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ({"type": "gift", "category": "x", "amount": 1}, "Type must be either income or expense"),
            ({"type": "income", "category": "x", "amount": -1}, "Amount cannot be negative"),
            ({"type": "income", "amount": 1}, "Date, type, category, and amount are required"),
        ],
    )
    def test_validation(self, client, auth_headers, today, payload, message):
        response = client.post("/api/finance", json={"date": today, **payload}, headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()["error"] == message

    def test_update_and_delete(self, client, auth_headers, today):
        created = client.post(
            "/api/finance",
            json={"date": today, "type": "expense", "category": "Food", "amount": 12},
            headers=auth_headers,
        ).get_json()["transaction"]

        updated = client.put(
            f"/api/finance/{created['id']}",
            json={"date": today, "type": "expense", "category": "Dining", "amount": 15},
            headers=auth_headers,
        ).get_json()["transaction"]
        assert updated["category"] == "Dining"
        assert updated["amount"] == 15

        assert client.delete(f"/api/finance/{created['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/finance/{created['id']}", headers=auth_headers).status_code == 404

    def test_accepts_iso_timestamps(self, client, auth_headers):
        response = client.post(
            "/api/finance",
            json={
                "date": "2024-05-01T23:30:00-02:00",
                "type": "income",
                "category": "Salary",
                "amount": 1,
            },
            headers=auth_headers,
        )

        assert response.get_json()["transaction"]["date"] == "2024-05-02T01:30:00"


class TestSleep:
    def _payload(self, day: str, duration: float = 8) -> dict:
        return {"date": day, "sleep_time": "23:00", "wake_time": "07:00", "duration": duration}

    def test_weekly_stats_on_create(self, client, auth_headers, today):
        response = client.post("/api/sleep", json=self._payload(today, 9), headers=auth_headers)

        body = response.get_json()
        assert response.status_code == 201
        assert body["entry"]["quality"] == "good"
        assert body["weekly_stats"] == {
            "average": 9.0,
            "total_hours": 9.0,
            "days": 1,
            "status": "green",
        }

    def test_average_below_target_is_red(self, client, auth_headers):
        day = utctoday()
        for offset, hours in ((0, 6), (1, 7.5)):
            client.post(
                "/api/sleep",
                json=self._payload((day - timedelta(days=offset)).isoformat(), hours),
                headers=auth_headers,
            )
        client.post(
            "/api/sleep",
            json=self._payload((day - timedelta(days=10)).isoformat(), 12),
            headers=auth_headers,
        )

        body = client.get("/api/sleep", headers=auth_headers).get_json()

        assert len(body["entries"]) == 3
        assert body["weekly_stats"]["average"] == 6.75
        assert body["weekly_stats"]["days"] == 2
        assert body["weekly_stats"]["status"] == "red"

    def test_duplicate_day(self, client, auth_headers, today):
        client.post("/api/sleep", json=self._payload(today), headers=auth_headers)

        response = client.post("/api/sleep", json=self._payload(today), headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()["error"] == "Sleep entry already exists for this date"

    def test_duplicate_day_rejected_by_unique_index(
        self, client, ctx, auth_headers, today, monkeypatch
    ):
        client.post("/api/sleep", json=self._payload(today), headers=auth_headers)
        # Concurrent writer: the lookup misses, the insert hits the constraint.
        monkeypatch.setattr(ctx.sleep, "find_one", lambda **_filters: None)

        response = client.post("/api/sleep", json=self._payload(today), headers=auth_headers)

        assert response.status_code == 400
        assert response.get_json()["error"] == "Sleep entry already exists for this date"

    def test_update_same_day_is_allowed(self, client, auth_headers, today):
        entry = client.post(
            "/api/sleep", json=self._payload(today), headers=auth_headers
        ).get_json()["entry"]

        response = client.put(
            f"/api/sleep/{entry['id']}",
            json={**self._payload(today, 6), "quality": "poor"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.get_json()["entry"]["quality"] == "poor"

    @pytest.mark.parametrize(
        "override",
        [{"sleep_time": "25:00"}, {"duration": 30}, {"quality": "amazing"}],
    )
    def test_validation(self, client, auth_headers, today, override):
        response = client.post(
            "/api/sleep", json={**self._payload(today), **override}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_required_fields(self, client, auth_headers, today):
        response = client.post("/api/sleep", json={"date": today}, headers=auth_headers)

        assert response.get_json()["error"] == (
            "Date, sleep time, wake time, and duration are required"
        )


class TestJournal:
    def test_tags_from_string(self, client, auth_headers, today):
        response = client.post(
            "/api/journal",
            json={"date": today, "title": "Day", "content": "Good", "tags": "work, , gym"},
            headers=auth_headers,
        )

        entry = response.get_json()["entry"]
        assert response.status_code == 201
        assert entry["tags"] == ["work", "gym"]
        assert entry["mood"] == "neutral"

    def test_too_many_tags(self, client, auth_headers, today):
        response = client.post(
            "/api/journal",
            json={"date": today, "title": "Day", "content": "x", "tags": [str(i) for i in range(11)]},
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_required(self, client, auth_headers):
        response = client.post("/api/journal", json={"title": "Day"}, headers=auth_headers)

        assert response.get_json()["error"] == "Date, title, and content are required"


class TestMistakes:
    def test_crud(self, client, auth_headers):
        payload = {"mistake": "Skipped tests", "reason": "Rushed", "solution": "Run them"}
        created = client.post("/api/mistakes", json=payload, headers=auth_headers)
        mistake = created.get_json()["mistake"]
        assert created.status_code == 201

        client.put(
            f"/api/mistakes/{mistake['id']}",
            json={**payload, "solution": "Automate them"},
            headers=auth_headers,
        )
        listed = client.get("/api/mistakes", headers=auth_headers).get_json()["mistakes"]

        assert listed[0]["solution"] == "Automate them"

    def test_all_fields_required(self, client, auth_headers):
        response = client.post("/api/mistakes", json={"mistake": "x"}, headers=auth_headers)

        assert response.get_json()["error"] == "All fields are required"


class TestTodos:
    def test_partial_update(self, client, auth_headers):
        todo = client.post(
            "/api/todos", json={"title": "Ship", "due_date": "2030-01-01"}, headers=auth_headers
        ).get_json()["todo"]
        assert todo["priority"] == "medium"
        assert todo["completed"] is False

        updated = client.put(
            f"/api/todos/{todo['id']}", json={"completed": True}, headers=auth_headers
        ).get_json()["todo"]

        assert updated["completed"] is True
        assert updated["title"] == "Ship"
        assert updated["due_date"] == "2030-01-01T00:00:00"

    def test_clear_due_date(self, client, auth_headers):
        todo = client.post(
            "/api/todos", json={"title": "Ship", "due_date": "2030-01-01"}, headers=auth_headers
        ).get_json()["todo"]

        updated = client.put(
            f"/api/todos/{todo['id']}", json={"due_date": None}, headers=auth_headers
        ).get_json()["todo"]

        assert updated["due_date"] is None

    def test_title_rules(self, client, auth_headers):
        assert client.post("/api/todos", json={}, headers=auth_headers).get_json()["error"] == (
            "Title is required"
        )
        todo = client.post("/api/todos", json={"title": "a"}, headers=auth_headers).get_json()["todo"]
        response = client.put(f"/api/todos/{todo['id']}", json={"title": ""}, headers=auth_headers)
        assert response.get_json()["error"] == "Title cannot be empty"


def test_records_are_scoped_to_their_owner(client, ctx, auth_headers):
    todo = client.post("/api/todos", json={"title": "Mine"}, headers=auth_headers).get_json()["todo"]
    stranger = ctx.users.create(User(email="stranger@example.com"))
    headers = {"Authorization": f"Bearer {ctx.tokens.issue(stranger.id)}"}

    assert client.get(f"/api/todos/{todo['id']}", headers=headers).status_code == 404
    assert client.get("/api/todos", headers=headers).get_json()["todos"] == []
