from __future__ import annotations

import pytest

from gsheets_service import app

PAYLOAD = {
    "desks": [
        {"id": "a", "x": 0, "y": 0},
        {"id": "b", "x": 4, "y": 0},
        {"id": "c", "x": 0, "y": 3},
    ],
    "students": [{"id": "s1", "name": "Ann"}, {"id": "s2", "name": "Bob"}],
    "rules": [{"kind": "front-row", "members": "Bob"}],
    "seed": 11,
}


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def test_solve_returns_assignment_and_compliance(client):
    resp = client.post("/solve", json=PAYLOAD)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["seed"] == 11
    assert [r["desk"] for r in body["assignment"]] == ["a", "b", "c"]
    assert body["assignment"][0]["student_id"] == "s2"
    assert body["unplaced"] == []
    assert body["compliance"] == {"satisfied": ["Front Row: Bob"], "violated": []}


def test_solve_is_deterministic_for_a_seed(client):
    first = client.post("/solve", json=PAYLOAD).get_json()
    second = client.post("/solve", json=PAYLOAD).get_json()
    assert first == second


def test_solve_rejects_empty_roster(client):
    resp = client.post("/solve", json={**PAYLOAD, "students": []})
    assert resp.status_code == 400
    assert "No students" in resp.get_json()["error"]


def test_solve_rejects_bad_seed(client):
    resp = client.post("/solve", json={**PAYLOAD, "seed": "soon"})
    assert resp.status_code == 400
    assert "'seed' must be an integer" in resp.get_json()["error"]


def test_solve_rejects_unknown_rule_member(client):
    resp = client.post("/solve", json={**PAYLOAD, "rules": [{"kind": "keep-apart", "members": "Ann & Zed"}]})
    assert resp.status_code == 400
    assert "unknown student 'Zed'" in resp.get_json()["error"]


def test_solve_rejects_infinite_coordinate(client):
    body = (
        '{"desks": [{"id": "a", "x": Infinity, "y": 0}],'
        ' "students": [{"id": "s1", "name": "Ann"}]}'
    )
    resp = client.post("/solve", data=body, content_type="application/json")
    assert resp.status_code == 400
    assert "finite whole number" in resp.get_json()["error"]


@pytest.mark.parametrize("route", ["/solve", "/solve-sheet"])
@pytest.mark.parametrize("body", ["[1, 2]", '"desks"', "3"])
def test_non_object_body_is_rejected(client, route, body):
    resp = client.post(route, data=body, content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Request body must be a JSON object."}


def test_solve_sheet_requires_spreadsheet_id(client):
    resp = client.post("/solve-sheet", json={})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Missing 'spreadsheet_id'."}
