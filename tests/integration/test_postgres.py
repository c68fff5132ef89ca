"""
End-to-end tests against a live Postgres.

Run with TEST_DATABASE_URL pointing at a disposable database.
"""

from uuid import uuid4

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture
def people(live_client):
    name = f"people_{uuid4().hex[:8]}"
    response = live_client.post(
        "/create-table",
        json={
            "tableName": name,
            "columns": [
                {"name": "id", "type": "INTEGER"},
                {"name": "name", "type": "TEXT"},
                {"name": "born", "type": "DATE"},
                {"name": "updateField", "type": "TEXT"},
            ],
        },
    )
    assert response.status_code == 201
    yield name
    live_client.delete(f"/delete-table/{name}")


def _rows_by_id(client, table):
    response = client.get(f"/table-data/{table}")
    assert response.status_code == 200
    return {row["id"]: row for row in response.json()}


def test_create_then_delete_removes_table(live_client):
    name = f"t_{uuid4().hex[:8]}"

    assert live_client.post("/create-table", json={"tableName": name, "columns": []}).status_code == 201
    assert name in live_client.get("/tables").json()

    assert live_client.delete(f"/delete-table/{name}").status_code == 200
    assert name not in live_client.get("/tables").json()


def test_delete_missing_table_is_ok(live_client):
    assert live_client.delete(f"/delete-table/never_{uuid4().hex[:8]}").status_code == 200


def test_create_is_idempotent(live_client, people):
    response = live_client.post(
        "/create-table",
        json={"tableName": people, "columns": [{"name": "other", "type": "TEXT"}]},
    )
    assert response.status_code == 201


def test_upload_then_read(live_client, people):
    response = live_client.post(
        f"/upload/{people}",
        json={"data": [{"id": 1, "name": "Ann"}, {"id": 2, "name": "Bo"}]},
    )
    assert response.status_code == 200

    rows = _rows_by_id(live_client, people)
    assert {k: (v["id"], v["name"]) for k, v in rows.items()} == {1: (1, "Ann"), 2: (2, "Bo")}


def test_upload_lets_postgres_coerce_json_values(live_client, people):
    response = live_client.post(
        f"/upload/{people}",
        json={
            "data": [
                {"id": 1, "name": "Ann", "born": "2024-01-02"},
                {"id": "2", "name": 42, "born": None},
            ]
        },
    )
    assert response.status_code == 200

    rows = _rows_by_id(live_client, people)
    assert rows[1]["born"] == "2024-01-02"
    assert rows[2]["name"] == "42"
    assert rows[2]["born"] is None


def test_update_with_numeric_string_match_key(live_client, people):
    live_client.post(f"/upload/{people}", json={"data": [{"id": 1, "name": "Ann"}]})

    response = live_client.put(f"/update-table/{people}", json=[{"id": "1", "updateField": 7}])
    assert response.status_code == 200

    assert _rows_by_id(live_client, people)[1]["updateField"] == "7"


def test_upload_failure_leaves_no_rows(live_client, people):
    response = live_client.post(
        f"/upload/{people}",
        json={"data": [{"id": 1, "name": "Ann"}, {"id": "not-an-int", "name": "Bo"}]},
    )
    assert response.status_code == 500
    assert response.text == "Failed to upload data. (row 1)"
    assert _rows_by_id(live_client, people) == {}


def test_update_sets_update_field_column(live_client, people):
    live_client.post(f"/upload/{people}", json={"data": [{"id": 1, "name": "Ann"}]})

    response = live_client.put(f"/update-table/{people}", json=[{"id": 1, "updateField": "Annie"}])
    assert response.status_code == 200

    assert _rows_by_id(live_client, people)[1]["updateField"] == "Annie"


def test_update_failure_rolls_back_every_row(live_client, people):
    live_client.post(
        f"/upload/{people}",
        json={"data": [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}, {"id": 3, "name": "c"}]},
    )

    response = live_client.put(
        f"/update-table/{people}",
        json=[
            {"id": 1, "updateField": "x"},
            {"no_such_column": 2, "updateField": "y"},
            {"id": 3, "updateField": "z"},
        ],
    )
    assert response.status_code == 500
    assert response.text == "Error updating table data (row 1)"

    rows = _rows_by_id(live_client, people)
    assert rows[1]["updateField"] is None
    assert rows[3]["updateField"] is None


def test_read_unknown_table(live_client):
    response = live_client.get(f"/table-data/ghost_{uuid4().hex[:8]}")
    assert response.status_code == 500
