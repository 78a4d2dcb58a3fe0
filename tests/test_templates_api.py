"""HTTP-level tests for the /api/v1/templates endpoints."""

import uuid
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

BASE_URL = "/api/v1/templates"


def _create(client: TestClient, payload: dict) -> dict:
    response = client.post(BASE_URL, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "version": "0.1.0"}


def test_openapi_lists_template_routes(client: TestClient):
    paths = client.get("/openapi.json").json()["paths"]
    assert BASE_URL in paths
    assert f"{BASE_URL}/count" in paths
    assert f"{BASE_URL}/{{template_id}}" in paths


def test_create_returns_record(client: TestClient, valid_template):
    data = _create(client, valid_template)
    assert uuid.UUID(data["id"]).version == 4
    assert data["name"] == "Test Template"
    assert data["email"] == "test@example.com"
    assert data["birthDate"] == "1990-01-01"
    assert data["createdAt"] == data["updatedAt"]


def test_create_reports_every_violation(client: TestClient):
    response = client.post(
        BASE_URL, json={"name": 123, "email": "invalid-email", "birthDate": "invalid-date"}
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation Failed"
    assert {(e["field"], e["code"]) for e in body["errors"]} == {
        ("name", "NAME_NOT_STRING"),
        ("email", "EMAIL_INVALID"),
        ("birthDate", "BIRTH_DATE_INVALID"),
    }


def test_create_without_body(client: TestClient):
    response = client.post(BASE_URL)
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "INVALID_BODY"


def test_create_duplicate_email_conflicts(client: TestClient, valid_template):
    _create(client, valid_template)
    response = client.post(BASE_URL, json=valid_template)
    assert response.status_code == 409
    assert response.json()["errors"][0]["code"] == "TEMPLATE_CONFLICT"


def test_get_round_trip(client: TestClient, valid_template):
    created = _create(client, valid_template)
    response = client.get(f"{BASE_URL}/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.parametrize(
    "template_id",
    ["not-a-uuid", "123", "bbf81e77-17eb-49f5-a910-fb1127b156cg"],
)
def test_malformed_id_is_rejected_before_service(client: TestClient, template_id):
    with patch("app.crud.template.get_template_by_id") as fetch:
        response = client.get(f"{BASE_URL}/{template_id}")
    assert response.status_code == 400
    assert response.json()["errors"] == [
        {
            "message": "Template ID must be a valid UUID v4 format",
            "code": "INVALID_TEMPLATE_ID",
            "field": "templateId",
        }
    ]
    fetch.assert_not_called()


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_unknown_id_is_not_found(client: TestClient, method):
    kwargs = {"json": {"name": "x"}} if method == "put" else {}
    response = client.request(method.upper(), f"{BASE_URL}/{uuid.uuid4()}", **kwargs)
    assert response.status_code == 404
    assert response.json() == {
        "message": "Template not found",
        "errors": [{"message": "Template not found", "code": "TEMPLATE_NOT_FOUND", "field": None}],
    }


def test_update_partial(client: TestClient, valid_template):
    created = _create(client, valid_template)
    response = client.put(f"{BASE_URL}/{created['id']}", json={"name": "Updated Template"})
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Updated Template"
    assert data["email"] == created["email"]
    assert data["birthDate"] == created["birthDate"]
    assert data["createdAt"] == created["createdAt"]


def test_update_with_empty_body_is_noop(client: TestClient, valid_template):
    created = _create(client, valid_template)
    response = client.put(f"{BASE_URL}/{created['id']}", json={})
    assert response.status_code == 200
    assert response.json() == created


def test_update_rejects_empty_email(client: TestClient, valid_template):
    created = _create(client, valid_template)
    response = client.put(f"{BASE_URL}/{created['id']}", json={"email": ""})
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "EMAIL_INVALID"


def test_delete_then_get(client: TestClient, valid_template):
    created = _create(client, valid_template)
    response = client.delete(f"{BASE_URL}/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created
    assert client.get(f"{BASE_URL}/{created['id']}").status_code == 404


def test_list_total_matches_count(client: TestClient):
    for i in range(12):
        _create(client, {"name": f"T{i}", "email": f"t{i}@example.com", "birthDate": "2000-01-01"})

    page = client.get(BASE_URL).json()
    count = client.get(f"{BASE_URL}/count").json()
    assert count == {"count": 12}
    assert page["total"] == 12
    assert len(page["data"]) == 10
    assert page["page"] == 1
    assert page["pageSize"] == 10
    assert page["totalPages"] == 2


def test_list_filter_and_sort(client: TestClient):
    _create(client, {"name": "Bob", "email": "bob@example.com", "birthDate": "1990-01-01"})
    _create(client, {"name": "Alice", "email": "alice@example.com", "birthDate": "1990-01-01"})
    _create(client, {"name": "Carol", "email": "carol@other.org", "birthDate": "1990-01-01"})

    response = client.get(BASE_URL, params={"email[like]": "example.com", "sort": "name:desc"})
    assert response.status_code == 200
    assert [t["name"] for t in response.json()["data"]] == ["Bob", "Alice"]


def test_list_rejects_oversized_page(client: TestClient):
    with patch("app.crud.template.get_templates") as fetch:
        response = client.get(BASE_URL, params={"pageSize": "101"})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation Failed"
    assert body["errors"][0]["code"] == "PAGE_SIZE_EXCEEDED"
    fetch.assert_not_called()


def test_persistence_failure_is_opaque_500(client: TestClient):
    error = OperationalError("SELECT count(*)", {}, Exception("disk I/O error"))
    with patch("app.crud.template.count_all_templates", side_effect=error):
        response = client.get(f"{BASE_URL}/count")
    assert response.status_code == 500
    body = response.json()
    assert body["errors"][0]["code"] == "PERSISTENCE_FAILURE"
    assert "disk I/O error" not in response.text


@pytest.mark.parametrize(
    "params, code",
    [
        ({"page": "²"}, "INVALID_PAGE"),
        ({"pageSize": "9" * 5000}, "INVALID_PAGE_SIZE"),
        ({"birthDate[like]": "1990"}, "INVALID_FILTER_OPERATOR"),
    ],
)
def test_list_rejects_bad_query_values(client: TestClient, params, code):
    response = client.get(BASE_URL, params=params)
    assert response.status_code == 400
    assert [e["code"] for e in response.json()["errors"]] == [code]


def test_list_applies_repeated_filters(client: TestClient):
    for name in ["Alice", "Bob", "Carol"]:
        _create(client, {"name": name, "email": f"{name.lower()}@example.com", "birthDate": "1990-01-01"})

    response = client.get(f"{BASE_URL}?name[ne]=Alice&name[ne]=Bob&sort=name")
    assert response.status_code == 200
    assert [t["name"] for t in response.json()["data"]] == ["Carol"]

    response = client.get(f"{BASE_URL}?page=1&page=2")
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "DUPLICATE_QUERY_PARAM"


def test_like_wildcards_match_literally(client: TestClient):
    _create(client, {"name": "100% cotton", "email": "a@example.com", "birthDate": "1990-01-01"})
    _create(client, {"name": "1000 cotton", "email": "b@example.com", "birthDate": "1990-01-01"})

    response = client.get(BASE_URL, params={"name[like]": "0%"})
    assert [t["name"] for t in response.json()["data"]] == ["100% cotton"]


def test_email_is_returned_as_stored(client: TestClient):
    created = _create(client, {"name": "Mixed", "email": "Test@EXAMPLE.COM", "birthDate": "1990-01-01"})
    assert created["email"] == "Test@EXAMPLE.COM"
    assert client.get(f"{BASE_URL}/{created['id']}").json()["email"] == "Test@EXAMPLE.COM"

    response = client.get(BASE_URL, params={"email": created["email"]})
    assert response.json()["total"] == 1
