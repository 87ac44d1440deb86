from datetime import timedelta

import pytest

from taskmaster.utils.security import create_access_token


def test_missing_header_is_401(client):
    resp = client.get("/tasks")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Access token required"
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.parametrize("header", ["Bearer", "Bearer ", "abc"])
def test_header_without_token_segment_is_401(client, header):
    resp = client.get("/tasks", headers={"Authorization": header})
    assert resp.status_code == 401


def test_token_under_other_scheme_is_verified_and_rejected(client, settings):
    token = create_access_token({"id": 1, "username": "alice"}, "not-the-server-secret")
    resp = client.get("/tasks", headers={"Authorization": f"Token {token}"})
    assert resp.status_code == 403


def test_valid_token_under_other_scheme_is_admitted(client, settings):
    token = create_access_token({"id": 1, "username": "alice"}, settings.SECRET_KEY)
    resp = client.get("/tasks", headers={"Authorization": f"Token {token}"})
    assert resp.status_code == 200


def test_malformed_token_is_403(client):
    resp = client.get("/tasks", headers={"Authorization": "Bearer abc.def.ghi"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Invalid token"


def test_token_with_wrong_signature_is_403(client):
    token = create_access_token({"id": 1, "username": "alice"}, "not-the-server-secret")
    resp = client.get("/tasks", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_expired_token_is_403(client, settings):
    token = create_access_token(
        {"id": 1, "username": "alice"}, settings.SECRET_KEY, expires_delta=timedelta(minutes=-1)
    )
    resp = client.get("/tasks", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_valid_token_is_admitted_without_store_lookup(client, settings):
    # No such user exists; the guard trusts the signature alone
    token = create_access_token({"id": 424242, "username": "ghost"}, settings.SECRET_KEY)
    resp = client.get("/tasks", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/tasks"),
        ("get", "/tasks"),
        ("put", "/tasks/1"),
        ("delete", "/tasks/1"),
        ("get", "/tasks/filter"),
        ("get", "/tasks/search?keyword=x"),
    ],
)
def test_every_task_route_is_guarded(client, method, path):
    resp = client.request(method.upper(), path, json={"title": "x", "priority": "low"})
    assert resp.status_code == 401
