"""Tests for the HTTP API against an in-memory store."""

import pytest
from fastapi.testclient import TestClient

from socialchain import client as builders
from socialchain.api import app

from conftest import make_identity


@pytest.fixture
def api(monkeypatch):
    monkeypatch.setenv("SOCIALCHAIN_STORE_BACKEND", "memory")
    monkeypatch.setenv("SOCIALCHAIN_LOG_LEVEL", "WARNING")
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user(api, owner):
    api.post(f"/api/accounts/{owner}/fund", json={})
    return str(owner)


class TestHealth:
    """Test health endpoint."""

    def test_health(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert len(body["program_id"]) >= 32


class TestDerive:
    """Test address derivation endpoint."""

    def test_derive_profile(self, api, owner, program_id):
        response = api.get(f"/api/derive/{owner}/profile")
        assert response.status_code == 200
        assert response.json()["address"] == str(builders.profile_address(program_id, owner))

    def test_derive_post_index(self, api, owner, program_id):
        response = api.get(f"/api/derive/{owner}/post", params={"index": 3})
        assert response.json()["address"] == str(builders.post_address(program_id, owner, 3))

    def test_unknown_role(self, api, owner):
        assert api.get(f"/api/derive/{owner}/avatar").status_code == 400

    def test_bad_address(self, api):
        assert api.get("/api/derive/not-an-address/profile").status_code == 400


class TestAccounts:
    """Test account endpoints."""

    def test_fund(self, api, alice):
        response = api.post(f"/api/accounts/{alice}/fund", json={"lamports": 500})
        assert response.status_code == 200
        assert response.json()["lamports"] == 500

    def test_missing_account(self, api, alice):
        assert api.get(f"/api/accounts/{alice}").status_code == 404

    def test_get_account(self, api, alice):
        api.post(f"/api/accounts/{alice}/fund", json={"lamports": 9})
        body = api.get(f"/api/accounts/{alice}").json()
        assert body["lamports"] == 9
        assert body["size"] == 0


class TestUsers:
    """Test follow graph endpoints."""

    def test_follow_flow(self, api, user, alice, bob):
        assert api.post(f"/api/users/{user}/initialize", json={"role": "profile"}).status_code == 200
        api.post(f"/api/users/{user}/follow", json={"target": str(alice)})
        api.post(f"/api/users/{user}/follow", json={"target": str(bob)})

        response = api.post(f"/api/users/{user}/unfollow", json={"target": str(alice)})
        assert response.status_code == 200
        assert response.json()["profile"]["follows"] == [str(bob)]

        follows = api.get(f"/api/users/{user}/follows").json()
        assert follows["profile"]["follow_count"] == 1

    def test_initialize_twice_conflicts(self, api, user):
        api.post(f"/api/users/{user}/initialize", json={"role": "profile"})
        response = api.post(f"/api/users/{user}/initialize", json={"role": "profile"})
        assert response.status_code == 409
        assert response.json()["detail"]["error_type"] == "AllocationError"

    def test_initialize_unknown_role(self, api, user):
        response = api.post(f"/api/users/{user}/initialize", json={"role": "avatar"})
        assert response.status_code == 400

    def test_unfunded_initialize(self, api):
        stranger = make_identity("stranger")
        response = api.post(f"/api/users/{stranger}/initialize", json={"role": "profile"})
        assert response.status_code == 409

    def test_follows_before_initialize(self, api, user):
        assert api.get(f"/api/users/{user}/follows").status_code == 403


class TestPosts:
    """Test post endpoints."""

    def test_post_and_read(self, api, user):
        api.post(f"/api/users/{user}/initialize", json={"role": "post"})
        response = api.post(f"/api/users/{user}/posts", json={"content": "gm"})
        assert response.status_code == 200

        body = api.get(f"/api/users/{user}/posts").json()
        assert [p["content"] for p in body["post_log"]["posts"]] == ["gm"]

    def test_post_longer_than_reservation(self, api, user):
        api.post(f"/api/users/{user}/initialize", json={"role": "post"})
        response = api.post(f"/api/users/{user}/posts", json={"content": "x" * 300})
        assert response.status_code == 200

    def test_post_larger_than_log(self, api, user):
        api.post(f"/api/users/{user}/initialize", json={"role": "post"})
        response = api.post(f"/api/users/{user}/posts", json={"content": "x" * 30_000})
        assert response.status_code == 409
        assert response.json()["detail"]["error_type"] == "CapacityExceededError"
