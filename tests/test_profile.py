import asyncio
import sqlite3

import pytest

from profile_api.app.core.config import settings
from profile_api.app.core.errors import NotFoundError
from profile_api.app.services.profile_service import ProfileService


def _create_profile(client, headers, **fields):
    payload = {"status": "Developer", "skills": "python, fastapi"}
    payload.update(fields)
    resp = client.post("/api/v1/profile/", json=payload, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def _user_id(client, headers) -> int:
    return client.get("/api/v1/auth/", headers=headers).json()["id"]


def test_me_without_profile_returns_400(client, auth_headers):
    resp = client.get("/api/v1/profile/me", headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"msg": "There is no profile for this user"}


def test_me_requires_token(client):
    resp = client.get("/api/v1/profile/me")
    assert resp.status_code == 401


def test_me_rejects_bad_token(client):
    resp = client.get("/api/v1/profile/me", headers={"Authorization": "Bearer not.a.token"})
    assert resp.status_code == 401


def test_create_then_fetch_own_profile(client, auth_headers):
    client.post(
        "/api/v1/profile/",
        json={"status": "dev", "skills": "js, node"},
        headers=auth_headers,
    )

    resp = client.get("/api/v1/profile/me", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "dev"
    assert data["skills"] == ["js", "node"]
    assert data["name"] == "Tester"
    assert data["avatar"].startswith("https://www.gravatar.com/avatar/")


def test_skills_are_trimmed_in_order(client, auth_headers):
    data = _create_profile(client, auth_headers, skills="a, b,c")
    assert data["skills"] == ["a", "b", "c"]


def test_upsert_requires_status_and_skills(client, auth_headers):
    resp = client.post("/api/v1/profile/", json={"company": "Acme"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {
        "errors": [
            {"field": "status", "message": "Status is required"},
            {"field": "skills", "message": "Skills is required"},
        ]
    }


def test_upsert_reports_only_violated_field(client, auth_headers):
    resp = client.post(
        "/api/v1/profile/",
        json={"status": "Developer", "skills": "   "},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert [e["field"] for e in resp.json()["errors"]] == ["skills"]


def test_upsert_rejects_skills_made_of_separators(client, auth_headers):
    resp = client.post(
        "/api/v1/profile/",
        json={"status": "dev", "skills": " , ,"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json() == {"errors": [{"field": "skills", "message": "Skills is required"}]}
    assert client.get("/api/v1/profile/me", headers=auth_headers).status_code == 400


def test_upsert_rejects_wrong_types(client, auth_headers):
    resp = client.post(
        "/api/v1/profile/",
        json={"status": ["not", "a", "string"], "skills": "python"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "status"


def test_social_contains_only_supplied_platforms(client, auth_headers):
    data = _create_profile(
        client,
        auth_headers,
        twitter="https://twitter.com/me",
        youtube="",
    )
    assert data["social"] == {"twitter": "https://twitter.com/me"}


def test_upsert_is_idempotent(client, auth_headers):
    fields = {"company": "Acme", "bio": "Hello", "linkedin": "https://linkedin.com/in/me"}
    first = _create_profile(client, auth_headers, **fields)
    second = _create_profile(client, auth_headers, **fields)
    assert first == second


def test_update_keeps_omitted_fields(client, auth_headers):
    _create_profile(
        client,
        auth_headers,
        company="Acme",
        website="https://example.com",
        twitter="https://twitter.com/me",
    )
    updated = _create_profile(
        client,
        auth_headers,
        status="Senior Developer",
        skills="go",
        facebook="https://facebook.com/me",
    )

    assert updated["status"] == "Senior Developer"
    assert updated["skills"] == ["go"]
    assert updated["company"] == "Acme"
    assert updated["website"] == "https://example.com"
    assert updated["social"] == {
        "twitter": "https://twitter.com/me",
        "facebook": "https://facebook.com/me",
    }


def test_list_profiles_includes_empty_experiences(client, register):
    first = register(name="First")
    second = register(name="Second")
    register(name="No Profile")
    _create_profile(client, first)
    _create_profile(client, second)
    client.post(
        "/api/v1/profile/experience",
        json={"title": "Engineer", "company": "Acme", "from": "2020-01-01"},
        headers=second,
    )

    resp = client.get("/api/v1/profile/")
    assert resp.status_code == 200
    profiles = {p["name"]: p for p in resp.json()}
    assert set(profiles) == {"First", "Second"}
    assert profiles["First"]["experiences"] == []
    assert [e["title"] for e in profiles["Second"]["experiences"]] == ["Engineer"]


def test_get_profile_by_user_id(client, auth_headers):
    _create_profile(client, auth_headers, location="Berlin")
    user_id = _user_id(client, auth_headers)

    resp = client.get(f"/api/v1/profile/user/{user_id}")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 1
    assert data[0]["user_id"] == user_id
    assert data[0]["location"] == "Berlin"
    assert data[0]["experiences"] == []


def test_get_profile_by_unknown_user_id(client):
    for user_id in ("999", "not-a-number"):
        resp = client.get(f"/api/v1/profile/user/{user_id}")
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Profile not found"}


def test_add_experience_requires_fields(client, auth_headers):
    resp = client.post(
        "/api/v1/profile/experience",
        json={"location": "Remote"},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["errors"] == [
        {"field": "title", "message": "Title is required"},
        {"field": "company", "message": "Company is required"},
        {"field": "from", "message": "From date is required"},
    ]


def test_add_experience_always_creates_new_row(client, auth_headers):
    body = {
        "title": "Engineer",
        "company": "Acme",
        "from": "2020-01-01",
        "current": True,
        "description": "Backend work",
    }
    first = client.post("/api/v1/profile/experience", json=body, headers=auth_headers)
    second = client.post("/api/v1/profile/experience", json=body, headers=auth_headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["id"] != second.json()["id"]
    assert first.json()["current"] is True
    assert first.json()["from_date"] == "2020-01-01"
    assert first.json()["to_date"] is None


def test_delete_experience(client, auth_headers, register):
    _create_profile(client, auth_headers)
    body = {"title": "Engineer", "company": "Acme", "from": "2020-01-01"}
    kept = client.post("/api/v1/profile/experience", json=body, headers=auth_headers).json()
    removed = client.post("/api/v1/profile/experience", json=body, headers=auth_headers).json()

    other = register(name="Other")
    resp = client.delete(f"/api/v1/profile/experience/{removed['id']}", headers=other)
    assert resp.status_code == 400
    assert resp.json() == {"msg": "Experience not found"}

    resp = client.delete(f"/api/v1/profile/experience/{removed['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()] == [kept["id"]]


def test_delete_profile_and_user(client, auth_headers):
    _create_profile(client, auth_headers)
    client.post(
        "/api/v1/profile/experience",
        json={"title": "Engineer", "company": "Acme", "from": "2020-01-01"},
        headers=auth_headers,
    )
    user_id = _user_id(client, auth_headers)

    resp = client.delete("/api/v1/profile/", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"msg": "User deleted"}

    # The token now names a user that no longer exists.
    assert client.get("/api/v1/profile/me", headers=auth_headers).status_code == 401
    assert client.get(f"/api/v1/profile/user/{user_id}").status_code == 400

    conn = sqlite3.connect(settings.database_url)
    try:
        count = conn.execute("SELECT COUNT(*) FROM experiences WHERE user_id = ?", (user_id,)).fetchone()[0]
    finally:
        conn.close()
    assert count == 0


def test_delete_without_profile_still_deletes_user(client, auth_headers):
    resp = client.delete("/api/v1/profile/", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"msg": "User deleted"}


def test_failed_delete_leaves_profile_intact(client, auth_headers):
    _create_profile(client, auth_headers)
    conn = sqlite3.connect(settings.database_url)
    try:
        conn.execute(
            "CREATE TRIGGER block_user_delete BEFORE DELETE ON users "
            "BEGIN SELECT RAISE(ABORT, 'blocked'); END"
        )
        conn.commit()
    finally:
        conn.close()

    resp = client.delete("/api/v1/profile/", headers=auth_headers)
    assert resp.status_code == 500
    assert resp.json() == {"msg": "Server error"}

    resp = client.get("/api/v1/profile/me", headers=auth_headers)
    assert resp.status_code == 200


def test_storage_failure_returns_generic_error(client, monkeypatch):
    from profile_api.app.services import profile_service

    def broken_connection():
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(profile_service, "get_connection", broken_connection)

    resp = client.get("/api/v1/profile/")
    assert resp.status_code == 500
    assert resp.json() == {"msg": "Server error"}
    assert "disk" not in resp.text


def test_own_profile_lookup_after_delete_is_not_found(client, auth_headers):
    _create_profile(client, auth_headers)
    user_id = _user_id(client, auth_headers)
    client.delete("/api/v1/profile/", headers=auth_headers)

    with pytest.raises(NotFoundError):
        asyncio.run(ProfileService.get_own_profile(user_id))
