from datetime import timedelta

from storefront.auth import service
from storefront.auth.passwords import is_password_strong


def test_signup_returns_token_and_user(client):
    response = client.post(
        "/api/auth/signup",
        json={"email": "New.User@Example.com", "password": "Str0ng!Pass", "firstName": "New", "lastName": "User"},
    )
    assert response.status_code == 201

    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["firstName"] == "New"
    assert "passwordHash" not in data["user"]


def test_signup_duplicate_email_conflicts(client, test_user):
    response = client.post(
        "/api/auth/signup",
        json={"email": "TEST@example.com", "password": "Str0ng!Pass", "firstName": "A", "lastName": "B"},
    )
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "Email already registered"}


def test_signup_weak_password_rejected(client):
    response = client.post(
        "/api/auth/signup",
        json={"email": "weak@example.com", "password": "password", "firstName": "W", "lastName": "P"},
    )
    assert response.status_code == 400
    assert "Password must be at least 8 characters" in response.json()["error"]


def test_signup_invalid_email_rejected(client):
    response = client.post(
        "/api/auth/signup",
        json={"email": "not-an-email", "password": "Str0ng!Pass", "firstName": "A", "lastName": "B"},
    )
    assert response.status_code == 400
    assert "email" in response.json()["error"]


def test_password_strength_rules():
    assert is_password_strong("Str0ng!Pass")
    assert not is_password_strong("Sh0rt!")
    assert not is_password_strong("nouppercase1!")
    assert not is_password_strong("NoDigits!!")
    assert not is_password_strong("NoSpecial123")


def test_login_success(client, test_user):
    response = client.post("/api/auth/login", json={"email": test_user.email, "password": "ValidPassword123!"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == test_user.id
    assert service.decode_access_token(data["token"])["id"] == test_user.id


def test_login_wrong_password(client, test_user):
    response = client.post("/api/auth/login", json={"email": test_user.email, "password": "WrongPassword1!"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "Whatever1!"})
    assert response.status_code == 401


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Access token required"}


def test_profile_with_garbage_token(client):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Invalid or expired token"}


def test_profile_with_expired_token(client, test_user):
    token = service.create_access_token(test_user.email, test_user.id, expires_delta=timedelta(minutes=-1))
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_profile_returns_user(client, auth_headers, test_user):
    response = client.get("/api/auth/profile", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["email"] == test_user.email


def test_logout_revokes_token(client, auth_headers):
    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = client.get("/api/auth/profile", headers=auth_headers)
    assert response.status_code == 403


def test_logout_does_not_touch_other_sessions(client, test_user, login_as):
    first = login_as(test_user.email)
    second = login_as(test_user.email)

    client.post("/api/auth/logout", headers=first)

    assert client.get("/api/auth/profile", headers=first).status_code == 403
    assert client.get("/api/auth/profile", headers=second).status_code == 200


def test_logout_without_token_succeeds(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 200


def test_revoke_token_rejects_invalid_token(db_session):
    assert service.revoke_token(db_session, "not-a-jwt") is False


def test_health_and_request_id(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]
