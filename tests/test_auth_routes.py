from jose import jwt

import config


def test_register_then_register_same_name_is_rejected(register):
    first = register("alice")
    second = register("alice", password="another")

    assert first["code"] == 200
    assert second == {"code": 400, "message": "User name already exists"}


def test_register_returns_stored_user_without_password(register):
    body = register("bob", email="bob@example.com")

    assert body["code"] == 200
    assert body["data"]["name"] == "bob"
    assert body["data"]["role"] == "USER"
    assert isinstance(body["data"]["id"], int)
    assert "password" not in body["data"]


def test_register_missing_password_is_bad_request(client):
    body = client.post("/api/users/register", json={"name": "carol"}).json()

    assert body["code"] == 400
    assert "password" in body["message"]


def test_login_sets_http_only_token_cookie(client, register):
    register("alice", password="pw-alice")

    response = client.post("/api/users/login", json={"name": "alice", "password": "pw-alice"})
    body = response.json()

    assert body["code"] == 200
    assert body["data"]["name"] == "alice"
    assert "password" not in body["data"]

    cookie = response.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "HttpOnly" in cookie
    assert "Max-Age=7200" in cookie
    assert "Path=/" in cookie

    token = response.cookies["token"]
    claims = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    assert claims["sub"] == "alice"


def test_login_failures_look_the_same(client, register):
    register("alice", password="pw-alice")

    wrong_password = client.post(
        "/api/users/login", json={"name": "alice", "password": "nope"}
    )
    unknown_user = client.post(
        "/api/users/login", json={"name": "mallory", "password": "pw-alice"}
    )

    assert wrong_password.json() == {"code": 401, "message": "Invalid username or password"}
    assert unknown_user.json() == wrong_password.json()
    assert "set-cookie" not in wrong_password.headers
    assert "set-cookie" not in unknown_user.headers


def test_logout_expires_token_cookie(client, register):
    register("alice", password="pw-alice")
    client.post("/api/users/login", json={"name": "alice", "password": "pw-alice"})

    response = client.post("/api/users/logout")

    assert response.json() == {"code": 200, "message": "Logout successful"}
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "Max-Age=0" in cookie
    assert "Path=/" in cookie
    assert "token" not in client.cookies


def test_logout_without_session_succeeds(client):
    response = client.post("/api/users/logout")

    assert response.json()["code"] == 200
    assert "Max-Age=0" in response.headers["set-cookie"]


def test_login_with_missing_fields_is_invalid_credentials(client):
    response = client.post("/api/users/login", json={"name": "alice"})

    assert response.json() == {"code": 401, "message": "Invalid username or password"}
    assert "set-cookie" not in response.headers


def test_register_with_null_role_gets_default_role(register):
    body = register("dave", role=None)

    assert body["code"] == 200
    assert body["data"]["role"] == "USER"


def test_cross_origin_preflight_is_allowed_from_any_origin(client):
    origin = "https://admin.example.com"
    response = client.options(
        "/api/users/login",
        headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == origin
    assert response.headers["access-control-allow-credentials"] == "true"
