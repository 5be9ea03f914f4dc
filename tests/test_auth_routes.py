from unittest.mock import patch

from leaselink.services import session_tokens
from leaselink.services.auth_service import authenticate_token
from leaselink.services.session_cookie import SESSION_COOKIE_NAME
from tests.fixtures_data import HAPPY_PATH_USERS, TEST_SECRET, build_client, build_session, seed_directory


def _client():
    db = build_session()
    seed_directory(db)
    return build_client(db)


def _cookie_attributes(response) -> set:
    # attributes of the session cookie, without its name=value pair
    header = response.headers["set-cookie"]
    return {part.strip().lower() for part in header.split(";")[1:]}


def test_login_sets_session_cookie_and_returns_user():
    client = _client()
    staff = HAPPY_PATH_USERS["STAFF"]

    response = client.post("/api/auth/login", json={"email": staff["email"], "password": staff["password"]})

    assert response.status_code == 200
    assert response.json() == {"user": {"id": 3, "email": staff["email"], "role": "STAFF"}}

    attributes = _cookie_attributes(response)
    assert response.headers["set-cookie"].startswith(f"{SESSION_COOKIE_NAME}=")
    assert "httponly" in attributes
    assert "samesite=lax" in attributes
    assert "path=/" in attributes
    assert "max-age=3600" in attributes
    assert "secure" not in attributes

    token = response.cookies.get(SESSION_COOKIE_NAME)
    assert session_tokens.verify(token, TEST_SECRET).id == 3


def test_login_cookie_is_secure_behind_https_proxy():
    client = _client()
    staff = HAPPY_PATH_USERS["STAFF"]

    response = client.post(
        "/api/auth/login",
        json={"email": staff["email"], "password": staff["password"]},
        headers={"X-Forwarded-Proto": "https"},
    )

    assert response.status_code == 200
    assert "secure" in _cookie_attributes(response)


def test_login_failures_are_indistinguishable():
    client = _client()

    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "x"})
    wrong = client.post("/api/auth/login", json={"email": HAPPY_PATH_USERS["STAFF"]["email"], "password": "x"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"detail": "Invalid credentials"}
    assert not unknown.headers.get_list("set-cookie")


def test_login_with_missing_fields_is_bad_request():
    client = _client()

    response = client.post("/api/auth/login", json={"email": HAPPY_PATH_USERS["STAFF"]["email"]})

    assert response.status_code == 400
    assert "password" in response.json()["detail"]


def test_register_returns_sanitized_user_and_logs_in():
    client = _client()

    response = client.post("/api/auth/register", json={"email": "new@example.com", "password": "pass1234"})

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["role"] == "STAFF"
    assert "password" not in body
    assert SESSION_COOKIE_NAME in response.cookies

    me = client.get("/api/auth/me")
    assert me.json() == {"user": body}


def test_register_conflict_and_bad_role():
    client = _client()

    taken = client.post(
        "/api/auth/register",
        json={"email": HAPPY_PATH_USERS["ADMIN"]["email"], "password": "pass1234"},
    )
    bad_role = client.post(
        "/api/auth/register",
        json={"email": "owner@example.com", "password": "pass1234", "role": "OWNER"},
    )

    assert taken.status_code == 409
    assert taken.json() == {"detail": "Email already registered"}
    assert bad_role.status_code == 400


def test_me_returns_null_user_without_valid_cookie():
    client = _client()

    anonymous = client.get("/api/auth/me")
    client.cookies.set(SESSION_COOKIE_NAME, "forged.token.value")
    forged = client.get("/api/auth/me")

    assert anonymous.status_code == 200
    assert anonymous.json() == {"user": None}
    assert forged.status_code == 200
    assert forged.json() == {"user": None}


def test_logout_clears_cookie():
    client = _client()
    staff = HAPPY_PATH_USERS["STAFF"]
    client.post("/api/auth/login", json={"email": staff["email"], "password": staff["password"]})

    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out"}
    assert response.headers["set-cookie"].startswith(f"{SESSION_COOKIE_NAME}=")
    assert "max-age=0" in _cookie_attributes(response)
    assert client.get("/api/auth/me").json() == {"user": None}


def test_register_then_login_with_mixed_case_domain():
    client = _client()
    credentials = {"email": "New.User@EXAMPLE.COM", "password": "pass1234"}

    registered = client.post("/api/auth/register", json=credentials)
    client.post("/api/auth/logout")
    logged_in = client.post("/api/auth/login", json=credentials)

    assert registered.status_code == 201
    assert registered.json()["email"] == "New.User@EXAMPLE.COM"
    assert logged_in.status_code == 200
    assert logged_in.json() == {"user": registered.json()}


def test_register_rejects_malformed_email():
    client = _client()

    response = client.post("/api/auth/register", json={"email": "not-an-email", "password": "pass1234"})

    assert response.status_code == 400
    assert "email" in response.json()["detail"]


def test_session_cookie_is_decoded_by_authenticator():
    client = _client()
    staff = HAPPY_PATH_USERS["STAFF"]
    client.post("/api/auth/login", json={"email": staff["email"], "password": staff["password"]})

    with patch("leaselink.middleware.session.authenticate_token", wraps=authenticate_token) as decode:
        response = client.get("/api/auth/me")

    decode.assert_called_once()
    assert response.json()["user"]["id"] == 3
