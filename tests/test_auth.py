def test_signup_then_current_user(client, make_user):
    user, headers = make_user("Alice")

    assert user["name"] == "Alice"
    assert user["email"] == "member1@example.com"
    assert "password" not in user and "passwordHash" not in user
    assert str(user["id"]).endswith("01")

    me = client.get("/api/auth/current-user", headers=headers)
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


def test_signup_normalizes_email_and_rejects_duplicates(client):
    payload = {"name": "Bob", "email": "Bob@Example.COM", "password": "pw"}
    first = client.post("/api/auth/signup", json=payload)
    assert first.status_code == 201
    assert first.json()["email"] == "bob@example.com"

    again = client.post("/api/auth/signup", json={**payload, "email": "bob@example.com"})
    assert again.status_code == 409
    assert again.json()["error"] == "Email is already registered"


def test_signup_missing_field_is_400(client):
    response = client.post("/api/auth/signup", json={"name": "NoMail", "password": "pw"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert any("email" in detail["loc"] for detail in body["details"])
    assert body["requestId"]


def test_signin_returns_token_and_cookie(client, make_user):
    make_user()
    response = client.post(
        "/api/auth/signin", json={"email": "MEMBER1@example.com", "password": "secret123"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "bearer"
    assert body["accessToken"]
    assert body["expiresInMs"] > 0
    assert body["user"]["email"] == "member1@example.com"
    assert "jwt_token" in response.headers.get("set-cookie", "")


def test_signin_wrong_password_is_401(client, make_user):
    make_user()
    response = client.post(
        "/api/auth/signin", json={"email": "member1@example.com", "password": "nope"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_current_user_requires_token(client):
    assert client.get("/api/auth/current-user").status_code == 401

    bad = client.get("/api/auth/current-user", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401
    assert bad.json()["error"] == "Unauthorized - Invalid or expired token"


def test_signout_clears_cookie(client):
    response = client.post("/api/auth/signout")
    assert response.status_code == 200
    assert "jwt_token" in response.headers.get("set-cookie", "")
