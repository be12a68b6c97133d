def test_register_login_and_me(client):
    registered = client.post("/api/v1/auth/register", json={
        "email": "Marie@Example.org",
        "password": "radium-1898",
        "givenName": "Marie",
        "familyName": "Curie",
        "orcidId": "https://orcid.org/0000-0002-1825-0097",
    })
    assert registered.status_code == 201
    user = registered.get_json()["data"]["user"]
    assert user["email"] == "marie@example.org"
    assert user["orcidId"] == "0000-0002-1825-0097"
    assert user["role"] == "researcher"

    login = client.post("/api/v1/auth/login", json={"email": "marie@example.org", "password": "radium-1898"})
    assert login.status_code == 200
    token = login.get_json()["data"]["accessToken"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.get_json()["data"]["familyName"] == "Curie"


def test_register_duplicate_email(client, make_user):
    make_user(email="taken@example.org")

    response = client.post("/api/v1/auth/register", json={"email": "taken@example.org", "password": "long-enough"})

    assert response.status_code == 409


def test_register_short_password(client):
    response = client.post("/api/v1/auth/register", json={"email": "a@example.org", "password": "short"})

    assert response.status_code == 400


def test_login_wrong_password(client, make_user):
    make_user(email="who@example.org", password="right-password")

    response = client.post("/api/v1/auth/login", json={"email": "who@example.org", "password": "wrong"})

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "Invalid credentials"}


def test_inactive_user_token_rejected(client, auth, make_user):
    user = make_user(is_active=False)

    response = client.get("/api/v1/auth/me", headers=auth(user))

    assert response.status_code == 401


def test_invalid_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "Authentication required"
