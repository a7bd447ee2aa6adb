from tests.helpers import ADMIN_EMAIL


def test_register_and_login(client):
    res = client.post("/auth/register", json={"email": "Reader@X.com", "password": "pw", "name": "Rea"})
    assert res.status_code == 201
    user = res.get_json()["data"]
    assert user["email"] == "reader@x.com"
    assert user["role"] == "user"
    assert "passwordHash" not in user

    res = client.post("/auth/login", json={"email": "reader@x.com", "password": "pw"})
    assert res.status_code == 200
    body = res.get_json()
    assert body["user"]["id"] == user["id"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.get_json()["user"]["email"] == "reader@x.com"


def test_register_rejects_duplicates_and_missing_fields(client):
    assert client.post("/auth/register", json={"email": "a@x.com", "password": "pw"}).status_code == 201
    assert client.post("/auth/register", json={"email": "a@x.com", "password": "pw2"}).status_code == 400
    assert client.post("/auth/register", json={"email": "b@x.com"}).status_code == 400
    assert client.post("/auth/register", json={"email": "no-at-sign", "password": "pw"}).status_code == 400


def test_login_with_wrong_password(client):
    client.post("/auth/register", json={"email": "a@x.com", "password": "pw"})
    res = client.post("/auth/login", json={"email": "a@x.com", "password": "wrong"})
    assert res.status_code == 401


def test_admin_emails_get_admin_role(client):
    res = client.post("/auth/register", json={"email": ADMIN_EMAIL, "password": "pw"})
    assert res.get_json()["data"]["role"] == "admin"


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401


def test_register_race_on_same_email_is_client_error(client, app, monkeypatch):
    assert client.post("/auth/register", json={"email": "a@x.com", "password": "pw"}).status_code == 201

    # the second request's lookup ran before the first one committed
    users = app.extensions["library"]["auth"].users
    monkeypatch.setattr(users, "get_by_email", lambda email: None)

    res = client.post("/auth/register", json={"email": "a@x.com", "password": "pw2"})

    assert res.status_code == 400
    assert res.get_json()["message"] == "Email is already registered"
