"""
Minimal auth flow: register -> login -> access control -> logout.
"""


def _get_session_user_id(client):
    with client.session_transaction() as sess:
        return sess.get("uid")


def _register(client, username, password):
    return client.post("/auth/register", json={"username": username, "password": password})


def _login(client, username, password):
    return client.post("/auth/login", json={"username": username, "password": password})


def _logout(client):
    return client.post("/auth/logout")


def test_register_and_login(client):
    r = _register(client, "alice", "Secret123")
    assert r.status_code == 201
    uid = r.get_json()["data"]["id"]

    r = _login(client, "alice", "Secret123")
    assert r.status_code == 200
    assert _get_session_user_id(client) == uid

    r = client.get("/auth/me")
    assert r.status_code == 200
    assert r.get_json()["data"] == {"id": uid, "username": "alice"}


def test_register_duplicate_username_fails(client):
    _register(client, "bob", "Secret123")
    r = _register(client, "bob", "Other1234")
    assert r.status_code == 400
    assert "already exists" in r.get_json()["error"]


def test_register_weak_password(client):
    r = _register(client, "weak", "abc")
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_login_wrong_password(client):
    _register(client, "carl", "Secret123")
    r = _login(client, "carl", "Wrong1234")
    assert r.status_code == 401
    assert r.get_json() == {"error": "Invalid credentials"}
    assert not _get_session_user_id(client)


def test_logout_revokes_access(client):
    _register(client, "dina", "Secret123")
    _login(client, "dina", "Secret123")
    assert client.get("/auth/me").status_code == 200

    r = _logout(client)
    assert r.status_code == 200

    r = client.get("/auth/me")
    assert r.status_code == 401
    assert r.get_json() == {"error": "Unauthorized"}
