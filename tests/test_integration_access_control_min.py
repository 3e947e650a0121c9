"""
Anonymous requests to anything that acts on behalf of a user must get 401.
"""

import pytest


@pytest.mark.parametrize("method,path", [
    ("get", "/bookings"),
    ("get", "/bookings/some-id"),
    ("post", "/bookings"),
    ("put", "/bookings/some-id"),
    ("post", "/tools"),
    ("put", "/tools/some-id"),
    ("get", "/owner/summary"),
    ("get", "/auth/me"),
])
def test_protected_routes_require_login(client, method, path):
    r = getattr(client, method)(path, json={})
    assert r.status_code == 401
    assert r.get_json() == {"error": "Unauthorized"}
