import os, sys, pathlib

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Keep the store from registering its atexit save
os.environ.setdefault("APP_ENV", "test")

from decimal import Decimal

import pytest


@pytest.fixture(autouse=True)
def store(tmp_path, monkeypatch):
    """
    Provide a fresh file-backed store per test and make it the one every
    service and the app factory resolve, so nothing touches ./data.pkl.
    """
    from agrirent.models.store import Store
    from agrirent.services import common as common_mod

    st = Store(tmp_path / "data.pkl")
    monkeypatch.setattr(common_mod, "_store", lambda: st, raising=True)
    monkeypatch.setattr(Store, "_inst", st)
    yield st


@pytest.fixture
def app(tmp_path):
    from agrirent import create_app
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "DATA_PATH": str(tmp_path / "data.pkl"),
        "LOG_LEVEL": "WARNING",
    })
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def owner_id(store):
    return store.create_user("owner", "x")


@pytest.fixture
def tractor(store, owner_id):
    """An available tool renting at 500 per day."""
    return store.create_tool(owner_id, "Tractor", "machinery", Decimal("500"), location="Nashik")
