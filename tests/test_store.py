from datetime import date
from decimal import Decimal

import pytest

from agrirent.exceptions import ConflictingDatesError, StoreError, ToolNotFoundError, ToolUnavailableError
from agrirent.models.store import Store
from agrirent.utils.constants import BookingStatus


def _price(tool):
    return tool.daily_rate


def test_data_survives_reload(tmp_path):
    path = tmp_path / "data.pkl"
    st = Store(path)
    uid = st.create_user("asha", "hash")
    tool = st.create_tool(uid, "Rotavator", "tillage", Decimal("350.5"))
    b = st.insert_booking_if_free(tool.tool_id, "r1", date(2024, 6, 1), date(2024, 6, 2), _price)

    again = Store(path)
    assert again.find_user("asha")["user_id"] == uid
    assert again.get_tool(tool.tool_id).daily_rate == Decimal("350.5")
    assert again.get_booking(b.booking_id).status == BookingStatus.PENDING


def test_incompatible_file_is_backed_up(tmp_path):
    import pickle
    path = tmp_path / "data.pkl"
    path.write_bytes(pickle.dumps(["old", "format"]))

    st = Store(path)
    assert st.tools == {}
    assert (tmp_path / "data.pkl.bak").exists()


def test_insert_if_free_rejects_overlap(store, tractor):
    store.insert_booking_if_free(tractor.tool_id, "r1", date(2024, 6, 1), date(2024, 6, 5), _price)
    with pytest.raises(ConflictingDatesError):
        store.insert_booking_if_free(tractor.tool_id, "r2", date(2024, 6, 5), date(2024, 6, 9), _price)
    assert len(store.bookings) == 1


def test_insert_if_free_unknown_tool(store):
    with pytest.raises(ToolNotFoundError):
        store.insert_booking_if_free("nope", "r1", date(2024, 6, 1), date(2024, 6, 1), _price)


def test_list_bookings_filters(store, tractor):
    b = store.insert_booking_if_free(tractor.tool_id, "r1", date(2024, 6, 1), date(2024, 6, 1), _price)
    store.update_booking_status(b.booking_id, BookingStatus.CANCELLED)
    assert store.list_bookings(tractor.tool_id, [BookingStatus.PENDING]) == []
    assert [x.booking_id for x in store.list_bookings(tractor.tool_id)] == [b.booking_id]
    assert store.list_bookings("other-tool") == []


def test_failed_write_rolls_back(store, tractor, monkeypatch):
    def boom(*a, **kw):
        raise OSError("disk full")

    monkeypatch.setattr("agrirent.models.store.os.replace", boom)
    with pytest.raises(StoreError):
        store.insert_booking_if_free(tractor.tool_id, "r1", date(2024, 6, 1), date(2024, 6, 1), _price)
    assert store.bookings == {}


def test_unreadable_file_is_backed_up_not_overwritten(tmp_path):
    path = tmp_path / "data.pkl"
    original = b"\x80\x05truncated-pickle"
    path.write_bytes(original)

    st = Store(path)
    assert st.users == {}
    bak = tmp_path / "data.pkl.bak"
    assert bak.read_bytes() == original

    # Saving the fresh store leaves the backup intact
    st.create_user("asha", "hash")
    assert bak.read_bytes() == original
    assert Store(path).find_user("asha") is not None


def test_unreadable_file_that_cannot_be_moved_refuses_to_start(tmp_path, monkeypatch):
    path = tmp_path / "data.pkl"
    path.write_bytes(b"\x80\x05truncated-pickle")

    def boom(*a, **kw):
        raise OSError("read-only filesystem")

    monkeypatch.setattr("agrirent.models.store.os.replace", boom)
    with pytest.raises(StoreError):
        Store(path)


def test_insert_if_free_rejects_unavailable_tool(store, tractor):
    store.update_tool(tractor.tool_id, available=False)
    with pytest.raises(ToolUnavailableError):
        store.insert_booking_if_free(tractor.tool_id, "r1", date(2024, 6, 1), date(2024, 6, 1), _price)
    assert store.bookings == {}
