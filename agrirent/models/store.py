import atexit
import os
import pickle
import threading
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable

from loguru import logger

from agrirent.exceptions import (
    BookingNotFoundError,
    ConflictingDatesError,
    InvalidTransitionError,
    StoreError,
    ToolNotFoundError,
    ToolUnavailableError,
)
from agrirent.models.booking import Booking
from agrirent.models.tool import Tool
from agrirent.utils.constants import ACTIVE_BOOKING_STATES

# ---- Paths ----
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = BASE_DIR / "data.pkl"


class Store:
    """
    In-memory users/tools/bookings kept in one pickle file.

    Every mutation happens under one re-entrant lock and is written through
    to disk before the lock is released.
    """
    _inst = None
    _inst_lock = threading.Lock()
    _atexit_registered = False

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = str(path or DEFAULT_DATA_PATH)
        self.users: dict[str, dict] = {}
        self.tools: dict[str, Tool] = {}
        self.bookings: dict[str, Booking] = {}
        self._rw = threading.RLock()

        logger.info("[Store] Using file: {}", self.path)
        self._load()

        # Automatically save on exit (skipped in test environments)
        if not Store._atexit_registered and os.getenv("APP_ENV") != "test":
            atexit.register(self.save)
            Store._atexit_registered = True

    # ---------- Singleton ----------
    @classmethod
    def instance(cls, path: str | os.PathLike | None = None):
        """Return the global singleton instance of Store."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = Store(path or DEFAULT_DATA_PATH)
        return cls._inst

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except Exception as e:
            # Unreadable file: keep a copy so the next save cannot destroy it
            self._backup(f"Load failed ({e})")
            return

        if isinstance(data, dict):
            self.users = data.get("users", {}) or {}
            self.tools = data.get("tools", {}) or {}
            self.bookings = data.get("bookings", {}) or {}
            logger.info(
                "[Store] Loaded: users={}, tools={}, bookings={}",
                len(self.users), len(self.tools), len(self.bookings),
            )
        else:
            # Handle incompatible data format: backup the old file and start empty
            self._backup(f"Incompatible store ({type(data).__name__})")

    def _backup(self, reason: str):
        """
        Move the current data file aside to `<path>.bak` before starting empty.
        Raises StoreError if the move fails, rather than letting a later save
        overwrite data that could not be read.
        """
        bak = self.path + ".bak"
        try:
            os.replace(self.path, bak)
        except OSError as e:
            logger.error("[Store] Backup of {} failed: {}", self.path, e)
            raise StoreError("Error: data file unreadable and could not be backed up") from e
        logger.warning("[Store] {}; backed up to {}. Starting empty.", reason, bak)

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        tmp = self.path + ".tmp"
        payload = {
            "users": self.users,
            "tools": self.tools,
            "bookings": self.bookings,
        }
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(tmp, "wb") as f:
                pickle.dump(payload, f, protocol=pickle.HIGHEST_PROTOCOL)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error("[Store] Write to {} failed: {}", self.path, e)
            raise StoreError("Error: could not save data") from e

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            logger.debug("[Store] Saving to {} ...", self.path)
            self._dump()

    def clear(self):
        with self._rw:
            self.users.clear()
            self.tools.clear()
            self.bookings.clear()
            self._dump()

    # ---------- Users ----------
    def user_exists(self, username: str) -> bool:
        """Return True if the given username already exists."""
        return any(u["username"] == username for u in self.users.values())

    def find_user(self, username: str) -> dict | None:
        """Find a user by username."""
        for u in self.users.values():
            if u["username"] == username:
                return u
        return None

    def get_user(self, user_id: str) -> dict | None:
        return self.users.get(user_id)

    def create_user(self, username: str, password_hash: str) -> str:
        """Create a new user and return its ID."""
        with self._rw:
            if self.user_exists(username):
                raise ValueError("Username already exists")
            uid = str(uuid.uuid4())
            self.users[uid] = {
                "user_id": uid,
                "username": username,
                "password_hash": password_hash,
            }
            try:
                self._dump()
            except StoreError:
                del self.users[uid]
                raise
            return uid

    # ---------- Tools ----------
    def create_tool(self, owner_id: str, name: str, category: str, daily_rate: Decimal, **extra) -> Tool:
        """Create a new tool record and return it."""
        with self._rw:
            tid = str(uuid.uuid4())
            tool = Tool(
                tool_id=tid,
                owner_id=owner_id,
                name=name,
                category=category,
                daily_rate=daily_rate,
                available=extra.get("available", True),
                description=extra.get("description"),
                image_url=extra.get("image_url"),
                location=extra.get("location"),
            )
            self.tools[tid] = tool
            try:
                self._dump()
            except StoreError:
                del self.tools[tid]
                raise
            return tool

    def get_tool(self, tool_id: str) -> Tool | None:
        """Get a tool by ID."""
        return self.tools.get(str(tool_id))

    def list_tools(self) -> list[Tool]:
        with self._rw:
            return list(self.tools.values())

    def update_tool(self, tool_id: str, **updates) -> Tool:
        """Apply attribute updates to a tool and return the new record."""
        with self._rw:
            tid = str(tool_id)
            old = self.tools.get(tid)
            if old is None:
                raise ToolNotFoundError()
            self.tools[tid] = replace(old, **updates)
            try:
                self._dump()
            except StoreError:
                self.tools[tid] = old
                raise
            return self.tools[tid]

    # ---------- Bookings ----------
    def get_booking(self, booking_id: str) -> Booking | None:
        return self.bookings.get(str(booking_id))

    def list_bookings(self, tool_id: str | None = None, statuses: Iterable[str] | None = None) -> list[Booking]:
        """Bookings for one tool (or all tools), optionally limited to the given statuses."""
        wanted = set(statuses) if statuses is not None else None
        with self._rw:
            return [
                b for b in self.bookings.values()
                if (tool_id is None or b.tool_id == str(tool_id))
                and (wanted is None or b.status in wanted)
            ]

    def insert_booking_if_free(
            self,
            tool_id: str,
            renter_id: str,
            start: date,
            end: date,
            price_fn: Callable[[Tool], Decimal],
    ) -> Booking:
        """
        Atomically check that the tool is available and no active booking of
        `tool_id` overlaps [start, end], then insert a new pending booking
        priced by `price_fn`.
        Raises ToolUnavailableError or ConflictingDatesError.
        """
        # Deferred import: the services package imports this module.
        from agrirent.services.common import overlap

        with self._rw:
            tool = self.get_tool(tool_id)
            if tool is None:
                raise ToolNotFoundError()
            if not tool.available:
                raise ToolUnavailableError()

            for b in self.list_bookings(tool.tool_id, ACTIVE_BOOKING_STATES):
                if overlap(start, end, b.start_date, b.end_date):
                    logger.info(
                        "Booking conflict: tool={} {}..{} overlaps booking {}",
                        tool.tool_id, start, end, b.booking_id,
                    )
                    raise ConflictingDatesError()

            bid = str(uuid.uuid4())
            booking = Booking(
                booking_id=bid,
                tool_id=tool.tool_id,
                renter_id=str(renter_id),
                start_date=start,
                end_date=end,
                total_price=price_fn(tool),
            )
            self.bookings[bid] = booking
            try:
                self._dump()
            except StoreError:
                del self.bookings[bid]
                raise
            return booking

    def update_booking_status(self, booking_id: str, status: str) -> Booking:
        """Set a booking's status and return the updated record."""
        with self._rw:
            bid = str(booking_id)
            old = self.bookings.get(bid)
            if old is None:
                raise BookingNotFoundError()
            self.bookings[bid] = replace(old, status=status)
            try:
                self._dump()
            except StoreError:
                self.bookings[bid] = old
                raise
            return self.bookings[bid]

    def transition_booking_status(self, booking_id: str, new_status: str, allowed: dict) -> tuple[str, Booking]:
        """
        Move a booking to `new_status` if `allowed[current_status]` contains it.
        The current status is read and checked under the lock, so a concurrent
        cancel cannot be overwritten by a stale confirm.
        Returns (previous_status, updated_booking).
        """
        with self._rw:
            current = self.get_booking(booking_id)
            if current is None:
                raise BookingNotFoundError()
            if new_status not in allowed.get(current.status, ()):
                raise InvalidTransitionError(f"Cannot change status from {current.status} to {new_status}")
            return current.status, self.update_booking_status(current.booking_id, new_status)
