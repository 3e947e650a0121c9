from __future__ import annotations

from typing import List, Optional, Tuple

from loguru import logger

from agrirent.exceptions import ForbiddenError, ToolNotFoundError
from agrirent.models.payloads import ToolPayload
from agrirent.models.store import Store
from agrirent.models.tool import Tool
from agrirent.services import common
from agrirent.services.common import _lc
from agrirent.utils.constants import ACTIVE_BOOKING_STATES


class ToolService:
    """Tool catalogue: list, filter, create, update."""

    @staticmethod
    def _get_store(store: Optional[Store] = None) -> Store:
        return store if store is not None else common._store()

    @staticmethod
    def filter_tools(available: Optional[bool] = None, category=None, location=None, *, store=None) -> List[Tool]:
        """
        Filter tools by availability, category and location, newest first.
        - category matches exactly
        - location is a case-insensitive partial match
        """
        st = ToolService._get_store(store)
        res = st.list_tools()

        if available is not None:
            res = [t for t in res if t.available == available]

        if category:
            res = [t for t in res if t.category == category]

        if location:
            kw = _lc(location).strip()
            if kw:
                res = [t for t in res if kw in _lc(t.location)]

        res.sort(key=lambda t: t.created_at, reverse=True)
        return res

    @staticmethod
    def get_tool(tool_id: str, store: Optional[Store] = None) -> Tool:
        """Return a tool by ID or raise ToolNotFoundError."""
        tool = ToolService._get_store(store).get_tool(tool_id)
        if tool is None:
            raise ToolNotFoundError(f"Error: tool with ID '{tool_id}' not found")
        return tool

    @staticmethod
    def create_tool(owner_id: str, payload: ToolPayload, store: Optional[Store] = None) -> Tool:
        """List a new tool owned by `owner_id`; it starts available unless told otherwise."""
        st = ToolService._get_store(store)
        tool = st.create_tool(
            owner_id=owner_id,
            name=payload.name,
            category=payload.category,
            daily_rate=payload.daily_rate,
            available=True if payload.available is None else payload.available,
            description=payload.description,
            image_url=payload.image_url,
            location=payload.location,
        )
        logger.info("Tool {} created by {}", tool.tool_id, owner_id)
        return tool

    @staticmethod
    def update_tool(tool_id: str, actor_id: str, payload: ToolPayload, store: Optional[Store] = None) -> Tool:
        """Apply the fields present in `payload`. Only the owner may edit a tool."""
        st = ToolService._get_store(store)
        tool = ToolService.get_tool(tool_id, store=st)
        if tool.owner_id != actor_id:
            raise ForbiddenError()

        changes = payload.changes()
        if not changes:
            return tool
        updated = st.update_tool(tool.tool_id, **changes)
        logger.info("Tool {} updated by {}: {}", tool.tool_id, actor_id, sorted(changes))
        return updated

    @staticmethod
    def availability_calendar(tool_id: str, store: Optional[Store] = None) -> List[Tuple[str, str]]:
        """
        Return a list of (start, end) ISO strings for active bookings (pending/confirmed).
        Used by clients to disable booked date ranges.
        """
        st = ToolService._get_store(store)
        ranges: List[Tuple[str, str]] = [
            (b.start_date.isoformat(), b.end_date.isoformat())
            for b in st.list_bookings(tool_id, ACTIVE_BOOKING_STATES)
        ]
        ranges.sort(key=lambda t: t[0])  # stable for UI
        return ranges
