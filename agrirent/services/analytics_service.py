from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import Optional

from agrirent.models.store import Store
from agrirent.services import common
from agrirent.utils.constants import EARNING_STATES, BookingStatus
from agrirent.utils.filters import fmt_price


class AnalyticsService:
    """Aggregations for the tool owner's dashboard."""

    @staticmethod
    def summary_for_owner(owner_id: str, store: Optional[Store] = None) -> dict:
        st = store if store is not None else common._store()

        tools = {t.tool_id: t for t in st.list_tools() if t.owner_id == owner_id}
        bookings = [b for b in st.list_bookings() if b.tool_id in tools]

        # Bookings by status (all four keys always present)
        status_cnt = Counter(b.status for b in bookings)
        by_status = {s: status_cnt.get(s, 0) for s in BookingStatus.ALL}

        earnings = sum((b.total_price for b in bookings if b.status in EARNING_STATES), Decimal("0"))

        # Bookings per tool
        cnt = Counter(b.tool_id for b in bookings)
        bookings_by_tool = [
            {"tool_id": tid, "name": t.name, "count": cnt.get(tid, 0)}
            for tid, t in tools.items()
        ]
        bookings_by_tool.sort(key=lambda x: x["count"], reverse=True)

        return {
            "totals": {
                "tools": len(tools),
                "bookings": len(bookings),
                "earnings": earnings,
                "earnings_display": fmt_price(earnings),
            },
            "bookings_by_status": by_status,
            "bookings_by_tool": bookings_by_tool,
        }
