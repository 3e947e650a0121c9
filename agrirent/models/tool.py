from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass
class Tool:
    """
    A rentable piece of farm equipment. The owner lists it with a daily rate
    and flips `available` to take it off the market without deleting it.
    """
    tool_id: str
    owner_id: str
    name: str
    category: str
    daily_rate: Decimal
    available: bool = True
    description: Optional[str] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
    created_at: str = field(default_factory=_now_iso)

    def summary(self) -> dict:
        """Short form attached to booking listings."""
        return {
            "name": self.name,
            "owner_id": self.owner_id,
            "image_url": self.image_url,
            "daily_rate": self.daily_rate,
            "location": self.location,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.tool_id,
            "owner_id": self.owner_id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "image_url": self.image_url,
            "daily_rate": self.daily_rate,
            "available": self.available,
            "location": self.location,
            "created_at": self.created_at,
        }
