"""
Typed request bodies for the JSON endpoints.

Each `from_json` validates shape and types and raises ValidationError with a
message fit for the client; date semantics are checked later by the services.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from agrirent.exceptions import ValidationError
from agrirent.services.common import to_decimal_safe
from agrirent.utils.constants import BookingStatus


def _require_object(body) -> dict:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _opt_str(body: dict, key: str) -> Optional[str]:
    val = body.get(key)
    if val is None:
        return None
    if not isinstance(val, str):
        raise ValidationError(f"'{key}' must be a string")
    return val.strip() or None


@dataclass
class BookingRequest:
    tool_id: str
    start_date: str
    end_date: str

    @classmethod
    def from_json(cls, body) -> "BookingRequest":
        body = _require_object(body)
        # Older clients send resource_id
        tool_id = body.get("tool_id") or body.get("resource_id")
        if not tool_id:
            raise ValidationError("'tool_id' is required")
        start = body.get("start_date")
        end = body.get("end_date")
        if not isinstance(start, str) or not isinstance(end, str):
            raise ValidationError("'start_date' and 'end_date' are required (YYYY-MM-DD)")
        return cls(tool_id=str(tool_id), start_date=start.strip(), end_date=end.strip())


@dataclass
class StatusUpdate:
    status: str

    @classmethod
    def from_json(cls, body) -> "StatusUpdate":
        body = _require_object(body)
        status = body.get("status")
        if status not in BookingStatus.ALL:
            raise ValidationError(f"'status' must be one of: {', '.join(BookingStatus.ALL)}")
        return cls(status=status)


@dataclass
class ToolPayload:
    """
    Fields for creating or partially updating a tool. `provided` records which
    keys the client actually sent so updates leave the others untouched.
    """
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    daily_rate: Optional[Decimal] = None
    available: Optional[bool] = None
    location: Optional[str] = None
    provided: frozenset = field(default_factory=frozenset)

    FIELDS = ("name", "category", "description", "image_url", "daily_rate", "available", "location")

    @classmethod
    def from_json(cls, body, partial: bool = False) -> "ToolPayload":
        body = _require_object(body)
        provided = frozenset(k for k in cls.FIELDS if k in body)

        rate = None
        if "daily_rate" in body:
            rate = to_decimal_safe(body.get("daily_rate"))
            if rate is None or rate < 0:
                raise ValidationError("'daily_rate' must be a non-negative number")

        available = body.get("available")
        if available is not None and not isinstance(available, bool):
            raise ValidationError("'available' must be true or false")

        payload = cls(
            name=_opt_str(body, "name"),
            category=_opt_str(body, "category"),
            description=_opt_str(body, "description"),
            image_url=_opt_str(body, "image_url"),
            daily_rate=rate,
            available=available,
            location=_opt_str(body, "location"),
            provided=provided,
        )

        if not partial:
            if not payload.name or not payload.category:
                raise ValidationError("'name' and 'category' are required")
            if payload.daily_rate is None:
                raise ValidationError("'daily_rate' is required")
        else:
            # Required fields may change but not be cleared
            for key in ("name", "category", "daily_rate", "available"):
                if key in provided and getattr(payload, key) is None:
                    raise ValidationError(f"'{key}' cannot be empty")
        return payload

    def changes(self) -> dict:
        return {k: getattr(self, k) for k in self.FIELDS if k in self.provided}
