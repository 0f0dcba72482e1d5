import datetime as dt
import re
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from odonto.core.settings import settings

PHONE_PATTERN = re.compile(r"^[0-9+\s-]{6,20}$")

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: List[T]
    total_count: int
    total_pages: int
    page: int


def clean_phone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not PHONE_PATTERN.match(value):
        raise ValueError("Phone must be 6-20 characters of digits, spaces, '+' or '-'")
    return value


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def as_page(result, items=None) -> dict:
    return {
        "items": result.rows if items is None else items,
        "total_count": result.total_count,
        "total_pages": result.total_pages,
        "page": result.page,
    }


def check_slot_time(value: Optional[dt.time]) -> Optional[dt.time]:
    """Appointment start times must sit on the calendar slot grid."""
    if value is None:
        return None
    start = settings.calendar_day_start.hour * 60 + settings.calendar_day_start.minute
    end = settings.calendar_day_end.hour * 60 + settings.calendar_day_end.minute
    minutes = value.hour * 60 + value.minute
    if value.second or value.microsecond or not start <= minutes < end:
        raise ValueError(
            f"Time must be between {settings.calendar_day_start:%H:%M} and {settings.calendar_day_end:%H:%M}"
        )
    if (minutes - start) % settings.calendar_slot_minutes:
        raise ValueError(f"Time must fall on a {settings.calendar_slot_minutes}-minute slot")
    return value
