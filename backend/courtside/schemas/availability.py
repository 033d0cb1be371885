"""
Pydantic schemas for the slot grid and server-side slot selection.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from courtside.schemas.booking import TIME_PATTERN


class SlotState(BaseModel):
    time: str
    label: str
    booked: bool
    peak: bool
    selected: bool = False


class SlotGridResponse(BaseModel):
    court_id: int
    booking_date: date
    open_hour: int
    close_hour: int
    slots: list[SlotState]


class SlotClickRequest(BaseModel):
    court_id: int
    booking_date: date
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    slot: str = Field(..., pattern=TIME_PATTERN)


class SelectionRangeResponse(BaseModel):
    start_time: Optional[str]
    end_time: Optional[str]
    changed: bool
