"""
Pydantic schemas for quotes, bookings and the in-progress booking selection.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from courtside.schemas.catalog import CoachResponse, CourtResponse, EquipmentResponse, RuleType

# "24:00" is only meaningful as an end time, when the venue closes at midnight
TIME_PATTERN = r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$"


class AppliedRule(BaseModel):
    name: str
    type: RuleType
    multiplier: float
    flat_fee: float
    effect: float


class PriceBreakdown(BaseModel):
    base_court_price: float
    applied_rules: list[AppliedRule] = []
    equipment_total: float = 0.0
    coach_fee: float = 0.0
    subtotal: float
    total: float


class EquipmentLineRequest(BaseModel):
    equipment_id: int
    quantity: int = Field(..., gt=0, le=100)


class QuoteRequest(BaseModel):
    court_id: int
    booking_date: date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    equipment: list[EquipmentLineRequest] = []
    coach_id: Optional[int] = None

    @model_validator(mode="after")
    def check_time_range(self) -> "QuoteRequest":
        # Zero-padded "HH:MM" strings order the same way as the times
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        equipment_ids = [line.equipment_id for line in self.equipment]
        if len(equipment_ids) != len(set(equipment_ids)):
            raise ValueError("each equipment item may appear only once")
        return self


class BookingCreate(QuoteRequest):
    pass


class BookingEquipmentResponse(BaseModel):
    equipment_id: int
    quantity: int
    unit_price: float

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    user_id: int
    court_id: int
    coach_id: Optional[int]
    booking_date: date
    start_time: str
    end_time: str
    base_price: float
    total_price: float
    price_breakdown: PriceBreakdown
    status: str
    created_at: datetime
    court: Optional[CourtResponse] = None
    coach: Optional[CoachResponse] = None
    equipment_lines: list[BookingEquipmentResponse] = []

    model_config = {"from_attributes": True}


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: int
    status: str


class SelectedEquipment(BaseModel):
    equipment: EquipmentResponse
    quantity: int

    model_config = {"frozen": True}


class BookingSelection(BaseModel):
    """
    In-progress wizard state. Immutable: every user action produces a new
    selection through the transition functions in services.selection.
    """

    booking_date: Optional[date] = None
    court: Optional[CourtResponse] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    equipment: tuple[SelectedEquipment, ...] = ()
    coach: Optional[CoachResponse] = None

    model_config = {"frozen": True}
