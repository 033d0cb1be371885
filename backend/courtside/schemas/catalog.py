"""
Pydantic schemas for reference data: courts, equipment, coaches and pricing rules.

Pricing rules are a tagged union on `rule_type`. Each variant carries only
the fields its type uses and decides its own applicability, so the engine
never has to read an optional field that belongs to another rule type.
"""

from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

CourtType = Literal["indoor", "outdoor"]
EquipmentType = Literal["racket", "shoes", "shuttlecock", "other"]
RuleType = Literal["base", "court_type", "peak_hours", "weekend"]
DayOfWeek = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class CourtResponse(BaseModel):
    id: int
    name: str
    court_type: CourtType
    base_hourly_rate: float = Field(..., ge=0)
    is_active: bool = True

    model_config = {"from_attributes": True, "frozen": True}


class EquipmentResponse(BaseModel):
    id: int
    name: str
    equipment_type: EquipmentType
    total_quantity: int = Field(..., ge=0)
    hourly_rate: float = Field(..., ge=0)
    is_active: bool = True

    model_config = {"from_attributes": True, "frozen": True}


class CoachResponse(BaseModel):
    id: int
    name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    hourly_rate: float = Field(..., ge=0)
    is_active: bool = True

    model_config = {"from_attributes": True, "frozen": True}


class CoachListItem(CoachResponse):
    # Short weekday labels ("Mon", "Wed") the coach works on
    available_days: list[str] = []


class CoachEligibilityResponse(CoachListItem):
    eligible: bool


class CoachAvailabilityResponse(BaseModel):
    id: Optional[int] = None
    coach_id: int
    day_of_week: DayOfWeek
    start_time: str
    end_time: str

    model_config = {"from_attributes": True, "frozen": True}


# ---------------------------------------------------------------------------
# Pricing rules
# ---------------------------------------------------------------------------


class _RuleCommon(BaseModel):
    id: int
    name: str
    multiplier: float = Field(default=1.0, ge=0)
    flat_fee: float = 0.0
    is_active: bool = True
    priority: int = 0

    model_config = {"from_attributes": True, "frozen": True}

    def applies(self, court: CourtResponse, booking_date: date, start_hour: int) -> bool:
        raise NotImplementedError


class BaseRule(_RuleCommon):
    """The starting price itself; never contributes a fold step."""

    rule_type: Literal["base"] = "base"

    def applies(self, court: CourtResponse, booking_date: date, start_hour: int) -> bool:
        return False


class CourtTypeRule(_RuleCommon):
    rule_type: Literal["court_type"] = "court_type"
    applies_to_court_type: Optional[CourtType] = None

    def applies(self, court: CourtResponse, booking_date: date, start_hour: int) -> bool:
        return self.applies_to_court_type == court.court_type


class PeakHoursRule(_RuleCommon):
    rule_type: Literal["peak_hours"] = "peak_hours"
    start_hour: Optional[int] = Field(default=None, ge=0, le=24)
    end_hour: Optional[int] = Field(default=None, ge=0, le=24)

    def applies(self, court: CourtResponse, booking_date: date, start_hour: int) -> bool:
        if self.start_hour is None or self.end_hour is None:
            return False
        return self.start_hour <= start_hour < self.end_hour


class WeekendRule(_RuleCommon):
    rule_type: Literal["weekend"] = "weekend"

    def applies(self, court: CourtResponse, booking_date: date, start_hour: int) -> bool:
        # Saturday = 5, Sunday = 6
        return booking_date.weekday() >= 5


PricingRuleResponse = Annotated[
    Union[BaseRule, CourtTypeRule, PeakHoursRule, WeekendRule],
    Field(discriminator="rule_type"),
]

pricing_rule_adapter: TypeAdapter[PricingRuleResponse] = TypeAdapter(PricingRuleResponse)
