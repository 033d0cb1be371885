from courtside.schemas.user import UserCreate, UserResponse, UserProfile, UserLogin, Token
from courtside.schemas.catalog import (
    CourtResponse, EquipmentResponse, CoachResponse, CoachListItem,
    CoachEligibilityResponse, CoachAvailabilityResponse, PricingRuleResponse,
)
from courtside.schemas.booking import (
    PriceBreakdown, AppliedRule, QuoteRequest, BookingCreate, BookingResponse,
    BookingCancelResponse, BookingSelection,
)
from courtside.schemas.availability import SlotGridResponse, SlotClickRequest, SelectionRangeResponse

__all__ = [
    "UserCreate", "UserResponse", "UserProfile", "UserLogin", "Token",
    "CourtResponse", "EquipmentResponse", "CoachResponse", "CoachListItem",
    "CoachEligibilityResponse", "CoachAvailabilityResponse", "PricingRuleResponse",
    "PriceBreakdown", "AppliedRule", "QuoteRequest", "BookingCreate", "BookingResponse",
    "BookingCancelResponse", "BookingSelection",
    "SlotGridResponse", "SlotClickRequest", "SelectionRangeResponse",
]
