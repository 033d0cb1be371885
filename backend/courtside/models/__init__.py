from courtside.models.user import User
from courtside.models.court import Court
from courtside.models.equipment import Equipment
from courtside.models.coach import Coach, CoachAvailability
from courtside.models.pricing_rule import PricingRule
from courtside.models.booking import Booking, BookingEquipment

__all__ = [
    "User",
    "Court",
    "Equipment",
    "Coach", "CoachAvailability",
    "PricingRule",
    "Booking", "BookingEquipment",
]
