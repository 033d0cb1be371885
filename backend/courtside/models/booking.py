"""
Booking model representing a user's reservation of a court time window.

Key design decisions:
- `price_breakdown` is a frozen JSON snapshot taken at confirmation time;
  later pricing rule changes never rewrite historical bookings
- Status field allows cancellation without deleting records
- Composite index on (court_id, booking_date) backs the per-court day lookup
  used by the slot grid and the conflict check
- Times are zero-padded "HH:MM" strings, so string comparison orders them
"""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from courtside.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    court_id = Column(Integer, ForeignKey("courts.id"), nullable=False)
    coach_id = Column(Integer, ForeignKey("coaches.id"), nullable=True)
    booking_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    base_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    total_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    price_breakdown = Column(JSON, nullable=False)
    status = Column(String(20), nullable=False, default="confirmed")  # confirmed, cancelled, completed

    # Relationships
    user = relationship("User", back_populates="bookings")
    court = relationship("Court", back_populates="bookings", lazy="selectin")
    coach = relationship("Coach", lazy="selectin")
    equipment_lines = relationship(
        "BookingEquipment",
        back_populates="booking",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="check_booking_time_range"),
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed')",
            name="check_booking_status",
        ),
        Index("ix_bookings_court_date", "court_id", "booking_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, court={self.court_id}, date={self.booking_date}, "
            f"{self.start_time}-{self.end_time}, status={self.status})>"
        )


class BookingEquipment(Base):
    __tablename__ = "booking_equipment"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    # Hourly rate captured at booking time
    unit_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)

    booking = relationship("Booking", back_populates="equipment_lines")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_booking_equipment_quantity_positive"),
    )

    def __repr__(self) -> str:
        return f"<BookingEquipment(booking={self.booking_id}, equipment={self.equipment_id}, qty={self.quantity})>"
