"""
Coaches and their recurring weekly working windows.

A coach may have zero or many windows per weekday; overlapping windows are
not merged.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from courtside.db.base import Base, TimestampMixin


class Coach(Base, TimestampMixin):
    __tablename__ = "coaches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    bio = Column(String(1000), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    hourly_rate = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    availability = relationship("CoachAvailability", back_populates="coach", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Coach(id={self.id}, name={self.name})>"


class CoachAvailability(Base):
    __tablename__ = "coach_availability"

    id = Column(Integer, primary_key=True, index=True)
    coach_id = Column(Integer, ForeignKey("coaches.id"), nullable=False)
    day_of_week = Column(String(10), nullable=False)  # monday..sunday
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)

    coach = relationship("Coach", back_populates="availability")

    __table_args__ = (
        CheckConstraint(
            "day_of_week IN ('monday', 'tuesday', 'wednesday', 'thursday', "
            "'friday', 'saturday', 'sunday')",
            name="check_availability_day",
        ),
        Index("ix_coach_availability_coach_day", "coach_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return (
            f"<CoachAvailability(coach={self.coach_id}, day={self.day_of_week}, "
            f"{self.start_time}-{self.end_time})>"
        )
