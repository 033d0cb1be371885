"""
Court model: the bookable resource.

Key design decisions:
- `version` column enables optimistic locking: every booking write bumps the
  court's version, so two sessions racing for the same court serialize on it
- Rate stored as NUMERIC(10, 2) but read back as float for the pricing engine
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, Numeric, String
from sqlalchemy.orm import relationship

from courtside.db.base import Base, TimestampMixin


class Court(Base, TimestampMixin):
    __tablename__ = "courts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    court_type = Column(String(20), nullable=False)  # indoor, outdoor
    base_hourly_rate = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    bookings = relationship("Booking", back_populates="court")

    __table_args__ = (
        CheckConstraint("court_type IN ('indoor', 'outdoor')", name="check_court_type"),
        CheckConstraint("base_hourly_rate >= 0", name="check_court_rate_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Court(id={self.id}, name={self.name}, type={self.court_type})>"
