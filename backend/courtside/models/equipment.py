"""
Rental equipment inventory.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, Numeric, String

from courtside.db.base import Base, TimestampMixin


class Equipment(Base, TimestampMixin):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    equipment_type = Column(String(20), nullable=False)  # racket, shoes, shuttlecock, other
    total_quantity = Column(Integer, nullable=False, default=0)
    hourly_rate = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "equipment_type IN ('racket', 'shoes', 'shuttlecock', 'other')",
            name="check_equipment_type",
        ),
        CheckConstraint("total_quantity >= 0", name="check_equipment_quantity_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Equipment(id={self.id}, name={self.name}, qty={self.total_quantity})>"
