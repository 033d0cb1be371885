"""
Pricing rule rows.

Stored flat with type-specific nullable columns; the API/engine layer turns
each row into a tagged variant (see schemas.catalog) so only the fields
relevant to a rule's type are ever read.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, Numeric, String

from courtside.db.base import Base, TimestampMixin


class PricingRule(Base, TimestampMixin):
    __tablename__ = "pricing_rules"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    rule_type = Column(String(20), nullable=False)  # base, court_type, peak_hours, weekend
    multiplier = Column(Numeric(6, 3, asdecimal=False), nullable=False, default=1)
    flat_fee = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    start_hour = Column(Integer, nullable=True)  # peak_hours only
    end_hour = Column(Integer, nullable=True)  # peak_hours only
    applies_to_court_type = Column(String(20), nullable=True)  # court_type only
    is_active = Column(Boolean, nullable=False, default=True)
    priority = Column(Integer, nullable=False, default=0)  # lower = applied earlier

    __table_args__ = (
        CheckConstraint(
            "rule_type IN ('base', 'court_type', 'peak_hours', 'weekend')",
            name="check_pricing_rule_type",
        ),
        CheckConstraint("multiplier >= 0", name="check_pricing_multiplier_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<PricingRule(id={self.id}, type={self.rule_type}, priority={self.priority})>"
