"""ORM model for farm expenses, optionally itemized."""

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from farmapp.models.base import Base, FarmRecordMixin


class Expense(FarmRecordMixin, Base):
    """
    One expense entry.

    type: one of ExpenseType in farmapp.schemas.expenses.
    items: list of {name, quantity, rate, total} line items (may be empty).
    """

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(64), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    category = Column(String(255), nullable=True)
    items = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
