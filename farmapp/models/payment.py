"""ORM model for payments received against a sale (cash or UPI)."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from farmapp.models.base import Base, FarmRecordMixin


class Payment(FarmRecordMixin, Base):
    """
    Money received for a sale.

    client_id, client_name, sale_date and farm_id are copied from the sale when
    the payment is recorded. utr is the UPI transaction reference (None for cash).
    """

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sale_id = Column(
        Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True
    )
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    client_name = Column(String(255), nullable=False)
    sale_date = Column(DateTime(timezone=True), nullable=False)
    amount = Column(Float, nullable=False)
    method = Column(String(16), nullable=False)
    utr = Column(String(32), nullable=True, index=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)

    sale = relationship("Sale", back_populates="payments")
