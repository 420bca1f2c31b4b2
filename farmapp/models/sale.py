"""ORM model for egg sales to a client."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from farmapp.models.base import Base, FarmRecordMixin


class Sale(FarmRecordMixin, Base):
    """
    One sale of trays to a client.

    eggs and total_amount are derived from trays and the client's rate at the
    time of the sale; client_name is denormalized for listings. Payments are
    deleted with the sale.
    """

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    client_name = Column(String(255), nullable=False)
    trays = Column(Integer, nullable=False)
    eggs = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)

    client = relationship("Client")
    payments = relationship(
        "Payment",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="Payment.date",
    )

    @property
    def amount_paid(self) -> float:
        return round(sum(p.amount for p in self.payments), 2)

    @property
    def amount_due(self) -> float:
        """Unpaid remainder; overpayment does not make it negative."""
        return max(round(self.total_amount - self.amount_paid, 2), 0.0)
