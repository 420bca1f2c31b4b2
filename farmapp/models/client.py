"""ORM model for egg buyers (clients) and their per-tray rate."""

from sqlalchemy import Column, Float, Integer, String

from farmapp.models.base import Base, FarmRecordMixin


class Client(FarmRecordMixin, Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(32), nullable=False)
    rate_per_tray = Column(Float, nullable=False)
