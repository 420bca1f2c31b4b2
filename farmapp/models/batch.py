"""ORM model for bird batches (flocks)."""

from sqlalchemy import Column, Date, Integer, String

from farmapp.models.base import Base, FarmRecordMixin


class Batch(FarmRecordMixin, Base):
    __tablename__ = "batches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    hatch_date = Column(Date, nullable=False, index=True)
    breed = Column(String(255), nullable=False)
