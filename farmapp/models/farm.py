"""ORM model for farms; every client, sale, batch, expense and payment belongs to one."""

from sqlalchemy import Boolean, Column, Float, Integer, String

from farmapp.models.base import AuditMixin, Base


class Farm(AuditMixin, Base):
    """
    A poultry farm.

    Deactivated farms keep their history but accept no new records.
    """

    __tablename__ = "farms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    location = Column(String(255), nullable=False)
    owner_name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=False)
    email = Column(String(255), nullable=True)
    business_type = Column(String(32), nullable=False, default="sole_proprietorship")
    size_acres = Column(Float, nullable=True)
    capacity = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
