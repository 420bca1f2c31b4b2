"""SQLAlchemy declarative Base and columns shared by the farm tables."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class AuditMixin:
    """
    Timestamps plus the ids of the users who created and last changed the row.

    created_by/updated_by reference users.id and are nulled when the user is deleted.
    """

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @declared_attr
    def created_by(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    @declared_attr
    def updated_by(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)


class FarmRecordMixin(AuditMixin):
    """Audit columns plus the owning farm; a farm cannot be removed while it has records."""

    @declared_attr
    def farm_id(cls):
        return Column(
            Integer,
            ForeignKey("farms.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        )
