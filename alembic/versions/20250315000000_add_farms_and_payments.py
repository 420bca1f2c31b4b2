"""Add farms and payments; farm_id on every farm record references farms.

Existing farm ids are backfilled as placeholder farms so the foreign keys can
be added without losing rows.

Revision ID: 20250315000000
Revises: 20250301000000
Create Date: 2025-03-15

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20250315000000"
down_revision: Union[str, None] = "20250301000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

FARM_RECORD_TABLES = ("clients", "sales", "batches", "expenses")


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "created_by",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "updated_by",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "farms",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("owner_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column(
            "business_type",
            sa.String(length=32),
            nullable=False,
            server_default="sole_proprietorship",
        ),
        sa.Column("size_acres", sa.Float(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_farms_name"), "farms", ["name"], unique=False)

    union = " UNION ".join(f"SELECT farm_id FROM {t}" for t in FARM_RECORD_TABLES)
    op.execute(
        "INSERT INTO farms (id, name, location, owner_name, phone) "
        f"SELECT DISTINCT farm_id, 'Farm ' || farm_id, '', '', '' FROM ({union}) AS ids"
    )
    op.execute(
        "SELECT setval(pg_get_serial_sequence('farms', 'id'), "
        "COALESCE((SELECT MAX(id) FROM farms), 0) + 1, false)"
    )
    for table in FARM_RECORD_TABLES:
        op.create_foreign_key(
            f"fk_{table}_farm_id_farms",
            table,
            "farms",
            ["farm_id"],
            ["id"],
            ondelete="RESTRICT",
        )

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "sale_id",
            sa.Integer(),
            sa.ForeignKey("sales.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("sale_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("method", sa.String(length=16), nullable=False),
        sa.Column("utr", sa.String(length=32), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "farm_id",
            sa.Integer(),
            sa.ForeignKey("farms.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("method IN ('cash', 'upi')", name="ck_payments_method"),
    )
    for column in ("sale_id", "client_id", "utr", "date", "farm_id"):
        op.create_index(op.f(f"ix_payments_{column}"), "payments", [column], unique=False)


def downgrade() -> None:
    for column in ("farm_id", "date", "utr", "client_id", "sale_id"):
        op.drop_index(op.f(f"ix_payments_{column}"), table_name="payments")
    op.drop_table("payments")
    for table in FARM_RECORD_TABLES:
        op.drop_constraint(f"fk_{table}_farm_id_farms", table, type_="foreignkey")
    op.drop_index(op.f("ix_farms_name"), table_name="farms")
    op.drop_table("farms")
