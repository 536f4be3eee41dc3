"""initial schema

Revision ID: 3f1c9a7d2b60
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f1c9a7d2b60"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("property_id", sa.Integer, sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("number", sa.String(20), nullable=False),
        sa.Column("type", sa.Text, nullable=False, server_default=""),
        sa.Column("rent", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="vacant"),
        sa.Column("tenant_name", sa.Text, nullable=True),
        sa.UniqueConstraint("property_id", "number", name="uq_rooms_property_number"),
    )

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("run_key", sa.String(26), nullable=False),
        sa.Column("invoice_number", sa.String(40), nullable=False),
        sa.Column("property_id", sa.Integer, sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("room_id", sa.String(26), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("room_number", sa.String(20), nullable=False),
        sa.Column("tenant_name", sa.Text, nullable=True),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("billing_month", sa.Integer, nullable=False),
        sa.Column("total_amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("due_date", sa.String(10), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("paid_at", sa.DateTime, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("run_key", "room_id", name="uq_invoices_run_room"),
    )
    op.create_index("ix_invoices_run_key", "invoices", ["run_key"])

    op.create_table(
        "invoice_line_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("invoice_id", sa.Integer, sa.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("run_key", sa.String(26), nullable=False, server_default=""),
        sa.Column("recipient", sa.Text, nullable=False),
        sa.Column("room_number", sa.String(20), nullable=False, server_default=""),
        sa.Column("invoice_number", sa.String(40), nullable=False, server_default=""),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_recipient", "notifications", ["recipient"])


def downgrade() -> None:
    op.drop_index("ix_notifications_recipient", table_name="notifications")
    op.drop_table("notifications")
    op.drop_table("invoice_line_items")
    op.drop_index("ix_invoices_run_key", table_name="invoices")
    op.drop_table("invoices")
    op.drop_table("rooms")
    op.drop_table("properties")
