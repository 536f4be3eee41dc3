"""add payment proofs and payment history

Revision ID: 8c2e4f6a1b93
Revises: 3f1c9a7d2b60
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "8c2e4f6a1b93"
down_revision: Union[str, Sequence[str], None] = "3f1c9a7d2b60"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "payment_proofs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("invoice_id", sa.Integer, sa.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        sa.Column("invoice_number", sa.String(40), nullable=False),
        sa.Column("tenant_name", sa.Text, nullable=True),
        sa.Column("room_number", sa.String(20), nullable=False, server_default=""),
        sa.Column("amount", sa.Integer, nullable=False, server_default="0"),
        sa.Column("reference", sa.Text, nullable=False, server_default=""),
        sa.Column("note", sa.Text, nullable=False, server_default=""),
        sa.Column("filename", sa.Text, nullable=False, server_default=""),
        sa.Column("storage_key", sa.Text, nullable=False, server_default=""),
        sa.Column("content_type", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending_review"),
        sa.Column("review_note", sa.Text, nullable=False, server_default=""),
        sa.Column("submitted_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("reviewed_at", sa.DateTime, nullable=True),
    )
    op.create_index("ix_payment_proofs_invoice_id", "payment_proofs", ["invoice_id"])
    op.create_index("ix_payment_proofs_status", "payment_proofs", ["status"])

    op.create_table(
        "payment_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("invoice_id", sa.Integer, sa.ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True),
        sa.Column("invoice_number", sa.String(40), nullable=False),
        sa.Column("receipt_number", sa.String(40), nullable=False),
        sa.Column("tenant_name", sa.Text, nullable=True),
        sa.Column("room_number", sa.String(20), nullable=False, server_default=""),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("billing_month", sa.Integer, nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("method", sa.Text, nullable=False, server_default="Payment Proof"),
        sa.Column("due_date", sa.String(10), nullable=False),
        sa.Column("paid_at", sa.DateTime, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_payment_history_tenant_name", "payment_history", ["tenant_name"])


def downgrade() -> None:
    op.drop_index("ix_payment_history_tenant_name", table_name="payment_history")
    op.drop_table("payment_history")
    op.drop_index("ix_payment_proofs_status", table_name="payment_proofs")
    op.drop_index("ix_payment_proofs_invoice_id", table_name="payment_proofs")
    op.drop_table("payment_proofs")
