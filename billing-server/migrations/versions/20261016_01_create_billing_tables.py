"""create tenant, balance and purchase intent tables

Revision ID: 3f9c2d1e7a40
Revises: 
Create Date: 2026-10-16 10:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c2d1e7a40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "tenant_memberships",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("tenant_id", sa.String(length=36), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("role", sa.String(length=30), nullable=False, server_default="member"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("tenant_id", "user_id", name="uq_tenant_memberships_tenant_user"),
    )
    op.create_index("ix_tenant_memberships_tenant_id", "tenant_memberships", ["tenant_id"])
    op.create_index("ix_tenant_memberships_user_id", "tenant_memberships", ["user_id"])

    op.create_table(
        "tenant_balances",
        sa.Column("tenant_id", sa.String(length=36), sa.ForeignKey("tenants.id"), primary_key=True),
        sa.Column("standard_tokens", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("premium_tokens", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("standard_tokens >= 0", name="ck_tenant_balances_standard_non_negative"),
        sa.CheckConstraint("premium_tokens >= 0", name="ck_tenant_balances_premium_non_negative"),
    )

    op.create_table(
        "purchase_intents",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("tenant_id", sa.String(length=36), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("tier", sa.String(length=20), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="INR"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("provider_order_id", sa.String(length=64), nullable=False, unique=True),
        sa.Column("provider_payment_id", sa.String(length=64)),
        sa.Column("proof", sa.String(length=128)),
        sa.Column("receipt", sa.String(length=40), nullable=False),
        sa.Column("created_by", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("tier IN ('basic', 'premium')", name="ck_purchase_intents_tier"),
        sa.CheckConstraint("quantity > 0", name="ck_purchase_intents_quantity_positive"),
        sa.CheckConstraint("amount > 0", name="ck_purchase_intents_amount_positive"),
        sa.CheckConstraint("status IN ('pending', 'completed', 'failed')", name="ck_purchase_intents_status"),
    )
    op.create_index("ix_purchase_intents_tenant_id", "purchase_intents", ["tenant_id"])
    op.create_index("ix_purchase_intents_status", "purchase_intents", ["status"])


def downgrade() -> None:
    op.drop_index("ix_purchase_intents_status", table_name="purchase_intents")
    op.drop_index("ix_purchase_intents_tenant_id", table_name="purchase_intents")
    op.drop_table("purchase_intents")
    op.drop_table("tenant_balances")
    op.drop_index("ix_tenant_memberships_user_id", table_name="tenant_memberships")
    op.drop_index("ix_tenant_memberships_tenant_id", table_name="tenant_memberships")
    op.drop_table("tenant_memberships")
    op.drop_table("tenants")
