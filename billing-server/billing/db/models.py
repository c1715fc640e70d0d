"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from billing.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(150), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    memberships = relationship("TenantMembership", back_populates="tenant", cascade="all, delete-orphan")
    balance = relationship("TenantBalance", back_populates="tenant", uselist=False)


class TenantMembership(Base):
    __tablename__ = "tenant_memberships"
    __table_args__ = (UniqueConstraint("tenant_id", "user_id", name="uq_tenant_memberships_tenant_user"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    role = Column(String(30), nullable=False, default="member")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tenant = relationship("Tenant", back_populates="memberships")


class TenantBalance(Base):
    __tablename__ = "tenant_balances"
    __table_args__ = (
        CheckConstraint("standard_tokens >= 0", name="ck_tenant_balances_standard_non_negative"),
        CheckConstraint("premium_tokens >= 0", name="ck_tenant_balances_premium_non_negative"),
    )

    tenant_id = Column(String(36), ForeignKey("tenants.id"), primary_key=True)
    standard_tokens = Column(Integer, nullable=False, default=0)
    premium_tokens = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tenant = relationship("Tenant", back_populates="balance")


class PurchaseIntent(Base):
    __tablename__ = "purchase_intents"
    __table_args__ = (
        CheckConstraint("tier IN ('basic', 'premium')", name="ck_purchase_intents_tier"),
        CheckConstraint("quantity > 0", name="ck_purchase_intents_quantity_positive"),
        CheckConstraint("amount > 0", name="ck_purchase_intents_amount_positive"),
        CheckConstraint("status IN ('pending', 'completed', 'failed')", name="ck_purchase_intents_status"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    tenant_id = Column(String(36), ForeignKey("tenants.id"), nullable=False, index=True)
    tier = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=False)
    currency = Column(String(10), nullable=False, default="INR")
    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, completed, failed
    provider_order_id = Column(String(64), nullable=False, unique=True)
    provider_payment_id = Column(String(64))
    proof = Column(String(128))
    receipt = Column(String(40), nullable=False)
    created_by = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True))

    tenant = relationship("Tenant")
