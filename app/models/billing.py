"""
计费镜像表
数据由支付平台的webhook写入，应用只按用户过滤读取
"""
from enum import Enum as PyEnum

from sqlalchemy import (
    Column, BigInteger, Integer, Boolean, String, Text, DateTime, ForeignKey, Enum, Uuid
)
from sqlalchemy.sql import func

from app.db.base import Base


# SQLite只对INTEGER主键自增
BigIntegerPK = BigInteger().with_variant(Integer, "sqlite")


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class StripeSubscriptionStatus(str, PyEnum):
    NOT_STARTED = "not_started"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"
    PAUSED = "paused"


class StripeOrderStatus(str, PyEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELED = "canceled"


class StripeCustomer(Base):
    __tablename__ = "stripe_customers"

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, unique=True)
    customer_id = Column(Text, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)  # 软删除


class StripeSubscription(Base):
    __tablename__ = "stripe_subscriptions"

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    customer_id = Column(Text, nullable=False, unique=True)
    subscription_id = Column(Text, nullable=True)
    price_id = Column(Text, nullable=True)
    current_period_start = Column(BigInteger, nullable=True)  # Unix时间戳
    current_period_end = Column(BigInteger, nullable=True)
    cancel_at_period_end = Column(Boolean, nullable=False, default=False, server_default="false")
    payment_method_brand = Column(String(50), nullable=True)
    payment_method_last4 = Column(String(4), nullable=True)
    status = Column(
        Enum(
            StripeSubscriptionStatus,
            name="stripe_subscription_status",
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class StripeOrder(Base):
    __tablename__ = "stripe_orders"

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    checkout_session_id = Column(Text, nullable=False)
    payment_intent_id = Column(Text, nullable=False)
    customer_id = Column(Text, nullable=False, index=True)
    amount_subtotal = Column(BigInteger, nullable=False)  # 最小货币单位
    amount_total = Column(BigInteger, nullable=False)
    currency = Column(String(10), nullable=False)
    payment_status = Column(String(50), nullable=False)
    status = Column(
        Enum(
            StripeOrderStatus,
            name="stripe_order_status",
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
        default=StripeOrderStatus.PENDING,
        server_default=StripeOrderStatus.PENDING.value,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)
