"""
计费镜像只读查询
等价于按当前用户过滤的订阅/订单视图，已软删除的行不可见
"""
import uuid
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.billing import StripeCustomer, StripeSubscription, StripeOrder
from app.schemas.billing import UserSubscriptionResponse, UserOrderResponse


class BillingService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_subscription(self, user_id: uuid.UUID) -> Optional[UserSubscriptionResponse]:
        result = await self.db.execute(
            select(StripeCustomer.customer_id, StripeSubscription)
            .join(StripeSubscription, StripeSubscription.customer_id == StripeCustomer.customer_id)
            .where(
                StripeCustomer.user_id == user_id,
                StripeCustomer.deleted_at.is_(None),
                StripeSubscription.deleted_at.is_(None),
            )
        )
        row = result.first()
        if row is None:
            return None

        customer_id, subscription = row
        return UserSubscriptionResponse(
            customer_id=customer_id,
            subscription_id=subscription.subscription_id,
            subscription_status=subscription.status,
            price_id=subscription.price_id,
            current_period_start=subscription.current_period_start,
            current_period_end=subscription.current_period_end,
            cancel_at_period_end=subscription.cancel_at_period_end,
            payment_method_brand=subscription.payment_method_brand,
            payment_method_last4=subscription.payment_method_last4,
        )

    async def get_user_orders(self, user_id: uuid.UUID) -> List[UserOrderResponse]:
        result = await self.db.execute(
            select(StripeOrder)
            .join(StripeCustomer, StripeOrder.customer_id == StripeCustomer.customer_id)
            .where(
                StripeCustomer.user_id == user_id,
                StripeCustomer.deleted_at.is_(None),
                StripeOrder.deleted_at.is_(None),
            )
            .order_by(StripeOrder.created_at.desc(), StripeOrder.id.desc())
        )
        return [
            UserOrderResponse(
                customer_id=order.customer_id,
                order_id=order.id,
                checkout_session_id=order.checkout_session_id,
                payment_intent_id=order.payment_intent_id,
                amount_subtotal=order.amount_subtotal,
                amount_total=order.amount_total,
                currency=order.currency,
                payment_status=order.payment_status,
                order_status=order.status,
                order_date=order.created_at,
            )
            for order in result.scalars().all()
        ]
