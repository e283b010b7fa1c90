from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from app.models.billing import StripeSubscriptionStatus, StripeOrderStatus


class UserSubscriptionResponse(BaseModel):
    customer_id: str
    subscription_id: Optional[str] = None
    subscription_status: StripeSubscriptionStatus
    price_id: Optional[str] = None
    current_period_start: Optional[int] = None
    current_period_end: Optional[int] = None
    cancel_at_period_end: bool = False
    payment_method_brand: Optional[str] = None
    payment_method_last4: Optional[str] = None


class UserOrderResponse(BaseModel):
    customer_id: str
    order_id: int
    checkout_session_id: str
    payment_intent_id: str
    amount_subtotal: int
    amount_total: int
    currency: str
    payment_status: str
    order_status: StripeOrderStatus
    order_date: Optional[datetime] = None
