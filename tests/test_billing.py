"""计费镜像只读查询测试"""

import uuid
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy import select

from app.core.security import create_access_token
from app.models import (
    StripeCustomer, StripeOrder, StripeOrderStatus, StripeSubscription, StripeSubscriptionStatus, User,
)
from app.services.billing import BillingService

API = "/api/v1/billing"


def order(customer_id, session_id, created_at, **overrides):
    data = dict(
        checkout_session_id=session_id,
        payment_intent_id=f"pi_{session_id}",
        customer_id=customer_id,
        amount_subtotal=4900,
        amount_total=4900,
        currency="usd",
        payment_status="paid",
        status=StripeOrderStatus.COMPLETED,
        created_at=created_at,
    )
    data.update(overrides)
    return StripeOrder(**data)


@pytest_asyncio.fixture
async def billing_data(db_session, user_id):
    """当前用户一个客户+订阅+订单，另一个用户的数据和软删除的数据作为干扰"""
    other_id = uuid.uuid4()
    base = datetime(2025, 6, 1, 8, 0, 0)
    db_session.add_all([
        User(id=user_id), User(id=other_id),
        StripeCustomer(user_id=user_id, customer_id="cus_mine"),
        StripeCustomer(user_id=other_id, customer_id="cus_other"),
        StripeSubscription(
            customer_id="cus_mine", subscription_id="sub_1", price_id="price_pro",
            current_period_start=1748764800, current_period_end=1751356800,
            cancel_at_period_end=False, payment_method_brand="visa", payment_method_last4="4242",
            status=StripeSubscriptionStatus.ACTIVE,
        ),
        StripeSubscription(customer_id="cus_other", status=StripeSubscriptionStatus.TRIALING),
        order("cus_mine", "cs_first", base),
        order("cus_mine", "cs_second", base + timedelta(days=2)),
        order("cus_mine", "cs_deleted", base + timedelta(days=3), deleted_at=base + timedelta(days=4)),
        order("cus_other", "cs_foreign", base),
    ])
    await db_session.commit()


class TestBillingService:

    @pytest.mark.asyncio
    async def test_subscription(self, db_session, user_id, billing_data):
        subscription = await BillingService(db_session).get_user_subscription(user_id)

        assert subscription.customer_id == "cus_mine"
        assert subscription.subscription_status == StripeSubscriptionStatus.ACTIVE
        assert subscription.payment_method_last4 == "4242"
        assert subscription.current_period_end == 1751356800

    @pytest.mark.asyncio
    async def test_no_subscription(self, db_session, billing_data):
        assert await BillingService(db_session).get_user_subscription(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_orders_skip_deleted_and_foreign(self, db_session, user_id, billing_data):
        orders = await BillingService(db_session).get_user_orders(user_id)

        assert [o.checkout_session_id for o in orders] == ["cs_second", "cs_first"]
        assert all(o.order_status == StripeOrderStatus.COMPLETED for o in orders)

    @pytest.mark.asyncio
    async def test_deleted_customer_hides_everything(self, db_session, user_id, billing_data):
        customer = await db_session.scalar(
            select(StripeCustomer).where(StripeCustomer.customer_id == "cus_mine")
        )
        customer.deleted_at = datetime(2025, 7, 1)
        await db_session.commit()

        service = BillingService(db_session)
        assert await service.get_user_subscription(user_id) is None
        assert await service.get_user_orders(user_id) == []


class TestBillingEndpoints:

    @pytest.mark.asyncio
    async def test_requires_token(self, client):
        response = await client.get(f"{API}/orders")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_my_subscription(self, client, user_headers, billing_data):
        response = await client.get(f"{API}/subscription", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["subscription_status"] == "active"

    @pytest.mark.asyncio
    async def test_no_subscription_is_null(self, client, billing_data):
        headers = {"Authorization": f"Bearer {create_access_token(uuid.uuid4())}"}
        response = await client.get(f"{API}/subscription", headers=headers)

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_my_orders(self, client, user_headers, billing_data):
        response = await client.get(f"{API}/orders", headers=user_headers)

        assert response.status_code == 200
        assert [o["checkout_session_id"] for o in response.json()] == ["cs_second", "cs_first"]
