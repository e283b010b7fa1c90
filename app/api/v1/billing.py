import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_current_user_id
from app.db.database import get_db, apply_row_scope
from app.schemas.billing import UserSubscriptionResponse, UserOrderResponse
from app.services.billing import BillingService

router = APIRouter()


@router.get("/subscription", response_model=Optional[UserSubscriptionResponse], summary="我的订阅")
async def get_my_subscription(
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """没有订阅时返回null"""
    await apply_row_scope(db, current_user_id)
    return await BillingService(db).get_user_subscription(current_user_id)


@router.get("/orders", response_model=List[UserOrderResponse], summary="我的订单")
async def list_my_orders(
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await apply_row_scope(db, current_user_id)
    return await BillingService(db).get_user_orders(current_user_id)
