from fastapi import APIRouter
from pydantic import BaseModel

from app.core.config import settings

router = APIRouter()

class HealthResponse(BaseModel):
    status: str
    message: str
    upstream_configured: bool

@router.get("", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        message=f"{settings.PROJECT_NAME} API is running",
        upstream_configured=settings.proxy_configured,
    )
