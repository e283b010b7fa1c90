from fastapi import APIRouter

from . import health, outline, content, cover, pdf, admin, submissions, notifications, billing

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(outline.router, prefix="/outline", tags=["generation"])
api_router.include_router(content.router, prefix="/chapter-content", tags=["generation"])
api_router.include_router(cover.router, prefix="/cover", tags=["generation"])
api_router.include_router(pdf.router, prefix="", tags=["export"])
api_router.include_router(submissions.router, prefix="/submissions", tags=["submissions"])
api_router.include_router(notifications.router, prefix="/email-notify", tags=["submissions"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
