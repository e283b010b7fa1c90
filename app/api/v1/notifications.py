from fastapi import APIRouter, HTTPException, status

from app.schemas.submission import EmailNotifyRequest
from app.services.notification import EmailService

router = APIRouter()


@router.post("", summary="发送提交通知邮件")
async def email_notify(request: EmailNotifyRequest):
    """给管理员和客户各发一封邮件，返回逐个收件人的结果"""
    if not request.submission:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing submission data",
        )

    results = await EmailService().notify_submission(request.submission)
    return {
        "success": True,
        "results": results,
        "message": "Email notifications processed",
    }
