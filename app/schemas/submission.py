import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from app.models.submission import SubmissionStatus


# 用户提交表单
class SubmissionCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    book_topic: str = Field(min_length=1)
    book_style: str = ""
    book_description: str = Field(min_length=1)
    additional_notes: str = ""


# 提交记录响应
class SubmissionResponse(BaseModel):
    id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    name: str
    email: str
    book_topic: str
    book_style: str
    book_description: str
    additional_notes: str
    status: SubmissionStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# 管理员视图：附带所属用户的邮箱
class AdminSubmissionResponse(SubmissionResponse):
    user_email: Optional[str] = None


# 管理员更新状态
class SubmissionStatusUpdate(BaseModel):
    id: uuid.UUID
    status: SubmissionStatus


# 邮件通知请求（提交记录以字典形式传入）
class EmailNotifyRequest(BaseModel):
    submission: Optional[dict] = None
