import uuid
from enum import Enum as PyEnum

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.base import Base


class SubmissionStatus(str, PyEnum):
    """提交状态枚举，任意状态之间均可切换"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FormSubmission(Base):
    __tablename__ = "form_submissions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # user_id允许为空：孤立提交记录不属于任何用户
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    book_topic = Column(Text, nullable=False)  # 书籍主题
    book_style = Column(Text, nullable=False, default="", server_default="")  # 书籍风格
    book_description = Column(Text, nullable=False)  # 书籍描述
    additional_notes = Column(Text, nullable=False, default="", server_default="")  # 补充说明

    status = Column(
        Enum(
            SubmissionStatus,
            name="submission_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
            create_constraint=True,
        ),
        nullable=False,
        default=SubmissionStatus.PENDING,
        server_default=SubmissionStatus.PENDING.value,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    # 关系
    user = relationship("User", back_populates="submissions")

    def __repr__(self):
        return f"<FormSubmission(id={self.id}, book_topic='{self.book_topic}', status={self.status})>"
