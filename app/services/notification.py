"""
提交通知邮件服务
通过Resend API给管理员和客户各发一封邮件，单封失败只记录在结果中
"""
import logging
import re
from datetime import datetime
from html import escape
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import get_error_message

logger = logging.getLogger(__name__)

CUSTOMER_EMAIL_SUBJECT = "Thank You for Your Book Submission - Proofbound"


def _text(value: Any) -> str:
    return escape(str(value)) if value is not None else ""


def format_book_style(style: str) -> str:
    """'how-to' -> 'How To'，只替换第一个连字符"""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), style.replace("-", " ", 1))


def format_submitted_at(value: Any) -> str:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str) and value:
        try:
            moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    else:
        moment = datetime.now()
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def build_admin_email_html(submission: Dict[str, Any]) -> str:
    name = _text(submission.get("name"))
    email = _text(submission.get("email"))
    topic = _text(submission.get("book_topic"))
    style = submission.get("book_style") or ""
    notes = submission.get("additional_notes") or ""
    status = _text(submission.get("status") or "pending").upper()

    style_block = f"""
          <div class="field">
            <div class="label">Book Style</div>
            <div class="value">{_text(format_book_style(style))}</div>
          </div>""" if style else ""
    notes_block = f"""
          <div class="field">
            <div class="label">Additional Notes</div>
            <div class="value">{_text(notes)}</div>
          </div>""" if notes else ""

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>New Book Submission - Proofbound</title>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: #007bff; color: white; padding: 20px; border-radius: 8px 8px 0 0; }}
    .content {{ background: #f8f9fa; padding: 20px; border-radius: 0 0 8px 8px; }}
    .field {{ margin-bottom: 15px; }}
    .label {{ font-weight: bold; color: #495057; }}
    .value {{ margin-top: 5px; padding: 10px; background: white; border-radius: 4px; border-left: 4px solid #007bff; }}
    .status {{ display: inline-block; padding: 4px 12px; border-radius: 20px; font-size: 12px; font-weight: bold; }}
    .status-pending {{ background: #fff3cd; color: #856404; }}
    .footer {{ margin-top: 20px; padding: 15px; background: #e9ecef; border-radius: 4px; font-size: 14px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>📚 New Book Submission Received</h1>
      <p>A new customer has submitted a book request on Proofbound</p>
    </div>
    <div class="content">
      <div class="field">
        <div class="label">Customer Information</div>
        <div class="value">
          <strong>Name:</strong> {name}<br>
          <strong>Email:</strong> <a href="mailto:{email}">{email}</a><br>
          <strong>Submitted:</strong> {_text(format_submitted_at(submission.get("created_at")))}
        </div>
      </div>
      <div class="field">
        <div class="label">Book Topic</div>
        <div class="value">{topic}</div>
      </div>{style_block}
      <div class="field">
        <div class="label">Book Description</div>
        <div class="value">{_text(submission.get("book_description"))}</div>
      </div>{notes_block}
      <div class="field">
        <div class="label">Status</div>
        <div class="value"><span class="status status-pending">{status}</span></div>
      </div>
    </div>
    <div class="footer">
      <p><strong>Next Steps:</strong></p>
      <ul>
        <li>Review the submission details above</li>
        <li>Contact the customer within 24 hours</li>
        <li>Send them a draft outline for approval</li>
        <li>Update the submission status in your admin dashboard</li>
      </ul>
      <p>
        <a href="mailto:{email}?subject=Your Proofbound Book Project - {topic}"
           style="display: inline-block; padding: 10px 20px; background: #007bff; color: white; text-decoration: none; border-radius: 4px;">
          📧 Email Customer
        </a>
      </p>
    </div>
  </div>
</body>
</html>"""


def build_customer_email_html(submission: Dict[str, Any]) -> str:
    style = submission.get("book_style") or ""
    style_line = (
        f"<p><strong>Style:</strong> {_text(format_book_style(style))}</p>" if style else ""
    )
    timeline = [
        ("Within 24 hours:", "Our team will review your submission and create a draft outline tailored to your expertise and goals."),
        ("Outline Review:", "We'll send you the draft outline for your approval and any adjustments."),
        ("Book Creation:", "Once approved, we'll begin writing your 200+ page professional book."),
        ("Delivery:", "Your 2 professionally-bound books will be delivered within 2 weeks."),
    ]
    timeline_items = "".join(
        f"""
        <div class="timeline-item">
          <div class="timeline-icon">{index}</div>
          <div><strong>{heading}</strong> {body}</div>
        </div>"""
        for index, (heading, body) in enumerate(timeline, start=1)
    )

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{CUSTOMER_EMAIL_SUBJECT}</title>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: #007bff; color: white; padding: 20px; border-radius: 8px 8px 0 0; text-align: center; }}
    .content {{ background: #f8f9fa; padding: 20px; border-radius: 0 0 8px 8px; }}
    .highlight {{ background: white; padding: 15px; border-radius: 4px; border-left: 4px solid #28a745; margin: 15px 0; }}
    .timeline {{ background: white; padding: 20px; border-radius: 4px; margin: 15px 0; }}
    .timeline-item {{ display: flex; align-items: center; margin-bottom: 15px; }}
    .timeline-icon {{ width: 30px; height: 30px; border-radius: 50%; background: #007bff; color: white; display: flex; align-items: center; justify-content: center; margin-right: 15px; font-weight: bold; }}
    .footer {{ margin-top: 20px; padding: 15px; background: #e9ecef; border-radius: 4px; font-size: 14px; text-align: center; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>📚 Thank You, {_text(submission.get("name"))}!</h1>
      <p>Your book submission has been received</p>
    </div>
    <div class="content">
      <div class="highlight">
        <h3>✅ Submission Confirmed</h3>
        <p>We've received your request for a book about <strong>"{_text(submission.get("book_topic"))}"</strong> and our team is excited to work with you!</p>
      </div>
      <div class="timeline">
        <h3>What happens next:</h3>{timeline_items}
      </div>
      <div class="highlight">
        <h3>📋 Your Submission Summary:</h3>
        <p><strong>Topic:</strong> {_text(submission.get("book_topic"))}</p>
        {style_line}
        <p><strong>Submitted:</strong> {_text(format_submitted_at(submission.get("created_at")))}</p>
      </div>
      <div style="background: white; padding: 20px; border-radius: 4px; margin: 15px 0; text-align: center;">
        <h3>Questions or Need to Make Changes?</h3>
        <p>Feel free to reply to this email or contact us at:</p>
        <p><strong>📧 {_text(settings.ADMIN_EMAIL)}</strong></p>
        <p>We typically respond within a few hours during business days.</p>
      </div>
    </div>
    <div class="footer">
      <p><strong>Proofbound</strong> - Transform Your Expertise Into Professional Books</p>
      <p>Thank you for choosing us to bring your knowledge to life!</p>
    </div>
  </div>
</body>
</html>"""


class EmailService:
    """Resend邮件服务"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        sender: Optional[str] = None,
        admin_email: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.api_url = api_url or settings.RESEND_API_URL
        self.sender = sender or settings.EMAIL_FROM
        self.admin_email = admin_email or settings.ADMIN_EMAIL
        self.transport = transport

    async def send_email(self, to: str, subject: str, html: str) -> Dict[str, Any]:
        """
        发送单封邮件

        Returns:
            成功 {"success": True, "data": ...}，失败 {"success": False, "error": ...}
        """
        if not self.api_key:
            logger.error("RESEND_API_KEY未配置")
            return {"success": False, "error": "Email service not configured"}

        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    json={"from": self.sender, "to": [to], "subject": subject, "html": html},
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"邮件发送异常 {to}: {e}")
            return {"success": False, "error": get_error_message(e)}

        if response.is_error:
            logger.error(f"邮件发送失败 {to}: {response.text}")
            return {"success": False, "error": response.text}

        try:
            data = response.json()
        except ValueError:
            data = response.text
        logger.info(f"邮件已发送: {to}")
        return {"success": True, "data": data}

    async def notify_submission(self, submission: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """给管理员和客户发送提交通知"""
        logger.info(f"处理提交通知: {submission.get('id')}")

        admin_result = await self.send_email(
            self.admin_email,
            f"📚 New Book Submission: {submission.get('book_topic', '')}",
            build_admin_email_html(submission),
        )

        customer_email = submission.get("email")
        if customer_email:
            customer_result = await self.send_email(
                customer_email,
                CUSTOMER_EMAIL_SUBJECT,
                build_customer_email_html(submission),
            )
        else:
            customer_result = {"success": False, "error": "Submission has no email address"}

        return {"admin_email": admin_result, "customer_email": customer_result}


async def send_submission_notifications(submission: Dict[str, Any]) -> None:
    """
    插入后台任务：发送通知邮件

    通知失败不影响已提交的记录，只记录警告
    """
    try:
        results = await EmailService().notify_submission(submission)
    except Exception as e:
        logger.warning(f"提交通知发送失败 {submission.get('id')}: {e}")
        return

    for recipient, result in results.items():
        if not result.get("success"):
            logger.warning(f"提交通知未送达 ({recipient}): {result.get('error')}")
