"""提交通知邮件测试"""

import json

import httpx
import pytest

from app.services.notification import (
    CUSTOMER_EMAIL_SUBJECT,
    EmailService,
    build_admin_email_html,
    build_customer_email_html,
    format_book_style,
    format_submitted_at,
    send_submission_notifications,
)


@pytest.fixture
def submission():
    return {
        "id": "8c1f3f2e-0000-4000-8000-000000000001",
        "name": "Jordan <Lee>",
        "email": "jordan@example.com",
        "book_topic": "Remote & hybrid teams",
        "book_style": "how-to",
        "book_description": "Lessons learned",
        "additional_notes": "",
        "status": "pending",
        "created_at": "2025-05-01T10:30:00Z",
    }


class TestFormatting:

    @pytest.mark.parametrize("style,expected", [
        ("how-to", "How To"),
        ("self-help-guide", "Self Help-Guide"),
        ("memoir", "Memoir"),
    ])
    def test_format_book_style(self, style, expected):
        assert format_book_style(style) == expected

    def test_format_submitted_at(self):
        assert format_submitted_at("2025-05-01T10:30:00Z") == "2025-05-01 10:30:00"
        assert format_submitted_at("yesterday") == "yesterday"

    def test_admin_email_escapes_user_input(self, submission):
        html = build_admin_email_html(submission)

        assert "Jordan &lt;Lee&gt;" in html
        assert "Remote &amp; hybrid teams" in html
        assert "How To" in html
        assert "Additional Notes" not in html

    def test_customer_email(self, submission):
        html = build_customer_email_html(submission)

        assert "Thank You, Jordan &lt;Lee&gt;!" in html
        assert "2025-05-01 10:30:00" in html


class TestEmailService:

    @pytest.mark.asyncio
    async def test_sends_admin_and_customer(self, submission):
        sent = []

        def handler(request):
            assert request.headers["Authorization"] == "Bearer re_test"
            sent.append(json.loads(request.content))
            return httpx.Response(200, json={"id": f"email-{len(sent)}"})

        service = EmailService(
            api_key="re_test", admin_email="admin@example.com", transport=httpx.MockTransport(handler),
        )
        results = await service.notify_submission(submission)

        assert results["admin_email"] == {"success": True, "data": {"id": "email-1"}}
        assert results["customer_email"] == {"success": True, "data": {"id": "email-2"}}
        assert sent[0]["to"] == ["admin@example.com"]
        assert sent[0]["subject"] == "📚 New Book Submission: Remote & hybrid teams"
        assert sent[1]["to"] == ["jordan@example.com"]
        assert sent[1]["subject"] == CUSTOMER_EMAIL_SUBJECT

    @pytest.mark.asyncio
    async def test_failures_reported_per_recipient(self, submission):
        def handler(request):
            if json.loads(request.content)["to"] == ["jordan@example.com"]:
                return httpx.Response(422, text="invalid recipient")
            return httpx.Response(200, json={"id": "ok"})

        service = EmailService(api_key="re_test", transport=httpx.MockTransport(handler))
        results = await service.notify_submission(submission)

        assert results["admin_email"]["success"] is True
        assert results["customer_email"] == {"success": False, "error": "invalid recipient"}

    @pytest.mark.asyncio
    async def test_not_configured(self, submission):
        results = await EmailService(api_key="").notify_submission(submission)

        assert results["admin_email"] == {"success": False, "error": "Email service not configured"}
        assert results["customer_email"]["success"] is False

    @pytest.mark.asyncio
    async def test_background_task_never_raises(self, submission, caplog):
        await send_submission_notifications(submission)
        assert "Email service not configured" in caplog.text


class TestEmailNotifyEndpoint:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"submission": None}, {"submission": {}}])
    async def test_missing_submission(self, client, body):
        response = await client.post("/api/v1/email-notify", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing submission data"}

    @pytest.mark.asyncio
    async def test_reports_results(self, client, submission):
        response = await client.post("/api/v1/email-notify", json={"submission": submission})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Email notifications processed"
        assert data["results"]["admin_email"]["error"] == "Email service not configured"
