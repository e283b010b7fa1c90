from app.services.user import UserService
from app.services.submission import SubmissionService
from app.services.billing import BillingService
from app.services.notification import EmailService
from app.services.proxy_client import BookProxyClient
from app.services.book_generator import BookGeneratorService, book_generator

__all__ = [
    "UserService", "SubmissionService", "BillingService", "EmailService",
    "BookProxyClient", "BookGeneratorService", "book_generator",
]
