from app.models.user import User
from app.models.submission import FormSubmission, SubmissionStatus
from app.models.billing import (
    StripeCustomer,
    StripeSubscription,
    StripeOrder,
    StripeSubscriptionStatus,
    StripeOrderStatus,
)

__all__ = [
    "User",
    "FormSubmission", "SubmissionStatus",
    "StripeCustomer", "StripeSubscription", "StripeOrder",
    "StripeSubscriptionStatus", "StripeOrderStatus",
]
