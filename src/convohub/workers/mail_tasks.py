"""Mail tasks: invitation delivery."""

import logging
from typing import Dict, Any

from celery import shared_task

from ..infrastructure.mail import SmtpMailer, MailDeliveryError
from ..observability.metrics import invitations_sent_total
from .base import BaseTask


logger = logging.getLogger(__name__)


@shared_task(base=BaseTask, name="mail.send_invitation_email")
def send_invitation_email(
    email: str,
    company_name: str,
    invite_url: str,
    company_id: str,
) -> Dict[str, Any]:
    """Send the staff invitation email.

    Raises:
        MailDeliveryError: If the SMTP server rejects the message
    """
    mailer = SmtpMailer.from_settings()

    try:
        sent = mailer.send_invitation(email, company_name, invite_url)
    except MailDeliveryError:
        invitations_sent_total.labels(status="error").inc()
        logger.error(f"Invitation email to {email} failed", extra={"company_id": company_id})
        raise

    status = "sent" if sent else "skipped"
    invitations_sent_total.labels(status=status).inc()
    logger.info(f"Invitation email {status} for {email}", extra={"company_id": company_id})

    return {"status": status, "email": email, "company_id": company_id}
