"""SMTP mail delivery for staff invitations.

Builds a multipart (plain text + HTML) message and hands it to the SMTP
server configured by the MAIL_* settings. When MAIL_HOST is unset the
mailer logs the message and skips delivery (local development).
"""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Optional

from ...config import Settings, get_settings


logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30


class MailDeliveryError(Exception):
    """Raised when the SMTP server rejects or cannot receive a message."""
    pass


def invitation_subject(company_name: str) -> str:
    return f"Welcome to {company_name} - Account Created"


def render_invitation_text(email: str, company_name: str, invite_url: str) -> str:
    return (
        f"Hi {email},\n\n"
        f"You've been invited to join {company_name}.\n\n"
        f"Accept your invitation and set up your account here:\n{invite_url}\n\n"
        "This link expires in 1 hour. If you weren't expecting this invitation, "
        "you can ignore this email.\n"
    )


def render_invitation_html(email: str, company_name: str, invite_url: str) -> str:
    email = html.escape(email)
    company_name = html.escape(company_name)
    invite_url = html.escape(invite_url, quote=True)
    return (
        "<html><body>"
        f"<p>Hi <strong>{email}</strong>,</p>"
        f"<p>You've been invited to join <strong>{company_name}</strong>.</p>"
        f'<p><a href="{invite_url}">Accept Invitation</a></p>'
        "<p>This link expires in 1 hour.</p>"
        "</body></html>"
    )


class SmtpMailer:
    """Sends mail through one SMTP server.

    Port 465 uses implicit TLS (SMTP_SSL); other ports upgrade with
    STARTTLS when use_tls is set.
    """

    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        from_name: str = "ConvoHub",
        from_address: str = "no-reply@convohub.local",
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.from_name = from_name
        self.from_address = from_address

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SmtpMailer":
        settings = settings or get_settings()
        return cls(
            host=settings.MAIL_HOST,
            port=settings.MAIL_PORT,
            user=settings.MAIL_USER,
            password=settings.MAIL_PASSWORD,
            use_tls=settings.MAIL_USE_TLS,
            from_name=settings.MAIL_FROM_NAME,
            from_address=settings.MAIL_FROM_ADDRESS,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def build_message(self, to: str, subject: str, text_body: str, html_body: Optional[str] = None) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self.from_name, self.from_address))
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=self.from_address.split("@")[-1])

        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        if html_body:
            msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    def send(self, to: str, subject: str, text_body: str, html_body: Optional[str] = None) -> bool:
        """Send one message.

        Returns:
            True if the message was handed to the SMTP server, False if
            delivery was skipped because MAIL_HOST is not configured.

        Raises:
            MailDeliveryError: If the SMTP conversation fails
        """
        if not self.enabled:
            logger.info(f"MAIL_HOST not configured, skipping email to {to}: {subject}")
            return False

        msg = self.build_message(to, subject, text_body, html_body)

        try:
            if self.port == 465:
                smtp = smtplib.SMTP_SSL(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS)
            else:
                smtp = smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS)

            with smtp:
                if self.use_tls and self.port != 465:
                    smtp.starttls()
                if self.user and self.password:
                    smtp.login(self.user, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            raise MailDeliveryError(str(e))

        logger.info(f"Email sent to {to}: {subject}")
        return True

    def send_invitation(self, to: str, company_name: str, invite_url: str) -> bool:
        return self.send(
            to=to,
            subject=invitation_subject(company_name),
            text_body=render_invitation_text(to, company_name, invite_url),
            html_body=render_invitation_html(to, company_name, invite_url),
        )
