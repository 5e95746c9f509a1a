"""Outbound mail delivery."""

from .smtp_mailer import SmtpMailer, MailDeliveryError

__all__ = ["SmtpMailer", "MailDeliveryError"]
