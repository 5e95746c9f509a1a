"""Unit tests for SMTP invitation delivery"""

import smtplib

import pytest

from convohub.infrastructure.mail import MailDeliveryError, SmtpMailer
from convohub.infrastructure.mail.smtp_mailer import invitation_subject, render_invitation_html


class FakeSMTP:
    """Records the SMTP conversation instead of opening a socket"""

    instances = []
    fail_on_send = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        if FakeSMTP.fail_on_send:
            raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"No such user")})
        self.sent.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_on_send = False
    monkeypatch.setattr("convohub.infrastructure.mail.smtp_mailer.smtplib.SMTP", FakeSMTP)
    monkeypatch.setattr("convohub.infrastructure.mail.smtp_mailer.smtplib.SMTP_SSL", FakeSMTP)
    return FakeSMTP


class TestSmtpMailer:

    def test_skips_without_host(self, fake_smtp):
        mailer = SmtpMailer(host=None)
        assert mailer.send("agent@acme.io", "Hi", "Body") is False
        assert fake_smtp.instances == []

    def test_sends_invitation_with_starttls(self, fake_smtp):
        mailer = SmtpMailer(host="smtp.acme.io", port=587, user="mailer", password="secret")

        assert mailer.send_invitation("agent@acme.io", "Acme Support", "https://app/invite?token=t") is True

        smtp = fake_smtp.instances[0]
        assert smtp.started_tls
        assert smtp.logged_in == ("mailer", "secret")
        msg = smtp.sent[0]
        assert msg["To"] == "agent@acme.io"
        assert msg["Subject"] == invitation_subject("Acme Support")
        text_part, html_part = msg.get_payload()
        assert "https://app/invite?token=t" in text_part.get_payload(decode=True).decode("utf-8")
        assert 'href="https://app/invite?token=t"' in html_part.get_payload(decode=True).decode("utf-8")

    def test_implicit_tls_port_skips_starttls(self, fake_smtp):
        SmtpMailer(host="smtp.acme.io", port=465).send("agent@acme.io", "Hi", "Body")
        assert fake_smtp.instances[0].started_tls is False

    def test_rejected_message_raises(self, fake_smtp):
        fake_smtp.fail_on_send = True
        with pytest.raises(MailDeliveryError):
            SmtpMailer(host="smtp.acme.io").send("nobody@acme.io", "Hi", "Body")

    def test_message_has_text_and_html_parts(self):
        mailer = SmtpMailer(host=None)
        msg = mailer.build_message("agent@acme.io", "Hi", "plain body", "<p>html body</p>")
        content_types = [part.get_content_type() for part in msg.get_payload()]
        assert content_types == ["text/plain", "text/html"]


class TestInvitationHtml:

    def test_company_name_and_email_escaped(self):
        body = render_invitation_html("<b>x</b>@acme.io", "Acme & <Sons>", "https://app/invite?token=t")

        assert "<Sons>" not in body
        assert "Acme &amp; &lt;Sons&gt;" in body
        assert "&lt;b&gt;x&lt;/b&gt;@acme.io" in body

    def test_url_cannot_break_out_of_href(self):
        body = render_invitation_html("agent@acme.io", "Acme", 'https://app/invite?a=1&b="><script>')

        assert "<script>" not in body
        assert 'href="https://app/invite?a=1&amp;b=&quot;&gt;&lt;script&gt;"' in body
