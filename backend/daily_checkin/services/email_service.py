"""
Email Service

SMTP delivery plus the message templates used by the scanners and the
test-email endpoint.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape
from typing import Optional

logger = logging.getLogger(__name__)

FOOTER = "This message was sent automatically by Daily Check-In. Please do not reply."


class EmailSender:
    """Sends one message per SMTP connection.

    Built once by the application entry point and handed to whoever needs it.
    ``send`` never raises; callers only see True or False.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str = "",
        password: str = "",
        from_email: str = "",
        from_name: str = "Daily Check-In",
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email or user
        self.from_name = from_name
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "EmailSender":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            from_email=settings.FROM_EMAIL,
            from_name=settings.FROM_NAME,
        )

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password)

    def _connect(self) -> smtplib.SMTP:
        if self.port == 465:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        server.starttls()
        return server

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> bool:
        """
        Send a single email.

        Args:
            to (str): Recipient address
            subject (str): Subject line
            text (str): Plain-text body
            html (str, optional): HTML alternative body

        Returns:
            bool: True if the SMTP server accepted the message, False otherwise
        """
        if not self.configured:
            logger.info("Skipping email '%s' to %s: SMTP credentials not configured", subject, to)
            return False

        message = MIMEMultipart("alternative")
        message["From"] = formataddr((self.from_name, self.from_email))
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(text, "plain", "utf-8"))
        if html:
            message.attach(MIMEText(html, "html", "utf-8"))

        try:
            with self._connect() as server:
                server.login(self.user, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email '%s' to %s: %s", subject, to, e)
            return False

        logger.info("Sent email '%s' to %s", subject, to)
        return True


# ── Templates ───────────────────────────────────────────────────────


def _html_page(title: str, color: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: {color}; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0;">
      <h1>{title}</h1>
    </div>
    <div style="background: #f9fafb; padding: 30px; border: 1px solid #e5e7eb; border-top: none; border-radius: 0 0 8px 8px;">
      {body}
    </div>
    <p style="text-align: center; margin-top: 20px; color: #6b7280; font-size: 12px;">{FOOTER}</p>
  </div>
</body>
</html>"""


def missed_check_in_alert(contact_name: str, user_name: str, missed_date: str) -> tuple[str, str, str]:
    """Alert for an emergency contact. Returns (subject, text, html)."""
    subject = f"[Safety alert] {user_name} did not check in yesterday"
    text = f"""Dear {contact_name},

{user_name} has listed you as an emergency contact.

They did not complete their daily check-in on {missed_date}.

Please get in touch with them to make sure they are safe.

---
{FOOTER}
"""
    html = _html_page(
        "Safety alert",
        "#ef4444",
        f"""<p>Dear <strong>{escape(contact_name)}</strong>,</p>
      <p><strong>{escape(user_name)}</strong> has listed you as an emergency contact.</p>
      <p style="background: #fef2f2; border: 1px solid #fecaca; border-radius: 8px; padding: 20px;">
        They did not complete their daily check-in on <strong>{missed_date}</strong>.
      </p>
      <p><strong>Please get in touch with them to make sure they are safe.</strong></p>""",
    )
    return subject, text, html


def check_in_reminder(user_name: str, today: str) -> tuple[str, str, str]:
    """Nudge for the user themself. Returns (subject, text, html)."""
    subject = "Reminder: you have not checked in today"
    text = f"""Hi {user_name},

You have not checked in yet today ({today}).

If you miss today, your emergency contacts will be notified tomorrow.

---
{FOOTER}
"""
    html = _html_page(
        "Check-in reminder",
        "#3b82f6",
        f"""<p>Hi <strong>{escape(user_name)}</strong>,</p>
      <p>You have not checked in yet today (<strong>{today}</strong>).</p>
      <p>If you miss today, your emergency contacts will be notified tomorrow.</p>""",
    )
    return subject, text, html


def smtp_check_message() -> tuple[str, str, str]:
    """Confirms SMTP settings work. Returns (subject, text, html)."""
    subject = "Daily Check-In - test email"
    text = "This is a test email from Daily Check-In. Your email configuration is working correctly."
    html = _html_page("Test email", "#10b981", f"<p>{text}</p>")
    return subject, text, html
