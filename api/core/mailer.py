"""
SMTP client helpers (aiosmtplib).

Settings come from the environment:
- SMTP_HOST, SMTP_PORT (587), SMTP_USERNAME, SMTP_PASSWORD
- SMTP_USE_TLS: implicit TLS (usually port 465); otherwise STARTTLS is used
  when the server offers it
- MAIL_FROM (defaults to SMTP_USERNAME), MAIL_FROM_NAME, SMTP_TIMEOUT_S
"""

from __future__ import annotations

from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

import aiosmtplib

from .config import env_bool, env_int, env_str


# Mail failures are explicit and separable from other runtime errors.
class MailerError(RuntimeError):
    pass


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    username: str
    password: str
    use_tls: bool
    sender: str
    sender_name: str
    timeout_s: float

    @property
    def configured(self) -> bool:
        return bool(self.host and self.sender)


def smtp_settings() -> SmtpSettings:
    username = env_str("SMTP_USERNAME")
    return SmtpSettings(
        host=env_str("SMTP_HOST"),
        port=env_int("SMTP_PORT", 587),
        username=username,
        password=env_str("SMTP_PASSWORD"),
        use_tls=env_bool("SMTP_USE_TLS"),
        sender=env_str("MAIL_FROM", username),
        sender_name=env_str("MAIL_FROM_NAME", "Event Team"),
        timeout_s=float(env_int("SMTP_TIMEOUT_S", 30)),
    )


def _require_configured(settings: SmtpSettings) -> None:
    if not settings.configured:
        raise MailerError("Email service is not configured (SMTP_HOST and MAIL_FROM/SMTP_USERNAME).")


def _connection_kwargs(settings: SmtpSettings) -> dict:
    return {
        "hostname": settings.host,
        "port": settings.port,
        "username": settings.username or None,
        "password": settings.password or None,
        "use_tls": settings.use_tls,
        # None lets aiosmtplib upgrade with STARTTLS when the server supports it.
        "start_tls": False if settings.use_tls else None,
        "timeout": settings.timeout_s,
    }


def build_message(
    *,
    settings: SmtpSettings,
    to_email: str,
    to_name: str | None,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> EmailMessage:
    message = EmailMessage()
    try:
        message["From"] = formataddr((settings.sender_name, settings.sender))
        message["To"] = formataddr((to_name or "", to_email))
        message["Subject"] = subject
    except ValueError as exc:
        # e.g. CR/LF inside a display name or subject.
        raise MailerError(f"Invalid header for {to_email}: {exc}") from exc
    domain = settings.sender.rpartition("@")[2] or None
    message["Message-ID"] = make_msgid(domain=domain)
    message.set_content(text_body)
    if html_body:
        message.add_alternative(html_body, subtype="html")
    return message


async def send_message(message: EmailMessage, *, settings: SmtpSettings) -> str:
    """
    Deliver one message and return its Message-ID.
    """
    _require_configured(settings)
    try:
        await aiosmtplib.send(message, **_connection_kwargs(settings))
    except (aiosmtplib.SMTPException, OSError) as exc:
        raise MailerError(f"SMTP delivery to {message['To']} failed: {exc}") from exc
    return str(message["Message-ID"])


async def verify_connection(settings: SmtpSettings) -> None:
    """
    Connect (and log in, when credentials are set) without sending anything.
    """
    _require_configured(settings)
    client = aiosmtplib.SMTP(**_connection_kwargs(settings))
    try:
        async with client:
            await client.noop()
    except (aiosmtplib.SMTPException, OSError) as exc:
        raise MailerError(f"SMTP connection to {settings.host}:{settings.port} failed: {exc}") from exc
