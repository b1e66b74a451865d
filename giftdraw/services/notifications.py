from __future__ import annotations

import html
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from loguru import logger

from giftdraw.core.config import Settings
from giftdraw.domain import Assignment
from giftdraw.services.errors import DispatchError

SMTP_TIMEOUT_SECONDS = 30


def _text(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Missing {label}.")
    return value.strip()


@dataclass(frozen=True)
class NotificationPayload:
    giver_name: str
    giver_email: str
    receiver_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "giver": {"name": self.giver_name, "email": self.giver_email},
            "receiver": {"name": self.receiver_name},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NotificationPayload":
        try:
            giver = data["giver"]
            receiver = data["receiver"]
            payload = cls(
                giver_name=_text(giver["name"], "giver name"),
                giver_email=_text(giver["email"], "giver email"),
                receiver_name=_text(receiver["name"], "receiver name"),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed assignment payload: {data!r}") from exc
        if not payload.giver_email or "@" not in payload.giver_email:
            raise ValueError(f"Invalid giver email: {payload.giver_email!r}")
        return payload


@dataclass(frozen=True)
class DeliveryResult:
    email: str
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"email": self.email, "success": self.success}
        if self.message_id:
            data["id"] = self.message_id
        if self.error:
            data["error"] = self.error
        return data


def build_payloads(assignments: Iterable[Assignment]) -> List[NotificationPayload]:
    return [
        NotificationPayload(
            giver_name=assignment.giver.name,
            giver_email=assignment.giver.email,
            receiver_name=assignment.receiver.name,
        )
        for assignment in assignments
    ]


def render_subject(event_name: str) -> str:
    return f"{event_name} - your secret match!"


def render_email(payload: NotificationPayload, event_name: str, deadline: Optional[str] = None) -> str:
    deadline_html = (
        f'<p style="font-size:14px;color:#666666;">Gift deadline: {html.escape(deadline)}</p>'
        if deadline
        else ""
    )
    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8"></head>'
        '<body style="font-family:Georgia,serif;background-color:#1a1a2e;color:#ffffff;">'
        f'<h1 style="color:#c9a227;">{html.escape(event_name)}</h1>'
        f'<p>Hi <span style="color:#c9a227;">{html.escape(payload.giver_name)}</span>!</p>'
        "<p>You will be giving a gift to:</p>"
        f'<p style="color:#c9a227;font-size:24px;">{html.escape(payload.receiver_name)}</p>'
        f"{deadline_html}"
        "<p>Remember: it's a secret!</p>"
        "</body></html>"
    )


class EmailDispatcher:
    """Sends one message per giver over a single SMTP connection."""

    def __init__(self, settings: Settings, connect: Optional[Callable[[], smtplib.SMTP]] = None) -> None:
        self.settings = settings
        self._connect = connect or self._open_connection

    def _open_connection(self) -> smtplib.SMTP:
        settings = self.settings
        if settings.smtp_use_ssl:
            server: smtplib.SMTP = smtplib.SMTP_SSL(
                settings.smtp_host, settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS
            )
        else:
            server = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS)
        try:
            if not settings.smtp_use_ssl:
                server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
        except Exception:
            server.close()
            raise
        return server

    def _build_message(
        self,
        payload: NotificationPayload,
        event_name: str,
        deadline: Optional[str],
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.settings.mail_from
        message["To"] = payload.giver_email
        message["Subject"] = render_subject(event_name)
        message["Message-ID"] = make_msgid(domain=self.settings.mail_from.partition("@")[2] or None)
        message.set_content(
            f"Hi {payload.giver_name}! You will be giving a gift to {payload.receiver_name}."
            + (f" Gift deadline: {deadline}." if deadline else "")
        )
        message.add_alternative(render_email(payload, event_name, deadline), subtype="html")
        return message

    def _send_one(
        self,
        server: smtplib.SMTP,
        payload: NotificationPayload,
        event_name: str,
        deadline: Optional[str],
    ) -> DeliveryResult:
        log = logger.bind(email=payload.giver_email)
        message = self._build_message(payload, event_name, deadline)
        try:
            refused = server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            log.warning("Email delivery failed: {error}", error=str(exc))
            return DeliveryResult(payload.giver_email, False, error=str(exc))
        if refused:
            log.warning("Recipient refused: {refused}", refused=refused)
            return DeliveryResult(payload.giver_email, False, error="Recipient refused")
        log.info("Email sent")
        return DeliveryResult(payload.giver_email, True, message_id=message["Message-ID"])

    def send_all(
        self,
        payloads: Iterable[NotificationPayload],
        event_name: Optional[str] = None,
        deadline: Optional[str] = None,
    ) -> List[DeliveryResult]:
        event_name = event_name or self.settings.event_name
        payloads = list(payloads)
        logger.bind(count=len(payloads), event_name=event_name).info("Sending notifications")

        try:
            server = self._connect()
        except (smtplib.SMTPException, OSError) as exc:
            raise DispatchError(f"Could not connect to the mail server: {exc}") from exc

        try:
            return [self._send_one(server, payload, event_name, deadline) for payload in payloads]
        finally:
            try:
                server.quit()
            except (smtplib.SMTPException, OSError) as exc:
                logger.warning("SMTP quit failed: {error}", error=str(exc))
