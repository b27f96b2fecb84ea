"""
Mail transports for the delivery gateway.

SMTPTransport delivers through the configured SMTP server; SimulatedTransport
only logs what would have been sent. resolve_transport picks one at startup.
"""

import logging
import smtplib
import ssl
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from enum import Enum
from typing import Optional
from uuid import uuid4

from ..config import MailSettings
from ..logging_config import log_email
from ..shared.validators import has_valid_mail_credentials
from ..utils.sanitization import strip_tags

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30
PREVIEW_LENGTH = 200


class DeliveryMode(str, Enum):
    LIVE = "live"
    SIMULATED = "simulated"


@dataclass
class MailAttachment:
    filename: str
    content: bytes
    content_type: str = "application/pdf"

    @property
    def size_kb(self) -> str:
        return f"{len(self.content) / 1024:.2f} KB"


@dataclass
class OutgoingMail:
    to: list[str]
    subject: str
    html: str
    reply_to: Optional[str] = None
    attachments: list[MailAttachment] = field(default_factory=list)


@dataclass
class SendReceipt:
    message_id: str
    response: str
    accepted: list[str] = field(default_factory=list)


class MailTransport(ABC):
    mode: DeliveryMode

    def __init__(self, settings: MailSettings):
        self.settings = settings

    @property
    def sender(self) -> str:
        return formataddr((self.settings.sender_name, self.settings.from_address))

    @abstractmethod
    def verify(self) -> tuple[bool, str]:
        """Check that the transport can deliver. Returns (success, message)"""

    @abstractmethod
    def send(self, mail: OutgoingMail) -> SendReceipt:
        """Deliver one mail. Raises on failure."""


class SMTPTransport(MailTransport):
    mode = DeliveryMode.LIVE

    def _connect(self, timeout: int) -> smtplib.SMTP:
        host, port = self.settings.host, self.settings.port
        if self.settings.secure or port == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(host, port, context=context, timeout=timeout)
        else:
            server = smtplib.SMTP(host, port, timeout=timeout)
            context = ssl.create_default_context()
            server.starttls(context=context)

        try:
            server.login(self.settings.user, self.settings.password)
        except smtplib.SMTPException:
            server.close()
            raise
        return server

    def verify(self) -> tuple[bool, str]:
        host, port = self.settings.host, self.settings.port
        try:
            server = self._connect(timeout=10)
            server.quit()
            return True, f"Connected to {host}:{port}"
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP auth error: {e}")
            return False, "Authentication failed. Check EMAIL_USER and EMAIL_PASS."
        except smtplib.SMTPConnectError as e:
            logger.error(f"SMTP connect error: {e}")
            return False, f"Could not connect to {host}:{port}."
        except smtplib.SMTPServerDisconnected as e:
            logger.error(f"SMTP disconnected: {e}")
            return False, "Server disconnected unexpectedly."
        except ssl.SSLError as e:
            logger.error(f"SSL error: {e}")
            return False, "SSL/TLS error. Check EMAIL_SECURE and EMAIL_PORT."
        except (OSError, smtplib.SMTPException) as e:
            logger.error(f"SMTP verification error: {e}")
            return False, str(e)

    def _build_message(self, mail: OutgoingMail, message_id: str) -> MIMEMultipart:
        msg = MIMEMultipart("mixed")
        msg["Subject"] = mail.subject
        msg["From"] = self.sender
        msg["To"] = ", ".join(mail.to)
        msg["Message-ID"] = message_id
        if mail.reply_to:
            msg["Reply-To"] = mail.reply_to

        msg.attach(MIMEText(mail.html, "html", "utf-8"))

        for attachment in mail.attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            part = MIMEBase(maintype, subtype or "octet-stream")
            part.set_payload(attachment.content)
            encoders.encode_base64(part)
            part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
            msg.attach(part)

        return msg

    def send(self, mail: OutgoingMail) -> SendReceipt:
        message_id = make_msgid(domain=self.settings.sender_domain)
        msg = self._build_message(mail, message_id)

        server = self._connect(timeout=SMTP_TIMEOUT_SECONDS)
        try:
            refused = server.sendmail(self.settings.from_address, mail.to, msg.as_string())
        finally:
            server.quit()

        accepted = [recipient for recipient in mail.to if recipient not in refused]
        logger.info(f"✅ SMTP mail sent via {self.settings.host} | messageId={message_id}")
        return SendReceipt(message_id=message_id, response="250 OK", accepted=accepted)


class SimulatedTransport(MailTransport):
    """Logs outgoing mail instead of sending it"""

    mode = DeliveryMode.SIMULATED

    def __init__(self, settings: MailSettings, preview_enabled: bool = False):
        super().__init__(settings)
        self.preview_enabled = preview_enabled

    def verify(self) -> tuple[bool, str]:
        return True, "Simulated transport, nothing to verify"

    def send(self, mail: OutgoingMail) -> SendReceipt:
        message_id = f"mock-{int(time.time() * 1000)}-{uuid4().hex[:9]}@test.{self.settings.sender_domain}"

        details = {
            "to": ", ".join(mail.to),
            "subject": mail.subject,
            "replyTo": mail.reply_to or "-",
            "htmlLength": len(mail.html),
        }
        if mail.attachments:
            details["attachments"] = "; ".join(
                f"{a.filename} ({a.content_type}, {a.size_kb})" for a in mail.attachments
            )
        log_email(logger, "simulated", **details)

        if self.preview_enabled:
            logger.info(f"📝 Mail preview: {strip_tags(mail.html)[:PREVIEW_LENGTH]}...")

        return SendReceipt(message_id=message_id, response="250 2.0.0 OK", accepted=list(mail.to))


def resolve_transport(settings: MailSettings, preview_enabled: bool = False) -> MailTransport:
    """
    Pick the delivery transport once at startup.

    Placeholder or missing credentials select the simulated transport; real
    looking credentials are verified against the SMTP server and a failed
    verification falls back to simulation. Never raises.
    """
    if not has_valid_mail_credentials(settings.user, settings.password):
        logger.warning("⚠️ No valid email credentials configured, mail delivery is simulated (test mode)")
        return SimulatedTransport(settings, preview_enabled)

    transport = SMTPTransport(settings)
    ok, message = transport.verify()
    if not ok:
        logger.warning(f"⚠️ SMTP verification failed, falling back to simulated delivery: {message}")
        return SimulatedTransport(settings, preview_enabled)

    logger.info(f"✅ SMTP transport ready | host={settings.host}, user={settings.user}")
    return transport
