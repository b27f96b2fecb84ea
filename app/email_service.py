"""
Delivery gateway for website submissions.
Renders notification mails and hands them to the transport selected at startup.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from .config import CompanyProfile, MailSettings
from .email_templates import render_bathroom_configuration_email, render_contact_form_email
from .logging_config import log_email
from .services.mail_transport import (
    DeliveryMode,
    MailAttachment,
    MailTransport,
    OutgoingMail,
    resolve_transport,
)
from .shared.formatting import as_dict, full_name, text_or
from .shared.identifiers import new_reference_id
from .shared.validators import has_valid_mail_credentials
from .utils.sanitization import header_safe

logger = logging.getLogger(__name__)

MOCK_SUCCESS_MESSAGE = "Mock E-Mail erfolgreich simuliert (Test-Modus)"
LIVE_SUCCESS_MESSAGE = "E-Mail erfolgreich versendet"


@dataclass
class DeliveryResult:
    success: bool
    message: str
    reference_id: str
    recipient: str
    subject: str
    test_mode: bool
    message_id: Optional[str] = None


def _as_payload(value: Any) -> dict:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return as_dict(value)


class MailGateway:
    """
    Sends contact and configurator notifications to the company mailbox.

    The delivery mode is fixed by the transport passed in; neither send
    method raises, failures are reported through DeliveryResult.
    """

    def __init__(self, transport: MailTransport, settings: MailSettings, company: CompanyProfile):
        self.transport = transport
        self.settings = settings
        self.company = company

    @classmethod
    def from_settings(
        cls, settings: MailSettings, company: CompanyProfile, preview_enabled: bool = False
    ) -> "MailGateway":
        """Run the startup protocol and build a gateway around the chosen transport"""
        return cls(resolve_transport(settings, preview_enabled), settings, company)

    @property
    def mode(self) -> DeliveryMode:
        return self.transport.mode

    @property
    def test_mode(self) -> bool:
        return self.mode == DeliveryMode.SIMULATED

    def service_info(self) -> dict:
        return {
            "available": True,
            "mode": self.mode.value,
            "testMode": self.test_mode,
            "credentialsValid": has_valid_mail_credentials(self.settings.user, self.settings.password),
            "host": self.settings.host,
            "user": self.settings.user or None,
        }

    def _success_message(self) -> str:
        return MOCK_SUCCESS_MESSAGE if self.test_mode else LIVE_SUCCESS_MESSAGE

    async def _deliver(self, mail: OutgoingMail, reference_id: str, failure_prefix: str) -> DeliveryResult:
        recipient = ", ".join(mail.to)
        try:
            receipt = await asyncio.to_thread(self.transport.send, mail)
        except Exception as e:
            logger.error(f"❌ Mail delivery failed | reference={reference_id}: {e}")
            return DeliveryResult(
                success=False,
                message=f"{failure_prefix}: {e}",
                reference_id=reference_id,
                recipient=recipient,
                subject=mail.subject,
                test_mode=self.test_mode,
            )

        log_email(
            logger,
            "sent",
            reference=reference_id,
            messageId=receipt.message_id,
            mode=self.mode.value,
        )
        return DeliveryResult(
            success=True,
            message=self._success_message(),
            reference_id=reference_id,
            recipient=recipient,
            subject=mail.subject,
            test_mode=self.test_mode,
            message_id=receipt.message_id,
        )

    async def send_contact_form(self, submission: Any) -> DeliveryResult:
        form = _as_payload(submission)
        reference_id = new_reference_id("CONTACT")
        subject = header_safe(f"Kontaktanfrage: {text_or(form.get('subject'), 'Ohne Betreff')}")
        failure_prefix = "E-Mail konnte nicht versendet werden"

        try:
            html = render_contact_form_email(
                form,
                reference_id=reference_id,
                received_at=datetime.now(),
                test_mode=self.test_mode,
                company=self.company,
            )
        except Exception as e:
            logger.exception(f"❌ Contact mail rendering failed: {e}")
            return DeliveryResult(
                success=False,
                message=f"{failure_prefix}: {e}",
                reference_id=reference_id,
                recipient=self.settings.to_address,
                subject=subject,
                test_mode=self.test_mode,
            )

        log_email(logger, "contact form", reference=reference_id, urgent=form.get("urgent") is True)
        mail = OutgoingMail(
            to=[self.settings.to_address],
            subject=subject,
            html=html,
            reply_to=header_safe(text_or(form.get("email"))) or None,
        )
        return await self._deliver(mail, reference_id, failure_prefix)

    def _load_attachment(self, pdf_path: Optional[str], pdf_filename: Optional[str]) -> Optional[MailAttachment]:
        if not pdf_path:
            return None
        path = Path(pdf_path)
        if not path.is_file():
            logger.warning(f"⚠️ PDF not found, sending without attachment: {pdf_path}")
            return None
        try:
            content = path.read_bytes()
        except OSError as e:
            logger.warning(f"⚠️ PDF not readable, sending without attachment: {e}")
            return None
        return MailAttachment(filename=pdf_filename or path.name, content=content)

    async def send_bathroom_configuration(
        self,
        contact_data: Any,
        bathroom_data: Any,
        comments: Any,
        additional_info: Any,
        pdf_path: Optional[str] = None,
        pdf_filename: Optional[str] = None,
        reference_id: Optional[str] = None,
    ) -> DeliveryResult:
        contact = _as_payload(contact_data)
        reference_id = reference_id or new_reference_id("BATHROOM")
        subject = header_safe(f"Badkonfigurator Anfrage - {full_name(contact) or 'Unbekannt'}")
        failure_prefix = "Badkonfiguration konnte nicht versendet werden"

        try:
            html = render_bathroom_configuration_email(
                contact,
                bathroom_data,
                comments,
                additional_info,
                reference_id=reference_id,
                received_at=datetime.now(),
                test_mode=self.test_mode,
                company=self.company,
            )
        except Exception as e:
            logger.exception(f"❌ Configurator mail rendering failed: {e}")
            return DeliveryResult(
                success=False,
                message=f"{failure_prefix}: {e}",
                reference_id=reference_id,
                recipient=self.settings.to_address,
                subject=subject,
                test_mode=self.test_mode,
            )

        attachment = self._load_attachment(pdf_path, pdf_filename)
        log_email(
            logger,
            "bathroom configuration",
            reference=reference_id,
            attachment=attachment.filename if attachment else "none",
        )
        mail = OutgoingMail(
            to=[self.settings.to_address],
            subject=subject,
            html=html,
            reply_to=header_safe(text_or(contact.get("email"))) or None,
            attachments=[attachment] if attachment else [],
        )
        return await self._deliver(mail, reference_id, failure_prefix)
