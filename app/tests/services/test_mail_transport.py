import re
import smtplib
from dataclasses import replace
from email import message_from_string

import pytest

from app.services.mail_transport import (
    DeliveryMode,
    MailAttachment,
    OutgoingMail,
    SimulatedTransport,
    SMTPTransport,
    resolve_transport,
)
from app.tests.constants.submissions import MailTestConstants


@pytest.fixture(scope="function")
def live_settings(mail_settings):
    return replace(
        mail_settings,
        user=MailTestConstants.VALID_USER.value,
        password=MailTestConstants.VALID_PASSWORD.value,
        from_address=MailTestConstants.VALID_USER.value,
    )


@pytest.fixture(scope="function")
def mock_smtp(mocker):
    """Patches smtplib.SMTP inside the transport module and returns the server mock."""
    smtp_class = mocker.patch("app.services.mail_transport.smtplib.SMTP")
    server = smtp_class.return_value
    server.sendmail.return_value = {}
    return server


def _outgoing_mail(**overrides):
    values = {
        "to": ["hey@mitra-sanitaer.de"],
        "subject": "Badkonfigurator Anfrage - Max Mustermann",
        "html": "<html><body><h1>Neue Anfrage</h1><p>Dusche: Nische</p></body></html>",
        "reply_to": "max.mustermann@gmx.de",
    }
    values.update(overrides)
    return OutgoingMail(**values)


class TestResolveTransport:
    @pytest.mark.parametrize(
        "user,password",
        [
            ("a@a.com", "short"),
            ("your-email@gmail.com", "a-perfectly-real-secret"),
            ("", ""),
        ],
    )
    def test_invalid_credentials_select_simulation(self, mail_settings, mock_smtp, user, password):
        transport = resolve_transport(replace(mail_settings, user=user, password=password))

        assert isinstance(transport, SimulatedTransport)
        assert transport.mode == DeliveryMode.SIMULATED
        mock_smtp.login.assert_not_called()

    def test_verified_credentials_select_smtp(self, live_settings, mock_smtp):
        transport = resolve_transport(live_settings)

        assert isinstance(transport, SMTPTransport)
        assert transport.mode == DeliveryMode.LIVE
        mock_smtp.starttls.assert_called_once()
        mock_smtp.login.assert_called_once_with(
            MailTestConstants.VALID_USER.value, MailTestConstants.VALID_PASSWORD.value
        )
        mock_smtp.quit.assert_called_once()

    def test_failed_verification_falls_back(self, live_settings, mock_smtp):
        mock_smtp.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Bad credentials")

        transport = resolve_transport(live_settings, preview_enabled=True)

        assert isinstance(transport, SimulatedTransport)
        assert transport.preview_enabled is True

    def test_implicit_tls_uses_smtp_ssl(self, live_settings, mocker):
        ssl_class = mocker.patch("app.services.mail_transport.smtplib.SMTP_SSL")

        transport = resolve_transport(replace(live_settings, port=465, secure=True))

        assert isinstance(transport, SMTPTransport)
        ssl_class.return_value.login.assert_called_once()
        ssl_class.return_value.starttls.assert_not_called()


class TestSMTPTransport:
    def test_send_builds_mime_message(self, live_settings, mock_smtp):
        attachment = MailAttachment(filename="Badkonfigurator_Mustermann.pdf", content=b"%PDF-1.4")
        mail = _outgoing_mail(attachments=[attachment])

        receipt = SMTPTransport(live_settings).send(mail)

        from_address, recipients, raw = mock_smtp.sendmail.call_args.args
        assert from_address == MailTestConstants.VALID_USER.value
        assert recipients == ["hey@mitra-sanitaer.de"]

        message = message_from_string(raw)
        assert message["Reply-To"] == "max.mustermann@gmx.de"
        assert message["Message-ID"] == receipt.message_id
        filenames = [part.get_filename() for part in message.walk() if part.get_filename()]
        assert filenames == ["Badkonfigurator_Mustermann.pdf"]
        assert receipt.accepted == ["hey@mitra-sanitaer.de"]
        mock_smtp.quit.assert_called_once()

    def test_send_failure_propagates_and_closes(self, live_settings, mock_smtp):
        mock_smtp.sendmail.side_effect = smtplib.SMTPRecipientsRefused({})

        with pytest.raises(smtplib.SMTPRecipientsRefused):
            SMTPTransport(live_settings).send(_outgoing_mail())

        mock_smtp.quit.assert_called_once()


class TestSimulatedTransport:
    def test_send_returns_synthetic_receipt(self, mail_settings):
        receipt = SimulatedTransport(mail_settings).send(_outgoing_mail())

        assert re.match(MailTestConstants.MOCK_MESSAGE_ID_PATTERN.value, receipt.message_id)
        assert receipt.response == "250 2.0.0 OK"
        assert receipt.accepted == ["hey@mitra-sanitaer.de"]

    def test_preview_only_when_enabled(self, mail_settings, caplog):
        caplog.set_level("INFO", logger="app.services.mail_transport")

        SimulatedTransport(mail_settings).send(_outgoing_mail())
        assert "Mail preview" not in caplog.text

        SimulatedTransport(mail_settings, preview_enabled=True).send(_outgoing_mail())
        assert "Mail preview: Neue Anfrage Dusche: Nische" in caplog.text

    def test_attachment_metadata_is_logged(self, mail_settings, caplog):
        caplog.set_level("INFO", logger="app.services.mail_transport")
        attachment = MailAttachment(filename="angebot.pdf", content=b"x" * 2048)

        SimulatedTransport(mail_settings).send(_outgoing_mail(attachments=[attachment]))

        assert "angebot.pdf (application/pdf, 2.00 KB)" in caplog.text
