"""
HTML Email Templates
Notification mails sent to the company mailbox for website submissions.
All templates are pure functions of their input; time, reference id and
delivery mode are passed in.
"""

from datetime import datetime
from typing import Any

from .config import CompanyProfile
from .shared.formatting import (
    NOT_SELECTED,
    NOT_SPECIFIED,
    additional_info_labels,
    as_dict,
    format_number,
    format_timestamp,
    full_name,
    safe_join,
    selected_equipment,
    service_label,
    text_or,
)
from .utils.sanitization import sanitize_multiline, sanitize_string

THEME = {
    "primary": "#1e3a8a",
    "background": "#f8fafc",
    "footer_bg": "#f1f5f9",
    "text": "#333333",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "warning": "#f59e0b",
    "warning_bg": "#fef3cd",
    "danger": "#dc2626",
    "danger_bg": "#fee2e2",
}

TEST_MODE_BANNER = (
    f'<div class="test-mode" style="background: {THEME["warning_bg"]}; padding: 10px; '
    f'margin-bottom: 20px; border: 1px solid {THEME["warning"]}; border-radius: 5px;">'
    "<strong>🧪 TEST MODUS:</strong> Diese E-Mail wurde nur simuliert</div>"
)

URGENT_LABEL = "🔴 DRINGENDE ANFRAGE"


def get_base_template(title: str, subtitle_html: str, content_sections: str, footer_html: str, test_mode: bool) -> str:
    """Base HTML wrapper shared by all notification mails"""
    banner = TEST_MODE_BANNER if test_mode else ""
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: {THEME['text']}; }}
        .header {{ background-color: {THEME['primary']}; color: white; padding: 20px; text-align: center; }}
        .content {{ padding: 20px; }}
        .section {{ margin-bottom: 20px; padding: 15px; border-left: 4px solid {THEME['primary']}; background-color: {THEME['background']}; }}
        .urgent {{ background-color: {THEME['danger_bg']}; border-left-color: {THEME['danger']}; }}
        .footer {{ background-color: {THEME['footer_bg']}; padding: 15px; text-align: center; font-size: 12px; color: {THEME['text_muted']}; }}
        .info-grid {{ display: grid; grid-template-columns: 150px 1fr; gap: 10px; }}
        .info-label {{ font-weight: bold; }}
        .equipment-list {{ margin: 10px 0; }}
        .equipment-item {{ padding: 5px 0; border-bottom: 1px solid {THEME['border']}; }}
    </style>
</head>
<body>
    {banner}
    <div class="header">
        <h1>{title}</h1>
        {subtitle_html}
    </div>
    <div class="content">
{content_sections}
    </div>
    <div class="footer">
{footer_html}
    </div>
</body>
</html>
"""


def _info_row(label: str, value_html: str) -> str:
    return f"""
                <span class="info-label">{label}:</span>
                <span>{value_html}</span>"""


def _mail_link(address: Any) -> str:
    address = sanitize_string(text_or(address))
    return f'<a href="mailto:{address}">{address}</a>' if address else NOT_SPECIFIED


def _phone_link(number: Any) -> str:
    number = sanitize_string(text_or(number))
    return f'<a href="tel:{number}">{number}</a>' if number else NOT_SPECIFIED


def _test_mode_row(test_mode: bool) -> str:
    if not test_mode:
        return ""
    return _info_row(
        "Test-Modus",
        f'<span style="color: {THEME["warning"]}; font-weight: bold;">AKTIV - Keine echte E-Mail</span>',
    )


def render_contact_form_email(
    form: dict,
    *,
    reference_id: str,
    received_at: datetime,
    test_mode: bool,
    company: CompanyProfile,
) -> str:
    """Notification mail for a contact form submission"""
    form = as_dict(form)
    urgent = form.get("urgent") is True
    company_name = sanitize_string(company.name)

    subtitle = f"<p>{company_name}</p>"
    if urgent:
        subtitle += f'\n        <p style="font-size: 18px; font-weight: bold;">{URGENT_LABEL}</p>'

    contact_rows = _info_row("Name", sanitize_string(full_name(form)) or NOT_SPECIFIED)
    contact_rows += _info_row("E-Mail", _mail_link(form.get("email")))
    if text_or(form.get("phone")):
        contact_rows += _info_row("Telefon", _phone_link(form.get("phone")))
    contact_rows += _info_row("Service", service_label(form.get("service")))
    contact_rows += _info_row(
        "Betreff", sanitize_string(text_or(form.get("subject"), NOT_SPECIFIED))
    )

    system_rows = _info_row("Referenz-ID", sanitize_string(reference_id))
    system_rows += _info_row("Eingegangen am", format_timestamp(received_at))
    system_rows += _info_row(
        "Dringend", "Ja - Antwort binnen 2 Stunden gewünscht" if urgent else "Nein"
    )
    system_rows += _test_mode_row(test_mode)

    sections = f"""        <div class="section{' urgent' if urgent else ''}">
            <h3>📋 Kontaktdaten</h3>
            <div class="info-grid">{contact_rows}
            </div>
        </div>
        <div class="section">
            <h3>💬 Nachricht</h3>
            <p>{sanitize_multiline(text_or(form.get("message"), NOT_SPECIFIED))}</p>
        </div>
        <div class="section">
            <h3>ℹ️ System-Informationen</h3>
            <div class="info-grid">{system_rows}
            </div>
        </div>"""

    origin = "simuliert" if test_mode else "automatisch"
    footer = f"""        <p>Diese E-Mail wurde {origin} über das Kontaktformular der {company_name} Website generiert.</p>
        <p>Bitte antworten Sie direkt an: {_mail_link(form.get("email"))}</p>"""

    return get_base_template("📧 Neue Kontaktanfrage", subtitle, sections, footer, test_mode)


def render_bathroom_configuration_email(
    contact_data: Any,
    bathroom_data: Any,
    comments: Any,
    additional_info: Any,
    *,
    reference_id: str,
    received_at: datetime,
    test_mode: bool,
    company: CompanyProfile,
) -> str:
    """Notification mail for a bathroom configurator submission"""
    contact = as_dict(contact_data)
    bathroom = as_dict(bathroom_data)
    company_name = sanitize_string(company.name)

    subtitle = f"<p>{company_name}</p>"
    if test_mode:
        subtitle += '\n        <p style="font-size: 14px; opacity: 0.9;">🧪 Test-Modus aktiv</p>'

    contact_rows = _info_row(
        "Name", sanitize_string(full_name(contact, with_salutation=True)) or NOT_SPECIFIED
    )
    contact_rows += _info_row("E-Mail", _mail_link(contact.get("email")))
    contact_rows += _info_row("Telefon", _phone_link(contact.get("phone")))

    size = format_number(bathroom.get("bathroomSize"))
    quality = as_dict(bathroom.get("qualityLevel"))
    config_rows = _info_row("Badgröße", f"{sanitize_string(size)} m²" if size else NOT_SPECIFIED)
    config_rows += _info_row(
        "Qualitätsstufe", sanitize_string(text_or(quality.get("name"), NOT_SELECTED))
    )

    equipment_html = ""
    equipment = selected_equipment(bathroom)
    if equipment:
        items = "".join(
            f'\n                <div class="equipment-item">• {sanitize_string(item.name)}: {sanitize_string(item.option)}</div>'
            for item in equipment
        )
        equipment_html = f"""
            <h4>Gewählte Ausstattung:</h4>
            <div class="equipment-list">{items}
            </div>"""

    tiles_rows = _info_row("Bodenfliesen", safe_join(bathroom.get("floorTiles")))
    tiles_rows += _info_row("Wandfliesen", safe_join(bathroom.get("wallTiles")))
    tiles_rows += _info_row("Heizung", safe_join(bathroom.get("heating")))

    sections = f"""        <div class="section">
            <h3>👤 Kontaktdaten</h3>
            <div class="info-grid">{contact_rows}
            </div>
        </div>
        <div class="section">
            <h3>🛁 Badkonfiguration</h3>
            <div class="info-grid">{config_rows}
            </div>{equipment_html}
        </div>
        <div class="section">
            <h3>🎨 Fliesen & Heizung</h3>
            <div class="info-grid">{tiles_rows}
            </div>
        </div>"""

    info_labels = additional_info_labels(additional_info)
    if info_labels:
        entries = "".join(f"\n                <li>{sanitize_string(label)}</li>" for label in info_labels)
        sections += f"""
        <div class="section">
            <h3>📋 Gewünschte Informationen</h3>
            <ul>{entries}
            </ul>
        </div>"""

    if text_or(comments):
        sections += f"""
        <div class="section">
            <h3>💬 Anmerkungen</h3>
            <p>{sanitize_multiline(text_or(comments))}</p>
        </div>"""

    system_rows = _info_row("Referenz-ID", sanitize_string(reference_id))
    system_rows += _info_row("Eingegangen am", format_timestamp(received_at))
    system_rows += _info_row("System", f"{company_name} Badkonfigurator v1.0")
    system_rows += _test_mode_row(test_mode)
    sections += f"""
        <div class="section">
            <h3>ℹ️ System-Informationen</h3>
            <div class="info-grid">{system_rows}
            </div>
        </div>"""

    origin = "simuliert" if test_mode else "automatisch"
    attachment_note = "(simuliert)" if test_mode else "im Anhang"
    footer = f"""        <p>Diese E-Mail wurde {origin} über den Badkonfigurator der {company_name} Website generiert.</p>
        <p>Bitte antworten Sie direkt an: {_mail_link(contact.get("email"))}</p>
        <p>PDF-Konfiguration {attachment_note} | {company_name} | {sanitize_string(company.address)} | {sanitize_string(company.city)}</p>"""

    return get_base_template("🛁 Neue Badkonfigurator Anfrage", subtitle, sections, footer, test_mode)
