"""
Print layout for the bathroom configurator PDF.
Produces a standalone HTML document that the PDF worker prints to A4.
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
    text_or,
)
from .utils.sanitization import sanitize_multiline, sanitize_string

PDF_STYLES = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; color: #333; background-color: #fff; }
        .container { max-width: 800px; margin: 0 auto; padding: 20px; }
        .header { background: linear-gradient(135deg, #1e3a8a 0%, #3b82f6 100%); color: white; padding: 30px; text-align: center; border-radius: 10px; margin-bottom: 30px; }
        .header h1 { font-size: 32px; margin-bottom: 10px; font-weight: 300; }
        .header .subtitle { font-size: 16px; opacity: 0.9; }
        .company-logo { font-size: 24px; font-weight: bold; text-transform: uppercase; }
        .section { background: #f8fafc; border: 1px solid #e2e8f0; border-radius: 8px; padding: 25px; margin-bottom: 25px; page-break-inside: avoid; }
        .section-title { color: #1e3a8a; font-size: 20px; font-weight: 600; margin-bottom: 15px; padding-bottom: 8px; border-bottom: 2px solid #e2e8f0; }
        .section-icon { margin-right: 10px; }
        .info-grid { display: grid; grid-template-columns: 200px 1fr; gap: 15px; margin-bottom: 15px; }
        .info-label { font-weight: 600; color: #4a5568; }
        .info-value { color: #2d3748; }
        .panel { background: white; padding: 15px; border-radius: 6px; border: 1px solid #e2e8f0; margin-top: 15px; }
        .hint { background: #fef3cd; border-color: #f59e0b; }
        .equipment-item { background: white; border: 1px solid #e2e8f0; border-radius: 6px; padding: 15px; margin-bottom: 10px; }
        .equipment-name { font-weight: 600; color: #2d3748; }
        .equipment-option { color: #4a5568; font-size: 14px; }
        .tiles-grid { display: grid; grid-template-columns: 1fr 1fr; gap: 20px; margin-top: 15px; }
        .tile-category { background: white; padding: 15px; border-radius: 6px; border: 1px solid #e2e8f0; }
        .tile-category h4 { color: #1e3a8a; margin-bottom: 10px; font-size: 16px; }
        .tile-list { color: #4a5568; font-size: 14px; line-height: 1.5; }
        .additional-info-list { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 15px; margin-top: 15px; }
        .info-item { background: white; padding: 15px; border-radius: 6px; border: 1px solid #e2e8f0; text-align: center; }
        .footer { background: #f1f5f9; padding: 20px; text-align: center; border-radius: 8px; margin-top: 30px; border: 1px solid #e2e8f0; }
        .footer-info { color: #64748b; font-size: 12px; line-height: 1.4; }
"""


def _section(icon: str, title: str, body: str) -> str:
    return f"""
        <div class="section">
            <h2 class="section-title"><span class="section-icon">{icon}</span>{title}</h2>
{body}
        </div>"""


def _grid(rows: list[tuple[str, str]]) -> str:
    cells = "".join(
        f"""
                <div class="info-label">{label}:</div>
                <div class="info-value">{value}</div>"""
        for label, value in rows
    )
    return f'            <div class="info-grid">{cells}\n            </div>'


def _equipment_block(bathroom: dict) -> str:
    equipment = selected_equipment(bathroom)
    if not equipment:
        return """
            <div class="panel hint">
                <strong>Hinweis:</strong> Keine spezifische Ausstattung ausgewählt. Wir beraten Sie gerne zu den passenden Optionen.
            </div>"""

    items = ""
    for item in equipment:
        description = (
            f'\n                    <div class="equipment-option">{sanitize_string(item.description)}</div>'
            if item.description
            else ""
        )
        items += f"""
                <div class="equipment-item">
                    <div class="equipment-name">{sanitize_string(item.name)}</div>
                    <div class="equipment-option">{sanitize_string(item.option)}</div>{description}
                </div>"""
    return f"""
            <h3 style="margin-top: 25px; margin-bottom: 15px; color: #1e3a8a;">Gewählte Ausstattung:</h3>
            <div class="equipment-list">{items}
            </div>"""


def render_bathroom_configuration_pdf(
    contact_data: Any,
    bathroom_data: Any,
    comments: Any,
    additional_info: Any,
    *,
    reference_id: str,
    generated_at: datetime,
    company: CompanyProfile,
) -> str:
    """Standalone HTML document for the configurator PDF"""
    contact = as_dict(contact_data)
    bathroom = as_dict(bathroom_data)
    quality = as_dict(bathroom.get("qualityLevel"))
    created = format_timestamp(generated_at)

    company_name = sanitize_string(company.name)
    company_address = sanitize_string(company.address)
    company_city = sanitize_string(company.city)
    company_phone = sanitize_string(company.phone)
    company_email = sanitize_string(company.email)

    customer = sanitize_string(full_name(contact)) or NOT_SPECIFIED
    size = format_number(bathroom.get("bathroomSize"))

    contact_body = _grid(
        [
            ("Name", sanitize_string(full_name(contact, with_salutation=True)) or NOT_SPECIFIED),
            ("E-Mail", sanitize_string(text_or(contact.get("email"), NOT_SPECIFIED))),
            ("Telefon", sanitize_string(text_or(contact.get("phone"), NOT_SPECIFIED))),
        ]
    )

    config_body = _grid(
        [
            ("Badezimmergröße", f"{sanitize_string(size)} m²" if size else NOT_SPECIFIED),
            ("Qualitätsstufe", sanitize_string(text_or(quality.get("name"), NOT_SELECTED))),
        ]
    )
    if text_or(quality.get("description")):
        config_body += f"""
            <div class="panel">
                <strong>Qualitätsbeschreibung:</strong><br>
                {sanitize_multiline(text_or(quality.get("description")))}
            </div>"""
    config_body += _equipment_block(bathroom)

    tiles_body = f"""            <div class="tiles-grid">
                <div class="tile-category">
                    <h4>Bodenfliesen</h4>
                    <div class="tile-list">{safe_join(bathroom.get("floorTiles"), "<br>")}</div>
                </div>
                <div class="tile-category">
                    <h4>Wandfliesen</h4>
                    <div class="tile-list">{safe_join(bathroom.get("wallTiles"), "<br>")}</div>
                </div>
            </div>
            <div style="margin-top: 20px;">
                <h4 style="color: #1e3a8a; margin-bottom: 10px;">🔥 Heizung</h4>
                <div class="tile-list">{safe_join(bathroom.get("heating"), "<br>")}</div>
            </div>"""

    sections = _section("👤", "Kontaktdaten", contact_body)
    sections += _section("🛁", "Badkonfiguration", config_body)
    sections += _section("🎨", "Fliesen & Heizung", tiles_body)

    info_labels = additional_info_labels(additional_info)
    if info_labels:
        items = "".join(
            f'\n                <div class="info-item">✓ {sanitize_string(label)}</div>'
            for label in info_labels
        )
        sections += _section(
            "📋",
            "Gewünschte Informationen",
            f'            <div class="additional-info-list">{items}\n            </div>',
        )

    if text_or(comments):
        sections += _section(
            "💬",
            "Anmerkungen",
            f'            <div class="panel">{sanitize_multiline(text_or(comments))}</div>',
        )

    next_steps = f"""            <div class="panel">
                <h4 style="color: #1e3a8a; margin-bottom: 15px;">Wir melden uns bei Ihnen!</h4>
                <p style="margin-bottom: 15px;">
                    Basierend auf Ihrer Konfiguration erstellen wir Ihnen ein individuelles Angebot.
                    Unser Expertenteam wird sich innerhalb der nächsten 24 Stunden bei Ihnen melden.
                </p>
{_grid([("Kontakt", company_phone), ("E-Mail", company_email), ("Adresse", f"{company_address}<br>{company_city}")])}
            </div>"""
    sections += _section("📞", "Nächste Schritte", next_steps)

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Badkonfigurator - {customer}</title>
    <style>{PDF_STYLES}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <div class="company-logo">{company_name}</div>
            <h1>🛁 Ihr Badkonfigurator</h1>
            <div class="subtitle">Individuelle Badplanung - Erstellt am {created}</div>
        </div>
{sections}

        <div class="footer">
            <div class="footer-info">
                <strong>{company_name}</strong><br>
                {company_address} | {company_city}<br>
                Tel: {company_phone} | E-Mail: {company_email}<br><br>
                <em>Dieses Dokument wurde automatisch generiert am {created}</em><br>
                <em>Referenz-ID: {sanitize_string(reference_id)}</em>
            </div>
        </div>
    </div>
</body>
</html>
"""


def render_pdf_header_template(company: CompanyProfile) -> str:
    """Running header printed by Chromium on every page"""
    return f"""
        <div style="font-size: 10px; width: 100%; padding: 0 1cm; color: #666;">
            <span style="float: left;">{sanitize_string(company.name)} - Badkonfigurator</span>
            <span style="float: right;">Seite <span class="pageNumber"></span> von <span class="totalPages"></span></span>
        </div>"""


def render_pdf_footer_template(company: CompanyProfile, generated_at: datetime) -> str:
    """Running footer with creation date and company contact"""
    return f"""
        <div style="font-size: 10px; width: 100%; text-align: center; color: #666; padding: 5px;">
            <span>Erstellt am {format_timestamp(generated_at)} | {sanitize_string(company.name)} | {sanitize_string(company.phone)} | {sanitize_string(company.email)}</span>
        </div>"""
