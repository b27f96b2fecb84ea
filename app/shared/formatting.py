"""
Data shaping shared by the mail and PDF renderers.

Every accessor tolerates missing or wrongly typed input and falls back to a
display default, so malformed configurator payloads still render.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..utils.sanitization import sanitize_string

NOT_SPECIFIED = "Nicht angegeben"
NOT_SELECTED = "Nicht ausgewählt"
NONE_SELECTED = "Keine ausgewählt"
STANDARD_OPTION = "Standard"

SERVICE_LABELS = {
    "heating": "Heizungsbau",
    "bathroom": "Bäderbau",
    "installation": "Installation",
    "emergency": "Notdienst",
    "consultation": "Beratung",
}

ADDITIONAL_INFO_LABELS = {
    "projektablauf": "Projektablauf",
    "garantie": "Garantie & Gewährleistung",
    "referenzen": "Referenzen",
    "foerderung": "Förderungsmöglichkeiten",
}


@dataclass(frozen=True)
class SelectedEquipment:
    name: str
    option: str
    description: str = ""


def as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def text_or(value: Any, fallback: str = "") -> str:
    """String form of a value, or the fallback when it is empty"""
    if value is None or isinstance(value, (dict, list)):
        return fallback
    text = str(value).strip()
    return text or fallback


def format_timestamp(moment: datetime) -> str:
    return moment.strftime("%d.%m.%Y %H:%M:%S")


def format_number(value: Any) -> Optional[str]:
    """Display form of a numeric field such as the bathroom size"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def service_label(code: Any) -> str:
    if not isinstance(code, str):
        return NOT_SPECIFIED
    return SERVICE_LABELS.get(code, NOT_SPECIFIED)


def full_name(contact: Any, with_salutation: bool = False) -> str:
    contact = as_dict(contact)
    parts = [contact.get("firstName"), contact.get("lastName")]
    if with_salutation:
        parts.insert(0, contact.get("salutation"))
    return " ".join(text_or(part) for part in parts if text_or(part))


def resolve_equipment_option(item: Any) -> Optional[dict]:
    """First popup option flagged as selected, if any"""
    options = as_list(as_dict(as_dict(item).get("popupDetails")).get("options"))
    for option in options:
        if isinstance(option, dict) and option.get("selected") is True:
            return option
    return None


def selected_equipment(bathroom_data: Any) -> list[SelectedEquipment]:
    """Selected equipment items with their chosen option ("Standard" if none)"""
    result = []
    for item in as_list(as_dict(bathroom_data).get("equipment")):
        if not isinstance(item, dict) or item.get("selected") is not True:
            continue
        option = resolve_equipment_option(item)
        result.append(
            SelectedEquipment(
                name=text_or(item.get("name"), text_or(item.get("id"), "Unbenannt")),
                option=text_or(option.get("name"), STANDARD_OPTION) if option else STANDARD_OPTION,
                description=text_or(option.get("description")) if option else "",
            )
        )
    return result


def additional_info_labels(additional_info: Any) -> list[str]:
    """Display labels for every additional-info flag that is set"""
    return [
        ADDITIONAL_INFO_LABELS.get(key, key)
        for key, value in as_dict(additional_info).items()
        if value
    ]


def item_label(item: Any) -> str:
    """Tiles and heating entries arrive as plain strings or as objects"""
    if isinstance(item, dict):
        return text_or(item.get("name"), text_or(item.get("id")))
    return text_or(item)


def safe_join(items: Any, separator: str = ", ", fallback: str = NONE_SELECTED) -> str:
    """HTML-escaped join of list entries, skipping empty ones"""
    labels = [item_label(item) for item in as_list(items)]
    labels = [sanitize_string(label) for label in labels if label]
    return separator.join(labels) if labels else fallback
