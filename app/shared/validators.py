"""Intake validation and credential checks"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from ..schemas import BathroomConfiguration, ContactFormSubmission, ValidationIssue

logger = logging.getLogger(__name__)

# Values shipped in example .env files; never real credentials
PLACEHOLDER_CREDENTIALS = {
    "your-email@gmail.com",
    "deine-email@gmail.com",
    "test@example.com",
    "your-app-password",
    "dein-app-passwort",
    "app-passwort",
    "auto-generated",
}

MIN_MAIL_USER_LENGTH = 5
MIN_MAIL_PASSWORD_LENGTH = 8


def has_valid_mail_credentials(user: Optional[str], password: Optional[str]) -> bool:
    """
    Check whether SMTP credentials look real.

    Both values must be present, neither may be a known placeholder and
    they must meet minimum lengths (user >= 5, password >= 8).
    """
    if not user or not password:
        return False

    if user.lower() in PLACEHOLDER_CREDENTIALS or password.lower() in PLACEHOLDER_CREDENTIALS:
        return False

    if len(user) < MIN_MAIL_USER_LENGTH or len(password) < MIN_MAIL_PASSWORD_LENGTH:
        return False

    return True


def format_validation_errors(exc: ValidationError) -> list[ValidationIssue]:
    """Flatten a pydantic ValidationError into field-level issues"""
    issues = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()))
        # A missing field reports the parent object as input; there is no value
        value = None if error.get("type") == "missing" else error.get("input")
        issues.append(
            ValidationIssue(field=field, message=error.get("msg", "Invalid value"), value=value)
        )
    return issues


def validate_contact_form(
    payload: Any,
) -> tuple[Optional[ContactFormSubmission], list[ValidationIssue]]:
    """Validate a contact form payload. Returns (submission, []) or (None, issues)."""
    try:
        return ContactFormSubmission.model_validate(payload), []
    except ValidationError as e:
        return None, format_validation_errors(e)


def validate_bathroom_configuration(
    payload: Any,
) -> tuple[Optional[BathroomConfiguration], list[ValidationIssue]]:
    """Validate a configurator payload. Returns (configuration, []) or (None, issues)."""
    try:
        return BathroomConfiguration.model_validate(payload), []
    except ValidationError as e:
        return None, format_validation_errors(e)


def _customer_first_name(payload: Any) -> str:
    if isinstance(payload, dict):
        contact = payload.get("contactData")
        if isinstance(contact, dict) and contact.get("firstName"):
            return str(contact["firstName"])
    return "Unknown"


def review_bathroom_configuration(payload: Any) -> list[ValidationIssue]:
    """
    Advisory validation for configurator submissions.

    Business rule: a configurator lead is never rejected. Issues are only
    logged and the caller always continues with the raw payload, including
    when validation itself fails unexpectedly.
    """
    customer = _customer_first_name(payload)
    try:
        _, issues = validate_bathroom_configuration(payload)
    except Exception as e:
        logger.error(f"Badkonfigurator validation failed (ignored): {e}")
        return []

    if issues:
        logger.warning(
            f"⚠️ Badkonfigurator validation warnings (ignored) | warnings={len(issues)}, customer={customer}"
        )

    has_data = isinstance(payload, dict) and bool(payload.get("bathroomData"))
    logger.info(f"✅ Badkonfigurator processed | customer={customer}, hasData={has_data}")
    return issues
