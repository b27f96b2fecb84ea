"""
Contact Form Routes
Strict validation; invalid submissions are rejected before any mail is sent
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import IS_PRODUCTION
from ..dependencies import get_mail_gateway, iso_now, json_body
from ..email_service import MailGateway
from ..logging_config import log_api
from ..rate_limiter import client_ip
from ..shared.validators import validate_contact_form

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contact"])

SUCCESS_MESSAGE = (
    "Ihre Nachricht wurde erfolgreich versendet. Wir melden uns schnellstmöglich bei Ihnen zurück."
)
DELIVERY_FAILED_MESSAGE = (
    "Fehler beim Senden der E-Mail. Bitte versuchen Sie es erneut oder kontaktieren Sie uns direkt."
)
VALIDATION_FAILED_MESSAGE = "Validierungsfehler in den Formulardaten"


@router.post("/contact")
async def submit_contact_form(
    request: Request,
    payload: Any = Depends(json_body),
    gateway: MailGateway = Depends(get_mail_gateway),
):
    """Validate a contact form submission and mail it to the company inbox"""
    ip = client_ip(request)
    log_api(logger, "/api/contact", "POST", ip=ip)

    submission, issues = validate_contact_form(payload)
    if submission is None:
        logger.warning(f"⚠️ Contact form validation failed | errors={len(issues)}, ip={ip}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": VALIDATION_FAILED_MESSAGE,
                "errors": [issue.model_dump() for issue in issues],
            },
        )

    try:
        result = await gateway.send_contact_form(submission)
    except Exception as e:
        logger.exception(f"❌ Contact form processing failed: {e}")
        content = {"success": False, "message": DELIVERY_FAILED_MESSAGE, "timestamp": iso_now()}
        if not IS_PRODUCTION:
            content["error"] = str(e)
        return JSONResponse(status_code=500, content=content)

    if not result.success:
        logger.error(f"❌ Contact form delivery failed | reference={result.reference_id}: {result.message}")
        content = {"success": False, "message": DELIVERY_FAILED_MESSAGE, "timestamp": iso_now()}
        if not IS_PRODUCTION:
            content["error"] = result.message
        return JSONResponse(status_code=500, content=content)

    logger.info(f"✅ Contact form sent | reference={result.reference_id}, testMode={result.test_mode}")
    return {
        "success": True,
        "message": SUCCESS_MESSAGE,
        "referenceId": result.reference_id,
        "testMode": result.test_mode,
        "timestamp": iso_now(),
    }
