"""
Bathroom Configurator Routes
Validation here is advisory: a configurator lead is always processed.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import IS_PRODUCTION
from ..dependencies import get_mail_gateway, get_pdf_service, iso_now, json_body
from ..email_service import MailGateway
from ..logging_config import log_api
from ..services.pdf_service import PDFResult, PDFService
from ..shared.formatting import as_dict
from ..shared.identifiers import new_reference_id
from ..shared.validators import review_bathroom_configuration

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bathroom Configuration"])

SUCCESS_MESSAGE = (
    "Ihre Badkonfiguration wurde erfolgreich versendet. Wir erstellen Ihnen gerne ein individuelles Angebot."
)
PROCESSING_FAILED_MESSAGE = "Fehler beim Verarbeiten Ihrer Badkonfiguration. Bitte versuchen Sie es erneut."
PDF_ONLY_SUCCESS_MESSAGE = "PDF wurde erfolgreich generiert"
PDF_ONLY_FAILED_MESSAGE = "Fehler beim Generieren des Test-PDFs"


def _failure(message: str, error: str, **flags: Any) -> JSONResponse:
    content = {"success": False, **flags, "message": message, "timestamp": iso_now()}
    if not IS_PRODUCTION:
        content["error"] = error
    return JSONResponse(status_code=500, content=content)


def _pdf_debug_info(pdf: PDFResult, include_path: bool) -> dict:
    info = {
        "filename": pdf.filename,
        "downloadUrl": pdf.download_url,
        "pdfSize": pdf.size,
        "pdfSaved": pdf.saved,
    }
    if include_path:
        info["outputPath"] = pdf.file_path
    return info


@router.post("/send-bathroom-configuration")
async def send_bathroom_configuration(
    payload: Any = Depends(json_body),
    pdf_service: PDFService = Depends(get_pdf_service),
    gateway: MailGateway = Depends(get_mail_gateway),
):
    """Render the configurator PDF and mail it with a summary to the company inbox"""
    log_api(logger, "/api/send-bathroom-configuration", "POST")
    review_bathroom_configuration(payload)

    data = as_dict(payload)
    reference_id = new_reference_id("BATHROOM")
    pdf = None

    try:
        pdf = await pdf_service.generate_bathroom_configuration_pdf(data, reference_id=reference_id)
        if not pdf.success:
            logger.error(f"❌ Configurator PDF failed | reference={reference_id}: {pdf.message}")
            return _failure(PROCESSING_FAILED_MESSAGE, pdf.message, pdfGenerated=False, emailSent=False)

        result = await gateway.send_bathroom_configuration(
            data.get("contactData"),
            data.get("bathroomData"),
            data.get("comments"),
            data.get("additionalInfo"),
            pdf_path=pdf.file_path,
            pdf_filename=pdf.filename,
            reference_id=reference_id,
        )
    except Exception as e:
        logger.exception(f"❌ Configurator processing failed | reference={reference_id}: {e}")
        pdf_generated = pdf is not None and pdf.success
        return _failure(PROCESSING_FAILED_MESSAGE, str(e), pdfGenerated=pdf_generated, emailSent=False)

    if not result.success:
        logger.error(f"❌ Configurator delivery failed | reference={reference_id}: {result.message}")
        return _failure(PROCESSING_FAILED_MESSAGE, result.message, pdfGenerated=True, emailSent=False)

    logger.info(f"✅ Configurator sent | reference={reference_id}, pdf={pdf.filename}")
    response = {
        "success": True,
        "message": SUCCESS_MESSAGE,
        "referenceId": result.reference_id,
        "pdfGenerated": True,
        "emailSent": True,
        "testMode": result.test_mode,
        "timestamp": iso_now(),
    }
    if pdf_service.debug_mode:
        response["debug"] = _pdf_debug_info(pdf, include_path=False)
    return response


@router.post("/generate-pdf-only")
async def generate_pdf_only(
    payload: Any = Depends(json_body),
    pdf_service: PDFService = Depends(get_pdf_service),
):
    """Render the configurator PDF without sending any mail"""
    log_api(logger, "/api/generate-pdf-only", "POST", debug=pdf_service.debug_mode)
    review_bathroom_configuration(payload)

    try:
        pdf = await pdf_service.generate_bathroom_configuration_pdf(as_dict(payload))
    except Exception as e:
        logger.exception(f"❌ PDF-only generation failed: {e}")
        return _failure(PDF_ONLY_FAILED_MESSAGE, str(e))

    if not pdf.success:
        return _failure(PDF_ONLY_FAILED_MESSAGE, pdf.message)

    return {
        "success": True,
        "message": PDF_ONLY_SUCCESS_MESSAGE,
        "timestamp": iso_now(),
        "debug": _pdf_debug_info(pdf, include_path=pdf_service.debug_mode),
    }
