"""
Debug PDF Routes
Listing and clearing of generated PDFs, only when PDF_DEBUG_MODE is on
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dependencies import get_pdf_service, iso_now
from ..logging_config import log_api
from ..services.pdf_service import PDFService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/debug-pdfs", tags=["Debug"])

DEBUG_DISABLED_MESSAGE = "Debug Modus ist nicht aktiviert"


def _debug_disabled() -> JSONResponse:
    return JSONResponse(
        status_code=403,
        content={"success": False, "message": DEBUG_DISABLED_MESSAGE, "timestamp": iso_now()},
    )


@router.get("")
async def list_debug_pdfs(pdf_service: PDFService = Depends(get_pdf_service)):
    log_api(logger, "/api/debug-pdfs", "GET", debug=pdf_service.debug_mode)
    if not pdf_service.debug_mode:
        return _debug_disabled()

    listing = pdf_service.list_debug_pdfs()
    return {
        "success": True,
        "debugMode": True,
        "count": len(listing["pdfs"]),
        "pdfs": listing["pdfs"],
        "totalSize": listing["totalSize"],
        "outputDirectory": listing["outputDirectory"],
        "timestamp": iso_now(),
    }


@router.delete("")
async def clear_debug_pdfs(pdf_service: PDFService = Depends(get_pdf_service)):
    log_api(logger, "/api/debug-pdfs", "DELETE", debug=pdf_service.debug_mode)
    if not pdf_service.debug_mode:
        return _debug_disabled()

    result = pdf_service.clear_debug_pdfs()
    deleted = result["deletedCount"]
    if not result["success"]:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": f"Debug-PDFs konnten nicht vollständig gelöscht werden ({deleted} gelöscht)",
                "deletedCount": deleted,
                "timestamp": iso_now(),
            },
        )

    return {
        "success": True,
        "message": f"{deleted} Debug-PDFs wurden gelöscht",
        "deletedCount": deleted,
        "timestamp": iso_now(),
    }
