"""FastAPI dependencies shared by the routers"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Request

from .email_service import MailGateway
from .services.pdf_service import PDFService

logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "Ungültige JSON-Daten"


class InvalidRequestBody(Exception):
    """Request body is not parseable JSON"""


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def get_mail_gateway(request: Request) -> MailGateway:
    return request.app.state.mail_gateway


def get_pdf_service(request: Request) -> PDFService:
    return request.app.state.pdf_service


async def json_body(request: Request) -> Any:
    """Raw decoded JSON body; validation is left to each handler's policy"""
    raw = await request.body()
    try:
        return json.loads(raw or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"⚠️ Invalid JSON body on {request.url.path}: {e}")
        raise InvalidRequestBody(INVALID_JSON_MESSAGE) from e
