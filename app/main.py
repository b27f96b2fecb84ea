import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import (
    ENVIRONMENT,
    FRONTEND_URL,
    IS_PRODUCTION,
    PDF_DEBUG_MODE,
    PDF_OUTPUT_DIR,
    PORT,
    SECURITY_HEADERS_ENABLED,
    SERVICE_NAME,
    SERVICE_VERSION,
    CompanyProfile,
    MailSettings,
)
from .dependencies import InvalidRequestBody, get_mail_gateway, iso_now
from .email_service import MailGateway
from .logging_config import configure_logging
from .rate_limiter import RateLimitExceeded, api_rate_limiter
from .routes import bathroom_configuration_router, contact_router, debug_pdfs_router
from .security_headers import SecurityHeadersMiddleware
from .services.pdf_service import PDFService

configure_logging()
logger = logging.getLogger(__name__)

START_TIME = time.monotonic()
INTERNAL_ERROR_MESSAGE = "Ein interner Serverfehler ist aufgetreten."
NOT_FOUND_MESSAGE = "Route nicht gefunden"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 {SERVICE_NAME} starting up ({ENVIRONMENT})...")

    pdf_service = PDFService.from_env()
    pdf_service.ensure_output_directory()
    app.state.pdf_service = pdf_service

    # SMTP verification blocks; keep it off the event loop
    app.state.mail_gateway = await asyncio.to_thread(
        MailGateway.from_settings,
        MailSettings.from_env(),
        CompanyProfile.from_env(),
        PDF_DEBUG_MODE,
    )
    logger.info(
        f"📧 Mail delivery mode: {app.state.mail_gateway.mode.value} | "
        f"PDF debug mode: {'on' if PDF_DEBUG_MODE else 'off'}"
    )

    yield
    logger.info("Application shutting down...")


app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION, lifespan=lifespan)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content=exc.to_body(),
        headers={"Retry-After": str(exc.retry_after)},
    )


@app.exception_handler(InvalidRequestBody)
async def invalid_body_exception_handler(request: Request, exc: InvalidRequestBody):
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": str(exc), "timestamp": iso_now()},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "message": NOT_FOUND_MESSAGE,
                "path": request.url.path,
                "timestamp": iso_now(),
            },
        )
    return JSONResponse(
        status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} - Unhandled error: {exc}")
    content = {"success": False, "message": INTERNAL_ERROR_MESSAGE, "timestamp": iso_now()}
    if not IS_PRODUCTION:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

ALLOWED_ORIGINS = list(dict.fromkeys([FRONTEND_URL, "http://localhost:4200", "http://127.0.0.1:4200"]))
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

# All form and debug endpoints share the per-IP limit
api_router = APIRouter(prefix="/api", dependencies=[Depends(api_rate_limiter)])
api_router.include_router(contact_router)
api_router.include_router(bathroom_configuration_router)
api_router.include_router(debug_pdfs_router)
app.include_router(api_router)


@app.get("/api/health")
async def health(gateway: MailGateway = Depends(get_mail_gateway)):
    return {
        "status": "OK",
        "timestamp": iso_now(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "uptime": round(time.monotonic() - START_TIME, 2),
        "environment": ENVIRONMENT,
        "email": gateway.service_info(),
        "endpoints": {
            "health": "GET /api/health",
            "contact": "POST /api/contact",
            "bathroomConfiguration": "POST /api/send-bathroom-configuration",
            "pdfOnly": "POST /api/generate-pdf-only",
            "debugPdfs": "GET|DELETE /api/debug-pdfs",
        },
    }


if PDF_DEBUG_MODE:
    app.mount("/debug/pdfs", StaticFiles(directory=PDF_OUTPUT_DIR, check_dir=False), name="debug-pdfs")
    logger.info(f"📁 Debug PDFs served from {PDF_OUTPUT_DIR} at /debug/pdfs")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=PORT)
