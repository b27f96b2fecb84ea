import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


PORT = _env_int("PORT", 3000)

# "production" hides internal error messages from API responses
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

SERVICE_NAME = "Mitra Sanitär Backend"
SERVICE_VERSION = "1.0.0"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "./logs")

# Outbound mail (SMTP)
EMAIL_HOST = os.getenv("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = _env_int("EMAIL_PORT", 587)
EMAIL_SECURE = _env_bool("EMAIL_SECURE")  # implicit TLS (port 465 style)
EMAIL_USER = os.getenv("EMAIL_USER", "")
EMAIL_PASS = os.getenv("EMAIL_PASS", "")
EMAIL_FROM = os.getenv("EMAIL_FROM") or EMAIL_USER
EMAIL_TO = os.getenv("EMAIL_TO", "hey@mitra-sanitaer.de")

# Company details used in mail bodies and PDFs
COMPANY_NAME = os.getenv("COMPANY_NAME", "Mitra Sanitär GmbH")
COMPANY_ADDRESS = os.getenv("COMPANY_ADDRESS", "Borussiastraße 62a")
COMPANY_CITY = os.getenv("COMPANY_CITY", "12103 Berlin")
COMPANY_PHONE = os.getenv("COMPANY_PHONE", "030 76008921")
COMPANY_EMAIL = os.getenv("COMPANY_EMAIL", "hey@mitra-sanitaer.de")

# PDF generation
PDF_OUTPUT_DIR = os.getenv("PDF_OUTPUT_DIR", "./generated-pdfs")
PDF_DEBUG_MODE = _env_bool("PDF_DEBUG_MODE")
PDF_RENDER_TIMEOUT_MS = _env_int("PDF_RENDER_TIMEOUT_MS", 30000)
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", f"http://localhost:{PORT}").rstrip("/")

# Rate limiting for /api routes
RATE_LIMIT_WINDOW_MS = _env_int("RATE_LIMIT_WINDOW_MS", 15 * 60 * 1000)
RATE_LIMIT_MAX_REQUESTS = _env_int("RATE_LIMIT_MAX_REQUESTS", 10)
REDIS_URL = os.getenv("REDIS_URL")

# Frontend origin for CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:4200")

SECURITY_HEADERS_ENABLED = _env_bool("SECURITY_HEADERS_ENABLED", "true")


@dataclass(frozen=True)
class MailSettings:
    """SMTP connection and addressing for the delivery gateway."""

    host: str
    port: int
    secure: bool
    user: str
    password: str
    from_address: str
    to_address: str
    sender_name: str

    @classmethod
    def from_env(cls) -> "MailSettings":
        return cls(
            host=EMAIL_HOST,
            port=EMAIL_PORT,
            secure=EMAIL_SECURE,
            user=EMAIL_USER,
            password=EMAIL_PASS,
            from_address=EMAIL_FROM,
            to_address=EMAIL_TO,
            sender_name=COMPANY_NAME,
        )

    @property
    def sender_domain(self) -> str:
        address = self.from_address or self.to_address or ""
        return address.split("@")[-1] if "@" in address else "mitra-sanitaer.de"


@dataclass(frozen=True)
class CompanyProfile:
    name: str
    address: str
    city: str
    phone: str
    email: str

    @classmethod
    def from_env(cls) -> "CompanyProfile":
        return cls(
            name=COMPANY_NAME,
            address=COMPANY_ADDRESS,
            city=COMPANY_CITY,
            phone=COMPANY_PHONE,
            email=COMPANY_EMAIL,
        )


def public_pdf_url(filename: str, base_url: Optional[str] = None) -> str:
    """URL of a generated PDF on the static debug route"""
    return f"{(base_url or PUBLIC_BASE_URL).rstrip('/')}/debug/pdfs/{filename}"
