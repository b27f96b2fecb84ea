"""
PDF Service
Renders configurator submissions to PDF files in a flat output directory
and exposes the debug listing/clearing used by the debug endpoints.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from .. import config
from ..config import CompanyProfile, public_pdf_url
from ..logging_config import log_pdf
from ..pdf_templates import (
    render_bathroom_configuration_pdf,
    render_pdf_footer_template,
    render_pdf_header_template,
)
from ..pdf_worker import render_html_to_pdf
from ..shared.formatting import as_dict, format_timestamp, text_or
from ..shared.identifiers import new_reference_id

logger = logging.getLogger(__name__)

PDF_SUFFIX = ".pdf"
FILENAME_PREFIX = "Badkonfigurator"
UNKNOWN_NAME = "Unbekannt"
MAX_NAME_BYTES = 50

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9ÄÖÜäöüß_-]+")


def format_kb(size_bytes: int) -> str:
    return f"{size_bytes / 1024:.2f} KB"


def safe_name_component(value: Any) -> str:
    """Filesystem-safe form of a customer name"""
    cleaned = UNSAFE_FILENAME_CHARS.sub("_", text_or(value)).strip("_")
    # bytes, not characters: umlauts take two
    encoded = cleaned.encode("utf-8")[:MAX_NAME_BYTES]
    cleaned = encoded.decode("utf-8", errors="ignore").strip("_")
    return cleaned or UNKNOWN_NAME


def build_pdf_filename(last_name: Any, moment: datetime) -> str:
    return f"{FILENAME_PREFIX}_{safe_name_component(last_name)}_{moment.strftime('%Y-%m-%d_%H-%M-%S')}{PDF_SUFFIX}"


@dataclass
class PDFResult:
    success: bool
    message: str
    filename: Optional[str] = None
    file_path: Optional[str] = None
    size_bytes: int = 0
    size: Optional[str] = None
    saved: bool = False
    created_at: Optional[datetime] = None
    download_url: Optional[str] = None
    reference_id: Optional[str] = None


class PDFService:
    """
    Converts configurator HTML to PDF and persists it.

    The renderer is the blocking HTML-to-PDF callable; it runs in a worker
    thread bounded by the render timeout.
    """

    def __init__(
        self,
        output_dir: str,
        company: CompanyProfile,
        debug_mode: bool = False,
        public_base_url: Optional[str] = None,
        timeout_ms: int = 30000,
        renderer: Optional[Callable[..., bytes]] = None,
    ):
        self.output_dir = Path(output_dir)
        self.company = company
        self.debug_mode = debug_mode
        self.public_base_url = public_base_url
        self.timeout_ms = timeout_ms
        self._renderer = renderer or render_html_to_pdf

    @classmethod
    def from_env(cls) -> "PDFService":
        return cls(
            output_dir=config.PDF_OUTPUT_DIR,
            company=CompanyProfile.from_env(),
            debug_mode=config.PDF_DEBUG_MODE,
            public_base_url=config.PUBLIC_BASE_URL,
            timeout_ms=config.PDF_RENDER_TIMEOUT_MS,
        )

    def ensure_output_directory(self) -> None:
        if not self.output_dir.exists():
            self.output_dir.mkdir(parents=True, exist_ok=True)
            log_pdf(logger, "output directory created", path=self.output_dir.resolve())

    def _download_url(self, filename: str) -> Optional[str]:
        if not self.debug_mode:
            return None
        return public_pdf_url(filename, self.public_base_url)

    def _unique_path(self, filename: str) -> Path:
        path = self.output_dir / filename
        counter = 1
        while path.exists():
            path = self.output_dir / f"{Path(filename).stem}_{counter}{PDF_SUFFIX}"
            counter += 1
        return path

    async def render(self, html: str, header_template: str = "<div></div>", footer_template: str = "<div></div>") -> bytes:
        """Run the blocking renderer off the event loop, bounded by the render timeout"""
        return await asyncio.wait_for(
            asyncio.to_thread(
                self._renderer,
                html,
                header_template=header_template,
                footer_template=footer_template,
                timeout_ms=self.timeout_ms,
            ),
            timeout=self.timeout_ms / 1000,
        )

    async def generate_bathroom_configuration_pdf(
        self,
        payload: Any,
        now: Optional[datetime] = None,
        reference_id: Optional[str] = None,
    ) -> PDFResult:
        """
        Render, convert and save the PDF for a configurator submission.

        Never raises; launch, timeout and write failures come back as an
        unsuccessful PDFResult.
        """
        now = now or datetime.now()
        reference_id = reference_id or new_reference_id("BATHROOM")
        data = as_dict(payload)
        contact = as_dict(data.get("contactData"))

        try:
            html = render_bathroom_configuration_pdf(
                data.get("contactData"),
                data.get("bathroomData"),
                data.get("comments"),
                data.get("additionalInfo"),
                reference_id=reference_id,
                generated_at=now,
                company=self.company,
            )
            log_pdf(logger, "generation started", customer=text_or(contact.get("lastName"), UNKNOWN_NAME), htmlLength=len(html))

            pdf_bytes = await self.render(
                html,
                header_template=render_pdf_header_template(self.company),
                footer_template=render_pdf_footer_template(self.company, now),
            )

            self.ensure_output_directory()
            path = self._unique_path(build_pdf_filename(contact.get("lastName"), now))
            path.write_bytes(pdf_bytes)
        except asyncio.TimeoutError:
            seconds = self.timeout_ms // 1000
            logger.error(f"❌ PDF generation timed out after {seconds}s")
            return PDFResult(
                success=False,
                message=f"PDF-Generierung hat das Zeitlimit von {seconds} Sekunden überschritten",
                reference_id=reference_id,
            )
        except Exception as e:
            logger.exception(f"❌ PDF generation failed: {e}")
            return PDFResult(
                success=False,
                message=f"PDF konnte nicht generiert werden: {e}",
                reference_id=reference_id,
            )

        size_bytes = len(pdf_bytes)
        result = PDFResult(
            success=True,
            message="PDF erfolgreich generiert",
            filename=path.name,
            file_path=str(path),
            size_bytes=size_bytes,
            size=format_kb(size_bytes),
            saved=True,
            created_at=now,
            download_url=self._download_url(path.name),
            reference_id=reference_id,
        )
        log_pdf(logger, "generated", filename=result.filename, size=result.size, debug=self.debug_mode)
        return result

    def _pdf_files(self) -> list[Path]:
        if not self.output_dir.is_dir():
            return []
        return [p for p in self.output_dir.iterdir() if p.is_file() and p.name.endswith(PDF_SUFFIX)]

    def list_debug_pdfs(self) -> dict:
        """Generated PDFs, newest first"""
        entries = []
        total = 0
        for path in self._pdf_files():
            try:
                stat = path.stat()
            except FileNotFoundError:
                # removed by a concurrent clear
                continue
            total += stat.st_size
            entries.append((stat.st_mtime, path.name, stat.st_size))

        entries.sort(key=lambda entry: entry[0], reverse=True)
        pdfs = [
            {
                "filename": name,
                "size": format_kb(size),
                "created": format_timestamp(datetime.fromtimestamp(mtime)),
                "downloadUrl": public_pdf_url(name, self.public_base_url),
            }
            for mtime, name, size in entries
        ]
        return {
            "pdfs": pdfs,
            "totalSize": format_kb(total),
            "outputDirectory": str(self.output_dir.resolve()),
        }

    def clear_debug_pdfs(self) -> dict:
        """Delete every generated PDF in the output directory"""
        deleted = 0
        try:
            for path in self._pdf_files():
                path.unlink()
                deleted += 1
        except OSError as e:
            logger.error(f"❌ Failed to clear debug PDFs after {deleted} deletions: {e}")
            return {"success": False, "deletedCount": deleted, "error": str(e)}

        log_pdf(logger, "debug PDFs cleared", deletedCount=deleted)
        return {"success": True, "deletedCount": deleted}
