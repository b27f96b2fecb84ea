import time
from datetime import datetime

import pytest

from app.services.pdf_service import PDFService, build_pdf_filename, safe_name_component
from app.tests.constants.submissions import BathroomTestConstants
from app.tests.fixtures.services import FAKE_PDF_BYTES

FIXED_TIME = datetime(2024, 6, 1, 14, 30, 5)


class TestFilenames:
    @pytest.mark.parametrize(
        "last_name,expected",
        [
            ("Mustermann", "Mustermann"),
            ("Müller-Lüdenscheidt", "Müller-Lüdenscheidt"),
            ("van der Berg", "van_der_Berg"),
            ("../../etc/passwd", "etc_passwd"),
            ("", "Unbekannt"),
            (None, "Unbekannt"),
            ("///", "Unbekannt"),
        ],
    )
    def test_safe_name_component(self, last_name, expected):
        assert safe_name_component(last_name) == expected

    def test_long_name_is_truncated_by_bytes(self):
        assert safe_name_component("M" * 300) == "M" * 50
        assert safe_name_component("ü" * 300) == "ü" * 25
        assert len(safe_name_component("aü" * 100).encode("utf-8")) <= 50

    def test_filename_pattern(self):
        assert (
            build_pdf_filename("Mustermann", FIXED_TIME)
            == "Badkonfigurator_Mustermann_2024-06-01_14-30-05.pdf"
        )


class TestGeneratePdf:
    async def test_pdf_is_saved(self, pdf_service, pdf_output_dir, fake_pdf_renderer):
        result = await pdf_service.generate_bathroom_configuration_pdf(
            BathroomTestConstants.VALID_BATHROOM_CONFIGURATION.value,
            now=FIXED_TIME,
            reference_id="BATHROOM-1a2b3c4d",
        )

        assert result.success is True
        assert result.filename == "Badkonfigurator_Mustermann_2024-06-01_14-30-05.pdf"
        assert (pdf_output_dir / result.filename).read_bytes() == FAKE_PDF_BYTES
        assert result.size_bytes == len(FAKE_PDF_BYTES)
        assert result.size == f"{len(FAKE_PDF_BYTES) / 1024:.2f} KB"
        assert result.download_url is None

        html = fake_pdf_renderer.call_args.args[0]
        kwargs = fake_pdf_renderer.call_args.kwargs
        assert "Referenz-ID: BATHROOM-1a2b3c4d" in html
        assert "Seite" in kwargs["header_template"]
        assert "Erstellt am 01.06.2024 14:30:05" in kwargs["footer_template"]
        assert kwargs["timeout_ms"] == 30000

    async def test_existing_file_gets_suffix(self, pdf_service):
        payload = {"contactData": {"lastName": "Schulz"}}

        first = await pdf_service.generate_bathroom_configuration_pdf(payload, now=FIXED_TIME)
        second = await pdf_service.generate_bathroom_configuration_pdf(payload, now=FIXED_TIME)

        assert first.filename == "Badkonfigurator_Schulz_2024-06-01_14-30-05.pdf"
        assert second.filename == "Badkonfigurator_Schulz_2024-06-01_14-30-05_1.pdf"

    async def test_missing_last_name(self, pdf_service):
        result = await pdf_service.generate_bathroom_configuration_pdf([], now=FIXED_TIME)

        assert result.success is True
        assert result.filename.startswith("Badkonfigurator_Unbekannt_")

    async def test_very_long_last_name_is_saved(self, pdf_service, pdf_output_dir):
        result = await pdf_service.generate_bathroom_configuration_pdf(
            {"contactData": {"lastName": "M" * 300}}, now=FIXED_TIME
        )

        assert result.success is True
        assert result.filename == f"Badkonfigurator_{'M' * 50}_2024-06-01_14-30-05.pdf"
        assert (pdf_output_dir / result.filename).is_file()

    async def test_debug_mode_sets_download_url(self, debug_pdf_service):
        result = await debug_pdf_service.generate_bathroom_configuration_pdf({}, now=FIXED_TIME)

        assert result.download_url == f"http://testserver/debug/pdfs/{result.filename}"

    async def test_renderer_failure_is_reported(self, pdf_service, pdf_output_dir, fake_pdf_renderer):
        fake_pdf_renderer.side_effect = RuntimeError("Browser closed unexpectedly")

        result = await pdf_service.generate_bathroom_configuration_pdf({})

        assert result.success is False
        assert "Browser closed unexpectedly" in result.message
        assert not pdf_output_dir.exists() or not list(pdf_output_dir.glob("*.pdf"))

    async def test_render_timeout_is_reported(self, pdf_output_dir, company_profile):
        def slow_renderer(html, **kwargs):
            time.sleep(0.5)
            return FAKE_PDF_BYTES

        service = PDFService(
            output_dir=str(pdf_output_dir),
            company=company_profile,
            timeout_ms=50,
            renderer=slow_renderer,
        )

        result = await service.generate_bathroom_configuration_pdf({})

        assert result.success is False
        assert "Zeitlimit" in result.message


class TestDebugListing:
    def test_missing_directory_lists_nothing(self, pdf_service):
        listing = pdf_service.list_debug_pdfs()

        assert listing["pdfs"] == []
        assert listing["totalSize"] == "0.00 KB"

    def test_clear_counts_deleted_files(self, pdf_service, pdf_output_dir):
        pdf_output_dir.mkdir(parents=True)
        for name in ("a.pdf", "b.pdf"):
            (pdf_output_dir / name).write_bytes(FAKE_PDF_BYTES)
        (pdf_output_dir / "a.pdf.bak").write_bytes(FAKE_PDF_BYTES)

        assert pdf_service.clear_debug_pdfs() == {"success": True, "deletedCount": 2}
        assert [p.name for p in pdf_output_dir.iterdir()] == ["a.pdf.bak"]

    def test_ensure_output_directory(self, pdf_service, pdf_output_dir):
        pdf_service.ensure_output_directory()
        pdf_service.ensure_output_directory()

        assert pdf_output_dir.is_dir()

    def test_vanished_file_is_skipped(self, pdf_service, pdf_output_dir, mocker):
        pdf_output_dir.mkdir(parents=True)
        kept = pdf_output_dir / "a.pdf"
        kept.write_bytes(FAKE_PDF_BYTES)
        vanished = pdf_output_dir / "b.pdf"
        mocker.patch.object(pdf_service, "_pdf_files", return_value=[kept, vanished])

        listing = pdf_service.list_debug_pdfs()

        assert [pdf["filename"] for pdf in listing["pdfs"]] == ["a.pdf"]
        assert listing["totalSize"] == f"{len(FAKE_PDF_BYTES) / 1024:.2f} KB"
