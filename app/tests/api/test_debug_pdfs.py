import os
import time

from app.tests.fixtures.services import FAKE_PDF_BYTES


def _write_pdf(directory, name, age_seconds=0):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_bytes(FAKE_PDF_BYTES)
    mtime = time.time() - age_seconds
    os.utime(path, (mtime, mtime))
    return path


class TestDebugPdfsDisabled:
    def test_listing_is_forbidden(self, client):
        response = client.get("/api/debug-pdfs")

        assert response.status_code == 403
        assert response.json()["message"] == "Debug Modus ist nicht aktiviert"

    def test_clearing_is_forbidden(self, client, pdf_output_dir):
        existing = _write_pdf(pdf_output_dir, "Badkonfigurator_Alt.pdf")

        response = client.delete("/api/debug-pdfs")

        assert response.status_code == 403
        assert existing.exists()


class TestDebugPdfsEnabled:
    def test_listing_counts_only_pdfs_newest_first(self, debug_client, pdf_output_dir):
        _write_pdf(pdf_output_dir, "Badkonfigurator_Alt.pdf", age_seconds=3600)
        _write_pdf(pdf_output_dir, "Badkonfigurator_Neu.pdf")
        (pdf_output_dir / "notizen.txt").write_text("kein pdf")

        response = debug_client.get("/api/debug-pdfs")

        assert response.status_code == 200
        body = response.json()
        assert body["debugMode"] is True
        assert body["count"] == 2
        assert [pdf["filename"] for pdf in body["pdfs"]] == [
            "Badkonfigurator_Neu.pdf",
            "Badkonfigurator_Alt.pdf",
        ]
        assert body["pdfs"][0]["downloadUrl"] == "http://testserver/debug/pdfs/Badkonfigurator_Neu.pdf"
        assert body["outputDirectory"] == str(pdf_output_dir.resolve())

    def test_listing_empty_directory(self, debug_client):
        response = debug_client.get("/api/debug-pdfs")

        assert response.status_code == 200
        assert response.json()["count"] == 0
        assert response.json()["totalSize"] == "0.00 KB"

    def test_clearing_removes_every_pdf(self, debug_client, pdf_output_dir):
        _write_pdf(pdf_output_dir, "a.pdf")
        _write_pdf(pdf_output_dir, "b.pdf")
        _write_pdf(pdf_output_dir, "c.pdf")
        notes = pdf_output_dir / "notizen.txt"
        notes.write_text("bleibt")

        response = debug_client.delete("/api/debug-pdfs")

        assert response.status_code == 200
        body = response.json()
        assert body["deletedCount"] == 3
        assert body["message"] == "3 Debug-PDFs wurden gelöscht"
        assert notes.exists()

        listing = debug_client.get("/api/debug-pdfs")
        assert listing.json()["count"] == 0

    def test_generated_pdf_appears_in_listing(self, debug_client):
        debug_client.post("/api/generate-pdf-only", json={"contactData": {"lastName": "Schulz"}})

        body = debug_client.get("/api/debug-pdfs").json()

        assert body["count"] == 1
        assert body["pdfs"][0]["filename"].startswith("Badkonfigurator_Schulz_")
