import pytest

from app.pdf_worker import BROWSER_ARGS, render_html_to_pdf


@pytest.fixture(scope="function")
def mock_browser(mocker):
    """Patches sync_playwright in the worker and returns the launched browser mock."""
    playwright_factory = mocker.patch("app.pdf_worker.sync_playwright")
    playwright = playwright_factory.return_value.__enter__.return_value
    browser = playwright.chromium.launch.return_value
    browser.new_page.return_value.pdf.return_value = b"%PDF-1.4"
    return browser


class TestRenderHtmlToPdf:
    def test_prints_a4_with_header_and_footer(self, mock_browser):
        pdf = render_html_to_pdf(
            "<html></html>", header_template="<div>Kopf</div>", footer_template="<div>Fuß</div>", timeout_ms=5000
        )

        assert pdf == b"%PDF-1.4"
        page = mock_browser.new_page.return_value
        page.set_content.assert_called_once_with("<html></html>", wait_until="networkidle", timeout=5000)
        options = page.pdf.call_args.kwargs
        assert options["format"] == "A4"
        assert options["margin"]["top"] == "1cm"
        assert options["print_background"] is True
        assert options["display_header_footer"] is True
        assert options["footer_template"] == "<div>Fuß</div>"
        mock_browser.close.assert_called_once()

    def test_browser_closed_when_loading_fails(self, mock_browser):
        mock_browser.new_page.return_value.set_content.side_effect = TimeoutError("networkidle")

        with pytest.raises(TimeoutError):
            render_html_to_pdf("<html></html>")

        mock_browser.close.assert_called_once()

    def test_browser_closed_when_printing_fails(self, mock_browser):
        mock_browser.new_page.return_value.pdf.side_effect = RuntimeError("Target closed")

        with pytest.raises(RuntimeError):
            render_html_to_pdf("<html></html>")

        mock_browser.close.assert_called_once()


def test_sandbox_flags_are_passed(mocker):
    playwright_factory = mocker.patch("app.pdf_worker.sync_playwright")
    playwright = playwright_factory.return_value.__enter__.return_value

    render_html_to_pdf("<html></html>")

    playwright.chromium.launch.assert_called_once_with(headless=True, args=BROWSER_ARGS)
    assert "--no-sandbox" in BROWSER_ARGS
