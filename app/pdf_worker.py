"""
Headless Chromium PDF printing.
Blocking; callers run it in a worker thread. One browser per call.
"""

import logging

from playwright.sync_api import sync_playwright

logger = logging.getLogger(__name__)

# Container-friendly Chromium flags
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

PAGE_MARGIN = {"top": "1cm", "right": "1cm", "bottom": "1cm", "left": "1cm"}


def render_html_to_pdf(
    html: str,
    *,
    header_template: str = "<div></div>",
    footer_template: str = "<div></div>",
    timeout_ms: int = 30000,
) -> bytes:
    """Print an HTML document to A4 PDF bytes"""
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True, args=BROWSER_ARGS)
        try:
            page = browser.new_page()
            page.set_default_timeout(timeout_ms)
            page.set_content(html, wait_until="networkidle", timeout=timeout_ms)
            return page.pdf(
                format="A4",
                margin=PAGE_MARGIN,
                print_background=True,
                display_header_footer=True,
                header_template=header_template,
                footer_template=footer_template,
            )
        finally:
            browser.close()
            logger.debug("Chromium closed")
