"""
Container health probe: python -m app.healthcheck
Exits 0 when GET /api/health answers 200, else 1.
"""

import sys

import httpx

from .config import PORT

HEALTH_URL = f"http://localhost:{PORT}/api/health"


def main() -> int:
    try:
        response = httpx.get(HEALTH_URL, timeout=2.0)
    except httpx.HTTPError as e:
        print(f"Health check failed: {e}", file=sys.stderr)
        return 1

    if response.status_code != 200:
        print(f"Health check failed: HTTP {response.status_code}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
