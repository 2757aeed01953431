"""
ASGI entry point: `uvicorn portfolio.main:app` or `python -m portfolio.main`.
"""

from __future__ import annotations

from portfolio.app import create_app
from portfolio.config import get_settings

app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "portfolio.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
