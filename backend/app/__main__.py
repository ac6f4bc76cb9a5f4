"""
Menu Catalog Backend - Process Entry Point
===========================================

What:  Starts uvicorn on HOST:PORT (PORT defaults to 3000).
Who:   `python -m app` or the `menu-catalog` console script.
"""

import uvicorn

from app.config import settings


def main() -> None:
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
