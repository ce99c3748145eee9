"""
Run the API server.

Usage:
    python -m redis_todo

uvicorn handles SIGINT/SIGTERM by running the application shutdown, which
closes the store connection. If Redis is unreachable at startup the server
refuses to start and the process exits non-zero.
"""
from __future__ import annotations

import uvicorn

from .main import create_app
from .settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.app_host,
        port=settings.app_port,
        lifespan="on",
        log_config=None,
    )


if __name__ == "__main__":
    main()
