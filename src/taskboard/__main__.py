"""Taskboard entrypoint.

Run with:
  python -m taskboard
"""

import uvicorn

from taskboard.config import load_settings
from taskboard.errors import ConfigError
from taskboard.logging_setup import setup_logging


def main() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        raise SystemExit(str(e))
    setup_logging(settings.log_level)
    uvicorn.run(
        "taskboard.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
