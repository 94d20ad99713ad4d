"""Entry point for running the game via ``python -m tictactoe``."""

from __future__ import annotations

import uvicorn

from .config import load_settings
from .logging_config import setup_logging


def main() -> None:
    """Start the FastAPI-powered tic-tac-toe web server."""

    settings = load_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "tictactoe.ui:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
