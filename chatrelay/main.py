"""Command-line entry point for the chat relay.

RUN_MODE picks the process layout:

integrated (default)
    One uvicorn server on HOST:PORT serves the relay API and the chat page.
separate
    The relay API runs on HOST:PORT and the chat page on HOST:UI_PORT, each in
    its own child process. The page reaches the API through API_BASE_URL,
    which defaults to the API server's local address.
"""

import logging
import os
import subprocess
import sys
import time
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables before the app modules read them
load_dotenv()

logger = logging.getLogger(__name__)

RunMode = Literal["integrated", "separate"]


class ServerSettings(BaseModel):
    """Process-level settings read from the environment.

    Attributes:
        run_mode: Integrated single server or separate API and UI servers.
        host: Interface both servers bind to.
        port: Port of the relay API (and of the page in integrated mode).
        ui_port: Port of the page in separate mode.
        log_level: Level name for the root logger and uvicorn.
        api_base_url: Relay address handed to the page in separate mode.
    """

    run_mode: RunMode = Field(
        default_factory=lambda: os.getenv("RUN_MODE", "integrated").lower()
    )
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8000")), gt=0)
    ui_port: int = Field(default_factory=lambda: int(os.getenv("UI_PORT", "8080")), gt=0)
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    api_base_url: str = Field(default_factory=lambda: os.getenv("API_BASE_URL", ""))

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def relay_url(self) -> str:
        return self.api_base_url or f"http://localhost:{self.port}"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def api_command(settings: ServerSettings) -> list[str]:
    """Command line for the standalone relay API process."""
    return [
        sys.executable,
        "-m",
        "uvicorn",
        "chatrelay.api.app:app",
        "--host",
        settings.host,
        "--port",
        str(settings.port),
        "--log-level",
        settings.log_level.lower(),
    ]


def ui_command() -> list[str]:
    return [sys.executable, "-m", "chatrelay.ui.chat_page"]


def ui_environment(settings: ServerSettings) -> dict[str, str]:
    """Environment for the standalone page process."""
    return {
        **os.environ,
        "HOST": settings.host,
        "UI_PORT": str(settings.ui_port),
        "API_BASE_URL": settings.relay_url(),
    }


def run_integrated(settings: ServerSettings) -> None:
    """Serve the relay API and the chat page from one uvicorn server."""
    import uvicorn
    from nicegui import ui

    from chatrelay.api.app import create_app
    from chatrelay.ui.chat_page import STORAGE_SECRET, chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(app, title="AI Assistant", favicon="🤖", storage_secret=STORAGE_SECRET)

    logger.info(f"Chat relay and UI on http://{settings.host}:{settings.port}/")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def run_separate(settings: ServerSettings) -> None:
    """Run the relay API and the chat page as two child processes.

    Returns when either process exits or on Ctrl+C; both are stopped.
    """
    logger.info(f"Relay API on http://{settings.host}:{settings.port}")
    logger.info(f"Chat UI on http://{settings.host}:{settings.ui_port} -> {settings.relay_url()}")

    processes = [
        subprocess.Popen(api_command(settings)),
        subprocess.Popen(ui_command(), env=ui_environment(settings)),
    ]
    try:
        while all(proc.poll() is None for proc in processes):
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in processes:
            proc.terminate()
        for proc in processes:
            proc.wait()


def main() -> None:
    """Console script entry point."""
    settings = ServerSettings()
    configure_logging(settings.log_level)
    logger.info(f"Starting Chat Relay in {settings.run_mode} mode")

    if settings.run_mode == "separate":
        run_separate(settings)
    else:
        run_integrated(settings)


if __name__ == "__main__":
    main()
