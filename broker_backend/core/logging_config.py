import logging
import sys

from rich.logging import RichHandler

from broker_backend.core.config import get_settings

def setup_logging():
    """
    Configures logging for the entire application.

    Uses rich, colored output by default; set LOG_RICH=false for plain
    line-oriented logs (log collectors, the maintenance scripts).
    """
    settings = get_settings()
    log_level = settings.LOG_LEVEL.upper()

    if settings.LOG_RICH:
        logging.basicConfig(
            level=log_level,
            force=True,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        )
    else:
        logging.basicConfig(
            level=log_level,
            force=True,
            stream=sys.stdout,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # Make uvicorn use the root logger config
    logging.getLogger("uvicorn.access").handlers = logging.getLogger().handlers
    logging.getLogger("uvicorn.error").handlers = logging.getLogger().handlers
