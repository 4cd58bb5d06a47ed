import logging
import sys
from pathlib import Path

APP_LOGGER = "channel_analyzer"

# HTTP client and dev-server loggers that drown out ours below DEBUG
NOISY_LOGGERS = ("urllib3", "werkzeug")

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(log_file: str = None, level: str = "INFO") -> logging.Logger:
    """Configure the channel_analyzer logger for the CLI and the web server.

    Logs go to stderr so they never mix with CLI report output on stdout.
    At DEBUG the console shows timestamps and logger names, and third-party
    HTTP loggers are let through; otherwise they are held at WARNING.
    Calling again only adjusts levels.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    debug = numeric_level <= logging.DEBUG

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    if app_logger.handlers:
        return app_logger

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(
        logging.Formatter(DEBUG_CONSOLE_FORMAT if debug else CONSOLE_FORMAT, "%H:%M:%S")
    )
    app_logger.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        app_logger.addHandler(file_handler)

    return app_logger
