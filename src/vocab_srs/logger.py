import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

from vocab_srs.config import DEFAULT_LOG_PATH


def setup_logging(log_path: str = DEFAULT_LOG_PATH, level: int = logging.INFO):
    log_formatter = logging.Formatter('%(asctime)s:%(levelname)s:%(name)s: %(message)s')

    # File Handler
    Path(log_path).parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(log_path, maxBytes=5*1024*1024, backupCount=2)
    file_handler.setFormatter(log_formatter)
    file_handler.setLevel(level)

    # Console output stays quiet unless something goes wrong
    console_handler = RichHandler(show_path=False)
    console_handler.setLevel(logging.WARNING)

    # Root Logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
