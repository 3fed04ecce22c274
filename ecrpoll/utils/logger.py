"""Logging utilities for ecrpoll."""

import logging
import sys
from typing import Optional

from tqdm import tqdm


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class TqdmLoggingHandler(logging.StreamHandler):
    """Writes records through tqdm so they land above the repository progress bar."""

    def __init__(self, stream=None):
        super().__init__(stream or sys.stdout)

    def emit(self, record: logging.LogRecord):
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Send poller logs to stdout and, optionally, a log file."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = TqdmLoggingHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    # describe_images paging is chatty at DEBUG
    for noisy in ('boto3', 'botocore', 'urllib3'):
        logging.getLogger(noisy).setLevel(logging.WARNING)
