# planview_checker/logger.py
import logging
import os
from datetime import datetime

LOGS_DIR = "logs"
REPORTS_DIR = "reports"

LOGGER_NAME = "planview_checker"

# These will be set by init_logger
log_file = None
report_file = None

_logger = logging.getLogger(LOGGER_NAME)


def init_logger(verbose=False, log_dir=LOGS_DIR, report_dir=REPORTS_DIR):
    global log_file, report_file

    os.makedirs(log_dir, exist_ok=True)
    os.makedirs(report_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"log_{timestamp}.txt")
    report_file = os.path.join(report_dir, f"report_{timestamp}.txt") if verbose else None

    # Replace handlers from an earlier run in the same process
    for handler in list(_logger.handlers):
        _logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    for handler in (
        logging.FileHandler(log_file, mode='w', encoding='utf-8'),
        logging.StreamHandler(),  # still show on console
    ):
        handler.setFormatter(formatter)
        _logger.addHandler(handler)
    _logger.setLevel(logging.INFO)
    _logger.propagate = False

    # Create empty report file if verbose is on
    if verbose:
        with open(report_file, 'w', encoding='utf-8') as f:
            f.write(f"Verbose Report - {timestamp}\n{'='*50}\n\n")


def shutdown_logger():
    """Close the file handlers opened by init_logger."""
    global log_file, report_file
    for handler in list(_logger.handlers):
        _logger.removeHandler(handler)
        handler.close()
    _logger.propagate = True
    log_file = None
    report_file = None


def log(message: str, level: str = "INFO"):
    _logger.log(getattr(logging, level.upper(), logging.INFO), message)


def log_info(message: str):
    _logger.info(message)


def log_warning(message: str):
    _logger.warning(message)


def log_error(message: str):
    _logger.error(message)


def log_verbose(message: str):
    if report_file:
        with open(report_file, 'a', encoding='utf-8') as f:
            f.write(message + "\n")
