import logging
import os
import sys
from datetime import datetime
from typing import List

LOG_DIR = "logs"


class MaxLevelFilter(logging.Filter):
    """Lets through records up to and including a maximum level."""

    def __init__(self, max_level):
        super().__init__()
        self.max_level = max_level

    def filter(self, record):
        return record.levelno <= self.max_level


def get_log_file_name(abbreviation: str, now=None) -> str:
    """Builds a session log file name, e.g. 'TR1_Version_Swapper.2024-01-31T18-05-09.log'."""
    now = now or datetime.now()
    return f"{abbreviation}_Version_Swapper.{now:%Y-%m-%dT%H-%M-%S}.log"


def setup_logging(abbreviation: str, verbose: bool = False, log_dir: str = LOG_DIR) -> str:
    """
    Configures the root logger for the application.

    Sets up two handlers:
    1. A file handler saving everything to a new session log in `log_dir`.
    2. A stream handler printing INFO to ERROR records to the console, only in verbose mode.

    Returns:
        The path of the session log file.
    """
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, get_log_file_name(abbreviation))

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)  # Always log everything to file
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(name)s:%(funcName)s | %(levelname)s | %(message)s")
    )
    root_logger.addHandler(file_handler)

    if verbose:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.addFilter(MaxLevelFilter(logging.ERROR))
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(console_handler)

    logger = logging.getLogger(__name__)
    logger.info("Verbose mode activated." if verbose else "Logging configured (file only).")
    return log_path


def list_log_files(log_dir: str = LOG_DIR) -> List[str]:
    """Returns the log files in `log_dir`, oldest first (names embed a sortable timestamp)."""
    if not os.path.isdir(log_dir):
        return []
    files = [
        os.path.join(log_dir, name)
        for name in os.listdir(log_dir)
        if os.path.isfile(os.path.join(log_dir, name))
    ]
    return sorted(files)


def delete_excess_log_files(limit: int, console, log_dir: str = LOG_DIR) -> int:
    """
    Deletes the oldest log file(s) according to the user's set limit.

    Args:
        limit: Maximum number of log files to keep, 0 for no limit
        console: ConsoleIO used to notify the user
        log_dir: Directory holding the log files

    Returns:
        Number of deleted files
    """
    logger = logging.getLogger(__name__)
    if limit == 0:
        return 0

    files = list_log_files(log_dir)

    if len(files) > limit:
        logger.debug(f"Excessive log file count: {len(files)} vs {limit}")
        console.print_with_color(f"Log file limit of {limit} exceeded (total: {len(files)})", "yellow")
        console.print_line("Files will be deleted accordingly.")
        console.print_line()
    elif len(files) + 3 > limit:
        logger.debug(f"Log file count approaching excessive: {len(files)} vs {limit}")
        console.print_with_color(
            f"You are approaching your set log file limit ({len(files)} of {limit})", "yellow"
        )
        console.print_line("Be sure to edit settings.yaml to adjust the limit to your tastes.")
        console.print_line()

    deleted = 0
    while len(files) > limit:
        try:
            os.remove(files[0])
            logger.info(f"Deleted excess log file {files[0]}.")
        except OSError as e:
            logger.error(f"Could not delete at least one excess log file: {e}", exc_info=True)
            console.print_with_color(
                f"You have more than your setting of {limit} log files in the logs folder.", "yellow"
            )
            console.print_line("Normally I'd take care of this for you but I had an unexpected error.")
            console.print_line("I've put some additional information in this session's log file.")
            console.print_line()
            break

        files.pop(0)
        deleted += 1

    return deleted
