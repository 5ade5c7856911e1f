import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Log files land here unless a directory or explicit file is given.
DEFAULT_LOG_DIR = Path("var/log")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_file_path(
    logger_name: str,
    log_dir: Optional[Path] = None,
    include_timestamp: bool = True,
) -> Path:
    """
    Builds the file path a logger should write to.

    Dots in the logger name become underscores so that
    `mfe_fold.folding.recurrences` maps to `mfe_fold_folding_recurrences.log`.
    The directory is created if it is missing.

    Parameters
    ----------
    logger_name : str
        Dotted logger name.
    log_dir : Optional[Path], optional
        Target directory, defaults to `DEFAULT_LOG_DIR`.
    include_timestamp : bool, optional
        Append a `YYYYmmdd_HHMMSS` suffix so repeated runs do not collide.

    Returns
    -------
    Path
        Full path of the log file.
    """
    directory = DEFAULT_LOG_DIR if log_dir is None else Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    stem = logger_name.replace(".", "_")
    if include_timestamp:
        stem = f"{stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

    return directory / f"{stem}.log"


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
    console_level: Optional[int] = None,
    file_level: Optional[int] = None,
) -> logging.Logger:
    """
    Configures a named logger with a stdout handler and an optional file handler.

    Existing handlers on the logger are removed first, so calling this twice
    for the same name does not duplicate output.

    Parameters
    ----------
    name : str
        Logger name, usually a module `__name__`.
    level : int, optional
        Base level of the logger and default level of its handlers.
    log_file : Optional[str], optional
        Explicit log file path. Takes precedence over `log_dir`.
    log_dir : Optional[Path], optional
        Directory for an auto-named, timestamped log file.
    enable_file_logging : bool, optional
        Create an auto-named log file when `log_file` is not given.
    console_level, file_level : Optional[int], optional
        Per-handler overrides of `level`.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level if console_level is None else console_level)
    logger.addHandler(console_handler)

    log_path: Optional[Path] = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
    elif enable_file_logging:
        log_path = get_log_file_path(name, log_dir=log_dir)

    if log_path is not None:
        file_handler = logging.FileHandler(log_path, mode="a")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level if file_level is None else file_level)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_path}")

    return logger
