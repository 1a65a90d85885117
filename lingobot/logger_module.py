import logging
from datetime import datetime
from pathlib import Path


def setup_logger(name: str = "lingobot", level: str = "INFO", logs_dir: str | Path = "logs") -> logging.Logger:
    """
    Setup and configure logger for the bot core

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logs_dir: Directory receiving the daily log files

    Returns:
        Configured logger instance
    """
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Prevent adding handlers multiple times
    if logger.handlers:
        return logger

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
    simple_formatter = logging.Formatter("%(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(simple_formatter)

    day = datetime.now().strftime("%Y%m%d")

    file_handler = logging.FileHandler(logs_dir / f"app_{day}.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)

    error_handler = logging.FileHandler(logs_dir / f"errors_{day}.log", encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)
    logger.addHandler(error_handler)

    return logger


def get_logger(name: str = "lingobot") -> logging.Logger:
    return logging.getLogger(name)
