"""
Logging setup for scripts that build maps.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

PACKAGE_LOGGER = "leaflet_widget"

# third-party loggers that flood DEBUG output while palettes are resolved
NOISY_LOGGERS = ("matplotlib", "PIL")


def setup_logging(
    log_dir: str = "logs",
    log_level: str = "INFO",
    log_to_file: bool = True,
    run_name: Optional[str] = None,
    quiet: Sequence[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """
    Configure the package logger for a map build.

    Handlers are attached to the `leaflet_widget` logger, so messages from
    the builders, the provider registry and the legend code share one
    console stream and, optionally, one log file per build.

    Args:
        log_dir: Directory for build log files
        log_level: Level of the package logger (DEBUG, INFO, ...)
        log_to_file: Also write a build_<run_name>_<timestamp>.log file
        run_name: Tag for the log file name, e.g. the config file stem
        quiet: Logger names raised to WARNING

    Returns:
        The configured package logger
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{log_level}'")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter('%(levelname)s [%(name)s]: %(message)s'))
    logger.addHandler(console)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_to_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        prefix = f"build_{run_name}_" if run_name else "build_"
        log_file = log_dir / f"{prefix}{stamp}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {log_file}")

    return logger
