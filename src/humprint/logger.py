"""Console logging setup for the command-line entry point."""

import logging
from typing import IO, Optional, Union

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# librosa's JIT backend logs every compilation step at DEBUG
_NOISY_LOGGERS = ("numba",)


def configure_logging(
    level: Union[str, int] = "WARNING",
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Attach a console handler to the ``humprint`` package logger.

    Library modules only create loggers; the handler is attached here, once.
    Calling again only changes the level.

    Args:
        level: One of LOG_LEVELS or a numeric logging level.
        stream: Destination for log lines; stderr when None.

    Returns:
        The configured package logger.

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    if isinstance(level, str):
        name = level.upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"unknown log level {level!r}, expected one of {LOG_LEVELS}")
        level = getattr(logging, name)

    logger = logging.getLogger("humprint")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))
    return logger
