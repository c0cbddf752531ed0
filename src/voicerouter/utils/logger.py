import logging
from typing import Optional

_FORMAT = "[%(levelname)s] %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = "voicerouter") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    fmt = logging.Formatter(_FORMAT)
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    return logger


def configure_logging(
    *,
    logger_name: str = "voicerouter",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_path: Optional[str] = None,
) -> logging.Logger:
    """
    Process-level baseline: one console handler, plus a file handler when
    log_path is set. Safe to call more than once.
    """
    logger = logging.getLogger(logger_name)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    logger.setLevel(min(console_level, file_level) if log_path else console_level)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(console)

    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def level_from_name(name: str, default: int = logging.INFO) -> int:
    value = logging.getLevelName((name or "").strip().upper())
    return value if isinstance(value, int) else default
