import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path


def setup_logger(level="INFO", log_dir=None):
    """
    Configure the root logger for the shop.

    Console output always; a daily rotating file under ``log_dir`` when one
    is given. Calling it again is a no-op.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if getattr(logger, "_azu_configured", False):
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=path / "azu_spirits.log",
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger._azu_configured = True
    return logger
