import logging
import sys
from typing import ClassVar

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


class Log:
    """Class-level logging facade for the ingestion worker.

    All modules log through this class so the whole process shares one
    logger, one handler and one format.
    """

    _logger: ClassVar[logging.Logger] = logging.getLogger("docintake")

    # pdfminer (under pdfplumber) and Pillow emit per-object debug records.
    NOISY_LOGGERS: ClassVar[tuple[str, ...]] = ("pdfminer", "PIL", "psycopg.pool")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach the stdout handler once.

        Third-party loggers in NOISY_LOGGERS are held at WARNING unless the
        requested level is stricter.
        """
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        cls._logger.setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            cls._logger.addHandler(handler)
        for name in cls.NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Log at ERROR with the active exception's traceback."""
        cls._logger.exception(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
