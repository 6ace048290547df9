import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the server process"""
    root = logging.getLogger()
    if any(getattr(h, "_daylog", False) for h in root.handlers):
        root.setLevel(level.upper())
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._daylog = True
    root.addHandler(handler)
    root.setLevel(level.upper())

    # aiosqlite logs every statement at debug level
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
