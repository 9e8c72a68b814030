"""
Process-wide logging setup for the server entrypoint.
Modules log through logging.getLogger(__name__); only the entrypoint calls
configure_logging().
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger.

    Unknown level names fall back to INFO. uvicorn's loggers propagate to the
    root so access and error lines share the same format.
    """
    log_level = getattr(logging, str(level).upper(), None)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    # httpx logs every request URL at INFO.
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
