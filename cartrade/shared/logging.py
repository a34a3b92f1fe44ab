"""
Logging configuration for the application.

Sets up one log format for the API, the trading manager and the
ledger adapter. Logging must not change program behavior.
Never logs private keys, signed payloads or request bodies.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = (
    "uvicorn.access",
    "uvicorn.error",
    "web3.providers.AsyncHTTPProvider",
    "web3.manager.RequestManager",
    "aiohttp.access",
)


def configure_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # RPC request logs echo raw transactions; keep them out of DEBUG output.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
