"""
Logging configuration for the application.

One stdout handler with a pipe-separated format. A redaction filter on
the handler masks PEM private key blocks and long bare base64 runs (the
form some issuers hand keys out in), so a key pasted into an error message
or an upstream body never reaches the log stream.
"""

import logging
import re
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PEM_BLOCK = re.compile(
    r"-----BEGIN [A-Z ]*PRIVATE KEY-----.*?-----END [A-Z ]*PRIVATE KEY-----",
    re.DOTALL,
)
# a 1024-bit PKCS#1 body is roughly 800 base64 characters
BARE_KEY_RUN = re.compile(r"[A-Za-z0-9+/]{200,}={0,2}")
REDACTED = "[REDACTED KEY]"


class PrivateKeyRedactingFilter(logging.Filter):
    """Replaces private key material in formatted messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = BARE_KEY_RUN.sub(REDACTED, PEM_BLOCK.sub(REDACTED, message))
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.addFilter(PrivateKeyRedactingFilter())

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

    # httpx logs every request URL at INFO, query strings included
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
