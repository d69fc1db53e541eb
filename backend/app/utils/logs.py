import logging
import sys

from app.config import settings


def get_logger(name: str, prefix: str) -> logging.Logger:
    """
    Return a named logger writing to stdout with a bracketed prefix, e.g.
    get_logger("invoices", "INVOICES") -> "[INVOICES] message".
    Handlers are attached once per name so repeated imports don't duplicate output.
    """
    log = logging.getLogger(name)
    log.setLevel(settings.LOG_LEVEL.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(f"[{prefix}] %(levelname)s %(message)s"))
        log.addHandler(h)
    return log
