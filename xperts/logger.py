"""Logging helpers.

Every module gets its logger with ``logger = get_logger(__name__)``; handlers and formatters are configured by the
``LOGGING`` dictionary in the settings (see :py:mod:`xperts.defaults.settings`).
"""

import logging


class PrefixedLoggerAdapter(logging.LoggerAdapter):
    """Prepend an optional prefix (e.g. the submission being processed) to every message."""

    def process(self, msg, kwargs):
        prefix = self.extra.get("prefix") if self.extra else None
        if prefix:
            return f"[{prefix}] {msg}", kwargs
        return msg, kwargs


def get_logger(name: str, prefix: str = "") -> PrefixedLoggerAdapter:
    return PrefixedLoggerAdapter(logging.getLogger(name), {"prefix": prefix})
