"""Logging setup for programs that drive a bootvol pipeline."""

import logging
import sys

from bootvol.redact import SecretRedactingFilter


def setup_logging(level=logging.INFO, secrets=()):
    """Configure the root logger with a plain message format.

    Output reads like print(). Secret values (OpenStack credential env vars
    and anything passed in *secrets*) are masked on every handler.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(SecretRedactingFilter(extra=secrets))
    root.addHandler(handler)
