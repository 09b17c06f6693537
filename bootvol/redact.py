"""Secret redaction for log output."""

import logging
import os
import re

# Env vars whose values should never reach a log handler
_SECRET_ENV_VARS = [
    "OS_AUTH_TOKEN",
    "OS_PASSWORD",
    "OS_APPLICATION_CREDENTIAL_SECRET",
]

_MIN_SECRET_LENGTH = 8  # skip short values to avoid false positives


def _collect_secret_values(extra=()) -> set[str]:
    values = set()
    for var in _SECRET_ENV_VARS:
        val = os.environ.get(var, "")
        if len(val) >= _MIN_SECRET_LENGTH:
            values.add(val)
    for val in extra:
        if val and len(val) >= _MIN_SECRET_LENGTH:
            values.add(val)
    return values


def _build_patterns(values: set[str]) -> list[re.Pattern]:
    # Longer values first so a token containing another one is fully masked
    return [re.compile(re.escape(v)) for v in sorted(values, key=len, reverse=True)]


def _apply(text: str, patterns: list[re.Pattern]) -> str:
    for p in patterns:
        text = p.sub("***", text)
    return text


def redact_secrets(text: str, extra=()) -> str:
    """Replace known secret values with '***'."""
    return _apply(text, _build_patterns(_collect_secret_values(extra)))


class SecretRedactingFilter(logging.Filter):
    """Logging filter that replaces secret values in log records with '***'.

    Secrets are the values of the OpenStack credential env vars at the time
    the filter is created, plus any explicit ``extra`` values (e.g. a token
    read from the config file).
    """

    def __init__(self, extra=()):
        super().__init__()
        self._patterns = _build_patterns(_collect_secret_values(extra))

    def filter(self, record: logging.LogRecord) -> bool:
        if self._patterns:
            record.msg = _apply(str(record.msg), self._patterns)
            if record.args:
                if isinstance(record.args, dict):
                    record.args = {k: _apply(v, self._patterns) if isinstance(v, str) else v for k, v in record.args.items()}
                elif isinstance(record.args, tuple):
                    record.args = tuple(_apply(a, self._patterns) if isinstance(a, str) else a for a in record.args)
        return True
