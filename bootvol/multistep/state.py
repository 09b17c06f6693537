"""Shared pipeline state passed between steps."""

import asyncio

from bootvol.exceptions import StateContractError

# Well-known keys
KEY_CONFIG = "config"
KEY_UI = "ui"
KEY_SOURCE_IMAGE = "source_image"
KEY_VOLUME_ID = "volume_id"
KEY_ERROR = "error"


class StateBag:
    """String-keyed values shared by all steps of one pipeline run.

    Also carries the run's cancellation event: the driver sets it on user
    interrupt or deadline, and long waits inside steps watch it.
    """

    def __init__(self, values=None):
        self._values = dict(values or {})
        self.cancel = asyncio.Event()

    def get(self, key, default=None):
        return self._values.get(key, default)

    def put(self, key, value):
        self._values[key] = value

    def __contains__(self, key):
        return key in self._values

    def require(self, key, expected_type):
        """Return the value under *key*, checking presence and type.

        Raises:
            StateContractError: the key is missing or holds the wrong type.
        """
        if key not in self._values:
            raise StateContractError(f"state key '{key}' is missing")
        value = self._values[key]
        if not isinstance(value, expected_type):
            raise StateContractError(
                f"state key '{key}' must hold {expected_type.__name__}, got {type(value).__name__}"
            )
        return value

    @property
    def error(self):
        """Error recorded by the step that halted the run, if any."""
        return self._values.get(KEY_ERROR)

    @property
    def cancelled(self):
        return self.cancel.is_set()
