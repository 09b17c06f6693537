"""Exception taxonomy for the volume step.

Every halting error raised while provisioning a volume is a
``VolumeStepError`` carrying the ``phase`` it happened in. The underlying
cause is kept as ``__cause__`` so the original API error stays visible.

Halting kinds
-------------
- ``ClientInitError``    — a block storage or image client could not be built.
- ``VolumeSizeError``    — the size lookup against the image service failed.
- ``VolumeCreateError``  — the create request was rejected.
- ``VolumeWaitError``    — the volume never became usable:
  ``VolumeErrorState``, ``VolumeWaitTimeout`` or ``VolumeWaitCancelled``.

Cleanup problems are never raised; the step reports them as warnings.
"""

from __future__ import annotations


class VolumeStepError(Exception):
    """Base class for errors that halt the volume step.

    Attributes:
        message: Human-readable error description.
        phase: Step phase the error belongs to (e.g. ``"creating volume"``).
        volume_id: Volume the error refers to, if one was already created.
    """

    default_phase: str = ""

    def __init__(self, message: str = "", *, phase: str = "", volume_id: str = "") -> None:
        self.message = message
        self.phase = phase or self.default_phase
        self.volume_id = volume_id
        super().__init__(message)

    def to_error_dict(self) -> dict[str, str]:
        """Structured form of the error for logs and pipeline results."""
        return {
            "kind": type(self).__name__,
            "phase": self.phase,
            "message": self.message,
            "volume_id": self.volume_id,
            "cause": repr(self.__cause__) if self.__cause__ is not None else "",
        }


class ClientInitError(VolumeStepError):
    """A service client could not be constructed from the config."""

    default_phase = "initializing client"


class VolumeSizeError(VolumeStepError):
    """The volume size could not be derived from the source image."""

    default_phase = "resolving volume size"


class VolumeCreateError(VolumeStepError):
    """The block storage service rejected the create request."""

    default_phase = "creating volume"


class VolumeWaitError(VolumeStepError):
    """The volume did not reach the ready status."""

    default_phase = "waiting for volume"


class VolumeErrorState(VolumeWaitError):
    """The volume entered a failure status."""

    def __init__(self, message: str = "", *, status: str = "", **kwargs) -> None:
        self.status = status
        super().__init__(message, **kwargs)


class VolumeWaitTimeout(VolumeWaitError):
    """The volume was still not ready when the deadline passed."""

    def __init__(self, message: str = "", *, last_status: str | None = None, **kwargs) -> None:
        self.last_status = last_status
        super().__init__(message, **kwargs)


class VolumeWaitCancelled(VolumeWaitError):
    """The pipeline asked to stop while the volume was being polled."""


class StateContractError(KeyError):
    """A required state bag value is missing or has the wrong type.

    This is a programming error in how the pipeline was assembled, not a
    runtime condition the step can recover from.
    """

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


def wrap_error(cls: type[VolumeStepError], phase: str, err: BaseException, volume_id: str = "") -> VolumeStepError:
    """Build a halting error of *cls* for *phase* around *err*.

    The message reads ``"Error <phase>: <err>"``. If *err* is already a
    ``VolumeStepError`` its own message is used, so wrapping twice does not
    repeat the prefix. When *err* is itself a *cls*, its extra fields
    (``status``, ``last_status``) are carried over.
    """
    detail = err.message if isinstance(err, VolumeStepError) else str(err)
    wrapped = cls(f"Error {phase}: {detail}", phase=phase, volume_id=volume_id)
    if type(err) is cls:
        for name, value in vars(err).items():
            if name not in ("message", "phase", "volume_id"):
                setattr(wrapped, name, value)
    wrapped.__cause__ = err
    return wrapped
