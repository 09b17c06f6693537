"""Readiness polling for asynchronously created volumes."""

import asyncio
import enum
import logging

import httpx

from bootvol.exceptions import VolumeErrorState, VolumeWaitCancelled, VolumeWaitTimeout

logger = logging.getLogger(__name__)

READY_STATUS = "available"
FAIL_STATUSES = frozenset({"error", "error_restoring", "error_extending"})

# Status lookups answering with these codes are retried; Cinder can briefly
# 404 a volume it just accepted, or 500 under load.
TRANSIENT_HTTP_CODES = frozenset({404, 500})
MAX_POLL_ERRORS = 10


class VolumeState(enum.Enum):
    CREATING = "creating"
    READY = "ready"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


def next_state(status, ready_status=READY_STATUS, fail_statuses=FAIL_STATUSES):
    """Map a remote status string to the waiter state it leads to."""
    if status == ready_status:
        return VolumeState.READY
    if status in fail_statuses:
        return VolumeState.FAILED
    return VolumeState.CREATING


async def pause(interval, cancel=None):
    """Block for at most *interval* seconds.

    Returns:
        True if *cancel* was set before the interval ran out.
    """
    if cancel is None:
        await asyncio.sleep(interval)
        return False
    try:
        await asyncio.wait_for(cancel.wait(), timeout=interval)
    except TimeoutError:
        return False
    return True


async def wait_for_volume(
    client,
    volume_id,
    timeout=300,
    interval=1,
    cancel=None,
    ready_status=READY_STATUS,
    fail_statuses=FAIL_STATUSES,
    max_errors=MAX_POLL_ERRORS,
):
    """Poll a volume until it is ready, failed, timed out or cancelled.

    Args:
        client: BlockStorageClient (anything with ``get_volume_status``).
        timeout: seconds before giving up.
        interval: seconds between polls. Transient lookup errors wait twice
            as long.
        cancel: optional ``asyncio.Event``; setting it stops the wait at the
            next pause.
        max_errors: consecutive transient lookup errors tolerated before the
            last one is raised.

    Returns:
        The ready status string.

    Raises:
        VolumeErrorState: the volume reached one of *fail_statuses*.
        VolumeWaitTimeout: *timeout* elapsed first.
        VolumeWaitCancelled: *cancel* was set.
        httpx.HTTPStatusError: a non-transient lookup failure.
        ValueError: a lookup answered without a usable status.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    state = VolumeState.CREATING
    status = None
    errors = 0

    while state is VolumeState.CREATING:
        if cancel is not None and cancel.is_set():
            state = VolumeState.CANCELLED
            break

        wait = interval
        try:
            status = await client.get_volume_status(volume_id)
        except httpx.HTTPStatusError as e:
            if e.response.status_code not in TRANSIENT_HTTP_CODES:
                raise
            errors += 1
            if errors >= max_errors:
                raise
            logger.warning(f"Volume {volume_id} lookup failed ({e.response.status_code}), retrying ({errors}/{max_errors})")
            wait = interval * 2
        else:
            errors = 0
            state = next_state(status, ready_status, fail_statuses)
            if state is not VolumeState.CREATING:
                break
            logger.info(f"Waiting for volume creation status: {status}")

        remaining = deadline - loop.time()
        if remaining <= 0:
            state = VolumeState.TIMED_OUT
            break
        if await pause(min(wait, remaining), cancel):
            state = VolumeState.CANCELLED

    if state is VolumeState.READY:
        return status
    if state is VolumeState.FAILED:
        raise VolumeErrorState(f"volume {volume_id} entered status '{status}'", status=status, volume_id=volume_id)
    if state is VolumeState.TIMED_OUT:
        raise VolumeWaitTimeout(
            f"timeout after {timeout}s waiting for volume {volume_id} to become {ready_status} (last: '{status}')",
            last_status=status,
            volume_id=volume_id,
        )
    raise VolumeWaitCancelled(f"cancelled while waiting for volume {volume_id} (last: '{status}')", volume_id=volume_id)
