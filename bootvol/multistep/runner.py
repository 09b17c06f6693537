"""Sequential pipeline runner with guaranteed reverse-order cleanup."""

import asyncio
import logging

from bootvol.multistep.state import StateBag
from bootvol.multistep.step import Step, StepAction

logger = logging.getLogger(__name__)


async def run_steps(steps: list[Step], state: StateBag) -> bool:
    """Run *steps* in order, then clean up every started step in reverse.

    Stops at the first step that returns HALT, or before the next step once
    ``state.cancel`` is set. Cleanup also runs if a step raises or the task
    running the pipeline is cancelled; the exception is re-raised afterwards.

    Returns:
        True if every step continued and the run was not cancelled.
    """
    started = []
    completed = True
    try:
        for step in steps:
            if state.cancelled:
                logger.info("Pipeline cancelled, skipping remaining steps.")
                completed = False
                break
            started.append(step)
            action = await step.run(state)
            if action is StepAction.HALT:
                completed = False
                break
    finally:
        cancelled = None
        for step in reversed(started):
            try:
                await step.cleanup(state)
            except asyncio.CancelledError as e:
                # Finish the remaining cleanups before honouring the cancel
                logger.warning(f"Cleanup of {type(step).__name__} was cancelled")
                cancelled = e
            except Exception as e:
                logger.error(f"Cleanup of {type(step).__name__} failed: {e}")
        if cancelled is not None:
            raise cancelled

    return completed and not state.cancelled
