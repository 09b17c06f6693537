"""Step contract for the pipeline runner."""

import enum
from typing import Protocol

from bootvol.multistep.state import StateBag


class StepAction(enum.Enum):
    CONTINUE = "continue"
    HALT = "halt"


class Step(Protocol):
    """One stage of a pipeline with a forward action and its cleanup.

    ``cleanup`` runs once for every step whose ``run`` was started, whether
    the run continued, halted or raised. It must not raise.
    """

    async def run(self, state: StateBag) -> StepAction: ...

    async def cleanup(self, state: StateBag) -> None: ...
