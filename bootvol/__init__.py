"""Block storage volume step for OpenStack image-build pipelines."""

from bootvol.config import Config, load_config
from bootvol.logging_setup import setup_logging
from bootvol.multistep import StateBag, StepAction, run_steps
from bootvol.steps import StepCreateVolume
from bootvol.ui import LoggingUi, Ui

__all__ = [
    "Config",
    "LoggingUi",
    "StateBag",
    "StepAction",
    "StepCreateVolume",
    "Ui",
    "load_config",
    "run_steps",
    "setup_logging",
]
