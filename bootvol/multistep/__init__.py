"""Minimal multi-step pipeline: state bag, step contract, runner."""

from bootvol.multistep.runner import run_steps
from bootvol.multistep.state import (
    KEY_CONFIG,
    KEY_ERROR,
    KEY_SOURCE_IMAGE,
    KEY_UI,
    KEY_VOLUME_ID,
    StateBag,
)
from bootvol.multistep.step import Step, StepAction

__all__ = [
    "StateBag",
    "Step",
    "StepAction",
    "run_steps",
    "KEY_CONFIG",
    "KEY_ERROR",
    "KEY_SOURCE_IMAGE",
    "KEY_UI",
    "KEY_VOLUME_ID",
]
