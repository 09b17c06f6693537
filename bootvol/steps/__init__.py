"""Pipeline steps."""

from bootvol.steps.create_volume import StepCreateVolume, VolumeStepInputs

__all__ = ["StepCreateVolume", "VolumeStepInputs"]
