"""Pipeline step: create a block storage volume from the source image.

The volume ID is remembered as soon as the create request is accepted, so
``cleanup`` can delete the volume even if it never became available.
"""

import logging
from dataclasses import dataclass, field

import httpx

from bootvol.config import Config
from bootvol.exceptions import (
    ClientInitError,
    StateContractError,
    VolumeCreateError,
    VolumeSizeError,
    VolumeStepError,
    VolumeWaitError,
    wrap_error,
)
from bootvol.multistep import KEY_CONFIG, KEY_ERROR, KEY_SOURCE_IMAGE, KEY_UI, KEY_VOLUME_ID, StateBag, StepAction
from bootvol.openstack import wait_for_volume
from bootvol.ui import Ui

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VolumeStepInputs:
    """State bag values the step needs, checked once at step entry."""

    config: Config
    ui: Ui
    source_image: str

    @classmethod
    def from_state(cls, state: StateBag) -> "VolumeStepInputs":
        source_image = state.require(KEY_SOURCE_IMAGE, str)
        if not source_image:
            raise StateContractError(f"state key '{KEY_SOURCE_IMAGE}' is empty")
        return cls(
            config=state.require(KEY_CONFIG, Config),
            ui=state.require(KEY_UI, Ui),
            source_image=source_image,
        )


@dataclass
class StepCreateVolume:
    """Create a volume sized for the source image and wait until it is available.

    Does nothing unless ``use_blockstorage_volume`` is set. On success the
    volume ID is published under ``volume_id`` in the state bag.
    """

    use_blockstorage_volume: bool = False
    volume_name: str = ""
    volume_type: str = ""
    volume_availability_zone: str = ""
    volume_id: str = field(default="", init=False)

    @classmethod
    def from_config(cls, config: Config) -> "StepCreateVolume":
        return cls(
            use_blockstorage_volume=config.use_blockstorage_volume,
            volume_name=config.volume_name,
            volume_type=config.volume_type,
            volume_availability_zone=config.volume_availability_zone,
        )

    async def run(self, state: StateBag) -> StepAction:
        # Proceed only if block storage volume is required
        if not self.use_blockstorage_volume:
            return StepAction.CONTINUE

        inputs = VolumeStepInputs.from_state(state)
        config, ui = inputs.config, inputs.ui

        try:
            block_storage = config.block_storage_client()
        except ClientInitError as e:
            return self._halt(state, ui, wrap_error(ClientInitError, "initializing block storage client", e))

        async with block_storage:
            try:
                volume_size = await self._resolve_volume_size(config, inputs.source_image)
            except VolumeStepError as e:
                return self._halt(state, ui, e)

            ui.say("Creating volume...")
            try:
                volume_id = await block_storage.create_volume(
                    size=volume_size,
                    volume_type=self.volume_type,
                    availability_zone=self.volume_availability_zone,
                    name=self.volume_name,
                    image_id=inputs.source_image,
                    metadata=config.image_metadata,
                )
            except (httpx.HTTPError, ValueError) as e:
                return self._halt(state, ui, wrap_error(VolumeCreateError, "creating volume", e))

            # Remember the ID before waiting so cleanup can find the volume
            self.volume_id = volume_id

            ui.say(f"Waiting for volume {self.volume_name} (volume id: {volume_id}) to become available...")
            try:
                await wait_for_volume(
                    block_storage,
                    volume_id,
                    timeout=config.volume_wait_timeout,
                    interval=config.volume_poll_interval,
                    cancel=state.cancel,
                )
            except VolumeWaitError as e:
                return self._halt(state, ui, wrap_error(type(e), "waiting for volume", e, volume_id))
            except (httpx.HTTPError, ValueError) as e:
                return self._halt(state, ui, wrap_error(VolumeWaitError, "waiting for volume", e, volume_id))

        ui.message(f"Volume ID: {volume_id}")
        state.put(KEY_VOLUME_ID, volume_id)
        return StepAction.CONTINUE

    async def _resolve_volume_size(self, config: Config, source_image: str) -> int:
        if config.volume_size:
            return config.volume_size

        # Get needed volume size from the source image
        try:
            image_client = config.image_client()
        except ClientInitError as e:
            raise wrap_error(ClientInitError, "initializing image client", e) from e

        async with image_client:
            try:
                return await image_client.get_volume_size(source_image)
            except (httpx.HTTPError, ValueError) as e:
                raise wrap_error(VolumeSizeError, "resolving volume size", e) from e

    def _halt(self, state: StateBag, ui: Ui, err: VolumeStepError) -> StepAction:
        state.put(KEY_ERROR, err)
        ui.error(err.message)
        return StepAction.HALT

    async def cleanup(self, state: StateBag) -> None:
        if not self.volume_id:
            return

        config = state.require(KEY_CONFIG, Config)
        ui = state.require(KEY_UI, Ui)

        try:
            block_storage = config.block_storage_client()
        except ClientInitError as e:
            logger.debug(f"Cannot build block storage client for cleanup: {e}")
            ui.error(f"Error cleaning up volume. Please delete the volume manually: {self.volume_id}")
            return

        ui.say(f"Deleting volume: {self.volume_id} ...")

        # Delete the volume in any status if it still exists
        async with block_storage:
            try:
                await block_storage.delete_volume(self.volume_id, force=True)
            except (httpx.HTTPError, ValueError) as e:
                ui.error(f'Error cleaning up volume "{self.volume_id}": {e}. This may need manual deletion.')
