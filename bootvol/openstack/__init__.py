"""OpenStack service clients used by the volume step."""

from bootvol.openstack.blockstorage import BlockStorageClient
from bootvol.openstack.client import ServiceClient
from bootvol.openstack.image import ImageClient, volume_size_for_image
from bootvol.openstack.wait import (
    FAIL_STATUSES,
    READY_STATUS,
    VolumeState,
    wait_for_volume,
)

__all__ = [
    "BlockStorageClient",
    "ImageClient",
    "ServiceClient",
    "volume_size_for_image",
    "wait_for_volume",
    "VolumeState",
    "READY_STATUS",
    "FAIL_STATUSES",
]
