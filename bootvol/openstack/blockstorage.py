"""Block Storage (Cinder v3) client: create, inspect and delete volumes."""

import logging

import httpx

from bootvol.openstack.client import ServiceClient

logger = logging.getLogger(__name__)

# Microversion that accepts ?force=true on DELETE /volumes/{id}
FORCE_DELETE_MICROVERSION = "volume 3.23"


class BlockStorageClient(ServiceClient):
    """Cinder v3 volumes API.

    *endpoint* is the project-scoped catalog URL, e.g.
    ``https://cinder.example.com:8776/v3/<project_id>``.
    """

    service = "block-storage"

    async def create_volume(self, size, volume_type="", availability_zone="", name="", image_id="", metadata=None):
        """Submit a volume create request.

        POST /volumes

        Returns:
            The ID assigned to the new volume. The volume is usually still
            ``creating`` at this point.
        """
        volume = {"size": size}
        if volume_type:
            volume["volume_type"] = volume_type
        if availability_zone:
            volume["availability_zone"] = availability_zone
        if name:
            volume["name"] = name
        if image_id:
            volume["imageRef"] = image_id
        if metadata:
            volume["metadata"] = dict(metadata)

        result = await self._request("POST", "/volumes", body={"volume": volume})
        volume_id = ((result or {}).get("volume") or {}).get("id")
        if not volume_id:
            raise ValueError("no volume ID returned from create API")
        return volume_id

    async def get_volume(self, volume_id):
        """GET /volumes/{id} and return the volume dict."""
        result = await self._request("GET", f"/volumes/{volume_id}")
        return (result or {}).get("volume") or {}

    async def get_volume_status(self, volume_id):
        """Current status string of a volume (``creating``, ``available``, ...).

        Raises:
            ValueError: the response carries no status.
        """
        volume = await self.get_volume(volume_id)
        status = volume.get("status")
        if not status:
            raise ValueError(f"no status returned for volume {volume_id}")
        return status

    async def delete_volume(self, volume_id, force=True):
        """Delete a volume in whatever status it is in.

        DELETE /volumes/{id}?force=true

        Returns:
            True if the volume was deleted, False if it was already gone.
        """
        params = None
        headers = None
        if force:
            params = {"force": "true"}
            headers = {"OpenStack-API-Version": FORCE_DELETE_MICROVERSION}
        try:
            await self._request("DELETE", f"/volumes/{volume_id}", params=params, headers=headers)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.info(f"Volume {volume_id} not found, nothing to delete.")
                return False
            raise
        return True
