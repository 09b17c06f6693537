"""Image service (Glance v2) client."""

from bootvol.openstack.client import ServiceClient

GIB = 1024**3


def volume_size_for_image(image):
    """Smallest volume size in GiB that can hold *image*.

    Uses the image's ``min_disk`` when it is set, otherwise the image size in
    bytes rounded up to a whole GiB (never less than 1).
    """
    min_disk = image.get("min_disk") or 0
    if min_disk > 0:
        return int(min_disk)

    size_bytes = image.get("size")
    if size_bytes is None:
        raise ValueError(f"image {image.get('id', '?')} has no size (status: {image.get('status', 'unknown')})")
    return max(1, -(-int(size_bytes) // GIB))


class ImageClient(ServiceClient):
    """Glance v2 images API. *endpoint* is the service root URL."""

    service = "image"

    async def get_image(self, image_id):
        """GET /v2/images/{id}"""
        return await self._request("GET", f"/v2/images/{image_id}") or {}

    async def get_volume_size(self, image_id):
        """Minimum volume size in GiB needed to hold the given image."""
        return volume_size_for_image(await self.get_image(image_id))
