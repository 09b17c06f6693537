"""Shared plumbing for OpenStack REST service clients."""

import logging

import httpx

logger = logging.getLogger(__name__)


class ServiceClient:
    """Authenticated JSON client for one OpenStack service endpoint.

    Holds a single ``httpx.AsyncClient``; use as an async context manager or
    call ``aclose()`` when done.
    """

    service = "openstack"

    def __init__(self, endpoint, token, timeout=60, transport=None):
        self.endpoint = endpoint.rstrip("/")
        headers = {"X-Auth-Token": token, "Accept": "application/json"}
        self._client = httpx.AsyncClient(base_url=self.endpoint, headers=headers, timeout=timeout, transport=transport)

    async def _request(self, method, path, body=None, params=None, headers=None):
        """Send a request relative to the endpoint.

        Returns:
            Parsed JSON body, or ``None`` for an empty response.

        Raises:
            httpx.HTTPStatusError: on a 4xx/5xx response.
        """
        logger.debug(f"{self.service}: {method} {self.endpoint}{path}")
        resp = await self._client.request(method, path, json=body, params=params, headers=headers)
        resp.raise_for_status()
        if not resp.content:
            return None
        return resp.json()

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
