"""Shared pytest fixtures: fake OpenStack endpoints, configs, state bags."""

import json

import httpx
import pytest

from bootvol.config import Config
from bootvol.multistep import StateBag

BLOCK_STORAGE_ENDPOINT = "https://cinder.test/v3/proj-1"
IMAGE_ENDPOINT = "https://glance.test"
IMAGE_ID = "img-0001"
AUTH_TOKEN = "gAAAAAB-test-token-0001"
GIB = 1024**3


class FakeOpenStack:
    """Just enough Cinder v3 and Glance v2 to drive the volume step.

    ``statuses`` is consumed one entry per status lookup; the last entry
    repeats forever. ``status_errors`` holds HTTP codes answered before any
    status is handed out; ``status_reply``, when set, answers every status
    lookup as is.
    """

    def __init__(self, statuses=("available",), volume_id="v-1", image=None):
        self.statuses = list(statuses)
        self.volume_id = volume_id
        self.image = image if image is not None else {"id": IMAGE_ID, "size": 2 * GIB, "min_disk": 0}
        self.status_errors = []
        self.status_reply = None
        self.image_status = 200
        self.create_status = 202
        self.delete_status = 202
        self.created = None
        self.deleted = False
        self.requests = []

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def calls(self, method, path=None):
        return [r for r in self.requests if r.method == method and (path is None or r.url.path == path)]

    @property
    def volume_path(self):
        return f"/v3/proj-1/volumes/{self.volume_id}"

    def handler(self, request):
        self.requests.append(request)
        path = request.url.path

        if request.url.host == "glance.test":
            if request.method == "GET" and path == f"/v2/images/{self.image.get('id')}" and self.image_status == 200:
                return httpx.Response(200, json=self.image)
            return httpx.Response(self.image_status if self.image_status != 200 else 404, json={"message": "image not found"})

        if request.method == "POST" and path == "/v3/proj-1/volumes":
            if self.create_status >= 400:
                return httpx.Response(self.create_status, json={"badRequest": {"message": "Invalid volume type"}})
            self.created = json.loads(request.content)["volume"]
            return httpx.Response(202, json={"volume": {"id": self.volume_id, "status": "creating"}})

        if request.method == "GET" and path == self.volume_path:
            if self.deleted:
                return httpx.Response(404, json={"itemNotFound": {"message": "not found"}})
            if self.status_reply is not None:
                return self.status_reply
            if self.status_errors:
                return httpx.Response(self.status_errors.pop(0))
            status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            return httpx.Response(200, json={"volume": {"id": self.volume_id, "status": status}})

        if request.method == "DELETE" and path == self.volume_path:
            if self.deleted:
                return httpx.Response(404, json={"itemNotFound": {"message": "not found"}})
            if self.delete_status >= 400:
                return httpx.Response(self.delete_status, json={"badRequest": {"message": "Volume is in use"}})
            self.deleted = True
            return httpx.Response(202)

        return httpx.Response(404, json={"itemNotFound": {"message": f"no route for {request.method} {path}"}})


class RecordingUi:
    """Ui that keeps every message as a (level, text) tuple."""

    def __init__(self):
        self.records = []

    def say(self, message):
        self.records.append(("say", message))

    def message(self, message):
        self.records.append(("message", message))

    def error(self, message):
        self.records.append(("error", message))

    def texts(self, level):
        return [text for lvl, text in self.records if lvl == level]


@pytest.fixture
def fake_cloud():
    return FakeOpenStack()


@pytest.fixture
def make_config():
    """Return a factory for a Config wired to a FakeOpenStack."""

    def _make(cloud, **overrides):
        values = {
            "use_blockstorage_volume": True,
            "volume_name": "packer-vol",
            "volume_type": "ssd",
            "volume_availability_zone": "nova",
            "image_metadata": {"os_distro": "ubuntu"},
            "block_storage_endpoint": BLOCK_STORAGE_ENDPOINT,
            "image_endpoint": IMAGE_ENDPOINT,
            "auth_token": AUTH_TOKEN,
            "volume_wait_timeout": 2,
            "volume_poll_interval": 0.01,
            "transport": cloud.transport,
        }
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def ui():
    return RecordingUi()


@pytest.fixture
def make_state(ui):
    """Return a factory for a StateBag holding config, ui and source image."""

    def _make(config, source_image=IMAGE_ID):
        return StateBag({"config": config, "ui": ui, "source_image": source_image})

    return _make


@pytest.fixture
def make_cloud():
    """Return the FakeOpenStack class for tests that need custom statuses or images."""
    return FakeOpenStack
