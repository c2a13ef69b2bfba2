"""Shared test fixtures for dailymuse."""

import base64
import os
import tempfile

import pytest

from dailymuse.assets import AssetStore
from dailymuse.core.storage import MemoryStorage
from dailymuse.entries import codec
from dailymuse.entries.backends import MemoryEntryStore
from dailymuse.entries.models import PublishDraft
from dailymuse.queries import QueryFacade
from dailymuse.scheduling import SchedulingService

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body" + b"\xff\xd9"


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file using the local backends."""
    import yaml

    config_data = {
        "paths": {"data_dir": os.path.join(tmp_dir, "data")},
        "storage": {
            "entries": "file",
            "assets": "local",
            "entries_dir": os.path.join(tmp_dir, "data", "muses"),
            "assets_dir": os.path.join(tmp_dir, "data", "assets"),
            "public_base_url": "/data",
        },
        "admin": {"password": "letmein"},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def title_ref():
    return codec.encode(PNG_BYTES, "image/png")


@pytest.fixture
def comic_ref():
    return codec.encode(JPEG_BYTES, "image/jpeg")


@pytest.fixture
def make_draft(title_ref, comic_ref):
    """Factory for publish drafts with inline images."""

    def _make(date: str, title: str = "Pilot", episode: str = "#01", **overrides) -> PublishDraft:
        fields = {
            "scheduled_date": date,
            "title": title,
            "episode_number": episode,
            "title_image": title_ref,
            "comic_image": comic_ref,
            "character_description": "a girl with a red scarf",
            "concept": "She wakes up. She sees the sun. She smiles. She goes back to sleep.",
        }
        fields.update(overrides)
        return PublishDraft(**fields)

    return _make


@pytest.fixture
def entry_store():
    return MemoryEntryStore()


@pytest.fixture
def blob_backend():
    return MemoryStorage()


@pytest.fixture
def asset_store(blob_backend):
    return AssetStore(blob_backend)


@pytest.fixture
def scheduler(entry_store, asset_store):
    return SchedulingService(entry_store, asset_store, clock=lambda: 1_700_000_000_000)


@pytest.fixture
def queries(entry_store):
    return QueryFacade(entry_store, today=lambda: "2024-02-01")


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes():
    return JPEG_BYTES
