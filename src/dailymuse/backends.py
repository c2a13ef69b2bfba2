"""Build stores and services from configuration.

    storage.entries: file | memory | firestore
    storage.assets:  local | memory | gcs
"""

from __future__ import annotations

from loguru import logger

from dailymuse.assets import AssetStore
from dailymuse.core.config import Config
from dailymuse.core.exceptions import ConfigurationError
from dailymuse.core.storage import GCSStorage, LocalStorage, MemoryStorage, StorageBackend
from dailymuse.entries.backends import FileEntryStore, FirestoreEntryStore, MemoryEntryStore
from dailymuse.entries.store import EntryStore
from dailymuse.queries import QueryFacade
from dailymuse.scheduling import SchedulingService


def create_entry_store(config: Config) -> EntryStore:
    kind = str(config.get("storage.entries", "file")).lower()
    if kind == "file":
        return FileEntryStore(config.require("storage.entries_dir"))
    if kind == "memory":
        return MemoryEntryStore()
    if kind == "firestore":
        return FirestoreEntryStore(
            collection=config.get("firestore.collection", "muses"),
            project=config.get("firestore.project", ""),
            credentials_file=config.get("firestore.credentials_file", ""),
        )
    raise ConfigurationError(f"Unknown entry store '{kind}'. Expected one of: file, memory, firestore.")


def create_storage_backend(config: Config) -> StorageBackend:
    kind = str(config.get("storage.assets", "local")).lower()
    if kind == "local":
        return LocalStorage(
            base_path=config.require("storage.assets_dir"),
            public_base_url=config.get("storage.public_base_url", ""),
        )
    if kind == "memory":
        return MemoryStorage()
    if kind == "gcs":
        return GCSStorage(
            bucket=config.require("gcs.bucket"),
            credentials_file=config.get("gcs.credentials_file", ""),
        )
    raise ConfigurationError(f"Unknown asset store '{kind}'. Expected one of: local, memory, gcs.")


def create_asset_store(config: Config) -> AssetStore:
    return AssetStore(create_storage_backend(config), prefix=config.get("storage.asset_prefix", "muses"))


def create_services(config: Config) -> tuple[SchedulingService, QueryFacade]:
    """Wire the writer and reader services over the configured backends."""
    entries = create_entry_store(config)
    assets = create_asset_store(config)
    if not entries.supports_conditional_write:
        logger.warning(f"Entry store '{entries.name}' has no conditional write; date conflicts are best-effort")
    logger.debug(f"Using entry store '{entries.name}' and asset backend '{assets.backend.name}'")
    return SchedulingService(entries, assets), QueryFacade(entries)
