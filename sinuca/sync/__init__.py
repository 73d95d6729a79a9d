"""Persistence and push updates of tournament snapshots."""

from .feed import SnapshotFeed
from .gateway import SyncGateway, decode_snapshot, snapshot_etag

__all__ = ["SnapshotFeed", "SyncGateway", "decode_snapshot", "snapshot_etag"]
