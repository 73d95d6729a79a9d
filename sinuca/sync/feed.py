"""Fan-out of pushed snapshots to connected browsers."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from functools import partial
from typing import Any

from sinuca.bracket.models import TournamentSnapshot

from .gateway import SyncGateway

MAX_PENDING_UPDATES = 10


class SnapshotFeed:
    """Share one Firestore listener per tournament between many clients.

    Every client gets its own queue. A slow client only ever loses the oldest
    pending snapshots, since each one supersedes the previous.
    """

    def __init__(self, gateway_factory: Callable[[], SyncGateway] = SyncGateway) -> None:
        """Initialize the feed."""
        self._gateway_factory = gateway_factory
        self._lock = threading.Lock()
        self._subscribers: dict[str, list[queue.Queue]] = {}
        self._watches: dict[str, Any] = {}

    def listen(self, tournament_id: str) -> queue.Queue:
        """Register a client and return the queue it should read from."""
        client_queue: queue.Queue = queue.Queue(maxsize=MAX_PENDING_UPDATES)
        with self._lock:
            self._subscribers.setdefault(tournament_id, []).append(client_queue)
            if tournament_id not in self._watches:
                gateway = self._gateway_factory()
                self._watches[tournament_id] = gateway.subscribe(
                    tournament_id, partial(self.publish, tournament_id)
                )
                logging.info(f"Started watching tournament {tournament_id}")
        return client_queue

    def unlisten(self, tournament_id: str, client_queue: queue.Queue) -> None:
        """Unregister a client; the listener stops with the last one."""
        with self._lock:
            clients = self._subscribers.get(tournament_id, [])
            if client_queue in clients:
                clients.remove(client_queue)
            if clients:
                return
            self._subscribers.pop(tournament_id, None)
            watch = self._watches.pop(tournament_id, None)
        if watch is not None:
            watch.unsubscribe()
            logging.info(f"Stopped watching tournament {tournament_id}")

    def publish(self, tournament_id: str, snapshot: TournamentSnapshot) -> None:
        """Hand a snapshot to every client of the tournament."""
        with self._lock:
            clients = list(self._subscribers.get(tournament_id, []))
        for client_queue in clients:
            while True:
                try:
                    client_queue.put_nowait(snapshot)
                    break
                except queue.Full:
                    try:
                        client_queue.get_nowait()
                    except queue.Empty:
                        pass

    def subscriber_count(self, tournament_id: str) -> int:
        """Return how many clients listen to a tournament."""
        with self._lock:
            return len(self._subscribers.get(tournament_id, []))
