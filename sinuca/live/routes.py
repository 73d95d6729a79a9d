"""Routes serving the tournament state to browsers."""

from __future__ import annotations

import queue
from typing import Any

from flask import (
    Response,
    current_app,
    jsonify,
    request,
    session,
    stream_with_context,
)

from sinuca.bracket.services import TournamentService
from sinuca.constants import SESSION_IS_ADMIN
from sinuca.sync import SnapshotFeed, snapshot_etag

from . import bp
from .utils import format_sse, public_state


def get_feed() -> SnapshotFeed:
    """Return the application's snapshot feed, creating it on first use."""
    feed = current_app.extensions.get("snapshot_feed")
    if feed is None:
        feed = SnapshotFeed()
        current_app.extensions["snapshot_feed"] = feed
    return feed


@bp.route("/state")
def state() -> Any:
    """Return the current snapshot as JSON, honouring ``If-None-Match``."""
    snapshot = TournamentService.get_snapshot(current_app.config["TOURNAMENT_ID"])
    payload = public_state(snapshot, include_hidden=bool(session.get(SESSION_IS_ADMIN)))
    etag = snapshot_etag(payload)
    if request.if_none_match.contains(etag):
        response = Response(status=304)
    else:
        response = jsonify(payload)
    response.set_etag(etag)
    response.headers["Cache-Control"] = "no-cache"
    return response


@bp.route("/stream")
def stream() -> Any:
    """Server-Sent Events stream pushing every new snapshot."""
    tournament_id = current_app.config["TOURNAMENT_ID"]
    heartbeat = current_app.config.get("SSE_HEARTBEAT_SECONDS", 15)
    include_hidden = bool(session.get(SESSION_IS_ADMIN))
    feed = get_feed()
    client_queue = feed.listen(tournament_id)

    def generate() -> Any:
        """Yield an event per snapshot and a heartbeat while idle."""
        try:
            # Send immediate connected event so the client shows "Live" status
            yield format_sse("connected", "ok")
            while True:
                try:
                    snapshot = client_queue.get(timeout=heartbeat)
                except queue.Empty:
                    yield ": heartbeat\n\n"
                    continue
                yield format_sse("snapshot", public_state(snapshot, include_hidden))
        finally:
            feed.unlisten(tournament_id, client_queue)

    return Response(
        stream_with_context(generate()),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
