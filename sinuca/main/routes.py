"""Routes for the public bracket."""

from __future__ import annotations

from typing import Any

from flask import current_app, render_template, request

from sinuca.bracket.services import TournamentService
from sinuca.bracket.utils import (
    active_entries,
    entry_name,
    played_rounds,
    public_matches,
    snapshot_summary,
)
from sinuca.live.utils import embed_url, youtube_video_id

from . import bp


@bp.route("/")
def index() -> Any:
    """Render the public bracket, roster and live player."""
    snapshot = TournamentService.get_snapshot(current_app.config["TOURNAMENT_ID"])
    rounds = played_rounds(snapshot)

    selected_round = request.args.get("round", type=int) or snapshot["current_round"]
    if selected_round not in rounds:
        selected_round = snapshot["current_round"]

    video_id = youtube_video_id(snapshot["youtube_link"]) if snapshot["show_live"] else None

    return render_template(
        "main/index.html",
        summary=snapshot_summary(snapshot),
        rounds=rounds,
        selected_round=selected_round,
        matches=public_matches(snapshot, selected_round),
        roster=active_entries(snapshot),
        player_url=embed_url(video_id),
        motto=current_app.config["MOTTO"],
        revision=snapshot["revision"],
        entry_name=lambda number: entry_name(snapshot, number),
    )
