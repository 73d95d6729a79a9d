"""Admin routes: registration, pairing and round management."""

from __future__ import annotations

from typing import Any

from flask import current_app, flash, redirect, render_template, request, url_for

from sinuca.auth.decorators import admin_required
from sinuca.bracket.engine import BracketEngine
from sinuca.bracket.services import TournamentService
from sinuca.bracket.utils import (
    champion,
    entry_name,
    parse_ticket_numbers,
    round_matches,
    unmatched_entries,
)
from sinuca.errors import AppError

from . import bp
from .forms import (
    ActionForm,
    AdvanceRoundForm,
    MatchForm,
    MatchStatusForm,
    ParticipantForm,
    RenameParticipantForm,
    ResetTournamentForm,
    StreamSettingsForm,
    WinnerForm,
)


def _tournament_id() -> str:
    return current_app.config["TOURNAMENT_ID"]


def _run(command: Any, *args: Any, success: str | None = None, **kwargs: Any) -> bool:
    """Execute a bracket command, flashing the outcome to the operator."""
    try:
        TournamentService.execute(_tournament_id(), command, *args, **kwargs)
    except AppError as e:
        current_app.logger.warning(f"{command.__name__} rejected: {e.message}")
        flash(e.message, "danger")
        return False
    if success:
        flash(success, "success")
    return True


def _flash_form_errors(form: Any) -> None:
    for field_errors in form.errors.values():
        for error in field_errors:
            flash(error, "danger")


def _back(endpoint: str) -> Any:
    return redirect(request.referrer or url_for(endpoint))


@bp.route("/")
@admin_required
def index() -> Any:
    """Send the admin to the participant list."""
    return redirect(url_for(".participants"))


@bp.route("/participants", methods=["GET", "POST"])
@admin_required
def participants() -> Any:
    """List and register participants."""
    form = ParticipantForm()
    if form.validate_on_submit():
        try:
            numbers = parse_ticket_numbers(form.tickets.data or "")
        except AppError as e:
            flash(e.message, "danger")
        else:
            if _run(
                BracketEngine.register_participant,
                form.name.data,
                numbers,
                success=f"{form.name.data.strip()} registered.",
            ):
                return redirect(url_for(".participants"))
    elif request.method == "POST":
        _flash_form_errors(form)

    snapshot = TournamentService.get_snapshot(_tournament_id())
    return render_template(
        "admin/participants.html",
        form=form,
        rename_form=RenameParticipantForm(),
        action_form=ActionForm(),
        snapshot=snapshot,
        participants=sorted(snapshot["participants"], key=lambda p: p["name"].lower()),
    )


@bp.route("/participants/<string:participant_id>/edit", methods=["POST"])
@admin_required
def edit_participant(participant_id: str) -> Any:
    """Rename a participant."""
    form = RenameParticipantForm()
    if form.validate_on_submit():
        _run(
            BracketEngine.edit_participant,
            participant_id,
            form.name.data,
            success="Participant renamed.",
        )
    else:
        _flash_form_errors(form)
    return redirect(url_for(".participants"))


@bp.route("/participants/<string:participant_id>/delete", methods=["POST"])
@admin_required
def delete_participant(participant_id: str) -> Any:
    """Remove a participant and their tickets."""
    if ActionForm().validate_on_submit():
        _run(
            BracketEngine.remove_participant,
            participant_id,
            success="Participant removed.",
        )
    return redirect(url_for(".participants"))


@bp.route("/matches", methods=["GET", "POST"])
@admin_required
def matches() -> Any:
    """Show the current round and pair tickets."""
    form = MatchForm()
    if form.validate_on_submit():
        if _run(
            BracketEngine.create_match,
            None,
            form.entry1.data,
            form.entry2.data,
            success="Match created.",
        ):
            return redirect(url_for(".matches"))
    elif request.method == "POST":
        _flash_form_errors(form)

    snapshot = TournamentService.get_snapshot(_tournament_id())
    current_round = snapshot["current_round"]
    return render_template(
        "admin/matches.html",
        form=form,
        winner_form=WinnerForm(),
        status_form=MatchStatusForm(),
        action_form=ActionForm(),
        advance_form=AdvanceRoundForm(),
        reset_form=ResetTournamentForm(),
        snapshot=snapshot,
        current_round=current_round,
        pool=sorted(unmatched_entries(snapshot, current_round), key=lambda e: e["number"]),
        matches=round_matches(snapshot, current_round),
        champion=champion(snapshot),
        entry_name=lambda number: entry_name(snapshot, number),
    )


@bp.route("/matches/bye", methods=["POST"])
@admin_required
def assign_bye() -> Any:
    """Give the last unpaired ticket a bye."""
    if ActionForm().validate_on_submit():
        _run(BracketEngine.assign_bye, success="Bye assigned.")
    return _back(".matches")


@bp.route("/matches/<string:match_id>/winner", methods=["POST"])
@admin_required
def set_winner(match_id: str) -> Any:
    """Record the winner of a match."""
    form = WinnerForm()
    if form.validate_on_submit():
        _run(BracketEngine.set_winner, match_id, form.winner.data)
    else:
        _flash_form_errors(form)
    return _back(".matches")


@bp.route("/matches/<string:match_id>/reset", methods=["POST"])
@admin_required
def reset_match(match_id: str) -> Any:
    """Clear the result of a match."""
    if ActionForm().validate_on_submit():
        _run(BracketEngine.reset_match, match_id, success="Result cleared.")
    return _back(".matches")


@bp.route("/matches/<string:match_id>/delete", methods=["POST"])
@admin_required
def delete_match(match_id: str) -> Any:
    """Delete a match."""
    if ActionForm().validate_on_submit():
        _run(BracketEngine.delete_match, match_id, success="Match deleted.")
    return _back(".matches")


@bp.route("/matches/<string:match_id>/status", methods=["POST"])
@admin_required
def update_match_status(match_id: str) -> Any:
    """Change the display status of a match."""
    form = MatchStatusForm()
    if form.validate_on_submit():
        _run(BracketEngine.update_match_status, match_id, form.status.data)
    else:
        _flash_form_errors(form)
    return _back(".matches")


@bp.route("/matches/<string:match_id>/visibility", methods=["POST"])
@admin_required
def toggle_visibility(match_id: str) -> Any:
    """Show or hide a match on the public page."""
    if ActionForm().validate_on_submit():
        _run(BracketEngine.toggle_visibility, match_id)
    return _back(".matches")


@bp.route("/rounds/advance", methods=["POST"])
@admin_required
def advance_round() -> Any:
    """Open the next round."""
    form = AdvanceRoundForm()
    if form.validate_on_submit():
        force = bool(form.force.data) or not current_app.config.get(
            "ROUND_ADVANCE_GATED", True
        )
        _run(BracketEngine.advance_round, force=force, success="Next round opened.")
    return redirect(url_for(".matches"))


@bp.route("/rounds/reset", methods=["POST"])
@admin_required
def reset_round() -> Any:
    """Undo every match of the current round."""
    if ActionForm().validate_on_submit():
        _run(BracketEngine.reset_current_round, success="Current round reset.")
    return redirect(url_for(".matches"))


@bp.route("/tournament/reset", methods=["POST"])
@admin_required
def reset_tournament() -> Any:
    """Wipe participants, tickets and matches."""
    form = ResetTournamentForm()
    if form.validate_on_submit():
        _run(
            BracketEngine.reset_tournament,
            clear_events=bool(form.clear_events.data),
            success="Tournament reset.",
        )
    return redirect(url_for(".participants"))


@bp.route("/logs")
@admin_required
def logs() -> Any:
    """Show the event log."""
    snapshot = TournamentService.get_snapshot(_tournament_id())
    return render_template(
        "admin/logs.html", events=snapshot["events"], action_form=ActionForm()
    )


@bp.route("/logs/clear", methods=["POST"])
@admin_required
def clear_logs() -> Any:
    """Empty the event log."""
    if ActionForm().validate_on_submit():
        _run(BracketEngine.clear_events, success="Event log cleared.")
    return redirect(url_for(".logs"))


@bp.route("/stream", methods=["GET", "POST"])
@admin_required
def stream_settings() -> Any:
    """Edit the live stream link."""
    snapshot = TournamentService.get_snapshot(_tournament_id())
    form = StreamSettingsForm()
    if request.method == "GET":
        form.youtube_link.data = snapshot["youtube_link"]
        form.show_live.data = snapshot["show_live"]

    if form.validate_on_submit():
        if _run(
            BracketEngine.update_stream_settings,
            form.youtube_link.data or "",
            bool(form.show_live.data),
            success="Stream settings saved.",
        ):
            return redirect(url_for(".stream_settings"))
    elif request.method == "POST":
        _flash_form_errors(form)

    return render_template("admin/stream.html", form=form, snapshot=snapshot)
