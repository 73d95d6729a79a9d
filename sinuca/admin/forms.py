"""Forms for the admin blueprint."""

from flask_wtf import FlaskForm
from wtforms import BooleanField, IntegerField, SelectField, StringField, SubmitField
from wtforms.validators import DataRequired, InputRequired, Length, Optional

from sinuca.constants import MATCH_STATUSES


class ActionForm(FlaskForm):
    """Bare form carrying only the CSRF token of a button."""


class ParticipantForm(FlaskForm):
    """Form for registering a participant."""

    name = StringField("Name", validators=[DataRequired(), Length(max=80)])
    tickets = StringField(
        "Tickets",
        validators=[DataRequired()],
        render_kw={"placeholder": "e.g. 5, 12, 88"},
    )
    submit = SubmitField("Register")


class RenameParticipantForm(FlaskForm):
    """Form for renaming a participant."""

    name = StringField("Name", validators=[DataRequired(), Length(max=80)])
    submit = SubmitField("Rename")


class MatchForm(FlaskForm):
    """Form for pairing two tickets."""

    entry1 = IntegerField("Ticket A", validators=[InputRequired()])
    entry2 = IntegerField("Ticket B", validators=[InputRequired()])
    submit = SubmitField("Pair")


class WinnerForm(FlaskForm):
    """Form for deciding a match."""

    winner = IntegerField("Winner", validators=[InputRequired()])


class MatchStatusForm(FlaskForm):
    """Form for changing the display status of a match."""

    status = SelectField(
        "Status",
        choices=[(s, s) for s in MATCH_STATUSES],
        validators=[DataRequired()],
    )


class AdvanceRoundForm(FlaskForm):
    """Form for opening the next round."""

    force = BooleanField("Advance even if the round is not complete")
    submit = SubmitField("Next round")


class ResetTournamentForm(FlaskForm):
    """Form for wiping the tournament."""

    clear_events = BooleanField("Also clear the event log")
    submit = SubmitField("Reset tournament")


class StreamSettingsForm(FlaskForm):
    """Form for the live stream link."""

    youtube_link = StringField(
        "YouTube link", validators=[Optional(), Length(max=300)]
    )
    show_live = BooleanField("Show the live player to visitors")
    submit = SubmitField("Save")
