"""Routes for the auth blueprint."""

from flask import current_app, flash, redirect, render_template, request, session, url_for

from sinuca.constants import SESSION_IS_ADMIN

from . import bp
from .forms import LoginForm
from .utils import check_admin_password, is_safe_redirect


@bp.route("/login", methods=["GET", "POST"])
def login():
    """Unlock the admin area with the shared passphrase."""
    form = LoginForm()
    if request.method == "GET":
        form.next.data = request.args.get("next", "")

    if form.validate_on_submit():
        if check_admin_password(
            form.password.data, current_app.config.get("ADMIN_PASSWORD")
        ):
            session[SESSION_IS_ADMIN] = True
            current_app.logger.info("Admin session opened.")
            target = form.next.data
            if is_safe_redirect(target):
                return redirect(target)
            return redirect(url_for("admin.participants"))
        current_app.logger.warning("Rejected admin login attempt.")
        flash("Wrong password.", "danger")

    return render_template("auth/login.html", form=form)


@bp.route("/logout", methods=["POST"])
def logout():
    """Close the admin session."""
    session.pop(SESSION_IS_ADMIN, None)
    flash("You left the admin area.", "info")
    return redirect(url_for("main.index"))
