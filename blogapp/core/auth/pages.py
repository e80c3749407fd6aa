"""Login, sign-up and sign-out pages."""

from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from blogapp.core.auth.context import get_session_provider
from blogapp.core.auth.csrf import rotate_csrf_token
from blogapp.core.utils.decorators import csrf_protected
from blogapp.extensions import limiter

auth_pages_bp = Blueprint("auth_pages", __name__)


@auth_pages_bp.route("/login", methods=["GET", "POST"])
@limiter.limit("10/minute", methods=["POST"])
@csrf_protected
def login():
    if request.method == "GET":
        return render_template("auth/login.html", error=None, email="")

    email = request.form.get("email", "")
    result = get_session_provider().sign_in(email, request.form.get("password", ""))
    if result.success:
        rotate_csrf_token()
        return redirect(url_for("dashboard_pages.dashboard"))
    return render_template("auth/login.html", error=result.error or "An error occurred", email=email), 401


@auth_pages_bp.route("/signup", methods=["GET", "POST"])
@limiter.limit("5/minute", methods=["POST"])
@csrf_protected
def signup():
    if request.method == "GET":
        return render_template("auth/signup.html", error=None, email="")

    email = request.form.get("email", "")
    result = get_session_provider().sign_up(email, request.form.get("password", ""))
    if not result.success:
        return render_template("auth/signup.html", error=result.error, email=email), 400
    if result.data.get("session") is not None:
        rotate_csrf_token()
        return redirect(url_for("dashboard_pages.dashboard"))
    flash("Account created, please sign in", "success")
    return redirect(url_for("auth_pages.login"))


@auth_pages_bp.post("/logout")
@csrf_protected
def logout():
    get_session_provider().sign_out()
    rotate_csrf_token()
    return redirect(url_for("index"))
