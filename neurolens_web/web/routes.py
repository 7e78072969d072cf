## routes.py
from __future__ import annotations

import uuid

from flask import Blueprint, current_app, flash, jsonify, redirect, render_template, request, session, url_for

from neurolens_web.domain.errors import InvalidTransition, NoFilesSelected, SizeLimitExceeded
from neurolens_web.domain.models import SessionStatus
from neurolens_web.repositories.session_repository import SessionRepository
from neurolens_web.services.analysis_client import AnalysisClient
from neurolens_web.services.file_encoder import FileEncoder

ACCEPTED_TYPES = "image/*,application/pdf,text/*,.csv,.json,.xml"
SESSION_KEY = "analysis_sid"


def create_blueprint(
    encoder: FileEncoder,
    analysis_client: AnalysisClient,
    session_repo: SessionRepository,
) -> Blueprint:
    bp = Blueprint("web", __name__, template_folder="templates")

    def current_session():
        sid = session.get(SESSION_KEY)
        if not sid:
            sid = uuid.uuid4().hex
            session[SESSION_KEY] = sid
        return session_repo.get_or_create(sid)

    def render_index(code: int = 200):
        snap = current_session().snapshot()
        return render_template(
            "index.html",
            snap=snap,
            Status=SessionStatus,
            accepted_types=ACCEPTED_TYPES,
            max_file_mb=encoder.max_bytes // (1024 * 1024),
        ), code

    @bp.get("/")
    def index():
        return render_index()

    @bp.post("/analyze")
    def analyze():
        analysis = current_session()

        if analysis.status is not SessionStatus.IDLE:
            flash("An analysis is already in progress or finished. Reset before starting a new one.", "error")
            return render_index(409)

        # Encoding is a precondition: nothing reaches the session until the whole batch is encoded.
        try:
            files = encoder.encode_all(request.files.getlist("files"))
        except (SizeLimitExceeded, NoFilesSelected) as e:
            flash(e.user_message, "error")
            return render_index(400)

        current_app.logger.info("Starting analysis of %d file(s)", len(files))

        try:
            snap = analysis.run(files, analysis_client)
        except InvalidTransition as e:
            flash(str(e), "error")
            return render_index(409)

        current_app.logger.info("Analysis finished: status=%s generation=%d", snap.status.value, snap.generation)
        return redirect(url_for("web.index"))

    @bp.post("/reset")
    def reset():
        current_session().reset()
        current_app.logger.info("Session reset")
        return redirect(url_for("web.index"))

    @bp.get("/api/session")
    def session_state():
        return jsonify(current_session().snapshot().to_dict())

    return bp
