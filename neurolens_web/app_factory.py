from __future__ import annotations

import logging
import secrets
from typing import Optional

from flask import Flask
from flask.logging import default_handler

from neurolens_web.config.ini_config import IniConfig
from neurolens_web.repositories.session_repository import SessionRepository
from neurolens_web.services.analysis_client import AnalysisClient, GeminiAnalysisClient
from neurolens_web.services.file_encoder import FileEncoder
from neurolens_web.services.prompts import AnalysisPrompts
from neurolens_web.web.routes import create_blueprint


def create_app(ini: Optional[IniConfig] = None, analysis_client: Optional[AnalysisClient] = None) -> Flask:
    ini = ini or IniConfig.from_env_or_default()
    settings = ini.load_settings()

    # Service module loggers and app.logger all sit under the package logger,
    # so one handler here covers both. It must be attached before app.logger is first touched.
    package_logger = logging.getLogger("neurolens_web")
    package_logger.setLevel(settings.log_level)
    package_logger.addHandler(default_handler)

    app = Flask(__name__)
    app.logger.setLevel(settings.log_level)

    encoder = FileEncoder(
        max_bytes=settings.max_file_bytes,
        default_content_type=settings.default_content_type,
    )

    if analysis_client is None:
        if not settings.api_key:
            app.logger.warning(
                "%s is not set; every analysis will fail until it is configured.", settings.api_key_env
            )
        analysis_client = GeminiAnalysisClient(
            api_key=settings.api_key,
            model=settings.gemini_model,
            api_base=settings.gemini_api_base,
            timeout_seconds=settings.gemini_timeout_seconds,
            prompts=AnalysisPrompts.with_overrides(
                instruction=settings.instruction,
                system_directive_file=settings.system_directive_file,
            ),
        )

    session_repo = SessionRepository(max_sessions=settings.max_sessions)

    app.register_blueprint(create_blueprint(encoder, analysis_client, session_repo))

    app.config["SECRET_KEY"] = settings.secret_key or secrets.token_hex(32)
    app.config["HOST"] = settings.flask_host
    app.config["PORT"] = settings.flask_port
    app.config["DEBUG"] = settings.flask_debug

    return app
