from __future__ import annotations

import atexit
import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .auth.controller import register as register_auth
from .common.logging_setup import configure_logging
from .config import get_settings_module
from .container import Container, build_supabase_container
from .subjects.controller import register as register_subjects
from .timetable.controller import register as register_timetable

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        url = getattr(settings, "SUPABASE_URL")
        logger.info("Starting attendance tracker (settings=%s, supabase=%s)", settings_module, url)
        container = build_supabase_container(
            url=url,
            anon_key=getattr(settings, "SUPABASE_ANON_KEY"),
            service_role_key=getattr(settings, "SUPABASE_SERVICE_ROLE_KEY", None),
        )
        container.start()
        atexit.register(container.close)

    app.extensions["attendance_tracker"] = container

    register_auth(app, container)
    register_subjects(app, container)
    register_timetable(app, container)

    return app
