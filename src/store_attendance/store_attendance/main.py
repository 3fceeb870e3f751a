from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, abort, send_from_directory

from .config import get_settings_module
from .database.bootstrap import apply_schema, ensure_demo_directory, list_tables
from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .audits.controller import register as register_audits
from .stores.controller import register as register_stores
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. ``container`` replaces the MySQL-backed one (used by tests)."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["EVIDENCE_DIR"] = str(getattr(settings, "EVIDENCE_DIR"))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_directory(db_config)
            logger.info("demo stores and users ready")

        container = build_container(
            db_config=db_config,
            ai_api_key=getattr(settings, "AI_API_KEY"),
            ai_base_url=getattr(settings, "AI_BASE_URL"),
            ai_model=getattr(settings, "AI_VISION_MODEL"),
            ai_timeout_seconds=float(getattr(settings, "AI_TIMEOUT_SECONDS", 30)),
            evidence_dir=app.config["EVIDENCE_DIR"],
            evidence_public_url=getattr(settings, "EVIDENCE_PUBLIC_URL"),
            avatar_hosts=getattr(settings, "AVATAR_HOSTS", ()),
        )

    @app.route("/evidence/<path:name>", methods=["GET"], endpoint="evidence")
    def evidence(name: str):
        root = getattr(container.evidence, "root", None)
        if root is None:
            abort(404)
        return send_from_directory(Path(root).resolve(), name)

    register_users(app, container)
    register_stores(app, container)
    register_attendance(app, container)
    register_audits(app, container)

    return app
