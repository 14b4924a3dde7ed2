# core.py
import logging
import os
from datetime import datetime, timezone

import click
from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException

# --- DB handle (imported by models, storage and blueprints) ---
db = SQLAlchemy()

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("artistry").setLevel(level)


def register_error_handlers(app):
    from .schemas import ValidationError
    from .storage import CapacityError

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return jsonify({"error": exc.message, "details": exc.details}), 400

    @app.errorhandler(CapacityError)
    def handle_capacity_error(exc):
        db.session.rollback()
        return jsonify({"error": str(exc)}), 409

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500


def register_commands(app):
    @app.cli.command("seed")
    def seed_command():
        """Load demo catalog, classes and workshops into empty tables."""
        from .seed import seed_if_empty

        counts = seed_if_empty()
        click.echo(f"Seeded: {counts}" if counts else "Database already has data.")

    @app.cli.command("create-admin")
    @click.option("--username", default=None, help="Defaults to ADMIN_USERNAME.")
    @click.option("--password", default=None, help="Defaults to ADMIN_PASSWORD, prompts if unset.")
    def create_admin_command(username, password):
        """Create the admin account, or promote an existing user."""
        from .seed import ensure_admin

        username = username or app.config["ADMIN_USERNAME"]
        password = password or app.config.get("ADMIN_PASSWORD")
        if not password:
            password = click.prompt("Password", hide_input=True, confirmation_prompt=True)
        user, created = ensure_admin(username, password)
        click.echo(f"{'Created' if created else 'Promoted'} admin '{user.username}'.")

    @app.cli.command("purge-sessions")
    def purge_sessions_command():
        """Delete expired server-side sessions."""
        count = app.session_interface.store.purge_expired()
        click.echo(f"Purged {count} expired session(s).")


def create_app(config_object=None, **overrides):
    app = Flask(__name__)
    app.config.from_object(config_object or "artistry.config.Config")
    app.config.update(overrides)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        os.makedirs(app.instance_path, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'artistry.db')}"

    db.init_app(app)

    from .sessions import init_sessions
    init_sessions(app, db)

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)

    # Register blueprints (import inside to avoid circular imports)
    from .auth import auth_bp
    from .shop import shop_bp
    from .studio import studio_bp
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(shop_bp, url_prefix="/api")
    app.register_blueprint(studio_bp, url_prefix="/api")

    @app.route("/api/health")
    def health():
        from .storage import storage

        try:
            storage.ping()
            database = "connected"
        except Exception:
            logger.exception("Health check could not reach the database")
            db.session.rollback()
            database = "unavailable"
        return jsonify({
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": database,
        })

    register_error_handlers(app)
    register_commands(app)

    # Ensure tables exist at startup
    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()
        if app.config.get("SEED_ON_START"):
            from .seed import seed_if_empty
            seed_if_empty()
        logger.info("Artistry API ready (database: %s)", db.engine.url.render_as_string(hide_password=True))

    return app
