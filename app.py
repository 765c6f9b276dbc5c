import os

import click
from flask import Flask

from errors import register_error_handlers
from extensions import db, migrate, login_manager
from routes import gallery_bp, admin_bp
from services.cleanup import cleanup_missing_files


def create_app(config_object="config.Config", **overrides):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])
    if not app.config["ADMIN_PASSWORD"]:
        app.logger.warning("ADMIN_PASSWORD is not set, admin login is disabled")

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    register_error_handlers(app)
    app.register_blueprint(gallery_bp)
    app.register_blueprint(admin_bp)

    @app.cli.command("cleanup")
    def cleanup_command():
        """Remove photo records whose image file is missing."""
        deleted = cleanup_missing_files()
        click.echo(f"Cleanup completed. Removed {deleted} orphaned records.")

    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 3000)), debug=True)
