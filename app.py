from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from config import Config
from routes import (
    health_bp, tenant_bp, profile_bp, booking_bp, bids_bp, auction_bp, notification_bp,
)

from models import db
from flask_migrate import Migrate
from services.errors import WorkflowError
from utils.auth_context import load_current_user


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(tenant_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(bids_bp)
    app.register_blueprint(auction_bp)
    app.register_blueprint(notification_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    @app.before_request
    def _load_user():
        load_current_user()

    @app.errorhandler(WorkflowError)
    def _workflow_error(exc):
        app.logger.info("Rejected request: %s (%s)", exc.message, exc.status_code)
        return jsonify(error=exc.message), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def _database_error(exc):
        db.session.rollback()
        app.logger.exception("Database error", exc_info=exc)
        return jsonify(error="Database error. Please try again later."), 500

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        # JSON API only
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp


    register_cli(app)


    return app

#-------------------------
import click
from models.profile import Profile, ADMIN, PROVIDER_TYPES
from services.auctions import close_due_auctions
from services.slots import generate_slots, services_for_provider

def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("auth_user_id")
    def make_admin(auth_user_id):
        """Promote a profile to tenant ADMIN by auth user id (bootstrap)."""
        profile = Profile.query.filter_by(user_id=auth_user_id.strip()).first()
        if not profile:
            click.echo("Profile not found")
            return
        if profile.tenant_id is None:
            click.echo("Profile has no business; create one first")
            return

        profile.user_type = ADMIN
        db.session.commit()
        click.echo(f"Profile {profile.id} promoted to ADMIN")

    @app.cli.command("generate-slots")
    @click.option("--days", type=int, default=None, help="Days ahead to fill (default SLOT_GENERATION_DAYS).")
    def generate_slots_command(days):
        """Create slots from every provider's weekly availability."""
        providers = Profile.query.filter(Profile.user_type.in_(PROVIDER_TYPES)).all()
        total = 0
        for provider in providers:
            for service in services_for_provider(provider):
                total += len(generate_slots(provider, service, days=days))
        click.echo(f"Generated {total} slot(s)")

    @app.cli.command("close-auctions")
    def close_auctions_command():
        """Close auctions whose end time has passed and notify winners."""
        count = close_due_auctions()
        click.echo(f"Closed {count} auction(s)")

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
