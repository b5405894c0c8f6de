from __future__ import annotations
import os
from flask import Flask
from sqlalchemy import inspect

from config import config_map
from extensions import db, migrate, login_manager, csrf

def _seed_from_config(app: Flask) -> None:
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # lab_users may not exist yet (before `flask db upgrade`)
        if not inspect(db.engine).has_table("lab_users"):
            return

        from models import User  # local import to avoid cycles
        created = 0
        for u in app.config.get("DEFAULT_USERS", []):
            email = u["email"].strip().lower()
            if User.query.filter_by(email=email).first():
                continue
            user = User(email=email, name=u.get("name"), role=u["role"], is_active_flag=True)
            user.set_password(u["password"])
            db.session.add(user)
            created += 1
        if created:
            db.session.commit()
            app.logger.info("seeded %d default users", created)

def register_blueprints(app: Flask) -> None:
    from blueprints.core import bp as core_bp, api_bp as core_api_bp
    from blueprints.auth.routes import api_bp as auth_api_bp
    from blueprints.availability.routes import api_bp as availability_api_bp
    from blueprints.team_availability.routes import api_bp as team_availability_api_bp

    # core without prefix -> '/health' at the root
    app.register_blueprint(core_bp)
    app.register_blueprint(core_api_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_api_bp, url_prefix="/api/v1")
    app.register_blueprint(availability_api_bp, url_prefix="/api/v1")
    app.register_blueprint(team_availability_api_bp, url_prefix="/api/v1")

def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app
