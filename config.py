from __future__ import annotations
import os
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # login throttling: attempts per window (seconds), keyed by ip|email
    AUTH_RL_MAX = 5
    AUTH_RL_WINDOW = 300

    WTF_CSRF_TIME_LIMIT = None
    WTF_CSRF_HEADERS = ["X-CSRF-Token", "X-CSRFToken"]

    # longest inclusive date range accepted by the team availability endpoints
    TEAM_AVAILABILITY_MAX_DAYS = 366

    SEED_TEST_DATA = False
    DEFAULT_USERS: list[dict] = []

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    DEFAULT_USERS = [
        {"email": "admin@example.com", "name": "Program Admin", "password": "pass", "role": "admin"},
        {"email": "lead@example.com", "name": "Lead Instructor", "password": "pass", "role": "lead_instructor"},
        {"email": "i1@example.com", "name": "Instructor One", "password": "pass", "role": "instructor"},
    ]

class TestConfig(BaseConfig):
    TESTING = True
    AUTH_RL_MAX = 1000
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    SEED_TEST_DATA = False

class ProdConfig(BaseConfig):
    DEBUG = False
    JSON_SORT_KEYS = False
    SEED_TEST_DATA = False
    DEFAULT_USERS = []

config_map = {
    "dev": DevConfig,
    "test": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
