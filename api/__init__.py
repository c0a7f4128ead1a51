import logging
from flask import Flask

from config.settings import LOG_LEVEL
from database import SessionLocal, init_db
from api.routes import register_routes


def create_app(session_factory=None, create_tables=True):
    logging.basicConfig(level=LOG_LEVEL)

    app = Flask(__name__)
    app.config["SESSION_FACTORY"] = session_factory or SessionLocal

    if create_tables:
        init_db(bind=app.config["SESSION_FACTORY"].kw.get("bind"))

    register_routes(app)
    return app
