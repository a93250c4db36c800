from __future__ import annotations

import logging
import os
import sys

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.registry import RoomRegistry
from .game.rounds import GameSettings, RoundMachine
from .game.session import GameSession, Scheduler
from .game.timers import BackgroundScheduler
from .game.words import WordBank
from .realtime.handlers import register_socketio_handlers
from .realtime.transport import SocketIOTransport
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp


def _async_mode(app: Flask) -> str:
    env_async_mode = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()
    if env_async_mode:
        return env_async_mode
    if app.config.get("TESTING"):
        return "threading"
    # Default choice:
    # - Windows: threading (eventlet has known compatibility issues on newer Python)
    # - Python >= 3.13: threading (safer default)
    # - Otherwise: eventlet
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(
    config_class=Config,
    scheduler: Scheduler | None = None,
    word_bank: WordBank | None = None,
) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=_async_mode(app),
    )

    session = GameSession(
        transport=SocketIOTransport(socketio),
        scheduler=scheduler or BackgroundScheduler(socketio),
        machine=RoundMachine(GameSettings.from_config(app.config), word_bank=word_bank),
        registry=RoomRegistry(
            capacity=int(app.config.get("ROOM_CAPACITY", 10)),
            max_name_length=int(app.config.get("MAX_NAME_LENGTH", 16)),
        ),
        logger=app.logger,
    )
    app.extensions["sketchguess"] = session

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(socketio, session)

    return app, socketio
