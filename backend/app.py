import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def _configure_logging() -> None:
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _patch_eventlet() -> None:
    # eventlet must patch the stdlib before Flask-SocketIO is imported.
    env_async_mode = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()
    if (
        not sys.platform.startswith("win")
        and sys.version_info < (3, 13)
        and env_async_mode in ("", "eventlet")
    ):
        import eventlet

        eventlet.monkey_patch()


def main() -> None:
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")
    _configure_logging()
    _patch_eventlet()

    try:
        from backend.sketchguess.server import create_app
    except ImportError:  # pragma: no cover
        from sketchguess.server import create_app

    app, socketio = create_app()

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "3000"))

    app.logger.info(f"[startup] sketchguess listening on {host}:{port}")
    socketio.run(
        app,
        host=host,
        port=port,
        debug=os.environ.get("FLASK_DEBUG", "0") == "1",
        allow_unsafe_werkzeug=os.environ.get("ALLOW_UNSAFE_WERKZEUG", "1") == "1",
        # Rooms live in process memory; a reloader restart would drop them.
        use_reloader=False,
    )


if __name__ == "__main__":
    main()
