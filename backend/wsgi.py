try:
    from backend.sketchguess.server import create_app
except ImportError:  # pragma: no cover
    from sketchguess.server import create_app

app, socketio = create_app()
