from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config, scheduler=None):
    """Build the Flask app and its single match session.

    ``scheduler`` replaces the background-task timer scheduler; tests pass a
    manual clock here.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from arena.main import main
    flask_app.register_blueprint(main)

    from arena.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')

    with flask_app.app_context():
        import arena.models  # noqa: F401
        db.create_all()

    from arena.services.leaderboard import LeaderboardStore
    from arena.services.match import MatchSession
    flask_app.extensions['arena.session'] = MatchSession(
        flask_app,
        socketio,
        LeaderboardStore(),
        scheduler=scheduler,
    )

    # Register Socket.IO event handlers against the initialized socketio instance
    from arena.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the leaderboard tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Leaderboard has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
