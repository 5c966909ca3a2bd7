from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from typetrainer.config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from typetrainer.api.typing import typing_api
    flask_app.register_blueprint(typing_api, url_prefix='/api/typing')

    # Register Socket.IO event handlers
    try:
        from typetrainer.socketio_events import register_socketio_handlers
        register_socketio_handlers(testing=flask_app.config.get('TESTING', False))
    except Exception as exc:
        flask_app.logger.warning(f"SocketIO events not loaded: {exc}")

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        from typetrainer import models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('words-check')
    def words_check_command():
        """Loads the configured word file and prints pool and level sizes."""
        from typetrainer.services.typing.levels import LEVELS
        from typetrainer.services.typing.word_pool import load_file
        path = flask_app.config['WORDS_PATH']
        pool = load_file(path)
        print(f"{len(pool)} words in {path}")
        for preset in LEVELS.values():
            eligible = len(preset.slice(pool))
            print(f"  {preset.name}: {min(preset.sample_count, eligible)} of {eligible} eligible per session")

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(words_check_command)

    return flask_app
