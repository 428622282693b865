import random

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(config):
    origins = config.get('CORS_ORIGINS', '*')
    if isinstance(origins, str) and origins != '*':
        return [o.strip() for o in origins.split(',') if o.strip()]
    return origins


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = _allowed_origins(flask_app.config)

    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Room state lives on the app so every app (and every test) gets its own
    from undercover.services.games import RoomRegistry, SessionRegistry
    flask_app.extensions['undercover.registry'] = RoomRegistry(
        grace_period=flask_app.config.get('ROOM_DELETION_GRACE_SEC', 300),
        default_mr_white_count=flask_app.config.get('DEFAULT_MR_WHITE_COUNT', 1),
        default_undercover_count=flask_app.config.get('DEFAULT_UNDERCOVER_COUNT', 1),
        spawn=socketio.start_background_task,
        sleep=socketio.sleep,
    )
    flask_app.extensions['undercover.sessions'] = SessionRegistry()
    flask_app.extensions['undercover.random'] = random.Random()

    # Import and register blueprints here
    from undercover.main import main
    flask_app.register_blueprint(main)

    from undercover.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from undercover.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('check-words')
    def check_words_command():
        """Validates the word catalog: no blank, identical or repeated pairs."""
        from undercover.words import WORD_PAIRS, find_catalog_problems
        problems = find_catalog_problems(WORD_PAIRS)
        for problem in problems:
            click.echo(problem)
        if problems:
            raise click.ClickException(f'{len(problems)} problem(s) in the word catalog')
        click.echo(f'{len(WORD_PAIRS)} word pairs OK')

    flask_app.cli.add_command(check_words_command)

    return flask_app
