from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config
from lyricsflip.registry import QuizRegistry

registry = QuizRegistry()
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)
    registry.init_app(flask_app, socketio)

    # Import and register blueprints here
    from lyricsflip.main import main
    flask_app.register_blueprint(main)

    from lyricsflip.api.quiz import quiz
    # Mount game routes under /api to match frontend API client
    flask_app.register_blueprint(quiz, url_prefix='/api/games')

    # Register Socket.IO event handlers
    from lyricsflip.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('lyrics-catalog')
    @click.option('--genre', default=None, help='Only list songs from this genre.')
    def lyrics_catalog_command(genre):
        """Lists the bundled lyric catalogue by genre."""
        from lyricsflip.data.catalog import CATALOG
        for name, songs in sorted(CATALOG.items()):
            if genre and name.lower() != genre.lower():
                continue
            click.echo(f"{name} ({len(songs)} songs)")
            for song in songs:
                click.echo(f"  {song['title']} - {song['artist']}")

    flask_app.cli.add_command(lyrics_catalog_command)

    return flask_app
