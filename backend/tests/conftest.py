import os
import sys
import pytest

# Ensure the backend root (containing the `lyricsflip` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from lyricsflip import create_app, socketio
from lyricsflip.models import Difficulty, GameConfig, LyricOption, LyricRound, TimerScope
from lyricsflip.services.quiz.controller import RoundController
from lyricsflip.services.quiz.errors import ProviderUnavailable
from lyricsflip.services.quiz.scheduler import ManualScheduler
from lyricsflip.services.quiz.session import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    QUIZ_MAX_ROUNDS = 3
    QUIZ_PASSING_SCORE = 2
    QUIZ_TIMER_SCOPE = 'session'
    QUICK_GAME_GENRE = 'Pop'
    QUICK_GAME_DIFFICULTY = 'Easy'
    QUICK_GAME_DURATION = '5 mins'
    QUICK_GAME_ODDS = 1
    QUICK_GAME_WAGER = 0
    REVEAL_DWELL_SEC = 0
    FLIP_DURATION_SEC = 0
    TIMER_ENABLED = False
    TICK_INTERVAL_SEC = 1
    PROVIDER_RETRIES = 1
    PROVIDER_SEED = 7
    OPTION_COUNTS = {'Easy': 3, 'Medium': 4, 'Hard': 5}
    GAME_IDLE_TTL_SEC = 600


class ScriptedProvider:
    """Hands out prepared rounds in order; entries that are exceptions get raised."""

    def __init__(self, rounds):
        self.rounds = list(rounds)
        self.calls = 0

    def genres(self):
        return ['Pop']

    def next(self, genre):
        self.calls += 1
        if not self.rounds:
            raise ProviderUnavailable('script exhausted')
        item = self.rounds.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def peek(self, genre):
        return self.rounds[0]


def make_round(title, artist='Ed Sheeran', others=(('Perfect', 'Ed Sheeran'),), text=None):
    options = [LyricOption(title, artist)] + [LyricOption(t, a) for t, a in others]
    return LyricRound(text=text or f"lyric from {title}", title=title, artist=artist, options=options)


def make_config(**overrides):
    values = dict(
        genre='Pop',
        difficulty=Difficulty.EASY,
        duration=30,
        odds=2.0,
        wager_amount=5.0,
        max_rounds=3,
        passing_score=2,
        timer_scope=TimerScope.SESSION,
    )
    values.update(overrides)
    return GameConfig(**values)


@pytest.fixture()
def scheduler():
    return ManualScheduler(run_spawned_inline=True)


@pytest.fixture()
def session():
    return GameSession()


@pytest.fixture()
def make_controller(session, scheduler):
    def _make(rounds, config=None, **kwargs):
        provider = ScriptedProvider(rounds)
        session.start_game(config or make_config())
        kwargs.setdefault('reveal_dwell', 0)
        kwargs.setdefault('flip_duration', 0)
        runner = kwargs.pop('scheduler', scheduler)
        controller = RoundController(session, provider, 'Pop', runner, **kwargs)
        controller.provider = provider
        return controller
    return _make


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['lyricsflip']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
