import random
import string
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from lyricsflip.models import GameConfig, GameMode
from lyricsflip.services.quiz.controller import RoundController
from lyricsflip.services.quiz.errors import ConfigurationError
from lyricsflip.services.quiz.provider import CatalogLyricProvider
from lyricsflip.services.quiz.scheduler import BackgroundScheduler, ManualScheduler
from lyricsflip.services.quiz.session import GameSession


@dataclass
class QuizGame:
    game_code: str
    game_mode: GameMode
    config: GameConfig
    session: GameSession
    controller: RoundController
    provider: CatalogLyricProvider
    unsubscribers: List[Callable[[], None]] = field(default_factory=list)
    last_seen: float = field(default_factory=time.monotonic)


class QuizRegistry:
    """Owns one GameSession + RoundController per running game, keyed by game code."""

    def __init__(self, app=None, socketio=None):
        self._games: Dict[str, QuizGame] = {}
        self._lock = threading.Lock()
        self.scheduler = None
        if app is not None:
            self.init_app(app, socketio)

    def init_app(self, app, socketio) -> None:
        self._config = app.config
        self._logger = app.logger
        self._socketio = socketio
        with self._lock:
            self._games = {}
        if app.config.get('TESTING'):
            # Fetches resolve inline; reveal/flip/clock wait for run_pending().
            self.scheduler = ManualScheduler(run_spawned_inline=True)
        else:
            self.scheduler = BackgroundScheduler(socketio)
        app.extensions['lyricsflip'] = self

    # ---- config ----

    def genres(self) -> List[str]:
        return self._make_provider('Easy').genres()

    def config_for_mode(self, game_mode, data: Optional[dict] = None) -> GameConfig:
        """Build the session config for a game mode from request data plus configured defaults."""
        mode = GameMode.parse(game_mode)
        data = dict(data or {})
        cfg = self._config
        values = {
            'odds': cfg.get('QUICK_GAME_ODDS', 1),
            'wager_amount': cfg.get('QUICK_GAME_WAGER', 0),
            'max_rounds': cfg.get('QUIZ_MAX_ROUNDS', 10),
            'passing_score': cfg.get('QUIZ_PASSING_SCORE', 6),
            'timer_scope': cfg.get('QUIZ_TIMER_SCOPE', 'session'),
        }
        if mode is GameMode.QUICK_GAME:
            values.update({
                'genre': cfg.get('QUICK_GAME_GENRE', 'Pop'),
                'difficulty': cfg.get('QUICK_GAME_DIFFICULTY', 'Easy'),
                'duration': cfg.get('QUICK_GAME_DURATION', '5 mins'),
            })
        values.update({k: v for k, v in data.items() if v is not None})
        config = GameConfig.from_dict(values)
        known = {g.lower() for g in self.genres()}
        if config.genre.lower() not in known:
            raise ConfigurationError(f"Unknown genre: {config.genre!r}")
        return config

    def _make_provider(self, difficulty: str) -> CatalogLyricProvider:
        counts = self._config.get('OPTION_COUNTS') or {}
        return CatalogLyricProvider(
            option_count=counts.get(difficulty, 4),
            seed=self._config.get('PROVIDER_SEED'),
        )

    # ---- lifecycle ----

    def create_game(self, config: GameConfig, game_mode=GameMode.QUICK_GAME) -> QuizGame:
        self.evict_idle()
        session = GameSession(logger=self._logger)
        session.start_game(config)
        code = self._reserve_code()
        provider = self._make_provider(config.difficulty.value)
        tick_interval = None
        if self._config.get('TIMER_ENABLED', True):
            tick_interval = float(self._config.get('TICK_INTERVAL_SEC', 1))
        controller = RoundController(
            session,
            provider,
            config.genre,
            self.scheduler,
            reveal_dwell=float(self._config.get('REVEAL_DWELL_SEC', 1.5)),
            flip_duration=float(self._config.get('FLIP_DURATION_SEC', 0.6)),
            tick_interval=tick_interval,
            retries=int(self._config.get('PROVIDER_RETRIES', 1)),
            logger=self._logger,
            game_code=code,
        )
        game = QuizGame(code, GameMode.parse(game_mode), config, session, controller, provider)
        with self._lock:
            self._games[code] = game
        game.unsubscribers.append(session.subscribe(lambda _snapshot: self.broadcast(code)))
        game.unsubscribers.append(controller.subscribe(lambda _controller: self.broadcast(code)))
        self._logger.info(f"[create] game={code} mode={game.game_mode.value} genre={config.genre}")
        controller.start()
        return game

    def get(self, game_code: str) -> Optional[QuizGame]:
        if not game_code:
            return None
        with self._lock:
            game = self._games.get(game_code.upper())
            if game:
                game.last_seen = time.monotonic()
            return game

    def restart(self, game_code: str) -> Optional[QuizGame]:
        """Explicit restart: creation config, fresh counters, first round reloaded."""
        game = self.get(game_code)
        if not game:
            return None
        game.session.start_game(game.config, restart=True)
        game.controller.start()
        return game

    def reset(self, game_code: str) -> Optional[QuizGame]:
        game = self.get(game_code)
        if game:
            game.controller.reset()
        return game

    def close(self, game_code: str) -> Optional[QuizGame]:
        with self._lock:
            game = self._games.pop((game_code or '').upper(), None)
        if not game:
            return None
        game.controller.close()
        for unsubscribe in game.unsubscribers:
            unsubscribe()
        self._logger.info(f"[close] game={game.game_code}")
        return game

    def evict_idle(self, now: Optional[float] = None) -> List[str]:
        """Close games nobody has touched for GAME_IDLE_TTL_SEC. Returns the evicted codes."""
        ttl = self._config.get('GAME_IDLE_TTL_SEC')
        if not ttl:
            return []
        now = time.monotonic() if now is None else now
        with self._lock:
            stale = [code for code, game in self._games.items() if now - game.last_seen > ttl]
        for code in stale:
            self._logger.info(f"[evict] game={code} idle_ttl={ttl}")
            self.close(code)
        return stale

    def state(self, game_code: str) -> Optional[dict]:
        game = self.get(game_code)
        if not game:
            return None
        return {
            'game_code': game.game_code,
            'game_mode': game.game_mode.value,
            'session': game.session.to_dict(),
            'round': game.controller.to_dict(),
            'durations': {
                'reveal': float(self._config.get('REVEAL_DWELL_SEC', 1.5)),
                'flip': float(self._config.get('FLIP_DURATION_SEC', 0.6)),
                'tick': float(self._config.get('TICK_INTERVAL_SEC', 1)),
            },
        }

    def broadcast(self, game_code: str) -> None:
        payload = self.state(game_code)
        if payload is None or self._socketio is None:
            return
        self._socketio.emit('state_update', payload, to=f"game:{game_code}", namespace='/ws')

    def _reserve_code(self, length: int = 4) -> str:
        """Generate a unique, short game code."""
        with self._lock:
            while True:
                code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
                if code not in self._games:
                    return code
