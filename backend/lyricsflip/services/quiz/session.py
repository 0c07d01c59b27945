import logging
import threading
from typing import Callable, List, Optional

from lyricsflip.models import GameConfig, GameResult, SessionSnapshot
from .errors import SessionStateError
from .scoring import is_win


log = logging.getLogger(__name__)


class GameSession:
    """Authoritative score/time/config state for one running game.

    Mutated only through start_game, tick, record_answer, expire,
    restart_clock and reset. Every mutation notifies subscribers with a
    fresh SessionSnapshot. Keeps 0 <= score <= round_index <= max_rounds.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or log
        self._lock = threading.RLock()
        self._subscribers: List[Callable[[SessionSnapshot], None]] = []
        self._config: Optional[GameConfig] = None
        self._round_index = 0
        self._score = 0
        self._time_left = 0
        self._is_game_started = False
        self._result: Optional[GameResult] = None

    # ---- read-only projection ----

    @property
    def config(self) -> Optional[GameConfig]:
        return self._config

    @property
    def round_index(self) -> int:
        return self._round_index

    @property
    def max_rounds(self) -> int:
        return self._config.max_rounds if self._config else 0

    @property
    def score(self) -> int:
        return self._score

    @property
    def time_left(self) -> int:
        return self._time_left

    @property
    def is_game_started(self) -> bool:
        return self._is_game_started

    @property
    def result(self) -> Optional[GameResult]:
        return self._result

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                config=self._config,
                round_index=self._round_index,
                max_rounds=self.max_rounds,
                score=self._score,
                time_left=self._time_left,
                is_game_started=self._is_game_started,
                result=self._result,
            )

    def to_dict(self):
        return self.snapshot().to_dict()

    def subscribe(self, callback: Callable[[SessionSnapshot], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            callback(snapshot)

    # ---- mutations ----

    def start_game(self, config: GameConfig, restart: bool = False) -> bool:
        """Start a session. While one is active only an explicit restart wins."""
        config.validate()
        with self._lock:
            if self._is_game_started and not restart:
                self._logger.info(f"[start-skip] session already active round={self._round_index}")
                return False
            self._config = config
            self._round_index = 0
            self._score = 0
            self._time_left = config.duration
            self._is_game_started = True
            self._result = None
            self._logger.info(
                f"[start] genre={config.genre} difficulty={config.difficulty.value} "
                f"rounds={config.max_rounds} duration={config.duration}s scope={config.timer_scope.value}"
            )
        self._notify()
        return True

    def tick(self) -> bool:
        """Take one second off the clock. True on the tick that reaches zero."""
        with self._lock:
            if not self._is_game_started or self._time_left <= 0:
                return False
            self._time_left -= 1
            expired = self._time_left == 0
        self._notify()
        return expired

    def restart_clock(self) -> None:
        with self._lock:
            if not self._is_game_started:
                return
            self._time_left = self._config.duration
        self._notify()

    def record_answer(self, correct: bool, time_expired: bool = False) -> None:
        with self._lock:
            if not self._is_game_started:
                raise SessionStateError('No active session to record an answer on')
            self._round_index += 1
            if correct:
                self._score += 1
            self._logger.info(
                f"[answer] round={self._round_index}/{self.max_rounds} correct={correct} score={self._score}"
            )
            if time_expired:
                self._finish(False, time_expired=True)
            elif self._round_index >= self.max_rounds:
                self._finish(is_win(self._score, self._config.passing_score))
        self._notify()

    def expire(self) -> None:
        """End the session as a loss because the clock ran out."""
        with self._lock:
            if not self._is_game_started:
                return
            self._finish(False, time_expired=True)
        self._notify()

    def reset(self) -> None:
        with self._lock:
            self._config = None
            self._round_index = 0
            self._score = 0
            self._time_left = 0
            self._is_game_started = False
            self._result = None
            self._logger.info('[reset] session cleared')
        self._notify()

    def _finish(self, won: bool, time_expired: bool = False) -> None:
        self._is_game_started = False
        self._result = GameResult(
            is_win=won,
            score=self._score,
            max_rounds=self.max_rounds,
            time_expired=time_expired,
        )
        self._logger.info(
            f"[finish] score={self._score}/{self.max_rounds} win={won} time_expired={time_expired}"
        )
