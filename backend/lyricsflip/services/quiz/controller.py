import logging
import threading
from enum import Enum
from typing import Callable, List, Optional

from lyricsflip.models import GameResult, LyricOption, LyricRound, TimerScope
from .errors import ProviderUnavailable, QuizError, SessionStateError, StaleFetchIgnored
from .provider import LyricProvider, validate_round
from .session import GameSession


log = logging.getLogger(__name__)

CURRENT = 'current'
NEXT = 'next'


class Phase(Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    ROUND_ACTIVE = 'round_active'
    REVEALED = 'revealed'
    FINISHED = 'finished'
    FAILED = 'failed'
    CLOSED = 'closed'


class RoundController:
    """Drives one round at a time for a genre on top of a GameSession.

    Pipeline: loading -> round_active -> revealed -> (round_active | finished).

    - A round accepts one answer. The selection path and the timeout path
      both go through _commit under the controller lock, so whichever runs
      first locks the round and the other becomes a no-op.
    - Every lyric fetch is stamped with the generation current when it was
      requested. A fetch that resolves after the controller moved on is
      discarded (StaleFetchIgnored, logged only).
    - The answer of the current round is only exposed once the round has
      been answered or timed out.
    """

    def __init__(
        self,
        session: GameSession,
        provider: LyricProvider,
        genre: str,
        scheduler,
        reveal_dwell: float = 1.5,
        flip_duration: float = 0.6,
        tick_interval: Optional[float] = None,
        retries: int = 1,
        logger: Optional[logging.Logger] = None,
        game_code: Optional[str] = None,
    ):
        self._session = session
        self._provider = provider
        self._genre = genre
        self._scheduler = scheduler
        self._reveal_dwell = reveal_dwell
        self._flip_duration = flip_duration
        self._tick_interval = tick_interval
        self._retries = max(0, int(retries))
        self._logger = logger or log
        self._tag = f"game={game_code}" if game_code else f"genre={genre}"

        self._lock = threading.RLock()
        self._subscribers: List[Callable[['RoundController'], None]] = []
        self._phase = Phase.IDLE
        self._generation = 0
        self._clock_token = 0
        self._current_lyric: Optional[LyricRound] = None
        self._next_lyric: Optional[LyricRound] = None
        self._game_result: Optional[GameResult] = None
        self._error: Optional[QuizError] = None
        self._next_error: Optional[QuizError] = None
        self._clear_round()

    # ---- read-only projection ----

    @property
    def genre(self) -> str:
        return self._genre

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current_lyric(self) -> Optional[LyricRound]:
        return self._current_lyric

    @property
    def next_lyric(self) -> Optional[LyricRound]:
        return self._next_lyric

    @property
    def selected_option(self) -> Optional[LyricOption]:
        return self._selected_option

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected_index

    @property
    def correct_option(self) -> Optional[LyricOption]:
        return self._correct_option

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    @property
    def is_card_flipped(self) -> bool:
        return self._is_card_flipped

    @property
    def game_result(self) -> Optional[GameResult]:
        return self._game_result

    @property
    def error(self) -> Optional[QuizError]:
        return self._error

    @property
    def is_game_started(self) -> bool:
        return self._session.is_game_started

    def to_dict(self):
        with self._lock:
            revealed = self._correct_option is not None
            error = None
            if self._error is not None:
                error = {
                    'type': type(self._error).__name__,
                    'message': str(self._error),
                    'retryable': self._error.retryable,
                }
            return {
                'phase': self._phase.value,
                'generation': self._generation,
                'is_game_started': self._session.is_game_started,
                'current_lyric': self._current_lyric.to_dict(reveal=revealed) if self._current_lyric else None,
                'next_lyric': {'text': self._next_lyric.text} if self._next_lyric else None,
                'selected_option': self._selected_option.to_dict() if self._selected_option else None,
                'selected_index': self._selected_index,
                'correct_option': self._correct_option.to_dict() if self._correct_option else None,
                'timed_out': self._timed_out,
                'is_card_flipped': self._is_card_flipped,
                'game_result': self._game_result.to_dict() if self._game_result else None,
                'error': error,
            }

    def subscribe(self, callback: Callable[['RoundController'], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    # ---- entry points ----

    def start(self) -> None:
        """Load the first round of the active session and start the countdown."""
        with self._lock:
            if not self._session.is_game_started:
                raise SessionStateError('Start a session before starting rounds')
            self._stop_clock()
            self._generation += 1
            self._clear_round()
            self._current_lyric = None
            self._next_lyric = None
            self._next_error = None
            self._game_result = None
            self._error = None
            self._phase = Phase.LOADING
            self._logger.info(f"[round-load] {self._tag} gen={self._generation}")
            self._notify()
            self._request(CURRENT)
            self._start_clock()

    def select_option(self, option: LyricOption, index: Optional[int] = None) -> bool:
        """Lock in an answer for the active round. False when it was ignored."""
        with self._lock:
            if (
                option is None
                or self._phase is not Phase.ROUND_ACTIVE
                or self._answered
                or self._current_lyric is None
                or option not in self._current_lyric.options
                or not self._session.is_game_started
            ):
                self._logger.debug(f"[select-ignored] {self._tag} phase={self._phase.value} answered={self._answered}")
                return False
            self._commit(option, index)
            return True

    def tick(self) -> bool:
        """One countdown step. True when the clock ran out on this step."""
        with self._lock:
            if not self._session.is_game_started:
                return False
            scope = self._session.config.timer_scope
            if scope is TimerScope.ROUND and self._phase is not Phase.ROUND_ACTIVE:
                return False
            if not self._session.tick():
                return False
            self._logger.info(f"[timer-expired] {self._tag} scope={scope.value} phase={self._phase.value}")
            if self._phase is Phase.ROUND_ACTIVE and not self._answered and self._current_lyric is not None:
                self._commit(None, None)
            else:
                self._session.expire()
                self._finish()
                self._notify()
            return True

    def retry(self) -> bool:
        """Reload the round after a recoverable provider failure."""
        with self._lock:
            if (
                self._phase is not Phase.FAILED
                or self._error is None
                or not self._error.retryable
                or not self._session.is_game_started
            ):
                return False
            self._logger.info(f"[retry] {self._tag} gen={self._generation}")
            self._error = None
            self._generation += 1
            self._phase = Phase.LOADING
            self._notify()
            self._request(CURRENT)
            return True

    def close(self) -> None:
        """Leave the game view: cancel fetches, stop the clock, drop round state."""
        with self._lock:
            self._generation += 1
            self._stop_clock()
            self._clear_round()
            self._current_lyric = None
            self._next_lyric = None
            self._next_error = None
            self._error = None
            self._phase = Phase.CLOSED
            self._logger.info(f"[close] {self._tag}")
            self._notify()

    def reset(self) -> None:
        """Reset the session and discard whatever round was in flight."""
        with self._lock:
            self._generation += 1
            self._stop_clock()
            self._clear_round()
            self._current_lyric = None
            self._next_lyric = None
            self._next_error = None
            self._game_result = None
            self._error = None
            self._phase = Phase.IDLE
            self._session.reset()
            self._notify()

    # ---- round transitions ----

    def _clear_round(self) -> None:
        self._selected_option: Optional[LyricOption] = None
        self._selected_index: Optional[int] = None
        self._correct_option: Optional[LyricOption] = None
        self._timed_out = False
        self._answered = False
        self._is_card_flipped = False

    def _activate_round(self) -> None:
        self._phase = Phase.ROUND_ACTIVE
        if self._session.config.timer_scope is TimerScope.ROUND:
            self._session.restart_clock()
        self._logger.info(
            f"[round-start] {self._tag} round={self._session.round_index + 1}/{self._session.max_rounds} gen={self._generation}"
        )

    def _commit(self, option: Optional[LyricOption], index: Optional[int]) -> None:
        self._answered = True
        answer = self._current_lyric.answer
        self._selected_option = option
        self._selected_index = index
        self._correct_option = answer
        self._timed_out = option is None
        correct = option is not None and option == answer
        time_expired = self._timed_out and self._session.config.timer_scope is TimerScope.SESSION
        self._session.record_answer(correct, time_expired=time_expired)

        if not self._session.is_game_started:
            self._finish()
        else:
            self._phase = Phase.REVEALED
            self._scheduler.call_later(self._reveal_dwell, self._flip, self._generation)
        self._notify()

    def _flip(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._phase is not Phase.REVEALED:
                return
            self._is_card_flipped = True
            self._notify()
            self._scheduler.call_later(self._flip_duration, self._advance, generation)

    def _advance(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._phase is not Phase.REVEALED:
                return
            if not self._session.is_game_started:
                self._finish()
                self._notify()
                return
            upcoming = self._next_lyric
            next_error = self._next_error
            self._generation += 1
            self._clear_round()
            self._next_lyric = None
            self._next_error = None
            if upcoming is None and next_error is not None:
                self._current_lyric = None
                self._fail(self._generation, next_error)
            elif upcoming is not None:
                self._current_lyric = upcoming
                self._activate_round()
                self._notify()
                self._request(NEXT)
            else:
                self._current_lyric = None
                self._phase = Phase.LOADING
                self._notify()
                self._request(CURRENT)

    def _finish(self) -> None:
        self._phase = Phase.FINISHED
        self._game_result = self._session.result
        self._stop_clock()
        # Nothing fetched from here on is wanted.
        self._generation += 1
        self._next_lyric = None
        self._next_error = None
        self._logger.info(f"[finish] {self._tag} result={self._game_result}")

    # ---- fetching ----

    def _request(self, slot: str) -> None:
        self._scheduler.spawn(self._fetch, self._generation, slot)

    def _fetch(self, generation: int, slot: str) -> None:
        try:
            lyric = validate_round(self._load_round())
            self._deliver(generation, slot, lyric)
        except StaleFetchIgnored as exc:
            self._logger.debug(f"[fetch-stale] {self._tag} slot={slot} {exc}")
        except QuizError as exc:
            self._fetch_failed(generation, slot, exc)

    def _load_round(self) -> LyricRound:
        attempts = self._retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self._provider.next(self._genre)
            except ProviderUnavailable as exc:
                if attempt >= attempts:
                    raise
                self._logger.warning(f"[fetch-retry] {self._tag} attempt={attempt} error={exc}")

    def _deliver(self, generation: int, slot: str, lyric: LyricRound) -> None:
        with self._lock:
            if generation != self._generation:
                raise StaleFetchIgnored(generation, self._generation)
            if slot == CURRENT:
                if self._phase is not Phase.LOADING:
                    raise StaleFetchIgnored(generation, self._generation)
                self._current_lyric = lyric
                self._activate_round()
                self._notify()
                self._request(NEXT)
            else:
                if self._phase not in (Phase.ROUND_ACTIVE, Phase.REVEALED):
                    raise StaleFetchIgnored(generation, self._generation)
                self._next_lyric = lyric
                self._notify()

    def _fetch_failed(self, generation: int, slot: str, exc: QuizError) -> None:
        with self._lock:
            if generation != self._generation:
                self._logger.debug(f"[fetch-stale] {self._tag} slot={slot} failed after generation moved on: {exc}")
                return
            if slot == NEXT:
                self._logger.warning(
                    f"[prefetch-failed] {self._tag} gen={generation} error={exc} retryable={exc.retryable}"
                )
                # Recoverable: the round is loaded again on promotion.
                # Otherwise the error is held and surfaced on promotion.
                if not exc.retryable:
                    self._next_error = exc
                return
            self._fail(generation, exc)

    def _fail(self, generation: int, exc: QuizError) -> None:
        self._phase = Phase.FAILED
        self._error = exc
        self._logger.error(
            f"[round-failed] {self._tag} gen={generation} error={type(exc).__name__}: {exc} retryable={exc.retryable}"
        )
        self._notify()

    # ---- countdown ----

    def _start_clock(self) -> None:
        if self._tick_interval is None:
            return
        self._clock_token += 1
        self._scheduler.call_later(self._tick_interval, self._on_clock, self._clock_token)

    def _stop_clock(self) -> None:
        self._clock_token += 1

    def _on_clock(self, token: int) -> None:
        with self._lock:
            if token != self._clock_token or not self._session.is_game_started:
                return
            self.tick()
            if token == self._clock_token and self._session.is_game_started:
                self._scheduler.call_later(self._tick_interval, self._on_clock, token)
