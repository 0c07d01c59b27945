import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from lyricsflip.services.quiz import scoring
from lyricsflip.services.quiz.errors import ConfigurationError


class Difficulty(Enum):
    EASY = 'Easy'
    MEDIUM = 'Medium'
    HARD = 'Hard'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        for member in cls:
            if str(value or '').strip().lower() == member.value.lower():
                return member
        raise ConfigurationError(f"Unknown difficulty: {value!r}")


class TimerScope(Enum):
    ROUND = 'round'
    SESSION = 'session'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or '').strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown timer scope: {value!r}") from None


class GameMode(Enum):
    QUICK_GAME = 'quick-game'
    SINGLE_PLAYER = 'single-player'
    MULTI_PLAYER = 'multi-player'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or 'quick-game').strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown game mode: {value!r}") from None


_DURATION_RE = re.compile(r'^\s*(\d+)\s*([a-z]*)\s*$')
_DURATION_UNITS = {
    '': 1, 's': 1, 'sec': 1, 'secs': 1, 'second': 1, 'seconds': 1,
    'm': 60, 'min': 60, 'mins': 60, 'minute': 60, 'minutes': 60,
}


def parse_duration(value) -> int:
    """Turn a duration bucket ("5 mins", "30 secs") or a number into seconds."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        seconds = int(value)
    else:
        match = _DURATION_RE.match(str(value or '').lower())
        if not match or match.group(2) not in _DURATION_UNITS:
            raise ConfigurationError(f"Invalid duration: {value!r}")
        seconds = int(match.group(1)) * _DURATION_UNITS[match.group(2)]
    if seconds <= 0:
        raise ConfigurationError('Duration must be positive')
    return seconds


def _number(data: dict, key: str) -> float:
    try:
        return float(data[key])
    except KeyError:
        raise ConfigurationError(f"{key} is required") from None
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number") from None


def _integer(data: dict, key: str) -> int:
    value = data.get(key)
    if value is None:
        raise ConfigurationError(f"{key} is required")
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be an integer") from None


@dataclass(frozen=True)
class GameConfig:
    """Parameters of one session. Every field is supplied by the caller."""
    genre: str
    difficulty: Difficulty
    duration: int  # seconds
    odds: float
    wager_amount: float
    max_rounds: int
    passing_score: int
    timer_scope: TimerScope

    @classmethod
    def from_dict(cls, data: dict) -> 'GameConfig':
        config = cls(
            genre=str(data.get('genre') or '').strip(),
            difficulty=Difficulty.parse(data.get('difficulty')),
            duration=parse_duration(data.get('duration')),
            odds=_number(data, 'odds'),
            wager_amount=_number(data, 'wager_amount'),
            max_rounds=_integer(data, 'max_rounds'),
            passing_score=_integer(data, 'passing_score'),
            timer_scope=TimerScope.parse(data.get('timer_scope')),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.genre:
            raise ConfigurationError('genre is required')
        if not isinstance(self.difficulty, Difficulty):
            raise ConfigurationError(f"Unknown difficulty: {self.difficulty!r}")
        if not isinstance(self.timer_scope, TimerScope):
            raise ConfigurationError(f"Unknown timer scope: {self.timer_scope!r}")
        if self.duration <= 0:
            raise ConfigurationError('duration must be positive')
        if not math.isfinite(self.odds) or not math.isfinite(self.wager_amount):
            raise ConfigurationError('odds and wager_amount must be finite numbers')
        if self.odds < 0:
            raise ConfigurationError('odds must not be negative')
        if self.wager_amount < 0:
            raise ConfigurationError('wager_amount must not be negative')
        if self.max_rounds <= 0:
            raise ConfigurationError('max_rounds must be positive')
        if not 0 <= self.passing_score <= self.max_rounds:
            raise ConfigurationError('passing_score must be between 0 and max_rounds')

    @property
    def pot_win(self) -> float:
        return scoring.pot_win(self.wager_amount, self.odds)

    def to_dict(self):
        return {
            'genre': self.genre,
            'difficulty': self.difficulty.value,
            'duration': self.duration,
            'odds': self.odds,
            'wager_amount': self.wager_amount,
            'max_rounds': self.max_rounds,
            'passing_score': self.passing_score,
            'timer_scope': self.timer_scope.value,
            'pot_win': self.pot_win,
        }


@dataclass(frozen=True)
class LyricOption:
    title: str
    artist: str

    @classmethod
    def from_dict(cls, data: dict) -> 'LyricOption':
        return cls(title=str(data.get('title') or ''), artist=str(data.get('artist') or ''))

    def to_dict(self):
        return {'title': self.title, 'artist': self.artist}


@dataclass(frozen=True)
class LyricRound:
    text: str
    title: str
    artist: str
    options: Tuple[LyricOption, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Options are fixed once the round is built.
        object.__setattr__(self, 'options', tuple(self.options))

    @property
    def answer(self) -> LyricOption:
        return LyricOption(self.title, self.artist)

    def to_dict(self, reveal: bool = False):
        payload = {
            'text': self.text,
            'options': [o.to_dict() for o in self.options],
        }
        if reveal:
            payload['title'] = self.title
            payload['artist'] = self.artist
        return payload


@dataclass(frozen=True)
class GameResult:
    is_win: bool
    score: int
    max_rounds: int
    time_expired: bool = False

    def to_dict(self):
        return {
            'is_win': self.is_win,
            'score': self.score,
            'max_rounds': self.max_rounds,
            'time_expired': self.time_expired,
        }


@dataclass(frozen=True)
class SessionSnapshot:
    config: Optional[GameConfig]
    round_index: int
    max_rounds: int
    score: int
    time_left: int
    is_game_started: bool
    result: Optional[GameResult]

    def to_dict(self):
        return {
            'game_config': self.config.to_dict() if self.config else None,
            'round_index': self.round_index,
            'max_rounds': self.max_rounds,
            'score': self.score,
            'time_left': self.time_left,
            'is_game_started': self.is_game_started,
            'result': self.result.to_dict() if self.result else None,
        }
