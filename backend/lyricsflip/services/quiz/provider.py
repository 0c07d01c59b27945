import random
from typing import Dict, List, Optional, Protocol

from lyricsflip.data.catalog import CATALOG
from lyricsflip.models import LyricOption, LyricRound
from .errors import DataIntegrityError, ProviderUnavailable


class LyricProvider(Protocol):
    """Source of lyric rounds for a genre."""

    def next(self, genre: str) -> LyricRound:
        ...

    def peek(self, genre: str) -> LyricRound:
        ...

    def genres(self) -> List[str]:
        ...


def validate_round(lyric: LyricRound) -> LyricRound:
    """Reject rounds whose options do not hold exactly one correct answer."""
    if not lyric.options:
        raise DataIntegrityError(f"Round for {lyric.title!r} has no options")
    if len(set(lyric.options)) != len(lyric.options):
        raise DataIntegrityError(f"Round for {lyric.title!r} has duplicate options")
    matches = sum(1 for o in lyric.options if o == lyric.answer)
    if matches != 1:
        raise DataIntegrityError(
            f"Round for {lyric.title!r} by {lyric.artist!r} is missing its correct option"
        )
    return lyric


class CatalogLyricProvider:
    """Builds rounds from the bundled catalogue.

    Options are the correct song plus distractors from the same genre
    (topped up from other genres when the genre is small), shuffled once
    when the round is built. peek() builds the upcoming round ahead of
    time so next() hands out exactly what was peeked.
    """

    def __init__(self, catalog: Optional[Dict[str, list]] = None, option_count: int = 4,
                 seed=None):
        self._catalog = catalog if catalog is not None else CATALOG
        self._option_count = max(1, int(option_count))
        self._rng = random.Random(seed)
        self._upcoming: Dict[str, LyricRound] = {}
        self._last_title: Dict[str, str] = {}

    def genres(self) -> List[str]:
        return sorted(self._catalog.keys())

    def next(self, genre: str) -> LyricRound:
        key = self._genre_key(genre)
        lyric = self._upcoming.pop(key, None) or self._build(key)
        self._last_title[key] = lyric.title
        return lyric

    def peek(self, genre: str) -> LyricRound:
        key = self._genre_key(genre)
        if key not in self._upcoming:
            self._upcoming[key] = self._build(key)
        return self._upcoming[key]

    def _genre_key(self, genre: str) -> str:
        wanted = str(genre or '').strip().lower()
        for key in self._catalog:
            if key.lower() == wanted:
                if not self._catalog[key]:
                    break
                return key
        raise ProviderUnavailable(f"No lyrics available for genre {genre!r}")

    def _build(self, genre: str) -> LyricRound:
        entries = self._catalog[genre]
        candidates = entries
        if len(entries) > 1:
            candidates = [e for e in entries if e['title'] != self._last_title.get(genre)]
        picked = self._rng.choice(candidates)
        answer = LyricOption(picked['title'], picked['artist'])

        distractors = self._distractors(genre, answer)
        options = [answer] + distractors[:self._option_count - 1]
        self._rng.shuffle(options)
        return LyricRound(text=picked['text'], title=answer.title, artist=answer.artist,
                          options=tuple(options))

    def _distractors(self, genre: str, answer: LyricOption) -> List[LyricOption]:
        def pool(entries):
            seen = []
            for e in entries:
                option = LyricOption(e['title'], e['artist'])
                if option != answer and option not in seen:
                    seen.append(option)
            return seen

        same_genre = pool(self._catalog[genre])
        self._rng.shuffle(same_genre)
        if len(same_genre) >= self._option_count - 1:
            return same_genre
        others = pool(e for key, entries in self._catalog.items() if key != genre for e in entries)
        others = [o for o in others if o not in same_genre]
        self._rng.shuffle(others)
        return same_genre + others
