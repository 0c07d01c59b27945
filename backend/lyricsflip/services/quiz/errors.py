class QuizError(Exception):
    """Base class for quiz domain errors."""

    retryable = False


class ConfigurationError(QuizError):
    """A game config was rejected; the session is left unstarted."""


class SessionStateError(QuizError):
    """An operation needs a session state the store is not in."""


class DataIntegrityError(QuizError):
    """A lyric round does not carry exactly one correct option."""


class ProviderUnavailable(QuizError):
    """The lyric source failed to produce a round."""

    retryable = True


class StaleFetchIgnored(QuizError):
    """A fetch resolved for a round generation the controller already left."""

    def __init__(self, fetched_generation: int, current_generation: int):
        super().__init__(
            f"fetch for generation {fetched_generation} resolved at generation {current_generation}"
        )
        self.fetched_generation = fetched_generation
        self.current_generation = current_generation
