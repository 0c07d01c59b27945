from typing import Callable, List, Tuple


class BackgroundScheduler:
    """Runs quiz work on Socket.IO background tasks.

    Works with whichever async mode the SocketIO server picked (threading,
    eventlet, gevent) since both spawning and sleeping go through it.
    """

    def __init__(self, socketio):
        self._socketio = socketio

    def spawn(self, fn: Callable, *args) -> None:
        self._socketio.start_background_task(fn, *args)

    def call_later(self, delay: float, fn: Callable, *args) -> None:
        def _runner():
            if delay > 0:
                self._socketio.sleep(delay)
            fn(*args)
        self._socketio.start_background_task(_runner)


class ManualScheduler:
    """Holds work until run_pending() is called.

    Used in TESTING so round pacing and the countdown only move when the
    caller says so. With run_spawned_inline, spawned work (lyric fetches)
    runs immediately and only delayed callbacks are queued.
    """

    def __init__(self, run_spawned_inline: bool = False):
        self.run_spawned_inline = run_spawned_inline
        self._spawned: List[Tuple[Callable, tuple]] = []
        self._delayed: List[Tuple[float, Callable, tuple]] = []

    def spawn(self, fn: Callable, *args) -> None:
        if self.run_spawned_inline:
            fn(*args)
        else:
            self._spawned.append((fn, args))

    def call_later(self, delay: float, fn: Callable, *args) -> None:
        self._delayed.append((delay, fn, args))

    @property
    def pending(self) -> int:
        return len(self._spawned) + len(self._delayed)

    def run_spawned(self) -> int:
        """Run queued spawned work only (fetches), oldest first."""
        batch, self._spawned = self._spawned, []
        for fn, args in batch:
            fn(*args)
        return len(batch)

    def run_pending(self) -> int:
        """Run everything queued so far. Work queued while running waits for the next call."""
        spawned, self._spawned = self._spawned, []
        delayed, self._delayed = self._delayed, []
        for fn, args in spawned:
            fn(*args)
        for _delay, fn, args in delayed:
            fn(*args)
        return len(spawned) + len(delayed)

    def run_until_idle(self, limit: int = 100) -> int:
        ran = 0
        for _ in range(limit):
            count = self.run_pending()
            if not count:
                break
            ran += count
        return ran
