"""ThrottledAction — debounced, single-flight runner for one async action.

States::

    idle --queue()--> pending --timer--> running --done--> idle
      \\________________ disarm() (from any state) ________> disarmed

- ``queue()`` arms one timer; further calls while it is armed are no-ops,
  so a burst of triggers costs a single execution.
- ``run()`` never overlaps itself. A call that arrives while the action is
  running re-arms the timer instead, so the trailing change is still saved.
- Failures are recorded in :attr:`ThrottledAction.last_error` and announced
  to ``ERROR`` listeners. They are never raised to the caller.
- ``disarm()`` is terminal. It does not cancel a run already in progress.
- A run that exceeds the timeout is reported as failed but not cancelled:
  worker threads cannot be interrupted. The next run waits for it (up to
  the timeout again) before starting, and fails instead of overlapping.

INVARIANT: at most one execution of the action is in flight at any time.

Must be used from inside a running asyncio event loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum

from jumpnet.domain.errors import PersistenceFailure

logger = logging.getLogger(__name__)

type Action = Callable[[], Awaitable[None] | None]
type ActionListener = Callable[[ActionEvent, PersistenceFailure | None], None]


class ActionEvent(StrEnum):
    """Observable occurrences of a :class:`ThrottledAction`."""

    QUEUED = "queued"
    BEFORE_RUN = "before_run"
    ERROR = "error"
    AFTER_RUN = "after_run"


class ThrottledAction:
    """Debounced single-flight executor.

    Parameters:
        callback: The action. May be sync or return an awaitable.
        rate_ms: Debounce delay armed by :meth:`queue`.
        timeout: Seconds after which a running action is abandoned and
            recorded as a failure. ``None`` waits forever.
    """

    def __init__(
        self,
        callback: Action,
        *,
        rate_ms: int,
        timeout: float | None = None,
    ) -> None:
        self._callback = callback
        self._rate_ms = rate_ms
        self._timeout = timeout
        self._timer: asyncio.TimerHandle | None = None
        self._running = False
        self._disarmed = False
        self._last_error: PersistenceFailure | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._tasks: set[asyncio.Task[None]] = set()
        # A timed-out execution that is still finishing in the background.
        self._straggler: asyncio.Future[object] | None = None
        self._listeners: dict[ActionEvent, list[ActionListener]] = {e: [] for e in ActionEvent}

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def last_error(self) -> PersistenceFailure | None:
        return self._last_error

    @property
    def pending(self) -> bool:
        return self._timer is not None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def disarmed(self) -> bool:
        return self._disarmed

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, event: ActionEvent, listener: ActionListener) -> Callable[[], None]:
        """Call *listener* on every *event*. Returns an unsubscribe callable."""
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def _emit(self, event: ActionEvent, error: PersistenceFailure | None = None) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(event, error)
            except Exception:
                logger.warning("Listener for %s failed", event, exc_info=True)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def queue(self) -> None:
        """Arm the debounce timer unless it is already armed."""
        if self._disarmed or self._timer is not None:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._rate_ms / 1000, self._fire)
        self._emit(ActionEvent.QUEUED)

    def _fire(self) -> None:
        self._timer = None
        task = asyncio.get_running_loop().create_task(self.run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def run(self) -> None:
        """Execute the action now, or re-arm the timer if it is already running."""
        if self._disarmed:
            return
        if self._running:
            self.queue()
            return

        self._running = True
        self._idle.clear()
        try:
            try:
                self._emit(ActionEvent.BEFORE_RUN)
                await self._invoke()
            except Exception as exc:
                self._record_failure(exc)
            self._emit(ActionEvent.AFTER_RUN)
        finally:
            self._running = False
            self._idle.set()

    async def _invoke(self) -> None:
        await self._wait_straggler()
        result = self._callback()
        if not inspect.isawaitable(result):
            return
        if self._timeout is None:
            await result
            return
        future = asyncio.ensure_future(result)
        try:
            await asyncio.wait_for(asyncio.shield(future), self._timeout)
        except TimeoutError as exc:
            raise PersistenceFailure(f"Save timed out after {self._timeout}s") from exc
        finally:
            if not future.done():
                self._straggler = future
                future.add_done_callback(self._reap_straggler)

    async def _wait_straggler(self) -> None:
        straggler = self._straggler
        if straggler is None:
            return
        if not straggler.done():
            await asyncio.wait({straggler}, timeout=self._timeout)
        if not straggler.done():
            raise PersistenceFailure(
                f"Previous save still running after a further {self._timeout}s"
            )
        self._straggler = None

    @staticmethod
    def _reap_straggler(future: asyncio.Future[object]) -> None:
        if not future.cancelled() and future.exception() is not None:
            logger.warning("Timed-out save later failed: %s", future.exception())

    def _record_failure(self, exc: Exception) -> None:
        if isinstance(exc, PersistenceFailure):
            failure = exc
        else:
            failure = PersistenceFailure(f"Save failed: {exc}")
            failure.__cause__ = exc
        self._last_error = failure
        logger.debug("Throttled action failed: %s", failure)
        self._emit(ActionEvent.ERROR, failure)

    async def wait_idle(self) -> None:
        """Wait until no execution is in flight."""
        while self._running:
            await self._idle.wait()

    async def flush(self) -> None:
        """Run once more with the latest state, after any in-flight run.

        Cancels an armed timer first: the flush supersedes it.
        """
        if self._disarmed:
            return
        self._cancel_timer()
        await self.wait_idle()
        await self.run()

    def disarm(self) -> None:
        """Enter the terminal state. Future ``queue``/``run`` calls do nothing."""
        self._disarmed = True
        self._cancel_timer()
