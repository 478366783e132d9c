from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Awaitable, Callable, Hashable

from fleet_console.application.utils.countdown import countdown_for
from fleet_console.domain.entities.schedule import Countdown

TickCallback = Callable[[Countdown], "Awaitable[None] | None"]


@dataclass(frozen=True)
class CountdownInputs:
    date_value: Any
    time_text: str | None
    event: str


class CountdownHandle:
    """Cancellation token for one running countdown."""

    def __init__(self, inputs: CountdownInputs, task: asyncio.Task) -> None:
        self.inputs = inputs
        self._task = task
        self._cancelled = False

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        self._task.cancel()

    async def wait(self) -> None:
        try:
            await self._task
        except asyncio.CancelledError:
            pass


class CountdownTicker:
    """Recomputes a countdown on a fixed cadence, one asyncio task per row.

    Must be used from inside a running event loop. Changing a row's inputs
    cancels its task and starts a fresh one.
    """

    def __init__(
        self,
        timezone: tzinfo,
        interval: float = 1.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._timezone = timezone
        self._interval = interval
        self._clock = clock or (lambda: datetime.now(timezone))
        self._handles: dict[Hashable, CountdownHandle] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def active_keys(self) -> list[Hashable]:
        return [key for key, handle in self._handles.items() if not handle.done]

    def start(self, date_value: Any, time_text: str | None, event: str, on_tick: TickCallback) -> CountdownHandle:
        inputs = CountdownInputs(date_value=date_value, time_text=time_text, event=event)
        task = asyncio.get_running_loop().create_task(self._run(inputs, on_tick))
        return CountdownHandle(inputs, task)

    def track(
        self,
        key: Hashable,
        date_value: Any,
        time_text: str | None,
        event: str,
        on_tick: TickCallback,
    ) -> CountdownHandle:
        inputs = CountdownInputs(date_value=date_value, time_text=time_text, event=event)
        existing = self._handles.get(key)
        if existing is not None:
            if existing.inputs == inputs and not existing.done:
                return existing
            existing.cancel()

        handle = self.start(date_value, time_text, event, on_tick)
        self._handles[key] = handle
        return handle

    def cancel(self, key: Hashable) -> None:
        handle = self._handles.pop(key, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        for key in list(self._handles):
            self.cancel(key)

    async def _run(self, inputs: CountdownInputs, on_tick: TickCallback) -> None:
        while True:
            countdown = countdown_for(
                inputs.date_value,
                inputs.time_text,
                self._clock(),
                inputs.event,
                self._timezone,
            )
            try:
                result = on_tick(countdown)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self._logger.exception("Countdown callback failed", extra={"error": str(e)})
                return
            await asyncio.sleep(self._interval)
