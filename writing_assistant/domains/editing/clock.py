"""
Источники времени для отложенных действий.

LoopClock работает поверх event loop asyncio. VirtualClock хранит время
вручную и запускает таймеры только по вызову advance(), поэтому тесты
планировщика не ждут реальных секунд.
"""

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopClock:
    """Часы event loop; таймеры ставятся через loop.call_later"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class VirtualTimer:
    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClock:
    """Ручные часы для тестов"""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._timers: List[Tuple[float, int, VirtualTimer]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._timers, (timer.deadline, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Число активных таймеров"""
        return sum(1 for _, _, timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Сдвиг времени с запуском всех таймеров, срок которых наступил.

        Таймеры срабатывают по порядку сроков, время на момент вызова
        колбэка равно сроку таймера. Таймеры, поставленные из колбэка,
        тоже срабатывают, если укладываются в интервал.
        """
        target = self._now + seconds
        while self._timers and self._timers[0][0] <= target:
            deadline, _, timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = deadline
            timer.callback()
        self._now = target
