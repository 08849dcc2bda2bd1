"""
Планировщик автосохранения открытого документа.

Состояния: IDLE -> PENDING -> SAVING -> (IDLE | PENDING).

Правки внутри окна тишины склеиваются: в хранилище уходит только последняя
версия содержимого на момент срабатывания таймера. После успешной записи
снимок в историю получает содержимое, сохраненное до начала серии правок.
Неудачное сохранение не повторяется автоматически: его повторит следующая
правка или ручное сохранение.
"""

import asyncio
import enum
import logging
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from writing_assistant.core.config import settings
from writing_assistant.core.logging import timed
from writing_assistant.domains.analysis import ReadabilityMetrics, score
from writing_assistant.domains.documents.entities import DEFAULT_TITLE, SavedDocument
from writing_assistant.domains.editing.clock import Clock, TimerHandle

logger = logging.getLogger(__name__)

PersistCallable = Callable[[uuid.UUID, str, str, ReadabilityMetrics], Awaitable[SavedDocument]]
SnapshotCallable = Callable[[uuid.UUID, str, ReadabilityMetrics], Awaitable[bool]]

SavedListener = Callable[[SavedDocument, bool], None]
FailedListener = Callable[[Exception], None]
StateListener = Callable[["SaveState"], None]


class SaveState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    SAVING = "saving"


@dataclass(frozen=True)
class SavePayload:
    """Что уйдет в хранилище при следующем сохранении"""
    content: str
    title: str


class SaveScheduler:
    """Машина состояний автосохранения одного документа"""

    def __init__(
        self,
        document_id: uuid.UUID,
        persist: PersistCallable,
        snapshot: SnapshotCallable,
        clock: Clock,
        content: str = "",
        title: str = DEFAULT_TITLE,
        delay: Optional[float] = None
    ):
        self.document_id = document_id
        self.clock = clock
        self.delay = settings.autosave_delay if delay is None else delay

        self._persist = persist
        self._snapshot = snapshot

        self.content = content
        self.title = title
        # Последнее успешно сохраненное содержимое: база текущей серии правок
        self.base_content = content
        self._base_metrics: Optional[ReadabilityMetrics] = None

        self.state = SaveState.IDLE
        self.last_saved_at = None
        self.last_error: Optional[Exception] = None

        self._payload: Optional[SavePayload] = None
        self._dirty = False
        self._manual = False
        self._closed = False
        self._timer: Optional[TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

        self._saved_listeners: List[SavedListener] = []
        self._failed_listeners: List[FailedListener] = []
        self._state_listeners: List[StateListener] = []

    def on_saved(self, listener: SavedListener) -> SavedListener:
        self._saved_listeners.append(listener)
        return listener

    def on_failed(self, listener: FailedListener) -> FailedListener:
        self._failed_listeners.append(listener)
        return listener

    def on_state_change(self, listener: StateListener) -> StateListener:
        self._state_listeners.append(listener)
        return listener

    @property
    def has_unsaved_changes(self) -> bool:
        return self._payload is not None or self.content != self.base_content

    def edit(self, content: str, title: Optional[str] = None) -> None:
        """Новая правка: перезапуск таймера или отметка для следующего сохранения"""
        if self._closed:
            logger.warning(f"Edit for closed document {self.document_id} ignored")
            return

        self._take_payload(content, title)

        if self.state is SaveState.SAVING:
            self._dirty = True
            return

        self._restart_timer()
        self._set_state(SaveState.PENDING)

    def save_now(self, content: Optional[str] = None, title: Optional[str] = None) -> None:
        """Сохранение без ожидания таймера. Во время записи ставится в очередь"""
        if self._closed:
            logger.warning(f"Save for closed document {self.document_id} ignored")
            return

        self._take_payload(content, title)

        if self.state is SaveState.SAVING:
            self._dirty = True
            self._manual = True
            return

        self._cancel_timer()
        self._start_save()

    async def wait_idle(self) -> None:
        """Ожидание завершения текущей записи и всех записей, запущенных следом"""
        while self._task is not None:
            task = self._task
            await task
            if self._task is task:
                break

    async def close(self, flush: bool = False) -> None:
        """Остановка таймера и ожидание записи в полете.

        С flush=True несохраненные правки отправляются сразу, иначе
        отбрасываются.
        """
        self._closed = True
        self._cancel_timer()

        if self.state is SaveState.PENDING:
            if flush:
                self._start_save()
            else:
                self._payload = None
                self._set_state(SaveState.IDLE)
        elif self.state is SaveState.SAVING and flush and self._dirty:
            self._manual = True

        await self.wait_idle()

    def _take_payload(self, content: Optional[str], title: Optional[str]) -> None:
        if content is not None:
            self.content = content
        if title is not None:
            self.title = title
        self._payload = SavePayload(content=self.content, title=self.title)

    def _restart_timer(self) -> None:
        self._cancel_timer()
        self._timer = self.clock.call_later(self.delay, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        if self.state is SaveState.PENDING:
            self._start_save()

    def _start_save(self) -> None:
        payload = self._payload or SavePayload(content=self.content, title=self.title)
        self._payload = None
        self._dirty = False
        self._manual = False
        self._set_state(SaveState.SAVING)
        self._task = asyncio.get_running_loop().create_task(self._run_save(payload))

    async def _run_save(self, payload: SavePayload) -> None:
        metrics = score(payload.content)

        try:
            with timed(f"autosave document {self.document_id}"):
                saved = await self._persist(self.document_id, payload.title, payload.content, metrics)
        except Exception as e:
            logger.warning(f"Save of document {self.document_id} failed: {e}")
            self.last_error = e
            self._notify(self._failed_listeners, e)
            self._finish()
            return

        version_created = False
        base = self.base_content
        if base.strip() and base != saved.content:
            if self._base_metrics is None:
                self._base_metrics = score(base)
            try:
                version_created = await self._snapshot(self.document_id, base, self._base_metrics)
            except Exception as e:
                logger.warning(f"Snapshot of document {self.document_id} failed: {e}")

        self.base_content = saved.content
        self._base_metrics = saved.metrics
        self.last_saved_at = saved.saved_at
        self.last_error = None
        logger.debug(f"Document {self.document_id} saved at {saved.saved_at}")

        self._notify(self._saved_listeners, saved, version_created)
        self._finish()

    def _finish(self) -> None:
        self._task = None

        if self._dirty and (self._manual or not self._closed):
            if self._manual:
                self._start_save()
                return
            self._dirty = False
            self._set_state(SaveState.PENDING)
            self._restart_timer()
            return

        self._dirty = False
        self._payload = None
        self._set_state(SaveState.IDLE)

    def _set_state(self, state: SaveState) -> None:
        if state is self.state:
            return
        self.state = state
        self._notify(self._state_listeners, state)

    def _notify(self, listeners, *args) -> None:
        for listener in list(listeners):
            try:
                listener(*args)
            except Exception:
                logger.exception(f"Save listener failed for document {self.document_id}")
