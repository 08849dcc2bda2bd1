import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from writing_assistant.core.config import settings
from writing_assistant.core.logging import timed
from writing_assistant.domains.editing.clock import Clock, TimerHandle
from writing_assistant.domains.suggestions import Suggestion, SuggestionEngine, get_engine

logger = logging.getLogger(__name__)

MirrorCallable = Callable[[List[Suggestion]], Awaitable[None]]
SuggestionsListener = Callable[[List[Suggestion]], None]


def edited_span(old: str, new: str):
    """Границы изменения: (начало, конец в старом тексте, конец в новом тексте)"""
    limit = min(len(old), len(new))
    prefix = 0
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1

    suffix = 0
    while suffix < limit - prefix and old[-1 - suffix] == new[-1 - suffix]:
        suffix += 1

    return prefix, len(old) - suffix, len(new) - suffix


def rebase_suggestions(suggestions: List[Suggestion], old: str, new: str) -> List[Suggestion]:
    """Перенос подсказок на новый текст.

    Подсказки строго до правки остаются, строго после правки сдвигаются на
    разницу длин. Пересекающиеся с правкой или вплотную примыкающие к ней
    выбрасываются: слово под ними изменилось.
    """
    if old == new:
        return list(suggestions)

    start, old_end, new_end = edited_span(old, new)
    delta = new_end - old_end

    rebased = []
    for suggestion in suggestions:
        if suggestion.end < start:
            rebased.append(suggestion)
        elif suggestion.start > old_end:
            rebased.append(suggestion.shifted(delta))
    return rebased


class SuggestionRefresher:
    """Отложенное обновление списка подсказок для открытого документа"""

    def __init__(
        self,
        clock: Clock,
        engine: Optional[SuggestionEngine] = None,
        delay: Optional[float] = None,
        text: str = "",
        mirror: Optional[MirrorCallable] = None
    ):
        self.clock = clock
        self.engine = engine or get_engine()
        self.delay = settings.suggestion_delay if delay is None else delay
        self.text = text
        self.suggestions: List[Suggestion] = []

        self._mirror = mirror
        self._mirror_task: Optional[asyncio.Task] = None
        self._timer: Optional[TimerHandle] = None
        self._listeners: List[SuggestionsListener] = []

    def on_suggestions(self, listener: SuggestionsListener) -> SuggestionsListener:
        self._listeners.append(listener)
        return listener

    def text_changed(self, old: str, new: str) -> None:
        self.text = new
        if old != new:
            self._replace(rebase_suggestions(self.suggestions, old, new))
        self._cancel_timer()
        self._timer = self.clock.call_later(self.delay, self._on_timer)

    def refresh_now(self) -> List[Suggestion]:
        """Немедленный пересчет подсказок для последнего текста"""
        self._cancel_timer()
        with timed("suggestion refresh"):
            suggestions = self.engine.suggest(self.text)
        self._replace(suggestions)
        self._start_mirror(suggestions)
        return suggestions

    def get(self, suggestion_id: str) -> Optional[Suggestion]:
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    def remove(self, suggestion_id: str) -> Optional[Suggestion]:
        suggestion = self.get(suggestion_id)
        if suggestion is not None:
            self._replace([s for s in self.suggestions if s.id != suggestion_id])
        return suggestion

    async def close(self) -> None:
        self._cancel_timer()
        if self._mirror_task is not None:
            await self._mirror_task

    def _on_timer(self) -> None:
        self._timer = None
        self.refresh_now()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _replace(self, suggestions: List[Suggestion]) -> None:
        self.suggestions = list(suggestions)
        for listener in list(self._listeners):
            try:
                listener(self.suggestions)
            except Exception:
                logger.exception("Suggestions listener failed")

    def _start_mirror(self, suggestions: List[Suggestion]) -> None:
        if self._mirror is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, suggestions are not mirrored")
            return
        self._mirror_task = loop.create_task(self._run_mirror(self._mirror_task, list(suggestions)))

    async def _run_mirror(self, previous: Optional[asyncio.Task], suggestions: List[Suggestion]) -> None:
        # Записи идут в порядке пересчетов
        if previous is not None:
            await previous
        try:
            await self._mirror(suggestions)
        except Exception as e:
            logger.warning(f"Failed to mirror {len(suggestions)} suggestions: {e}")
