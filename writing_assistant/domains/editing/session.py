import logging
import uuid
from functools import partial
from typing import List, Optional

from writing_assistant.core.errors import DocumentNotFoundError
from writing_assistant.domains.documents.entities import Document, normalize_title
from writing_assistant.domains.documents.services import DocumentStore
from writing_assistant.domains.editing.clock import Clock
from writing_assistant.domains.editing.refresher import MirrorCallable, SuggestionRefresher
from writing_assistant.domains.editing.scheduler import (
    PersistCallable, SaveScheduler, SaveState, SnapshotCallable
)
from writing_assistant.domains.suggestions import Suggestion, SuggestionEngine, apply_suggestion

logger = logging.getLogger(__name__)


class EditingSession:
    """Открытый документ: автосохранение и подсказки над одним текстом"""

    def __init__(
        self,
        document_id: uuid.UUID,
        persist: PersistCallable,
        snapshot: SnapshotCallable,
        clock: Clock,
        content: str = "",
        title: Optional[str] = None,
        engine: Optional[SuggestionEngine] = None,
        mirror: Optional[MirrorCallable] = None,
        autosave_delay: Optional[float] = None,
        suggestion_delay: Optional[float] = None
    ):
        self.document_id = document_id
        self.content = content
        self.title = normalize_title(title)

        self.scheduler = SaveScheduler(
            document_id,
            persist=persist,
            snapshot=snapshot,
            clock=clock,
            content=content,
            title=self.title,
            delay=autosave_delay
        )
        self.refresher = SuggestionRefresher(
            clock,
            engine=engine,
            delay=suggestion_delay,
            text=content,
            mirror=mirror
        )

    @classmethod
    async def open(
        cls,
        document_id: uuid.UUID,
        store: DocumentStore,
        clock: Clock,
        engine: Optional[SuggestionEngine] = None
    ) -> "EditingSession":
        """Открытие сессии по документу из хранилища"""
        document = await store.fetch_document(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return cls.for_document(document, store, clock, engine)

    @classmethod
    def for_document(
        cls,
        document: Document,
        store: DocumentStore,
        clock: Clock,
        engine: Optional[SuggestionEngine] = None
    ) -> "EditingSession":
        document_id = document.uuid
        session = cls(
            document_id,
            persist=store.persist_document,
            snapshot=store.snapshot,
            clock=clock,
            content=document.content,
            title=document.title,
            engine=engine,
            mirror=partial(store.mirror_suggestions, document_id)
        )
        session.refresher.refresh_now()
        logger.info(f"Editing session opened for document {document_id}")
        return session

    @property
    def state(self) -> SaveState:
        return self.scheduler.state

    @property
    def suggestions(self) -> List[Suggestion]:
        return self.refresher.suggestions

    def edit(self, content: str, title: Optional[str] = None) -> None:
        old = self.content
        self.content = content
        if title is not None:
            self.title = normalize_title(title)
        self.scheduler.edit(content, self.title)
        self.refresher.text_changed(old, content)

    def save_now(self, content: Optional[str] = None, title: Optional[str] = None) -> None:
        if content is not None and content != self.content:
            old = self.content
            self.content = content
            self.refresher.text_changed(old, content)
        if title is not None:
            self.title = normalize_title(title)
        self.scheduler.save_now(self.content, self.title)

    def update_title(self, title: Optional[str]) -> bool:
        """Смена заголовка сохраняется сразу; пустой заголовок заменяется стандартным"""
        title = normalize_title(title)
        if title == self.title:
            return False
        self.title = title
        self.scheduler.save_now(title=title)
        return True

    def apply_suggestion(self, suggestion_id: str) -> Optional[Suggestion]:
        """Применение подсказки к тексту с немедленным сохранением"""
        suggestion = self.refresher.get(suggestion_id)
        if suggestion is None:
            logger.info(f"Suggestion {suggestion_id} not found for document {self.document_id}")
            return None

        if not suggestion.matches(self.content):
            logger.info(f"Suggestion {suggestion_id} no longer matches document {self.document_id}")
            self.refresher.remove(suggestion_id)
            return None

        self.refresher.remove(suggestion_id)
        updated = apply_suggestion(self.content, suggestion)
        if updated != self.content:
            old = self.content
            self.content = updated
            self.refresher.text_changed(old, updated)
            self.scheduler.save_now(updated, self.title)
        return suggestion

    def dismiss_suggestion(self, suggestion_id: str) -> bool:
        return self.refresher.remove(suggestion_id) is not None

    async def close(self, flush: bool = True) -> None:
        await self.scheduler.close(flush=flush)
        await self.refresher.close()
        logger.info(f"Editing session closed for document {self.document_id}")
