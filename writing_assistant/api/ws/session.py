from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from typing import Dict, List, Optional
import asyncio
import json
import logging
import uuid

from writing_assistant.core.db import SessionLocal
from writing_assistant.domains.documents.entities import Document, SavedDocument
from writing_assistant.domains.documents.schemas import ReadabilityResponse
from writing_assistant.domains.documents.services import DocumentStore
from writing_assistant.domains.editing import EditingSession, LoopClock, SaveState
from writing_assistant.domains.suggestions import Suggestion, SuggestionEngine, get_engine
from writing_assistant.domains.suggestions.schemas import SuggestionResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def get_document_store() -> DocumentStore:
    return DocumentStore(SessionLocal)


class SessionChannel:
    """Связь одной сессии редактирования с клиентом.

    Сообщения в обе стороны имеют вид {"type": ..., "data": {...}}.
    Исходящие сообщения копятся в очереди и отправляются отдельной задачей.
    """

    def __init__(self, session: EditingSession):
        self.session = session
        self.outbox: asyncio.Queue = asyncio.Queue()

        session.scheduler.on_state_change(self._on_state_change)
        session.scheduler.on_saved(self._on_saved)
        session.scheduler.on_failed(self._on_failed)
        session.refresher.on_suggestions(self._on_suggestions)

    def publish(self, message_type: str, data: Optional[dict] = None) -> None:
        self.outbox.put_nowait({"type": message_type, "data": data or {}})

    def publish_snapshot(self) -> None:
        """Начальное состояние для только что подключенного клиента"""
        self._on_state_change(self.session.state)
        self._on_suggestions(self.session.suggestions)

    def handle(self, message: dict) -> None:
        message_type = message.get("type")
        data = message.get("data")
        if data is None:
            data = {}
        if not isinstance(data, dict):
            self.publish("error", {"detail": "Message data must be an object"})
            return

        content = data.get("content")
        title = data.get("title")
        if title is not None and not isinstance(title, str):
            self.publish("error", {"detail": "Title must be a string"})
            return
        if content is not None and not isinstance(content, str):
            self.publish("error", {"detail": "Content must be a string"})
            return

        if message_type == "edit":
            if content is None:
                self.publish("error", {"detail": "Edit requires content"})
                return
            self.session.edit(content, title)

        elif message_type == "save":
            self.session.save_now(content, title)

        elif message_type == "title":
            self.session.update_title(title)

        elif message_type == "apply":
            suggestion_id = data.get("suggestion_id")
            applied = self.session.apply_suggestion(suggestion_id) if isinstance(suggestion_id, str) else None
            if applied is None:
                self.publish("error", {"detail": f"Suggestion {suggestion_id} cannot be applied"})
                return
            self.publish("applied", {"suggestion_id": suggestion_id, "content": self.session.content})

        elif message_type == "dismiss":
            suggestion_id = data.get("suggestion_id")
            if isinstance(suggestion_id, str):
                self.session.dismiss_suggestion(suggestion_id)

        elif message_type == "ping":
            # Ответ на ping для поддержания соединения
            self.publish("pong")

        else:
            self.publish("error", {"detail": f"Unknown message type: {message_type}"})

    async def pump(self, websocket: WebSocket) -> None:
        while True:
            message = await self.outbox.get()
            await websocket.send_text(json.dumps(message))

    def _on_state_change(self, state: SaveState) -> None:
        self.publish("state", {"state": state.value})

    def _on_saved(self, saved: SavedDocument, version_created: bool) -> None:
        self.publish("saved", {
            "title": saved.title,
            "metrics": ReadabilityResponse.from_metrics(saved.metrics).model_dump(),
            "saved_at": saved.saved_at.isoformat(),
            "version_created": version_created
        })

    def _on_failed(self, error: Exception) -> None:
        self.publish("save_failed", {"detail": str(error)})

    def _on_suggestions(self, suggestions: List[Suggestion]) -> None:
        self.publish("suggestions", {
            "items": [SuggestionResponse.from_entity(s).model_dump(mode="json") for s in suggestions]
        })


class SessionManager:
    def __init__(self):
        # Активные сессии: {document_id: {connection_id: session}}
        self.active_sessions: Dict[uuid.UUID, Dict[str, EditingSession]] = {}

    def open(
        self,
        document: Document,
        connection_id: str,
        store: DocumentStore,
        engine: Optional[SuggestionEngine] = None
    ) -> EditingSession:
        """Новая сессия редактирования для подключения"""
        session = EditingSession.for_document(document, store, LoopClock(), engine)
        self.active_sessions.setdefault(document.uuid, {})[connection_id] = session
        logger.info(
            f"Connection {connection_id} opened document {document.uuid}, "
            f"{len(self.active_sessions[document.uuid])} active"
        )
        return session

    async def close(self, document_id: uuid.UUID, connection_id: str) -> None:
        """Закрытие сессии с отправкой несохраненных правок"""
        sessions = self.active_sessions.get(document_id, {})
        session = sessions.pop(connection_id, None)
        if not sessions:
            self.active_sessions.pop(document_id, None)

        if session is not None:
            await session.close(flush=True)
        logger.info(f"Connection {connection_id} closed document {document_id}")

    async def shutdown(self) -> None:
        for document_id, sessions in list(self.active_sessions.items()):
            for connection_id in list(sessions):
                await self.close(document_id, connection_id)


manager = SessionManager()


def _resolve_user(websocket: WebSocket) -> Optional[uuid.UUID]:
    # Браузер не умеет ставить заголовки на WebSocket, поэтому есть запасной query-параметр
    raw = websocket.headers.get("x-user-id") or websocket.query_params.get("user_id")
    if not raw:
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        return None


@router.websocket("/documents/{document_id}/session")
async def editing_session_endpoint(
    websocket: WebSocket,
    document_id: uuid.UUID,
    store: DocumentStore = Depends(get_document_store),
    engine: SuggestionEngine = Depends(get_engine)
):
    """WebSocket эндпоинт сессии редактирования: автосохранение и подсказки"""
    user_id = _resolve_user(websocket)
    document = await store.fetch_document(document_id)
    if user_id is None or document is None or not document.is_owned_by(user_id):
        logger.info(f"Rejected editing session for document {document_id}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    connection_id = uuid.uuid4().hex
    session = manager.open(document, connection_id, store, engine)
    channel = SessionChannel(session)
    channel.publish_snapshot()
    sender = asyncio.create_task(channel.pump(websocket))

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except ValueError:
                channel.publish("error", {"detail": "Invalid JSON"})
                continue
            if not isinstance(message, dict):
                channel.publish("error", {"detail": "Message must be an object"})
                continue
            channel.handle(message)

    except WebSocketDisconnect:
        logger.info(f"Client disconnected from document {document_id}")

    except Exception as e:
        logger.error(f"WebSocket error: {e}")

    finally:
        await manager.close(document_id, connection_id)
        sender.cancel()
