import uuid
from typing import Iterable, List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from writing_assistant.core.errors import PersistenceError
from writing_assistant.db.models.suggestion import StoredSuggestion as StoredSuggestionModel
from writing_assistant.domains.suggestions.entities import Suggestion


class SuggestionRepository:
    """Репозиторий для копии подсказок в хранилище"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def replace_for_document(self, document_id: uuid.UUID, suggestions: Iterable[Suggestion]) -> int:
        """Замена всех подсказок документа одним коммитом"""
        records = [
            StoredSuggestionModel(
                document_id=document_id,
                start_index=suggestion.start,
                end_index=suggestion.end,
                suggestion_type=suggestion.type,
                original_text=suggestion.original_text,
                suggested_text=suggestion.suggested_text,
                message=suggestion.message[:500]
            )
            for suggestion in suggestions
        ]

        try:
            await self.session.execute(
                delete(StoredSuggestionModel).where(StoredSuggestionModel.document_id == document_id)
            )
            self.session.add_all(records)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to store suggestions for document {document_id}: {e}") from e

        return len(records)

    async def get_by_document(self, document_id: uuid.UUID) -> List[Suggestion]:
        """Подсказки документа по возрастанию начала"""
        result = await self.session.execute(
            select(StoredSuggestionModel)
            .where(StoredSuggestionModel.document_id == document_id)
            .order_by(StoredSuggestionModel.start_index.asc())
        )
        return [self._to_domain(record) for record in result.scalars().all()]

    def _to_domain(self, record: StoredSuggestionModel) -> Suggestion:
        return Suggestion(
            start=record.start_index,
            end=record.end_index,
            type=record.suggestion_type,
            original_text=record.original_text,
            suggested_text=record.suggested_text,
            message=record.message
        )
