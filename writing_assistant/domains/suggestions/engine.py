"""
Движок подсказок.

Опрашивает активные источники, объединяет кандидатов, сортирует по началу
и оставляет только непересекающиеся: кандидат принимается, если начинается
не раньше конца предыдущего принятого. При равном начале побеждает тот,
кто найден раньше (сортировка устойчивая, источники идут по порядку).
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from writing_assistant.core.config import settings
from writing_assistant.domains.suggestions.entities import Suggestion, SuggestionType
from writing_assistant.domains.suggestions.sources import SuggestionSource, build_sources

logger = logging.getLogger(__name__)


def remove_overlaps(candidates: Iterable[Suggestion]) -> List[Suggestion]:
    """Устойчивая сортировка по началу и отбор первых непересекающихся"""
    kept = []
    last_end = -1
    for candidate in sorted(candidates, key=lambda s: s.start):
        if candidate.start >= last_end:
            kept.append(candidate)
            last_end = candidate.end
    return kept


class SuggestionEngine:
    """Генерация упорядоченных непересекающихся подсказок для текста"""

    def __init__(self, sources: Iterable[SuggestionSource]):
        self.sources = list(sources)

    def suggest(self, text: str) -> List[Suggestion]:
        if not text or not text.strip():
            return []

        candidates: List[Suggestion] = []
        for source in self.sources:
            try:
                candidates.extend(source.check(text, tuple(candidates)))
            except Exception:
                # Сломанный источник не должен ронять остальные
                logger.exception(f"Suggestion source {source.name} failed, skipping it")

        return remove_overlaps(candidates)


def apply_suggestion(text: str, suggestion: Suggestion) -> str:
    return text[:suggestion.start] + suggestion.suggested_text + text[suggestion.end:]


def apply_suggestions(text: str, suggestions: Iterable[Suggestion]) -> str:
    """Применение с конца текста, чтобы индексы оставшихся не сдвигались"""
    for suggestion in sorted(suggestions, key=lambda s: s.start, reverse=True):
        text = apply_suggestion(text, suggestion)
    return text


def suggestion_stats(text: str, suggestions: List[Suggestion]) -> Dict[str, Any]:
    """Сводка по подсказкам: количество по категориям и доля на 100 слов"""
    word_count = len(text.split())
    stats = {
        "total_issues": len(suggestions),
        "grammar_issues": sum(1 for s in suggestions if s.type == SuggestionType.GRAMMAR),
        "spelling_issues": sum(1 for s in suggestions if s.type == SuggestionType.SPELLING),
        "style_issues": sum(1 for s in suggestions if s.type == SuggestionType.STYLE),
        "word_count": word_count,
        "issue_rate": 0.0,
    }
    if word_count:
        stats["issue_rate"] = round(len(suggestions) / word_count * 100, 1)
    return stats


_default_engine: Optional[SuggestionEngine] = None


def get_engine() -> SuggestionEngine:
    """Движок с источниками из настроек, собирается один раз на процесс"""
    global _default_engine
    if _default_engine is None:
        sources = build_sources(
            settings.enabled_sources,
            dictionary_paths=settings.extra_dictionaries,
            long_sentence_threshold=settings.long_sentence_threshold,
        )
        logger.info(f"Suggestion engine ready with sources: {[source.name for source in sources]}")
        _default_engine = SuggestionEngine(sources)
    return _default_engine


def suggest(text: str) -> List[Suggestion]:
    return get_engine().suggest(text)
