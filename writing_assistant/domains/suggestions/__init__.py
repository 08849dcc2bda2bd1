from writing_assistant.domains.suggestions.dictionary import Dictionary
from writing_assistant.domains.suggestions.engine import (
    SuggestionEngine, apply_suggestion, apply_suggestions, get_engine, remove_overlaps,
    suggest, suggestion_stats
)
from writing_assistant.domains.suggestions.entities import Suggestion, SuggestionType
from writing_assistant.domains.suggestions.rules import DEFAULT_RULES, SuggestionRule
from writing_assistant.domains.suggestions.sources import (
    DictionarySource, LongSentenceSource, PassiveVoiceSource, RepeatedWordSource,
    RuleSource, SuggestionSource, build_sources
)

__all__ = [
    "Dictionary",
    "SuggestionEngine", "apply_suggestion", "apply_suggestions", "get_engine",
    "remove_overlaps", "suggest", "suggestion_stats",
    "Suggestion", "SuggestionType",
    "DEFAULT_RULES", "SuggestionRule",
    "DictionarySource", "LongSentenceSource", "PassiveVoiceSource", "RepeatedWordSource",
    "RuleSource", "SuggestionSource", "build_sources"
]
