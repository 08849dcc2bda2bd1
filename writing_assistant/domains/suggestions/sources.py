"""
Источники кандидатов для движка подсказок.

Каждый источник независим и заменяем: движок опрашивает активные источники
по порядку и передает каждому уже найденные кандидаты (claimed), чтобы
источник мог не предлагать правки внутри занятых диапазонов.
"""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from writing_assistant.domains.suggestions.dictionary import Dictionary
from writing_assistant.domains.suggestions.entities import Suggestion, SuggestionType
from writing_assistant.domains.suggestions.rules import DEFAULT_RULES, SuggestionRule

logger = logging.getLogger(__name__)

DEFAULT_LONG_SENTENCE_THRESHOLD = 25

_TOKEN_RE = re.compile(r"[A-Za-z']+")
_SENTENCE_RE = re.compile(r"[^.!?]+")
_REPEATED_RE = re.compile(r"\b([A-Za-z]+)\s+\1\b", re.IGNORECASE)
_PASSIVE_RE = re.compile(
    r"\b(?=((?:am|is|are|was|were|be|been|being)\s+([A-Za-z]+))\b)", re.IGNORECASE
)

IRREGULAR_PARTICIPLES = {
    "known", "given", "seen", "done", "made", "taken", "built", "found", "kept", "held",
    "said", "shown", "told", "written", "driven", "broken", "chosen", "grown", "thrown",
    "caught", "bought", "brought", "thought", "paid", "sent", "spent", "won", "understood",
    "felt", "beaten", "bitten", "forgotten", "hidden", "stolen", "spoken", "eaten", "drawn",
}

# Причастия, которые после глагола-связки обычно работают как прилагательные
ADJECTIVAL_PARTICIPLES = {
    "interested", "concerned", "involved", "related", "based", "focused", "tired",
    "excited", "pleased", "surprised", "disappointed", "satisfied", "bored", "confused",
    "worried", "scared", "frightened", "amazed", "annoyed", "married", "supposed", "used",
}

# Слова на -ed, которые не являются причастиями
NOT_PARTICIPLES = {"need", "indeed", "seed", "speed", "feed", "shed", "hundred", "embed"}

INTENTIONAL_REPEATS = {"very", "so", "really", "quite"}


def _overlaps_any(start: int, end: int, claimed: Sequence[Suggestion]) -> bool:
    return any(candidate.overlaps(start, end) for candidate in claimed)


def _is_sentence_start(text: str, index: int) -> bool:
    prefix = text[:index].rstrip()
    return not prefix or prefix[-1] in ".!?\"'(\n"


class SuggestionSource:
    """Базовый источник кандидатов"""

    name = "base"

    def check(self, text: str, claimed: Sequence[Suggestion] = ()) -> List[Suggestion]:
        raise NotImplementedError


class RuleSource(SuggestionSource):
    """Общий проход по таблице правил"""

    name = "rules"

    def __init__(self, rules: Iterable[SuggestionRule] = None):
        self.rules = list(DEFAULT_RULES if rules is None else rules)

    def check(self, text: str, claimed: Sequence[Suggestion] = ()) -> List[Suggestion]:
        suggestions = []
        for rule in self.rules:
            for match in rule.pattern.finditer(text):
                suggestions.append(Suggestion(
                    start=match.start(),
                    end=match.end(),
                    type=rule.type,
                    original_text=match.group(0),
                    suggested_text=rule.replacement_for(match),
                    message=rule.message,
                ))
        return suggestions


class DictionarySource(SuggestionSource):
    """Проверка слов по словарю с подбором ближайшего слова"""

    name = "dictionary"
    min_length = 3

    def __init__(self, dictionary: Dictionary, max_distance: int = 2):
        self.dictionary = dictionary
        self.max_distance = max_distance

    def check(self, text: str, claimed: Sequence[Suggestion] = ()) -> List[Suggestion]:
        suggestions = []
        for match in _TOKEN_RE.finditer(text):
            raw = match.group(0)
            token = raw.strip("'")
            if len(token) < self.min_length:
                continue

            start = match.start() + (len(raw) - len(raw.lstrip("'")))
            end = start + len(token)

            # Аббревиатуры и имена собственные не проверяем
            if token.isupper():
                continue
            if token[0].isupper() and not _is_sentence_start(text, start):
                continue
            if _overlaps_any(start, end, claimed):
                continue
            if self.dictionary.is_known(token):
                continue

            replacement = self.dictionary.closest(token, self.max_distance)
            if replacement is None:
                continue
            if token[0].isupper():
                replacement = replacement[0].upper() + replacement[1:]

            suggestions.append(Suggestion(
                start=start,
                end=end,
                type=SuggestionType.SPELLING,
                original_text=token,
                suggested_text=replacement,
                message=f'Spelling: "{token}" may be misspelled, did you mean "{replacement}"?',
            ))
        return suggestions


class PassiveVoiceSource(SuggestionSource):
    """Глагол-связка + причастие прошедшего времени"""

    name = "passive_voice"

    def check(self, text: str, claimed: Sequence[Suggestion] = ()) -> List[Suggestion]:
        suggestions = []
        for match in _PASSIVE_RE.finditer(text):
            participle = match.group(2).lower()
            if participle in ADJECTIVAL_PARTICIPLES or participle in NOT_PARTICIPLES:
                continue
            if not (participle in IRREGULAR_PARTICIPLES or (len(participle) > 3 and participle.endswith("ed"))):
                continue

            phrase = match.group(1)
            suggestions.append(Suggestion(
                start=match.start(1),
                end=match.end(1),
                type=SuggestionType.STYLE,
                original_text=phrase,
                suggested_text=phrase,
                message="Style: Consider using active voice for stronger, clearer writing",
            ))
        return suggestions


class LongSentenceSource(SuggestionSource):
    """Предложения длиннее порога в словах"""

    name = "long_sentences"

    def __init__(self, threshold: int = DEFAULT_LONG_SENTENCE_THRESHOLD):
        self.threshold = threshold

    def check(self, text: str, claimed: Sequence[Suggestion] = ()) -> List[Suggestion]:
        suggestions = []
        for match in _SENTENCE_RE.finditer(text):
            segment = match.group(0)
            sentence = segment.strip()
            if not sentence:
                continue

            word_count = len(sentence.split())
            if word_count <= self.threshold:
                continue

            start = match.start() + (len(segment) - len(segment.lstrip()))
            suggestions.append(Suggestion(
                start=start,
                end=start + len(sentence),
                type=SuggestionType.STYLE,
                original_text=sentence,
                suggested_text=sentence,
                message=(
                    f"Style: This sentence has {word_count} words. "
                    "Consider breaking it into shorter sentences for better readability."
                ),
            ))
        return suggestions


class RepeatedWordSource(SuggestionSource):
    """Одно и то же слово два раза подряд"""

    name = "repeated_words"

    def check(self, text: str, claimed: Sequence[Suggestion] = ()) -> List[Suggestion]:
        suggestions = []
        for match in _REPEATED_RE.finditer(text):
            word = match.group(1)
            if word.lower() in INTENTIONAL_REPEATS:
                continue
            suggestions.append(Suggestion(
                start=match.start(),
                end=match.end(),
                type=SuggestionType.GRAMMAR,
                original_text=match.group(0),
                suggested_text=word,
                message=f'Grammar: Repeated word "{word}" detected',
            ))
        return suggestions


def load_dictionary(extra_paths: Iterable[str] = ()) -> Optional[Dictionary]:
    """Встроенный словарь плюс дополнительные файлы; None, если словарь недоступен"""
    try:
        dictionary = Dictionary.bundled()
    except (OSError, ModuleNotFoundError) as e:
        logger.error(f"Bundled dictionary is unavailable: {e}")
        return None

    for path in extra_paths:
        try:
            dictionary.load_file(path)
        except OSError as e:
            logger.warning(f"Skipping word list {path}: {e}")
    return dictionary


def build_sources(
    names: Iterable[str],
    dictionary: Optional[Dictionary] = None,
    dictionary_paths: Iterable[str] = (),
    long_sentence_threshold: int = DEFAULT_LONG_SENTENCE_THRESHOLD,
) -> List[SuggestionSource]:
    """Сборка активных источников по именам, порядок имен сохраняется"""

    def make_dictionary_source() -> Optional[SuggestionSource]:
        loaded = dictionary if dictionary is not None else load_dictionary(dictionary_paths)
        return DictionarySource(loaded) if loaded is not None else None

    factories: Dict[str, Callable[[], Optional[SuggestionSource]]] = {
        RuleSource.name: RuleSource,
        DictionarySource.name: make_dictionary_source,
        PassiveVoiceSource.name: PassiveVoiceSource,
        LongSentenceSource.name: lambda: LongSentenceSource(long_sentence_threshold),
        RepeatedWordSource.name: RepeatedWordSource,
    }

    sources = []
    for name in names:
        factory = factories.get(name)
        if factory is None:
            logger.warning(f"Unknown suggestion source: {name}")
            continue
        source = factory()
        if source is not None:
            sources.append(source)
    return sources
