"""
Оценка читаемости текста.

Flesch Reading Ease и Flesch-Kincaid Grade Level поверх простых эвристик
подсчета слов, предложений и слогов. Функции чистые и никогда не бросают
исключений: пустой текст дает нулевые метрики с меткой "No Content".
"""

import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

NO_CONTENT = "No Content"

VOWELS = "aeiouy"

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_LETTER_RE = re.compile(r"[a-zA-Z]")
_NON_LETTER_RE = re.compile(r"[^a-z]")

# Пороги ease score, от большего к меньшему
LEVELS = (
    (90, "Very Easy"),
    (80, "Easy"),
    (70, "Fairly Easy"),
    (60, "Standard"),
    (50, "Fairly Difficult"),
    (30, "Difficult"),
)


@dataclass(frozen=True)
class ReadabilityMetrics:
    """Метрики читаемости, всегда пересчитываются из текста"""
    word_count: int = 0
    sentence_count: int = 0
    syllable_count: int = 0
    average_words_per_sentence: float = 0.0
    average_syllables_per_word: float = 0.0
    flesch_reading_ease: float = 0.0
    flesch_kincaid_grade: float = 0.0
    readability_level: str = NO_CONTENT
    # Неокругленные значения для сравнений
    raw_ease: float = 0.0
    raw_grade: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в формате хранилища, без внутренних полей"""
        data = asdict(self)
        data.pop("raw_ease")
        data.pop("raw_grade")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReadabilityMetrics":
        if not data:
            return cls()
        return cls(
            word_count=data.get("word_count", 0),
            sentence_count=data.get("sentence_count", 0),
            syllable_count=data.get("syllable_count", 0),
            average_words_per_sentence=data.get("average_words_per_sentence", 0.0),
            average_syllables_per_word=data.get("average_syllables_per_word", 0.0),
            flesch_reading_ease=data.get("flesch_reading_ease", 0.0),
            flesch_kincaid_grade=data.get("flesch_kincaid_grade", 0.0),
            readability_level=data.get("readability_level", NO_CONTENT),
            raw_ease=data.get("flesch_reading_ease", 0.0),
            raw_grade=data.get("flesch_kincaid_grade", 0.0),
        )


def count_syllables(word: str) -> int:
    """Подсчет слогов по группам гласных"""
    word = _NON_LETTER_RE.sub("", word.lower())

    if not word:
        return 0
    if len(word) <= 3:
        return 1

    syllables = 0
    previous_was_vowel = False
    for char in word:
        is_vowel = char in VOWELS
        if is_vowel and not previous_was_vowel:
            syllables += 1
        previous_was_vowel = is_vowel

    # Немая "e" в конце
    if word.endswith("e") and syllables > 1:
        syllables -= 1

    return max(1, syllables)


def split_words(text: str) -> List[str]:
    return [word for word in text.split() if _LETTER_RE.search(word)]


def count_sentences(text: str) -> int:
    if not text or not text.strip():
        return 0
    sentences = [part for part in _SENTENCE_SPLIT_RE.split(text) if part.strip()]
    return max(1, len(sentences))


def readability_level(ease: float) -> str:
    for threshold, label in LEVELS:
        if ease >= threshold:
            return label
    return "Very Difficult"


def round_half_up(value: float, digits: int) -> float:
    """Округление половин вверх: 2.25 -> 2.3, как в уже сохраненных метриках"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def score(text: str) -> ReadabilityMetrics:
    """Расчет метрик читаемости для текста"""
    if not text or not text.strip():
        return ReadabilityMetrics()

    words = split_words(text)
    word_count = len(words)
    sentence_count = count_sentences(text)
    syllable_count = sum(count_syllables(word) for word in words)

    words_per_sentence = word_count / sentence_count if sentence_count else 0.0
    syllables_per_word = syllable_count / word_count if word_count else 0.0

    ease = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
    ease = max(0.0, min(100.0, ease))
    grade = max(0.0, 0.39 * words_per_sentence + 11.8 * syllables_per_word - 15.59)

    return ReadabilityMetrics(
        word_count=word_count,
        sentence_count=sentence_count,
        syllable_count=syllable_count,
        average_words_per_sentence=round_half_up(words_per_sentence, 1),
        average_syllables_per_word=round_half_up(syllables_per_word, 2),
        flesch_reading_ease=round_half_up(ease, 1),
        flesch_kincaid_grade=round_half_up(grade, 1),
        readability_level=readability_level(ease),
        raw_ease=ease,
        raw_grade=grade,
    )


def recommendations(metrics: ReadabilityMetrics) -> List[str]:
    """Советы по улучшению читаемости"""
    if metrics.readability_level == NO_CONTENT:
        return []

    advice = []
    if metrics.raw_ease < 60:
        advice.append("Consider using shorter sentences to improve readability")
    if metrics.average_words_per_sentence > 20:
        advice.append("Try to keep sentences under 20 words for better clarity")
    if metrics.average_syllables_per_word > 1.7:
        advice.append("Consider using simpler words with fewer syllables")
    if metrics.raw_grade > 12:
        advice.append("The text may be too complex for general audiences")
    if metrics.word_count < 100:
        advice.append("Consider adding more content for a more comprehensive analysis")

    if not advice:
        advice.append("Your text has good readability for academic writing")
    return advice
