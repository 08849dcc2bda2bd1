"""
Словарь для проверки орфографии.

Английский словарь pyspellchecker, встроенный список частых слов и
произвольные файлы со списками слов. Регулярные словоформы принимаются по базовой форме, поиск
ближайшего слова сужается по первой букве и длине и считается по
расстоянию Левенштейна (rapidfuzz).
"""

import logging
from collections import defaultdict
from importlib import resources
from typing import Dict, Iterable, List, Optional, Set, Tuple

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein
from spellchecker import SpellChecker

logger = logging.getLogger(__name__)

BUNDLED_WORDS = "words.txt"
LANGUAGE = "en"

# (окончание, чем заменить при восстановлении основы)
INFLECTIONS: Tuple[Tuple[str, str], ...] = (
    ("ies", "y"),
    ("ied", "y"),
    ("es", ""),
    ("s", ""),
    ("ed", ""),
    ("ed", "e"),
    ("ing", ""),
    ("ing", "e"),
    ("ly", ""),
    ("ily", "y"),
    ("er", ""),
    ("er", "e"),
    ("est", ""),
    ("est", "e"),
)


def _parse_words(lines: Iterable[str]) -> List[str]:
    words = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        words.extend(line.split())
    return words


class Dictionary:
    """Справочный список слов"""

    def __init__(self, words: Iterable[str] = ()):
        self._words: Set[str] = set()
        self._buckets: Dict[str, List[str]] = defaultdict(list)
        self.add_words(words)

    @classmethod
    def bundled(cls) -> "Dictionary":
        """Словарь английского языка со встроенным списком слов.

        Слова pyspellchecker идут от частых к редким, чтобы при равном
        расстоянии ближайшим оказывалось более употребительное слово.
        """
        frequency = SpellChecker(language=LANGUAGE).word_frequency
        words = [word for word, _ in sorted(frequency.items(), key=lambda item: -item[1])]

        dictionary = cls(words)
        text = resources.files("writing_assistant.data").joinpath(BUNDLED_WORDS).read_text(encoding="utf-8")
        dictionary.add_words(_parse_words(text.splitlines()))
        logger.info(f"Loaded dictionary with {len(dictionary)} words")
        return dictionary

    def add_words(self, words: Iterable[str]) -> None:
        for word in words:
            word = word.strip().lower()
            if not word or word in self._words:
                continue
            self._words.add(word)
            self._buckets[word[0]].append(word)

    def load_file(self, path: str) -> int:
        """Загрузка списка слов из файла, возвращает число новых слов"""
        before = len(self._words)
        with open(path, encoding="utf-8") as handle:
            self.add_words(_parse_words(handle))
        added = len(self._words) - before
        logger.info(f"Loaded {added} words from {path}")
        return added

    def __contains__(self, word: str) -> bool:
        return word.lower() in self._words

    def __len__(self) -> int:
        return len(self._words)

    def is_known(self, word: str) -> bool:
        """Слово или его регулярная словоформа есть в словаре"""
        word = word.lower()
        if word in self._words:
            return True

        if word.endswith("'s"):
            return self.is_known(word[:-2])
        if "'" in word:
            return False

        for suffix, restore in INFLECTIONS:
            if not word.endswith(suffix) or len(word) - len(suffix) < 2:
                continue
            stem = word[:-len(suffix)]
            if stem + restore in self._words:
                return True
            # running -> run, stopped -> stop
            if len(stem) > 2 and stem[-1] == stem[-2] and stem[:-1] in self._words:
                return True
        return False

    def closest(self, word: str, max_distance: int = 2) -> Optional[str]:
        """Ближайшее слово словаря или None, если все дальше max_distance"""
        word = word.lower()
        if not word:
            return None

        candidates = [
            candidate for candidate in self._buckets.get(word[0], ())
            if abs(len(candidate) - len(word)) <= max_distance
        ]
        if not candidates:
            return None

        result = process.extractOne(
            word, candidates, scorer=Levenshtein.distance, score_cutoff=max_distance
        )
        return result[0] if result else None
