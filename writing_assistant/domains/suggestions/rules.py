"""
Таблица правил для поиска типичных ошибок.

Правила это данные, а не код: каждое правило описывает шаблон, категорию,
шаблон замены (можно ссылаться на группы, например r"\\1") и пояснение.
Обходит таблицу один общий проход RuleSource.
"""

import re
from dataclasses import dataclass
from typing import List, Pattern

from writing_assistant.domains.suggestions.entities import SuggestionType


@dataclass(frozen=True)
class SuggestionRule:
    pattern: Pattern
    type: SuggestionType
    replacement: str
    message: str

    def replacement_for(self, match: "re.Match") -> str:
        """Замена для конкретного совпадения, а не для всего текста"""
        replacement = match.expand(self.replacement)
        original = match.group(0)
        if original[:1].isupper() and replacement[:1].islower():
            replacement = replacement[0].upper() + replacement[1:]
        return replacement


def rule(pattern: str, type: SuggestionType, replacement: str, message: str) -> SuggestionRule:
    return SuggestionRule(re.compile(pattern, re.IGNORECASE), type, replacement, message)


DEFAULT_RULES: List[SuggestionRule] = [
    # Орфография
    rule(r"\bteh\b", SuggestionType.SPELLING, "the",
         'Spelling error: "teh" should be "the"'),
    rule(r"\brecieve\b", SuggestionType.SPELLING, "receive",
         'Spelling error: "recieve" should be "receive"'),
    rule(r"\boccured\b", SuggestionType.SPELLING, "occurred",
         'Spelling error: "occured" should be "occurred"'),
    rule(r"\bseperate\b", SuggestionType.SPELLING, "separate",
         'Spelling error: "seperate" should be "separate"'),
    rule(r"\bdefinately\b", SuggestionType.SPELLING, "definitely",
         'Spelling error: "definately" should be "definitely"'),

    # Стиль
    rule(r"\bit'?s\s+important\s+to\s+note\s+that\b", SuggestionType.STYLE, "notably",
         "Style: Consider using \"notably\" instead of \"it's important to note that\""),
    rule(r"\bin\s+order\s+to\b", SuggestionType.STYLE, "to",
         'Style: "In order to" can often be simplified to "to"'),
    rule(r"\bdue\s+to\s+the\s+fact\s+that\b", SuggestionType.STYLE, "because",
         'Style: "Due to the fact that" can be simplified to "because"'),
    rule(r"\bat\s+this\s+point\s+in\s+time\b", SuggestionType.STYLE, "now",
         'Style: "At this point in time" can be simplified to "now"'),
    rule(r"\bfor\s+the\s+purpose\s+of\b", SuggestionType.STYLE, "to",
         'Style: "For the purpose of" can be simplified to "to"'),

    # Грамматика
    rule(r"\b(a|an)\s+\1\b", SuggestionType.GRAMMAR, r"\1",
         "Grammar: Duplicate article detected"),
    rule(r"\bwould\s+of\b", SuggestionType.GRAMMAR, "would have",
         'Grammar: "Would of" should be "would have"'),
    rule(r"\bcould\s+of\b", SuggestionType.GRAMMAR, "could have",
         'Grammar: "Could of" should be "could have"'),
    rule(r"\bshould\s+of\b", SuggestionType.GRAMMAR, "should have",
         'Grammar: "Should of" should be "should have"'),
]
