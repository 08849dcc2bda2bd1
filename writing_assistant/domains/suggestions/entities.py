import enum
from dataclasses import dataclass


class SuggestionType(str, enum.Enum):
    """Категория правки. Закрытый набор: по нему UI выбирает цвет и бейдж"""
    GRAMMAR = "grammar"
    SPELLING = "spelling"
    STYLE = "style"


@dataclass(frozen=True)
class Suggestion:
    """Предлагаемая правка в полуинтервале [start, end) исходного текста"""
    start: int
    end: int
    type: SuggestionType
    original_text: str
    suggested_text: str
    message: str

    @property
    def id(self) -> str:
        return f"{self.type.value}-{self.start}-{self.end}"

    def overlaps(self, start: int, end: int) -> bool:
        """Пересекается ли диапазон правки с [start, end)"""
        return self.start < end and start < self.end

    def shifted(self, delta: int) -> "Suggestion":
        return Suggestion(
            start=self.start + delta,
            end=self.end + delta,
            type=self.type,
            original_text=self.original_text,
            suggested_text=self.suggested_text,
            message=self.message,
        )

    def matches(self, text: str) -> bool:
        """Соответствует ли правка текущему тексту"""
        return 0 <= self.start <= self.end <= len(text) and text[self.start:self.end] == self.original_text
