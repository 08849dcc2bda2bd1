from writing_assistant.domains.analysis.hashing import fingerprint
from writing_assistant.domains.analysis.readability import (
    NO_CONTENT, ReadabilityMetrics, count_syllables, recommendations, score
)

__all__ = [
    "fingerprint",
    "NO_CONTENT", "ReadabilityMetrics", "count_syllables", "recommendations", "score"
]
