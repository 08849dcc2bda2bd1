from writing_assistant.domains.editing.clock import Clock, LoopClock, VirtualClock
from writing_assistant.domains.editing.refresher import SuggestionRefresher, edited_span, rebase_suggestions
from writing_assistant.domains.editing.scheduler import SavePayload, SaveScheduler, SaveState
from writing_assistant.domains.editing.session import EditingSession

__all__ = [
    "Clock", "LoopClock", "VirtualClock",
    "SuggestionRefresher", "edited_span", "rebase_suggestions",
    "SavePayload", "SaveScheduler", "SaveState",
    "EditingSession"
]
