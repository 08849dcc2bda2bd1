from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./writing_assistant.db"
    database_echo: bool = False

    # Тайминги в секундах
    autosave_delay: float = 2.0
    suggestion_delay: float = 1.0

    long_sentence_threshold: int = 25
    version_history_limit: int = 50

    # Списки через запятую, например "rules,dictionary"
    suggestion_sources: str = "rules,dictionary,passive_voice,long_sentences,repeated_words"
    dictionary_paths: str = ""

    log_level: str = "INFO"
    debug_timing: bool = False

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def enabled_sources(self) -> List[str]:
        return [name.strip() for name in self.suggestion_sources.split(",") if name.strip()]

    @property
    def extra_dictionaries(self) -> List[str]:
        return [path.strip() for path in self.dictionary_paths.split(",") if path.strip()]


settings = Settings()
