import logging
import time
from contextlib import contextmanager

from writing_assistant.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("writing_assistant.timing")


def configure_logging(level: str = None) -> None:
    """Настройка корневого логгера при старте приложения"""
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)


@contextmanager
def timed(label: str):
    """Замер длительности блока, пишется только при включенном debug_timing"""
    if not settings.debug_timing:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"{label} took {elapsed_ms:.1f}ms")
