import time
from typing import Callable, Dict, Optional

from skeptique.storage.models import CacheEntry, StoryPayload

STORY_TTL_SECONDS = 30 * 60

Clock = Callable[[], float]


class StoryCache:
    """
    Cache em memória: fingerprint -> payload completo.

    Expiração é verificada na leitura; entradas vencidas continuam no dict
    até serem sobrescritas (sem varredura, sem limite de tamanho).
    """

    def __init__(self, ttl_seconds: float = STORY_TTL_SECONDS, clock: Clock = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[StoryPayload]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            return None
        return entry.value

    def set(self, key: str, value: StoryPayload) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
