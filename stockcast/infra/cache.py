# stockcast/infra/cache.py
"""
Cache explícito das abas lidas, com intervalo de atualização por aba.

Contrato de invalidação:
- ``get(kind, loader)`` devolve o valor guardado enquanto ele tiver menos
  de ``refresh_interval(kind)`` segundos; depois disso chama ``loader()``;
- ``invalidate(kind)`` descarta uma aba (usado após cada escrita);
- ``invalidate_all()`` descarta tudo (botão "atualizar").
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from stockcast.config import DEFAULTS, DefaultConfig


class SheetCache:
    def __init__(
        self,
        config: Optional[DefaultConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or DEFAULTS
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, kind: str, loader: Callable[[], Any]) -> Any:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(kind)
            if entry is not None and now - entry[0] < self.config.refresh_interval(kind):
                return entry[1]
        value = loader()
        with self._lock:
            self._entries[kind] = (now, value)
        return value

    def invalidate(self, kind: str) -> None:
        with self._lock:
            self._entries.pop(kind, None)

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, kind: str) -> bool:
        with self._lock:
            return kind in self._entries
