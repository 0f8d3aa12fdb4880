# stockcast/infra/repositories.py
"""
Repositório das abas da planilha.

Junta o ``SheetStore`` (linhas cruas), o ``SheetCache`` (atualização por
intervalo) e o normalizador (registros tipados). Cada método lê uma aba:

- inventory()   -> List[InventoryItem]
- products()    -> List[Product]
- orders()      -> List[Order]
- history()     -> List[StockSample]
- min_amounts() -> List[MinimumThreshold]
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from stockcast.adapters.normalizer import normalize_rows
from stockcast.domain.models import (
    InventoryItem,
    MinimumThreshold,
    Order,
    Product,
    StockSample,
)
from stockcast.infra.cache import SheetCache
from stockcast.infra.logger import log_system_event
from stockcast.infra.sheet_store import SheetStore


class SheetRepository:
    def __init__(
        self,
        store: Union[SheetStore, str, Path, None] = None,
        cache: Optional[SheetCache] = None,
    ):
        if store is None or isinstance(store, (str, Path)):
            store = SheetStore(store) if store is not None else SheetStore()
        self.store = store
        self.cache = cache or SheetCache()

    def _load(self, kind: str) -> list:
        def loader() -> list:
            table = self.store.read(kind)
            records = normalize_rows(kind, table.rows, table.columns)
            dropped = len(table.rows) - len(records)
            if dropped:
                log_system_event("rows_dropped", {"sheet": kind, "dropped": dropped})
            return records
        return self.cache.get(kind, loader)

    def inventory(self) -> List[InventoryItem]:
        return self._load("inventory")

    def products(self) -> List[Product]:
        return self._load("products")

    def orders(self) -> List[Order]:
        return self._load("orders")

    def history(self) -> List[StockSample]:
        return self._load("history")

    def min_amounts(self) -> List[MinimumThreshold]:
        return self._load("min_amount")

    def refresh(self, kind: Optional[str] = None) -> None:
        """Força a releitura de uma aba (ou de todas)."""
        if kind is None:
            self.cache.invalidate_all()
        else:
            self.cache.invalidate(kind)
