# stockcast/infra/sheet_store.py
"""
Acesso à planilha: um diretório com um arquivo por aba.

``SheetStore`` é o provedor de linhas do painel. Linhas são endereçadas
pelo número 1-based da planilha (linha 1 = cabeçalho, primeira linha de
dados = 2), o mesmo usado como ``Order.row_index``.

Operações:
- read          -> lê a aba inteira (aba inexistente = tabela vazia)
- append_row    -> acrescenta uma linha ao fim da aba
- update_cell   -> altera uma célula de uma linha existente
- ensure_column -> cria a coluna se ela não existir
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from stockcast.adapters.normalizer import FIRST_DATA_ROW
from stockcast.adapters.sheet_loader import SheetTable, read_table, write_table
from stockcast.config import DATA_DIR, SHEET_FILES
from stockcast.infra.logger import log_sheet_operation, log_system_event


class SheetError(Exception):
    """Falha de escrita/endereçamento na planilha."""


class SheetStore:
    def __init__(self, data_dir: Union[str, Path] = DATA_DIR, files: Optional[Mapping[str, str]] = None):
        self.data_dir = Path(data_dir)
        self.files: Dict[str, str] = dict(files or SHEET_FILES)

    def path(self, kind: str) -> Path:
        try:
            return self.data_dir / self.files[kind]
        except KeyError:
            raise SheetError(f"aba desconhecida: {kind!r}") from None

    def exists(self, kind: str) -> bool:
        return self.path(kind).exists()

    # -------------------------
    # leitura
    # -------------------------

    def read(self, kind: str) -> SheetTable:
        path = self.path(kind)
        if not path.exists():
            log_system_event("sheet_missing", {"sheet": kind, "path": str(path)}, level="warning")
            return SheetTable()
        table = read_table(path)
        log_sheet_operation(kind, "READ", len(table))
        return table

    # -------------------------
    # escrita
    # -------------------------

    def _load_for_write(self, kind: str) -> SheetTable:
        path = self.path(kind)
        if not path.exists():
            raise SheetError(f"aba {kind!r} não encontrada em {path}")
        return read_table(path)

    @staticmethod
    def _check_row(table: SheetTable, row_index: int) -> int:
        try:
            row_index = int(row_index)
        except (TypeError, ValueError):
            raise SheetError(f"índice de linha inválido: {row_index!r}") from None
        if row_index < FIRST_DATA_ROW or row_index > len(table.rows) + 1:
            raise SheetError(f"índice de linha inválido: {row_index}")
        return row_index - FIRST_DATA_ROW

    def append_row(self, kind: str, values: Mapping[str, Any]) -> int:
        """Acrescenta uma linha; colunas ausentes na aba são criadas.

        Returns:
            Número (1-based) da nova linha na planilha.
        """
        table = self._load_for_write(kind)
        for col in values:
            if col not in table.columns:
                table.columns.append(col)
        row = {c: "" for c in table.columns}
        row.update({c: "" if v is None else str(v) for c, v in values.items()})
        table.rows.append(row)
        write_table(self.path(kind), table)
        log_sheet_operation(kind, "APPEND", 1, row_index=len(table.rows) + 1)
        return len(table.rows) + 1

    def update_cell(self, kind: str, row_index: int, column: str, value: Any) -> None:
        table = self._load_for_write(kind)
        pos = self._check_row(table, row_index)
        if column not in table.columns:
            raise SheetError(f"coluna {column!r} não encontrada na aba {kind!r}")
        table.rows[pos][column] = "" if value is None else str(value)
        write_table(self.path(kind), table)
        log_sheet_operation(kind, "UPDATE", 1, row_index=row_index, column=column)

    def ensure_column(self, kind: str, column: str) -> str:
        table = self._load_for_write(kind)
        if column in table.columns:
            return column
        table.columns.append(column)
        for row in table.rows:
            row[column] = ""
        write_table(self.path(kind), table)
        log_sheet_operation(kind, "ADD_COLUMN", 0, column=column)
        return column

    def validate_row(self, kind: str, row_index: int) -> None:
        self._check_row(self._load_for_write(kind), row_index)

    def get_cell(self, kind: str, row_index: int, column: str) -> str:
        table = self._load_for_write(kind)
        pos = self._check_row(table, row_index)
        return table.rows[pos].get(column, "")
