# stockcast/adapters/sheet_loader.py
"""
Leitura e escrita das abas exportadas (CSV ou XLSX) como tabelas de texto.

Essas funções:
- leem a aba com pandas, todas as colunas como string;
- preservam as linhas em branco, para que a posição de cada linha continue
  batendo com o número da linha na planilha (cabeçalho = linha 1);
- devolvem os cabeçalhos aparados e as linhas como dicionários.

Observações:
- Não fazem parsing de datas nem de quantidades (isso é do normalizador).
- Valores nulos viram string vazia.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

PathLike = Union[str, Path]


@dataclass
class SheetTable:
    """Conteúdo de uma aba: cabeçalhos e linhas (na ordem da planilha)."""
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def _is_excel(path: Path) -> bool:
    return path.suffix.lower() in (".xlsx", ".xlsm", ".xls")


def read_table(path: PathLike) -> SheetTable:
    """Lê uma aba CSV/XLSX e retorna ``SheetTable``."""
    path = Path(path)
    try:
        if _is_excel(path):
            df = pd.read_excel(path, dtype="string")
        else:
            df = pd.read_csv(
                path,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                encoding="utf-8-sig",
            )
    except pd.errors.EmptyDataError:
        return SheetTable()
    df = df.rename(columns=lambda c: str(c).strip())
    df = df.astype("string").fillna("")
    columns = [str(c) for c in df.columns]
    rows = [{c: str(v) for c, v in zip(columns, values)} for values in df.itertuples(index=False, name=None)]
    return SheetTable(columns=columns, rows=rows)


def write_table(path: PathLike, table: SheetTable) -> None:
    """Grava a aba inteira (sobrescreve o arquivo)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(table.rows, columns=table.columns).fillna("")
    if _is_excel(path):
        df.to_excel(path, index=False)
    else:
        df.to_csv(path, index=False, encoding="utf-8")
