"""
Utilidades de parsing para datas e quantidades da planilha.

As abas exportadas chegam como texto livre: datas no formato israelense
(dia/mês/ano, com ``/``, ``-`` ou ``.`` e ano com 2 ou 4 dígitos) ou em
ISO 8601, e quantidades com separador de milhar (``"1,200"``). Nenhuma
função daqui levanta exceção: valores ilegíveis viram ``None`` (datas)
ou ``0`` (quantidades).
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

import pandas as pd

_DMY_RE = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2}|\d{4})$")
_INT_RE = re.compile(r"^[-+]?\d+")


def _is_blank(val: Any) -> bool:
    if val is None:
        return True
    try:
        if pd.isna(val):
            return True
    except (TypeError, ValueError):
        pass
    return not str(val).strip()


def parse_date(txt: Any) -> Optional[date]:
    """Interpreta uma data da planilha.

    Ordem de tentativa:
        1. ``dd/mm/yyyy`` (separadores ``/``, ``-`` ou ``.``); ano com
           2 dígitos é interpretado como 2000+ano.
        2. parse genérico do pandas (cobre ISO 8601, com ou sem hora).

    Exemplos:
        "05/03/2024" → date(2024, 3, 5)
        "5.3.24"     → date(2024, 3, 5)
        "2024-03-05" → date(2024, 3, 5)
        "amanhã"     → None

    Args:
        txt: Texto (ou ``date``/``Timestamp``) a ser interpretado.

    Returns:
        A data, ou ``None`` se não for possível interpretar.
    """
    if _is_blank(txt):
        return None
    if isinstance(txt, datetime):
        return txt.date()
    if isinstance(txt, date):
        return txt
    s = str(txt).strip()
    m = _DMY_RE.match(s)
    if m:
        day, month, year = (int(g) for g in m.groups())
        if year < 100:
            year += 2000
        try:
            return date(year, month, day)
        except ValueError:
            # ex.: 31/02/2024, tenta o parse genérico abaixo
            pass
    try:
        ts = pd.to_datetime(s, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def parse_int(txt: Any) -> int:
    """Converte uma quantidade da planilha em inteiro não negativo.

    Remove vírgulas de milhar e lê o prefixo inteiro (``"12.7"`` → 12,
    ``"30 un"`` → 30). Valores ilegíveis ou negativos resultam em 0.
    """
    if isinstance(txt, bool):
        return int(txt)
    if isinstance(txt, int):
        return max(0, txt)
    if _is_blank(txt):
        return 0
    s = str(txt).strip().replace(",", "")
    m = _INT_RE.match(s)
    if not m:
        return 0
    return max(0, int(m.group(0)))


def clean_text(txt: Any) -> str:
    """Texto aparado; valores nulos viram string vazia."""
    if _is_blank(txt):
        return ""
    return str(txt).strip()
