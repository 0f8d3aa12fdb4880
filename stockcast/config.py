# stockcast/config.py
"""
Configurações globais e valores padrão do painel de estoque.
"""

import os
from dataclasses import dataclass


# Diretório padrão da planilha exportada (um CSV por aba)
DATA_DIR = os.environ.get("STOCKCAST_DATA_DIR", os.path.join(os.getcwd(), "data"))

# Nome do arquivo de cada aba, por tipo de entidade
SHEET_FILES = {
    "inventory": "inventory.csv",
    "products": "products.csv",
    "orders": "orders.csv",
    "history": "history.csv",
    "min_amount": "min_amount.csv",
}

# Valores da coluna "התקבל" que marcam uma encomenda como recebida
RECEIVED_VALUES = ("כן", "v", "✓", "true", "yes")
RECEIVED_MARK = "כן"

# Rótulo usado quando o agrupamento de encomendas não tem chave
UNKNOWN_LABEL = "לא ידוע"


@dataclass
class DefaultConfig:
    """Valores padrão para as políticas do painel e da previsão."""
    low_stock_threshold: int = 15
    forecast_weeks: int = 26
    forecast_step_days: int = 7
    min_rate_horizon_days: int = 180   # mínimo consumido em 180 dias
    expected_lead_months: int = 3      # prazo estimado sem data prevista
    days_per_month: int = 30           # conversão taxa/dia -> taxa/mês
    inventory_refresh_s: int = 300
    orders_refresh_s: int = 300
    history_refresh_s: int = 300
    products_refresh_s: int = 600
    min_amount_refresh_s: int = 600

    def refresh_interval(self, kind: str) -> int:
        return getattr(self, f"{kind}_refresh_s", self.inventory_refresh_s)


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
