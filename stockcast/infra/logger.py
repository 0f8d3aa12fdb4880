"""
Sistema de logging do painel de estoque.

Este módulo configura e fornece loggers para registrar as leituras e
escritas na planilha, as previsões calculadas e os eventos do sistema.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False


def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)


# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é aberto na primeira mensagem (``delay=True``), então
    importar o módulo não cria arquivos enquanto o logging estiver desligado.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Remove handlers anteriores (reimportação em testes)
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


# Diretório base para logs (na pasta do pacote)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

system_logger = setup_logger('stockcast.system', str(LOGS_DIR / 'system.log'))
sheets_logger = setup_logger('stockcast.sheets', str(LOGS_DIR / 'sheets.log'))
forecast_logger = setup_logger('stockcast.forecast', str(LOGS_DIR / 'forecast.log'))


def _enabled() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not _enabled():
        return
    log_data = {
        "event": event,
        "details": details or {}
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def log_sheet_operation(sheet: str, operation: str, rows: int = 0, **kwargs) -> None:
    """
    Log para leituras e escritas na planilha.

    Args:
        sheet: Nome da aba
        operation: READ, APPEND, UPDATE, ...
        rows: Número de linhas envolvidas
        **kwargs: Dados adicionais
    """
    if not _enabled():
        return
    log_data = {
        "sheet": sheet,
        "operation": operation,
        "rows": rows,
        **kwargs
    }
    sheets_logger.info(f"SHEET_{operation.upper()}: {log_data}")


def log_forecast(
    sku: str,
    points: int,
    decline_rate: float,
    real_rate: float,
    critical_date: Optional[str] = None,
    **kwargs,
) -> None:
    """
    Log de uma previsão calculada.

    Args:
        sku: Produto
        points: Número de pontos da série
        decline_rate: Taxa usada na projeção (unid./dia)
        real_rate: Taxa observada por regressão (unid./dia)
        critical_date: Data crítica em ISO, se houver
    """
    if not _enabled():
        return
    log_data = {
        "sku": sku,
        "points": points,
        "decline_rate": round(decline_rate, 4),
        "real_rate": round(real_rate, 4),
        "critical_date": critical_date,
        **kwargs
    }
    forecast_logger.info(f"FORECAST: {log_data}")


def get_log_summary(log_type: str = "system", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (system, sheets, forecast)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not _enabled():
        return None

    log_files = {
        "system": LOGS_DIR / "system.log",
        "sheets": LOGS_DIR / "sheets.log",
        "forecast": LOGS_DIR / "forecast.log",
    }

    log_file = log_files.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
    except OSError as e:
        return f"Erro ao ler log {log_type}: {e}"
    recent_lines = all_lines[-lines:] if len(all_lines) > lines else all_lines
    return ''.join(recent_lines)
