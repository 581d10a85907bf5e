"""
Utilitários centralizados para datas e timestamps.
Todas as operações usam o fuso configurado em settings.TIMEZONE
(padrão America/Sao_Paulo) como referência.

Convenção do sistema:
- Timestamps são persistidos **naive** (sem tzinfo) já convertidos para o fuso local.
"""
from datetime import datetime
from zoneinfo import ZoneInfo

from config.settings import settings

LOCAL_TZ = ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """
    Retorna o datetime atual no fuso local (naive, para colunas DATETIME).
    """
    return datetime.now(LOCAL_TZ).replace(tzinfo=None, microsecond=0)
