"""
Relógio do domínio.

Todos os timestamps do core são timezone-aware (UTC). Use cases recebem
um ``Relogio`` injetável para que durações de pausa e atendimento possam
ser testadas com tempo controlado.
"""

from datetime import datetime, timezone
from typing import Callable

Relogio = Callable[[], datetime]


def agora_utc() -> datetime:
    """Retorna o instante atual em UTC."""
    return datetime.now(timezone.utc)
