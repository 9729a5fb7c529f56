"""
Domain Events - base para os fatos publicados pelo core.

Um evento é registrado no UnitOfWork durante a transação e só é
entregue aos publishers depois do commit. Se a transação for desfeita
(ou re-tentada pela GuardaConsistencia) os eventos pendentes são
descartados.

Características:
- Auto-geração de ID e timestamp (UTC)
- Serializáveis em dicionários de tipos primitivos (JSON/Celery)
- Rastreáveis via aggregate_id
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
import uuid

from .clock import agora_utc


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Subclasses declaram seus campos específicos (todos com default, pois
    os campos base já têm default) e o ``aggregate_type``.

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento

    Example:
        @dataclass
        class OperacaoIniciadaEvent(DomainEvent):
            usuario_id: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Operacao"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=agora_utc)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Nome do tipo do agregado (ex: "Ticket", "Operacao")."""
        ...

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Usado pelo Event Store, pelo CeleryEventPublisher e nos logs.
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos específicos da subclasse."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
