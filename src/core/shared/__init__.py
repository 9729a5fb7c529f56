"""
Shared Domain Components.

Componentes compartilhados entre os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base classes para Domain Events
- Relógio e Guarda de Consistência
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    NotFoundError,
    BusinessRuleViolationError,
    ConflictError,
    ConcurrencyError,
    ConcurrencyConflict,
    TentativasEsgotadasError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork
from .consistency import GuardaConsistencia

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "NotFoundError",
    "BusinessRuleViolationError",
    "ConflictError",
    "ConcurrencyError",
    "ConcurrencyConflict",
    "TentativasEsgotadasError",
    "DomainEvent",
    "UnitOfWork",
    "GuardaConsistencia",
]
