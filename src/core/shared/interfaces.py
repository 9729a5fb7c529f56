"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Driven ports usados por todos os domínios: UnitOfWork, EventPublisher
e EventStore. Repositórios específicos ficam no ``ports.py`` de cada
domínio.

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Pattern: Context Manager
        with uow:
            ticket_repo.save(ticket)
            atendimento_repo.save(atendimento)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção

    Uma mesma instância pode ser reutilizada em vários blocos ``with``
    consecutivos (a GuardaConsistencia re-executa o bloco inteiro em
    caso de ConcurrencyError). Cada implementação deve reiniciar seu
    estado em ``_begin_transaction``.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Eventos só são publicados após commit bem-sucedido.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações em src/adapters/django_app/events/publishers.py
    (logging, Celery, memória).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    @abstractmethod
    def publish_batch(self, events: List[DomainEvent]) -> None:
        raise NotImplementedError


class EventStore(ABC):
    """
    Interface para persistência de eventos (auditoria).

    O DjangoUnitOfWork grava os eventos na mesma transação das
    entidades, antes do commit.
    """

    @abstractmethod
    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        """
        Adiciona evento ao store.

        Args:
            event: Evento a ser persistido
            sequence: Posição do evento na história do agregado
        """
        raise NotImplementedError

    @abstractmethod
    def next_sequence(self, aggregate_id: str) -> int:
        """Próxima posição livre na história do agregado."""
        raise NotImplementedError
