"""
Unit of Work - Implementações Django e em memória.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo consistência de dados.

Responsabilidades:
- Iniciar/finalizar transações
- Commit/Rollback coordenado
- Persistir eventos no Event Store antes do commit
- Publicar eventos após commit bem-sucedido
- Traduzir falhas de integridade/serialização em ConcurrencyError

Ambas as implementações podem ser reutilizadas em blocos ``with``
consecutivos: a GuardaConsistencia re-executa o bloco inteiro quando
uma tentativa falha com ConcurrencyError.
"""

from typing import Iterable, List, Optional
import logging
import threading

from django.db import IntegrityError, OperationalError, transaction

from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import ConcurrencyError
from src.core.shared.interfaces import EventPublisher, EventStore, UnitOfWork

logger = logging.getLogger(__name__)

ERROS_DE_CONCORRENCIA = (IntegrityError, OperationalError)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa ``transaction.atomic()``; dentro de outra transação (ex.: testes
    com pytest-django) vira um savepoint. Eventos são gravados no Event
    Store dentro da transação e publicados apenas após o commit.

    Violações de restrição única (as restrições parciais garantem os
    "no máximo um") e falhas de serialização/deadlock são convertidas em
    ConcurrencyError, que a GuardaConsistencia re-tenta.

    Example:
        with DjangoUnitOfWork(event_publisher, event_store) as uow:
            repo.save(entity1)
            repo.save(entity2)
            uow.publish_event(MyEvent(...))
        # Commit automático + eventos publicados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store: Optional[EventStore] = None,
        using: Optional[str] = None,
    ):
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._using = using
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self.clear_events()
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        super().__exit__(exc_type, exc_val, exc_tb)
        if exc_type is not None and issubclass(exc_type, ERROS_DE_CONCORRENCIA):
            raise ConcurrencyError(
                f"Conflito de concorrência no banco: {exc_val}"
            ) from exc_val
        return False

    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Ordem de execução:
        1. Persistir eventos no Event Store (dentro da transação)
        2. Commit da transação no banco
        3. Publicar eventos para handlers assíncronos

        Raises:
            ConcurrencyError: Se o commit falhar por integridade/serialização
        """
        if self._atomic is None or self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        try:
            if self._event_store and self._events:
                self._persist_events()
        except Exception:
            self.rollback()
            raise

        atomic, self._atomic = self._atomic, None
        try:
            atomic.__exit__(None, None, None)
        except ERROS_DE_CONCORRENCIA as e:
            self._rolled_back = True
            self.clear_events()
            raise ConcurrencyError(f"Commit falhou por conflito: {e}") from e

        self._committed = True
        logger.debug("Transaction committed")

        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if self._atomic is None or self._committed or self._rolled_back:
            return

        atomic, self._atomic = self._atomic, None
        try:
            transaction.set_rollback(True, using=self._using)
            atomic.__exit__(None, None, None)
            logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _persist_events(self) -> None:
        for event in self._events:
            sequence = self._event_store.next_sequence(event.aggregate_id)
            self._event_store.append(event, sequence=sequence)

    def _publish_events(self) -> None:
        """
        Publica eventos para handlers assíncronos.

        Falhas de publicação são apenas logadas: o commit já aconteceu e os
        eventos estão no Event Store.
        """
        eventos = list(self._events)
        self.clear_events()

        for event in eventos:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event: {e}")

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


_LOCK_EM_MEMORIA = threading.RLock()


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Serializa as transações com um RLock compartilhado (por padrão, o
    mesmo para todas as instâncias) e, no rollback, restaura o snapshot
    dos repositórios em memória tirado no início da transação.

    Example:
        repos = RepositoriosDespacho.em_memoria()
        uow = InMemoryUnitOfWork(repos)
        with uow:
            repos.tickets.save(ticket)
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(
        self,
        repositorios: Optional[Iterable] = None,
        lock: Optional[threading.RLock] = None,
        event_publisher: Optional[EventPublisher] = None,
    ):
        super().__init__()
        self._repositorios = list(repositorios) if repositorios is not None else []
        self._lock = lock or _LOCK_EM_MEMORIA
        self._event_publisher = event_publisher
        self._snapshots = []
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._lock.acquire()
        self.clear_events()
        self._committed = False
        self._rolled_back = False
        self._snapshots = [
            (repo, repo.snapshot())
            for repo in self._repositorios
            if hasattr(repo, "snapshot")
        ]

    def commit(self) -> None:
        eventos = list(self._events)
        try:
            self._committed = True
            self._published_events.extend(eventos)
            self.clear_events()
            self._snapshots = []
        finally:
            self._lock.release()

        if self._event_publisher and eventos:
            self._event_publisher.publish_batch(eventos)

    def rollback(self) -> None:
        try:
            for repo, estado in self._snapshots:
                repo.restore(estado)
            self._snapshots = []
            self._rolled_back = True
            self.clear_events()
        finally:
            self._lock.release()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos que foram 'publicados' (após commit)."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
