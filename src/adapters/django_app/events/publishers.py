"""
Event Publishers - Publicadores de Eventos de Domínio.

Recebem os eventos do UnitOfWork depois do commit. Implementações:
- LoggingEventPublisher: Apenas loga (desenvolvimento, modo "sync")
- CeleryEventPublisher: Publica via Celery (produção, modo "celery")
- InMemoryEventPublisher: Para testes
- CompositeEventPublisher: Delega para vários publishers

A transação já foi confirmada quando o publisher roda; falhas aqui são
logadas e não desfazem o comando.
"""

from typing import Callable, Dict, List, Optional
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class _HandlersLocais:
    """Registro de handlers síncronos por tipo de evento."""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Registra handler para tipo de evento."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


class LoggingEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher que loga eventos.

    Usado em desenvolvimento para visualizar eventos sem infraestrutura
    de mensageria. Com ``dispatch_to_celery`` também envia ao Celery.
    """

    def __init__(self, log_level: int = logging.INFO, dispatch_to_celery: bool = False):
        super().__init__()
        self._log_level = log_level
        self._dispatch_to_celery = dispatch_to_celery

    def publish(self, event: DomainEvent) -> None:
        event_data = event.to_dict()

        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_type}:{event.aggregate_id} | "
            f"data={json.dumps(event_data['data'], default=str)}"
        )

        if self._dispatch_to_celery:
            _enviar_para_celery(event)

        self._dispatch_to_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para o Celery (fila "events").

    Usado em produção para processamento assíncrono.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        _enviar_para_celery(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


def _enviar_para_celery(event: DomainEvent) -> None:
    try:
        from src.adapters.django_app.events.handlers import dispatch_domain_event
        dispatch_domain_event.delay(event.event_type, event.to_dict())
    except Exception as e:
        logger.error(f"Falha ao publicar {event.event_type} no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def clear(self) -> None:
        self._published_events.clear()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        """Filtra eventos por tipo."""
        return [e for e in self._published_events if e.event_type == event_type]


class CompositeEventPublisher(EventPublisher):
    """
    Publisher que delega para múltiplos publishers.

    A falha de um publisher não impede os demais.
    """

    def __init__(self, publishers: Optional[List[EventPublisher]] = None):
        self._publishers = publishers or []

    def add_publisher(self, publisher: EventPublisher) -> None:
        self._publishers.append(publisher)

    def publish(self, event: DomainEvent) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish(event)
            except Exception as e:
                logger.error(
                    f"Erro ao publicar em {publisher.__class__.__name__}: {e}"
                )

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish_batch(events)
            except Exception as e:
                logger.error(
                    f"Erro ao publicar batch em {publisher.__class__.__name__}: {e}"
                )


def get_event_publisher(mode: str = "sync") -> EventPublisher:
    """
    Factory para obter o publisher do modo configurado.

    Args:
        mode: "sync" (logging), "celery" ou "memory"

    Raises:
        ValueError: Modo desconhecido
    """
    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "sync":
        return LoggingEventPublisher(dispatch_to_celery=False)
    if mode == "memory":
        return InMemoryEventPublisher()

    raise ValueError(f"EVENT_PUBLISHER_MODE desconhecido: {mode!r}")
