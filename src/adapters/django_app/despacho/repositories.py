"""
Repositórios Django para persistência do Despacho.

Implementam as interfaces (Ports) definidas em src/core/despacho/ports.py.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Mapear entities para models e vice-versa (via Mappers)
- Travar linhas relidas pelos use cases (select_for_update)
- Gravar com checagem de versão (herdado de BaseRepository)

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from django.db.models import Max
from django.db.models.functions import Coalesce

from src.core.despacho.entities import (
    AtendimentoEntity,
    ClienteEntity,
    OperacaoEntity,
    PausaEntity,
    PontoAtendimentoEntity,
    SetorEntity,
    TicketEntity,
)
from src.core.despacho.ports import RepositoriosDespacho
from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventStore

from ..shared.repository import BaseRepository
from .mappers import (
    AtendimentoMapper,
    ClienteMapper,
    DomainEventMapper,
    OperacaoMapper,
    PausaMapper,
    PontoAtendimentoMapper,
    SetorMapper,
    TicketMapper,
)
from .models import (
    AtendimentoModel,
    AtendimentoStatusChoices,
    ClienteModel,
    DomainEventModel,
    OperacaoModel,
    OPERACAO_ATIVA,
    PausaModel,
    PausaStatusChoices,
    PontoAtendimentoModel,
    SetorModel,
    TicketModel,
    TicketStatusChoices,
)

logger = logging.getLogger(__name__)


class DjangoSetorRepository(BaseRepository[SetorEntity, SetorModel]):
    model_class = SetorModel
    versionado = False

    def to_entity(self, model):
        return SetorMapper.to_entity(model)

    def to_fields(self, entity):
        return SetorMapper.to_fields(entity)


class DjangoClienteRepository(BaseRepository[ClienteEntity, ClienteModel]):
    model_class = ClienteModel
    versionado = False

    def to_entity(self, model):
        return ClienteMapper.to_entity(model)

    def to_fields(self, entity):
        return ClienteMapper.to_fields(entity)


class DjangoPontoAtendimentoRepository(BaseRepository[PontoAtendimentoEntity, PontoAtendimentoModel]):
    model_class = PontoAtendimentoModel

    def to_entity(self, model):
        return PontoAtendimentoMapper.to_entity(model)

    def to_fields(self, entity):
        return PontoAtendimentoMapper.to_fields(entity)

    def list_by_setor(self, setor_id: str) -> List[PontoAtendimentoEntity]:
        return self._to_entities(self.model_class.objects.filter(setor_id=setor_id))


class DjangoTicketRepository(BaseRepository[TicketEntity, TicketModel]):
    """
    Implementação Django do TicketRepository.

    Example:
        repo = DjangoTicketRepository()
        with uow:
            pendentes = repo.list_pendentes(setor_id, for_update=True)
    """

    model_class = TicketModel

    def to_entity(self, model):
        return TicketMapper.to_entity(model)

    def to_fields(self, entity):
        return TicketMapper.to_fields(entity)

    def list_pendentes(self, setor_id: str, for_update: bool = False) -> List[TicketEntity]:
        qs = self.model_class.objects.filter(
            setor_id=setor_id,
            status=TicketStatusChoices.PENDENTE,
        ).order_by('-prioridade', 'criado_em', 'id')

        if for_update:
            qs = qs.select_for_update()

        return self._to_entities(qs)


class DjangoOperacaoRepository(BaseRepository[OperacaoEntity, OperacaoModel]):
    model_class = OperacaoModel

    def to_entity(self, model):
        return OperacaoMapper.to_entity(model)

    def to_fields(self, entity):
        return OperacaoMapper.to_fields(entity)

    def get_ativa_por_ponto(self, ponto_id: str) -> Optional[OperacaoEntity]:
        model = self.model_class.objects.filter(OPERACAO_ATIVA, ponto_atendimento_id=ponto_id).first()
        return self.to_entity(model) if model else None

    def get_ativa_por_usuario(self, usuario_id: str) -> Optional[OperacaoEntity]:
        model = self.model_class.objects.filter(OPERACAO_ATIVA, usuario_id=usuario_id).first()
        return self.to_entity(model) if model else None

    def list_by_usuario(self, usuario_id: str) -> List[OperacaoEntity]:
        return self._to_entities(
            self.model_class.objects.filter(usuario_id=usuario_id).order_by('criado_em')
        )


class DjangoPausaRepository(BaseRepository[PausaEntity, PausaModel]):
    model_class = PausaModel

    def to_entity(self, model):
        return PausaMapper.to_entity(model)

    def to_fields(self, entity):
        return PausaMapper.to_fields(entity)

    def get_em_andamento(self, operacao_id: str) -> Optional[PausaEntity]:
        model = self.model_class.objects.filter(
            operacao_id=operacao_id,
            status=PausaStatusChoices.EM_ANDAMENTO,
        ).first()
        return self.to_entity(model) if model else None

    def list_by_operacoes(self, operacao_ids: List[str]) -> List[PausaEntity]:
        return self._to_entities(
            self.model_class.objects.filter(operacao_id__in=operacao_ids).order_by('criado_em')
        )


class DjangoAtendimentoRepository(BaseRepository[AtendimentoEntity, AtendimentoModel]):
    model_class = AtendimentoModel

    def to_entity(self, model):
        return AtendimentoMapper.to_entity(model)

    def to_fields(self, entity):
        return AtendimentoMapper.to_fields(entity)

    def get_em_servico_por_operacao(self, operacao_id: str) -> Optional[AtendimentoEntity]:
        model = self.model_class.objects.filter(
            operacao_id=operacao_id,
            status=AtendimentoStatusChoices.EM_SERVICO,
        ).first()
        return self.to_entity(model) if model else None

    def get_aberto_por_ticket(self, ticket_id: str) -> Optional[AtendimentoEntity]:
        model = self.model_class.objects.filter(
            ticket_id=ticket_id,
            status=AtendimentoStatusChoices.EM_SERVICO,
        ).first()
        return self.to_entity(model) if model else None

    def list_by_operacoes(self, operacao_ids: List[str]) -> List[AtendimentoEntity]:
        return self._to_entities(
            self.model_class.objects.filter(operacao_id__in=operacao_ids).order_by('criado_em')
        )

    def listar_recentes(self, limite: int) -> List[AtendimentoEntity]:
        qs = (
            self.model_class.objects
            .annotate(ultima_chamada=Coalesce('chamado_novamente_em', 'criado_em'))
            .order_by('-ultima_chamada', '-id')[:limite]
        )
        return self._to_entities(qs)

    def list_criados_desde(self, inicio: datetime) -> List[AtendimentoEntity]:
        return self._to_entities(
            self.model_class.objects.filter(criado_em__gte=inicio).order_by('criado_em')
        )


class DjangoEventStore(EventStore):
    """
    Event Store usando Django ORM.

    Gravado pelo DjangoUnitOfWork dentro da transação das entidades.
    """

    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        model = DomainEventMapper.to_model(event, sequence=sequence)
        model.save(force_insert=True)

        logger.debug(f"Event stored: {event.event_type} for {event.aggregate_id}")

    def next_sequence(self, aggregate_id: str) -> int:
        atual = (
            DomainEventModel.objects
            .filter(aggregate_id=aggregate_id)
            .aggregate(maior=Max('sequence'))['maior']
        )
        return (atual or 0) + 1

    def get_events_for_aggregate(
        self,
        aggregate_id: str,
        since_sequence: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Recupera eventos de um agregado, em ordem de sequência.
        """
        events = (
            DomainEventModel.objects
            .filter(aggregate_id=aggregate_id, sequence__gte=since_sequence)
            .order_by('sequence')
        )

        return [
            {
                'event_id': e.event_id,
                'event_type': e.event_type,
                'aggregate_id': e.aggregate_id,
                'event_data': e.event_data,
                'sequence': e.sequence,
                'occurred_at': e.occurred_at,
            }
            for e in events
        ]

    def remover_anteriores(self, limite: datetime) -> int:
        """
        Remove eventos gravados antes de ``limite``.

        Returns:
            Quantidade removida
        """
        removidos, _ = DomainEventModel.objects.filter(recorded_at__lt=limite).delete()
        return removidos


def criar_repositorios_django() -> RepositoriosDespacho:
    """Conjunto de repositórios Django para os use cases."""
    return RepositoriosDespacho(
        setores=DjangoSetorRepository(),
        clientes=DjangoClienteRepository(),
        pontos=DjangoPontoAtendimentoRepository(),
        tickets=DjangoTicketRepository(),
        operacoes=DjangoOperacaoRepository(),
        pausas=DjangoPausaRepository(),
        atendimentos=DjangoAtendimentoRepository(),
    )
