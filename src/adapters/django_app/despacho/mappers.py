"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- to_entity(): Model → Entity (para uso no Core)
- to_fields(): Entity → campos do Model (para gravação versionada)
- DomainEvent → DomainEventModel (para Event Store)

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados (enums ↔ valores persistidos)
"""

from typing import Any, Dict

from src.core.despacho.entities import (
    AtendimentoEntity,
    AtendimentoStatus,
    ClienteEntity,
    DisponibilidadePonto,
    MotivoPausa,
    OperacaoEntity,
    OperacaoStatus,
    PausaEntity,
    PausaStatus,
    PontoAtendimentoEntity,
    SetorEntity,
    TicketEntity,
    TicketPriority,
    TicketStatus,
    TipoResolucao,
)
from src.core.shared.events import DomainEvent

from .models import (
    AtendimentoModel,
    ClienteModel,
    DomainEventModel,
    OperacaoModel,
    PausaModel,
    PontoAtendimentoModel,
    SetorModel,
    TicketModel,
)


class SetorMapper:
    @staticmethod
    def to_entity(model: SetorModel) -> SetorEntity:
        return SetorEntity(id=model.id, nome=model.nome)

    @staticmethod
    def to_fields(entity: SetorEntity) -> Dict[str, Any]:
        return {"nome": entity.nome}


class ClienteMapper:
    @staticmethod
    def to_entity(model: ClienteModel) -> ClienteEntity:
        return ClienteEntity(
            id=model.id,
            nome=model.nome,
            cpf=model.cpf or "",
            data_nascimento=model.data_nascimento,
        )

    @staticmethod
    def to_fields(entity: ClienteEntity) -> Dict[str, Any]:
        return {
            "nome": entity.nome,
            # CPF vazio vira NULL para não colidir na restrição única
            "cpf": entity.cpf or None,
            "data_nascimento": entity.data_nascimento,
        }


class PontoAtendimentoMapper:
    @staticmethod
    def to_entity(model: PontoAtendimentoModel) -> PontoAtendimentoEntity:
        return PontoAtendimentoEntity(
            id=model.id,
            setor_id=model.setor_id,
            nome=model.nome,
            disponibilidade=DisponibilidadePonto(model.disponibilidade),
            prioridade_preferida=TicketPriority(model.prioridade_preferida),
            versao=model.versao,
        )

    @staticmethod
    def to_fields(entity: PontoAtendimentoEntity) -> Dict[str, Any]:
        return {
            "setor_id": entity.setor_id,
            "nome": entity.nome,
            "disponibilidade": entity.disponibilidade.value,
            "prioridade_preferida": entity.prioridade_preferida.value,
        }


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    Note:
        Bypassa validações do factory method .criar()
        pois dados já foram validados na criação original
    """

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        return TicketEntity(
            id=model.id,
            cliente_id=model.cliente_id,
            setor_id=model.setor_id,
            prioridade=TicketPriority(model.prioridade),
            status=TicketStatus(model.status),
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            versao=model.versao,
        )

    @staticmethod
    def to_fields(entity: TicketEntity) -> Dict[str, Any]:
        return {
            "cliente_id": entity.cliente_id,
            "setor_id": entity.setor_id,
            "prioridade": entity.prioridade.value,
            "status": entity.status.value,
            "criado_em": entity.criado_em,
            "atualizado_em": entity.atualizado_em,
        }


class OperacaoMapper:
    @staticmethod
    def to_entity(model: OperacaoModel) -> OperacaoEntity:
        return OperacaoEntity(
            id=model.id,
            usuario_id=model.usuario_id,
            ponto_atendimento_id=model.ponto_atendimento_id,
            status=OperacaoStatus(model.status),
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            versao=model.versao,
        )

    @staticmethod
    def to_fields(entity: OperacaoEntity) -> Dict[str, Any]:
        return {
            "usuario_id": entity.usuario_id,
            "ponto_atendimento_id": entity.ponto_atendimento_id,
            "status": entity.status.value,
            "criado_em": entity.criado_em,
            "atualizado_em": entity.atualizado_em,
        }


class PausaMapper:
    @staticmethod
    def to_entity(model: PausaModel) -> PausaEntity:
        return PausaEntity(
            id=model.id,
            operacao_id=model.operacao_id,
            motivo=MotivoPausa(model.motivo),
            status=PausaStatus(model.status),
            duracao=model.duracao,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            versao=model.versao,
        )

    @staticmethod
    def to_fields(entity: PausaEntity) -> Dict[str, Any]:
        return {
            "operacao_id": entity.operacao_id,
            "motivo": entity.motivo.value,
            "status": entity.status.value,
            "duracao": entity.duracao,
            "criado_em": entity.criado_em,
            "atualizado_em": entity.atualizado_em,
        }


class AtendimentoMapper:
    @staticmethod
    def to_entity(model: AtendimentoModel) -> AtendimentoEntity:
        return AtendimentoEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            operacao_id=model.operacao_id,
            status=AtendimentoStatus(model.status),
            tipo_resolucao=TipoResolucao(model.tipo_resolucao) if model.tipo_resolucao else None,
            duracao=model.duracao,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            chamado_novamente_em=model.chamado_novamente_em,
            versao=model.versao,
        )

    @staticmethod
    def to_fields(entity: AtendimentoEntity) -> Dict[str, Any]:
        return {
            "ticket_id": entity.ticket_id,
            "operacao_id": entity.operacao_id,
            "status": entity.status.value,
            "tipo_resolucao": entity.tipo_resolucao.value if entity.tipo_resolucao else None,
            "duracao": entity.duracao,
            "criado_em": entity.criado_em,
            "atualizado_em": entity.atualizado_em,
            "chamado_novamente_em": entity.chamado_novamente_em,
        }


class DomainEventMapper:
    """
    Mapper para Domain Events → Event Store.

    Persiste eventos para auditoria e reprocessamento.
    """

    @staticmethod
    def to_model(event: DomainEvent, sequence: int = 0) -> DomainEventModel:
        return DomainEventModel(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=event.to_dict()["data"],
            version=event.version,
            sequence=sequence,
            occurred_at=event.occurred_at,
        )
