"""
Data Transfer Objects (DTOs) do Domínio de Despacho.

Tipos de DTOs:
- Input DTOs: Comandos vindos das views/forms (imutáveis)
- Query DTOs: Parâmetros das consultas
- Output DTOs: Formatam dados para resposta (JSON)

Os valores de enum saem sempre como o valor persistido ("pending",
"in_service", ...), nunca como o nome Python.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .entities import (
    AtendimentoEntity,
    OperacaoEntity,
    PausaEntity,
    PontoAtendimentoEntity,
    TicketEntity,
)


def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Attributes:
        cliente_id: ID do consumidor
        setor_id: ID do setor
        prioridade: 0 (normal) ou 1 (prioritário); validado no use case
    """

    cliente_id: str
    setor_id: str
    prioridade: Any = 0

    def to_dict(self) -> dict:
        return {
            "cliente_id": self.cliente_id,
            "setor_id": self.setor_id,
            "prioridade": self.prioridade,
        }


@dataclass(frozen=True)
class CancelarTicketInputDTO:
    ticket_id: str


@dataclass(frozen=True)
class IniciarOperacaoInputDTO:
    """
    Attributes:
        usuario_id: Profissional que abre a sessão
        ponto_atendimento_id: Guichê onde vai atender
    """

    usuario_id: str
    ponto_atendimento_id: str

    def to_dict(self) -> dict:
        return {
            "usuario_id": self.usuario_id,
            "ponto_atendimento_id": self.ponto_atendimento_id,
        }


@dataclass(frozen=True)
class PausarOperacaoInputDTO:
    """
    Attributes:
        operacao_id: Operação a pausar
        motivo: Valor ("lunch") ou nome ("ALMOCO") do MotivoPausa
    """

    operacao_id: str
    motivo: str

    def to_dict(self) -> dict:
        return {"operacao_id": self.operacao_id, "motivo": self.motivo}


@dataclass(frozen=True)
class RetomarOperacaoInputDTO:
    operacao_id: str


@dataclass(frozen=True)
class EncerrarOperacaoInputDTO:
    operacao_id: str


@dataclass(frozen=True)
class ChamarProximoInputDTO:
    operacao_id: str


@dataclass(frozen=True)
class ChamarNovamenteInputDTO:
    atendimento_id: str


@dataclass(frozen=True)
class FinalizarAtendimentoInputDTO:
    """
    DTO de entrada para finalizar atendimento.

    Attributes:
        atendimento_id: Atendimento em serviço
        tipo_resolucao: "complaint", "denunciation" ou "consultation"
        metadados: Dados do registro de resolução, repassados à camada
            de cadastro através do AtendimentoFinalizadoEvent
    """

    atendimento_id: str
    tipo_resolucao: str
    metadados: Any = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "atendimento_id": self.atendimento_id,
            "tipo_resolucao": self.tipo_resolucao,
            "metadados": self.metadados,
        }


@dataclass(frozen=True)
class CancelarAtendimentoInputDTO:
    atendimento_id: str


# =============================================================================
# QUERY DTOs (Consultas)
# =============================================================================

@dataclass(frozen=True)
class ProximoTicketQueryDTO:
    """
    Attributes:
        setor_id: Setor da fila
        ponto_atendimento_id: Ponto que vai chamar (usado apenas quando a
            prioridade preferida está habilitada)
    """

    setor_id: str
    ponto_atendimento_id: Optional[str] = None


@dataclass(frozen=True)
class ListarFilaQueryDTO:
    setor_id: str


@dataclass(frozen=True)
class AtendimentoAtivoQueryDTO:
    usuario_id: str


@dataclass(frozen=True)
class UltimosChamadosQueryDTO:
    limite: Optional[int] = None


@dataclass(frozen=True)
class MetricasProfissionalQueryDTO:
    """
    Attributes:
        usuario_id: Profissional
        inicio: Início do período (inclusive); ignorado sem ``fim``
        fim: Fim do período (inclusive); ignorado sem ``inicio``
    """

    usuario_id: str
    inicio: Optional[datetime] = None
    fim: Optional[datetime] = None

    @property
    def tem_periodo(self) -> bool:
        return self.inicio is not None and self.fim is not None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída do ticket.

    Attributes:
        prioridade: 0 ou 1
        status: Valor persistido ("pending", "in-attendance", ...)
    """

    id: str
    cliente_id: str
    setor_id: str
    prioridade: int
    status: str
    criado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketOutputDTO":
        return cls(
            id=entity.id,
            cliente_id=entity.cliente_id,
            setor_id=entity.setor_id,
            prioridade=entity.prioridade.value,
            status=entity.status.value,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cliente_id": self.cliente_id,
            "setor_id": self.setor_id,
            "prioridade": self.prioridade,
            "status": self.status,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class OperacaoOutputDTO:
    """
    DTO de saída da operação.

    Attributes:
        disponibilidade_ponto: Disponibilidade do ponto após o comando
        duracao: Minutos da operação (apenas quando finalizada)
    """

    id: str
    usuario_id: str
    ponto_atendimento_id: str
    status: str
    criado_em: datetime
    atualizado_em: datetime
    disponibilidade_ponto: Optional[str] = None
    duracao: Optional[int] = None

    @classmethod
    def from_entity(
        cls,
        entity: OperacaoEntity,
        ponto: Optional[PontoAtendimentoEntity] = None,
    ) -> "OperacaoOutputDTO":
        return cls(
            id=entity.id,
            usuario_id=entity.usuario_id,
            ponto_atendimento_id=entity.ponto_atendimento_id,
            status=entity.status.value,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            disponibilidade_ponto=ponto.disponibilidade.value if ponto else None,
            duracao=entity.duracao_minutos,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "usuario_id": self.usuario_id,
            "ponto_atendimento_id": self.ponto_atendimento_id,
            "status": self.status,
            "disponibilidade_ponto": self.disponibilidade_ponto,
            "duracao": self.duracao,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class PausaOutputDTO:
    id: str
    operacao_id: str
    motivo: str
    motivo_rotulo: str
    status: str
    duracao: Optional[int]
    criado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, entity: PausaEntity) -> "PausaOutputDTO":
        return cls(
            id=entity.id,
            operacao_id=entity.operacao_id,
            motivo=entity.motivo.value,
            motivo_rotulo=entity.motivo.rotulo,
            status=entity.status.value,
            duracao=entity.duracao,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "operacao_id": self.operacao_id,
            "motivo": self.motivo,
            "motivo_rotulo": self.motivo_rotulo,
            "status": self.status,
            "duracao": self.duracao,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class AtendimentoOutputDTO:
    """
    DTO de saída do atendimento.

    Attributes:
        tipo_resolucao: Preenchido apenas quando finalizado
        duracao: Minutos (apenas quando encerrado)
        chamado_novamente_em: Última rechamada do consumidor
    """

    id: str
    ticket_id: str
    operacao_id: str
    status: str
    tipo_resolucao: Optional[str]
    duracao: Optional[int]
    criado_em: datetime
    atualizado_em: datetime
    chamado_novamente_em: Optional[datetime] = None

    @classmethod
    def from_entity(cls, entity: AtendimentoEntity) -> "AtendimentoOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            operacao_id=entity.operacao_id,
            status=entity.status.value,
            tipo_resolucao=entity.tipo_resolucao.value if entity.tipo_resolucao else None,
            duracao=entity.duracao,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            chamado_novamente_em=entity.chamado_novamente_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "operacao_id": self.operacao_id,
            "status": self.status,
            "tipo_resolucao": self.tipo_resolucao,
            "duracao": self.duracao,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
            "chamado_novamente_em": _iso(self.chamado_novamente_em),
        }


@dataclass
class ChamadaResultadoDTO:
    """
    Resultado de "chamar próximo".

    Fila vazia é um resultado de sucesso distinto, não um erro.

    Example:
        resultado = service.execute(ChamarProximoInputDTO(operacao_id="..."))
        if resultado.fila_vazia:
            ...
        else:
            print(resultado.atendimento.id)
    """

    fila_vazia: bool
    atendimento: Optional[AtendimentoOutputDTO] = None
    ticket: Optional[TicketOutputDTO] = None

    @classmethod
    def vazia(cls) -> "ChamadaResultadoDTO":
        return cls(fila_vazia=True)

    @classmethod
    def chamado(
        cls,
        atendimento: AtendimentoEntity,
        ticket: TicketEntity,
    ) -> "ChamadaResultadoDTO":
        return cls(
            fila_vazia=False,
            atendimento=AtendimentoOutputDTO.from_entity(atendimento),
            ticket=TicketOutputDTO.from_entity(ticket),
        )

    def to_dict(self) -> dict:
        if self.fila_vazia:
            return {"fila_vazia": True}

        return {
            "fila_vazia": False,
            "atendimento": self.atendimento.to_dict(),
            "ticket": self.ticket.to_dict(),
        }


@dataclass
class AckDTO:
    """Confirmação de que o consumidor foi chamado novamente."""

    atendimento_id: str
    chamado_em: datetime

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "atendimento_id": self.atendimento_id,
            "chamado_em": self.chamado_em.isoformat(),
        }


@dataclass
class AtendimentoAtivoDTO:
    """
    Situação do profissional: operação ativa e atendimento em serviço.

    Attributes:
        operacao: Operação ativa (None se o profissional está livre)
        atendimento: Atendimento em serviço da operação, se houver
        cliente_nome: Nome do consumidor em atendimento
    """

    usuario_id: str
    operacao: Optional[OperacaoOutputDTO] = None
    atendimento: Optional[AtendimentoOutputDTO] = None
    ticket: Optional[TicketOutputDTO] = None
    cliente_nome: Optional[str] = None

    @property
    def em_operacao(self) -> bool:
        return self.operacao is not None

    @property
    def em_atendimento(self) -> bool:
        return self.atendimento is not None

    def to_dict(self) -> dict:
        return {
            "usuario_id": self.usuario_id,
            "em_operacao": self.em_operacao,
            "em_atendimento": self.em_atendimento,
            "operacao": self.operacao.to_dict() if self.operacao else None,
            "atendimento": self.atendimento.to_dict() if self.atendimento else None,
            "ticket": self.ticket.to_dict() if self.ticket else None,
            "cliente_nome": self.cliente_nome,
        }


@dataclass
class UltimoChamadoDTO:
    """
    Linha do painel da sala de espera.

    Attributes:
        nome: Nome do consumidor
        guiche: "<ponto> - <setor>"
        chamado_em: Última chamada (inclui rechamadas)
    """

    atendimento_id: str
    nome: str
    guiche: str
    chamado_em: datetime

    def to_dict(self) -> dict:
        return {
            "atendimento_id": self.atendimento_id,
            "nome": self.nome,
            "guiche": self.guiche,
            "chamado_em": self.chamado_em.isoformat(),
        }


@dataclass
class PausaPorMotivoDTO:
    motivo: str
    quantidade: int
    tempo_medio: int

    def to_dict(self) -> dict:
        return {
            "motivo": self.motivo,
            "quantidade": self.quantidade,
            "tempo_medio": self.tempo_medio,
        }


@dataclass
class MetricasProfissionalDTO:
    """
    Métricas de um profissional (tempos em minutos, arredondados).

    Pausas "finished-service" não entram em ``total_pausas`` nem em
    ``tempo_medio_pausa``; aparecem apenas em ``pausas_por_motivo``.
    """

    usuario_id: str
    total_operacoes: int = 0
    tempo_medio_operacao: int = 0
    total_pausas: int = 0
    tempo_medio_pausa: int = 0
    pausas_por_motivo: List[PausaPorMotivoDTO] = field(default_factory=list)
    total_atendimentos: int = 0
    tempo_medio_atendimento: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "usuario_id": self.usuario_id,
            "total_operacoes": self.total_operacoes,
            "tempo_medio_operacao": self.tempo_medio_operacao,
            "total_pausas": self.total_pausas,
            "tempo_medio_pausa": self.tempo_medio_pausa,
            "pausas_por_motivo": [p.to_dict() for p in self.pausas_por_motivo],
            "total_atendimentos": self.total_atendimentos,
            "tempo_medio_atendimento": self.tempo_medio_atendimento,
        }
