"""
Domain Events do Domínio de Despacho.

Eventos:
- TicketCriadoEvent: Novo ticket entrou na fila
- TicketCanceladoEvent: Ticket foi cancelado
- OperacaoIniciadaEvent: Profissional abriu uma operação em um ponto
- OperacaoPausadaEvent: Operação foi pausada
- OperacaoRetomadaEvent: Operação voltou a operar
- OperacaoEncerradaEvent: Operação foi finalizada
- AtendimentoIniciadoEvent: Ticket foi chamado por uma operação
- ClienteChamadoNovamenteEvent: Consumidor foi chamado de novo
- AtendimentoFinalizadoEvent: Atendimento foi resolvido
- AtendimentoCanceladoEvent: Atendimento (e ticket) foram cancelados

Uso:
    Eventos são criados nos use cases e publicados através do UnitOfWork
    após commit bem-sucedido.

    with uow:
        repos.tickets.save(ticket)
        uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, ...))

Todos os campos são tipos primitivos, para que o evento possa ser
serializado pelo Event Store e enviado ao Celery sem conversão.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent


@dataclass
class TicketCriadoEvent(DomainEvent):
    """
    Evento: Ticket entrou na fila de um setor.

    Attributes:
        cliente_id: Consumidor
        setor_id: Setor da fila
        prioridade: 0 ou 1
    """

    cliente_id: str = ""
    setor_id: str = ""
    prioridade: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketCanceladoEvent(DomainEvent):
    """
    Evento: Ticket foi cancelado.

    Attributes:
        status_anterior: "pending" ou "in-attendance"
        atendimento_id: Atendimento cancelado junto, se havia
    """

    setor_id: str = ""
    status_anterior: str = ""
    atendimento_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class OperacaoIniciadaEvent(DomainEvent):
    usuario_id: str = ""
    ponto_atendimento_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Operacao"


@dataclass
class OperacaoPausadaEvent(DomainEvent):
    """
    Evento: Operação foi pausada.

    Attributes:
        pausa_id: Pausa aberta
        motivo: Valor do MotivoPausa ("lunch", "finished-service", ...)
    """

    pausa_id: str = ""
    motivo: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Operacao"


@dataclass
class OperacaoRetomadaEvent(DomainEvent):
    pausa_id: str = ""
    duracao_pausa: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Operacao"


@dataclass
class OperacaoEncerradaEvent(DomainEvent):
    """
    Evento: Operação foi finalizada e o ponto ficou livre.

    Attributes:
        duracao: Minutos da operação
        pausa_encerrada_id: Pausa fechada pelo encerramento, se havia
    """

    usuario_id: str = ""
    ponto_atendimento_id: str = ""
    duracao: int = 0
    pausa_encerrada_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Operacao"


@dataclass
class AtendimentoIniciadoEvent(DomainEvent):
    """
    Evento: Ticket foi chamado (pending → in-attendance).

    Handlers típicos:
    - Atualizar o painel de últimos chamados
    - Registrar métrica de espera
    """

    ticket_id: str = ""
    operacao_id: str = ""
    setor_id: str = ""
    ponto_atendimento_id: str = ""
    prioridade: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Atendimento"


@dataclass
class ClienteChamadoNovamenteEvent(DomainEvent):
    """
    Evento: Consumidor foi chamado novamente.

    A entrega ao painel/aviso sonoro é feita fora do core.
    """

    ticket_id: str = ""
    operacao_id: str = ""
    chamado_em: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Atendimento"


@dataclass
class AtendimentoFinalizadoEvent(DomainEvent):
    """
    Evento: Atendimento foi resolvido.

    Attributes:
        tipo_resolucao: "complaint", "denunciation" ou "consultation"
        duracao: Minutos do atendimento
        metadados: Dados do registro de resolução, consumidos pela camada
            de cadastro (reclamação, denúncia, consulta)
    """

    ticket_id: str = ""
    operacao_id: str = ""
    tipo_resolucao: str = ""
    duracao: int = 0
    metadados: Dict[str, Any] = field(default_factory=dict)

    @property
    def aggregate_type(self) -> str:
        return "Atendimento"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "ticket_id": self.ticket_id,
            "operacao_id": self.operacao_id,
            "tipo_resolucao": self.tipo_resolucao,
            "duracao": self.duracao,
            "metadados": dict(self.metadados),
        }


@dataclass
class AtendimentoCanceladoEvent(DomainEvent):
    """
    Attributes:
        origem: "atendimento" (cancelado pelo profissional) ou "ticket"
            (cancelamento de ticket em atendimento)
    """

    ticket_id: str = ""
    operacao_id: str = ""
    duracao: int = 0
    origem: str = "atendimento"

    @property
    def aggregate_type(self) -> str:
        return "Atendimento"
