"""
Domínio de Despacho - Fila e Ciclo de Atendimento.

Este módulo contém toda a lógica de negócio do despacho de atendimentos
ao consumidor:
- Entidades (Ticket, Operação, Pausa, Atendimento, Ponto de Atendimento)
- Fila Prioritária (prioridade + FIFO)
- Use Cases de comando e de consulta
- Domain Events
- DTOs e Ports (repositórios)

Características do Domínio:
- Transições de status controladas por tabelas de transição
- No máximo um atendimento em serviço por operação
- No máximo uma operação ativa por ponto e por profissional
- Todo comando roda sob a GuardaConsistencia (re-tentativa limitada)
"""

from .entities import (
    SetorEntity,
    PontoAtendimentoEntity,
    ClienteEntity,
    TicketEntity,
    OperacaoEntity,
    PausaEntity,
    AtendimentoEntity,
    TicketStatus,
    TicketPriority,
    OperacaoStatus,
    PausaStatus,
    MotivoPausa,
    AtendimentoStatus,
    TipoResolucao,
    DisponibilidadePonto,
    calcular_duracao_minutos,
)
from .fila import FilaPrioritaria
from .ports import RepositoriosDespacho
from .use_cases import (
    CriarTicketService,
    CancelarTicketService,
    IniciarOperacaoService,
    PausarOperacaoService,
    RetomarOperacaoService,
    EncerrarOperacaoService,
    ChamarProximoTicketService,
    ChamarClienteNovamenteService,
    FinalizarAtendimentoService,
    CancelarAtendimentoService,
)
from .consultas import (
    ObterProximoTicketService,
    ListarFilaService,
    ObterAtendimentoAtivoService,
    UltimosChamadosService,
    MetricasProfissionalService,
)

__all__ = [
    # Entities
    "SetorEntity",
    "PontoAtendimentoEntity",
    "ClienteEntity",
    "TicketEntity",
    "OperacaoEntity",
    "PausaEntity",
    "AtendimentoEntity",
    "TicketStatus",
    "TicketPriority",
    "OperacaoStatus",
    "PausaStatus",
    "MotivoPausa",
    "AtendimentoStatus",
    "TipoResolucao",
    "DisponibilidadePonto",
    "calcular_duracao_minutos",
    # Fila
    "FilaPrioritaria",
    # Ports
    "RepositoriosDespacho",
    # Comandos
    "CriarTicketService",
    "CancelarTicketService",
    "IniciarOperacaoService",
    "PausarOperacaoService",
    "RetomarOperacaoService",
    "EncerrarOperacaoService",
    "ChamarProximoTicketService",
    "ChamarClienteNovamenteService",
    "FinalizarAtendimentoService",
    "CancelarAtendimentoService",
    # Consultas
    "ObterProximoTicketService",
    "ListarFilaService",
    "ObterAtendimentoAtivoService",
    "UltimosChamadosService",
    "MetricasProfissionalService",
]
