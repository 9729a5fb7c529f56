"""
Use Cases de consulta do Domínio de Despacho.

Consultas implementadas:
- ObterProximoTicketService: Próximo ticket elegível de um setor
- ListarFilaService: Fila pendente do setor na ordem de despacho
- ObterAtendimentoAtivoService: Operação/atendimento ativos de um profissional
- UltimosChamadosService: Painel de últimos chamados
- MetricasProfissionalService: Métricas de tempo de um profissional

Não usam UoW pois são operações de leitura (sem efeitos colaterais).
"""

import logging
import math
from collections import OrderedDict
from typing import List, Optional

from src.core.shared.exceptions import EntityNotFoundError, ValidationError

from .dtos import (
    AtendimentoAtivoDTO,
    AtendimentoAtivoQueryDTO,
    AtendimentoOutputDTO,
    ListarFilaQueryDTO,
    MetricasProfissionalDTO,
    MetricasProfissionalQueryDTO,
    OperacaoOutputDTO,
    PausaPorMotivoDTO,
    ProximoTicketQueryDTO,
    TicketOutputDTO,
    UltimoChamadoDTO,
    UltimosChamadosQueryDTO,
)
from .entities import MotivoPausa
from .fila import FilaPrioritaria
from .ports import RepositoriosDespacho

logger = logging.getLogger(__name__)


def _arredondar(valor: float) -> int:
    return math.floor(valor + 0.5)


def _media(valores: List[float]) -> int:
    if not valores:
        return 0
    return _arredondar(sum(valores) / len(valores))


class _ConsultaFila:
    def __init__(self, repos: RepositoriosDespacho, fila: Optional[FilaPrioritaria] = None):
        self.repos = repos
        self.fila = fila or FilaPrioritaria()

    def _garantir_setor(self, setor_id: str) -> None:
        if not setor_id or not self.repos.setores.exists(setor_id):
            raise EntityNotFoundError(
                f"Setor {setor_id} não encontrado",
                entity_type="Setor",
                entity_id=setor_id,
            )


class ObterProximoTicketService(_ConsultaFila):
    """
    Use Case: Consultar o próximo ticket elegível, sem reivindicá-lo.

    Returns:
        TicketOutputDTO ou None se a fila estiver vazia
    """

    def execute(self, query: ProximoTicketQueryDTO) -> Optional[TicketOutputDTO]:
        self._garantir_setor(query.setor_id)

        prioridade_preferida = None
        if query.ponto_atendimento_id:
            ponto = self.repos.pontos.get_by_id(query.ponto_atendimento_id)
            if ponto is None:
                raise EntityNotFoundError(
                    f"Ponto de atendimento {query.ponto_atendimento_id} não encontrado",
                    entity_type="PontoAtendimento",
                    entity_id=query.ponto_atendimento_id,
                )
            prioridade_preferida = ponto.prioridade_preferida

        ticket = self.fila.proximo(
            self.repos.tickets.list_pendentes(query.setor_id),
            setor_id=query.setor_id,
            prioridade_preferida=prioridade_preferida,
        )
        return TicketOutputDTO.from_entity(ticket) if ticket else None


class ListarFilaService(_ConsultaFila):
    """Use Case: Fila pendente de um setor, na ordem em que será chamada."""

    def execute(self, query: ListarFilaQueryDTO) -> List[TicketOutputDTO]:
        self._garantir_setor(query.setor_id)
        pendentes = self.fila.ordenar(
            self.repos.tickets.list_pendentes(query.setor_id),
            setor_id=query.setor_id,
        )
        return [TicketOutputDTO.from_entity(t) for t in pendentes]


class ObterAtendimentoAtivoService:
    """
    Use Case: Situação atual de um profissional.

    Responde se ele tem operação ativa e qual atendimento está em serviço
    nela, com o nome do consumidor.
    """

    def __init__(self, repos: RepositoriosDespacho):
        self.repos = repos

    def execute(self, query: AtendimentoAtivoQueryDTO) -> AtendimentoAtivoDTO:
        if not query.usuario_id:
            raise ValidationError("Usuário é obrigatório", field="usuario_id")

        resultado = AtendimentoAtivoDTO(usuario_id=query.usuario_id)

        operacao = self.repos.operacoes.get_ativa_por_usuario(query.usuario_id)
        if operacao is None:
            return resultado

        ponto = self.repos.pontos.get_by_id(operacao.ponto_atendimento_id)
        resultado.operacao = OperacaoOutputDTO.from_entity(operacao, ponto)

        atendimento = self.repos.atendimentos.get_em_servico_por_operacao(operacao.id)
        if atendimento is None:
            return resultado

        resultado.atendimento = AtendimentoOutputDTO.from_entity(atendimento)
        ticket = self.repos.tickets.get_by_id(atendimento.ticket_id)
        if ticket is not None:
            resultado.ticket = TicketOutputDTO.from_entity(ticket)
            cliente = self.repos.clientes.get_by_id(ticket.cliente_id)
            resultado.cliente_nome = cliente.nome if cliente else None

        return resultado


class UltimosChamadosService:
    """
    Use Case: Lista do painel da sala de espera.

    Os atendimentos mais recentemente chamados (chamada inicial ou
    rechamada), do mais novo para o mais antigo, com o guichê no formato
    "<ponto> - <setor>".

    Attributes:
        limite_padrao: Quantidade quando a consulta não informa limite
    """

    def __init__(self, repos: RepositoriosDespacho, limite_padrao: int = 5):
        self.repos = repos
        self.limite_padrao = limite_padrao

    def execute(self, query: Optional[UltimosChamadosQueryDTO] = None) -> List[UltimoChamadoDTO]:
        limite = self.limite_padrao
        if query is not None and query.limite is not None:
            limite = query.limite

        if limite < 1:
            raise ValidationError("Limite deve ser pelo menos 1", field="limite")

        return [self._montar(a) for a in self.repos.atendimentos.listar_recentes(limite)]

    def _montar(self, atendimento) -> UltimoChamadoDTO:
        nome = ""
        ticket = self.repos.tickets.get_by_id(atendimento.ticket_id)
        if ticket is not None:
            cliente = self.repos.clientes.get_by_id(ticket.cliente_id)
            nome = cliente.nome if cliente else ""

        guiche = ""
        operacao = self.repos.operacoes.get_by_id(atendimento.operacao_id)
        ponto = self.repos.pontos.get_by_id(operacao.ponto_atendimento_id) if operacao else None
        setor = self.repos.setores.get_by_id(ponto.setor_id) if ponto else None
        if ponto and setor:
            guiche = f"{ponto.nome} - {setor.nome}"

        return UltimoChamadoDTO(
            atendimento_id=atendimento.id,
            nome=nome,
            guiche=guiche,
            chamado_em=atendimento.ultima_chamada_em,
        )


class MetricasProfissionalService:
    """
    Use Case: Métricas de um profissional.

    Período opcional (início e fim, inclusivos): filtra operações, pausas
    e atendimentos pelo respectivo ``criado_em``.

    Regras:
    - Tempo de operação = atualizado_em - criado_em (apenas valores > 0)
    - Pausas "finished-service" ficam fora do total e do tempo médio
      geral, mas aparecem no detalhamento por motivo
    - Tempos em minutos, arredondados meio para cima
    """

    def __init__(self, repos: RepositoriosDespacho):
        self.repos = repos

    def execute(self, query: MetricasProfissionalQueryDTO) -> MetricasProfissionalDTO:
        if not query.usuario_id:
            raise ValidationError("Usuário é obrigatório", field="usuario_id")

        if query.tem_periodo and query.inicio > query.fim:
            raise ValidationError("Início do período posterior ao fim", field="inicio")

        def no_periodo(entity) -> bool:
            if not query.tem_periodo:
                return True
            return query.inicio <= entity.criado_em <= query.fim

        operacoes = [o for o in self.repos.operacoes.list_by_usuario(query.usuario_id) if no_periodo(o)]
        ids = [o.id for o in operacoes]
        pausas = [p for p in self.repos.pausas.list_by_operacoes(ids) if no_periodo(p)] if ids else []
        atendimentos = [a for a in self.repos.atendimentos.list_by_operacoes(ids) if no_periodo(a)] if ids else []

        segundos_operacao = [
            (o.atualizado_em - o.criado_em).total_seconds() for o in operacoes
        ]
        minutos_operacao = [s / 60 for s in segundos_operacao if s > 0]

        pausas_contabilizadas = [p for p in pausas if not p.sistemica]
        tempo_medio_pausa = 0
        if pausas_contabilizadas:
            tempo_medio_pausa = _arredondar(
                sum(p.duracao or 0 for p in pausas_contabilizadas) / len(pausas_contabilizadas)
            )

        metricas = MetricasProfissionalDTO(
            usuario_id=query.usuario_id,
            total_operacoes=len(operacoes),
            tempo_medio_operacao=_media(minutos_operacao),
            total_pausas=len(pausas_contabilizadas),
            tempo_medio_pausa=tempo_medio_pausa,
            pausas_por_motivo=self._por_motivo(pausas),
            total_atendimentos=len(atendimentos),
            tempo_medio_atendimento=_media([a.duracao for a in atendimentos if a.duracao is not None]),
        )

        logger.debug(f"Métricas calculadas para {query.usuario_id}: {metricas.to_dict()}")
        return metricas

    def _por_motivo(self, pausas) -> List[PausaPorMotivoDTO]:
        agrupadas = OrderedDict((motivo, []) for motivo in MotivoPausa)
        for pausa in pausas:
            agrupadas[pausa.motivo].append(pausa)

        return [
            PausaPorMotivoDTO(
                motivo=motivo.value,
                quantidade=len(lista),
                tempo_medio=_arredondar(sum(p.duracao or 0 for p in lista) / len(lista)),
            )
            for motivo, lista in agrupadas.items()
            if lista
        ]
