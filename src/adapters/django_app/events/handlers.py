"""
Event Handlers - Processadores de Eventos de Domínio do despacho.

Executados via Celery quando o CeleryEventPublisher envia um evento
para ``dispatch_domain_event``. Nenhum handler chama tickets nem altera
o estado da fila: despacho é sempre síncrono, dentro dos use cases.

Tipos de Handlers:
- Métricas: contadores e durações por evento
- Painel: anúncio da chamada na sala de espera
- Agendados (beat): relatório diário da fila e limpeza do Event Store

Payload:
    ``event_data`` é o ``DomainEvent.to_dict()``; os campos específicos
    do evento ficam em ``event_data["data"]``.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


def _dados(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get('data') or {}


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketCriadoEvent.

    Registra a entrada na fila por setor e prioridade.
    """
    try:
        dados = _dados(event_data)
        prioridade = 'prioritario' if dados.get('prioridade') == 1 else 'normal'

        logger.info(
            f"[HANDLER] TicketCriado: {event_data.get('aggregate_id')} | "
            f"Setor: {dados.get('setor_id')} | Prioridade: {prioridade}"
        )

        record_metric.delay(
            metric_name='tickets_criados',
            value=1,
            tags={'setor_id': dados.get('setor_id', ''), 'prioridade': prioridade},
        )

    except Exception as e:
        logger.error(f"Erro no handler TicketCriado: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_cancelado(self, event_data: Dict[str, Any]) -> None:
    try:
        dados = _dados(event_data)

        logger.info(
            f"[HANDLER] TicketCancelado: {event_data.get('aggregate_id')} | "
            f"Estava: {dados.get('status_anterior')}"
        )

        record_metric.delay(
            metric_name='tickets_cancelados',
            value=1,
            tags={'status_anterior': dados.get('status_anterior', '')},
        )

    except Exception as e:
        logger.error(f"Erro no handler TicketCancelado: {e}", exc_info=True)
        raise


# =============================================================================
# Event Handlers - Operações
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_operacao_pausada(self, event_data: Dict[str, Any]) -> None:
    try:
        dados = _dados(event_data)
        logger.info(
            f"[HANDLER] OperacaoPausada: {event_data.get('aggregate_id')} | "
            f"Motivo: {dados.get('motivo')}"
        )
        record_metric.delay(
            metric_name='pausas_iniciadas',
            value=1,
            tags={'motivo': dados.get('motivo', '')},
        )

    except Exception as e:
        logger.error(f"Erro no handler OperacaoPausada: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_operacao_retomada(self, event_data: Dict[str, Any]) -> None:
    try:
        dados = _dados(event_data)
        record_metric.delay(
            metric_name='pausa_duracao_minutos',
            value=dados.get('duracao_pausa', 0),
            tags={'operacao_id': event_data.get('aggregate_id', '')},
        )

    except Exception as e:
        logger.error(f"Erro no handler OperacaoRetomada: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_operacao_encerrada(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para OperacaoEncerradaEvent.

    Registra a duração da jornada no ponto.
    """
    try:
        dados = _dados(event_data)

        logger.info(
            f"[HANDLER] OperacaoEncerrada: {event_data.get('aggregate_id')} | "
            f"Usuário: {dados.get('usuario_id')} | Duração: {dados.get('duracao')} min"
        )

        record_metric.delay(
            metric_name='operacao_duracao_minutos',
            value=dados.get('duracao') or 0,
            tags={'ponto_atendimento_id': dados.get('ponto_atendimento_id', '')},
        )

    except Exception as e:
        logger.error(f"Erro no handler OperacaoEncerrada: {e}", exc_info=True)
        raise


# =============================================================================
# Event Handlers - Atendimentos
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_atendimento_iniciado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para AtendimentoIniciadoEvent.

    Ações:
    - Anunciar a chamada no painel
    - Registrar métrica de chamada
    """
    try:
        dados = _dados(event_data)
        atendimento_id = event_data.get('aggregate_id')

        logger.info(
            f"[HANDLER] AtendimentoIniciado: {atendimento_id} | "
            f"Ticket: {dados.get('ticket_id')} | Ponto: {dados.get('ponto_atendimento_id')}"
        )

        anunciar_chamada_painel.delay(atendimento_id=atendimento_id)

        record_metric.delay(
            metric_name='tickets_chamados',
            value=1,
            tags={
                'setor_id': dados.get('setor_id', ''),
                'prioridade': 'prioritario' if dados.get('prioridade') == 1 else 'normal',
            },
        )

    except Exception as e:
        logger.error(f"Erro no handler AtendimentoIniciado: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_cliente_chamado_novamente(self, event_data: Dict[str, Any]) -> None:
    try:
        atendimento_id = event_data.get('aggregate_id')
        logger.info(f"[HANDLER] ClienteChamadoNovamente: {atendimento_id}")

        anunciar_chamada_painel.delay(atendimento_id=atendimento_id)

    except Exception as e:
        logger.error(f"Erro no handler ClienteChamadoNovamente: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_atendimento_finalizado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para AtendimentoFinalizadoEvent.

    Os metadados seguem para a camada de cadastro (reclamação, denúncia,
    consulta), fora do despacho; aqui só são registrados.
    """
    try:
        dados = _dados(event_data)
        tipo = dados.get('tipo_resolucao', '')

        logger.info(
            f"[HANDLER] AtendimentoFinalizado: {event_data.get('aggregate_id')} | "
            f"Tipo: {tipo} | Duração: {dados.get('duracao')} min | "
            f"Metadados: {sorted((dados.get('metadados') or {}).keys())}"
        )

        record_metric.delay(
            metric_name='atendimento_duracao_minutos',
            value=dados.get('duracao') or 0,
            tags={'tipo_resolucao': tipo},
        )

    except Exception as e:
        logger.error(f"Erro no handler AtendimentoFinalizado: {e}", exc_info=True)
        raise


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_atendimento_cancelado(self, event_data: Dict[str, Any]) -> None:
    try:
        dados = _dados(event_data)
        record_metric.delay(
            metric_name='atendimentos_cancelados',
            value=1,
            tags={'origem': dados.get('origem', '')},
        )

    except Exception as e:
        logger.error(f"Erro no handler AtendimentoCancelado: {e}", exc_info=True)
        raise


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

HANDLERS = {
    'TicketCriadoEvent': handle_ticket_criado,
    'TicketCanceladoEvent': handle_ticket_cancelado,
    'OperacaoPausadaEvent': handle_operacao_pausada,
    'OperacaoRetomadaEvent': handle_operacao_retomada,
    'OperacaoEncerradaEvent': handle_operacao_encerrada,
    'AtendimentoIniciadoEvent': handle_atendimento_iniciado,
    'ClienteChamadoNovamenteEvent': handle_cliente_chamado_novamente,
    'AtendimentoFinalizadoEvent': handle_atendimento_finalizado,
    'AtendimentoCanceladoEvent': handle_atendimento_cancelado,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados. Eventos sem handler
    (ex: OperacaoIniciadaEvent) ficam apenas no Event Store.

    Returns:
        True se algum handler foi acionado
    """
    handler = HANDLERS.get(event_type)

    if handler is None:
        logger.debug(f"[DISPATCHER] Sem handler para {event_type}")
        return False

    logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
    handler.delay(event_data)
    return True


# =============================================================================
# Painel e Métricas
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=10)
def anunciar_chamada_painel(self, atendimento_id: str, limite: Optional[int] = None) -> list:
    """
    Monta o painel de últimas chamadas e anuncia a chamada.

    A entrega ao display (websocket, TV da sala de espera) fica fora do
    despacho; o painel montado é logado e retornado.

    Returns:
        Lista de chamadas (dicts) como exibida no painel
    """
    from src.config.container import get_container
    from src.core.despacho.dtos import UltimosChamadosQueryDTO

    service = get_container().ultimos_chamados_service()
    chamados = [c.to_dict() for c in service.execute(UltimosChamadosQueryDTO(limite=limite))]

    atual = next((c for c in chamados if c['atendimento_id'] == atendimento_id), None)
    if atual is not None:
        logger.info(f"[PAINEL] Chamando {atual['nome']} no {atual['guiche']}")
    else:
        logger.warning(f"[PAINEL] Atendimento {atendimento_id} fora das últimas chamadas")

    return chamados


@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Dict[str, str] = None
) -> None:
    """
    Registra métrica para monitoramento.

    Args:
        metric_name: Nome da métrica
        value: Valor
        tags: Tags para dimensões
    """
    logger.info(
        f"[METRIC] {metric_name}={value} | tags={tags or {}}"
    )


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def generate_daily_report(self) -> Dict[str, Any]:
    """
    Gera relatório diário da fila.

    Executada diariamente pelo Celery Beat.

    Returns:
        Pendentes por setor (normal/prioritário) e atendimentos do dia
        por status
    """
    logger.info("[SCHEDULED] Gerando relatório diário...")

    try:
        from src.config.container import get_container
        from src.core.despacho.dtos import ListarFilaQueryDTO

        container = get_container()
        repos = container.repositorios()
        listar_fila = container.listar_fila_service()

        agora = timezone.localtime()
        inicio_do_dia = agora.replace(hour=0, minute=0, second=0, microsecond=0)

        pendentes = {}
        for setor in repos.setores.list_all():
            fila = listar_fila.execute(ListarFilaQueryDTO(setor_id=setor.id))
            pendentes[setor.nome] = {
                'normal': sum(1 for t in fila if t.prioridade == 0),
                'prioritario': sum(1 for t in fila if t.prioridade == 1),
            }

        atendimentos_do_dia: Dict[str, int] = {}
        for atendimento in repos.atendimentos.list_criados_desde(inicio_do_dia):
            chave = atendimento.status.value
            atendimentos_do_dia[chave] = atendimentos_do_dia.get(chave, 0) + 1

        report = {
            'data': agora.isoformat(),
            'pendentes_por_setor': pendentes,
            'atendimentos_do_dia': atendimentos_do_dia,
        }

        logger.info(f"[SCHEDULED] Relatório gerado: {report}")
        return report

    except Exception as e:
        logger.error(f"Erro ao gerar relatório: {e}", exc_info=True)
        return {}


@shared_task(bind=True)
def cleanup_old_events(self, days: int = 90) -> int:
    """
    Limpa eventos antigos do Event Store.

    Executada semanalmente pelo Celery Beat.

    Returns:
        Número de eventos removidos
    """
    logger.info(f"[SCHEDULED] Limpando eventos com mais de {days} dias...")

    try:
        from src.adapters.django_app.despacho.repositories import DjangoEventStore

        removidos = DjangoEventStore().remover_anteriores(timezone.now() - timedelta(days=days))

        logger.info(f"[SCHEDULED] {removidos} eventos removidos")
        return removidos

    except Exception as e:
        logger.error(f"Erro ao limpar eventos: {e}", exc_info=True)
        return 0
