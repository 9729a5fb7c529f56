"""
Testes para publishers, handlers Celery e container do despacho.

Tasks com ``bind=True`` são chamadas diretamente (execução síncrona);
os ``.delay`` encadeados são mockados.
"""

import logging
from datetime import datetime, timedelta
from unittest.mock import Mock, patch
from zoneinfo import ZoneInfo

import pytest
from django.utils import timezone

from src.adapters.django_app.events import handlers
from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    CompositeEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.core.despacho.events import (
    AtendimentoIniciadoEvent,
    OperacaoIniciadaEvent,
    TicketCriadoEvent,
)


@pytest.fixture
def evento():
    return TicketCriadoEvent(aggregate_id='ticket-1', cliente_id='c1', setor_id='s1', prioridade=1)


# =============================================================================
# Publishers
# =============================================================================

class TestGetEventPublisher:

    @pytest.mark.parametrize('modo, classe', [
        ('sync', LoggingEventPublisher),
        ('celery', CeleryEventPublisher),
        ('memory', InMemoryEventPublisher),
    ])
    def test_modos(self, modo, classe):
        assert isinstance(get_event_publisher(modo), classe)

    def test_modo_desconhecido(self):
        with pytest.raises(ValueError, match='kafka'):
            get_event_publisher('kafka')


class TestPublishers:

    def test_logging_publisher_loga_evento(self, evento, caplog):
        with caplog.at_level(logging.INFO):
            LoggingEventPublisher().publish(evento)

        assert '[EVENT] TicketCriadoEvent' in caplog.text
        assert 'ticket-1' in caplog.text

    def test_handler_local_com_erro_nao_interrompe(self, evento):
        publisher = InMemoryEventPublisher()
        recebidos = []
        publisher.register_handler('TicketCriadoEvent', Mock(side_effect=RuntimeError('quebrou')))
        publisher.register_handler('TicketCriadoEvent', recebidos.append)

        publisher.publish(evento)

        assert recebidos == [evento]
        assert publisher.published_events == [evento]

    def test_in_memory_filtra_por_tipo(self, evento):
        publisher = InMemoryEventPublisher()
        publisher.publish_batch([
            evento,
            OperacaoIniciadaEvent(aggregate_id='op-1', usuario_id='u1', ponto_atendimento_id='p1'),
        ])

        assert len(publisher.get_events_by_type('OperacaoIniciadaEvent')) == 1

        publisher.clear()
        assert publisher.published_events == []

    def test_celery_publisher_envia_para_dispatcher(self, evento):
        with patch.object(handlers.dispatch_domain_event, 'delay') as delay:
            CeleryEventPublisher(also_log=False).publish(evento)

        event_type, payload = delay.call_args[0]
        assert event_type == 'TicketCriadoEvent'
        assert payload['data']['setor_id'] == 's1'

    def test_celery_indisponivel_apenas_loga(self, evento, caplog):
        with patch.object(handlers.dispatch_domain_event, 'delay', side_effect=ConnectionError('broker off')):
            CeleryEventPublisher(also_log=False).publish(evento)

        assert 'Falha ao publicar TicketCriadoEvent' in caplog.text

    def test_composite_isola_falhas(self, evento):
        quebrado = Mock()
        quebrado.publish.side_effect = RuntimeError('fora do ar')
        memoria = InMemoryEventPublisher()

        CompositeEventPublisher([quebrado, memoria]).publish(evento)

        assert memoria.published_events == [evento]


# =============================================================================
# Dispatcher e handlers
# =============================================================================

class TestDispatcher:

    def test_roteia_para_handler(self, evento):
        with patch.object(handlers.handle_ticket_criado, 'delay') as delay:
            assert handlers.dispatch_domain_event('TicketCriadoEvent', evento.to_dict()) is True

        delay.assert_called_once_with(evento.to_dict())

    def test_evento_sem_handler(self):
        assert handlers.dispatch_domain_event('OperacaoIniciadaEvent', {}) is False


class TestHandlers:

    def test_ticket_criado_registra_metrica(self, evento):
        with patch.object(handlers.record_metric, 'delay') as metrica:
            handlers.handle_ticket_criado(evento.to_dict())

        metrica.assert_called_once_with(
            metric_name='tickets_criados',
            value=1,
            tags={'setor_id': 's1', 'prioridade': 'prioritario'},
        )

    def test_atendimento_iniciado_anuncia_no_painel(self):
        evento = AtendimentoIniciadoEvent(
            aggregate_id='at-1', ticket_id='t1', operacao_id='op-1',
            setor_id='s1', ponto_atendimento_id='p1', prioridade=0,
        )

        with patch.object(handlers.anunciar_chamada_painel, 'delay') as painel, \
                patch.object(handlers.record_metric, 'delay') as metrica:
            handlers.handle_atendimento_iniciado(evento.to_dict())

        painel.assert_called_once_with(atendimento_id='at-1')
        assert metrica.call_args.kwargs['tags']['prioridade'] == 'normal'

    def test_atendimento_finalizado_registra_duracao(self):
        payload = {
            'aggregate_id': 'at-1',
            'data': {'tipo_resolucao': 'complaint', 'duracao': 7, 'metadados': {'protocolo': 'X1'}},
        }

        with patch.object(handlers.record_metric, 'delay') as metrica:
            handlers.handle_atendimento_finalizado(payload)

        assert metrica.call_args.kwargs['value'] == 7
        assert metrica.call_args.kwargs['tags'] == {'tipo_resolucao': 'complaint'}

    def test_erro_no_handler_propaga(self, evento):
        with patch.object(handlers.record_metric, 'delay', side_effect=RuntimeError('broker')):
            with pytest.raises(RuntimeError):
                handlers.handle_ticket_criado(evento.to_dict())


# =============================================================================
# Tasks que leem o banco
# =============================================================================

@pytest.fixture
def chamada(cadastros_db):
    """Dois tickets na fila e um deles chamado pelo guichê 1."""
    from src.config.container import get_container
    from src.core.despacho.dtos import (
        ChamarProximoInputDTO,
        CriarTicketInputDTO,
        IniciarOperacaoInputDTO,
    )

    container = get_container()
    setor_id = cadastros_db['setor'].id
    container.criar_ticket_service().execute(
        CriarTicketInputDTO(cadastros_db['ana'].id, setor_id, prioridade=1)
    )
    container.criar_ticket_service().execute(CriarTicketInputDTO(cadastros_db['bruno'].id, setor_id))
    operacao = container.iniciar_operacao_service().execute(
        IniciarOperacaoInputDTO('u1', cadastros_db['guiche1'].id)
    )
    return container.chamar_proximo_ticket_service().execute(ChamarProximoInputDTO(operacao.id))


@pytest.mark.django_db
class TestTasksComBanco:

    def test_painel_anuncia_ultima_chamada(self, chamada, caplog):
        with caplog.at_level(logging.INFO):
            painel = handlers.anunciar_chamada_painel(chamada.atendimento.id)

        assert painel[0]['atendimento_id'] == chamada.atendimento.id
        assert painel[0]['guiche'] == 'Guichê 1 - Financeiro'
        assert '[PAINEL] Chamando Ana Souza' in caplog.text

    def test_relatorio_diario(self, chamada):
        relatorio = handlers.generate_daily_report()

        assert relatorio['pendentes_por_setor'] == {'Financeiro': {'normal': 1, 'prioritario': 0}}
        assert relatorio['atendimentos_do_dia'] == {'in_service': 1}

    def test_relatorio_diario_conta_desde_a_meia_noite_local(self, cadastros_db):
        from src.adapters.django_app.despacho.repositories import DjangoAtendimentoRepository

        sao_paulo = ZoneInfo('America/Sao_Paulo')
        agora = datetime(2026, 3, 10, 1, 30, tzinfo=sao_paulo)

        with patch.object(handlers.timezone, 'localtime', return_value=agora), \
                patch.object(DjangoAtendimentoRepository, 'list_criados_desde', return_value=[]) as desde:
            relatorio = handlers.generate_daily_report()

        inicio = desde.call_args.args[0]
        assert inicio == datetime(2026, 3, 10, tzinfo=sao_paulo)
        assert inicio.utcoffset() == timedelta(hours=-3)
        assert relatorio['data'] == agora.isoformat()

    def test_limpeza_remove_apenas_eventos_antigos(self, cadastros_db, event_store):
        from src.adapters.django_app.despacho.models import DomainEventModel

        event_store.append(TicketCriadoEvent(aggregate_id='antigo'), sequence=1)
        event_store.append(TicketCriadoEvent(aggregate_id='recente'), sequence=1)
        DomainEventModel.objects.filter(aggregate_id='antigo').update(
            recorded_at=timezone.now() - timedelta(days=120)
        )

        assert handlers.cleanup_old_events(days=90) == 1
        assert list(DomainEventModel.objects.values_list('aggregate_id', flat=True)) == ['recente']


# =============================================================================
# Container
# =============================================================================

class TestContainer:

    def test_container_le_settings(self):
        from src.config.container import get_container

        container = get_container()

        assert container.config.event_publisher_mode() == 'memory'
        assert container.config.espera_entre_tentativas() == 0
        assert container is get_container()

    def test_reset_cria_nova_instancia(self):
        from src.config.container import get_container, reset_container

        antigo = get_container()
        reset_container()

        assert get_container() is not antigo

    def test_container_de_testes_usa_memoria(self, repos, cadastros, relogio):
        from src.config.container import criar_container_testes
        from src.core.despacho.dtos import CriarTicketInputDTO

        publisher = InMemoryEventPublisher()
        container = criar_container_testes(repos, event_publisher=publisher, relogio=relogio)

        ticket = container.criar_ticket_service().execute(
            CriarTicketInputDTO(cadastros['idoso'].id, cadastros['setor'].id)
        )

        assert ticket.prioridade == 1
        assert ticket.criado_em == relogio()
        assert publisher.get_events_by_type('TicketCriadoEvent')[0].aggregate_id == ticket.id
