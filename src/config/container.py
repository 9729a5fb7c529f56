"""
Dependency Injection Container.

Configura e gerencia as dependências do despacho com dependency-injector.

Padrões:
- Singleton: Uma instância para toda app (repositórios, publisher, event store)
- Factory: Nova instância por chamada (services, UoW, guarda)
- Configuration: parâmetros de ``settings.DESPACHO``

Adapters Django são importados sob demanda, para que o container possa
ser montado sem Django configurado (ver ``criar_container_testes``).
"""

import importlib
from typing import Any, Dict, Optional

from dependency_injector import containers, providers

from src.core.despacho.consultas import (
    ListarFilaService,
    MetricasProfissionalService,
    ObterAtendimentoAtivoService,
    ObterProximoTicketService,
    UltimosChamadosService,
)
from src.core.despacho.fila import FilaPrioritaria
from src.core.despacho.ports import RepositoriosDespacho
from src.core.despacho.use_cases import (
    CancelarAtendimentoService,
    CancelarTicketService,
    ChamarClienteNovamenteService,
    ChamarProximoTicketService,
    CriarTicketService,
    EncerrarOperacaoService,
    FinalizarAtendimentoService,
    IniciarOperacaoService,
    PausarOperacaoService,
    RetomarOperacaoService,
)
from src.core.shared.clock import agora_utc
from src.core.shared.consistency import GuardaConsistencia

CONFIG_PADRAO: Dict[str, Any] = {
    'max_tentativas': 3,
    'espera_entre_tentativas': 0.05,
    'respeitar_prioridade_preferida': False,
    'idade_prioridade_legal': 60,
    'limite_ultimos_chamados': 5,
    'event_publisher_mode': 'sync',
}


def _importar(modulo: str, nome: str):
    """Importa ``nome`` de ``modulo`` no momento do uso."""
    return getattr(importlib.import_module(modulo), nome)


def _repositorios_django() -> RepositoriosDespacho:
    return _importar(
        'src.adapters.django_app.despacho.repositories',
        'criar_repositorios_django',
    )()


def _event_store_django():
    return _importar('src.adapters.django_app.despacho.repositories', 'DjangoEventStore')()


def _event_publisher(mode: str):
    return _importar('src.adapters.django_app.events.publishers', 'get_event_publisher')(mode)


def _unit_of_work_django(event_publisher, event_store):
    return _importar('src.adapters.django_app.shared.unit_of_work', 'DjangoUnitOfWork')(
        event_publisher=event_publisher,
        event_store=event_store,
    )


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings.DESPACHO + EVENT_PUBLISHER_MODE
    - Infrastructure: publisher, event store, relógio
    - Repositories: Persistência
    - Unit of Work e Guarda: Transações
    - Services: Use Cases de comando e consulta

    Example:
        container = get_container()
        service = container.chamar_proximo_ticket_service()
        resultado = service.execute(ChamarProximoInputDTO(operacao_id=op_id))
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration(default=CONFIG_PADRAO)

    # =========================================================================
    # Infrastructure
    # =========================================================================

    relogio = providers.Object(agora_utc)

    event_publisher = providers.Singleton(
        _event_publisher,
        mode=config.event_publisher_mode,
    )

    event_store = providers.Singleton(_event_store_django)

    # =========================================================================
    # Repositories (Singleton - stateless)
    # =========================================================================

    repositorios = providers.Singleton(_repositorios_django)

    # =========================================================================
    # Unit of Work e Guarda (Factory - nova instância por service)
    # =========================================================================

    unit_of_work = providers.Factory(
        _unit_of_work_django,
        event_publisher=event_publisher,
        event_store=event_store,
    )

    guarda = providers.Factory(
        GuardaConsistencia,
        max_tentativas=config.max_tentativas.as_int(),
        espera_segundos=config.espera_entre_tentativas.as_float(),
    )

    fila = providers.Factory(
        FilaPrioritaria,
        respeitar_preferencia=config.respeitar_prioridade_preferida,
    )

    # =========================================================================
    # Services de comando
    # =========================================================================

    criar_ticket_service = providers.Factory(
        CriarTicketService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
        idade_prioridade_legal=config.idade_prioridade_legal,
    )

    cancelar_ticket_service = providers.Factory(
        CancelarTicketService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
    )

    iniciar_operacao_service = providers.Factory(
        IniciarOperacaoService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
    )

    pausar_operacao_service = providers.Factory(
        PausarOperacaoService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
    )

    retomar_operacao_service = providers.Factory(
        RetomarOperacaoService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
    )

    encerrar_operacao_service = providers.Factory(
        EncerrarOperacaoService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
    )

    chamar_proximo_ticket_service = providers.Factory(
        ChamarProximoTicketService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
        fila=fila,
    )

    chamar_cliente_novamente_service = providers.Factory(
        ChamarClienteNovamenteService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
    )

    finalizar_atendimento_service = providers.Factory(
        FinalizarAtendimentoService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
    )

    cancelar_atendimento_service = providers.Factory(
        CancelarAtendimentoService,
        repos=repositorios,
        uow=unit_of_work,
        guarda=guarda,
        relogio=relogio,
    )

    # =========================================================================
    # Services de consulta (sem UoW - leitura)
    # =========================================================================

    obter_proximo_ticket_service = providers.Factory(
        ObterProximoTicketService,
        repos=repositorios,
        fila=fila,
    )

    listar_fila_service = providers.Factory(
        ListarFilaService,
        repos=repositorios,
        fila=fila,
    )

    obter_atendimento_ativo_service = providers.Factory(
        ObterAtendimentoAtivoService,
        repos=repositorios,
    )

    ultimos_chamados_service = providers.Factory(
        UltimosChamadosService,
        repos=repositorios,
        limite_padrao=config.limite_ultimos_chamados.as_int(),
    )

    metricas_profissional_service = providers.Factory(
        MetricasProfissionalService,
        repos=repositorios,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def _config_do_django() -> Dict[str, Any]:
    """Lê DESPACHO e EVENT_PUBLISHER_MODE dos settings, se configurados."""
    from django.conf import settings

    if not settings.configured:
        return {}

    config = dict(getattr(settings, 'DESPACHO', {}))
    config['event_publisher_mode'] = getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync')
    return config


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).
    """
    global _container

    if _container is None:
        container = Container()
        container.config.from_dict({**CONFIG_PADRAO, **_config_do_django()})
        _container = container

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def criar_container_testes(
    repositorios: Optional[RepositoriosDespacho] = None,
    event_publisher=None,
    relogio=None,
    **config: Any,
) -> Container:
    """
    Container com persistência e publisher em memória.

    Example:
        container = criar_container_testes(max_tentativas=2)
        service = container.criar_ticket_service()
    """
    publishers = importlib.import_module('src.adapters.django_app.events.publishers')
    unit_of_work = importlib.import_module('src.adapters.django_app.shared.unit_of_work')

    container = Container()
    container.config.from_dict({**CONFIG_PADRAO, 'espera_entre_tentativas': 0, **config})

    repositorios = repositorios or RepositoriosDespacho.em_memoria()
    container.repositorios.override(providers.Object(repositorios))
    container.event_publisher.override(
        providers.Object(event_publisher or publishers.InMemoryEventPublisher())
    )
    container.unit_of_work.override(
        providers.Factory(
            unit_of_work.InMemoryUnitOfWork,
            repositorios=container.repositorios,
            event_publisher=container.event_publisher,
        )
    )

    if relogio is not None:
        container.relogio.override(providers.Object(relogio))

    return container
