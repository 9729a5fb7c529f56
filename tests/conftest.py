"""
Configurações globais do Pytest para o Motor de Despacho.

Este arquivo é carregado automaticamente pelo pytest e fornece:
- Django configurado com SQLite em memória (settings.configure)
- Relógio controlável para durações de pausa/atendimento
- Repositórios e Unit of Work em memória com cadastros prontos
- Repositórios Django e cadastros gravados no banco de teste
"""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest


def pytest_configure(config):
    """Configura Django antes dos testes e registra markers."""
    import django
    from django.conf import settings

    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.admin',
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'django.contrib.sessions',
                'django.contrib.messages',
                'src.adapters.django_app.despacho',
            ],
            TEMPLATES=[{
                'BACKEND': 'django.template.backends.django.DjangoTemplates',
                'APP_DIRS': True,
                'OPTIONS': {'context_processors': []},
            }],
            ROOT_URLCONF='src.config.urls',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
            DESPACHO={
                'max_tentativas': 3,
                'espera_entre_tentativas': 0,
                'respeitar_prioridade_preferida': False,
                'idade_prioridade_legal': 60,
                'limite_ultimos_chamados': 5,
            },
            EVENT_PUBLISHER_MODE='memory',
        )
        django.setup()


def pytest_collection_modifyitems(config, items):
    """Pula testes de integração sem --run-integration."""
    if config.getoption("--run-integration", default=False):
        return

    skip_integration = pytest.mark.skip(reason="use --run-integration para rodar")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def limpar_container():
    """Cada teste monta o container global do zero."""
    from src.config.container import reset_container

    reset_container()
    yield
    reset_container()


# =============================================================================
# Relógio
# =============================================================================

class RelogioFixo:
    """
    Relógio controlado pelo teste.

    Example:
        relogio = RelogioFixo()
        relogio.avancar(minutos=7, segundos=40)
    """

    def __init__(self, inicio: datetime = None):
        self.agora = inicio or datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.agora

    def avancar(self, minutos: float = 0, segundos: float = 0) -> datetime:
        self.agora = self.agora + timedelta(minutes=minutos, seconds=segundos)
        return self.agora


@pytest.fixture
def relogio():
    return RelogioFixo()


# =============================================================================
# Persistência em memória
# =============================================================================

@pytest.fixture
def repos():
    from src.core.despacho.ports import RepositoriosDespacho

    return RepositoriosDespacho.em_memoria()


@pytest.fixture
def publisher():
    from src.adapters.django_app.events.publishers import InMemoryEventPublisher

    return InMemoryEventPublisher()


@pytest.fixture
def uow(repos, publisher):
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork

    return InMemoryUnitOfWork(repos, event_publisher=publisher)


@pytest.fixture
def cadastros(repos):
    """
    Setor "Atendimento" com dois guichês e três consumidores.

    Returns:
        Dict com setor, guiche1, guiche2, ana, bruno e idoso
    """
    from src.core.despacho.entities import (
        ClienteEntity,
        PontoAtendimentoEntity,
        SetorEntity,
    )

    setor = SetorEntity.criar("Atendimento")
    guiche1 = PontoAtendimentoEntity.criar(setor.id, "Guichê 1")
    guiche2 = PontoAtendimentoEntity.criar(setor.id, "Guichê 2")
    ana = ClienteEntity.criar("Ana Souza", cpf="11122233344", data_nascimento=date(1990, 5, 17))
    bruno = ClienteEntity.criar("Bruno Lima", cpf="55566677788")
    idoso = ClienteEntity.criar("José Pereira", data_nascimento=date(1950, 1, 2))

    repos.setores.save(setor)
    repos.pontos.save(guiche1)
    repos.pontos.save(guiche2)
    for cliente in (ana, bruno, idoso):
        repos.clientes.save(cliente)

    return {
        "setor": setor,
        "guiche1": guiche1,
        "guiche2": guiche2,
        "ana": ana,
        "bruno": bruno,
        "idoso": idoso,
    }


# =============================================================================
# Persistência Django
# =============================================================================

@pytest.fixture
def repos_django(db):
    """Repositórios Django (banco de teste do pytest-django)."""
    from src.adapters.django_app.despacho.repositories import criar_repositorios_django

    return criar_repositorios_django()


@pytest.fixture
def cadastros_db(repos_django):
    """Setor "Financeiro", dois guichês e dois consumidores gravados no banco."""
    from src.core.despacho.entities import (
        ClienteEntity,
        PontoAtendimentoEntity,
        SetorEntity,
    )

    setor = SetorEntity.criar("Financeiro")
    guiche1 = PontoAtendimentoEntity.criar(setor.id, "Guichê 1")
    guiche2 = PontoAtendimentoEntity.criar(setor.id, "Guichê 2")
    ana = ClienteEntity.criar("Ana Souza", cpf="11122233344", data_nascimento=date(1990, 5, 17))
    bruno = ClienteEntity.criar("Bruno Lima")

    repos_django.setores.save(setor)
    repos_django.pontos.save(guiche1)
    repos_django.pontos.save(guiche2)
    repos_django.clientes.save(ana)
    repos_django.clientes.save(bruno)

    return {
        "setor": setor,
        "guiche1": guiche1,
        "guiche2": guiche2,
        "ana": ana,
        "bruno": bruno,
    }
