"""
Ports (Interfaces) do Domínio de Despacho.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência das entidades do despacho, além das implementações
em memória usadas em testes e no desenvolvimento local.

Contrato de concorrência comum a todos os repositórios de agregados
mutáveis (ponto, ticket, operação, pausa, atendimento):
- ``get_for_update`` relê a linha com lock até o fim da transação
- ``save`` grava com checagem de versão: entidade nova (versao 0) é
  inserida com versao 1; entidade existente só é gravada se a versão
  persistida ainda for ``entity.versao``, que então é incrementada.
  Divergência levanta ConcurrencyError.

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core
"""

import copy
from datetime import datetime
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Protocol, runtime_checkable

from src.core.shared.exceptions import ConcurrencyError

from .entities import (
    AtendimentoEntity,
    AtendimentoStatus,
    ClienteEntity,
    OperacaoEntity,
    PausaEntity,
    PontoAtendimentoEntity,
    SetorEntity,
    TicketEntity,
    TicketStatus,
)


@runtime_checkable
class SetorRepository(Protocol):
    def save(self, setor: SetorEntity) -> None:
        ...

    def get_by_id(self, setor_id: str) -> Optional[SetorEntity]:
        ...

    def exists(self, setor_id: str) -> bool:
        ...

    def list_all(self) -> List[SetorEntity]:
        ...


@runtime_checkable
class ClienteRepository(Protocol):
    def save(self, cliente: ClienteEntity) -> None:
        ...

    def get_by_id(self, cliente_id: str) -> Optional[ClienteEntity]:
        ...

    def exists(self, cliente_id: str) -> bool:
        ...


@runtime_checkable
class PontoAtendimentoRepository(Protocol):
    """Interface para persistência de Pontos de Atendimento."""

    def save(self, ponto: PontoAtendimentoEntity) -> None:
        ...

    def get_by_id(self, ponto_id: str) -> Optional[PontoAtendimentoEntity]:
        ...

    def get_for_update(self, ponto_id: str) -> Optional[PontoAtendimentoEntity]:
        ...

    def list_by_setor(self, setor_id: str) -> List[PontoAtendimentoEntity]:
        ...


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (ORM, select_for_update)
    - InMemoryTicketRepository (para testes)
    """

    def save(self, ticket: TicketEntity) -> None:
        """
        Persiste ticket com checagem de versão.

        Raises:
            ConcurrencyError: Se a versão persistida divergir
        """
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ...

    def get_for_update(self, ticket_id: str) -> Optional[TicketEntity]:
        ...

    def list_pendentes(self, setor_id: str, for_update: bool = False) -> List[TicketEntity]:
        """
        Tickets pendentes do setor (sem ordem garantida).

        Args:
            setor_id: Setor da fila
            for_update: Trava as linhas lidas até o fim da transação
        """
        ...


@runtime_checkable
class OperacaoRepository(Protocol):
    """
    Interface para persistência de Operações.

    "Ativa" significa status operando ou pausada.
    """

    def save(self, operacao: OperacaoEntity) -> None:
        ...

    def get_by_id(self, operacao_id: str) -> Optional[OperacaoEntity]:
        ...

    def get_for_update(self, operacao_id: str) -> Optional[OperacaoEntity]:
        ...

    def get_ativa_por_ponto(self, ponto_id: str) -> Optional[OperacaoEntity]:
        ...

    def get_ativa_por_usuario(self, usuario_id: str) -> Optional[OperacaoEntity]:
        ...

    def list_by_usuario(self, usuario_id: str) -> List[OperacaoEntity]:
        ...


@runtime_checkable
class PausaRepository(Protocol):
    def save(self, pausa: PausaEntity) -> None:
        ...

    def get_by_id(self, pausa_id: str) -> Optional[PausaEntity]:
        ...

    def get_em_andamento(self, operacao_id: str) -> Optional[PausaEntity]:
        """Pausa em andamento da operação (no máximo uma)."""
        ...

    def list_by_operacoes(self, operacao_ids: List[str]) -> List[PausaEntity]:
        ...


@runtime_checkable
class AtendimentoRepository(Protocol):
    """
    Interface para persistência de Atendimentos.

    A ligação Atendimento → Ticket é unidirecional; "atendimento aberto
    do ticket X" é uma consulta indexada (``get_aberto_por_ticket``).
    """

    def save(self, atendimento: AtendimentoEntity) -> None:
        ...

    def get_by_id(self, atendimento_id: str) -> Optional[AtendimentoEntity]:
        ...

    def get_for_update(self, atendimento_id: str) -> Optional[AtendimentoEntity]:
        ...

    def get_em_servico_por_operacao(self, operacao_id: str) -> Optional[AtendimentoEntity]:
        ...

    def get_aberto_por_ticket(self, ticket_id: str) -> Optional[AtendimentoEntity]:
        ...

    def list_by_operacoes(self, operacao_ids: List[str]) -> List[AtendimentoEntity]:
        ...

    def listar_recentes(self, limite: int) -> List[AtendimentoEntity]:
        """
        Atendimentos mais recentemente chamados (criação ou rechamada),
        do mais novo para o mais antigo.
        """
        ...

    def list_criados_desde(self, inicio: datetime) -> List[AtendimentoEntity]:
        ...


# =============================================================================
# Implementações em memória
# =============================================================================

class _InMemoryRepository:
    """
    Base das implementações em memória.

    Guarda cópias das entidades, de modo que alterações feitas por um use
    case só chegam ao "banco" via ``save``. A serialização das transações
    fica a cargo do InMemoryUnitOfWork (lock compartilhado), que também
    usa ``snapshot``/``restore`` para desfazer alterações no rollback.

    Não usar em produção!
    """

    versionado = True

    def __init__(self):
        self._itens: Dict[str, object] = {}

    def save(self, entity) -> None:
        if self.versionado:
            atual = self._itens.get(entity.id)
            versao_gravada = atual.versao if atual is not None else 0
            if entity.versao != versao_gravada:
                raise ConcurrencyError(
                    f"{type(entity).__name__} {entity.id} foi alterado por outra "
                    f"transação (versão {entity.versao}, atual {versao_gravada})"
                )
            entity.versao = versao_gravada + 1

        self._itens[entity.id] = copy.deepcopy(entity)

    def get_by_id(self, entity_id: str):
        item = self._itens.get(entity_id)
        return copy.deepcopy(item) if item is not None else None

    def get_for_update(self, entity_id: str):
        return self.get_by_id(entity_id)

    def exists(self, entity_id: str) -> bool:
        return entity_id in self._itens

    def list_all(self) -> list:
        return [copy.deepcopy(item) for item in self._itens.values()]

    def count(self) -> int:
        return len(self._itens)

    def snapshot(self) -> Dict[str, object]:
        return copy.deepcopy(self._itens)

    def restore(self, estado: Dict[str, object]) -> None:
        self._itens = estado

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._itens.clear()

    def _filtrar(self, predicado) -> list:
        return [copy.deepcopy(item) for item in self._itens.values() if predicado(item)]


class InMemorySetorRepository(_InMemoryRepository):
    versionado = False


class InMemoryClienteRepository(_InMemoryRepository):
    versionado = False


class InMemoryPontoAtendimentoRepository(_InMemoryRepository):
    def list_by_setor(self, setor_id: str) -> List[PontoAtendimentoEntity]:
        return self._filtrar(lambda p: p.setor_id == setor_id)


class InMemoryTicketRepository(_InMemoryRepository):
    """
    Example:
        repo = InMemoryTicketRepository()
        repo.save(ticket)
        pendentes = repo.list_pendentes(ticket.setor_id)
    """

    def list_pendentes(self, setor_id: str, for_update: bool = False) -> List[TicketEntity]:
        return self._filtrar(
            lambda t: t.setor_id == setor_id and t.status == TicketStatus.PENDENTE
        )


class InMemoryOperacaoRepository(_InMemoryRepository):
    def get_ativa_por_ponto(self, ponto_id: str) -> Optional[OperacaoEntity]:
        ativas = self._filtrar(
            lambda o: o.ponto_atendimento_id == ponto_id and o.esta_ativa
        )
        return ativas[0] if ativas else None

    def get_ativa_por_usuario(self, usuario_id: str) -> Optional[OperacaoEntity]:
        ativas = self._filtrar(lambda o: o.usuario_id == usuario_id and o.esta_ativa)
        return ativas[0] if ativas else None

    def list_by_usuario(self, usuario_id: str) -> List[OperacaoEntity]:
        return self._filtrar(lambda o: o.usuario_id == usuario_id)


class InMemoryPausaRepository(_InMemoryRepository):
    def get_em_andamento(self, operacao_id: str) -> Optional[PausaEntity]:
        abertas = self._filtrar(lambda p: p.operacao_id == operacao_id and p.em_andamento)
        return abertas[0] if abertas else None

    def list_by_operacoes(self, operacao_ids: List[str]) -> List[PausaEntity]:
        ids = set(operacao_ids)
        return self._filtrar(lambda p: p.operacao_id in ids)


class InMemoryAtendimentoRepository(_InMemoryRepository):
    def get_em_servico_por_operacao(self, operacao_id: str) -> Optional[AtendimentoEntity]:
        ativos = self._filtrar(lambda a: a.operacao_id == operacao_id and a.em_servico)
        return ativos[0] if ativos else None

    def get_aberto_por_ticket(self, ticket_id: str) -> Optional[AtendimentoEntity]:
        abertos = self._filtrar(
            lambda a: a.ticket_id == ticket_id and a.status == AtendimentoStatus.EM_SERVICO
        )
        return abertos[0] if abertos else None

    def list_by_operacoes(self, operacao_ids: List[str]) -> List[AtendimentoEntity]:
        ids = set(operacao_ids)
        return self._filtrar(lambda a: a.operacao_id in ids)

    def listar_recentes(self, limite: int) -> List[AtendimentoEntity]:
        todos = self.list_all()
        todos.sort(key=lambda a: (a.ultima_chamada_em, a.id), reverse=True)
        return todos[:limite]

    def list_criados_desde(self, inicio: datetime) -> List[AtendimentoEntity]:
        return self._filtrar(lambda a: a.criado_em >= inicio)


@dataclass
class RepositoriosDespacho:
    """
    Conjunto dos repositórios usados pelos use cases do despacho.

    Iterável, para que o UnitOfWork em memória consiga tirar e restaurar
    snapshots de todos eles.

    Example:
        repos = RepositoriosDespacho.em_memoria()
        service = ChamarProximoTicketService(repos, uow)
    """

    setores: SetorRepository
    clientes: ClienteRepository
    pontos: PontoAtendimentoRepository
    tickets: TicketRepository
    operacoes: OperacaoRepository
    pausas: PausaRepository
    atendimentos: AtendimentoRepository

    def __iter__(self) -> Iterator[object]:
        return iter((
            self.setores,
            self.clientes,
            self.pontos,
            self.tickets,
            self.operacoes,
            self.pausas,
            self.atendimentos,
        ))

    @classmethod
    def em_memoria(cls) -> "RepositoriosDespacho":
        return cls(
            setores=InMemorySetorRepository(),
            clientes=InMemoryClienteRepository(),
            pontos=InMemoryPontoAtendimentoRepository(),
            tickets=InMemoryTicketRepository(),
            operacoes=InMemoryOperacaoRepository(),
            pausas=InMemoryPausaRepository(),
            atendimentos=InMemoryAtendimentoRepository(),
        )
