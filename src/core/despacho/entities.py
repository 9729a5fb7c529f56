"""
Entidades do Domínio de Despacho de Atendimentos.

Entidades:
- SetorEntity: Departamento que recebe tickets e possui pontos de atendimento
- PontoAtendimentoEntity: Guichê onde um profissional atende
- ClienteEntity: Consumidor que retira tickets
- TicketEntity: Senha de um consumidor na fila de um setor
- OperacaoEntity: Sessão de trabalho de um profissional em um ponto
- PausaEntity: Intervalo suspenso dentro de uma operação
- AtendimentoEntity: Serviço ativo que liga um ticket a uma operação

Regras de Negócio Encapsuladas:
- Transições de status controladas por tabelas de transição
- Cálculo de duração em minutos (arredondado, mínimo 1)
- Disponibilidade do ponto derivada da operação corrente

Os valores dos enums são os mesmos gravados no banco e expostos na API.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional
import math
import uuid

from src.core.shared.clock import agora_utc
from src.core.shared.exceptions import ConflictError, ValidationError


def calcular_duracao_minutos(inicio: datetime, fim: datetime) -> int:
    """
    Duração entre dois instantes em minutos inteiros.

    Arredonda meio para cima; resultados menores que 1 (inclusive
    negativos, por relógios dessincronizados) viram 1.

    Example:
        >>> calcular_duracao_minutos(t, t + timedelta(minutes=7, seconds=40))
        8
    """
    minutos = (fim - inicio).total_seconds() / 60
    return max(math.floor(minutos + 0.5), 1)


def _novo_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# Enums
# =============================================================================

class TicketStatus(Enum):
    """
    Estados de um ticket.

    Fluxo de Estados:
        PENDENTE → EM_ATENDIMENTO → FINALIZADO
            ↓             ↓
        CANCELADO ←───────┘
    """

    PENDENTE = "pending"
    EM_ATENDIMENTO = "in-attendance"
    FINALIZADO = "finished"
    CANCELADO = "canceled"

    @property
    def terminal(self) -> bool:
        return self in (TicketStatus.FINALIZADO, TicketStatus.CANCELADO)


class TicketPriority(Enum):
    """Nível de prioridade: 0 (normal) ou 1 (prioritário)."""

    NORMAL = 0
    PRIORITARIO = 1

    @classmethod
    def from_value(cls, value) -> "TicketPriority":
        """
        Converte valor externo (int, "0"/"1" ou o próprio enum).

        Raises:
            ValueError: Se valor não for 0 ou 1
        """
        if isinstance(value, TicketPriority):
            return value

        if isinstance(value, bool) or value is None:
            raise ValueError(f"Prioridade inválida: {value!r}")

        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"Prioridade inválida: {value!r}")

        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Prioridade inválida: {value!r}")


class OperacaoStatus(Enum):
    """
    Estados de uma operação.

    Fluxo de Estados:
        OPERANDO ⇄ PAUSADA
            ↓         ↓
           FINALIZADA
    """

    OPERANDO = "operating"
    PAUSADA = "paused"
    FINALIZADA = "finished"

    @property
    def ativa(self) -> bool:
        return self != OperacaoStatus.FINALIZADA


class DisponibilidadePonto(Enum):
    """Disponibilidade de um ponto de atendimento."""

    LIVRE = "free"
    OPERANDO = "operating"
    PAUSADO = "paused"


class MotivoPausa(Enum):
    """
    Motivos de pausa.

    ATENDIMENTO_FINALIZADO é a pausa de registro emitida pelo sistema logo
    após o encerramento de um atendimento.
    """

    ALMOCO = "lunch"
    INTERVALO = "break"
    REUNIAO = "meeting"
    PESSOAL = "personal"
    TECNICO = "technical"
    ATENDIMENTO_FINALIZADO = "finished-service"
    OUTRO = "other"

    @property
    def rotulo(self) -> str:
        """Rótulo para exibição."""
        return _ROTULOS_MOTIVO[self]

    @classmethod
    def from_string(cls, value: str) -> "MotivoPausa":
        """
        Converte pelo valor ("lunch") ou pelo nome ("ALMOCO").

        Raises:
            ValueError: Se motivo desconhecido
        """
        if isinstance(value, MotivoPausa):
            return value

        texto = str(value or "").strip()
        for motivo in cls:
            if motivo.value == texto.lower() or motivo.name == texto.upper():
                return motivo

        raise ValueError(f"Motivo de pausa inválido: {value!r}")


_ROTULOS_MOTIVO = {
    MotivoPausa.ALMOCO: "Almoço",
    MotivoPausa.INTERVALO: "Intervalo",
    MotivoPausa.REUNIAO: "Reunião",
    MotivoPausa.PESSOAL: "Pessoal",
    MotivoPausa.TECNICO: "Técnico",
    MotivoPausa.ATENDIMENTO_FINALIZADO: "Atendimento Finalizado",
    MotivoPausa.OUTRO: "Outro",
}


class PausaStatus(Enum):
    EM_ANDAMENTO = "in-progress"
    FINALIZADA = "finished"
    CANCELADA = "cancelled"


class AtendimentoStatus(Enum):
    """
    Estados de um atendimento.

    Fluxo de Estados:
        EM_SERVICO → FINALIZADO
        EM_SERVICO → CANCELADO
    """

    EM_SERVICO = "in_service"
    FINALIZADO = "finished"
    CANCELADO = "cancelled"


class TipoResolucao(Enum):
    """Como o atendimento foi resolvido."""

    RECLAMACAO = "complaint"
    DENUNCIA = "denunciation"
    CONSULTA = "consultation"

    @classmethod
    def from_string(cls, value: str) -> "TipoResolucao":
        """
        Converte pelo valor ("complaint") ou pelo nome ("RECLAMACAO").

        Raises:
            ValueError: Se tipo desconhecido
        """
        if isinstance(value, TipoResolucao):
            return value

        texto = str(value or "").strip()
        for tipo in cls:
            if tipo.value == texto.lower() or tipo.name == texto.upper():
                return tipo

        raise ValueError(f"Tipo de resolução inválido: {value!r}")


_TRANSICOES_TICKET: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    TicketStatus.PENDENTE: frozenset({TicketStatus.EM_ATENDIMENTO, TicketStatus.CANCELADO}),
    TicketStatus.EM_ATENDIMENTO: frozenset({TicketStatus.FINALIZADO, TicketStatus.CANCELADO}),
    TicketStatus.FINALIZADO: frozenset(),
    TicketStatus.CANCELADO: frozenset(),
}

_TRANSICOES_OPERACAO: Dict[OperacaoStatus, FrozenSet[OperacaoStatus]] = {
    OperacaoStatus.OPERANDO: frozenset({OperacaoStatus.PAUSADA, OperacaoStatus.FINALIZADA}),
    OperacaoStatus.PAUSADA: frozenset({OperacaoStatus.OPERANDO, OperacaoStatus.FINALIZADA}),
    OperacaoStatus.FINALIZADA: frozenset(),
}


# =============================================================================
# Cadastros (mantidos pela camada administrativa)
# =============================================================================

@dataclass
class SetorEntity:
    """Departamento que possui pontos de atendimento e recebe tickets."""

    id: str = field(default_factory=_novo_id)
    nome: str = ""

    @classmethod
    def criar(cls, nome: str) -> "SetorEntity":
        if not nome or not nome.strip():
            raise ValidationError("Nome do setor é obrigatório", field="nome")
        return cls(nome=nome.strip())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SetorEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class ClienteEntity:
    """
    Consumidor identificado pelo CPF.

    A validação/formatação do CPF pertence à camada de cadastro; aqui
    o documento é apenas armazenado.
    """

    id: str = field(default_factory=_novo_id)
    nome: str = ""
    cpf: str = ""
    data_nascimento: Optional[date] = None

    @classmethod
    def criar(
        cls,
        nome: str,
        cpf: str = "",
        data_nascimento: Optional[date] = None,
    ) -> "ClienteEntity":
        if not nome or not nome.strip():
            raise ValidationError("Nome do cliente é obrigatório", field="nome")
        return cls(nome=nome.strip(), cpf=cpf, data_nascimento=data_nascimento)

    def idade_em(self, referencia: date) -> Optional[int]:
        """
        Idade completa em anos na data de referência.

        Returns:
            Idade ou None se data de nascimento desconhecida
        """
        if self.data_nascimento is None:
            return None

        nascimento = self.data_nascimento
        fez_aniversario = (referencia.month, referencia.day) >= (nascimento.month, nascimento.day)
        return referencia.year - nascimento.year - (0 if fez_aniversario else 1)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClienteEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


# =============================================================================
# Ticket
# =============================================================================

@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Pedido de atendimento de um consumidor na fila de um setor. O vínculo
    com o atendimento é feito apenas pelo AtendimentoEntity (FK
    Atendimento → Ticket); o ticket não guarda ponteiro de volta.

    Invariantes:
    - Cliente e setor são obrigatórios
    - Finalizado e cancelado são estados terminais
    - Só tickets pendentes podem ser chamados

    Attributes:
        id: Identificador único (UUID)
        cliente_id: ID do consumidor
        setor_id: ID do setor da fila
        prioridade: NORMAL (0) ou PRIORITARIO (1)
        status: Estado atual
        criado_em: Instante de entrada na fila (ordem FIFO)
        atualizado_em: Instante da última transição
        versao: Versão para controle otimista de concorrência

    Example:
        ticket = TicketEntity.criar(cliente_id="c1", setor_id="s1")
        ticket.chamar()
        ticket.finalizar()
    """

    id: str = field(default_factory=_novo_id)
    cliente_id: str = ""
    setor_id: str = ""
    prioridade: TicketPriority = TicketPriority.NORMAL
    status: TicketStatus = TicketStatus.PENDENTE
    criado_em: datetime = field(default_factory=agora_utc)
    atualizado_em: datetime = field(default_factory=agora_utc)
    versao: int = 0

    @classmethod
    def criar(
        cls,
        cliente_id: str,
        setor_id: str,
        prioridade: TicketPriority = TicketPriority.NORMAL,
        agora: Optional[datetime] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket pendente.

        Raises:
            ValidationError: Se cliente ou setor ausentes
        """
        if not cliente_id:
            raise ValidationError("Cliente é obrigatório", field="cliente_id")

        if not setor_id:
            raise ValidationError("Setor é obrigatório", field="setor_id")

        momento = agora or agora_utc()
        return cls(
            cliente_id=cliente_id,
            setor_id=setor_id,
            prioridade=prioridade,
            status=TicketStatus.PENDENTE,
            criado_em=momento,
            atualizado_em=momento,
        )

    def chamar(self, agora: Optional[datetime] = None) -> None:
        """Ticket foi reivindicado por um atendimento (pending → in-attendance)."""
        self._transitar(TicketStatus.EM_ATENDIMENTO, agora)

    def finalizar(self, agora: Optional[datetime] = None) -> None:
        self._transitar(TicketStatus.FINALIZADO, agora)

    def cancelar(self, agora: Optional[datetime] = None) -> None:
        """
        Cancela o ticket.

        Raises:
            ConflictError: Se o ticket já está finalizado ou cancelado
        """
        self._transitar(TicketStatus.CANCELADO, agora)

    def _transitar(self, novo_status: TicketStatus, agora: Optional[datetime]) -> None:
        if novo_status not in _TRANSICOES_TICKET[self.status]:
            raise ConflictError(
                f"Ticket está '{self.status.value}' e não pode passar para "
                f"'{novo_status.value}'",
                rule="transicao_ticket_invalida",
            )

        self.status = novo_status
        self.atualizado_em = agora or agora_utc()

    @property
    def esta_pendente(self) -> bool:
        return self.status == TicketStatus.PENDENTE

    @property
    def esta_encerrado(self) -> bool:
        return self.status.terminal

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"setor={self.setor_id[:8]}, "
            f"status={self.status.value}, "
            f"prioridade={self.prioridade.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


# =============================================================================
# Operação e Pausa
# =============================================================================

@dataclass
class OperacaoEntity:
    """
    Entidade de Domínio: Operação.

    Uma sessão de trabalho de um profissional em um ponto de atendimento.
    Nunca é removida; termina em FINALIZADA.

    Invariantes (garantidas pelos use cases + restrições do banco):
    - No máximo uma operação ativa por ponto de atendimento
    - No máximo uma operação ativa por usuário
    """

    id: str = field(default_factory=_novo_id)
    usuario_id: str = ""
    ponto_atendimento_id: str = ""
    status: OperacaoStatus = OperacaoStatus.OPERANDO
    criado_em: datetime = field(default_factory=agora_utc)
    atualizado_em: datetime = field(default_factory=agora_utc)
    versao: int = 0

    @classmethod
    def iniciar(
        cls,
        usuario_id: str,
        ponto_atendimento_id: str,
        agora: Optional[datetime] = None,
    ) -> "OperacaoEntity":
        """
        Factory method para abrir uma operação já operando.

        Raises:
            ValidationError: Se usuário ou ponto ausentes
        """
        if not usuario_id:
            raise ValidationError("Usuário é obrigatório", field="usuario_id")

        if not ponto_atendimento_id:
            raise ValidationError(
                "Ponto de atendimento é obrigatório",
                field="ponto_atendimento_id",
            )

        momento = agora or agora_utc()
        return cls(
            usuario_id=usuario_id,
            ponto_atendimento_id=ponto_atendimento_id,
            status=OperacaoStatus.OPERANDO,
            criado_em=momento,
            atualizado_em=momento,
        )

    def pausar(self, agora: Optional[datetime] = None) -> None:
        """
        Raises:
            ConflictError: Se a operação não está operando
        """
        if self.status != OperacaoStatus.OPERANDO:
            raise ConflictError(
                f"Só é possível pausar uma operação em andamento "
                f"(status atual: '{self.status.value}')",
                rule="pausa_exige_operacao_operando",
            )
        self._transitar(OperacaoStatus.PAUSADA, agora)

    def retomar(self, agora: Optional[datetime] = None) -> None:
        """
        Raises:
            ConflictError: Se a operação não está pausada
        """
        if self.status != OperacaoStatus.PAUSADA:
            raise ConflictError(
                f"Só é possível retomar uma operação pausada "
                f"(status atual: '{self.status.value}')",
                rule="retomada_exige_operacao_pausada",
            )
        self._transitar(OperacaoStatus.OPERANDO, agora)

    def encerrar(self, agora: Optional[datetime] = None) -> None:
        """
        Raises:
            ConflictError: Se a operação já foi finalizada
        """
        if not self.esta_ativa:
            raise ConflictError(
                "Operação já está finalizada",
                rule="operacao_ja_finalizada",
            )
        self._transitar(OperacaoStatus.FINALIZADA, agora)

    def _transitar(self, novo_status: OperacaoStatus, agora: Optional[datetime]) -> None:
        if novo_status not in _TRANSICOES_OPERACAO[self.status]:
            raise ConflictError(
                f"Transição de '{self.status.value}' para '{novo_status.value}' "
                f"não é permitida",
                rule="transicao_operacao_invalida",
            )

        self.status = novo_status
        self.atualizado_em = agora or agora_utc()

    @property
    def esta_ativa(self) -> bool:
        return self.status.ativa

    @property
    def duracao_minutos(self) -> Optional[int]:
        """Duração da operação finalizada; None enquanto ativa."""
        if self.esta_ativa:
            return None
        return calcular_duracao_minutos(self.criado_em, self.atualizado_em)

    def __repr__(self) -> str:
        return (
            f"OperacaoEntity("
            f"id={self.id[:8]}..., "
            f"usuario={self.usuario_id}, "
            f"status={self.status.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OperacaoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class PausaEntity:
    """
    Entidade de Domínio: Pausa.

    Intervalo dentro de uma operação durante o qual nenhum atendimento
    pode começar. No máximo uma pausa em andamento por operação.
    A duração (minutos) é calculada no encerramento.
    """

    id: str = field(default_factory=_novo_id)
    operacao_id: str = ""
    motivo: MotivoPausa = MotivoPausa.OUTRO
    status: PausaStatus = PausaStatus.EM_ANDAMENTO
    duracao: Optional[int] = None
    criado_em: datetime = field(default_factory=agora_utc)
    atualizado_em: datetime = field(default_factory=agora_utc)
    versao: int = 0

    @classmethod
    def abrir(
        cls,
        operacao_id: str,
        motivo: MotivoPausa,
        agora: Optional[datetime] = None,
    ) -> "PausaEntity":
        momento = agora or agora_utc()
        return cls(
            operacao_id=operacao_id,
            motivo=motivo,
            status=PausaStatus.EM_ANDAMENTO,
            criado_em=momento,
            atualizado_em=momento,
        )

    def encerrar(self, agora: Optional[datetime] = None) -> int:
        """
        Fecha a pausa e calcula sua duração.

        Returns:
            Duração em minutos (mínimo 1)

        Raises:
            ConflictError: Se a pausa não está em andamento
        """
        if not self.em_andamento:
            raise ConflictError(
                f"Pausa já está '{self.status.value}'",
                rule="pausa_ja_encerrada",
            )

        momento = agora or agora_utc()
        self.duracao = calcular_duracao_minutos(self.criado_em, momento)
        self.status = PausaStatus.FINALIZADA
        self.atualizado_em = momento
        return self.duracao

    @property
    def em_andamento(self) -> bool:
        return self.status == PausaStatus.EM_ANDAMENTO

    @property
    def sistemica(self) -> bool:
        """Pausa de registro emitida após o fim de um atendimento."""
        return self.motivo == MotivoPausa.ATENDIMENTO_FINALIZADO

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PausaEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


# =============================================================================
# Atendimento
# =============================================================================

@dataclass
class AtendimentoEntity:
    """
    Entidade de Domínio: Atendimento.

    Instância de serviço que liga um ticket a uma operação. Criado junto
    com a transição pending → in-attendance do ticket.

    Invariantes:
    - No máximo um atendimento EM_SERVICO por operação
    - Um ticket é referenciado por no máximo um atendimento não terminal
    - Não há estado intermediário: EM_SERVICO → FINALIZADO | CANCELADO

    Attributes:
        tipo_resolucao: Preenchido apenas ao finalizar
        duracao: Minutos entre criação e encerramento
        chamado_novamente_em: Última vez que o consumidor foi rechamado
    """

    id: str = field(default_factory=_novo_id)
    ticket_id: str = ""
    operacao_id: str = ""
    status: AtendimentoStatus = AtendimentoStatus.EM_SERVICO
    tipo_resolucao: Optional[TipoResolucao] = None
    duracao: Optional[int] = None
    criado_em: datetime = field(default_factory=agora_utc)
    atualizado_em: datetime = field(default_factory=agora_utc)
    chamado_novamente_em: Optional[datetime] = None
    versao: int = 0

    @classmethod
    def abrir(
        cls,
        ticket_id: str,
        operacao_id: str,
        agora: Optional[datetime] = None,
    ) -> "AtendimentoEntity":
        momento = agora or agora_utc()
        return cls(
            ticket_id=ticket_id,
            operacao_id=operacao_id,
            status=AtendimentoStatus.EM_SERVICO,
            criado_em=momento,
            atualizado_em=momento,
        )

    def finalizar(
        self,
        tipo_resolucao: TipoResolucao,
        agora: Optional[datetime] = None,
    ) -> None:
        """
        Registra a resolução e encerra o atendimento.

        Raises:
            ConflictError: Se o atendimento não está em serviço
        """
        self._garantir_em_servico("finalizar")
        self._encerrar(AtendimentoStatus.FINALIZADO, agora)
        self.tipo_resolucao = tipo_resolucao

    def cancelar(self, agora: Optional[datetime] = None) -> None:
        """
        Raises:
            ConflictError: Se o atendimento não está em serviço
        """
        self._garantir_em_servico("cancelar")
        self._encerrar(AtendimentoStatus.CANCELADO, agora)

    def registrar_nova_chamada(self, agora: Optional[datetime] = None) -> None:
        """
        Marca o instante em que o consumidor foi chamado de novo.

        Raises:
            ConflictError: Se o atendimento não está em serviço
        """
        self._garantir_em_servico("chamar novamente")
        self.chamado_novamente_em = agora or agora_utc()

    def _garantir_em_servico(self, acao: str) -> None:
        if not self.em_servico:
            raise ConflictError(
                f"Não é possível {acao}: atendimento está '{self.status.value}'",
                rule="atendimento_nao_em_servico",
            )

    def _encerrar(self, novo_status: AtendimentoStatus, agora: Optional[datetime]) -> None:
        momento = agora or agora_utc()
        self.duracao = calcular_duracao_minutos(self.criado_em, momento)
        self.status = novo_status
        self.atualizado_em = momento

    @property
    def em_servico(self) -> bool:
        return self.status == AtendimentoStatus.EM_SERVICO

    @property
    def ultima_chamada_em(self) -> datetime:
        return self.chamado_novamente_em or self.criado_em

    def __repr__(self) -> str:
        return (
            f"AtendimentoEntity("
            f"id={self.id[:8]}..., "
            f"ticket={self.ticket_id[:8]}, "
            f"status={self.status.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AtendimentoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


# =============================================================================
# Ponto de Atendimento
# =============================================================================

@dataclass
class PontoAtendimentoEntity:
    """
    Entidade de Domínio: Ponto de Atendimento (guichê).

    ``disponibilidade`` é uma projeção da operação corrente, regravada
    pelos use cases na mesma transação que altera a operação:
    - LIVRE ⇔ nenhuma operação ativa
    - OPERANDO ⇔ operação ativa operando
    - PAUSADO ⇔ operação ativa pausada

    Attributes:
        prioridade_preferida: Faixa que o ponto prefere atender
    """

    id: str = field(default_factory=_novo_id)
    setor_id: str = ""
    nome: str = ""
    disponibilidade: DisponibilidadePonto = DisponibilidadePonto.LIVRE
    prioridade_preferida: TicketPriority = TicketPriority.NORMAL
    versao: int = 0

    @classmethod
    def criar(
        cls,
        setor_id: str,
        nome: str,
        prioridade_preferida: TicketPriority = TicketPriority.NORMAL,
    ) -> "PontoAtendimentoEntity":
        if not setor_id:
            raise ValidationError("Setor é obrigatório", field="setor_id")

        if not nome or not nome.strip():
            raise ValidationError("Nome do ponto é obrigatório", field="nome")

        return cls(
            setor_id=setor_id,
            nome=nome.strip(),
            prioridade_preferida=prioridade_preferida,
        )

    @staticmethod
    def projetar_disponibilidade(operacao: Optional[OperacaoEntity]) -> DisponibilidadePonto:
        """Disponibilidade correspondente à operação corrente do ponto."""
        if operacao is None or not operacao.esta_ativa:
            return DisponibilidadePonto.LIVRE

        if operacao.status == OperacaoStatus.PAUSADA:
            return DisponibilidadePonto.PAUSADO

        return DisponibilidadePonto.OPERANDO

    def sincronizar_com(self, operacao: Optional[OperacaoEntity]) -> bool:
        """
        Recalcula a disponibilidade a partir da operação corrente.

        Returns:
            True se a disponibilidade mudou
        """
        nova = self.projetar_disponibilidade(operacao)
        mudou = nova != self.disponibilidade
        self.disponibilidade = nova
        return mudou

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PontoAtendimentoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
