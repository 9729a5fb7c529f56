"""
Use Cases (Application Services) de comando do Domínio de Despacho.

Use Cases implementados:
- CriarTicketService: Coloca um ticket na fila de um setor
- CancelarTicketService: Cancela ticket (e o atendimento aberto, se houver)
- IniciarOperacaoService: Abre operação de um profissional em um ponto
- PausarOperacaoService: Pausa a operação
- RetomarOperacaoService: Retoma a operação pausada
- EncerrarOperacaoService: Finaliza a operação e libera o ponto
- ChamarProximoTicketService: Reivindica o próximo ticket da fila
- ChamarClienteNovamenteService: Registra nova chamada do consumidor
- FinalizarAtendimentoService: Resolve o atendimento
- CancelarAtendimentoService: Cancela atendimento e ticket

Disciplina de consistência (comum a todos):
1. O comando inteiro roda dentro de ``GuardaConsistencia.executar``
2. ``with self.uow:`` abre a transação
3. As linhas-alvo são relidas com ``get_for_update`` e todas as
   pré-condições são revalidadas contra esse estado
4. Gravações usam checagem de versão; corridas viram ConcurrencyError,
   a transação é desfeita e o comando é re-executado pela guarda

Ordem de locks: operação → ponto → atendimento → ticket.
"""

import logging
from collections.abc import Mapping
from typing import Optional

from src.core.shared.clock import Relogio, agora_utc
from src.core.shared.consistency import GuardaConsistencia
from src.core.shared.exceptions import (
    ConcurrencyError,
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.shared.interfaces import UnitOfWork

from .dtos import (
    AckDTO,
    AtendimentoOutputDTO,
    CancelarAtendimentoInputDTO,
    CancelarTicketInputDTO,
    ChamadaResultadoDTO,
    ChamarNovamenteInputDTO,
    ChamarProximoInputDTO,
    CriarTicketInputDTO,
    EncerrarOperacaoInputDTO,
    FinalizarAtendimentoInputDTO,
    IniciarOperacaoInputDTO,
    OperacaoOutputDTO,
    PausaOutputDTO,
    PausarOperacaoInputDTO,
    RetomarOperacaoInputDTO,
    TicketOutputDTO,
)
from .entities import (
    AtendimentoEntity,
    ClienteEntity,
    MotivoPausa,
    OperacaoEntity,
    OperacaoStatus,
    PausaEntity,
    PontoAtendimentoEntity,
    TicketEntity,
    TicketPriority,
    TicketStatus,
    TipoResolucao,
)
from .events import (
    AtendimentoCanceladoEvent,
    AtendimentoFinalizadoEvent,
    AtendimentoIniciadoEvent,
    ClienteChamadoNovamenteEvent,
    OperacaoEncerradaEvent,
    OperacaoIniciadaEvent,
    OperacaoPausadaEvent,
    OperacaoRetomadaEvent,
    TicketCanceladoEvent,
    TicketCriadoEvent,
)
from .fila import FilaPrioritaria
from .ports import RepositoriosDespacho

logger = logging.getLogger(__name__)


class _ComandoDespacho:
    """
    Base dos use cases de comando.

    Attributes:
        repos: Repositórios do despacho
        uow: Unit of Work (reutilizável entre tentativas)
        guarda: Re-tentativa limitada de ConcurrencyError
        relogio: Fonte de "agora" (UTC), injetável nos testes
    """

    descricao = "comando"

    def __init__(
        self,
        repos: RepositoriosDespacho,
        uow: UnitOfWork,
        guarda: Optional[GuardaConsistencia] = None,
        relogio: Relogio = agora_utc,
    ):
        self.repos = repos
        self.uow = uow
        self.guarda = guarda or GuardaConsistencia()
        self.relogio = relogio

    def execute(self, input_dto):
        return self.guarda.executar(lambda: self._executar(input_dto), self.descricao)

    def _executar(self, input_dto):
        raise NotImplementedError

    # Helpers de carga com lock -------------------------------------------

    def _operacao_para_update(self, operacao_id: str) -> OperacaoEntity:
        operacao = self.repos.operacoes.get_for_update(operacao_id)
        if operacao is None:
            raise EntityNotFoundError(
                f"Operação {operacao_id} não encontrada",
                entity_type="Operacao",
                entity_id=operacao_id,
            )
        return operacao

    def _atendimento_para_update(self, atendimento_id: str) -> AtendimentoEntity:
        atendimento = self.repos.atendimentos.get_for_update(atendimento_id)
        if atendimento is None:
            raise EntityNotFoundError(
                f"Atendimento {atendimento_id} não encontrado",
                entity_type="Atendimento",
                entity_id=atendimento_id,
            )
        return atendimento

    def _ticket_para_update(self, ticket_id: str) -> TicketEntity:
        ticket = self.repos.tickets.get_for_update(ticket_id)
        if ticket is None:
            raise EntityNotFoundError(
                f"Ticket {ticket_id} não encontrado",
                entity_type="Ticket",
                entity_id=ticket_id,
            )
        return ticket

    def _sincronizar_ponto(self, operacao: OperacaoEntity) -> Optional[PontoAtendimentoEntity]:
        """Regrava a disponibilidade do ponto a partir da operação."""
        ponto = self.repos.pontos.get_for_update(operacao.ponto_atendimento_id)
        if ponto is None:
            logger.warning(
                f"Ponto {operacao.ponto_atendimento_id} da operação "
                f"{operacao.id} não existe mais"
            )
            return None

        if ponto.sincronizar_com(operacao):
            self.repos.pontos.save(ponto)
        return ponto


# =============================================================================
# Tickets
# =============================================================================

class CriarTicketService(_ComandoDespacho):
    """
    Use Case: Colocar um ticket na fila de um setor.

    Fluxo:
    1. Validar prioridade (0 ou 1)
    2. Verificar que cliente e setor existem
    3. Aplicar prioridade legal (idosos)
    4. Persistir ticket pendente
    5. Disparar TicketCriadoEvent

    Example:
        service = CriarTicketService(repos, uow)
        output = service.execute(CriarTicketInputDTO(
            cliente_id="c1", setor_id="s1", prioridade=1
        ))
    """

    descricao = "criar ticket"

    def __init__(
        self,
        repos: RepositoriosDespacho,
        uow: UnitOfWork,
        guarda: Optional[GuardaConsistencia] = None,
        relogio: Relogio = agora_utc,
        idade_prioridade_legal: Optional[int] = 60,
    ):
        super().__init__(repos, uow, guarda, relogio)
        self.idade_prioridade_legal = idade_prioridade_legal

    def _executar(self, input_dto: CriarTicketInputDTO) -> TicketOutputDTO:
        try:
            prioridade = TicketPriority.from_value(input_dto.prioridade)
        except ValueError:
            raise ValidationError(
                f"Prioridade inválida: {input_dto.prioridade!r} (use 0 ou 1)",
                field="prioridade",
            )

        with self.uow:
            cliente = self.repos.clientes.get_by_id(input_dto.cliente_id) if input_dto.cliente_id else None
            if cliente is None:
                raise ValidationError(
                    f"Cliente {input_dto.cliente_id!r} não existe",
                    field="cliente_id",
                )

            if not input_dto.setor_id or not self.repos.setores.exists(input_dto.setor_id):
                raise ValidationError(
                    f"Setor {input_dto.setor_id!r} não existe",
                    field="setor_id",
                )

            agora = self.relogio()
            prioridade = self._prioridade_legal(cliente, prioridade, agora)

            ticket = TicketEntity.criar(
                cliente_id=cliente.id,
                setor_id=input_dto.setor_id,
                prioridade=prioridade,
                agora=agora,
            )
            self.repos.tickets.save(ticket)

            self.uow.publish_event(
                TicketCriadoEvent(
                    aggregate_id=ticket.id,
                    cliente_id=ticket.cliente_id,
                    setor_id=ticket.setor_id,
                    prioridade=ticket.prioridade.value,
                )
            )

        logger.info(
            f"Ticket {ticket.id} criado no setor {ticket.setor_id} "
            f"(prioridade {ticket.prioridade.value})"
        )
        return TicketOutputDTO.from_entity(ticket)

    def _prioridade_legal(self, cliente: ClienteEntity, prioridade: TicketPriority, agora) -> TicketPriority:
        if self.idade_prioridade_legal is None:
            return prioridade

        idade = cliente.idade_em(agora.date())
        if idade is not None and idade >= self.idade_prioridade_legal:
            if prioridade != TicketPriority.PRIORITARIO:
                logger.info(f"Cliente {cliente.id} com {idade} anos: ticket prioritário")
            return TicketPriority.PRIORITARIO

        return prioridade


class CancelarTicketService(_ComandoDespacho):
    """
    Use Case: Cancelar ticket.

    Permitido a partir de pending ou in-attendance. Em atendimento, o
    atendimento aberto é cancelado (com duração) na mesma transação,
    liberando a operação para chamar de novo.

    Raises:
        EntityNotFoundError: Ticket inexistente
        ConflictError: Ticket já finalizado ou cancelado, ou em
            atendimento sem atendimento aberto
    """

    descricao = "cancelar ticket"

    def _executar(self, input_dto: CancelarTicketInputDTO) -> TicketOutputDTO:
        with self.uow:
            atual = self.repos.tickets.get_by_id(input_dto.ticket_id)
            if atual is None:
                raise EntityNotFoundError(
                    f"Ticket {input_dto.ticket_id} não encontrado",
                    entity_type="Ticket",
                    entity_id=input_dto.ticket_id,
                )

            atendimento = None
            if atual.status == TicketStatus.EM_ATENDIMENTO:
                aberto = self.repos.atendimentos.get_aberto_por_ticket(atual.id)
                if aberto is not None:
                    atendimento = self._atendimento_para_update(aberto.id)

            ticket = self._ticket_para_update(atual.id)
            status_anterior = ticket.status

            if ticket.status == TicketStatus.EM_ATENDIMENTO and atendimento is None:
                if self.repos.atendimentos.get_aberto_por_ticket(ticket.id) is None:
                    raise ConflictError(
                        f"Ticket {ticket.id} está em atendimento sem atendimento aberto",
                        rule="ticket_sem_atendimento_aberto",
                    )
                raise ConcurrencyError(
                    f"Ticket {ticket.id} mudou de estado durante o cancelamento"
                )

            if atendimento is not None and not atendimento.em_servico:
                raise ConcurrencyError(
                    f"Ticket {ticket.id} mudou de estado durante o cancelamento"
                )

            agora = self.relogio()

            if atendimento is not None and ticket.status == TicketStatus.EM_ATENDIMENTO:
                atendimento.cancelar(agora)
                self.repos.atendimentos.save(atendimento)
                self.uow.publish_event(
                    AtendimentoCanceladoEvent(
                        aggregate_id=atendimento.id,
                        ticket_id=ticket.id,
                        operacao_id=atendimento.operacao_id,
                        duracao=atendimento.duracao,
                        origem="ticket",
                    )
                )
            else:
                atendimento = None

            ticket.cancelar(agora)
            self.repos.tickets.save(ticket)

            self.uow.publish_event(
                TicketCanceladoEvent(
                    aggregate_id=ticket.id,
                    setor_id=ticket.setor_id,
                    status_anterior=status_anterior.value,
                    atendimento_id=atendimento.id if atendimento else None,
                )
            )

        logger.info(f"Ticket {ticket.id} cancelado (estava {status_anterior.value})")
        return TicketOutputDTO.from_entity(ticket)


# =============================================================================
# Operações
# =============================================================================

class IniciarOperacaoService(_ComandoDespacho):
    """
    Use Case: Profissional abre operação em um ponto de atendimento.

    Fluxo:
    1. Travar o ponto
    2. Garantir que o ponto e o usuário não têm operação ativa
    3. Criar operação operando
    4. Ponto passa a "operating"

    Raises:
        EntityNotFoundError: Ponto inexistente
        ConflictError: Ponto ou usuário já com operação ativa
    """

    descricao = "iniciar operação"

    def _executar(self, input_dto: IniciarOperacaoInputDTO) -> OperacaoOutputDTO:
        with self.uow:
            ponto = self.repos.pontos.get_for_update(input_dto.ponto_atendimento_id)
            if ponto is None:
                raise EntityNotFoundError(
                    f"Ponto de atendimento {input_dto.ponto_atendimento_id} não encontrado",
                    entity_type="PontoAtendimento",
                    entity_id=input_dto.ponto_atendimento_id,
                )

            if self.repos.operacoes.get_ativa_por_ponto(ponto.id) is not None:
                raise ConflictError(
                    f"O ponto {ponto.nome} já possui uma operação em andamento",
                    rule="ponto_com_operacao_ativa",
                )

            if input_dto.usuario_id and self.repos.operacoes.get_ativa_por_usuario(input_dto.usuario_id) is not None:
                raise ConflictError(
                    "Usuário já possui uma operação em andamento em outro ponto",
                    rule="usuario_com_operacao_ativa",
                )

            operacao = OperacaoEntity.iniciar(
                usuario_id=input_dto.usuario_id,
                ponto_atendimento_id=ponto.id,
                agora=self.relogio(),
            )
            self.repos.operacoes.save(operacao)

            ponto.sincronizar_com(operacao)
            self.repos.pontos.save(ponto)

            self.uow.publish_event(
                OperacaoIniciadaEvent(
                    aggregate_id=operacao.id,
                    usuario_id=operacao.usuario_id,
                    ponto_atendimento_id=ponto.id,
                )
            )

        logger.info(f"Operação {operacao.id} iniciada por {operacao.usuario_id} no ponto {ponto.id}")
        return OperacaoOutputDTO.from_entity(operacao, ponto)


class PausarOperacaoService(_ComandoDespacho):
    """
    Use Case: Pausar operação.

    Só a partir de "operating" e sem atendimento em serviço. A pausa
    "finished-service" é emitida pelo sistema ao fim de um atendimento e
    fica isenta da checagem de atendimento em serviço.

    Raises:
        ValidationError: Motivo desconhecido
        ConflictError: Operação não operando ou com atendimento em serviço
    """

    descricao = "pausar operação"

    def _executar(self, input_dto: PausarOperacaoInputDTO) -> PausaOutputDTO:
        try:
            motivo = MotivoPausa.from_string(input_dto.motivo)
        except ValueError:
            raise ValidationError(
                f"Motivo de pausa inválido: {input_dto.motivo!r}",
                field="motivo",
            )

        with self.uow:
            operacao = self._operacao_para_update(input_dto.operacao_id)
            agora = self.relogio()
            operacao.pausar(agora)

            if motivo != MotivoPausa.ATENDIMENTO_FINALIZADO:
                if self.repos.atendimentos.get_em_servico_por_operacao(operacao.id) is not None:
                    raise ConflictError(
                        "Finalize ou cancele o atendimento em andamento antes de pausar",
                        rule="pausa_com_atendimento_em_servico",
                    )

            if self.repos.pausas.get_em_andamento(operacao.id) is not None:
                raise ConflictError(
                    "Operação já possui uma pausa em andamento",
                    rule="pausa_ja_em_andamento",
                )

            pausa = PausaEntity.abrir(operacao.id, motivo, agora)
            self.repos.pausas.save(pausa)
            self.repos.operacoes.save(operacao)
            self._sincronizar_ponto(operacao)

            self.uow.publish_event(
                OperacaoPausadaEvent(
                    aggregate_id=operacao.id,
                    pausa_id=pausa.id,
                    motivo=motivo.value,
                )
            )

        logger.info(f"Operação {operacao.id} pausada ({motivo.value})")
        return PausaOutputDTO.from_entity(pausa)


class RetomarOperacaoService(_ComandoDespacho):
    """
    Use Case: Retomar operação pausada.

    Fecha a pausa em andamento com duração em minutos (mínimo 1).

    Raises:
        ConflictError: Operação não está pausada
    """

    descricao = "retomar operação"

    def _executar(self, input_dto: RetomarOperacaoInputDTO) -> OperacaoOutputDTO:
        with self.uow:
            operacao = self._operacao_para_update(input_dto.operacao_id)
            agora = self.relogio()
            operacao.retomar(agora)

            pausa = self.repos.pausas.get_em_andamento(operacao.id)
            duracao = 0
            if pausa is not None:
                duracao = pausa.encerrar(agora)
                self.repos.pausas.save(pausa)
            else:
                logger.warning(f"Operação {operacao.id} estava pausada sem pausa em andamento")

            self.repos.operacoes.save(operacao)
            ponto = self._sincronizar_ponto(operacao)

            self.uow.publish_event(
                OperacaoRetomadaEvent(
                    aggregate_id=operacao.id,
                    pausa_id=pausa.id if pausa else "",
                    duracao_pausa=duracao,
                )
            )

        logger.info(f"Operação {operacao.id} retomada após {duracao} min de pausa")
        return OperacaoOutputDTO.from_entity(operacao, ponto)


class EncerrarOperacaoService(_ComandoDespacho):
    """
    Use Case: Encerrar operação.

    Fecha a pausa em andamento (se houver), finaliza a operação e libera
    o ponto.

    Raises:
        ConflictError: Operação já finalizada ou com atendimento em serviço
    """

    descricao = "encerrar operação"

    def _executar(self, input_dto: EncerrarOperacaoInputDTO) -> OperacaoOutputDTO:
        with self.uow:
            operacao = self._operacao_para_update(input_dto.operacao_id)
            agora = self.relogio()
            operacao.encerrar(agora)

            if self.repos.atendimentos.get_em_servico_por_operacao(operacao.id) is not None:
                raise ConflictError(
                    "Finalize ou cancele o atendimento em andamento antes de encerrar a operação",
                    rule="encerramento_com_atendimento_em_servico",
                )

            pausa = self.repos.pausas.get_em_andamento(operacao.id)
            if pausa is not None:
                pausa.encerrar(agora)
                self.repos.pausas.save(pausa)

            self.repos.operacoes.save(operacao)
            ponto = self._sincronizar_ponto(operacao)

            self.uow.publish_event(
                OperacaoEncerradaEvent(
                    aggregate_id=operacao.id,
                    usuario_id=operacao.usuario_id,
                    ponto_atendimento_id=operacao.ponto_atendimento_id,
                    duracao=operacao.duracao_minutos,
                    pausa_encerrada_id=pausa.id if pausa else None,
                )
            )

        logger.info(f"Operação {operacao.id} encerrada ({operacao.duracao_minutos} min)")
        return OperacaoOutputDTO.from_entity(operacao, ponto)


# =============================================================================
# Atendimentos
# =============================================================================

class ChamarProximoTicketService(_ComandoDespacho):
    """
    Use Case: Chamar o próximo ticket da fila do setor da operação.

    Fluxo:
    1. Travar a operação; exigir "operating" e nenhum atendimento em serviço
    2. Reler com lock os tickets pendentes do setor
    3. Selecionar pela FilaPrioritaria
    4. Ticket → in-attendance e novo atendimento em serviço (mesma transação)

    Fila vazia retorna ``ChamadaResultadoDTO(fila_vazia=True)``.

    Example:
        resultado = service.execute(ChamarProximoInputDTO(operacao_id=op_id))
        if not resultado.fila_vazia:
            print(resultado.ticket.id)
    """

    descricao = "chamar próximo ticket"

    def __init__(
        self,
        repos: RepositoriosDespacho,
        uow: UnitOfWork,
        guarda: Optional[GuardaConsistencia] = None,
        relogio: Relogio = agora_utc,
        fila: Optional[FilaPrioritaria] = None,
    ):
        super().__init__(repos, uow, guarda, relogio)
        self.fila = fila or FilaPrioritaria()

    def _executar(self, input_dto: ChamarProximoInputDTO) -> ChamadaResultadoDTO:
        with self.uow:
            operacao = self._operacao_para_update(input_dto.operacao_id)

            if operacao.status != OperacaoStatus.OPERANDO:
                raise ConflictError(
                    f"A operação precisa estar em andamento para chamar tickets "
                    f"(status atual: '{operacao.status.value}')",
                    rule="chamada_exige_operacao_operando",
                )

            if self.repos.atendimentos.get_em_servico_por_operacao(operacao.id) is not None:
                raise ConflictError(
                    "Já existe um atendimento em andamento nesta operação",
                    rule="operacao_com_atendimento_em_servico",
                )

            ponto = self.repos.pontos.get_by_id(operacao.ponto_atendimento_id)
            if ponto is None:
                raise EntityNotFoundError(
                    f"Ponto de atendimento {operacao.ponto_atendimento_id} não encontrado",
                    entity_type="PontoAtendimento",
                    entity_id=operacao.ponto_atendimento_id,
                )

            candidatos = self.repos.tickets.list_pendentes(ponto.setor_id, for_update=True)
            ticket = self.fila.proximo(
                candidatos,
                setor_id=ponto.setor_id,
                prioridade_preferida=ponto.prioridade_preferida,
            )

            if ticket is None:
                logger.info(f"Fila do setor {ponto.setor_id} vazia para a operação {operacao.id}")
                return ChamadaResultadoDTO.vazia()

            agora = self.relogio()
            ticket.chamar(agora)
            self.repos.tickets.save(ticket)

            atendimento = AtendimentoEntity.abrir(ticket.id, operacao.id, agora)
            self.repos.atendimentos.save(atendimento)

            self.uow.publish_event(
                AtendimentoIniciadoEvent(
                    aggregate_id=atendimento.id,
                    ticket_id=ticket.id,
                    operacao_id=operacao.id,
                    setor_id=ponto.setor_id,
                    ponto_atendimento_id=ponto.id,
                    prioridade=ticket.prioridade.value,
                )
            )

        logger.info(f"Ticket {ticket.id} chamado pela operação {operacao.id} (atendimento {atendimento.id})")
        return ChamadaResultadoDTO.chamado(atendimento, ticket)


class ChamarClienteNovamenteService(_ComandoDespacho):
    """
    Use Case: Chamar o consumidor de novo.

    Registra apenas o instante da chamada e dispara o evento para o
    painel/aviso externo.

    Raises:
        ConflictError: Atendimento não está em serviço
    """

    descricao = "chamar cliente novamente"

    def _executar(self, input_dto: ChamarNovamenteInputDTO) -> AckDTO:
        with self.uow:
            atendimento = self._atendimento_para_update(input_dto.atendimento_id)
            agora = self.relogio()
            atendimento.registrar_nova_chamada(agora)
            self.repos.atendimentos.save(atendimento)

            self.uow.publish_event(
                ClienteChamadoNovamenteEvent(
                    aggregate_id=atendimento.id,
                    ticket_id=atendimento.ticket_id,
                    operacao_id=atendimento.operacao_id,
                    chamado_em=agora.isoformat(),
                )
            )

        logger.info(f"Cliente do atendimento {atendimento.id} chamado novamente")
        return AckDTO(atendimento_id=atendimento.id, chamado_em=agora)


class FinalizarAtendimentoService(_ComandoDespacho):
    """
    Use Case: Finalizar atendimento com uma resolução.

    Os metadados (dados da reclamação, denúncia ou consulta) não são
    interpretados aqui: seguem no AtendimentoFinalizadoEvent para a camada
    de cadastro.

    Raises:
        ValidationError: Tipo de resolução desconhecido ou metadados não-mapa
        ConflictError: Atendimento não está em serviço
    """

    descricao = "finalizar atendimento"

    def _executar(self, input_dto: FinalizarAtendimentoInputDTO) -> AtendimentoOutputDTO:
        try:
            tipo = TipoResolucao.from_string(input_dto.tipo_resolucao)
        except ValueError:
            raise ValidationError(
                f"Tipo de resolução inválido: {input_dto.tipo_resolucao!r}",
                field="tipo_resolucao",
            )

        metadados = input_dto.metadados if input_dto.metadados is not None else {}
        if not isinstance(metadados, Mapping):
            raise ValidationError("Metadados devem ser um objeto", field="metadados")

        with self.uow:
            atendimento = self._atendimento_para_update(input_dto.atendimento_id)
            agora = self.relogio()
            atendimento.finalizar(tipo, agora)

            ticket = self._ticket_para_update(atendimento.ticket_id)
            ticket.finalizar(agora)

            self.repos.atendimentos.save(atendimento)
            self.repos.tickets.save(ticket)

            self.uow.publish_event(
                AtendimentoFinalizadoEvent(
                    aggregate_id=atendimento.id,
                    ticket_id=ticket.id,
                    operacao_id=atendimento.operacao_id,
                    tipo_resolucao=tipo.value,
                    duracao=atendimento.duracao,
                    metadados=dict(metadados),
                )
            )

        logger.info(f"Atendimento {atendimento.id} finalizado ({tipo.value}, {atendimento.duracao} min)")
        return AtendimentoOutputDTO.from_entity(atendimento)


class CancelarAtendimentoService(_ComandoDespacho):
    """
    Use Case: Cancelar atendimento e o ticket correspondente.

    Raises:
        ConflictError: Atendimento não está em serviço
    """

    descricao = "cancelar atendimento"

    def _executar(self, input_dto: CancelarAtendimentoInputDTO) -> AtendimentoOutputDTO:
        with self.uow:
            atendimento = self._atendimento_para_update(input_dto.atendimento_id)
            agora = self.relogio()
            atendimento.cancelar(agora)

            ticket = self._ticket_para_update(atendimento.ticket_id)
            ticket.cancelar(agora)

            self.repos.atendimentos.save(atendimento)
            self.repos.tickets.save(ticket)

            self.uow.publish_event(
                AtendimentoCanceladoEvent(
                    aggregate_id=atendimento.id,
                    ticket_id=ticket.id,
                    operacao_id=atendimento.operacao_id,
                    duracao=atendimento.duracao,
                    origem="atendimento",
                )
            )
            self.uow.publish_event(
                TicketCanceladoEvent(
                    aggregate_id=ticket.id,
                    setor_id=ticket.setor_id,
                    status_anterior=TicketStatus.EM_ATENDIMENTO.value,
                    atendimento_id=atendimento.id,
                )
            )

        logger.info(f"Atendimento {atendimento.id} e ticket {ticket.id} cancelados")
        return AtendimentoOutputDTO.from_entity(atendimento)
