"""
Testes Unitários para Use Cases de comando do Despacho.

Estratégia de Teste:
- Repositórios e Unit of Work em memória (rollback por snapshot)
- Relógio fixo, avançado manualmente para medir durações
- Verifica estado persistido e eventos publicados após commit

Coverage:
- CriarTicketService / CancelarTicketService
- Iniciar / Pausar / Retomar / Encerrar operação
- ChamarProximoTicketService / ChamarClienteNovamenteService
- FinalizarAtendimentoService / CancelarAtendimentoService
"""

from types import SimpleNamespace

import pytest

from src.core.despacho.dtos import (
    CancelarAtendimentoInputDTO,
    CancelarTicketInputDTO,
    ChamarNovamenteInputDTO,
    ChamarProximoInputDTO,
    CriarTicketInputDTO,
    EncerrarOperacaoInputDTO,
    FinalizarAtendimentoInputDTO,
    IniciarOperacaoInputDTO,
    PausarOperacaoInputDTO,
    RetomarOperacaoInputDTO,
)
from src.core.despacho.entities import (
    AtendimentoStatus,
    DisponibilidadePonto,
    OperacaoStatus,
    PausaStatus,
    TicketStatus,
)
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
from src.core.shared.consistency import GuardaConsistencia
from src.core.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)


@pytest.fixture
def despacho(repos, uow, relogio):
    """Todos os comandos montados sobre a mesma persistência em memória."""
    guarda = GuardaConsistencia(max_tentativas=3, espera_segundos=0)
    args = dict(repos=repos, uow=uow, guarda=guarda, relogio=relogio)

    return SimpleNamespace(
        criar_ticket=CriarTicketService(**args),
        cancelar_ticket=CancelarTicketService(**args),
        iniciar=IniciarOperacaoService(**args),
        pausar=PausarOperacaoService(**args),
        retomar=RetomarOperacaoService(**args),
        encerrar=EncerrarOperacaoService(**args),
        chamar_proximo=ChamarProximoTicketService(**args),
        chamar_novamente=ChamarClienteNovamenteService(**args),
        finalizar=FinalizarAtendimentoService(**args),
        cancelar_atendimento=CancelarAtendimentoService(**args),
    )


@pytest.fixture
def operacao(despacho, cadastros):
    """Operação do usuário u1 no Guichê 1, operando."""
    return despacho.iniciar.execute(
        IniciarOperacaoInputDTO(usuario_id="u1", ponto_atendimento_id=cadastros["guiche1"].id)
    )


def _criar_ticket(despacho, cadastros, cliente="ana", prioridade=0):
    return despacho.criar_ticket.execute(
        CriarTicketInputDTO(
            cliente_id=cadastros[cliente].id,
            setor_id=cadastros["setor"].id,
            prioridade=prioridade,
        )
    )


def _tipos(publisher):
    return [e.event_type for e in publisher.published_events]


# =============================================================================
# Tickets
# =============================================================================

class TestCriarTicketService:

    def test_criar_ticket_pendente(self, despacho, cadastros, repos, publisher):
        output = _criar_ticket(despacho, cadastros, prioridade=1)

        assert output.status == "pending"
        assert output.prioridade == 1
        assert repos.tickets.get_by_id(output.id).versao == 1
        assert _tipos(publisher) == ["TicketCriadoEvent"]

    def test_prioridade_como_texto(self, despacho, cadastros):
        output = despacho.criar_ticket.execute(
            CriarTicketInputDTO(cadastros["ana"].id, cadastros["setor"].id, prioridade="1")
        )

        assert output.prioridade == 1

    @pytest.mark.parametrize("prioridade", [2, -1, "urgente", None])
    def test_prioridade_invalida(self, despacho, cadastros, repos, prioridade):
        with pytest.raises(ValidationError) as exc_info:
            _criar_ticket(despacho, cadastros, prioridade=prioridade)

        assert exc_info.value.field == "prioridade"
        assert repos.tickets.count() == 0

    def test_cliente_inexistente(self, despacho, cadastros):
        with pytest.raises(ValidationError) as exc_info:
            despacho.criar_ticket.execute(
                CriarTicketInputDTO(cliente_id="nao-existe", setor_id=cadastros["setor"].id)
            )

        assert exc_info.value.field == "cliente_id"

    def test_setor_inexistente(self, despacho, cadastros, publisher):
        with pytest.raises(ValidationError) as exc_info:
            despacho.criar_ticket.execute(
                CriarTicketInputDTO(cliente_id=cadastros["ana"].id, setor_id="nao-existe")
            )

        assert exc_info.value.field == "setor_id"
        assert publisher.published_events == []

    def test_cliente_idoso_recebe_prioridade_legal(self, despacho, cadastros):
        output = _criar_ticket(despacho, cadastros, cliente="idoso", prioridade=0)

        assert output.prioridade == 1

    def test_prioridade_legal_desligada(self, repos, uow, relogio, cadastros):
        service = CriarTicketService(repos, uow, relogio=relogio, idade_prioridade_legal=None)

        output = service.execute(
            CriarTicketInputDTO(cadastros["idoso"].id, cadastros["setor"].id, prioridade=0)
        )

        assert output.prioridade == 0


class TestCancelarTicketService:

    def test_cancelar_ticket_pendente(self, despacho, cadastros, repos):
        ticket = _criar_ticket(despacho, cadastros)

        output = despacho.cancelar_ticket.execute(CancelarTicketInputDTO(ticket.id))

        assert output.status == "canceled"
        assert repos.tickets.get_by_id(ticket.id).status == TicketStatus.CANCELADO

    def test_cancelar_ticket_inexistente(self, despacho):
        with pytest.raises(EntityNotFoundError):
            despacho.cancelar_ticket.execute(CancelarTicketInputDTO("nao-existe"))

    def test_cancelar_ticket_cancelado_falha(self, despacho, cadastros):
        ticket = _criar_ticket(despacho, cadastros)
        despacho.cancelar_ticket.execute(CancelarTicketInputDTO(ticket.id))

        with pytest.raises(ConflictError) as exc_info:
            despacho.cancelar_ticket.execute(CancelarTicketInputDTO(ticket.id))

        assert exc_info.value.rule == "transicao_ticket_invalida"

    def test_cancelar_ticket_finalizado_falha(self, despacho, cadastros, operacao, repos, publisher):
        ticket = _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        despacho.finalizar.execute(FinalizarAtendimentoInputDTO(chamada.atendimento.id, "consultation"))
        atendimento_antes = repos.atendimentos.get_by_id(chamada.atendimento.id)
        publisher.clear()

        with pytest.raises(ConflictError) as exc_info:
            despacho.cancelar_ticket.execute(CancelarTicketInputDTO(ticket.id))

        assert exc_info.value.rule == "transicao_ticket_invalida"
        assert repos.tickets.get_by_id(ticket.id).status == TicketStatus.FINALIZADO
        atendimento = repos.atendimentos.get_by_id(chamada.atendimento.id)
        assert atendimento.status == AtendimentoStatus.FINALIZADO
        assert atendimento.versao == atendimento_antes.versao
        assert publisher.published_events == []

    def test_em_atendimento_sem_atendimento_aberto_nao_re_tenta(
        self, despacho, cadastros, operacao, repos, publisher
    ):
        ticket = _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        # Estado inconsistente: atendimento fechado, ticket ainda em atendimento
        atendimento = repos.atendimentos.get_by_id(chamada.atendimento.id)
        atendimento.status = AtendimentoStatus.FINALIZADO
        repos.atendimentos.save(atendimento)
        publisher.clear()

        with pytest.raises(ConflictError) as exc_info:
            despacho.cancelar_ticket.execute(CancelarTicketInputDTO(ticket.id))

        assert exc_info.value.rule == "ticket_sem_atendimento_aberto"
        assert repos.tickets.get_by_id(ticket.id).status == TicketStatus.EM_ATENDIMENTO
        assert publisher.published_events == []

    def test_cancelar_em_atendimento_cancela_atendimento(
        self, despacho, cadastros, operacao, repos, relogio, publisher
    ):
        ticket1 = _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        relogio.avancar(minutos=3)

        despacho.cancelar_ticket.execute(CancelarTicketInputDTO(ticket1.id))

        atendimento = repos.atendimentos.get_by_id(chamada.atendimento.id)
        assert atendimento.status == AtendimentoStatus.CANCELADO
        assert atendimento.duracao == 3
        assert repos.tickets.get_by_id(ticket1.id).status == TicketStatus.CANCELADO

        cancelado = publisher.get_events_by_type("TicketCanceladoEvent")[-1]
        assert cancelado.status_anterior == "in-attendance"
        assert cancelado.atendimento_id == atendimento.id

        # A operação pode chamar de novo imediatamente
        ticket2 = _criar_ticket(despacho, cadastros, cliente="bruno")
        nova = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        assert nova.ticket.id == ticket2.id


# =============================================================================
# Operações
# =============================================================================

class TestIniciarOperacaoService:

    def test_iniciar_operacao(self, despacho, cadastros, repos, publisher):
        output = despacho.iniciar.execute(
            IniciarOperacaoInputDTO("u1", cadastros["guiche1"].id)
        )

        assert output.status == "operating"
        assert output.disponibilidade_ponto == "operating"
        ponto = repos.pontos.get_by_id(cadastros["guiche1"].id)
        assert ponto.disponibilidade == DisponibilidadePonto.OPERANDO
        assert _tipos(publisher) == ["OperacaoIniciadaEvent"]

    def test_ponto_inexistente(self, despacho):
        with pytest.raises(EntityNotFoundError):
            despacho.iniciar.execute(IniciarOperacaoInputDTO("u1", "nao-existe"))

    def test_ponto_ocupado(self, despacho, cadastros, operacao):
        with pytest.raises(ConflictError) as exc_info:
            despacho.iniciar.execute(IniciarOperacaoInputDTO("u2", cadastros["guiche1"].id))

        assert exc_info.value.rule == "ponto_com_operacao_ativa"

    def test_usuario_ja_operando_em_outro_ponto(self, despacho, cadastros, operacao, repos):
        with pytest.raises(ConflictError) as exc_info:
            despacho.iniciar.execute(IniciarOperacaoInputDTO("u1", cadastros["guiche2"].id))

        assert exc_info.value.rule == "usuario_com_operacao_ativa"
        assert repos.pontos.get_by_id(cadastros["guiche2"].id).disponibilidade == DisponibilidadePonto.LIVRE

    def test_ponto_liberado_apos_encerramento(self, despacho, cadastros, operacao):
        despacho.encerrar.execute(EncerrarOperacaoInputDTO(operacao.id))

        output = despacho.iniciar.execute(IniciarOperacaoInputDTO("u2", cadastros["guiche1"].id))

        assert output.status == "operating"


class TestPausarRetomarOperacao:

    def test_pausar_e_retomar(self, despacho, cadastros, operacao, repos, relogio, publisher):
        pausa = despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "lunch"))

        assert pausa.status == "in-progress"
        assert pausa.motivo == "lunch"
        assert repos.pontos.get_by_id(cadastros["guiche1"].id).disponibilidade == DisponibilidadePonto.PAUSADO

        relogio.avancar(minutos=7, segundos=40)
        output = despacho.retomar.execute(RetomarOperacaoInputDTO(operacao.id))

        assert output.status == "operating"
        assert output.disponibilidade_ponto == "operating"
        fechada = repos.pausas.get_by_id(pausa.id)
        assert fechada.status == PausaStatus.FINALIZADA
        assert fechada.duracao == 8
        assert publisher.get_events_by_type("OperacaoRetomadaEvent")[0].duracao_pausa == 8

    def test_motivo_pelo_nome(self, despacho, operacao):
        pausa = despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "REUNIAO"))

        assert pausa.motivo == "meeting"

    def test_motivo_invalido(self, despacho, operacao):
        with pytest.raises(ValidationError) as exc_info:
            despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "ferias"))

        assert exc_info.value.field == "motivo"

    def test_pausar_operacao_pausada(self, despacho, operacao, repos):
        despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "break"))

        with pytest.raises(ConflictError) as exc_info:
            despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "break"))

        assert exc_info.value.rule == "pausa_exige_operacao_operando"
        assert len(repos.pausas.list_by_operacoes([operacao.id])) == 1

    def test_retomar_operacao_operando(self, despacho, operacao):
        with pytest.raises(ConflictError) as exc_info:
            despacho.retomar.execute(RetomarOperacaoInputDTO(operacao.id))

        assert exc_info.value.rule == "retomada_exige_operacao_pausada"

    def test_operacao_inexistente(self, despacho):
        with pytest.raises(EntityNotFoundError):
            despacho.pausar.execute(PausarOperacaoInputDTO("nao-existe", "lunch"))

    def test_pausa_bloqueada_com_atendimento_em_servico(self, despacho, cadastros, operacao, repos):
        _criar_ticket(despacho, cadastros)
        despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        with pytest.raises(ConflictError) as exc_info:
            despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "lunch"))

        assert exc_info.value.rule == "pausa_com_atendimento_em_servico"
        assert repos.operacoes.get_by_id(operacao.id).status == OperacaoStatus.OPERANDO
        assert repos.pausas.count() == 0

    def test_pausa_sistemica_ignora_atendimento_em_servico(self, despacho, cadastros, operacao):
        _criar_ticket(despacho, cadastros)
        despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        pausa = despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "finished-service"))

        assert pausa.motivo == "finished-service"


class TestEncerrarOperacaoService:

    def test_encerrar_fecha_pausa_e_libera_ponto(self, despacho, cadastros, operacao, repos, relogio):
        pausa = despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "meeting"))
        relogio.avancar(minutos=30)

        output = despacho.encerrar.execute(EncerrarOperacaoInputDTO(operacao.id))

        assert output.status == "finished"
        assert output.duracao == 30
        assert output.disponibilidade_ponto == "free"
        assert repos.pausas.get_by_id(pausa.id).duracao == 30
        assert repos.pontos.get_by_id(cadastros["guiche1"].id).disponibilidade == DisponibilidadePonto.LIVRE

    def test_encerrar_com_atendimento_em_servico(self, despacho, cadastros, operacao):
        _criar_ticket(despacho, cadastros)
        despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        with pytest.raises(ConflictError) as exc_info:
            despacho.encerrar.execute(EncerrarOperacaoInputDTO(operacao.id))

        assert exc_info.value.rule == "encerramento_com_atendimento_em_servico"

    def test_encerrar_duas_vezes(self, despacho, operacao):
        despacho.encerrar.execute(EncerrarOperacaoInputDTO(operacao.id))

        with pytest.raises(ConflictError) as exc_info:
            despacho.encerrar.execute(EncerrarOperacaoInputDTO(operacao.id))

        assert exc_info.value.rule == "operacao_ja_finalizada"


# =============================================================================
# Atendimentos
# =============================================================================

class TestChamarProximoTicketService:

    def test_cenario_chamada_basica(self, despacho, cadastros, repos, publisher):
        ticket1 = _criar_ticket(despacho, cadastros)
        operacao = despacho.iniciar.execute(IniciarOperacaoInputDTO("u1", cadastros["guiche1"].id))
        assert operacao.disponibilidade_ponto == "operating"

        resultado = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        assert not resultado.fila_vazia
        assert resultado.ticket.id == ticket1.id
        assert resultado.ticket.status == "in-attendance"
        assert resultado.atendimento.status == "in_service"
        assert repos.tickets.get_by_id(ticket1.id).status == TicketStatus.EM_ATENDIMENTO
        assert _tipos(publisher)[-1] == "AtendimentoIniciadoEvent"

    def test_prioritario_passa_na_frente(self, despacho, cadastros, operacao, relogio):
        _criar_ticket(despacho, cadastros, cliente="ana", prioridade=0)
        relogio.avancar(minutos=5)
        ticket2 = _criar_ticket(despacho, cadastros, cliente="bruno", prioridade=1)

        resultado = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        assert resultado.ticket.id == ticket2.id

    def test_fila_vazia(self, despacho, operacao, repos, publisher):
        publisher.clear()

        resultado = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        assert resultado.fila_vazia
        assert resultado.to_dict() == {"fila_vazia": True}
        assert repos.atendimentos.count() == 0
        assert publisher.published_events == []

    def test_operacao_pausada_nao_chama(self, despacho, cadastros, operacao, repos):
        ticket = _criar_ticket(despacho, cadastros)
        despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "lunch"))

        with pytest.raises(ConflictError) as exc_info:
            despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        assert exc_info.value.rule == "chamada_exige_operacao_operando"
        assert repos.tickets.get_by_id(ticket.id).status == TicketStatus.PENDENTE

    def test_um_atendimento_por_operacao(self, despacho, cadastros, operacao, repos, relogio):
        _criar_ticket(despacho, cadastros, cliente="ana")
        relogio.avancar(segundos=1)
        ticket2 = _criar_ticket(despacho, cadastros, cliente="bruno")
        despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        with pytest.raises(ConflictError) as exc_info:
            despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        assert exc_info.value.rule == "operacao_com_atendimento_em_servico"
        assert repos.tickets.get_by_id(ticket2.id).status == TicketStatus.PENDENTE

    def test_operacao_inexistente(self, despacho):
        with pytest.raises(EntityNotFoundError):
            despacho.chamar_proximo.execute(ChamarProximoInputDTO("nao-existe"))


class TestChamarClienteNovamenteService:

    def test_registra_nova_chamada(self, despacho, cadastros, operacao, repos, relogio, publisher):
        _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        momento = relogio.avancar(minutos=1)

        ack = despacho.chamar_novamente.execute(ChamarNovamenteInputDTO(chamada.atendimento.id))

        assert ack.to_dict()["ok"] is True
        assert ack.chamado_em == momento
        assert repos.atendimentos.get_by_id(chamada.atendimento.id).chamado_novamente_em == momento
        assert _tipos(publisher)[-1] == "ClienteChamadoNovamenteEvent"

    def test_atendimento_encerrado(self, despacho, cadastros, operacao):
        _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        despacho.cancelar_atendimento.execute(CancelarAtendimentoInputDTO(chamada.atendimento.id))

        with pytest.raises(ConflictError) as exc_info:
            despacho.chamar_novamente.execute(ChamarNovamenteInputDTO(chamada.atendimento.id))

        assert exc_info.value.rule == "atendimento_nao_em_servico"


class TestFinalizarAtendimentoService:

    def test_finalizar_atendimento(self, despacho, cadastros, operacao, repos, relogio, publisher):
        _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        relogio.avancar(minutos=12)

        output = despacho.finalizar.execute(
            FinalizarAtendimentoInputDTO(
                chamada.atendimento.id,
                "complaint",
                {"empresa": "ACME", "descricao": "Cobrança indevida"},
            )
        )

        assert output.status == "finished"
        assert output.tipo_resolucao == "complaint"
        assert output.duracao == 12
        assert repos.tickets.get_by_id(chamada.ticket.id).status == TicketStatus.FINALIZADO

        evento = publisher.get_events_by_type("AtendimentoFinalizadoEvent")[0]
        assert evento.to_dict()["data"]["metadados"] == {"empresa": "ACME", "descricao": "Cobrança indevida"}

    def test_finalizar_duas_vezes_nao_altera_estado(self, despacho, cadastros, operacao, repos):
        _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        despacho.finalizar.execute(FinalizarAtendimentoInputDTO(chamada.atendimento.id, "consultation"))
        antes = repos.atendimentos.get_by_id(chamada.atendimento.id)

        with pytest.raises(ConflictError) as exc_info:
            despacho.finalizar.execute(FinalizarAtendimentoInputDTO(chamada.atendimento.id, "complaint"))

        assert exc_info.value.rule == "atendimento_nao_em_servico"
        depois = repos.atendimentos.get_by_id(chamada.atendimento.id)
        assert depois.tipo_resolucao == antes.tipo_resolucao
        assert depois.versao == antes.versao

    def test_tipo_resolucao_invalido(self, despacho, cadastros, operacao):
        _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        with pytest.raises(ValidationError) as exc_info:
            despacho.finalizar.execute(FinalizarAtendimentoInputDTO(chamada.atendimento.id, "elogio"))

        assert exc_info.value.field == "tipo_resolucao"

    def test_metadados_nao_mapa(self, despacho, cadastros, operacao):
        _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        with pytest.raises(ValidationError) as exc_info:
            despacho.finalizar.execute(
                FinalizarAtendimentoInputDTO(chamada.atendimento.id, "consultation", ["x"])
            )

        assert exc_info.value.field == "metadados"

    def test_cenario_pausa_apos_finalizar(self, despacho, cadastros, operacao):
        _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))

        with pytest.raises(ConflictError):
            despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "lunch"))

        despacho.finalizar.execute(
            FinalizarAtendimentoInputDTO(chamada.atendimento.id, "consultation", {"assunto": "Boleto"})
        )
        pausa = despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "lunch"))

        assert pausa.status == "in-progress"


class TestCancelarAtendimentoService:

    def test_cancelar_atendimento_cancela_ticket(self, despacho, cadastros, operacao, repos, publisher):
        _criar_ticket(despacho, cadastros)
        chamada = despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        publisher.clear()

        output = despacho.cancelar_atendimento.execute(CancelarAtendimentoInputDTO(chamada.atendimento.id))

        assert output.status == "cancelled"
        assert output.tipo_resolucao is None
        assert repos.tickets.get_by_id(chamada.ticket.id).status == TicketStatus.CANCELADO
        assert _tipos(publisher) == ["AtendimentoCanceladoEvent", "TicketCanceladoEvent"]

    def test_atendimento_inexistente(self, despacho):
        with pytest.raises(EntityNotFoundError):
            despacho.cancelar_atendimento.execute(CancelarAtendimentoInputDTO("nao-existe"))


class TestRollback:

    def test_conflito_desfaz_transacao(self, despacho, cadastros, operacao, repos, uow):
        _criar_ticket(despacho, cadastros)
        despacho.chamar_proximo.execute(ChamarProximoInputDTO(operacao.id))
        versao_antes = repos.operacoes.get_by_id(operacao.id).versao

        with pytest.raises(ConflictError):
            despacho.pausar.execute(PausarOperacaoInputDTO(operacao.id, "lunch"))

        assert uow.rolled_back
        assert repos.operacoes.get_by_id(operacao.id).versao == versao_antes
