"""
Testes da GuardaConsistencia e da hierarquia de exceções.

Coverage:
- Re-tentativa limitada de ConcurrencyError
- Erros não re-tentáveis propagam na primeira tentativa
- Serialização das exceções para a API
"""

import pytest
from unittest.mock import Mock

from src.core.shared.consistency import GuardaConsistencia
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConcurrencyError,
    ConflictError,
    EntityNotFoundError,
    TentativasEsgotadasError,
    ValidationError,
)


class TestGuardaConsistencia:

    def test_executar_retorna_resultado_da_primeira_tentativa(self):
        guarda = GuardaConsistencia(max_tentativas=3, espera_segundos=0)
        operacao = Mock(return_value="ok")

        assert guarda.executar(operacao) == "ok"
        assert operacao.call_count == 1

    def test_executar_repete_apos_conflito(self):
        guarda = GuardaConsistencia(max_tentativas=3, espera_segundos=0)
        operacao = Mock(side_effect=[ConcurrencyError("corrida"), "ok"])

        assert guarda.executar(operacao) == "ok"
        assert operacao.call_count == 2

    def test_executar_esgota_tentativas(self):
        guarda = GuardaConsistencia(max_tentativas=3, espera_segundos=0)
        operacao = Mock(side_effect=ConcurrencyError("corrida"))

        with pytest.raises(TentativasEsgotadasError) as exc_info:
            guarda.executar(operacao, "chamar próximo")

        assert exc_info.value.tentativas == 3
        assert operacao.call_count == 3
        assert isinstance(exc_info.value.__cause__, ConcurrencyError)

    @pytest.mark.parametrize("erro", [
        ValidationError("inválido", field="prioridade"),
        ConflictError("conflito", rule="pausa_ja_em_andamento"),
        EntityNotFoundError("não existe"),
    ])
    def test_executar_nao_repete_erros_de_negocio(self, erro):
        guarda = GuardaConsistencia(max_tentativas=3, espera_segundos=0)
        operacao = Mock(side_effect=erro)

        with pytest.raises(type(erro)):
            guarda.executar(operacao)

        assert operacao.call_count == 1

    def test_executar_espera_cresce_linearmente(self):
        dormir = Mock()
        guarda = GuardaConsistencia(max_tentativas=3, espera_segundos=0.5, dormir=dormir)
        operacao = Mock(side_effect=[ConcurrencyError("a"), ConcurrencyError("b"), "ok"])

        guarda.executar(operacao)

        assert [c.args[0] for c in dormir.call_args_list] == [0.5, 1.0]

    def test_max_tentativas_invalido(self):
        with pytest.raises(ValueError):
            GuardaConsistencia(max_tentativas=0)


class TestExcecoes:

    def test_conflict_error_e_regra_de_negocio(self):
        erro = ConflictError("Ponto ocupado", rule="ponto_com_operacao_ativa")

        assert isinstance(erro, BusinessRuleViolationError)
        assert erro.to_dict() == {
            "error": "CONFLICT",
            "message": "Ponto ocupado",
            "rule": "ponto_com_operacao_ativa",
        }

    def test_validation_error_inclui_campo(self):
        erro = ValidationError("Prioridade inválida", field="prioridade")

        assert erro.code == "VALIDATION_ERROR_PRIORIDADE"
        assert erro.to_dict()["field"] == "prioridade"
        assert str(erro) == "[VALIDATION_ERROR_PRIORIDADE] Prioridade inválida"

    def test_tentativas_esgotadas_e_erro_de_concorrencia(self):
        erro = TentativasEsgotadasError("Tente novamente", tentativas=3)

        assert isinstance(erro, ConcurrencyError)
        assert erro.to_dict()["tentativas"] == 3
