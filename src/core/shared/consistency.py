"""
Guarda de Consistência - re-tentativa limitada de transações concorrentes.

Cada comando do despacho roda inteiro dentro de ``GuardaConsistencia.executar``:
o callable abre o UnitOfWork, relê as linhas com lock, revalida as
pré-condições e grava com checagem de versão. Se o adapter detectar uma
corrida (ConcurrencyError), a transação já foi desfeita e o callable é
executado de novo do zero, contra o estado confirmado mais recente.

Erros de validação, conflito e entidade inexistente não são re-tentados.
"""

import logging
import time
from typing import Callable, TypeVar

from .exceptions import ConcurrencyError, TentativasEsgotadasError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuardaConsistencia:
    """
    Executa uma operação transacional com re-tentativa limitada.

    Attributes:
        max_tentativas: Número máximo de execuções (>= 1)
        espera_segundos: Espera base entre tentativas (cresce linearmente)

    Example:
        guarda = GuardaConsistencia(max_tentativas=3)

        def chamar():
            with uow:
                ...

        resultado = guarda.executar(chamar)
    """

    def __init__(
        self,
        max_tentativas: int = 3,
        espera_segundos: float = 0.05,
        dormir: Callable[[float], None] = time.sleep,
    ):
        if max_tentativas < 1:
            raise ValueError("max_tentativas deve ser pelo menos 1")
        self.max_tentativas = max_tentativas
        self.espera_segundos = espera_segundos
        self._dormir = dormir

    def executar(self, operacao: Callable[[], T], descricao: str = "operação") -> T:
        """
        Executa ``operacao`` re-tentando ConcurrencyError.

        Args:
            operacao: Callable sem argumentos que abre sua própria transação
            descricao: Nome da operação para os logs

        Returns:
            O retorno de ``operacao``

        Raises:
            TentativasEsgotadasError: Se todas as tentativas colidirem
        """
        for tentativa in range(1, self.max_tentativas + 1):
            try:
                return operacao()
            except TentativasEsgotadasError:
                raise
            except ConcurrencyError as e:
                if tentativa == self.max_tentativas:
                    logger.error(
                        f"{descricao}: conflito de concorrência após "
                        f"{tentativa} tentativas ({e.message})"
                    )
                    raise TentativasEsgotadasError(
                        "Outra operação alterou estes dados ao mesmo tempo. "
                        "Tente novamente.",
                        tentativas=tentativa,
                    ) from e

                logger.warning(
                    f"{descricao}: conflito de concorrência na tentativa "
                    f"{tentativa}/{self.max_tentativas}, repetindo ({e.message})"
                )
                if self.espera_segundos > 0:
                    self._dormir(self.espera_segundos * tentativa)

        # max_tentativas >= 1 garante retorno ou exceção no laço
        raise AssertionError("inalcançável")
