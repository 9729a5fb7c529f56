"""
Exceções de Domínio do Motor de Despacho de Atendimentos.

Exceções tipadas que atravessam as camadas (core → adapters → API),
permitindo que cada adapter traduza o erro para o seu protocolo
(status HTTP, retry de task, mensagem ao usuário).

Hierarquia:
    DomainException (base)
    ├── ValidationError (entrada malformada ou referência inexistente)
    ├── EntityNotFoundError (id referenciado não existe)
    ├── BusinessRuleViolationError (regra de negócio violada)
    │   └── ConflictError (pré-condição de estado violada)
    └── ConcurrencyError (corrida detectada na escrita, re-tentável)
        └── TentativasEsgotadasError (re-tentativas esgotadas)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Example:
        try:
            service.execute(input_dto)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Cobre dados malformados e referências a setor/cliente inexistentes
    na criação de tickets. Nunca é re-tentado automaticamente.

    Example:
        if prioridade not in (0, 1):
            raise ValidationError("Prioridade inválida", field="prioridade")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Example:
        operacao = repo.get_by_id(operacao_id)
        if not operacao:
            raise EntityNotFoundError(
                f"Operação {operacao_id} não encontrada",
                entity_type="Operacao",
                entity_id=operacao_id,
            )
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Attributes:
        rule: Identificador da regra violada (ex: "pausa_com_atendimento_ativo")
    """

    def __init__(self, message: str, rule: str = None, code: str = "BUSINESS_RULE_VIOLATION"):
        self.rule = rule
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class ConflictError(BusinessRuleViolationError):
    """
    Pré-condição sobre o estado atual foi violada.

    Exemplos: operação ativa duplicada, pausa com atendimento em
    serviço, chamada em operação não operante, resolução de atendimento
    que não está em serviço. Apresentada ao usuário, nunca re-tentada.

    Example:
        if operacao.status != OperacaoStatus.OPERANDO:
            raise ConflictError(
                "Operação não está operando",
                rule="operacao_nao_operante",
            )
    """

    def __init__(self, message: str, rule: str = None):
        super().__init__(message, rule=rule, code="CONFLICT")


class ConcurrencyError(DomainException):
    """
    Erro de concorrência/conflito de versão.

    Lançada quando a linha mudou entre a leitura e a escrita, quando uma
    restrição única do banco é violada por um escritor concorrente ou
    quando o banco aborta a transação por serialização. É re-tentável:
    a GuardaConsistencia repete a operação inteira.

    Example:
        if armazenado.versao != entity.versao:
            raise ConcurrencyError("Ticket foi modificado por outro processo")
    """

    def __init__(self, message: str, code: str = "CONCURRENCY_ERROR"):
        super().__init__(message, code)


class TentativasEsgotadasError(ConcurrencyError):
    """
    Re-tentativas de uma operação concorrente foram esgotadas.

    É a falha genérica "tente novamente" exposta ao chamador.
    """

    def __init__(self, message: str, tentativas: int = 0):
        self.tentativas = tentativas
        super().__init__(message, "CONCURRENCY_RETRIES_EXHAUSTED")

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["tentativas"] = self.tentativas
        return result


# Nomes usados pelos contratos externos da API
NotFoundError = EntityNotFoundError
ConcurrencyConflict = ConcurrencyError
