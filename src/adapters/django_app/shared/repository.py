"""
Repository Base - Implementação base de repositórios com Django ORM.

Fornece funcionalidades comuns para todos os repositórios:
- Busca por ID, com ou sem lock de linha (select_for_update)
- Gravação com controle otimista de versão
- Conversão em lote de querysets para entidades

Princípios:
- Repositórios são stateless
- Não contêm lógica de negócio
- Apenas persistência e queries
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar
import logging

from django.db import IntegrityError, models, transaction
from django.db.models import F, QuerySet

from src.core.shared.exceptions import ConcurrencyError

logger = logging.getLogger(__name__)

# Type variables
T = TypeVar("T")  # Entity type
M = TypeVar("M", bound=models.Model)  # Model type


class BaseRepository(ABC, Generic[T, M]):
    """
    Classe base abstrata para repositórios Django.

    Gravação versionada (``versionado = True``):
    - ``entity.versao == 0``: INSERT com versao 1
    - caso contrário: ``UPDATE ... SET versao = versao + 1 WHERE id = ? AND
      versao = entity.versao``; nenhuma linha afetada significa que outra
      transação gravou antes → ConcurrencyError

    Em ambos os casos ``entity.versao`` passa a refletir a versão gravada.

    Type Parameters:
        T: Tipo da entidade de domínio
        M: Tipo do Model Django

    Example:
        class DjangoTicketRepository(BaseRepository[TicketEntity, TicketModel]):
            model_class = TicketModel

            def to_entity(self, model):
                return TicketMapper.to_entity(model)

            def to_fields(self, entity):
                return TicketMapper.to_fields(entity)
    """

    # Classe do model Django (definir na subclasse)
    model_class: Type[M]

    # Campos para select_related (otimização N+1)
    select_related_fields: List[str] = []

    versionado: bool = True

    @abstractmethod
    def to_entity(self, model: M) -> T:
        """Converte Model Django para Entity de domínio."""
        raise NotImplementedError

    @abstractmethod
    def to_fields(self, entity: T) -> Dict[str, Any]:
        """
        Campos do model a gravar (sem ``id`` e sem ``versao``).
        """
        raise NotImplementedError

    def _get_base_queryset(self) -> QuerySet:
        qs = self.model_class.objects.all()

        if self.select_related_fields:
            qs = qs.select_related(*self.select_related_fields)

        return qs

    def _to_entities(self, queryset: Iterable[M]) -> List[T]:
        return [self.to_entity(m) for m in queryset]

    def save(self, entity: T) -> None:
        """
        Persiste entidade (create ou update).

        Raises:
            ConcurrencyError: Versão divergente ou violação de restrição única
        """
        campos = self.to_fields(entity)
        nome = self.model_class.__name__

        if not self.versionado:
            self.model_class.objects.update_or_create(id=entity.id, defaults=campos)
            logger.debug(f"{nome} saved: {entity.id}")
            return

        if entity.versao == 0:
            try:
                with transaction.atomic():
                    self.model_class.objects.create(id=entity.id, versao=1, **campos)
            except IntegrityError as e:
                raise ConcurrencyError(
                    f"{nome} {entity.id} conflita com um registro existente: {e}"
                ) from e

            entity.versao = 1
            logger.debug(f"{nome} created: {entity.id}")
            return

        try:
            with transaction.atomic():
                atualizados = self.model_class.objects.filter(
                    id=entity.id,
                    versao=entity.versao,
                ).update(versao=F("versao") + 1, **campos)
        except IntegrityError as e:
            raise ConcurrencyError(
                f"{nome} {entity.id} conflita com um registro existente: {e}"
            ) from e

        if atualizados == 0:
            raise ConcurrencyError(
                f"{nome} {entity.id} foi alterado por outra transação "
                f"(versão esperada {entity.versao})"
            )

        entity.versao += 1
        logger.debug(f"{nome} updated: {entity.id} (versão {entity.versao})")

    def get_by_id(self, entity_id: str) -> Optional[T]:
        model = self._get_base_queryset().filter(id=entity_id).first()
        return self.to_entity(model) if model is not None else None

    def get_for_update(self, entity_id: str) -> Optional[T]:
        """
        Busca entidade travando a linha até o fim da transação.

        Deve ser chamado dentro de um UnitOfWork.
        """
        model = self.model_class.objects.select_for_update().filter(id=entity_id).first()
        return self.to_entity(model) if model is not None else None

    def exists(self, entity_id: str) -> bool:
        return self.model_class.objects.filter(id=entity_id).exists()

    def list_all(self) -> List[T]:
        return self._to_entities(self._get_base_queryset())

    def count(self) -> int:
        return self.model_class.objects.count()
