"""
Django Models para o domínio de Despacho.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/despacho/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities e Use Cases do Core
- Models são mapeados para/de Entities via Mappers

Relacionamentos (todas as FKs em cascata):
- SetorModel → PontoAtendimentoModel, TicketModel
- PontoAtendimentoModel → OperacaoModel
- OperacaoModel → PausaModel, AtendimentoModel
- TicketModel → AtendimentoModel (unidirecional)

As restrições "no máximo um" do despacho são garantidas também no
banco por UniqueConstraints parciais.
"""

from django.db import models
from django.db.models import Q
from django.utils import timezone


class DisponibilidadeChoices(models.TextChoices):
    """Espelha DisponibilidadePonto do Core."""
    LIVRE = 'free', 'Livre'
    OPERANDO = 'operating', 'Operando'
    PAUSADO = 'paused', 'Pausado'


class PrioridadeChoices(models.IntegerChoices):
    """Espelha TicketPriority do Core."""
    NORMAL = 0, 'Normal'
    PRIORITARIO = 1, 'Prioritário'


class TicketStatusChoices(models.TextChoices):
    """Espelha TicketStatus do Core."""
    PENDENTE = 'pending', 'Pendente'
    EM_ATENDIMENTO = 'in-attendance', 'Em atendimento'
    FINALIZADO = 'finished', 'Finalizado'
    CANCELADO = 'canceled', 'Cancelado'


class OperacaoStatusChoices(models.TextChoices):
    """Espelha OperacaoStatus do Core."""
    OPERANDO = 'operating', 'Operando'
    PAUSADA = 'paused', 'Pausada'
    FINALIZADA = 'finished', 'Finalizada'


class MotivoPausaChoices(models.TextChoices):
    """Espelha MotivoPausa do Core."""
    ALMOCO = 'lunch', 'Almoço'
    INTERVALO = 'break', 'Intervalo'
    REUNIAO = 'meeting', 'Reunião'
    PESSOAL = 'personal', 'Pessoal'
    TECNICO = 'technical', 'Técnico'
    ATENDIMENTO_FINALIZADO = 'finished-service', 'Atendimento Finalizado'
    OUTRO = 'other', 'Outro'


class PausaStatusChoices(models.TextChoices):
    EM_ANDAMENTO = 'in-progress', 'Em andamento'
    FINALIZADA = 'finished', 'Finalizada'
    CANCELADA = 'cancelled', 'Cancelada'


class AtendimentoStatusChoices(models.TextChoices):
    EM_SERVICO = 'in_service', 'Em serviço'
    FINALIZADO = 'finished', 'Finalizado'
    CANCELADO = 'cancelled', 'Cancelado'


class TipoResolucaoChoices(models.TextChoices):
    RECLAMACAO = 'complaint', 'Reclamação'
    DENUNCIA = 'denunciation', 'Denúncia'
    CONSULTA = 'consultation', 'Consulta'


OPERACAO_ATIVA = Q(status__in=['operating', 'paused'])


class SetorModel(models.Model):
    """Departamento que recebe tickets."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    nome = models.CharField(max_length=120, help_text="Nome do setor")

    class Meta:
        db_table = 'setores'
        verbose_name = 'Setor'
        verbose_name_plural = 'Setores'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class PontoAtendimentoModel(models.Model):
    """
    Guichê de atendimento.

    Fields:
        disponibilidade: Projeção da operação corrente (gravada pelos use cases)
        prioridade_preferida: Faixa de prioridade preferida do ponto
        versao: Controle otimista de concorrência
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    setor = models.ForeignKey(
        SetorModel,
        on_delete=models.CASCADE,
        related_name='pontos',
    )

    nome = models.CharField(max_length=120)

    disponibilidade = models.CharField(
        max_length=20,
        choices=DisponibilidadeChoices.choices,
        default=DisponibilidadeChoices.LIVRE,
        db_index=True,
    )

    prioridade_preferida = models.SmallIntegerField(
        choices=PrioridadeChoices.choices,
        default=PrioridadeChoices.NORMAL,
    )

    versao = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'pontos_atendimento'
        verbose_name = 'Ponto de Atendimento'
        verbose_name_plural = 'Pontos de Atendimento'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class ClienteModel(models.Model):
    """Consumidor. CPF único (validação/formatação fora do despacho)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    nome = models.CharField(max_length=200)

    cpf = models.CharField(
        max_length=14,
        unique=True,
        null=True,
        blank=True,
    )

    data_nascimento = models.DateField(null=True, blank=True)

    class Meta:
        db_table = 'clientes'
        verbose_name = 'Cliente'
        verbose_name_plural = 'Clientes'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Fields:
        prioridade: 0 (normal) ou 1 (prioritário)
        status: pending, in-attendance, finished, canceled
        criado_em: Ordem FIFO da fila
        versao: Controle otimista de concorrência
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    cliente = models.ForeignKey(
        ClienteModel,
        on_delete=models.CASCADE,
        related_name='tickets',
    )

    setor = models.ForeignKey(
        SetorModel,
        on_delete=models.CASCADE,
        related_name='tickets',
    )

    prioridade = models.SmallIntegerField(
        choices=PrioridadeChoices.choices,
        default=PrioridadeChoices.NORMAL,
    )

    status = models.CharField(
        max_length=20,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.PENDENTE,
        db_index=True,
    )

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)
    versao = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-prioridade', 'criado_em', 'id']
        indexes = [
            # Fila: pendentes do setor por prioridade + FIFO
            models.Index(fields=['setor', 'status', '-prioridade', 'criado_em'], name='tickets_fila_idx'),
        ]

    def __str__(self):
        return f"[{self.id[:8]}] {self.status}"


class OperacaoModel(models.Model):
    """
    Sessão de trabalho de um profissional em um ponto.

    Constraints:
    - operacao_ativa_por_ponto: uma operação operating/paused por ponto
    - operacao_ativa_por_usuario: uma operação operating/paused por usuário
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    usuario_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="ID do profissional (autenticação é externa)",
    )

    ponto_atendimento = models.ForeignKey(
        PontoAtendimentoModel,
        on_delete=models.CASCADE,
        related_name='operacoes',
    )

    status = models.CharField(
        max_length=20,
        choices=OperacaoStatusChoices.choices,
        default=OperacaoStatusChoices.OPERANDO,
        db_index=True,
    )

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)
    versao = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'operacoes'
        verbose_name = 'Operação'
        verbose_name_plural = 'Operações'
        ordering = ['-criado_em']
        constraints = [
            models.UniqueConstraint(
                fields=['ponto_atendimento'],
                condition=OPERACAO_ATIVA,
                name='operacao_ativa_por_ponto',
            ),
            models.UniqueConstraint(
                fields=['usuario_id'],
                condition=OPERACAO_ATIVA,
                name='operacao_ativa_por_usuario',
            ),
        ]

    def __str__(self):
        return f"{self.usuario_id} @ {self.ponto_atendimento_id} ({self.status})"


class PausaModel(models.Model):
    """Pausa dentro de uma operação. Uma em andamento por operação."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    operacao = models.ForeignKey(
        OperacaoModel,
        on_delete=models.CASCADE,
        related_name='pausas',
    )

    motivo = models.CharField(max_length=20, choices=MotivoPausaChoices.choices)

    status = models.CharField(
        max_length=20,
        choices=PausaStatusChoices.choices,
        default=PausaStatusChoices.EM_ANDAMENTO,
    )

    duracao = models.PositiveIntegerField(null=True, blank=True, help_text="Minutos")
    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)
    versao = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'pausas'
        verbose_name = 'Pausa'
        verbose_name_plural = 'Pausas'
        ordering = ['-criado_em']
        constraints = [
            models.UniqueConstraint(
                fields=['operacao'],
                condition=Q(status='in-progress'),
                name='pausa_em_andamento_por_operacao',
            ),
        ]

    def __str__(self):
        return f"{self.motivo} ({self.status})"


class AtendimentoModel(models.Model):
    """
    Atendimento: liga um ticket a uma operação.

    Constraints:
    - atendimento_em_servico_por_operacao
    - atendimento_em_servico_por_ticket
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='atendimentos',
    )

    operacao = models.ForeignKey(
        OperacaoModel,
        on_delete=models.CASCADE,
        related_name='atendimentos',
    )

    status = models.CharField(
        max_length=20,
        choices=AtendimentoStatusChoices.choices,
        default=AtendimentoStatusChoices.EM_SERVICO,
    )

    tipo_resolucao = models.CharField(
        max_length=20,
        choices=TipoResolucaoChoices.choices,
        null=True,
        blank=True,
    )

    duracao = models.PositiveIntegerField(null=True, blank=True, help_text="Minutos")
    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)
    chamado_novamente_em = models.DateTimeField(null=True, blank=True)
    versao = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'atendimentos'
        verbose_name = 'Atendimento'
        verbose_name_plural = 'Atendimentos'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['ticket', 'status'], name='atendimentos_ticket_idx'),
            models.Index(fields=['operacao', 'status'], name='atendimentos_operacao_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['operacao'],
                condition=Q(status='in_service'),
                name='atendimento_em_servico_por_operacao',
            ),
            models.UniqueConstraint(
                fields=['ticket'],
                condition=Q(status='in_service'),
                name='atendimento_em_servico_por_ticket',
            ),
        ]

    def __str__(self):
        return f"[{self.id[:8]}] {self.status}"


class DomainEventModel(models.Model):
    """
    Event Store para Domain Events do despacho.

    Persistido na mesma transação das entidades (DjangoUnitOfWork),
    para auditoria e reprocessamento.
    """

    event_id = models.CharField(max_length=36, primary_key=True)
    event_type = models.CharField(max_length=100, db_index=True)
    aggregate_type = models.CharField(max_length=100, db_index=True)
    aggregate_id = models.CharField(max_length=36, db_index=True)
    event_data = models.JSONField(default=dict)
    version = models.IntegerField(default=1)
    sequence = models.BigIntegerField(default=0)
    occurred_at = models.DateTimeField()
    recorded_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'domain_events'
        verbose_name = 'Evento de Domínio'
        verbose_name_plural = 'Eventos de Domínio'
        ordering = ['recorded_at']
        indexes = [
            models.Index(fields=['aggregate_id', 'sequence'], name='domain_events_agg_seq_idx'),
            models.Index(fields=['event_type', 'recorded_at'], name='domain_events_type_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} - {self.aggregate_id[:8]} @ {self.occurred_at}"
