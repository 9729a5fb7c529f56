"""
Migration inicial para o domínio de Despacho.

Cria as tabelas:
- setores, pontos_atendimento, clientes
- tickets: Fila de tickets
- operacoes, pausas, atendimentos
- domain_events: Event Store

Inclui as restrições únicas parciais de "no máximo um".
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


PRIORIDADES = [(0, 'Normal'), (1, 'Prioritário')]
OPERACAO_ATIVA = models.Q(status__in=['operating', 'paused'])


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: setores
        # =================================================================
        migrations.CreateModel(
            name='SetorModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('nome', models.CharField(max_length=120, help_text='Nome do setor')),
            ],
            options={
                'verbose_name': 'Setor',
                'verbose_name_plural': 'Setores',
                'db_table': 'setores',
                'ordering': ['nome'],
            },
        ),

        # =================================================================
        # Tabela: pontos_atendimento
        # =================================================================
        migrations.CreateModel(
            name='PontoAtendimentoModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('nome', models.CharField(max_length=120)),
                ('disponibilidade', models.CharField(
                    max_length=20,
                    choices=[('free', 'Livre'), ('operating', 'Operando'), ('paused', 'Pausado')],
                    default='free',
                    db_index=True,
                )),
                ('prioridade_preferida', models.SmallIntegerField(choices=PRIORIDADES, default=0)),
                ('versao', models.PositiveIntegerField(default=0)),
                ('setor', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='pontos',
                    to='despacho.setormodel',
                )),
            ],
            options={
                'verbose_name': 'Ponto de Atendimento',
                'verbose_name_plural': 'Pontos de Atendimento',
                'db_table': 'pontos_atendimento',
                'ordering': ['nome'],
            },
        ),

        # =================================================================
        # Tabela: clientes
        # =================================================================
        migrations.CreateModel(
            name='ClienteModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('nome', models.CharField(max_length=200)),
                ('cpf', models.CharField(max_length=14, unique=True, null=True, blank=True)),
                ('data_nascimento', models.DateField(null=True, blank=True)),
            ],
            options={
                'verbose_name': 'Cliente',
                'verbose_name_plural': 'Clientes',
                'db_table': 'clientes',
                'ordering': ['nome'],
            },
        ),

        # =================================================================
        # Tabela: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('prioridade', models.SmallIntegerField(choices=PRIORIDADES, default=0)),
                ('status', models.CharField(
                    max_length=20,
                    choices=[
                        ('pending', 'Pendente'),
                        ('in-attendance', 'Em atendimento'),
                        ('finished', 'Finalizado'),
                        ('canceled', 'Cancelado'),
                    ],
                    default='pending',
                    db_index=True,
                )),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('versao', models.PositiveIntegerField(default=0)),
                ('cliente', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='tickets',
                    to='despacho.clientemodel',
                )),
                ('setor', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='tickets',
                    to='despacho.setormodel',
                )),
            ],
            options={
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'db_table': 'tickets',
                'ordering': ['-prioridade', 'criado_em', 'id'],
                'indexes': [
                    models.Index(fields=['setor', 'status', '-prioridade', 'criado_em'], name='tickets_fila_idx'),
                ],
            },
        ),

        # =================================================================
        # Tabela: operacoes
        # =================================================================
        migrations.CreateModel(
            name='OperacaoModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('usuario_id', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='ID do profissional (autenticação é externa)',
                )),
                ('status', models.CharField(
                    max_length=20,
                    choices=[('operating', 'Operando'), ('paused', 'Pausada'), ('finished', 'Finalizada')],
                    default='operating',
                    db_index=True,
                )),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('versao', models.PositiveIntegerField(default=0)),
                ('ponto_atendimento', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='operacoes',
                    to='despacho.pontoatendimentomodel',
                )),
            ],
            options={
                'verbose_name': 'Operação',
                'verbose_name_plural': 'Operações',
                'db_table': 'operacoes',
                'ordering': ['-criado_em'],
                'constraints': [
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
                ],
            },
        ),

        # =================================================================
        # Tabela: pausas
        # =================================================================
        migrations.CreateModel(
            name='PausaModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('motivo', models.CharField(
                    max_length=20,
                    choices=[
                        ('lunch', 'Almoço'),
                        ('break', 'Intervalo'),
                        ('meeting', 'Reunião'),
                        ('personal', 'Pessoal'),
                        ('technical', 'Técnico'),
                        ('finished-service', 'Atendimento Finalizado'),
                        ('other', 'Outro'),
                    ],
                )),
                ('status', models.CharField(
                    max_length=20,
                    choices=[('in-progress', 'Em andamento'), ('finished', 'Finalizada'), ('cancelled', 'Cancelada')],
                    default='in-progress',
                )),
                ('duracao', models.PositiveIntegerField(null=True, blank=True, help_text='Minutos')),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('versao', models.PositiveIntegerField(default=0)),
                ('operacao', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='pausas',
                    to='despacho.operacaomodel',
                )),
            ],
            options={
                'verbose_name': 'Pausa',
                'verbose_name_plural': 'Pausas',
                'db_table': 'pausas',
                'ordering': ['-criado_em'],
                'constraints': [
                    models.UniqueConstraint(
                        fields=['operacao'],
                        condition=models.Q(status='in-progress'),
                        name='pausa_em_andamento_por_operacao',
                    ),
                ],
            },
        ),

        # =================================================================
        # Tabela: atendimentos
        # =================================================================
        migrations.CreateModel(
            name='AtendimentoModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('status', models.CharField(
                    max_length=20,
                    choices=[('in_service', 'Em serviço'), ('finished', 'Finalizado'), ('cancelled', 'Cancelado')],
                    default='in_service',
                )),
                ('tipo_resolucao', models.CharField(
                    max_length=20,
                    choices=[('complaint', 'Reclamação'), ('denunciation', 'Denúncia'), ('consultation', 'Consulta')],
                    null=True,
                    blank=True,
                )),
                ('duracao', models.PositiveIntegerField(null=True, blank=True, help_text='Minutos')),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('chamado_novamente_em', models.DateTimeField(null=True, blank=True)),
                ('versao', models.PositiveIntegerField(default=0)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='atendimentos',
                    to='despacho.ticketmodel',
                )),
                ('operacao', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='atendimentos',
                    to='despacho.operacaomodel',
                )),
            ],
            options={
                'verbose_name': 'Atendimento',
                'verbose_name_plural': 'Atendimentos',
                'db_table': 'atendimentos',
                'ordering': ['-criado_em'],
                'indexes': [
                    models.Index(fields=['ticket', 'status'], name='atendimentos_ticket_idx'),
                    models.Index(fields=['operacao', 'status'], name='atendimentos_operacao_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(
                        fields=['operacao'],
                        condition=models.Q(status='in_service'),
                        name='atendimento_em_servico_por_operacao',
                    ),
                    models.UniqueConstraint(
                        fields=['ticket'],
                        condition=models.Q(status='in_service'),
                        name='atendimento_em_servico_por_ticket',
                    ),
                ],
            },
        ),

        # =================================================================
        # Tabela: domain_events (Event Store)
        # =================================================================
        migrations.CreateModel(
            name='DomainEventModel',
            fields=[
                ('event_id', models.CharField(max_length=36, primary_key=True, serialize=False)),
                ('event_type', models.CharField(max_length=100, db_index=True)),
                ('aggregate_type', models.CharField(max_length=100, db_index=True)),
                ('aggregate_id', models.CharField(max_length=36, db_index=True)),
                ('event_data', models.JSONField(default=dict)),
                ('version', models.IntegerField(default=1)),
                ('sequence', models.BigIntegerField(default=0)),
                ('occurred_at', models.DateTimeField()),
                ('recorded_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'verbose_name': 'Evento de Domínio',
                'verbose_name_plural': 'Eventos de Domínio',
                'db_table': 'domain_events',
                'ordering': ['recorded_at'],
                'indexes': [
                    models.Index(fields=['aggregate_id', 'sequence'], name='domain_events_agg_seq_idx'),
                    models.Index(fields=['event_type', 'recorded_at'], name='domain_events_type_idx'),
                ],
            },
        ),
    ]
