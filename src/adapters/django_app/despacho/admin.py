"""
Django Admin para o domínio de Despacho.

Cadastro de setores, pontos e clientes; consulta da fila, das operações
e dos atendimentos. Estados da fila só mudam pelos use cases, por isso
os campos de status são somente leitura.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import (
    AtendimentoModel,
    ClienteModel,
    DomainEventModel,
    OperacaoModel,
    PausaModel,
    PontoAtendimentoModel,
    SetorModel,
    TicketModel,
)


def _id_curto(valor: str) -> str:
    return valor[:8] + '...'


@admin.register(SetorModel)
class SetorAdmin(admin.ModelAdmin):
    list_display = ['nome', 'id']
    search_fields = ['nome']


@admin.register(PontoAtendimentoModel)
class PontoAtendimentoAdmin(admin.ModelAdmin):
    """Admin para pontos de atendimento."""

    list_display = ['nome', 'setor', 'disponibilidade_badge', 'prioridade_preferida']
    list_filter = ['setor', 'disponibilidade']
    search_fields = ['nome']
    readonly_fields = ['disponibilidade', 'versao']

    def disponibilidade_badge(self, obj):
        """Exibe disponibilidade com badge colorido."""
        colors = {
            'free': '#28a745',
            'operating': '#17a2b8',
            'paused': '#ffc107',
        }
        color = colors.get(obj.disponibilidade, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.get_disponibilidade_display()
        )
    disponibilidade_badge.short_description = 'Disponibilidade'


@admin.register(ClienteModel)
class ClienteAdmin(admin.ModelAdmin):
    list_display = ['nome', 'cpf', 'data_nascimento']
    search_fields = ['nome', 'cpf']


@admin.register(TicketModel)
class TicketAdmin(admin.ModelAdmin):
    """Admin para TicketModel."""

    list_display = ['id_curto', 'cliente', 'setor', 'prioridade', 'status', 'criado_em']
    list_filter = ['status', 'prioridade', 'setor']
    search_fields = ['id', 'cliente__nome', 'cliente__cpf']
    readonly_fields = ['id', 'status', 'criado_em', 'atualizado_em', 'versao']
    ordering = ['-criado_em']
    date_hierarchy = 'criado_em'

    def id_curto(self, obj):
        return _id_curto(obj.id)
    id_curto.short_description = 'ID'


@admin.register(OperacaoModel)
class OperacaoAdmin(admin.ModelAdmin):
    list_display = ['id_curto', 'usuario_id', 'ponto_atendimento', 'status', 'criado_em', 'atualizado_em']
    list_filter = ['status', 'ponto_atendimento']
    search_fields = ['id', 'usuario_id']
    readonly_fields = ['id', 'status', 'criado_em', 'atualizado_em', 'versao']

    def id_curto(self, obj):
        return _id_curto(obj.id)
    id_curto.short_description = 'ID'


@admin.register(PausaModel)
class PausaAdmin(admin.ModelAdmin):
    list_display = ['id', 'operacao', 'motivo', 'status', 'duracao', 'criado_em']
    list_filter = ['motivo', 'status']
    readonly_fields = ['id', 'status', 'duracao', 'criado_em', 'atualizado_em', 'versao']


@admin.register(AtendimentoModel)
class AtendimentoAdmin(admin.ModelAdmin):
    list_display = ['id_curto', 'ticket', 'operacao', 'status', 'tipo_resolucao', 'duracao', 'criado_em']
    list_filter = ['status', 'tipo_resolucao']
    search_fields = ['id', 'ticket__id']
    readonly_fields = [
        'id',
        'status',
        'tipo_resolucao',
        'duracao',
        'criado_em',
        'atualizado_em',
        'chamado_novamente_em',
        'versao',
    ]

    def id_curto(self, obj):
        return _id_curto(obj.id)
    id_curto.short_description = 'ID'


@admin.register(DomainEventModel)
class DomainEventAdmin(admin.ModelAdmin):
    """Admin para eventos de domínio."""

    list_display = ['event_id_curto', 'event_type', 'aggregate_type', 'aggregate_id_curto', 'sequence', 'occurred_at']
    list_filter = ['event_type', 'aggregate_type', 'occurred_at']
    search_fields = ['event_id', 'aggregate_id', 'event_type']
    readonly_fields = [
        'event_id',
        'event_type',
        'aggregate_type',
        'aggregate_id',
        'event_data',
        'version',
        'sequence',
        'occurred_at',
        'recorded_at',
    ]

    def event_id_curto(self, obj):
        return _id_curto(obj.event_id)
    event_id_curto.short_description = 'Event ID'

    def aggregate_id_curto(self, obj):
        return _id_curto(obj.aggregate_id)
    aggregate_id_curto.short_description = 'Aggregate'
