"""
URL patterns para o domínio de Despacho (montado em /despacho/).

Endpoints API JSON:
- POST api/tickets/ - Criar ticket
- POST api/tickets/<id>/cancelar/ - Cancelar ticket
- GET  api/setores/<id>/fila/ - Fila do setor
- GET  api/setores/<id>/proximo/ - Próximo ticket elegível
- POST api/operacoes/ - Iniciar operação
- POST api/operacoes/<id>/{pausar,retomar,encerrar,chamar-proximo}/
- POST api/atendimentos/<id>/{chamar-novamente,finalizar,cancelar}/
- GET  api/usuarios/<id>/{atendimento-ativo,metricas}/
- GET  api/painel/ultimos-chamados/
- GET  api/health/
"""

from django.urls import path

from . import api_views

app_name = 'despacho'

urlpatterns = [
    # Tickets
    path('api/tickets/', api_views.TicketAPICriarView.as_view(), name='api_ticket_criar'),
    path('api/tickets/<str:pk>/cancelar/', api_views.TicketAPICancelarView.as_view(), name='api_ticket_cancelar'),

    # Fila
    path('api/setores/<str:setor_id>/fila/', api_views.FilaAPIView.as_view(), name='api_fila'),
    path('api/setores/<str:setor_id>/proximo/', api_views.ProximoTicketAPIView.as_view(), name='api_proximo'),

    # Operações
    path('api/operacoes/', api_views.OperacaoAPIIniciarView.as_view(), name='api_operacao_iniciar'),
    path('api/operacoes/<str:pk>/pausar/', api_views.OperacaoAPIPausarView.as_view(), name='api_operacao_pausar'),
    path('api/operacoes/<str:pk>/retomar/', api_views.OperacaoAPIRetomarView.as_view(), name='api_operacao_retomar'),
    path('api/operacoes/<str:pk>/encerrar/', api_views.OperacaoAPIEncerrarView.as_view(), name='api_operacao_encerrar'),
    path(
        'api/operacoes/<str:pk>/chamar-proximo/',
        api_views.OperacaoAPIChamarProximoView.as_view(),
        name='api_operacao_chamar_proximo',
    ),

    # Atendimentos
    path(
        'api/atendimentos/<str:pk>/chamar-novamente/',
        api_views.AtendimentoAPIChamarNovamenteView.as_view(),
        name='api_atendimento_chamar_novamente',
    ),
    path(
        'api/atendimentos/<str:pk>/finalizar/',
        api_views.AtendimentoAPIFinalizarView.as_view(),
        name='api_atendimento_finalizar',
    ),
    path(
        'api/atendimentos/<str:pk>/cancelar/',
        api_views.AtendimentoAPICancelarView.as_view(),
        name='api_atendimento_cancelar',
    ),

    # Profissional e painel
    path(
        'api/usuarios/<str:usuario_id>/atendimento-ativo/',
        api_views.AtendimentoAtivoAPIView.as_view(),
        name='api_atendimento_ativo',
    ),
    path(
        'api/usuarios/<str:usuario_id>/metricas/',
        api_views.MetricasProfissionalAPIView.as_view(),
        name='api_metricas',
    ),
    path('api/painel/ultimos-chamados/', api_views.UltimosChamadosAPIView.as_view(), name='api_ultimos_chamados'),

    path('api/health/', api_views.HealthAPIView.as_view(), name='api_health'),
]
