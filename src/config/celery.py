"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events do despacho depois do commit
- Anunciar chamadas no painel da sala de espera
- Tarefas agendadas (relatório diário da fila, limpeza do Event Store)

Despacho de tickets nunca passa pelo Celery: chamar o próximo ticket é
sempre síncrono, dentro do use case.

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO -Q default,events,painel,reports

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os

from celery import Celery
from celery.schedules import crontab
from kombu import Exchange, Queue

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('despacho')

# Broker, backend, serialização e retry vêm de CELERY_* em settings.py
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    task_track_started=True,
    worker_send_task_events=True,
    task_send_sent_event=True,
)

HANDLERS = 'src.adapters.django_app.events.handlers'

app.conf.task_default_queue = 'default'

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('painel', Exchange('painel'), routing_key='painel.#'),
    Queue('reports', Exchange('reports'), routing_key='reports.#'),
)

# Rotas mais específicas antes do curinga
app.conf.task_routes = {
    f'{HANDLERS}.anunciar_chamada_painel': {'queue': 'painel'},
    f'{HANDLERS}.generate_daily_report': {'queue': 'reports'},
    f'{HANDLERS}.cleanup_old_events': {'queue': 'reports'},
    f'{HANDLERS}.*': {'queue': 'events'},
}

app.autodiscover_tasks([
    'src.adapters.django_app.events',
], related_name='handlers')

app.conf.beat_schedule = {
    # Relatório diário da fila às 8h
    'daily-report': {
        'task': f'{HANDLERS}.generate_daily_report',
        'schedule': crontab(hour=8, minute=0),
    },

    # Limpar eventos antigos semanalmente
    'cleanup-old-events': {
        'task': f'{HANDLERS}.cleanup_old_events',
        'schedule': 604800.0,  # 7 dias em segundos
        'kwargs': {'days': 90},
    },
}
