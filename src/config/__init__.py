"""
Configuração do Motor de Despacho de Atendimentos.

Módulos:
- settings: Configurações Django
- urls: Rotas principais
- celery: Configuração Celery para tarefas assíncronas
- container: Dependency Injection Container
"""

from .celery import app as celery_app

__all__ = ('celery_app',)
