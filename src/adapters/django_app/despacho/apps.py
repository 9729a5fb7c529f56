"""
Configuração do Django App para Despacho.
"""

from django.apps import AppConfig


class DespachoConfig(AppConfig):
    """Configuração do app Despacho."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.despacho'
    label = 'despacho'
    verbose_name = 'Despacho de Atendimentos'
