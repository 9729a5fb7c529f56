"""
URL Configuration do Motor de Despacho.

Estrutura:
- /admin/ - Django Admin (cadastros de setores, pontos e clientes)
- /despacho/ - API JSON do despacho
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('despacho/', include('src.adapters.django_app.despacho.urls')),
]
