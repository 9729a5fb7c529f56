"""
Fixtures para testes dos adapters Django.

Django já é configurado no conftest raiz (SQLite em memória), onde também
ficam ``repos_django`` e ``cadastros_db``.
"""

import pytest


@pytest.fixture
def event_store(db):
    from src.adapters.django_app.despacho.repositories import DjangoEventStore

    return DjangoEventStore()
