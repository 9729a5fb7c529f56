#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local do despacho.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria setores, guichês, clientes e uma fila de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse
from datetime import date

# Raiz do projeto no path (pacote ``src``)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def run_migrations():
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


SETORES = {
    'Financeiro': ['Guichê 1', 'Guichê 2'],
    'Ouvidoria': ['Mesa 1'],
}

CLIENTES = [
    ('Ana Souza', '11122233344', date(1990, 5, 17)),
    ('Bruno Lima', '55566677788', date(1985, 11, 2)),
    ('José Pereira', '99988877766', date(1950, 1, 2)),
    ('Carla Dias', '', None),
]


def create_sample_data():
    """
    Grava os cadastros pelo repositório e enfileira um ticket por cliente
    em cada setor, usando o mesmo use case da API.
    """
    from src.config.container import get_container
    from src.core.despacho.dtos import CriarTicketInputDTO
    from src.core.despacho.entities import ClienteEntity, PontoAtendimentoEntity, SetorEntity

    container = get_container()
    repos = container.repositorios()
    criar_ticket = container.criar_ticket_service()

    print("🏢 Criando setores e pontos de atendimento...")
    setores = []
    for nome_setor, pontos in SETORES.items():
        setor = SetorEntity.criar(nome_setor)
        repos.setores.save(setor)
        setores.append(setor)
        for nome_ponto in pontos:
            repos.pontos.save(PontoAtendimentoEntity.criar(setor.id, nome_ponto))
        print(f"   ✓ {nome_setor} ({len(pontos)} pontos)")

    print("👤 Criando clientes...")
    clientes = []
    for nome, cpf, nascimento in CLIENTES:
        cliente = ClienteEntity.criar(nome, cpf=cpf, data_nascimento=nascimento)
        repos.clientes.save(cliente)
        clientes.append(cliente)
        print(f"   ✓ {nome}")

    print("🎫 Enfileirando tickets...")
    total = 0
    for setor in setores:
        for cliente in clientes:
            ticket = criar_ticket.execute(CriarTicketInputDTO(cliente.id, setor.id))
            total += 1
            print(f"   ✓ {cliente.nome[:20]:<20} → {setor.nome} (prioridade {ticket.prioridade})")

    print(f"✅ {total} tickets na fila!")


def check_connection():
    """Verifica conexão com o banco."""
    from src.adapters.django_app.shared.database import check_database_connection

    print("🔍 Verificando conexão com o banco...")

    resultado = check_database_connection()
    if resultado['healthy']:
        print(f"✅ Conexão OK! ({resultado['engine']})")
        return True

    print(f"❌ Erro de conexão: {resultado['error']}")
    return False


def show_info():
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. django-admin runserver --settings=src.config.settings --pythonpath=.")
    print("   2. Acesse: http://localhost:8000/admin/")
    print("   3. Acesse: http://localhost:8000/despacho/api/health/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido do despacho para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar setores, clientes e fila de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Motor de Despacho - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()
