"""
Testes para a API JSON do despacho.

Testa:
- Fluxo completo via HTTP (Django test Client + container real)
- Mapeamento de exceções para status HTTP
- Validação de payload pelos forms
"""

import json
from unittest.mock import Mock, patch

import pytest
from django.test import Client

from src.core.shared.exceptions import TentativasEsgotadasError

API = '/despacho/api'


@pytest.fixture
def client():
    return Client()


def _post(client, url, payload=None):
    response = client.post(
        url,
        data=json.dumps(payload or {}),
        content_type='application/json',
    )
    return response, json.loads(response.content)


def _get(client, url, params=None):
    response = client.get(url, params or {})
    return response, json.loads(response.content)


def _criar_ticket(client, cadastros, cliente='ana', prioridade=0):
    _, body = _post(client, f'{API}/tickets/', {
        'cliente_id': cadastros[cliente].id,
        'setor_id': cadastros['setor'].id,
        'prioridade': prioridade,
    })
    return body['data']


def _iniciar(client, cadastros, usuario='u1', ponto='guiche1'):
    _, body = _post(client, f'{API}/operacoes/', {
        'usuario_id': usuario,
        'ponto_atendimento_id': cadastros[ponto].id,
    })
    return body['data']


# =============================================================================
# Fluxo completo
# =============================================================================

@pytest.mark.django_db
class TestFluxoAPI:

    def test_criar_ticket(self, client, cadastros_db):
        response, body = _post(client, f'{API}/tickets/', {
            'cliente_id': cadastros_db['ana'].id,
            'setor_id': cadastros_db['setor'].id,
        })

        assert response.status_code == 201
        assert body['success'] is True
        assert body['data']['status'] == 'pending'
        assert body['data']['prioridade'] == 0

    def test_chamar_finalizar(self, client, cadastros_db):
        ticket = _criar_ticket(client, cadastros_db)
        operacao = _iniciar(client, cadastros_db)

        response, body = _post(client, f"{API}/operacoes/{operacao['id']}/chamar-proximo/")

        assert response.status_code == 201
        assert body['data']['fila_vazia'] is False
        assert body['data']['ticket']['id'] == ticket['id']
        assert body['data']['ticket']['status'] == 'in-attendance'
        atendimento_id = body['data']['atendimento']['id']

        response, body = _post(client, f'{API}/atendimentos/{atendimento_id}/finalizar/', {
            'tipo_resolucao': 'consultation',
            'metadados': {'assunto': 'segunda via'},
        })

        assert response.status_code == 200
        assert body['data']['status'] == 'finished'
        assert body['data']['tipo_resolucao'] == 'consultation'

    def test_fila_vazia_retorna_200(self, client, cadastros_db):
        operacao = _iniciar(client, cadastros_db)

        response, body = _post(client, f"{API}/operacoes/{operacao['id']}/chamar-proximo/")

        assert response.status_code == 200
        assert body['data'] == {'fila_vazia': True}

    def test_fila_ordenada_por_prioridade(self, client, cadastros_db):
        normal = _criar_ticket(client, cadastros_db, 'bruno')
        prioritario = _criar_ticket(client, cadastros_db, 'ana', prioridade=1)

        response, body = _get(client, f"{API}/setores/{cadastros_db['setor'].id}/fila/")

        assert response.status_code == 200
        assert [t['id'] for t in body['data']] == [prioritario['id'], normal['id']]
        assert body['meta']['total'] == 2

    def test_proximo_sem_efeito_colateral(self, client, cadastros_db):
        ticket = _criar_ticket(client, cadastros_db)
        url = f"{API}/setores/{cadastros_db['setor'].id}/proximo/"

        _, primeiro = _get(client, url)
        _, segundo = _get(client, url)

        assert primeiro['data']['id'] == ticket['id']
        assert segundo['data']['status'] == 'pending'

    def test_proximo_com_fila_vazia(self, client, cadastros_db):
        response, body = _get(client, f"{API}/setores/{cadastros_db['setor'].id}/proximo/")

        assert response.status_code == 200
        assert body['data'] is None

    def test_pausar_retomar_encerrar(self, client, cadastros_db):
        operacao = _iniciar(client, cadastros_db)
        base = f"{API}/operacoes/{operacao['id']}"

        response, body = _post(client, f'{base}/pausar/', {'motivo': 'ALMOCO'})
        assert response.status_code == 201
        assert body['data']['motivo'] == 'lunch'

        response, body = _post(client, f'{base}/retomar/')
        assert response.status_code == 200
        assert body['data']['status'] == 'operating'

        response, body = _post(client, f'{base}/encerrar/')
        assert response.status_code == 200
        assert body['data']['status'] == 'finished'
        assert body['data']['disponibilidade_ponto'] == 'free'

    def test_cancelar_ticket(self, client, cadastros_db):
        ticket = _criar_ticket(client, cadastros_db)

        response, body = _post(client, f"{API}/tickets/{ticket['id']}/cancelar/")

        assert response.status_code == 200
        assert body['data']['status'] == 'canceled'

    def test_painel_e_atendimento_ativo(self, client, cadastros_db):
        _criar_ticket(client, cadastros_db)
        operacao = _iniciar(client, cadastros_db)
        _, chamada = _post(client, f"{API}/operacoes/{operacao['id']}/chamar-proximo/")
        atendimento_id = chamada['data']['atendimento']['id']

        response, body = _post(client, f'{API}/atendimentos/{atendimento_id}/chamar-novamente/')
        assert response.status_code == 200
        assert body['data']['ok'] is True

        _, painel = _get(client, f'{API}/painel/ultimos-chamados/')
        assert painel['data'][0]['nome'] == 'Ana Souza'
        assert painel['data'][0]['guiche'] == 'Guichê 1 - Financeiro'
        assert painel['meta']['total'] == 1

        _, ativo = _get(client, f'{API}/usuarios/u1/atendimento-ativo/')
        assert ativo['data']['em_atendimento'] is True
        assert ativo['data']['cliente_nome'] == 'Ana Souza'

    def test_metricas_sem_historico(self, client, cadastros_db):
        response, body = _get(client, f'{API}/usuarios/ninguem/metricas/')

        assert response.status_code == 200
        assert body['data']['total_operacoes'] == 0
        assert body['data']['pausas_por_motivo'] == []

    def test_health(self, client):
        response, body = _get(client, f'{API}/health/')

        assert response.status_code == 200
        assert body['data']['database']['healthy'] is True


# =============================================================================
# Erros
# =============================================================================

@pytest.mark.django_db
class TestErrosAPI:

    def test_campo_obrigatorio_retorna_400(self, client, cadastros_db):
        response, body = _post(client, f'{API}/tickets/', {'setor_id': cadastros_db['setor'].id})

        assert response.status_code == 400
        assert body['success'] is False
        assert body['meta']['field'] == 'cliente_id'

    def test_prioridade_invalida(self, client, cadastros_db):
        response, body = _post(client, f'{API}/tickets/', {
            'cliente_id': cadastros_db['ana'].id,
            'setor_id': cadastros_db['setor'].id,
            'prioridade': 7,
        })

        assert response.status_code == 400
        assert body['meta']['field'] == 'prioridade'

    def test_setor_inexistente(self, client, cadastros_db):
        response, body = _post(client, f'{API}/tickets/', {
            'cliente_id': cadastros_db['ana'].id,
            'setor_id': 'nao-existe',
        })

        assert response.status_code == 400
        assert body['meta']['field'] == 'setor_id'

    def test_json_invalido(self, client):
        response = client.post(f'{API}/tickets/', data='{quebrado', content_type='application/json')

        assert response.status_code == 400
        assert 'JSON inválido' in json.loads(response.content)['error']

    def test_operacao_inexistente_retorna_404(self, client, cadastros_db):
        response, body = _post(client, f'{API}/operacoes/nao-existe/chamar-proximo/')

        assert response.status_code == 404
        assert body['success'] is False

    def test_ponto_ocupado_retorna_409(self, client, cadastros_db):
        _iniciar(client, cadastros_db, 'u1')

        response, body = _post(client, f'{API}/operacoes/', {
            'usuario_id': 'u2',
            'ponto_atendimento_id': cadastros_db['guiche1'].id,
        })

        assert response.status_code == 409
        assert body['meta']['rule'] == 'ponto_com_operacao_ativa'

    def test_cancelar_ticket_finalizado_retorna_409(self, client, cadastros_db):
        ticket = _criar_ticket(client, cadastros_db)
        operacao = _iniciar(client, cadastros_db)
        _, chamada = _post(client, f"{API}/operacoes/{operacao['id']}/chamar-proximo/")
        _post(client, f"{API}/atendimentos/{chamada['data']['atendimento']['id']}/finalizar/", {
            'tipo_resolucao': 'consultation',
        })

        response, body = _post(client, f"{API}/tickets/{ticket['id']}/cancelar/")

        assert response.status_code == 409
        assert body['success'] is False
        assert body['meta']['rule'] == 'transicao_ticket_invalida'

    def test_motivo_de_pausa_invalido(self, client, cadastros_db):
        operacao = _iniciar(client, cadastros_db)

        response, body = _post(client, f"{API}/operacoes/{operacao['id']}/pausar/", {'motivo': 'soneca'})

        assert response.status_code == 400
        assert body['meta']['field'] == 'motivo'

    def test_metadados_nao_objeto(self, client, cadastros_db):
        response, body = _post(client, f'{API}/atendimentos/qualquer/finalizar/', {
            'tipo_resolucao': 'complaint',
            'metadados': [1, 2],
        })

        assert response.status_code == 400
        assert body['meta']['field'] == 'metadados'

    def test_periodo_invertido(self, client):
        response, body = _get(client, f'{API}/usuarios/u1/metricas/', {
            'inicio': '2024-03-05T10:00:00Z',
            'fim': '2024-03-04T10:00:00Z',
        })

        assert response.status_code == 400
        assert body['meta']['field'] is None

    def test_limite_do_painel_invalido(self, client):
        response, body = _get(client, f'{API}/painel/ultimos-chamados/', {'limite': 0})

        assert response.status_code == 400
        assert body['meta']['field'] == 'limite'


class TestMapeamentoExcecoes:
    """Services mockados no container, como nos demais testes de view."""

    def _chamar_com_service(self, client, service):
        with patch('src.adapters.django_app.despacho.api_views.get_container') as mock_container:
            mock_container.return_value.chamar_proximo_ticket_service.return_value = service
            return _post(client, f'{API}/operacoes/op-1/chamar-proximo/')

    def test_tentativas_esgotadas_retorna_503(self, client):
        service = Mock()
        service.execute.side_effect = TentativasEsgotadasError("sem sucesso", tentativas=3)

        response, body = self._chamar_com_service(client, service)

        assert response.status_code == 503
        assert body['meta']['tentativas'] == 3

    def test_erro_inesperado_retorna_500(self, client):
        service = Mock()
        service.execute.side_effect = RuntimeError("falha de infraestrutura")

        response, body = self._chamar_com_service(client, service)

        assert response.status_code == 500
        assert body['error'] == 'Erro interno do servidor'
