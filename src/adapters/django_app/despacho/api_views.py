"""
API Views JSON para o domínio de Despacho.

Endpoints (montados em /despacho/):
- POST api/tickets/ - Colocar ticket na fila
- POST api/tickets/<id>/cancelar/ - Cancelar ticket
- GET  api/setores/<id>/fila/ - Fila pendente do setor
- GET  api/setores/<id>/proximo/ - Próximo ticket elegível (sem chamar)
- POST api/operacoes/ - Iniciar operação
- POST api/operacoes/<id>/pausar/ - Pausar operação
- POST api/operacoes/<id>/retomar/ - Retomar operação
- POST api/operacoes/<id>/encerrar/ - Encerrar operação
- POST api/operacoes/<id>/chamar-proximo/ - Chamar próximo ticket
- POST api/atendimentos/<id>/chamar-novamente/ - Chamar cliente de novo
- POST api/atendimentos/<id>/finalizar/ - Finalizar atendimento
- POST api/atendimentos/<id>/cancelar/ - Cancelar atendimento e ticket
- GET  api/usuarios/<id>/atendimento-ativo/ - Operação/atendimento ativos
- GET  api/usuarios/<id>/metricas/ - Métricas do profissional
- GET  api/painel/ultimos-chamados/ - Painel de chamadas
- GET  api/health/ - Health check

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}
"""

import json
import logging
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.config.container import get_container
from src.core.despacho.dtos import (
    AtendimentoAtivoQueryDTO,
    CancelarAtendimentoInputDTO,
    CancelarTicketInputDTO,
    ChamarNovamenteInputDTO,
    ChamarProximoInputDTO,
    CriarTicketInputDTO,
    EncerrarOperacaoInputDTO,
    FinalizarAtendimentoInputDTO,
    IniciarOperacaoInputDTO,
    ListarFilaQueryDTO,
    MetricasProfissionalQueryDTO,
    PausarOperacaoInputDTO,
    ProximoTicketQueryDTO,
    RetomarOperacaoInputDTO,
    UltimosChamadosQueryDTO,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ConcurrencyError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)

from ..shared.database import check_database_connection
from .forms import (
    CriarTicketForm,
    FinalizarAtendimentoForm,
    IniciarOperacaoForm,
    MetricasProfissionalForm,
    PausarOperacaoForm,
    UltimosChamadosForm,
    validar_form,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou se não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("JSON inválido: o corpo deve ser um objeto")

    return data


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        ConflictError é checado antes de BusinessRuleViolationError
        (é subclasse dela).
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'field': getattr(e, 'field', None)}
            )

        if isinstance(e, EntityNotFoundError):
            return json_response(
                success=False,
                error=str(e),
                status=404
            )

        if isinstance(e, ConflictError):
            return json_response(
                success=False,
                error=str(e),
                status=409,
                meta={'rule': e.rule}
            )

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=str(e),
                status=422,
                meta={'rule': getattr(e, 'rule', None)}
            )

        if isinstance(e, ConcurrencyError):
            logger.error(f"API: conflito de concorrência não resolvido: {e}")
            return json_response(
                success=False,
                error=str(e),
                status=503,
                meta={'tentativas': getattr(e, 'tentativas', None)}
            )

        if isinstance(e, DomainException):
            return json_response(
                success=False,
                error=str(e),
                status=400
            )

        if isinstance(e, ValueError):
            return json_response(
                success=False,
                error=str(e),
                status=400
            )

        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )


# =============================================================================
# Tickets
# =============================================================================

class TicketAPICriarView(BaseAPIView):
    """
    POST api/tickets/

    Body JSON:
    {
        "cliente_id": "string (obrigatório)",
        "setor_id": "string (obrigatório)",
        "prioridade": 0 | 1 (opcional, padrão 0)
    }
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = validar_form(CriarTicketForm, self.parse_body(request))

            output = self.get_service('criar_ticket_service').execute(
                CriarTicketInputDTO(
                    cliente_id=data['cliente_id'],
                    setor_id=data['setor_id'],
                    prioridade=data['prioridade'],
                )
            )

            logger.info(f"API: Ticket criado: {output.id}")
            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPICancelarView(BaseAPIView):
    """POST api/tickets/<id>/cancelar/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('cancelar_ticket_service').execute(
                CancelarTicketInputDTO(ticket_id=pk)
            )

            logger.info(f"API: Ticket {pk} cancelado")
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class FilaAPIView(BaseAPIView):
    """
    GET api/setores/<setor_id>/fila/

    Lista os tickets pendentes do setor na ordem de despacho.
    """

    def get(self, request: HttpRequest, setor_id: str) -> JsonResponse:
        try:
            tickets = self.get_service('listar_fila_service').execute(
                ListarFilaQueryDTO(setor_id=setor_id)
            )

            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets)},
            )

        except Exception as e:
            return self.handle_exception(e)


class ProximoTicketAPIView(BaseAPIView):
    """
    GET api/setores/<setor_id>/proximo/?ponto_atendimento_id=

    Consulta sem efeito colateral; ``data`` é null com a fila vazia.
    """

    def get(self, request: HttpRequest, setor_id: str) -> JsonResponse:
        try:
            ticket = self.get_service('obter_proximo_ticket_service').execute(
                ProximoTicketQueryDTO(
                    setor_id=setor_id,
                    ponto_atendimento_id=request.GET.get('ponto_atendimento_id') or None,
                )
            )

            return JsonResponse({
                'success': True,
                'data': ticket.to_dict() if ticket else None,
            })

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Operações
# =============================================================================

class OperacaoAPIIniciarView(BaseAPIView):
    """
    POST api/operacoes/

    Body JSON:
    {
        "usuario_id": "string (obrigatório)",
        "ponto_atendimento_id": "string (obrigatório)"
    }
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = validar_form(IniciarOperacaoForm, self.parse_body(request))

            output = self.get_service('iniciar_operacao_service').execute(
                IniciarOperacaoInputDTO(
                    usuario_id=data['usuario_id'],
                    ponto_atendimento_id=data['ponto_atendimento_id'],
                )
            )

            logger.info(f"API: Operação {output.id} iniciada")
            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class OperacaoAPIPausarView(BaseAPIView):
    """
    POST api/operacoes/<id>/pausar/

    Body JSON:
    {
        "motivo": "lunch|break|... (valor ou nome do motivo)"
    }
    """

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = validar_form(PausarOperacaoForm, self.parse_body(request))

            output = self.get_service('pausar_operacao_service').execute(
                PausarOperacaoInputDTO(operacao_id=pk, motivo=data['motivo'])
            )

            logger.info(f"API: Operação {pk} pausada ({output.motivo})")
            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class OperacaoAPIRetomarView(BaseAPIView):
    """POST api/operacoes/<id>/retomar/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('retomar_operacao_service').execute(
                RetomarOperacaoInputDTO(operacao_id=pk)
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class OperacaoAPIEncerrarView(BaseAPIView):
    """POST api/operacoes/<id>/encerrar/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('encerrar_operacao_service').execute(
                EncerrarOperacaoInputDTO(operacao_id=pk)
            )

            logger.info(f"API: Operação {pk} encerrada")
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class OperacaoAPIChamarProximoView(BaseAPIView):
    """
    POST api/operacoes/<id>/chamar-proximo/

    201 com o atendimento criado; 200 com ``{"fila_vazia": true}`` quando
    não há ticket pendente no setor.
    """

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            resultado = self.get_service('chamar_proximo_ticket_service').execute(
                ChamarProximoInputDTO(operacao_id=pk)
            )

            if resultado.fila_vazia:
                return json_response(success=True, data=resultado.to_dict())

            logger.info(f"API: Operação {pk} chamou o ticket {resultado.ticket.id}")
            return json_response(success=True, data=resultado.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Atendimentos
# =============================================================================

class AtendimentoAPIChamarNovamenteView(BaseAPIView):
    """POST api/atendimentos/<id>/chamar-novamente/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            ack = self.get_service('chamar_cliente_novamente_service').execute(
                ChamarNovamenteInputDTO(atendimento_id=pk)
            )
            return json_response(success=True, data=ack.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class AtendimentoAPIFinalizarView(BaseAPIView):
    """
    POST api/atendimentos/<id>/finalizar/

    Body JSON:
    {
        "tipo_resolucao": "complaint|denunciation|consultation",
        "metadados": {} (opcional)
    }
    """

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = validar_form(FinalizarAtendimentoForm, self.parse_body(request))

            output = self.get_service('finalizar_atendimento_service').execute(
                FinalizarAtendimentoInputDTO(
                    atendimento_id=pk,
                    tipo_resolucao=data['tipo_resolucao'],
                    metadados=data['metadados'],
                )
            )

            logger.info(f"API: Atendimento {pk} finalizado ({output.tipo_resolucao})")
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class AtendimentoAPICancelarView(BaseAPIView):
    """POST api/atendimentos/<id>/cancelar/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('cancelar_atendimento_service').execute(
                CancelarAtendimentoInputDTO(atendimento_id=pk)
            )

            logger.info(f"API: Atendimento {pk} cancelado")
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Consultas do profissional e painel
# =============================================================================

class AtendimentoAtivoAPIView(BaseAPIView):
    """GET api/usuarios/<usuario_id>/atendimento-ativo/"""

    def get(self, request: HttpRequest, usuario_id: str) -> JsonResponse:
        try:
            output = self.get_service('obter_atendimento_ativo_service').execute(
                AtendimentoAtivoQueryDTO(usuario_id=usuario_id)
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class MetricasProfissionalAPIView(BaseAPIView):
    """
    GET api/usuarios/<usuario_id>/metricas/?inicio=&fim=

    Datas em ISO 8601; o período só é aplicado com ambas informadas.
    """

    def get(self, request: HttpRequest, usuario_id: str) -> JsonResponse:
        try:
            periodo = validar_form(MetricasProfissionalForm, request.GET)

            output = self.get_service('metricas_profissional_service').execute(
                MetricasProfissionalQueryDTO(
                    usuario_id=usuario_id,
                    inicio=periodo.get('inicio'),
                    fim=periodo.get('fim'),
                )
            )
            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class UltimosChamadosAPIView(BaseAPIView):
    """GET api/painel/ultimos-chamados/?limite="""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            data = validar_form(UltimosChamadosForm, request.GET)

            chamados = self.get_service('ultimos_chamados_service').execute(
                UltimosChamadosQueryDTO(limite=data.get('limite'))
            )

            return json_response(
                success=True,
                data=[c.to_dict() for c in chamados],
                meta={'total': len(chamados)},
            )

        except Exception as e:
            return self.handle_exception(e)


class HealthAPIView(BaseAPIView):
    """GET api/health/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        banco = check_database_connection()

        return json_response(
            success=banco['healthy'],
            data={'database': banco},
            status=200 if banco['healthy'] else 503,
        )
