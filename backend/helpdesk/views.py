"""
Views da API REST para chamados GLPI por tenant.

Este módulo contém todas as views que expõem endpoints da API:
- Chamados: listagem normalizada, atribuição de técnico e de categoria
- Estatísticas: recálculo e snapshot por tenant
- Atribuição automática
- Proxies do GLPI: técnicos, categorias e entidades
"""
import logging
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated

from tenants.exceptions import TenantNotFoundException
from tenants.services import get_tenant, get_daily_stats

from .clients.glpi_client import GlpiClient
from .exceptions import (
    GlpiApiException,
    GlpiAuthException,
    GlpiConfigurationException,
    AutomationDisabledException,
)
from .serializers import (
    TicketAssignSerializer,
    TicketCategorySerializer,
    NormalizedTicketSerializer,
    DailyStatsSerializer,
)
from .services import (
    resolve_statuses,
    fetch_tickets,
    refresh_daily_stats,
    assign_ticket,
    assign_category,
    auto_assign_tickets,
)

logger = logging.getLogger(__name__)


# =========================================================
# FUNÇÕES AUXILIARES
# =========================================================

def _error_response(exc):
    """
    Converte as exceções do fluxo de chamados em resposta HTTP.

    Args:
        exc: Exceção capturada na view

    Returns:
        Response: {'error', 'message'} e, para erros do GLPI, 'details'
    """
    if isinstance(exc, TenantNotFoundException):
        return Response(
            {'error': 'tenant_not_found', 'message': exc.message},
            status=status.HTTP_404_NOT_FOUND
        )
    if isinstance(exc, GlpiAuthException):
        return Response(
            {'error': 'glpi_auth_error', 'message': exc.message, 'details': exc.payload},
            status=status.HTTP_502_BAD_GATEWAY
        )
    if isinstance(exc, GlpiApiException):
        return Response(
            {'error': 'glpi_api_error', 'message': exc.message, 'details': exc.payload},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    if isinstance(exc, GlpiConfigurationException):
        return Response(
            {'error': 'glpi_config_error', 'message': exc.message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    if isinstance(exc, AutomationDisabledException):
        return Response(
            {'error': 'automation_disabled', 'message': exc.message},
            status=status.HTTP_400_BAD_REQUEST
        )
    if isinstance(exc, ValueError):
        return Response(
            {'error': 'validation_error', 'message': str(exc)},
            status=status.HTTP_400_BAD_REQUEST
        )
    raise exc


def _validation_response(serializer):
    return Response(
        {
            'error': 'validation_error',
            'message': 'Dados inválidos',
            'details': serializer.errors
        },
        status=status.HTTP_400_BAD_REQUEST
    )


# =========================================================
# 1. CHAMADOS
# =========================================================

class TenantTicketListView(APIView):
    """
    Lista os chamados do tenant direto do GLPI, normalizados.

    Endpoint: GET /api/tenant/<tenant_id>/tickets/?status=1,2

    Parâmetros de query:
        - status: códigos separados por vírgula; '10' ou ausente usa o
                  filtro configurado no tenant (padrão: 1, 2, 3 e 4)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, tenant_id):
        try:
            tenant = get_tenant(tenant_id)
            statuses = resolve_statuses(tenant, request.query_params.get('status'))
            tickets = fetch_tickets(tenant, statuses)
        except (TenantNotFoundException, GlpiApiException, GlpiConfigurationException, ValueError) as e:
            return _error_response(e)

        return Response(
            {
                'total': len(tickets),
                'tickets': NormalizedTicketSerializer(tickets, many=True).data
            },
            status=status.HTTP_200_OK
        )


class TenantTicketAssignView(APIView):
    """
    Atribui um técnico a um chamado no GLPI.

    Endpoint: POST /api/tenant/<tenant_id>/tickets/assign/

    Payload esperado:
        {
            "ticket_id": 123,
            "user_id": 45
        }
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, tenant_id):
        try:
            tenant = get_tenant(tenant_id)
        except TenantNotFoundException as e:
            return _error_response(e)

        serializer = TicketAssignSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_response(serializer)
        data = serializer.validated_data

        try:
            result = assign_ticket(tenant, data['ticket_id'], data['user_id'])
        except (GlpiApiException, GlpiConfigurationException, ValueError) as e:
            return _error_response(e)

        return Response(
            {'message': 'Chamado atribuído com sucesso', 'result': result},
            status=status.HTTP_200_OK
        )


class TenantTicketCategoryView(APIView):
    """
    Altera a categoria de um chamado no GLPI.

    Endpoint: POST /api/tenant/<tenant_id>/tickets/category/

    Payload esperado:
        {
            "ticket_id": 123,
            "category_id": 7
        }
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, tenant_id):
        try:
            tenant = get_tenant(tenant_id)
        except TenantNotFoundException as e:
            return _error_response(e)

        serializer = TicketCategorySerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_response(serializer)
        data = serializer.validated_data

        try:
            result = assign_category(tenant, data['ticket_id'], data['category_id'])
        except (GlpiApiException, GlpiConfigurationException, ValueError) as e:
            return _error_response(e)

        return Response(
            {'message': 'Categoria atribuída com sucesso', 'result': result},
            status=status.HTTP_200_OK
        )


# =========================================================
# 2. ESTATÍSTICAS
# =========================================================

class TenantDailyStatsView(APIView):
    """
    Recalcula e devolve as estatísticas de chamados do tenant.

    Endpoint: GET /api/tenant/<tenant_id>/stats/

    Busca os status 1 a 4 no GLPI e sobrescreve o snapshot gravado.
    Com ?cached=true devolve o último snapshot sem consultar o GLPI
    (404 se nunca foi calculado).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, tenant_id):
        cached = request.query_params.get('cached', '').lower() in ('1', 'true', 'yes')

        try:
            tenant = get_tenant(tenant_id)
            if cached:
                stats = get_daily_stats(tenant)
                if stats is None:
                    return Response(
                        {'error': 'stats_not_found', 'message': 'Estatísticas ainda não calculadas'},
                        status=status.HTTP_404_NOT_FOUND
                    )
            else:
                stats = refresh_daily_stats(tenant)
        except (TenantNotFoundException, GlpiApiException, GlpiConfigurationException, ValueError) as e:
            return _error_response(e)

        return Response(DailyStatsSerializer(stats).data, status=status.HTTP_200_OK)


# =========================================================
# 3. ATRIBUIÇÃO AUTOMÁTICA
# =========================================================

class TenantAutoAssignView(APIView):
    """
    Executa a atribuição automática dos chamados novos do tenant.

    Endpoint: POST /api/tenant/<tenant_id>/tickets/auto-assign/

    Retorna 400 se a atribuição automática estiver desabilitada no tenant.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, tenant_id):
        try:
            tenant = get_tenant(tenant_id)
            result = auto_assign_tickets(tenant)
        except (
            TenantNotFoundException,
            AutomationDisabledException,
            GlpiApiException,
            GlpiConfigurationException,
            ValueError,
        ) as e:
            return _error_response(e)

        return Response(
            {
                'message': 'Atribuição automática executada',
                'total_atribuidos': len(result['atribuidos']),
                'atribuidos': result['atribuidos'],
                'falhas': result['falhas'],
            },
            status=status.HTTP_200_OK
        )


# =========================================================
# 4. PROXIES DO GLPI (credenciais de sistema)
# =========================================================

class GlpiTechnicianListView(APIView):
    """
    Lista os usuários com perfil técnico no GLPI.

    Endpoint: GET /api/glpi/tecnicos/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            technicians = GlpiClient().fetch_technicians()
        except (GlpiApiException, GlpiConfigurationException, ValueError) as e:
            return _error_response(e)
        return Response(technicians, status=status.HTTP_200_OK)


class GlpiCategoryListView(APIView):
    """
    Lista as categorias ITIL (competências) do GLPI.

    Endpoint: GET /api/glpi/categorias/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            categories = GlpiClient().fetch_categories()
        except (GlpiApiException, GlpiConfigurationException, ValueError) as e:
            return _error_response(e)
        return Response(categories, status=status.HTTP_200_OK)


class GlpiEntityListView(APIView):
    """
    Lista as entidades do GLPI.

    Endpoint: GET /api/glpi/entidades/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            entities = GlpiClient().fetch_entities()
        except (GlpiApiException, GlpiConfigurationException, ValueError) as e:
            return _error_response(e)
        return Response(entities, status=status.HTTP_200_OK)
