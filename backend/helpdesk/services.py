"""
Serviços de chamados por tenant.

Este módulo orquestra o fluxo principal:
- Sessão no GLPI com as credenciais do tenant
- Uma busca por status, mesclada em chamados normalizados
- Estatísticas por status (snapshot gravado no tenant)
- Atribuição de técnico/categoria e atribuição automática
"""
import logging
from datetime import timedelta
from typing import Dict, Iterable, List, Optional

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from tenants.models import Tenant, TechnicianSkill
from tenants.services import save_daily_stats

from .clients.glpi_client import GlpiClient
from .constants import STATS_BUCKETS, TRACKED_STATUSES, TicketStatus, UNASSIGNED_TECHNICIAN
from .exceptions import AutomationDisabledException, GlpiApiException
from .parsers.ticket_parser import normalize_tickets
from .search import parse_status_filter

logger = logging.getLogger(__name__)


def get_glpi_client(tenant: Tenant) -> GlpiClient:
    """
    Cria um cliente GLPI com as credenciais do tenant.

    Args:
        tenant: Tenant dono das credenciais

    Returns:
        GlpiClient: Cliente sem sessão aberta
    """
    config = tenant.glpi_config
    return GlpiClient(
        base_url=config.base_url,
        user=config.user_login,
        password=config.user_password,
        app_token=config.app_token,
        tenant_id=tenant.pk
    )


def resolve_statuses(tenant: Tenant, status_param: Optional[str] = None) -> List[int]:
    """
    Status a buscar: parâmetro da requisição, senão o filtro do tenant.

    Raises:
        ValueError: Se o filtro tiver códigos inválidos
    """
    return parse_status_filter(status_param, default=tenant.status_filter)


def fetch_tickets(tenant: Tenant, statuses: Iterable[int]) -> List[Dict]:
    """
    Busca e normaliza os chamados do tenant nos status informados.

    Abre uma sessão e faz uma busca por status, na ordem recebida.

    Args:
        tenant: Tenant consultado
        statuses: Códigos de status

    Returns:
        list: Chamados normalizados (ordem das buscas, depois ordem do GLPI)

    Raises:
        GlpiAuthException: Se a sessão não puder ser aberta
        GlpiApiException: Se alguma busca falhar
    """
    statuses = list(statuses)
    client = get_glpi_client(tenant)
    client.get_session_token()

    responses = []
    for status_value in statuses:
        response = client.search_tickets(status_value)
        if response['data']:
            responses.append(response)

    tickets = normalize_tickets(responses)
    logger.info(f"Tenant {tenant.pk}: {len(tickets)} chamados nos status {statuses}")
    return tickets


def aggregate_daily_stats(tickets: List[Dict]) -> Dict[str, int]:
    """
    Conta os chamados por status.

    O total é o tamanho da lista; chamados com outros status entram no
    total sem contar em nenhum grupo.

    Args:
        tickets: Chamados normalizados

    Returns:
        dict: chamados_disponiveis, chamados_atribuidos, chamados_planejados,
              chamados_pendentes e total
    """
    stats = {
        bucket: sum(1 for ticket in tickets if ticket.get('status') == status_code)
        for bucket, status_code in STATS_BUCKETS.items()
    }
    stats['total'] = len(tickets)
    return stats


def refresh_daily_stats(tenant: Tenant) -> Dict:
    """
    Recalcula as estatísticas do tenant e sobrescreve o snapshot gravado.

    Returns:
        dict: Estatísticas com o timestamp do cálculo em 'data'
    """
    tickets = fetch_tickets(tenant, [int(status) for status in TRACKED_STATUSES])
    stats = aggregate_daily_stats(tickets)
    return save_daily_stats(tenant, stats).as_dict()


def assign_ticket(tenant: Tenant, ticket_id: int, technician_id: int):
    """Atribui um técnico ao chamado. Não recarrega o chamado."""
    return get_glpi_client(tenant).assign_ticket(ticket_id, technician_id)


def assign_category(tenant: Tenant, ticket_id: int, category_id: int):
    """Altera a categoria do chamado. Não recarrega o chamado."""
    return get_glpi_client(tenant).assign_category(ticket_id, category_id)


# =========================================================
# ATRIBUIÇÃO AUTOMÁTICA
# =========================================================

def _opened_at(ticket: Dict):
    value = ticket.get('data_abertura')
    if not value:
        return None
    try:
        opened_at = parse_datetime(str(value))
    except ValueError:
        return None
    if opened_at is not None and timezone.is_naive(opened_at):
        opened_at = timezone.make_aware(opened_at)
    return opened_at


def is_ticket_eligible(ticket: Dict, tenant: Tenant, now=None) -> bool:
    """
    Verifica se um chamado novo pode ser atribuído automaticamente.

    Chamados de urgência 5 e 4 aguardam tempo_urg_prio_5/tempo_urg_prio_4
    minutos desde a abertura, dando à equipe a chance de assumi-los; as
    demais urgências são elegíveis de imediato.

    Args:
        ticket: Chamado normalizado
        tenant: Tenant com as regras de automação
        now: Momento de referência (padrão: agora)

    Returns:
        bool: True se o chamado deve ser atribuído agora
    """
    if ticket.get('tecnico_atribuido') != UNASSIGNED_TECHNICIAN:
        return False

    try:
        urgency = int(ticket.get('urgencia') or 0)
    except (TypeError, ValueError):
        urgency = 0

    wait_minutes = {
        5: tenant.tempo_urg_prio_5,
        4: tenant.tempo_urg_prio_4,
    }.get(urgency)
    if not wait_minutes:
        return True

    opened_at = _opened_at(ticket)
    if opened_at is None:
        return False

    now = now or timezone.now()
    return now - opened_at >= timedelta(minutes=wait_minutes)


def _skills_by_category(tenant: Tenant) -> Dict[str, List[int]]:
    skills = {}
    for skill in TechnicianSkill.objects.filter(tenant=tenant).order_by('technician_id'):
        skills.setdefault(skill.category_name, []).append(skill.technician_id)
    return skills


def auto_assign_tickets(tenant: Tenant) -> Dict[str, List[Dict]]:
    """
    Atribui chamados novos a técnicos com competência na categoria.

    Entre os técnicos aptos, escolhe o que recebeu menos chamados nesta
    execução (empate: menor ID). Cada atribuição é feita uma única vez;
    falhas são registradas e a execução segue para o próximo chamado.

    Args:
        tenant: Tenant com atribuição automática habilitada

    Returns:
        dict: {'atribuidos': [...], 'falhas': [...]}

    Raises:
        AutomationDisabledException: Se a atribuição automática estiver desabilitada
        GlpiAuthException: Se a sessão não puder ser aberta
        GlpiApiException: Se a busca de chamados falhar
    """
    if not tenant.auto_assign_enabled:
        raise AutomationDisabledException("Atribuição automática desabilitada")

    skills = _skills_by_category(tenant)
    client = get_glpi_client(tenant)
    client.get_session_token()

    response = client.search_tickets(int(TicketStatus.NEW))
    tickets = normalize_tickets([response])

    now = timezone.now()
    load = {}
    assigned = []
    failures = []

    for ticket in tickets:
        if not is_ticket_eligible(ticket, tenant, now=now):
            continue

        candidates = skills.get(ticket['categoria'])
        if not candidates:
            continue

        technician_id = min(candidates, key=lambda tech_id: (load.get(tech_id, 0), tech_id))
        try:
            client.assign_ticket(ticket['id'], technician_id)
        except GlpiApiException as e:
            failures.append({
                'ticket_id': ticket['id'],
                'error': e.message,
                'details': e.payload,
            })
            continue

        load[technician_id] = load.get(technician_id, 0) + 1
        assigned.append({
            'ticket_id': ticket['id'],
            'tecnico_id': technician_id,
            'categoria': ticket['categoria'],
        })

    logger.info(
        f"Atribuição automática do tenant {tenant.pk}: "
        f"{len(assigned)} atribuídos, {len(failures)} falhas"
    )
    return {'atribuidos': assigned, 'falhas': failures}
