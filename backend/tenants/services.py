"""
Serviços de persistência dos tenants.

Ponto único de leitura do tenant e de gravação do snapshot de estatísticas.
"""
import logging
from typing import Dict, Optional
from django.utils import timezone

from .models import Tenant, DailyStats
from .exceptions import TenantNotFoundException

logger = logging.getLogger(__name__)

STATS_FIELDS = (
    'chamados_disponiveis',
    'chamados_atribuidos',
    'chamados_planejados',
    'chamados_pendentes',
    'total',
)


def get_tenant(tenant_id) -> Tenant:
    """
    Busca um tenant ativo pelo ID.

    Args:
        tenant_id: ID do tenant

    Returns:
        Tenant: Tenant encontrado

    Raises:
        TenantNotFoundException: Se o tenant não existir ou estiver inativo
    """
    tenant = Tenant.objects.filter(pk=tenant_id, ativo=True).first()
    if tenant is None:
        raise TenantNotFoundException(tenant_id)
    return tenant


def save_daily_stats(tenant: Tenant, stats: Dict) -> DailyStats:
    """
    Sobrescreve o snapshot de estatísticas do tenant com um novo timestamp.

    Args:
        tenant: Tenant dono das estatísticas
        stats: Dicionário com as contagens (chamados_* e total)

    Returns:
        DailyStats: Snapshot gravado
    """
    defaults = {field: stats.get(field, 0) for field in STATS_FIELDS}
    defaults['data'] = timezone.now()

    daily_stats, _ = DailyStats.objects.update_or_create(
        tenant=tenant,
        defaults=defaults
    )
    logger.info(f"Estatísticas do tenant {tenant.pk} atualizadas (total={daily_stats.total})")
    return daily_stats


def get_daily_stats(tenant: Tenant) -> Optional[Dict]:
    """
    Retorna o último snapshot de estatísticas do tenant, sem recalcular.

    Returns:
        Optional[Dict]: Snapshot ou None se nunca foi calculado
    """
    daily_stats = DailyStats.objects.filter(tenant=tenant).first()
    if daily_stats is None:
        return None
    return daily_stats.as_dict()
