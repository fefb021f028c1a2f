"""
Testes unitários para os serviços de tenants.

Testa:
- get_tenant(): tenant ativo, inativo e inexistente
- save_daily_stats(): gravação e sobrescrita do snapshot
- get_daily_stats(): leitura sem recálculo
"""
from django.test import TestCase

from tenants.exceptions import TenantNotFoundException
from tenants.models import Tenant, DailyStats
from tenants.services import get_tenant, save_daily_stats, get_daily_stats


class GetTenantTest(TestCase):
    """Testes para get_tenant."""

    def setUp(self):
        self.tenant = Tenant.objects.create(
            nome='Empresa Exemplo',
            slug='empresa-exemplo',
            glpi_url='https://glpi.exemplo.com/apirest.php',
            glpi_app_token='app-token',
            glpi_user_login='integracao',
            glpi_user_password='senha'
        )

    def test_active_tenant(self):
        self.assertEqual(get_tenant(self.tenant.pk), self.tenant)

    def test_inactive_tenant(self):
        """Tenant inativo é tratado como inexistente."""
        self.tenant.ativo = False
        self.tenant.save()

        with self.assertRaises(TenantNotFoundException):
            get_tenant(self.tenant.pk)

    def test_missing_tenant(self):
        with self.assertRaises(TenantNotFoundException) as context:
            get_tenant(9999)

        self.assertEqual(context.exception.tenant_id, 9999)
        self.assertEqual(context.exception.message, 'Tenant não encontrado')


class DailyStatsServiceTest(TestCase):
    """Testes para save_daily_stats e get_daily_stats."""

    def setUp(self):
        self.tenant = Tenant.objects.create(
            nome='Empresa Exemplo',
            slug='empresa-exemplo',
            glpi_url='https://glpi.exemplo.com/apirest.php',
            glpi_app_token='app-token',
            glpi_user_login='integracao',
            glpi_user_password='senha'
        )
        self.stats = {
            'chamados_disponiveis': 3,
            'chamados_atribuidos': 2,
            'chamados_planejados': 1,
            'chamados_pendentes': 3,
            'total': 10,
        }

    def test_no_snapshot_yet(self):
        self.assertIsNone(get_daily_stats(self.tenant))

    def test_save_and_read(self):
        # Act
        saved = save_daily_stats(self.tenant, self.stats)
        result = get_daily_stats(self.tenant)

        # Assert
        self.assertEqual(result['total'], 10)
        self.assertEqual(result['chamados_pendentes'], 3)
        self.assertEqual(result['data'], saved.data)

    def test_save_overwrites_previous_snapshot(self):
        """Cada gravação substitui o snapshot anterior, com novo timestamp."""
        # Arrange
        first = save_daily_stats(self.tenant, self.stats)

        # Act
        second = save_daily_stats(self.tenant, {'chamados_disponiveis': 1, 'total': 1})

        # Assert
        self.assertEqual(DailyStats.objects.filter(tenant=self.tenant).count(), 1)
        self.assertGreaterEqual(second.data, first.data)
        result = get_daily_stats(self.tenant)
        self.assertEqual(result['total'], 1)
        self.assertEqual(result['chamados_atribuidos'], 0)
