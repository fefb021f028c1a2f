"""
Testes unitários para os modelos de tenants.
"""
from django.db import IntegrityError
from django.test import TestCase, SimpleTestCase

from tenants.models import Tenant, TechnicianSkill, TenantGlpiConfig, mask_secret


def _create_tenant(**kwargs):
    defaults = {
        'nome': 'Empresa Exemplo',
        'slug': 'empresa-exemplo',
        'glpi_url': 'https://glpi.exemplo.com/apirest.php',
        'glpi_app_token': 'app-token-tenant',
        'glpi_user_login': 'integracao',
        'glpi_user_password': 'senha-secreta',
    }
    defaults.update(kwargs)
    return Tenant.objects.create(**defaults)


class MaskSecretTest(SimpleTestCase):

    def test_keeps_only_prefix(self):
        self.assertEqual(mask_secret('abcdefgh'), 'abcd***')

    def test_empty_value(self):
        self.assertEqual(mask_secret(''), '')
        self.assertEqual(mask_secret(None), '')


class TenantGlpiConfigTest(SimpleTestCase):

    def test_repr_hides_credentials(self):
        """A representação nunca expõe senha nem o token completo."""
        config = TenantGlpiConfig(
            base_url='https://glpi.exemplo.com/apirest.php',
            app_token='token-muito-secreto',
            user_login='integracao',
            user_password='senha-secreta'
        )

        text = repr(config)

        self.assertNotIn('senha-secreta', text)
        self.assertNotIn('token-muito-secreto', text)
        self.assertIn('toke***', text)
        self.assertIn('integracao', text)


class TenantModelTest(TestCase):
    """Testes para o modelo Tenant."""

    def test_defaults(self):
        tenant = _create_tenant()

        self.assertTrue(tenant.ativo)
        self.assertEqual(tenant.status_filter, '10')
        self.assertEqual(tenant.tempo_urg_prio_5, 10)
        self.assertEqual(tenant.tempo_urg_prio_4, 30)
        self.assertEqual(str(tenant), 'Empresa Exemplo')

    def test_glpi_config(self):
        tenant = _create_tenant()

        config = tenant.glpi_config

        self.assertEqual(config.base_url, 'https://glpi.exemplo.com/apirest.php')
        self.assertEqual(config.app_token, 'app-token-tenant')
        self.assertEqual(config.user_login, 'integracao')
        self.assertEqual(config.user_password, 'senha-secreta')

    def test_automation_config(self):
        tenant = _create_tenant(status_filter='1,2', auto_assign_enabled=False, tempo_urg_prio_4=45)

        self.assertEqual(tenant.automation_config, {
            'status_filter': '1,2',
            'auto_assign_enabled': False,
            'auto_categorize_enabled': True,
            'assign_rules': {
                'tempo_urg_prio_5': 10,
                'tempo_urg_prio_4': 45,
            },
        })

    def test_auto_categorize_is_reserved_flag(self):
        """A flag de categorização automática é só guardada e exposta."""
        tenant = _create_tenant(auto_categorize_enabled=False)
        field = Tenant._meta.get_field('auto_categorize_enabled')

        self.assertIn('Reservado', field.help_text)
        self.assertFalse(tenant.automation_config['auto_categorize_enabled'])

    def test_skill_is_unique_per_technician_and_category(self):
        tenant = _create_tenant()
        TechnicianSkill.objects.create(tenant=tenant, technician_id=20, category_name='TI > Rede')

        with self.assertRaises(IntegrityError):
            TechnicianSkill.objects.create(tenant=tenant, technician_id=20, category_name='TI > Rede')
