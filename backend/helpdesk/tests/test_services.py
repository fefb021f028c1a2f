"""
Testes unitários para os serviços de chamados por tenant.

Testa:
- fetch_tickets(): uma sessão, uma busca por status e normalização
- aggregate_daily_stats() / refresh_daily_stats()
- is_ticket_eligible(): janelas de espera por urgência
- auto_assign_tickets(): competências, balanceamento e coleta de falhas
"""
from datetime import datetime, timedelta
from unittest.mock import patch
from urllib.parse import urlparse, parse_qsl

from django.test import TestCase
from django.utils import timezone

from tenants.models import DailyStats, TechnicianSkill
from helpdesk.constants import UNASSIGNED_TECHNICIAN
from helpdesk.exceptions import AutomationDisabledException, GlpiAuthException
from helpdesk.services import (
    aggregate_daily_stats,
    auto_assign_tickets,
    fetch_tickets,
    is_ticket_eligible,
    refresh_daily_stats,
)
from helpdesk.tests.helpers import (
    make_response,
    auth_response,
    search_response,
    create_tenant,
)


def _status_of(url):
    """Extrai o status pedido (critério 1) de uma URL de busca."""
    return int(dict(parse_qsl(urlparse(url).query))['criteria[1][value]'])


def _opened_minutes_ago(minutes):
    return (timezone.localtime() - timedelta(minutes=minutes)).strftime('%Y-%m-%d %H:%M:%S')


class FetchTicketsTest(TestCase):
    """Testes para fetch_tickets."""

    def setUp(self):
        self.tenant = create_tenant()

    @patch('helpdesk.clients.glpi_client.requests.get')
    @patch('helpdesk.clients.glpi_client.requests.post')
    def test_one_session_and_one_search_per_status(self, mock_post, mock_get):
        """Abre uma sessão e busca cada status na ordem pedida."""
        # Arrange
        mock_post.return_value = auth_response()
        pages = {
            1: search_response({'5': {'2': 5, '12': 1}, '9': {'2': 9, '12': 1}}),
            2: search_response({'7': {'2': 7, '12': 2}}),
        }
        mock_get.side_effect = lambda url, **kwargs: pages[_status_of(url)]

        # Act
        tickets = fetch_tickets(self.tenant, [1, 2])

        # Assert
        self.assertEqual(mock_post.call_count, 1)
        self.assertEqual(mock_get.call_count, 2)
        self.assertEqual([t['id'] for t in tickets], [5, 9, 7])
        self.assertEqual([t['status'] for t in tickets], [1, 1, 2])

    @patch('helpdesk.clients.glpi_client.requests.post')
    def test_uses_tenant_credentials(self, mock_post):
        """initSession usa a URL, o login e o App-Token do tenant."""
        mock_post.return_value = make_response(401, ['ERROR_GLPI_LOGIN', 'negado'])

        with self.assertRaises(GlpiAuthException):
            fetch_tickets(self.tenant, [1])

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://glpi.exemplo.com/apirest.php/initSession')
        self.assertEqual(kwargs['json']['login'], 'integracao')
        self.assertEqual(kwargs['headers']['App-Token'], 'app-token-tenant')

    @patch('helpdesk.clients.glpi_client.requests.get')
    @patch('helpdesk.clients.glpi_client.requests.post')
    def test_status_without_results(self, mock_post, mock_get):
        """Status sem chamados não gera registros."""
        mock_post.return_value = auth_response()
        mock_get.return_value = make_response(200, {'totalcount': 0, 'data': []})

        self.assertEqual(fetch_tickets(self.tenant, [3, 4]), [])


class DailyStatsTest(TestCase):
    """Testes das estatísticas por status."""

    def test_aggregate_counts_per_status(self):
        """Conta cada status; status desconhecidos entram só no total."""
        tickets = [{'status': s} for s in [1, 1, 2, 3, 4, 4, 4, 99, 1, 2]]

        stats = aggregate_daily_stats(tickets)

        self.assertEqual(stats, {
            'chamados_disponiveis': 3,
            'chamados_atribuidos': 2,
            'chamados_planejados': 1,
            'chamados_pendentes': 3,
            'total': 10,
        })

    def test_aggregate_empty(self):
        stats = aggregate_daily_stats([])

        self.assertEqual(stats['total'], 0)
        self.assertEqual(stats['chamados_disponiveis'], 0)

    @patch('helpdesk.clients.glpi_client.requests.get')
    @patch('helpdesk.clients.glpi_client.requests.post')
    def test_refresh_persists_snapshot(self, mock_post, mock_get):
        """O recálculo busca os status 1 a 4 e grava o snapshot do tenant."""
        # Arrange
        tenant = create_tenant(status_filter='1')
        mock_post.return_value = auth_response()
        pages = {
            1: search_response({'1': {'2': 1, '12': 1}}),
            2: search_response({'2': {'2': 2, '12': 2}, '3': {'2': 3, '12': 2}}),
            3: search_response({}),
            4: search_response({'4': {'2': 4, '12': 4}}),
        }
        mock_get.side_effect = lambda url, **kwargs: pages[_status_of(url)]

        # Act
        stats = refresh_daily_stats(tenant)

        # Assert
        self.assertEqual(mock_get.call_count, 4)
        self.assertEqual(stats['chamados_disponiveis'], 1)
        self.assertEqual(stats['chamados_atribuidos'], 2)
        self.assertEqual(stats['chamados_planejados'], 0)
        self.assertEqual(stats['chamados_pendentes'], 1)
        self.assertEqual(stats['total'], 4)
        saved = DailyStats.objects.get(tenant=tenant)
        self.assertEqual(saved.total, 4)
        self.assertEqual(saved.data, stats['data'])


class TicketEligibilityTest(TestCase):
    """Testes para is_ticket_eligible."""

    def setUp(self):
        self.tenant = create_tenant(tempo_urg_prio_5=10, tempo_urg_prio_4=30)
        self.now = timezone.make_aware(datetime(2024, 5, 10, 12, 0, 0))

    def _ticket(self, urgency, opened, technician=UNASSIGNED_TECHNICIAN):
        return {
            'urgencia': urgency,
            'data_abertura': opened,
            'tecnico_atribuido': technician,
        }

    def test_assigned_ticket_is_not_eligible(self):
        ticket = self._ticket(3, '2024-05-10 08:00:00', technician='Bruno')

        self.assertFalse(is_ticket_eligible(ticket, self.tenant, now=self.now))

    def test_regular_urgency_is_eligible_immediately(self):
        ticket = self._ticket(3, '2024-05-10 11:59:00')

        self.assertTrue(is_ticket_eligible(ticket, self.tenant, now=self.now))

    def test_urgency_5_waits_its_window(self):
        """Urgência 5 só é elegível depois de tempo_urg_prio_5 minutos."""
        self.assertFalse(is_ticket_eligible(
            self._ticket(5, '2024-05-10 11:55:00'), self.tenant, now=self.now
        ))
        self.assertTrue(is_ticket_eligible(
            self._ticket(5, '2024-05-10 11:50:00'), self.tenant, now=self.now
        ))

    def test_urgency_4_waits_its_window(self):
        """Urgência 4 só é elegível depois de tempo_urg_prio_4 minutos."""
        self.assertFalse(is_ticket_eligible(
            self._ticket(4, '2024-05-10 11:45:00'), self.tenant, now=self.now
        ))
        self.assertTrue(is_ticket_eligible(
            self._ticket(4, '2024-05-10 11:30:00'), self.tenant, now=self.now
        ))

    def test_urgent_ticket_without_open_date_waits(self):
        self.assertFalse(is_ticket_eligible(self._ticket(5, None), self.tenant, now=self.now))


@patch('helpdesk.clients.glpi_client.requests.get')
@patch('helpdesk.clients.glpi_client.requests.post')
class AutoAssignTicketsTest(TestCase):
    """Testes para auto_assign_tickets."""

    def setUp(self):
        self.tenant = create_tenant()
        for technician_id in (30, 20):
            TechnicianSkill.objects.create(
                tenant=self.tenant,
                technician_id=technician_id,
                technician_name=f"Técnico {technician_id}",
                category_name='TI > Rede'
            )
        self.assigned_calls = []

    def _post(self, failing_tickets=()):
        """Simula initSession e a criação de Ticket_User."""
        def side_effect(url, **kwargs):
            if url.endswith('/initSession'):
                return auth_response()
            ticket_id = kwargs['json']['input']['tickets_id']
            self.assigned_calls.append(ticket_id)
            if ticket_id in failing_tickets:
                return make_response(400, ['ERROR_GLPI_ADD', 'Usuário já atribuído'])
            return make_response(201, {'id': ticket_id})
        return side_effect

    def _row(self, ticket_id, category='TI > Rede', urgency=3, opened_minutes=0):
        return {
            '2': ticket_id,
            '3': urgency,
            '7': category,
            '12': 1,
            '15': _opened_minutes_ago(opened_minutes),
        }

    def test_disabled_tenant_makes_no_calls(self, mock_post, mock_get):
        """Com a automação desabilitada, falha antes de chamar o GLPI."""
        self.tenant.auto_assign_enabled = False
        self.tenant.save()

        with self.assertRaises(AutomationDisabledException):
            auto_assign_tickets(self.tenant)

        mock_post.assert_not_called()
        mock_get.assert_not_called()

    def test_balances_between_skilled_technicians(self, mock_post, mock_get):
        """Distribui entre técnicos aptos: menor carga, depois menor ID."""
        # Arrange
        mock_post.side_effect = self._post()
        mock_get.return_value = search_response({
            '1': self._row(1),
            '2': self._row(2),
            '3': self._row(3),
            '4': self._row(4, category='Financeiro'),
        })

        # Act
        result = auto_assign_tickets(self.tenant)

        # Assert
        self.assertEqual(result['falhas'], [])
        self.assertEqual(
            [(item['ticket_id'], item['tecnico_id']) for item in result['atribuidos']],
            [(1, 20), (2, 30), (3, 20)]
        )
        self.assertEqual(self.assigned_calls, [1, 2, 3])
        self.assertEqual(_status_of(mock_get.call_args.args[0]), 1)

    def test_skips_tickets_already_assigned_or_waiting(self, mock_post, mock_get):
        """Ignora chamados com técnico e urgentes dentro da janela de espera."""
        # Arrange
        mock_post.side_effect = self._post()
        mock_get.return_value = search_response(
            {
                '1': self._row(1),
                '2': self._row(2, urgency=5, opened_minutes=2),
                '3': self._row(3, urgency=5, opened_minutes=60),
            },
            {'1': {'5': 'Bruno Técnico'}}
        )

        # Act
        result = auto_assign_tickets(self.tenant)

        # Assert
        self.assertEqual([item['ticket_id'] for item in result['atribuidos']], [3])

    def test_failures_are_collected_and_not_retried(self, mock_post, mock_get):
        """Uma atribuição recusada entra em falhas e a execução continua."""
        # Arrange
        mock_post.side_effect = self._post(failing_tickets=(1,))
        mock_get.return_value = search_response({
            '1': self._row(1),
            '2': self._row(2),
        })

        # Act
        result = auto_assign_tickets(self.tenant)

        # Assert
        self.assertEqual(self.assigned_calls, [1, 2])
        self.assertEqual(len(result['falhas']), 1)
        self.assertEqual(result['falhas'][0]['ticket_id'], 1)
        self.assertEqual(result['falhas'][0]['details'], ['ERROR_GLPI_ADD', 'Usuário já atribuído'])
        self.assertEqual(result['atribuidos'], [{'ticket_id': 2, 'tecnico_id': 20, 'categoria': 'TI > Rede'}])
