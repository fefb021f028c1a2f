"""
Auxiliares compartilhados pelos testes do app helpdesk.
"""
import json
import requests

from tenants.models import Tenant


def make_response(status_code, payload=None, text=None):
    """
    Cria um requests.Response real com corpo JSON (ou texto).

    Args:
        status_code: Status HTTP
        payload: Corpo serializado como JSON
        text: Corpo em texto puro (ignorado se payload for informado)

    Returns:
        requests.Response: Resposta pronta para raise_for_status/json
    """
    response = requests.Response()
    response.status_code = status_code
    response.url = 'https://glpi.exemplo.com/apirest.php'
    if payload is not None:
        response._content = json.dumps(payload).encode('utf-8')
        response.headers['Content-Type'] = 'application/json'
    else:
        response._content = (text or '').encode('utf-8')
    return response


def auth_response(token='sessao-123'):
    return make_response(200, {'session_token': token})


def search_response(rows, rows_html=None, totalcount=None):
    """
    Resposta de search/Ticket no formato withindexes/giveItems.

    Args:
        rows: {id: linha} da visão data
        rows_html: {id: linha} da visão data_html
        totalcount: Total informado pelo GLPI (padrão: len(rows))
    """
    return make_response(200, {
        'totalcount': len(rows) if totalcount is None else totalcount,
        'count': len(rows),
        'data': rows,
        'data_html': rows_html or {},
    })


def create_tenant(**kwargs):
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
