"""
Parser das respostas de search/Ticket do GLPI.

Cada busca devolve duas visões do mesmo resultado, indexadas pelo ID do
chamado: `data` (valores brutos) e `data_html` (colunas renderizadas em
HTML). Este módulo mescla as duas visões em um chamado normalizado e junta
os resultados das várias buscas (uma por status).
"""
import logging
from typing import Any, Dict, Iterable, List

from ..constants import TicketField, DEFAULT_CATEGORY, UNASSIGNED_TECHNICIAN
from ..utils import sanitize, extract_contact_info

logger = logging.getLogger(__name__)


def _pick(row: Dict, row_html: Dict, field: TicketField) -> Any:
    """Valor HTML do campo quando existir; senão o valor bruto."""
    return row_html.get(field.key) or row.get(field.key)


def normalize_ticket(ticket_id: str, row: Dict, row_html: Dict) -> Dict:
    """
    Converte uma linha da busca em chamado normalizado.

    Args:
        ticket_id: Chave da linha na resposta (ID do chamado em texto)
        row: Linha da visão `data`
        row_html: Linha da visão `data_html` (pode ser vazia)

    Returns:
        dict: Chamado pronto para exibição
    """
    status = row.get(TicketField.STATUS.key)
    requester = extract_contact_info(_pick(row, row_html, TicketField.REQUESTER))
    technician = extract_contact_info(_pick(row, row_html, TicketField.TECHNICIAN))
    status_name = row_html.get(TicketField.STATUS.key) or f"Status {status}"

    return {
        'id': row.get(TicketField.ID.key) or int(ticket_id),
        'requerente_nome': requester['nome'],
        'requerente_email': requester['email'],
        'requerente_tel': requester['telefone'],
        'titulo': sanitize(_pick(row, row_html, TicketField.TITLE)),
        'categoria': sanitize(_pick(row, row_html, TicketField.CATEGORY)) or DEFAULT_CATEGORY,
        'urgencia': row.get(TicketField.URGENCY.key) or 0,
        'descricao_inicial': sanitize(_pick(row, row_html, TicketField.DESCRIPTION)),
        'status': status,
        'status_name': sanitize(status_name),
        'data_abertura': row.get(TicketField.OPEN_DATE.key),
        'entidade': row.get(TicketField.ENTITY.key),
        'tecnico_atribuido': technician['nome'] or UNASSIGNED_TECHNICIAN,
    }


def normalize_tickets(responses: Iterable[Dict]) -> List[Dict]:
    """
    Mescla as respostas de várias buscas em uma lista de chamados.

    A ordem de saída é a ordem das buscas e, dentro de cada busca, a ordem
    das chaves devolvida pelo GLPI. Chaves não numéricas (metadados) são
    ignoradas. Um ID que aparece em mais de uma busca é mantido apenas na
    primeira ocorrência.

    Args:
        responses: Respostas da busca, cada uma com `data` e `data_html`

    Returns:
        list: Chamados normalizados
    """
    tickets = []
    seen_ids = set()

    for response in responses:
        data = response.get('data') or {}
        data_html = response.get('data_html') or {}
        if not isinstance(data, dict):
            continue
        if not isinstance(data_html, dict):
            data_html = {}

        for ticket_id, row in data.items():
            if not str(ticket_id).isdigit() or not isinstance(row, dict):
                continue

            ticket = normalize_ticket(str(ticket_id), row, data_html.get(ticket_id) or {})
            if ticket['id'] in seen_ids:
                logger.warning(f"Chamado {ticket['id']} retornado em mais de uma busca; mantendo a primeira ocorrência")
                continue

            seen_ids.add(ticket['id'])
            tickets.append(ticket)

    return tickets
