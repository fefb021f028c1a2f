"""
Montagem das buscas no endpoint genérico search/Ticket do GLPI.

O GLPI não filtra com eficiência por "status IN (...)", então cada status
vira uma busca própria; este módulo monta a URL de cada uma delas e
interpreta o filtro de status recebido da API.
"""
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from .constants import (
    TicketField,
    TICKET_DISPLAY_FIELDS,
    ALL_STATUSES_FILTER,
    TRACKED_STATUSES,
)

# (campo, searchtype, valor)
FieldFilter = Tuple[int, str, object]


def build_search_url(
    base_url: str,
    status_value: int,
    field_filters: Optional[Iterable[FieldFilter]] = None,
    display_fields: Sequence[int] = TICKET_DISPLAY_FIELDS,
    range_start: int = 0,
    range_end: int = 9999,
) -> str:
    """
    Monta a URL de busca de chamados de um único status.

    Sempre exclui chamados na lixeira (campo 23 = 0) e combina com AND o
    critério de igualdade de status. Filtros extras entram em seguida,
    também com AND.

    Args:
        base_url: URL base da API (terminando em /apirest.php)
        status_value: Código de status buscado
        field_filters: Critérios extras (campo, searchtype, valor)
        display_fields: Colunas pedidas via forcedisplay
        range_start: Primeira linha da página
        range_end: Última linha da página (inclusiva)

    Returns:
        str: URL completa com a query string
    """
    criteria = [
        (TicketField.IS_DELETED, 'equals', 0),
        (TicketField.STATUS, 'equals', status_value),
    ]
    criteria.extend(field_filters or [])

    params = [
        ('range', f"{range_start}-{range_end}"),
        ('withindexes', 'true'),
        ('giveItems', 'true'),
    ]
    for index, field in enumerate(display_fields):
        params.append((f"forcedisplay[{index}]", int(field)))

    for index, (field, searchtype, value) in enumerate(criteria):
        if index > 0:
            params.append((f"criteria[{index}][link]", 'AND'))
        params.append((f"criteria[{index}][field]", int(field)))
        params.append((f"criteria[{index}][searchtype]", searchtype))
        params.append((f"criteria[{index}][value]", value))

    return f"{base_url.rstrip('/')}/search/Ticket?{urlencode(params)}"


def parse_status_filter(value: Optional[str], default: Optional[str] = None) -> List[int]:
    """
    Converte o filtro de status da API em lista de códigos.

    '10' (ou vazio) significa todos os status acompanhados (1, 2, 3, 4).
    Caso contrário aceita códigos separados por vírgula, mantendo a ordem
    e descartando repetições.

    Args:
        value: Filtro recebido (ex.: '1,2')
        default: Filtro padrão do tenant, usado quando value é vazio

    Returns:
        list: Códigos de status na ordem em que serão buscados

    Raises:
        ValueError: Se algum código não for inteiro
    """
    raw = (value or default or ALL_STATUSES_FILTER).strip()
    if raw == ALL_STATUSES_FILTER:
        return [int(status) for status in TRACKED_STATUSES]

    statuses = []
    for part in raw.split(','):
        part = part.strip()
        if not part:
            continue
        try:
            status = int(part)
        except ValueError:
            raise ValueError(f"Status inválido: {part}")
        if status not in statuses:
            statuses.append(status)

    if not statuses:
        return [int(status) for status in TRACKED_STATUSES]
    return statuses
