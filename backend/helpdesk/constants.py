"""
Constantes e configurações do sistema.

Centraliza o esquema numérico de campos da busca do GLPI, os códigos de
status e os valores padrão usados na normalização dos chamados.
"""
from enum import IntEnum
from django.db import models


class TicketField(IntEnum):
    """
    IDs de campo do endpoint search/Ticket do GLPI.

    Única tabela de tradução entre o esquema numérico do GLPI e os nomes
    usados no projeto.
    """
    TITLE = 1
    ID = 2
    URGENCY = 3
    REQUESTER = 4
    TECHNICIAN = 5
    CATEGORY = 7
    STATUS = 12
    OPEN_DATE = 15
    DESCRIPTION = 21
    IS_DELETED = 23
    ENTITY = 80

    @property
    def key(self) -> str:
        """Chave usada nas linhas da resposta (`data`/`data_html`)."""
        return str(self.value)


class UserField(IntEnum):
    """IDs de campo do endpoint search/User do GLPI."""
    LOGIN = 1
    ID = 2
    EMAIL = 5
    FIRST_NAME = 9
    PROFILE = 20
    LAST_NAME = 34
    ENTITY = 80

    @property
    def key(self) -> str:
        return str(self.value)


class TicketStatus(models.IntegerChoices):
    NEW = 1, 'Novo'
    ASSIGNED = 2, 'Em atendimento (atribuído)'
    PLANNED = 3, 'Em atendimento (planejado)'
    PENDING = 4, 'Pendente'


# Colunas pedidas via forcedisplay (entradas do normalizador)
TICKET_DISPLAY_FIELDS = [
    TicketField.TITLE,
    TicketField.ID,
    TicketField.CATEGORY,
    TicketField.OPEN_DATE,
    TicketField.ENTITY,
    TicketField.TECHNICIAN,
    TicketField.URGENCY,
    TicketField.DESCRIPTION,
    TicketField.REQUESTER,
    TicketField.STATUS,
]

# '10' no filtro de status significa todos os status acompanhados
ALL_STATUSES_FILTER = '10'
TRACKED_STATUSES = [
    TicketStatus.NEW,
    TicketStatus.ASSIGNED,
    TicketStatus.PLANNED,
    TicketStatus.PENDING,
]

# Contadores do snapshot diário por código de status
STATS_BUCKETS = {
    'chamados_disponiveis': TicketStatus.NEW,
    'chamados_atribuidos': TicketStatus.ASSIGNED,
    'chamados_planejados': TicketStatus.PLANNED,
    'chamados_pendentes': TicketStatus.PENDING,
}

# Valores padrão na normalização
DEFAULT_CATEGORY = 'Sem Categoria'
UNASSIGNED_TECHNICIAN = 'Não atribuído'

# Ticket_User.type = 2 (atribuído para)
TICKET_USER_TYPE_ASSIGNED = 2

# Perfil "Técnico" no GLPI (search/User)
TECHNICIAN_PROFILE_ID = 6
TECHNICIAN_SEARCH_RANGE = '0-500'
DROPDOWN_RANGE = '0-999'

# Prefixo da chave de cache do session_token por tenant
SESSION_CACHE_PREFIX = 'glpi-session'
