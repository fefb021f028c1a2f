"""
Constantes do app tenants.

Valores padrão da configuração de automação de cada tenant.
"""

# Filtro de status padrão ('10' = todos os status acompanhados)
DEFAULT_STATUS_FILTER = '10'

# Janela (em minutos) antes da atribuição automática por urgência
DEFAULT_TEMPO_URG_PRIO_5 = 10
DEFAULT_TEMPO_URG_PRIO_4 = 30

# Quantidade de caracteres exibidos ao mascarar credenciais
MASK_VISIBLE_CHARS = 4
