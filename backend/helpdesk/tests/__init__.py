"""
Testes do app helpdesk.

Este diretório contém testes unitários formais (herdam de TestCase):
- test_utils.py - Limpeza de HTML e extração de contato
- test_search.py - Montagem da URL de busca e filtro de status
- test_ticket_parser.py - Normalização e mescla das respostas da busca
- test_glpi_client.py - Sessão, paginação, escrita e proxies do GLPI
- test_services.py - Estatísticas e atribuição automática
- test_views.py - Endpoints da API por tenant
"""
