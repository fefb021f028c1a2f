"""
Clients para integrações externas.

Este módulo contém o cliente da API REST do GLPI:
- Sessão (initSession) por tenant ou com credenciais de sistema
- Busca de chamados, técnicos, categorias e entidades
- Atribuição de técnico e categoria
"""
