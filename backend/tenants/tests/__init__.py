"""
Testes do app tenants.

Módulos:
- test_models: credenciais GLPI, mascaramento e configuração de automação
- test_services: leitura do tenant e snapshot de estatísticas
"""
