"""
Parsers para processamento de respostas da API do GLPI.

Este módulo contém parsers para:
- Chamados: mescla das visões `data`/`data_html` da busca em chamados normalizados
"""
