"""
Serializers para validação e serialização de dados da API.

Este módulo contém os serializers usados para:
- Validação das requisições de atribuição de técnico e categoria
- Formato de saída dos chamados normalizados e das estatísticas
"""
from rest_framework import serializers


# =========================================================
# 1. ENTRADAS
# =========================================================

class TicketAssignSerializer(serializers.Serializer):
    """
    Valida a atribuição de um técnico a um chamado.
    """
    ticket_id = serializers.IntegerField(min_value=1, help_text="ID do chamado no GLPI")
    user_id = serializers.IntegerField(min_value=1, help_text="ID do técnico (usuário) no GLPI")


class TicketCategorySerializer(serializers.Serializer):
    """
    Valida a troca de categoria de um chamado.
    """
    ticket_id = serializers.IntegerField(min_value=1, help_text="ID do chamado no GLPI")
    category_id = serializers.IntegerField(min_value=1, help_text="ID da categoria ITIL no GLPI")


# =========================================================
# 2. SAÍDAS
# =========================================================

class NormalizedTicketSerializer(serializers.Serializer):
    """
    Chamado normalizado, pronto para o dashboard.
    """
    id = serializers.IntegerField()
    requerente_nome = serializers.CharField(allow_blank=True)
    requerente_email = serializers.CharField(allow_blank=True)
    requerente_tel = serializers.CharField(allow_blank=True)
    titulo = serializers.CharField(allow_blank=True)
    categoria = serializers.CharField()
    urgencia = serializers.IntegerField()
    descricao_inicial = serializers.CharField(allow_blank=True)
    status = serializers.IntegerField(allow_null=True)
    status_name = serializers.CharField()
    data_abertura = serializers.CharField(allow_null=True)
    entidade = serializers.CharField(allow_null=True, allow_blank=True)
    tecnico_atribuido = serializers.CharField()


class DailyStatsSerializer(serializers.Serializer):
    """
    Snapshot das estatísticas de chamados do tenant.
    """
    data = serializers.DateTimeField()
    chamados_disponiveis = serializers.IntegerField()
    chamados_atribuidos = serializers.IntegerField()
    chamados_planejados = serializers.IntegerField()
    chamados_pendentes = serializers.IntegerField()
    total = serializers.IntegerField()
