"""
Configuração do admin para o app tenants.

Registra tenants, snapshots de estatísticas e competências de técnicos.
As credenciais GLPI são exibidas mascaradas na listagem.
"""
from django.contrib import admin
from .models import Tenant, DailyStats, TechnicianSkill, mask_secret


class TechnicianSkillInline(admin.TabularInline):
    model = TechnicianSkill
    extra = 0


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    """
    Configuração do admin para tenants.

    Permite editar credenciais GLPI e regras de automação de cada tenant.
    """
    list_display = ('id', 'nome', 'slug', 'ativo', 'glpi_url', 'app_token_display', 'auto_assign_enabled', 'updated_at')
    list_filter = ('ativo', 'auto_assign_enabled')
    search_fields = ('nome', 'slug')
    prepopulated_fields = {'slug': ('nome',)}
    readonly_fields = ('created_at', 'updated_at')
    inlines = [TechnicianSkillInline]

    fieldsets = (
        ('Identificação', {
            'fields': ('nome', 'slug', 'ativo')
        }),
        ('GLPI', {
            'fields': (
                'glpi_url',
                'glpi_app_token',
                'glpi_user_login',
                'glpi_user_password',
            )
        }),
        ('Automação', {
            'fields': (
                'status_filter',
                'auto_assign_enabled',
                'auto_categorize_enabled',
                'tempo_urg_prio_5',
                'tempo_urg_prio_4',
            )
        }),
        ('Metadados', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def app_token_display(self, obj):
        """Exibe o App-Token mascarado."""
        return mask_secret(obj.glpi_app_token) or "-"
    app_token_display.short_description = 'App-Token'


@admin.register(DailyStats)
class DailyStatsAdmin(admin.ModelAdmin):
    list_display = (
        'tenant',
        'data',
        'chamados_disponiveis',
        'chamados_atribuidos',
        'chamados_planejados',
        'chamados_pendentes',
        'total',
    )
    readonly_fields = list_display


@admin.register(TechnicianSkill)
class TechnicianSkillAdmin(admin.ModelAdmin):
    list_display = ('tenant', 'technician_id', 'technician_name', 'category_name')
    list_filter = ('tenant',)
    search_fields = ('technician_name', 'category_name')
