"""
Modelos de dados dos tenants (empresas clientes).

Este módulo contém os modelos principais:
- Tenant: Empresa cliente com credenciais GLPI próprias e configuração de automação
- DailyStats: Snapshot das estatísticas de chamados calculadas por último
- TechnicianSkill: Competências (categorias) atendidas por cada técnico do tenant
"""
from dataclasses import dataclass
from django.db import models

from .constants import (
    DEFAULT_STATUS_FILTER,
    DEFAULT_TEMPO_URG_PRIO_5,
    DEFAULT_TEMPO_URG_PRIO_4,
    MASK_VISIBLE_CHARS,
)


def mask_secret(value: str) -> str:
    """
    Mascara uma credencial mantendo apenas os primeiros caracteres.

    Args:
        value: Valor sensível (senha, token)

    Returns:
        str: Valor mascarado (ex.: "abcd***") ou string vazia
    """
    if not value:
        return ''
    return f"{value[:MASK_VISIBLE_CHARS]}***"


@dataclass(frozen=True)
class TenantGlpiConfig:
    """
    Credenciais GLPI de um tenant, usadas apenas para abrir sessões.

    Nunca devem ser devolvidas por completo aos clientes da API.
    """
    base_url: str
    app_token: str
    user_login: str
    user_password: str

    def __repr__(self):
        return (
            f"TenantGlpiConfig(base_url={self.base_url!r}, "
            f"app_token={mask_secret(self.app_token)!r}, "
            f"user_login={self.user_login!r}, user_password='***')"
        )


class Tenant(models.Model):
    """
    Empresa cliente com credenciais GLPI isoladas.

    Guarda a configuração de acesso ao GLPI do tenant e as regras de
    automação (filtro de status, atribuição automática e janelas de urgência).
    """

    nome = models.CharField(max_length=255, unique=True)
    slug = models.SlugField(max_length=255, unique=True)
    ativo = models.BooleanField(default=True)

    # Configurações GLPI específicas do tenant
    glpi_url = models.CharField(
        max_length=512,
        help_text="URL da API do GLPI (ex.: 'https://chamados.exemplo.com/apirest.php')"
    )
    glpi_app_token = models.CharField(max_length=255)
    glpi_user_login = models.CharField(max_length=255)
    glpi_user_password = models.CharField(max_length=255)

    # Configurações de automação
    status_filter = models.CharField(
        max_length=50,
        default=DEFAULT_STATUS_FILTER,
        help_text="Status buscados por padrão ('10' = todos, ou lista como '1,2')"
    )
    auto_assign_enabled = models.BooleanField(default=True)
    # Reservado: lido apenas em automation_config; nenhuma operação categoriza chamados
    auto_categorize_enabled = models.BooleanField(
        default=True,
        help_text="Reservado para categorização automática (ainda sem efeito)"
    )
    tempo_urg_prio_5 = models.PositiveIntegerField(
        default=DEFAULT_TEMPO_URG_PRIO_5,
        help_text="Minutos de espera antes de atribuir automaticamente chamados de urgência 5"
    )
    tempo_urg_prio_4 = models.PositiveIntegerField(
        default=DEFAULT_TEMPO_URG_PRIO_4,
        help_text="Minutos de espera antes de atribuir automaticamente chamados de urgência 4"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['nome']
        verbose_name = 'Tenant'
        verbose_name_plural = 'Tenants'

    def __str__(self):
        return self.nome

    @property
    def glpi_config(self) -> TenantGlpiConfig:
        """Credenciais GLPI imutáveis do tenant."""
        return TenantGlpiConfig(
            base_url=self.glpi_url,
            app_token=self.glpi_app_token,
            user_login=self.glpi_user_login,
            user_password=self.glpi_user_password,
        )

    @property
    def automation_config(self) -> dict:
        """Configuração de automação no formato consumido pelos serviços."""
        return {
            'status_filter': self.status_filter,
            'auto_assign_enabled': self.auto_assign_enabled,
            'auto_categorize_enabled': self.auto_categorize_enabled,
            'assign_rules': {
                'tempo_urg_prio_5': self.tempo_urg_prio_5,
                'tempo_urg_prio_4': self.tempo_urg_prio_4,
            },
        }


class DailyStats(models.Model):
    """
    Snapshot das estatísticas de chamados do tenant.

    Sobrescrito por completo a cada cálculo; nunca recalculado na leitura.
    """

    tenant = models.OneToOneField(
        Tenant,
        on_delete=models.CASCADE,
        related_name='daily_stats'
    )
    data = models.DateTimeField(help_text="Momento do último cálculo")
    chamados_disponiveis = models.PositiveIntegerField(default=0)
    chamados_atribuidos = models.PositiveIntegerField(default=0)
    chamados_planejados = models.PositiveIntegerField(default=0)
    chamados_pendentes = models.PositiveIntegerField(default=0)
    total = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = 'Estatística diária'
        verbose_name_plural = 'Estatísticas diárias'

    def __str__(self):
        return f"Estatísticas {self.tenant} ({self.data:%d/%m/%Y %H:%M})"

    def as_dict(self) -> dict:
        return {
            'data': self.data,
            'chamados_disponiveis': self.chamados_disponiveis,
            'chamados_atribuidos': self.chamados_atribuidos,
            'chamados_planejados': self.chamados_planejados,
            'chamados_pendentes': self.chamados_pendentes,
            'total': self.total,
        }


class TechnicianSkill(models.Model):
    """
    Competência de um técnico GLPI: categoria de chamado que ele atende.

    Usada pela atribuição automática para escolher técnicos aptos.
    """

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name='technician_skills'
    )
    technician_id = models.IntegerField(help_text="ID do usuário técnico no GLPI")
    technician_name = models.CharField(max_length=255, blank=True, default='')
    category_name = models.CharField(
        max_length=1024,
        help_text="Categoria como exibida nos chamados (ex.: 'TI > Acesso > Senha')"
    )

    class Meta:
        ordering = ['technician_id']
        verbose_name = 'Competência de técnico'
        verbose_name_plural = 'Competências de técnicos'
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'technician_id', 'category_name'],
                name='unique_skill_per_technician'
            )
        ]

    def __str__(self):
        return f"{self.technician_name or self.technician_id} - {self.category_name}"
