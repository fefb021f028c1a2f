"""
URLs da API REST para o app helpdesk.

Define todas as rotas da API organizadas por funcionalidade:
1. Chamados do tenant (listagem, atribuição, categoria)
2. Estatísticas do tenant
3. Atribuição automática
4. Proxies do GLPI (técnicos, categorias, entidades)
"""
from django.urls import path
from .views import (
    TenantTicketListView,
    TenantTicketAssignView,
    TenantTicketCategoryView,
    TenantDailyStatsView,
    TenantAutoAssignView,
    GlpiTechnicianListView,
    GlpiCategoryListView,
    GlpiEntityListView,
)

urlpatterns = [
    # =========================================================
    # 1. CHAMADOS DO TENANT
    # =========================================================
    path('tenant/<int:tenant_id>/tickets/', TenantTicketListView.as_view(), name='tenant-ticket-list'),
    path('tenant/<int:tenant_id>/tickets/assign/', TenantTicketAssignView.as_view(), name='tenant-ticket-assign'),
    path('tenant/<int:tenant_id>/tickets/category/', TenantTicketCategoryView.as_view(), name='tenant-ticket-category'),

    # =========================================================
    # 2. ESTATÍSTICAS
    # =========================================================
    path('tenant/<int:tenant_id>/stats/', TenantDailyStatsView.as_view(), name='tenant-stats'),

    # =========================================================
    # 3. ATRIBUIÇÃO AUTOMÁTICA
    # =========================================================
    path('tenant/<int:tenant_id>/tickets/auto-assign/', TenantAutoAssignView.as_view(), name='tenant-ticket-auto-assign'),

    # =========================================================
    # 4. PROXIES DO GLPI
    # =========================================================
    path('glpi/tecnicos/', GlpiTechnicianListView.as_view(), name='glpi-technician-list'),
    path('glpi/categorias/', GlpiCategoryListView.as_view(), name='glpi-category-list'),
    path('glpi/entidades/', GlpiEntityListView.as_view(), name='glpi-entity-list'),
]
