"""
URLs principais do projeto Django.

Define as rotas principais incluindo:
- Admin do Django
- Token de autenticação da API
- API de chamados por tenant e proxies do GLPI
"""
from django.contrib import admin
from django.urls import path, include
from rest_framework.authtoken import views as drf_authtoken_views

urlpatterns = [
    # =========================================================
    # 1. ADMIN DO DJANGO
    # =========================================================
    path('admin/', admin.site.urls),

    # =========================================================
    # 2. AUTENTICAÇÃO
    # =========================================================
    path('api/auth/token/', drf_authtoken_views.obtain_auth_token, name='obtain-token'),

    # =========================================================
    # 3. APIs (REST)
    # =========================================================
    path('api/', include('helpdesk.urls')),
]
