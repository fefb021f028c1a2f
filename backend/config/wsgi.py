"""
Configuração WSGI do projeto.

Expõe o callable ``application`` usado pelo servidor (gunicorn/uwsgi).
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_wsgi_application()
